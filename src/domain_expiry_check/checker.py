"""
Domain expiry lookup.

Resolves each domain's TLD to an RDAP server through the service directory,
queries it, and extracts the registrar and expiration date.
"""

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

from .errors import NoExpiryDataError, ParseError, QueryError, ServiceLookupError
from .rdap_bootstrap import ServiceDirectory
from .rdap_client import RDAPClient, RDAPDomain

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# datetime only keeps microseconds
_FRACTION_RE = re.compile(r"\.(\d+)")


@dataclass(frozen=True)
class DomainInfo:
    """Expiry details for one domain."""

    domain_name: str
    registrar: str
    expiry_date: str
    days_to_expire: float
    failed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def extract_tld(domain: str) -> str:
    """
    Return the last dot-separated label of a domain.

    A name without any dot is returned unchanged ("localhost" -> "localhost").
    """
    return domain.split(".")[-1]


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into a timezone-aware datetime."""
    if not isinstance(value, str):
        raise ParseError(f"invalid RFC 3339 timestamp: {value!r}")

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise ParseError(f"invalid RFC 3339 timestamp: {value!r}: {e}") from e

    if dt.tzinfo is None:
        raise ParseError(f"invalid RFC 3339 timestamp: {value!r}: missing UTC offset")
    return dt


def format_rfc3339(dt: datetime) -> str:
    """Format a timezone-aware datetime as RFC 3339 (second precision)."""
    if dt.utcoffset() == timedelta(0):
        return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return dt.isoformat(timespec="seconds")


def find_registrar(domain: RDAPDomain) -> str:
    """Name of the first entity with the "registrar" role, or ""."""
    for entity in domain.entities:
        if "registrar" in entity.roles:
            return entity.name
    return ""


def find_expiry(domain: RDAPDomain) -> datetime:
    """
    Date of the first "expiration" event.

    Raises:
        NoExpiryDataError: if the domain has no expiration event.
        ParseError: if the event date is not RFC 3339.
    """
    for event in domain.events:
        if event.action == "expiration":
            return parse_rfc3339(event.date)
    raise NoExpiryDataError(f"no expiration event for {domain.ldh_name or 'domain'}")


def get_domain_info(
    domain_name: str,
    directory: ServiceDirectory,
    client: RDAPClient,
    now: datetime | None = None,
) -> DomainInfo:
    """
    Look up registrar and expiry for a single domain.

    Args:
        domain_name: Domain to check, e.g. "example.com"
        directory: TLD -> RDAP server lookup
        client: Open RDAP client
        now: Reference time for days_to_expire (default: current UTC time)

    Raises:
        ServiceLookupError: no RDAP service for the TLD, or the directory
            itself is unavailable.
        QueryError: the RDAP query failed.
        ParseError: the expiration date is missing or unparsable.
    """
    tld = extract_tld(domain_name)
    server = directory.lookup(tld)
    if not server:
        raise ServiceLookupError(f"no RDAP service found for {domain_name}")

    logger.debug("Using RDAP service %s for %s", server, domain_name)
    rdap_domain = client.query_domain(domain_name, server)

    registrar = find_registrar(rdap_domain)
    expiry = find_expiry(rdap_domain)

    if now is None:
        now = datetime.now(timezone.utc)
    days_to_expire = (expiry - now).total_seconds() / SECONDS_PER_DAY

    return DomainInfo(
        domain_name=domain_name,
        registrar=registrar,
        expiry_date=format_rfc3339(expiry),
        days_to_expire=days_to_expire,
    )


def check_domains(
    domains: list[str],
    directory: ServiceDirectory,
    client: RDAPClient,
    now: datetime | None = None,
) -> list[DomainInfo]:
    """
    Check domains one at a time, in input order.

    Domains that fail are logged and left out of the results.
    """
    results = []
    for domain in domains:
        try:
            results.append(get_domain_info(domain, directory, client, now=now))
        except (ServiceLookupError, QueryError, ParseError) as e:
            logger.error("Error checking domain %s: %s", domain, e)
    return results
