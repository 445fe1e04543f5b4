"""
RDAP Client

Queries an RDAP server for a domain and decodes the parts of the response
needed for expiry checks: entities (with their roles and vCard) and events.
"""

import logging
from dataclasses import dataclass, field

import httpx

from .config import DEFAULT_TIMEOUT
from .errors import QueryError

logger = logging.getLogger(__name__)


def vcard_name(vcard_array) -> str:
    """
    Return the formatted name ("fn") from a jCard array, or "".

    jCard format:
        ["vcard", [["version", {}, "text", "4.0"], ["fn", {}, "text", "Name"]]]
    """
    if not isinstance(vcard_array, list) or len(vcard_array) < 2:
        return ""
    properties = vcard_array[1]
    if not isinstance(properties, list):
        return ""
    for prop in properties:
        if isinstance(prop, list) and len(prop) >= 4 and prop[0] == "fn":
            value = prop[3]
            return value if isinstance(value, str) else ""
    return ""


@dataclass
class RDAPEvent:
    action: str
    date: str


@dataclass
class RDAPEntity:
    handle: str = ""
    roles: list[str] = field(default_factory=list)
    vcard_array: list | None = None

    @property
    def name(self) -> str:
        """Formatted name from the entity's vCard."""
        return vcard_name(self.vcard_array)


@dataclass
class RDAPDomain:
    """Decoded RDAP domain object."""

    ldh_name: str = ""
    handle: str = ""
    entities: list[RDAPEntity] = field(default_factory=list)
    events: list[RDAPEvent] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> "RDAPDomain":
        entities = []
        for item in data.get("entities") or []:
            if not isinstance(item, dict):
                continue
            entities.append(RDAPEntity(
                handle=item.get("handle", ""),
                roles=list(item.get("roles") or []),
                vcard_array=item.get("vcardArray"),
            ))

        events = []
        for item in data.get("events") or []:
            if not isinstance(item, dict):
                continue
            events.append(RDAPEvent(
                action=item.get("eventAction", ""),
                date=item.get("eventDate", ""),
            ))

        return cls(
            ldh_name=data.get("ldhName", ""),
            handle=data.get("handle", ""),
            entities=entities,
            events=events,
        )


class RDAPClient:
    """
    Synchronous RDAP client.

    Usage:
        with RDAPClient() as client:
            domain = client.query_domain("example.com", "https://rdap.verisign.com/com/v1/")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "RDAPClient":
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={"Accept": "application/rdap+json"},
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def query_domain(self, domain: str, server: str) -> RDAPDomain:
        """
        Query an RDAP server for a domain.

        Args:
            domain: Domain name, e.g. "example.com"
            server: RDAP base URL, e.g. "https://rdap.verisign.com/com/v1/"

        Raises:
            QueryError: on network errors, non-200 responses or invalid JSON.
        """
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'with' context.")

        # Ensure server URL ends with /
        if not server.endswith("/"):
            server += "/"

        url = f"{server}domain/{domain}"
        logger.debug("RDAP query %s", url)

        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise QueryError(f"RDAP query timed out: {url}") from e
        except httpx.HTTPError as e:
            raise QueryError(f"RDAP query failed: {e}") from e

        if response.status_code == 404:
            raise QueryError(f"domain not found: {domain}")
        if response.status_code != 200:
            raise QueryError(f"RDAP status {response.status_code} from {url}")

        try:
            data = response.json()
        except ValueError as e:
            raise QueryError(f"invalid RDAP response from {url}: {e}") from e

        if not isinstance(data, dict):
            raise QueryError(f"invalid RDAP response from {url}: not a JSON object")

        return RDAPDomain.from_json(data)
