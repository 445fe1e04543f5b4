"""
RDAP Service Directory

Fetches the IANA RDAP bootstrap file once per run and maps TLDs to the
RDAP server responsible for them.

The bootstrap file maps TLDs to their authoritative RDAP servers.
"""

import logging

import httpx

from .config import DEFAULT_BOOTSTRAP_URL, DEFAULT_TIMEOUT
from .errors import ServiceDirectoryError

logger = logging.getLogger(__name__)


def parse_bootstrap_services(data) -> dict[str, str]:
    """
    Parse IANA bootstrap format into TLD -> server URL mapping.

    Bootstrap format:
    {
        "services": [
            [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
            [["org"], ["https://rdap.publicinterestregistry.org/rdap/"]],
            ...
        ]
    }

    Only the first URL of each entry is kept. If a TLD appears in several
    entries the last one wins.
    """
    if not isinstance(data, dict):
        raise ServiceDirectoryError(
            "service directory unavailable: bootstrap document is not a JSON object"
        )
    entries = data.get("services")
    if not isinstance(entries, list):
        raise ServiceDirectoryError(
            "service directory unavailable: bootstrap document has no services list"
        )

    services = {}
    for entry in entries:
        if not isinstance(entry, list) or len(entry) < 2:
            continue
        tlds, urls = entry[0], entry[1]
        if not isinstance(tlds, list) or not isinstance(urls, list):
            continue
        if not urls or not isinstance(urls[0], str):
            continue
        for tld in tlds:
            if isinstance(tld, str):
                services[tld.lower()] = urls[0]
    return services


class ServiceDirectory:
    """
    TLD -> RDAP base URL lookup, built from the bootstrap document.

    The document is fetched on first use and kept for the lifetime of the
    instance. A failed fetch is remembered, so every later lookup raises the
    same ServiceDirectoryError instead of hitting the network again.

    Usage:
        with httpx.Client() as http:
            directory = ServiceDirectory(client=http)
            directory.lookup("com")
    """

    def __init__(
        self,
        url: str = DEFAULT_BOOTSTRAP_URL,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self._client = client
        self._timeout = timeout
        self._services: dict[str, str] | None = None
        self._error: ServiceDirectoryError | None = None

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> "ServiceDirectory":
        """Build a directory from an in-memory TLD -> URL mapping."""
        directory = cls()
        directory._services = {tld.lower(): url for tld, url in mapping.items()}
        return directory

    def _fetch(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": "domain-expiry-check (RDAP Bootstrap)",
        }
        logger.debug("Fetching RDAP bootstrap from %s", self.url)

        try:
            if self._client is not None:
                response = self._client.get(self.url, headers=headers)
            else:
                response = httpx.get(self.url, headers=headers, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ServiceDirectoryError(f"service directory unavailable: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceDirectoryError(
                f"service directory unavailable: invalid JSON: {e}"
            ) from e

        services = parse_bootstrap_services(data)
        logger.debug("RDAP bootstrap loaded: %d TLDs", len(services))
        return services

    def load(self) -> dict[str, str]:
        """Return the TLD mapping, fetching it on first call."""
        if self._services is not None:
            return self._services
        if self._error is not None:
            raise self._error

        try:
            self._services = self._fetch()
        except ServiceDirectoryError as e:
            self._error = e
            raise
        return self._services

    def lookup(self, tld: str) -> str | None:
        """
        Get the RDAP server URL for a given TLD.

        Args:
            tld: The top-level domain (without leading dot), e.g. "com", "io"

        Returns:
            The RDAP server URL (e.g. "https://rdap.verisign.com/com/v1/"),
            or None if the TLD is not in the bootstrap.
        """
        return self.load().get(tld.lower())

    def tlds(self) -> list[str]:
        """Get list of all TLDs with an RDAP service, sorted alphabetically."""
        return sorted(self.load().keys())
