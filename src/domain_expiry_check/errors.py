"""
Exception types for domain expiry checks.

Input and output errors abort a run. Lookup, query and parse errors are
per-domain: the checker logs them and moves on to the next domain.
"""


class ExpiryCheckError(Exception):
    """Base class for all domain expiry check errors."""


class InputError(ExpiryCheckError):
    """No domains were supplied, or standard input could not be read."""


class ServiceLookupError(ExpiryCheckError):
    """No RDAP service is known for a domain's TLD."""


class ServiceDirectoryError(ServiceLookupError):
    """The RDAP bootstrap document could not be fetched or decoded."""


class QueryError(ExpiryCheckError):
    """An RDAP query failed (network, HTTP status or bad response body)."""


class ParseError(ExpiryCheckError):
    """An RDAP timestamp could not be parsed."""


class NoExpiryDataError(ParseError):
    """The RDAP response carries no expiration event."""


class OutputError(ExpiryCheckError):
    """Results could not be serialized."""
