"""
Render check results as JSON or plain text.
"""

import json

from .checker import DomainInfo
from .errors import OutputError

OUTPUT_FORMATS = ("text", "json")


def format_json(results: list[DomainInfo]) -> str:
    """Indented JSON array, one object per domain."""
    try:
        return json.dumps([r.to_dict() for r in results], indent=2, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise OutputError(f"failed to marshal JSON: {e}") from e


def format_text(results: list[DomainInfo]) -> str:
    """Four lines per domain followed by a blank line."""
    blocks = []
    for r in results:
        blocks.append(
            f"Domain: {r.domain_name}\n"
            f"Registrar: {r.registrar}\n"
            f"Expiry Date: {r.expiry_date}\n"
            f"Days to Expire: {r.days_to_expire:.2f}\n"
        )
    return "\n".join(blocks) + "\n" if blocks else ""


def render(results: list[DomainInfo], fmt: str = "text") -> str:
    if fmt == "json":
        return format_json(results)
    if fmt == "text":
        return format_text(results)
    raise OutputError(f"unknown output format: {fmt}")
