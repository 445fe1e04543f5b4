"""
Command-line interface for domain-expiry-check.

Usage:
    domain-expiry-check check -d example.com,example.org
    domain-expiry-check c -e DOMAINS -o json
    domain-expiry-check check            # prompts on stdin
"""

import argparse
import logging
import sys

import httpx

from . import __version__
from .checker import check_domains
from .config import Settings, load_settings
from .errors import InputError, OutputError
from .inputs import collect_domains, split_domains
from .output import OUTPUT_FORMATS, render
from .rdap_bootstrap import ServiceDirectory
from .rdap_client import RDAPClient

PROG = "domain-expiry-check"
LOG_FORMAT = f"{PROG}: %(asctime)s %(filename)s:%(lineno)d: %(message)s"

logger = logging.getLogger(__name__)

_handler: logging.Handler | None = None


def setup_logging(debug: bool = False) -> None:
    """Send log output to stderr with a fixed prefix."""
    global _handler

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    # httpx logs every request at INFO; only show it when debugging
    http_level = logging.NOTSET if debug else logging.WARNING
    logging.getLogger("httpx").setLevel(http_level)
    logging.getLogger("httpcore").setLevel(http_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Check for domain expiration",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"{PROG} {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")
    check = subparsers.add_parser(
        "check",
        aliases=["c"],
        help="Check domain expiration",
        description="Check domain expiration",
    )
    check.add_argument(
        "-d", "--domain",
        action="append",
        metavar="DOMAIN",
        help="Domain names to check, can be repeated or a comma-separated list",
    )
    check.add_argument(
        "-e", "--env",
        metavar="NAME",
        help="Environment variable containing domain names",
    )
    check.add_argument(
        "-o", "--output",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format: json or text (default: %(default)s)",
    )
    check.set_defaults(func=cmd_check)
    return parser


def cmd_check(
    args: argparse.Namespace,
    settings: Settings,
    transport: httpx.BaseTransport | None = None,
) -> int:
    """Run the check subcommand. Returns the exit status."""
    domains = []
    for value in args.domain or []:
        domains.extend(split_domains(value))

    try:
        domains = collect_domains(domains=domains, env_var=args.env)
    except InputError as e:
        logger.error("%s", e)
        return 1

    with httpx.Client(
        timeout=settings.timeout, follow_redirects=True, transport=transport
    ) as http, RDAPClient(timeout=settings.timeout, transport=transport) as client:
        directory = ServiceDirectory(url=settings.bootstrap_url, client=http)
        results = check_domains(domains, directory, client)

    try:
        output = render(results, args.output)
    except OutputError as e:
        logger.error("%s", e)
        return 1

    if args.output == "json":
        print(output)
    else:
        sys.stdout.write(output)
    return 0


def main(
    argv: list[str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> int:
    # Config warnings need a handler before the debug flag is known
    setup_logging()
    settings = load_settings()
    if settings.debug:
        setup_logging(debug=True)

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    return args.func(args, settings, transport=transport)
