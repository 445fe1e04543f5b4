"""
domain-expiry-check

Check domain registrar and expiration dates over RDAP.
"""

__version__ = "0.1.0"


def main():
    """Main entry point for the CLI."""
    import sys

    from .cli import main as cli_main

    sys.exit(cli_main())
