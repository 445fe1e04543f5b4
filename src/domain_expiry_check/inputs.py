"""
Collect domain names from flags, an environment variable or stdin.
"""

import os
import sys

from .errors import InputError

PROMPT = "Enter domain names (comma-separated):"


def split_domains(value: str) -> list[str]:
    """Split a comma-separated list. Pieces are not trimmed."""
    return value.split(",")


def collect_domains(
    domains: list[str] | None = None,
    env_var: str | None = None,
    stdin=None,
    stdout=None,
    environ=None,
) -> list[str]:
    """
    Gather the domains to check.

    Sources, first non-empty one wins:
    1. domains - used as given, one entry per domain
    2. env_var - name of an environment variable holding a comma-separated list
    3. stdin - one line of comma-separated domains, after a prompt on stdout

    Raises:
        InputError: if stdin can't be read or no domains were found.
    """
    env = os.environ if environ is None else environ
    collected: list[str] = []

    if domains:
        collected.extend(domains)
    elif env_var:
        value = env.get(env_var, "")
        if value:
            collected.extend(split_domains(value))

    if not collected:
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout
        print(PROMPT, file=stdout, flush=True)
        try:
            line = stdin.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"failed to read from standard input: {e}") from e
        line = line.strip()
        if line:
            collected.extend(split_domains(line))

    if not collected:
        raise InputError("no domain names provided")
    return collected
