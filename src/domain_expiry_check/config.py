"""
Configuration for domain-expiry-check.

Lookup order for every setting:
1. Environment variable (DOMAIN_EXPIRY_*)
2. Config file (~/.config/domain-expiry-check/config.json)
3. Built-in default
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# IANA bootstrap URL
DEFAULT_BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"

# Seconds, applied to both the bootstrap fetch and RDAP queries
DEFAULT_TIMEOUT = 30.0

ENV_BOOTSTRAP_URL = "DOMAIN_EXPIRY_BOOTSTRAP_URL"
ENV_TIMEOUT = "DOMAIN_EXPIRY_TIMEOUT"
ENV_DEBUG = "DOMAIN_EXPIRY_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    bootstrap_url: str = DEFAULT_BOOTSTRAP_URL
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False


def get_config_dir() -> Path:
    """Get the config directory for this app."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:  # macOS, Linux
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))

    return base / 'domain-expiry-check'


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / 'config.json'


def load_config(path: Path | None = None) -> dict:
    """Load the config file, returning {} if missing or invalid."""
    config_file = path or get_config_file()
    try:
        if config_file.exists():
            config = json.loads(config_file.read_text())
            if isinstance(config, dict):
                return config
            logger.warning("Ignoring config file %s: not a JSON object", config_file)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring config file %s: %s", config_file, e)
    return {}


def _parse_timeout(value) -> float | None:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return None
    return timeout if timeout > 0 else None


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def load_settings(environ=None, config_path: Path | None = None) -> Settings:
    """
    Resolve settings from the environment, the config file and defaults.

    Args:
        environ: Mapping to read environment variables from (default os.environ)
        config_path: Override for the config file location

    Returns:
        A Settings instance.
    """
    env = os.environ if environ is None else environ
    config = load_config(config_path)

    bootstrap_url = (
        env.get(ENV_BOOTSTRAP_URL)
        or config.get('bootstrap_url')
        or DEFAULT_BOOTSTRAP_URL
    )

    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get(ENV_TIMEOUT) or config.get('timeout')
    if raw_timeout is not None:
        parsed = _parse_timeout(raw_timeout)
        if parsed is None:
            logger.warning("Invalid timeout %r, using %.1fs", raw_timeout, DEFAULT_TIMEOUT)
        else:
            timeout = parsed

    if ENV_DEBUG in env:
        debug = _parse_bool(env[ENV_DEBUG])
    else:
        debug = _parse_bool(config.get('debug', False))

    return Settings(bootstrap_url=bootstrap_url, timeout=timeout, debug=debug)
