"""
NFT collection settings.

Settings come from NFT_* environment variables so deployments and test
runs can adjust logging and factory defaults without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import SettingsError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_ENVIRONMENT = "development"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_SUPPLY = 10000


@dataclass(frozen=True)
class Settings:
    """Resolved NFT_* settings."""

    environment: str = DEFAULT_ENVIRONMENT
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str = ""
    default_max_supply: int = DEFAULT_MAX_SUPPLY


def _get_int(environ: Mapping[str, str], env_var: str, default: int) -> int:
    raw = environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SettingsError(
            f"{env_var} must be an integer, got {raw!r}",
            details={"env_var": env_var, "value": raw},
        )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Read settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (used by tests)

    Returns:
        Frozen Settings instance

    Raises:
        SettingsError: If a variable holds an unusable value
    """
    if environ is None:
        environ = os.environ

    log_level = environ.get("NFT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        raise SettingsError(
            f"NFT_LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, got {log_level!r}",
            details={"env_var": "NFT_LOG_LEVEL", "value": log_level},
        )

    default_max_supply = _get_int(environ, "NFT_DEFAULT_MAX_SUPPLY", DEFAULT_MAX_SUPPLY)
    if default_max_supply <= 0:
        raise SettingsError(
            "NFT_DEFAULT_MAX_SUPPLY must be greater than 0",
            details={"env_var": "NFT_DEFAULT_MAX_SUPPLY", "value": default_max_supply},
        )

    return Settings(
        environment=environ.get("NFT_ENVIRONMENT", DEFAULT_ENVIRONMENT).strip() or DEFAULT_ENVIRONMENT,
        log_level=log_level,
        log_file=environ.get("NFT_LOG_FILE", "").strip(),
        default_max_supply=default_max_supply,
    )
