"""
Runtime settings for the storefront catalog service.

Everything is read from ``STOREFRONT_*`` environment variables; unset or
malformed values fall back to the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _read_env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _read_env_int(name: str, default: int) -> int:
    """Read env var as int; return default if unset or invalid."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Service configuration. Overridable via STOREFRONT_* env vars."""

    database_url: str = "sqlite:///./storefront.db"
    default_page_size: int = 20
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    seed_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        seed_file = os.getenv("STOREFRONT_SEED_FILE")
        return cls(
            database_url=_read_env_str("STOREFRONT_DATABASE_URL", cls.database_url),
            default_page_size=max(
                1, _read_env_int("STOREFRONT_DEFAULT_PAGE_SIZE", cls.default_page_size)
            ),
            log_level=_read_env_str("STOREFRONT_LOG_LEVEL", cls.log_level).upper(),
            host=_read_env_str("STOREFRONT_HOST", cls.host),
            port=_read_env_int("STOREFRONT_PORT", cls.port),
            seed_file=seed_file.strip() if seed_file and seed_file.strip() else None,
        )
