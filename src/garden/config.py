"""Runtime settings.

Environment variables (all optional; direct kwargs take precedence):
    GARDEN_VAULT_DIR            – vault root (default: ``src/content/vault``)
    GARDEN_CACHE_FILE           – link-metadata cache (default: ``src/data/link-metadata.json``)
    GARDEN_CACHE_MAX_AGE_DAYS   – days before a cached entry expires (default: 90)
    GARDEN_FETCH_TIMEOUT        – metadata fetch timeout in seconds (default: 5)
    GARDEN_SLUGIFY              – ``1``/``true`` to slugify identities and links
    GARDEN_LOG_LEVEL            – logging level name (default: ``WARNING``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_VAULT_DIR = Path("src") / "content" / "vault"
DEFAULT_CACHE_FILE = Path("src") / "data" / "link-metadata.json"
DEFAULT_CACHE_MAX_AGE_DAYS = 90
DEFAULT_FETCH_TIMEOUT = 5.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_number(name: str, default: float, cast: Callable[[str], float]) -> float:
    """Read a numeric env var, falling back to *default* when unset or malformed."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.error("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default


@dataclass
class GardenSettings:
    vault_dir: Path = DEFAULT_VAULT_DIR
    cache_file: Path = DEFAULT_CACHE_FILE
    cache_max_age_days: int = DEFAULT_CACHE_MAX_AGE_DAYS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    slugify: bool = False
    log_level: str = "WARNING"

    @property
    def cache_max_age(self) -> timedelta:
        return timedelta(days=self.cache_max_age_days)

    @classmethod
    def from_env(
        cls,
        *,
        vault_dir: Path | str | None = None,
        cache_file: Path | str | None = None,
        cache_max_age_days: int | None = None,
        fetch_timeout: float | None = None,
        slugify: bool | None = None,
        log_level: str | None = None,
    ) -> "GardenSettings":
        env = os.environ
        return cls(
            vault_dir=Path(vault_dir or env.get("GARDEN_VAULT_DIR") or DEFAULT_VAULT_DIR),
            cache_file=Path(cache_file or env.get("GARDEN_CACHE_FILE") or DEFAULT_CACHE_FILE),
            cache_max_age_days=(
                cache_max_age_days
                if cache_max_age_days is not None
                else _env_number("GARDEN_CACHE_MAX_AGE_DAYS", DEFAULT_CACHE_MAX_AGE_DAYS, int)
            ),
            fetch_timeout=(
                fetch_timeout
                if fetch_timeout is not None
                else _env_number("GARDEN_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float)
            ),
            slugify=(
                slugify
                if slugify is not None
                else env.get("GARDEN_SLUGIFY", "").strip().lower() in _TRUTHY
            ),
            log_level=(log_level or env.get("GARDEN_LOG_LEVEL") or "WARNING").upper(),
        )
