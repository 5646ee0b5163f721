"""Disk-backed cache of fetched link metadata, keyed by URL.

The whole table lives in one pretty-printed JSON file::

    {
      "https://example.com/": {
        "title": "Example Domain",
        "fetchedAt": 1760000000000
      }
    }

It is read once, on first access, into an in-memory copy that stays
authoritative for the rest of the process; every :meth:`MetadataCache.set_cached_metadata`
rewrites the file wholesale. Entries older than ``max_age`` read as misses
but are left in the table until overwritten.

Usage::

    cache = MetadataCache(Path("src/data/link-metadata.json"))
    meta = cache.get_or_fetch_metadata(url, fetch_metadata)
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable

from garden.config import DEFAULT_CACHE_FILE, DEFAULT_CACHE_MAX_AGE_DAYS

logger = logging.getLogger(__name__)

LinkMetadata = dict[str, Any]
Fetcher = Callable[[str], "LinkMetadata | None"]

_DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class MetadataCache:
    """URL → metadata store with age-based expiry and a JSON file behind it."""

    def __init__(
        self,
        path: Path | str = DEFAULT_CACHE_FILE,
        *,
        max_age: timedelta = timedelta(days=DEFAULT_CACHE_MAX_AGE_DAYS),
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.path = Path(path)
        self.max_age_ms = int(max_age.total_seconds() * 1000)
        self._clock = clock
        self._entries: dict[str, LinkMetadata] | None = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> dict[str, LinkMetadata]:
        """Return the in-memory table, reading the file on first call."""
        with self._lock:
            if self._entries is not None:
                return self._entries
            self._entries = self._read()
            return self._entries

    def _read(self) -> dict[str, LinkMetadata]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load metadata cache %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring metadata cache %s: top level is not an object", self.path)
            return {}
        entries = {url: entry for url, entry in data.items() if isinstance(entry, dict)}
        if len(entries) != len(data):
            logger.warning(
                "Dropped %d malformed entries from metadata cache %s",
                len(data) - len(entries),
                self.path,
            )
        logger.debug("Loaded %d cached metadata entries", len(entries))
        return entries

    def save(self) -> None:
        """Persist the whole table; failures are logged, never raised."""
        with self._lock:
            entries = self.load()
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        json.dump(entries, fh, indent=2, ensure_ascii=False)
                    os.replace(tmp, self.path)
                except BaseException:
                    Path(tmp).unlink(missing_ok=True)
                    raise
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Failed to save metadata cache %s: %s", self.path, exc)
                return
            logger.debug("Saved %d metadata entries to cache", len(entries))

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------

    def is_fresh(self, entry: LinkMetadata) -> bool:
        if not isinstance(entry, dict):
            return False
        fetched_at = entry.get("fetchedAt")
        if isinstance(fetched_at, bool) or not isinstance(fetched_at, (int, float)):
            return False
        return self._clock() - fetched_at <= self.max_age_ms

    def get_cached_metadata(self, url: str) -> LinkMetadata | None:
        """Return the entry for *url* unless it is absent or expired."""
        with self._lock:
            cached = self.load().get(url)
        if not cached or not isinstance(cached, dict):
            return None
        if not self.is_fresh(cached):
            fetched_at = cached.get("fetchedAt")
            if isinstance(fetched_at, (int, float)):
                age_days = (self._clock() - fetched_at) // _DAY_MS
                logger.debug("Cache expired for %s (%d days old)", url, age_days)
            return None
        return cached

    def set_cached_metadata(self, url: str, metadata: LinkMetadata) -> None:
        """Store *metadata* for *url* and rewrite the cache file."""
        entry = dict(metadata)
        entry.setdefault("fetchedAt", self._clock())
        with self._lock:
            self.load()[url] = entry
            self.save()

    def get_or_fetch_metadata(self, url: str, fetcher: Fetcher) -> LinkMetadata | None:
        """Return fresh cached metadata, else fetch, store and return it.

        A fetcher returning nothing leaves the cache untouched.
        """
        cached = self.get_cached_metadata(url)
        if cached:
            return cached
        metadata = fetcher(url)
        if not metadata:
            return None
        self.set_cached_metadata(url, metadata)
        return self.load()[url]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def entries(self) -> dict[str, LinkMetadata]:
        """Copy of every stored entry, expired ones included."""
        with self._lock:
            return dict(self.load())

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self.load()

    def __len__(self) -> int:
        with self._lock:
            return len(self.load())
