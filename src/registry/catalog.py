"""Process-wide cache for simple-index catalogs.

A catalog is the full list of project names an index serves. It is
fetched once per index on first use and then read by every resolution
for the rest of the run. Loads are single-flight: concurrent first
callers for the same index share one fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable, Optional

logger = logging.getLogger(__name__)


class CatalogCache:
    """Memoizes one catalog per key (normally the index base URL).

    Entries are never invalidated during a run; clear() exists so tests
    and long-lived callers can reset state explicitly. Failed loads are
    not cached, so the next caller retries.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, FrozenSet[str]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._load_count = 0

    def get(self, key: str) -> Optional[FrozenSet[str]]:
        """Return the cached catalog for key, or None if not loaded."""
        return self._entries.get(key)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Iterable[str]]],
    ) -> FrozenSet[str]:
        """Return the catalog for key, loading it at most once.

        Args:
            key: Cache key.
            loader: Coroutine factory producing the catalog names.

        Returns:
            Frozen set of names.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self.get(key)
            if cached is not None:
                return cached
            names = frozenset(await loader())
            self._entries[key] = names
            self._load_count += 1
            logger.info("Loaded %d packages from %s", len(names), key)
            return names

    def clear(self) -> None:
        """Drop all cached catalogs."""
        self._entries.clear()
        self._locks.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "catalogs": len(self._entries),
            "loads": self._load_count,
            "sizes": {key: len(names) for key, names in self._entries.items()},
        }
