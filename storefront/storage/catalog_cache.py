# storefront/storage/catalog_cache.py

"""In-memory TTL cache for decoded catalog API responses."""

import copy
import logging
import time
from dataclasses import dataclass
from typing import Any

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.cache")


@dataclass
class CacheEntry:
    """A decoded JSON payload for one request URL."""

    url: str
    payload: Any
    timestamp: float


class CatalogCache:
    """URL-keyed cache of catalog responses.

    The catalog changes rarely, so repeated listings within the TTL are
    served without touching the network.  Payloads are deep-copied on
    the way in and out so callers cannot corrupt cached data.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._ttl: float = (
            Settings.CATALOG_CACHE_TTL if ttl is None else ttl
        )

    def get(self, url: str) -> Any | None:
        """Return the cached payload for *url*, or ``None`` on miss."""
        self._evict_expired(time.time())
        entry = self._entries.get(url)
        if entry is None:
            return None
        logger.debug("Cache hit for %s", url)
        return copy.deepcopy(entry.payload)

    def store(self, url: str, payload: Any) -> None:
        """Cache a decoded payload."""
        self._entries[url] = CacheEntry(
            url=url,
            payload=copy.deepcopy(payload),
            timestamp=time.time(),
        )
        logger.debug("Cached response for %s", url)

    def clear(self) -> int:
        """Purge all entries and return how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Catalog cache purged (%d entries removed)", count)
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self, now: float) -> None:
        """Remove entries older than the TTL threshold."""
        expired = [
            url
            for url, entry in self._entries.items()
            if now - entry.timestamp >= self._ttl
        ]
        for url in expired:
            del self._entries[url]
        if expired:
            logger.debug(
                "Evicted %d expired cache entries", len(expired)
            )
