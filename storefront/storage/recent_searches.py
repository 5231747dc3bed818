# storefront/storage/recent_searches.py

"""Recent search history on top of a string key/value store."""

import json
import logging
from pathlib import Path
from typing import Protocol

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.storage")


class KeyValueStore(Protocol):
    """Minimal string store (browser localStorage semantics)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, used by tests and one-shot CLI runs."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Key/value strings kept in a single JSON object file on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.KV_STORE_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("JsonFileStore initialised at %s", self.path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error(
                "Corrupt key/value file %s, starting empty",
                self.path,
                exc_info=True,
            )
            return {}
        if not isinstance(data, dict):
            logger.error(
                "Key/value file %s is not a JSON object, starting empty",
                self.path,
            )
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class RecentSearches:
    """Most-recent-first list of distinct, non-blank search queries."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = Settings.RECENT_SEARCHES_KEY,
        limit: int = Settings.RECENT_SEARCHES_LIMIT,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = limit
        self._items: list[str] = self._read()

    def _read(self) -> list[str]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.error(
                "Error loading recent searches, discarding %r", raw
            )
            return []
        if not isinstance(data, list):
            logger.error(
                "Recent searches are not a list, discarding %r", raw
            )
            return []
        # Entries that are not strings (null, numbers) are dropped
        return [
            q for q in data if isinstance(q, str) and q.strip()
        ][: self._limit]

    @property
    def items(self) -> list[str]:
        """A copy of the history, most recent first."""
        return list(self._items)

    def add(self, query: str) -> list[str]:
        """Record *query* and return the updated history.

        The query is trimmed; blank queries are ignored.  An existing
        identical entry moves to the front instead of repeating.
        """
        cleaned = query.strip()
        if not cleaned:
            return self.items
        updated = [cleaned, *(q for q in self._items if q != cleaned)]
        self._items = updated[: self._limit]
        self._store.set(self._key, json.dumps(self._items))
        logger.debug("Recent searches now %s", self._items)
        return self.items

    def clear(self) -> None:
        """Forget every recorded query."""
        self._items = []
        self._store.delete(self._key)
        logger.info("Recent searches cleared")
