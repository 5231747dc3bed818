# tests/test_storage.py

"""Tests for the catalog cache and recent-search persistence."""

import json
import shutil
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

from storefront.storage.catalog_cache import CatalogCache
from storefront.storage.recent_searches import (
    JsonFileStore,
    MemoryStore,
    RecentSearches,
)


class TestCatalogCache(unittest.TestCase):
    """CatalogCache unit tests."""

    def setUp(self) -> None:
        self.cache = CatalogCache(ttl=60)

    def test_miss_on_empty(self) -> None:
        self.assertIsNone(self.cache.get("https://api/products"))

    def test_store_and_hit(self) -> None:
        self.cache.store("https://api/products", [{"id": 1}])
        self.assertEqual(self.cache.get("https://api/products"), [{"id": 1}])
        self.assertEqual(len(self.cache), 1)

    def test_returns_copy_not_reference(self) -> None:
        """Mutating a returned payload never touches the cache."""
        payload = [{"id": 1}]
        self.cache.store("u", payload)
        payload.append({"id": 2})
        first = self.cache.get("u")
        assert first is not None
        first[0]["id"] = 99
        self.assertEqual(self.cache.get("u"), [{"id": 1}])

    def test_expired_entry_evicted(self) -> None:
        self.cache.store("u", {"id": 1})
        future = time.time() + 61
        with patch(
            "storefront.storage.catalog_cache.time.time", return_value=future
        ):
            self.assertIsNone(self.cache.get("u"))
        self.assertEqual(len(self.cache), 0)

    def test_clear_returns_purged_count(self) -> None:
        self.cache.store("a", 1)
        self.cache.store("b", 2)
        self.assertEqual(self.cache.clear(), 2)
        self.assertEqual(self.cache.clear(), 0)
        self.assertIsNone(self.cache.get("a"))


class TestRecentSearches(unittest.TestCase):
    """RecentSearches over an in-memory store."""

    def setUp(self) -> None:
        self.store = MemoryStore()
        self.recent = RecentSearches(self.store, key="recentSearches", limit=5)

    def test_newest_first(self) -> None:
        self.recent.add("a")
        self.recent.add("b")
        self.assertEqual(self.recent.items, ["b", "a"])

    def test_duplicate_moves_to_front(self) -> None:
        for query in ("a", "b", "c", "a"):
            self.recent.add(query)
        self.assertEqual(self.recent.items, ["a", "c", "b"])

    def test_limit(self) -> None:
        for query in ("a", "b", "c", "d", "e", "f"):
            self.recent.add(query)
        self.assertEqual(self.recent.items, ["f", "e", "d", "c", "b"])

    def test_blank_ignored_and_trimmed(self) -> None:
        self.recent.add("   ")
        self.recent.add("  laptop ")
        self.assertEqual(self.recent.items, ["laptop"])

    def test_persisted_as_json_array(self) -> None:
        self.recent.add("watch")
        self.assertEqual(
            json.loads(self.store.get("recentSearches") or "null"), ["watch"]
        )
        reloaded = RecentSearches(self.store, key="recentSearches")
        self.assertEqual(reloaded.items, ["watch"])

    def test_corrupt_value_treated_as_empty(self) -> None:
        self.store.set("recentSearches", "{not json")
        with self.assertLogs("storefront.storage", level="ERROR"):
            recent = RecentSearches(self.store, key="recentSearches")
        self.assertEqual(recent.items, [])

    def test_non_list_value_treated_as_empty(self) -> None:
        self.store.set("recentSearches", '{"a": 1}')
        with self.assertLogs("storefront.storage", level="ERROR"):
            recent = RecentSearches(self.store, key="recentSearches")
        self.assertEqual(recent.items, [])

    def test_non_string_entries_dropped(self) -> None:
        self.store.set("recentSearches", '[null, "shoes", 42, "  ", "bag"]')
        recent = RecentSearches(self.store, key="recentSearches")
        self.assertEqual(recent.items, ["shoes", "bag"])

    def test_clear_removes_key(self) -> None:
        self.recent.add("a")
        self.recent.clear()
        self.assertEqual(self.recent.items, [])
        self.assertIsNone(self.store.get("recentSearches"))

    def test_items_is_copy(self) -> None:
        self.recent.add("a")
        self.recent.items.append("x")
        self.assertEqual(self.recent.items, ["a"])


class TestJsonFileStore(unittest.TestCase):
    """JsonFileStore reads and writes one JSON object file."""

    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp_dir, ignore_errors=True)
        self.path = self.tmp_dir / "nested" / "state.json"
        self.store = JsonFileStore(self.path)

    def test_creates_parent_directory(self) -> None:
        self.assertTrue(self.path.parent.is_dir())

    def test_get_missing_file(self) -> None:
        self.assertIsNone(self.store.get("k"))

    def test_set_get_delete(self) -> None:
        self.store.set("k", "v")
        self.store.set("other", "w")
        self.assertEqual(self.store.get("k"), "v")
        self.assertEqual(
            json.loads(self.path.read_text(encoding="utf-8")),
            {"k": "v", "other": "w"},
        )
        self.store.delete("k")
        self.assertIsNone(self.store.get("k"))
        self.assertEqual(self.store.get("other"), "w")

    def test_corrupt_file_treated_as_empty(self) -> None:
        self.path.write_text("[oops", encoding="utf-8")
        with self.assertLogs("storefront.storage", level="ERROR"):
            self.assertIsNone(self.store.get("k"))

    def test_undecodable_file_treated_as_empty(self) -> None:
        self.path.write_bytes(b'{"k": "\xff\xfe"}')
        with self.assertLogs("storefront.storage", level="ERROR"):
            self.assertIsNone(self.store.get("k"))

    def test_non_string_values_ignored(self) -> None:
        self.path.write_text(
            '{"k": null, "n": 3, "s": "ok"}', encoding="utf-8"
        )
        self.assertIsNone(self.store.get("k"))
        self.assertIsNone(self.store.get("n"))
        self.assertEqual(self.store.get("s"), "ok")

    def test_recent_searches_survive_new_store(self) -> None:
        RecentSearches(self.store).add("sneakers")
        reopened = RecentSearches(JsonFileStore(self.path))
        self.assertEqual(reopened.items, ["sneakers"])


if __name__ == "__main__":
    unittest.main()
