"""
Unit tests for the local durable cache.

Storage contract:
- Missing/invalid file -> every key reads as None
- set() creates parent directories and keeps other keys
- get_list() only returns lists of objects
"""

import tempfile
import unittest
from pathlib import Path

from classcal.storage import EVENTS_KEY, TEACHERS_KEY, LocalCache


class TestLocalCache(unittest.TestCase):
    def test_missing_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            cache = LocalCache(Path(d) / "missing.json")
            self.assertIsNone(cache.get(EVENTS_KEY))
            self.assertIsNone(cache.get_list(EVENTS_KEY))

    def test_set_keeps_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            cache = LocalCache(Path(d) / "nested" / "cache.json")
            cache.set(EVENTS_KEY, [{"id": "1"}])
            cache.set(TEACHERS_KEY, [{"id": "t"}])
            self.assertEqual(cache.get_list(EVENTS_KEY), [{"id": "1"}])
            self.assertEqual(cache.get_list(TEACHERS_KEY), [{"id": "t"}])

            cache.remove(TEACHERS_KEY)
            self.assertIsNone(cache.get(TEACHERS_KEY))
            self.assertEqual(cache.get_list(EVENTS_KEY), [{"id": "1"}])

    def test_corrupted_file_is_treated_as_absent(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "cache.json"
            p.write_text("{not json", encoding="utf-8")
            cache = LocalCache(p)
            self.assertIsNone(cache.get_list(EVENTS_KEY))

            # a write recovers the file
            cache.set(EVENTS_KEY, [])
            self.assertEqual(cache.get_list(EVENTS_KEY), [])

    def test_wrong_shapes_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "cache.json"
            p.write_text('[1, 2, 3]', encoding="utf-8")
            self.assertIsNone(LocalCache(p).get(EVENTS_KEY))

            p.write_text('{"cachedEvents": "oops"}', encoding="utf-8")
            self.assertIsNone(LocalCache(p).get_list(EVENTS_KEY))

            p.write_text('{"cachedEvents": [{"id": "1"}, 5]}', encoding="utf-8")
            self.assertEqual(LocalCache(p).get_list(EVENTS_KEY), [{"id": "1"}])


if __name__ == "__main__":
    unittest.main()
