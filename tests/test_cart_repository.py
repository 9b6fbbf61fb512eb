# tests/test_cart_repository.py

"""Tests for cart persistence backends."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sheet_shop.config.settings import Settings
from sheet_shop.storage.cart_repository import (
    InMemoryCartRepository,
    JsonFileCartRepository,
)


class TestInMemoryCartRepository(unittest.TestCase):
    """InMemoryCartRepository basics."""

    def test_starts_empty(self) -> None:
        self.assertIsNone(InMemoryCartRepository().load())

    def test_save_then_load(self) -> None:
        repo = InMemoryCartRepository()
        repo.save("[]")
        self.assertEqual(repo.load(), "[]")


class TestJsonFileCartRepository(unittest.TestCase):
    """Key-value JSON file repository."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "storage.json"
        self.repo = JsonFileCartRepository(self.path, key="cart")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_loads_none(self) -> None:
        self.assertIsNone(self.repo.load())

    def test_save_creates_file_and_round_trips(self) -> None:
        """Saving creates parent directories and reloads the blob."""
        self.repo.save('[{"id": 1}]')
        self.assertTrue(self.path.exists())
        self.assertEqual(self.repo.load(), '[{"id": 1}]')

    def test_file_layout_is_key_value(self) -> None:
        """The blob is stored as a string under the cart key."""
        self.repo.save("[]")
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"cart": "[]"})

    def test_other_keys_preserved(self) -> None:
        """Saving the cart leaves unrelated keys alone."""
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        self.repo.save("[]")
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"theme": "dark", "cart": "[]"})

    def test_corrupt_file_loads_none(self) -> None:
        """An unreadable file is treated as empty storage."""
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{broken", encoding="utf-8")
        with self.assertLogs("sheet_shop.storage", level="WARNING"):
            self.assertIsNone(self.repo.load())

    def test_non_object_file_loads_none(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")
        self.assertIsNone(self.repo.load())

    def test_non_string_value_loads_none(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"cart": [1]}), encoding="utf-8")
        self.assertIsNone(self.repo.load())

    def test_save_over_corrupt_file(self) -> None:
        """A corrupt file is replaced on the next save."""
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{broken", encoding="utf-8")
        self.repo.save("[]")
        self.assertEqual(self.repo.load(), "[]")

    def test_no_temp_files_left(self) -> None:
        self.repo.save("[]")
        self.assertEqual(
            [p.name for p in self.path.parent.iterdir()],
            ["storage.json"],
        )

    def test_clear_removes_key(self) -> None:
        self.repo.save("[]")
        self.assertTrue(self.repo.clear())
        self.assertIsNone(self.repo.load())
        self.assertFalse(self.repo.clear())

    def test_clear_writes_atomically(self) -> None:
        """clear replaces the file the same way save does."""
        self.repo.save("[]")
        with patch(
            "sheet_shop.storage.cart_repository.os.replace",
            wraps=os.replace,
        ) as replace:
            self.repo.clear()
        replace.assert_called_once()
        self.assertEqual(
            [p.name for p in self.path.parent.iterdir()],
            ["storage.json"],
        )

    def test_defaults_from_settings(self) -> None:
        """Path and key default to the configured values."""
        repo = JsonFileCartRepository()
        self.assertEqual(repo.path, Settings.CART_FILE)
        self.assertEqual(repo.key, Settings.CART_STORAGE_KEY)


if __name__ == "__main__":
    unittest.main()
