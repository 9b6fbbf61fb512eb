# sheet_shop/storage/cart_repository.py

"""Persistence backends for the serialised cart blob."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from sheet_shop.config.settings import Settings

logger = logging.getLogger("sheet_shop.storage")


class CartRepository(Protocol):
    """Where the cart's serialised blob lives between runs."""

    def load(self) -> str | None:
        """Return the stored blob, or ``None`` when nothing is stored."""
        ...

    def save(self, blob: str) -> None:
        """Replace the stored blob."""
        ...


class InMemoryCartRepository:
    """Process-local repository, mainly for tests and dry runs."""

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob

    def load(self) -> str | None:
        return self.blob

    def save(self, blob: str) -> None:
        self.blob = blob


class JsonFileCartRepository:
    """Key-value JSON file standing in for browser ``localStorage``.

    The file holds a single object mapping storage keys to string
    values; the cart occupies one key and other keys are left alone.
    """

    def __init__(
        self,
        path: Path | None = None,
        key: str | None = None,
    ) -> None:
        self.path: Path = path or Settings.CART_FILE
        self.key: str = key or Settings.CART_STORAGE_KEY
        logger.debug(
            "JsonFileCartRepository initialised, path=%s key=%s",
            self.path,
            self.key,
        )

    def _read_all(self) -> dict[str, Any]:
        """Read the whole key-value file; unreadable files read as empty."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Unreadable storage file %s: %s", self.path, exc
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "Storage file %s is not a JSON object; ignoring",
                self.path,
            )
            return {}
        return data

    def load(self) -> str | None:
        value = self._read_all().get(self.key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning(
                "Storage key '%s' holds %s, expected a string",
                self.key,
                type(value).__name__,
            )
            return None
        return value

    def _write_all(self, data: dict[str, Any]) -> None:
        """Atomically replace the key-value file with *data*."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".storage-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            logger.error(
                "Failed to write storage file %s",
                self.path,
                exc_info=True,
            )
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def save(self, blob: str) -> None:
        data = self._read_all()
        data[self.key] = blob
        self._write_all(data)
        logger.debug(
            "Saved %d bytes under '%s' to %s",
            len(blob),
            self.key,
            self.path,
        )

    def clear(self) -> bool:
        """Remove the cart key, the external reset path for the cart.

        Returns ``True`` if the key was present.
        """
        data = self._read_all()
        if self.key not in data:
            return False
        del data[self.key]
        self._write_all(data)
        logger.info("Cleared storage key '%s' in %s", self.key, self.path)
        return True
