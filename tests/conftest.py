# tests/conftest.py

"""Shared pytest fixtures for all sheet_shop tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from sheet_shop.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the cart file and log directory at a per-test temp dir."""
    cart_file = tmp_path / "storage.json"
    with patch.object(Settings, "CART_FILE", cart_file), patch.object(
        Settings, "LOGS_DIR", tmp_path / "logs"
    ):
        yield cart_file
