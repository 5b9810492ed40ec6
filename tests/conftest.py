# tests/conftest.py

"""Shared pytest fixtures for all stock_sync tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_output_dirs(tmp_path: Path) -> Generator[None, None, None]:
    """Point logs/ and reports/ at a per-test temporary directory."""
    with patch.object(Settings, "LOGS_DIR", tmp_path / "logs"), patch.object(
        Settings, "REPORTS_DIR", tmp_path / "reports"
    ):
        yield
