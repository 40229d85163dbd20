"""Shared pytest fixtures for publishr tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from publishr.config import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_path() -> Path:
    """Path of the sample PublishR document."""
    return FIXTURES_DIR / "publishr.txt"


@pytest.fixture
def sample_text(sample_path: Path) -> str:
    """Sample document text with its line breaks untouched."""
    with sample_path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the developer's environment and cached settings."""
    for key in ("FILTER__PLAIN_SHORTCUTS", "FILTER__FOOTNOTE_LABEL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
