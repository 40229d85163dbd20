"""Unit-test helpers."""

from __future__ import annotations

import pytest

from publishr.formatting.formatter import Formatter


@pytest.fixture
def formatter() -> Formatter:
    """A formatter with freshly reset converters."""
    return Formatter()
