"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/publishr/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")

DEFAULT_TAG_COLOR = "#00A517"
DEFAULT_FOOTNOTE_COLOR = "#389BCD"


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class FilterConfig(BaseModel):
    """Document filter behaviour."""

    plain_shortcuts: bool = False
    footnote_label: str = "omegat"


class HighlightConfig(BaseModel):
    """Colours used by the highlighting adapter.

    Malformed values only affect presentation: they fall back to the
    defaults with a warning instead of failing validation.
    """

    tag_color: str = DEFAULT_TAG_COLOR
    footnote_color: str = DEFAULT_FOOTNOTE_COLOR

    @field_validator("tag_color", mode="before")
    @classmethod
    def _tag_color_or_default(cls, value: object) -> str:
        return _color_or_default(value, DEFAULT_TAG_COLOR, "tag_color")

    @field_validator("footnote_color", mode="before")
    @classmethod
    def _footnote_color_or_default(cls, value: object) -> str:
        return _color_or_default(value, DEFAULT_FOOTNOTE_COLOR, "footnote_color")


class AppConfig(BaseModel):
    """Application runtime configuration."""

    log_dir: Path = Path("logs")


def _color_or_default(value: object, default: str, name: str) -> str:
    """Normalise a ``#RRGGBB`` colour, or return *default* if unreadable."""
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate.startswith("#"):
            candidate = f"#{candidate}"
        if _HEX_COLOR.fullmatch(candidate):
            return candidate.upper()
    logger.warning("Unreadable %s %r, using %s", name, value, default)
    return default


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``FILTER__PLAIN_SHORTCUTS``, ``HIGHLIGHT__TAG_COLOR``, ``APP__LOG_DIR``.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    filter: FilterConfig = FilterConfig()
    highlight: HighlightConfig = HighlightConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
