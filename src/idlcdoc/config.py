"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pygments.styles import get_all_styles

logger = logging.getLogger(__name__)

# src/idlcdoc/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class HighlightConfig(BaseModel):
    """Highlighting and copy-button behaviour."""

    style: str = "default"
    css_selector: str = ".highlight"
    copy_buttons: bool = True
    copy_button_title: str = "Copy to clipboard"
    # Only add buttons to pages that load the copy-button custom element
    require_copy_script: bool = True

    @field_validator("style")
    @classmethod
    def style_must_exist(cls, value: str) -> str:
        if value not in set(get_all_styles()):
            msg = f"Unknown Pygments style: {value!r}"
            raise ValueError(msg)
        return value


class AppConfig(BaseModel):
    """Runtime configuration for the command-line tool."""

    log_dir: Path = Path("logs")
    log_to_file: bool = True


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``HIGHLIGHT__STYLE``, ``HIGHLIGHT__COPY_BUTTONS``, ``APP__LOG_DIR``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

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
        logger.debug("Settings: no .env file found, using env vars and defaults")

    return settings
