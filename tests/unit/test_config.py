"""Tests for the pydantic-settings configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from idlcdoc.config import AppConfig, HighlightConfig, Settings, get_settings


class TestHighlightConfig:
    """HighlightConfig sub-model tests."""

    def test_defaults(self) -> None:
        """Buttons on, default style, scoped to .highlight."""
        cfg = Settings(_env_file=None).highlight  # type: ignore[call-arg]
        assert cfg == HighlightConfig()
        assert cfg.style == "default"
        assert cfg.css_selector == ".highlight"
        assert cfg.copy_buttons is True
        assert cfg.copy_button_title == "Copy to clipboard"
        assert cfg.require_copy_script is True

    def test_override_via_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """HIGHLIGHT__* env vars override the defaults."""
        monkeypatch.setenv("HIGHLIGHT__STYLE", "monokai")
        monkeypatch.setenv("HIGHLIGHT__COPY_BUTTONS", "false")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.highlight.style == "monokai"
        assert s.highlight.copy_buttons is False

    def test_unknown_style_rejected(self) -> None:
        """Styles must exist in Pygments."""
        with pytest.raises(ValidationError, match="Unknown Pygments style"):
            HighlightConfig(style="no-such-style")

    def test_unknown_style_from_env_rejected(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Validation also applies to environment values."""
        monkeypatch.setenv("HIGHLIGHT__STYLE", "no-such-style")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestAppConfig:
    """AppConfig sub-model tests."""

    def test_defaults(self) -> None:
        """Logs go to ./logs by default."""
        cfg = AppConfig()
        assert cfg.log_dir == Path("logs")
        assert cfg.log_to_file is True

    def test_override_via_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """APP__* env vars override the defaults."""
        monkeypatch.setenv("APP__LOG_DIR", "/tmp/idlc-logs")
        monkeypatch.setenv("APP__LOG_TO_FILE", "0")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.log_dir == Path("/tmp/idlc-logs")
        assert s.app.log_to_file is False


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_cached(self) -> None:
        """The same instance is returned until the cache is cleared."""
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Clearing the cache picks up new environment values."""
        assert get_settings().highlight.style == "default"
        monkeypatch.setenv("HIGHLIGHT__STYLE", "monokai")
        get_settings.cache_clear()
        assert get_settings().highlight.style == "monokai"
