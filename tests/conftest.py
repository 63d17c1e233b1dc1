"""Shared pytest fixtures for idlc-doc tests."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

import pytest

from idlcdoc.config import HighlightConfig, get_settings
from idlcdoc.engine import PygmentsEngine
from idlcdoc.grammars import register_grammars

if TYPE_CHECKING:
    from collections.abc import Iterator

COPY_SCRIPT = (
    '<script type="text/javascript" '
    'src="doxygen-awesome-fragment-copy-button.js"></script>'
)


# =============================================================================
# Doxygen page builders
# =============================================================================


def fragment_html(*lines: str) -> str:
    """Build Doxygen ``@code`` markup: one ``div.line`` per line."""
    inner = "".join(f'<div class="line">{html.escape(line)}</div>' for line in lines)
    return f'<div class="fragment">{inner}</div>'


def page_html(*body: str, copy_script: bool = True) -> str:
    """Wrap body markup in a minimal Doxygen-like page."""
    head = COPY_SCRIPT if copy_script else ""
    return (
        "<!DOCTYPE html><html><head><title>Sample</title>"
        f'{head}</head><body><div class="contents">{"".join(body)}</div>'
        "</body></html>"
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def engine() -> PygmentsEngine:
    """A fresh engine with the custom grammars registered."""
    engine = PygmentsEngine()
    register_grammars(engine)
    return engine


@pytest.fixture
def highlight_config() -> HighlightConfig:
    """Default highlight settings, independent of the environment."""
    return HighlightConfig()


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep HIGHLIGHT__*/APP__* variables and the settings cache out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith(("HIGHLIGHT__", "APP__")):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
