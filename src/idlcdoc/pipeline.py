"""Page rendering pipeline.

Runs the stages in their fixed order over a parsed page:

1. register the custom grammars with the engine (once per engine)
2. classify fragments into language-tagged code blocks
3. highlight every block in one engine pass
4. add copy buttons to the highlighted blocks

Each stage degrades instead of failing: without an engine (or one lacking
a capability) pages still get their code blocks, just unhighlighted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from selectolax.lexbor import LexborHTMLParser

from idlcdoc.copy_button import augment_copy_affordances, clipboard_available
from idlcdoc.engine import PygmentsEngine
from idlcdoc.fragments import classify_fragments
from idlcdoc.grammars import register_grammars
from idlcdoc.markup import FRAGMENT_SELECTOR

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from idlcdoc.config import HighlightConfig

logger = logging.getLogger(__name__)


@dataclass
class RenderReport:
    """Counters for one or more rendered pages."""

    files_scanned: int = 0
    files_changed: int = 0
    fragments_classified: int = 0
    fragments_skipped: int = 0
    blocks_highlighted: int = 0
    copy_buttons: int = 0

    def __add__(self, other: RenderReport) -> RenderReport:
        return RenderReport(
            **{
                f.name: getattr(self, f.name) + getattr(other, f.name)
                for f in fields(self)
            }
        )


def _default_config() -> HighlightConfig:
    from idlcdoc.config import get_settings  # noqa: PLC0415

    return get_settings().highlight


def render_document(
    tree: LexborHTMLParser,
    engine: Any = None,
    *,
    config: HighlightConfig | None = None,
) -> RenderReport:
    """Run every stage over *tree*, modifying it in place.

    Args:
        tree: Parsed page.
        engine: Highlighting engine. None skips registration and highlighting.
        config: Highlight settings; defaults to ``get_settings().highlight``.

    Returns:
        What was done to the page.
    """
    config = config or _default_config()
    report = RenderReport(files_scanned=1)

    register_grammars(engine)

    report.fragments_classified = len(classify_fragments(tree))
    report.fragments_skipped = len(tree.css(FRAGMENT_SELECTOR))

    highlight_all = getattr(engine, "highlight_all", None)
    if highlight_all is None:
        logger.debug("No highlighting capability, blocks left unstyled")
    else:
        report.blocks_highlighted = highlight_all(tree)

    report.copy_buttons = augment_copy_affordances(
        tree,
        clipboard=clipboard_available(tree, config),
        title=config.copy_button_title,
    )
    return report


def render_html(
    html: str,
    engine: Any = None,
    *,
    config: HighlightConfig | None = None,
) -> tuple[str, RenderReport]:
    """Render an HTML page string.

    Returns:
        The rendered HTML and the report. Pages with nothing to change come
        back unchanged (not re-serialised).
    """
    tree = LexborHTMLParser(html)
    report = render_document(tree, engine, config=config)
    changed = (
        report.fragments_classified or report.blocks_highlighted or report.copy_buttons
    )
    if not changed:
        return html, report
    return tree.html or html, report


def iter_html_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield HTML files: files as given, directories searched recursively."""
    for path in paths:
        if path.is_dir():
            yield from sorted(path.rglob("*.html"))
        else:
            yield path


def render_site(
    paths: Iterable[Path],
    *,
    engine: Any = None,
    config: HighlightConfig | None = None,
    dry_run: bool = False,
) -> RenderReport:
    """Render HTML files in place, sharing one engine across all pages.

    Args:
        paths: HTML files and/or directories of a generated site.
        engine: Engine to use; a new ``PygmentsEngine`` when None.
        config: Highlight settings; defaults to ``get_settings().highlight``.
        dry_run: Compute the report without writing files.

    Returns:
        Summed report over every page.
    """
    config = config or _default_config()
    if engine is None:
        engine = PygmentsEngine(style=config.style)

    total = RenderReport()
    for path in iter_html_files(paths):
        original = path.read_text(encoding="utf-8")
        rendered, report = render_html(original, engine, config=config)
        if rendered != original:
            report.files_changed = 1
            if not dry_run:
                path.write_text(rendered, encoding="utf-8")
            logger.info("Rendered %s", path)
        total += report
    return total
