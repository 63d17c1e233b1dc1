"""Copy-to-clipboard buttons for highlighted code blocks.

Each highlighted ``<pre>`` is wrapped in place::

    <div class="doxygen-awesome-fragment-wrapper">
      <pre class="highlight">...</pre>
      <doxygen-awesome-fragment-copy-button title="...">
        svg
      </doxygen-awesome-fragment-copy-button>
    </div>

The button is a custom element from the doxygen-awesome copy-button
extension; its script performs the clipboard write when clicked.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from idlcdoc.markup import (
    COPY_BUTTON_TAG,
    COPY_ICON,
    COPY_SCRIPT_SELECTOR,
    HIGHLIGHTED_CLASS,
    WRAPPER_CLASS,
    class_list,
    parse_element,
)

if TYPE_CHECKING:
    from selectolax.lexbor import LexborHTMLParser

    from idlcdoc.config import HighlightConfig

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Copy to clipboard"


def clipboard_available(tree: LexborHTMLParser, config: HighlightConfig) -> bool:
    """Return True if copy buttons can work on this page."""
    if not config.copy_buttons:
        return False
    if config.require_copy_script and tree.css_first(COPY_SCRIPT_SELECTOR) is None:
        logger.debug("Page does not load the copy-button script")
        return False
    return True


def augment_copy_affordances(
    tree: LexborHTMLParser,
    *,
    clipboard: bool = True,
    title: str = DEFAULT_TITLE,
) -> int:
    """Wrap every highlighted block in *tree* with a copy button.

    Blocks that are already wrapped are skipped, so running this twice adds
    no duplicate buttons. Without clipboard support nothing is changed.

    Args:
        tree: Parsed page to modify in-place.
        clipboard: Whether the page can copy to the clipboard.
        title: Tooltip for the buttons.

    Returns:
        Number of buttons added.
    """
    if not clipboard:
        return 0

    count = 0
    for pre in tree.css(f"pre.{HIGHLIGHTED_CLASS}"):
        parent = pre.parent
        if parent is not None and WRAPPER_CLASS in class_list(parent):
            continue
        markup = (
            f'<div class="{WRAPPER_CLASS}">{pre.html}'
            f'<{COPY_BUTTON_TAG} title="{html.escape(title)}">{COPY_ICON}'
            f"</{COPY_BUTTON_TAG}></div>"
        )
        pre.replace_with(parse_element(markup, f"div.{WRAPPER_CLASS}"))
        count += 1

    logger.debug("Added %d copy button(s)", count)
    return count
