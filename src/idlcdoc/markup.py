"""Markup constants and small DOM helpers shared by the pipeline stages.

The class and element names match the Doxygen output and the
doxygen-awesome theme extensions the pages load:

- ``.fragment`` / ``.line``: Doxygen's raw code fragment markup
- ``doxygen-awesome-fragment-*``: the copy-button extension's wrapper and
  custom element
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from selectolax.lexbor import LexborHTMLParser

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

FRAGMENT_SELECTOR = ".fragment"
LINE_SELECTOR = ".line"

LANGUAGE_CLASS_PREFIX = "language-"

# Set on <pre> once the engine has highlighted its <code>
HIGHLIGHTED_CLASS = "highlight"

WRAPPER_CLASS = "doxygen-awesome-fragment-wrapper"
COPY_BUTTON_TAG = "doxygen-awesome-fragment-copy-button"
COPY_SCRIPT_SELECTOR = 'script[src*="fragment-copy-button"]'

COPY_ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" '
    'width="24" height="24"><path d="M0 0h24v24H0V0z" fill="none"/>'
    '<path d="M16 1H4c-1.1 0-2 .9-2 2v14h2V3h12V1zm3 4H8c-1.1 0-2 .9-2 '
    "2v14c0 1.1.9 2 2 2h11c1.1 0 2-.9 2-2V7c0-1.1-.9-2-2-2zm0 "
    '16H8V7h11v14z"/></svg>'
)


def class_list(node: LexborNode) -> list[str]:
    """Return the node's class attribute split into tokens."""
    return (node.attributes.get("class") or "").split()


def language_of(node: LexborNode) -> str | None:
    """Return the ``language-X`` id carried by *node*'s classes, if any."""
    for name in class_list(node):
        if name.startswith(LANGUAGE_CLASS_PREFIX):
            return name.removeprefix(LANGUAGE_CLASS_PREFIX) or None
    return None


def parse_element(markup: str, selector: str) -> LexborNode:
    """Parse an HTML snippet and return its first element matching *selector*.

    The node belongs to a scratch document; ``replace_with`` imports it into
    the target tree.
    """
    node = LexborHTMLParser(markup).css_first(selector)
    if node is None:
        msg = f"Snippet has no element matching {selector!r}: {markup[:80]!r}"
        raise ValueError(msg)
    return node
