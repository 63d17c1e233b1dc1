"""Turn Doxygen code fragments into language-tagged code blocks.

Doxygen renders ``@code`` sections as::

    <div class="fragment">
      <div class="line">@idl</div>
      <div class="line">api Sample</div>
      ...
    </div>

The first line is a language tag. Tagged fragments are replaced by
``<pre><code class="language-X">`` blocks for the engine to highlight;
fragments without a known tag are left as Doxygen wrote them.
"""

# Pattern: Functional Core (pure classification, one DOM-mutating entry point)

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from idlcdoc.markup import (
    FRAGMENT_SELECTOR,
    LANGUAGE_CLASS_PREFIX,
    LINE_SELECTOR,
    parse_element,
)

if TYPE_CHECKING:
    from selectolax.lexbor import LexborHTMLParser, LexborNode

logger = logging.getLogger(__name__)

# First-line tag -> language id (exact, case-sensitive match)
LANGUAGE_TAGS: dict[str, str] = {
    "@cmake": "cmake-ext",
    "@idl": "idl",
    "@json": "json",
    "@c": "c",
    "@cpp": "cpp",
    "@javascript": "javascript",
    "@bash": "bash",
}


@dataclass(frozen=True)
class Fragment:
    """The text of each line of a raw fragment, in order."""

    lines: tuple[str, ...]

    @classmethod
    def from_node(cls, node: LexborNode) -> Fragment:
        return cls(tuple(line.text(deep=True) for line in node.css(LINE_SELECTOR)))

    @property
    def tag(self) -> str:
        return self.lines[0] if self.lines else ""

    @property
    def body_lines(self) -> tuple[str, ...]:
        return self.lines[1:]


@dataclass(frozen=True)
class CodeBlock:
    """A classified fragment: language id plus source text."""

    language: str
    body: str

    def to_html(self) -> str:
        return (
            f'<pre><code class="{LANGUAGE_CLASS_PREFIX}{self.language}">'
            f"{html.escape(self.body, quote=False)}</code></pre>"
        )


def classify_fragment(fragment: Fragment) -> CodeBlock | None:
    """Resolve a fragment's language tag and reassemble its body.

    Body lines are each followed by a newline, then trailing whitespace is
    trimmed. Leading whitespace (indentation) is kept.

    Returns:
        The CodeBlock, or None if the first line is not a known tag.
    """
    language = LANGUAGE_TAGS.get(fragment.tag)
    if language is None:
        return None
    body = "".join(f"{line}\n" for line in fragment.body_lines).rstrip()
    return CodeBlock(language=language, body=body)


def classify_fragments(tree: LexborHTMLParser) -> list[CodeBlock]:
    """Replace every tagged fragment in *tree* with its code block.

    Untagged fragments are left untouched. Safe on documents without
    fragments.

    Returns:
        The code blocks that replaced fragments, in document order.
    """
    blocks: list[CodeBlock] = []
    skipped = 0
    for node in tree.css(FRAGMENT_SELECTOR):
        block = classify_fragment(Fragment.from_node(node))
        if block is None:
            skipped += 1
            continue
        node.replace_with(parse_element(block.to_html(), "pre"))
        blocks.append(block)

    logger.debug("Classified %d fragment(s), skipped %d", len(blocks), skipped)
    return blocks
