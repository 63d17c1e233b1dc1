"""Compile LanguageGrammar objects into Pygments lexer classes.

Every rule with an end pattern becomes its own lexer state::

    root:      begin -> push state
    state:     nested rule begins (in order)
               end   -> pop
               any single character, tagged with the rule's token

so the leftmost match wins and ties go to the earlier rule, and text inside
a span keeps the span's token unless a nested rule claims it.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from pygments.lexer import RegexLexer, words
from pygments.token import Keyword, Name, Text, Whitespace

from idlcdoc.grammars.model import TAG_TOKENS, LanguageGrammar, LexRule

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from pygments.lexer import Lexer
    from pygments.token import _TokenType

logger = logging.getLogger(__name__)


def _emit_nonempty(token: _TokenType) -> Callable[..., Iterator[tuple[int, Any, str]]]:
    """Lookahead end patterns match no text; don't emit empty tokens for them."""

    def callback(lexer: Lexer, match: re.Match[str]) -> Iterator[tuple[int, Any, str]]:
        if match.group():
            yield match.start(), token, match.group()

    return callback


def _rule_entry(rule: LexRule, state: str, tokens: dict[str, list[Any]]) -> tuple:
    token = TAG_TOKENS[rule.tag]
    if rule.end is None:
        return (rule.begin, token)

    tokens[state] = [
        *(
            _rule_entry(child, f"{state}.{index}", tokens)
            for index, child in enumerate(rule.contains)
        ),
        (rule.end, _emit_nonempty(token), "#pop"),
        (r"[\s\S]", token),
    ]
    return (rule.begin, token, state)


def _class_name(grammar: LanguageGrammar) -> str:
    parts = re.split(r"\W+", grammar.display_name)
    return "".join(part[:1].upper() + part[1:] for part in parts) + "Lexer"


def _rule_lexer(grammar: LanguageGrammar) -> type[Lexer]:
    tokens: dict[str, list[Any]] = {}
    root = [
        _rule_entry(rule, f"root.{index}", tokens)
        for index, rule in enumerate(grammar.contains)
    ]
    if grammar.keywords:
        root.append(
            (words(sorted(grammar.keywords), prefix=r"\b", suffix=r"\b"), Keyword)
        )
    root.extend(
        [
            (r"\s+", Whitespace),
            (r"\w+", Text),
            (r".", Text),
        ]
    )
    tokens["root"] = root

    flags = re.MULTILINE
    if grammar.case_insensitive:
        flags |= re.IGNORECASE

    attrs = {
        "name": grammar.display_name,
        "aliases": [grammar.name, *grammar.aliases],
        "filenames": list(grammar.filenames),
        "flags": flags,
        "tokens": tokens,
        "__module__": __name__,
    }
    return type(_class_name(grammar), (RegexLexer,), attrs)


def _keyword_lexer(grammar: LanguageGrammar, base: type[Lexer]) -> type[Lexer]:
    """Subclass *base*, retagging keyword-set names as ``Keyword``."""
    fold = str.casefold if grammar.case_insensitive else str
    keywords = frozenset(fold(word) for word in grammar.keywords)

    def get_tokens_unprocessed(self, text, *args):  # noqa: ANN001, ANN202
        for index, token, value in base.get_tokens_unprocessed(self, text, *args):
            if (
                token in Name
                and token not in Name.Variable
                and fold(value) in keywords
            ):
                token = Keyword  # noqa: PLW2901
            yield index, token, value

    attrs = {
        "name": grammar.display_name,
        "aliases": [grammar.name, *grammar.aliases],
        "filenames": list(grammar.filenames),
        "get_tokens_unprocessed": get_tokens_unprocessed,
        "__module__": __name__,
    }
    return type(_class_name(grammar), (base,), attrs)


def build_lexer(grammar: LanguageGrammar) -> type[Lexer]:
    """Build a Pygments lexer class for *grammar*.

    Grammars with their own rule table compile to a ``RegexLexer``.
    Grammars backed by an existing lexer reuse it directly, or through a
    keyword-retagging subclass when they carry a keyword set.
    """
    if grammar.base_lexer is None:
        logger.debug("Compiling rule lexer for %s", grammar.name)
        return _rule_lexer(grammar)
    if not grammar.keywords:
        return grammar.base_lexer
    logger.debug(
        "Deriving %s from %s with %d keywords",
        grammar.name,
        grammar.base_lexer.__name__,
        len(grammar.keywords),
    )
    return _keyword_lexer(grammar, grammar.base_lexer)
