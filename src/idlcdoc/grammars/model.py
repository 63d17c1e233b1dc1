"""Grammar data model: lexical rules and language grammars.

A grammar is a tagged tree. Each ``LexRule`` carries a classification tag,
begin/end patterns and the rules that are only active inside its span.
Grammars are plain data; ``idlcdoc.grammars.compile`` turns them into
Pygments lexer classes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pygments.token import Comment, Keyword, Name, Number, String

if TYPE_CHECKING:
    from pygments.lexer import Lexer
    from pygments.token import _TokenType

# Classification tag -> Pygments token type
TAG_TOKENS: dict[str, _TokenType] = {
    "comment": Comment.Single,
    "doc": String.Doc,
    "type": Keyword.Type,
    "attribute": Name.Attribute,
    "number": Number.Integer,
    "reference": Name.Constant,
}


@dataclass(frozen=True)
class LexRule:
    """A begin/end pattern pair mapped to a classification tag.

    Attributes:
        tag: Classification tag, a key of ``TAG_TOKENS``.
        begin: Regex opening the span.
        end: Regex closing the span, or None for a single match of ``begin``.
        contains: Rules active only inside the span, tried in order.
    """

    tag: str
    begin: str
    end: str | None = None
    contains: tuple[LexRule, ...] = ()


@dataclass(frozen=True)
class LanguageGrammar:
    """A named, ordered set of lexical rules for one language.

    Built-in grammars wrap an existing Pygments lexer (``base_lexer``) and
    leave ``contains`` empty. Derived grammars copy the base's rule table
    and extend its keyword set.
    """

    name: str
    display_name: str
    aliases: tuple[str, ...] = ()
    case_insensitive: bool = False
    contains: tuple[LexRule, ...] = ()
    keywords: frozenset[str] = field(default_factory=frozenset)
    filenames: tuple[str, ...] = ()
    base_lexer: type[Lexer] | None = None
    base: str | None = None


def _validate_rule(rule: LexRule, path: str, problems: list[str]) -> None:
    if rule.tag not in TAG_TOKENS:
        problems.append(f"{path}: unknown tag {rule.tag!r}")

    patterns = {"begin": rule.begin}
    if rule.end is not None:
        patterns["end"] = rule.end
    for role, pattern in patterns.items():
        try:
            compiled = re.compile(pattern, re.MULTILINE)
        except re.error as exc:
            problems.append(f"{path}: {role} pattern {pattern!r} invalid: {exc}")
            continue
        # A begin that can match nothing would never advance the scanner
        if role == "begin" and compiled.match("") is not None:
            problems.append(f"{path}: begin pattern {pattern!r} matches empty text")

    for index, child in enumerate(rule.contains):
        _validate_rule(child, f"{path}.{index}", problems)


def validate_grammar(grammar: LanguageGrammar) -> list[str]:
    """Check a grammar's rule table for authoring defects.

    Returns:
        Human-readable problem descriptions; empty when the grammar is sound.
    """
    problems: list[str] = []
    for index, rule in enumerate(grammar.contains):
        _validate_rule(rule, f"{grammar.name}.{index}", problems)
    if grammar.base_lexer is None and not grammar.contains:
        problems.append(f"{grammar.name}: no rules and no base lexer")
    return problems
