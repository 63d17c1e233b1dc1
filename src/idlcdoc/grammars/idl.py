"""Grammar for the interface definition language (IDL).

IDL sources look like::

    // sample api
    @ Sample API.
    api Sample

    @ Result codes.
    enum Result
        Ok : 0 [noerror]
        Error : 1
        Timeout : Error @ Same as {Error}.

Documentation starts with ``@`` and runs to end of line (or between
triple-backtick fences), literal values follow a colon, attributes sit in
square brackets and ``{Name}`` marks a type reference.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from idlcdoc.grammars.model import LanguageGrammar, LexRule

if TYPE_CHECKING:
    from idlcdoc.engine import HighlightEngine

KEYWORDS = frozenset(
    (
        "api",
        "enum",
        "const",
        "struct",
        "field",
        "interface",
        "method",
        "arg",
        "prop",
        "event",
        "handle",
        "func",
        "callback",
        "import",
    )
)

# Literal values end at the line end or where documentation/attributes begin
_LITERAL_END = r"(?=\n|$|@|\[)"
_LINE_END = r"(?=\n|$)"

_DOC_SPANS = (
    LexRule("type", r"\{", r"\}"),
    LexRule("attribute", r"\[", r"\]"),
)

COMMENT = LexRule("comment", r"//", _LINE_END)

FENCED_DOCUMENTATION = LexRule("doc", r"@\s*```", r"```", _DOC_SPANS)

DOCUMENTATION = LexRule("doc", r"@\s*(\w+)?", _LINE_END, _DOC_SPANS)

TYPE = LexRule("type", r"\{", r"\}")

ATTRIBUTE = LexRule(
    "attribute",
    r"\[",
    r"\]",
    (
        LexRule("number", r"\(\s*\d+", r"\)"),
        LexRule("reference", r"\(\s*\w+", r"\)"),
    ),
)

LITERAL = LexRule("number", r":\s*\d+", _LITERAL_END)

LITERAL_REF = LexRule("reference", r":\s*\w+", _LITERAL_END)


class IdlGrammar:
    """Standalone grammar, defined from scratch."""

    name: str = "idl"

    def build(self, engine: HighlightEngine) -> LanguageGrammar:
        """Return the IDL rule table.

        Multi-character openers come before the colon literals so that a
        colon inside brackets or documentation is never read as a literal.
        """
        return LanguageGrammar(
            name=self.name,
            display_name="IDL",
            # Pygments already uses "idl" for the Interactive Data Language
            aliases=("idlc",),
            case_insensitive=False,
            contains=(
                COMMENT,
                FENCED_DOCUMENTATION,
                DOCUMENTATION,
                TYPE,
                ATTRIBUTE,
                LITERAL,
                LITERAL_REF,
            ),
            keywords=KEYWORDS,
            filenames=("*.idl",),
        )


# Module-level definition for autodiscovery
definition = IdlGrammar()
