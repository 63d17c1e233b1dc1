"""Pygments plugin lexers for the custom grammars.

Registered under the ``pygments.lexers`` entry point group, so Sphinx,
``pygmentize -l idlc`` and ``pygments.lexers.get_lexer_by_name("idlc")`` can
use them without going through the documentation pipeline. Pygments resolves
its built-in lexers first and already has one called ``idl`` (Interactive
Data Language), so plugin users ask for ``idlc``; ``cmake-ext`` is unique.
"""

from __future__ import annotations

from idlcdoc.engine import PygmentsEngine
from idlcdoc.grammars import register_grammars

__all__ = ["CMakeExtLexer", "IdlLexer"]

_engine = PygmentsEngine()
register_grammars(_engine)

IdlLexer = _engine.lexer_class("idl")
CMakeExtLexer = _engine.lexer_class("cmake-ext")
