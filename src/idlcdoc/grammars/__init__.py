"""Custom language grammars for the highlighting engine.

This module provides a Protocol + Registry pattern for the grammars the
documentation needs beyond the engine's built-ins (IDL, CMake-ext).

Usage:
    from idlcdoc.engine import PygmentsEngine
    from idlcdoc.grammars import register_grammars

    engine = PygmentsEngine()
    register_grammars(engine)
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from idlcdoc.grammars.model import (
    TAG_TOKENS,
    LanguageGrammar,
    LexRule,
    validate_grammar,
)

if TYPE_CHECKING:
    from idlcdoc.engine import HighlightEngine

__all__ = [
    "TAG_TOKENS",
    "GrammarDefinition",
    "LanguageGrammar",
    "LexRule",
    "register_grammars",
    "validate_grammar",
]

logger = logging.getLogger(__name__)

# Registry of grammar definitions, populated by autodiscovery
_definitions: dict[str, GrammarDefinition] = {}


@runtime_checkable
class GrammarDefinition(Protocol):
    """Protocol for a custom grammar.

    Each grammar module must expose a ``definition`` object with:
    - name: Language id the grammar registers under (e.g., "idl")
    - build(): Produce the LanguageGrammar, given the engine
    """

    name: str

    def build(self, engine: HighlightEngine) -> LanguageGrammar:
        """Return the grammar definition.

        Derived grammars fetch their base through ``engine.get_language()``.
        """
        ...


def _discover_definitions() -> None:
    """Auto-discover all grammar definitions in this package.

    Scans for modules with a `definition` attribute that implements
    GrammarDefinition. Import failures are logged and skipped.
    """
    for _finder, name, _ispkg in pkgutil.iter_modules(__path__, f"{__name__}."):
        if name.endswith((".model", ".compile", ".__init__")):
            continue
        try:
            module = importlib.import_module(name)
            if hasattr(module, "definition"):
                definition = module.definition
                if isinstance(definition, GrammarDefinition):
                    _definitions[definition.name] = definition
                    logger.debug("Discovered grammar: %s", definition.name)
                else:
                    logger.warning(
                        "Module %s has 'definition' but doesn't implement "
                        "GrammarDefinition",
                        name,
                    )
        except Exception:
            logger.exception("Failed to import grammar module: %s", name)


def register_grammars(engine: Any) -> list[str]:
    """Register every discovered grammar with *engine*.

    Idempotent: the engine ignores names it already knows. An engine
    without a registration capability (or no engine at all) is a valid
    degraded setup and makes this a no-op.

    Args:
        engine: Highlighting engine, normally a ``PygmentsEngine``.

    Returns:
        Names of the grammars newly registered by this call.
    """
    register = getattr(engine, "register_language", None)
    if register is None:
        logger.debug("Engine cannot register languages, skipping grammars")
        return []

    registered = []
    for name, definition in _definitions.items():
        try:
            if register(name, definition.build):
                registered.append(name)
        except LookupError as exc:
            logger.warning("Grammar %s not registered: %s", name, exc)
    return registered


# Run autodiscovery on module import
_discover_definitions()
