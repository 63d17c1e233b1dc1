"""CMake with the ``idlc_compile`` command recognised as a keyword.

Only the vocabulary changes: rules, case handling and aliases come from
the engine's built-in ``cmake`` grammar.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from idlcdoc.engine import HighlightEngine
    from idlcdoc.grammars.model import LanguageGrammar

BASE_LANGUAGE = "cmake"
EXTRA_KEYWORDS = frozenset(("idlc_compile",))


class CMakeExtGrammar:
    """Grammar derived from the built-in CMake grammar."""

    name: str = "cmake-ext"

    def build(self, engine: HighlightEngine) -> LanguageGrammar:
        """Extend the base grammar's keyword set.

        Raises:
            LookupError: If the engine has no ``cmake`` grammar to derive from.
        """
        base = engine.get_language(BASE_LANGUAGE)
        if base is None:
            msg = f"Base grammar {BASE_LANGUAGE!r} is not available"
            raise LookupError(msg)

        return dataclasses.replace(
            base,
            name=self.name,
            display_name="CMakeExt",
            keywords=base.keywords | EXTRA_KEYWORDS,
            filenames=(),
            base=base.name,
        )


# Module-level definition for autodiscovery
definition = CMakeExtGrammar()
