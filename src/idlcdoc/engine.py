"""Highlighting engine: language table, lexers and in-place block highlighting.

``HighlightEngine`` is the contract the rest of the package relies on;
``PygmentsEngine`` implements it on top of Pygments. The engine owns the
language table. Grammars are registered once per name and compiled to
lexer classes lazily.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import (
    BashLexer,
    CLexer,
    CMakeLexer,
    CppLexer,
    JavascriptLexer,
    JsonLexer,
)

from idlcdoc.grammars.compile import build_lexer
from idlcdoc.grammars.model import LanguageGrammar
from idlcdoc.markup import HIGHLIGHTED_CLASS, class_list, language_of, parse_element

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from pygments.lexer import Lexer
    from pygments.token import _TokenType
    from selectolax.lexbor import LexborHTMLParser

    GrammarFactory = Callable[["HighlightEngine"], LanguageGrammar]

__all__ = ["BUILTIN_GRAMMARS", "HighlightEngine", "PygmentsEngine"]

logger = logging.getLogger(__name__)

CMAKE_COMMANDS = frozenset(
    """
    add_compile_definitions add_compile_options add_custom_command
    add_custom_target add_definitions add_dependencies add_executable
    add_library add_link_options add_subdirectory add_test
    aux_source_directory block break build_command cmake_host_system_information
    cmake_language cmake_minimum_required cmake_parse_arguments cmake_path
    cmake_policy configure_file continue create_test_sourcelist define_property
    else elseif enable_language enable_testing endblock endforeach endfunction
    endif endmacro endwhile execute_process export file find_file find_library
    find_package find_path find_program foreach function get_cmake_property
    get_directory_property get_filename_component get_property
    get_source_file_property get_target_property get_test_property if include
    include_directories include_guard install link_directories link_libraries
    list load_cache macro mark_as_advanced math message option project return
    separate_arguments set set_directory_properties set_property
    set_source_files_properties set_target_properties set_tests_properties
    site_name source_group string target_compile_definitions
    target_compile_features target_compile_options target_include_directories
    target_link_directories target_link_libraries target_link_options
    target_precompile_headers target_sources try_compile try_run unset
    variable_watch while
    """.split()
)

BUILTIN_GRAMMARS: dict[str, LanguageGrammar] = {
    "cmake": LanguageGrammar(
        name="cmake",
        display_name="CMake",
        aliases=("cmake.in",),
        case_insensitive=True,
        keywords=CMAKE_COMMANDS,
        base_lexer=CMakeLexer,
    ),
    "json": LanguageGrammar(name="json", display_name="JSON", base_lexer=JsonLexer),
    "c": LanguageGrammar(
        name="c", display_name="C", aliases=("h",), base_lexer=CLexer
    ),
    "cpp": LanguageGrammar(
        name="cpp",
        display_name="C++",
        aliases=("c++", "cc", "hpp"),
        base_lexer=CppLexer,
    ),
    "javascript": LanguageGrammar(
        name="javascript",
        display_name="JavaScript",
        aliases=("js", "mjs"),
        base_lexer=JavascriptLexer,
    ),
    "bash": LanguageGrammar(
        name="bash",
        display_name="Bash",
        aliases=("sh", "shell"),
        base_lexer=BashLexer,
    ),
}


@runtime_checkable
class HighlightEngine(Protocol):
    """Protocol for the tokenization engine the pipeline drives."""

    def get_language(self, name: str) -> LanguageGrammar | None:
        """Return the grammar registered under *name* (or an alias)."""
        ...

    def register_language(self, name: str, factory: GrammarFactory) -> bool:
        """Install the grammar *factory* builds under *name*.

        Returns False if *name* is already registered.
        """
        ...

    def highlight_all(self, tree: LexborHTMLParser) -> int:
        """Highlight every language-tagged block in *tree* that isn't yet."""
        ...


class PygmentsEngine:
    """HighlightEngine backed by Pygments lexers and its HTML formatter."""

    def __init__(
        self,
        builtins: Mapping[str, LanguageGrammar] | None = None,
        *,
        style: str = "default",
    ) -> None:
        self._languages: dict[str, LanguageGrammar] = dict(
            BUILTIN_GRAMMARS if builtins is None else builtins
        )
        self._lexers: dict[str, type[Lexer]] = {}
        self._formatter = HtmlFormatter(nowrap=True, style=style)

    @property
    def languages(self) -> tuple[str, ...]:
        """Registered language ids, in registration order."""
        return tuple(self._languages)

    @property
    def grammars(self) -> dict[str, LanguageGrammar]:
        """Registered grammars keyed by language id, in registration order."""
        return dict(self._languages)

    def get_language(self, name: str) -> LanguageGrammar | None:
        grammar = self._languages.get(name)
        if grammar is not None:
            return grammar
        for candidate in self._languages.values():
            if name in candidate.aliases:
                return candidate
        return None

    def register_language(self, name: str, factory: GrammarFactory) -> bool:
        if name in self._languages:
            logger.debug("Language %s already registered", name)
            return False
        grammar = factory(self)
        self._languages[name] = grammar
        logger.debug("Registered language %s (%s)", name, grammar.display_name)
        return True

    def lexer_class(self, name: str) -> type[Lexer]:
        """Return the (cached) lexer class for a registered language.

        Raises:
            LookupError: If no grammar is registered under *name*.
        """
        grammar = self.get_language(name)
        if grammar is None:
            msg = f"No grammar registered for language {name!r}"
            raise LookupError(msg)
        lexer = self._lexers.get(grammar.name)
        if lexer is None:
            lexer = build_lexer(grammar)
            self._lexers[grammar.name] = lexer
        return lexer

    def _lexer(self, name: str) -> Lexer:
        # Keep leading blank lines: they are part of the snippet
        return self.lexer_class(name)(stripnl=False)

    def tokenize(self, code: str, name: str) -> list[tuple[_TokenType, str]]:
        """Return ``(token, text)`` pairs, adjacent same-token runs merged."""
        lexer = self._lexer(name)
        lexer.add_filter("tokenmerge")
        return list(lexer.get_tokens(code))

    def highlight(self, code: str, name: str) -> str:
        """Return *code* as HTML spans (no wrapping element)."""
        return pygments_highlight(code, self._lexer(name), self._formatter).rstrip(
            "\n"
        )

    def stylesheet(self, selector: str = f".{HIGHLIGHTED_CLASS}") -> str:
        """Return the CSS rules for highlighted spans under *selector*."""
        return self._formatter.get_style_defs(selector)

    def highlight_all(self, tree: LexborHTMLParser) -> int:
        """Highlight every ``pre > code.language-X`` block in *tree*.

        Blocks already highlighted and blocks whose language has no grammar
        are left alone. Each highlighted ``<pre>`` is replaced by a new one
        marked with ``HIGHLIGHTED_CLASS``.

        Returns:
            Number of blocks highlighted.
        """
        count = 0
        for code in tree.css("pre > code"):
            pre = code.parent
            if pre is None or HIGHLIGHTED_CLASS in class_list(pre):
                continue
            language = language_of(code)
            if language is None:
                continue
            if self.get_language(language) is None:
                logger.warning("No grammar for language %r, left as is", language)
                continue

            spans = self.highlight(code.text(deep=True), language)
            pre_classes = " ".join([*class_list(pre), HIGHLIGHTED_CLASS])
            code_classes = " ".join(class_list(code))
            markup = (
                f'<pre class="{html.escape(pre_classes)}">'
                f'<code class="{html.escape(code_classes)}">{spans}</code></pre>'
            )
            pre.replace_with(parse_element(markup, "pre"))
            count += 1

        logger.debug("Highlighted %d block(s)", count)
        return count
