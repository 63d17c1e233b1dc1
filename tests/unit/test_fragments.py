"""Unit tests for fragment classification."""

from __future__ import annotations

import pytest
from selectolax.lexbor import LexborHTMLParser

from idlcdoc.fragments import (
    LANGUAGE_TAGS,
    CodeBlock,
    Fragment,
    classify_fragment,
    classify_fragments,
)
from tests.conftest import fragment_html, page_html


class TestClassifyFragment:
    """Tests for the pure per-fragment step."""

    @pytest.mark.parametrize(
        ("tag", "language"),
        [
            ("@cmake", "cmake-ext"),
            ("@idl", "idl"),
            ("@json", "json"),
            ("@c", "c"),
            ("@cpp", "cpp"),
            ("@javascript", "javascript"),
            ("@bash", "bash"),
        ],
    )
    def test_recognised_tags(self, tag: str, language: str) -> None:
        """Each tag maps to its language id."""
        block = classify_fragment(Fragment((tag, "x")))
        assert block == CodeBlock(language=language, body="x")

    def test_tag_table_is_complete(self) -> None:
        """Exactly seven tags are recognised."""
        assert len(LANGUAGE_TAGS) == 7

    @pytest.mark.parametrize("tag", ["", "@IDL", "@python", " @idl", "@idl ", "api"])
    def test_unrecognised_tags(self, tag: str) -> None:
        """Anything but an exact tag leaves the fragment unclassified."""
        assert classify_fragment(Fragment((tag, "body"))) is None

    def test_empty_fragment(self) -> None:
        """A fragment with no lines has an empty tag."""
        assert classify_fragment(Fragment(())) is None

    def test_body_joined_with_newlines(self) -> None:
        """Body lines are joined by newlines."""
        block = classify_fragment(Fragment(("@idl", "api Sample", "enum Result")))
        assert block is not None
        assert block.body == "api Sample\nenum Result"

    def test_indentation_preserved(self) -> None:
        """Leading and internal whitespace survive; trailing is trimmed."""
        lines = ("@idl", "", "enum Result", "    Ok : 0  ", "    Error : 1   ", "")
        block = classify_fragment(Fragment(lines))
        assert block is not None
        assert block.body == "\nenum Result\n    Ok : 0  \n    Error : 1"

    def test_tag_only_fragment(self) -> None:
        """A tag with no body gives an empty block."""
        assert classify_fragment(Fragment(("@bash",))) == CodeBlock("bash", "")

    def test_partition_by_position(self) -> None:
        """A tag-looking body line is just text."""
        block = classify_fragment(Fragment(("@c", "@idl")))
        assert block == CodeBlock("c", "@idl")


class TestCodeBlockHtml:
    """Tests for CodeBlock markup."""

    def test_markup(self) -> None:
        """Renders as a language-tagged pre/code pair."""
        block = CodeBlock("idl", "api Sample")
        assert block.to_html() == (
            '<pre><code class="language-idl">api Sample</code></pre>'
        )

    def test_body_escaped(self) -> None:
        """Markup characters in the body are escaped."""
        block = CodeBlock("cpp", "#include <idl.h>\nif (a && b) {}")
        assert "&lt;idl.h&gt;" in block.to_html()
        assert "&amp;&amp;" in block.to_html()


class TestClassifyFragments:
    """Tests for the DOM-mutating pass."""

    def test_replaces_tagged_fragment(self) -> None:
        """A tagged fragment becomes pre > code.language-X."""
        tree = LexborHTMLParser(
            page_html(fragment_html("@idl", "api Sample", "    const Max : 10"))
        )
        blocks = classify_fragments(tree)

        assert blocks == [CodeBlock("idl", "api Sample\n    const Max : 10")]
        assert tree.css_first(".fragment") is None
        code = tree.css_first("div.contents > pre > code.language-idl")
        assert code is not None
        assert code.text() == "api Sample\n    const Max : 10"

    def test_untagged_fragment_unchanged(self) -> None:
        """Fragments without a tag keep their original markup."""
        html = page_html(fragment_html("int main() {", "    return 0;", "}"))
        tree = LexborHTMLParser(html)
        before = tree.html

        assert classify_fragments(tree) == []
        assert tree.html == before

    def test_no_fragments_is_a_no_op(self) -> None:
        """Pages without fragments are left alone."""
        tree = LexborHTMLParser(page_html("<p>No code here.</p>"))
        before = tree.html
        assert classify_fragments(tree) == []
        assert tree.html == before

    def test_mixed_fragments_keep_order(self) -> None:
        """Blocks are returned in document order; skips stay in place."""
        tree = LexborHTMLParser(
            page_html(
                fragment_html("@json", '{"a": 1}'),
                fragment_html("plain"),
                fragment_html("@bash", "idlc --help"),
            )
        )
        blocks = classify_fragments(tree)

        assert [b.language for b in blocks] == ["json", "bash"]
        assert len(tree.css(".fragment")) == 1
        contents = tree.css_first("div.contents")
        assert contents is not None
        tags = [child.tag for child in contents.iter()]
        assert tags == ["pre", "div", "pre"]

    def test_entities_decoded_then_reescaped(self) -> None:
        """Line text is read decoded and written back escaped."""
        tree = LexborHTMLParser(page_html(fragment_html("@cpp", "#include <idl.h>")))
        classify_fragments(tree)
        code = tree.css_first("code.language-cpp")
        assert code is not None
        assert code.text() == "#include <idl.h>"
        assert "&lt;idl.h&gt;" in (tree.html or "")

    def test_second_run_finds_nothing(self) -> None:
        """Classification is idempotent."""
        tree = LexborHTMLParser(page_html(fragment_html("@idl", "api Sample")))
        classify_fragments(tree)
        after_first = tree.html

        assert classify_fragments(tree) == []
        assert tree.html == after_first
