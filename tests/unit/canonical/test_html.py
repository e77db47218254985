#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for canonical/html.py HtmlCanonicalizer."""

import pytest

from anydiff.canonical import HtmlCanonicalizer, canonicalize
from anydiff.exceptions import AnyDiffError, MalformedInputError
from anydiff.options import TaskParameters


def _paths(doc):
    return [None if path is None else str(path) for path in doc.paths]


@pytest.mark.unit
class TestHtmlLayout:
    """Tests for the line layout of canonical HTML."""

    def test_nested_elements(self):
        """Test one tag or text line per row, indented by depth."""
        doc = canonicalize("<a><b>1</b></a>", "html")
        assert doc.lines == ("<a>", "  <b>", "    1", "  </b>", "</a>")
        assert doc.content_format == "html"

    def test_paths(self):
        """Test element and text paths."""
        doc = canonicalize("<a><b>1</b></a>", "html")
        assert _paths(doc) == ["/a", "/a/b", "/a/b/#text", "/a/b", "/a"]

    def test_sibling_index_rendered_after_first(self):
        """Test that same-named siblings get an index from the second one on."""
        doc = canonicalize("<ul><li>x</li><li>y</li></ul>", "html")
        assert "/ul/li/#text" in _paths(doc)
        assert "/ul/li[2]/#text" in _paths(doc)

    def test_whitespace_layout_is_irrelevant(self):
        """Test that differently indented markup canonicalizes identically."""
        compact = canonicalize("<div><p>Hello</p></div>", "html")
        spread = canonicalize("<div>\n    <p>\n        Hello\n    </p>\n</div>\n", "html")
        assert compact.lines == spread.lines

    def test_single_attribute_stays_inline(self):
        """Test that one attribute is kept on the tag line."""
        doc = canonicalize('<p class="x">t</p>', "html")
        assert doc.lines[0] == '<p class="x">'

    def test_multiple_attributes_one_per_line(self):
        """Test that several attributes are written one per line with attribute paths."""
        doc = canonicalize('<p id="i" class="c">t</p>', "html")
        assert doc.lines[:4] == ("<p", '  class="c"', '  id="i"', ">")
        assert _paths(doc)[1:3] == ["/p/@class", "/p/@id"]

    def test_attribute_order_kept_when_not_arranged(self):
        """Test that arrange_attributes=False preserves document order."""
        doc = canonicalize('<p id="i" class="c">t</p>', "html", TaskParameters(arrange_attributes=False))
        assert doc.lines[1:3] == ('  id="i"', '  class="c"')

    def test_void_elements_have_no_close_tag(self):
        """Test that void elements are written without a closing tag."""
        doc = canonicalize("<p>a<br>b</p>", "html")
        assert doc.lines == ("<p>", "  a", "  <br>", "  b", "</p>")

    def test_comment_and_doctype(self):
        """Test that comments and doctypes get their own lines."""
        doc = canonicalize("<!DOCTYPE html><html><!-- note\n here --><body></body></html>", "html")
        assert doc.lines[0] == "<!DOCTYPE html>"
        assert "  <!-- note here -->" in doc.lines
        assert "/html/#comment" in _paths(doc)

    def test_text_is_escaped(self):
        """Test that markup characters in text are escaped."""
        doc = canonicalize("<p>a &lt; b</p>", "html")
        assert "  a &lt; b" in doc.lines

    def test_script_text_not_escaped(self):
        """Test that script content is kept verbatim."""
        doc = canonicalize("<script>if (a < b) { go(); }</script>", "html")
        assert "  if (a < b) { go(); }" in doc.lines

    def test_multiline_text_dedented(self):
        """Test that a multi-line text node is dedented and blank lines dropped."""
        doc = canonicalize("<pre>\n    one\n      two\n\n</pre>", "html")
        assert doc.lines == ("<pre>", "  one", "    two", "</pre>")

    def test_keys_strip_canonical_indent(self):
        """Test that re-nesting does not change comparison keys of content lines."""
        doc = canonicalize("<div><p>x</p></div>", "html")
        assert doc.keys == ("<div>", "<p>", "x", "</p>", "</div>")


@pytest.mark.unit
class TestHtmlOptions:
    """Tests for option handling in the HTML canonicalizer."""

    def test_no_normalize_compares_as_plain(self):
        """Test that normalize=False falls back to line-based plain text."""
        doc = canonicalize("<a><b>1</b></a>\n", "html", TaskParameters(normalize=False))
        assert doc.lines == ("<a><b>1</b></a>",)
        assert doc.content_format == "plain"

    def test_unavailable_parser(self, monkeypatch):
        """Test that a missing tree builder raises MalformedInputError."""
        from bs4.exceptions import FeatureNotFound

        def _raise(*args, **kwargs):
            raise FeatureNotFound("no such builder")

        monkeypatch.setattr("anydiff.canonical.html.BeautifulSoup", _raise)
        with pytest.raises(MalformedInputError, match="not installed") as exc_info:
            HtmlCanonicalizer().canonicalize("<p>x</p>")
        assert exc_info.value.content_format == "html"

    def test_unavailable_parser_names_side(self, monkeypatch):
        """Test that the comparison reports which side needed the missing parser."""
        from bs4.exceptions import FeatureNotFound

        from anydiff import compare

        def _raise(*args, **kwargs):
            raise FeatureNotFound("no such builder")

        monkeypatch.setattr("anydiff.canonical.html.BeautifulSoup", _raise)
        with pytest.raises(MalformedInputError) as exc_info:
            compare("<p>x</p>", "<p>y</p>", content_format="html")
        assert exc_info.value.side == "left"
        assert isinstance(exc_info.value, AnyDiffError)

    def test_idempotent(self):
        """Test that canonical HTML canonicalizes to itself."""
        first = canonicalize('<div id="a" class="b"><p>x<br>y</p><!-- c --></div>', "html")
        second = canonicalize(first.text, "html")
        assert second.lines == first.lines
