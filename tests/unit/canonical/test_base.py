#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for canonical/base.py shared types."""

import pytest

from anydiff.canonical import canonicalize, get_canonicalizer
from anydiff.canonical.base import (
    CanonicalDocument,
    LineCollector,
    Path,
    PathStep,
    collapse_newlines,
    comparison_key,
    dedent_lines,
)
from anydiff.options import TaskParameters


@pytest.mark.unit
class TestPath:
    """Tests for Path and PathStep."""

    def test_render_rooted(self):
        """Test XPath-style rendering with indexes only above one."""
        path = Path((PathStep("a"), PathStep("b", 2), PathStep("c", 1)))
        assert str(path) == "/a/b[2]/c"

    def test_render_unrooted(self):
        """Test rendering of unrooted paths."""
        assert str(Path((PathStep("Import-Package"),), rooted=False)) == "Import-Package"

    def test_parse_round_trip(self):
        """Test that parse() reads back a rendered path."""
        path = Path.parse("/catalog/items/item[2]/@id")
        assert path.steps[2] == PathStep("item", 2)
        assert str(path) == "/catalog/items/item[2]/@id"

    def test_parse_explicit_first_index(self):
        """Test that an explicit [1] index equals the bare step."""
        assert Path.parse("/a/b[1]") == Path.parse("/a/b")

    def test_contains_and_ancestor(self):
        """Test prefix relations."""
        parent = Path.parse("/a/b")
        child = Path.parse("/a/b/c")
        assert parent.contains(child)
        assert parent.contains(parent)
        assert parent.is_ancestor_of(child)
        assert not parent.is_ancestor_of(parent)
        assert not child.contains(parent)
        assert not Path.parse("/a/b[2]").contains(child)

    def test_rootedness_must_match(self):
        """Test that rooted and unrooted paths never contain each other."""
        assert not Path.parse("/a").contains(Path.parse("a"))

    def test_element_path(self):
        """Test that trailing attribute and node steps are dropped."""
        assert str(Path.parse("/a/b/@id").element_path()) == "/a/b"
        assert str(Path.parse("/a/b/#text").element_path()) == "/a/b"

    def test_common_ancestor(self):
        """Test the longest shared prefix."""
        assert str(Path.parse("/a/b/c").common_ancestor(Path.parse("/a/b/d"))) == "/a/b"
        assert not Path.parse("/a").common_ancestor(Path.parse("/b"))

    def test_child_and_parent(self):
        """Test one-step navigation."""
        path = Path().child("a").child("b", 3)
        assert str(path) == "/a/b[3]"
        assert str(path.parent()) == "/a"
        assert path.name == "b"


@pytest.mark.unit
class TestCanonicalDocument:
    """Tests for CanonicalDocument."""

    def test_side_tables_must_match(self):
        """Test that mismatched side tables are rejected."""
        with pytest.raises(ValueError):
            CanonicalDocument(lines=("a",), keys=(), paths=(None,), depths=(0,))

    def test_text_and_span(self):
        """Test newline-terminated text and spans."""
        doc = canonicalize("a\nb\nc")
        assert doc.text == "a\nb\nc\n"
        assert doc.span(1, 3) == "b\nc\n"
        assert doc.span(1, 1) == ""


@pytest.mark.unit
class TestLineCollector:
    """Tests for LineCollector."""

    def test_add_indents_by_depth(self):
        """Test two-space indentation per level."""
        collector = LineCollector("xml")
        collector.add("x", 2)
        assert collector.build().lines == ("    x",)

    def test_open_tag_many_attributes(self):
        """Test the multi-line layout for several attributes."""
        collector = LineCollector("xml")
        path = Path.parse("/e")
        collector.open_tag("e", [("a", "1"), ("b", None)], 0, path, self_closing=True)
        doc = collector.build()
        assert doc.lines == ("<e", '  a="1"', "  b", "/>")
        assert [str(p) for p in doc.paths] == ["/e", "/e/@a", "/e/@b", "/e"]

    def test_attribute_values_escaped(self):
        """Test that quotes and newlines in attribute values are normalized."""
        collector = LineCollector("html")
        collector.open_tag("e", [("t", 'say "hi"\nnow')], 0, Path.parse("/e"))
        assert collector.build().lines == ('<e t="say &quot;hi&quot; now">',)


@pytest.mark.unit
class TestHelpers:
    """Tests for the text helpers."""

    def test_comparison_key(self):
        """Test indent stripping and whitespace collapsing."""
        assert comparison_key("    a b", 2, strip_indent=True) == "a b"
        assert comparison_key("    a \t b ", 2, ignore_spaces=True) == "a b"
        assert comparison_key("    ab", 2, ignore_spaces=True) == "ab"
        assert comparison_key("    a b", 2) == "    a b"

    def test_dedent_lines(self):
        """Test common margin removal and blank line dropping."""
        assert list(dedent_lines("\n   x\n\n     y\n")) == ["x", "  y"]

    def test_collapse_newlines(self):
        """Test folding of multi-line values."""
        assert collapse_newlines(" a\n   b\r\nc ") == "a b c"


@pytest.mark.unit
class TestRegistry:
    """Tests for the canonicalizer registry."""

    def test_unknown_format(self):
        """Test that an unknown format is rejected."""
        with pytest.raises(ValueError):
            get_canonicalizer("yaml")

    def test_params_passed_through(self):
        """Test that parameters reach the canonicalizer."""
        params = TaskParameters(manifest_line_width=20)
        assert get_canonicalizer("manifest", params).params is params
