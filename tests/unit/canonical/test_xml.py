#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for canonical/xml.py XmlCanonicalizer."""

import pytest

from anydiff.canonical import XmlCanonicalizer, canonicalize
from anydiff.canonical.xml import attribute_rank
from anydiff.exceptions import MalformedInputError
from anydiff.options import TaskParameters


def _paths(doc):
    return [None if path is None else str(path) for path in doc.paths]


@pytest.mark.unit
class TestAttributeRank:
    """Tests for attribute_rank() ordering."""

    def test_privileged_names_first(self):
        """Test that namespace declarations and well-known names lead."""
        names = ["title", "jcr:title", "sling:resourceType", "xmlns:jcr", "jcr:primaryType", "a:b"]
        assert sorted(names, key=attribute_rank) == [
            "xmlns:jcr",
            "jcr:primaryType",
            "sling:resourceType",
            "jcr:title",
            "a:b",
            "title",
        ]

    def test_plain_names_alphabetical(self):
        """Test that unprefixed names sort alphabetically."""
        assert sorted(["b", "c", "a"], key=attribute_rank) == ["a", "b", "c"]


@pytest.mark.unit
class TestXmlCanonicalizer:
    """Tests for the XmlCanonicalizer class."""

    def test_nested_elements(self):
        """Test one unit per line, indented by depth."""
        doc = canonicalize("<a><b>1</b></a>", "xml")
        assert doc.lines == ("<a>", "  <b>", "    1", "  </b>", "</a>")
        assert _paths(doc) == ["/a", "/a/b", "/a/b/#text", "/a/b", "/a"]

    def test_empty_element_self_closes(self):
        """Test that elements without content render as self-closing tags."""
        doc = canonicalize('<a><b/><c x="1"></c></a>', "xml")
        assert doc.lines == ("<a>", "  <b/>", '  <c x="1"/>', "</a>")

    def test_sibling_index_paths(self):
        """Test XPath-style indexes for repeated siblings."""
        raw = "<catalog><items><item><title>A</title></item><item><title>B</title></item></items></catalog>"
        doc = canonicalize(raw, "xml")
        assert "/catalog/items/item[2]/title" in _paths(doc)
        assert "/catalog/items/item/title" in _paths(doc)

    def test_attributes_arranged(self):
        """Test privileged attribute ordering on separate lines."""
        raw = '<node title="t" jcr:primaryType="nt:unstructured" xmlns:jcr="urn:jcr"/>'
        doc = canonicalize(raw, "xml")
        assert doc.lines == (
            "<node",
            '  xmlns:jcr="urn:jcr"',
            '  jcr:primaryType="nt:unstructured"',
            '  title="t"',
            "/>",
        )
        assert _paths(doc)[2] == "/node/@jcr:primaryType"

    def test_declaration_is_dropped(self):
        """Test that the XML declaration does not produce a line."""
        doc = canonicalize('<?xml version="1.0" encoding="UTF-8"?>\n<a/>', "xml")
        assert doc.lines == ("<a/>",)

    def test_comment_cdata_and_pi(self):
        """Test comments, CDATA sections and processing instructions."""
        raw = "<a><!-- one\n two --><![CDATA[x < y]]><?render fast?></a>"
        doc = canonicalize(raw, "xml")
        assert doc.lines[1:4] == ("  <!--one two-->", "  <![CDATA[x < y]]>", "  <?render fast?>")
        assert _paths(doc)[1:4] == ["/a/#comment", "/a/#text", "/a/#pi"]

    def test_text_escaped(self):
        """Test that text content is re-escaped."""
        doc = canonicalize("<a>x &amp; y</a>", "xml")
        assert doc.lines[1] == "  x &amp; y"

    def test_malformed_raises(self):
        """Test that malformed XML raises MalformedInputError."""
        with pytest.raises(MalformedInputError) as exc_info:
            XmlCanonicalizer().canonicalize("<a><b></a>")
        assert exc_info.value.content_format == "xml"

    def test_entity_declarations_rejected(self):
        """Test that entity declarations are refused."""
        raw = '<!DOCTYPE a [<!ENTITY e "boom">]><a>&e;</a>'
        with pytest.raises(MalformedInputError):
            XmlCanonicalizer().canonicalize(raw)

    def test_whitespace_layout_is_irrelevant(self):
        """Test that pretty-printed and compact XML canonicalize identically."""
        compact = canonicalize('<a><b k="v">t</b></a>', "xml")
        spread = canonicalize('<a>\n\t<b   k="v">\n\t\tt\n\t</b>\n</a>\n', "xml")
        assert compact.lines == spread.lines

    def test_no_normalize(self):
        """Test that normalize=False compares XML as plain text."""
        doc = canonicalize("<a>\n<b/></a>", "xml", TaskParameters(normalize=False))
        assert doc.lines == ("<a>", "<b/></a>")

    def test_idempotent(self):
        """Test that canonical XML canonicalizes to itself."""
        first = canonicalize('<r xmlns:x="u"><x:a b="1" c="2">t</x:a><e/></r>', "xml")
        second = canonicalize(first.text, "xml")
        assert second.lines == first.lines
