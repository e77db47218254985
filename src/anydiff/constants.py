#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/constants.py
"""Constants and default values for anydiff.

This module centralizes the type aliases, defaults and markup vocabulary used
across the comparison engine.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Comparison Defaults - Option defaults shared by TaskParameters
3. Markup Vocabulary - Element sets and line tokens for HTML/XML output
4. Manifest Vocabulary - Header layout constants
5. Format Detection - File extensions and MIME fragments
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

ContentFormat = Literal["plain", "html", "xml", "manifest"]
FragmentKind = Literal["unchanged", "added", "removed", "changed"]
BlockGrouping = Literal["element", "node", "ancestor"]
DiffState = Literal["unchanged", "changed", "left_missing", "right_missing"]
Side = Literal["left", "right"]
FilterSide = Literal["left", "right", "either", "both"]
PathSyntax = Literal["exact", "glob", "regex"]
HtmlParser = Literal["html.parser", "html5lib", "lxml"]

CONTENT_FORMATS: tuple[ContentFormat, ...] = ("plain", "html", "xml", "manifest")
FRAGMENT_KINDS: tuple[FragmentKind, ...] = ("unchanged", "added", "removed", "changed")
DIFFERENCE_KINDS: tuple[FragmentKind, ...] = ("added", "removed", "changed")
BLOCK_GROUPINGS: tuple[BlockGrouping, ...] = ("element", "node", "ancestor")

# =============================================================================
# Comparison Defaults
# =============================================================================

DEFAULT_IGNORE_SPACES = False
DEFAULT_NORMALIZE = True
DEFAULT_ARRANGE_ATTRIBUTES = True
DEFAULT_BLOCK_GROUPING: BlockGrouping = "ancestor"
DEFAULT_HTML_PARSER: HtmlParser = "html.parser"
DEFAULT_INDENT = 2

DEFAULT_LEFT_LABEL = "left"
DEFAULT_RIGHT_LABEL = "right"

# Unchanged lines shown ahead of a block; longer context keeps both ends around the ellipsis
MAX_CONTEXT_LENGTH = 8
CONTEXT_ELLIPSIS = "..."
MARKUP_FORMATS: tuple[ContentFormat, ...] = ("html", "xml")

# =============================================================================
# Markup Vocabulary
# =============================================================================

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# SVG shapes are written as self-closing tags when they have no children
SELF_CLOSING_ELEMENTS = frozenset({"circle", "ellipse", "line", "path", "polygon", "polyline", "rect"})

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# Attributes listed here are written first, in this order
PRIVILEGED_ATTRIBUTES = (
    "xmlns",
    "jcr:primaryType",
    "sling:resourceType",
    "sling:resourceSuperType",
    "jcr:title",
    "jcr:description",
)

TAG_OPEN = "<"
TAG_CLOSE = ">"
TAG_PRE_CLOSE = "</"
TAG_AUTO_CLOSE = "/>"

TEXT_STEP = "#text"
COMMENT_STEP = "#comment"
ATTRIBUTE_STEP_PREFIX = "@"

# =============================================================================
# Manifest Vocabulary
# =============================================================================

# JAR manifest lines are limited to 72 bytes; we wrap by characters
DEFAULT_MANIFEST_LINE_WIDTH = 72
MIN_MANIFEST_LINE_WIDTH = 10
MANIFEST_CONTINUATION = " "
MANIFEST_SECTION_KEY = "Name"
MANIFEST_VERSION_KEY = "Manifest-Version"

# =============================================================================
# Format Detection
# =============================================================================

HTML_EXTENSIONS = frozenset({".htm", ".html", ".htl", ".xhtml"})
XML_EXTENSIONS = frozenset({".xml", ".xsd", ".xsl", ".xslt", ".svg", ".pom", ".rss", ".atom"})
MANIFEST_EXTENSIONS = frozenset({".mf"})
MANIFEST_FILENAMES = frozenset({"manifest.mf"})
