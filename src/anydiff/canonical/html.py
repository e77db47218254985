#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/html.py
"""HTML canonicalizer.

Parses HTML with BeautifulSoup (tolerant of minor malformedness) and
re-serializes it with one logical unit per line: opening tag, attribute (when
an element carries several), text line, comment or doctype, closing tag.

Examples
--------
    >>> doc = HtmlCanonicalizer().canonicalize("<a><b>1</b></a>")
    >>> doc.lines
    ('<a>', '  <b>', '    1', '  </b>', '</a>')
    >>> str(doc.paths[2])
    '/a/b/#text'

"""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Comment, NavigableString, PageElement, PreformattedString, Tag
from bs4.exceptions import FeatureNotFound

from anydiff.canonical.base import (
    CanonicalDocument,
    Canonicalizer,
    LineCollector,
    Path,
    collapse_newlines,
    escape_text,
)
from anydiff.constants import (
    COMMENT_STEP,
    RAW_TEXT_ELEMENTS,
    SELF_CLOSING_ELEMENTS,
    TEXT_STEP,
    VOID_ELEMENTS,
)
from anydiff.exceptions import MalformedInputError

logger = logging.getLogger(__name__)


class HtmlCanonicalizer(Canonicalizer):
    """Pretty-print HTML into a canonical line form with element paths."""

    content_format = "html"

    def _canonicalize(self, raw: str) -> CanonicalDocument:
        try:
            # Keep class and rel as plain strings so attribute output is verbatim
            soup = BeautifulSoup(raw, self.params.html_parser, multi_valued_attributes=None)
        except FeatureNotFound as e:
            raise MalformedInputError(
                f"HTML parser {self.params.html_parser!r} is not installed: {e}",
                content_format="html",
                original_error=e,
            ) from e
        except ParserRejectedMarkup as e:
            raise MalformedInputError(f"HTML could not be parsed: {e}", content_format="html", original_error=e) from e

        collector = self._collector(strip_indent=True)
        self._append_children(collector, soup, Path(), 0)
        return collector.build()

    def _append_children(self, collector: LineCollector, parent: Tag, path: Path, depth: int) -> None:
        counts: dict[str, int] = {}
        for child in parent.children:
            if isinstance(child, Tag):
                counts[child.name] = counts.get(child.name, 0) + 1
                self._append_element(collector, child, path.child(child.name, counts[child.name]), depth)
            else:
                self._append_node(collector, child, parent, path, depth)

    def _append_node(self, collector: LineCollector, node: PageElement, parent: Tag, path: Path, depth: int) -> None:
        if isinstance(node, PreformattedString):
            # Comments, doctypes, CDATA and processing instructions
            rendered = collapse_newlines(node.output_ready())
            step = COMMENT_STEP if isinstance(node, Comment) else f"#{type(node).__name__.lower()}"
            collector.add(rendered, depth, path.child(step))
        elif isinstance(node, NavigableString):
            text = str(node)
            if not text.strip():
                return
            if parent.name not in RAW_TEXT_ELEMENTS:
                text = escape_text(text)
            collector.add_text(text, depth, path.child(TEXT_STEP))

    def _append_element(self, collector: LineCollector, element: Tag, path: Path, depth: int) -> None:
        name = element.name
        attributes = self._arrange(element)
        has_content = any(not _is_blank(child) for child in element.children)

        if name in VOID_ELEMENTS and not has_content:
            collector.open_tag(name, attributes, depth, path)
            return
        if name in SELF_CLOSING_ELEMENTS and not has_content:
            collector.open_tag(name, attributes, depth, path, self_closing=True)
            return

        collector.open_tag(name, attributes, depth, path)
        self._append_children(collector, element, path, depth + 1)
        collector.close_tag(name, depth, path)

    def _arrange(self, element: Tag) -> list[tuple[str, Optional[str]]]:
        attributes = [(key, _attribute_value(value)) for key, value in element.attrs.items()]
        if self.params.arrange_attributes:
            attributes.sort(key=lambda item: item[0])
        return attributes


def _attribute_value(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def _is_blank(node: PageElement) -> bool:
    return (
        isinstance(node, NavigableString)
        and not isinstance(node, PreformattedString)
        and not str(node).strip()
    )
