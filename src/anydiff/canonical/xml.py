#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/xml.py
"""XML canonicalizer.

XML is parsed strictly with the defusedxml minidom builder, so documents that
declare entities or reference external resources are rejected together with
malformed markup. The tree is re-serialized in the same one-unit-per-line
layout as HTML; elements without content render as ``<name/>``.

"""

from __future__ import annotations

import logging
from typing import Optional
from xml.dom import Node
from xml.dom.minidom import Element
from xml.parsers.expat import ExpatError

import defusedxml.minidom
from defusedxml import DefusedXmlException

from anydiff.canonical.base import (
    CanonicalDocument,
    Canonicalizer,
    LineCollector,
    Path,
    collapse_newlines,
    escape_text,
)
from anydiff.constants import COMMENT_STEP, PRIVILEGED_ATTRIBUTES, TEXT_STEP
from anydiff.exceptions import MalformedInputError

logger = logging.getLogger(__name__)


def attribute_rank(name: str) -> tuple[int, int, str]:
    """Sort key placing namespace declarations and well-known names first.

    Privileged names (``xmlns`` declarations, ``jcr:primaryType`` and similar)
    come first in their listed order, then prefixed names, then the rest, each
    group ordered alphabetically.
    """
    for position, prefix in enumerate(PRIVILEGED_ATTRIBUTES):
        if name.startswith(prefix):
            return 0, position, name
    return (1 if ":" in name else 2), 0, name


class XmlCanonicalizer(Canonicalizer):
    """Pretty-print XML into a canonical line form with element paths."""

    content_format = "xml"

    def _canonicalize(self, raw: str) -> CanonicalDocument:
        try:
            document = defusedxml.minidom.parseString(raw)
        except (ExpatError, DefusedXmlException) as e:
            raise MalformedInputError(f"XML could not be parsed: {e}", content_format="xml", original_error=e) from e

        collector = self._collector(strip_indent=True)
        try:
            self._append_children(collector, document, Path(), 0)
        finally:
            document.unlink()
        return collector.build()

    def _append_children(self, collector: LineCollector, parent: Node, path: Path, depth: int) -> None:
        counts: dict[str, int] = {}
        for child in parent.childNodes:
            if child.nodeType == Node.ELEMENT_NODE:
                counts[child.tagName] = counts.get(child.tagName, 0) + 1
                self._append_element(collector, child, path.child(child.tagName, counts[child.tagName]), depth)
            elif child.nodeType == Node.TEXT_NODE:
                if child.data.strip():
                    collector.add_text(escape_text(child.data), depth, path.child(TEXT_STEP))
            elif child.nodeType == Node.CDATA_SECTION_NODE:
                collector.add(f"<![CDATA[{collapse_newlines(child.data)}]]>", depth, path.child(TEXT_STEP))
            elif child.nodeType == Node.COMMENT_NODE:
                collector.add(f"<!--{collapse_newlines(child.data)}-->", depth, path.child(COMMENT_STEP))
            elif child.nodeType == Node.PROCESSING_INSTRUCTION_NODE:
                instruction = " ".join(part for part in (child.target, collapse_newlines(child.data)) if part)
                collector.add(f"<?{instruction}?>", depth, path.child("#pi"))
            elif child.nodeType == Node.DOCUMENT_TYPE_NODE:
                collector.add(collapse_newlines(child.toxml()), depth, path.child("#doctype"))

    def _append_element(self, collector: LineCollector, element: Element, path: Path, depth: int) -> None:
        name = element.tagName
        attributes = self._arrange(element)
        has_content = any(not _is_blank(child) for child in element.childNodes)
        if not has_content:
            collector.open_tag(name, attributes, depth, path, self_closing=True)
            return
        collector.open_tag(name, attributes, depth, path)
        self._append_children(collector, element, path, depth + 1)
        collector.close_tag(name, depth, path)

    def _arrange(self, element: Element) -> list[tuple[str, Optional[str]]]:
        attributes = list(element.attributes.items())
        if self.params.arrange_attributes:
            attributes.sort(key=lambda item: attribute_rank(item[0]))
        return attributes


def _is_blank(node: Node) -> bool:
    return node.nodeType == Node.TEXT_NODE and not node.data.strip()
