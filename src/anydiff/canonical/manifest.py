#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/manifest.py
"""Manifest canonicalizer.

JAR-style manifests wrap long headers onto continuation lines that begin with
a single space. The canonical form joins every header onto one logical line,
normalizes it to ``Key: value`` and wraps it again at a fixed width, so two
manifests that differ only in where their lines were broken compare equal.

Examples
--------
    >>> raw = "Import-Package: org.a,org.\\n b\\n"
    >>> ManifestCanonicalizer().canonicalize(raw).lines
    ('Import-Package: org.a,org.b',)

"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from anydiff.canonical.base import (
    CanonicalDocument,
    Canonicalizer,
    LineCollector,
    Path,
    PathStep,
    normalize_newlines,
)
from anydiff.constants import MANIFEST_CONTINUATION, MANIFEST_SECTION_KEY

logger = logging.getLogger(__name__)


def join_continuations(raw: str) -> list[str]:
    """Join continuation lines onto the header they continue.

    Blank lines are kept as section separators.
    """
    logical: list[str] = []
    for line in normalize_newlines(raw).split("\n"):
        if line.startswith(MANIFEST_CONTINUATION) and logical and logical[-1].strip():
            logical[-1] += line[len(MANIFEST_CONTINUATION) :]
        else:
            logical.append(line)
    return logical


def split_list(value: str) -> list[str]:
    """Split a comma-separated header value, ignoring commas inside quotes.

    Examples
    --------
        >>> split_list('a;version="[1,2)",b')
        ['a;version="[1,2)"', 'b']

    """
    items: list[str] = []
    current: list[str] = []
    quoted = False
    for char in value:
        if char == '"':
            quoted = not quoted
        if char == "," and not quoted:
            items.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    items.append("".join(current).strip())
    return [item for item in items if item]


def wrap_header(line: str, width: int) -> Iterator[str]:
    """Wrap a logical header line at ``width`` characters.

    Continuation lines begin with a single space, which counts towards the
    width but is not part of the header value.
    """
    yield line[:width]
    rest = line[width:]
    chunk = width - len(MANIFEST_CONTINUATION)
    while rest:
        yield MANIFEST_CONTINUATION + rest[:chunk]
        rest = rest[chunk:]


class ManifestCanonicalizer(Canonicalizer):
    """Normalize manifest headers to one wrapped ``Key: value`` entry each.

    Headers inside a named section (one that starts with ``Name: x``) get the
    path ``x/Key``; main-section headers use the bare key. With
    ``split_manifest_lists`` comma-separated values are written one sorted item
    per continuation line.
    """

    content_format = "manifest"

    def _canonicalize(self, raw: str) -> CanonicalDocument:
        collector = self._collector()
        section: Optional[str] = None
        pending_blank = False

        for line in join_continuations(raw):
            if not line.strip():
                # Consecutive separators collapse; leading and trailing ones are dropped
                pending_blank = len(collector) > 0
                section = None
                continue
            if pending_blank:
                collector.add("")
                pending_blank = False

            # A continuation with nothing to continue is read as a header of its own
            line = line.strip()
            key, sep, value = line.partition(":")
            if not sep or not key or key != key.rstrip():
                collector.add(line)
                continue
            value = value.strip()
            if key == MANIFEST_SECTION_KEY:
                section = value
                path = Path((PathStep(value),), rooted=False)
            elif section:
                path = Path((PathStep(section), PathStep(key)), rooted=False)
            else:
                path = Path((PathStep(key),), rooted=False)
            self._append_header(collector, key, value, path)

        return collector.build()

    def _append_header(self, collector: LineCollector, key: str, value: str, path: Path) -> None:
        # Items are only reordered when every quote is closed
        balanced = value.count('"') % 2 == 0
        items = sorted(split_list(value)) if self.params.split_manifest_lists and balanced else []
        if len(items) > 1:
            collector.add(f"{key}:", 0, path)
            for position, item in enumerate(items):
                suffix = "," if position < len(items) - 1 else ""
                # Indented by two spaces: the continuation marker plus the space kept after joining
                collector.add(f"{item}{suffix}", 1, path)
            return
        header = f"{key}: {value}" if value else f"{key}:"
        for part in wrap_header(header, self.params.manifest_line_width):
            collector.add(part, 0, path)
