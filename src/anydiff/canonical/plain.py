#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/plain.py
"""Plain text canonicalizer."""

from __future__ import annotations

from anydiff.canonical.base import CanonicalDocument, Canonicalizer, normalize_newlines


class PlainCanonicalizer(Canonicalizer):
    """Split text into lines with normalized terminators.

    A trailing line terminator does not produce an extra empty line, and
    whitespace-only input still yields its lines. With ``ignore_spaces`` the
    comparison key collapses whitespace runs while the display line is kept
    verbatim. Plain lines carry no structural path.
    """

    content_format = "plain"
    blank_is_empty = False

    def _canonicalize(self, raw: str) -> CanonicalDocument:
        lines = normalize_newlines(raw).split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        collector = self._collector()
        for line in lines:
            collector.add(line)
        return collector.build()
