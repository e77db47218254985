#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/result.py
"""The outcome of one comparison."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from anydiff.canonical.base import CanonicalDocument
from anydiff.constants import DEFAULT_LEFT_LABEL, DEFAULT_RIGHT_LABEL, DiffState
from anydiff.diff.blocks import DiffBlock
from anydiff.diff.fragments import DiffCounts, Fragment


@dataclass(frozen=True)
class Diff:
    """Result of comparing two pieces of content.

    Parameters
    ----------
    blocks : tuple[DiffBlock, ...]
        Blocks that survived filtering, in document order
    fragments : tuple[Fragment, ...]
        The complete, unfiltered fragment cover of both documents
    left, right : CanonicalDocument
        The canonical documents that were aligned
    counts_before_filter : DiffCounts
        Difference counts before filters were applied
    counts : DiffCounts
        Difference counts over the surviving blocks
    left_label, right_label : str
        Display names of the two sides

    """

    blocks: tuple[DiffBlock, ...]
    fragments: tuple[Fragment, ...]
    left: CanonicalDocument
    right: CanonicalDocument
    counts_before_filter: DiffCounts
    counts: DiffCounts
    left_label: str = DEFAULT_LEFT_LABEL
    right_label: str = DEFAULT_RIGHT_LABEL

    @property
    def has_differences(self) -> bool:
        return bool(self.blocks)

    @property
    def state(self) -> DiffState:
        """Overall state: one side missing, changed or unchanged.

        A side whose canonical document is empty while the other is not counts
        as missing. Filtering can turn a changed comparison into an unchanged
        one, but never hides a missing side.
        """
        if not self.left.lines and self.right.lines:
            return "left_missing"
        if self.left.lines and not self.right.lines:
            return "right_missing"
        return "changed" if self.blocks else "unchanged"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready structure for report renderers."""
        return {
            "left": self.left_label,
            "right": self.right_label,
            "state": self.state,
            "format": {"left": self.left.content_format, "right": self.right.content_format},
            "counts": self.counts.to_dict(),
            "counts_before_filter": self.counts_before_filter.to_dict(),
            "blocks": [block.to_dict() for block in self.blocks],
        }
