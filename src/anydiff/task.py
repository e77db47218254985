#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/task.py
"""The comparison façade.

:func:`compare` binds the engine together: both sides are canonicalized, the
canonical documents are aligned, the fragments are grouped into blocks and the
blocks are filtered. A comparison is synchronous and keeps no state between
calls, so independent comparisons may run on separate threads while sharing
the same (frozen) parameters and filters.

Examples
--------
    >>> diff = compare("<a><b>1</b></a>", "<a><b>2</b></a>", content_format="html")
    >>> [block.locator for block in diff.blocks]
    ['/a/b']
    >>> diff.blocks[0].fragments[0].left_marked.marked
    ('1',)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from anydiff.canonical import canonicalize
from anydiff.canonical.base import CanonicalDocument
from anydiff.constants import DEFAULT_LEFT_LABEL, DEFAULT_RIGHT_LABEL, ContentFormat, Side
from anydiff.diff.aligner import align
from anydiff.diff.blocks import assemble_blocks
from anydiff.diff.fragments import DiffCounts
from anydiff.diff.result import Diff
from anydiff.exceptions import MalformedInputError
from anydiff.filters import Filter, FilterSpec, apply_filters
from anydiff.formats import detect_format
from anydiff.options import TaskParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonTask:
    """One comparison between two raw strings.

    Parameters
    ----------
    left, right : str
        Raw content of the two sides
    params : TaskParameters
        Comparison options
    filters : tuple[Filter, ...]
        AND-chain of filters applied to the blocks
    left_format, right_format : str or None
        Declared formats; detected from the content when None
    left_label, right_label : str
        Display names of the sides

    """

    left: str
    right: str
    params: TaskParameters = field(default_factory=TaskParameters)
    filters: tuple[Filter, ...] = ()
    left_format: Optional[ContentFormat] = None
    right_format: Optional[ContentFormat] = None
    left_label: str = DEFAULT_LEFT_LABEL
    right_label: str = DEFAULT_RIGHT_LABEL

    def run(self) -> Diff:
        """Execute the comparison.

        Returns
        -------
        Diff
            The comparison result

        Raises
        ------
        MalformedInputError
            If either side cannot be canonicalized; ``side`` names which one

        """
        left_format = self.left_format or detect_format(self.left, self.left_label)
        right_format = self.right_format or detect_format(self.right, self.right_label)

        left_doc = self._canonicalize(self.left, left_format, "left")
        if self.right == self.left and right_format == left_format:
            right_doc = left_doc
        else:
            right_doc = self._canonicalize(self.right, right_format, "right")

        fragments = align(left_doc, right_doc, self.params)
        blocks = assemble_blocks(fragments, left_doc, right_doc, self.params.block_grouping)
        counts_before = DiffCounts.combine(block.counts for block in blocks)
        surviving = apply_filters(blocks, self.filters)
        counts = DiffCounts.combine(block.counts for block in surviving)

        logger.debug(
            "Compared %s with %s: %d of %d blocks kept after filtering",
            self.left_label,
            self.right_label,
            len(surviving),
            len(blocks),
        )
        return Diff(
            blocks=surviving,
            fragments=fragments,
            left=left_doc,
            right=right_doc,
            counts_before_filter=counts_before,
            counts=counts,
            left_label=self.left_label,
            right_label=self.right_label,
        )

    def _canonicalize(self, raw: str, content_format: ContentFormat, side: Side) -> CanonicalDocument:
        try:
            return canonicalize(raw, content_format, self.params)
        except MalformedInputError as e:
            raise MalformedInputError(
                f"Malformed {content_format} content on the {side} side: {e.message}",
                content_format=content_format,
                side=side,
                original_error=e.original_error or e,
            ) from e


def compare(
    left: str,
    right: str,
    params: Optional[TaskParameters] = None,
    filters: FilterSpec = (),
    *,
    content_format: Optional[ContentFormat] = None,
    left_format: Optional[ContentFormat] = None,
    right_format: Optional[ContentFormat] = None,
    left_label: str = DEFAULT_LEFT_LABEL,
    right_label: str = DEFAULT_RIGHT_LABEL,
) -> Diff:
    """Compare two pieces of content.

    Parameters
    ----------
    left, right : str
        Raw content of the two sides
    params : TaskParameters, optional
        Comparison options; defaults when omitted
    filters : Filter or sequence of Filter, optional
        AND-chain of filters applied to the blocks
    content_format : {"plain", "html", "xml", "manifest"}, optional
        Format of both sides
    left_format, right_format : str, optional
        Per-side formats, taking precedence over ``content_format``
    left_label, right_label : str
        Display names, also used as file names for format detection

    Returns
    -------
    Diff
        Surviving blocks, the fragment cover, both canonical documents and
        counts before and after filtering

    Raises
    ------
    MalformedInputError
        If either side cannot be canonicalized under its format

    """
    if filters is None:
        chain: tuple[Filter, ...] = ()
    elif isinstance(filters, Filter):
        chain = (filters,)
    else:
        chain = tuple(filters)
    task = ComparisonTask(
        left=left,
        right=right,
        params=params or TaskParameters(),
        filters=chain,
        left_format=left_format or content_format,
        right_format=right_format or content_format,
        left_label=left_label,
        right_label=right_label,
    )
    return task.run()
