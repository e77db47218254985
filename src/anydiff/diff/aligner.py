#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/aligner.py
"""Line alignment of canonical documents.

The aligner compares the comparison keys of two canonical documents with the
minimal edit script from :mod:`anydiff.diff.myers` and turns the result into an
ordered fragment cover of both documents. Paths are not consulted here; they
travel alongside the documents to the block assembler.
"""

from __future__ import annotations

import logging
from typing import Optional

from anydiff.canonical.base import CanonicalDocument
from anydiff.diff.fragments import Fragment
from anydiff.diff.marker import mark_pair
from anydiff.diff.myers import diff_sequences, edit_distance
from anydiff.options import TaskParameters

logger = logging.getLogger(__name__)


def align(
    left: CanonicalDocument, right: CanonicalDocument, params: Optional[TaskParameters] = None
) -> tuple[Fragment, ...]:
    """Align two canonical documents into an ordered, complete fragment cover.

    Parameters
    ----------
    left, right : CanonicalDocument
        Documents to align; their comparison keys decide line equality
    params : TaskParameters, optional
        Comparison options; ``ignore_spaces`` also applies to sub-line marks

    Returns
    -------
    tuple[Fragment, ...]
        Fragments whose left spans concatenate to ``left.text`` and whose
        right spans concatenate to ``right.text``

    Notes
    -----
    Inside each gap between unchanged runs, lines are paired positionally as
    changed fragments; surplus left lines become removed fragments, followed
    by surplus right lines as added fragments.

    """
    params = params or TaskParameters()
    ops = diff_sequences(left.keys, right.keys)
    logger.debug("Aligned %d and %d lines with edit distance %d", len(left), len(right), edit_distance(ops))

    fragments: list[Fragment] = []
    for op in ops:
        (i1, i2), (j1, j2) = op.old_range, op.new_range
        if op.tag == "equal":
            fragments.append(Fragment("unchanged", left.span(i1, i2), right.span(j1, j2), (i1, i2), (j1, j2)))
            continue
        paired = min(i2 - i1, j2 - j1)
        for offset in range(paired):
            i, j = i1 + offset, j1 + offset
            left_marks, right_marks = mark_pair(left.lines[i], right.lines[j], params.ignore_spaces)
            fragments.append(
                Fragment(
                    "changed",
                    left.span(i, i + 1),
                    right.span(j, j + 1),
                    (i, i + 1),
                    (j, j + 1),
                    left_marks,
                    right_marks,
                )
            )
        insertion_point = j1 + paired
        for i in range(i1 + paired, i2):
            fragments.append(
                Fragment("removed", left.span(i, i + 1), None, (i, i + 1), (insertion_point, insertion_point))
            )
        for j in range(j1 + paired, j2):
            fragments.append(Fragment("added", None, right.span(j, j + 1), (i2, i2), (j, j + 1)))
    return tuple(fragments)
