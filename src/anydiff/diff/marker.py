#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/marker.py
"""Sub-line highlighting for changed line pairs.

Both lines are split into tokens (whitespace runs, word runs that include
``-`` and ``_``, tag brackets and single punctuation characters), the token
sequences are aligned with the same minimal-edit algorithm used for lines, and
every token run present on only one side is marked.

Examples
--------
    >>> left, right = mark_pair("    1", "    2")
    >>> left, right
    ((Mark(start=4, end=5),), (Mark(start=4, end=5),))

"""

from __future__ import annotations

import re
from typing import Iterable

from anydiff.diff.fragments import Mark
from anydiff.diff.myers import diff_sequences

_TOKEN_PATTERN = re.compile(r"\s+|[\w-]+|.", re.DOTALL)


def tokenize(text: str) -> list[str]:
    """Split ``text`` into tokens whose concatenation is ``text``.

    Examples
    --------
        >>> tokenize('<p class="x-y">')
        ['<', 'p', ' ', 'class', '=', '"', 'x-y', '"', '>']

    """
    return _TOKEN_PATTERN.findall(text)


def _merge(ranges: Iterable[tuple[int, int]]) -> tuple[Mark, ...]:
    merged: list[list[int]] = []
    for start, end in ranges:
        if end <= start:
            continue
        if merged and merged[-1][1] == start:
            merged[-1][1] = end
        else:
            merged.append([start, end])
    return tuple(Mark(start, end) for start, end in merged)


def mark_pair(left: str, right: str, ignore_spaces: bool = False) -> tuple[tuple[Mark, ...], tuple[Mark, ...]]:
    """Compute the marks for a changed line pair.

    Parameters
    ----------
    left, right : str
        Line contents without terminators
    ignore_spaces : bool, default False
        Treat every whitespace token as equal to every other

    Returns
    -------
    tuple[tuple[Mark, ...], tuple[Mark, ...]]
        Sorted, non-overlapping marks for the left and right line

    """
    left_tokens = tokenize(left)
    right_tokens = tokenize(right)
    left_offsets = _offsets(left_tokens)
    right_offsets = _offsets(right_tokens)

    left_ranges: list[tuple[int, int]] = []
    right_ranges: list[tuple[int, int]] = []
    for op in diff_sequences(_keys(left_tokens, ignore_spaces), _keys(right_tokens, ignore_spaces)):
        if op.tag == "equal":
            continue
        (i1, i2), (j1, j2) = op.old_range, op.new_range
        left_ranges.append((left_offsets[i1], left_offsets[i2]))
        right_ranges.append((right_offsets[j1], right_offsets[j2]))
    return _merge(left_ranges), _merge(right_ranges)


def _keys(tokens: list[str], ignore_spaces: bool) -> list[str]:
    if not ignore_spaces:
        return tokens
    return [" " if token.isspace() else token for token in tokens]


def _offsets(tokens: list[str]) -> list[int]:
    offsets = [0]
    for token in tokens:
        offsets.append(offsets[-1] + len(token))
    return offsets
