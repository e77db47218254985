#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/myers.py
"""Minimal edit scripts between two sequences.

Edit scripts are computed with Myers' O(ND) algorithm in its linear-space
form: common prefixes and suffixes are trimmed, the middle snake of the
remaining region is located by searching forwards and backwards at the same
time, and both halves are solved in turn.

A minimal edit script is rarely unique. Runs of edits are therefore slid over
equal neighbouring elements afterwards: runs are merged where possible so that
fewer, longer unchanged stretches result; a run that cannot merge is moved as
far down as possible so unchanged elements match as early as possible, unless
it can line up with a run of edits on the other side.

Examples
--------
    >>> [op.tag for op in diff_sequences("abc", "abd")]
    ['equal', 'replace']

"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Hashable, Literal, Sequence


@dataclass(slots=True)
class DiffOp:
    """Structured diff operation between two sequences."""

    tag: Literal["replace", "delete", "insert", "equal"]
    old_range: tuple[int, int]
    new_range: tuple[int, int]


def _middle_snake(
    a: Sequence[Hashable], b: Sequence[Hashable], a_lo: int, a_hi: int, b_lo: int, b_hi: int
) -> tuple[int, int]:
    """Find a point on a minimal edit path through ``a[a_lo:a_hi]`` and ``b[b_lo:b_hi]``.

    Diagonals are numbered ``k = x - y`` in absolute coordinates. The forward
    and backward searches each extend their furthest-reaching paths by one
    edit per round until they overlap.
    """
    diag_min = a_lo - b_hi
    diag_max = a_hi - b_lo
    offset = 1 - diag_min
    size = diag_max - diag_min + 3
    forward = [0] * size
    backward = [0] * size
    forward_mid = a_lo - b_lo
    backward_mid = a_hi - b_hi
    f_min = f_max = forward_mid
    b_min = b_max = backward_mid
    odd = (forward_mid - backward_mid) & 1
    forward[forward_mid + offset] = a_lo
    backward[backward_mid + offset] = a_hi
    below = -1
    above = sys.maxsize

    while True:
        # Extend the forward search by one edit
        if f_min > diag_min:
            f_min -= 1
            forward[f_min - 1 + offset] = below
        else:
            f_min += 1
        if f_max < diag_max:
            f_max += 1
            forward[f_max + 1 + offset] = below
        else:
            f_max -= 1
        for d in range(f_max, f_min - 1, -2):
            low = forward[d - 1 + offset]
            high = forward[d + 1 + offset]
            x = high if low < high else low + 1
            y = x - d
            while x < a_hi and y < b_hi and a[x] == b[y]:
                x += 1
                y += 1
            forward[d + offset] = x
            if odd and b_min <= d <= b_max and backward[d + offset] <= x:
                return x, y

        # Extend the backward search by one edit
        if b_min > diag_min:
            b_min -= 1
            backward[b_min - 1 + offset] = above
        else:
            b_min += 1
        if b_max < diag_max:
            b_max += 1
            backward[b_max + 1 + offset] = above
        else:
            b_max -= 1
        for d in range(b_max, b_min - 1, -2):
            low = backward[d - 1 + offset]
            high = backward[d + 1 + offset]
            x = low if low < high else high - 1
            y = x - d
            while x > a_lo and y > b_lo and a[x - 1] == b[y - 1]:
                x -= 1
                y -= 1
            backward[d + offset] = x
            if not odd and f_min <= d <= f_max and x <= forward[d + offset]:
                return x, y


def _compare(
    a: Sequence[Hashable],
    b: Sequence[Hashable],
    changed_a: list[bool],
    changed_b: list[bool],
) -> None:
    """Flag the elements of ``a`` and ``b`` that a minimal edit script touches.

    ``changed_a`` and ``changed_b`` are padded with a sentinel at each end, so
    element ``i`` is flagged at index ``i + 1``.
    """
    stack = [(0, len(a), 0, len(b))]
    while stack:
        a_lo, a_hi, b_lo, b_hi = stack.pop()
        while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
            a_lo += 1
            b_lo += 1
        while a_lo < a_hi and b_lo < b_hi and a[a_hi - 1] == b[b_hi - 1]:
            a_hi -= 1
            b_hi -= 1
        if a_lo == a_hi:
            for j in range(b_lo, b_hi):
                changed_b[j + 1] = True
        elif b_lo == b_hi:
            for i in range(a_lo, a_hi):
                changed_a[i + 1] = True
        else:
            x, y = _middle_snake(a, b, a_lo, a_hi, b_lo, b_hi)
            stack.append((x, a_hi, y, b_hi))
            stack.append((a_lo, x, b_lo, y))


def _shift_boundaries(items: Sequence[Hashable], changed: list[bool], other_changed: list[bool]) -> None:
    """Slide runs of edits over equal neighbours.

    Runs are merged with adjacent runs where sliding allows it, then moved as
    far down as possible, and finally moved back up to line up with a run of
    edits on the other side when one corresponds. Both flag lists are padded
    with a sentinel at each end.
    """
    end = len(items)
    i = j = 0
    while True:
        # Find the start of the next run, tracking the matching position on the other side
        while i < end and not changed[i + 1]:
            while other_changed[j + 1]:
                j += 1
            j += 1
            i += 1
        if i == end:
            break
        start = i
        i += 1
        while changed[i + 1]:
            i += 1
        while other_changed[j + 1]:
            j += 1

        while True:
            run_length = i - start
            # Slide up while the line above equals the last line of the run
            while start and items[start - 1] == items[i - 1]:
                start -= 1
                changed[start + 1] = True
                i -= 1
                changed[i + 1] = False
                while changed[start]:
                    start -= 1
                j -= 1
                while other_changed[j + 1]:
                    j -= 1
            corresponding = i if other_changed[j] else end
            # Slide down while the first line of the run equals the line below
            while i != end and items[start] == items[i]:
                changed[start + 1] = False
                start += 1
                changed[i + 1] = True
                i += 1
                while changed[i + 1]:
                    i += 1
                j += 1
                while other_changed[j + 1]:
                    corresponding = i
                    j += 1
            if run_length == i - start:
                break

        # Line the run up with a corresponding run of edits on the other side
        while corresponding < i:
            start -= 1
            changed[start + 1] = True
            i -= 1
            changed[i + 1] = False
            j -= 1
            while other_changed[j + 1]:
                j -= 1


def diff_sequences(a: Sequence[Hashable], b: Sequence[Hashable]) -> list[DiffOp]:
    """Compute a minimal, compacted edit script between two sequences.

    Parameters
    ----------
    a, b : Sequence[Hashable]
        Sequences to compare

    Returns
    -------
    list[DiffOp]
        Operations covering both sequences in order, in the style of
        ``difflib.SequenceMatcher.get_opcodes``

    """
    changed_a = [False] * (len(a) + 2)
    changed_b = [False] * (len(b) + 2)
    _compare(a, b, changed_a, changed_b)
    _shift_boundaries(a, changed_a, changed_b)
    _shift_boundaries(b, changed_b, changed_a)

    ops: list[DiffOp] = []
    i = j = 0
    while i < len(a) or j < len(b):
        if i < len(a) and j < len(b) and not changed_a[i + 1] and not changed_b[j + 1]:
            i_start, j_start = i, j
            while i < len(a) and j < len(b) and not changed_a[i + 1] and not changed_b[j + 1]:
                i += 1
                j += 1
            ops.append(DiffOp("equal", (i_start, i), (j_start, j)))
            continue
        i_start, j_start = i, j
        while i < len(a) and changed_a[i + 1]:
            i += 1
        while j < len(b) and changed_b[j + 1]:
            j += 1
        if i > i_start and j > j_start:
            tag: Literal["replace", "delete", "insert", "equal"] = "replace"
        elif i > i_start:
            tag = "delete"
        else:
            tag = "insert"
        ops.append(DiffOp(tag, (i_start, i), (j_start, j)))
    return ops


def edit_distance(ops: Sequence[DiffOp]) -> int:
    """Number of inserted plus deleted elements in an edit script."""
    return sum(
        (op.old_range[1] - op.old_range[0]) + (op.new_range[1] - op.new_range[0]) for op in ops if op.tag != "equal"
    )
