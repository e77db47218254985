#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/fragments.py
"""Fragment and mark data model.

A comparison produces an ordered cover of both canonical documents made of
:class:`Fragment` values. Unchanged fragments span maximal runs of equal
lines; added, removed and changed fragments span exactly one line (or one
line pair). Changed fragments carry :class:`Mark` ranges that highlight the
sub-strings differing from their counterpart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from anydiff.constants import FRAGMENT_KINDS, FragmentKind


@dataclass(frozen=True, slots=True)
class Mark:
    """Half-open ``[start, end)`` character range flagged as different."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid mark range [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


def validate_marks(marks: Iterable[Mark], length: int) -> tuple[Mark, ...]:
    """Check that marks are sorted, non-overlapping and within ``length``.

    Returns
    -------
    tuple[Mark, ...]
        The marks as a tuple

    Raises
    ------
    ValueError
        If any mark breaks ordering or bounds

    """
    result = tuple(marks)
    previous_end = 0
    for mark in result:
        if mark.start < previous_end:
            raise ValueError(f"Marks overlap or are out of order at [{mark.start}, {mark.end})")
        if mark.end > length:
            raise ValueError(f"Mark [{mark.start}, {mark.end}) exceeds content length {length}")
        previous_end = mark.end
    return result


@dataclass(frozen=True)
class MarkedString:
    """Text together with the marks highlighting its differing sub-strings.

    Examples
    --------
        >>> marked = MarkedString("value 1", (Mark(6, 7),))
        >>> list(marked.segments())
        [('value ', False), ('1', True)]

    """

    text: str
    marks: tuple[Mark, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "marks", validate_marks(self.marks, len(self.text)))

    def segments(self) -> Iterator[tuple[str, bool]]:
        """Yield ``(substring, is_marked)`` pairs covering the whole text."""
        position = 0
        for mark in self.marks:
            if mark.start > position:
                yield self.text[position : mark.start], False
            yield self.text[mark.start : mark.end], True
            position = mark.end
        if position < len(self.text):
            yield self.text[position:], False

    @property
    def marked(self) -> tuple[str, ...]:
        """The marked sub-strings in order."""
        return tuple(self.text[mark.start : mark.end] for mark in self.marks)


@dataclass(frozen=True)
class DiffCounts:
    """Per-kind difference counts."""

    added: int = 0
    removed: int = 0
    changed: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed

    def __bool__(self) -> bool:
        return self.total > 0

    def __add__(self, other: DiffCounts) -> DiffCounts:
        return DiffCounts(self.added + other.added, self.removed + other.removed, self.changed + other.changed)

    @classmethod
    def from_fragments(cls, fragments: Iterable[Fragment]) -> DiffCounts:
        """Count the difference fragments among ``fragments``."""
        counts = {"added": 0, "removed": 0, "changed": 0}
        for fragment in fragments:
            if fragment.kind in counts:
                counts[fragment.kind] += 1
        return cls(**counts)

    @classmethod
    def combine(cls, items: Iterable[DiffCounts]) -> DiffCounts:
        total = cls()
        for item in items:
            total = total + item
        return total

    def to_dict(self) -> dict[str, int]:
        return {"added": self.added, "removed": self.removed, "changed": self.changed}


@dataclass(frozen=True)
class Fragment:
    """One unit of the alignment between two canonical documents.

    Parameters
    ----------
    kind : {"unchanged", "added", "removed", "changed"}
        Classification of the fragment
    left : str or None
        Left canonical text covered by the fragment (lines with terminators);
        ``None`` for added fragments
    right : str or None
        Right canonical text; ``None`` for removed fragments
    left_range : tuple[int, int]
        ``[start, end)`` left line range. Added fragments carry an empty range
        positioned at the insertion point.
    right_range : tuple[int, int]
        ``[start, end)`` right line range; empty for removed fragments
    left_marks, right_marks : tuple[Mark, ...]
        Character ranges that differ, only for changed fragments

    """

    kind: FragmentKind
    left: Optional[str]
    right: Optional[str]
    left_range: tuple[int, int]
    right_range: tuple[int, int]
    left_marks: tuple[Mark, ...] = ()
    right_marks: tuple[Mark, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in FRAGMENT_KINDS:
            raise ValueError(f"Invalid fragment kind: {self.kind!r}")
        if (self.left is None) != (self.kind == "added"):
            raise ValueError(
                f"A {self.kind} fragment {'must not' if self.kind == 'added' else 'must'} have left content"
            )
        if (self.right is None) != (self.kind == "removed"):
            raise ValueError(
                f"A {self.kind} fragment {'must not' if self.kind == 'removed' else 'must'} have right content"
            )
        for name, (start, end) in (("left_range", self.left_range), ("right_range", self.right_range)):
            if start < 0 or end < start:
                raise ValueError(f"Invalid {name}: [{start}, {end})")
        if self.kind != "changed" and (self.left_marks or self.right_marks):
            raise ValueError("Only changed fragments carry marks")
        object.__setattr__(self, "left_marks", validate_marks(self.left_marks, len(self.left or "")))
        object.__setattr__(self, "right_marks", validate_marks(self.right_marks, len(self.right or "")))

    @property
    def is_difference(self) -> bool:
        return self.kind != "unchanged"

    @property
    def left_text(self) -> Optional[str]:
        """Left content without the trailing line terminator."""
        return None if self.left is None else self.left.removesuffix("\n")

    @property
    def right_text(self) -> Optional[str]:
        """Right content without the trailing line terminator."""
        return None if self.right is None else self.right.removesuffix("\n")

    @property
    def left_marked(self) -> Optional[MarkedString]:
        return None if self.left_text is None else MarkedString(self.left_text, self.left_marks)

    @property
    def right_marked(self) -> Optional[MarkedString]:
        return None if self.right_text is None else MarkedString(self.right_text, self.right_marks)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        result: dict[str, Any] = {
            "kind": self.kind,
            "left": self.left_text,
            "right": self.right_text,
            "left_range": list(self.left_range),
            "right_range": list(self.right_range),
        }
        if self.kind == "changed":
            result["left_marks"] = [[mark.start, mark.end] for mark in self.left_marks]
            result["right_marks"] = [[mark.start, mark.end] for mark in self.right_marks]
        return result
