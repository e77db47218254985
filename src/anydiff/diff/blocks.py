#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/blocks.py
"""Grouping of difference fragments into location-tagged blocks.

Unchanged fragments always close the open block. Consecutive difference
fragments are merged according to the ``block_grouping`` policy:

``ancestor``
    Fragments merge while they share an element ancestor; the block path is
    the nearest common element ancestor of its fragments.
``element``
    A fragment joins the open block when its enclosing element equals or lies
    beneath the block path.
``node``
    A fragment joins only when its full path equals the block path.

Documents without paths (plain text) group every run of consecutive
differences into one block located by a unified-diff style line range.

A block that follows unchanged lines carries them as lookbehind context. For
markup the context reaches back to the nearest tag line, otherwise it is the
single preceding line; context longer than ``MAX_CONTEXT_LENGTH`` keeps its
first and last halves around an ellipsis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Sequence

from anydiff.canonical.base import CanonicalDocument, Path
from anydiff.constants import CONTEXT_ELLIPSIS, MARKUP_FORMATS, MAX_CONTEXT_LENGTH, BlockGrouping, ContentFormat
from anydiff.diff.fragments import DiffCounts, Fragment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffBlock:
    """A run of difference fragments located at one structural path.

    Parameters
    ----------
    path : Path or None
        Block location; ``None`` for documents without structure
    fragments : tuple[Fragment, ...]
        Ordered difference fragments
    fragment_paths : tuple[Path or None, ...]
        Path of the source line of each fragment, parallel to ``fragments``
    left_context, right_context : tuple[str, ...]
        Unchanged lines leading up to the block on each side

    """

    path: Optional[Path]
    fragments: tuple[Fragment, ...]
    fragment_paths: tuple[Optional[Path], ...] = ()
    left_context: tuple[str, ...] = ()
    right_context: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.fragment_paths:
            object.__setattr__(self, "fragment_paths", (self.path,) * len(self.fragments))
        if len(self.fragment_paths) != len(self.fragments):
            raise ValueError("fragment_paths must parallel fragments")

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def counts(self) -> DiffCounts:
        return DiffCounts.from_fragments(self.fragments)

    @property
    def left_range(self) -> tuple[int, int]:
        """Left line range spanned by the block."""
        return _span(fragment.left_range for fragment in self.fragments)

    @property
    def right_range(self) -> tuple[int, int]:
        """Right line range spanned by the block."""
        return _span(fragment.right_range for fragment in self.fragments)

    @property
    def locator(self) -> str:
        """Rendered path, or a line range such as ``-3,2 +3,1`` without one."""
        if self.path is not None:
            return str(self.path)
        return f"{_unified_range('-', self.left_range)} {_unified_range('+', self.right_range)}"

    def left_text(self, include_context: bool = False) -> str:
        """Left content of the block, optionally preceded by its context lines."""
        return _block_text(self.left_context if include_context else (), (f.left for f in self.fragments))

    def right_text(self, include_context: bool = False) -> str:
        """Right content of the block, optionally preceded by its context lines."""
        return _block_text(self.right_context if include_context else (), (f.right for f in self.fragments))

    def items(self) -> Iterable[tuple[Optional[Path], Fragment]]:
        """Yield ``(path, fragment)`` pairs."""
        return zip(self.fragment_paths, self.fragments)

    def with_fragments(self, pairs: Sequence[tuple[Optional[Path], Fragment]]) -> DiffBlock:
        """Return a copy holding only ``pairs``."""
        return replace(
            self,
            fragments=tuple(fragment for _, fragment in pairs),
            fragment_paths=tuple(path for path, _ in pairs),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "locator": self.locator,
            "path": None if self.path is None else str(self.path),
            "counts": self.counts.to_dict(),
            "left_range": list(self.left_range),
            "right_range": list(self.right_range),
            "context": {"left": list(self.left_context), "right": list(self.right_context)},
            "fragments": [fragment.to_dict() for fragment in self.fragments],
        }


def _span(ranges: Iterable[tuple[int, int]]) -> tuple[int, int]:
    ranges = list(ranges)
    if not ranges:
        return 0, 0
    return min(start for start, _ in ranges), max(end for _, end in ranges)


def _block_text(context: Iterable[str], spans: Iterable[Optional[str]]) -> str:
    return "".join(f"{line}\n" for line in context) + "".join(span for span in spans if span)


def _truncate_context(lines: Sequence[str], limit: int) -> tuple[str, ...]:
    if len(lines) <= limit:
        return tuple(lines)
    half = limit // 2
    return (*lines[:half], CONTEXT_ELLIPSIS, *lines[len(lines) - half :])


def _is_tag_line(line: str, content_format: ContentFormat) -> bool:
    return content_format in MARKUP_FORMATS and line.lstrip().startswith("<")


def lookbehind_context(
    fragment: Optional[Fragment],
    left: CanonicalDocument,
    right: CanonicalDocument,
    limit: int = MAX_CONTEXT_LENGTH,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Context lines an unchanged fragment contributes to the block after it.

    Returns
    -------
    tuple[tuple[str, ...], tuple[str, ...]]
        Left and right context lines; empty when ``fragment`` is not unchanged
        or ``limit`` is zero

    """
    if fragment is None or fragment.kind != "unchanged" or limit <= 0:
        return (), ()
    (i1, i2), (j1, j2) = fragment.left_range, fragment.right_range
    if i2 <= i1:
        return (), ()
    start = i2 - 1
    for index in range(i2 - 1, i1 - 1, -1):
        if _is_tag_line(left.lines[index], left.content_format):
            start = index
            break
    offset = start - i1
    return (
        _truncate_context(left.lines[start:i2], limit),
        _truncate_context(right.lines[j1 + offset : j2], limit),
    )


def _unified_range(sign: str, line_range: tuple[int, int]) -> str:
    start, end = line_range
    count = end - start
    # Empty ranges name the line before the insertion point, as unified diffs do
    return f"{sign}{start + 1 if count else start},{count}"


def fragment_path(fragment: Fragment, left: CanonicalDocument, right: CanonicalDocument) -> Optional[Path]:
    """Path of the source line of a fragment: the left line, or the right for additions."""
    path = None
    if fragment.kind != "added" and left.paths:
        path = left.paths[fragment.left_range[0]]
    if path is None and fragment.kind != "removed" and right.paths:
        path = right.paths[fragment.right_range[0]]
    return path


def _grouping_key(path: Path, grouping: BlockGrouping) -> Path:
    return path if grouping == "node" else path.element_path()


def _merge(block_path: Optional[Path], path: Optional[Path], grouping: BlockGrouping) -> tuple[bool, Optional[Path]]:
    """Decide whether a fragment at ``path`` joins a block at ``block_path``."""
    if block_path is None or path is None:
        return block_path is None and path is None, None
    key = _grouping_key(path, grouping)
    if grouping == "node":
        return key == block_path, block_path
    if grouping == "element":
        return block_path.contains(key), block_path
    shared = block_path.common_ancestor(key)
    return bool(shared), shared


def assemble_blocks(
    fragments: Sequence[Fragment],
    left: CanonicalDocument,
    right: CanonicalDocument,
    grouping: BlockGrouping = "ancestor",
    context_length: int = MAX_CONTEXT_LENGTH,
) -> tuple[DiffBlock, ...]:
    """Group consecutive difference fragments into blocks.

    Parameters
    ----------
    fragments : Sequence[Fragment]
        Complete fragment cover produced by the aligner
    left, right : CanonicalDocument
        The aligned documents, providing the path side tables
    grouping : {"ancestor", "element", "node"}, default "ancestor"
        Block grouping policy
    context_length : int, default MAX_CONTEXT_LENGTH
        Most lookbehind context lines per block side; 0 disables context

    Returns
    -------
    tuple[DiffBlock, ...]
        Blocks in document order

    """
    blocks: list[DiffBlock] = []
    pending: list[tuple[Optional[Path], Fragment]] = []
    block_path: Optional[Path] = None
    context: tuple[tuple[str, ...], tuple[str, ...]] = ((), ())
    previous: Optional[Fragment] = None

    def flush() -> None:
        if pending:
            blocks.append(
                DiffBlock(
                    block_path,
                    tuple(fragment for _, fragment in pending),
                    tuple(path for path, _ in pending),
                    *context,
                )
            )
            pending.clear()

    for fragment in fragments:
        if not fragment.is_difference:
            flush()
            previous = fragment
            continue
        path = fragment_path(fragment, left, right)
        if pending:
            joins, merged_path = _merge(block_path, path, grouping)
            if joins:
                block_path = merged_path
                pending.append((path, fragment))
                previous = fragment
                continue
            flush()
        block_path = None if path is None else _grouping_key(path, grouping)
        context = lookbehind_context(previous, left, right, context_length)
        pending.append((path, fragment))
        previous = fragment
    flush()

    logger.debug("Assembled %d blocks with %s grouping", len(blocks), grouping)
    return tuple(blocks)
