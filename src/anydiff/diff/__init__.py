#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/diff/__init__.py
"""Alignment, marking and block assembly.

Key Features
------------
- Myers minimal edit scripts with compacted, deterministic edit runs
- Positional pairing of changed lines with token-level marks
- Configurable grouping of differences into path-located blocks

Examples
--------
    >>> from anydiff.canonical import canonicalize
    >>> from anydiff.diff import align, assemble_blocks
    >>> left = canonicalize("<a><b>1</b></a>", "html")
    >>> right = canonicalize("<a><b>2</b></a>", "html")
    >>> [block.locator for block in assemble_blocks(align(left, right), left, right)]
    ['/a/b']

"""

from anydiff.diff.aligner import align
from anydiff.diff.blocks import DiffBlock, assemble_blocks, fragment_path, lookbehind_context
from anydiff.diff.fragments import DiffCounts, Fragment, Mark, MarkedString
from anydiff.diff.marker import mark_pair, tokenize
from anydiff.diff.myers import DiffOp, diff_sequences
from anydiff.diff.result import Diff

__all__ = [
    "Diff",
    "DiffBlock",
    "DiffCounts",
    "DiffOp",
    "Fragment",
    "Mark",
    "MarkedString",
    "align",
    "assemble_blocks",
    "diff_sequences",
    "fragment_path",
    "lookbehind_context",
    "mark_pair",
    "tokenize",
]
