#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/options.py
"""Configuration options for a single comparison.

``TaskParameters`` is the immutable value object handed to every stage of the
comparison engine. The set of recognized options is closed: every option is a
named dataclass field, and :meth:`TaskParameters.from_mapping` rejects names
that are not part of the table.

Examples
--------
Compare while ignoring whitespace-only differences:

    >>> params = TaskParameters(ignore_spaces=True)
    >>> params.create_updated(block_grouping="node").block_grouping
    'node'

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from anydiff.constants import (
    BLOCK_GROUPINGS,
    DEFAULT_ARRANGE_ATTRIBUTES,
    DEFAULT_BLOCK_GROUPING,
    DEFAULT_HTML_PARSER,
    DEFAULT_IGNORE_SPACES,
    DEFAULT_MANIFEST_LINE_WIDTH,
    DEFAULT_NORMALIZE,
    MIN_MANIFEST_LINE_WIDTH,
    BlockGrouping,
    HtmlParser,
)

_HTML_PARSERS = ("html.parser", "html5lib", "lxml")


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TaskParameters(CloneFrozenMixin):
    """Options controlling canonicalization, alignment and block assembly.

    Parameters
    ----------
    ignore_spaces : bool, default False
        Treat lines that differ only in whitespace as equal. Display text keeps
        its original spacing; only the comparison key is normalized.
    normalize : bool, default True
        Pretty-print HTML and XML before comparing. When disabled, markup is
        compared line by line like plain text.
    arrange_attributes : bool, default True
        Sort markup attributes into a stable order.
    block_grouping : {"element", "node", "ancestor"}, default "ancestor"
        How consecutive differences are merged into blocks.
    manifest_line_width : int, default 72
        Column at which manifest headers are re-wrapped.
    split_manifest_lists : bool, default False
        Emit comma-separated manifest values one item per line.
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder used for HTML.

    """

    ignore_spaces: bool = field(
        default=DEFAULT_IGNORE_SPACES,
        metadata={
            "help": "Ignore whitespace-only differences while keeping original spacing for display",
            "importance": "core",
        },
    )
    normalize: bool = field(
        default=DEFAULT_NORMALIZE,
        metadata={
            "help": "Pretty-print HTML/XML into one logical unit per line before comparing",
            "importance": "core",
        },
    )
    arrange_attributes: bool = field(
        default=DEFAULT_ARRANGE_ATTRIBUTES,
        metadata={
            "help": "Sort element attributes into a stable order",
            "importance": "advanced",
        },
    )
    block_grouping: BlockGrouping = field(
        default=DEFAULT_BLOCK_GROUPING,
        metadata={
            "help": "Block grouping policy: 'ancestor' merges consecutive differences under their "
            "common element, 'element' groups by enclosing element, 'node' by exact path",
            "choices": list(BLOCK_GROUPINGS),
            "importance": "advanced",
        },
    )
    manifest_line_width: int = field(
        default=DEFAULT_MANIFEST_LINE_WIDTH,
        metadata={
            "help": "Column width used when re-wrapping manifest headers",
            "type": int,
            "importance": "advanced",
        },
    )
    split_manifest_lists: bool = field(
        default=False,
        metadata={
            "help": "Emit comma-separated manifest values one item per line",
            "importance": "advanced",
        },
    )
    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup parser used for HTML content",
            "choices": list(_HTML_PARSERS),
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.block_grouping not in BLOCK_GROUPINGS:
            raise ValueError(
                f"Invalid block_grouping: {self.block_grouping!r}. Must be one of {', '.join(BLOCK_GROUPINGS)}"
            )
        if self.html_parser not in _HTML_PARSERS:
            raise ValueError(f"Invalid html_parser: {self.html_parser!r}. Must be one of {', '.join(_HTML_PARSERS)}")
        if isinstance(self.manifest_line_width, bool) or not isinstance(self.manifest_line_width, int):
            raise ValueError(f"manifest_line_width must be an integer, got {self.manifest_line_width!r}")
        if self.manifest_line_width < MIN_MANIFEST_LINE_WIDTH:
            raise ValueError(
                f"manifest_line_width must be at least {MIN_MANIFEST_LINE_WIDTH}, got {self.manifest_line_width}"
            )

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        """Return the names of all recognized options in declaration order."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "TaskParameters":
        """Build parameters from a plain mapping such as a loaded config section.

        Parameters
        ----------
        values : Mapping[str, Any] or None
            Option names mapped to values. ``None`` yields the defaults.

        Returns
        -------
        TaskParameters
            Validated parameters

        Raises
        ------
        ValueError
            If a name is not a recognized option or a value is invalid.

        """
        if not values:
            return cls()
        known = set(cls.option_names())
        unknown = sorted(str(name) for name in values if name not in known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}. Recognized options: {', '.join(sorted(known))}")
        return cls(**dict(values))
