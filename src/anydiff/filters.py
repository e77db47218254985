#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/filters.py
"""Filters that suppress uninteresting differences.

A filter is a frozen predicate over ``(path, fragment)`` that returns True to
keep the fragment. Filters form a small closed algebra:

- :class:`PathFilter` matches fragments located at or beneath a path
- :class:`ContentFilter` matches fragments whose line content matches a regex
- :class:`KindFilter` matches fragments of the given kinds
- :class:`Not`, :class:`AllOf` and :class:`AnyOf` combine filters
- :class:`FirstMatch` is an ordered rule list where the first matching rule
  decides; it is the only construct whose outcome depends on order

Every pattern is compiled when the filter is constructed, so an invalid
definition raises :class:`~anydiff.exceptions.FilterConfigurationError` before
any comparison starts.

Examples
--------
Drop every difference inside ``/html/head`` and blank-line insertions:

    >>> filters = [exclude_paths("/html/head"), skip_blank_lines()]
    >>> kept = apply_filters(blocks, filters)  # doctest: +SKIP

"""

from __future__ import annotations

import fnmatch
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from anydiff.canonical.base import Path
from anydiff.constants import FRAGMENT_KINDS, FilterSide, FragmentKind, PathSyntax
from anydiff.diff.blocks import DiffBlock
from anydiff.diff.fragments import Fragment
from anydiff.exceptions import FilterConfigurationError

logger = logging.getLogger(__name__)

_PATH_SYNTAXES = ("exact", "glob", "regex")
_SIDES = ("left", "right", "either", "both")


class Filter(ABC):
    """Abstract predicate deciding whether a difference fragment is kept."""

    @abstractmethod
    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        """Return True to keep ``fragment`` located at ``path``."""

    def __call__(self, path: Optional[Path], fragment: Fragment) -> bool:
        return self.accepts(path, fragment)

    def __invert__(self) -> Not:
        return Not(self)

    def __and__(self, other: Filter) -> AllOf:
        return AllOf((self, other))

    def __or__(self, other: Filter) -> AnyOf:
        return AnyOf((self, other))


def _compile(pattern: str, parameter_name: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise FilterConfigurationError(
            f"Invalid regular expression for {parameter_name}: {e}",
            parameter_name=parameter_name,
            parameter_value=pattern,
            original_error=e,
        ) from e


@dataclass(frozen=True)
class PathFilter(Filter):
    """Match fragments located at ``pattern`` or anywhere beneath it.

    Parameters
    ----------
    pattern : str
        Path such as ``/a/b[2]`` (``exact``), a glob such as ``/a/*``
        (``glob``; square brackets are literal) or a regular expression
        (``regex``) matched against the whole rendered path
    syntax : {"exact", "glob", "regex"}, default "exact"
        How ``pattern`` is interpreted

    Notes
    -----
    Glob and regex patterns are tried against the fragment path and each of
    its ancestors, so ``/a/b`` also matches text and attributes of ``b``.
    Fragments without a path never match.

    """

    pattern: str
    syntax: PathSyntax = "exact"
    _compiled: Optional[re.Pattern[str]] = field(default=None, init=False, repr=False, compare=False)
    _path: Optional[Path] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.syntax not in _PATH_SYNTAXES:
            raise FilterConfigurationError(
                f"Invalid path syntax: {self.syntax!r}. Must be one of {', '.join(_PATH_SYNTAXES)}",
                parameter_name="syntax",
                parameter_value=self.syntax,
            )
        if not isinstance(self.pattern, str) or not self.pattern:
            raise FilterConfigurationError(
                "Path pattern must be a non-empty string", parameter_name="path", parameter_value=self.pattern
            )
        if self.syntax == "exact":
            object.__setattr__(self, "_path", Path.parse(self.pattern))
        elif self.syntax == "glob":
            # Sibling indexes use square brackets, so they are not character classes here
            translated = fnmatch.translate(self.pattern.replace("[", "[[]"))
            object.__setattr__(self, "_compiled", _compile(translated, "path"))
        else:
            object.__setattr__(self, "_compiled", _compile(self.pattern, "path"))

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        if path is None:
            return False
        if self._path is not None:
            return self._path.contains(path)
        assert self._compiled is not None
        candidate = path
        while True:
            if self._compiled.fullmatch(str(candidate)):
                return True
            if not candidate:
                return False
            candidate = candidate.parent()


@dataclass(frozen=True)
class ContentFilter(Filter):
    """Match fragments whose line content contains a match for ``pattern``.

    Parameters
    ----------
    pattern : str
        Regular expression searched in the line content (without terminator)
    side : {"left", "right", "either", "both"}, default "either"
        Which side's content must match; a missing side never matches

    """

    pattern: str
    side: FilterSide = "either"
    _compiled: Optional[re.Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.side not in _SIDES:
            raise FilterConfigurationError(
                f"Invalid side: {self.side!r}. Must be one of {', '.join(_SIDES)}",
                parameter_name="side",
                parameter_value=self.side,
            )
        object.__setattr__(self, "_compiled", _compile(self.pattern, "content"))

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        assert self._compiled is not None
        left = fragment.left_text is not None and self._compiled.search(fragment.left_text) is not None
        right = fragment.right_text is not None and self._compiled.search(fragment.right_text) is not None
        if self.side == "left":
            return left
        if self.side == "right":
            return right
        if self.side == "both":
            return left and right
        return left or right


@dataclass(frozen=True)
class KindFilter(Filter):
    """Match fragments whose kind is one of ``kinds``."""

    kinds: frozenset[FragmentKind]

    def __post_init__(self) -> None:
        kinds = frozenset([self.kinds] if isinstance(self.kinds, str) else self.kinds)
        unknown = sorted(str(kind) for kind in kinds if kind not in FRAGMENT_KINDS)
        if unknown or not kinds:
            raise FilterConfigurationError(
                f"Invalid fragment kind(s): {', '.join(unknown) or '(none)'}. "
                f"Must be among {', '.join(FRAGMENT_KINDS)}",
                parameter_name="kind",
                parameter_value=self.kinds,
            )
        object.__setattr__(self, "kinds", kinds)

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        return fragment.kind in self.kinds


@dataclass(frozen=True)
class Not(Filter):
    """Invert a filter."""

    inner: Filter

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        return not self.inner.accepts(path, fragment)


@dataclass(frozen=True)
class AllOf(Filter):
    """Keep a fragment only when every filter keeps it. An empty chain keeps everything."""

    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        return all(item.accepts(path, fragment) for item in self.filters)


@dataclass(frozen=True)
class AnyOf(Filter):
    """Keep a fragment when at least one filter keeps it."""

    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        filters = tuple(self.filters)
        if not filters:
            raise FilterConfigurationError("AnyOf requires at least one filter", parameter_name="any")
        object.__setattr__(self, "filters", filters)

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        return any(item.accepts(path, fragment) for item in self.filters)


@dataclass(frozen=True)
class FirstMatch(Filter):
    """Ordered rule list: the first rule whose condition matches decides.

    The order of ``rules`` is significant. Reordering two rules whose
    conditions overlap changes the outcome.

    Parameters
    ----------
    rules : tuple[tuple[Filter, bool], ...]
        ``(condition, keep)`` pairs evaluated in order
    default : bool, default True
        Decision when no condition matches

    Examples
    --------
        >>> rule = FirstMatch(((PathFilter("/a/b/c"), True), (PathFilter("/a/b"), False)))

    keeps differences in ``/a/b/c`` but drops the rest of ``/a/b``.

    """

    rules: tuple[tuple[Filter, bool], ...]
    default: bool = True

    def __post_init__(self) -> None:
        rules = tuple((condition, bool(keep)) for condition, keep in self.rules)
        for condition, _ in rules:
            if not isinstance(condition, Filter):
                raise FilterConfigurationError(
                    f"FirstMatch conditions must be filters, got {type(condition).__name__}",
                    parameter_name="first_match",
                    parameter_value=condition,
                )
        object.__setattr__(self, "rules", rules)

    def accepts(self, path: Optional[Path], fragment: Fragment) -> bool:
        for condition, keep in self.rules:
            if condition.accepts(path, fragment):
                return keep
        return self.default


FilterSpec = Union[Filter, Sequence[Filter], None]


def _as_chain(filters: FilterSpec) -> tuple[Filter, ...]:
    if filters is None:
        return ()
    if isinstance(filters, Filter):
        return (filters,)
    return tuple(filters)


def apply_filters(blocks: Iterable[DiffBlock], filters: FilterSpec) -> tuple[DiffBlock, ...]:
    """Remove fragments rejected by any filter and drop blocks left empty.

    Parameters
    ----------
    blocks : Iterable[DiffBlock]
        Blocks produced by the block assembler
    filters : Filter, sequence of Filter, or None
        A single filter or an AND-chain of filters

    Returns
    -------
    tuple[DiffBlock, ...]
        Surviving blocks, in their original order

    """
    chain = _as_chain(filters)
    blocks = tuple(blocks)
    if not chain:
        return blocks
    survivors: list[DiffBlock] = []
    for block in blocks:
        kept = [(path, fragment) for path, fragment in block.items() if all(f.accepts(path, fragment) for f in chain)]
        if len(kept) == len(block):
            survivors.append(block)
        elif kept:
            survivors.append(block.with_fragments(kept))
        else:
            logger.debug("Filtered out block at %s", block.locator)
    return tuple(survivors)


# =============================================================================
# Convenience constructors
# =============================================================================


def include_paths(*patterns: str, syntax: PathSyntax = "exact") -> Filter:
    """Keep only differences at or beneath one of ``patterns``."""
    return AnyOf(tuple(PathFilter(pattern, syntax) for pattern in patterns))


def exclude_paths(*patterns: str, syntax: PathSyntax = "exact") -> Filter:
    """Drop differences at or beneath any of ``patterns``."""
    return Not(include_paths(*patterns, syntax=syntax))


def exclude_content(pattern: str, side: FilterSide = "either") -> Filter:
    """Drop differences whose content matches ``pattern``."""
    return Not(ContentFilter(pattern, side))


def skip_blank_lines() -> Filter:
    """Drop added or removed lines that contain only whitespace."""
    return Not(AllOf((KindFilter(frozenset({"added", "removed"})), ContentFilter(r"^\s*$"))))


# =============================================================================
# Declarative construction
# =============================================================================

_MAPPING_KEYS: dict[str, frozenset[str]] = {
    "path": frozenset({"path", "syntax"}),
    "content": frozenset({"content", "side"}),
    "kind": frozenset({"kind"}),
    "not": frozenset({"not"}),
    "all": frozenset({"all"}),
    "any": frozenset({"any"}),
    "first_match": frozenset({"first_match", "default"}),
}


def build_filter(definition: Any) -> Filter:
    """Build a filter from plain data, such as a loaded YAML or JSON section.

    Parameters
    ----------
    definition : Mapping or list
        A list is an AND-chain of its items. A mapping has exactly one of the
        keys ``path`` (with optional ``syntax``), ``content`` (with optional
        ``side``), ``kind`` (a kind or list of kinds), ``not``, ``all``,
        ``any`` or ``first_match`` (a list of ``{"when": ..., "keep": bool}``
        rules, with optional ``default``).

    Returns
    -------
    Filter
        The constructed filter

    Raises
    ------
    FilterConfigurationError
        If the definition is malformed or contains unknown keys

    Examples
    --------
        >>> build_filter({"not": {"path": "/html/head"}})
        Not(inner=PathFilter(pattern='/html/head', syntax='exact'))

    """
    if isinstance(definition, Filter):
        return definition
    if isinstance(definition, (list, tuple)):
        return AllOf(tuple(build_filter(item) for item in definition))
    if not isinstance(definition, Mapping):
        raise FilterConfigurationError(
            f"Filter definition must be a mapping or a list, got {type(definition).__name__}",
            parameter_value=definition,
        )

    kinds = [key for key in _MAPPING_KEYS if key in definition]
    if len(kinds) != 1:
        raise FilterConfigurationError(
            f"Filter definition must contain exactly one of {', '.join(_MAPPING_KEYS)}; got {sorted(definition)}",
            parameter_value=dict(definition),
        )
    kind = kinds[0]
    unknown = sorted(str(key) for key in definition if key not in _MAPPING_KEYS[kind])
    if unknown:
        raise FilterConfigurationError(
            f"Unknown key(s) in {kind} filter: {', '.join(unknown)}",
            parameter_name=unknown[0],
            parameter_value=dict(definition),
        )

    value = definition[kind]
    if kind == "path":
        return PathFilter(value, definition.get("syntax", "exact"))
    if kind == "content":
        return ContentFilter(value, definition.get("side", "either"))
    if kind == "kind":
        return KindFilter(frozenset([value] if isinstance(value, str) else value))
    if kind == "not":
        return Not(build_filter(value))
    if kind == "all":
        return AllOf(tuple(build_filter(item) for item in _as_list(value, kind)))
    if kind == "any":
        return AnyOf(tuple(build_filter(item) for item in _as_list(value, kind)))
    return FirstMatch(
        tuple(_build_rule(rule) for rule in _as_list(value, kind)),
        default=bool(definition.get("default", True)),
    )


def _as_list(value: Any, kind: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise FilterConfigurationError(f"{kind} expects a list of filters", parameter_name=kind, parameter_value=value)
    return list(value)


def _build_rule(rule: Any) -> tuple[Filter, bool]:
    if not isinstance(rule, Mapping) or set(rule) != {"when", "keep"}:
        raise FilterConfigurationError(
            "first_match rules must be mappings with exactly 'when' and 'keep'",
            parameter_name="first_match",
            parameter_value=rule,
        )
    return build_filter(rule["when"]), bool(rule["keep"])
