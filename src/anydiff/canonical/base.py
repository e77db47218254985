#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/base.py
"""Core types shared by all canonicalizers.

A canonicalizer turns raw content into a :class:`CanonicalDocument`: an
immutable, line-oriented rendition of the input together with a side table
of structural :class:`Path` values (one per line), nesting depths and the
comparison keys that the aligner actually compares.

"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Optional, Sequence

from anydiff.constants import (
    ATTRIBUTE_STEP_PREFIX,
    DEFAULT_INDENT,
    TAG_AUTO_CLOSE,
    TAG_CLOSE,
    TAG_OPEN,
    TAG_PRE_CLOSE,
    ContentFormat,
)
from anydiff.options import TaskParameters

logger = logging.getLogger(__name__)

_STEP_PATTERN = re.compile(r"^(?P<name>.+?)(?:\[(?P<index>\d+)\])?$")


@dataclass(frozen=True, slots=True)
class PathStep:
    """One step of a structural path.

    Parameters
    ----------
    name : str
        Element name, or ``@attr``, ``#text``, ``#comment`` for non-element steps
    index : int, default 1
        1-based position among same-named siblings

    """

    name: str
    index: int = 1

    def __str__(self) -> str:
        return self.name if self.index <= 1 else f"{self.name}[{self.index}]"

    @property
    def is_element(self) -> bool:
        """Whether this step names an element rather than an attribute or node."""
        return not self.name.startswith((ATTRIBUTE_STEP_PREFIX, "#"))


@dataclass(frozen=True, slots=True)
class Path:
    """Structural location of a canonical line.

    Rooted paths (HTML, XML) render XPath-style, e.g. ``/catalog/item[2]/title``.
    Unrooted paths (manifest headers) render without the leading slash, e.g.
    ``Import-Package``.

    """

    steps: tuple[PathStep, ...] = ()
    rooted: bool = True

    def __str__(self) -> str:
        body = "/".join(str(step) for step in self.steps)
        return f"/{body}" if self.rooted else body

    def __len__(self) -> int:
        return len(self.steps)

    def __bool__(self) -> bool:
        return bool(self.steps)

    @property
    def name(self) -> str:
        """Name of the last step, or an empty string for the root."""
        return self.steps[-1].name if self.steps else ""

    def child(self, name: str, index: int = 1) -> Path:
        """Return the path extended by one step."""
        return Path(self.steps + (PathStep(name, index),), self.rooted)

    def parent(self) -> Path:
        """Return the path with its last step removed."""
        return Path(self.steps[:-1], self.rooted)

    def contains(self, other: Path) -> bool:
        """Return True if ``other`` equals this path or lies beneath it."""
        if self.rooted != other.rooted or len(other.steps) < len(self.steps):
            return False
        return other.steps[: len(self.steps)] == self.steps

    def is_ancestor_of(self, other: Path) -> bool:
        """Return True if ``other`` lies strictly beneath this path."""
        return len(other.steps) > len(self.steps) and self.contains(other)

    def element_path(self) -> Path:
        """Return the nearest element path, dropping trailing attribute/node steps."""
        steps = self.steps
        while steps and not steps[-1].is_element:
            steps = steps[:-1]
        return Path(steps, self.rooted)

    def common_ancestor(self, other: Path) -> Path:
        """Return the longest shared prefix of two paths."""
        if self.rooted != other.rooted:
            return Path((), self.rooted)
        shared = []
        for mine, theirs in zip(self.steps, other.steps):
            if mine != theirs:
                break
            shared.append(mine)
        return Path(tuple(shared), self.rooted)

    @classmethod
    def parse(cls, text: str) -> Path:
        """Parse a rendered path back into steps.

        Examples
        --------
            >>> str(Path.parse("/a/b[2]/@id"))
            '/a/b[2]/@id'

        """
        rooted = text.startswith("/")
        steps = []
        for part in text.strip("/").split("/"):
            if not part:
                continue
            match = _STEP_PATTERN.match(part)
            if match is None:  # pragma: no cover - pattern accepts any non-empty part
                raise ValueError(f"Invalid path step: {part!r}")
            index = match.group("index")
            steps.append(PathStep(match.group("name"), int(index) if index else 1))
        return cls(tuple(steps), rooted)


@dataclass(frozen=True)
class CanonicalDocument:
    """Immutable canonical rendition of one side of a comparison.

    Parameters
    ----------
    lines : tuple[str, ...]
        Canonical display lines, without terminators
    keys : tuple[str, ...]
        Comparison keys, parallel to ``lines``
    paths : tuple[Path or None, ...]
        Structural location of every line (``None`` for plain text)
    depths : tuple[int, ...]
        Nesting depth of every line
    content_format : str
        Format the document was canonicalized as

    """

    lines: tuple[str, ...] = ()
    keys: tuple[str, ...] = ()
    paths: tuple[Optional[Path], ...] = ()
    depths: tuple[int, ...] = ()
    content_format: ContentFormat = "plain"

    def __post_init__(self) -> None:
        size = len(self.lines)
        if not (len(self.keys) == len(self.paths) == len(self.depths) == size):
            raise ValueError("CanonicalDocument side tables must match the number of lines")

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        """Canonical text with every line terminated by a newline."""
        return "".join(f"{line}\n" for line in self.lines)

    def path_at(self, index: int) -> Optional[Path]:
        """Return the path recorded for the line at ``index``."""
        return self.paths[index]

    def span(self, start: int, end: int) -> str:
        """Return the canonical text of lines ``[start, end)``."""
        return "".join(f"{line}\n" for line in self.lines[start:end])


def comparison_key(line: str, depth: int = 0, strip_indent: bool = False, ignore_spaces: bool = False) -> str:
    """Compute the equality key for one canonical line.

    Parameters
    ----------
    line : str
        Canonical display line
    depth : int, default 0
        Nesting depth the line was emitted at
    strip_indent : bool, default False
        Drop the canonical indentation so re-nesting does not change the key
    ignore_spaces : bool, default False
        Collapse whitespace runs to one space and trim both ends of the key

    Returns
    -------
    str
        The comparison key

    """
    key = line[depth * DEFAULT_INDENT :] if strip_indent else line
    if ignore_spaces:
        key = " ".join(key.split())
    return key


@dataclass
class LineCollector:
    """Accumulate canonical lines together with their side tables."""

    content_format: ContentFormat
    ignore_spaces: bool = False
    strip_indent: bool = False
    _lines: list[str] = field(default_factory=list)
    _paths: list[Optional[Path]] = field(default_factory=list)
    _depths: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._lines)

    def add(self, content: str, depth: int = 0, path: Optional[Path] = None) -> None:
        """Append one line indented to ``depth``."""
        self._lines.append(" " * (depth * DEFAULT_INDENT) + content)
        self._paths.append(path)
        self._depths.append(depth)

    def add_text(self, text: str, depth: int, path: Optional[Path]) -> None:
        """Append a text node as dedented, non-blank lines."""
        for line in dedent_lines(text):
            self.add(line, depth, path)

    def open_tag(
        self,
        name: str,
        attributes: Sequence[tuple[str, Optional[str]]],
        depth: int,
        path: Path,
        self_closing: bool = False,
    ) -> None:
        """Emit an opening tag.

        An element with at most one attribute keeps it on the tag line. With
        more attributes, every attribute gets its own line one level deeper and
        the tag is closed on a separate line.
        """
        closer = TAG_AUTO_CLOSE if self_closing else TAG_CLOSE
        if len(attributes) <= 1:
            inline = "".join(f" {format_attribute(key, value)}" for key, value in attributes)
            self.add(f"{TAG_OPEN}{name}{inline}{closer}", depth, path)
            return
        self.add(f"{TAG_OPEN}{name}", depth, path)
        for key, value in attributes:
            self.add(format_attribute(key, value), depth + 1, path.child(f"{ATTRIBUTE_STEP_PREFIX}{key}"))
        self.add(closer, depth, path)

    def close_tag(self, name: str, depth: int, path: Path) -> None:
        """Emit a closing tag."""
        self.add(f"{TAG_PRE_CLOSE}{name}{TAG_CLOSE}", depth, path)

    def build(self) -> CanonicalDocument:
        """Freeze the collected lines into a document."""
        keys = tuple(
            comparison_key(line, depth, self.strip_indent, self.ignore_spaces)
            for line, depth in zip(self._lines, self._depths)
        )
        return CanonicalDocument(
            lines=tuple(self._lines),
            keys=keys,
            paths=tuple(self._paths),
            depths=tuple(self._depths),
            content_format=self.content_format,
        )


def dedent_lines(text: str) -> Iterator[str]:
    """Yield the non-blank lines of ``text`` with common indentation removed."""
    lines = [line.rstrip() for line in normalize_newlines(text).split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return
    margin = min(len(line) - len(line.lstrip()) for line in lines)
    for line in lines:
        yield line[margin:]


def collapse_newlines(text: str) -> str:
    """Fold a multi-line value onto one line."""
    return re.sub(r"[ \t]*\r?\n[ \t\r\n]*", " ", text).strip()


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and ``\\r`` line terminators to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def escape_text(text: str) -> str:
    """Escape markup-significant characters in text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    """Escape an attribute value for double-quoted output."""
    return collapse_newlines(value).replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def format_attribute(name: str, value: Optional[str]) -> str:
    """Render ``name="value"`` (or a bare name for valueless attributes)."""
    if value is None:
        return name
    return f'{name}="{escape_attribute(value)}"'


class Canonicalizer(ABC):
    """Abstract base class for format-specific canonicalizers.

    Parameters
    ----------
    params : TaskParameters or None, default None
        Comparison options; defaults are used when omitted

    Notes
    -----
    Subclasses implement :meth:`_canonicalize`. Empty input always yields an
    empty document; whitespace-only input does too unless the subclass clears
    ``blank_is_empty``.

    """

    content_format: ClassVar[ContentFormat]
    blank_is_empty: ClassVar[bool] = True

    def __init__(self, params: TaskParameters | None = None):
        self.params = params or TaskParameters()

    def canonicalize(self, raw: str) -> CanonicalDocument:
        """Canonicalize raw content.

        Parameters
        ----------
        raw : str
            Raw content

        Returns
        -------
        CanonicalDocument
            The canonical document

        Raises
        ------
        MalformedInputError
            If the content cannot be parsed under this format

        """
        if not raw or (self.blank_is_empty and not raw.strip()):
            return CanonicalDocument(content_format=self.content_format)
        document = self._canonicalize(raw)
        logger.debug("Canonicalized %d characters of %s into %d lines", len(raw), self.content_format, len(document))
        return document

    def _collector(self, strip_indent: bool = False) -> LineCollector:
        return LineCollector(self.content_format, self.params.ignore_spaces, strip_indent)

    @abstractmethod
    def _canonicalize(self, raw: str) -> CanonicalDocument:
        """Canonicalize non-empty raw content."""
