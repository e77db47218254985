#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/canonical/__init__.py
"""Format-aware canonicalization.

Canonicalizers turn raw content into a deterministic, line-oriented form so
formatting noise does not register as a difference. The set of formats is
closed: plain text, HTML, XML and manifest.

Examples
--------
    >>> from anydiff.canonical import canonicalize
    >>> canonicalize("<a><b>1</b></a>", "xml").text
    '<a>\\n  <b>\\n    1\\n  </b>\\n</a>\\n'

"""

from __future__ import annotations

from typing import Optional

from anydiff.canonical.base import CanonicalDocument, Canonicalizer, LineCollector, Path, PathStep, comparison_key
from anydiff.canonical.html import HtmlCanonicalizer
from anydiff.canonical.manifest import ManifestCanonicalizer
from anydiff.canonical.plain import PlainCanonicalizer
from anydiff.canonical.xml import XmlCanonicalizer
from anydiff.constants import ContentFormat
from anydiff.options import TaskParameters

CANONICALIZERS: dict[str, type[Canonicalizer]] = {
    "plain": PlainCanonicalizer,
    "html": HtmlCanonicalizer,
    "xml": XmlCanonicalizer,
    "manifest": ManifestCanonicalizer,
}

# Markup formats fall back to plain text when normalization is disabled
_NORMALIZED_FORMATS = frozenset({"html", "xml"})


def get_canonicalizer(content_format: ContentFormat, params: Optional[TaskParameters] = None) -> Canonicalizer:
    """Return the canonicalizer for ``content_format``.

    Parameters
    ----------
    content_format : {"plain", "html", "xml", "manifest"}
        Declared format of the content
    params : TaskParameters, optional
        Comparison options

    Returns
    -------
    Canonicalizer
        A canonicalizer bound to ``params``

    Raises
    ------
    ValueError
        If the format is not recognized

    """
    params = params or TaskParameters()
    try:
        canonicalizer_class = CANONICALIZERS[content_format]
    except KeyError:
        raise ValueError(
            f"Unknown content format: {content_format!r}. Must be one of {', '.join(CANONICALIZERS)}"
        ) from None
    if content_format in _NORMALIZED_FORMATS and not params.normalize:
        canonicalizer_class = PlainCanonicalizer
    return canonicalizer_class(params)


def canonicalize(
    raw: str, content_format: ContentFormat = "plain", params: Optional[TaskParameters] = None
) -> CanonicalDocument:
    """Canonicalize ``raw`` under ``content_format``.

    Raises
    ------
    MalformedInputError
        If the content cannot be parsed under its format

    """
    return get_canonicalizer(content_format, params).canonicalize(raw)


__all__ = [
    "CANONICALIZERS",
    "CanonicalDocument",
    "Canonicalizer",
    "HtmlCanonicalizer",
    "LineCollector",
    "ManifestCanonicalizer",
    "Path",
    "PathStep",
    "PlainCanonicalizer",
    "XmlCanonicalizer",
    "canonicalize",
    "comparison_key",
    "get_canonicalizer",
]
