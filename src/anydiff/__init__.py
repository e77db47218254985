"""anydiff - A format-aware comparison engine for text, HTML, XML and manifests.

anydiff compares two pieces of content and reports their differences as
located blocks. Each side is first canonicalized so that formatting noise
(attribute order, indentation, line wrapping) does not register as a change;
the canonical lines are then aligned with a Myers diff, changed line pairs
are marked down to the token, and the differences are grouped into blocks
addressed by an XPath-like location.

Key Features
------------
- Canonicalizers for plain text, HTML (BeautifulSoup), XML (defusedxml) and
  JAR manifests
- Minimal, deterministic line alignment with token-level change marks
- Blocks grouped by element, node or common ancestor
- A small, closed filter algebra to suppress uninteresting differences

Requirements
------------
- Python 3.10+

Examples
--------
    >>> from anydiff import compare
    >>> diff = compare("<a><b>1</b></a>", "<a><b>2</b></a>", content_format="xml")
    >>> diff.state
    'changed'
    >>> [block.locator for block in diff.blocks]
    ['/a/b']

See Also
--------
anydiff.canonical : format-aware canonicalization
anydiff.filters : difference filters

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "anydiff requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from anydiff.canonical import CanonicalDocument, Path, PathStep, canonicalize  # noqa: E402
from anydiff.diff import Diff, DiffBlock, DiffCounts, Fragment, Mark, MarkedString  # noqa: E402
from anydiff.exceptions import AnyDiffError, FilterConfigurationError, MalformedInputError  # noqa: E402
from anydiff.filters import (  # noqa: E402
    AllOf,
    AnyOf,
    ContentFilter,
    Filter,
    FirstMatch,
    KindFilter,
    Not,
    PathFilter,
    apply_filters,
    build_filter,
    exclude_content,
    exclude_paths,
    include_paths,
    skip_blank_lines,
)
from anydiff.formats import detect_format  # noqa: E402
from anydiff.options import TaskParameters  # noqa: E402
from anydiff.task import ComparisonTask, compare  # noqa: E402

__all__ = [
    "__version__",
    # Comparison
    "compare",
    "ComparisonTask",
    "TaskParameters",
    "detect_format",
    "canonicalize",
    # Results
    "CanonicalDocument",
    "Path",
    "PathStep",
    "Diff",
    "DiffBlock",
    "DiffCounts",
    "Fragment",
    "Mark",
    "MarkedString",
    # Filters
    "Filter",
    "PathFilter",
    "ContentFilter",
    "KindFilter",
    "Not",
    "AllOf",
    "AnyOf",
    "FirstMatch",
    "apply_filters",
    "build_filter",
    "include_paths",
    "exclude_paths",
    "exclude_content",
    "skip_blank_lines",
    # Errors
    "AnyDiffError",
    "MalformedInputError",
    "FilterConfigurationError",
]
