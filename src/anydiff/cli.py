#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/cli.py
"""Command-line harness for anydiff.

Reads two local files, compares them and prints the result of
:meth:`~anydiff.diff.result.Diff.to_dict` as JSON on stdout.

Exit status is 0 when no differences survive filtering, 1 when some do and 2
on any error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from anydiff.constants import BLOCK_GROUPINGS, CONTENT_FORMATS, DEFAULT_INDENT
from anydiff.exceptions import AnyDiffError
from anydiff.filters import (
    Filter,
    build_filter,
    exclude_content,
    exclude_paths,
    include_paths,
    skip_blank_lines,
)
from anydiff.logging_utils import configure_logging
from anydiff.options import TaskParameters
from anydiff.task import compare

logger = logging.getLogger(__name__)

EXIT_NO_DIFFERENCES = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def _validate_line_width(value: str) -> int:
    """Validate the manifest line width argument.

    Raises
    ------
    argparse.ArgumentTypeError
        If value is not an integer

    """
    try:
        return int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"line width must be an integer, got '{value}'") from e


def _create_parser() -> argparse.ArgumentParser:
    """Create argparse parser for the anydiff command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="anydiff",
        description="Compare two files as plain text, HTML, XML or JAR manifests and report located differences",
        add_help=True,
    )

    parser.add_argument("left", help="Left (original) file")
    parser.add_argument("right", help="Right (modified) file")

    # Format options
    parser.add_argument(
        "--format",
        "-f",
        dest="content_format",
        choices=CONTENT_FORMATS,
        help="Format of both files (default: detected from name and content)",
    )
    parser.add_argument("--left-format", choices=CONTENT_FORMATS, help="Format of the left file")
    parser.add_argument("--right-format", choices=CONTENT_FORMATS, help="Format of the right file")

    # Comparison options
    parser.add_argument(
        "--ignore-spaces",
        "-w",
        action="store_true",
        help="Ignore differences in the amount of whitespace when comparing lines",
    )
    parser.add_argument(
        "--no-normalize",
        dest="normalize",
        action="store_false",
        help="Compare HTML and XML as plain text",
    )
    parser.add_argument(
        "--no-arrange-attributes",
        dest="arrange_attributes",
        action="store_false",
        help="Keep attributes in document order",
    )
    parser.add_argument(
        "--grouping",
        choices=BLOCK_GROUPINGS,
        default="ancestor",
        help="How differences are grouped into blocks (default: ancestor)",
    )
    parser.add_argument(
        "--manifest-width",
        type=_validate_line_width,
        default=72,
        help="Manifest line width (default: 72)",
    )
    parser.add_argument(
        "--split-manifest-lists",
        action="store_true",
        help="Put each item of comma-separated manifest headers on its own line",
    )
    parser.add_argument("--html-parser", default="html.parser", help="BeautifulSoup parser (default: html.parser)")

    # Filter options
    parser.add_argument(
        "--include-path",
        action="append",
        default=[],
        metavar="PATH",
        help="Keep only differences at or beneath PATH (repeatable)",
    )
    parser.add_argument(
        "--exclude-path",
        action="append",
        default=[],
        metavar="PATH",
        help="Drop differences at or beneath PATH (repeatable)",
    )
    parser.add_argument(
        "--path-syntax",
        choices=["exact", "glob", "regex"],
        default="exact",
        help="How --include-path and --exclude-path patterns are read (default: exact)",
    )
    parser.add_argument(
        "--exclude-content",
        action="append",
        default=[],
        metavar="REGEX",
        help="Drop differences whose line content matches REGEX (repeatable)",
    )
    parser.add_argument("--skip-blank-lines", action="store_true", help="Drop blank-line differences")
    parser.add_argument("--filter-file", help="JSON file with a declarative filter definition")

    # Output and logging options
    parser.add_argument("--indent", type=int, default=DEFAULT_INDENT, help="JSON indentation (default: 2)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _build_parameters(parsed_args: argparse.Namespace) -> TaskParameters:
    return TaskParameters(
        ignore_spaces=parsed_args.ignore_spaces,
        normalize=parsed_args.normalize,
        arrange_attributes=parsed_args.arrange_attributes,
        block_grouping=parsed_args.grouping,
        manifest_line_width=parsed_args.manifest_width,
        split_manifest_lists=parsed_args.split_manifest_lists,
        html_parser=parsed_args.html_parser,
    )


def _build_filters(parsed_args: argparse.Namespace) -> list[Filter]:
    """Translate filter arguments into an AND-chain.

    Raises
    ------
    FilterConfigurationError
        If a pattern or the filter file definition is invalid
    OSError
        If the filter file cannot be read

    """
    filters: list[Filter] = []
    if parsed_args.include_path:
        filters.append(include_paths(*parsed_args.include_path, syntax=parsed_args.path_syntax))
    if parsed_args.exclude_path:
        filters.append(exclude_paths(*parsed_args.exclude_path, syntax=parsed_args.path_syntax))
    filters.extend(exclude_content(pattern) for pattern in parsed_args.exclude_content)
    if parsed_args.skip_blank_lines:
        filters.append(skip_blank_lines())
    if parsed_args.filter_file:
        definition: Any = json.loads(Path(parsed_args.filter_file).read_text(encoding="utf-8"))
        filters.append(build_filter(definition))
    return filters


def _read_input(path_str: str) -> str:
    path = Path(path_str)
    if not path.is_file():
        raise FileNotFoundError(f"Source file not found: {path_str}")
    return path.read_text(encoding="utf-8")


def main(args: Optional[list[str]] = None) -> int:
    """Run the anydiff command.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments; ``sys.argv[1:]`` when omitted

    Returns
    -------
    int
        Exit code: 0 no differences, 1 differences, 2 error

    """
    parser = _create_parser()
    try:
        parsed = parser.parse_args(args)
    except SystemExit as e:
        if isinstance(e.code, int):
            return EXIT_ERROR if e.code else EXIT_NO_DIFFERENCES
        return EXIT_ERROR

    try:
        _setup_logging_level(parsed)
        params = _build_parameters(parsed)
        filters = _build_filters(parsed)
        left = _read_input(parsed.left)
        right = _read_input(parsed.right)
    except (OSError, ValueError, AnyDiffError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        diff = compare(
            left,
            right,
            params,
            filters,
            content_format=parsed.content_format,
            left_format=parsed.left_format,
            right_format=parsed.right_format,
            left_label=parsed.left,
            right_label=parsed.right,
        )
    except AnyDiffError as e:
        logger.debug("Comparison failed", exc_info=True)
        print(f"Error comparing files: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(json.dumps(diff.to_dict(), indent=parsed.indent, ensure_ascii=False))
    if not diff.has_differences:
        print("No differences found.", file=sys.stderr)
        return EXIT_NO_DIFFERENCES
    return EXIT_DIFFERENCES
