#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/exceptions.py
"""Custom exceptions for the anydiff library.

This module defines the error taxonomy of the comparison engine. Errors are
raised to the immediate caller; the engine performs no silent recovery.

Exception Hierarchy
-------------------
- AnyDiffError (base exception)

  - MalformedInputError (raw content cannot be parsed under its format)

  - FilterConfigurationError (invalid filter definition at construction time)

"""

from __future__ import annotations

from typing import Any


class AnyDiffError(Exception):
    """Base exception class for all anydiff-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class MalformedInputError(AnyDiffError):
    """Exception raised when raw content cannot be canonicalized.

    Raised by the HTML and XML canonicalizers when the markup cannot be parsed
    under the declared format, including when the configured HTML parser is
    not installed. It aborts the current comparison only; the
    comparison task re-raises it with the offending side identified.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    content_format : str, optional
        The format the content was declared or detected as
    side : {"left", "right"}, optional
        Which side of the comparison carried the malformed content
    original_error : Exception, optional
        The underlying parser exception

    Attributes
    ----------
    content_format : str or None
        Format under which parsing failed
    side : str or None
        Offending side, set by the comparison task

    """

    def __init__(
        self,
        message: str,
        content_format: str | None = None,
        side: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the malformed input error."""
        super().__init__(message, original_error=original_error)
        self.content_format = content_format
        self.side = side


class FilterConfigurationError(AnyDiffError):
    """Exception raised when a filter definition is invalid.

    This covers invalid regular expressions, unknown fragment kinds, empty
    OR-chains and unknown keys in declarative filter definitions. It is always
    raised while the filter is being constructed, never during evaluation.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    parameter_name : str, optional
        Name of the offending filter parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception (e.g. ``re.error``)

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the filter configuration error."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value
