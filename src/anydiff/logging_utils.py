"""Logging setup for the anydiff command.

Handlers are attached to the ``anydiff`` package logger rather than the root
logger, so an application that embeds the engine keeps its own logging
configuration. Python warnings (for example BeautifulSoup's notice that a
short HTML input looks like a file name) are routed through the same handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "anydiff"
WARNINGS_LOGGER = "py.warnings"

CONSOLE_FORMAT = "anydiff: %(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] %(message)s"
TRACE_DATE_FORMAT = "%H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Send anydiff log records and Python warnings to stderr and, optionally, a file.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g. "DEBUG")
    log_file : str, optional
        File that receives the same records as stderr, appended to
    trace_mode : bool, default False
        Prefix records with a timestamp, the logger name and the line number

    Returns
    -------
    logging.Logger
        The configured ``anydiff`` logger

    Raises
    ------
    ValueError
        If the level name is unknown
    OSError
        If the log file cannot be opened

    """
    level = _resolve_level(log_level)
    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.captureWarnings(True)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for logger in (package_logger, logging.getLogger(WARNINGS_LOGGER)):
        _reset_handlers(logger)
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)

    if log_file:
        package_logger.debug("Logging to file: %s", log_file)
    return package_logger
