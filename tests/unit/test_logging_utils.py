#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for logging_utils.configure_logging()."""

import logging
import warnings

import pytest

from anydiff.logging_utils import CONSOLE_FORMAT, configure_logging

pytestmark = pytest.mark.usefixtures("isolated_logging")


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_configures_package_logger_only(self):
        """Test that handlers go to the anydiff logger and leave the root logger alone."""
        root_handlers = list(logging.getLogger().handlers)
        logger = configure_logging("INFO")
        assert logger.name == "anydiff"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == CONSOLE_FORMAT
        assert logging.getLogger().handlers == root_handlers

    def test_reconfiguring_replaces_handlers(self):
        """Test that a second call does not stack handlers."""
        configure_logging(logging.DEBUG)
        logger = configure_logging(logging.WARNING)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_unknown_level_name(self):
        """Test that an unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")

    def test_trace_mode_format(self):
        """Test that trace mode adds the logger name and line number."""
        logger = configure_logging("DEBUG", trace_mode=True)
        assert "%(name)s:%(lineno)d" in logger.handlers[0].formatter._fmt

    def test_log_file_receives_records(self, tmp_path):
        """Test that records are also written to the log file."""
        log_file = tmp_path / "run.log"
        logger = configure_logging("INFO", log_file=str(log_file))
        logging.getLogger("anydiff.task").info("compared two files")
        for handler in logger.handlers:
            handler.flush()
        assert "anydiff: INFO: compared two files" in log_file.read_text(encoding="utf-8")

    def test_unopenable_log_file(self, tmp_path):
        """Test that a log file in a missing directory raises OSError."""
        with pytest.raises(OSError):
            configure_logging("INFO", log_file=str(tmp_path / "missing" / "run.log"))

    def test_warnings_are_logged(self, tmp_path):
        """Test that Python warnings go through the same handlers."""
        log_file = tmp_path / "run.log"
        configure_logging("WARNING", log_file=str(log_file))
        with warnings.catch_warnings():
            warnings.simplefilter("always")
            warnings.warn("looks like a file name", UserWarning, stacklevel=1)
        for handler in logging.getLogger("py.warnings").handlers:
            handler.flush()
        assert "looks like a file name" in log_file.read_text(encoding="utf-8")
