"""Pytest configuration and shared fixtures for the anydiff test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def write_file(tmp_path):
    """Provide a helper that writes UTF-8 text files into a temporary directory.

    Returns
    -------
    Callable[[str, str], Path]
        Function taking a file name and content and returning the written path.

    """

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_manifest() -> str:
    """Provide a manifest with a wrapped continuation line.

    Returns
    -------
    str
        Manifest text with CRLF-free line endings.

    """
    return (
        "Manifest-Version: 1.0\n"
        "Bundle-SymbolicName: com.example.core\n"
        "Import-Package: org.osgi.framework;version=\"[1.8,2)\",org.slf4j;versi\n"
        " on=\"[1.7,2)\"\n"
        "Export-Package: com.example.core.api\n"
    )


@pytest.fixture
def isolated_logging():
    """Undo handler, level and warning-capture changes made by configure_logging()."""
    names = ("anydiff", "py.warnings")
    saved = {name: (list(logging.getLogger(name).handlers), logging.getLogger(name).level) for name in names}
    yield
    logging.captureWarnings(False)
    for name, (handlers, level) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers[:] = handlers
        logger.setLevel(level)
