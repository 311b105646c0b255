"""Pytest configuration and fixtures for integration tests.

Integration tests run the whole pipeline against export trees written to a
temporary directory. The real Pandoc is only used where a test asks for it.
"""

from pathlib import Path

import pytest

from tests.fixtures.sample_exports import HOME_REVISIONS_EXPORT, write_export


@pytest.fixture
def home_export(tmp_path) -> Path:
    """Export with two revisions of "Home"; only revision 5 has a payload on disk."""
    return write_export(
        tmp_path / "export",
        HOME_REVISIONS_EXPORT,
        {"P2/A2/1": b"\x89PNG logo"},
    )


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "wiki"


@pytest.fixture
def passthrough_converter():
    """Converter that returns the rewritten body unchanged."""
    def convert(html: bytes) -> bytes:
        return html
    return convert
