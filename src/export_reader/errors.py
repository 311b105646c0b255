"""Typed exception hierarchy for export reading errors.

This module defines the root of the migration tool's exception tree and the
errors raised while reading a Confluence XML export. All exceptions carry
descriptive messages with context to help with debugging.
"""

from typing import Optional


class MigrationError(Exception):
    """Base exception for all confluence-export-migrate errors.

    Use this to catch any application-level error from the migration tool.
    """
    pass


class ExportError(MigrationError):
    """Base exception for all errors reading the export directory."""
    pass


class MalformedDumpError(ExportError):
    """Raised when entities.xml cannot be parsed into objects at all.

    Missing fields inside a well-formed object never raise this error; only
    structural failures (XML syntax, unexpected root element) do.
    """

    def __init__(self, source: str, reason: str, line: Optional[int] = None):
        message = f"Malformed export dump {source}"
        if line is not None:
            message += f" (line {line})"
        message += f": {reason}"
        super().__init__(message)
        self.source = source
        self.reason = reason
        self.line = line


class ExportReadError(ExportError):
    """Raised when a file of the export cannot be read."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot read export file {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
