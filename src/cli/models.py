"""Data models for CLI operations.

This module defines the exit codes and configuration used by the CLI.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): All pages migrated (possibly with degraded content)
    - GENERAL_ERROR (1): Configuration or unexpected errors
    - MALFORMED_EXPORT (2): entities.xml missing, unreadable or unparsable
    - OUTPUT_ERROR (3): A directory, document or attachment could not be written
    - CONVERTER_MISSING (4): Pandoc is not installed
    - PAGES_FAILED (5): Run finished but at least one page failed conversion

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    MALFORMED_EXPORT = 2
    OUTPUT_ERROR = 3
    CONVERTER_MISSING = 4
    PAGES_FAILED = 5


@dataclass
class MigrationConfig:
    """Options of a migration run, loaded from an optional YAML file.

    Attributes:
        revision_encoding: How version properties are decoded ("varint" or "decimal")
        pandoc_executable: Pandoc executable name or path
        pandoc_timeout: Seconds allowed per page conversion (None waits forever)
        document_extension: Extension of written documents

    Example:
        >>> config = MigrationConfig(revision_encoding="decimal")
    """
    revision_encoding: str = "varint"
    pandoc_executable: str = "pandoc"
    pandoc_timeout: Optional[float] = None
    document_extension: str = ".md"
