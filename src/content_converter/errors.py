"""Typed exception for content conversion errors."""

from typing import Optional

from src.export_reader.errors import MigrationError


class ConversionError(MigrationError):
    """Raised when content conversion between formats fails.

    Conversion failures are page-scoped: the affected page is skipped and the
    run continues, except when the converter is not installed at all.
    """

    def __init__(self, message: str, page_title: Optional[str] = None):
        if page_title:
            message = f"{message} (page '{page_title}')"
        super().__init__(message)
        self.page_title = page_title


class ConverterNotFoundError(ConversionError):
    """Raised when the pandoc executable cannot be found."""

    def __init__(self, executable: str):
        super().__init__(
            f"Pandoc not found (looked for '{executable}'). Install: brew install pandoc (macOS) or "
            "apt-get install pandoc (Linux) or download from "
            "https://pandoc.org/installing.html"
        )
        self.executable = executable
