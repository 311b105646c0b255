"""Markdown converter using Pandoc.

This module converts the storage-format body of a Confluence page (after
attachment rewriting) into strict Markdown with pipe tables and ATX
headings. The pipeline only sees MarkdownConverter.html_to_markdown, a
bytes -> bytes callable, so tests can substitute a stub converter.
"""

import logging
import subprocess
from typing import Optional

from .errors import ConversionError, ConverterNotFoundError

logger = logging.getLogger(__name__)

PANDOC_ARGS = [
    "-f", "html",
    "-t", "markdown_strict+table_captions+pipe_tables",
    "--markdown-headings=atx",
]


class MarkdownConverter:
    """Converts Confluence storage format to Markdown by running Pandoc.

    Pandoc is run once per page; the body is written to its stdin and the
    Markdown is read from its stdout, both fully, before the exit status is
    checked.
    """

    def __init__(self, executable: str = "pandoc", timeout: Optional[float] = None):
        """Initialize MarkdownConverter and verify Pandoc is available.

        Args:
            executable: Pandoc executable name or path
            timeout: Seconds to wait for each conversion (None waits forever)

        Raises:
            ConverterNotFoundError: If Pandoc is not found on system PATH
        """
        self.executable = executable
        self.timeout = timeout
        if not self._pandoc_installed():
            raise ConverterNotFoundError(executable)

    def html_to_markdown(self, html: bytes) -> bytes:
        """Convert storage-format HTML to Markdown.

        Args:
            html: Page body bytes

        Returns:
            Markdown bytes

        Raises:
            ConversionError: If Pandoc cannot be started, fails, or times out
        """
        if not html:
            return b""

        command = [self.executable, *PANDOC_ARGS]
        try:
            result = subprocess.run(
                command,
                input=html,
                capture_output=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ConversionError(f"Pandoc conversion failed with exit status {e.returncode}: {stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(f"Pandoc conversion timed out (>{self.timeout}s)") from e
        except OSError as e:
            raise ConversionError(f"Pandoc could not be run: {e}") from e

        logger.debug(f"Pandoc converted {len(html)} bytes to {len(result.stdout)} bytes")
        return result.stdout

    def _pandoc_installed(self) -> bool:
        """Check if Pandoc is installed on system PATH.

        Returns:
            True if Pandoc is available, False otherwise
        """
        try:
            result = subprocess.run(
                ["which", self.executable],
                capture_output=True,
                timeout=5
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
