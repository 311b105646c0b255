"""Writing migrated pages and attachments to the output directory.

OutputWriter is the only pipeline stage that touches the output filesystem.
Every failure here is fatal for the run: a missing attachment or document
would otherwise go unnoticed in the migrated wiki.
"""

import logging
import os
import re
import shutil
from pathlib import Path
from typing import Union

from .errors import AttachmentCopyError, OutputWriteError
from .models import CopyJob, RewriteResult

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_EXTENSION = ".md"

# Opening, closing or self-closing tag; attributes may be double-quoted,
# single-quoted, unquoted or bare
LEFTOVER_TAG_PATTERN = re.compile(
    rb'</?[A-Za-z][A-Za-z0-9:-]*'
    rb"""(?:\s+[A-Za-z_:][-A-Za-z0-9_:.]*(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?)*"""
    rb'\s*/?>'
)


def strip_leftover_tags(markdown: bytes) -> bytes:
    """Remove raw markup tags the converter left in its output.

    Removal is repeated until nothing matches LEFTOVER_TAG_PATTERN, so tags
    that only appear once an inner tag is removed (e.g. "<<b>i>") go too.
    """
    while True:
        stripped = LEFTOVER_TAG_PATTERN.sub(b"", markdown)
        if stripped == markdown:
            return stripped
        markdown = stripped


class OutputWriter:
    """Writes documents and copies attachments for migrated pages.

    Output layout:
        <output_root>/<slug>.md                   # one document per page
        <output_root>/<slug>/<attachment title>   # embedded attachments

    Existing files are overwritten, so re-running a migration replaces the
    previous output instead of skipping it.
    """

    def __init__(
        self,
        output_root: Union[str, Path],
        document_extension: str = DEFAULT_DOCUMENT_EXTENSION,
    ):
        """Initialize OutputWriter.

        Args:
            output_root: Root directory of the migrated wiki
            document_extension: Extension of written documents
        """
        self.output_root = Path(output_root)
        self.document_extension = document_extension

    def prepare_output_root(self) -> None:
        """Create the output root directory if it does not exist.

        Raises:
            OutputWriteError: If the directory cannot be created
        """
        self._make_directory(self.output_root)

    def write_page(self, markdown: bytes, rewrite: RewriteResult) -> Path:
        """Copy a page's attachments and write its document.

        Args:
            markdown: Converted Markdown for the page
            rewrite: Rewrite result holding the slug and copy jobs

        Returns:
            Path of the written document

        Raises:
            OutputWriteError: If a directory or the document cannot be written
            AttachmentCopyError: If an attachment cannot be copied
        """
        if rewrite.copy_jobs:
            self._make_directory(rewrite.attachment_dir)
            for job in rewrite.copy_jobs:
                self.copy_attachment(job)

        document_path = self.document_path(rewrite.slug)
        self.write_document(document_path, strip_leftover_tags(markdown))
        return document_path

    def document_path(self, slug: str) -> Path:
        """Path of the document written for slug."""
        return self.output_root / f"{slug}{self.document_extension}"

    def copy_attachment(self, job: CopyJob) -> None:
        """Copy one attachment payload, replacing any existing destination.

        The destination is flushed and synced to disk before it is closed.

        Raises:
            AttachmentCopyError: If the source cannot be read or the
                destination cannot be written
        """
        try:
            with open(job.source_path, "rb") as source:
                with open(job.dest_path, "wb") as dest:
                    shutil.copyfileobj(source, dest)
                    dest.flush()
                    os.fsync(dest.fileno())
        except OSError as e:
            raise AttachmentCopyError(
                str(job.source_path),
                str(job.dest_path),
                e.strerror or str(e),
            ) from e

        logger.debug(f"Copied attachment {job.source_path} -> {job.dest_path}")

    def write_document(self, path: Path, content: bytes) -> None:
        """Write a document, replacing any existing file.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        try:
            with open(path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise OutputWriteError(str(path), "write", e.strerror or str(e)) from e

        logger.debug(f"Wrote {len(content)} bytes to {path}")

    @staticmethod
    def _make_directory(path: Path) -> None:
        """Create a directory; an existing directory is not an error."""
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(str(path), "create_directory", e.strerror or str(e)) from e
