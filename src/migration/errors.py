"""Typed exception hierarchy for page assembly and output errors.

DanglingReferenceError is page-scoped: it is recorded on the affected page
bundle and never aborts a run. OutputError subclasses are fatal for the run,
since continuing would silently lose attachments or documents.
"""

from typing import Optional

from src.export_reader.errors import MigrationError


class DanglingReferenceError(MigrationError):
    """Raised when a page references an object that is not in the dump."""

    def __init__(
        self,
        page_title: str,
        page_id: str,
        reference_kind: str,
        reference_id: Optional[str] = None,
    ):
        if reference_id:
            message = (
                f"Page '{page_title}' (ID: {page_id}) references missing "
                f"{reference_kind} {reference_id}"
            )
        else:
            message = f"Page '{page_title}' (ID: {page_id}) has no {reference_kind} reference"
        super().__init__(message)
        self.page_title = page_title
        self.page_id = page_id
        self.reference_kind = reference_kind
        self.reference_id = reference_id


class OutputError(MigrationError):
    """Base exception for all errors writing the output directory."""
    pass


class OutputWriteError(OutputError):
    """Raised when a directory or document in the output cannot be written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Output operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class AttachmentCopyError(OutputError):
    """Raised when attachment bytes cannot be copied into the output."""

    def __init__(self, source_path: str, dest_path: str, reason: str):
        super().__init__(
            f"Failed to copy attachment {source_path} to {dest_path}: {reason}"
        )
        self.source_path = source_path
        self.dest_path = dest_path
        self.reason = reason
