"""Data models for the migration pipeline.

This module defines the transient structures handed between pipeline stages:
PageBundle (assembly -> rewriting), RewriteResult and CopyJob
(rewriting -> output), and the per-page and per-run reports.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from src.export_reader.models import Attachment, Page

from .errors import DanglingReferenceError


@dataclass
class PageBundle:
    """A page joined with its body and resolved attachments.

    Attributes:
        page: Retained page record
        body: Raw storage-format body (empty when the body is dangling)
        attachments: Resolved attachments in source collection order
        errors: Dangling references found while assembling this page
    """
    page: Page
    body: bytes = b""
    attachments: List[Attachment] = field(default_factory=list)
    errors: List[DanglingReferenceError] = field(default_factory=list)


@dataclass
class CopyJob:
    """Copy of one attachment payload from the export into the output.

    Attributes:
        attachment: Attachment being copied
        source_path: <export>/attachments/<page id>/<attachment id>/<revision>
        dest_path: <output>/<slug>/<attachment title>
    """
    attachment: Attachment
    source_path: Path
    dest_path: Path


@dataclass
class RewriteResult:
    """Rewritten body of one page and the files it needs.

    Attributes:
        slug: Slug of the page title
        body: Body with embeds rewritten and decorative attributes stripped
        attachment_dir: Per-page attachment directory (<output>/<slug>)
        copy_jobs: One job per distinct attachment referenced by an embed
        unresolved: Embedded filenames with no matching attachment
    """
    slug: str
    body: bytes
    attachment_dir: Path
    copy_jobs: List[CopyJob] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)


class PageStatus(Enum):
    """Outcome of migrating a single page."""

    WRITTEN = "written"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class PageResult:
    """Outcome of migrating a single page.

    Attributes:
        title: Page title
        status: WRITTEN, DEGRADED (written with dangling/unresolved references)
            or FAILED (conversion failed, nothing written)
        document_path: Path of the written document, if any
        attachments_copied: Number of attachment files copied
        warnings: Human readable descriptions of degraded content
        error: Failure description for FAILED pages
    """
    title: str
    status: PageStatus
    document_path: Optional[Path] = None
    attachments_copied: int = 0
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class MigrationReport:
    """Summary of a migration run."""

    pages: List[PageResult] = field(default_factory=list)

    @property
    def written_count(self) -> int:
        return sum(1 for p in self.pages if p.status != PageStatus.FAILED)

    @property
    def degraded_count(self) -> int:
        return sum(1 for p in self.pages if p.status == PageStatus.DEGRADED)

    @property
    def failed_count(self) -> int:
        return sum(1 for p in self.pages if p.status == PageStatus.FAILED)

    @property
    def attachments_copied(self) -> int:
        return sum(p.attachments_copied for p in self.pages)
