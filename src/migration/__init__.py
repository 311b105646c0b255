"""Migration pipeline from indexed export entities to Markdown output.

This package assembles pages from the entity index, rewrites attachment
embeds into portable image references, and writes documents and attachment
files to the output directory.
"""

from .content_rewriter import ContentRewriter
from .errors import (
    DanglingReferenceError,
    OutputError,
    OutputWriteError,
    AttachmentCopyError,
)
from .models import (
    CopyJob,
    MigrationReport,
    PageBundle,
    PageResult,
    PageStatus,
    RewriteResult,
)
from .output_writer import OutputWriter, strip_leftover_tags
from .page_assembler import PageAssembler
from .slugify import slugify

__all__ = [
    'ContentRewriter',
    'DanglingReferenceError',
    'OutputError',
    'OutputWriteError',
    'AttachmentCopyError',
    'CopyJob',
    'MigrationReport',
    'PageBundle',
    'PageResult',
    'PageStatus',
    'RewriteResult',
    'OutputWriter',
    'strip_leftover_tags',
    'PageAssembler',
    'slugify',
]
