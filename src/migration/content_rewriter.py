"""Rewriting of page bodies before Markdown conversion.

ContentRewriter works purely on bytes and returns data for OutputWriter; it
performs no file I/O. Two passes are applied to a page body:

1. Attachment embeds

       <ac:image><ri:attachment ri:filename="diagram.png" /></ac:image>

   become portable image references into the page's own output directory

       <img src="<slug>/diagram.png" alt="diagram.png">

   and every resolved attachment yields one CopyJob. Embeds naming a file
   that is not attached to the page, or an attachment whose storage or
   output path would leave its directory, are left untouched.

2. Decorative attributes on DECORATIVE_TAGS are removed while the tag is
   kept (<span style="color: red;"> -> <span>), since pandoc does not
   round-trip them and leaves visible artifacts.
"""

import html
import logging
import re
from pathlib import Path
from typing import Dict, List, Union

from src.export_reader.models import Attachment

from .models import CopyJob, PageBundle, RewriteResult
from .slugify import slugify

logger = logging.getLogger(__name__)

ATTACHMENTS_SEGMENT = "attachments"

# <ac:image [attrs]> <ri:attachment [attrs] ri:filename="NAME" [attrs] /> </ac:image>
EMBED_PATTERN = re.compile(
    rb'<ac:image(?:\s[^>]*)?>\s*'
    rb'<ri:attachment\s+(?:[^>]*?\s)?ri:filename="([^"]+)"[^>]*?/>\s*'
    rb'</ac:image>'
)

DECORATIVE_TAGS = ("span",)


def _attribute_stripping_pattern(tags) -> "re.Pattern[bytes]":
    names = b"|".join(re.escape(tag.encode("ascii")) for tag in tags)
    return re.compile(
        rb"<(" + names + rb")"
        rb"""(?:\s+[A-Za-z_:][-A-Za-z0-9_:.]*\s*=\s*(?:"[^"]*"|'[^']*'))*"""
        rb"\s*>"
    )


DECORATIVE_ATTRIBUTE_PATTERN = _attribute_stripping_pattern(DECORATIVE_TAGS)


def strip_decorative_attributes(body: bytes) -> bytes:
    """Remove all attributes from DECORATIVE_TAGS opening tags."""
    return DECORATIVE_ATTRIBUTE_PATTERN.sub(rb"<\1>", body)


def find_embedded_filenames(body: bytes) -> List[str]:
    """Return the filenames of all attachment embeds in body, in order."""
    return [_decode_filename(m.group(1)) for m in EMBED_PATTERN.finditer(body)]


def attachment_source_path(
    export_root: Union[str, Path],
    page_id: str,
    attachment: Attachment,
) -> Path:
    """Location of an attachment payload inside the export.

    The export stores payloads at attachments/<page id>/<attachment id>/<revision>,
    with the revision written exactly as in the dump (the decoded number is
    used only when the dump has no version text).
    """
    return (
        Path(export_root)
        / ATTACHMENTS_SEGMENT
        / page_id
        / attachment.identity
        / (attachment.revision_label or str(attachment.revision))
    )


def _decode_filename(raw: bytes) -> str:
    return html.unescape(raw.decode("utf-8", errors="replace"))


def is_safe_filename(title: str) -> bool:
    """True if title can be used as a file name inside a single directory.

    Titles containing path separators or NUL, and the names "." and "..",
    would place the copy outside the page's attachment directory.
    """
    if title in ("", ".", ".."):
        return False
    return not any(ch in title for ch in ("/", "\\", "\0"))


class ContentRewriter:
    """Rewrites attachment embeds and derives attachment copy jobs.

    Example:
        >>> rewriter = ContentRewriter("export/", "wiki/")
        >>> result = rewriter.rewrite(bundle)
        >>> result.copy_jobs[0].dest_path
        PosixPath('wiki/Home/logo.png')
    """

    def __init__(self, export_root: Union[str, Path], output_root: Union[str, Path]):
        """Initialize ContentRewriter.

        Args:
            export_root: Root directory of the Confluence export
            output_root: Root directory of the migrated wiki
        """
        self.export_root = Path(export_root)
        self.output_root = Path(output_root)

    def rewrite(self, bundle: PageBundle) -> RewriteResult:
        """Rewrite one page body.

        Args:
            bundle: Assembled page

        Returns:
            RewriteResult with the rewritten body and the copy jobs needed
        """
        page = bundle.page
        slug = slugify(page.title)
        result = RewriteResult(
            slug=slug,
            body=bundle.body,
            attachment_dir=self.output_root / slug,
        )

        by_title: Dict[str, Attachment] = {}
        for attachment in bundle.attachments:
            # First attachment wins when titles collide
            by_title.setdefault(attachment.title, attachment)

        jobs_by_id: Dict[str, CopyJob] = {}

        def replace(match: "re.Match[bytes]") -> bytes:
            filename = _decode_filename(match.group(1))
            attachment = by_title.get(filename)
            if attachment is None:
                result.unresolved.append(filename)
                logger.debug(f"Page '{page.title}': no attachment named '{filename}'; leaving embed as is")
                return match.group(0)

            segments = (
                attachment.title,
                page.identity,
                attachment.identity,
                attachment.revision_label or str(attachment.revision),
            )
            if not all(is_safe_filename(segment) for segment in segments):
                result.unresolved.append(filename)
                logger.warning(
                    f"Page '{page.title}': attachment '{attachment.title}' ({attachment.identity}) "
                    f"has an unsafe path component; leaving embed as is"
                )
                return match.group(0)

            if attachment.identity not in jobs_by_id:
                jobs_by_id[attachment.identity] = CopyJob(
                    attachment=attachment,
                    source_path=attachment_source_path(self.export_root, page.identity, attachment),
                    dest_path=result.attachment_dir / attachment.title,
                )
            return self._image_reference(slug, attachment.title)

        body = EMBED_PATTERN.sub(replace, bundle.body)
        result.body = strip_decorative_attributes(body)
        result.copy_jobs = list(jobs_by_id.values())

        if result.unresolved:
            logger.warning(
                f"Page '{page.title}': {len(result.unresolved)} embedded attachment(s) not found: "
                f"{', '.join(result.unresolved)}"
            )
        return result

    @staticmethod
    def _image_reference(slug: str, title: str) -> bytes:
        target = html.escape(f"{slug}/{title}", quote=True)
        alt = html.escape(title, quote=True)
        return f'<img src="{target}" alt="{alt}">'.encode("utf-8")
