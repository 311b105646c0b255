"""Page assembly from the entity index.

PageAssembler joins each retained page to its body content and attachments.
A broken page never blocks the others: a dangling body reference yields an
empty body and a recorded DanglingReferenceError, and dangling attachment
references are dropped.
"""

import logging
from typing import Iterator, List

from src.export_reader.entity_index import EntityIndex
from src.export_reader.models import Attachment, Page

from .errors import DanglingReferenceError
from .models import PageBundle

logger = logging.getLogger(__name__)


class PageAssembler:
    """Builds one PageBundle per retained page of an EntityIndex.

    Example:
        >>> assembler = PageAssembler(index)
        >>> for bundle in assembler.iter_bundles():
        ...     print(bundle.page.title, len(bundle.attachments))
    """

    def __init__(self, index: EntityIndex):
        """Initialize PageAssembler.

        Args:
            index: Entity index to read pages, bodies and attachments from
        """
        self.index = index

    def assemble(self) -> List[PageBundle]:
        """Assemble bundles for all retained pages in index order."""
        return list(self.iter_bundles())

    def iter_bundles(self) -> Iterator[PageBundle]:
        """Yield bundles one page at a time, in index order."""
        for page in self.index.pages_by_title.values():
            yield self.assemble_page(page)

    def assemble_page(self, page: Page) -> PageBundle:
        """Join a single page to its body and attachments.

        Args:
            page: Page record from the index

        Returns:
            PageBundle; its errors list holds any dangling body reference
        """
        bundle = PageBundle(page=page)

        if page.body_id is None:
            bundle.errors.append(
                DanglingReferenceError(page.title, page.identity, "body content")
            )
        else:
            body_content = self.index.body_contents_by_id.get(page.body_id)
            if body_content is None:
                bundle.errors.append(
                    DanglingReferenceError(page.title, page.identity, "body content", page.body_id)
                )
            else:
                bundle.body = body_content.body

        for error in bundle.errors:
            logger.warning(f"{error}; emitting page with empty body")

        bundle.attachments = self._resolve_attachments(page)
        return bundle

    def _resolve_attachments(self, page: Page) -> List[Attachment]:
        """Look up the page's attachment references, dropping missing ones."""
        attachments = []
        for ref in page.attachment_refs:
            attachment = self.index.attachments_by_id.get(ref.identity)
            if attachment is None:
                logger.debug(
                    f"Page '{page.title}' references missing attachment {ref.identity}; dropping it"
                )
                continue
            attachments.append(attachment)
        return attachments
