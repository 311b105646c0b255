"""Entity index built from the generic object dump.

The index classifies every GenericObject into a tagged variant and keeps,
for each logical entity, the record with the highest known revision:

- Pages are keyed by title
- Attachments are keyed by identity
- Body contents are keyed by identity

On equal revisions the record seen first is kept. The export format does not
guarantee object order, so a regenerated export with tied revisions may
resolve differently.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Union

from .dump_parser import ENTITIES_FILENAME, DumpParser
from .models import Attachment, BodyContent, Entity, GenericObject, Ignored, Page
from .revision import decode_revision

logger = logging.getLogger(__name__)

PAGE_SIGNATURE = ("Page", "com.atlassian.confluence.pages")
BODY_CONTENT_SIGNATURE = ("BodyContent", "com.atlassian.confluence.core")
ATTACHMENT_SIGNATURE = ("Attachment", "com.atlassian.confluence.pages")


def classify(obj: GenericObject, revision_encoding: str = "varint") -> Entity:
    """Interpret a generic object as a Page, BodyContent, Attachment or Ignored.

    Args:
        obj: Generic object parsed from the dump
        revision_encoding: Encoding of the version property ("varint" or "decimal")

    Returns:
        The typed record for recognised class/package pairs, Ignored otherwise
    """
    signature = (obj.class_name, obj.package)

    if signature == PAGE_SIGNATURE:
        body_refs = obj.collections.get("bodyContents", [])
        return Page(
            identity=obj.identity,
            title=obj.property_text("title"),
            revision=decode_revision(obj.properties.get("version", b""), revision_encoding),
            revision_label=obj.property_text("version").strip(),
            body_id=body_refs[0].identity if body_refs else None,
            attachment_refs=list(obj.collections.get("attachments", [])),
        )

    if signature == BODY_CONTENT_SIGNATURE:
        return BodyContent(
            identity=obj.identity,
            body=obj.properties.get("body", b""),
        )

    if signature == ATTACHMENT_SIGNATURE:
        return Attachment(
            identity=obj.identity,
            title=obj.property_text("title"),
            revision=decode_revision(obj.properties.get("version", b""), revision_encoding),
            revision_label=obj.property_text("version").strip(),
        )

    return Ignored(source=obj)


class EntityIndex:
    """Read-only maps of the latest pages, bodies and attachments of a dump.

    Build instances with EntityIndex.build() or EntityIndex.from_file(); the
    maps are exposed as read-only views and never change afterwards.

    Attributes:
        pages_by_title: Title -> retained Page
        body_contents_by_id: Identity -> BodyContent
        attachments_by_id: Identity -> retained Attachment
        ignored_count: Number of objects with unrecognised class/package

    Example:
        >>> index = EntityIndex.from_file("export/entities.xml")
        >>> page = index.pages_by_title["Home"]
    """

    def __init__(
        self,
        pages_by_title: Dict[str, Page],
        body_contents_by_id: Dict[str, BodyContent],
        attachments_by_id: Dict[str, Attachment],
        ignored_count: int = 0,
    ):
        self.pages_by_title: Mapping[str, Page] = MappingProxyType(pages_by_title)
        self.body_contents_by_id: Mapping[str, BodyContent] = MappingProxyType(body_contents_by_id)
        self.attachments_by_id: Mapping[str, Attachment] = MappingProxyType(attachments_by_id)
        self.ignored_count = ignored_count

    @classmethod
    def build(
        cls,
        objects: Iterable[GenericObject],
        revision_encoding: str = "varint",
    ) -> "EntityIndex":
        """Classify objects and resolve revision conflicts.

        Args:
            objects: Generic objects in dump order
            revision_encoding: Encoding of version properties

        Returns:
            Populated EntityIndex
        """
        pages: Dict[str, Page] = {}
        bodies: Dict[str, BodyContent] = {}
        attachments: Dict[str, Attachment] = {}
        ignored = 0

        for obj in objects:
            entity = classify(obj, revision_encoding)

            if isinstance(entity, Page):
                _keep_latest(pages, entity.title, entity)
            elif isinstance(entity, BodyContent):
                bodies[entity.identity] = entity
            elif isinstance(entity, Attachment):
                _keep_latest(attachments, entity.identity, entity)
            else:
                ignored += 1

        logger.info(
            f"Indexed {len(pages)} page(s), {len(bodies)} body content(s), "
            f"{len(attachments)} attachment(s); ignored {ignored} object(s)"
        )
        return cls(pages, bodies, attachments, ignored)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        revision_encoding: str = "varint",
        parser: Optional[DumpParser] = None,
    ) -> "EntityIndex":
        """Parse an entities.xml file and build the index.

        Args:
            path: Path to entities.xml, or to the export root containing it
            revision_encoding: Encoding of version properties
            parser: DumpParser to use (a default one is created if omitted)

        Raises:
            ExportReadError: If the file cannot be read
            MalformedDumpError: If the dump is structurally unparsable
        """
        path = Path(path)
        if path.is_dir():
            path = path / ENTITIES_FILENAME

        parser = parser or DumpParser()
        return cls.build(parser.parse_file(path), revision_encoding)


def _keep_latest(
    records: Dict[str, Union[Page, Attachment]],
    key: str,
    candidate: Union[Page, Attachment],
) -> None:
    """Store candidate under key unless an equal or newer revision is stored."""
    current = records.get(key)
    if current is None:
        records[key] = candidate
    elif candidate.revision > current.revision:
        logger.debug(
            f"Replacing {type(candidate).__name__} '{key}' revision {current.revision} "
            f"with revision {candidate.revision}"
        )
        records[key] = candidate
    elif candidate.revision == current.revision:
        logger.debug(
            f"Duplicate {type(candidate).__name__} '{key}' at revision {candidate.revision}; "
            f"keeping first seen ({current.identity})"
        )
