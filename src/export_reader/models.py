"""Data models for the export reader.

This module defines the generic object representation parsed from
entities.xml and the typed records (Page, BodyContent, Attachment) that the
entity index derives from it. All models use dataclasses.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass
class ElementRef:
    """A reference to another object inside a named collection.

    Example XML:
        <element class="BodyContent" package="com.atlassian.confluence.core">
            <id name="id">2523176</id>
        </element>

    Attributes:
        class_name: Class attribute of the referenced object
        package: Package attribute of the referenced object
        identity: Identifier of the referenced object
    """
    class_name: str
    package: str
    identity: str


@dataclass
class GenericObject:
    """One <object> record of the export dump, uninterpreted.

    Attributes:
        identity: Text of the object's <id> child
        class_name: Value of the class attribute (e.g. "Page")
        package: Value of the package attribute
        properties: Property name -> raw bytes of the property text
        collections: Collection name -> ordered element references
    """
    identity: str
    class_name: str
    package: str
    properties: Dict[str, bytes] = field(default_factory=dict)
    collections: Dict[str, List[ElementRef]] = field(default_factory=dict)

    def property_text(self, name: str) -> str:
        """Return a property decoded as UTF-8 text, or "" when absent."""
        return self.properties.get(name, b"").decode("utf-8", errors="replace")


@dataclass
class Page:
    """Latest-known revision of a logical Confluence page.

    Attributes:
        identity: Page object identifier (also the attachment storage folder)
        title: Page title, the key used for revision precedence
        revision: Decoded revision number (0 when missing or garbled)
        revision_label: Literal text of the version property
        body_id: Identifier of the first bodyContents element, if any
        attachment_refs: Ordered references from the attachments collection
    """
    identity: str
    title: str
    revision: int = 0
    revision_label: str = ""
    body_id: Optional[str] = None
    attachment_refs: List[ElementRef] = field(default_factory=list)


@dataclass
class BodyContent:
    """Raw storage-format body of a page."""
    identity: str
    body: bytes = b""


@dataclass
class Attachment:
    """Latest-known revision of an attachment.

    Attributes:
        identity: Attachment object identifier
        title: File name shown in Confluence and used in embed markup
        revision: Decoded revision number (0 when missing or garbled)
        revision_label: Literal text of the version property, used verbatim
            as the last segment of the attachment's storage path
    """
    identity: str
    title: str
    revision: int = 0
    revision_label: str = ""


@dataclass
class Ignored:
    """An object whose class/package is not one the migration understands."""
    source: GenericObject


Entity = Union[Page, BodyContent, Attachment, Ignored]
