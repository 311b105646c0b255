"""Parser for the entities.xml object dump of a Confluence XML export.

The dump models every record the same way:

    <hibernate-generic datetime="...">
        <object class="Page" package="com.atlassian.confluence.pages">
            <id name="id">2523175</id>
            <property name="title"><![CDATA[Home]]></property>
            <property name="version">5</property>
            <collection name="bodyContents" class="java.util.Collection">
                <element class="BodyContent" package="com.atlassian.confluence.core">
                    <id name="id">2523176</id>
                </element>
            </collection>
        </object>
        ...
    </hibernate-generic>

DumpParser turns that document into GenericObject records without
interpreting them; classification happens in the entity index.
"""

import logging
from pathlib import Path
from typing import List, Union

from lxml import etree

from .errors import ExportReadError, MalformedDumpError
from .models import ElementRef, GenericObject

logger = logging.getLogger(__name__)

ROOT_TAG = "hibernate-generic"
ENTITIES_FILENAME = "entities.xml"


class DumpParser:
    """Parses the generic object/property/collection grammar of entities.xml.

    Uses lxml with entity resolution and network access disabled so a crafted
    export cannot pull in external files. huge_tree is enabled because space
    exports routinely contain text nodes larger than libxml2's default limit.
    """

    def __init__(self):
        """Initialize DumpParser with a hardened lxml parser."""
        self.parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            huge_tree=True,
            remove_comments=True,
        )

    def parse_file(self, path: Union[str, Path]) -> List[GenericObject]:
        """Read and parse an entities.xml file.

        Args:
            path: Path to entities.xml

        Returns:
            GenericObject records in document order

        Raises:
            ExportReadError: If the file cannot be read
            MalformedDumpError: If the file is not a well-formed dump
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ExportReadError(str(path), e.strerror or str(e)) from e

        logger.debug(f"Read {len(data)} bytes from {path}")
        return self.parse(data, source=str(path))

    def parse(self, data: bytes, source: str = "<bytes>") -> List[GenericObject]:
        """Parse dump bytes into generic objects.

        Args:
            data: Raw bytes of an entities.xml document
            source: Name used in error messages

        Returns:
            GenericObject records in document order

        Raises:
            MalformedDumpError: If the bytes are not well-formed XML or the
                root element is not <hibernate-generic>
        """
        if not data.strip():
            raise MalformedDumpError(source, "document is empty")

        try:
            root = etree.fromstring(data, parser=self.parser)
        except etree.XMLSyntaxError as e:
            line = e.position[0] if e.position else None
            raise MalformedDumpError(source, e.msg or str(e), line) from e

        if root.tag != ROOT_TAG:
            raise MalformedDumpError(
                source,
                f"expected root element <{ROOT_TAG}>, found <{root.tag}>",
            )

        objects = [self._parse_object(element) for element in root.iterchildren("object")]
        logger.info(f"Parsed {len(objects)} object(s) from {source}")
        return objects

    def _parse_object(self, element) -> GenericObject:
        """Convert one <object> element into a GenericObject.

        Repeated property or collection names keep the last occurrence.
        """
        obj = GenericObject(
            identity=_text(element.find("id")),
            class_name=element.get("class", ""),
            package=element.get("package", ""),
        )

        for prop in element.iterchildren("property"):
            obj.properties[prop.get("name", "")] = _chardata(prop).encode("utf-8")

        for collection in element.iterchildren("collection"):
            obj.collections[collection.get("name", "")] = [
                ElementRef(
                    class_name=ref.get("class", ""),
                    package=ref.get("package", ""),
                    identity=_text(ref.find("id")),
                )
                for ref in collection.iterchildren("element")
            ]

        return obj


def _text(element) -> str:
    """Return the stripped text of an element, or "" when it is missing."""
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _chardata(element) -> str:
    """Return the character data directly inside element.

    Text of nested child elements is skipped but the text following each
    child is kept, so only the element's own character data is returned.
    """
    parts = [element.text or ""]
    for child in element:
        parts.append(child.tail or "")
    return "".join(parts)
