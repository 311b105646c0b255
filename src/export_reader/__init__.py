"""Reader for Confluence XML export dumps.

This package parses the flat entities.xml object dump of a Confluence export
and indexes the latest revision of every page, page body and attachment.
"""

from .dump_parser import DumpParser
from .entity_index import EntityIndex, classify
from .errors import (
    MigrationError,
    ExportError,
    MalformedDumpError,
    ExportReadError,
)
from .models import (
    Attachment,
    BodyContent,
    ElementRef,
    GenericObject,
    Ignored,
    Page,
)
from .revision import decode_revision, decode_uvarint

__all__ = [
    'DumpParser',
    'EntityIndex',
    'classify',
    'MigrationError',
    'ExportError',
    'MalformedDumpError',
    'ExportReadError',
    'Attachment',
    'BodyContent',
    'ElementRef',
    'GenericObject',
    'Ignored',
    'Page',
    'decode_revision',
    'decode_uvarint',
]
