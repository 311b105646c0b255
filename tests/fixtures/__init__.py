"""Test fixtures for export migration tests.

This module provides builders for sample entities.xml export dumps.
"""

from .sample_exports import (
    HOME_REVISIONS_EXPORT,
    attachment_object,
    body_object,
    embed,
    entities_xml,
    page_object,
    unrelated_object,
    write_export,
)

__all__ = [
    'HOME_REVISIONS_EXPORT',
    'attachment_object',
    'body_object',
    'embed',
    'entities_xml',
    'page_object',
    'unrelated_object',
    'write_export',
]
