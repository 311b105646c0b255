"""Content conversion module for storage format → Markdown conversion.

This module provides the MarkdownConverter, the boundary to the external
Pandoc utility.
"""

from .errors import ConversionError, ConverterNotFoundError
from .markdown_converter import MarkdownConverter, PANDOC_ARGS

__all__ = ['ConversionError', 'ConverterNotFoundError', 'MarkdownConverter', 'PANDOC_ARGS']
