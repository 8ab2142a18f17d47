"""Markdown to DOCX conversion."""

from .converter import DOCX_MEDIA_TYPE, convert_markdown_to_docx
from .document_models import Document
from .errors import InputValidationError, InvalidMarkdownError, MarkdownConversionError, StyleValidationError
from .markdown_parser import parse_markdown
from .style import ConversionOptions, StyleConfig

__all__ = [
    "ConversionOptions",
    "DOCX_MEDIA_TYPE",
    "Document",
    "InputValidationError",
    "InvalidMarkdownError",
    "MarkdownConversionError",
    "StyleConfig",
    "StyleValidationError",
    "convert_markdown_to_docx",
    "parse_markdown",
]
