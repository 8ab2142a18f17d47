"""Conversion entry point: markdown text in, DOCX bytes out."""
from __future__ import annotations

import logging
from typing import Any

from .docx_renderer import DocxRenderer
from .errors import MarkdownConversionError
from .image_fetcher import ImageFetcher
from .markdown_parser import parse_markdown
from .style import StyleResolver
from .validation import coerce_options, validate_markdown, validate_style

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


async def convert_markdown_to_docx(
    markdown: str,
    options: Any = None,
    *,
    image_fetcher: ImageFetcher | None = None,
) -> bytes:
    """Convert ``markdown`` into a DOCX payload.

    ``options`` may be ``None``, a mapping (snake_case or camelCase keys),
    :class:`~markdown_docx.style.ConversionOptions` or a bare
    :class:`~markdown_docx.style.StyleConfig`.

    Raises
    ------
    InputValidationError
        The markdown or one of the style options is invalid. Nothing is parsed.
    MarkdownConversionError
        Document assembly failed; the original exception is chained.
    """

    validate_markdown(markdown)
    resolved = coerce_options(options)
    validate_style(resolved.style)

    try:
        document = await parse_markdown(markdown, resolved, image_fetcher=image_fetcher)
        renderer = DocxRenderer(StyleResolver(resolved.style, resolved.document_type))
        return renderer.render(document)
    except MarkdownConversionError:
        raise
    except Exception as exc:
        logger.exception("Failed to assemble DOCX document")
        raise MarkdownConversionError(
            f"Failed to convert markdown to docx: {exc}",
            {"original_error": repr(exc)},
        ) from exc


__all__ = ["DOCX_MEDIA_TYPE", "convert_markdown_to_docx"]
