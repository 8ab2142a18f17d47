"""Pre-parse validation of markdown input and conversion options."""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from .errors import InvalidMarkdownError, StyleValidationError
from .style import ConversionOptions, StyleConfig

_SIZE_RANGE = (8, 72)
_SPACING_RANGE = (0, 720)
_LINE_SPACING_RANGE = (1.0, 3.0)

# field name -> (range, error code, message)
_STYLE_RULES: dict[str, tuple[tuple[float, float], str, str]] = {
    "title_size": (_SIZE_RANGE, "invalid_title_size", "Invalid title size: Must be between 8 and 72 points"),
    "heading_spacing": (
        _SPACING_RANGE,
        "invalid_heading_spacing",
        "Invalid heading spacing: Must be between 0 and 720 twips",
    ),
    "paragraph_spacing": (
        _SPACING_RANGE,
        "invalid_paragraph_spacing",
        "Invalid paragraph spacing: Must be between 0 and 720 twips",
    ),
    "line_spacing": (_LINE_SPACING_RANGE, "invalid_line_spacing", "Invalid line spacing: Must be between 1 and 3"),
}

_FONT_SIZE_FIELDS = (
    "heading1_size",
    "heading2_size",
    "heading3_size",
    "heading4_size",
    "heading5_size",
    "paragraph_size",
    "list_item_size",
    "code_block_size",
    "blockquote_size",
)


def _alias(field: str) -> str:
    info = StyleConfig.model_fields.get(field)
    return info.alias if info is not None and info.alias else field


def validate_markdown(markdown: Any) -> None:
    """Reject non-string or empty markdown input."""

    if not isinstance(markdown, str) or not markdown:
        raise InvalidMarkdownError(
            "Invalid markdown input: Markdown must be a non-empty string",
            {"type": type(markdown).__name__},
        )


def validate_style(style: StyleConfig) -> None:
    """Check every set style value against its documented range."""

    for field, ((low, high), code, message) in _STYLE_RULES.items():
        value = getattr(style, field)
        if value is not None and not low <= value <= high:
            raise StyleValidationError(
                f"{message} ({_alias(field)}={value})",
                field=field,
                value=value,
                code=code,
            )

    low, high = _SIZE_RANGE
    for field in _FONT_SIZE_FIELDS:
        value = getattr(style, field)
        if value is not None and not low <= value <= high:
            raise StyleValidationError(
                f"Invalid font size: {_alias(field)} must be between {low} and {high} points ({value})",
                field=field,
                value=value,
                code="invalid_font_size",
            )


def _field_from_error(error: Mapping[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "style"]
    if not location:
        return "options"
    name = location[0]
    for field, info in StyleConfig.model_fields.items():
        if info.alias == name:
            return field
    return name


def coerce_options(options: Any) -> ConversionOptions:
    """Normalise the accepted option shapes into :class:`ConversionOptions`.

    A mapping may either nest style fields under ``style`` or carry them at
    the top level next to ``documentType``.
    """

    if options is None:
        return ConversionOptions()
    if isinstance(options, ConversionOptions):
        return options
    if isinstance(options, StyleConfig):
        return ConversionOptions(style=options)
    if not isinstance(options, Mapping):
        raise StyleValidationError(
            "Invalid options: expected a mapping or ConversionOptions",
            field="options",
            value=type(options).__name__,
            code="invalid_option",
        )
    data = dict(options)
    if "style" not in data:
        # flat mapping: style fields next to an optional document type
        head = {key: data.pop(key) for key in ("document_type", "documentType") if key in data}
        data = {**head, "style": data}
    try:
        return ConversionOptions.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = _field_from_error(first)
        raise StyleValidationError(
            f"Invalid option {field}: {first.get('msg', 'invalid value')}",
            field=field,
            value=first.get("input"),
            code="invalid_option",
        ) from exc


__all__ = ["coerce_options", "validate_markdown", "validate_style"]
