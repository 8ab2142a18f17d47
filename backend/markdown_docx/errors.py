"""Exception hierarchy shared by the conversion pipeline and the API layer."""
from __future__ import annotations

from typing import Any


class MarkdownConversionError(RuntimeError):
    """Raised when a markdown document cannot be converted.

    Parameters
    ----------
    message:
        Human readable explanation of the failure.
    context:
        Machine-inspectable details (offending field, original error, ...).
    """

    code = "conversion_failed"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


class InputValidationError(MarkdownConversionError):
    """Raised before parsing when the input or options are unusable."""

    code = "invalid_input"


class InvalidMarkdownError(InputValidationError):
    """Raised when the markdown payload is not a non-empty string."""

    code = "invalid_markdown"


class StyleValidationError(InputValidationError):
    """Raised when a style option is malformed or outside its documented range."""

    def __init__(self, message: str, *, field: str, value: Any, code: str) -> None:
        super().__init__(message, {field: value})
        self.field = field
        self.value = value
        self.code = code


__all__ = [
    "InputValidationError",
    "InvalidMarkdownError",
    "MarkdownConversionError",
    "StyleValidationError",
]
