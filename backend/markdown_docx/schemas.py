"""Request and response schemas for the conversion API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .core.config import get_settings
from .document_models import DocumentType
from .style import StyleConfig


class ConversionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    markdown: str = Field(..., description="Markdown source to convert")
    document_type: DocumentType = Field(
        default_factory=lambda: get_settings().default_document_type,
        alias="documentType",
        description="Either a plain document or a report with shaded table headers.",
    )
    style: StyleConfig = Field(default_factory=StyleConfig, description="Optional style overrides")
    filename: Optional[str] = Field(
        default=None,
        description="Preferred name of the generated file, with or without the .docx suffix.",
    )


class HealthResponse(BaseModel):
    status: str
    app: str
    environment: str


__all__ = ["ConversionRequest", "HealthResponse"]
