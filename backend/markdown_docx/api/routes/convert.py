"""Endpoints that turn markdown into DOCX downloads."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from markdown_docx.api.deps import get_app_settings, get_image_fetcher
from markdown_docx.converter import DOCX_MEDIA_TYPE, convert_markdown_to_docx
from markdown_docx.core.config import Settings
from markdown_docx.document_models import DocumentType
from markdown_docx.errors import InputValidationError, MarkdownConversionError
from markdown_docx.image_fetcher import ImageFetcher
from markdown_docx.schemas import ConversionRequest
from markdown_docx.style import ConversionOptions

logger = logging.getLogger("markdown_docx.api")

router = APIRouter(prefix="/convert", tags=["convert"])

DEFAULT_FILENAME = "document.docx"
ALLOWED_SUFFIXES = {".md", ".markdown", ".txt"}


def _sanitize_stem(value: str) -> str:
    cleaned = re.sub(r"[^\w\-. ]+", "_", value, flags=re.ASCII).strip(" ._")
    return cleaned[:120]


def _pick_filename(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_FILENAME
    stem = _sanitize_stem(Path(value).stem if value.lower().endswith((".docx", *ALLOWED_SUFFIXES)) else value)
    return f"{stem}.docx" if stem else DEFAULT_FILENAME


def _decode_upload(contents: bytes) -> str:
    try:
        return contents.decode("utf-8")
    except UnicodeDecodeError:
        return contents.decode("cp1251", errors="ignore")


def _docx_response(payload: bytes, filename: str) -> Response:
    return Response(
        content=payload,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _convert(markdown: str, options: ConversionOptions, fetcher: ImageFetcher) -> bytes:
    try:
        return await convert_markdown_to_docx(markdown, options, image_fetcher=fetcher)
    except InputValidationError as exc:
        logger.info("Rejected conversion request: %s", exc.message)
        raise HTTPException(status_code=400, detail=exc.to_dict()) from exc
    except MarkdownConversionError as exc:
        logger.error("Conversion failed: %s", exc.message)
        raise HTTPException(status_code=500, detail=exc.to_dict()) from exc


@router.post("", response_class=Response)
async def convert_markdown(
    payload: ConversionRequest,
    fetcher: ImageFetcher = Depends(get_image_fetcher),
) -> Response:
    options = ConversionOptions(document_type=payload.document_type, style=payload.style)
    document = await _convert(payload.markdown, options, fetcher)
    return _docx_response(document, _pick_filename(payload.filename))


@router.post("/file", response_class=Response)
async def convert_markdown_file(
    file: UploadFile = File(...),
    document_type: Optional[DocumentType] = Query(default=None),
    fetcher: ImageFetcher = Depends(get_image_fetcher),
    app_settings: Settings = Depends(get_app_settings),
) -> Response:
    filename = file.filename or "document.md"
    if Path(filename).suffix.lower() not in ALLOWED_SUFFIXES:
        raise HTTPException(status_code=415, detail=f"Unsupported file type: {filename}")
    text = _decode_upload(await file.read())
    if not text.strip():
        raise HTTPException(status_code=400, detail="Uploaded file is empty or unreadable")
    options = ConversionOptions(document_type=document_type or app_settings.default_document_type)
    document = await _convert(text, options, fetcher)
    return _docx_response(document, _pick_filename(filename))
