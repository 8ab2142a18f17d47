"""Common dependency functions for API routes."""

from functools import lru_cache
from typing import Generator

from markdown_docx.core.config import get_settings, settings
from markdown_docx.image_fetcher import HttpxImageFetcher, ImageFetcher


@lru_cache
def get_image_fetcher() -> ImageFetcher:
    return HttpxImageFetcher.from_settings(settings)


def get_app_settings() -> Generator:
    yield get_settings()
