"""Download remote images for embedding into the generated document."""
from __future__ import annotations

import logging
from typing import Protocol

import httpx

from .core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ImageFetchError(RuntimeError):
    """Raised when an image cannot be downloaded."""


class ImageFetcher(Protocol):
    """Anything able to turn an image URL into raw bytes."""

    async def fetch(self, url: str) -> bytes:  # pragma: no cover - protocol
        ...


class HttpxImageFetcher:
    """Asynchronous HTTP image fetcher without retries."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_bytes: int = 10 * 1024 * 1024,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HttpxImageFetcher":
        settings = settings or get_settings()
        return cls(timeout=settings.image_fetch_timeout, max_bytes=settings.image_max_bytes)

    async def fetch(self, url: str) -> bytes:
        logger.debug("Fetching image %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    payload = await self._read_capped(url, response)
        except httpx.HTTPStatusError as exc:
            raise ImageFetchError(
                f"Failed to fetch image: {exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ImageFetchError(f"Failed to fetch image {url}: {exc}") from exc

        if not payload:
            raise ImageFetchError(f"Image {url} is empty")
        logger.debug("Fetched %s bytes from %s", len(payload), url)
        return payload

    async def _read_capped(self, url: str, response: httpx.Response) -> bytes:
        declared = response.headers.get("Content-Length", "")
        if declared.isdigit() and int(declared) > self.max_bytes:
            raise ImageFetchError(f"Image {url} exceeds {self.max_bytes} bytes ({declared})")

        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if received > self.max_bytes:
                raise ImageFetchError(f"Image {url} exceeds {self.max_bytes} bytes")
            chunks.append(chunk)
        return b"".join(chunks)


__all__ = ["HttpxImageFetcher", "ImageFetchError", "ImageFetcher"]
