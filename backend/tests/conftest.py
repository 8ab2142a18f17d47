"""Shared fixtures for the markdown conversion tests."""

from __future__ import annotations

import struct
import zlib

import pytest


def _chunk(kind: bytes, data: bytes) -> bytes:
    body = kind + data
    return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)


def make_png(width: int = 2, height: int = 2) -> bytes:
    """Build a tiny valid RGB PNG."""

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    raw = b"".join(b"\x00" + b"\xff\x00\x00" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


class StubImageFetcher:
    """Image fetcher stub that serves canned payloads and records requests."""

    def __init__(self, payloads: dict[str, bytes] | None = None) -> None:
        self.payloads = payloads or {}
        self.requested: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self.payloads:
            raise RuntimeError(f"unknown image {url}")
        return self.payloads[url]


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def image_fetcher(png_bytes: bytes) -> StubImageFetcher:
    return StubImageFetcher({"https://example.com/logo.png": png_bytes})
