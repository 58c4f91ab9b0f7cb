"""
Pytest configuration and shared fixtures for test suite.

This module provides:
- Settings fixtures isolated from the developer's environment
- Synthetic JPEG / data URL builders
- A fake browser launcher standing in for Playwright
- Sample video files on disk
"""

import base64
import io
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import httpx
import pytest
from PIL import Image

from thumbnailer.config import Settings


def make_jpeg(width: int = 32, height: int = 24) -> bytes:
    """Encode a solid-colour JPEG of the given size with Pillow."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format="JPEG", quality=95)
    return buf.getvalue()


def make_png(width: int = 32, height: int = 24) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (30, 30, 200)).save(buf, format="PNG")
    return buf.getvalue()


def make_data_url(image_bytes: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(image_bytes).decode("ascii")


def resolved_capture(width: int = 32, height: int = 24, seeked_count: int = 1) -> Dict[str, Any]:
    return {
        "status": "resolved",
        "dataUrl": make_data_url(make_jpeg(width, height)),
        "width": width,
        "height": height,
        "seekedCount": seeked_count,
    }


def failed_capture(reason: str, message: str) -> Dict[str, Any]:
    return {
        "status": "failed",
        "reason": reason,
        "message": message,
        "width": 0,
        "height": 0,
        "seekedCount": 0,
    }


class FakePage:
    """Page double: records set_content/evaluate and optionally fetches the video URL."""

    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser
        self.html: Optional[str] = None
        self.evaluations: List[Dict[str, Any]] = []

    async def set_content(self, html: str) -> None:
        self.html = html

    async def evaluate(self, script: str, arg: Dict[str, Any]) -> Any:
        self.evaluations.append(arg)
        if self.browser.fetch_video:
            async with httpx.AsyncClient(trust_env=False) as client:
                self.browser.fetched.append(await client.get(arg["src"]))
        if isinstance(self.browser.result, BaseException):
            raise self.browser.result
        return self.browser.result


class FakeBrowser:
    def __init__(self, result: Any, fetch_video: bool = True):
        self.result = result
        self.fetch_video = fetch_video
        self.fetched: List[httpx.Response] = []
        self.pages: List[FakePage] = []
        self.launches: List[Dict[str, Any]] = []
        self.closed = 0

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page


def make_launcher(result: Any, fetch_video: bool = True):
    """Build a launcher(headless=..., args=...) context manager around a FakeBrowser."""
    browser = FakeBrowser(result, fetch_video=fetch_video)

    @asynccontextmanager
    async def launcher(headless: bool = True, args: Optional[List[str]] = None):
        browser.launches.append({"headless": headless, "args": args})
        try:
            yield browser
        finally:
            browser.closed += 1

    launcher.browser = browser
    return launcher


@pytest.fixture
def settings():
    """Default settings, ignoring THUMBNAIL_* variables and .env of the host."""
    return Settings(_env_file=None).model_copy(update={
        "video_path": "example.mp4",
        "output_path": "thumbnail.jpg",
        "capture_timeout_ms": 10000,
        "jpeg_quality": 0.95,
        "extra_mime_types": {},
    })


@pytest.fixture
def video_bytes():
    """Stand-in video payload (the fake browser never decodes it)."""
    return b"\x00\x00\x00\x18ftypmp42" + bytes(range(256)) * 4


@pytest.fixture
def video_file(tmp_path, video_bytes):
    path = tmp_path / "example.mp4"
    path.write_bytes(video_bytes)
    return path


@pytest.fixture
def output_file(tmp_path):
    return tmp_path / "out" / "thumbnail.jpg"
