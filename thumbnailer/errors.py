"""
Exception types raised while generating a thumbnail.

Callers can catch ThumbnailError for every failure this package classifies;
anything else propagates with its original type and message.
"""

PLAYWRIGHT_INSTALL_HINT = "pip install playwright && playwright install chromium"


class ThumbnailError(Exception):
    """Base class for thumbnail generation failures."""


class VideoNotFoundError(ThumbnailError, FileNotFoundError):
    """The input video path does not exist."""

    def __init__(self, video_path: str):
        self.video_path = video_path
        super().__init__(f"Video file does not exist: {video_path}")


class AutomationUnavailableError(ThumbnailError):
    """Playwright (or its Chromium build) is not installed."""

    def __init__(self, detail: str = "Playwright is not installed!"):
        self.detail = detail
        self.install_hint = PLAYWRIGHT_INSTALL_HINT
        super().__init__(f"{detail} Install it with: {PLAYWRIGHT_INSTALL_HINT}")


class VideoLoadError(ThumbnailError):
    """The browser could not load or decode the served video."""


class FrameTimeoutError(ThumbnailError, TimeoutError):
    """No metadata or seek event arrived within the capture timeout."""


class FrameCaptureError(ThumbnailError):
    """The frame could not be drawn, exported or decoded as a JPEG."""
