"""
Models package for capture and thumbnail results.

This package contains Pydantic models used to validate what the browser
returns and to describe the written thumbnail.
"""

from .schemas import (
    FrameCapture,
    ThumbnailResult,
)

__all__ = [
    "FrameCapture",
    "ThumbnailResult",
]
