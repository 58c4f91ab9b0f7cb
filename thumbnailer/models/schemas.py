"""
Pydantic models for frame capture and thumbnail results.

FrameCapture validates the plain object returned by the in-page capture
script; ThumbnailResult is what generate_thumbnail() hands back to callers.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class FrameCapture(BaseModel):
    """Outcome of the in-page capture script."""
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["resolved", "failed"]
    data_url: Optional[str] = Field(default=None, alias="dataUrl")
    width: int = 0
    height: int = 0
    reason: Optional[Literal["load", "timeout", "capture"]] = None
    message: Optional[str] = None
    seeked_count: int = Field(default=0, alias="seekedCount")


class ThumbnailResult(BaseModel):
    file_path: str
    size_bytes: int
    width: int
    height: int
    mime_type: str
    video_url: str
