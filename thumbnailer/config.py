"""
Configuration module for the video thumbnail generator.

This module centralizes all environment variables, constants, and runtime configuration
using pydantic-settings for type-safe configuration management.
"""

from functools import lru_cache
from typing import Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


# Chromium flags required to run inside containers and to play media without a user gesture
DEFAULT_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--autoplay-policy=no-user-gesture-required",
    "--disable-web-security",
    "--disable-features=IsolateOrigins,site-per-process",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Input / Output
    video_path: str = Field(
        default="example.mp4",
        validation_alias="THUMBNAIL_VIDEO_PATH",
        description="Video file to extract the first frame from"
    )

    output_path: str = Field(
        default="thumbnail.jpg",
        validation_alias="THUMBNAIL_OUTPUT_PATH",
        description="Destination path of the JPEG thumbnail (overwritten if present)"
    )

    # Ephemeral server
    server_host: str = Field(
        default="127.0.0.1",
        validation_alias="THUMBNAIL_SERVER_HOST",
        description="Interface the temporary video server binds to"
    )

    url_host: str = Field(
        default="localhost",
        validation_alias="THUMBNAIL_URL_HOST",
        description="Host name used in the video URL handed to the browser"
    )

    # Frame capture
    capture_timeout_ms: int = Field(
        default=10000,
        gt=0,
        validation_alias="THUMBNAIL_CAPTURE_TIMEOUT_MS",
        description="Milliseconds to wait for metadata and seek before failing"
    )

    jpeg_quality: float = Field(
        default=0.95,
        gt=0,
        le=1,
        validation_alias="THUMBNAIL_JPEG_QUALITY",
        description="JPEG quality passed to canvas.toDataURL (0-1]"
    )

    # Browser
    headless: bool = Field(
        default=True,
        validation_alias="THUMBNAIL_HEADLESS",
        description="Run Chromium without a visible window"
    )

    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS),
        validation_alias="THUMBNAIL_BROWSER_ARGS",
        description="Command line flags passed to Chromium (JSON list)"
    )

    # MIME types
    extra_mime_types: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias="THUMBNAIL_EXTRA_MIME_TYPES",
        description='Additional extension -> MIME type entries (JSON object, e.g. {".mkv": "video/x-matroska"})'
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias="THUMBNAIL_LOG_LEVEL",
        description="Log level name for the thumbnailer logger"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
