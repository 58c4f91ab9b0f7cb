"""
Thumbnail generation service.

This module orchestrates one thumbnail run: it validates the input video,
serves it from a temporary local server, captures the first frame in a
headless browser and writes the decoded JPEG to disk.
"""

import os
import logging
from typing import Optional, Union

from thumbnailer.config import Settings, get_settings
from thumbnailer.errors import AutomationUnavailableError, FrameCaptureError, VideoNotFoundError
from thumbnailer.models import ThumbnailResult
from thumbnailer.services.frame_extractor import BrowserLauncher, extract_frame
from thumbnailer.services.video_server import serve_video
from thumbnailer.utils.image_utils import decode_jpeg_data_url, get_jpeg_dimensions, is_valid_jpeg
from thumbnailer.utils.logging_utils import get_run_logger
from thumbnailer.utils.mime_utils import get_video_extension, get_video_mime_type


def write_thumbnail(output_path: str, image_bytes: bytes) -> int:
    """Write JPEG bytes to output_path (overwriting) and return the size written."""
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, "wb") as f:
        f.write(image_bytes)
    return os.path.getsize(output_path)


async def generate_thumbnail(
    video_path: str,
    output_path: str = "thumbnail.jpg",
    *,
    launcher: Optional[BrowserLauncher] = None,
    settings: Optional[Settings] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> ThumbnailResult:
    """
    Generate a JPEG thumbnail from the first frame of a video.

    Workflow:
    1. Fail fast if the video does not exist (nothing is bound or launched)
    2. Read the video into memory and pick its MIME type from the extension
    3. Serve it from a temporary server on an OS-assigned port
    4. Capture the frame at time zero in a headless browser
    5. Decode the data URL and write the JPEG to output_path

    The temporary server is stopped on every exit path. Errors are logged
    and re-raised unchanged.

    Args:
        video_path: Path to the source video
        output_path: Path to write the JPEG to (overwritten if present)
        launcher: Browser capability override (see frame_extractor)
        settings: Settings override, defaults to get_settings()
        logger: Logger or adapter for progress messages

    Returns:
        ThumbnailResult describing the written file
    """
    settings = settings or get_settings()
    log = logger or get_run_logger()

    try:
        if not os.path.exists(video_path):
            raise VideoNotFoundError(video_path)

        log.info(f"📹 Reading video: {video_path}")
        log.info(f"🖼️  Generating thumbnail with Canvas: {output_path}")

        with open(os.path.abspath(video_path), "rb") as f:
            video_bytes = f.read()

        video_ext = get_video_extension(video_path)
        mime_type = get_video_mime_type(video_ext, settings.extra_mime_types)

        async with serve_video(video_bytes, mime_type, host=settings.server_host, log=log) as server:
            video_url = server.url_for(video_ext, host=settings.url_host)
            log.info(f"🌐 Temporary server: {video_url}")

            capture = await extract_frame(
                video_url,
                launcher=launcher,
                timeout_ms=settings.capture_timeout_ms,
                quality=settings.jpeg_quality,
                browser_args=settings.browser_args,
                headless=settings.headless,
            )

            image_bytes = decode_jpeg_data_url(capture.data_url)
            if not is_valid_jpeg(image_bytes):
                raise FrameCaptureError("Captured image is not a valid JPEG")

            size_bytes = write_thumbnail(output_path, image_bytes)
            width, height = get_jpeg_dimensions(image_bytes) or (capture.width, capture.height)

            log.info(f"✓ Thumbnail successfully created: {output_path} ({width}x{height}, {size_bytes} bytes)")

            return ThumbnailResult(
                file_path=output_path,
                size_bytes=size_bytes,
                width=width,
                height=height,
                mime_type=mime_type,
                video_url=video_url,
            )

    except AutomationUnavailableError as e:
        log.error(f"✗ {e.detail}")
        log.error(f"📦 Install it with: {e.install_hint}")
        raise
    except Exception as e:
        log.error(f"✗ Error: {str(e)}")
        raise
