#!/usr/bin/env python3
"""
Video Thumbnail Generator

Extracts the first frame of a video with a headless browser and saves it as a
JPEG thumbnail.

Usage:
    python main.py                          # example.mp4 -> thumbnail.jpg
    python main.py clip.webm -o thumb.jpg
    python main.py clip.mov --timeout-ms 20000 --quality 0.8 -v

Defaults come from THUMBNAIL_* environment variables (see thumbnailer/config.py).
"""

import sys
import asyncio
import argparse

from thumbnailer.config import get_settings
from thumbnailer.errors import ThumbnailError
from thumbnailer.services.thumbnail_service import generate_thumbnail
from thumbnailer.utils.logging_utils import setup_logger, get_run_logger


def parse_args(argv=None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Generate a JPEG thumbnail from the first frame of a video"
    )
    parser.add_argument("video", nargs="?", default=settings.video_path,
                        help=f"Video file to read (default: {settings.video_path})")
    parser.add_argument("-o", "--output", default=settings.output_path,
                        help=f"JPEG file to write (default: {settings.output_path})")
    parser.add_argument("--timeout-ms", type=int, default=None,
                        help=f"Capture timeout in milliseconds (default: {settings.capture_timeout_ms})")
    parser.add_argument("--quality", type=float, default=None,
                        help=f"JPEG quality between 0 and 1 (default: {settings.jpeg_quality})")
    parser.add_argument("--headed", action="store_true",
                        help="Show the browser window instead of running headless")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args(argv)

    # model_copy() skips validation, so check overrides here
    if args.quality is not None and not 0 < args.quality <= 1:
        parser.error("--quality must be greater than 0 and at most 1")
    if args.timeout_ms is not None and args.timeout_ms <= 0:
        parser.error("--timeout-ms must be positive")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    overrides = {}
    if args.timeout_ms is not None:
        overrides["capture_timeout_ms"] = args.timeout_ms
    if args.quality is not None:
        overrides["jpeg_quality"] = args.quality
    if args.headed:
        overrides["headless"] = False
    settings = get_settings().model_copy(update=overrides)

    base_logger = setup_logger("DEBUG" if args.verbose else settings.log_level)
    logger = get_run_logger(base_logger=base_logger)

    try:
        asyncio.run(generate_thumbnail(args.video, args.output, settings=settings, logger=logger))
    except ThumbnailError:
        return 1
    except Exception:
        logger.debug("Full traceback:", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n⚠️  Thumbnail generation interrupted by user. Exiting...")
        sys.exit(130)
