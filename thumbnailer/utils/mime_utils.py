"""
MIME type utility functions for served video files.

This module provides utilities for:
- Extracting a normalized extension from a video path
- Mapping video extensions to the Content-Type the temporary server sends
"""

import os
from typing import Dict, Optional


VIDEO_MIME_TYPES: Dict[str, str] = {
    '.mp4': 'video/mp4',
    '.webm': 'video/webm',
    '.ogg': 'video/ogg',
    '.mov': 'video/quicktime',
}

DEFAULT_VIDEO_MIME_TYPE = 'video/mp4'


def get_video_extension(video_path: str) -> str:
    """Return the lowercase extension of a path including the dot, or '' if none."""
    return os.path.splitext(video_path)[1].lower()


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith('.'):
        ext = f".{ext}"
    return ext


def get_video_mime_type(path_or_ext: str, extra_mime_types: Optional[Dict[str, str]] = None) -> str:
    """
    Detect the video MIME type from a file path or bare extension.

    Entries in extra_mime_types extend (and may override) the built-in table.
    Unknown extensions fall back to video/mp4; no content sniffing is done.

    Example:
        >>> get_video_mime_type("clip.WEBM")
        'video/webm'
        >>> get_video_mime_type("webm")
        'video/webm'
        >>> get_video_mime_type("clip.avi")
        'video/mp4'
    """
    if path_or_ext.startswith('.') and os.sep not in path_or_ext:
        ext = path_or_ext.lower()
    elif '.' not in path_or_ext and '/' not in path_or_ext and os.sep not in path_or_ext:
        ext = _normalize_extension(path_or_ext)
    else:
        ext = get_video_extension(path_or_ext)

    table = dict(VIDEO_MIME_TYPES)
    if extra_mime_types:
        table.update({_normalize_extension(k): v for k, v in extra_mime_types.items()})

    return table.get(ext, DEFAULT_VIDEO_MIME_TYPE)
