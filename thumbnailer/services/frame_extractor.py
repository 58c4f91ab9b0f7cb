"""
Frame extraction service using a headless browser.

This module loads a served video into a hidden <video> element, seeks to
time zero, draws the frame onto a hidden <canvas> and exports it as a base64
JPEG data URL. The browser is an injected capability: anything that behaves
like launch_browser() (an async context manager yielding an object with
new_page(), whose page has set_content() and evaluate()) can drive it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, List, Optional

from thumbnailer.config import DEFAULT_BROWSER_ARGS
from thumbnailer.errors import (
    AutomationUnavailableError,
    FrameCaptureError,
    FrameTimeoutError,
    VideoLoadError,
)
from thumbnailer.models import FrameCapture


logger = logging.getLogger("thumbnailer")

BrowserLauncher = Callable[..., Any]

CAPTURE_PAGE_HTML = """
<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
  </head>
  <body>
    <video id="video" style="display:none;"></video>
    <canvas id="canvas" style="display:none;"></canvas>
  </body>
</html>
"""

# States: waiting-for-metadata -> waiting-for-seek -> resolved | failed.
# Terminal states never transition again; redundant events only bump counters.
CAPTURE_FRAME_SCRIPT = """
async ({ src, timeoutMs, quality }) => {
  const video = document.getElementById('video');
  const canvas = document.getElementById('canvas');
  const capture = window.__thumbnailCapture = {
    state: 'waiting-for-metadata',
    seekedCount: 0,
    resolutions: 0,
  };

  return new Promise((resolve) => {
    let timer = null;

    const finish = (result) => {
      if (capture.state === 'resolved' || capture.state === 'failed') {
        return;
      }
      capture.state = result.status;
      capture.resolutions += 1;
      clearTimeout(timer);
      resolve({
        width: canvas.width,
        height: canvas.height,
        seekedCount: capture.seekedCount,
        ...result,
      });
    };
    const fail = (reason, message) => finish({ status: 'failed', reason, message });

    video.addEventListener('loadedmetadata', () => {
      if (capture.state !== 'waiting-for-metadata') {
        return;
      }
      canvas.width = video.videoWidth;
      canvas.height = video.videoHeight;
      capture.state = 'waiting-for-seek';
      video.currentTime = 0;
    });

    video.addEventListener('seeked', () => {
      capture.seekedCount += 1;
      if (capture.state !== 'waiting-for-seek') {
        return;
      }
      try {
        const ctx = canvas.getContext('2d');
        if (!ctx) {
          fail('capture', 'Unable to create canvas context');
          return;
        }
        ctx.drawImage(video, 0, 0, canvas.width, canvas.height);
        finish({ status: 'resolved', dataUrl: canvas.toDataURL('image/jpeg', quality) });
      } catch (err) {
        fail('capture', String((err && err.message) || err));
      }
    });

    video.addEventListener('error', () => {
      const code = video.error ? video.error.code : 0;
      fail('load', code ? `Error loading video (MediaError code ${code})` : 'Error loading video');
    });

    timer = setTimeout(() => fail('timeout', 'Timeout while loading video'), timeoutMs);

    video.muted = true;
    video.preload = 'auto';
    video.src = src;
    video.load();
  });
}
"""


@asynccontextmanager
async def launch_browser(headless: bool = True, args: Optional[List[str]] = None) -> AsyncIterator[Any]:
    """
    Launch Playwright Chromium and close it when the block exits.

    Raises:
        AutomationUnavailableError: If the playwright package or its Chromium
            build is not installed.
    """
    try:
        from playwright.async_api import async_playwright, Error as PlaywrightError
    except ImportError as e:
        raise AutomationUnavailableError("Playwright is not installed!") from e

    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=headless, args=args)
        except PlaywrightError as e:
            if "Executable doesn't exist" in str(e):
                raise AutomationUnavailableError("Chromium for Playwright is not installed!") from e
            raise

        try:
            yield browser
        finally:
            await browser.close()


def raise_for_capture(capture: FrameCapture) -> None:
    """Raise the classified error for a failed capture, or if no image came back."""
    if capture.status == "resolved":
        if not capture.data_url:
            raise FrameCaptureError("Capture resolved without image data")
        return

    message = capture.message or "Frame capture failed"
    if capture.reason == "timeout":
        raise FrameTimeoutError(message)
    if capture.reason == "load":
        raise VideoLoadError(message)
    raise FrameCaptureError(message)


async def extract_frame(
    video_url: str,
    *,
    launcher: Optional[BrowserLauncher] = None,
    timeout_ms: int = 10000,
    quality: float = 0.95,
    browser_args: Optional[List[str]] = None,
    headless: bool = True,
) -> FrameCapture:
    """
    Capture the frame at time zero of the video behind video_url.

    Args:
        video_url: URL the browser can fetch the video from
        launcher: Browser capability, defaults to launch_browser
        timeout_ms: Milliseconds to wait for metadata and seek
        quality: JPEG quality for canvas.toDataURL (0-1]
        browser_args: Chromium flags, defaults to DEFAULT_BROWSER_ARGS
        headless: Run the browser without a window

    Returns:
        FrameCapture with status "resolved" and the JPEG data URL

    Raises:
        FrameTimeoutError: No metadata/seek event within timeout_ms
        VideoLoadError: The browser failed to load the video
        FrameCaptureError: Drawing or exporting the frame failed
        AutomationUnavailableError: Playwright/Chromium missing (default launcher)
    """
    launcher = launcher or launch_browser
    args = list(DEFAULT_BROWSER_ARGS if browser_args is None else browser_args)

    async with launcher(headless=headless, args=args) as browser:
        page = await browser.new_page()
        await page.set_content(CAPTURE_PAGE_HTML)
        logger.debug(f"Capture page ready, loading {video_url}")
        raw = await page.evaluate(
            CAPTURE_FRAME_SCRIPT,
            {"src": video_url, "timeoutMs": timeout_ms, "quality": quality},
        )

    capture = FrameCapture.model_validate(raw)
    logger.debug(
        f"Capture finished: status={capture.status} size={capture.width}x{capture.height} "
        f"seeked={capture.seeked_count}"
    )
    raise_for_capture(capture)
    return capture
