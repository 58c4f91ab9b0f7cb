"""
Browser Capture Integration Tests

Runs the in-page capture script in a real headless Chromium. The <video>
element is swapped for a canvas-backed stand-in whose events are fired on
demand, so the state machine can be driven deterministically without
depending on the codecs of the Chromium build:

1. Metadata + seek -> a real JPEG export with the stand-in's dimensions
2. Seek completion fired twice -> exactly one resolution
3. No events -> timeout failure
4. Error event -> load failure

The end-to-end tests then run generate_thumbnail() with the real launcher.

Usage:
    pytest tests/integration/test_browser_capture.py -v -s
"""

import os
from contextlib import asynccontextmanager

import pytest

from thumbnailer.config import DEFAULT_BROWSER_ARGS, Settings
from thumbnailer.errors import AutomationUnavailableError, VideoLoadError
from thumbnailer.models import FrameCapture
from thumbnailer.services.frame_extractor import (
    CAPTURE_FRAME_SCRIPT,
    CAPTURE_PAGE_HTML,
    launch_browser,
)
from thumbnailer.services.thumbnail_service import generate_thumbnail
from thumbnailer.utils.image_utils import decode_jpeg_data_url, get_jpeg_dimensions, is_valid_jpeg


pytest.importorskip("playwright.async_api")


# Replaces #video with a canvas exposing the HTMLVideoElement surface the script uses
INSTALL_FAKE_VIDEO = """
({ width, height, mode, seekedEvents }) => {
  const original = document.getElementById('video');
  const fake = document.createElement('canvas');
  fake.id = 'video';
  fake.width = width;
  fake.height = height;
  const ctx = fake.getContext('2d');
  ctx.fillStyle = 'rgb(200, 30, 30)';
  ctx.fillRect(0, 0, width, height);

  Object.defineProperty(fake, 'videoWidth', { value: width });
  Object.defineProperty(fake, 'videoHeight', { value: height });
  Object.defineProperty(fake, 'error', { value: mode === 'error' ? { code: 4 } : null });

  let position = 3;
  Object.defineProperty(fake, 'currentTime', {
    get: () => position,
    set: (value) => {
      position = value;
      setTimeout(() => {
        for (let i = 0; i < seekedEvents; i++) {
          fake.dispatchEvent(new Event('seeked'));
        }
      }, 0);
    },
  });

  fake.load = () => {
    if (mode === 'ok') {
      setTimeout(() => fake.dispatchEvent(new Event('loadedmetadata')), 0);
    } else if (mode === 'error') {
      setTimeout(() => fake.dispatchEvent(new Event('error')), 0);
    }
  };

  original.replaceWith(fake);
}
"""


@asynccontextmanager
async def capture_page():
    """Open the capture page in Chromium, skipping when no browser is available."""
    session = launch_browser(args=list(DEFAULT_BROWSER_ARGS))
    try:
        browser = await session.__aenter__()
    except AutomationUnavailableError as e:
        pytest.skip(str(e))
    except Exception as e:
        pytest.skip(f"Chromium could not be launched: {e}")

    try:
        page = await browser.new_page()
        await page.set_content(CAPTURE_PAGE_HTML)
        yield page
    finally:
        await session.__aexit__(None, None, None)


async def run_capture(page, mode="ok", width=48, height=27, seeked_events=1, timeout_ms=5000):
    await page.evaluate(INSTALL_FAKE_VIDEO, {
        "width": width,
        "height": height,
        "mode": mode,
        "seekedEvents": seeked_events,
    })
    raw = await page.evaluate(CAPTURE_FRAME_SCRIPT, {
        "src": "http://localhost:9/video.mp4",
        "timeoutMs": timeout_ms,
        "quality": 0.95,
    })
    return FrameCapture.model_validate(raw)


class TestCaptureScript:
    """Drive the capture state machine in a real page."""

    @pytest.mark.asyncio
    async def test_resolves_with_jpeg_of_native_size(self):
        """Test the export is a JPEG sized to videoWidth x videoHeight."""
        async with capture_page() as page:
            capture = await run_capture(page, width=64, height=36)

        assert capture.status == "resolved"
        assert (capture.width, capture.height) == (64, 36)
        image = decode_jpeg_data_url(capture.data_url)
        assert is_valid_jpeg(image)
        assert get_jpeg_dimensions(image) == (64, 36)

    @pytest.mark.asyncio
    async def test_double_seeked_resolves_once(self):
        """Test a redundant seeked event is ignored after resolution."""
        async with capture_page() as page:
            capture = await run_capture(page, seeked_events=2)
            await page.wait_for_timeout(100)
            state = await page.evaluate("() => window.__thumbnailCapture")

        assert capture.status == "resolved"
        assert capture.seeked_count == 1
        assert state == {"state": "resolved", "seekedCount": 2, "resolutions": 1}

    @pytest.mark.asyncio
    async def test_timeout_without_events(self):
        """Test a stalled video fails with a timeout."""
        async with capture_page() as page:
            capture = await run_capture(page, mode="stall", timeout_ms=300)

        assert capture.status == "failed"
        assert capture.reason == "timeout"
        assert capture.message == "Timeout while loading video"

    @pytest.mark.asyncio
    async def test_error_event_is_load_failure(self):
        """Test the media error event fails the capture as a load error."""
        async with capture_page() as page:
            capture = await run_capture(page, mode="error")
            await page.wait_for_timeout(50)
            state = await page.evaluate("() => window.__thumbnailCapture")

        assert capture.status == "failed"
        assert capture.reason == "load"
        assert "Error loading video" in capture.message
        assert state["resolutions"] == 1


class TestGenerateThumbnailWithChromium:
    """End-to-end runs through the temporary server and real Chromium."""

    @pytest.mark.asyncio
    async def test_undecodable_video_is_load_error(self, tmp_path):
        """Test bytes the browser cannot decode surface as VideoLoadError."""
        async with capture_page():
            pass  # skip early when no browser is available

        video = tmp_path / "broken.mp4"
        video.write_bytes(b"this is not a video" * 64)
        output = tmp_path / "thumbnail.jpg"

        with pytest.raises(VideoLoadError):
            await generate_thumbnail(str(video), str(output), settings=Settings(_env_file=None))
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_sample_video(self, tmp_path):
        """Test a real video produces a JPEG of its native frame size."""
        sample = os.environ.get("THUMBNAIL_SAMPLE_VIDEO")
        if not sample or not os.path.exists(sample):
            pytest.skip("Set THUMBNAIL_SAMPLE_VIDEO to a short video file to run this test")

        output = tmp_path / "thumbnail.jpg"
        result = await generate_thumbnail(sample, str(output), settings=Settings(_env_file=None))

        data = output.read_bytes()
        assert is_valid_jpeg(data)
        assert result.size_bytes == len(data) > 0
        assert get_jpeg_dimensions(data) == (result.width, result.height)
        assert result.width > 0 and result.height > 0
