"""
Integration tests against a real headless Chromium.

These tests drive Playwright and are skipped automatically when the
playwright package or its Chromium build is not installed.

Usage:
    # One-time browser install
    playwright install chromium

    # Run all integration tests
    pytest tests/integration/ -v -s

Optional environment variables:
    - THUMBNAIL_SAMPLE_VIDEO: path to a short real video for the end-to-end test
"""
