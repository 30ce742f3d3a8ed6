"""Tests for Playwright snapshot capture (browser mocked)."""

from unittest.mock import AsyncMock, patch

import pytest

from blockcopy.dom import DocumentSnapshot, build_document
from blockcopy.dom.capture import CAPTURE_SCRIPT, SnapshotCapture

SNAPSHOT = {
    "url": "https://x.test/",
    "title": "Captured",
    "viewport": {"width": 1280, "height": 720, "scroll_height": 3000},
    "root": {
        "tag": "html",
        "rect": [0, 0, 1280, 720],
        "children": [
            {
                "tag": "body",
                "rect": [0, 0, 1280, 720],
                "children": [{"tag": "p", "rect": [8, 8, 400, 20], "children": [{"text": "Hello"}]}],
            }
        ],
    },
}


@pytest.fixture
def capture():
    with patch("blockcopy.dom.capture.PLAYWRIGHT_AVAILABLE", True):
        capture = SnapshotCapture()
    capture._page = AsyncMock()
    capture._page.evaluate.return_value = SNAPSHOT
    return capture


class TestSnapshotCapture:
    """Tests for SnapshotCapture."""

    def test_requires_playwright(self):
        """Test the error when the js extra is missing."""
        with patch("blockcopy.dom.capture.PLAYWRIGHT_AVAILABLE", False):
            with pytest.raises(ImportError, match="blockcopy\\[js\\]"):
                SnapshotCapture()

    @pytest.mark.asyncio
    async def test_capture_url(self, capture):
        """Test navigating and evaluating the capture script."""
        snapshot = await capture.capture("https://x.test/")

        capture._page.goto.assert_awaited_once_with("https://x.test/", wait_until="networkidle")
        capture._page.evaluate.assert_awaited_once_with(CAPTURE_SCRIPT)
        assert isinstance(snapshot, DocumentSnapshot)
        assert snapshot.title == "Captured"
        assert build_document(snapshot).query("p").rect.width == 400

    @pytest.mark.asyncio
    async def test_capture_html_overrides_url(self, capture):
        """Test rendering markup with a base URL."""
        snapshot = await capture.capture_html("<p>Hello</p>", base_url="https://docs.x.test/page")

        capture._page.set_content.assert_awaited_once()
        assert snapshot.url == "https://docs.x.test/page"

    @pytest.mark.asyncio
    async def test_outside_context(self):
        """Test using the helper without entering it."""
        with patch("blockcopy.dom.capture.PLAYWRIGHT_AVAILABLE", True):
            capture = SnapshotCapture()

        with pytest.raises(RuntimeError):
            await capture.capture("https://x.test/")
