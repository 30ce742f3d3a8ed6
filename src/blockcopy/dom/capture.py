"""Capture rendered pages into snapshots with Playwright."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Optional

from .snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)

# Check for Playwright availability
PLAYWRIGHT_AVAILABLE = False
try:
    from playwright.async_api import async_playwright

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    pass

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright


# Walks the live DOM and returns a JSON-ready DocumentSnapshot.
CAPTURE_SCRIPT = """
() => {
  const PROPS = ['display', 'visibility', 'opacity', 'transform', 'filter',
                 'clip', 'clipPath', 'textIndent'];
  const MAX_NODES = 200000;
  let count = 0;

  function walk(node) {
    if (++count > MAX_NODES) return null;
    if (node.nodeType === Node.TEXT_NODE) {
      return { text: node.textContent || '' };
    }
    if (node.nodeType !== Node.ELEMENT_NODE) return null;

    const el = node;
    const out = { tag: el.tagName.toLowerCase(), attrs: {}, style: {}, children: [] };
    for (const attr of el.attributes) out.attrs[attr.name] = attr.value;

    try {
      const cs = window.getComputedStyle(el);
      for (const p of PROPS) out.style[p] = cs[p] || '';
      const r = el.getBoundingClientRect();
      out.rect = {
        x: r.left, y: r.top, width: r.width, height: r.height,
        client_width: el.clientWidth || 0, client_height: el.clientHeight || 0
      };
    } catch (e) {
      // detached or cross-document nodes report no layout
    }

    if (el.isContentEditable) out.editable = true;
    if (el instanceof HTMLImageElement) {
      out.natural_width = el.complete ? el.naturalWidth : 0;
      out.natural_height = el.complete ? el.naturalHeight : 0;
    } else if (el instanceof HTMLVideoElement) {
      out.natural_width = el.videoWidth;
      out.natural_height = el.videoHeight;
    }

    const source = el.tagName === 'TEMPLATE' ? [] : el.childNodes;
    for (const child of source) {
      const snap = walk(child);
      if (snap) out.children.push(snap);
    }
    return out;
  }

  const doc = document.documentElement;
  const body = document.body;
  return {
    url: window.location.href,
    title: document.title || '',
    viewport: {
      width: window.innerWidth,
      height: window.innerHeight,
      scroll_x: window.scrollX || 0,
      scroll_y: window.scrollY || 0,
      scroll_width: Math.max(doc ? doc.scrollWidth : 0, body ? body.scrollWidth : 0),
      scroll_height: Math.max(doc ? doc.scrollHeight : 0, body ? body.scrollHeight : 0)
    },
    root: walk(doc)
  };
}
"""


class SnapshotCapture:
    """
    Renders pages in headless Chromium and captures layout snapshots.

    Example:
        async with SnapshotCapture() as capture:
            snapshot = await capture.capture("https://example.com")
        document = build_document(snapshot)

    Requires: pip install blockcopy[js]
    """

    def __init__(
        self,
        viewport_width: int = 1920,
        viewport_height: int = 1080,
        headless: bool = True,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the capture helper.

        Args:
            viewport_width: Browser viewport width in CSS pixels
            viewport_height: Browser viewport height in CSS pixels
            headless: Run browser in headless mode
            timeout: Default timeout for page operations (seconds)
        """
        if not PLAYWRIGHT_AVAILABLE:
            raise ImportError(
                "Playwright is required for page capture. " "Install with: pip install blockcopy[js]"
            )

        self._viewport = {"width": viewport_width, "height": viewport_height}
        self._headless = headless
        self._timeout = timeout * 1000  # Convert to milliseconds

        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> SnapshotCapture:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._headless)
        context = await self._browser.new_context(viewport=self._viewport)  # type: ignore[arg-type]
        context.set_default_timeout(self._timeout)
        self._page = await context.new_page()
        logger.info("Snapshot browser started")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.debug(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        self._page = None

    def _require_page(self) -> Page:
        if self._page is None:
            raise RuntimeError("SnapshotCapture used outside its async context")
        return self._page

    async def _snapshot(self, page: Page) -> DocumentSnapshot:
        data: dict[str, Any] = await page.evaluate(CAPTURE_SCRIPT)
        snapshot = DocumentSnapshot.model_validate(data)
        logger.debug(f"Captured snapshot of {snapshot.url}")
        return snapshot

    async def capture(self, url: str, wait_until: str = "networkidle") -> DocumentSnapshot:
        """
        Navigate to a URL and capture it once loaded.

        Args:
            url: Page to render
            wait_until: Playwright load state to wait for

        Returns:
            Snapshot of the rendered page
        """
        page = self._require_page()
        await page.goto(url, wait_until=wait_until)  # type: ignore[arg-type]
        return await self._snapshot(page)

    async def capture_html(self, html: str, base_url: Optional[str] = None) -> DocumentSnapshot:
        """Render an HTML string and capture it."""
        page = self._require_page()
        await page.set_content(html, wait_until="load")
        snapshot = await self._snapshot(page)
        if base_url:
            snapshot = snapshot.model_copy(update={"url": base_url})
        return snapshot
