"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag
from markdownify import ATX
from markdownify import MarkdownConverter as BaseMarkdownConverter

from .code import code_language
from .links import normalize_link
from .plaintext import collapse_whitespace

logger = logging.getLogger(__name__)

_EMPTY_LINK_RE = re.compile(r"\[\s*\]\(#\)")


def is_absolute_source(url: Optional[str]) -> bool:
    return bool(url) and url.startswith(("http", "data:"))


def image_source(src: Optional[str], data_src: Optional[str], base_url: str) -> str:
    """
    Pick the URL an image actually shows.

    Lazy-loading pages keep the real source in ``data-src``; it wins when
    absolute. Otherwise ``src`` is resolved against the page URL.
    """
    if is_absolute_source(data_src):
        return data_src or ""
    if not src:
        return ""
    if base_url and not src.startswith("data:"):
        return urljoin(base_url, src)
    return src


class BlockMarkdownConverter(BaseMarkdownConverter):
    """
    markdownify converter with the rules used for copied blocks.

    - ``<br>`` becomes a bare newline (a space inside headings and cells)
    - script, style and noscript are dropped with their text
    - links are normalized against the page URL; links to nowhere keep only their text
    - image sources prefer an absolute ``data-src`` and are made absolute
    - fenced code picks its language from ``language-*``/``lang-*`` classes
    """

    def __init__(self, base_url: str = "", **options: Any):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        options.setdefault("strong_em_symbol", "*")
        options.setdefault("autolinks", False)
        options.setdefault("code_language_callback", code_language)
        # First row of a header-less table becomes the header
        options.setdefault("table_infer_header", True)
        super().__init__(**options)
        self.base_url = base_url

    def convert_br(self, el, text, parent_tags):
        if "_inline" in parent_tags:
            return " "
        return "\n"

    def convert_noscript(self, el, text, parent_tags):
        return ""

    def convert_a(self, el, text, parent_tags):
        link = normalize_link(el.get("href"), self.base_url or None)
        if link.drop:
            return text
        el["href"] = link.href
        return super().convert_a(el, text, parent_tags)

    def convert_img(self, el, text, parent_tags):
        src = image_source(el.get("src"), el.get("data-src"), self.base_url)
        if not src:
            return el.get("alt") or ""
        el["src"] = src
        return super().convert_img(el, text, parent_tags)


def _link_href(anchor: Tag, base_url: str) -> str:
    return normalize_link(anchor.get("href"), base_url or None).href


def replace_media_links(soup: BeautifulSoup, base_url: str = "") -> int:
    """
    Replace links that wrap an image or an svg with plain text.

    An image link becomes the image's alt text, an svg link the svg's
    ``<title>``; either falls back to the link URL.

    Returns:
        Number of links replaced
    """
    replaced: set[int] = set()
    for anchor in soup.find_all("a"):
        # Already gone with a replaced outer link
        if any(id(parent) in replaced for parent in anchor.parents):
            continue
        img = anchor.find("img")
        svg = anchor.find("svg") if img is None else None
        if img is not None:
            label = (img.get("alt") or "").strip()
        elif svg is not None:
            title = svg.find("title")
            label = title.get_text().strip() if title is not None else ""
        else:
            continue
        anchor.replace_with(NavigableString(label or _link_href(anchor, base_url)))
        replaced.add(id(anchor))
    return len(replaced)


class HtmlToMarkdown:
    """
    Converts the markup of a copied block to clean Markdown.

    Uses markdownify through BlockMarkdownConverter.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert("<p>Hello <b>world</b></p>", "https://x.test/")
    """

    def __init__(
        self,
        heading_style: str = ATX,
        bullets: str = "-",
        strong_em_symbol: str = "*",
        escape_underscores: bool = True,
        escape_asterisks: bool = True,
    ):
        """
        Initialize the Markdown converter.

        Args:
            heading_style: markdownify heading style (ATX = '#' prefixes)
            bullets: Bullet characters, cycled by nesting depth
            strong_em_symbol: Emphasis delimiter ('*' gives *em* and **strong**)
            escape_underscores: Escape '_' in text
            escape_asterisks: Escape '*' in text
        """
        self._options: dict[str, Any] = {
            "heading_style": heading_style,
            "bullets": bullets,
            "strong_em_symbol": strong_em_symbol,
            "escape_underscores": escape_underscores,
            "escape_asterisks": escape_asterisks,
        }

    def _clean_output(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        # Remove empty links left by icon-only anchors
        markdown = _EMPTY_LINK_RE.sub("", markdown)

        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))

        return markdown.strip()

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL for resolving relative links

        Returns:
            Markdown string (collapsed plain text if conversion fails)
        """
        soup = BeautifulSoup(html, "html.parser")
        try:
            replace_media_links(soup, url)
            converter = BlockMarkdownConverter(base_url=url, **self._options)
            markdown = converter.convert_soup(soup)
            return self._clean_output(markdown)

        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            # Return plain text as fallback
            return collapse_whitespace(soup.get_text(separator=" "))
