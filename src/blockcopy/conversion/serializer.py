"""Serialization of a copied block to Markdown or plain text."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.pruner import TreePruner
from ..dom.html import render_html
from ..dom.node import ElementNode
from ..models.config import OutputFormat, Settings
from ..models.page import PageInfo
from .code import CODE_TAGS, clean_code_block, clean_fenced_code
from .markdown import HtmlToMarkdown
from .media import is_media_root, media_to_markdown, media_to_text
from .plaintext import LayoutTextExtractor, collapse_whitespace
from .protocols import MarkdownConverter, TextExtractor
from .source import format_source_info

logger = logging.getLogger(__name__)

# Ids of controls injected into the page by the copy UI
UI_ELEMENT_IDS = frozenset({"blockcopy-copy-btn"})


def blockquote(content: str) -> str:
    """Prefix every line of content with '> '."""
    return "> " + content.replace("\n", "\n> ")


class ContentSerializer:
    """
    Turns a content block into the text placed on the clipboard.

    The block is pruned to its visible parts first; the live tree is never
    modified. ``process_content`` always returns a string.

    Example:
        serializer = ContentSerializer()
        text = serializer.process_content(block, Settings(output_format="plaintext"))
    """

    def __init__(
        self,
        pruner: Optional[TreePruner] = None,
        markdown_converter: Optional[MarkdownConverter] = None,
        text_extractor: Optional[TextExtractor] = None,
    ):
        """
        Initialize the serializer.

        Args:
            pruner: Builds the visible clone (default rules if None)
            markdown_converter: HTML to Markdown converter (markdownify if None)
            text_extractor: Layout-aware text extractor
        """
        self._pruner = pruner or TreePruner()
        self._markdown = markdown_converter or HtmlToMarkdown()
        self._text = text_extractor or LayoutTextExtractor()

    def visible_copy(self, element: ElementNode) -> ElementNode:
        """Pruned clone of element without injected UI controls."""
        clone = self._pruner.create_visible_clone(element)
        for node in list(clone.iter_elements()):
            if node.id in UI_ELEMENT_IDS:
                node.remove()
        return clone

    def to_markdown(self, element: ElementNode, base_url: str = "") -> str:
        """
        Convert a prepared (pruned) element to Markdown.

        Falls back to collapsed visible text if conversion fails.
        """
        try:
            if is_media_root(element):
                return media_to_markdown(element, base_url)
            markdown = self._markdown.convert(render_html(element), base_url)
            if element.tag in CODE_TAGS:
                markdown = clean_fenced_code(markdown)
            return markdown
        except Exception as e:
            logger.warning(f"Markdown conversion failed for {element!r}: {e}")
            return collapse_whitespace(element.text_content)

    def to_plaintext(self, element: ElementNode, base_url: str = "") -> str:
        """
        Convert a prepared (pruned) element to plain text.

        Returns "" if extraction fails.
        """
        try:
            if is_media_root(element):
                return media_to_text(element, base_url)
            text = self._text.extract(element)
            if element.tag in CODE_TAGS:
                text = clean_code_block(text)
            return collapse_whitespace(text)
        except Exception as e:
            logger.warning(f"Plain text extraction failed for {element!r}: {e}")
            return ""

    def process_content(
        self,
        element: ElementNode,
        settings: Optional[Settings] = None,
        page_info: Optional[PageInfo] = None,
    ) -> str:
        """
        Serialize a block with optional source attachment.

        Args:
            element: Block chosen by the locator (in the live tree)
            settings: Output format, attachment flags and language
            page_info: Source page; defaults to the element's document

        Returns:
            Serialized content; "" when there is nothing to copy
        """
        settings = settings or Settings()
        try:
            document = element.document
            page_info = page_info or PageInfo.from_document(document)
            base_url = (document.url if document is not None else "") or page_info.url

            working = self.visible_copy(element)
            if settings.output_format == OutputFormat.MARKDOWN:
                content = self.to_markdown(working, base_url)
                if content and settings.attaches_source:
                    content = blockquote(content)
            else:
                content = self.to_plaintext(working, base_url)

            source = format_source_info(settings, page_info)
            if content:
                return content + source
            return source.strip()

        except Exception as e:
            logger.error(f"Failed to serialize {element!r}: {e}")
            return element.text_content
