"""Protocol definitions for content conversion."""

from typing import Protocol


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations convert the markup of a pruned block to Markdown.
    """

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL (for resolving relative links)

        Returns:
            Markdown string
        """
        ...


class TextExtractor(Protocol):
    """
    Protocol for extracting rendered text from a block.

    Implementations lay out the text of an element tree the way a browser
    would show it, with block elements on their own lines.
    """

    def extract(self, element) -> str:
        """
        Extract layout-aware text.

        Args:
            element: Root ElementNode of the block

        Returns:
            Text with line breaks between blocks
        """
        ...
