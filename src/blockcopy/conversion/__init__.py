"""Content conversion for blockcopy (Markdown, plain text, source attachment)."""

from .code import clean_code_block
from .links import NormalizedLink, normalize_link
from .markdown import BlockMarkdownConverter, HtmlToMarkdown
from .plaintext import LayoutTextExtractor, collapse_whitespace, inner_text
from .protocols import MarkdownConverter, TextExtractor
from .serializer import UI_ELEMENT_IDS, ContentSerializer
from .source import format_source_info, get_message, resolve_language

__all__ = [
    # Protocols
    "MarkdownConverter",
    "TextExtractor",
    # Implementations
    "HtmlToMarkdown",
    "BlockMarkdownConverter",
    "LayoutTextExtractor",
    "ContentSerializer",
    "UI_ELEMENT_IDS",
    # Helpers
    "clean_code_block",
    "collapse_whitespace",
    "inner_text",
    "normalize_link",
    "NormalizedLink",
    "format_source_info",
    "get_message",
    "resolve_language",
]
