"""
blockcopy - Copy the content block under the pointer as Markdown or plain text.

Usage:
    from blockcopy import BlockCopier, Settings, parse_html

    document = parse_html(html, url="https://docs.example.com/page")
    copier = BlockCopier()
    text = copier.copy(document.query("td"), Settings(attach_url=True))
"""

__version__ = "1.0.0"

from .core import (
    BlockLocator,
    BlockViabilityEvaluator,
    EditorExclusion,
    TreePruner,
    VisibilityClassifier,
    find_editable_context,
    is_hidden,
)
from .conversion import ContentSerializer, HtmlToMarkdown, collapse_whitespace, normalize_link
from .core.copier import BlockCopier
from .dom import Document, ElementNode, TextNode, build_document, parse_html
from .models.config import (
    BlockCopyConfig,
    EditorExclusionConfig,
    Language,
    OutputFormat,
    PruningConfig,
    Settings,
    Thresholds,
)
from .models.page import PageInfo

__all__ = [
    "__version__",
    # Pipeline
    "BlockCopier",
    "VisibilityClassifier",
    "is_hidden",
    "BlockViabilityEvaluator",
    "find_editable_context",
    "EditorExclusion",
    "BlockLocator",
    "TreePruner",
    "ContentSerializer",
    "HtmlToMarkdown",
    "collapse_whitespace",
    "normalize_link",
    # Document tree
    "Document",
    "ElementNode",
    "TextNode",
    "build_document",
    "parse_html",
    # Config
    "BlockCopyConfig",
    "Settings",
    "OutputFormat",
    "Language",
    "Thresholds",
    "EditorExclusionConfig",
    "PruningConfig",
    "PageInfo",
]
