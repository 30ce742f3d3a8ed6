"""Document tree model, builders and selectors."""

from .html import parse_html, parse_style_attribute, render_html
from .node import ComputedStyle, Document, ElementNode, Node, Rect, TextNode, Viewport
from .selectors import Selector, SelectorError, SoupView, compile_selector
from .snapshot import DocumentSnapshot, NodeSnapshot, RectSnapshot, ViewportSnapshot, build_document

__all__ = [
    # Tree
    "Document",
    "ElementNode",
    "TextNode",
    "Node",
    "Rect",
    "Viewport",
    "ComputedStyle",
    # Builders
    "build_document",
    "parse_html",
    "parse_style_attribute",
    "render_html",
    # Snapshots
    "DocumentSnapshot",
    "NodeSnapshot",
    "RectSnapshot",
    "ViewportSnapshot",
    # Selectors
    "compile_selector",
    "Selector",
    "SelectorError",
    "SoupView",
]
