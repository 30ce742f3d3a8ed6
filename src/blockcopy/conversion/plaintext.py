"""Layout-aware plain text extraction."""

from __future__ import annotations

import re
from typing import Union

from ..dom.node import ElementNode, Node, TextNode

# Elements laid out as blocks: their text starts and ends on its own line
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "caption",
        "dd",
        "details",
        "dialog",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "hr",
        "legend",
        "li",
        "main",
        "menu",
        "nav",
        "ol",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "tfoot",
        "thead",
        "tr",
        "ul",
    }
)

# Blocks separated from their neighbours by a blank line
PARAGRAPH_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6"})

CELL_TAGS = frozenset({"td", "th"})

SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title", "meta", "link"})

_SPACE_RE = re.compile(r"\s+")
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")

_Item = Union[int, tuple[str, bool]]


def collapse_whitespace(text: str) -> str:
    """
    Collapse whitespace while keeping paragraph breaks.

    Each blank-line separated paragraph becomes a single line with single
    spaces; paragraphs are joined by one blank line. Applying it twice
    gives the same result as applying it once.

    Example:
        >>> collapse_whitespace("  a\\n  b \\n\\n\\n c ")
        'a b\\n\\nc'
    """
    paragraphs = (_SPACE_RE.sub(" ", p).strip() for p in _PARAGRAPH_BREAK_RE.split(text or ""))
    return "\n\n".join(p for p in paragraphs if p)


def _break_count(tag: str) -> int:
    if tag in PARAGRAPH_TAGS:
        return 2
    if tag in BLOCK_TAGS:
        return 1
    return 0


def _collect(root: ElementNode) -> list[_Item]:
    # Items are required line-break counts or (text, preformatted) runs
    items: list[_Item] = []
    stack: list[tuple[Node, bool, bool]] = [(root, root.tag == "pre", False)]
    while stack:
        node, in_pre, leaving = stack.pop()
        if isinstance(node, TextNode):
            text = node.text if in_pre else _SPACE_RE.sub(" ", node.text)
            if text:
                items.append((text, in_pre))
            continue

        breaks = _break_count(node.tag)
        if leaving:
            if breaks:
                items.append(breaks)
            continue
        if node.tag in SKIPPED_TAGS:
            continue
        if node.tag == "br":
            items.append(("\n", True))
            continue
        if node.tag in CELL_TAGS and node.parent is not None:
            siblings = [c for c in node.parent.element_children if c.tag in CELL_TAGS]
            if siblings and siblings[0] is not node:
                items.append(("\t", True))
        if breaks:
            items.append(breaks)

        stack.append((node, in_pre, True))
        child_in_pre = in_pre or node.tag == "pre"
        for child in reversed(node.children):
            stack.append((child, child_in_pre, False))
    return items


def inner_text(root: ElementNode) -> str:
    """
    Extract the text of a subtree as a browser lays it out.

    Blocks start on their own line, paragraphs and headings are separated
    by a blank line, ``<br>`` breaks the line, table cells are separated
    by tabs and rows by newlines. Whitespace outside ``<pre>`` is
    collapsed.

    Args:
        root: Subtree to extract (usually a pruned clone)

    Returns:
        Layout text with outer line breaks removed
    """
    parts: list[str] = []
    pending = 0
    for item in _collect(root):
        if isinstance(item, int):
            pending = max(pending, item)
            continue
        text, preformatted = item
        if pending:
            if parts:
                parts.append("\n" * pending)
            pending = 0
            if not preformatted:
                text = text.lstrip(" ")
        elif not preformatted and (not parts or parts[-1].endswith((" ", "\n", "\t"))):
            text = text.lstrip(" ")
        if text:
            parts.append(text)

    lines = "".join(parts).split("\n")
    return "\n".join(line.rstrip(" ") for line in lines).strip("\n")


class LayoutTextExtractor:
    """
    Extracts layout-aware text from an element tree.

    Example:
        extractor = LayoutTextExtractor()
        text = extractor.extract(pruned_clone)
    """

    def extract(self, element: ElementNode) -> str:
        return inner_text(element)
