"""Static HTML parsing and rendering with BeautifulSoup."""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

from .node import ComputedStyle, Document, ElementNode, Node, TextNode, Viewport

logger = logging.getLogger(__name__)

# Elements a browser never renders, whatever the stylesheet says
UNRENDERED_TAGS = {
    "head",
    "script",
    "style",
    "template",
    "noscript",
    "title",
    "meta",
    "link",
    "base",
}

_DECLARATION_RE = re.compile(r"\s*([-A-Za-z]+)\s*:\s*([^;]*?)\s*(?:!important\s*)?(?:;|$)")


def parse_style_attribute(style: str) -> dict[str, str]:
    """Parse an inline ``style`` attribute into a property map (last wins)."""
    declarations: dict[str, str] = {}
    for match in _DECLARATION_RE.finditer(style or ""):
        name, value = match.group(1).lower(), match.group(2)
        if value:
            declarations[name] = value
    return declarations


def _attr_value(value: Union[str, list[str]]) -> str:
    # bs4 splits multi-valued attributes such as class into lists
    return " ".join(value) if isinstance(value, list) else str(value)


def _convert_tag(tag: Tag) -> ElementNode:
    attrs = {name.lower(): _attr_value(value) for name, value in tag.attrs.items()}
    style = ComputedStyle.from_declarations(parse_style_attribute(attrs.get("style", "")))
    if tag.name in UNRENDERED_TAGS or "hidden" in attrs:
        style = style.with_overrides(display="none")
    editable: Optional[bool] = None
    if "contenteditable" in attrs:
        editable = attrs["contenteditable"].lower() != "false"
    return ElementNode(tag=tag.name, attrs=attrs, style=style, editable=editable)


def _build(tag: Tag) -> ElementNode:
    root = _convert_tag(tag)
    stack: list[tuple[Tag, ElementNode]] = [(tag, root)]
    while stack:
        source, target = stack.pop()
        for child in source.children:
            if isinstance(child, (Comment, Doctype)):
                continue
            if isinstance(child, NavigableString):
                target.append(TextNode(text=str(child)))
            elif isinstance(child, Tag):
                element = _convert_tag(child)
                target.append(element)
                stack.append((child, element))
    return root


def parse_html(html: Union[str, bytes], url: str = "", viewport: Optional[Viewport] = None) -> Document:
    """
    Parse an HTML document into a tree without layout information.

    Computed style is approximated from inline ``style`` attributes and the
    ``hidden`` attribute. Nodes carry no geometry, so size-based rules are
    not applied to them.

    Args:
        html: HTML source
        url: Page URL, used for link resolution and source attachment
        viewport: Optional viewport; defaults to a 1920x1080 window

    Returns:
        Parsed document
    """
    soup = BeautifulSoup(html, "html.parser")
    html_tag = soup.find("html")
    if not isinstance(html_tag, Tag):
        # Fragment: wrap it so body lookups behave like a full page
        has_body = isinstance(soup.find("body"), Tag)
        wrapper = BeautifulSoup("<html><body></body></html>", "html.parser")
        container = wrapper.html if has_body else wrapper.body
        if has_body:
            wrapper.body.decompose()
        for child in list(soup.contents):
            container.append(child.extract())
        html_tag = wrapper.html

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if isinstance(title_tag, Tag) else ""

    root = _build(html_tag)
    logger.debug(f"Parsed HTML document ({len(str(html))} chars) for {url or '<no url>'}")
    return Document(root=root, url=url, title=title, viewport=viewport or Viewport())


def _to_tag(soup: BeautifulSoup, element: ElementNode, tags: dict[int, Tag]) -> Tag:
    tag = soup.new_tag(element.tag, attrs=dict(element.attrs))
    tags[id(element)] = tag
    stack: list[tuple[ElementNode, Tag]] = [(element, tag)]
    while stack:
        source, target = stack.pop()
        for child in source.children:
            if isinstance(child, TextNode):
                target.append(NavigableString(child.text))
            else:
                child_tag = soup.new_tag(child.tag, attrs=dict(child.attrs))
                tags[id(child)] = child_tag
                target.append(child_tag)
                stack.append((child, child_tag))
    return tag


def render_soup(node: ElementNode) -> tuple[BeautifulSoup, dict[int, Tag]]:
    """
    Render a subtree into a fresh BeautifulSoup document.

    Returns:
        The soup and a map from ``id()`` of each rendered element to its Tag
    """
    soup = BeautifulSoup("", "html.parser")
    tags: dict[int, Tag] = {}
    soup.append(_to_tag(soup, node, tags))
    return soup, tags


def render_html(node: Node) -> str:
    """Serialize a subtree (typically a pruned clone) back to markup."""
    if isinstance(node, TextNode):
        return str(NavigableString(node.text).output_ready(formatter="minimal"))
    soup, _ = render_soup(node)
    return str(soup)
