"""Dedicated renderings for blocks that are a single media element."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

from ..dom.html import render_html
from ..dom.node import ElementNode
from .markdown import image_source

logger = logging.getLogger(__name__)

MEDIA_ROOT_TAGS = frozenset({"img", "picture", "video", "svg", "canvas", "embed", "object"})


def _resolve(url: Optional[str], base_url: str) -> str:
    if not url:
        return ""
    if base_url and not url.startswith(("data:", "blob:")):
        return urljoin(base_url, url)
    return url


def _img_source(img: ElementNode, base_url: str) -> str:
    src = image_source(img.get("src"), img.get("data-src"), base_url)
    # An img without src resolves to the page itself
    if src and base_url and src == base_url:
        return ""
    return src


def _inner_img(node: ElementNode) -> Optional[ElementNode]:
    return next((el for el in node.iter_elements() if el.tag == "img"), None)


def _video_source(video: ElementNode, base_url: str) -> str:
    src = video.get("src")
    if not src:
        source = next((el for el in video.element_children if el.tag == "source" and el.get("src")), None)
        src = source.get("src") if source is not None else None
    return _resolve(src, base_url)


def _type_suffix(node: ElementNode) -> str:
    media_type = node.get("type")
    return f" (type: {media_type})" if media_type else ""


def _canvas_label(node: ElementNode) -> str:
    attributes = []
    if node.id:
        attributes.append(f"id: '{node.id}'")
    if node.class_name:
        attributes.append(f"class: '{node.class_name}'")
    detail = f" ({', '.join(attributes)})" if attributes else ""
    return f"[Canvas Element{detail}]"


def is_media_root(node: ElementNode) -> bool:
    return node.tag in MEDIA_ROOT_TAGS


def media_to_markdown(node: ElementNode, base_url: str = "") -> str:
    """
    Render a media block as Markdown.

    Args:
        node: img, picture, video, svg, canvas, embed or object element
        base_url: Page URL for resolving relative sources

    Returns:
        Markdown for the element
    """
    tag = node.tag
    if tag == "img":
        src = _img_source(node, base_url)
        if not src:
            return ""
        return f"![{node.get('alt', '')}]({src})"

    if tag == "picture":
        img = _inner_img(node)
        if img is not None:
            return media_to_markdown(img, base_url)
        return "[Picture Element - No image found]"

    if tag == "video":
        title = node.get("title") or node.get("aria-label") or ""
        poster = _resolve(node.get("poster"), base_url)
        src = _video_source(node, base_url)
        if poster:
            return f"![{title or 'Video Poster'}]({poster})"
        if src:
            return f"[{title or 'Video Source'}]({src})"
        return f"[Video: {title or 'No source or poster'}]"

    if tag == "svg":
        return f"```svg\n{render_html(node)}\n```"

    if tag == "canvas":
        return _canvas_label(node)

    if tag == "embed":
        src = _resolve(node.get("src"), base_url)
        label = f"[Embedded Content{_type_suffix(node)}]"
        return f"{label}({src})" if src else label

    if tag == "object":
        data = _resolve(node.get("data"), base_url)
        label = f"[Object Content{_type_suffix(node)}]"
        return f"{label}({data})" if data else label

    logger.debug(f"No media rendering for {node!r}")
    return ""


def media_to_text(node: ElementNode, base_url: str = "") -> str:
    """
    Render a media block as plain text: its URL where it has one.

    Args:
        node: img, picture, video, svg, canvas, embed or object element
        base_url: Page URL for resolving relative sources

    Returns:
        Plain text for the element
    """
    tag = node.tag
    if tag == "img":
        return _img_source(node, base_url)
    if tag == "picture":
        img = _inner_img(node)
        return media_to_text(img, base_url) if img is not None else ""
    if tag == "video":
        return _video_source(node, base_url) or _resolve(node.get("poster"), base_url)
    if tag == "svg":
        return render_html(node)
    if tag == "canvas":
        return _canvas_label(node)
    if tag == "embed":
        return _resolve(node.get("src"), base_url) or "[Embedded Content]"
    if tag == "object":
        return _resolve(node.get("data"), base_url) or "[Object Content]"

    logger.debug(f"No media rendering for {node!r}")
    return ""
