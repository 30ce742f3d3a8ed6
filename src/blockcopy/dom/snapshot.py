"""Pydantic schema for rendered-page snapshots and the tree builder."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .node import ComputedStyle, Document, ElementNode, Rect, TextNode, Viewport

logger = logging.getLogger(__name__)


class RectSnapshot(BaseModel):
    """Bounding client rect plus content-box size."""

    x: float = 0
    y: float = 0
    width: float = Field(0, ge=0)
    height: float = Field(0, ge=0)
    client_width: Optional[float] = Field(None, ge=0)
    client_height: Optional[float] = Field(None, ge=0)

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        # Accept the compact [x, y, width, height(, client_width, client_height)] form
        if isinstance(data, (list, tuple)):
            if len(data) not in (4, 6):
                raise ValueError("rect sequences need 4 or 6 numbers")
            keys = ["x", "y", "width", "height", "client_width", "client_height"]
            return dict(zip(keys, data))
        return data

    def to_rect(self) -> Rect:
        return Rect(
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            client_width=self.client_width,
            client_height=self.client_height,
        )


class NodeSnapshot(BaseModel):
    """
    One node of a captured page.

    Element nodes set ``tag``; text nodes set ``text`` and nothing else.
    ``children`` holds the raw child nodes: each one is validated when the
    builder reaches it, so tree depth is bounded only by memory.
    """

    tag: Optional[str] = None
    text: Optional[str] = None
    attrs: dict[str, str] = Field(default_factory=dict)
    style: dict[str, str] = Field(default_factory=dict, description="Computed style subset")
    rect: Optional[RectSnapshot] = None
    editable: Optional[bool] = Field(None, description="Element.isContentEditable")
    natural_width: Optional[float] = Field(None, ge=0)
    natural_height: Optional[float] = Field(None, ge=0)
    children: list[Any] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _check_kind(self) -> NodeSnapshot:
        if (self.tag is None) == (self.text is None):
            raise ValueError("a node needs exactly one of 'tag' or 'text'")
        if self.text is not None and self.children:
            raise ValueError("text nodes cannot have children")
        return self

    @field_validator("attrs", "style", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("children")
    @classmethod
    def _check_children(cls, value: list[Any]) -> list[Any]:
        for index, child in enumerate(value):
            if not isinstance(child, (dict, NodeSnapshot)):
                raise ValueError(f"child {index} is not a node object")
        return value

    def iter_children(self) -> Iterator[NodeSnapshot]:
        """Validate and yield the direct children."""
        for child in self.children:
            yield child if isinstance(child, NodeSnapshot) else NodeSnapshot.model_validate(child)


class ViewportSnapshot(BaseModel):
    width: float = Field(1920, ge=0)
    height: float = Field(1080, ge=0)
    scroll_x: float = 0
    scroll_y: float = 0
    scroll_width: float = Field(0, ge=0)
    scroll_height: float = Field(0, ge=0)

    model_config = {"extra": "forbid"}


class DocumentSnapshot(BaseModel):
    """A captured page: URL, title, viewport and the element tree."""

    url: str = ""
    title: str = ""
    viewport: ViewportSnapshot = Field(default_factory=ViewportSnapshot)
    root: NodeSnapshot

    model_config = {"extra": "forbid"}


def _element_from_snapshot(snapshot: NodeSnapshot) -> ElementNode:
    assert snapshot.tag is not None
    return ElementNode(
        tag=snapshot.tag,
        attrs={k.lower(): v for k, v in snapshot.attrs.items()},
        style=ComputedStyle.from_declarations(snapshot.style),
        rect=snapshot.rect.to_rect() if snapshot.rect is not None else None,
        editable=snapshot.editable,
        natural_width=snapshot.natural_width,
        natural_height=snapshot.natural_height,
    )


def build_document(snapshot: Union[DocumentSnapshot, dict[str, Any]]) -> Document:
    """
    Build a document tree from a snapshot.

    Args:
        snapshot: DocumentSnapshot model, or a dict in the same shape
            (as produced by the capture script)

    Returns:
        Document whose nodes carry computed style and geometry

    Raises:
        pydantic.ValidationError: If the snapshot is malformed
    """
    if not isinstance(snapshot, DocumentSnapshot):
        snapshot = DocumentSnapshot.model_validate(snapshot)
    if snapshot.root.tag is None:
        raise ValueError("snapshot root must be an element")

    root = _element_from_snapshot(snapshot.root)
    stack: list[tuple[NodeSnapshot, ElementNode]] = [(snapshot.root, root)]
    count = 1
    while stack:
        source, target = stack.pop()
        for child in source.iter_children():
            count += 1
            if child.text is not None:
                target.append(TextNode(text=child.text))
                continue
            element = _element_from_snapshot(child)
            target.append(element)
            stack.append((child, element))

    vp = snapshot.viewport
    viewport = Viewport(
        width=vp.width,
        height=vp.height,
        scroll_x=vp.scroll_x,
        scroll_y=vp.scroll_y,
        scroll_width=vp.scroll_width,
        scroll_height=vp.scroll_height,
    )
    logger.debug(f"Built document with {count} nodes from snapshot of {snapshot.url or '<no url>'}")
    return Document(root=root, url=snapshot.url, title=snapshot.title, viewport=viewport)
