"""Document tree model read by the block-copy pipeline."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Optional, Union

if TYPE_CHECKING:
    from .selectors import Selector


@dataclass(frozen=True)
class Rect:
    """Viewport-relative bounding box of a rendered element."""

    x: float
    y: float
    width: float
    height: float
    # Content-box size (clientWidth/clientHeight); None when not measured
    client_width: Optional[float] = None
    client_height: Optional[float] = None

    @property
    def top(self) -> float:
        return self.y

    @property
    def left(self) -> float:
        return self.x

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def is_empty(self) -> bool:
        """True when the box and its content box have no extent at all."""
        return (
            self.width + self.height + (self.client_width or 0) + (self.client_height or 0)
        ) == 0

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class Viewport:
    """Visible window and scrollable extent of the page."""

    width: float = 1920
    height: float = 1080
    scroll_x: float = 0
    scroll_y: float = 0
    scroll_width: float = 0
    scroll_height: float = 0

    @property
    def page_width(self) -> float:
        return max(self.width, self.scroll_width)

    @property
    def page_height(self) -> float:
        return max(self.height, self.scroll_height)


@dataclass(frozen=True)
class ComputedStyle:
    """
    Subset of computed CSS properties the visibility rules inspect.

    Values are kept as raw CSS strings; an empty string means the
    property was not reported and the browser default applies.
    """

    display: str = ""
    visibility: str = ""
    opacity: str = ""
    transform: str = ""
    filter: str = ""
    clip: str = ""
    clip_path: str = ""
    text_indent: str = ""

    @classmethod
    def from_declarations(cls, declarations: dict[str, str]) -> ComputedStyle:
        """Build from a CSS property map (kebab-case or camelCase keys)."""
        values: dict[str, str] = {}
        for name, value in declarations.items():
            key = _normalize_property(name)
            if key in _STYLE_FIELDS:
                values[key] = str(value).strip()
        return cls(**values)

    def with_overrides(self, **changes: str) -> ComputedStyle:
        return replace(self, **changes)


def _normalize_property(name: str) -> str:
    name = name.strip()
    if "-" not in name and name.lower() != name:
        # camelCase from CSSStyleDeclaration
        name = "".join("-" + ch.lower() if ch.isupper() else ch for ch in name)
    return name.lower().replace("-", "_")


_STYLE_FIELDS = {f for f in ComputedStyle.__dataclass_fields__}


@dataclass(eq=False)
class TextNode:
    """A run of character data."""

    text: str
    parent: Optional[ElementNode] = field(default=None, repr=False)
    document: Optional[Document] = field(default=None, repr=False)

    is_element = False

    def clone(self) -> TextNode:
        return TextNode(text=self.text, document=self.document)

    @property
    def text_content(self) -> str:
        return self.text


@dataclass(eq=False)
class ElementNode:
    """
    An element in the document tree.

    Identity matters: two nodes are equal only when they are the same
    object, so nodes can be compared while walking the tree.
    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    style: ComputedStyle = field(default_factory=ComputedStyle)
    rect: Optional[Rect] = None
    # Browser-reported isContentEditable; None when unknown
    editable: Optional[bool] = None
    # Intrinsic media size (naturalWidth/videoWidth); None when unknown
    natural_width: Optional[float] = None
    natural_height: Optional[float] = None
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Optional[ElementNode] = field(default=None, repr=False)
    document: Optional[Document] = field(default=None, repr=False)

    is_element = True

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        cls = "".join(f".{c}" for c in self.classes)
        return f"<{self.tag}{ident}{cls}>"

    # -- attributes -------------------------------------------------------

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name.lower(), default)

    @property
    def id(self) -> str:
        return self.attrs.get("id", "")

    @property
    def class_name(self) -> str:
        return self.attrs.get("class", "")

    @property
    def classes(self) -> list[str]:
        return self.class_name.split()

    # -- structure --------------------------------------------------------

    def append(self, child: Node) -> Node:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        """Detach this element from its parent."""
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    @property
    def element_children(self) -> list[ElementNode]:
        return [c for c in self.children if isinstance(c, ElementNode)]

    def iter_ancestors(self) -> Iterator[ElementNode]:
        """Yield strict ancestors, nearest first."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def iter_descendants(self) -> Iterator[Node]:
        """Yield all descendants in document order."""
        stack: list[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, ElementNode):
                stack.extend(reversed(node.children))

    def iter_elements(self) -> Iterator[ElementNode]:
        for node in self.iter_descendants():
            if isinstance(node, ElementNode):
                yield node

    def closest(self, predicate: Callable[[ElementNode], bool]) -> Optional[ElementNode]:
        """Return the nearest inclusive ancestor satisfying predicate."""
        current: Optional[ElementNode] = self
        while current is not None:
            if predicate(current):
                return current
            current = current.parent
        return None

    @property
    def text_content(self) -> str:
        return "".join(n.text for n in self.iter_descendants() if isinstance(n, TextNode))

    def shallow_clone(self) -> ElementNode:
        """Copy this element without children or parent."""
        return ElementNode(
            tag=self.tag,
            attrs=dict(self.attrs),
            style=self.style,
            rect=self.rect,
            editable=self.editable,
            natural_width=self.natural_width,
            natural_height=self.natural_height,
            document=self.document,
        )

    # -- selectors --------------------------------------------------------

    def matches(self, selector: Union[str, Selector]) -> bool:
        from .selectors import compile_selector

        compiled = compile_selector(selector) if isinstance(selector, str) else selector
        return compiled.matches(self)

    def query(self, selector: str) -> Optional[ElementNode]:
        return next(iter(self.query_all(selector)), None)

    def query_all(self, selector: str) -> list[ElementNode]:
        """Return descendants matching a CSS selector, in document order."""
        from .selectors import compile_selector

        return compile_selector(selector).select(self)


Node = Union[ElementNode, TextNode]


@dataclass(eq=False)
class Document:
    """A rendered page: element tree plus viewport and page metadata."""

    root: ElementNode
    url: str = ""
    title: str = ""
    viewport: Viewport = field(default_factory=Viewport)

    def __post_init__(self) -> None:
        self.root.document = self
        for node in self.root.iter_descendants():
            node.document = self

    @property
    def body(self) -> Optional[ElementNode]:
        if self.root.tag == "body":
            return self.root
        for el in self.root.element_children:
            if el.tag == "body":
                return el
        return None

    def query(self, selector: str) -> Optional[ElementNode]:
        return next(iter(self.query_all(selector)), None)

    def query_all(self, selector: str) -> list[ElementNode]:
        """Return all elements, the root included, matching a CSS selector."""
        from .selectors import SoupView, compile_selector

        compiled = compile_selector(selector)
        view = SoupView(self.root)
        found = compiled.select(self.root, view)
        if compiled.matches(self.root, view):
            found.insert(0, self.root)
        return found

    def element_from_point(self, x: float, y: float) -> Optional[ElementNode]:
        """
        Return the deepest element whose box contains the viewport point.

        Later siblings paint over earlier ones, so they win ties. Elements
        without geometry or hidden by display/visibility are skipped, but
        their children are still considered.
        """
        hit: Optional[ElementNode] = None
        candidates = [self.root]
        while candidates:
            next_level: Optional[ElementNode] = None
            for el in candidates:
                if el.style.display == "none":
                    continue
                if el.rect is not None and el.style.visibility != "hidden" and el.rect.contains(x, y):
                    hit = el
                    next_level = el
            if next_level is None:
                # No box contains the point here; descend through box-less elements
                boxless = [el for el in candidates if el.rect is None and el.style.display != "none"]
                candidates = [c for el in boxless for c in el.element_children]
                continue
            candidates = next_level.element_children
        return hit
