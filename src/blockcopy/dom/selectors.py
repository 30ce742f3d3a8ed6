"""CSS selector matching over the document tree, backed by soupsieve.

Elements are rendered into a BeautifulSoup document so that soupsieve can
evaluate the full selector grammar, including combinators that look at
ancestors and siblings. Matches are mapped back to tree nodes.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import soupsieve
from bs4 import Tag

from .html import render_soup
from .node import ElementNode


class SelectorError(ValueError):
    """Raised when a selector cannot be parsed."""


def _top(node: ElementNode) -> ElementNode:
    # Clones keep their document reference, so walk parents instead of using document.root
    top = node
    for ancestor in node.iter_ancestors():
        top = ancestor
    return top


class SoupView:
    """
    A BeautifulSoup rendering of the whole tree containing an element.

    Build one view and reuse it when testing many nodes of the same tree;
    the view is a snapshot and does not follow later tree edits.
    """

    def __init__(self, node: ElementNode):
        top = _top(node)
        self.soup, self._tags = render_soup(top)
        self._nodes: dict[int, ElementNode] = {id(self._tags[id(top)]): top}
        for el in top.iter_elements():
            self._nodes[id(self._tags[id(el)])] = el

    def tag_for(self, node: ElementNode) -> Tag:
        try:
            return self._tags[id(node)]
        except KeyError:
            raise ValueError(f"{node!r} is not part of this view") from None

    def node_for(self, tag: Tag) -> ElementNode:
        return self._nodes[id(tag)]


class Selector:
    """A compiled selector group."""

    def __init__(self, source: str, pattern: soupsieve.SoupSieve):
        self.source = source
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"Selector({self.source!r})"

    def matches(self, el: ElementNode, view: Optional[SoupView] = None) -> bool:
        view = view or SoupView(el)
        return self.pattern.match(view.tag_for(el))

    def select(self, scope: ElementNode, view: Optional[SoupView] = None) -> list[ElementNode]:
        """Return matching descendants of scope in document order."""
        view = view or SoupView(scope)
        return [view.node_for(tag) for tag in self.pattern.select(view.tag_for(scope))]


@lru_cache(maxsize=256)
def compile_selector(source: str) -> Selector:
    """
    Compile a selector string.

    Raises:
        SelectorError: If the selector is empty or malformed
    """
    try:
        return Selector(source, soupsieve.compile(source))
    except soupsieve.SelectorSyntaxError as e:
        # soupsieve appends a multi-line caret diagram; keep the summary line
        summary = str(e).splitlines()[0] if str(e) else type(e).__name__
        raise SelectorError(f"{source!r}: {summary}") from e
