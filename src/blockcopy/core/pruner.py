"""Visible-only cloning of a content subtree."""

from __future__ import annotations

import logging
from typing import Optional

from ..dom.node import ElementNode, TextNode
from .visibility import VisibilityClassifier

logger = logging.getLogger(__name__)

WHITESPACE_PRESERVING_TAGS = {"pre", "code"}


class TreePruner:
    """
    Builds a detached copy of a subtree holding only what a sighted user
    would perceive.

    The original tree is never modified. Hidden elements are skipped along
    with their whole subtree, and whitespace-only text is dropped, so
    pruning a pruned clone changes nothing.

    Example:
        pruner = TreePruner()
        clone = pruner.create_visible_clone(block)
    """

    def __init__(
        self,
        classifier: Optional[VisibilityClassifier] = None,
        prune_offscreen: bool = True,
        keep_code_whitespace: bool = False,
    ):
        """
        Initialize the pruner.

        Args:
            classifier: Visibility rules (default rules if None)
            prune_offscreen: Skip elements laid out beyond the page extent
            keep_code_whitespace: Keep whitespace-only text inside pre/code
        """
        self._classifier = classifier or VisibilityClassifier()
        self._prune_offscreen = prune_offscreen
        self._keep_code_whitespace = keep_code_whitespace

    def create_visible_clone(self, root: ElementNode) -> ElementNode:
        """
        Clone root, keeping only visible descendants.

        Args:
            root: Subtree to copy; always cloned itself, hidden or not

        Returns:
            Detached clone that still refers to root's document
        """
        clone = root.shallow_clone()
        dropped = 0
        stack: list[tuple[ElementNode, ElementNode, bool]] = [(root, clone, self._preserves_whitespace(root))]
        while stack:
            source, target, in_code = stack.pop()
            for child in source.children:
                if isinstance(child, TextNode):
                    if child.text.strip() or (in_code and child.text):
                        target.append(child.clone())
                    continue
                if self._classifier.is_hidden(child, include_offscreen=self._prune_offscreen):
                    dropped += 1
                    continue
                child_clone = child.shallow_clone()
                target.append(child_clone)
                stack.append((child, child_clone, in_code or self._preserves_whitespace(child)))

        if dropped:
            logger.debug(f"Pruned {dropped} hidden element(s) from {root!r}")
        return clone

    def _preserves_whitespace(self, node: ElementNode) -> bool:
        return self._keep_code_whitespace and node.tag in WHITESPACE_PRESERVING_TAGS
