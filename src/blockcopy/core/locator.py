"""Copy-target selection for an interaction target."""

from __future__ import annotations

import logging
from typing import Optional

from ..dom.node import ElementNode
from .viability import BlockViabilityEvaluator

logger = logging.getLogger(__name__)


class BlockLocator:
    """
    Picks the node to copy for a raw interaction target.

    A viable enclosing table wins over the target itself, so pointing at
    any cell copies the whole table.

    Example:
        locator = BlockLocator()
        block = locator.find_viable_block(document.element_from_point(x, y))
    """

    def __init__(self, evaluator: Optional[BlockViabilityEvaluator] = None):
        self._evaluator = evaluator or BlockViabilityEvaluator()

    @property
    def evaluator(self) -> BlockViabilityEvaluator:
        return self._evaluator

    def find_viable_block(self, node: Optional[ElementNode]) -> Optional[ElementNode]:
        """
        Find the block to copy for an interaction target.

        Args:
            node: Element under the pointer (None when nothing was hit)

        Returns:
            The nearest viable table enclosing node, else node if viable, else None
        """
        if node is None:
            return None

        root = node.document.root if node.document is not None else None
        current: Optional[ElementNode] = node
        while current is not None and current is not root:
            if current.tag == "table" and self._evaluator.is_viable_block(current):
                logger.debug(f"Table {current!r} takes priority over {node!r}")
                return current
            current = current.parent

        if self._evaluator.is_viable_block(node):
            return node

        logger.debug(f"No viable block for {node!r}")
        return None

    def promote(self, node: Optional[ElementNode]) -> Optional[ElementNode]:
        """Return the nearest strict ancestor that is itself viable."""
        if node is None:
            return None
        for ancestor in node.iter_ancestors():
            if self._evaluator.is_viable_block(ancestor):
                return ancestor
        return None
