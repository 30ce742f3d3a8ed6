"""One-call block copying: locate, prune and serialize."""

from __future__ import annotations

import logging
from typing import Optional

from ..conversion.serializer import ContentSerializer
from ..dom.node import Document, ElementNode
from ..models.config import BlockCopyConfig, Settings
from ..models.page import PageInfo
from .locator import BlockLocator
from .pruner import TreePruner
from .viability import BlockViabilityEvaluator, EditorExclusion
from .visibility import VisibilityClassifier

logger = logging.getLogger(__name__)


class BlockCopier:
    """
    Copies the content block at an interaction target.

    Wires the classifier, evaluator, locator, pruner and serializer from a
    single BlockCopyConfig. Holds no per-call state.

    Example:
        copier = BlockCopier()
        document = parse_html(html, url="https://x.test/")
        text = copier.copy(document.query("td"))
    """

    def __init__(self, config: Optional[BlockCopyConfig] = None):
        self.config = config or BlockCopyConfig()

        classifier = VisibilityClassifier(
            self.config.thresholds,
            honor_presentation_role=self.config.pruning.honor_presentation_role,
        )
        self.evaluator = BlockViabilityEvaluator(self.config.thresholds, classifier)
        self.locator = BlockLocator(self.evaluator)
        self.exclusion = EditorExclusion.from_config(self.config.editor_exclusion)
        self.serializer = ContentSerializer(
            pruner=TreePruner(
                classifier,
                prune_offscreen=self.config.pruning.prune_offscreen,
                keep_code_whitespace=self.config.pruning.keep_code_whitespace,
            )
        )

    def locate(self, target: Optional[ElementNode], promote: bool = False) -> Optional[ElementNode]:
        """
        Find the block to copy for target.

        Args:
            target: Element under the pointer
            promote: Widen to the nearest viable ancestor of the located block

        Returns:
            The block, or None inside editors or when nothing is viable
        """
        if target is None:
            return None
        if self.exclusion.is_excluded(target):
            logger.debug(f"{target!r} is inside an editor; not copying")
            return None

        block = self.locator.find_viable_block(target)
        if block is not None and promote:
            block = self.locator.promote(block) or block
        return block

    def copy(
        self,
        target: Optional[ElementNode],
        settings: Optional[Settings] = None,
        page_info: Optional[PageInfo] = None,
        promote: bool = False,
    ) -> Optional[str]:
        """
        Copy the block at target.

        Args:
            target: Element under the pointer
            settings: Copy settings (the configured ones if None)
            page_info: Source page for the attachment (the document's if None)
            promote: Widen to the nearest viable ancestor

        Returns:
            Serialized block, or None when no block was found
        """
        block = self.locate(target, promote=promote)
        if block is None:
            return None
        logger.info(f"Copying {block!r}")
        return self.serializer.process_content(block, settings or self.config.settings, page_info)

    def copy_at(
        self,
        document: Document,
        x: float,
        y: float,
        settings: Optional[Settings] = None,
        page_info: Optional[PageInfo] = None,
        promote: bool = False,
    ) -> Optional[str]:
        """Copy the block under the viewport point (x, y)."""
        target = document.element_from_point(x, y)
        if target is None:
            logger.debug(f"Nothing at ({x}, {y})")
            return None
        return self.copy(target, settings=settings, page_info=page_info, promote=promote)
