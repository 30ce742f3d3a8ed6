"""Copy-target viability rules and editor exclusion."""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..dom.node import ElementNode, TextNode
from ..dom.selectors import Selector, SelectorError, SoupView, compile_selector
from ..models.config import EditorExclusionConfig, Thresholds
from .visibility import VisibilityClassifier

logger = logging.getLogger(__name__)

# Never content, whatever their styling
NON_CONTENT_TAGS = frozenset({"script", "style", "meta", "head", "link", "template", "noscript"})

# Interactive controls and page chrome; neither they nor their contents are copy targets
EXCLUDED_TAGS = NON_CONTENT_TAGS | frozenset(
    {
        # Interactive & form
        "a",
        "button",
        "input",
        "textarea",
        "select",
        "option",
        "optgroup",
        "label",
        "details",
        "summary",
        "form",
        "fieldset",
        "legend",
        # Embedded & non-text
        "iframe",
        "audio",
        "map",
        "area",
        # Structural chrome
        "header",
        "footer",
        "nav",
        "aside",
        "dialog",
        "menu",
    }
)

# Content-bearing without any text
MEDIA_TAGS = frozenset({"img", "video", "canvas", "svg", "picture", "embed", "object"})

DEFAULT_EDITOR_EXCLUSION_CLASSES = [
    "CodeMirror",
    "cm-editor",
    "cm-content",
    "monaco-editor",
    "ace_editor",
    "ql-editor",
    "tox-edit-area",
    "ProseMirror",
    "notion-page-content",
]

DEFAULT_EDITOR_EXCLUSION_ATTRIBUTE_SELECTORS = [
    "[data-cangjie-content]",
    "[data-cangjie-editable]",
]

_WHITESPACE_RE = re.compile(r"\s+")


def normalized_text(node: ElementNode) -> str:
    """Text content with whitespace runs collapsed to single spaces."""
    return _WHITESPACE_RE.sub(" ", node.text_content).strip()


def is_media(node: ElementNode) -> bool:
    return node.tag in MEDIA_TAGS


def _is_editable_root(node: ElementNode) -> bool:
    if node.editable:
        return True
    value = node.get("contenteditable")
    return value is not None and value.strip().lower() != "false"


def find_editable_context(node: ElementNode) -> Optional[ElementNode]:
    """Return the nearest inclusive ancestor that is user-editable, if any."""
    return node.closest(_is_editable_root)


class EditorExclusion:
    """
    Recognizes embedded editors (code editors, rich-text boxes) where block
    copying must stay out of the way.

    Configured class names and attribute selectors extend the defaults.

    Example:
        exclusion = EditorExclusion(class_names=["my-editor"])
        if exclusion.is_excluded(target):
            return None
    """

    def __init__(
        self,
        class_names: Optional[list[str]] = None,
        attribute_selectors: Optional[list[str]] = None,
    ):
        self._class_names = set(DEFAULT_EDITOR_EXCLUSION_CLASSES)
        if class_names:
            self._class_names.update(c.strip() for c in class_names if c and c.strip())

        self._selectors: list[Selector] = []
        for source in DEFAULT_EDITOR_EXCLUSION_ATTRIBUTE_SELECTORS + list(attribute_selectors or []):
            try:
                self._selectors.append(compile_selector(source))
            except SelectorError as e:
                logger.warning(f"Ignoring editor exclusion selector {source!r}: {e}")

    @classmethod
    def from_config(cls, config: Optional[EditorExclusionConfig]) -> EditorExclusion:
        if config is None:
            return cls()
        return cls(class_names=config.class_names, attribute_selectors=config.attribute_selectors)

    @property
    def class_names(self) -> frozenset[str]:
        return frozenset(self._class_names)

    def _is_editor_root(self, node: ElementNode, view: Optional[SoupView]) -> bool:
        if _is_editable_root(node):
            return True
        if any(c in self._class_names for c in node.classes):
            return True
        return view is not None and any(selector.matches(node, view) for selector in self._selectors)

    def find_editor(self, node: ElementNode) -> Optional[ElementNode]:
        """Return the nearest enclosing editor root, if any."""
        # One rendering serves every ancestor test
        view = SoupView(node) if self._selectors else None
        return node.closest(lambda el: self._is_editor_root(el, view))

    def is_excluded(self, node: ElementNode) -> bool:
        return self.find_editor(node) is not None


class BlockViabilityEvaluator:
    """
    Decides whether a node itself is a sensible unit to copy.

    All checks must pass; any error during evaluation means "not viable".

    Example:
        evaluator = BlockViabilityEvaluator()
        if evaluator.is_viable_block(node):
            ...
    """

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        classifier: Optional[VisibilityClassifier] = None,
    ):
        """
        Initialize the evaluator.

        Args:
            thresholds: Size, text and depth limits (defaults apply if None)
            classifier: Visibility rules to apply (built from thresholds if None)
        """
        self._thresholds = thresholds or Thresholds()
        self._classifier = classifier or VisibilityClassifier(self._thresholds)

    @property
    def classifier(self) -> VisibilityClassifier:
        return self._classifier

    def is_viable_block(self, node: ElementNode) -> bool:
        """
        Check whether node is an acceptable copy target.

        Args:
            node: Candidate element

        Returns:
            True if every viability rule passes
        """
        try:
            return self._check(node)
        except Exception as e:
            logger.debug(f"Viability check failed for {node!r}: {e}")
            return False

    def _check(self, node: ElementNode) -> bool:
        if find_editable_context(node) is not None:
            return False
        if node.tag in NON_CONTENT_TAGS:
            return False
        if self._classifier.is_hidden(node):
            return False
        if node.tag in EXCLUDED_TAGS:
            return False
        if self._has_excluded_ancestor(node):
            return False
        if not self.has_visible_content(node):
            return False
        if not self.meets_size_floor(node):
            return False
        media = is_media(node)
        if not media and len(normalized_text(node)) < self._thresholds.min_text_length:
            return False
        if not media and self._has_better_media_child(node):
            return False
        return True

    def _has_excluded_ancestor(self, node: ElementNode) -> bool:
        body = node.document.body if node.document is not None else None
        for ancestor in node.iter_ancestors():
            if ancestor is body:
                break
            if ancestor.tag in EXCLUDED_TAGS:
                return True
        return False

    def meets_size_floor(self, node: ElementNode) -> bool:
        """True when the rendered box is large enough (or was never measured)."""
        rect = node.rect
        if rect is None:
            return True
        return rect.width >= self._thresholds.min_block_width and rect.height >= self._thresholds.min_block_height

    def _media_has_content(self, node: ElementNode) -> bool:
        if node.tag == "img":
            if node.natural_width is not None:
                return node.natural_width > 0
            return any(node.get(a) for a in ("src", "srcset", "data-src"))
        if node.tag == "video":
            if node.natural_width is not None and node.natural_width <= 0:
                return bool(node.get("poster"))
            return True
        return True

    def has_visible_content(self, node: ElementNode) -> bool:
        """
        Check whether node shows anything: loaded media, non-blank text, or
        a visible descendant that does.

        The search runs on an explicit stack; branches nested deeper than
        ``max_content_depth`` are treated as empty.
        """
        max_depth = self._thresholds.max_content_depth
        stack: list[tuple[ElementNode, int]] = [(node, 0)]
        while stack:
            current, depth = stack.pop()
            if is_media(current):
                if self._media_has_content(current):
                    return True
                continue
            for child in current.children:
                if isinstance(child, TextNode) and child.text.strip():
                    return True
            if depth >= max_depth:
                logger.debug(f"Content search depth limit reached below {node!r}")
                continue
            for child in reversed(current.element_children):
                if not self._classifier.is_hidden(child):
                    stack.append((child, depth + 1))
        return False

    def _has_better_media_child(self, node: ElementNode) -> bool:
        for child in node.element_children:
            if child.tag in EXCLUDED_TAGS or not is_media(child):
                continue
            if not self._classifier.is_hidden(child) and self.meets_size_floor(child):
                return True
        return False
