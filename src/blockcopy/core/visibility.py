"""Perceptual visibility rules for document nodes."""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..dom.node import ElementNode
from ..models.config import Thresholds

logger = logging.getLogger(__name__)

# Utility classes that hide content from sighted users only
SCREEN_READER_CLASS_TOKENS = (
    "sr-only",
    "visually-hidden",
    "visuallyhidden",
    "screen-reader-only",
    "screen-reader-text",
)

PRESENTATION_ROLES = {"presentation", "none"}

# Media may report an empty box until it loads
ZERO_SIZE_EXEMPT_TAGS = {"img", "video", "br", "wbr"}

_SCREEN_READER_RE = re.compile("|".join(re.escape(t) for t in SCREEN_READER_CLASS_TOKENS), re.IGNORECASE)
_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:e[-+]?\d+)?)\s*(%|[a-z]*)\s*$", re.IGNORECASE)
_FUNCTION_RE = re.compile(r"([a-zA-Z][a-zA-Z0-9]*)\(([^()]*)\)")


def parse_number(value: str) -> Optional[float]:
    """Parse a CSS number or length ('0.5', '-9999px', '100%'); None if not numeric."""
    match = _NUMBER_RE.match(value or "")
    if match is None:
        return None
    return float(match.group(1))


def _arguments(args: str) -> list[Optional[float]]:
    return [parse_number(a) for a in re.split(r"[\s,]+", args.strip()) if a]


def has_zero_scale(transform: str) -> bool:
    """True when a transform collapses the X or Y axis."""
    for name, args in _FUNCTION_RE.findall(transform or ""):
        name = name.lower()
        values = _arguments(args)
        if name == "scale" and values:
            x = values[0]
            y = values[1] if len(values) > 1 else x
            if x == 0 or y == 0:
                return True
        elif name in ("scalex", "scaley") and values and values[0] == 0:
            return True
        elif name == "matrix" and len(values) == 6:
            a, b, c, d = values[:4]
            if (a == 0 and b == 0) or (c == 0 and d == 0):
                return True
        elif name == "matrix3d" and len(values) == 16:
            if all(v == 0 for v in values[0:3]) or all(v == 0 for v in values[4:7]):
                return True
    return False


def has_zero_opacity_filter(filter_value: str) -> bool:
    for name, args in _FUNCTION_RE.findall(filter_value or ""):
        if name.lower() == "opacity":
            values = _arguments(args)
            if values and values[0] == 0:
                return True
    return False


def _inset_percentages(args: str) -> Optional[tuple[float, float, float, float]]:
    """Expand inset() offsets to (top, right, bottom, left) percentages."""
    # Rounded corners ("round 4px") do not change the clipped area
    offsets = re.split(r"\bround\b", args, maxsplit=1)[0].split()
    if not 1 <= len(offsets) <= 4:
        return None
    values: list[float] = []
    for offset in offsets:
        amount = parse_number(offset)
        if amount is None:
            return None
        # Absolute lengths depend on the box size, which is not known here
        if amount != 0 and not offset.endswith("%"):
            amount = 0
        values.append(amount)
    if len(values) == 1:
        values *= 4
    elif len(values) == 2:
        values *= 2
    elif len(values) == 3:
        values.append(values[1])
    return values[0], values[1], values[2], values[3]


def has_empty_clip(clip: str, clip_path: str) -> bool:
    """True for clip: rect(0 0 0 0) or a clip-path inset that leaves no area."""
    for name, args in _FUNCTION_RE.findall(clip or ""):
        if name.lower() == "rect":
            values = _arguments(args)
            if len(values) == 4 and all(v == 0 for v in values):
                return True
    for name, args in _FUNCTION_RE.findall(clip_path or ""):
        if name.lower() == "inset":
            offsets = _inset_percentages(args)
            if offsets is None:
                continue
            top, right, bottom, left = offsets
            if top + bottom >= 100 or left + right >= 100:
                return True
    return False


class VisibilityClassifier:
    """
    Decides whether a single element is perceptually hidden.

    Each rule targets one CSS hiding idiom; the element is hidden when any
    rule fires. The classifier never raises: unreadable style or geometry
    makes it answer "not hidden", so nothing is pruned on bad data.

    Example:
        classifier = VisibilityClassifier()
        if classifier.is_hidden(node):
            ...
    """

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        honor_presentation_role: bool = True,
    ):
        """
        Initialize the classifier.

        Args:
            thresholds: Opacity and text-indent limits (defaults apply if None)
            honor_presentation_role: Treat role=presentation/none as hidden
        """
        self._thresholds = thresholds or Thresholds()
        self._honor_presentation_role = honor_presentation_role

    def is_hidden(self, node: ElementNode, include_offscreen: bool = False) -> bool:
        """
        Check whether an element is hidden from sighted users.

        Args:
            node: Element to inspect
            include_offscreen: Also treat elements laid out beyond the page
                extent as hidden (used when pruning, not for viability)

        Returns:
            True if any hiding rule fires
        """
        try:
            reason = self.hidden_reason(node, include_offscreen=include_offscreen)
        except Exception as e:
            logger.debug(f"Visibility check failed for {node!r}: {e}")
            return False
        if reason:
            logger.debug(f"{node!r} hidden: {reason}")
            return True
        return False

    def hidden_reason(self, node: ElementNode, include_offscreen: bool = False) -> Optional[str]:
        """Return a short description of the first rule that fires, or None."""
        if node.get("aria-hidden", "").strip().lower() == "true":
            return "aria-hidden"

        if self._honor_presentation_role and node.get("role", "").strip().lower() in PRESENTATION_ROLES:
            return "presentation role"

        if node.class_name and _SCREEN_READER_RE.search(node.class_name):
            return "screen reader class"

        style = node.style
        if style.display.strip().lower() == "none":
            return "display: none"
        if style.visibility.strip().lower() == "hidden":
            return "visibility: hidden"

        opacity = parse_number(style.opacity)
        if opacity is not None and opacity <= self._thresholds.hidden_opacity:
            return f"opacity: {style.opacity}"

        if has_zero_scale(style.transform):
            return f"transform: {style.transform}"
        if has_zero_opacity_filter(style.filter):
            return f"filter: {style.filter}"

        if has_empty_clip(style.clip, style.clip_path):
            return "clip"

        indent = parse_number(style.text_indent)
        if indent is not None and indent <= self._thresholds.hidden_text_indent:
            return f"text-indent: {style.text_indent}"

        rect = node.rect
        if (
            rect is not None
            and rect.is_empty
            and node.tag not in ZERO_SIZE_EXEMPT_TAGS
            and style.display.strip().lower() != "contents"
        ):
            return "zero size"

        if include_offscreen and self._is_offscreen(node):
            return "outside page"

        return None

    def _is_offscreen(self, node: ElementNode) -> bool:
        rect = node.rect
        if rect is None or rect.width <= 0 or rect.height <= 0:
            return False
        document = node.document
        if document is None:
            return False
        viewport = document.viewport
        page_top = rect.top + viewport.scroll_y
        page_left = rect.left + viewport.scroll_x
        return page_top > viewport.page_height or page_left > viewport.page_width


_default_classifier = VisibilityClassifier()


def is_hidden(node: ElementNode) -> bool:
    """Check a node against the default rules (no off-page rule)."""
    return _default_classifier.is_hidden(node)
