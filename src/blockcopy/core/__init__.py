"""Block identification and visibility pruning."""

from .locator import BlockLocator
from .pruner import TreePruner
from .viability import (
    DEFAULT_EDITOR_EXCLUSION_ATTRIBUTE_SELECTORS,
    DEFAULT_EDITOR_EXCLUSION_CLASSES,
    EXCLUDED_TAGS,
    MEDIA_TAGS,
    NON_CONTENT_TAGS,
    BlockViabilityEvaluator,
    EditorExclusion,
    find_editable_context,
    is_media,
)
from .visibility import VisibilityClassifier, is_hidden

__all__ = [
    # Classification
    "VisibilityClassifier",
    "is_hidden",
    "BlockViabilityEvaluator",
    "is_media",
    "find_editable_context",
    "EditorExclusion",
    # Selection and pruning
    "BlockLocator",
    "TreePruner",
    # Rule tables
    "NON_CONTENT_TAGS",
    "EXCLUDED_TAGS",
    "MEDIA_TAGS",
    "DEFAULT_EDITOR_EXCLUSION_CLASSES",
    "DEFAULT_EDITOR_EXCLUSION_ATTRIBUTE_SELECTORS",
]
