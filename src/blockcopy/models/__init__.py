"""Configuration, settings and page models."""

from .config import (
    BlockCopyConfig,
    EditorExclusionConfig,
    Language,
    OutputFormat,
    PruningConfig,
    Settings,
    Thresholds,
)
from .page import PageInfo

__all__ = [
    "BlockCopyConfig",
    "EditorExclusionConfig",
    "Language",
    "OutputFormat",
    "PageInfo",
    "PruningConfig",
    "Settings",
    "Thresholds",
]
