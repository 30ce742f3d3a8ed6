"""Pydantic configuration models for blockcopy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Serialization formats for copied blocks."""

    MARKDOWN = "markdown"
    PLAINTEXT = "plaintext"


class Language(str, Enum):
    """Languages for the source attachment label."""

    SYSTEM = "system"
    EN = "en"
    ZH = "zh"


class Settings(BaseModel):
    """
    Per-call copy settings.

    Immutable once built. Accepts both the snake_case field names and the
    camelCase keys used by settings storage:

        Settings.model_validate({"outputFormat": "plaintext", "attachURL": True})
    """

    output_format: OutputFormat = Field(
        OutputFormat.MARKDOWN,
        alias="outputFormat",
        description="Serialize as Markdown or plain text",
    )
    attach_title: bool = Field(False, alias="attachTitle", description="Append the page title")
    attach_url: bool = Field(False, alias="attachURL", description="Append the page URL")
    language: Language = Field(
        Language.SYSTEM,
        description="Language of the source label ('system' follows the process locale)",
    )

    model_config = {"extra": "forbid", "frozen": True, "populate_by_name": True}

    @property
    def attaches_source(self) -> bool:
        return self.attach_title or self.attach_url


class Thresholds(BaseModel):
    """Empirical limits used by the visibility and viability rules."""

    hidden_opacity: float = Field(
        0.05,
        ge=0,
        le=1,
        description="Elements at or below this opacity count as hidden",
    )
    hidden_text_indent: float = Field(
        -9999,
        description="Elements at or below this text-indent (px) count as hidden",
    )
    min_block_width: float = Field(20, ge=0, description="Minimum rendered width of a copy target")
    min_block_height: float = Field(20, ge=0, description="Minimum rendered height of a copy target")
    min_text_length: int = Field(
        1,
        ge=0,
        description="Minimum collapsed text length of a non-media copy target",
    )
    max_content_depth: int = Field(
        512,
        ge=1,
        description="Nesting depth after which the content search gives up on a branch",
    )

    model_config = {"extra": "forbid", "frozen": True}


class EditorExclusionConfig(BaseModel):
    """Extra editor markers that suppress block copying (extend the defaults)."""

    class_names: Optional[list[str]] = Field(
        None,
        description="Class tokens of embedded editors to exclude",
    )
    attribute_selectors: Optional[list[str]] = Field(
        None,
        description="Attribute selectors (e.g. '[data-editor]') of editors to exclude",
    )

    model_config = {"extra": "forbid"}


class PruningConfig(BaseModel):
    """Configuration for building the visible clone."""

    prune_offscreen: bool = Field(True, description="Drop elements positioned outside the page")
    keep_code_whitespace: bool = Field(
        False,
        description="Keep whitespace-only text inside pre/code elements",
    )
    honor_presentation_role: bool = Field(
        True,
        description="Treat role=presentation/none as hidden",
    )

    model_config = {"extra": "forbid"}


class BlockCopyConfig(BaseModel):
    """
    Root configuration model for blockcopy.

    Example:
        config = BlockCopyConfig(
            settings=Settings(output_format=OutputFormat.PLAINTEXT, attach_url=True),
            thresholds=Thresholds(min_block_width=40),
        )

    YAML format:
        settings:
          outputFormat: markdown
          attachTitle: true
        editor_exclusion:
          class_names: [my-editor]
        thresholds:
          min_block_height: 30
    """

    settings: Settings = Field(default_factory=Settings)
    editor_exclusion: EditorExclusionConfig = Field(default_factory=EditorExclusionConfig)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    pruning: PruningConfig = Field(default_factory=PruningConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        data = self.model_dump(mode="json", exclude_none=True, by_alias=True)
        return yaml.dump(data, default_flow_style=False, allow_unicode=True)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> BlockCopyConfig:
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> BlockCopyConfig:
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text(encoding="utf-8"))
