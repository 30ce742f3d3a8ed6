"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from blockcopy.dom import parse_html
from blockcopy.models import (
    BlockCopyConfig,
    EditorExclusionConfig,
    Language,
    OutputFormat,
    PageInfo,
    Settings,
    Thresholds,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Test documented defaults."""
        settings = Settings()

        assert settings.output_format == OutputFormat.MARKDOWN
        assert settings.attach_title is False
        assert settings.attach_url is False
        assert settings.language == Language.SYSTEM
        assert not settings.attaches_source

    def test_camel_case_keys(self):
        """Test the stored-settings key names."""
        settings = Settings.model_validate({"outputFormat": "plaintext", "attachURL": True, "language": "zh"})

        assert settings.output_format == OutputFormat.PLAINTEXT
        assert settings.attach_url is True
        assert settings.language == Language.ZH
        assert settings.attaches_source

    def test_invalid_values(self):
        """Test enum validation."""
        with pytest.raises(ValidationError):
            Settings(output_format="html")
        with pytest.raises(ValidationError):
            Settings(language="fr")

    def test_unknown_keys_rejected(self):
        """Test that typos are not silently ignored."""
        with pytest.raises(ValidationError):
            Settings.model_validate({"outputformat": "markdown"})

    def test_frozen(self):
        """Test that settings are immutable."""
        settings = Settings()

        with pytest.raises(ValidationError):
            settings.attach_title = True


class TestThresholds:
    """Tests for Thresholds."""

    def test_defaults(self):
        """Test the empirical defaults."""
        thresholds = Thresholds()

        assert thresholds.hidden_opacity == 0.05
        assert thresholds.min_block_width == 20
        assert thresholds.min_block_height == 20
        assert thresholds.min_text_length == 1

    def test_bounds(self):
        """Test value validation."""
        with pytest.raises(ValidationError):
            Thresholds(hidden_opacity=1.5)
        with pytest.raises(ValidationError):
            Thresholds(min_block_width=-1)
        with pytest.raises(ValidationError):
            Thresholds(max_content_depth=0)


class TestBlockCopyConfig:
    """Tests for BlockCopyConfig."""

    def test_yaml_round_trip(self):
        """Test YAML serialization."""
        config = BlockCopyConfig(
            settings=Settings(output_format=OutputFormat.PLAINTEXT, attach_title=True),
            editor_exclusion=EditorExclusionConfig(class_names=["my-editor"]),
            thresholds=Thresholds(min_block_height=30),
        )

        loaded = BlockCopyConfig.from_yaml(config.to_yaml())

        assert loaded == config
        assert "outputFormat: plaintext" in config.to_yaml()

    def test_from_yaml_file(self, tmp_path):
        """Test loading a YAML file with camelCase settings."""
        path = tmp_path / "blockcopy.yaml"
        path.write_text(
            "settings:\n"
            "  outputFormat: markdown\n"
            "  attachTitle: true\n"
            "editor_exclusion:\n"
            "  attribute_selectors: ['[data-editor]']\n"
            "pruning:\n"
            "  prune_offscreen: false\n"
            "log_level: DEBUG\n",
            encoding="utf-8",
        )

        config = BlockCopyConfig.from_yaml_file(path)

        assert config.settings.attach_title is True
        assert config.editor_exclusion.attribute_selectors == ["[data-editor]"]
        assert config.pruning.prune_offscreen is False
        assert config.log_level == "DEBUG"

    def test_empty_yaml(self):
        """Test that an empty document gives defaults."""
        assert BlockCopyConfig.from_yaml("") == BlockCopyConfig()

    def test_unknown_section_rejected(self):
        """Test strict top-level keys."""
        with pytest.raises(ValidationError):
            BlockCopyConfig.from_yaml("colour: red\n")


class TestPageInfo:
    """Tests for PageInfo."""

    def test_from_document(self):
        """Test defaults taken from a document."""
        doc = parse_html("<html><head><title>T</title></head><body></body></html>", url="https://x.test/")

        assert PageInfo.from_document(doc) == PageInfo(title="T", url="https://x.test/")

    def test_explicit_values_win(self):
        """Test overriding document metadata."""
        doc = parse_html("<p>x</p>", url="https://x.test/")

        assert PageInfo.from_document(doc, title="Given", url="").url == ""
        assert PageInfo.from_document(None, title="Given").title == "Given"
