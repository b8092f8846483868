"""Tests for featuredocs.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from featuredocs.config import (
    CONFIG_FILENAME,
    ComplexityConfig,
    ConfigError,
    ExtensionConfig,
    ScanConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ScanConfig)
    assert config.root == tmp_path.resolve()
    assert config.features_dir is None
    assert config.exclude_dirs == []
    assert config.include_empty_features is False
    assert config.changed_files_match == "substring"
    assert config.complexity == ComplexityConfig(high_components=10, medium_components=5)
    assert config.extensions == ExtensionConfig()
    assert config.extensions.components == [".tsx", ".jsx", ".vue", ".ts", ".js"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        """
features_dir: frontend/src/features
exclude_dirs:
  - dist
  - coverage
include_empty_features: "yes"
changed_files_match: Segment
complexity:
  high_components: 8
  medium_components: "3"
extensions:
  components: [tsx, .vue]
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.features_dir == "frontend/src/features"
    assert config.exclude_dirs == ["dist", "coverage"]
    assert config.include_empty_features is True
    assert config.changed_files_match == "segment"
    assert config.complexity.high_components == 8
    assert config.complexity.medium_components == 3
    assert config.extensions.components == [".tsx", ".vue"]
    assert config.extensions.hooks == [".ts", ".tsx", ".js"]


def test_load_config_accepts_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("exclude_dirs: build\n", encoding="utf-8")

    config = load_config(config_file)

    assert config.exclude_dirs == ["build"]
    assert config.root == tmp_path.resolve()


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).features_dir is None


@pytest.mark.parametrize(
    "content, message",
    [
        ("features_dir: [unterminated\n", "Failed to parse"),
        ("- just\n- a list\n", "mapping"),
        ("changed_files_match: fuzzy\n", "changed_files_match"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)
