"""Configuration loading for featuredocs (.featuredocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".featuredocs.yml"

MATCH_SUBSTRING = "substring"
MATCH_SEGMENT = "segment"
_MATCH_MODES = {MATCH_SUBSTRING, MATCH_SEGMENT}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExtensionConfig:
    """File suffixes routed to each specialised sub-scan."""

    components: List[str] = field(
        default_factory=lambda: [".tsx", ".jsx", ".vue", ".ts", ".js"]
    )
    hooks: List[str] = field(default_factory=lambda: [".ts", ".tsx", ".js"])
    services: List[str] = field(default_factory=lambda: [".ts", ".js"])
    types: List[str] = field(default_factory=lambda: [".ts", ".d.ts"])
    tests: List[str] = field(
        default_factory=lambda: [".test.ts", ".test.tsx", ".spec.ts", ".spec.tsx"]
    )


@dataclass
class ComplexityConfig:
    """Component-count thresholds for the feature complexity bucket."""

    high_components: int = 10
    medium_components: int = 5


@dataclass
class ScanConfig:
    """Represents the scan settings defined in .featuredocs.yml."""

    root: Path
    features_dir: Optional[str] = None
    exclude_dirs: List[str] = field(default_factory=list)
    include_empty_features: bool = False
    changed_files_match: str = MATCH_SUBSTRING
    complexity: ComplexityConfig = field(default_factory=ComplexityConfig)
    extensions: ExtensionConfig = field(default_factory=ExtensionConfig)


def load_config(config_path: Path) -> ScanConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = ScanConfig(root=root)
    config.features_dir = _as_str(data.get("features_dir"))
    config.exclude_dirs = _as_str_list(data.get("exclude_dirs"))

    include_empty = _as_bool(data.get("include_empty_features"))
    if include_empty is not None:
        config.include_empty_features = include_empty

    match_mode = _as_str(data.get("changed_files_match"))
    if match_mode is not None:
        match_mode = match_mode.strip().lower()
        if match_mode not in _MATCH_MODES:
            allowed = ", ".join(sorted(_MATCH_MODES))
            raise ConfigError(f"changed_files_match must be one of: {allowed}")
        config.changed_files_match = match_mode

    complexity_data = _as_dict(data.get("complexity"))
    if complexity_data:
        high = _as_int(complexity_data.get("high_components"))
        medium = _as_int(complexity_data.get("medium_components"))
        if high is not None:
            config.complexity.high_components = high
        if medium is not None:
            config.complexity.medium_components = medium

    extension_data = _as_dict(data.get("extensions"))
    for key in ("components", "hooks", "services", "types", "tests"):
        if key in extension_data:
            suffixes = [_normalise_suffix(item) for item in _as_str_list(extension_data[key])]
            setattr(config.extensions, key, [suffix for suffix in suffixes if suffix])

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _normalise_suffix(value: str) -> str:
    value = value.strip()
    if value and not value.startswith("."):
        value = f".{value}"
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ComplexityConfig",
    "ConfigError",
    "ExtensionConfig",
    "MATCH_SEGMENT",
    "MATCH_SUBSTRING",
    "ScanConfig",
    "load_config",
]
