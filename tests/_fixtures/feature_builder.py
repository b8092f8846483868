"""Helper utilities for constructing temporary feature trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from featuredocs.config import ScanConfig
from featuredocs.feature_scanner import FeatureScanner
from featuredocs.models import FeatureRecord


class FeatureTreeBuilder:
    """Utility for writing feature files into a throwaway features root and scanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "features"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries below the features root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def scan(
        self,
        changed_files: Optional[Sequence[str]] = None,
        *,
        config: Optional[ScanConfig] = None,
    ) -> List[FeatureRecord]:
        """Return a fresh scan of the features root."""
        scanner = FeatureScanner(config or ScanConfig(root=self.root))
        return scanner.scan_features(self.root, changed_files)

    def path(self, relative: str = "") -> Path:
        """Return the features root, or a path below it."""
        return self.root / relative if relative else self.root


__all__ = ["FeatureTreeBuilder"]
