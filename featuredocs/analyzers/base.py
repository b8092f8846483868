"""Base classes for per-file source analyzers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Optional, Sequence, TypeVar

from ..logging import get_logger

RecordT = TypeVar("RecordT")

_logger = get_logger("analyzers")


def read_source(path: Path) -> Optional[str]:
    """Return the file text, or ``None`` (with a warning) when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _logger.warning("Unable to read %s: %s", path, exc)
        return None


class SourceAnalyzer(ABC, Generic[RecordT]):
    """Contract for analyzers that turn one source file into a record."""

    extensions: Sequence[str] = ()

    def supports(self, path: Path) -> bool:
        """Return True when this analyzer understands the file's suffix."""
        return any(path.name.endswith(suffix) for suffix in self.extensions)

    def analyze(self, path: Path) -> Optional[RecordT]:
        """Read ``path`` and extract a record; ``None`` when unreadable."""
        content = read_source(path)
        if content is None:
            return None
        return self.analyze_source(content, path)

    @abstractmethod
    def analyze_source(self, content: str, path: Path) -> Optional[RecordT]:
        """Extract a record from already-loaded source text."""
