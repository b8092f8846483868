"""Per-file analyzers for front-end feature sources."""

from __future__ import annotations

from .auxiliary import ConfigAnalyzer, HookAnalyzer, ServiceAnalyzer, TypeAnalyzer
from .base import SourceAnalyzer, read_source
from .component import ComponentAnalyzer
from .ui_elements import ELEMENT_KINDS, ElementKind, UIElementDetector, detection_statistics

__all__ = [
    "ComponentAnalyzer",
    "ConfigAnalyzer",
    "ELEMENT_KINDS",
    "ElementKind",
    "HookAnalyzer",
    "ServiceAnalyzer",
    "SourceAnalyzer",
    "TypeAnalyzer",
    "UIElementDetector",
    "detection_statistics",
    "read_source",
]
