"""Feature discovery: walk a features root and build one FeatureRecord per directory."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .analyzers.auxiliary import ConfigAnalyzer, HookAnalyzer, ServiceAnalyzer, TypeAnalyzer
from .analyzers.base import read_source
from .analyzers.component import ComponentAnalyzer
from .analyzers.ui_elements import UIElementDetector, detection_statistics, infer_composites
from .config import MATCH_SEGMENT, ScanConfig
from .logging import get_logger
from .models import (
    AssetRecord,
    EntryPoint,
    FeatureRecord,
    FeatureTestRecord,
    FileEntry,
)

_EXCLUDED_DIRS = {"node_modules"}

_FEATURE_ROOT_CANDIDATES = ("frontend/src/features", "src/features")

_COMPONENTS_DIR = "components"
_HOOKS_DIR = "hooks"
_SERVICES_DIR = "services"
_TYPES_DIR = "types"
_TEST_DIRS = {"__tests__", "tests"}

_ENTRY_POINT_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}
_ASSET_KINDS = (
    (".module.css", "styles"),
    (".png", "image"),
    (".jpg", "image"),
    (".jpeg", "image"),
    (".gif", "image"),
    (".webp", "image"),
    (".svg", "icon"),
    (".css", "styles"),
    (".scss", "styles"),
)
_TEST_MARKERS = (".test.", ".spec.")
_CRUD_INDICATORS = ("create", "edit", "list", "view", "delete")


class FeatureScanner:
    """Discovers features under a root and classifies their files."""

    def __init__(
        self,
        config: ScanConfig | None = None,
        *,
        component_analyzer: ComponentAnalyzer | None = None,
        detector: UIElementDetector | None = None,
        hook_analyzer: HookAnalyzer | None = None,
        service_analyzer: ServiceAnalyzer | None = None,
        type_analyzer: TypeAnalyzer | None = None,
        config_analyzer: ConfigAnalyzer | None = None,
    ) -> None:
        self.config = config or ScanConfig(root=Path.cwd())
        self.component_analyzer = component_analyzer or ComponentAnalyzer()
        self.detector = detector or UIElementDetector()
        self.hook_analyzer = hook_analyzer or HookAnalyzer()
        self.service_analyzer = service_analyzer or ServiceAnalyzer()
        self.type_analyzer = type_analyzer or TypeAnalyzer()
        self.config_analyzer = config_analyzer or ConfigAnalyzer()
        self.logger = get_logger("scanner")
        self._excluded_dirs = _EXCLUDED_DIRS | set(self.config.exclude_dirs)

    def scan_features(
        self, root: Path | str, changed_files: Optional[Sequence[str]] = None
    ) -> List[FeatureRecord]:
        """Return one record per feature directory under ``root``, sorted by name."""
        root_path = Path(root).expanduser()
        if not root_path.is_dir():
            self.logger.info("Features directory not found: %s", root_path)
            return []

        self.logger.info("Scanning features in %s", root_path)
        features: List[FeatureRecord] = []
        for entry in self._list_dir(root_path):
            if not entry.is_dir() or not self._should_walk(entry.name):
                continue
            feature_path = Path(entry.path)
            if changed_files is not None and not feature_has_changes(
                feature_path, changed_files, self.config.changed_files_match
            ):
                self.logger.debug("Skipping unchanged feature %s", entry.name)
                continue

            feature = self.analyze_feature(entry.name, feature_path)
            if not feature.components and not self.config.include_empty_features:
                self.logger.debug("Skipping feature %s without components", entry.name)
                continue
            features.append(feature)

        return sorted(features, key=lambda feature: (feature.name.casefold(), feature.name))

    def analyze_feature(self, name: str, path: Path) -> FeatureRecord:
        self.logger.info("Analyzing feature %s", name)
        feature = FeatureRecord(name=name, path=str(path))
        self._walk(path, path, feature)
        self._aggregate_structure(feature)
        self._aggregate_ui(feature)
        return feature

    # Traversal

    def _walk(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._list_dir(directory):
            path = Path(entry.path)
            if entry.is_dir():
                if not self._should_walk(entry.name):
                    continue
                if entry.name == _COMPONENTS_DIR:
                    self._scan_components(path, feature_root, feature)
                elif entry.name == _HOOKS_DIR:
                    self._scan_hooks(path, feature_root, feature)
                elif entry.name == _SERVICES_DIR:
                    self._scan_services(path, feature_root, feature)
                elif entry.name == _TYPES_DIR:
                    self._scan_types(path, feature_root, feature)
                elif entry.name in _TEST_DIRS:
                    self._scan_tests(path, feature_root, feature)
                else:
                    self._walk(path, feature_root, feature)
            elif entry.is_file():
                feature.metadata.total_files += 1
                relative_path = path.relative_to(feature_root).as_posix()
                try:
                    self._classify_loose_file(path, relative_path, feature)
                except Exception as exc:  # noqa: BLE001
                    self.logger.warning("Skipping %s: %s", path, exc)

    def _scan_components(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._find(directory, self.config.extensions.components, feature_root, feature):
            if is_test_file(entry.name):
                feature.tests.append(_test_record(entry))
                continue
            try:
                self._add_component(entry, feature)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Skipping component %s: %s", entry.full_path, exc)

    def _add_component(self, entry: FileEntry, feature: FeatureRecord) -> None:
        path = Path(entry.full_path)
        content = read_source(path)
        if content is None:
            return
        component = self.component_analyzer.analyze_source(content, path)
        if component is None:
            return
        component.relative_path = entry.relative_path
        component.ui_elements = self.detector.detect_in_source(content, component)
        self.logger.debug(
            "Component %s: %d props, %d UI elements",
            component.name,
            len(component.props),
            len(component.ui_elements),
        )
        feature.components.append(component)

    def _scan_hooks(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._find(directory, self.config.extensions.hooks, feature_root, feature):
            if is_test_file(entry.name):
                feature.tests.append(_test_record(entry))
                continue
            path = Path(entry.full_path)
            if not self.hook_analyzer.supports(path):
                self.logger.debug("Ignoring non-hook file %s", path)
                continue
            try:
                record = self.hook_analyzer.analyze(path)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Skipping hook %s: %s", path, exc)
                continue
            if record is not None:
                record.relative_path = entry.relative_path
                feature.hooks.append(record)

    def _scan_services(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._find(directory, self.config.extensions.services, feature_root, feature):
            if is_test_file(entry.name):
                feature.tests.append(_test_record(entry))
                continue
            path = Path(entry.full_path)
            try:
                record = self.service_analyzer.analyze(path)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Skipping service %s: %s", path, exc)
                continue
            if record is not None:
                record.relative_path = entry.relative_path
                feature.services.append(record)

    def _scan_types(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._find(directory, self.config.extensions.types, feature_root, feature):
            path = Path(entry.full_path)
            try:
                record = self.type_analyzer.analyze(path)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Skipping types %s: %s", path, exc)
                continue
            if record is not None:
                record.relative_path = entry.relative_path
                feature.types.append(record)

    def _scan_tests(self, directory: Path, feature_root: Path, feature: FeatureRecord) -> None:
        for entry in self._find(directory, self.config.extensions.tests, feature_root, feature):
            feature.tests.append(_test_record(entry))

    def _classify_loose_file(self, path: Path, relative_path: str, feature: FeatureRecord) -> None:
        stem = path.stem
        if stem == "index" and path.suffix in _ENTRY_POINT_EXTENSIONS:
            current = feature.entry_point
            # The shallowest index file is the feature's entry point.
            if current is None or relative_path.count("/") < current.relative_path.count("/"):
                feature.entry_point = EntryPoint(path=str(path), relative_path=relative_path)

        kind = asset_kind(path.name)
        if kind is not None:
            feature.assets.append(
                AssetRecord(name=path.name, path=str(path), relative_path=relative_path, kind=kind)
            )

        if "config" in stem or "constant" in stem:
            record = self.config_analyzer.analyze(path)
            if record is not None:
                record.relative_path = relative_path
                feature.config = record

    # Aggregation

    def _aggregate_structure(self, feature: FeatureRecord) -> None:
        thresholds = self.config.complexity
        count = len(feature.components)
        if count > thresholds.high_components:
            feature.metadata.complexity = "high"
        elif count > thresholds.medium_components:
            feature.metadata.complexity = "medium"
        else:
            feature.metadata.complexity = "low"

        patterns: List[str] = []
        if feature.hooks:
            patterns.append("Custom Hooks")
        if feature.services:
            patterns.append("Service Layer")
        if feature.types:
            patterns.append("TypeScript")
        if feature.tests:
            patterns.append("Testing")

        crud_components = [
            component
            for component in feature.components
            if any(indicator in component.name.lower() for indicator in _CRUD_INDICATORS)
        ]
        if len(crud_components) >= 2:
            patterns.append("CRUD Operations")
        feature.metadata.patterns = patterns

    def _aggregate_ui(self, feature: FeatureRecord) -> None:
        matches = [element for component in feature.components for element in component.ui_elements]
        counts = Counter(element.type for element in matches)

        ui_patterns: List[str] = []
        if counts["filter"] >= 2:
            ui_patterns.append("Data Filtering")
        if counts["table"] >= 1:
            ui_patterns.append("Data Tables")
        if counts["form"] >= 2:
            ui_patterns.append("Form Management")
        if counts["modal"] or counts["dialog"]:
            ui_patterns.append("Modal Dialogs")
        if counts["button"] >= 5:
            ui_patterns.append("Action-Heavy Interface")
        feature.metadata.ui_patterns = ui_patterns

        base_matches = [element for element in matches if not element.is_composite]
        feature.metadata.ui_elements = infer_composites(base_matches)
        feature.metadata.ui_statistics = detection_statistics(matches + feature.metadata.ui_elements)

    # Filesystem helpers

    def _should_walk(self, name: str) -> bool:
        return not name.startswith(".") and name not in self._excluded_dirs

    def _find(
        self,
        directory: Path,
        extensions: Sequence[str],
        feature_root: Path,
        feature: FeatureRecord,
    ) -> List[FileEntry]:
        entries = find_files(directory, extensions, relative_to=feature_root, excluded=self._excluded_dirs)
        feature.metadata.total_files += len(entries)
        return entries

    def _list_dir(self, directory: Path) -> List[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as iterator:
                return sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            self.logger.warning("Unable to list %s: %s", directory, exc)
            return []


def find_files(
    directory: Path,
    extensions: Sequence[str],
    *,
    relative_to: Path | None = None,
    excluded: Iterable[str] = (),
) -> List[FileEntry]:
    """Recursively collect files under ``directory`` whose name ends with one of ``extensions``."""
    base = relative_to or directory
    excluded_dirs = _EXCLUDED_DIRS | set(excluded)
    files: List[FileEntry] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(
            name for name in dirnames if not name.startswith(".") and name not in excluded_dirs
        )
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if not any(filename.endswith(extension) for extension in extensions):
                continue
            path = current_dir / filename
            files.append(
                FileEntry(
                    name=filename,
                    full_path=str(path),
                    relative_path=path.relative_to(base).as_posix(),
                    extension=path.suffix,
                )
            )
    return files


def feature_has_changes(feature_path: Path, changed_files: Iterable[str], mode: str = "substring") -> bool:
    """Return True when any changed file path refers to the feature directory."""
    normalized_feature = _normalize(str(feature_path)).rstrip("/")
    leaf = normalized_feature.rsplit("/", 1)[-1]
    for changed in changed_files:
        normalized = _normalize(changed)
        if not normalized:
            continue
        if mode == MATCH_SEGMENT:
            if leaf in normalized.split("/"):
                return True
            if normalized.startswith(f"{normalized_feature}/"):
                return True
            continue
        if leaf in normalized or normalized_feature in normalized or normalized in normalized_feature:
            return True
    return False


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def locate_features_root(project_root: Path, config: ScanConfig) -> Path:
    """Resolve the directory whose subdirectories are features."""
    if config.features_dir:
        return project_root / config.features_dir
    for candidate in _FEATURE_ROOT_CANDIDATES:
        path = project_root / candidate
        if path.is_dir():
            return path
    return project_root


def is_test_file(filename: str) -> bool:
    return any(marker in filename for marker in _TEST_MARKERS)


def classify_test(filename: str) -> str:
    if ".integration." in filename:
        return "integration"
    if ".e2e." in filename:
        return "e2e"
    return "unit"


def asset_kind(filename: str) -> str | None:
    lowered = filename.lower()
    for suffix, kind in _ASSET_KINDS:
        if lowered.endswith(suffix):
            return kind
    return None


def _test_record(entry: FileEntry) -> FeatureTestRecord:
    return FeatureTestRecord(
        name=entry.name,
        path=entry.full_path,
        relative_path=entry.relative_path,
        kind=classify_test(entry.name),
    )


__all__ = [
    "FeatureScanner",
    "asset_kind",
    "feature_has_changes",
    "find_files",
    "is_test_file",
    "locate_features_root",
    "classify_test",
]
