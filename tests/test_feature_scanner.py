"""Tests for feature discovery and aggregation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from featuredocs.analyzers.component import ComponentAnalyzer
from featuredocs.config import ComplexityConfig, ScanConfig
from featuredocs.feature_scanner import (
    FeatureScanner,
    asset_kind,
    classify_test,
    feature_has_changes,
    find_files,
    locate_features_root,
)
from featuredocs.models import ComponentRecord
from tests._fixtures.feature_builder import FeatureTreeBuilder

SIMPLE_COMPONENT = """
export default function Widget() {
  return <div />;
}
"""

ORDER_FORM = """
export default function OrderForm() {
  const handleSubmit = () => {};
  return (
    <form onSubmit={handleSubmit}>
      <input name="customer" />
    </form>
  );
}
"""

ORDER_MODAL = """
export default function OrderModal({ isOpen, onClose }: OrderModalProps) {
  return (
    <Modal isOpen={isOpen} onClose={onClose}>
      <p>Details</p>
    </Modal>
  );
}
"""


def test_missing_root_returns_empty_list(tmp_path: Path) -> None:
    assert FeatureScanner().scan_features(tmp_path / "missing") == []


def test_root_without_subdirectories_returns_empty_list(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write({"README.md": "# features\n"})

    assert feature_builder.scan() == []


def test_feature_level_modal_form_composite(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderForm.tsx": ORDER_FORM,
            "orders/components/OrderModal.tsx": ORDER_MODAL,
        }
    )

    (feature,) = feature_builder.scan()

    component_types = {
        component.name: {element.type for element in component.ui_elements}
        for component in feature.components
    }
    assert "form" in component_types["OrderForm"]
    assert "modal" not in component_types["OrderForm"]
    assert "modal" in component_types["OrderModal"]
    assert "modal-form" not in component_types["OrderForm"] | component_types["OrderModal"]

    composite = next(element for element in feature.metadata.ui_elements if element.type == "modal-form")
    assert composite.confidence_level == "high"
    assert "Modal Dialogs" in feature.metadata.ui_patterns
    assert "modal-form" in feature.metadata.ui_statistics["patterns"]


def test_component_records_carry_relative_paths(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write({"orders/components/list/OrderList.tsx": SIMPLE_COMPONENT})

    (feature,) = feature_builder.scan()

    assert feature.components[0].relative_path == "components/list/OrderList.tsx"
    assert feature.metadata.total_files == 1


def test_architecture_patterns_and_routing(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/CreateOrder.tsx": SIMPLE_COMPONENT,
            "orders/components/EditOrder.tsx": SIMPLE_COMPONENT,
            "orders/components/EditOrder.test.tsx": "it('renders', () => {});\n",
            "orders/hooks/useOrders.ts": "export function useOrders() { return { orders: [] }; }\n",
            "orders/hooks/helpers.ts": "export const noop = () => {};\n",
            "orders/services/orderService.ts": "export async function fetchOrders() {}\n",
            "orders/types/order.ts": "export interface Order { id: string }\n",
            "orders/__tests__/orders.e2e.spec.ts": "test('flow', () => {});\n",
        }
    )

    (feature,) = feature_builder.scan()

    assert sorted(component.name for component in feature.components) == ["CreateOrder", "EditOrder"]
    assert [hook.name for hook in feature.hooks] == ["useOrders"]
    assert [service.name for service in feature.services] == ["orderService"]
    assert [record.name for record in feature.types] == ["order"]
    assert sorted((test.name, test.kind) for test in feature.tests) == [
        ("EditOrder.test.tsx", "unit"),
        ("orders.e2e.spec.ts", "e2e"),
    ]
    assert feature.metadata.patterns == [
        "Custom Hooks",
        "Service Layer",
        "TypeScript",
        "Testing",
        "CRUD Operations",
    ]


def test_loose_files_are_classified(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
            "orders/index.ts": "export * from './components/OrderList';\n",
            "orders/pages/index.tsx": "export default function Page() { return null; }\n",
            "orders/logo.svg": "<svg />\n",
            "orders/styles/orders.module.css": ".orders {}\n",
            "orders/order.constants.ts": "export const PAGE_SIZE = 20;\n",
        }
    )

    (feature,) = feature_builder.scan()

    assert feature.entry_point is not None
    assert feature.entry_point.relative_path == "index.ts"
    assert sorted((asset.name, asset.kind) for asset in feature.assets) == [
        ("logo.svg", "icon"),
        ("orders.module.css", "styles"),
    ]
    assert feature.config is not None
    assert feature.config.name == "order.constants"
    assert feature.config.relative_path == "order.constants.ts"
    assert [constant.name for constant in feature.config.constants] == ["PAGE_SIZE"]


def test_config_file_detection_uses_raw_base_name(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
            "orders/feature.config.json": '{ "pageSize": 20 }\n',
        }
    )
    (feature,) = feature_builder.scan()

    assert feature.config is not None
    assert feature.config.relative_path == "feature.config.json"

    feature_builder.path("orders/feature.config.json").unlink()
    feature_builder.write({"orders/AppConfig.ts": "export const PAGE_SIZE = 20;\n"})
    (feature,) = feature_builder.scan()

    assert feature.config is None


@pytest.mark.parametrize(
    "snippet, tag, threshold",
    [
        ("<ul>{items.filter(Boolean)}</ul>", "Data Filtering", 2),
        ("<table />", "Data Tables", 1),
        ("<form />", "Form Management", 2),
        ("<button />", "Action-Heavy Interface", 5),
    ],
)
def test_ui_pattern_tags_follow_element_counts(
    feature_builder: FeatureTreeBuilder, snippet: str, tag: str, threshold: int
) -> None:
    component = f"export default function Widget() {{\n  return {snippet};\n}}\n"
    files = {"below/components/Plain.tsx": SIMPLE_COMPONENT}
    for index in range(threshold - 1):
        files[f"below/components/Widget{index}.tsx"] = component
    for index in range(threshold):
        files[f"at/components/Widget{index}.tsx"] = component
    feature_builder.write(files)

    features = {feature.name: feature for feature in feature_builder.scan()}

    assert tag not in features["below"].metadata.ui_patterns
    assert tag in features["at"].metadata.ui_patterns


def test_complexity_uses_configured_thresholds(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/A.tsx": SIMPLE_COMPONENT,
            "orders/components/B.tsx": SIMPLE_COMPONENT,
            "orders/components/C.tsx": SIMPLE_COMPONENT,
        }
    )
    config = ScanConfig(
        root=feature_builder.path(),
        complexity=ComplexityConfig(high_components=2, medium_components=1),
    )

    (feature,) = feature_builder.scan(config=config)
    (default_feature,) = feature_builder.scan()

    assert feature.metadata.complexity == "high"
    assert default_feature.metadata.complexity == "low"


def test_features_without_components_are_dropped_by_default(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
            "settings/hooks/useSettings.ts": "export function useSettings() {}\n",
        }
    )

    names = [feature.name for feature in feature_builder.scan()]
    config = ScanConfig(root=feature_builder.path(), include_empty_features=True)
    all_names = [feature.name for feature in feature_builder.scan(config=config)]

    assert names == ["orders"]
    assert all_names == ["orders", "settings"]


def test_features_are_sorted_case_insensitively(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            f"{name}/components/Widget.tsx": SIMPLE_COMPONENT
            for name in ("gamma", "Alpha", "beta")
        }
    )

    assert [feature.name for feature in feature_builder.scan()] == ["Alpha", "beta", "gamma"]


def test_changed_files_limit_scanned_features(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
            "billing/components/Invoice.tsx": SIMPLE_COMPONENT,
        }
    )

    features = feature_builder.scan(["src/features/orders/components/OrderList.tsx"])

    assert [feature.name for feature in features] == ["orders"]
    assert feature_builder.scan([]) == []


def test_segment_matching_is_stricter_than_substring(tmp_path: Path) -> None:
    changed = ["src/features/orders/components/OrderList.tsx"]
    order = tmp_path / "features" / "order"
    orders = tmp_path / "features" / "orders"

    assert feature_has_changes(order, changed, "substring") is True
    assert feature_has_changes(order, changed, "segment") is False
    assert feature_has_changes(orders, changed, "segment") is True
    assert feature_has_changes(orders, [str(orders / "x.tsx")], "segment") is True


def test_hidden_and_excluded_directories_are_skipped(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write(
        {
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
            "orders/components/.cache/Stale.tsx": SIMPLE_COMPONENT,
            "orders/components/node_modules/Lib.tsx": SIMPLE_COMPONENT,
            "orders/components/generated/Gen.tsx": SIMPLE_COMPONENT,
            ".hidden/components/Secret.tsx": SIMPLE_COMPONENT,
        }
    )
    config = ScanConfig(root=feature_builder.path(), exclude_dirs=["generated"])

    features = feature_builder.scan(config=config)

    assert [feature.name for feature in features] == ["orders"]
    assert [component.name for component in features[0].components] == ["OrderList"]


def test_unreadable_component_is_skipped(feature_builder: FeatureTreeBuilder) -> None:
    feature_builder.write({"orders/components/OrderList.tsx": SIMPLE_COMPONENT})
    broken = feature_builder.path("orders/components/Broken.tsx")
    broken.write_bytes(b"\xff\xfe\x00invalid")

    (feature,) = feature_builder.scan()

    assert [component.name for component in feature.components] == ["OrderList"]


class _ExplodingAnalyzer(ComponentAnalyzer):
    def analyze_source(self, content: str, path: Path) -> Optional[ComponentRecord]:
        if path.name == "Broken.tsx":
            raise RuntimeError("boom")
        return super().analyze_source(content, path)


def test_extraction_failure_is_logged_and_skipped(
    feature_builder: FeatureTreeBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    feature_builder.write(
        {
            "orders/components/Broken.tsx": SIMPLE_COMPONENT,
            "orders/components/OrderList.tsx": SIMPLE_COMPONENT,
        }
    )
    scanner = FeatureScanner(
        ScanConfig(root=feature_builder.path()), component_analyzer=_ExplodingAnalyzer()
    )

    with caplog.at_level("WARNING", logger="featuredocs"):
        (feature,) = scanner.scan_features(feature_builder.path())

    assert [component.name for component in feature.components] == ["OrderList"]
    assert any("Broken.tsx" in record.getMessage() for record in caplog.records)


def test_find_files_matches_suffixes(tmp_path: Path) -> None:
    (tmp_path / "nested").mkdir()
    (tmp_path / "A.tsx").write_text("", encoding="utf-8")
    (tmp_path / "nested" / "b.d.ts").write_text("", encoding="utf-8")
    (tmp_path / "notes.md").write_text("", encoding="utf-8")

    entries = find_files(tmp_path, [".tsx", ".d.ts"])

    assert [(entry.name, entry.relative_path, entry.extension) for entry in entries] == [
        ("A.tsx", "A.tsx", ".tsx"),
        ("b.d.ts", "nested/b.d.ts", ".ts"),
    ]


def test_locate_features_root_prefers_configured_directory(tmp_path: Path) -> None:
    (tmp_path / "src" / "features").mkdir(parents=True)
    config = ScanConfig(root=tmp_path)

    assert locate_features_root(tmp_path, config) == tmp_path / "src" / "features"

    config.features_dir = "app/modules"
    assert locate_features_root(tmp_path, config) == tmp_path / "app" / "modules"

    assert locate_features_root(tmp_path / "src", ScanConfig(root=tmp_path)) == tmp_path / "src"


@pytest.mark.parametrize(
    "filename, kind",
    [
        ("Orders.test.tsx", "unit"),
        ("Orders.integration.test.ts", "integration"),
        ("checkout.e2e.spec.ts", "e2e"),
    ],
)
def test_classify_test(filename: str, kind: str) -> None:
    assert classify_test(filename) == kind


@pytest.mark.parametrize(
    "filename, kind",
    [("logo.png", "image"), ("icon.svg", "icon"), ("theme.scss", "styles"), ("data.json", None)],
)
def test_asset_kind(filename: str, kind: Optional[str]) -> None:
    assert asset_kind(filename) == kind
