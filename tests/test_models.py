"""Serialization tests for featuredocs.models."""

from __future__ import annotations

import json

from featuredocs.models import (
    ComponentRecord,
    CustomHookRecord,
    FeatureMetadata,
    FeatureRecord,
    UIElementMatch,
)


def test_base_match_omits_composite_fields() -> None:
    match = UIElementMatch(type="table", confidence_level="medium", confidence_score=6)

    payload = match.to_dict()

    assert payload["confidence_score"] == 6
    assert "composed_of" not in payload
    assert "description" not in payload
    assert match.is_composite is False


def test_composite_match_omits_score() -> None:
    match = UIElementMatch(
        type="action-table",
        confidence_level="medium",
        composed_of=["button", "table"],
        description="Table with row action buttons",
    )

    payload = match.to_dict()

    assert "confidence_score" not in payload
    assert payload["composed_of"] == ["button", "table"]
    assert match.is_composite is True


def test_component_to_dict_keeps_only_applicable_react_fields() -> None:
    functional = ComponentRecord(
        name="Panel",
        kind="react",
        component_type="functional",
        filename="Panel.tsx",
        file_path="/features/panel/components/Panel.tsx",
        custom_hooks=[CustomHookRecord(name="usePanel", kind="custom-hook")],
    )
    legacy = ComponentRecord(
        name="Legacy",
        kind="react",
        component_type="class",
        filename="Legacy.jsx",
        file_path="/features/panel/components/Legacy.jsx",
        lifecycle=["componentDidMount"],
    )

    functional_payload = functional.to_dict()
    legacy_payload = legacy.to_dict()

    assert "lifecycle" not in functional_payload
    assert functional_payload["custom_hooks"] == [{"name": "usePanel", "kind": "custom-hook"}]
    assert "custom_hooks" not in legacy_payload
    assert legacy_payload["lifecycle"] == ["componentDidMount"]


def test_feature_record_is_json_serializable() -> None:
    component = ComponentRecord(
        name="Panel",
        kind="react",
        component_type="functional",
        filename="Panel.tsx",
        file_path="Panel.tsx",
        custom_hooks=[],
        ui_elements=[UIElementMatch(type="card", confidence_level="low", confidence_score=2)],
    )
    feature = FeatureRecord(
        name="panel",
        path="/features/panel",
        components=[component],
        metadata=FeatureMetadata(
            total_files=1,
            ui_elements=[
                UIElementMatch(
                    type="modal-form",
                    confidence_level="high",
                    composed_of=["form", "modal"],
                    description="Form rendered inside a modal",
                )
            ],
        ),
    )

    payload = json.loads(json.dumps(feature.to_dict()))

    for key in ("components", "hooks", "services", "types", "assets", "tests"):
        assert isinstance(payload[key], list)
    assert payload["entry_point"] is None
    assert payload["components"][0]["ui_elements"][0]["confidence_score"] == 2
    assert "composed_of" not in payload["components"][0]["ui_elements"][0]
    assert "confidence_score" not in payload["metadata"]["ui_elements"][0]
