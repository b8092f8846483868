"""Weighted-evidence classification of UI elements inside component sources.

Every element kind in :data:`ELEMENT_KINDS` is scored independently::

    score = 2 * pattern matches + 1 * keyword matches + 3 * corroborating props

Kinds scoring above zero are reported with a confidence level, kind-specific
details and the file's contextual clues. Composite patterns (for example a
filterable table) are inferred from the co-occurring kinds, and the final
list is deduplicated on ``(type, details)``.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .base import read_source
from ..models import ComponentRecord, UIElementMatch

PATTERN_WEIGHT = 2
KEYWORD_WEIGHT = 1
PROP_WEIGHT = 3

# Instances kept per pattern while gathering evidence, and per reported match.
_INSTANCES_PER_PATTERN = 3
_INSTANCES_REPORTED = 2


@dataclass(frozen=True)
class ElementKind:
    """Evidence definition for one UI element kind."""

    patterns: Tuple["re.Pattern[str]", ...]
    keywords: Tuple[str, ...]
    props: Tuple[str, ...]


def _kind(patterns: Sequence[str], keywords: Sequence[str], props: Sequence[str], *, flags: int = re.IGNORECASE) -> ElementKind:
    return ElementKind(
        patterns=tuple(re.compile(pattern, flags) for pattern in patterns),
        keywords=tuple(keywords),
        props=tuple(props),
    )


# Patterns match case-insensitively, so a tag like <button> also hits <Button[^>]*>.
ELEMENT_KINDS: Mapping[str, ElementKind] = MappingProxyType(
    {
        "filter": ElementKind(
            patterns=(
                re.compile(r"input.*type=['\"](text|search)['\"]", re.IGNORECASE),
                re.compile(r"input.*placeholder.*filter", re.IGNORECASE),
                re.compile(r"select.*filter", re.IGNORECASE),
                re.compile(r"<Filter[A-Z]\w*", re.IGNORECASE),
                re.compile(r"SearchInput|FilterInput|FilterSelect", re.IGNORECASE),
                re.compile(r"\.filter\s*\("),
            ),
            keywords=("filter", "search", "query", "term"),
            props=("onFilter", "filterValue", "searchTerm"),
        ),
        "button": _kind(
            (r"<button[^>]*>", r"<Button[^>]*>", r"type=['\"](submit|button)['\"]", r"onClick\s*="),
            ("submit", "cancel", "save", "delete", "create", "edit"),
            ("onClick", "onSubmit", "disabled", "loading"),
        ),
        "modal": _kind(
            (r"<Modal[^>]*>", r"<Dialog[^>]*>", r"<Drawer[^>]*>", r"isOpen|open.*modal", r"showModal|hideModal"),
            ("modal", "dialog", "drawer", "popup"),
            ("isOpen", "onClose", "onOpen", "show", "visible"),
        ),
        "form": _kind(
            (r"<form[^>]*>", r"<Form[^>]*>", r"onSubmit\s*=", r"useForm|useFormik", r"Formik|Form\.Item"),
            ("form", "input", "validation"),
            ("onSubmit", "validation", "initialValues", "errors"),
        ),
        "table": _kind(
            (
                r"<table[^>]*>",
                r"<Table[^>]*>",
                r"<DataGrid[^>]*>",
                r"columns\s*=\s*\[",
                r"\.map.*<tr>",
                r"TableRow|TableCell",
            ),
            ("table", "grid", "rows", "columns", "data"),
            ("columns", "data", "rows", "onSort", "pagination"),
        ),
        "input": _kind(
            (r"<input[^>]*>", r"<Input[^>]*>", r"<TextField[^>]*>", r"type=['\"](text|email|password|number)['\"]"),
            ("input", "field", "value"),
            ("value", "onChange", "placeholder", "required"),
        ),
        "select": _kind(
            (r"<select[^>]*>", r"<Select[^>]*>", r"<Dropdown[^>]*>", r"options\s*=\s*\["),
            ("select", "dropdown", "option"),
            ("options", "value", "onChange", "placeholder"),
        ),
        "card": _kind(
            (r"<Card[^>]*>", r"<div.*card", r"className.*card"),
            ("card", "panel"),
            ("title", "content", "actions"),
        ),
        "navigation": _kind(
            (r"<nav[^>]*>", r"<Navigation[^>]*>", r"<Menu[^>]*>", r"<Link[^>]*>", r"useNavigate|useRouter"),
            ("nav", "menu", "link", "route"),
            ("to", "href", "active"),
        ),
        "loading": _kind(
            (r"<Spinner[^>]*>", r"<Loading[^>]*>", r"isLoading|loading", r"CircularProgress|LinearProgress"),
            ("loading", "spinner", "progress"),
            ("loading", "isLoading", "progress"),
        ),
        "alert": _kind(
            (r"<Alert[^>]*>", r"<Notification[^>]*>", r"<Toast[^>]*>", r"alert\(|notification"),
            ("alert", "notification", "toast", "message"),
            ("message", "type", "severity", "onClose"),
        ),
    }
)

_ECOSYSTEM_CLUES = (
    ("react-hook-form", "react-hook-form"),
    ("formik", "formik"),
    ("antd", "ant-design"),
    ("@mui/material", "material-ui"),
    ("react-table", "react-table"),
)

_COMPOSITES = (
    ("filterable-table", ("filter", "table"), "high", "Table with filtering controls"),
    ("modal-form", ("form", "modal"), "high", "Form rendered inside a modal"),
    ("action-table", ("button", "table"), "medium", "Table with row action buttons"),
)
_CRUD_KINDS = ("form", "table", "button", "modal")
_CRUD_MINIMUM = 3

_SEARCH_PLACEHOLDER = re.compile(r"placeholder=['\"]([^'\"]*search[^'\"]*)['\"]", re.IGNORECASE)
_ON_CLICK_HANDLER = re.compile(r"onClick\s*=\s*\{([^}]+)\}")
_INPUT_NAME = re.compile(r"<input[^>]*name=['\"]([^'\"]+)['\"][^>]*>", re.IGNORECASE)
_COLUMNS_BLOCK = re.compile(r"columns\s*=\s*\[(.*?)\]", re.DOTALL)
_QUOTED = re.compile(r"['\"]([^'\"]+)['\"]")
_MODAL_TRIGGER = re.compile(r"onClick\s*=\s*\{[^}]*(?:open|show|setShow|setOpen)[^}]*\}", re.IGNORECASE)
_VALIDATION_KEYWORDS = ("required", "validate", "error", "yup", "joi", "zod")


class UIElementDetector:
    """Classifies the UI elements a component renders."""

    def __init__(self, element_kinds: Mapping[str, ElementKind] = ELEMENT_KINDS) -> None:
        self._element_kinds = element_kinds

    def detect_elements(self, path: Path | str, component: Optional[ComponentRecord]) -> List[UIElementMatch]:
        """Read ``path`` and classify it; unreadable files yield no elements."""
        content = read_source(Path(path))
        if content is None:
            return []
        return self.detect_in_source(content, component)

    def detect_in_source(self, content: str, component: Optional[ComponentRecord] = None) -> List[UIElementMatch]:
        prop_names = {prop.name for prop in component.props} if component is not None else set()
        clues = contextual_clues(content)

        elements: List[UIElementMatch] = []
        for element_type, kind in self._element_kinds.items():
            match = _score_kind(content, element_type, kind, prop_names, clues)
            if match is not None:
                elements.append(match)

        elements.extend(infer_composites(elements))
        return deduplicate_matches(elements)


def _score_kind(
    content: str,
    element_type: str,
    kind: ElementKind,
    prop_names: Iterable[str],
    clues: List[str],
) -> Optional[UIElementMatch]:
    pattern_matches = 0
    instances: List[str] = []
    for pattern in kind.patterns:
        found = [match.group(0) for match in pattern.finditer(content)]
        pattern_matches += len(found)
        instances.extend(found[:_INSTANCES_PER_PATTERN])

    keyword_matches = 0
    for keyword in kind.keywords:
        keyword_matches += len(re.findall(rf"\b{re.escape(keyword)}\b", content, re.IGNORECASE))

    declared = set(prop_names)
    corroborating = sum(1 for prop in kind.props if prop in declared)

    score = PATTERN_WEIGHT * pattern_matches + KEYWORD_WEIGHT * keyword_matches + PROP_WEIGHT * corroborating
    if score <= 0:
        return None

    return UIElementMatch(
        type=element_type,
        confidence_level=confidence_level(score),
        confidence_score=score,
        instances=instances[:_INSTANCES_REPORTED],
        details=element_details(content, element_type, instances),
        metadata={"pattern_matches": pattern_matches, "contextual_clues": list(clues)},
    )


def confidence_level(score: int) -> str:
    if score >= 10:
        return "high"
    if score >= 5:
        return "medium"
    if score >= 2:
        return "low"
    return "very-low"


def element_details(content: str, element_type: str, instances: Sequence[str]) -> Dict[str, Any]:
    """Return the structural details extracted for one element kind."""
    if element_type == "filter":
        return {
            "filter_types": _filter_types(content),
            "search_fields": _SEARCH_PLACEHOLDER.findall(content),
        }
    if element_type == "button":
        return {
            "button_types": _button_types(instances),
            "actions": _button_actions(content),
        }
    if element_type == "table":
        return {
            "columns": _table_columns(content),
            "features": _table_features(content),
        }
    if element_type == "modal":
        return {
            "triggers": [match.group(0) for match in _MODAL_TRIGGER.finditer(content)][:2],
            "size": _modal_size(content),
        }
    details: Dict[str, Any] = {"general": _general_details(content)}
    if element_type == "form":
        details["fields"] = _INPUT_NAME.findall(content)
        lowered = content.lower()
        details["validation"] = any(keyword in lowered for keyword in _VALIDATION_KEYWORDS)
    return details


def _filter_types(content: str) -> List[str]:
    types: List[str] = []
    if 'type="search"' in content or "SearchInput" in content:
        types.append("search")
    if 'type="date"' in content or "DatePicker" in content:
        types.append("date")
    if "<select" in content or "Select" in content:
        types.append("select")
    if "checkbox" in content or "Checkbox" in content:
        types.append("checkbox")
    return types


def _button_types(instances: Sequence[str]) -> List[str]:
    types: List[str] = []
    for instance in instances:
        lowered = instance.lower()
        for verb in ("submit", "delete", "save", "cancel"):
            if verb in lowered:
                kind = verb
                break
        else:
            kind = "action"
        if kind not in types:
            types.append(kind)
    return types


def _button_actions(content: str) -> List[str]:
    actions = [match.group(1).strip() for match in _ON_CLICK_HANDLER.finditer(content)]
    return [action for action in actions if len(action) < 50][:3]


def _table_columns(content: str) -> List[str]:
    block = _COLUMNS_BLOCK.search(content)
    if not block:
        return []
    columns: List[str] = []
    for value in _QUOTED.findall(block.group(1)):
        cleaned = value.strip()
        if cleaned and cleaned not in columns:
            columns.append(cleaned)
    return columns[:5]


def _table_features(content: str) -> List[str]:
    features: List[str] = []
    for needle, feature in (
        ("sort", "sorting"),
        ("pagination", "pagination"),
        ("filter", "filtering"),
        ("selection", "selection"),
    ):
        if needle in content or needle.capitalize() in content:
            features.append(feature)
    return features


def _modal_size(content: str) -> str:
    if "large" in content:
        return "large"
    if "small" in content:
        return "small"
    if "fullscreen" in content or "Fullscreen" in content:
        return "fullscreen"
    return "medium"


def _general_details(content: str) -> Dict[str, bool]:
    return {
        "has_props": "{...props}" in content,
        "has_children": "children" in content,
        "has_class_name": "className" in content,
    }


def contextual_clues(content: str) -> List[str]:
    """Ecosystem and behavioural fingerprints present in ``content``."""
    clues = [label for needle, label in _ECOSYSTEM_CLUES if needle in content]
    if "useState" in content:
        clues.append("state-management")
    if "useEffect" in content:
        clues.append("side-effects")
    if "async" in content or "await" in content:
        clues.append("async-operations")
    return clues


def infer_composites(elements: Sequence[UIElementMatch]) -> List[UIElementMatch]:
    """Infer composite patterns from the base element kinds present."""
    present: List[str] = []
    for element in elements:
        if not element.is_composite and element.type not in present:
            present.append(element.type)

    composites: List[UIElementMatch] = []
    for composite_type, required, level, description in _COMPOSITES:
        if all(kind in present for kind in required):
            composites.append(
                UIElementMatch(
                    type=composite_type,
                    confidence_level=level,
                    composed_of=list(required),
                    description=description,
                )
            )

    crud_kinds = [kind for kind in present if kind in _CRUD_KINDS]
    if len(crud_kinds) >= _CRUD_MINIMUM:
        composites.append(
            UIElementMatch(
                type="crud-interface",
                confidence_level="medium",
                composed_of=crud_kinds,
                description="Complete create/read/update/delete interface",
            )
        )
    return composites


def deduplicate_matches(elements: Iterable[UIElementMatch]) -> List[UIElementMatch]:
    """Keep the first match for each ``(type, details)`` pair."""
    seen: set[Tuple[str, str]] = set()
    unique: List[UIElementMatch] = []
    for element in elements:
        key = (element.type, json.dumps(element.details, sort_keys=True))
        if key in seen:
            continue
        seen.add(key)
        unique.append(element)
    return unique


def detection_statistics(elements: Sequence[UIElementMatch]) -> Dict[str, Any]:
    """Summarise a match list by type, confidence level and composite patterns."""
    patterns: List[str] = []
    for element in elements:
        if element.is_composite and element.type not in patterns:
            patterns.append(element.type)
    return {
        "total": len(elements),
        "by_type": dict(Counter(element.type for element in elements)),
        "by_confidence": dict(Counter(element.confidence_level for element in elements)),
        "patterns": patterns,
    }


__all__ = [
    "ELEMENT_KINDS",
    "ElementKind",
    "UIElementDetector",
    "confidence_level",
    "contextual_clues",
    "deduplicate_matches",
    "detection_statistics",
    "element_details",
    "infer_composites",
]
