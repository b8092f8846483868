"""Structural extraction for React and Vue component files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from .base import SourceAnalyzer
from .toolkit import (
    BUILT_IN_HOOKS,
    blank_comments,
    block_after,
    complexity_level,
    complexity_score,
    describe_member,
    extract_comments,
    extract_exports,
    extract_hooks,
    extract_imports,
    extract_methods,
    has_named_export,
    line_of,
    parse_type_members,
    split_members,
    top_level_keys,
)
from ..models import ComponentRecord, CustomHookRecord, JSXShape, MethodRecord, PropRecord

COMPONENT_EXTENSIONS = (".tsx", ".jsx", ".vue", ".ts", ".js")

REACT_LIFECYCLE_METHODS = (
    "componentDidMount",
    "componentDidUpdate",
    "componentWillUnmount",
    "shouldComponentUpdate",
    "getSnapshotBeforeUpdate",
    "componentDidCatch",
    "getDerivedStateFromProps",
    "getDerivedStateFromError",
)

VUE_LIFECYCLE_HOOKS = (
    "created",
    "mounted",
    "updated",
    "destroyed",
    "beforeCreate",
    "beforeMount",
    "beforeUpdate",
    "beforeDestroy",
)

# Calls to these never count as custom hooks.
NATIVE_HOOKS = BUILT_IN_HOOKS[:10]

_NAME_PATTERNS = (
    re.compile(r"(?:export\s+default\s+(?:async\s+)?(?:function\s+|class\s+)?|const\s+)([A-Za-z_$][\w$]*)"),
    re.compile(r"function\s+(\w+)\s*\("),
    re.compile(r"class\s+(\w+)\s+extends"),
    re.compile(r"name:\s*['\"`](\w+)['\"`]"),
)
_RESERVED_NAMES = {"Component", "function", "class", "async"}

_CLASS_TOKEN = re.compile(r"\bComponent\b")

_PROPS_BLOCKS = (
    re.compile(r"\binterface\s+\w*Props(?:\s*<[^>{]*>)?(?:\s+extends\s+[^{]+)?\s*\{"),
    re.compile(r"\btype\s+\w*Props(?:\s*<[^>=]*>)?\s*=\s*\{"),
)
_DESTRUCTURED_PROPS = (
    re.compile(r"\{([^{}]+)\}\s*=\s*props\b"),
    re.compile(r"function\s+\w+\s*\(\s*\{([^{}]+)\}\s*:\s*\w*Props"),
    re.compile(r"const\s+\w+\s*=\s*\(\s*\{([^{}]+)\}\s*:\s*\w*Props"),
    re.compile(r"\(\s*\{([^{}]+)\}\s*:\s*\w*Props\s*\)\s*=>"),
    re.compile(r"const\s+\w+\s*:\s*(?:React\.)?FC<\w*Props>\s*=\s*\(\s*\{([^{}]+)\}"),
)

_CONST_HOOK = re.compile(r"const\s+(\w*use\w*)\s*=\s*\(")
_HOOK_CALL_SITE = re.compile(r"\b(use[A-Z]\w*)\s*\(")
_JSX_RETURN = re.compile(r"return\s*\(?\s*<([^>]+)>")

_VUE_TEMPLATE = re.compile(r"<template[^>]*>(.*?)</template>", re.DOTALL)
_VUE_SCRIPT = re.compile(r"<script[^>]*>(.*?)</script>", re.DOTALL)
_VUE_STYLE = re.compile(r"<style[^>]*>(.*?)</style>", re.DOTALL)
_VUE_SCRIPT_SETUP = re.compile(r"<script\b[^>]*\bsetup\b[^>]*>")

_VUE_PROPS_ARRAY = re.compile(r"(?:\bprops\s*:|\bdefineProps\s*\()\s*\[([^\]]*)\]")
_VUE_PROPS_OBJECT = re.compile(r"(?:\bprops\s*:|\bdefineProps\s*\()\s*\{")
_VUE_PROPS_TYPED = re.compile(r"\bdefineProps\s*<\s*\{")
_VUE_PROPS_NAMED_TYPE = re.compile(r"\bdefineProps\s*<\s*(\w+)\s*>")
_VUE_DATA_FUNCTION = re.compile(r"\bdata\s*(?:\(\s*\)|:\s*function\s*\(\s*\))\s*\{")
_VUE_DATA_ARROW = re.compile(r"\bdata\s*:\s*\(\s*\)\s*=>\s*\(\s*\{")
_VUE_RETURN_OBJECT = re.compile(r"return\s*\{")
_VUE_METHODS = re.compile(r"\bmethods\s*:\s*\{")
_VUE_COMPUTED = re.compile(r"\bcomputed\s*:\s*\{")
_VUE_WATCH = re.compile(r"\bwatch\s*:\s*\{")
_VUE_OBJECT_METHOD = re.compile(r"(async\s+)?([A-Za-z_$][\w$]*)\s*(?:\(|:\s*(async\s+)?(?:function\b|\())")
_VUE_PROP_ENTRY = re.compile(r"['\"]?([A-Za-z_$][\w$-]*)['\"]?\s*:\s*(.+)", re.DOTALL)
_VUE_PROP_TYPE = re.compile(r"\btype\s*:\s*(\[[^\]]*\]|[\w.]+)")
_VUE_PROP_REQUIRED = re.compile(r"\brequired\s*:\s*true\b")
_VUE_SETUP_STATE = re.compile(r"const\s+(\w+)\s*=\s*(?:ref|reactive|shallowRef)\s*[<(]")
_VUE_SETUP_COMPUTED = re.compile(r"const\s+(\w+)\s*=\s*computed\s*[<(]")
_VUE_SETUP_WATCH = re.compile(r"\bwatch(?:Effect)?\s*\(\s*\(?\s*\)?\s*(?:=>\s*)?([\w.]+)")


class ComponentAnalyzer(SourceAnalyzer[ComponentRecord]):
    """Turns one React or Vue component file into a ComponentRecord."""

    extensions = COMPONENT_EXTENSIONS

    def analyze_source(self, content: str, path: Path) -> Optional[ComponentRecord]:
        if path.suffix == ".vue":
            return self._analyze_vue(content, path)
        return self._analyze_react(content, path)

    def _analyze_react(self, content: str, path: Path) -> ComponentRecord:
        score = complexity_score(content)
        record = ComponentRecord(
            name=resolve_component_name(path.name, content),
            kind="react",
            component_type="unknown",
            filename=path.name,
            file_path=str(path),
            props=extract_props(content),
            hooks=extract_hooks(content),
            methods=extract_methods(content),
            imports=extract_imports(content),
            exports=extract_exports(content),
            comments=extract_comments(content),
            jsx_shape=extract_jsx_shape(content),
            complexity=complexity_level(score),
            metadata={
                "is_default_export": "export default" in content,
                "is_named_export": has_named_export(content),
                "has_tests": has_tests(path),
                "size": len(content),
                "lines": len(content.split("\n")),
                "complexity_score": score,
            },
        )

        if _CLASS_TOKEN.search(content):
            record.component_type = "class"
            record.lifecycle = extract_lifecycle_methods(content)
        elif "function" in content or "=>" in content:
            record.component_type = "functional"
            record.custom_hooks = extract_custom_hooks(content)
        return record

    def _analyze_vue(self, content: str, path: Path) -> ComponentRecord:
        script = _first_group(_VUE_SCRIPT, content)
        script_source = script or ""
        composition = "setup()" in content or _VUE_SCRIPT_SETUP.search(content) is not None
        score = complexity_score(content)
        return ComponentRecord(
            name=resolve_component_name(path.name, content),
            kind="vue",
            component_type="composition" if composition else "options",
            filename=path.name,
            file_path=str(path),
            props=extract_vue_props(script_source),
            methods=extract_vue_methods(script_source, composition),
            imports=extract_imports(script_source),
            exports=extract_exports(script_source),
            comments=extract_comments(script_source),
            complexity=complexity_level(score),
            lifecycle=[hook for hook in VUE_LIFECYCLE_HOOKS if f"{hook}(" in content],
            data=extract_vue_data(script_source),
            computed=extract_vue_computed(script_source),
            watchers=extract_vue_watchers(script_source),
            template=_first_group(_VUE_TEMPLATE, content),
            script=script,
            style=_first_group(_VUE_STYLE, content),
            metadata={
                "version": detect_vue_version(content),
                "composition": composition,
                "has_tests": has_tests(path),
                "size": len(content),
                "lines": len(content.split("\n")),
                "complexity_score": score,
            },
        )


def resolve_component_name(filename: str, content: str) -> str:
    """File stem unless it is ``index``; then the first declared name."""
    base_name = Path(filename).stem
    if base_name != "index":
        return base_name
    for pattern in _NAME_PATTERNS:
        match = pattern.search(content)
        if match and match.group(1) not in _RESERVED_NAMES:
            return match.group(1)
    return base_name


def extract_props(content: str) -> List[PropRecord]:
    """Merge interface-declared props with destructured ones.

    Interface members win on a name collision.
    """
    props: List[PropRecord] = []
    names: set[str] = set()
    for pattern in _PROPS_BLOCKS:
        for match in pattern.finditer(content):
            block = block_after(content, match)
            if block is None:
                continue
            for prop in parse_type_members(content, block[0], block[1]):
                if prop.name not in names:
                    names.add(prop.name)
                    props.append(prop)

    for pattern in _DESTRUCTURED_PROPS:
        match = pattern.search(content)
        if not match:
            continue
        for name in _destructured_names(match.group(1)):
            if name not in names:
                names.add(name)
                props.append(PropRecord(name=name, type="unknown", optional=False, description=""))
    return props


def _destructured_names(fragment: str) -> List[str]:
    names: List[str] = []
    for item in fragment.split(","):
        name = item.split("=")[0].split(":")[0].strip()
        if re.fullmatch(r"\w+", name):
            names.append(name)
    return names


def extract_lifecycle_methods(content: str) -> List[str]:
    return [
        method
        for method in REACT_LIFECYCLE_METHODS
        if re.search(rf"{method}\s*\([^)]*\)\s*\{{", content)
    ]


def extract_custom_hooks(content: str) -> List[CustomHookRecord]:
    """Hooks defined in the file, then custom hooks called in it."""
    defined: List[CustomHookRecord] = []
    for match in _CONST_HOOK.finditer(content):
        name = match.group(1)
        if not name.startswith("use") or name in ("useState", "useEffect"):
            continue
        if all(hook.name != name for hook in defined):
            defined.append(CustomHookRecord(name=name, kind="custom-hook"))

    called: List[CustomHookRecord] = []
    for match in _HOOK_CALL_SITE.finditer(content):
        name = match.group(1)
        if name in NATIVE_HOOKS:
            continue
        if all(hook.name != name for hook in called):
            called.append(CustomHookRecord(name=name, kind="custom-hook-call"))
    return defined + called


def extract_jsx_shape(content: str) -> Optional[JSXShape]:
    match = _JSX_RETURN.search(content)
    if not match:
        return None
    return JSXShape(
        root_element=match.group(1).split()[0].rstrip("/"),
        has_conditional_rendering="&&" in content or "?" in content,
        has_mapping=".map(" in content,
        has_fragments="<>" in content or "Fragment" in content,
    )


def has_tests(component_path: Path) -> bool:
    if component_path.suffix not in {".tsx", ".jsx", ".ts", ".js", ".vue"}:
        return False
    stem = component_path.stem
    suffix = component_path.suffix
    candidates = (
        component_path.with_name(f"{stem}.test{suffix}"),
        component_path.with_name(f"{stem}.spec{suffix}"),
        component_path.parent / "__tests__" / component_path.name,
    )
    return any(candidate.exists() for candidate in candidates)


# Vue helpers


def detect_vue_version(content: str) -> int:
    if "defineComponent" in content or _VUE_SCRIPT_SETUP.search(content):
        return 3
    return 2


def extract_vue_props(script: str) -> List[PropRecord]:
    typed = _VUE_PROPS_TYPED.search(script)
    if typed:
        block = block_after(script, typed)
        if block is not None:
            return parse_type_members(script, block[0], block[1])

    named = _VUE_PROPS_NAMED_TYPE.search(script)
    if named:
        declaration = re.search(
            rf"\b(?:interface\s+{named.group(1)}\b[^{{]*|type\s+{named.group(1)}\s*=\s*)\{{", script
        )
        if declaration:
            block = block_after(script, declaration)
            if block is not None:
                return parse_type_members(script, block[0], block[1])

    array = _VUE_PROPS_ARRAY.search(script)
    if array:
        names = re.findall(r"['\"`]([\w$-]+)['\"`]", array.group(1))
        return [PropRecord(name=name, type="unknown") for name in names]

    obj = _VUE_PROPS_OBJECT.search(script)
    if not obj:
        return []
    block = block_after(script, obj)
    if block is None:
        return []
    body_offset, body = block
    lines = script.splitlines()
    props: List[PropRecord] = []
    for offset, text in split_members(blank_comments(body)):
        entry = _VUE_PROP_ENTRY.match(text)
        if not entry:
            continue
        value = entry.group(2).strip()
        if value.startswith("{"):
            type_match = _VUE_PROP_TYPE.search(value)
            prop_type = type_match.group(1) if type_match else "unknown"
            required = _VUE_PROP_REQUIRED.search(value) is not None
        else:
            prop_type = value
            required = False
        props.append(
            PropRecord(
                name=entry.group(1),
                type=" ".join(prop_type.split()),
                optional=not required,
                description=describe_member(lines, line_of(script, body_offset + offset)),
            )
        )
    return props


def extract_vue_data(script: str) -> List[str]:
    keys: List[str] = []
    arrow = _VUE_DATA_ARROW.search(script)
    if arrow:
        block = block_after(script, arrow)
        if block is not None:
            keys.extend(top_level_keys(block[1]))
    else:
        function = _VUE_DATA_FUNCTION.search(script)
        if function:
            block = block_after(script, function)
            if block is not None:
                returned = _VUE_RETURN_OBJECT.search(block[1])
                if returned:
                    inner = block_after(block[1], returned)
                    if inner is not None:
                        keys.extend(top_level_keys(inner[1]))
    for match in _VUE_SETUP_STATE.finditer(script):
        if match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


def extract_vue_methods(script: str, composition: bool = False) -> List[MethodRecord]:
    match = _VUE_METHODS.search(script)
    if not match:
        return extract_methods(script) if composition else []
    block = block_after(script, match)
    if block is None:
        return []
    methods: List[MethodRecord] = []
    for _, text in split_members(blank_comments(block[1])):
        entry = _VUE_OBJECT_METHOD.match(text)
        if entry:
            methods.append(
                MethodRecord(
                    name=entry.group(2),
                    kind="method",
                    is_async=bool(entry.group(1) or entry.group(3)),
                )
            )
    return methods


def extract_vue_computed(script: str) -> List[str]:
    names = _object_keys(_VUE_COMPUTED, script)
    names.extend(name for name in _VUE_SETUP_COMPUTED.findall(script) if name not in names)
    return names


def extract_vue_watchers(script: str) -> List[str]:
    names = _object_keys(_VUE_WATCH, script)
    names.extend(name for name in _VUE_SETUP_WATCH.findall(script) if name not in names)
    return names


def _object_keys(pattern: "re.Pattern[str]", script: str) -> List[str]:
    match = pattern.search(script)
    if not match:
        return []
    block = block_after(script, match)
    if block is None:
        return []
    return top_level_keys(block[1])


def _first_group(pattern: "re.Pattern[str]", content: str) -> Optional[str]:
    match = pattern.search(content)
    return match.group(1).strip() if match else None


__all__ = [
    "COMPONENT_EXTENSIONS",
    "ComponentAnalyzer",
    "extract_custom_hooks",
    "extract_jsx_shape",
    "extract_props",
    "resolve_component_name",
]
