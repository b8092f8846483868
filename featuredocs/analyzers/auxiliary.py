"""Analyzers for the non-component files of a feature: hooks, services, types and config."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from .base import SourceAnalyzer
from .toolkit import (
    block_after,
    describe_member,
    extract_constants,
    extract_enums,
    extract_exports,
    extract_imports,
    extract_interfaces,
    extract_methods,
    extract_type_aliases,
    line_of,
    top_level_keys,
)
from ..models import ConfigFileRecord, HookFileRecord, ServiceRecord, TypeFileRecord

_HOOK_NAME_PATTERNS = (
    re.compile(r"export\s+(?:default\s+)?function\s+(use\w+)"),
    re.compile(r"const\s+(use\w+)\s*="),
)
_HOOK_FUNCTION_PARAMS = re.compile(r"function\s+use\w+\s*\(([^)]*)\)")
_HOOK_ARROW_PARAMS = re.compile(r"const\s+use\w+\s*=\s*(?:async\s*)?\(([^)]*)\)")
_RETURN_OBJECT = re.compile(r"return\s*\{")
_LEADING_BLOCK_COMMENT = re.compile(r"\A\s*/\*\*?(.*?)\*/", re.DOTALL)


def _split_parameters(raw: str) -> List[str]:
    parameters: List[str] = []
    depth = 0
    current = ""
    for char in raw:
        if char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth -= 1
        if char == "," and depth == 0:
            parameters.append(current.strip())
            current = ""
            continue
        current += char
    if current.strip():
        parameters.append(current.strip())
    return parameters


class HookAnalyzer(SourceAnalyzer[HookFileRecord]):
    """Summarises a custom hook module: signature, returned keys and dependencies."""

    extensions = (".ts", ".tsx", ".js")

    def supports(self, path: Path) -> bool:
        return super().supports(path) and is_hook_file(path.name)

    def analyze_source(self, content: str, path: Path) -> HookFileRecord:
        name = _hook_name(content) or path.stem
        return HookFileRecord(
            name=name,
            file_path=str(path),
            parameters=_hook_parameters(content),
            returns=_hook_returns(content),
            dependencies=[
                record.source
                for record in extract_imports(content)
                if record.source == "react" or record.source.startswith("@")
            ],
            description=_hook_description(content, name),
        )


def is_hook_file(filename: str) -> bool:
    return filename.startswith("use") or "hook" in filename


def _hook_name(content: str) -> Optional[str]:
    for pattern in _HOOK_NAME_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1)
    return None


def _hook_parameters(content: str) -> List[str]:
    match = _HOOK_FUNCTION_PARAMS.search(content) or _HOOK_ARROW_PARAMS.search(content)
    if not match:
        return []
    return _split_parameters(match.group(1))


def _hook_returns(content: str) -> List[str]:
    # The hook's own result is the last object literal it returns.
    matches = list(_RETURN_OBJECT.finditer(content))
    if not matches:
        return []
    block = block_after(content, matches[-1])
    if block is None:
        return []
    return top_level_keys(block[1])


def _hook_description(content: str, name: str) -> str:
    declaration = re.search(rf"(?:function|const)\s+{re.escape(name)}\b", content)
    if declaration:
        lines = content.split("\n")
        described = describe_member(lines, line_of(content, declaration.start()))
        if described:
            return described
    leading = _LEADING_BLOCK_COMMENT.match(content)
    if not leading:
        return ""
    text = " ".join(
        line.strip().lstrip("*").strip() for line in leading.group(1).split("\n")
    )
    return " ".join(part for part in text.split() if part)


class ServiceAnalyzer(SourceAnalyzer[ServiceRecord]):
    """Lists the functions, exports and imports of a service module."""

    extensions = (".ts", ".js")

    def analyze_source(self, content: str, path: Path) -> ServiceRecord:
        return ServiceRecord(
            name=_file_stem(path),
            file_path=str(path),
            methods=extract_methods(content),
            exports=extract_exports(content),
            imports=extract_imports(content),
        )


class TypeAnalyzer(SourceAnalyzer[TypeFileRecord]):
    """Collects interface, type alias and enum declarations."""

    extensions = (".ts", ".d.ts")

    def analyze_source(self, content: str, path: Path) -> TypeFileRecord:
        return TypeFileRecord(
            name=_file_stem(path),
            file_path=str(path),
            interfaces=extract_interfaces(content),
            type_aliases=extract_type_aliases(content),
            enums=extract_enums(content),
        )


class ConfigAnalyzer(SourceAnalyzer[ConfigFileRecord]):
    extensions = (".ts", ".tsx", ".js", ".jsx")

    def analyze_source(self, content: str, path: Path) -> ConfigFileRecord:
        return ConfigFileRecord(
            name=_file_stem(path),
            file_path=str(path),
            exports=extract_exports(content),
            constants=extract_constants(content),
        )


def _file_stem(path: Path) -> str:
    name = path.name
    if name.endswith(".d.ts"):
        return name[: -len(".d.ts")]
    return path.stem


__all__ = [
    "ConfigAnalyzer",
    "HookAnalyzer",
    "ServiceAnalyzer",
    "TypeAnalyzer",
    "is_hook_file",
]
