"""Core data models shared across featuredocs components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FileEntry:
    """A file discovered while walking a feature directory."""

    name: str
    full_path: str
    relative_path: str
    extension: str


@dataclass
class PropRecord:
    """A declared component property."""

    name: str
    type: str
    optional: bool = False
    description: str = ""


@dataclass
class HookRecord:
    """A hook invoked by a component."""

    name: str
    kind: str
    usage: int = 1


@dataclass
class CustomHookRecord:
    name: str
    kind: str


@dataclass
class MethodRecord:
    """A function or method defined inside a source file."""

    name: str
    kind: str
    is_async: bool = False


@dataclass
class ImportRecord:
    """A single import statement, keyed by its module specifier."""

    source: str
    default_import: Optional[str] = None
    named_imports: List[str] = field(default_factory=list)
    namespace_import: Optional[str] = None
    is_relative: bool = False
    category: str = "external"


@dataclass
class ExportRecord:
    kind: str
    name: str


@dataclass
class CommentRecord:
    kind: str
    text: str


@dataclass
class JSXShape:
    """Shape of the first JSX tree returned by a component."""

    root_element: str
    has_conditional_rendering: bool
    has_mapping: bool
    has_fragments: bool


@dataclass
class UIElementMatch:
    """A UI element classification for one component (or feature).

    Composite matches carry ``composed_of`` and no ``confidence_score``.
    """

    type: str
    confidence_level: str
    confidence_score: Optional[int] = None
    instances: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    composed_of: List[str] = field(default_factory=list)
    description: str = ""

    @property
    def is_composite(self) -> bool:
        return bool(self.composed_of)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        if self.is_composite:
            payload.pop("confidence_score")
        else:
            payload.pop("composed_of")
            payload.pop("description")
        return payload


@dataclass
class ComponentRecord:
    """Structured extraction result for one component source file.

    React records carry either ``lifecycle`` (class components) or
    ``custom_hooks`` (functional components); the other stays ``None``.
    """

    name: str
    kind: str
    component_type: str
    filename: str
    file_path: str
    props: List[PropRecord] = field(default_factory=list)
    hooks: List[HookRecord] = field(default_factory=list)
    methods: List[MethodRecord] = field(default_factory=list)
    imports: List[ImportRecord] = field(default_factory=list)
    exports: List[ExportRecord] = field(default_factory=list)
    comments: List[CommentRecord] = field(default_factory=list)
    jsx_shape: Optional[JSXShape] = None
    complexity: str = "low"
    lifecycle: Optional[List[str]] = None
    custom_hooks: Optional[List[CustomHookRecord]] = None
    data: List[str] = field(default_factory=list)
    computed: List[str] = field(default_factory=list)
    watchers: List[str] = field(default_factory=list)
    template: Optional[str] = None
    script: Optional[str] = None
    style: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    relative_path: str = ""
    ui_elements: List[UIElementMatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["ui_elements"] = [element.to_dict() for element in self.ui_elements]
        for key in ("lifecycle", "custom_hooks"):
            if payload[key] is None:
                payload.pop(key)
        return payload


@dataclass
class HookFileRecord:
    """Analysis of a standalone custom hook module."""

    name: str
    file_path: str
    parameters: List[str] = field(default_factory=list)
    returns: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    description: str = ""
    relative_path: str = ""


@dataclass
class ServiceRecord:
    name: str
    file_path: str
    methods: List[MethodRecord] = field(default_factory=list)
    exports: List[ExportRecord] = field(default_factory=list)
    imports: List[ImportRecord] = field(default_factory=list)
    relative_path: str = ""


@dataclass
class TypeDefinition:
    name: str
    body: str


@dataclass
class TypeFileRecord:
    name: str
    file_path: str
    interfaces: List[TypeDefinition] = field(default_factory=list)
    type_aliases: List[TypeDefinition] = field(default_factory=list)
    enums: List[TypeDefinition] = field(default_factory=list)
    relative_path: str = ""


@dataclass
class ConstantRecord:
    name: str
    value: str


@dataclass
class ConfigFileRecord:
    name: str
    file_path: str
    exports: List[ExportRecord] = field(default_factory=list)
    constants: List[ConstantRecord] = field(default_factory=list)
    relative_path: str = ""


@dataclass
class AssetRecord:
    name: str
    path: str
    relative_path: str
    kind: str


@dataclass
class FeatureTestRecord:
    name: str
    path: str
    relative_path: str
    kind: str


@dataclass
class EntryPoint:
    path: str
    relative_path: str


@dataclass
class FeatureMetadata:
    """Aggregated per-feature facts computed after the walk."""

    total_files: int = 0
    complexity: str = "low"
    patterns: List[str] = field(default_factory=list)
    ui_patterns: List[str] = field(default_factory=list)
    ui_elements: List[UIElementMatch] = field(default_factory=list)
    ui_statistics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FeatureRecord:
    """Everything discovered for one feature directory."""

    name: str
    path: str
    components: List[ComponentRecord] = field(default_factory=list)
    hooks: List[HookFileRecord] = field(default_factory=list)
    services: List[ServiceRecord] = field(default_factory=list)
    types: List[TypeFileRecord] = field(default_factory=list)
    assets: List[AssetRecord] = field(default_factory=list)
    tests: List[FeatureTestRecord] = field(default_factory=list)
    entry_point: Optional[EntryPoint] = None
    config: Optional[ConfigFileRecord] = None
    metadata: FeatureMetadata = field(default_factory=FeatureMetadata)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["components"] = [component.to_dict() for component in self.components]
        payload["metadata"]["ui_elements"] = [
            element.to_dict() for element in self.metadata.ui_elements
        ]
        return payload
