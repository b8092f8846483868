"""Shared regex toolkit for JavaScript/TypeScript source extraction."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..models import (
    CommentRecord,
    ConstantRecord,
    ExportRecord,
    HookRecord,
    ImportRecord,
    MethodRecord,
    PropRecord,
    TypeDefinition,
)

BUILT_IN_HOOKS = (
    "useState",
    "useEffect",
    "useContext",
    "useReducer",
    "useCallback",
    "useMemo",
    "useRef",
    "useImperativeHandle",
    "useLayoutEffect",
    "useDebugValue",
    "useDeferredValue",
    "useTransition",
    "useId",
    "useSyncExternalStore",
)

LIBRARY_HOOKS = (
    "useQuery",
    "useMutation",
    "useRouter",
    "useNavigate",
    "useForm",
    "useFieldArray",
    "useTranslation",
    "useTheme",
)

_HOOK_CALL = re.compile(r"\b(use[A-Z]\w*)\s*\(")
_REACT_HOOK_CALL = re.compile(r"React\.(use[A-Z]\w*)\s*\(")

_ARROW_FUNCTION = re.compile(
    r"const\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*(?::\s*[^=;{]+?)?\s*=>"
)
_DECLARED_FUNCTION = re.compile(r"(?:async\s+)?function\s+(\w+)\s*\([^)]*\)")

_IMPORT_FROM = re.compile(r"""import\s+(?:type\s+)?([\w$*{}\s,]+?)\s+from\s+['"`]([^'"`]+)['"`]""")
_IMPORT_SIDE_EFFECT = re.compile(r"""import\s+['"`]([^'"`]+)['"`]""")
_IMPORT_BRACES = re.compile(r"\{([^}]*)\}")
_IMPORT_NAMESPACE = re.compile(r"\*\s*as\s+([\w$]+)")
_REACT_LIBRARIES = {"react-router-dom", "react-hook-form", "react-i18next"}

_NAMED_EXPORT = re.compile(r"export\s+(?:async\s+)?(?:const|function|class)\s+(\w+)")

_JSDOC_BLOCK = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"(?<![:\\])//[ \t]*(.*)$", re.MULTILINE)

_EXPORTED_CONSTANT = re.compile(r"export\s+const\s+(\w+)\s*=\s*([^;]+);")
_INTERFACE_HEAD = re.compile(r"\binterface\s+(\w+)(?:\s*<[^>{]*>)?(?:\s+extends\s+[^{]+)?\s*\{")
_TYPE_ALIAS_HEAD = re.compile(r"\btype\s+(\w+)(?:\s*<[^>=]*>)?\s*=\s*")
_ENUM_HEAD = re.compile(r"\benum\s+(\w+)\s*\{")

_MEMBER = re.compile(r"\s*(?:readonly\s+)?([A-Za-z_$][\w$]*)(\?)?\s*:\s*(.+?)\s*$", re.DOTALL)

_COMPLEXITY_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        r"if\s*\(",
        r"\?\s*[^:]*:",
        r"switch\s*\(",
        r"for\s*\(",
        r"while\s*\(",
        r"\.map\(",
        r"\.filter\(",
        r"useEffect\(",
        r"useState\(",
    )
)


# Text scanning helpers


def line_of(content: str, offset: int) -> int:
    """Return the zero-based line index containing ``offset``."""
    return content.count("\n", 0, offset)


def find_matching_brace(text: str, open_index: int) -> int:
    """Return the index of the brace closing ``text[open_index]``, or -1."""
    depth = 0
    quote: Optional[str] = None
    index = open_index
    length = len(text)
    while index < length:
        char = text[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote or (char == "\n" and quote != "`"):
                quote = None
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            if newline == -1:
                return -1
            index = newline
            continue
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            if end == -1:
                return -1
            index = end + 2
            continue
        elif char in "\"'`":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1


def block_after(text: str, match: "re.Match[str]") -> Optional[Tuple[int, str]]:
    """Return ``(body_offset, body)`` for a match ending on an opening brace."""
    open_index = match.end() - 1
    close_index = find_matching_brace(text, open_index)
    if close_index == -1:
        return None
    return open_index + 1, text[open_index + 1 : close_index]


def blank_comments(text: str) -> str:
    """Replace comments with spaces, keeping offsets and newlines intact."""
    chars = list(text)
    quote: Optional[str] = None
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote or (char == "\n" and quote != "`"):
                quote = None
            index += 1
            continue
        if text.startswith("//", index):
            end = text.find("\n", index)
            end = length if end == -1 else end
            for position in range(index, end):
                chars[position] = " "
            index = end
            continue
        if text.startswith("/*", index):
            end = text.find("*/", index + 2)
            end = length if end == -1 else end + 2
            for position in range(index, end):
                if chars[position] != "\n":
                    chars[position] = " "
            index = end
            continue
        if char in "\"'`":
            quote = char
        index += 1
    return "".join(chars)


_IDENTIFIER_CHAR = re.compile(r"[\w$]")
_CLOSING_BRACKETS = {"}": "{", ")": "(", "]": "["}


def split_members(body: str) -> List[Tuple[int, str]]:
    """Split a type body into ``(offset, text)`` members at depth zero.

    Members end at ``;``, ``,`` or a newline. Union and intersection
    continuations are folded back into the member they belong to.
    """
    raw: List[Tuple[int, str]] = []
    # Open brackets; "<" is only a generic bracket right after an identifier.
    stack: List[str] = []
    start = 0
    quote: Optional[str] = None
    for index, char in enumerate(body):
        if quote:
            if char == quote:
                quote = None
            continue
        previous_char = body[index - 1 : index]
        if char in "\"'`":
            quote = char
        elif char in "{([" or (char == "<" and _IDENTIFIER_CHAR.match(previous_char)):
            stack.append(char)
        elif char in _CLOSING_BRACKETS:
            opener = _CLOSING_BRACKETS[char]
            while stack and stack.pop() != opener:
                pass
        elif char == ">" and stack and stack[-1] == "<" and previous_char != "=":
            stack.pop()
        elif not stack and char in ";,\n":
            raw.append((start, body[start:index]))
            start = index + 1
    raw.append((start, body[start:]))

    members: List[Tuple[int, str]] = []
    for offset, text in raw:
        stripped = text.strip()
        if not stripped:
            continue
        if members:
            previous = members[-1][1].rstrip()
            if stripped.startswith(("|", "&", "=>")) or previous.endswith(("|", "&", ":", "=>")):
                members[-1] = (members[-1][0], f"{previous} {stripped}")
                continue
        leading = len(text) - len(text.lstrip())
        members.append((offset + leading, stripped))
    return members


def describe_member(lines: Sequence[str], index: int) -> str:
    """Return the comment text documenting the member on line ``index``.

    Scans upward: an immediately preceding ``//`` comment, or the block
    comment that ends above the member. Any other line stops the scan.
    """
    cursor = index - 1
    while cursor >= 0 and not lines[cursor].strip():
        cursor -= 1
    if cursor < 0:
        return ""

    line = lines[cursor].strip()
    if line.startswith("//"):
        return line.lstrip("/").strip()
    # A trailing "/* ... */" after code documents that line, not this member.
    if not line.endswith("*/") or not line.startswith(("/*", "*")):
        return ""

    collected: List[str] = []
    while cursor >= 0:
        current = lines[cursor].strip()
        if not current.startswith(("/*", "*")):
            return ""
        opening = current.startswith("/*")
        text = _clean_block_line(current)
        if text and not text.startswith("@"):
            collected.append(text)
        if opening:
            break
        cursor -= 1
    collected.reverse()
    return " ".join(collected).strip()


def _clean_block_line(line: str) -> str:
    if line.startswith("/**"):
        line = line[3:]
    elif line.startswith("/*"):
        line = line[2:]
    if line.endswith("*/"):
        line = line[:-2]
    line = line.strip()
    if line.startswith("*"):
        line = line.lstrip("*")
    return line.strip()


def parse_type_members(content: str, body_offset: int, body: str) -> List[PropRecord]:
    """Parse ``name?: type`` members of an interface or object type body."""
    lines = content.splitlines()
    opening_line = line_of(content, body_offset)
    props: List[PropRecord] = []
    seen: set[str] = set()
    for offset, text in split_members(blank_comments(body)):
        match = _MEMBER.match(text)
        if not match:
            continue
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        line_index = line_of(content, body_offset + offset + match.start(1))
        description = describe_member(lines, line_index) if line_index > opening_line else ""
        props.append(
            PropRecord(
                name=name,
                type=" ".join(match.group(3).rstrip(";,").split()),
                optional=match.group(2) == "?",
                description=description,
            )
        )
    return props


def top_level_keys(body: str) -> List[str]:
    """Return the keys of an object-literal body, ignoring nested values."""
    keys: List[str] = []
    for _, text in split_members(blank_comments(body)):
        match = re.match(r"(?:async\s+)?(?:get\s+|set\s+)?['\"]?([A-Za-z_$][\w$.]*)['\"]?\s*(?:[:(]|$)", text)
        if match and match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


# Extractors shared by component, hook, service and config analyzers


def classify_hook(name: str) -> str:
    if name in BUILT_IN_HOOKS:
        return "built-in"
    if name in LIBRARY_HOOKS:
        return "library"
    return "custom"


def extract_hooks(content: str) -> List[HookRecord]:
    """Return every hook called in ``content``, first occurrence wins."""
    hooks: dict[str, HookRecord] = {}
    for pattern in (_HOOK_CALL, _REACT_HOOK_CALL):
        for match in pattern.finditer(content):
            name = match.group(1)
            if name in hooks:
                continue
            hooks[name] = HookRecord(name=name, kind=classify_hook(name), usage=_hook_usage(content, name))
    return list(hooks.values())


def _hook_usage(content: str, name: str) -> int:
    assignments = re.findall(rf"const\s+[^=]*=\s*{re.escape(name)}\s*\([^)]*\)", content)
    return len(assignments) or 1


def extract_methods(content: str) -> List[MethodRecord]:
    methods: List[MethodRecord] = []
    for match in _ARROW_FUNCTION.finditer(content):
        methods.append(
            MethodRecord(name=match.group(1), kind="arrow", is_async=_mentions_async(match.group(0)))
        )
    for match in _DECLARED_FUNCTION.finditer(content):
        methods.append(
            MethodRecord(name=match.group(1), kind="function", is_async=_mentions_async(match.group(0)))
        )
    return methods


def _mentions_async(text: str) -> bool:
    return re.search(r"\basync\b", text) is not None


def categorize_import(source: str) -> str:
    if source.startswith("@shared/"):
        return "shared"
    if source.startswith("@/"):
        return "internal"
    if is_relative_import(source):
        return "relative"
    if source == "react":
        return "framework"
    if source in _REACT_LIBRARIES:
        return "react-library"
    if ".css" in source or ".scss" in source:
        return "styles"
    return "external"


def is_relative_import(source: str) -> bool:
    return source.startswith(("./", "../"))


def extract_imports(content: str) -> List[ImportRecord]:
    """Return imports in source order, one record per module specifier."""
    found: List[Tuple[int, ImportRecord]] = []
    for match in _IMPORT_FROM.finditer(content):
        default, named, namespace = _parse_import_clause(match.group(1))
        found.append((match.start(), _import_record(match.group(2), default, named, namespace)))
    for match in _IMPORT_SIDE_EFFECT.finditer(content):
        found.append((match.start(), _import_record(match.group(1), None, [], None)))

    imports: List[ImportRecord] = []
    seen: set[str] = set()
    for _, record in sorted(found, key=lambda item: item[0]):
        if record.source in seen:
            continue
        seen.add(record.source)
        imports.append(record)
    return imports


def _parse_import_clause(clause: str) -> Tuple[Optional[str], List[str], Optional[str]]:
    named: List[str] = []
    braces = _IMPORT_BRACES.search(clause)
    if braces:
        named = [" ".join(item.split()) for item in braces.group(1).split(",") if item.strip()]
        clause = clause[: braces.start()] + clause[braces.end() :]
    namespace = None
    namespace_match = _IMPORT_NAMESPACE.search(clause)
    if namespace_match:
        namespace = namespace_match.group(1)
        clause = clause[: namespace_match.start()] + clause[namespace_match.end() :]
    remainder = clause.replace(",", " ").split()
    default = remainder[0] if remainder else None
    return default, named, namespace


def _import_record(
    source: str, default: Optional[str], named: List[str], namespace: Optional[str]
) -> ImportRecord:
    return ImportRecord(
        source=source,
        default_import=default,
        named_imports=named,
        namespace_import=namespace,
        is_relative=is_relative_import(source),
        category=categorize_import(source),
    )


def extract_exports(content: str) -> List[ExportRecord]:
    exports: List[ExportRecord] = []
    if "export default" in content:
        exports.append(ExportRecord(kind="default", name="default"))
    for match in _NAMED_EXPORT.finditer(content):
        exports.append(ExportRecord(kind="named", name=match.group(1)))
    return exports


def has_named_export(content: str) -> bool:
    return _NAMED_EXPORT.search(content) is not None


def extract_comments(content: str) -> List[CommentRecord]:
    comments: List[CommentRecord] = []
    for match in _JSDOC_BLOCK.finditer(content):
        lines = [_clean_block_line(line.strip()) for line in match.group(1).splitlines()]
        text = "\n".join(line for line in lines if line).strip()
        if text:
            comments.append(CommentRecord(kind="jsdoc", text=text))
    for match in _LINE_COMMENT.finditer(content):
        text = match.group(1).strip()
        if text:
            comments.append(CommentRecord(kind="line", text=text))
    return comments


def extract_constants(content: str) -> List[ConstantRecord]:
    return [
        ConstantRecord(name=match.group(1), value=match.group(2).strip())
        for match in _EXPORTED_CONSTANT.finditer(content)
    ]


def extract_interfaces(content: str) -> List[TypeDefinition]:
    interfaces: List[TypeDefinition] = []
    for match in _INTERFACE_HEAD.finditer(content):
        block = block_after(content, match)
        if block is not None:
            interfaces.append(TypeDefinition(name=match.group(1), body=block[1].strip()))
    return interfaces


def extract_type_aliases(content: str) -> List[TypeDefinition]:
    aliases: List[TypeDefinition] = []
    for match in _TYPE_ALIAS_HEAD.finditer(content):
        start = match.end()
        if content.startswith("{", start):
            close = find_matching_brace(content, start)
            if close == -1:
                continue
            definition = content[start : close + 1]
        else:
            end = content.find(";", start)
            definition = content[start:] if end == -1 else content[start:end]
        aliases.append(TypeDefinition(name=match.group(1), body=" ".join(definition.split())))
    return aliases


def extract_enums(content: str) -> List[TypeDefinition]:
    enums: List[TypeDefinition] = []
    for match in _ENUM_HEAD.finditer(content):
        block = block_after(content, match)
        if block is not None:
            enums.append(TypeDefinition(name=match.group(1), body=block[1].strip()))
    return enums


def complexity_score(content: str) -> int:
    """Count branching, looping and stateful constructs in ``content``."""
    return sum(len(pattern.findall(content)) for pattern in _COMPLEXITY_PATTERNS)


def complexity_level(score: int) -> str:
    if score < 5:
        return "low"
    if score < 15:
        return "medium"
    return "high"
