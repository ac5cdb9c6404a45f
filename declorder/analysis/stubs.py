"""No-op implementation synthesis for interface declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import InterfaceDecl
from .dependencies import is_identifier

GENERATED_HEADER = "// Code generated by declorder; DO NOT EDIT."

_INTEGER_TYPES = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
    }
)
_FLOAT_TYPES = frozenset({"float32", "float64"})
_COMPLEX_TYPES = frozenset({"complex64", "complex128"})
_NIL_TYPES = frozenset({"error", "any", "interface{}"})

# Leading words that start a type rather than name a result.
_TYPE_KEYWORDS = frozenset({"func", "chan", "map", "struct", "interface"})

_OPENERS = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class MethodSignature:
    """A method signature split into its name, parameter list and result clause."""

    name: str
    params: str
    results: str


def parse_method_signature(signature: str) -> Optional[MethodSignature]:
    """Split ``Name(params) results`` at the parameter list's closing paren.

    Returns ``None`` when there is no parameter list or it never closes.
    """
    name, found, remainder = signature.partition("(")
    name = name.strip()
    if not found or not name:
        return None

    depth = 0
    for index, char in enumerate(remainder):
        if char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                return MethodSignature(
                    name=name,
                    params=remainder[:index],
                    results=remainder[index + 1 :].strip(),
                )
            depth -= 1
    return None


def zero_value(type_name: str) -> str:
    """Return a Go expression holding the zero value of ``type_name``."""
    type_name = type_name.strip()
    if type_name.startswith(("*", "[]", "map[")) or "chan" in type_name:
        return "nil"
    if type_name.startswith("func") or type_name in _NIL_TYPES:
        return "nil"
    if type_name == "bool":
        return "false"
    if type_name == "string":
        return '""'
    if type_name in _INTEGER_TYPES:
        return "0"
    if type_name in _FLOAT_TYPES:
        return "0.0"
    if type_name in _COMPLEX_TYPES:
        return "0+0i"
    if "." in type_name:
        return "nil"
    return f"{type_name}{{}}"


def zero_values(results: str) -> str:
    """Return the comma-joined zero values for a result clause such as ``(int, error)``."""
    results = results.strip()
    if not results:
        return ""
    if results.startswith("(") and results.endswith(")"):
        results = results[1:-1]
    values = [zero_value(_result_type(entry)) for entry in _split_top_level(results)]
    return ", ".join(values)


def _split_top_level(text: str) -> List[str]:
    entries: List[str] = []
    stack: List[str] = []
    current: List[str] = []
    for char in text:
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif stack and char == stack[-1]:
            stack.pop()
        elif char == "," and not stack:
            entries.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail or entries:
        entries.append(tail)
    return entries


def _result_type(entry: str) -> str:
    head, _, tail = entry.partition(" ")
    if tail.strip() and is_identifier(head) and head not in _TYPE_KEYWORDS:
        return tail.strip()
    return entry


def implementation_name(interface_name: str) -> str:
    return f"NoOp{interface_name}"


def generate_method(signature: str, impl_name: str, level: int) -> str:
    """Render one placeholder method, or an empty string for unparseable signatures."""
    parsed = parse_method_signature(signature)
    if parsed is None:
        return ""

    lines = [
        f"// {parsed.name} is a no-op implementation (Level {level})",
    ]
    header = f"func (n *{impl_name}) {parsed.name}({parsed.params})"
    if parsed.results:
        header += f" {parsed.results}"
    lines.append(header + " {")
    lines.append(f"\t// TODO: Implement {parsed.name} (Level {level})")
    if parsed.results:
        zeros = zero_values(parsed.results)
        if zeros:
            lines.append(f"\treturn {zeros}")
    lines.append("}")
    return "\n".join(lines)


class NoOpCodeGenerator:
    """Emits a ``NoOp<Name>`` type, constructor, level accessor and placeholder methods."""

    def generate(self, item: InterfaceDecl) -> str:
        if not item.name:
            return ""
        impl = implementation_name(item.name)
        level = item.level
        parts = [
            f"// {impl} is a no-op implementation of {item.name} interface (Level {level})\n"
            f"type {impl} struct {{\n"
            f"\tlevel int // Dependency level: {level}\n"
            "}\n",
            f"// New{impl} creates a new no-op implementation at the specified level\n"
            f"func New{impl}(level int) *{impl} {{\n"
            f"\treturn &{impl}{{level: level}}\n"
            "}\n",
            f"// GetLevel returns the dependency level of this {impl}\n"
            f"func (n *{impl}) GetLevel() int {{\n"
            "\treturn n.level\n"
            "}\n",
        ]
        for signature in item.methods:
            method = generate_method(signature, impl, level)
            if method:
                parts.append(method + "\n")
        return "\n".join(parts)


class NoOpImplementationNamer:
    def implementation_name(self, item: InterfaceDecl) -> str:
        return implementation_name(item.name)


def render_document(sources: Iterable[str], *, package: str = "main") -> str:
    """Combine generated implementations into one Go source file."""
    chunks = [f"{GENERATED_HEADER}\n\n", f"package {package}\n\n"]
    for source in sources:
        if source:
            chunks.append(source)
            chunks.append("\n")
    return "".join(chunks)


__all__ = [
    "GENERATED_HEADER",
    "MethodSignature",
    "NoOpCodeGenerator",
    "NoOpImplementationNamer",
    "generate_method",
    "implementation_name",
    "parse_method_signature",
    "render_document",
    "zero_value",
    "zero_values",
]
