"""Lexical dependency extraction from rendered Go type expressions."""

from __future__ import annotations

import re
from typing import Iterable, List, Set

_NOISE_TOKENS = ("...", "*", "[]", "map[", "<-", "chan ")

_SPLIT_PATTERN = re.compile(r"[()\[\]{},\s]+")

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

BUILTIN_TYPES = frozenset(
    {
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "interface",
        "func",
        "struct",
        "any",
    }
)


def is_builtin_type(name: str) -> bool:
    return name in BUILTIN_TYPES


def is_identifier(name: str) -> bool:
    """Return True for ASCII identifiers such as ``UserService`` or ``_cache``."""
    return _IDENTIFIER_PATTERN.fullmatch(name) is not None


def extract_type_dependencies(fragment: str) -> Set[str]:
    """Return the names a type or signature fragment mentions.

    ``"*[]map[string]UserService"`` yields ``{"UserService"}`` and
    ``"pkg.Reader"`` yields ``{"Reader"}``. Channel arrows, pointer and slice
    markers and variadic ``...`` prefixes are stripped first. Malformed input
    never raises; it simply produces fewer names.
    """
    if not fragment:
        return set()

    cleaned = fragment
    for token in _NOISE_TOKENS:
        cleaned = cleaned.replace(token, "")

    names: Set[str] = set()
    for word in _SPLIT_PATTERN.split(cleaned):
        if not word or is_builtin_type(word):
            continue
        if "." in word:
            parts = word.split(".")
            if len(parts) == 2 and parts[1]:
                names.add(parts[1])
        elif is_identifier(word):
            names.add(word)
    return names


def collect_dependencies(fragments: Iterable[str], *, exclude: str = "") -> List[str]:
    """Union the dependencies of several fragments, dropping ``exclude``."""
    names: Set[str] = set()
    for fragment in fragments:
        names.update(extract_type_dependencies(fragment))
    names.discard(exclude)
    names.discard("")
    return sorted(names)


__all__ = [
    "BUILTIN_TYPES",
    "collect_dependencies",
    "extract_type_dependencies",
    "is_builtin_type",
    "is_identifier",
]
