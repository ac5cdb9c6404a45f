"""Per-kind strategies: graph naming, dependency extraction, validation and rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..models import (
    ConstantDecl,
    FunctionDecl,
    ImportDecl,
    InterfaceDecl,
    StructDecl,
    VariableDecl,
)
from .base import CodeGenerator, DependencyExtractor, ImplementationNamer, ItemRenderer, NameProvider
from .dependencies import collect_dependencies
from .stubs import NoOpCodeGenerator, NoOpImplementationNamer

KIND_STRUCTS = "structs"
KIND_INTERFACES = "interfaces"
KIND_FUNCTIONS = "functions"
KIND_VARIABLES = "variables"
KIND_CONSTANTS = "constants"
KIND_IMPORTS = "imports"

ALL_KINDS: Tuple[str, ...] = (
    KIND_STRUCTS,
    KIND_INTERFACES,
    KIND_FUNCTIONS,
    KIND_VARIABLES,
    KIND_CONSTANTS,
    KIND_IMPORTS,
)


def _with_level(text: str, level: int) -> str:
    if level > 0:
        text += f"\n  Level: {level}"
    return text


class DeclarationNames:
    """Graph key for structs, interfaces, variables and constants."""

    def name_of(self, item: Any) -> str:
        return item.name


class FunctionNames:
    def name_of(self, item: FunctionDecl) -> str:
        if item.receiver:
            return f"{item.receiver}.{item.name}"
        return item.name


class ImportNames:
    def name_of(self, item: ImportDecl) -> str:
        return item.path


class NonEmptyNameValidator:
    """Accepts records whose graph name is non-empty."""

    def __init__(self, names: NameProvider[Any]) -> None:
        self._names = names

    def is_valid(self, item: Any) -> bool:
        return item is not None and bool(self._names.name_of(item))


class StructDependencies:
    def extract(self, item: StructDecl) -> List[str]:
        return collect_dependencies(item.fields, exclude=item.name)


class InterfaceDependencies:
    def extract(self, item: InterfaceDecl) -> List[str]:
        return collect_dependencies(item.methods, exclude=item.name)


class FunctionDependencies:
    def extract(self, item: FunctionDecl) -> List[str]:
        fragments = [item.receiver, *item.parameters, *item.returns]
        return collect_dependencies(fragments, exclude=FunctionNames().name_of(item))


class TypedValueDependencies:
    """Variables and constants depend on whatever their declared type names."""

    def extract(self, item: Any) -> List[str]:
        return collect_dependencies([item.type_name], exclude=item.name)


class ImportDependencies:
    def extract(self, item: ImportDecl) -> List[str]:
        return []


class StructRenderer:
    def render(self, item: StructDecl) -> str:
        if not item.name:
            return ""
        text = f"Struct: {item.name} (Package: {item.package}) at {item.position}"
        if item.fields:
            text += f"\n  Fields: {', '.join(item.fields)}"
        return _with_level(text, item.level)


class InterfaceRenderer:
    def render(self, item: InterfaceDecl) -> str:
        if not item.name:
            return ""
        text = f"Interface: {item.name} (Package: {item.package}) at {item.position}"
        if item.methods:
            text += f"\n  Methods: {', '.join(item.methods)}"
        return _with_level(text, item.level)


class FunctionRenderer:
    def render(self, item: FunctionDecl) -> str:
        if not item.name:
            return ""
        if item.receiver:
            text = (
                f"Method: {item.name} (Receiver: {item.receiver}, Package: {item.package})"
                f" at {item.position}"
            )
        else:
            text = f"Function: {item.name} (Package: {item.package}) at {item.position}"
        if item.parameters:
            text += f"\n  Parameters: {', '.join(item.parameters)}"
        if item.returns:
            text += f"\n  Returns: {', '.join(item.returns)}"
        return _with_level(text, item.level)


class VariableRenderer:
    def render(self, item: VariableDecl) -> str:
        if not item.name:
            return ""
        text = f"Variable: {item.name} {item.type_name} (Package: {item.package}) at {item.position}"
        return _with_level(text, item.level)


class ConstantRenderer:
    def render(self, item: ConstantDecl) -> str:
        if not item.name:
            return ""
        text = f"Constant: {item.name}"
        if item.type_name:
            text += f" {item.type_name}"
        if item.value:
            text += f" = {item.value}"
        text += f" (Package: {item.package}) at {item.position}"
        return _with_level(text, item.level)


class ImportRenderer:
    def render(self, item: ImportDecl) -> str:
        if not item.path:
            return ""
        text = f"Import: {item.path}"
        if item.name and item.name != ".":
            text += f" as {item.name}"
        text += f" at {item.position}"
        return _with_level(text, item.level)


@dataclass(frozen=True)
class KindStrategies:
    """The strategies one declaration kind plugs into the engine."""

    kind: str
    title: str
    names: NameProvider[Any]
    extractor: DependencyExtractor[Any]
    renderer: ItemRenderer[Any]
    generator: Optional[CodeGenerator[Any]] = None
    namer: Optional[ImplementationNamer[Any]] = None

    @property
    def supports_generation(self) -> bool:
        return self.generator is not None


def strategies_for(kind: str) -> KindStrategies:
    """Return fresh strategies for ``kind``; raises ``ValueError`` for unknown kinds."""
    if kind == KIND_STRUCTS:
        return KindStrategies(
            kind=kind,
            title="Structs",
            names=DeclarationNames(),
            extractor=StructDependencies(),
            renderer=StructRenderer(),
        )
    if kind == KIND_INTERFACES:
        return KindStrategies(
            kind=kind,
            title="Interfaces",
            names=DeclarationNames(),
            extractor=InterfaceDependencies(),
            renderer=InterfaceRenderer(),
            generator=NoOpCodeGenerator(),
            namer=NoOpImplementationNamer(),
        )
    if kind == KIND_FUNCTIONS:
        return KindStrategies(
            kind=kind,
            title="Functions",
            names=FunctionNames(),
            extractor=FunctionDependencies(),
            renderer=FunctionRenderer(),
        )
    if kind == KIND_VARIABLES:
        return KindStrategies(
            kind=kind,
            title="Variables",
            names=DeclarationNames(),
            extractor=TypedValueDependencies(),
            renderer=VariableRenderer(),
        )
    if kind == KIND_CONSTANTS:
        return KindStrategies(
            kind=kind,
            title="Constants",
            names=DeclarationNames(),
            extractor=TypedValueDependencies(),
            renderer=ConstantRenderer(),
        )
    if kind == KIND_IMPORTS:
        return KindStrategies(
            kind=kind,
            title="Imports",
            names=ImportNames(),
            extractor=ImportDependencies(),
            renderer=ImportRenderer(),
        )
    raise ValueError(f"Unknown declaration kind: {kind}")


__all__ = [
    "ALL_KINDS",
    "KIND_CONSTANTS",
    "KIND_FUNCTIONS",
    "KIND_IMPORTS",
    "KIND_INTERFACES",
    "KIND_STRUCTS",
    "KIND_VARIABLES",
    "KindStrategies",
    "NonEmptyNameValidator",
    "strategies_for",
]
