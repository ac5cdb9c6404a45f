"""Capability protocols plugged into the generic analysis engine."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class NodeMapper(Protocol[T]):
    """Turns one syntax node into a declaration record, or ``None`` when it does not apply."""

    def map_node(self, node: object) -> Optional[T]:
        ...


class ItemValidator(Protocol[T]):
    def is_valid(self, item: T) -> bool:
        ...


class ResultCollector(Protocol[T]):
    def add(self, item: T) -> None:
        ...

    def results(self) -> List[T]:
        ...


class NameProvider(Protocol[T]):
    """Returns the graph vertex key for a record."""

    def name_of(self, item: T) -> str:
        ...


class DependencyExtractor(Protocol[T]):
    """Returns the names a record textually references, excluding itself."""

    def extract(self, item: T) -> List[str]:
        ...


class DependencyResolver(Protocol[T]):
    """Orders records and assigns each one its level."""

    def resolve(self, items: Sequence[T]) -> List[T]:
        ...


class ItemSorter(Protocol[T]):
    def sort(self, items: Sequence[T]) -> List[T]:
        ...


class ItemRenderer(Protocol[T]):
    def render(self, item: T) -> str:
        ...


class CodeGenerator(Protocol[T]):
    def generate(self, item: T) -> str:
        ...


class ImplementationNamer(Protocol[T]):
    def implementation_name(self, item: T) -> str:
        ...


class ContentWriter(Protocol):
    """Persists named textual content; failures raise ``PersistenceError``."""

    def write(self, content: str, target: str) -> None:
        ...


class SourceUnit(Protocol):
    """One parsed source file able to route its syntax nodes to each kind."""

    path: str
    package: str

    def nodes_for(self, kind: str) -> Iterable[object]:
        ...

    def mapper_for(self, kind: str) -> NodeMapper[Any]:
        ...


__all__ = [
    "CodeGenerator",
    "ContentWriter",
    "DependencyExtractor",
    "DependencyResolver",
    "ImplementationNamer",
    "ItemRenderer",
    "ItemSorter",
    "ItemValidator",
    "NameProvider",
    "NodeMapper",
    "ResultCollector",
    "SourceUnit",
]
