"""Kind-agnostic analysis engine: map, validate, collect, sort, render, generate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..models import GeneratedStub
from .base import (
    CodeGenerator,
    ContentWriter,
    ImplementationNamer,
    ItemRenderer,
    ItemSorter,
    ItemValidator,
    NameProvider,
    NodeMapper,
    ResultCollector,
)
from .stubs import render_document

T = TypeVar("T")


class GeneratorUnavailableError(RuntimeError):
    """Raised when code generation is requested from an engine without a generator."""


class ListCollector(Generic[T]):
    """Accumulates records in discovery order."""

    def __init__(self) -> None:
        self._items: List[T] = []

    def add(self, item: T) -> None:
        self._items.append(item)

    def results(self) -> List[T]:
        return list(self._items)


class GenericVisitor(Generic[T]):
    """Feeds nodes through a mapper and keeps the valid records."""

    def __init__(
        self,
        mapper: NodeMapper[T],
        collector: ResultCollector[T],
        validator: ItemValidator[T],
    ) -> None:
        self._mapper = mapper
        self._collector = collector
        self._validator = validator

    def visit(self, node: object) -> Optional[T]:
        item = self._mapper.map_node(node)
        if item is not None and self._validator.is_valid(item):
            self._collector.add(item)
        return item

    def results(self) -> List[T]:
        return self._collector.results()


class GenericCodeGenerator(Generic[T]):
    """Bundles a code generator with its implementation namer and writer."""

    def __init__(
        self,
        generator: CodeGenerator[T],
        namer: ImplementationNamer[T],
        writer: Optional[ContentWriter] = None,
    ) -> None:
        self._generator = generator
        self._namer = namer
        self._writer = writer

    def generate(self, item: T) -> str:
        return self._generator.generate(item)

    def implementation_name(self, item: T) -> str:
        return self._namer.implementation_name(item)

    def write(self, content: str, target: str) -> None:
        if self._writer is None:
            raise GeneratorUnavailableError(f"No writer configured for {target}")
        self._writer.write(content, target)


@dataclass
class RenderedItem(Generic[T]):
    """A sorted record, its report text and, when generated, its stub."""

    level: int
    item: T
    text: str
    stub: Optional[GeneratedStub] = None
    name: str = ""


class AnalysisEngine(Generic[T]):
    """Runs one declaration kind through the pipeline.

    The engine knows nothing about which kind it handles; every difference
    lives in the plugged-in strategies.
    """

    def __init__(
        self,
        visitor: GenericVisitor[T],
        sorter: Optional[ItemSorter[T]],
        renderer: ItemRenderer[T],
        code_generator: Optional[GenericCodeGenerator[T]] = None,
        names: Optional[NameProvider[T]] = None,
    ) -> None:
        self._visitor = visitor
        self._names = names
        self._sorter = sorter
        self._renderer = renderer
        self._code_generator = code_generator

    @property
    def generates_code(self) -> bool:
        return self._code_generator is not None

    def analyze(self, nodes: Iterable[object]) -> None:
        for node in nodes:
            self._visitor.visit(node)

    def sorted_results(self) -> List[T]:
        results = self._visitor.results()
        if self._sorter is not None:
            results = self._sorter.sort(results)
        return results

    def render(self, items: Optional[Sequence[T]] = None) -> List[RenderedItem[T]]:
        """Render sorted records, attaching generated stubs when a generator is set."""
        if items is None:
            items = self.sorted_results()
        rendered: List[RenderedItem[T]] = []
        for index, item in enumerate(items):
            text = self._renderer.render(item)
            if not text:
                continue
            stub = self._stub_for(item, index) if self._code_generator is not None else None
            name = self._names.name_of(item) if self._names is not None else ""
            rendered.append(
                RenderedItem(level=index, item=item, text=text, stub=stub, name=name)
            )
        return rendered

    def generate_stubs(self, items: Optional[Sequence[T]] = None) -> List[GeneratedStub]:
        self._require_generator()
        if items is None:
            items = self.sorted_results()
        stubs: List[GeneratedStub] = []
        for index, item in enumerate(items):
            stub = self._stub_for(item, index)
            if stub is not None:
                stubs.append(stub)
        return stubs

    def generate_implementations(self, items: Optional[Sequence[T]] = None) -> Dict[str, str]:
        """Return ``implementation name -> source`` in sorted order."""
        return {stub.name: stub.source for stub in self.generate_stubs(items)}

    def generate_document(
        self, items: Optional[Sequence[T]] = None, *, package: str = "main"
    ) -> str:
        stubs = self.generate_stubs(items)
        return render_document((stub.source for stub in stubs), package=package)

    def write_document(
        self,
        target: str,
        items: Optional[Sequence[T]] = None,
        *,
        package: str = "main",
    ) -> str:
        """Generate the combined document and persist it through the writer."""
        generator = self._require_generator()
        document = self.generate_document(items, package=package)
        generator.write(document, target)
        return document

    def _stub_for(self, item: T, index: int) -> Optional[GeneratedStub]:
        generator = self._require_generator()
        source = generator.generate(item)
        if not source:
            return None
        return GeneratedStub(
            name=generator.implementation_name(item),
            interface=getattr(item, "name", ""),
            level=getattr(item, "level", index),
            source=source,
        )

    def _require_generator(self) -> GenericCodeGenerator[T]:
        if self._code_generator is None:
            raise GeneratorUnavailableError("code generator not available")
        return self._code_generator


__all__ = [
    "AnalysisEngine",
    "GenericCodeGenerator",
    "GenericVisitor",
    "GeneratorUnavailableError",
    "ListCollector",
    "RenderedItem",
]
