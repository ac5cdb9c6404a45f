"""Dependency extraction, ordering and stub generation for declaration records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

from .base import ContentWriter, NodeMapper, SourceUnit
from .dependencies import extract_type_dependencies
from .engine import (
    AnalysisEngine,
    GenericCodeGenerator,
    GenericVisitor,
    GeneratorUnavailableError,
    ListCollector,
    RenderedItem,
)
from .kinds import ALL_KINDS, KindStrategies, NonEmptyNameValidator, strategies_for
from .resolvers import (
    AlphabeticalDependencyResolver,
    DependencySorter,
    TopologicalDependencyResolver,
)

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..config import AnalysisSettings


def build_engine(
    strategies: KindStrategies,
    mapper: NodeMapper[Any],
    *,
    topological: bool = True,
    generate: bool = False,
    writer: Optional[ContentWriter] = None,
) -> AnalysisEngine[Any]:
    """Wire one kind's strategies into a fresh engine."""
    visitor: GenericVisitor[Any] = GenericVisitor(
        mapper, ListCollector(), NonEmptyNameValidator(strategies.names)
    )
    if topological:
        resolver: Any = TopologicalDependencyResolver(strategies.extractor, strategies.names)
    else:
        resolver = AlphabeticalDependencyResolver(strategies.names)

    code_generator = None
    if generate and strategies.generator is not None and strategies.namer is not None:
        code_generator = GenericCodeGenerator(strategies.generator, strategies.namer, writer)

    return AnalysisEngine(
        visitor,
        DependencySorter(resolver),
        strategies.renderer,
        code_generator,
        names=strategies.names,
    )


@dataclass
class EngineSet:
    """The engines active for one source unit, in report order."""

    strategies: Dict[str, KindStrategies] = field(default_factory=dict)
    engines: Dict[str, AnalysisEngine[Any]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Tuple[KindStrategies, AnalysisEngine[Any]]]:
        for kind, engine in self.engines.items():
            yield self.strategies[kind], engine

    def __len__(self) -> int:
        return len(self.engines)

    @property
    def kinds(self) -> List[str]:
        return list(self.engines)

    def analyze(self, unit: SourceUnit) -> None:
        for kind, engine in self.engines.items():
            engine.analyze(unit.nodes_for(kind))


def build_engines(
    unit: SourceUnit,
    settings: "AnalysisSettings",
    *,
    writer: Optional[ContentWriter] = None,
) -> EngineSet:
    """Build a fresh engine per active kind for ``unit``."""
    engine_set = EngineSet()
    for kind in settings.kinds:
        strategies = strategies_for(kind)
        engine_set.strategies[kind] = strategies
        engine_set.engines[kind] = build_engine(
            strategies,
            unit.mapper_for(kind),
            topological=settings.topological,
            generate=settings.noop_enabled,
            writer=writer,
        )
    return engine_set


__all__ = [
    "ALL_KINDS",
    "AnalysisEngine",
    "EngineSet",
    "GeneratorUnavailableError",
    "KindStrategies",
    "RenderedItem",
    "build_engine",
    "build_engines",
    "extract_type_dependencies",
    "strategies_for",
]
