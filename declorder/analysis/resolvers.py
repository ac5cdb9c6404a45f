"""Dependency-respecting and alphabetical ordering of declaration records."""

from __future__ import annotations

import dataclasses
import heapq
from typing import Callable, Dict, Generic, List, Sequence, Set, TypeVar

from ..logging import get_logger
from .base import DependencyExtractor, DependencyResolver, NameProvider

T = TypeVar("T")

LevelSetter = Callable[[T, int], T]


def replace_level(item: T, level: int) -> T:
    """Return a copy of a dataclass record with ``level`` set."""
    return dataclasses.replace(item, level=level)  # type: ignore[type-var]


def _assign_levels(items: Sequence[T], setter: LevelSetter) -> List[T]:
    return [setter(item, index) for index, item in enumerate(items)]


class TopologicalDependencyResolver(Generic[T]):
    """Kahn's algorithm with a lexicographic ready set.

    Records sharing a name overwrite one another (the later one wins). Records
    that never become ready, because they sit on or behind a cycle, are
    appended after the ordered ones in their original input order.
    """

    def __init__(
        self,
        extractor: DependencyExtractor[T],
        names: NameProvider[T],
        *,
        level_setter: LevelSetter = replace_level,
    ) -> None:
        self._extractor = extractor
        self._names = names
        self._level_setter = level_setter
        self.logger = get_logger("resolvers")

    def resolve(self, items: Sequence[T]) -> List[T]:
        by_name: Dict[str, T] = {}
        for item in items:
            name = self._names.name_of(item)
            if name:
                by_name[name] = item

        dependents: Dict[str, List[str]] = {name: [] for name in by_name}
        in_degree: Dict[str, int] = {name: 0 for name in by_name}
        for name, item in by_name.items():
            for dependency in set(self._extractor.extract(item)):
                if dependency in by_name:
                    dependents[dependency].append(name)
                    in_degree[name] += 1

        ready = [name for name, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)

        ordered: List[T] = []
        processed: Set[str] = set()
        while ready:
            current = heapq.heappop(ready)
            if current in processed:
                continue
            processed.add(current)
            ordered.append(by_name[current])
            for dependent in dependents[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, dependent)

        leftovers = [item for item in items if self._names.name_of(item) not in processed]
        if leftovers:
            self.logger.debug(
                "%d declarations left unordered; appending in input order", len(leftovers)
            )
        ordered.extend(leftovers)
        return _assign_levels(ordered, self._level_setter)


class AlphabeticalDependencyResolver(Generic[T]):
    """Orders records by name alone, ignoring dependencies."""

    def __init__(
        self, names: NameProvider[T], *, level_setter: LevelSetter = replace_level
    ) -> None:
        self._names = names
        self._level_setter = level_setter

    def resolve(self, items: Sequence[T]) -> List[T]:
        ordered = sorted(items, key=self._names.name_of)
        return _assign_levels(ordered, self._level_setter)


class DependencySorter(Generic[T]):
    """Adapts a resolver to the engine's sorter slot."""

    def __init__(self, resolver: DependencyResolver[T]) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> DependencyResolver[T]:
        return self._resolver

    def sort(self, items: Sequence[T]) -> List[T]:
        return self._resolver.resolve(items)


__all__ = [
    "AlphabeticalDependencyResolver",
    "DependencySorter",
    "TopologicalDependencyResolver",
    "replace_level",
]
