"""Tests for the topological and alphabetical resolvers."""

from __future__ import annotations

import random
from typing import Dict, List

from declorder.analysis.kinds import DeclarationNames, StructDependencies
from declorder.analysis.resolvers import (
    AlphabeticalDependencyResolver,
    DependencySorter,
    TopologicalDependencyResolver,
)
from declorder.models import StructDecl


def _struct(name: str, *fields: str) -> StructDecl:
    return StructDecl(name=name, package="shop", position=f"{name.lower()}.go:1:6", fields=list(fields))


def _topo() -> TopologicalDependencyResolver[StructDecl]:
    return TopologicalDependencyResolver(StructDependencies(), DeclarationNames())


def _names(items: List[StructDecl]) -> List[str]:
    return [item.name for item in items]


def test_independent_items_are_emitted_alphabetically() -> None:
    result = _topo().resolve([_struct("Bravo"), _struct("Alpha")])

    assert _names(result) == ["Alpha", "Bravo"]
    assert [item.level for item in result] == [0, 1]


def test_dependencies_precede_dependents() -> None:
    items = [
        _struct("Order", "Customer *Customer", "Lines []LineItem"),
        _struct("LineItem", "Product Product", "Qty int"),
        _struct("Customer", "Address Address"),
        _struct("Product"),
        _struct("Address"),
    ]

    result = _topo().resolve(items)
    levels: Dict[str, int] = {item.name: item.level for item in result}

    assert _names(result) == ["Address", "Customer", "Product", "LineItem", "Order"]
    assert levels["Address"] < levels["Customer"] < levels["Order"]
    assert levels["Product"] < levels["LineItem"] < levels["Order"]


def test_order_is_deterministic_across_input_permutations() -> None:
    items = [
        _struct("Order", "Customer *Customer", "Lines []LineItem"),
        _struct("LineItem", "Product Product"),
        _struct("Customer"),
        _struct("Product"),
        _struct("Zebra"),
        _struct("Aardvark", "Zebra Zebra"),
    ]
    expected = _names(_topo().resolve(items))

    shuffler = random.Random(7)
    for _ in range(10):
        shuffled = list(items)
        shuffler.shuffle(shuffled)
        assert _names(_topo().resolve(shuffled)) == expected


def test_cycle_members_are_appended_in_input_order() -> None:
    items = [
        _struct("B", "Peer *A"),
        _struct("Root"),
        _struct("A", "Peer *B"),
    ]

    result = _topo().resolve(items)

    assert _names(result) == ["Root", "B", "A"]
    assert [item.level for item in result] == [0, 1, 2]


def test_items_downstream_of_a_cycle_follow_the_cycle_tail() -> None:
    items = [
        _struct("Leaf", "Owner *A"),
        _struct("A", "Peer *B"),
        _struct("B", "Peer *A"),
    ]

    result = _topo().resolve(items)

    assert _names(result) == ["Leaf", "A", "B"]


def test_unknown_dependencies_do_not_affect_order() -> None:
    items = [_struct("Beta", "Clock time.Clock"), _struct("Alpha", "Conn net.Conn")]

    assert _names(_topo().resolve(items)) == ["Alpha", "Beta"]


def test_duplicate_names_keep_the_last_registered_record() -> None:
    first = _struct("Config", "Path string")
    second = _struct("Config", "Path string", "Retries int")

    result = _topo().resolve([first, second])

    assert len(result) == 1
    assert result[0].fields == second.fields


def test_self_reference_is_ignored() -> None:
    result = _topo().resolve([_struct("Node", "Next *Node")])

    assert _names(result) == ["Node"]
    assert result[0].level == 0


def test_resolver_does_not_mutate_inputs() -> None:
    items = [_struct("Bravo"), _struct("Alpha")]

    _topo().resolve(items)

    assert [item.level for item in items] == [0, 0]


def test_alphabetical_resolver_ignores_dependencies() -> None:
    resolver = AlphabeticalDependencyResolver(DeclarationNames())
    items = [_struct("Order", "Customer *Customer"), _struct("Customer", "Order *Order"), _struct("Address")]

    result = resolver.resolve(items)

    assert _names(result) == ["Address", "Customer", "Order"]
    assert [item.level for item in result] == [0, 1, 2]


def test_dependency_sorter_delegates_to_resolver() -> None:
    sorter = DependencySorter(_topo())

    result = sorter.sort([_struct("Wheel"), _struct("Car", "Wheels []Wheel")])

    assert _names(result) == ["Wheel", "Car"]
