"""Tests for the tree-sitter Go front end."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, List

import pytest

from declorder.parsing.go import TREE_SITTER_AVAILABLE, GoParser, GoSyntaxError

pytestmark = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE, reason="tree_sitter_language_pack not installed"
)

_SHOP_SOURCE = textwrap.dedent(
    """
    package shop

    import (
    	"context"
    	j "encoding/json"
    	. "math"
    )

    const MaxItems int = 10

    const (
    	Pending Status = iota
    	Shipped
    )

    var registry = map[string]*Order{}

    var timeout time.Duration

    type Status int

    type Order struct {
    	ID       string
    	Customer *Customer
    	Lines    []LineItem
    	Base
    	*Audit
    }

    type Repository interface {
    	Find(ctx context.Context, id string) (*Order, error)
    	Save(*Order) error
    	io.Closer
    }

    func NewOrder(id string, lines ...LineItem) *Order {
    	return nil
    }

    func (o *Order) Total() (sum float64, err error) {
    	return 0, nil
    }
    """
).lstrip("\n")


def _records(kind: str, source: str = _SHOP_SOURCE) -> List[Any]:
    unit = GoParser().parse_source(source, "shop.go")
    mapper = unit.mapper_for(kind)
    records = []
    for node in unit.nodes_for(kind):
        record = mapper.map_node(node)
        if record is not None:
            records.append(record)
    return records


def test_parse_source_reads_package_clause() -> None:
    unit = GoParser().parse_source(_SHOP_SOURCE, "shop.go")

    assert unit.package == "shop"
    assert unit.path == "shop.go"


def test_parse_file_reads_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "demo.go"
    path.write_text("package demo\n\ntype Widget struct{}\n", encoding="utf-8")

    unit = GoParser().parse_file(path)
    structs = [unit.mapper_for("structs").map_node(node) for node in unit.nodes_for("structs")]
    widget = next(record for record in structs if record is not None)

    assert unit.package == "demo"
    assert widget.name == "Widget"
    assert widget.position == f"{path}:3:6"
    assert widget.fields == []


def test_parse_source_rejects_syntax_errors() -> None:
    with pytest.raises(GoSyntaxError) as excinfo:
        GoParser().parse_source("package broken\n\nfunc {\n", "broken.go")

    assert excinfo.value.path == "broken.go"


def test_struct_mapper_renders_named_and_embedded_fields() -> None:
    (order,) = _records("structs")

    assert order.name == "Order"
    assert order.package == "shop"
    assert order.fields == ["ID string", "Customer *Customer", "Lines []LineItem", "Base", "*Audit"]


def test_interface_mapper_renders_method_signatures_without_parameter_names() -> None:
    (repository,) = _records("interfaces")

    assert repository.name == "Repository"
    assert repository.methods == [
        "Find(context.Context, string) (*Order, error)",
        "Save(*Order) error",
        "io.Closer",
    ]


def test_function_mapper_handles_functions_and_methods() -> None:
    functions = {record.name: record for record in _records("functions")}

    new_order = functions["NewOrder"]
    assert new_order.receiver == ""
    assert new_order.parameters == ["id string", "lines ...LineItem"]
    assert new_order.returns == ["*Order"]

    total = functions["Total"]
    assert total.receiver == "*Order"
    assert total.parameters == []
    assert total.returns == ["sum float64", "err error"]


def test_variable_mapper_marks_inferred_types() -> None:
    variables = {record.name: record.type_name for record in _records("variables")}

    assert variables == {"registry": "inferred", "timeout": "time.Duration"}


def test_constant_mapper_captures_type_and_value() -> None:
    constants = [(record.name, record.type_name, record.value) for record in _records("constants")]

    assert constants == [
        ("MaxItems", "int", "10"),
        ("Pending", "Status", "iota"),
        ("Shipped", "", ""),
    ]


def test_import_mapper_keeps_quoted_path_and_alias() -> None:
    imports = [(record.path, record.name) for record in _records("imports")]

    assert imports == [('"context"', ""), ('"encoding/json"', "j"), ('"math"', ".")]


def test_nodes_are_routed_only_to_their_kind() -> None:
    unit = GoParser().parse_source(_SHOP_SOURCE, "shop.go")

    import_nodes = {node.type for node in unit.nodes_for("imports")}
    function_nodes = {node.type for node in unit.nodes_for("functions")}

    assert "import_spec" in import_nodes
    assert "type_spec" not in import_nodes
    assert {"function_declaration", "method_declaration"} <= function_nodes
    assert "const_spec" not in function_nodes


def test_mapper_for_unknown_kind_is_rejected() -> None:
    unit = GoParser().parse_source("package empty\n", "empty.go")

    with pytest.raises(ValueError):
        unit.mapper_for("macros")


def test_channel_directions_are_preserved_in_signatures() -> None:
    source = textwrap.dedent(
        """
        package pipe

        type Sink interface {
        	Feed(chan<- int)
        	Pull() <-chan int
        	Both(chan string) chan<- <-chan error
        }
        """
    ).lstrip("\n")

    (sink,) = _records("interfaces", source)

    assert sink.methods == [
        "Feed(chan<- int)",
        "Pull() <-chan int",
        "Both(chan string) chan<- <-chan error",
    ]


def test_deeply_nested_expressions_do_not_exhaust_the_stack() -> None:
    terms = " + ".join(['"a"'] * 1500)
    source = f"package big\n\nvar Big = {terms}\n\nvar Small int\n"

    variables = {record.name: record.type_name for record in _records("variables", source)}

    assert variables == {"Big": "inferred", "Small": "int"}
