"""Tests for no-op stub synthesis."""

from __future__ import annotations

import pytest

from declorder.analysis.stubs import (
    GENERATED_HEADER,
    NoOpCodeGenerator,
    NoOpImplementationNamer,
    generate_method,
    parse_method_signature,
    render_document,
    zero_value,
    zero_values,
)
from declorder.models import InterfaceDecl


def test_parse_method_signature_splits_name_params_and_results() -> None:
    parsed = parse_method_signature("Read([]byte) (int, error)")

    assert parsed is not None
    assert parsed.name == "Read"
    assert parsed.params == "[]byte"
    assert parsed.results == "(int, error)"


def test_parse_method_signature_tracks_nested_parens() -> None:
    parsed = parse_method_signature("Walk(func(Node) bool) error")

    assert parsed is not None
    assert parsed.params == "func(Node) bool"
    assert parsed.results == "error"


@pytest.mark.parametrize("signature", ["io.Reader", "(int)", "Broken(int"])
def test_parse_method_signature_rejects_unparseable(signature: str) -> None:
    assert parse_method_signature(signature) is None


@pytest.mark.parametrize(
    ("type_name", "expected"),
    [
        ("bool", "false"),
        ("string", '""'),
        ("int64", "0"),
        ("byte", "0"),
        ("float64", "0.0"),
        ("complex128", "0+0i"),
        ("error", "nil"),
        ("*Widget", "nil"),
        ("[]string", "nil"),
        ("map[string]int", "nil"),
        ("<-chan Event", "nil"),
        ("func() error", "nil"),
        ("interface{}", "nil"),
        ("context.Context", "nil"),
        ("Widget", "Widget{}"),
    ],
)
def test_zero_value(type_name: str, expected: str) -> None:
    assert zero_value(type_name) == expected


def test_zero_values_for_result_clauses() -> None:
    assert zero_values("(int, error)") == "0, nil"
    assert zero_values("string") == '""'
    assert zero_values("*Widget") == "nil"
    assert zero_values("Widget") == "Widget{}"
    assert zero_values("") == ""


def test_zero_values_use_declared_type_of_named_results() -> None:
    assert zero_values("(n int, err error)") == "0, nil"
    assert zero_values("(fn func(int, string) bool, ok bool)") == "nil, false"


def test_zero_values_keep_unnamed_keyword_types_whole() -> None:
    assert zero_values("(chan int, map[string]int, func() error)") == "nil, nil, nil"
    assert zero_values("(<-chan Event, Widget)") == "nil, Widget{}"


def test_generate_method_renders_body_with_zero_values() -> None:
    method = generate_method("Lookup(string) (*User, bool)", "NoOpStore", 2)

    assert method.splitlines() == [
        "// Lookup is a no-op implementation (Level 2)",
        "func (n *NoOpStore) Lookup(string) (*User, bool) {",
        "\t// TODO: Implement Lookup (Level 2)",
        "\treturn nil, false",
        "}",
    ]


def test_generate_method_without_results_has_no_return() -> None:
    method = generate_method("Close()", "NoOpCloser", 0)

    assert "return" not in method
    assert "func (n *NoOpCloser) Close() {" in method


def test_generate_method_skips_embedded_interfaces() -> None:
    assert generate_method("io.Reader", "NoOpStream", 0) == ""


def test_noop_generator_emits_type_constructor_accessor_and_methods() -> None:
    interface = InterfaceDecl(
        name="Writer",
        package="storage",
        position="writer.go:3:6",
        methods=["Write(Reader) (int, error)", "Flush() error", "io.Closer"],
        level=1,
    )

    source = NoOpCodeGenerator().generate(interface)

    assert "// NoOpWriter is a no-op implementation of Writer interface (Level 1)" in source
    assert "type NoOpWriter struct {\n\tlevel int // Dependency level: 1\n}" in source
    assert "func NewNoOpWriter(level int) *NoOpWriter {\n\treturn &NoOpWriter{level: level}\n}" in source
    assert "func (n *NoOpWriter) GetLevel() int {\n\treturn n.level\n}" in source
    assert "func (n *NoOpWriter) Write(Reader) (int, error) {" in source
    assert "\treturn 0, nil" in source
    assert "func (n *NoOpWriter) Flush() error {" in source
    assert "Closer" not in source


def test_noop_generator_ignores_nameless_interfaces() -> None:
    assert NoOpCodeGenerator().generate(InterfaceDecl(name="")) == ""


def test_implementation_namer() -> None:
    assert NoOpImplementationNamer().implementation_name(InterfaceDecl(name="Cache")) == "NoOpCache"


def test_render_document_prefixes_header_and_package() -> None:
    document = render_document(["type A struct{}\n", "", "type B struct{}\n"], package="mocks")

    assert document.startswith(f"{GENERATED_HEADER}\n\npackage mocks\n\n")
    assert document.endswith("type A struct{}\n\ntype B struct{}\n\n")
