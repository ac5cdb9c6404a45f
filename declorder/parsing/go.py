"""Tree-sitter powered extraction of Go declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..analysis.base import NodeMapper
from ..analysis.kinds import (
    KIND_CONSTANTS,
    KIND_FUNCTIONS,
    KIND_IMPORTS,
    KIND_INTERFACES,
    KIND_STRUCTS,
    KIND_VARIABLES,
)
from ..models import (
    ConstantDecl,
    FunctionDecl,
    ImportDecl,
    InterfaceDecl,
    StructDecl,
    VariableDecl,
)

try:  # pragma: no cover - optional dependency
    from tree_sitter import Parser
    from tree_sitter_language_pack import get_language

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    Parser = None  # type: ignore[assignment,misc]
    get_language = None  # type: ignore[assignment]
    TREE_SITTER_AVAILABLE = False


_WHITESPACE = re.compile(r"\s+")

# Top-level declaration node types routed to each kind.
_DECLARATIONS_BY_KIND: Dict[str, frozenset[str]] = {
    KIND_STRUCTS: frozenset({"type_declaration"}),
    KIND_INTERFACES: frozenset({"type_declaration"}),
    KIND_FUNCTIONS: frozenset({"function_declaration", "method_declaration"}),
    KIND_VARIABLES: frozenset({"var_declaration"}),
    KIND_CONSTANTS: frozenset({"const_declaration"}),
    KIND_IMPORTS: frozenset({"import_declaration"}),
}

_INTERFACE_METHOD_NODES = {"method_elem", "method_spec"}
_PARAMETER_NODES = {"parameter_declaration", "variadic_parameter_declaration"}


class GoSyntaxError(ValueError):
    """Raised when tree-sitter reports syntax errors in a Go file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Failed to parse {path}: syntax error")
        self.path = path


class _Source:
    """Source bytes plus the helpers every mapper needs to read nodes."""

    def __init__(self, path: str, source: bytes, package: str = "") -> None:
        self.path = path
        self.source = source
        self.package = package

    def text(self, node: Any) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def compact(self, node: Any) -> str:
        return _WHITESPACE.sub(" ", self.text(node)).strip()

    def position(self, node: Any) -> str:
        row, column = node.start_point[0], node.start_point[1]
        return f"{self.path}:{row + 1}:{column + 1}"

    # ------------------------------------------------------------------
    # Type rendering

    def render_type(self, node: Any) -> str:
        if node is None:
            return ""
        kind = node.type
        if kind in {"type_identifier", "identifier", "field_identifier", "package_identifier"}:
            return self.text(node)
        if kind == "qualified_type":
            package = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            return f"{self.text(package)}.{self.text(name)}"
        if kind == "pointer_type":
            return "*" + self.render_type(_first_named(node))
        if kind == "slice_type":
            return "[]" + self.render_type(node.child_by_field_name("element"))
        if kind == "array_type":
            length = self.compact(node.child_by_field_name("length"))
            return f"[{length}]" + self.render_type(node.child_by_field_name("element"))
        if kind == "implicit_length_array_type":
            return "[...]" + self.render_type(node.child_by_field_name("element"))
        if kind == "map_type":
            key = self.render_type(node.child_by_field_name("key"))
            value = self.render_type(node.child_by_field_name("value"))
            return f"map[{key}]{value}"
        if kind == "channel_type":
            value = self.render_type(node.child_by_field_name("value"))
            tokens = [child.type for child in node.children if not child.is_named]
            if "<-" not in tokens:
                return f"chan {value}"
            if tokens.index("<-") < tokens.index("chan"):
                return f"<-chan {value}"
            return f"chan<- {value}"
        if kind == "function_type":
            return "func" + self.render_signature_tail(node)
        if kind == "interface_type":
            return "interface{}"
        if kind == "parenthesized_type":
            return self.render_type(_first_named(node))
        return self.compact(node)

    def parameter_types(self, parameter_list: Any) -> List[str]:
        """Return one type per declared parameter, names dropped."""
        types: List[str] = []
        for param in _named_children(parameter_list):
            if param.type not in _PARAMETER_NODES:
                continue
            rendered = self._parameter_type(param)
            names = param.children_by_field_name("name")
            types.extend([rendered] * max(len(names), 1))
        return types

    def parameters(self, parameter_list: Any) -> List[str]:
        """Return ``"name type"`` entries, or the bare type for unnamed parameters."""
        entries: List[str] = []
        for param in _named_children(parameter_list):
            if param.type not in _PARAMETER_NODES:
                continue
            rendered = self._parameter_type(param)
            names = param.children_by_field_name("name")
            if names:
                entries.extend(f"{self.text(name)} {rendered}" for name in names)
            else:
                entries.append(rendered)
        return entries

    def results(self, result: Any, render: Callable[[Any], List[str]]) -> List[str]:
        if result is None:
            return []
        if result.type == "parameter_list":
            return render(result)
        return [self.render_type(result)]

    def render_signature_tail(self, node: Any) -> str:
        """Render ``(T1, T2) R`` for a function type or interface method node."""
        params = ", ".join(self.parameter_types(node.child_by_field_name("parameters")))
        results = self.results(node.child_by_field_name("result"), self.parameter_types)
        tail = f"({params})"
        if len(results) == 1:
            tail += f" {results[0]}"
        elif len(results) > 1:
            tail += f" ({', '.join(results)})"
        return tail

    def _parameter_type(self, param: Any) -> str:
        rendered = self.render_type(param.child_by_field_name("type"))
        if param.type == "variadic_parameter_declaration":
            return "..." + rendered
        return rendered


def _named_children(node: Any) -> List[Any]:
    if node is None:
        return []
    return [child for child in node.children if child.is_named and child.type != "comment"]


def _first_named(node: Any) -> Any:
    children = _named_children(node)
    return children[0] if children else None


def _walk(node: Any) -> Iterator[Any]:
    """Yield ``node`` and its descendants in preorder without recursing."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


class StructNodeMapper:
    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[StructDecl]:
        if node.type != "type_spec":
            return None
        type_node = node.child_by_field_name("type")
        if type_node is None or type_node.type != "struct_type":
            return None
        fields: List[str] = []
        for field_list in _named_children(type_node):
            for declaration in _named_children(field_list):
                if declaration.type == "field_declaration":
                    fields.extend(self._fields(declaration))
        name = node.child_by_field_name("name")
        return StructDecl(
            name=self._source.text(name),
            package=self._source.package,
            position=self._source.position(name or node),
            fields=fields,
        )

    def _fields(self, declaration: Any) -> List[str]:
        rendered = self._source.render_type(declaration.child_by_field_name("type"))
        names = declaration.children_by_field_name("name")
        if names:
            return [f"{self._source.text(name)} {rendered}" for name in names]
        if any(child.type == "*" for child in declaration.children):
            rendered = "*" + rendered
        return [rendered]


class InterfaceNodeMapper:
    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[InterfaceDecl]:
        if node.type != "type_spec":
            return None
        type_node = node.child_by_field_name("type")
        if type_node is None or type_node.type != "interface_type":
            return None
        methods: List[str] = []
        for element in _named_children(type_node):
            if element.type in _INTERFACE_METHOD_NODES:
                method_name = self._source.text(element.child_by_field_name("name"))
                methods.append(method_name + self._source.render_signature_tail(element))
            else:
                methods.append(self._source.compact(element))
        name = node.child_by_field_name("name")
        return InterfaceDecl(
            name=self._source.text(name),
            package=self._source.package,
            position=self._source.position(name or node),
            methods=methods,
        )


class FunctionNodeMapper:
    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[FunctionDecl]:
        if node.type not in {"function_declaration", "method_declaration"}:
            return None
        receiver = ""
        receiver_list = node.child_by_field_name("receiver")
        if receiver_list is not None:
            receiver_types = self._source.parameter_types(receiver_list)
            receiver = receiver_types[0] if receiver_types else ""
        return FunctionDecl(
            name=self._source.text(node.child_by_field_name("name")),
            package=self._source.package,
            position=self._source.position(node),
            receiver=receiver,
            parameters=self._source.parameters(node.child_by_field_name("parameters")),
            returns=self._source.results(
                node.child_by_field_name("result"), self._source.parameters
            ),
        )


class VariableNodeMapper:
    """Maps a ``var_spec`` to its first declared name."""

    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[VariableDecl]:
        if node.type != "var_spec":
            return None
        names = node.children_by_field_name("name")
        if not names:
            return None
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            type_name = self._source.render_type(type_node)
        elif node.child_by_field_name("value") is not None:
            type_name = "inferred"
        else:
            type_name = ""
        return VariableDecl(
            name=self._source.text(names[0]),
            package=self._source.package,
            position=self._source.position(names[0]),
            type_name=type_name,
        )


class ConstantNodeMapper:
    """Maps a ``const_spec`` to its first declared name and value."""

    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[ConstantDecl]:
        if node.type != "const_spec":
            return None
        names = node.children_by_field_name("name")
        if not names:
            return None
        values = _named_children(node.child_by_field_name("value"))
        return ConstantDecl(
            name=self._source.text(names[0]),
            package=self._source.package,
            position=self._source.position(names[0]),
            type_name=self._source.render_type(node.child_by_field_name("type")),
            value=self._source.compact(values[0]) if values else "",
        )


class ImportNodeMapper:
    def __init__(self, source: _Source) -> None:
        self._source = source

    def map_node(self, node: Any) -> Optional[ImportDecl]:
        if node.type != "import_spec":
            return None
        path = self._source.text(node.child_by_field_name("path"))
        return ImportDecl(
            name=self._source.text(node.child_by_field_name("name")),
            package=path,
            position=self._source.position(node),
            path=path,
        )


_MAPPERS: Dict[str, Callable[[_Source], NodeMapper[Any]]] = {
    KIND_STRUCTS: StructNodeMapper,
    KIND_INTERFACES: InterfaceNodeMapper,
    KIND_FUNCTIONS: FunctionNodeMapper,
    KIND_VARIABLES: VariableNodeMapper,
    KIND_CONSTANTS: ConstantNodeMapper,
    KIND_IMPORTS: ImportNodeMapper,
}


@dataclass
class GoSourceUnit:
    """One parsed Go file."""

    path: str
    package: str
    root: Any
    source: bytes

    @property
    def declarations(self) -> List[Any]:
        return _named_children(self.root)

    def nodes_for(self, kind: str) -> Iterator[Any]:
        """Yield every node of the top-level declarations routed to ``kind``."""
        routed = _DECLARATIONS_BY_KIND.get(kind, frozenset())
        for declaration in self.declarations:
            if declaration.type in routed:
                yield from _walk(declaration)

    def mapper_for(self, kind: str) -> NodeMapper[Any]:
        try:
            factory = _MAPPERS[kind]
        except KeyError as exc:
            raise ValueError(f"Unknown declaration kind: {kind}") from exc
        return factory(_Source(self.path, self.source, self.package))


class GoParser:
    """Parses Go sources into ``GoSourceUnit`` objects."""

    def __init__(self) -> None:
        self._parser: Optional[Any] = None

    def parse_file(self, path: Path | str) -> GoSourceUnit:
        file_path = Path(path)
        return self.parse_source(file_path.read_bytes(), str(path))

    def parse_source(self, source: bytes | str, path: str = "<memory>") -> GoSourceUnit:
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = self._get_parser().parse(source)
        root = tree.root_node
        if root.has_error:
            raise GoSyntaxError(path)
        reader = _Source(path, source)
        package = ""
        for child in _named_children(root):
            if child.type == "package_clause":
                package = reader.text(_first_named(child))
                break
        return GoSourceUnit(path=path, package=package, root=root, source=source)

    def _get_parser(self) -> Any:
        if self._parser is not None:
            return self._parser
        if not TREE_SITTER_AVAILABLE:
            raise RuntimeError(
                "tree-sitter is required to parse Go sources. "
                "Install it with `pip install tree-sitter tree-sitter-language-pack`."
            )
        self._parser = Parser(get_language("go"))
        return self._parser


__all__ = [
    "GoParser",
    "GoSourceUnit",
    "GoSyntaxError",
    "TREE_SITTER_AVAILABLE",
]
