"""Core data models shared across declorder components."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Declaration:
    """One analyzed declaration with its assigned ordering level."""

    name: str = ""
    package: str = ""
    position: str = ""
    level: int = 0


@dataclass
class StructDecl(Declaration):
    """Struct type with its fields rendered as ``"name type"`` strings."""

    fields: List[str] = field(default_factory=list)


@dataclass
class InterfaceDecl(Declaration):
    """Interface type with raw method signatures such as ``Read([]byte) (int, error)``."""

    methods: List[str] = field(default_factory=list)


@dataclass
class FunctionDecl(Declaration):
    """Top-level function, or method when ``receiver`` is set."""

    receiver: str = ""
    parameters: List[str] = field(default_factory=list)
    returns: List[str] = field(default_factory=list)


@dataclass
class VariableDecl(Declaration):
    type_name: str = ""


@dataclass
class ConstantDecl(Declaration):
    type_name: str = ""
    value: str = ""


@dataclass
class ImportDecl(Declaration):
    """Import spec; ``name`` holds the alias and ``path`` the quoted import path."""

    path: str = ""


@dataclass
class GeneratedStub:
    """Generated no-op implementation source for one interface."""

    name: str
    interface: str
    level: int
    source: str
