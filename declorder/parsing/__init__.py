"""Source-language front ends that turn files into routed syntax nodes."""

from .go import TREE_SITTER_AVAILABLE, GoParser, GoSourceUnit, GoSyntaxError

__all__ = ["GoParser", "GoSourceUnit", "GoSyntaxError", "TREE_SITTER_AVAILABLE"]
