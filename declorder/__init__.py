"""Dependency-ordered declaration analysis and no-op stub generation for Go sources."""

__version__ = "0.1.0"
