"""Persistence backends for generated output."""

from .file_writer import FileContentWriter, PersistenceError

__all__ = ["FileContentWriter", "PersistenceError"]
