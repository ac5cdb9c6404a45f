"""Filesystem persistence for generated stub documents."""

from __future__ import annotations

from pathlib import Path
from typing import List


class PersistenceError(RuntimeError):
    """Raised when generated content cannot be written to its target."""

    def __init__(self, target: str, cause: OSError) -> None:
        super().__init__(f"Failed to write {target}: {cause}")
        self.target = target
        self.cause = cause


class FileContentWriter:
    """Writes content to paths, creating parent directories on demand."""

    def __init__(self, *, create_parents: bool = True) -> None:
        self._create_parents = create_parents
        self.written: List[Path] = []

    def write(self, content: str, target: str) -> None:
        path = Path(target)
        try:
            if self._create_parents:
                path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(str(target), exc) from exc
        self.written.append(path)


__all__ = ["FileContentWriter", "PersistenceError"]
