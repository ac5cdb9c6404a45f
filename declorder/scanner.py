"""Go source discovery honouring .gitignore files and the go tool's skip rules."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .logging import get_logger

_SOURCE_SUFFIX = ".go"
_TEST_SUFFIX = "_test.go"


@dataclass(frozen=True)
class IgnoreRule:
    """One gitignore-style pattern, scoped to the directory that declared it."""

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False
    base: str = ""

    @classmethod
    def parse(cls, line: str, *, base: str = "") -> "IgnoreRule | None":
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        # A slash anywhere but the end pins the pattern to ``base``.
        anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(
            pattern=text,
            directory_only=directory_only,
            anchored=anchored,
            negate=negate,
            base=base,
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.base:
            if not rel_path.startswith(f"{self.base}/"):
                return False
            rel_path = rel_path[len(self.base) + 1:]
        if self.anchored:
            return fnmatchcase(rel_path, self.pattern)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


def build_ignore_rule(pattern: str, *, base: str = "") -> IgnoreRule | None:
    return IgnoreRule.parse(pattern, base=base)


@dataclass
class IgnoreRules:
    """Ordered rule list where the last matching rule decides."""

    rules: List[IgnoreRule] = field(default_factory=list)

    def extend(self, rules: Iterable[IgnoreRule]) -> None:
        self.rules.extend(rules)

    def ignored(self, rel_path: str, is_dir: bool) -> bool:
        verdict = False
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                verdict = not rule.negate
        return verdict

    def scoped(self, directory: Path, rel_dir: str) -> "IgnoreRules":
        """Return these rules plus any ``.gitignore`` found in ``directory``."""
        gitignore = directory / ".gitignore"
        if not gitignore.is_file():
            return self
        nested = IgnoreRules(list(self.rules))
        for line in gitignore.read_text(encoding="utf-8").splitlines():
            rule = IgnoreRule.parse(line, base=rel_dir)
            if rule is not None:
                nested.rules.append(rule)
        return nested


def _skipped_by_go_tool(name: str) -> bool:
    return name.startswith((".", "_")) or name == "testdata"


class SourceScanner:
    """Walks a directory tree and returns the Go files to analyze.

    Directories the go tool itself skips (``testdata`` and names starting with
    ``.`` or ``_``) are never entered. ``exclude_paths`` patterns apply from the
    scan root; every ``.gitignore`` applies from the directory that holds it.
    """

    def __init__(
        self, *, include_tests: bool = False, exclude_paths: Sequence[str] = ()
    ) -> None:
        self.include_tests = include_tests
        self.exclude_paths = list(exclude_paths)
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path) -> List[Path]:
        """Return the sorted Go source files under ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        excludes = IgnoreRules()
        excludes.extend(
            rule for rule in map(build_ignore_rule, self.exclude_paths) if rule is not None
        )
        files = sorted(self._walk(root_path, excludes))
        self.logger.debug("Scanner discovered %d Go files under %s", len(files), root_path)
        return files

    def _wanted(self, filename: str) -> bool:
        if not filename.endswith(_SOURCE_SUFFIX) or _skipped_by_go_tool(filename):
            return False
        return self.include_tests or not filename.endswith(_TEST_SUFFIX)

    def _walk(self, root: Path, excludes: IgnoreRules) -> Iterator[Path]:
        scopes = {root: excludes.scoped(root, "")}
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = "" if current == root else current.relative_to(root).as_posix()
            rules = scopes.pop(current)

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _skipped_by_go_tool(name):
                    continue
                if rules.ignored(rel_path, True):
                    self.logger.debug("Ignoring directory %s", rel_path)
                    continue
                kept.append(name)
                scopes[current / name] = rules.scoped(current / name, rel_path)
            dirnames[:] = kept

            for filename in filenames:
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._wanted(filename) and not rules.ignored(rel_path, False):
                    yield current / filename


__all__ = ["IgnoreRule", "IgnoreRules", "SourceScanner", "build_ignore_rule"]
