"""Run orchestration: scan directories, analyze each Go file, write generated stubs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from .analysis import RenderedItem, build_engines
from .analysis.base import ContentWriter
from .config import AnalysisSettings
from .logging import get_logger
from .models import GeneratedStub
from .parsing import GoParser, GoSyntaxError
from .scanner import SourceScanner
from .stores import FileContentWriter, PersistenceError


@dataclass
class KindReport:
    """Sorted and rendered declarations of one kind within a file."""

    kind: str
    title: str
    items: List[RenderedItem[Any]] = field(default_factory=list)
    stubs: List[GeneratedStub] = field(default_factory=list)
    generated_path: Optional[Path] = None
    write_error: Optional[str] = None


@dataclass
class UnitReport:
    """Analysis result for one source file."""

    path: str
    package: str = ""
    kinds: List[KindReport] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def generated_paths(self) -> List[Path]:
        return [report.generated_path for report in self.kinds if report.generated_path]


@dataclass
class DirectoryReport:
    """Analysis results for every file found under one directory."""

    directory: str
    units: List[UnitReport] = field(default_factory=list)
    error: Optional[str] = None


ScannerFactory = Callable[[AnalysisSettings], SourceScanner]


def _default_scanner(settings: AnalysisSettings) -> SourceScanner:
    return SourceScanner(
        include_tests=settings.include_tests, exclude_paths=settings.exclude_paths
    )


def split_directories(values: Iterable[str]) -> List[str]:
    """Expand comma-separated entries, drop blanks and sort."""
    directories: List[str] = []
    for value in values:
        directories.extend(part.strip() for part in value.split(","))
    return sorted(directory for directory in directories if directory)


class Orchestrator:
    """Coordinates scanning, per-file analysis and stub persistence."""

    def __init__(
        self,
        parser: GoParser | None = None,
        writer: ContentWriter | None = None,
        scanner_factory: ScannerFactory | None = None,
    ) -> None:
        self.parser = parser or GoParser()
        self.writer = writer or FileContentWriter()
        self._scanner_factory = scanner_factory or _default_scanner
        self.logger = get_logger("orchestrator")

    def run(
        self,
        directories: Iterable[str],
        settings: AnalysisSettings,
        *,
        write: bool = True,
    ) -> List[DirectoryReport]:
        """Analyze every Go file under each directory."""
        scanner = self._scanner_factory(settings)
        self.logger.debug(
            "Using %s sorting for kinds: %s", settings.sort_label, ", ".join(settings.kinds)
        )
        reports: List[DirectoryReport] = []
        for directory in split_directories(directories):
            report = DirectoryReport(directory=directory)
            reports.append(report)
            try:
                files = scanner.scan(directory)
            except (FileNotFoundError, NotADirectoryError) as exc:
                self.logger.error("Error analyzing directory %s: %s", directory, exc)
                report.error = str(exc)
                continue
            self.logger.info("Analyzing %d files in %s", len(files), directory)
            for path in files:
                report.units.append(self.analyze_file(path, settings, write=write))
        return reports

    def analyze_file(
        self,
        path: Path | str,
        settings: AnalysisSettings,
        *,
        write: bool = True,
    ) -> UnitReport:
        """Parse one file and run every active kind through its engine."""
        display_path = str(path)
        try:
            unit = self.parser.parse_file(path)
        except (GoSyntaxError, OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Skipping %s: %s", display_path, exc)
            return UnitReport(path=display_path, error=str(exc))

        report = UnitReport(path=display_path, package=unit.package)
        engines = build_engines(unit, settings, writer=self.writer)
        engines.analyze(unit)

        for strategies, engine in engines:
            items = engine.sorted_results()
            rendered = engine.render(items)
            self.logger.debug(
                "%s: %d %s", display_path, len(items), strategies.kind
            )
            kind_report = KindReport(
                kind=strategies.kind,
                title=strategies.title,
                items=rendered,
                stubs=[entry.stub for entry in rendered if entry.stub is not None],
            )
            report.kinds.append(kind_report)

            if not (write and engine.generates_code and settings.noop_dir and kind_report.stubs):
                continue
            target = settings.noop_dir / f"noop_{Path(display_path).stem}_{strategies.kind}.go"
            try:
                engine.write_document(str(target), items, package=settings.noop_package)
            except PersistenceError as exc:
                self.logger.warning("Failed to generate NoOp file %s: %s", exc.target, exc.cause)
                kind_report.write_error = str(exc)
            else:
                kind_report.generated_path = target
        return report


__all__ = [
    "DirectoryReport",
    "KindReport",
    "Orchestrator",
    "UnitReport",
    "split_directories",
]
