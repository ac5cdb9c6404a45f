"""Human-readable rendering of analysis runs."""

from __future__ import annotations

from typing import List, Sequence

from .config import AnalysisSettings
from .orchestrator import DirectoryReport, KindReport, UnitReport


def format_banner(settings: AnalysisSettings) -> str:
    banner = f"Using {settings.sort_label} sorting"
    if settings.noop_enabled:
        banner += f" with NoOp generation enabled (output: {settings.noop_dir or '-'})"
    return banner


def format_kind(report: KindReport, settings: AnalysisSettings) -> List[str]:
    order = "Dependency Order" if settings.topological else "Alphabetical Order"
    lines = ["", f"--- {report.title} ({order}) ---"]
    for entry in report.items:
        lines.append(f"[Level {entry.level}] {entry.text}")
        if entry.stub is not None:
            lines.append("")
            lines.append("--- NoOp Implementation ---")
            lines.append(entry.stub.source)
    if report.generated_path is not None:
        lines.append(f"Generated NoOp implementations: {report.generated_path}")
    elif report.write_error:
        lines.append(report.write_error)
    return lines


def format_unit(report: UnitReport, settings: AnalysisSettings) -> List[str]:
    lines = ["", f"=== Analyzing file: {report.path} ==="]
    if report.error:
        lines.append(f"Error: {report.error}")
        return lines
    for kind_report in report.kinds:
        lines.extend(format_kind(kind_report, settings))
    return lines


def format_run(reports: Sequence[DirectoryReport], settings: AnalysisSettings) -> str:
    """Render a whole run the way the CLI prints it."""
    lines = [format_banner(settings)]
    for directory in reports:
        lines.append("")
        lines.append(f"=== Analyzing directory: {directory.directory} ===")
        if directory.error:
            lines.append(f"Error: {directory.error}")
            continue
        for unit in directory.units:
            lines.extend(format_unit(unit, settings))
    return "\n".join(lines) + "\n"


__all__ = ["format_banner", "format_kind", "format_run", "format_unit"]
