"""CLI entrypoints for declorder commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .analysis.kinds import ALL_KINDS
from .config import (
    SORT_ALPHABETICAL,
    SORT_TOPOLOGICAL,
    AnalysisSettings,
    ConfigError,
    load_config,
)
from .logging import configure_logging
from .orchestrator import Orchestrator, split_directories
from .report import format_run


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_kind_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("declaration kinds")
    for kind in ALL_KINDS:
        group.add_argument(
            f"--{kind}",
            action="store_true",
            help=f"Show {kind}.",
        )
    group.add_argument(
        "--all",
        action="store_true",
        help="Show every declaration kind (the default when none is selected).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declorder",
        description="Order Go declarations by their dependencies and generate no-op interface stubs.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a DEBUG-level log to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze Go sources and print declarations in dependency order.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Directories to analyze; comma-separated lists are accepted (defaults to current directory).",
    )
    _add_kind_options(analyze_parser)
    sort_group = analyze_parser.add_mutually_exclusive_group()
    sort_group.add_argument(
        "--topo",
        dest="sort",
        action="store_const",
        const=SORT_TOPOLOGICAL,
        help="Use topological sorting based on dependencies (default).",
    )
    sort_group.add_argument(
        "--alpha",
        dest="sort",
        action="store_const",
        const=SORT_ALPHABETICAL,
        help="Use alphabetical sorting instead of topological.",
    )
    analyze_parser.add_argument(
        "--noop",
        action="store_true",
        default=None,
        help="Generate NoOp implementations for interfaces.",
    )
    analyze_parser.add_argument(
        "--noop-dir",
        default=None,
        help=(
            "Directory to save NoOp implementations (default: noop.output_dir from "
            ".declorder.yml, else ./noop under the working directory)."
        ),
    )
    analyze_parser.add_argument(
        "--noop-package",
        default=None,
        help="Package name declared in generated NoOp files (default: main).",
    )
    analyze_parser.add_argument(
        "--include-tests",
        action="store_true",
        default=None,
        help="Also analyze _test.go files.",
    )
    analyze_parser.add_argument(
        "--config",
        default=None,
        help="Path to .declorder.yml or the directory containing it.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing analysis results.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _selected_kinds(args: argparse.Namespace) -> Optional[List[str]]:
    if getattr(args, "all", False):
        return list(ALL_KINDS)
    selected = [kind for kind in ALL_KINDS if getattr(args, kind, False)]
    return selected or None


def build_settings(args: argparse.Namespace, directories: List[str]) -> AnalysisSettings:
    """Merge CLI flags over the configuration file."""
    if args.config:
        config_path = Path(args.config)
    else:
        config_path = Path(directories[0]) if directories else Path.cwd()
        if not config_path.is_dir():
            config_path = Path.cwd()
    config = load_config(config_path)
    noop_dir = args.noop_dir
    if noop_dir is not None:
        noop_dir = str(Path(noop_dir).expanduser().resolve())
    return AnalysisSettings.from_config(
        config,
        kinds=_selected_kinds(args),
        sort=args.sort,
        noop_enabled=args.noop,
        noop_dir=noop_dir,
        noop_package=args.noop_package,
        include_tests=args.include_tests,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declorder commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file
    )

    if args.command == "analyze":
        directories = split_directories(args.paths)
        try:
            settings = build_settings(args, directories)
        except ConfigError as exc:
            parser.exit(1, f"declorder analyze failed: {exc}\n")
        orchestrator = Orchestrator()
        try:
            reports = orchestrator.run(directories, settings)
        except RuntimeError as exc:
            parser.exit(1, f"declorder analyze failed: {exc}\nRun with --verbose for more details.\n")
        sys.stdout.write(format_run(reports, settings))
        if any(report.error for report in reports):
            parser.exit(1)
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
