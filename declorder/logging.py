"""Logger hierarchy and console/file handlers for declorder runs."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "declorder"

_CONSOLE_FORMAT = "[declorder] %(levelname)s %(message)s"
_DEBUG_FORMAT = "[declorder:%(component)s] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ComponentFilter(logging.Filter):
    """Exposes the logger name below ``declorder.`` as ``%(component)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = f"{ROOT_LOGGER}."
        record.component = (
            record.name[len(prefix):] if record.name.startswith(prefix) else record.name
        )
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``declorder.<name>``, or the package logger when no name is given."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Route declorder records to stderr and, optionally, to ``log_file``.

    Verbose runs tag each console line with the emitting component
    (``scanner``, ``orchestrator``, ``resolvers``). The file sink
    always records at DEBUG so a quiet console still leaves a full trace.
    """
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    if verbose:
        console.addFilter(_ComponentFilter())
        console.setFormatter(logging.Formatter(_DEBUG_FORMAT))
    else:
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger", "resolve_level"]
