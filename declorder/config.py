"""Configuration loading for declorder (.declorder.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .analysis.kinds import ALL_KINDS

CONFIG_FILENAME = ".declorder.yml"

SORT_TOPOLOGICAL = "topological"
SORT_ALPHABETICAL = "alphabetical"
_SORT_MODES = {SORT_TOPOLOGICAL, SORT_ALPHABETICAL}

DEFAULT_NOOP_DIR = "noop"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class NoOpConfig:
    """No-op stub generation settings."""

    enabled: bool = False
    # Relative to the config file; unset means DEFAULT_NOOP_DIR under the working directory.
    output_dir: Optional[str] = None
    package: str = "main"


@dataclass
class DeclOrderConfig:
    """Represents the settings defined in .declorder.yml."""

    root: Path
    kinds: List[str] = field(default_factory=lambda: list(ALL_KINDS))
    sort: str = SORT_TOPOLOGICAL
    include_tests: bool = False
    exclude_paths: List[str] = field(default_factory=list)
    noop: NoOpConfig = field(default_factory=NoOpConfig)


@dataclass(frozen=True)
class AnalysisSettings:
    """Explicit per-run settings: which kinds are active and how they are ordered and generated."""

    kinds: Tuple[str, ...] = ALL_KINDS
    topological: bool = True
    noop_enabled: bool = False
    noop_dir: Optional[Path] = None
    noop_package: str = "main"
    include_tests: bool = False
    exclude_paths: Tuple[str, ...] = ()

    @property
    def sort_label(self) -> str:
        return "Topological" if self.topological else "Alphabetical"

    @classmethod
    def from_config(
        cls,
        config: DeclOrderConfig,
        *,
        kinds: Optional[Sequence[str]] = None,
        sort: Optional[str] = None,
        noop_enabled: Optional[bool] = None,
        noop_dir: Optional[str] = None,
        noop_package: Optional[str] = None,
        include_tests: Optional[bool] = None,
    ) -> "AnalysisSettings":
        """Merge CLI or request overrides over the loaded configuration."""
        selected = normalize_kinds(kinds) if kinds else normalize_kinds(config.kinds)
        sort_mode = _validate_sort(sort or config.sort)
        if noop_dir is not None:
            output_path = Path(noop_dir).expanduser().resolve()
        elif config.noop.output_dir:
            output_path = Path(config.noop.output_dir).expanduser()
            if not output_path.is_absolute():
                output_path = config.root / output_path
        else:
            output_path = Path.cwd() / DEFAULT_NOOP_DIR
        return cls(
            kinds=selected,
            topological=sort_mode == SORT_TOPOLOGICAL,
            noop_enabled=config.noop.enabled if noop_enabled is None else noop_enabled,
            noop_dir=output_path,
            noop_package=noop_package or config.noop.package,
            include_tests=config.include_tests if include_tests is None else include_tests,
            exclude_paths=tuple(config.exclude_paths),
        )


def normalize_kinds(kinds: Sequence[str]) -> Tuple[str, ...]:
    """Return the requested kinds in canonical order; empty selects every kind."""
    requested = {kind.strip().lower() for kind in kinds if kind and kind.strip()}
    if not requested or "all" in requested:
        return ALL_KINDS
    unknown = requested.difference(ALL_KINDS)
    if unknown:
        raise ConfigError(f"Unknown declaration kinds: {', '.join(sorted(unknown))}")
    return tuple(kind for kind in ALL_KINDS if kind in requested)


def load_config(config_path: Path) -> DeclOrderConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DeclOrderConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DeclOrderConfig(root=root)

    kinds = _as_str_list(data.get("kinds"))
    if kinds:
        config.kinds = list(normalize_kinds(kinds))

    sort = _as_str(data.get("sort"))
    if sort:
        config.sort = _validate_sort(sort)

    include_tests = _as_bool(data.get("include_tests"))
    if include_tests is not None:
        config.include_tests = include_tests

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    noop_data = _as_dict(data.get("noop"))
    if noop_data:
        enabled = _as_bool(noop_data.get("enabled"))
        config.noop = NoOpConfig(
            enabled=bool(enabled),
            output_dir=_as_str(noop_data.get("output_dir")) or NoOpConfig.output_dir,
            package=_as_str(noop_data.get("package")) or NoOpConfig.package,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _validate_sort(value: str) -> str:
    mode = value.strip().lower()
    if mode not in _SORT_MODES:
        raise ConfigError(f"Unknown sort mode: {value}")
    return mode


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalysisSettings",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_NOOP_DIR",
    "DeclOrderConfig",
    "NoOpConfig",
    "SORT_ALPHABETICAL",
    "SORT_TOPOLOGICAL",
    "load_config",
    "normalize_kinds",
]
