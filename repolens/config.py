"""Configuration loading for repolens (.repolens.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .stores.manager import DEFAULT_MAX_TOTAL_BYTES, TTLHours

CONFIG_FILENAME = ".repolens.yml"
DEFAULT_SNAPSHOT_PATH = ".repolens/cache.json"
DEFAULT_MAX_CONTENT_BYTES = 64 * 1024


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CacheConfig:
    """Cache budget, lifetimes and snapshot location."""

    max_total_bytes: int = DEFAULT_MAX_TOTAL_BYTES
    ttl_hours: TTLHours = field(default_factory=TTLHours)
    snapshot_path: Path = Path(DEFAULT_SNAPSHOT_PATH)


@dataclass
class ScannerConfig:
    include_content: bool = False
    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES


@dataclass
class RepoLensConfig:
    """Represents the settings defined in .repolens.yml."""

    root: Path
    cache: CacheConfig = field(default_factory=CacheConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> RepoLensConfig:
    """Load configuration from a checkout directory or a config file path."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepoLensConfig(root=root, cache=CacheConfig(snapshot_path=root / DEFAULT_SNAPSHOT_PATH))

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    cache_data = _as_dict(data.get("cache"))
    cache = CacheConfig(snapshot_path=root / DEFAULT_SNAPSHOT_PATH)
    if cache_data:
        max_bytes = _as_int(cache_data.get("max_total_bytes"))
        if max_bytes is not None and max_bytes > 0:
            cache.max_total_bytes = max_bytes
        cache.ttl_hours = _ttl_hours(_as_dict(cache_data.get("ttl_hours")))
        snapshot = _as_str(cache_data.get("snapshot_path"))
        if snapshot:
            snapshot_path = Path(snapshot).expanduser()
            cache.snapshot_path = snapshot_path if snapshot_path.is_absolute() else root / snapshot_path

    scanner_data = _as_dict(data.get("scanner"))
    scanner = ScannerConfig()
    if scanner_data:
        include_content = _as_bool(scanner_data.get("include_content"))
        if include_content is not None:
            scanner.include_content = include_content
        max_content = _as_int(scanner_data.get("max_content_bytes"))
        if max_content is not None and max_content > 0:
            scanner.max_content_bytes = max_content

    return RepoLensConfig(
        root=root,
        cache=cache,
        scanner=scanner,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _ttl_hours(data: Dict[str, Any]) -> TTLHours:
    defaults = TTLHours()
    values = {}
    for name in ("repositories", "analyses", "descriptions"):
        hours = _as_float(data.get(name))
        values[name] = hours if hours is not None and hours >= 0 else getattr(defaults, name)
    return TTLHours(**values)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


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
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CacheConfig",
    "ConfigError",
    "RepoLensConfig",
    "ScannerConfig",
    "load_config",
]
