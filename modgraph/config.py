"""Configuration loading for modgraph (.modgraph.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

import yaml

from .classifier import COMPOSITE_DIRECTORIES, IGNORED_DIRECTORIES
from .paths import CODE_EXTENSIONS

CONFIG_FILENAME = ".modgraph.yml"

DEFAULT_MODULES_FILES: tuple[str, ...] = ("data/modules.json", "modules.json")
DEFAULT_LINKS_FILES: tuple[str, ...] = ("data/module-links.json", "module-links.json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScanConfig:
    """Directory and extension settings for the file walk."""

    exclude_dirs: List[str] = field(default_factory=list)
    composite_dirs: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)

    @property
    def ignored_directories(self) -> FrozenSet[str]:
        return IGNORED_DIRECTORIES | frozenset(self.exclude_dirs)

    @property
    def composite_directories(self) -> FrozenSet[str]:
        return COMPOSITE_DIRECTORIES | frozenset(name.lower() for name in self.composite_dirs)

    @property
    def code_extensions(self) -> FrozenSet[str]:
        extra = {_as_extension(value) for value in self.extensions}
        return CODE_EXTENSIONS | frozenset(ext for ext in extra if ext)


@dataclass
class OverrideConfig:
    """Locations of the manual modules and manual links side files."""

    modules_file: Optional[str] = None
    links_file: Optional[str] = None

    @property
    def modules_files(self) -> tuple[str, ...]:
        return (self.modules_file,) if self.modules_file else DEFAULT_MODULES_FILES

    @property
    def links_files(self) -> tuple[str, ...]:
        return (self.links_file,) if self.links_file else DEFAULT_LINKS_FILES


@dataclass
class ModGraphConfig:
    """Represents the settings defined in .modgraph.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    overrides: OverrideConfig = field(default_factory=OverrideConfig)


def load_config(config_path: Path) -> ModGraphConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ModGraphConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.exclude_dirs = _as_str_list(scan_data.get("exclude_dirs"))
        scan.composite_dirs = _as_str_list(scan_data.get("composite_dirs"))
        scan.extensions = _as_str_list(scan_data.get("extensions"))

    overrides = OverrideConfig()
    override_data = _as_dict(data.get("overrides"))
    if override_data:
        overrides.modules_file = _as_str(override_data.get("modules_file"))
        overrides.links_file = _as_str(override_data.get("links_file"))

    return ModGraphConfig(root=root, scan=scan, overrides=overrides)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_extension(value: str) -> str:
    value = value.strip().lower()
    if not value:
        return ""
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ModGraphConfig",
    "OverrideConfig",
    "ScanConfig",
    "load_config",
]
