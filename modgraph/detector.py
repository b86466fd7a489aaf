"""Module detection entry point."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from .classifier import (
    BACKEND_CLASSIFICATION,
    classify_directory,
    find_backend_entry,
    is_composite_directory,
    is_ignored_directory,
)
from .config import ConfigError, ModGraphConfig, load_config
from .graph import build_graph
from .logging import get_logger
from .models import DetectionResult, ModuleDefinition
from .overrides import load_manual_links, load_manual_modules, load_package_dependencies
from .paths import is_code_file, normalize_path
from .registry import ModuleRegistry
from .walker import FileWalker


class ModuleDetector:
    """Scans a repository and produces its module graph."""

    def __init__(self, config: Optional[ModGraphConfig] = None) -> None:
        self._config = config
        self.logger = get_logger("detector")

    def detect(self, root: str | os.PathLike[str]) -> DetectionResult:
        """Return modules, edges and summary for the repository at ``root``.

        Raises ``FileNotFoundError`` or ``NotADirectoryError`` for an unusable
        root, and propagates ``OSError`` when the root cannot be listed. Every
        other problem is skipped.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        config = self._config or self._load_config(root_path)
        scan = config.scan
        self.logger.info("Detecting modules in %s", root_path)

        registry = ModuleRegistry(load_package_dependencies(root_path))

        backend_entry = find_backend_entry(root_path)
        if backend_entry is not None:
            registry.ensure(
                ModuleDefinition(
                    id=BACKEND_CLASSIFICATION.id,
                    name=BACKEND_CLASSIFICATION.name,
                    type=BACKEND_CLASSIFICATION.type,
                    root_paths=[normalize_path(backend_entry)],
                    source="auto",
                )
            )

        self._register_directories(registry, root_path, config)

        manual_modules = load_manual_modules(root_path, config.overrides.modules_files)
        registry.merge_manual(manual_modules)
        self.logger.debug(
            "Registered %d modules (%d manual entries)", len(registry), len(manual_modules)
        )

        walker = FileWalker(
            registry,
            root_path,
            ignored=scan.ignored_directories,
            extensions=scan.code_extensions,
        )
        walker.walk()
        self.logger.debug("Visited %d source files", walker.files_visited)

        registry.apply_links(load_manual_links(root_path, config.overrides.links_files))

        result = build_graph(registry, str(root_path))
        self.logger.info(
            "Detected %d modules with %d dependencies",
            result.summary.module_count,
            result.summary.dependency_count,
        )
        return result

    def _load_config(self, root: Path) -> ModGraphConfig:
        try:
            return load_config(root)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return ModGraphConfig(root=root)

    def _register_directories(
        self, registry: ModuleRegistry, root: Path, config: ModGraphConfig
    ) -> None:
        ignored = config.scan.ignored_directories
        composites = config.scan.composite_directories

        # Listing the root is the one failure allowed to reach the caller.
        with os.scandir(root) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)

        for entry in entries:
            if not entry.is_dir() or is_ignored_directory(entry.name, ignored):
                continue
            if is_composite_directory(entry.name, composites):
                self._register_composite(registry, entry.name, Path(entry.path), config)
                continue
            classification = classify_directory(entry.name)
            registry.ensure(
                ModuleDefinition(
                    id=classification.id,
                    name=classification.name,
                    type=classification.type,
                    root_paths=[normalize_path(entry.path)],
                    source="directory",
                )
            )

    def _register_composite(
        self, registry: ModuleRegistry, name: str, path: Path, config: ModGraphConfig
    ) -> None:
        """Register each child of a container directory such as ``packages/``.

        The container becomes a ``workspace`` module only when it holds source
        files of its own.
        """
        try:
            with os.scandir(path) as iterator:
                children = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            self.logger.debug("Cannot list composite directory %s: %s", path, exc)
            return

        has_local_files = False
        for child in children:
            if child.is_file():
                if is_code_file(child.name, config.scan.code_extensions):
                    has_local_files = True
                continue
            if not child.is_dir() or is_ignored_directory(child.name, config.scan.ignored_directories):
                continue

            classification = classify_directory(child.name)
            registry.ensure(
                ModuleDefinition(
                    id=classification.id,
                    name=classification.name,
                    type=classification.type,
                    root_paths=[normalize_path(child.path)],
                    source="directory",
                )
            )
            if is_composite_directory(child.name, config.scan.composite_directories):
                self._register_composite(registry, child.name, Path(child.path), config)

        if has_local_files:
            classification = classify_directory(name)
            registry.ensure(
                ModuleDefinition(
                    id=classification.id,
                    name=classification.name,
                    type="workspace" if classification.type == "code" else classification.type,
                    root_paths=[normalize_path(path)],
                    source="directory",
                )
            )


def detect_modules(root: str | os.PathLike[str]) -> DetectionResult:
    """Convenience wrapper around ``ModuleDetector().detect``."""
    return ModuleDetector().detect(root)


def write_result(result: DetectionResult, path: Path) -> Path:
    """Write the JSON payload for ``result`` to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


__all__ = ["ModuleDetector", "detect_modules", "write_result"]
