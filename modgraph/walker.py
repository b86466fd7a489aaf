"""Walk module roots, aggregate file metrics and discover dependencies."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import AbstractSet, Dict, Iterator, Set

from .classifier import IGNORED_DIRECTORIES, is_ignored_directory
from .imports import parse_imports
from .logging import get_logger
from .models import ModuleRecord
from .paths import CODE_EXTENSIONS, is_code_file, normalize_path
from .registry import ModuleRegistry
from .resolver import resolve_import

_LINE_BREAK = re.compile(r"\r?\n")
_DEBT_MARKER = re.compile(r"TODO|FIXME", re.IGNORECASE)
_TEST_PATH = re.compile(r"test|spec|__tests__", re.IGNORECASE)

logger = get_logger("walker")


def count_lines(text: str) -> int:
    return len(_LINE_BREAK.split(text))


def count_debt_markers(text: str) -> int:
    return len(_DEBT_MARKER.findall(text))


def looks_like_test(relative_path: str) -> bool:
    return bool(_TEST_PATH.search(relative_path))


class FileWalker:
    """Visits every recognised source file under each module's roots.

    Files are visited one at a time in sorted order so that dependency
    discovery order, and therefore the output, is reproducible.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        root: Path,
        *,
        ignored: AbstractSet[str] = IGNORED_DIRECTORIES,
        extensions: AbstractSet[str] = CODE_EXTENSIONS,
    ) -> None:
        self.registry = registry
        self.root = normalize_path(root)
        self.ignored = frozenset(ignored)
        self.extensions = frozenset(extensions)
        self.files_visited = 0

    def walk(self) -> None:
        owners = self.registry.root_owners()
        for record in self.registry:
            self.walk_module(record, owners)

    def walk_module(self, record: ModuleRecord, owners: Dict[str, str]) -> None:
        visited: Set[str] = set()
        for root_path in list(record.root_paths):
            if os.path.isdir(root_path):
                files = self._iter_files(root_path, record.id, owners)
            elif os.path.isfile(root_path):
                files = iter((root_path,))
            else:
                logger.debug("Module %s root %s does not exist; skipping", record.id, root_path)
                continue

            for file_path in files:
                if file_path in visited:
                    continue
                visited.add(file_path)
                if not is_code_file(file_path, self.extensions):
                    continue
                self.visit_file(record, file_path)

    def _iter_files(self, directory: str, module_id: str, owners: Dict[str, str]) -> Iterator[str]:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", directory, exc)
            return

        for entry in entries:
            path = normalize_path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                if is_ignored_directory(entry.name, self.ignored):
                    continue
                owner = owners.get(path)
                # Nested directories claimed by another module are walked by that module.
                if owner is not None and owner != module_id:
                    continue
                yield from self._iter_files(path, module_id, owners)
            else:
                yield path

    def visit_file(self, record: ModuleRecord, file_path: str) -> None:
        """Fold one file's metrics and references into ``record``."""
        # Undecodable bytes become U+FFFD; newline="" keeps lone "\r" out of the line count.
        try:
            with open(file_path, encoding="utf-8", errors="replace", newline="") as handle:
                text = handle.read()
        except OSError as exc:
            logger.debug("Skipping unreadable file %s: %s", file_path, exc)
            return

        self.files_visited += 1
        record.file_count += 1
        record.line_count += count_lines(text)
        record.todo_count += count_debt_markers(text)
        if looks_like_test(os.path.relpath(file_path, self.root)):
            record.test_file_count += 1

        imports = parse_imports(text)
        for reference in imports.local:
            resolved = resolve_import(file_path, reference)
            if resolved is None:
                continue
            target = self.registry.find_owner(resolved)
            if target is not None and target.id != record.id:
                record.add_dependency(target.id)

        for name in imports.external:
            record.add_external_dependency(name)


__all__ = ["FileWalker", "count_debt_markers", "count_lines", "looks_like_test"]
