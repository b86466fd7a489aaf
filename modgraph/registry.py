"""In-memory module table with create-or-merge semantics."""

from __future__ import annotations

from typing import AbstractSet, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .models import ModuleDefinition, ModuleRecord
from .overrides import ManualLink, ManualModule
from .paths import is_within, normalize_path

FRAMEWORK_HINTS: Dict[str, tuple[str, ...]] = {
    "frontend": ("react", "vue", "angular", "svelte", "next", "nuxt"),
    "backend": ("express", "koa", "fastify", "nest", "hapi"),
    "database": ("mongoose", "sequelize", "prisma", "pg", "mysql"),
    "docs": ("docusaurus", "mkdocs", "sphinx"),
}


def frameworks_for_type(module_type: Optional[str], package_deps: AbstractSet[str]) -> List[str]:
    """Return the framework hints for ``module_type`` declared in the package manifest."""
    hints = FRAMEWORK_HINTS.get(module_type or "")
    if not hints:
        return []
    return [name for name in hints if name in package_deps]


class ModuleRegistry:
    """Owns the module records for a single detection run.

    Records are keyed by id and kept in registration order. The first
    contributor to name an id sets its name and type. Later contributors only
    add root paths.
    """

    def __init__(self, package_deps: AbstractSet[str] = frozenset()) -> None:
        self._package_deps = frozenset(package_deps)
        self._records: Dict[str, ModuleRecord] = {}

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._records

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def get(self, module_id: str) -> Optional[ModuleRecord]:
        return self._records.get(module_id)

    def ids(self) -> List[str]:
        return list(self._records)

    def ensure(self, definition: ModuleDefinition) -> Optional[ModuleRecord]:
        """Create the record for ``definition.id`` or merge root paths into it."""
        if not definition.id:
            return None

        record = self._records.get(definition.id)
        if record is None:
            record = ModuleRecord(
                id=definition.id,
                name=definition.name or definition.id,
                type=definition.type or "code",
            )
            for framework in frameworks_for_type(definition.type, self._package_deps):
                record.add_framework(framework)
            self._records[definition.id] = record

        for path in definition.root_paths:
            record.add_root_path(normalize_path(path))
        if definition.source:
            record.source = definition.source
        if definition.manual:
            record.manual = True
        return record

    def merge_manual(self, modules: Sequence[ManualModule]) -> None:
        """Fold user-supplied modules into the detected ones."""
        for manual in modules:
            record = self.ensure(
                ModuleDefinition(
                    id=manual.id,
                    name=manual.name,
                    type=manual.type,
                    root_paths=list(manual.root_paths),
                    source="manual",
                    manual=True,
                )
            )
            if record is None:
                continue
            for dependency in manual.dependencies:
                record.add_dependency(dependency)
            for external in manual.external_dependencies:
                record.add_external_dependency(external)
            for framework in manual.frameworks:
                record.add_framework(framework)
            _apply_metrics(record, manual.metrics)

    def apply_links(self, links: Iterable[ManualLink]) -> None:
        """Add manual ``source -> target`` dependencies between known modules."""
        for link in links:
            source = self._records.get(link.source)
            if source is None:
                continue
            if link.target == source.id or link.target not in self._records:
                continue
            source.add_dependency(link.target)

    def find_owner(self, path: str) -> Optional[ModuleRecord]:
        """Return the first module whose root equals or contains ``path``."""
        normalized = normalize_path(path)
        for record in self._records.values():
            for root_path in record.root_paths:
                if is_within(normalized, root_path):
                    return record
        return None

    def root_owners(self) -> Dict[str, str]:
        """Map every registered root path to the id of the module claiming it last."""
        owners: Dict[str, str] = {}
        for record in self._records.values():
            for root_path in record.root_paths:
                owners[root_path] = record.id
        return owners


def _apply_metrics(record: ModuleRecord, metrics: Mapping[str, int]) -> None:
    for attribute in ("file_count", "line_count", "todo_count", "test_file_count"):
        value = metrics.get(attribute)
        if value is not None:
            setattr(record, attribute, value)


__all__ = ["FRAMEWORK_HINTS", "ModuleRegistry", "frameworks_for_type"]
