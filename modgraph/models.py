"""Core data models shared across modgraph components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _ordered_set() -> Dict[str, None]:
    return {}


@dataclass
class ModuleRecord:
    """Mutable module entry owned by a single registry during one scan.

    Set-like fields are dicts keyed by value so that insertion order, and with
    it the output order, is reproducible between runs.
    """

    id: str
    name: str
    type: str = "code"
    root_paths: Dict[str, None] = field(default_factory=_ordered_set)
    dependencies: Dict[str, None] = field(default_factory=_ordered_set)
    external_dependencies: Dict[str, None] = field(default_factory=_ordered_set)
    frameworks: Dict[str, None] = field(default_factory=_ordered_set)
    path_hints: Dict[str, None] = field(default_factory=_ordered_set)
    file_count: int = 0
    line_count: int = 0
    todo_count: int = 0
    test_file_count: int = 0
    source: str = "auto"
    manual: bool = False

    def add_root_path(self, path: str) -> None:
        self.root_paths.setdefault(path, None)
        self.path_hints.setdefault(path, None)

    def add_dependency(self, module_id: str) -> None:
        self.dependencies.setdefault(module_id, None)

    def add_external_dependency(self, name: str) -> None:
        self.external_dependencies.setdefault(name, None)

    def add_framework(self, name: str) -> None:
        self.frameworks.setdefault(name, None)


@dataclass
class ModuleDefinition:
    """Contribution passed to ``ModuleRegistry.ensure``."""

    id: Optional[str]
    name: Optional[str] = None
    type: Optional[str] = None
    root_paths: List[str] = field(default_factory=list)
    source: Optional[str] = None
    manual: bool = False


@dataclass(frozen=True)
class Module:
    """Finished module as exposed to consumers."""

    id: str
    name: str
    type: str
    path_hints: List[str]
    dependencies: List[str]
    external_dependencies: List[str]
    file_count: int
    line_count: int
    todo_count: int
    test_file_count: int
    coverage: int
    health: int
    frameworks: List[str]
    source: str
    manual: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "pathHints": list(self.path_hints),
            "dependencies": list(self.dependencies),
            "externalDependencies": list(self.external_dependencies),
            "fileCount": self.file_count,
            "lineCount": self.line_count,
            "todoCount": self.todo_count,
            "testFileCount": self.test_file_count,
            "coverage": self.coverage,
            "health": self.health,
            "frameworks": list(self.frameworks),
            "source": self.source,
            "manual": self.manual,
        }


@dataclass(frozen=True)
class Edge:
    """Directed ``depends on`` relationship between two modules."""

    source: str
    target: str
    type: str = "internal"

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
        }


@dataclass(frozen=True)
class Summary:
    """Aggregate counters over the finished graph."""

    module_count: int = 0
    dependency_count: int = 0
    external_dependency_count: int = 0
    total_lines: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "moduleCount": self.module_count,
            "dependencyCount": self.dependency_count,
            "externalDependencyCount": self.external_dependency_count,
            "totalLines": self.total_lines,
        }


@dataclass(frozen=True)
class DetectionResult:
    """Modules, edges and summary produced by one detection run."""

    modules: List[Module]
    edges: List[Edge]
    summary: Summary

    def module(self, module_id: str) -> Optional[Module]:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modules": [module.to_dict() for module in self.modules],
            "edges": [edge.to_dict() for edge in self.edges],
            "summary": self.summary.to_dict(),
        }
