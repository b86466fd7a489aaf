"""Turn a populated registry into modules, edges and summary counters."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Set

from .models import DetectionResult, Edge, Module, ModuleRecord, Summary
from .paths import relative_hint
from .scoring import compute_health, infer_coverage


def finish_module(record: ModuleRecord, root: str) -> Module:
    """Score ``record`` and freeze it for output."""
    coverage = infer_coverage(record.file_count, record.test_file_count)
    health = compute_health(
        todo_count=record.todo_count,
        external_count=len(record.external_dependencies),
        coverage=coverage,
    )
    path_hints = [hint for hint in (relative_hint(path, root) for path in record.path_hints) if hint]
    return Module(
        id=record.id,
        name=record.name,
        type=record.type,
        path_hints=path_hints,
        dependencies=list(record.dependencies),
        external_dependencies=list(record.external_dependencies),
        file_count=record.file_count,
        line_count=record.line_count,
        todo_count=record.todo_count,
        test_file_count=record.test_file_count,
        coverage=coverage,
        health=health,
        frameworks=list(record.frameworks),
        source=record.source,
        manual=record.manual,
    )


def is_reportable(module: Module) -> bool:
    """Drop modules that carry nothing: no manual origin, no directory, no code, no links."""
    if module.manual:
        return True
    if module.source == "directory" and module.path_hints:
        return True
    has_code = module.file_count > 0 or module.line_count > 0
    return has_code or bool(module.dependencies) or bool(module.external_dependencies)


def _prune_dependencies(module: Module, valid_ids: Set[str]) -> Module:
    kept = [target for target in module.dependencies if target in valid_ids and target != module.id]
    if kept == module.dependencies:
        return module
    return replace(module, dependencies=kept)


def build_graph(records: Iterable[ModuleRecord], root: str) -> DetectionResult:
    """Emit one edge per dependency and accumulate the summary counters.

    Dependencies that point at a module absent from the output are pruned so
    that every edge joins two listed modules.
    """
    finished = [finish_module(record, root) for record in records]
    reportable = [module for module in finished if is_reportable(module)]
    valid_ids = {module.id for module in reportable}

    modules: List[Module] = []
    edges: List[Edge] = []
    dependency_count = 0
    external_count = 0
    total_lines = 0
    for module in reportable:
        module = _prune_dependencies(module, valid_ids)
        modules.append(module)
        for target in module.dependencies:
            edges.append(Edge(source=module.id, target=target))
        dependency_count += len(module.dependencies)
        external_count += len(module.external_dependencies)
        total_lines += module.line_count

    summary = Summary(
        module_count=len(modules),
        dependency_count=dependency_count,
        external_dependency_count=external_count,
        total_lines=total_lines,
    )
    return DetectionResult(modules=modules, edges=edges, summary=summary)


__all__ = ["build_graph", "finish_module", "is_reportable"]
