"""Tests for the graph and summary builder."""

from __future__ import annotations

from pathlib import Path

from modgraph.graph import build_graph
from modgraph.models import ModuleRecord
from modgraph.paths import normalize_path


def _record(module_id: str, **fields: object) -> ModuleRecord:
    record = ModuleRecord(id=module_id, name=module_id.title())
    for key, value in fields.items():
        setattr(record, key, value)
    return record


def test_build_graph_emits_edges_and_summary(tmp_path: Path) -> None:
    root = normalize_path(tmp_path)
    web = _record("web", source="directory", line_count=40, file_count=2)
    web.add_root_path(normalize_path(tmp_path / "web"))
    web.add_dependency("api")
    web.add_external_dependency("react")
    api = _record("api", source="directory", line_count=60, file_count=3)
    api.add_root_path(normalize_path(tmp_path / "services" / "api"))
    api.add_external_dependency("express")
    api.add_external_dependency("pg")

    result = build_graph([web, api], root)

    assert [module.id for module in result.modules] == ["web", "api"]
    assert [edge.to_dict() for edge in result.edges] == [
        {"id": "web->api", "source": "web", "target": "api", "type": "internal"}
    ]
    assert result.summary.to_dict() == {
        "moduleCount": 2,
        "dependencyCount": 1,
        "externalDependencyCount": 3,
        "totalLines": 100,
    }
    assert result.module("api").path_hints == ["services/api"]


def test_build_graph_scores_modules() -> None:
    module = _record("lib", line_count=10, file_count=4, test_file_count=1, todo_count=1)

    result = build_graph([module], "/")

    finished = result.modules[0]
    assert finished.coverage == 25
    # 100 - 12.5 - 5 = 82.5 -> 83
    assert finished.health == 83


def test_build_graph_drops_empty_auto_modules_and_dangling_dependencies() -> None:
    empty = _record("empty")
    manual = _record("billing", manual=True, source="manual")
    manual.add_dependency("empty")
    manual.add_dependency("ghost")
    manual.add_dependency("billing")

    result = build_graph([empty, manual], "/")

    assert [module.id for module in result.modules] == ["billing"]
    assert result.modules[0].dependencies == []
    assert result.edges == []
    assert result.summary.dependency_count == 0


def test_directory_modules_without_code_are_kept(tmp_path: Path) -> None:
    docs = _record("docs", source="directory")
    docs.add_root_path(normalize_path(tmp_path / "docs"))

    result = build_graph([docs], normalize_path(tmp_path))

    assert [module.id for module in result.modules] == ["docs"]
    assert result.modules[0].coverage == 0
    assert result.modules[0].health == 75


def test_to_dict_uses_camel_case_keys() -> None:
    result = build_graph([_record("lib", file_count=1, line_count=3)], "/")

    payload = result.to_dict()

    module = payload["modules"][0]
    assert set(module) == {
        "id",
        "name",
        "type",
        "pathHints",
        "dependencies",
        "externalDependencies",
        "fileCount",
        "lineCount",
        "todoCount",
        "testFileCount",
        "coverage",
        "health",
        "frameworks",
        "source",
        "manual",
    }
    assert payload["edges"] == []
    assert payload["summary"]["moduleCount"] == 1
