"""Tests for the module registry."""

from __future__ import annotations

from pathlib import Path

from modgraph.models import ModuleDefinition
from modgraph.overrides import ManualLink, ManualModule
from modgraph.paths import normalize_path
from modgraph.registry import ModuleRegistry, frameworks_for_type


def test_ensure_without_id_is_a_no_op() -> None:
    registry = ModuleRegistry()
    assert registry.ensure(ModuleDefinition(id=None, name="Nothing")) is None
    assert registry.ensure(ModuleDefinition(id="")) is None
    assert len(registry) == 0


def test_ensure_merges_root_paths_and_keeps_first_name(tmp_path: Path) -> None:
    registry = ModuleRegistry()
    first = normalize_path(tmp_path / "public")
    second = normalize_path(tmp_path / "web")

    created = registry.ensure(
        ModuleDefinition(id="frontend", name="Frontend Interface", type="frontend", root_paths=[first])
    )
    merged = registry.ensure(
        ModuleDefinition(id="frontend", name="Web", type="code", root_paths=[second, first])
    )

    assert created is merged
    assert merged.name == "Frontend Interface"
    assert merged.type == "frontend"
    assert list(merged.root_paths) == [first, second]
    assert list(merged.path_hints) == [first, second]


def test_ensure_seeds_frameworks_from_package_dependencies() -> None:
    registry = ModuleRegistry(package_deps={"vue", "express", "lodash"})

    frontend = registry.ensure(ModuleDefinition(id="ui", type="frontend"))
    backend = registry.ensure(ModuleDefinition(id="api", type="backend"))
    tooling = registry.ensure(ModuleDefinition(id="tools", type="code"))

    assert list(frontend.frameworks) == ["vue"]
    assert list(backend.frameworks) == ["express"]
    assert list(tooling.frameworks) == []


def test_frameworks_for_type_preserves_hint_order() -> None:
    assert frameworks_for_type("frontend", {"svelte", "react"}) == ["react", "svelte"]
    assert frameworks_for_type(None, {"react"}) == []


def test_merge_manual_unions_sets_and_overrides_metrics(tmp_path: Path) -> None:
    registry = ModuleRegistry()
    registry.ensure(ModuleDefinition(id="src", name="Application Source", source="directory"))
    registry.ensure(ModuleDefinition(id="docs", name="Documentation"))
    record = registry.get("src")
    record.add_dependency("docs")

    registry.merge_manual(
        [
            ManualModule(
                id="src",
                name="Renamed",
                type="custom",
                root_paths=[normalize_path(tmp_path / "extra")],
                dependencies=["docs", "billing"],
                external_dependencies=["stripe"],
                frameworks=["react"],
                metrics={"line_count": 500},
            )
        ]
    )

    assert record.name == "Application Source"
    assert record.source == "manual"
    assert record.manual is True
    assert list(record.dependencies) == ["docs", "billing"]
    assert list(record.external_dependencies) == ["stripe"]
    assert list(record.frameworks) == ["react"]
    assert record.line_count == 500
    assert record.file_count == 0
    assert normalize_path(tmp_path / "extra") in record.root_paths


def test_merge_manual_creates_new_custom_module() -> None:
    registry = ModuleRegistry()
    registry.merge_manual([ManualModule(id="billing", name="Billing")])

    billing = registry.get("billing")
    assert billing is not None
    assert billing.type == "custom"
    assert billing.manual is True


def test_apply_links_validates_both_ends() -> None:
    registry = ModuleRegistry()
    registry.ensure(ModuleDefinition(id="api"))
    registry.ensure(ModuleDefinition(id="db"))

    registry.apply_links(
        [
            ManualLink(source="api", target="db"),
            ManualLink(source="api", target="api"),
            ManualLink(source="api", target="ghost"),
            ManualLink(source="ghost", target="db"),
        ]
    )

    assert list(registry.get("api").dependencies) == ["db"]
    assert list(registry.get("db").dependencies) == []
    assert "ghost" not in registry


def test_find_owner_matches_root_or_descendant(tmp_path: Path) -> None:
    registry = ModuleRegistry()
    api_root = normalize_path(tmp_path / "api")
    registry.ensure(ModuleDefinition(id="api", root_paths=[api_root]))
    registry.ensure(ModuleDefinition(id="server", root_paths=[normalize_path(tmp_path / "server.js")]))

    assert registry.find_owner(api_root).id == "api"
    assert registry.find_owner(str(tmp_path / "api" / "routes" / "x.js")).id == "api"
    assert registry.find_owner(str(tmp_path / "server.js")).id == "server"
    assert registry.find_owner(str(tmp_path / "api-client" / "x.js")) is None


def test_registry_iterates_in_registration_order() -> None:
    registry = ModuleRegistry()
    for module_id in ("zeta", "alpha", "mid"):
        registry.ensure(ModuleDefinition(id=module_id))

    assert [record.id for record in registry] == ["zeta", "alpha", "mid"]
    assert registry.ids() == ["zeta", "alpha", "mid"]
