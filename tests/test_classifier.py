"""Tests for modgraph.classifier."""

from __future__ import annotations

from pathlib import Path

from modgraph.classifier import (
    classify_directory,
    find_backend_entry,
    humanize,
    is_composite_directory,
    is_ignored_directory,
)


def test_alias_directories_use_declared_identity() -> None:
    public = classify_directory("public")
    assert (public.id, public.name, public.type) == ("frontend", "Frontend Interface", "frontend")

    docs = classify_directory("docs")
    assert docs.type == "documentation"

    exports = classify_directory("exports")
    assert exports.id == "legacy-exports"


def test_unknown_directory_gets_generic_code_classification() -> None:
    result = classify_directory("user-profile_service")
    assert result.id == "user-profile_service"
    assert result.name == "User Profile Service"
    assert result.type == "code"


def test_fallback_id_is_lowercase_and_hyphenated() -> None:
    result = classify_directory("Billing Engine")
    assert result.id == "billing-engine"
    assert result.name == "Billing Engine"


def test_humanize_capitalises_each_word() -> None:
    assert humanize("data_pipeline-v2") == "Data Pipeline V2"


def test_ignored_directories_include_dot_prefixed_and_caches() -> None:
    for name in ("node_modules", ".git", "dist", "coverage", ".hidden", ".github"):
        assert is_ignored_directory(name)
    assert not is_ignored_directory("src")
    assert is_ignored_directory("vendor", frozenset({"vendor"}))


def test_composite_directories_match_case_insensitively() -> None:
    assert is_composite_directory("packages")
    assert is_composite_directory("Apps")
    assert not is_composite_directory("src")
    assert is_composite_directory("components", frozenset({"components"}))


def test_find_backend_entry_honours_priority(tmp_path: Path) -> None:
    assert find_backend_entry(tmp_path) is None

    (tmp_path / "index.js").write_text("", encoding="utf-8")
    (tmp_path / "app.js").write_text("", encoding="utf-8")
    assert find_backend_entry(tmp_path) == tmp_path / "app.js"

    (tmp_path / "server.js").write_text("", encoding="utf-8")
    assert find_backend_entry(tmp_path) == tmp_path / "server.js"


def test_find_backend_entry_ignores_directories(tmp_path: Path) -> None:
    (tmp_path / "server.js").mkdir()
    (tmp_path / "index.js").write_text("", encoding="utf-8")
    assert find_backend_entry(tmp_path) == tmp_path / "index.js"
