"""Map directory names to module identities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Dict, Optional, Sequence

from .paths import sanitize_id

IGNORED_DIRECTORIES = frozenset(
    {
        "node_modules",
        ".git",
        ".idea",
        ".vscode",
        ".cache",
        ".next",
        ".turbo",
        "dist",
        "build",
        "coverage",
        "logs",
        "tmp",
        "temp",
    }
)

COMPOSITE_DIRECTORIES = frozenset({"packages", "apps", "services", "modules", "workspaces"})

BACKEND_ENTRY_CANDIDATES: tuple[str, ...] = ("server.js", "app.js", "index.js")

_WORD_START = re.compile(r"\b\w")


@dataclass(frozen=True)
class Classification:
    """Identity assigned to a directory."""

    id: str
    name: str
    type: str


DIRECTORY_ALIASES: Dict[str, Classification] = {
    "public": Classification("frontend", "Frontend Interface", "frontend"),
    "src": Classification("src", "Application Source", "code"),
    "lib": Classification("lib", "Library Modules", "code"),
    "server": Classification("server", "Server Layer", "backend"),
    "agents": Classification("agents", "Agent Library", "knowledge"),
    "docs": Classification("docs", "Documentation", "documentation"),
    "data": Classification("data", "Workspace Data", "storage"),
    "spec": Classification("spec", "Spec Archive", "artifacts"),
    "exports": Classification("legacy-exports", "Legacy Exports", "artifacts"),
    "scripts": Classification("scripts", "Automation Scripts", "automation"),
}

BACKEND_CLASSIFICATION = Classification("backend", "Backend API", "backend")


def humanize(name: str) -> str:
    """``user-profile_service`` -> ``User Profile Service``."""
    spaced = name.replace("-", " ").replace("_", " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


def classify_directory(name: str) -> Classification:
    """Return the alias for ``name`` or a generic ``code`` classification."""
    alias = DIRECTORY_ALIASES.get(name)
    if alias is not None:
        return alias
    return Classification(id=sanitize_id(name), name=humanize(name), type="code")


def is_ignored_directory(name: str, extra: AbstractSet[str] = frozenset()) -> bool:
    """Return True for version control, cache, build and dot-prefixed directories."""
    return name.startswith(".") or name in IGNORED_DIRECTORIES or name in extra


def is_composite_directory(name: str, extra: AbstractSet[str] = frozenset()) -> bool:
    lowered = name.lower()
    return lowered in COMPOSITE_DIRECTORIES or lowered in extra


def find_backend_entry(
    root: Path, candidates: Sequence[str] = BACKEND_ENTRY_CANDIDATES
) -> Optional[Path]:
    """Return the first canonical server entry file present at ``root``."""
    for candidate in candidates:
        path = root / candidate
        if path.is_file():
            return path
    return None


__all__ = [
    "BACKEND_CLASSIFICATION",
    "BACKEND_ENTRY_CANDIDATES",
    "COMPOSITE_DIRECTORIES",
    "Classification",
    "DIRECTORY_ALIASES",
    "IGNORED_DIRECTORIES",
    "classify_directory",
    "find_backend_entry",
    "humanize",
    "is_composite_directory",
    "is_ignored_directory",
]
