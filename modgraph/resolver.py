"""Resolve relative import references to files on disk."""

from __future__ import annotations

import os
from typing import List, Optional

from .imports import LOCAL_PREFIX
from .paths import normalize_path

RESOLVE_EXTENSIONS: tuple[str, ...] = (".js", ".ts", ".json", ".jsx", ".tsx")
INDEX_FILES: tuple[str, ...] = ("index.js", "index.ts")


def candidate_paths(from_file: str, reference: str) -> List[str]:
    """Return the probe order for ``reference`` imported by ``from_file``."""
    base = normalize_path(os.path.join(os.path.dirname(from_file), reference))
    candidates = [base]
    candidates.extend(f"{base}{extension}" for extension in RESOLVE_EXTENSIONS)
    candidates.extend(os.path.join(base, index) for index in INDEX_FILES)
    return candidates


def resolve_import(from_file: str, reference: str) -> Optional[str]:
    """Return the first existing path ``reference`` points at, or None."""
    if not reference.startswith(LOCAL_PREFIX):
        return None
    for candidate in candidate_paths(from_file, reference):
        if os.path.exists(candidate):
            return normalize_path(candidate)
    return None


__all__ = ["INDEX_FILES", "RESOLVE_EXTENSIONS", "candidate_paths", "resolve_import"]
