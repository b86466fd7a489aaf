"""Path normalisation, source extension and identifier helpers."""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePath
from typing import AbstractSet

CODE_EXTENSIONS = frozenset(
    {
        ".js",
        ".mjs",
        ".cjs",
        ".ts",
        ".tsx",
        ".jsx",
        ".json",
        ".vue",
        ".py",
    }
)

_INVALID_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_HYPHEN_RUNS = re.compile(r"-+")


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return an absolute, normalised string form of ``path``."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def resolve_under(root: str | os.PathLike[str], path: str) -> str:
    """Anchor ``path`` at ``root`` unless it is already absolute."""
    if os.path.isabs(path):
        return normalize_path(path)
    return normalize_path(os.path.join(os.fspath(root), path))


def is_within(path: str, root: str) -> bool:
    """Return True when ``path`` equals ``root`` or is nested under it."""
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def extension_of(path: str | PurePath) -> str:
    return PurePath(path).suffix.lower()


def is_code_file(path: str | PurePath, extensions: AbstractSet[str] = CODE_EXTENSIONS) -> bool:
    """Return True when the file extension is a recognised source extension."""
    return extension_of(path) in extensions


def sanitize_id(name: str) -> str:
    """Turn an arbitrary name into a lowercase hyphenated module id."""
    return _HYPHEN_RUNS.sub("-", _INVALID_ID_CHARS.sub("-", name)).lower()


def relative_hint(path: str, root: str) -> str:
    """Render ``path`` relative to ``root`` for display.

    Falls back to the basename when the path is the root itself.
    """
    relative = os.path.relpath(path, root)
    if not relative or relative == os.curdir:
        return os.path.basename(path)
    return Path(relative).as_posix()


__all__ = [
    "CODE_EXTENSIONS",
    "extension_of",
    "is_code_file",
    "is_within",
    "normalize_path",
    "relative_hint",
    "resolve_under",
    "sanitize_id",
]
