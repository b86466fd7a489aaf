"""Optional side inputs: package manifest, manual modules and manual links.

Every reader here treats a missing or malformed file as empty. Only the link
writers raise, and only for invalid requests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from .config import DEFAULT_LINKS_FILES, DEFAULT_MODULES_FILES
from .logging import get_logger
from .paths import resolve_under, sanitize_id

logger = get_logger("overrides")

METRIC_FIELDS: Dict[str, str] = {
    "fileCount": "file_count",
    "lineCount": "line_count",
    "todoCount": "todo_count",
    "testFileCount": "test_file_count",
}


@dataclass
class ManualModule:
    """User-supplied module definition folded into the detected graph."""

    id: str
    name: str
    type: str = "custom"
    root_paths: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    external_dependencies: List[str] = field(default_factory=list)
    frameworks: List[str] = field(default_factory=list)
    metrics: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ManualLink:
    """User-supplied ``source -> target`` dependency."""

    source: str
    target: str
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        payload = {"source": self.source, "target": self.target}
        if self.created_at:
            payload["createdAt"] = self.created_at
        return payload


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("Ignoring unreadable side file %s: %s", path, exc)
        return None


def _read_first(root: Path, candidates: Sequence[str]) -> Any:
    for candidate in candidates:
        payload = _read_json(root / candidate)
        if payload is not None:
            return payload
    return None


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _metric(value: Any) -> Optional[int]:
    """Accept non-negative whole numbers; ``12.0`` counts, ``3.7`` does not."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    return value if value >= 0 else None


def load_package_dependencies(root: Path) -> Set[str]:
    """Return runtime and dev dependency names declared in package.json."""
    data = _read_json(root / "package.json")
    if not isinstance(data, dict):
        return set()

    names: Set[str] = set()
    for key in ("dependencies", "devDependencies"):
        deps = data.get(key)
        if isinstance(deps, dict):
            names.update(name for name in deps if isinstance(name, str))
    return names


def _parse_manual_module(root: Path, entry: Any) -> Optional[ManualModule]:
    if not isinstance(entry, dict):
        return None

    name = entry.get("name") if isinstance(entry.get("name"), str) else None
    module_id = entry.get("id") if isinstance(entry.get("id"), str) else None
    module_id = module_id or sanitize_id(name or "custom-module")
    module_type = entry.get("type") if isinstance(entry.get("type"), str) else None

    root_paths: List[str] = []
    path = entry.get("path")
    if isinstance(path, str) and path:
        root_paths.append(resolve_under(root, path))
    else:
        root_paths.extend(resolve_under(root, item) for item in _str_list(entry.get("rootPaths")))

    metrics: Dict[str, int] = {}
    for key, attribute in METRIC_FIELDS.items():
        value = _metric(entry.get(key))
        if value is not None:
            metrics[attribute] = value

    return ManualModule(
        id=module_id,
        name=name or module_id,
        type=module_type or "custom",
        root_paths=root_paths,
        dependencies=_str_list(entry.get("dependencies")),
        external_dependencies=_str_list(entry.get("externalDependencies")),
        frameworks=_str_list(entry.get("frameworks")),
        metrics=metrics,
    )


def load_manual_modules(
    root: Path, candidates: Sequence[str] = DEFAULT_MODULES_FILES
) -> List[ManualModule]:
    """Read manual modules from a bare list or a ``{"modules": [...]}`` object."""
    payload = _read_first(root, candidates)
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict) and isinstance(payload.get("modules"), list):
        records = payload["modules"]
    else:
        return []

    modules: List[ManualModule] = []
    for entry in records:
        module = _parse_manual_module(root, entry)
        if module is not None:
            modules.append(module)
    return modules


def _parse_links(payload: Any) -> List[ManualLink]:
    if not isinstance(payload, list):
        return []
    links: List[ManualLink] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        source = entry.get("source")
        target = entry.get("target")
        if not isinstance(source, str) or not isinstance(target, str) or not source or not target:
            continue
        created_at = entry.get("createdAt")
        links.append(
            ManualLink(
                source=source,
                target=target,
                created_at=created_at if isinstance(created_at, str) else None,
            )
        )
    return links


def load_manual_links(
    root: Path, candidates: Sequence[str] = DEFAULT_LINKS_FILES
) -> List[ManualLink]:
    """Read the manual ``{source, target}`` pairs."""
    return _parse_links(_read_first(root, candidates))


def _store_links(root: Path, candidates: Sequence[str], links: Iterable[ManualLink]) -> Path:
    path = root / candidates[0]
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [link.to_dict() for link in links]
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def add_manual_link(
    root: Path,
    source: str,
    target: str,
    known_ids: Iterable[str],
    candidates: Sequence[str] = DEFAULT_LINKS_FILES,
) -> tuple[ManualLink, bool]:
    """Persist a manual link and return it with a flag telling whether it is new.

    Raises ``ValueError`` for missing ids or a self link, and ``KeyError`` when
    either module is unknown.
    """
    if not source or not target:
        raise ValueError("Source and target modules are required")
    if source == target:
        raise ValueError("Cannot create self-dependency")
    known = set(known_ids)
    if source not in known or target not in known:
        raise KeyError(f"Source or target module not found: {source} -> {target}")

    links = load_manual_links(root, candidates)
    for link in links:
        if link.source == source and link.target == target:
            return link, False

    created_at = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    new_link = ManualLink(source=source, target=target, created_at=created_at)
    links.append(new_link)
    path = _store_links(root, candidates, links)
    logger.info("Added manual link %s -> %s in %s", source, target, path)
    return new_link, True


def remove_manual_link(
    root: Path,
    source: str,
    target: str,
    candidates: Sequence[str] = DEFAULT_LINKS_FILES,
) -> bool:
    """Drop a manual link. Returns False when no such link exists."""
    if not source or not target:
        raise ValueError("Source and target modules are required")

    links = load_manual_links(root, candidates)
    remaining = [link for link in links if not (link.source == source and link.target == target)]
    if len(remaining) == len(links):
        return False

    path = _store_links(root, candidates, remaining)
    logger.info("Removed manual link %s -> %s from %s", source, target, path)
    return True


__all__ = [
    "ManualLink",
    "ManualModule",
    "add_manual_link",
    "load_manual_links",
    "load_manual_modules",
    "load_package_dependencies",
    "remove_manual_link",
]
