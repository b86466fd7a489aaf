"""Heuristic extraction of import references from source text.

This is a pattern scan, not a parser. Only quoted string literals are seen:
computed specifiers such as ``require(name)`` or template literals with
interpolation never produce a reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

_STATIC_IMPORT = re.compile(r"""import\s+(?:[^;'"\n]+?\s+from\s+)?['"]([^'"]+)['"]""")
_REQUIRE_CALL = re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)""")
_DYNAMIC_IMPORT = re.compile(r"""import\(\s*['"]([^'"]+)['"]\s*\)""")

_PATTERNS = (_STATIC_IMPORT, _REQUIRE_CALL, _DYNAMIC_IMPORT)

LOCAL_PREFIX = "."

# Node.js built-in modules, embedded so results do not depend on the host.
NODE_BUILTINS = frozenset(
    {
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "inspector/promises",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/consumers",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)


@dataclass
class ImportSet:
    """Ordered, de-duplicated local and external references found in a file."""

    local: List[str] = field(default_factory=list)
    external: List[str] = field(default_factory=list)


def is_builtin(specifier: str) -> bool:
    if specifier.startswith("node:"):
        return True
    return specifier in NODE_BUILTINS


def package_root(specifier: str) -> str:
    """Collapse ``lodash/fp`` to ``lodash`` and ``@scope/pkg`` to ``@scope``."""
    return specifier.split("/", 1)[0]


def parse_imports(source: str) -> ImportSet:
    """Return the local and external references in ``source``."""
    local: Dict[str, None] = {}
    external: Dict[str, None] = {}

    for pattern in _PATTERNS:
        for match in pattern.finditer(source):
            target = match.group(1)
            if target.startswith(LOCAL_PREFIX):
                local.setdefault(target, None)
            elif not is_builtin(target):
                external.setdefault(package_root(target), None)

    return ImportSet(local=list(local), external=list(external))


__all__ = ["ImportSet", "NODE_BUILTINS", "is_builtin", "package_root", "parse_imports"]
