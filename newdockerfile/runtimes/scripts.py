"""Convention scanners shared by the runtime plugins."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

START_SCRIPTS: Tuple[str, ...] = (
    "serve",
    "start:prod",
    "start:production",
    "start-prod",
    "start-production",
    "preview",
    "start",
)

BUILD_SCRIPTS: Tuple[str, ...] = (
    "build:prod",
    "build:production",
    "build-prod",
    "build-production",
    "build",
)

START_SCRIPT_RE = re.compile(
    r"^.*?\b(ts-)?node(mon)?\b.*?(index|main|server|client)\.([cm]?[tj]s)\b"
)

# Frontend install step appended by backend ecosystems that ship assets.
_NODE_LOCKFILES: Tuple[Tuple[str, str, str], ...] = (
    ("package-lock.json", "npm", "npm ci"),
    ("pnpm-lock.yaml", "pnpm", "corepack enable pnpm && pnpm i --frozen-lockfile"),
    ("yarn.lock", "yarn", "yarn --frozen-lockfile"),
    ("bun.lockb", "bun", "bun install"),
)


def load_json(path: Path) -> Dict[str, Any]:
    """Decode a JSON manifest; a missing file reads as an empty mapping."""
    if not path.is_file():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def script_table(manifest: Mapping[str, Any], key: str = "scripts") -> Dict[str, str]:
    """Return the string-valued entries of a scripts/tasks table, in file order."""
    table = manifest.get(key)
    if not isinstance(table, dict):
        return {}
    return {name: body for name, body in table.items() if isinstance(body, str)}


def first_script(scripts: Mapping[str, str], names: Sequence[str]) -> Optional[str]:
    for name in names:
        if name in scripts:
            return name
    return None


def guess_start_script(scripts: Mapping[str, str]) -> Optional[str]:
    """Find a script whose body runs node against an index/main/server/client file."""
    for name, body in scripts.items():
        if START_SCRIPT_RE.search(body):
            return name
    return None


def entry_file(manifest: Mapping[str, Any]) -> Optional[str]:
    for key in ("main", "module"):
        value = manifest.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def detect_node_lockfile(root: Path) -> Optional[Tuple[str, str]]:
    """Return ``(package_manager, install_command)`` for the first Node lockfile."""
    for lockfile, manager, install in _NODE_LOCKFILES:
        if (root / lockfile).exists():
            return manager, install
    return None


def join_commands(*commands: str) -> str:
    return " && ".join(command for command in commands if command)


def file_mentions(root: Path, names: Iterable[str], *keywords: str) -> bool:
    """Return True when any existing file in ``names`` contains one of ``keywords``.

    Matching is case-insensitive and line based; undecodable bytes are dropped.
    """
    needles = [keyword.lower() for keyword in keywords]
    for name in names:
        candidate = root / name
        if not candidate.is_file():
            continue
        for line in candidate.read_text(encoding="utf-8", errors="ignore").splitlines():
            lowered = line.lower()
            if any(needle in lowered for needle in needles):
                return True
    return False


__all__ = [
    "BUILD_SCRIPTS",
    "START_SCRIPTS",
    "START_SCRIPT_RE",
    "detect_node_lockfile",
    "entry_file",
    "file_mentions",
    "first_script",
    "guess_start_script",
    "join_commands",
    "load_json",
    "script_table",
]
