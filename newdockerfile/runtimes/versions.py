"""Version resolvers: convention-file grammars and the first-hit lookup."""

from __future__ import annotations

import itertools
import json
import logging
import re
import tomllib
from functools import partial
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, Tuple

import semantic_version

VersionReader = Callable[[Path], Optional[str]]
VersionSource = Tuple[str, VersionReader]

# Constraint forms, tried in order; the first one that matches wins.
_GTE_RE = re.compile(r"^>=\s*([\d.]+)")
_RANGE_RE = re.compile(r"^([\d.]+)\s*-\s*([\d.]+)")
_TILDE_RE = re.compile(r"^~\s*([\d.]+)")
_CARET_RE = re.compile(r"^\^([\d.]+)")
_EXACT_RE = re.compile(r"^([\d.]+)")

_CONSTRAINT_FORMS: Tuple[Tuple[re.Pattern[str], int], ...] = (
    (_GTE_RE, 1),
    (_RANGE_RE, 2),
    (_TILDE_RE, 1),
    (_CARET_RE, 1),
    (_EXACT_RE, 1),
)

_PLAIN_VERSION_RE = re.compile(r"^v?\d+(\.\d+){0,2}(-[0-9A-Za-z.-]+)?$")
# NpmSpec rejects ">= 18"; npm itself accepts it.
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|>|<|=|~|\^)\s+")
_CANDIDATE_BOUND = 60


def resolve_version(
    root: Path,
    sources: Sequence[VersionSource],
    default: str,
    *,
    label: str,
    logger: logging.Logger,
) -> str:
    """Return the first non-empty version found in ``sources``, else ``default``.

    ``sources`` pairs a file name (relative to ``root``) with the reader that
    understands it. Missing files are skipped; a malformed structured file
    raises from its reader and aborts the lookup.
    """
    for file_name, reader in sources:
        candidate = root / file_name
        if not candidate.is_file():
            continue
        version = reader(candidate)
        if version:
            logger.info("Detected %s version in %s: %s", label, file_name, version)
            return version
    logger.info("No %s version detected. Using: %s", label, default)
    return default


# Source builders


def tool_versions(tool: str) -> VersionSource:
    return (".tool-versions", partial(read_tool_versions, tool=tool))


def mise_toml(tool: str) -> VersionSource:
    return (".mise.toml", partial(read_mise_tool, tool=tool))


def version_file(name: str, *, strip_v: bool = False) -> VersionSource:
    return (name, partial(read_version_file, strip_v=strip_v))


# Readers


def read_tool_versions(path: Path, tool: str) -> Optional[str]:
    """Read the version for ``tool`` from an asdf-style ``.tool-versions`` file."""
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        if tool not in line:
            continue
        fields = line.split()
        return fields[1] if len(fields) > 1 else None
    return None


def read_mise_tool(path: Path, tool: str) -> Optional[str]:
    """Read ``[tools].<tool>`` from ``.mise.toml``; lists yield their first entry."""
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    tools = data.get("tools")
    if not isinstance(tools, dict):
        return None
    value = tools.get(tool)
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, (int, float)):
        value = str(value)
    return value if isinstance(value, str) and value else None


def read_version_file(path: Path, *, strip_v: bool = False) -> Optional[str]:
    """Return the first non-blank line of a single-purpose version file."""
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        value = line.strip()
        if not value:
            continue
        if strip_v and value.startswith("v"):
            value = value[1:]
        return value
    return None


def read_runtime_txt(path: Path) -> Optional[str]:
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        if line.startswith("python-"):
            return line[len("python-") :].strip()
    return None


def read_go_mod(path: Path) -> Optional[str]:
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        stripped = line.strip()
        if stripped.startswith("go "):
            fields = stripped.split()
            return fields[1] if len(fields) > 1 else None
    return None


def read_gemfile_ruby(path: Path) -> Optional[str]:
    """Resolve the ``ruby '<constraint>'`` directive of a Gemfile."""
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        if not line.startswith("ruby"):
            continue
        parts = line.split("'")
        if len(parts) < 2:
            parts = line.split('"')
        if len(parts) < 2:
            continue
        return parse_constraint(parts[1])
    return None


def read_composer_php(path: Path) -> Optional[str]:
    data = json.loads(path.read_text(encoding="utf-8"))
    require = data.get("require") if isinstance(data, dict) else None
    if not isinstance(require, dict):
        return None
    constraint = require.get("php")
    if not isinstance(constraint, str):
        return None
    version = parse_constraint(constraint)
    return version.rstrip(".") if version else None


def read_node_engines(path: Path) -> Optional[str]:
    data = json.loads(path.read_text(encoding="utf-8"))
    engines = data.get("engines") if isinstance(data, dict) else None
    if not isinstance(engines, dict):
        return None
    constraint = engines.get("node")
    if not isinstance(constraint, str):
        return None
    return resolve_node_range(constraint)


# Constraint handling


def parse_constraint(constraint: str) -> Optional[str]:
    """Pick a concrete version out of a composer/bundler constraint string.

    >>> parse_constraint(">=8.2.0")
    '8.2.0'
    >>> parse_constraint("7.4 - 8.1")
    '8.1'
    """
    for pattern, group in _CONSTRAINT_FORMS:
        match = pattern.match(constraint)
        if match:
            return match.group(group)
    return None


def resolve_node_range(constraint: str) -> Optional[str]:
    """Turn an ``engines.node`` value into a ``MAJOR`` or ``MAJOR.MINOR`` tag.

    Plain versions are used as-is. Ranges are resolved to the lowest
    version in the ``0.0.0 .. 59.59.59`` grid that satisfies them; a range
    that does not parse contributes nothing.
    """
    value = constraint.strip()
    if _PLAIN_VERSION_RE.match(value):
        version = semantic_version.Version.coerce(value.lstrip("v"))
    else:
        try:
            spec = semantic_version.NpmSpec(_OPERATOR_SPACE_RE.sub(r"\1", value))
        except ValueError:
            return None
        version = next(
            (candidate for candidate in _candidate_versions() if candidate in spec),
            None,
        )
        if version is None:
            return None
    if version.minor > 0:
        return f"{version.major}.{version.minor}"
    return str(version.major)


def _candidate_versions() -> Iterator[semantic_version.Version]:
    bound = range(_CANDIDATE_BOUND)
    for major, minor, patch in itertools.product(bound, bound, bound):
        yield semantic_version.Version(major=major, minor=minor, patch=patch)


__all__ = [
    "VersionSource",
    "mise_toml",
    "parse_constraint",
    "read_composer_php",
    "read_gemfile_ruby",
    "read_go_mod",
    "read_mise_tool",
    "read_node_engines",
    "read_runtime_txt",
    "read_tool_versions",
    "read_version_file",
    "resolve_node_range",
    "resolve_version",
    "tool_versions",
    "version_file",
]
