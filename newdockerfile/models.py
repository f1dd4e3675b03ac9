"""Core data models shared across runtime detection and rendering."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict


class RuntimeName(str, Enum):
    """Identity of every ecosystem the generator can target."""

    GOLANG = "Go"
    RUBY = "Ruby"
    PYTHON = "Python"
    PHP = "PHP"
    ELIXIR = "Elixir"
    JAVA = "Java"
    RUST = "Rust"
    NEXTJS = "Next.js"
    BUN = "Bun"
    DENO = "Deno"
    NODE = "Node"
    STATIC = "Static"
    DOCKER = "Docker"

    def __str__(self) -> str:
        return self.value


def safe_command(command: str) -> str:
    """Quote a shell command for an ``ARG NAME=<value>`` line.

    The command is JSON encoded, which quotes it and escapes inner quotes
    while leaving shell operators such as ``&&`` literal.
    """
    if not command:
        return ""
    return json.dumps(command, ensure_ascii=False)


def fact(key: str, default: str = "", *, command: bool = False) -> Any:
    """Declare a dataclass field that maps onto template placeholder ``key``."""
    return field(default=default, metadata={"key": key, "command": command})


@dataclass
class Facts:
    """Typed facts extracted during one generate call."""

    def to_context(self) -> Dict[str, str]:
        """Flatten to the string mapping consumed by the template renderer."""
        context: Dict[str, str] = {}
        for item in fields(self):
            key = item.metadata.get("key")
            if not key:
                continue
            value = getattr(self, item.name) or ""
            if item.metadata.get("command"):
                value = safe_command(value)
            context[key] = value
        return context


@dataclass
class CommandFacts(Facts):
    """Version plus the install/build/start triple most ecosystems share."""

    version: str = fact("Version")
    install_cmd: str = fact("InstallCMD", command=True)
    build_cmd: str = fact("BuildCMD", command=True)
    start_cmd: str = fact("StartCMD", command=True)


__all__ = ["CommandFacts", "Facts", "RuntimeName", "fact", "safe_command"]
