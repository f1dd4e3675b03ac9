"""Deno runtime plugin."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping

from ..models import CommandFacts, RuntimeName
from .base import Runtime
from .scripts import START_SCRIPTS, first_script, load_json, script_table
from .versions import mise_toml, resolve_version, tool_versions

_VERSION_SOURCES = (tool_versions("deno"), mise_toml("deno"))

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".idea",
    "__pycache__",
    "node_modules",
    "vendor",
    ".deno_cache",
    "dist",
    "build",
}

_MAX_SCANNED_FILES = 5000

_MAIN_FILES = (
    "mod.ts",
    "src/mod.ts",
    "main.ts",
    "src/main.ts",
    "index.ts",
    "src/index.ts",
)


class DenoRuntime(Runtime):
    """Detects Deno via its config files or ``deno.land`` imports in TypeScript sources."""

    name = RuntimeName.DENO
    template_name = "deno.Dockerfile.j2"
    markers = ("deno.json", "deno.jsonc", "deno.lock", "deps.ts", "mod.ts")

    def match(self, path: Path) -> bool:
        root = Path(path)
        for marker in self.markers:
            if (root / marker).exists():
                self.log.info("Detected %s project", self.name)
                return True
        if self._imports_deno_land(root):
            self.log.info("Detected %s project", self.name)
            return True
        self.log.debug("%s project not detected", self.name)
        return False

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = CommandFacts()

        tasks = script_table(self._load_config(root), key="tasks")
        start = first_script(tasks, START_SCRIPTS)
        if start is not None:
            self.log.info("Detected start command in deno config: %s", start)
            facts.start_cmd = f"deno task {start}"
        if "cache" in tasks:
            self.log.info("Detected install command in deno config: cache")
            facts.install_cmd = "deno task cache"

        if not facts.start_cmd:
            for main_file in _MAIN_FILES:
                if not (root / main_file).exists():
                    continue
                self.log.info("Detected start command via main/mod file: %s", main_file)
                facts.start_cmd = f"deno run --allow-all {main_file}"
                if not facts.install_cmd:
                    facts.install_cmd = f"deno cache {main_file}"
                break

        facts.version = resolve_version(
            root, _VERSION_SOURCES, "latest", label="Deno", logger=self.log
        )
        self._log_defaults(
            [
                ("Deno version", facts.version),
                ("Install command", facts.install_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)

    @staticmethod
    def _load_config(root: Path) -> Dict[str, Any]:
        for name in ("deno.jsonc", "deno.json"):
            if (root / name).is_file():
                return load_json(root / name)
        return {}

    def _imports_deno_land(self, root: Path) -> bool:
        scanned = 0
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
            for filename in sorted(filenames):
                if not filename.endswith(".ts"):
                    continue
                scanned += 1
                if scanned > _MAX_SCANNED_FILES:
                    self.log.debug("Stopped scanning after %d TypeScript files", _MAX_SCANNED_FILES)
                    return False
                source = Path(dirpath) / filename
                try:
                    text = source.read_text(encoding="utf-8", errors="ignore")
                except OSError as exc:
                    self.log.debug("Skipping unreadable file %s: %s", source, exc)
                    continue
                if any(_is_deno_land_import(line) for line in text.splitlines()):
                    self.log.debug("Found deno.land import in %s", source)
                    return True
        return False


def _is_deno_land_import(line: str) -> bool:
    return (
        line.startswith(("import ", "export "))
        and " from " in line
        and "https://deno.land/" in line
    )


__all__ = ["DenoRuntime"]
