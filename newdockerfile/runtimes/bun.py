"""Bun runtime plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ..models import CommandFacts, RuntimeName
from .base import Runtime
from .scripts import (
    BUILD_SCRIPTS,
    START_SCRIPTS,
    entry_file,
    first_script,
    load_json,
    script_table,
)
from .versions import mise_toml, resolve_version, tool_versions

_VERSION_SOURCES = (tool_versions("bun"), mise_toml("bun"))


class BunRuntime(Runtime):
    name = RuntimeName.BUN
    template_name = "bun.Dockerfile.j2"
    markers = ("bun.lockb", "bunfig.toml")

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = CommandFacts(install_cmd="bun install")

        manifest = load_json(root / "package.json")
        scripts = script_table(manifest)
        if scripts:
            self.log.info("Detected scripts in package.json")
            start = first_script(scripts, START_SCRIPTS)
            if start is not None:
                facts.start_cmd = f"bun run {start}"
            build = first_script(scripts, BUILD_SCRIPTS)
            if build is not None:
                facts.build_cmd = f"bun run {build}"

        main_file = entry_file(manifest)
        if not facts.start_cmd and main_file:
            self.log.info("Detected start command via main file: %s", main_file)
            facts.start_cmd = f"bun {main_file}"

        facts.version = resolve_version(
            root, _VERSION_SOURCES, "1", label="Bun", logger=self.log
        )
        self._log_defaults(
            [
                ("Bun version", facts.version),
                ("Install command", facts.install_cmd),
                ("Build command", facts.build_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)


__all__ = ["BunRuntime"]
