"""Node.js runtime plugin."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from ..models import CommandFacts, RuntimeName
from .base import Runtime
from .scripts import (
    BUILD_SCRIPTS,
    START_SCRIPTS,
    entry_file,
    first_script,
    guess_start_script,
    load_json,
    script_table,
)
from .versions import (
    mise_toml,
    read_node_engines,
    resolve_version,
    tool_versions,
    version_file,
)

NODE_VERSION_SOURCES = (
    version_file(".nvmrc", strip_v=True),
    version_file(".node-version", strip_v=True),
    tool_versions("nodejs"),
    mise_toml("node"),
    ("package.json", read_node_engines),
)


def resolve_node_version(root: Path, logger: logging.Logger) -> str:
    return resolve_version(root, NODE_VERSION_SOURCES, "lts", label="Node", logger=logger)


class NodeRuntime(Runtime):
    """Runs package.json scripts through the package manager that owns the lockfile."""

    name = RuntimeName.NODE
    template_name = "node.Dockerfile.j2"
    markers = ("yarn.lock", "package-lock.json", "pnpm-lock.yaml")

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = CommandFacts(version=resolve_node_version(root, self.log))

        manifest = load_json(root / "package.json")
        if not manifest:
            self.log.info("No package.json file found")

        package_manager = "npm"
        facts.install_cmd = "npm ci"
        if (root / "yarn.lock").exists():
            package_manager = "yarn"
            facts.install_cmd = "yarn --frozen-lockfile"
        elif (root / "pnpm-lock.yaml").exists():
            package_manager = "pnpm"
            facts.install_cmd = "pnpm i --frozen-lockfile"

        scripts = script_table(manifest)
        if scripts:
            self.log.info("Detected scripts in package.json")
            start = first_script(scripts, START_SCRIPTS)
            if start is None:
                start = guess_start_script(scripts)
                if start is not None:
                    self.log.info("Detected start script via node entry pattern: %s", start)
            if start is not None:
                facts.start_cmd = f"{package_manager} run {start}"
            build = first_script(scripts, BUILD_SCRIPTS)
            if build is not None:
                facts.build_cmd = f"{package_manager} run {build}"

        main_file = entry_file(manifest)
        if not facts.start_cmd and main_file:
            facts.start_cmd = f"node {main_file}"

        self._log_defaults(
            [
                ("Node version", facts.version),
                ("Package manager", package_manager),
                ("Install command", facts.install_cmd),
                ("Build command", facts.build_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)


__all__ = ["NODE_VERSION_SOURCES", "NodeRuntime", "resolve_node_version"]
