"""PHP runtime plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ..models import CommandFacts, RuntimeName
from .base import Runtime
from .scripts import (
    BUILD_SCRIPTS,
    detect_node_lockfile,
    first_script,
    join_commands,
    load_json,
    script_table,
)
from .versions import read_composer_php, resolve_version, tool_versions

_VERSION_SOURCES = (
    tool_versions("php"),
    ("composer.json", read_composer_php),
)

_COMPOSER_INSTALL = (
    "composer update && composer install --prefer-dist --no-dev "
    "--optimize-autoloader --no-interaction"
)


class PHPRuntime(Runtime):
    """Serves the project with Apache, plus an optional frontend asset build."""

    name = RuntimeName.PHP
    template_name = "php.Dockerfile.j2"
    markers = ("composer.json", "index.php")

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = CommandFacts(
            version=resolve_version(
                root, _VERSION_SOURCES, "8.3", label="PHP", logger=self.log
            ),
            start_cmd="apache2-foreground",
        )

        if (root / "composer.json").exists():
            self.log.info("Detected composer.json file")
            facts.install_cmd = _COMPOSER_INSTALL

        node_step = detect_node_lockfile(root)
        if node_step is not None:
            package_manager, node_install = node_step
            self.log.info("Detected Node.js package manager: %s", package_manager)
            facts.install_cmd = join_commands(facts.install_cmd, node_install)
            facts.build_cmd = self._build_command(root, package_manager)

        self._log_defaults(
            [
                ("PHP version", facts.version),
                ("Install command", facts.install_cmd),
                ("Build command", facts.build_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)

    def _build_command(self, root: Path, package_manager: str) -> str:
        scripts = script_table(load_json(root / "package.json"))
        script = first_script(scripts, BUILD_SCRIPTS)
        if script is None:
            return ""
        corepack = "corepack enable pnpm && " if package_manager == "pnpm" else ""
        command = f"{corepack}{package_manager} run {script}"
        self.log.info("Detected build command in package.json: %s", command)
        return command


__all__ = ["PHPRuntime"]
