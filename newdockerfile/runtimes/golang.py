"""Go runtime plugin."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..models import Facts, RuntimeName, fact
from .base import Runtime
from .versions import mise_toml, read_go_mod, resolve_version, tool_versions

_VERSION_SOURCES = (
    tool_versions("golang"),
    mise_toml("go"),
    ("go.mod", read_go_mod),
)


@dataclass
class GolangFacts(Facts):
    version: str = fact("Version")
    package: str = fact("Package")


class GolangRuntime(Runtime):
    """Builds a static binary from ``cmd/<name>`` or a root ``main.go``."""

    name = RuntimeName.GOLANG
    template_name = "golang.Dockerfile.j2"
    markers = ("go.mod", "main.go")

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = GolangFacts(
            version=resolve_version(
                root, _VERSION_SOURCES, "1.17", label="Go", logger=self.log
            ),
            package=self._find_package(root),
        )
        self.log.info("Using package: %s", facts.package)
        self._log_defaults([("Go version", facts.version), ("Package", facts.package)])
        return self._render(facts, overrides)

    def _find_package(self, root: Path) -> str:
        cmd_dir = root / "cmd"
        if cmd_dir.is_dir():
            self.log.info("Found cmd directory. Detecting package...")
            for item in sorted(cmd_dir.iterdir(), key=lambda entry: entry.name):
                if item.is_dir():
                    return f"./cmd/{item.name}"
                if item.name == "main.go":
                    return "./cmd/main.go"
        if (root / "main.go").is_file():
            return "./main.go"
        return ""


__all__ = ["GolangFacts", "GolangRuntime"]
