"""Next.js runtime plugin."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..models import Facts, RuntimeName, fact
from .base import Runtime
from .node import resolve_node_version

_CONFIG_FILES = ("next.config.js", "next.config.ts", "next.config.mjs", "next.config.mts")

STANDALONE_TEMPLATE = "nextjs-standalone.Dockerfile.j2"
SERVER_TEMPLATE = "nextjs-server.Dockerfile.j2"


@dataclass
class NextJSFacts(Facts):
    version: str = fact("Version")


class NextJSRuntime(Runtime):
    name = RuntimeName.NEXTJS
    template_name = SERVER_TEMPLATE
    markers = (
        "next.config.js",
        "next.config.ts",
        "next.config.cjs",
        "next.config.mjs",
        "next.config.mts",
        "next-env.d.ts",
        "src/next-env.d.ts",
        ".next",
    )

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        template = STANDALONE_TEMPLATE if self._is_standalone(root) else SERVER_TEMPLATE
        facts = NextJSFacts(version=resolve_node_version(root, self.log))
        self._log_defaults([("Node version", facts.version), ("Template", template)])
        return self._render(facts, overrides, template_name=template)

    def _is_standalone(self, root: Path) -> bool:
        for name in _CONFIG_FILES:
            config = root / name
            if not config.is_file():
                continue
            for line in config.read_text(encoding="utf-8", errors="ignore").splitlines():
                if "output" in line and "standalone" in line:
                    self.log.info("Found standalone output in %s", name)
                    return True
        return False


__all__ = ["NextJSFacts", "NextJSRuntime", "SERVER_TEMPLATE", "STANDALONE_TEMPLATE"]
