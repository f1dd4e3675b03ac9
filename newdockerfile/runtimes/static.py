"""Static site runtime plugin."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..models import Facts, RuntimeName, fact
from .base import Runtime

_ROOT_DIRS = ("public", "static", "dist")


@dataclass
class StaticFacts(Facts):
    server_root: str = fact("ServerRoot", ".")


class StaticRuntime(Runtime):
    """Serves prebuilt files with static-web-server."""

    name = RuntimeName.STATIC
    template_name = "static.Dockerfile.j2"
    markers = _ROOT_DIRS + ("index.html",)

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = StaticFacts()
        if not (root / "index.html").exists():
            facts.server_root = next(
                (name for name in _ROOT_DIRS if (root / name).exists()), "."
            )
        self.log.info("Detected root directory: %s", facts.server_root)
        return self._render(facts, overrides)


__all__ = ["StaticFacts", "StaticRuntime"]
