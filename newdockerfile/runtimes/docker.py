"""Passthrough for projects that already ship their own Dockerfile."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ..models import RuntimeName
from .base import Runtime


class DockerRuntime(Runtime):
    """Returns the project's existing ``Dockerfile`` unchanged.

    Overrides are ignored: the file is not a template.
    """

    name = RuntimeName.DOCKER

    def match(self, path: Path) -> bool:
        if (Path(path) / "Dockerfile").is_file():
            self.log.info("Detected %s project", self.name)
            return True
        self.log.debug("%s project not detected", self.name)
        return False

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        return (Path(path) / "Dockerfile").read_bytes()


__all__ = ["DockerRuntime"]
