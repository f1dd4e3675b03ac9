"""Dispatcher that picks a runtime for a project and produces its Dockerfile."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Sequence

from .logging import get_logger
from .rendering import TemplateRenderer
from .runtimes import Runtime, list_runtimes, named_runtimes


class RuntimeNotDetectedError(RuntimeError):
    """Raised when no runtime in the detection chain claims a project."""

    def __init__(self, path: Path, supported: Sequence[str]) -> None:
        self.path = Path(path)
        self.supported = list(supported)
        names = "\n".join(f"  - {name}" for name in self.supported)
        super().__init__(
            "A Dockerfile was not detected in the project and we could not "
            "auto-generate one for you.\n"
            f"Supported runtimes:\n{names}\n"
            "Use --runtime to force one of them."
        )


class UnknownRuntimeError(ValueError):
    """Raised when a runtime is requested by a name that does not exist."""

    def __init__(self, name: str, supported: Sequence[str]) -> None:
        self.name = name
        self.supported = list(supported)
        names = "\n".join(f"  - {item}" for item in self.supported)
        super().__init__(f'Runtime "{name}" not found. Expected one of:\n{names}')


class Dockerfile:
    """Entry point tying the detection chain to template rendering.

    The logger and renderer are shared with every runtime built here, so a
    caller controls where detection traces go and which template directory
    shadows the built-in templates.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.log = logger or get_logger("dockerfile")
        self.renderer = renderer or TemplateRenderer()

    def list_runtimes(self) -> List[Runtime]:
        """Return the detection chain in priority order."""
        return list_runtimes(self.log, self.renderer)

    def runtime_names(self) -> List[str]:
        return [runtime.name.value for runtime in self.list_runtimes()]

    def match_runtime(self, path: Path) -> Runtime:
        """Return the first runtime whose probe accepts ``path``."""
        root = Path(path)
        runtimes = self.list_runtimes()
        for runtime in runtimes:
            if runtime.match(root):
                return runtime
        raise RuntimeNotDetectedError(root, [runtime.name.value for runtime in runtimes])

    def resolve_runtime(self, name: str) -> Runtime:
        """Return the runtime called ``name`` (case-insensitive), bypassing detection."""
        runtimes = named_runtimes(self.log, self.renderer)
        wanted = name.strip().lower()
        for runtime in runtimes:
            if runtime.name.value.lower() == wanted:
                return runtime
        raise UnknownRuntimeError(name, [runtime.name.value for runtime in runtimes])

    def select_runtime(self, path: Path, runtime: str | None = None) -> Runtime:
        if runtime:
            return self.resolve_runtime(runtime)
        return self.match_runtime(path)

    def generate(
        self,
        path: Path,
        runtime: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> bytes:
        """Render the Dockerfile for ``path`` without touching the filesystem."""
        selected = self.select_runtime(path, runtime)
        return selected.generate_dockerfile(Path(path), overrides)

    def write(
        self,
        path: Path,
        output: str = "Dockerfile",
        runtime: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> Path:
        """Generate the Dockerfile for ``path`` and write it to ``path / output``."""
        root = Path(path)
        selected = self.select_runtime(root, runtime)
        contents = selected.generate_dockerfile(root, overrides)
        destination = root / output
        destination.write_bytes(contents)
        self.log.info("Auto-generated Dockerfile for project using %s", selected.name)
        return destination


__all__ = ["Dockerfile", "RuntimeNotDetectedError", "UnknownRuntimeError"]
