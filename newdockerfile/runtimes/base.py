"""Base classes for runtime plugins."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Sequence, Tuple

from ..logging import format_defaults, get_logger
from ..models import Facts, RuntimeName
from ..rendering import TemplateRenderer


class Runtime(ABC):
    """Contract for ecosystems that can be detected and turned into a Dockerfile.

    Each instance owns the logger and renderer handed to its constructor and
    keeps no other state, so ``match`` and ``generate_dockerfile`` are safe to
    call repeatedly for any number of paths.
    """

    name: RuntimeName
    template_name: str = ""
    markers: Tuple[str, ...] = ()

    def __init__(
        self,
        logger: logging.Logger | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.log = logger or get_logger(f"runtimes.{type(self).__name__.lower()}")
        self.renderer = renderer or TemplateRenderer()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name.value!r})"

    def match(self, path: Path) -> bool:
        """Return True when ``path`` looks like a project of this ecosystem."""
        return self._match_markers(Path(path), self.markers)

    @abstractmethod
    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        """Extract facts from ``path`` and render the ecosystem template."""

    def _match_markers(self, root: Path, markers: Sequence[str]) -> bool:
        for marker in markers:
            if (root / marker).exists():
                self.log.info("Detected %s project", self.name)
                return True
        self.log.debug("%s project not detected", self.name)
        return False

    def _render(
        self,
        facts: Facts,
        overrides: Mapping[str, str] | None = None,
        template_name: str | None = None,
    ) -> bytes:
        return self.renderer.render(
            template_name or self.template_name, facts.to_context(), overrides
        )

    def _log_defaults(self, rows: Sequence[Tuple[str, str]]) -> None:
        self.log.info(format_defaults(rows))


__all__ = ["Runtime"]
