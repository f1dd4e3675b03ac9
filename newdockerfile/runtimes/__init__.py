"""Runtime plugin implementations and the ordered detection chain."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from ..models import RuntimeName
from ..rendering import TemplateRenderer
from .base import Runtime
from .bun import BunRuntime
from .deno import DenoRuntime
from .docker import DockerRuntime
from .elixir import ElixirRuntime
from .golang import GolangRuntime
from .java import JavaRuntime
from .nextjs import NextJSRuntime
from .node import NodeRuntime
from .php import PHPRuntime
from .python import PythonRuntime
from .ruby import RubyRuntime
from .rust import RustRuntime
from .static import StaticRuntime

RuntimeFactory = Callable[..., Runtime]

# Detection order. Earlier entries win when markers overlap, e.g. Next.js
# before Node and Node before Static.
_CHAIN_FACTORIES: Dict[RuntimeName, RuntimeFactory] = {
    RuntimeName.GOLANG: GolangRuntime,
    RuntimeName.RUST: RustRuntime,
    RuntimeName.RUBY: RubyRuntime,
    RuntimeName.PYTHON: PythonRuntime,
    RuntimeName.PHP: PHPRuntime,
    RuntimeName.JAVA: JavaRuntime,
    RuntimeName.ELIXIR: ElixirRuntime,
    RuntimeName.NEXTJS: NextJSRuntime,
    RuntimeName.DENO: DenoRuntime,
    RuntimeName.BUN: BunRuntime,
    RuntimeName.NODE: NodeRuntime,
    RuntimeName.STATIC: StaticRuntime,
}

# Selectable by name only; never part of detection.
_NAMED_ONLY_FACTORIES: Dict[RuntimeName, RuntimeFactory] = {
    RuntimeName.DOCKER: DockerRuntime,
}


def list_runtimes(
    logger: logging.Logger | None = None,
    renderer: TemplateRenderer | None = None,
) -> List[Runtime]:
    """Return one instance per detectable ecosystem, in detection order."""
    renderer = renderer or TemplateRenderer()
    return [
        _build(factory, logger, renderer) for factory in _CHAIN_FACTORIES.values()
    ]


def named_runtimes(
    logger: logging.Logger | None = None,
    renderer: TemplateRenderer | None = None,
) -> List[Runtime]:
    """Return the detection chain followed by the runtimes selectable by name only."""
    renderer = renderer or TemplateRenderer()
    runtimes = list_runtimes(logger, renderer)
    runtimes.extend(
        _build(factory, logger, renderer) for factory in _NAMED_ONLY_FACTORIES.values()
    )
    return runtimes


def _build(
    factory: RuntimeFactory,
    logger: logging.Logger | None,
    renderer: TemplateRenderer | None,
) -> Runtime:
    instance = factory(logger=logger, renderer=renderer)
    if not isinstance(instance, Runtime):
        raise TypeError(f"Runtime factory {factory!r} did not return a Runtime instance")
    return instance


__all__ = [
    "BunRuntime",
    "DenoRuntime",
    "DockerRuntime",
    "ElixirRuntime",
    "GolangRuntime",
    "JavaRuntime",
    "NextJSRuntime",
    "NodeRuntime",
    "PHPRuntime",
    "PythonRuntime",
    "RubyRuntime",
    "Runtime",
    "RustRuntime",
    "StaticRuntime",
    "list_runtimes",
    "named_runtimes",
]
