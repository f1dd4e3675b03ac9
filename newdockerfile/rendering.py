"""Jinja2-backed renderer for the per-runtime Dockerfile templates."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping

from jinja2 import Environment, FileSystemLoader, Undefined

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class TemplateRenderer:
    """Fills a named template with facts and caller overrides.

    Placeholders without a value render as an empty string, so a sparse
    fact set never fails a render.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(
        self,
        template_name: str,
        facts: Mapping[str, str],
        overrides: Mapping[str, str] | None = None,
    ) -> bytes:
        context: Dict[str, str] = dict(facts)
        if overrides:
            context.update(overrides)
        template = self._env.get_template(template_name)
        return template.render(context).encode("utf-8")

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES_DIR))
        # User templates shadow the built-in ones with the same file name.
        loader = FileSystemLoader(list(dict.fromkeys(directories)))
        return Environment(
            loader=loader,
            autoescape=False,
            undefined=Undefined,
            keep_trailing_newline=False,
        )


__all__ = ["TemplateRenderer"]
