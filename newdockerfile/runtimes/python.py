"""Python runtime plugin."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from ..models import Facts, RuntimeName, fact
from .base import Runtime
from .scripts import file_mentions
from .versions import (
    mise_toml,
    read_runtime_txt,
    resolve_version,
    tool_versions,
    version_file,
)

_VERSION_SOURCES = (
    tool_versions("python"),
    version_file(".python-version"),
    mise_toml("python"),
    ("runtime.txt", read_runtime_txt),
)

# (marker, package manager, install command), first present wins.
_INSTALLERS: Tuple[Tuple[str, str, str], ...] = (
    ("requirements.txt", "pip", "pip install --no-cache -r requirements.txt"),
    (
        "uv.lock",
        "uv",
        "pip install uv && uv sync --python-preference=only-system --no-cache --no-dev",
    ),
    (
        "poetry.lock",
        "poetry",
        "pip install poetry && poetry install --no-dev --no-ansi --no-root",
    ),
    (
        "Pipfile.lock",
        "pipenv",
        "pip install pipenv && pipenv install --dev --system --deploy",
    ),
    ("pdm.lock", "pdm", "pip install pdm && pdm install --prod"),
    ("pyproject.toml", "pip", "pip install --upgrade build setuptools && pip install ."),
)

_DEPENDENCY_FILES = ("requirements.txt", "pyproject.toml", "Pipfile")

_POETRY_INSTRUCTIONS = """
ENV POETRY_NO_INTERACTION=1
ENV POETRY_VIRTUALENVS_CREATE=false
ENV POETRY_CACHE_DIR='/var/cache/pypoetry'
ENV POETRY_HOME='/usr/local'"""

_UV_INSTRUCTIONS = '''
# Set the UV_CACHE_DIR environment variable to a directory where uv will store its cache
ENV UV_CACHE_DIR='/var/cache/uv'
# Use the virtual environment automatically
ENV VIRTUAL_ENV=/app/.venv
ENV PATH="/app/.venv/bin:$PATH"'''

_PACKAGER_INSTRUCTIONS = {
    "poetry": _POETRY_INSTRUCTIONS,
    "uv": _UV_INSTRUCTIONS,
}


@dataclass
class PythonFacts(Facts):
    version: str = fact("Version")
    install_cmd: str = fact("InstallCMD", command=True)
    start_cmd: str = fact("StartCMD", command=True)
    packager_instructions: str = fact("PackagerInstructions")


class PythonRuntime(Runtime):
    """Detects Django, FastAPI and plain Python services.

    The package manager is picked from the first lockfile present, and the
    start command prefers framework launchers over generic entry files.
    """

    name = RuntimeName.PYTHON
    template_name = "python.Dockerfile.j2"

    def match(self, path: Path) -> bool:
        root = Path(path).resolve()
        markers = [
            "requirements.txt",
            "poetry.lock",
            "uv.lock",
            "Pipfile.lock",
            "pyproject.toml",
            "pdm.lock",
            "main.py",
            "app.py",
            "application.py",
            "app/__init__.py",
        ]
        markers.extend(
            f"{root.name}/{entry}"
            for entry in ("app.py", "application.py", "main.py", "__init__.py")
        )
        return self._match_markers(root, markers)

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path).resolve()
        facts = PythonFacts(
            version=resolve_version(
                root, _VERSION_SOURCES, "3.12", label="Python", logger=self.log
            )
        )

        package_manager = "pip"
        for marker, manager, command in _INSTALLERS:
            if (root / marker).exists():
                self.log.info("Detected %s (%s)", marker, manager)
                package_manager = manager
                facts.install_cmd = command
                break
        facts.packager_instructions = _PACKAGER_INSTRUCTIONS.get(package_manager, "")

        facts.start_cmd = self._start_command(root)

        self._log_defaults(
            [
                ("Python version", facts.version),
                ("Package manager", package_manager),
                ("Install command", facts.install_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)

    def _start_command(self, root: Path) -> str:
        manage_py = _find_django_manage(root)
        if manage_py is not None:
            self.log.info("Detected Django project")
            return f"python {manage_py} runserver 0.0.0.0:${{PORT}}"

        is_fastapi = file_mentions(root, _DEPENDENCY_FILES, "fastapi")
        if not is_fastapi and (root / "pyproject.toml").is_file():
            module = _project_name(root / "pyproject.toml") or root.name
            self.log.info("Detected start command via pyproject.toml")
            return f"python -m {module}"

        for entry in _main_files(root):
            if not (root / entry).is_file():
                continue
            if is_fastapi:
                self.log.info("Detected FastAPI project")
                return f"fastapi run {entry} --port ${{PORT}}"
            command = f"python {entry}"
            self.log.info("Detected start command via main file: %s", command)
            return command
        return ""


def _find_django_manage(root: Path) -> Optional[str]:
    candidates = ("manage.py", "app/manage.py", f"{root.name}/manage.py")
    manage_py = next(
        (candidate for candidate in candidates if (root / candidate).is_file()), None
    )
    if manage_py is None:
        return None
    if file_mentions(root, _DEPENDENCY_FILES, "django"):
        return manage_py
    return None


def _project_name(pyproject: Path) -> Optional[str]:
    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    project = data.get("project")
    if isinstance(project, dict) and isinstance(project.get("name"), str):
        return project["name"]
    tool = data.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, dict) else None
    if isinstance(poetry, dict) and isinstance(poetry.get("name"), str):
        return poetry["name"]
    return None


def _main_files(root: Path) -> List[str]:
    files = ["main.py", "app.py", "application.py", "app/main.py", "app/__init__.py"]
    files.extend(
        f"{root.name}/{entry}"
        for entry in ("main.py", "app.py", "application.py", "__init__.py")
    )
    return files


__all__ = ["PythonFacts", "PythonRuntime"]
