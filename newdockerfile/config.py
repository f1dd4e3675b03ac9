"""Configuration loading for new-dockerfile (.newdockerfile.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILE_NAME = ".newdockerfile.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class NewDockerfileConfig:
    """Represents the project settings defined in .newdockerfile.yml."""

    root: Path
    runtime: Optional[str] = None
    output: str = "Dockerfile"
    overrides: Dict[str, str] = field(default_factory=dict)
    templates_dir: Optional[Path] = None


def load_config(config_path: Path) -> NewDockerfileConfig:
    """Load configuration from a project directory or the config file itself."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return NewDockerfileConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    overrides_data = data.get("overrides")
    if overrides_data is not None and not isinstance(overrides_data, dict):
        raise ConfigError("'overrides' must be a mapping of placeholder names to values")

    templates_dir_str = _as_str(data.get("templates_dir"))

    return NewDockerfileConfig(
        root=root,
        runtime=_as_str(data.get("runtime")),
        output=_as_str(data.get("output")) or "Dockerfile",
        overrides=_as_str_dict(overrides_data),
        templates_dir=root / templates_dir_str if templates_dir_str else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    if config_path.name != CONFIG_FILE_NAME:
        return (config_path.parent / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    result: Dict[str, str] = {}
    for key, item in value.items():
        text = _as_str(item)
        result[str(key)] = "" if text is None else text
    return result


__all__ = ["CONFIG_FILE_NAME", "ConfigError", "NewDockerfileConfig", "load_config"]
