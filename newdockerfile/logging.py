"""Logging utilities shared by the detection engine and the CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Tuple

_LOGGER_NAME = "newdockerfile"
_OVERRIDE_HINT = "Docker build arguments can supersede these defaults if provided."


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the newdockerfile hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the package logger.

    Runtimes receive their logger through their constructor, so this only
    decides where records end up and at which level.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[new-dockerfile] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def format_defaults(rows: Sequence[Tuple[str, str]]) -> str:
    """Render the "Detected defaults" block emitted after fact extraction."""
    width = max((len(label) for label, _ in rows), default=0)
    lines = ["Detected defaults"]
    for label, value in rows:
        lines.append(f"  {label.ljust(width)} : {value}")
    lines.append("")
    lines.append(f"  {_OVERRIDE_HINT}")
    return "\n".join(lines)


__all__ = ["configure_logging", "format_defaults", "get_logger"]
