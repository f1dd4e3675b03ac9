from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from newdockerfile.rendering import TemplateRenderer
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def runtime_logger() -> logging.Logger:
    logger = logging.getLogger("newdockerfile-tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers installed by CLI runs so they do not outlive capsys."""
    yield
    logger = logging.getLogger("newdockerfile")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
