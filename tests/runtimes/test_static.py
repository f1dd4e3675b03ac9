"""Static site runtime tests."""

from __future__ import annotations

import pytest

from newdockerfile.runtimes.static import StaticRuntime
from tests._fixtures.repo_builder import RepoBuilder, dockerfile_lines


def test_match_on_public_directory(repo_builder: RepoBuilder) -> None:
    runtime = StaticRuntime()
    assert runtime.match(repo_builder.path()) is False
    repo_builder.mkdir(["public"])
    assert runtime.match(repo_builder.path()) is True


def test_index_html_at_root_serves_root(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"index.html": "<html></html>\n"})
    repo_builder.mkdir(["dist"])

    lines = dockerfile_lines(StaticRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG SERVER_ROOT=." in lines


@pytest.mark.parametrize(
    ("directories", "expected"),
    [
        (["dist", "static"], "static"),
        (["dist"], "dist"),
        (["public", "dist"], "public"),
        ([], "."),
    ],
)
def test_first_existing_root_directory(
    repo_builder: RepoBuilder, directories: list[str], expected: str
) -> None:
    repo_builder.mkdir(directories)

    lines = dockerfile_lines(StaticRuntime().generate_dockerfile(repo_builder.path()))

    assert f"ARG SERVER_ROOT={expected}" in lines
