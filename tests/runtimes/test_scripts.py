"""Shared convention scanner tests."""

from __future__ import annotations

import pytest

from newdockerfile.runtimes.scripts import (
    BUILD_SCRIPTS,
    START_SCRIPTS,
    detect_node_lockfile,
    entry_file,
    file_mentions,
    first_script,
    guess_start_script,
    join_commands,
    script_table,
)
from tests._fixtures.repo_builder import RepoBuilder


def test_first_script_respects_priority() -> None:
    scripts = {"start": "node a.js", "preview": "vite preview", "serve": "serve dist"}
    assert first_script(scripts, START_SCRIPTS) == "serve"
    assert first_script({"build": "tsc", "build-production": "tsc -p prod"}, BUILD_SCRIPTS) == (
        "build-production"
    )
    assert first_script({}, START_SCRIPTS) is None


@pytest.mark.parametrize(
    ("body", "matches"),
    [
        ("node index.js", True),
        ("ts-node src/main.ts", True),
        ("nodemon --watch src server.mjs", True),
        ("NODE_ENV=production node dist/client.cjs", True),
        ("node scripts/seed.js", False),
        ("vite", False),
    ],
)
def test_guess_start_script(body: str, matches: bool) -> None:
    assert (guess_start_script({"run": body}) == "run") is matches


def test_script_table_ignores_non_strings() -> None:
    manifest = {"scripts": {"start": "node index.js", "weird": ["x"]}}
    assert script_table(manifest) == {"start": "node index.js"}
    assert script_table({"scripts": "nope"}) == {}


def test_entry_file_prefers_main() -> None:
    assert entry_file({"main": "index.js", "module": "index.mjs"}) == "index.js"
    assert entry_file({"module": "index.mjs"}) == "index.mjs"
    assert entry_file({}) is None


def test_node_lockfile_priority(repo_builder: RepoBuilder) -> None:
    assert detect_node_lockfile(repo_builder.path()) is None
    repo_builder.write({"yarn.lock": "", "bun.lockb": ""})
    assert detect_node_lockfile(repo_builder.path()) == ("yarn", "yarn --frozen-lockfile")
    repo_builder.write({"package-lock.json": "{}"})
    assert detect_node_lockfile(repo_builder.path()) == ("npm", "npm ci")


def test_join_commands_skips_empty() -> None:
    assert join_commands("", "npm ci") == "npm ci"
    assert join_commands("bundle install", "npm ci") == "bundle install && npm ci"


def test_file_mentions_is_case_insensitive(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"requirements.txt": "Django>=4\n"})
    assert file_mentions(repo_builder.path(), ["Pipfile", "requirements.txt"], "django")
    assert not file_mentions(repo_builder.path(), ["requirements.txt"], "fastapi")
