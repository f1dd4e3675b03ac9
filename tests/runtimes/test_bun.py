"""Bun runtime tests."""

from __future__ import annotations

import json

from newdockerfile.runtimes.bun import BunRuntime
from tests._fixtures.repo_builder import RepoBuilder, dockerfile_lines


def test_match_on_bunfig(repo_builder: RepoBuilder) -> None:
    runtime = BunRuntime()
    repo_builder.write({"package.json": "{}", "yarn.lock": ""})
    assert runtime.match(repo_builder.path()) is False
    repo_builder.write({"bunfig.toml": "[install]\n"})
    assert runtime.match(repo_builder.path()) is True


def test_scripts_render_with_bun_run(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "bun.lockb": "",
            "package.json": json.dumps(
                {"scripts": {"start": "bun index.ts", "build-prod": "bun build ./index.ts"}}
            ),
            ".tool-versions": "bun 1.1.8\n",
        }
    )

    lines = dockerfile_lines(BunRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=1.1.8" in lines
    assert 'ARG INSTALL_CMD="bun install"' in lines
    assert 'ARG BUILD_CMD="bun run build-prod"' in lines
    assert 'ARG START_CMD="bun run start"' in lines


def test_module_field_fallback(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {"bun.lockb": "", "package.json": json.dumps({"module": "src/index.ts"})}
    )

    lines = dockerfile_lines(BunRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=1" in lines
    assert 'ARG START_CMD="bun src/index.ts"' in lines


def test_install_override(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"bun.lockb": ""})

    lines = dockerfile_lines(
        BunRuntime().generate_dockerfile(
            repo_builder.path(), {"InstallCMD": '"bun install --production"'}
        )
    )

    assert 'ARG INSTALL_CMD="bun install --production"' in lines
