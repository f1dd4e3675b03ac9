"""Node runtime tests."""

from __future__ import annotations

import json

import pytest

from newdockerfile.runtimes.node import NodeRuntime
from tests._fixtures.repo_builder import RepoBuilder, dockerfile_lines


def _package_json(**fields: object) -> str:
    return json.dumps(fields)


def test_match_requires_lockfile(repo_builder: RepoBuilder) -> None:
    runtime = NodeRuntime()
    repo_builder.write({"package.json": _package_json(name="app")})
    assert runtime.match(repo_builder.path()) is False
    repo_builder.write({"package-lock.json": "{}"})
    assert runtime.match(repo_builder.path()) is True


def test_yarn_production_start_script(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": _package_json(
                scripts={"start:production": "node server.js"}, engines={"node": "18"}
            ),
            "yarn.lock": "",
        }
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=18" in lines
    assert 'ARG INSTALL_CMD="yarn --frozen-lockfile"' in lines
    assert 'ARG START_CMD="yarn run start:production"' in lines


def test_production_start_beats_generic_start(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": _package_json(
                scripts={
                    "start": "node index.js",
                    "start:production": "NODE_ENV=production node index.js",
                    "build": "tsc",
                    "build:prod": "tsc -p tsconfig.prod.json",
                }
            ),
            "package-lock.json": "{}",
        }
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert 'ARG INSTALL_CMD="npm ci"' in lines
    assert 'ARG START_CMD="npm run start:production"' in lines
    assert 'ARG BUILD_CMD="npm run build:prod"' in lines


def test_start_script_guessed_from_body(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": _package_json(
                scripts={"lint": "eslint .", "dev": "nodemon src/server.ts"}
            ),
            "pnpm-lock.yaml": "",
        }
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert 'ARG INSTALL_CMD="pnpm i --frozen-lockfile"' in lines
    assert 'ARG START_CMD="pnpm run dev"' in lines


def test_main_field_fallback(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {"package.json": _package_json(main="lib/app.js"), "package-lock.json": "{}"}
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert 'ARG START_CMD="node lib/app.js"' in lines
    assert "ARG BUILD_CMD=" in lines


def test_engines_range_resolves_lowest_match(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": _package_json(engines={"node": ">=16.4 <20"}),
            "package-lock.json": "{}",
        }
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=16.4" in lines


def test_nvmrc_strips_leading_v(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".nvmrc": "v20.11.0\n",
            "package.json": _package_json(engines={"node": "18"}),
            "yarn.lock": "",
        }
    )

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=20.11.0" in lines


def test_without_package_json_defaults_to_lts(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"yarn.lock": ""})

    lines = dockerfile_lines(NodeRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=lts" in lines
    assert "ARG START_CMD=" in lines


def test_invalid_package_json_is_fatal(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{", "yarn.lock": ""})

    with pytest.raises(json.JSONDecodeError):
        NodeRuntime().generate_dockerfile(repo_builder.path())
