"""PHP runtime tests."""

from __future__ import annotations

import json

import pytest

from newdockerfile.runtimes.php import PHPRuntime
from tests._fixtures.repo_builder import RepoBuilder, dockerfile_lines


def test_match_on_index_php(repo_builder: RepoBuilder) -> None:
    runtime = PHPRuntime()
    repo_builder.write({"deno.json": "{}"})
    assert runtime.match(repo_builder.path()) is False
    repo_builder.write({"index.php": "<?php echo 'hi';\n"})
    assert runtime.match(repo_builder.path()) is True


def test_plain_php_defaults(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"index.php": "<?php\n"})

    lines = dockerfile_lines(PHPRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=8.3" in lines
    assert "ARG INSTALL_CMD=" in lines
    assert "ARG BUILD_CMD=" in lines
    assert 'ARG START_CMD="apache2-foreground"' in lines


def test_composer_version_constraint(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {"composer.json": json.dumps({"require": {"php": "^5.3.", "laravel/framework": "^10"}})}
    )

    lines = dockerfile_lines(PHPRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=5.3" in lines
    assert (
        'ARG INSTALL_CMD="composer update && composer install --prefer-dist --no-dev '
        '--optimize-autoloader --no-interaction"'
    ) in lines


def test_frontend_assets_with_yarn(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "composer.json": json.dumps({"require": {"php": ">=8.2.0"}}),
            "package.json": json.dumps({"scripts": {"build": "vite build", "dev": "vite"}}),
            "yarn.lock": "",
        }
    )

    lines = dockerfile_lines(PHPRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=8.2.0" in lines
    assert any(
        line.startswith('ARG INSTALL_CMD="composer update') and line.endswith('&& yarn --frozen-lockfile"')
        for line in lines
    )
    assert 'ARG BUILD_CMD="yarn run build"' in lines


def test_pnpm_build_enables_corepack(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "index.php": "<?php\n",
            "package.json": json.dumps({"scripts": {"build:prod": "vite build"}}),
            "pnpm-lock.yaml": "",
        }
    )

    lines = dockerfile_lines(PHPRuntime().generate_dockerfile(repo_builder.path()))

    assert 'ARG INSTALL_CMD="corepack enable pnpm && pnpm i --frozen-lockfile"' in lines
    assert 'ARG BUILD_CMD="corepack enable pnpm && pnpm run build:prod"' in lines


def test_tool_versions_precedes_composer(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".tool-versions": "php 8.1.27\n",
            "composer.json": json.dumps({"require": {"php": "7.4 - 8.0"}}),
        }
    )

    lines = dockerfile_lines(PHPRuntime().generate_dockerfile(repo_builder.path()))

    assert "ARG VERSION=8.1.27" in lines


def test_invalid_composer_json_is_fatal(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"composer.json": "{not json"})

    with pytest.raises(json.JSONDecodeError):
        PHPRuntime().generate_dockerfile(repo_builder.path())
