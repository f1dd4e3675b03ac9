"""Next.js runtime tests."""

from __future__ import annotations

import json

from newdockerfile.runtimes.nextjs import NextJSRuntime
from tests._fixtures.repo_builder import RepoBuilder, dockerfile_lines


def test_match_on_next_env_or_build_dir(repo_builder: RepoBuilder) -> None:
    runtime = NextJSRuntime()
    repo_builder.write({"package.json": "{}", "yarn.lock": ""})
    assert runtime.match(repo_builder.path()) is False
    repo_builder.mkdir([".next"])
    assert runtime.match(repo_builder.path()) is True


def test_standalone_output_selects_standalone_template(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "next.config.mjs": """
                const nextConfig = {
                  output: "standalone",
                };
                export default nextConfig;
            """,
            ".node-version": "20\n",
        }
    )

    contents = NextJSRuntime().generate_dockerfile(repo_builder.path()).decode("utf-8")
    lines = contents.splitlines()

    assert "ARG VERSION=20" in lines
    assert "ENV PORT=3000" in lines
    assert 'CMD HOSTNAME="0.0.0.0" node server.js' in lines


def test_server_template_by_default(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "next.config.js": "module.exports = { reactStrictMode: true }\n",
            "package.json": json.dumps({"engines": {"node": "^18.17.0"}}),
        }
    )

    contents = NextJSRuntime().generate_dockerfile(repo_builder.path()).decode("utf-8")
    lines = contents.splitlines()

    assert "ARG VERSION=18.17" in lines
    assert "ENV PORT=8080" in lines
    assert 'CMD ["node_modules/.bin/next", "start", "-H", "0.0.0.0"]' in lines


def test_mounts_are_injected(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"next-env.d.ts": ""})

    contents = NextJSRuntime().generate_dockerfile(
        repo_builder.path(),
        {
            "InstallMounts": "--mount=type=cache,target=/root/.npm ",
            "BuildMounts": "--mount=type=cache,target=/app/.next/cache ",
        },
    ).decode("utf-8")

    assert "RUN --mount=type=cache,target=/root/.npm if [ -f yarn.lock ]" in contents
    assert "RUN --mount=type=cache,target=/app/.next/cache if [ -f yarn.lock ]" in contents
