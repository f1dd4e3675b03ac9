"""Ruby runtime plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ..models import CommandFacts, RuntimeName
from .base import Runtime
from .scripts import detect_node_lockfile, join_commands
from .versions import (
    mise_toml,
    read_gemfile_ruby,
    resolve_version,
    tool_versions,
    version_file,
)

_VERSION_SOURCES = (
    tool_versions("ruby"),
    version_file(".ruby-version"),
    mise_toml("ruby"),
    ("Gemfile", read_gemfile_ruby),
)

# Checked in order when the project is not a Rails app.
_LAUNCHERS = (
    ("config.ru", "Rack", "bundle exec rackup config.ru -p ${PORT}"),
    ("config/environment.rb", "Rails", "bundle exec ruby script/server"),
    ("Rakefile", "Rake", "bundle exec rake"),
)


class RubyRuntime(Runtime):
    name = RuntimeName.RUBY
    template_name = "ruby.Dockerfile.j2"
    markers = (
        "Gemfile",
        "Gemfile.lock",
        "Rakefile",
        "config.ru",
        "config/environment.rb",
    )

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = CommandFacts(
            version=resolve_version(
                root, _VERSION_SOURCES, "3.1", label="Ruby", logger=self.log
            ),
            install_cmd="bundle install",
        )

        package_manager = ""
        node_step = detect_node_lockfile(root)
        if node_step is not None:
            package_manager, node_install = node_step
            self.log.info("Detected Node.js package manager: %s", package_manager)
            facts.install_cmd = join_commands(facts.install_cmd, node_install)

        if _is_rails(root):
            self.log.info("Detected Rails project")
            facts.build_cmd = "bundle exec rake assets:precompile"
            facts.start_cmd = "bundle exec rails server -b 0.0.0.0 -p ${PORT}"
        else:
            for launcher, flavour, command in _LAUNCHERS:
                if (root / launcher).exists():
                    self.log.info("Detected %s project", flavour)
                    facts.start_cmd = command
                    break

        self._log_defaults(
            [
                ("Ruby version", facts.version),
                ("Node package manager", package_manager),
                ("Install command", facts.install_cmd),
                ("Build command", facts.build_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        return self._render(facts, overrides)


def _is_rails(root: Path) -> bool:
    gemfile = root / "Gemfile"
    if not gemfile.is_file():
        return False
    for line in gemfile.read_text(encoding="utf-8", errors="ignore").splitlines():
        if line.startswith(("gem 'rails'", 'gem "rails"')):
            return True
    return False


__all__ = ["RubyRuntime"]
