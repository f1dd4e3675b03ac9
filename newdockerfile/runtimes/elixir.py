"""Elixir runtime plugin."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..models import Facts, RuntimeName, fact
from .base import Runtime
from .versions import resolve_version, tool_versions, version_file

_ELIXIR_SOURCES = (tool_versions("elixir"), version_file(".elixir-version"))
_ERLANG_SOURCES = (tool_versions("erlang"), version_file(".erlang-version"))


@dataclass
class ElixirFacts(Facts):
    elixir_version: str = fact("ElixirVersion")
    otp_version: str = fact("OTPVersion")
    bin_name: str = fact("BinName")


class ElixirRuntime(Runtime):
    """Builds a ``mix release`` and runs it as ``/app/bin/server``."""

    name = RuntimeName.ELIXIR
    template_name = "elixir.Dockerfile.j2"
    markers = ("mix.exs",)

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        otp_version = resolve_version(
            root, _ERLANG_SOURCES, "26.2.5", label="Erlang", logger=self.log
        )
        facts = ElixirFacts(
            elixir_version=resolve_version(
                root, _ELIXIR_SOURCES, "1.12", label="Elixir", logger=self.log
            ),
            # Images are tagged by OTP major only.
            otp_version=otp_version.split(".")[0],
            bin_name=_find_app_name(root / "mix.exs"),
        )
        self._log_defaults(
            [
                ("Elixir version", facts.elixir_version),
                ("Erlang version", otp_version),
                ("Binary name", facts.bin_name),
            ]
        )
        return self._render(facts, overrides)


def _find_app_name(mix_exs: Path) -> str:
    """Read the OTP application name from the ``app: :name`` line of mix.exs."""
    if not mix_exs.is_file():
        return ""
    for line in mix_exs.read_text(encoding="utf-8", errors="ignore").splitlines():
        if "app: :" not in line:
            continue
        remainder = line.replace("app:", "", 1).split(":")[1]
        return remainder.strip().strip(",'\"").strip()
    return ""


__all__ = ["ElixirFacts", "ElixirRuntime"]
