"""Rust runtime plugin."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..models import Facts, RuntimeName, fact
from .base import Runtime


@dataclass
class RustFacts(Facts):
    bin_name: str = fact("BinName")


class RustRuntime(Runtime):
    """Cross-compiles the crate with cargo-zigbuild and ships the release binary."""

    name = RuntimeName.RUST
    template_name = "rust.Dockerfile.j2"
    markers = ("Cargo.toml",)

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = RustFacts(bin_name=self._find_bin_name(root / "Cargo.toml") or "")
        self._log_defaults([("Binary name", facts.bin_name)])
        return self._render(facts, overrides)

    def _find_bin_name(self, cargo_toml: Path) -> Optional[str]:
        if not cargo_toml.is_file():
            return None
        manifest = tomllib.loads(cargo_toml.read_text(encoding="utf-8"))
        section = self._binary_section(manifest)
        name = section.get("name") if section else None
        if not isinstance(name, str) or not name:
            self.log.warning("Failed to get binary name from Cargo.toml")
            return None
        self.log.info("Detected binary name: %s", name)
        return name

    def _binary_section(self, manifest: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        bins = manifest.get("bin")
        if isinstance(bins, list) and bins and isinstance(bins[0], dict):
            self.log.info("Detected binary in Cargo.toml via [[bin]]")
            return bins[0]
        for key in ("lib", "package"):
            section = manifest.get(key)
            if isinstance(section, dict):
                self.log.info("Detected binary in Cargo.toml via [%s]", key)
                return section
        return None


__all__ = ["RustFacts", "RustRuntime"]
