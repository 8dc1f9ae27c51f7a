"""Rust (Cargo) project detector."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import directory_exists, file_exists, read_text

FRAMEWORKS = (
    ("actix-web", "Actix Web"),
    ("rocket", "Rocket"),
    ("axum", "Axum"),
    ("warp", "Warp"),
    ("tide", "Tide"),
    ("tauri", "Tauri"),
    ("yew", "Yew"),
    ("leptos", "Leptos"),
    ("tokio", "Tokio (async runtime)"),
)


class RustDetector:
    name = "Rust"
    type = "rust"
    config_files = ("Cargo.toml",)

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return file_exists("Cargo.toml", directory)

    def analyze(self, directory: Path) -> dict[str, Any]:
        cargo = read_text("Cargo.toml", directory) or ""
        name = re.search(r'name\s*=\s*"([^"]+)"', cargo)
        version = re.search(r'version\s*=\s*"([^"]+)"', cargo)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_name": name.group(1) if name else "unknown",
            "version": version.group(1) if version else None,
            "framework": next((fw for marker, fw in FRAMEWORKS if marker in cargo), None),
            "has_lock_file": file_exists("Cargo.lock", directory),
            "has_target": directory_exists("target", directory),
            "is_workspace": "[workspace]" in cargo,
        }

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="rust-installed",
                name="Rust installed",
                check=lambda d, a: self.executor.tool_exists("rustc"),
                get_version=version_of(self.executor, "rustc"),
                fix=FIXES["install_rust"],
            ),
            CheckDefinition(
                id="cargo-installed",
                name="Cargo installed",
                check=lambda d, a: self.executor.tool_exists("cargo"),
                get_version=version_of(self.executor, "cargo"),
                fix="Cargo comes with Rust - install from https://rustup.rs",
            ),
            CheckDefinition(
                id="dependencies-fetched",
                name="Dependencies fetched",
                check=lambda d, a: file_exists("Cargo.lock", d),
                fix=FIXES["cargo_fetch"],
            ),
            CheckDefinition(
                id="project-built",
                name="Project compiled",
                check=lambda d, a: directory_exists("target/debug", d) or directory_exists("target/release", d),
                fix=FIXES["cargo_build"],
            ),
        ]
