"""Docker / Compose detector."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_SKIP, CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import file_exists, read_text

COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")

# Top-level service keys, indented two spaces under "services:"
_SERVICE = re.compile(r"^\s{2}(\w[\w-]*):\s*$", re.MULTILINE)
_BASE_IMAGE = re.compile(r"FROM\s+(\S+)", re.IGNORECASE)


class DockerDetector:
    name = "Docker"
    type = "docker"
    config_files = ("Dockerfile",) + COMPOSE_FILES

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return any(file_exists(name, directory) for name in self.config_files)

    def analyze(self, directory: Path) -> dict[str, Any]:
        compose_file = self.compose_file(directory)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "has_dockerfile": file_exists("Dockerfile", directory),
            "has_compose": compose_file is not None,
            "compose_file": compose_file,
            "base_image": self.base_image(directory),
            "services": self.services(directory, compose_file),
        }

    @staticmethod
    def compose_file(directory: Path) -> str | None:
        return next((name for name in COMPOSE_FILES if file_exists(name, directory)), None)

    @staticmethod
    def base_image(directory: Path) -> str | None:
        match = _BASE_IMAGE.search(read_text("Dockerfile", directory) or "")
        return match.group(1) if match else None

    @staticmethod
    def services(directory: Path, compose_file: str | None) -> list[str]:
        if not compose_file:
            return []
        return _SERVICE.findall(read_text(compose_file, directory) or "")

    def _daemon_running(self, directory: Path, analysis: dict[str, Any]) -> bool:
        return self.executor.run("docker info").succeeded

    def _compose_available(self, directory: Path, analysis: dict[str, Any]):
        if not analysis.get("has_compose"):
            return CHECK_SKIP
        if self.executor.tool_exists("docker-compose"):
            return True
        # The compose plugin shows up in the Plugins section of docker info
        info = self.executor.run("docker info")
        return info.succeeded and "compose" in info.stdout.lower()

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="docker-installed",
                name="Docker installed",
                check=lambda d, a: self.executor.tool_exists("docker"),
                get_version=version_of(self.executor, "docker"),
                fix=FIXES["install_docker"],
            ),
            CheckDefinition(
                id="docker-running",
                name="Docker daemon running",
                check=self._daemon_running,
                fix=FIXES["start_docker"],
            ),
            CheckDefinition(
                id="docker-compose-installed",
                name="Docker Compose available",
                check=self._compose_available,
                fix="Docker Compose is included in Docker Desktop, or install separately",
            ),
        ]
