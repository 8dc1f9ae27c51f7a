"""Python project detector."""

import os
import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CheckDefinition
from devhelper.fixes import FIXES, activate_venv, create_venv
from devhelper.utils.fs import directory_exists, file_exists, read_text
from devhelper.utils.platform import IS_WINDOWS
from devhelper.utils.version import extract_version

VENV_DIRS = ("venv", ".venv", "env", ".env")

FRAMEWORKS = (
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
    ("tornado", "Tornado"),
    ("pyramid", "Pyramid"),
    ("streamlit", "Streamlit"),
    ("jupyter", "Jupyter"),
    ("scrapy", "Scrapy"),
    ("tensorflow", "TensorFlow"),
    ("keras", "TensorFlow"),
    ("torch", "PyTorch"),
)

_NAME = re.compile(r"""name\s*=\s*["']([^"']+)["']""")


class PythonDetector:
    name = "Python"
    type = "python"
    config_files = ("requirements.txt", "pyproject.toml", "setup.py", "Pipfile")

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return any(file_exists(name, directory) for name in self.config_files)

    def analyze(self, directory: Path) -> dict[str, Any]:
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_name": self.detect_project_name(directory),
            "framework": self.detect_framework(directory),
            "package_manager": self.detect_package_manager(directory),
            "has_venv": self.has_virtualenv(directory),
            "venv_path": self.venv_path(directory),
            "config_file": next(
                (f for f in ("requirements.txt", "pyproject.toml", "Pipfile", "setup.py") if file_exists(f, directory)),
                None,
            ),
        }

    @staticmethod
    def detect_project_name(directory: Path) -> str:
        for manifest in ("pyproject.toml", "setup.py"):
            content = read_text(manifest, directory)
            if content:
                match = _NAME.search(content)
                if match:
                    return match.group(1)
        return "unknown"

    @staticmethod
    def detect_framework(directory: Path) -> str | None:
        combined = (
            (read_text("requirements.txt", directory) or "") + (read_text("pyproject.toml", directory) or "")
        ).lower()

        for marker, framework in FRAMEWORKS:
            if marker in combined:
                return framework
        if "pandas" in combined and "numpy" in combined:
            return "Data Science"
        return None

    @staticmethod
    def detect_package_manager(directory: Path) -> str:
        pyproject = read_text("pyproject.toml", directory) or ""
        if file_exists("poetry.lock", directory) or "[tool.poetry]" in pyproject:
            return "poetry"
        if file_exists("Pipfile", directory) or file_exists("Pipfile.lock", directory):
            return "pipenv"
        if file_exists("environment.yml", directory) or file_exists("environment.yaml", directory):
            return "conda"
        return "pip"

    @staticmethod
    def has_virtualenv(directory: Path) -> bool:
        return any(directory_exists(name, directory) for name in VENV_DIRS)

    @staticmethod
    def venv_path(directory: Path) -> str | None:
        # .env is usually a dotenv file, never report it as the venv
        for name in VENV_DIRS[:3]:
            if directory_exists(name, directory):
                return name
        return None

    def python_command(self) -> str | None:
        if not IS_WINDOWS and self.executor.tool_exists("python3"):
            return "python3"
        if self.executor.tool_exists("python"):
            return "python"
        return None

    def _python_version(self) -> str | None:
        command = self.python_command()
        if not command:
            return None
        return extract_version(self.executor.tool_version(command))

    def _pip_version(self) -> str | None:
        output = self.executor.tool_version("pip") or self.executor.tool_version("pip3")
        return extract_version(output)

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="python-installed",
                name="Python installed",
                check=lambda d, a: self.python_command() is not None,
                get_version=self._python_version,
                fix=FIXES["install_python"],
            ),
            CheckDefinition(
                id="pip-installed",
                name="pip installed",
                check=lambda d, a: self.executor.tool_exists("pip") or self.executor.tool_exists("pip3"),
                get_version=self._pip_version,
                fix="Install pip: python -m ensurepip --upgrade",
            ),
            CheckDefinition(
                id="venv-exists",
                name="Virtual environment",
                check=lambda d, a: self.has_virtualenv(d),
                fix=lambda a, d: create_venv(self.python_command() or "python"),
            ),
            CheckDefinition(
                id="dependencies-installed",
                name="Dependencies installed",
                # Only an approximation: a venv exists to hold them
                check=lambda d, a: bool(a.get("has_venv")),
                fix=lambda a, d: dependency_install_command(a.get("package_manager")),
            ),
            CheckDefinition(
                id="venv-activated",
                name="Virtual environment activated",
                check=lambda d, a: "VIRTUAL_ENV" in os.environ or "CONDA_DEFAULT_ENV" in os.environ,
                fix=lambda a, d: activate_venv(a.get("venv_path") or "venv"),
                warning="Run this command in your terminal before running the project",
            ),
        ]


def dependency_install_command(package_manager: str | None) -> str:
    if package_manager == "poetry":
        return FIXES["poetry_install"]
    if package_manager == "pipenv":
        return FIXES["pipenv_install"]
    if package_manager == "conda":
        return "conda env create -f environment.yml"
    return FIXES["pip_install"]
