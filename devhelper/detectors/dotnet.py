""".NET project detector."""

from pathlib import Path
from typing import Any

from devhelper.detectors.base import CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import directory_exists, list_files, read_text

PROJECT_FILE_PATTERN = r"\.(csproj|fsproj|vbproj)$"
SOLUTION_FILE_PATTERN = r"\.sln$"

LANGUAGES = ((".csproj", "C#"), (".fsproj", "F#"), (".vbproj", "VB.NET"))

FRAMEWORKS = (
    ("Microsoft.AspNetCore", "ASP.NET Core"),
    ("Microsoft.NET.Sdk.Web", "ASP.NET Core"),
    ("Microsoft.NET.Sdk.BlazorWebAssembly", "Blazor WebAssembly"),
    ("Microsoft.NET.Sdk.Razor", "Blazor"),
    ("Microsoft.Maui", ".NET MAUI"),
    ("Xamarin", "Xamarin"),
    ("Microsoft.NET.Sdk.Worker", "Worker Service"),
)


class DotNetDetector:
    name = ".NET"
    type = "dotnet"
    config_files = (".csproj", ".fsproj", ".vbproj", ".sln")

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return bool(list_files(directory, PROJECT_FILE_PATTERN) or list_files(directory, SOLUTION_FILE_PATTERN))

    def analyze(self, directory: Path) -> dict[str, Any]:
        project_files = list_files(directory, PROJECT_FILE_PATTERN)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_files": project_files,
            "solution_files": list_files(directory, SOLUTION_FILE_PATTERN),
            "language": self.detect_language(project_files),
            "framework": self.detect_framework(directory, project_files),
            "has_bin": directory_exists("bin", directory),
            "has_obj": directory_exists("obj", directory),
        }

    @staticmethod
    def detect_language(project_files: list[str]) -> str:
        for suffix, language in LANGUAGES:
            if any(f.endswith(suffix) for f in project_files):
                return language
        return "unknown"

    @staticmethod
    def detect_framework(directory: Path, project_files: list[str]) -> str | None:
        for project_file in project_files:
            content = read_text(project_file, directory) or ""
            for marker, framework in FRAMEWORKS:
                if marker in content:
                    return framework
        return None

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="dotnet-installed",
                name=".NET SDK installed",
                check=lambda d, a: self.executor.tool_exists("dotnet"),
                get_version=version_of(self.executor, "dotnet"),
                fix=FIXES["install_dotnet"],
            ),
            CheckDefinition(
                id="dependencies-restored",
                name="Dependencies restored",
                check=lambda d, a: directory_exists("obj", d),
                fix=FIXES["dotnet_restore"],
            ),
            CheckDefinition(
                id="project-built",
                name="Project compiled",
                check=lambda d, a: directory_exists("bin", d),
                fix=FIXES["dotnet_build"],
            ),
        ]
