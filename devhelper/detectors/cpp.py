"""C/C++ project detector (CMake, Meson, Autotools, Make)."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_SKIP, CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import directory_exists, file_exists, read_text
from devhelper.utils.version import extract_version

# Tool names are restricted to [\w-]+, so probe the C driver names
COMPILERS = ("gcc", "clang", "cl")
MAKE_TOOLS = ("make", "mingw32-make", "nmake")


class CppDetector:
    name = "C/C++"
    type = "cpp"
    config_files = ("CMakeLists.txt", "Makefile", "makefile", "meson.build", "configure", "configure.ac")

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return any(file_exists(name, directory) for name in self.config_files)

    def analyze(self, directory: Path) -> dict[str, Any]:
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "build_system": self.detect_build_system(directory),
            "has_build_dir": directory_exists("build", directory),
            "project_name": self.detect_project_name(directory),
        }

    @staticmethod
    def detect_build_system(directory: Path) -> str:
        if file_exists("CMakeLists.txt", directory):
            return "cmake"
        if file_exists("meson.build", directory):
            return "meson"
        if file_exists("configure.ac", directory) or file_exists("configure.in", directory):
            return "autotools"
        if file_exists("configure", directory):
            return "configure"
        if file_exists("Makefile", directory) or file_exists("makefile", directory):
            return "make"
        return "unknown"

    @staticmethod
    def detect_project_name(directory: Path) -> str:
        match = re.search(r"project\s*\(\s*(\w+)", read_text("CMakeLists.txt", directory) or "", re.IGNORECASE)
        return match.group(1) if match else "unknown"

    def compiler_version(self) -> str | None:
        for compiler in COMPILERS[:2]:
            output = self.executor.tool_version(compiler)
            if output:
                return extract_version(output)
        return None

    def _cmake_check(self, directory: Path, analysis: dict[str, Any]):
        if analysis.get("build_system") != "cmake":
            return CHECK_SKIP
        return self.executor.tool_exists("cmake")

    @staticmethod
    def _build_dir_check(directory: Path, analysis: dict[str, Any]):
        if analysis.get("build_system") != "cmake":
            return CHECK_SKIP
        return directory_exists("build", directory)

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="compiler-installed",
                name="C++ compiler installed",
                check=lambda d, a: any(self.executor.tool_exists(c) for c in COMPILERS),
                get_version=self.compiler_version,
                fix="Install a C++ compiler (g++, clang++, or MSVC)",
            ),
            CheckDefinition(
                id="cmake-installed",
                name="CMake installed",
                check=self._cmake_check,
                get_version=version_of(self.executor, "cmake"),
                fix=FIXES["install_cmake"],
            ),
            CheckDefinition(
                id="make-installed",
                name="Make installed",
                check=lambda d, a: any(self.executor.tool_exists(m) for m in MAKE_TOOLS),
                fix="Install Make (or use CMake with another generator)",
            ),
            CheckDefinition(
                id="build-dir-created",
                name="Build directory exists",
                check=self._build_dir_check,
                fix=FIXES["cmake_configure"],
            ),
        ]
