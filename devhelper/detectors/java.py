"""Java project detector (Maven and Gradle)."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_SKIP, CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import directory_exists, file_exists, read_text
from devhelper.utils.version import extract_version

FRAMEWORKS = (
    ("spring-boot", "Spring Boot"),
    ("spring", "Spring"),
    ("quarkus", "Quarkus"),
    ("micronaut", "Micronaut"),
    ("jakarta.ee", "Jakarta EE"),
    ("javax.servlet", "Jakarta EE"),
    ("android", "Android"),
    ("javafx", "JavaFX"),
)

_JAVA_VERSION = re.compile(r'version "([^"]+)"')
_ARTIFACT_ID = re.compile(r"<artifactId>([^<]+)</artifactId>")


class JavaDetector:
    name = "Java"
    type = "java"
    config_files = ("pom.xml", "build.gradle", "build.gradle.kts")

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return any(file_exists(name, directory) for name in self.config_files)

    def analyze(self, directory: Path) -> dict[str, Any]:
        build_tool = self.detect_build_tool(directory)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "build_tool": build_tool,
            "framework": self.detect_framework(directory),
            "has_target": directory_exists("target", directory),
            "has_build": directory_exists("build", directory),
            "project_name": self.detect_project_name(directory, build_tool),
        }

    @staticmethod
    def detect_build_tool(directory: Path) -> str:
        if file_exists("pom.xml", directory):
            return "maven"
        if file_exists("build.gradle", directory) or file_exists("build.gradle.kts", directory):
            return "gradle"
        return "unknown"

    @staticmethod
    def detect_framework(directory: Path) -> str | None:
        combined = (read_text("pom.xml", directory) or "") + (
            read_text("build.gradle", directory) or read_text("build.gradle.kts", directory) or ""
        )
        for marker, framework in FRAMEWORKS:
            if marker in combined:
                return framework
        return None

    @staticmethod
    def detect_project_name(directory: Path, build_tool: str) -> str:
        if build_tool == "maven":
            match = _ARTIFACT_ID.search(read_text("pom.xml", directory) or "")
            if match:
                return match.group(1)
        return "unknown"

    def java_version(self) -> str | None:
        output = self.executor.tool_version("java")
        if not output:
            return None
        match = _JAVA_VERSION.search(output)
        return match.group(1) if match else extract_version(output)

    def _maven_check(self, directory: Path, analysis: dict[str, Any]):
        if analysis.get("build_tool") != "maven":
            return CHECK_SKIP
        return self.executor.tool_exists("mvn")

    def _gradle_check(self, directory: Path, analysis: dict[str, Any]):
        if analysis.get("build_tool") != "gradle":
            return CHECK_SKIP
        if file_exists("gradlew", directory) or file_exists("gradlew.bat", directory):
            return True
        return self.executor.tool_exists("gradle")

    @staticmethod
    def _compiled(directory: Path, analysis: dict[str, Any]) -> bool:
        if analysis.get("build_tool") == "maven":
            return directory_exists("target/classes", directory)
        if analysis.get("build_tool") == "gradle":
            return directory_exists("build/classes", directory)
        return False

    @staticmethod
    def _build_fix(analysis: dict[str, Any], directory: Path) -> str:
        if analysis.get("build_tool") == "maven":
            return FIXES["mvn_compile"]
        if analysis.get("build_tool") == "gradle":
            return FIXES["gradle_build"]
        return "Build the project"

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="java-installed",
                name="Java installed",
                check=lambda d, a: self.executor.tool_exists("java"),
                get_version=self.java_version,
                fix=FIXES["install_java"],
            ),
            CheckDefinition(
                id="javac-installed",
                name="Java compiler installed",
                check=lambda d, a: self.executor.tool_exists("javac"),
                fix="Install JDK (not just JRE) from https://adoptium.net",
            ),
            CheckDefinition(
                id="maven-installed",
                name="Maven installed",
                check=self._maven_check,
                get_version=version_of(self.executor, "mvn"),
                fix=FIXES["install_maven"],
            ),
            CheckDefinition(
                id="gradle-installed",
                name="Gradle installed",
                check=self._gradle_check,
                get_version=version_of(self.executor, "gradle"),
                fix="Use ./gradlew (Gradle wrapper) or install Gradle from https://gradle.org",
            ),
            CheckDefinition(
                id="project-built",
                name="Project compiled",
                check=self._compiled,
                fix=self._build_fix,
            ),
        ]
