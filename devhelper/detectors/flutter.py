"""Flutter project detector."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_MANUAL, CheckDefinition, version_of
from devhelper.utils.fs import directory_exists, file_exists, read_text

PLATFORM_DIRS = (
    ("android", "Android"),
    ("ios", "iOS"),
    ("web", "Web"),
    ("macos", "macOS"),
    ("windows", "Windows"),
    ("linux", "Linux"),
)


class FlutterDetector:
    name = "Flutter"
    type = "flutter"
    config_files = ("pubspec.yaml",)

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        pubspec = read_text("pubspec.yaml", directory)
        if pubspec is None:
            return False
        return "flutter:" in pubspec or "flutter_test:" in pubspec

    def analyze(self, directory: Path) -> dict[str, Any]:
        pubspec = read_text("pubspec.yaml", directory) or ""
        name = re.search(r"name:\s*(.+)", pubspec)
        version = re.search(r"version:\s*(.+)", pubspec)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_name": name.group(1).strip() if name else "unknown",
            "version": version.group(1).strip() if version else None,
            "has_packages": directory_exists(".dart_tool", directory),
            "has_pubspec_lock": file_exists("pubspec.lock", directory),
            "platforms": [label for folder, label in PLATFORM_DIRS if directory_exists(folder, directory)],
        }

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="flutter-installed",
                name="Flutter installed",
                check=lambda d, a: self.executor.tool_exists("flutter"),
                get_version=version_of(self.executor, "flutter"),
                fix="Install Flutter from https://flutter.dev/docs/get-started/install",
            ),
            CheckDefinition(
                id="dart-installed",
                name="Dart installed",
                check=lambda d, a: self.executor.tool_exists("dart"),
                get_version=version_of(self.executor, "dart"),
                fix="Dart comes with Flutter - reinstall Flutter",
            ),
            CheckDefinition(
                id="dependencies-installed",
                name="Dependencies installed",
                check=lambda d, a: directory_exists(".dart_tool", d),
                fix="flutter pub get",
            ),
            CheckDefinition(
                id="flutter-doctor",
                name="Flutter environment",
                check=lambda d, a: CHECK_MANUAL,
                fix='Run "flutter doctor" to check your Flutter setup',
            ),
        ]
