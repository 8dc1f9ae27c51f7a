"""Go module detector."""

import re
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_SKIP, CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import file_exists, path_exists, read_text

FRAMEWORKS = (
    ("github.com/gin-gonic/gin", "Gin"),
    ("github.com/gofiber/fiber", "Fiber"),
    ("github.com/labstack/echo", "Echo"),
    ("github.com/gorilla/mux", "Gorilla Mux"),
    ("github.com/beego/beego", "Beego"),
    ("github.com/revel/revel", "Revel"),
)


class GoDetector:
    name = "Go"
    type = "go"
    config_files = ("go.mod",)

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return file_exists("go.mod", directory)

    def analyze(self, directory: Path) -> dict[str, Any]:
        go_mod = read_text("go.mod", directory) or ""
        module = re.search(r"module\s+(.+)", go_mod)
        go_version = re.search(r"go\s+(\d+\.\d+)", go_mod)
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "module_name": module.group(1).strip() if module else "unknown",
            "go_version": go_version.group(1) if go_version else None,
            "framework": next((fw for marker, fw in FRAMEWORKS if marker in go_mod), None),
            "has_vendor": path_exists("vendor", directory),
            "has_go_sum": file_exists("go.sum", directory),
        }

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="go-installed",
                name="Go installed",
                check=lambda d, a: self.executor.tool_exists("go"),
                get_version=version_of(self.executor, "go", "version"),
                fix=FIXES["install_go"],
            ),
            CheckDefinition(
                id="go-mod-tidy",
                name="Dependencies synchronized",
                check=lambda d, a: file_exists("go.sum", d),
                fix=FIXES["go_mod_tidy"],
            ),
            CheckDefinition(
                id="go-build",
                name="Project compiles",
                # Compiling would run the toolchain on project code
                check=lambda d, a: CHECK_SKIP,
                fix=FIXES["go_build"],
            ),
        ]
