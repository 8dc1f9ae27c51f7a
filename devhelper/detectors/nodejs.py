"""Node.js project detector."""

from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_SKIP, CheckDefinition, version_of
from devhelper.fixes import FIXES, copy_env
from devhelper.utils.fs import directory_exists, file_exists, read_json

# First match wins; react variants are resolved separately
FRAMEWORKS = (
    ("next", "Next.js"),
    ("nuxt", "Nuxt.js"),
    ("@angular/core", "Angular"),
    ("vue", "Vue.js"),
)

REACT_VARIANTS = (
    ("gatsby", "Gatsby"),
    ("react-native", "React Native"),
    ("vite", "React + Vite"),
    ("react-scripts", "Create React App"),
)

SERVER_FRAMEWORKS = (
    ("svelte", "Svelte"),
    ("express", "Express.js"),
    ("fastify", "Fastify"),
    ("koa", "Koa"),
    ("hapi", "Hapi"),
    ("@hapi/hapi", "Hapi"),
    ("nest", "NestJS"),
    ("@nestjs/core", "NestJS"),
    ("electron", "Electron"),
    ("vite", "Vite"),
)

LOCK_FILES = (
    ("bun.lockb", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)


class NodeJSDetector:
    name = "Node.js"
    type = "nodejs"
    config_files = ("package.json",)

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return file_exists("package.json", directory)

    def analyze(self, directory: Path) -> dict[str, Any]:
        package = read_json("package.json", directory)
        if not isinstance(package, dict):
            return {"detected": False, "name": self.name, "type": self.type}

        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_name": package.get("name") or "unknown",
            "version": package.get("version") or "unknown",
            "framework": self.detect_framework(package),
            "package_manager": self.detect_package_manager(directory),
            "runtime": self.detect_runtime(directory),
            "has_dependencies": directory_exists("node_modules", directory),
            "scripts": package.get("scripts") or {},
            "engines": package.get("engines") or {},
            "dependencies": sorted((package.get("dependencies") or {}).keys()),
            "dev_dependencies": sorted((package.get("devDependencies") or {}).keys()),
        }

    @staticmethod
    def detect_framework(package: dict[str, Any]) -> str | None:
        deps = {**(package.get("dependencies") or {}), **(package.get("devDependencies") or {})}

        for dep, framework in FRAMEWORKS:
            if dep in deps:
                return framework
        if "react" in deps:
            for dep, framework in REACT_VARIANTS:
                if dep in deps:
                    return framework
            return "React"
        for dep, framework in SERVER_FRAMEWORKS:
            if dep in deps:
                return framework
        return None

    @staticmethod
    def detect_package_manager(directory: Path) -> str:
        for lock_file, manager in LOCK_FILES:
            if file_exists(lock_file, directory):
                return manager
        return "npm"

    @staticmethod
    def detect_runtime(directory: Path) -> str:
        if file_exists("bun.lockb", directory) or file_exists("bunfig.toml", directory):
            return "bun"
        if file_exists("deno.json", directory) or file_exists("deno.jsonc", directory):
            return "deno"
        return "node"

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="node-installed",
                name="Node.js installed",
                check=lambda d, a: self.executor.tool_exists("node"),
                get_version=version_of(self.executor, "node"),
                fix=FIXES["install_node"],
            ),
            CheckDefinition(
                id="npm-installed",
                name="npm installed",
                check=lambda d, a: self.executor.tool_exists("npm"),
                get_version=version_of(self.executor, "npm"),
                fix=FIXES["install_npm"],
            ),
            CheckDefinition(
                id="dependencies-installed",
                name="Dependencies installed",
                check=lambda d, a: directory_exists("node_modules", d),
                fix=lambda a, d: f"{a.get('package_manager') or 'npm'} install",
            ),
            CheckDefinition(
                id="start-script",
                name="Start script defined",
                check=lambda d, a: bool(self._scripts(d).get("start") or self._scripts(d).get("dev")),
                get_script=self._start_script,
                fix='Add a "start" or "dev" script to package.json',
            ),
            CheckDefinition(
                id="env-file",
                name="Environment configuration",
                check=self._env_configured,
                fix=self._env_fix,
            ),
        ]

    @staticmethod
    def _scripts(directory: Path) -> dict[str, Any]:
        package = read_json("package.json", directory)
        if isinstance(package, dict) and isinstance(package.get("scripts"), dict):
            return package["scripts"]
        return {}

    def _start_script(self, directory: Path) -> str | None:
        scripts = self._scripts(directory)
        if scripts.get("start"):
            return "npm start"
        if scripts.get("dev"):
            return "npm run dev"
        return None

    @staticmethod
    def _env_configured(directory: Path, analysis: dict[str, Any]):
        if file_exists(".env", directory):
            return True
        if file_exists(".env.example", directory) or file_exists(".env.sample", directory):
            return False
        # No template, nothing to configure
        return CHECK_SKIP

    @staticmethod
    def _env_fix(analysis: dict[str, Any], directory: Path) -> str | None:
        for template in (".env.example", ".env.sample"):
            if file_exists(template, directory):
                return copy_env(template)
        return None
