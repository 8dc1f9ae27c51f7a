"""PHP (Composer) project detector."""

from pathlib import Path
from typing import Any

from devhelper.detectors.base import CheckDefinition, version_of
from devhelper.fixes import FIXES
from devhelper.utils.fs import directory_exists, file_exists, read_json

FRAMEWORKS = (
    ("laravel/framework", "Laravel"),
    ("symfony/framework-bundle", "Symfony"),
    ("slim/slim", "Slim"),
    ("cakephp/cakephp", "CakePHP"),
    ("codeigniter4/framework", "CodeIgniter"),
    ("yiisoft/yii2", "Yii"),
    ("wordpress", "WordPress"),
)


class PHPDetector:
    name = "PHP"
    type = "php"
    config_files = ("composer.json",)

    def __init__(self, executor):
        self.executor = executor

    def detect(self, directory: Path) -> bool:
        return file_exists("composer.json", directory)

    def analyze(self, directory: Path) -> dict[str, Any]:
        composer = read_json("composer.json", directory)
        if not isinstance(composer, dict):
            composer = {}
        require = composer.get("require") or {}
        return {
            "detected": True,
            "name": self.name,
            "type": self.type,
            "project_name": composer.get("name") or "unknown",
            "framework": self.detect_framework(directory, composer),
            "has_vendor": directory_exists("vendor", directory),
            "has_lock_file": file_exists("composer.lock", directory),
            "php_version": require.get("php") if isinstance(require, dict) else None,
        }

    @staticmethod
    def detect_framework(directory: Path, composer: dict[str, Any]) -> str | None:
        deps = {}
        for section in ("require", "require-dev"):
            if isinstance(composer.get(section), dict):
                deps.update(composer[section])
        for package, framework in FRAMEWORKS:
            if package in deps:
                return framework
        if file_exists("wp-config.php", directory):
            return "WordPress"
        return None

    def checks(self) -> list[CheckDefinition]:
        return [
            CheckDefinition(
                id="php-installed",
                name="PHP installed",
                check=lambda d, a: self.executor.tool_exists("php"),
                get_version=version_of(self.executor, "php"),
                fix=FIXES["install_php"],
            ),
            CheckDefinition(
                id="composer-installed",
                name="Composer installed",
                check=lambda d, a: self.executor.tool_exists("composer"),
                get_version=version_of(self.executor, "composer"),
                fix=FIXES["install_composer"],
            ),
            CheckDefinition(
                id="dependencies-installed",
                name="Dependencies installed",
                check=lambda d, a: directory_exists("vendor", d),
                fix=FIXES["composer_install"],
            ),
            CheckDefinition(
                id="autoload-generated",
                name="Autoload configured",
                check=lambda d, a: file_exists("vendor/autoload.php", d),
                fix="composer dump-autoload",
            ),
        ]
