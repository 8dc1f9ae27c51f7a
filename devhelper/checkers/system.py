"""System-wide checks: developer tools, git configuration, PATH, platform.

Only version queries and git config reads are issued, all through the
guarded executor.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from devhelper.fixes import FIXES
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.platform import get_platform_info, path_separator
from devhelper.utils.version import extract_version

# (command, display name, alternative command)
DEVELOPER_TOOLS: tuple[tuple[str, str, str | None], ...] = (
    ("git", "Git", None),
    ("node", "Node.js", None),
    ("npm", "npm", None),
    ("python", "Python", "python3"),
    ("java", "Java", None),
    ("docker", "Docker", None),
)

# Tools listed by `dev-helper tools`, grouped by ecosystem: (command, description)
TOOL_CATEGORIES: dict[str, tuple[tuple[str, str], ...]] = {
    "core": (
        ("git", "Version control"),
        ("docker", "Container runtime"),
        ("make", "Build automation"),
        ("cmake", "Build system generator"),
    ),
    "javascript": (
        ("node", "Node.js runtime"),
        ("npm", "Package manager"),
        ("yarn", "Package manager"),
        ("pnpm", "Package manager"),
        ("bun", "Runtime and package manager"),
        ("deno", "Runtime"),
    ),
    "python": (
        ("python3", "Python interpreter"),
        ("pip", "Package installer"),
        ("poetry", "Dependency manager"),
        ("pipenv", "Dependency manager"),
        ("conda", "Environment manager"),
    ),
    "jvm": (
        ("java", "Java runtime"),
        ("javac", "Java compiler"),
        ("mvn", "Maven build tool"),
        ("gradle", "Gradle build tool"),
    ),
    "native": (
        ("go", "Go toolchain"),
        ("rustc", "Rust compiler"),
        ("cargo", "Rust package manager"),
        ("dotnet", ".NET SDK"),
        ("php", "PHP interpreter"),
        ("composer", "PHP package manager"),
        ("gcc", "C/C++ compiler"),
        ("clang", "C/C++ compiler"),
    ),
    "mobile": (
        ("flutter", "Flutter SDK"),
        ("dart", "Dart SDK"),
    ),
}

# Tools whose version query is a subcommand rather than a flag
VERSION_FLAGS = {"go": "version"}

GIT_CONFIG_KEYS: tuple[tuple[str, str, str, str], ...] = (
    ("user.name", "Git user.name", "missing", 'git config --global user.name "Your Name"'),
    ("user.email", "Git user.email", "missing", 'git config --global user.email "your.email@example.com"'),
    ("init.defaultBranch", "Git default branch", "not set", "git config --global init.defaultBranch main"),
)


@dataclass
class ToolStatus:
    """Status of a single tool."""

    name: str
    display: str
    installed: bool
    version: str | None = None
    description: str = ""

    @property
    def display_version(self) -> str:
        """Version string for display."""
        if not self.installed:
            return "not installed"
        return self.version or "unknown"


@dataclass
class GitConfigEntry:
    name: str
    key: str
    status: str
    value: str | None
    fix: str

    @property
    def configured(self) -> bool:
        return self.status == "configured"


@dataclass
class PathIssue:
    level: str
    message: str


@dataclass
class PathReport:
    count: int
    issues: list[PathIssue] = field(default_factory=list)


def probe_tool(executor: GuardedExecutor, command: str, display: str | None = None, description: str = "") -> ToolStatus:
    installed = executor.tool_exists(command)
    version = None
    if installed:
        version = extract_version(executor.tool_version(command, VERSION_FLAGS.get(command, "--version")))
    return ToolStatus(
        name=command,
        display=display or command,
        installed=installed,
        version=version,
        description=description,
    )


def check_developer_tools(executor: GuardedExecutor) -> list[ToolStatus]:
    results = []
    for command, display, alternative in DEVELOPER_TOOLS:
        status = probe_tool(executor, command, display)
        if not status.installed and alternative:
            alt_status = probe_tool(executor, alternative, display)
            if alt_status.installed:
                status = alt_status
        results.append(status)
    return results


def detect_all_tools(executor: GuardedExecutor) -> dict[str, list[ToolStatus]]:
    """Detect every listed tool and its version, grouped by category."""
    return {
        category: [probe_tool(executor, command, command, description) for command, description in tools]
        for category, tools in TOOL_CATEGORIES.items()
    }


def check_git_config(executor: GuardedExecutor) -> list[GitConfigEntry]:
    """Read global git identity settings. Only ever reads."""
    if not executor.tool_exists("git"):
        return [
            GitConfigEntry(
                name="Git",
                key="",
                status="missing",
                value=None,
                fix=FIXES["install_git"],
            )
        ]

    entries = []
    for key, name, missing_status, fix in GIT_CONFIG_KEYS:
        result = executor.run(f"git config --global {key}")
        value = result.stdout if result.succeeded and result.stdout else None
        entries.append(
            GitConfigEntry(
                name=name,
                key=key,
                status="configured" if value else missing_status,
                value=value if value or key != "init.defaultBranch" else "master (default)",
                fix=fix,
            )
        )
    return entries


def check_path(path_value: str | None = None) -> PathReport:
    if path_value is None:
        path_value = os.environ.get("PATH") or os.environ.get("Path") or ""
    entries = path_value.split(path_separator())
    report = PathReport(count=len(entries))

    empty = [entry for entry in entries if not entry.strip()]
    if empty:
        report.issues.append(PathIssue("warning", f"PATH contains {len(empty)} empty entries"))

    if len({entry.lower() for entry in entries}) < len(entries):
        report.issues.append(PathIssue("info", "PATH contains duplicate entries"))

    return report


def get_system_info() -> dict[str, object]:
    return get_platform_info()
