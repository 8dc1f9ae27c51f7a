"""Explain engine: find the one thing most likely wrong in a directory.

Diagnosis order is fixed: a pasted error message first, then git state,
then runtime/build state, then the directory itself. The first match wins.
Every probe is a read-only, allowlisted query or a filesystem check.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from devhelper.detectors.nodejs import NodeJSDetector
from devhelper.git.analyzer import GitAnalyzer, RepositoryStatus
from devhelper.git.knowledge import GitError, KnowledgeBase, default_knowledge_base
from devhelper.git.recovery import (
    RecoveryOption,
    generate_recovery_options,
    recover_lost_commits,
    recover_permission_denied,
    recover_rejected_push,
)
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.fs import directory_exists, file_exists
from devhelper.utils.logging import logger

# Files whose presence means the directory is meant to be a project
PROJECT_INDICATORS = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "setup.py",
    "pom.xml",
    "build.gradle",
    "go.mod",
    "Cargo.toml",
    "composer.json",
    "pubspec.yaml",
    "CMakeLists.txt",
    "Makefile",
    "Dockerfile",
    "Gemfile",
)

PYTHON_MANIFESTS = ("requirements.txt", "pyproject.toml")
VENV_DIRS = ("venv", ".venv", "env")

GUIDANCE = (
    "No obvious issues detected.",
    "",
    "If you're seeing an error, try:",
    "  1. Copy the exact error message",
    '  2. Run: dev-helper explain --message "<error text>"',
    "  3. Search for the error message online",
    "  4. Check the project's README or documentation",
)


@dataclass
class Explanation:
    """A diagnosed condition, ready to display."""

    error: GitError
    source: str
    recovery: list[RecoveryOption] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.error.title


class ExplainEngine:
    def __init__(
        self,
        directory: str | Path = ".",
        executor: GuardedExecutor | None = None,
        knowledge: KnowledgeBase | None = None,
        verbose: bool = False,
        reflog_count: int = 10,
    ):
        self.directory = Path(directory)
        self.executor = executor or GuardedExecutor()
        self.knowledge = knowledge or default_knowledge_base()
        self.verbose = verbose
        self.reflog_count = reflog_count
        self.analyzer = GitAnalyzer(self.directory, self.executor)

    def _entry(self, error_id: str, **context: str | None) -> GitError | None:
        error = self.knowledge.get(error_id)
        if error is None:
            logger.warning("Knowledge base has no entry {!r}", error_id)
            return None
        return error.render(**context)

    def _found(self, error_id: str, source: str, recovery=None, **context) -> Explanation | None:
        error = self._entry(error_id, **context)
        if error is None:
            return None
        return Explanation(error=error, source=source, recovery=recovery or [])

    def diagnose(self, message: str | None = None) -> Explanation | None:
        for step in (
            lambda: self.check_message(message),
            self.check_git,
            self.check_runtime,
            self.check_system,
        ):
            explanation = step()
            if explanation is not None:
                logger.debug("Diagnosed {} ({})", explanation.error.id, explanation.source)
                return explanation
        return None

    def check_message(self, message: str | None) -> Explanation | None:
        error = self.knowledge.match_error(message)
        if error is None:
            return None

        branch = self.analyzer.current_branch()
        recovery: list[RecoveryOption] = []
        if self.verbose:
            if error.id == "push-rejected":
                recovery = recover_rejected_push(RepositoryStatus(is_repo=True, branch=branch))
            elif error.id == "permission-denied-publickey":
                recovery = recover_permission_denied()
        return Explanation(error=error.render(branch=branch), source="message", recovery=recovery)

    def has_project_files(self) -> bool:
        return any(file_exists(name, self.directory) for name in PROJECT_INDICATORS)

    def _git_recovery(self) -> list[RecoveryOption]:
        if not self.verbose:
            return []
        return generate_recovery_options(self.analyzer.repository_status())

    def check_git(self) -> Explanation | None:
        if not self.executor.tool_exists("git"):
            return None

        if not self.analyzer.is_repository():
            if not self.has_project_files():
                return None
            recovery = generate_recovery_options(RepositoryStatus(is_repo=False)) if self.verbose else []
            return self._found("not-a-repository", "git", recovery)

        # HEAD is detached for the whole of a rebase; report the rebase instead
        if self.analyzer.is_detached_head() and not self.analyzer.is_rebase_in_progress():
            recovery = self._git_recovery()
            if self.verbose:
                recovery += recover_lost_commits(self.analyzer, self.reflog_count)
            return self._found("detached-head", "git", recovery, commit=self.analyzer.short_head())

        status = self.analyzer.status_text() or ""
        if "Unmerged paths" in status or "both modified" in status:
            return self._found("merge-conflict", "git", self._git_recovery())

        if "rebase in progress" in status or self.analyzer.is_rebase_in_progress():
            return self._found("rebase-in-progress", "git", self._git_recovery())

        if self.verbose and ("Changes not staged" in status or "Changes to be committed" in status):
            return self._found("uncommitted-changes", "git")

        upstream = self.analyzer.upstream()
        if not upstream.succeeded and "no upstream" in upstream.output.lower():
            branch = self.analyzer.current_branch()
            return self._found("no-upstream", "git", self._git_recovery(), branch=branch)

        short = self.analyzer.short_status() or ""
        first_line = short.splitlines()[0] if short else ""
        if "ahead" in first_line and "behind" in first_line:
            return self._found("diverged", "git", branch=self.analyzer.current_branch())

        return None

    def check_runtime(self) -> Explanation | None:
        directory = self.directory

        if file_exists("package.json", directory) and not directory_exists("node_modules", directory):
            package_manager = NodeJSDetector(self.executor).detect_package_manager(directory)
            return self._found("node-modules-missing", "runtime", package_manager=package_manager)

        if file_exists("package-lock.json", directory) and file_exists("yarn.lock", directory):
            return self._found("multiple-lock-files", "runtime")

        if any(file_exists(name, directory) for name in PYTHON_MANIFESTS) and not any(
            directory_exists(name, directory) for name in VENV_DIRS
        ):
            return self._found("no-virtualenv", "runtime")

        return None

    def check_system(self) -> Explanation | None:
        if not os.access(self.directory, os.R_OK | os.W_OK):
            return self._found("directory-permission-denied", "system", directory=str(self.directory))
        return None


def diagnose(
    directory: str | Path = ".",
    executor: GuardedExecutor | None = None,
    verbose: bool = False,
    message: str | None = None,
    reflog_count: int = 10,
) -> Explanation | None:
    return ExplainEngine(directory, executor, verbose=verbose, reflog_count=reflog_count).diagnose(message)
