"""Git repository analyzer.

Builds a RepositoryStatus from allowlisted, read-only git queries plus the
marker files git leaves in its directory during a merge, rebase or
cherry-pick. Nothing here changes repository state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.fs import directory_exists, file_exists


@dataclass
class LastCommit:
    hash: str
    message: str


@dataclass
class ReflogEntry:
    hash: str
    ref: str
    action: str


@dataclass
class RepositoryStatus:
    is_repo: bool
    branch: str | None = None
    is_detached_head: bool = False
    has_uncommitted_changes: bool = False
    has_staged_changes: bool = False
    has_untracked_files: bool = False
    is_merge_in_progress: bool = False
    is_rebase_in_progress: bool = False
    is_cherry_pick_in_progress: bool = False
    has_conflicts: bool = False
    ahead: int = 0
    behind: int = 0
    has_upstream: bool = False
    remote: str | None = None
    last_commit: LastCommit | None = None
    conflicted_files: list[str] = field(default_factory=list)


def _lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


class GitAnalyzer:
    """Read-only queries against the repository containing ``directory``."""

    def __init__(self, directory: str | Path = ".", executor: GuardedExecutor | None = None):
        self.directory = Path(directory)
        self.executor = executor or GuardedExecutor()

    def _git(self, command: str):
        return self.executor.run(command, cwd=self.directory)

    def is_repository(self) -> bool:
        result = self._git("git rev-parse --is-inside-work-tree")
        return result.succeeded and result.stdout == "true"

    def git_dir(self) -> Path:
        result = self._git("git rev-parse --git-dir")
        if result.succeeded and result.stdout:
            path = Path(result.stdout)
            return path if path.is_absolute() else self.directory / path
        return self.directory / ".git"

    def current_branch(self) -> str | None:
        result = self._git("git branch --show-current")
        return result.stdout if result.succeeded and result.stdout else None

    def is_detached_head(self) -> bool:
        result = self._git("git symbolic-ref HEAD")
        return not result.succeeded or "not a symbolic ref" in result.stderr

    def short_head(self) -> str | None:
        result = self._git("git rev-parse --short HEAD")
        return result.stdout if result.succeeded and result.stdout else None

    def has_uncommitted_changes(self) -> bool:
        result = self._git("git status --porcelain")
        return result.succeeded and bool(result.stdout)

    def has_staged_changes(self) -> bool:
        result = self._git("git diff --cached --quiet")
        # exit 1 means there is a difference; blocked or missing git is not
        return not result.succeeded and result.exit_code == 1 and not result.blocked

    def has_untracked_files(self) -> bool:
        result = self._git("git ls-files --others --exclude-standard")
        return result.succeeded and bool(result.stdout)

    def is_merge_in_progress(self, git_dir: Path | None = None) -> bool:
        return file_exists("MERGE_HEAD", git_dir or self.git_dir())

    def is_rebase_in_progress(self, git_dir: Path | None = None) -> bool:
        git_dir = git_dir or self.git_dir()
        return directory_exists("rebase-merge", git_dir) or directory_exists("rebase-apply", git_dir)

    def is_cherry_pick_in_progress(self, git_dir: Path | None = None) -> bool:
        return file_exists("CHERRY_PICK_HEAD", git_dir or self.git_dir())

    def has_conflicts(self) -> bool:
        result = self._git("git ls-files -u")
        return result.succeeded and bool(result.stdout)

    def conflicted_files(self) -> list[str]:
        result = self._git("git diff --name-only --diff-filter=U")
        return _lines(result.stdout) if result.succeeded else []

    def remote(self) -> str | None:
        result = self._git("git remote")
        if result.succeeded and result.stdout:
            return _lines(result.stdout)[0]
        return None

    def last_commit(self) -> LastCommit | None:
        result = self._git('git log -1 --format="%h %s"')
        if not result.succeeded or not result.stdout:
            return None
        commit_hash, _, message = result.stdout.partition(" ")
        return LastCommit(hash=commit_hash, message=message)

    def ahead_behind(self) -> tuple[int, int, bool]:
        """(ahead, behind, has_upstream) relative to the tracked branch."""
        result = self._git("git rev-list --left-right --count HEAD...@{upstream}")
        if not result.succeeded:
            return 0, 0, False
        parts = result.stdout.split()
        try:
            return int(parts[0]), int(parts[1]), True
        except (IndexError, ValueError):
            return 0, 0, True

    def upstream(self):
        """Raw result of the upstream lookup; failure text says why."""
        return self._git("git rev-parse --abbrev-ref --symbolic-full-name @{u}")

    def stash_list(self) -> list[str]:
        result = self._git("git stash list")
        return _lines(result.stdout) if result.succeeded else []

    def reflog(self, count: int = 10) -> list[ReflogEntry]:
        count = max(1, min(int(count), 99))
        result = self._git(f'git reflog -{count} --format="%h %gd %gs"')
        if not result.succeeded:
            return []
        entries = []
        for line in _lines(result.stdout):
            commit_hash, _, rest = line.partition(" ")
            ref, _, action = rest.partition(" ")
            entries.append(ReflogEntry(hash=commit_hash, ref=ref, action=action))
        return entries

    def status_text(self) -> str | None:
        """Full `git status` output, or None outside a repository."""
        result = self._git("git status")
        return result.stdout if result.succeeded else None

    def short_status(self) -> str | None:
        result = self._git("git status -sb")
        return result.stdout if result.succeeded else None

    def repository_status(self) -> RepositoryStatus:
        if not self.is_repository():
            return RepositoryStatus(is_repo=False)

        git_dir = self.git_dir()
        ahead, behind, has_upstream = self.ahead_behind()
        has_conflicts = self.has_conflicts()
        return RepositoryStatus(
            is_repo=True,
            branch=self.current_branch(),
            is_detached_head=self.is_detached_head(),
            has_uncommitted_changes=self.has_uncommitted_changes(),
            has_staged_changes=self.has_staged_changes(),
            has_untracked_files=self.has_untracked_files(),
            is_merge_in_progress=self.is_merge_in_progress(git_dir),
            is_rebase_in_progress=self.is_rebase_in_progress(git_dir),
            is_cherry_pick_in_progress=self.is_cherry_pick_in_progress(git_dir),
            has_conflicts=has_conflicts,
            ahead=ahead,
            behind=behind,
            has_upstream=has_upstream,
            remote=self.remote(),
            last_commit=self.last_commit(),
            conflicted_files=self.conflicted_files() if has_conflicts else [],
        )


def get_repository_status(directory: str | Path = ".", executor: GuardedExecutor | None = None) -> RepositoryStatus:
    return GitAnalyzer(directory, executor).repository_status()
