"""Recovery paths for common git situations.

Options are suggestions for the user to read and run themselves. ``safe``
marks whether an option can lose work; unsafe options carry a warning.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from devhelper.git.analyzer import GitAnalyzer, RepositoryStatus


@dataclass
class RecoveryOption:
    description: str
    commands: list[str] = field(default_factory=list)
    safe: bool = True
    warning: str | None = None
    info: list[str] = field(default_factory=list)


def recover_detached_head(status: RepositoryStatus) -> list[RecoveryOption]:
    return [
        RecoveryOption(
            description="Return to the main/master branch",
            commands=["git checkout main", "# or: git checkout master"],
        ),
        RecoveryOption(
            description="Create a new branch to keep your current work",
            commands=["git checkout -b new-branch-name"],
        ),
    ]


def recover_merge_conflict(status: RepositoryStatus, conflicted_files: list[str] | None = None) -> list[RecoveryOption]:
    conflicted_files = conflicted_files if conflicted_files is not None else status.conflicted_files
    options = [
        RecoveryOption(
            description="Resolve conflicts and complete the merge",
            commands=[
                "# 1. Open each conflicted file and resolve the conflicts",
                "# 2. Look for <<<<<<< HEAD, =======, and >>>>>>> markers",
                "# 3. Keep the code you want and remove the markers",
                "# 4. Stage the resolved files:",
                "git add <resolved-file>",
                "# 5. Complete the merge:",
                "git commit",
            ],
        ),
        RecoveryOption(
            description="Abort the merge and go back to before you started",
            commands=["git merge --abort"],
        ),
    ]
    if conflicted_files:
        options.append(
            RecoveryOption(
                description='Accept all "theirs" changes (incoming branch wins)',
                commands=[f'git checkout --theirs "{name}"' for name in conflicted_files] + ["git add ."],
                safe=False,
                warning="This will discard your local changes in conflicted files",
            )
        )
    return options


def recover_rebase_in_progress() -> list[RecoveryOption]:
    return [
        RecoveryOption(
            description="Continue the rebase after fixing conflicts",
            commands=["# First resolve any conflicts, then:", "git add .", "git rebase --continue"],
        ),
        RecoveryOption(
            description="Skip the current commit and continue",
            commands=["git rebase --skip"],
            safe=False,
            warning="This will skip the current commit entirely",
        ),
        RecoveryOption(
            description="Abort the rebase and go back to the original state",
            commands=["git rebase --abort"],
        ),
    ]


def recover_rejected_push(status: RepositoryStatus) -> list[RecoveryOption]:
    branch = status.branch or "main"
    return [
        RecoveryOption(
            description="Pull remote changes and merge with yours",
            commands=[f"git pull origin {branch}", "# Resolve any conflicts if they occur", "git push"],
        ),
        RecoveryOption(
            description="Pull with rebase to keep a cleaner history",
            commands=[f"git pull --rebase origin {branch}", "# Resolve any conflicts if they occur", "git push"],
        ),
        RecoveryOption(
            description="Force push (DANGEROUS - overwrites remote)",
            commands=[f"git push --force origin {branch}"],
            safe=False,
            warning="This will overwrite the remote branch and may delete others' work!",
        ),
    ]


def recover_no_upstream(status: RepositoryStatus) -> list[RecoveryOption]:
    branch = status.branch or "main"
    return [
        RecoveryOption(
            description="Set up tracking and push to remote",
            commands=[f"git push -u origin {branch}"],
        )
    ]


def recover_lost_commits(analyzer: GitAnalyzer, count: int = 15) -> list[RecoveryOption]:
    reflog = analyzer.reflog(count)
    if not reflog:
        return []
    return [
        RecoveryOption(
            description="View recent history to find lost commits",
            commands=[
                "git reflog",
                "# Find the commit hash you want to recover",
                "# Then create a branch at that point:",
                "git branch recovery-branch <commit-hash>",
            ],
        ),
        RecoveryOption(
            description="Recent reflog entries (possible recovery points):",
            info=[f"{entry.hash}: {entry.action}" for entry in reflog[:5]],
        ),
    ]


def recover_permission_denied() -> list[RecoveryOption]:
    return [
        RecoveryOption(
            description="Check if SSH key exists",
            commands=["# On Windows:", "dir %USERPROFILE%\\.ssh", "# On Mac/Linux:", "ls -la ~/.ssh"],
        ),
        RecoveryOption(
            description="Generate a new SSH key",
            commands=[
                'ssh-keygen -t ed25519 -C "your.email@example.com"',
                "# Press Enter to accept defaults",
                "# Then add the key to your GitHub/GitLab account",
            ],
        ),
        RecoveryOption(
            description="Switch to HTTPS instead of SSH",
            commands=[
                "# Get current remote URL:",
                "git remote -v",
                "# Change to HTTPS:",
                "git remote set-url origin https://github.com/user/repo.git",
            ],
        ),
    ]


def generate_recovery_options(status: RepositoryStatus) -> list[RecoveryOption]:
    """Recovery options for the most pressing condition in a status."""
    if not status.is_repo:
        return [RecoveryOption(description="Initialize a new Git repository", commands=["git init"])]
    if status.is_detached_head:
        return recover_detached_head(status)
    if status.has_conflicts or status.is_merge_in_progress:
        return recover_merge_conflict(status)
    if status.is_rebase_in_progress:
        return recover_rebase_in_progress()
    if not status.has_upstream:
        return recover_no_upstream(status)
    return []
