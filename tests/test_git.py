"""Tests for the git knowledge base, analyzer and recovery options."""

import pytest
from conftest import FakeSpawn

from devhelper.git import (
    GitAnalyzer,
    KnowledgeBase,
    RepositoryStatus,
    generate_recovery_options,
    match_error,
    match_state,
)
from devhelper.git.recovery import recover_lost_commits, recover_merge_conflict, recover_rejected_push
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.platform import IS_WINDOWS

windows_skip = pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")


def analyzer_for(directory, responses):
    spawn = FakeSpawn(responses)
    return GitAnalyzer(directory, GuardedExecutor(spawn=spawn)), spawn


class TestKnowledgeBase:
    def test_loads_shipped_entries(self):
        kb = KnowledgeBase()
        ids = [e.id for e in kb.all_errors()]
        assert "merge-conflict" in ids
        assert "detached-head" in ids
        assert "node-modules-missing" in ids
        assert kb.validate() == []

    def test_categories(self):
        categories = KnowledgeBase().categories()
        assert categories[0] == "git"
        assert {"runtime", "system", "permission"} <= set(categories)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("fatal: not a git repository (or any of the parent directories): .git", "not-a-repository"),
            ("CONFLICT (content): Merge conflict in app.js", "merge-conflict"),
            (" ! [rejected]        main -> main (fetch first)", "push-rejected"),
            ("git@github.com: Permission denied (publickey).", "permission-denied-publickey"),
            ("Error: Cannot find module 'express'", "node-modules-missing"),
            ("fatal: The current branch feature has no upstream branch.", "no-upstream"),
        ],
    )
    def test_match_error(self, text, expected):
        assert match_error(text).id == expected

    def test_match_error_nothing(self):
        assert match_error("everything is fine") is None
        assert match_error("") is None
        assert match_error(None) is None

    def test_render_fills_placeholders(self):
        entry = KnowledgeBase().get("no-upstream").render(branch="feature/login")
        assert "git push -u origin feature/login" in entry.fixes

    def test_render_defaults(self):
        entry = KnowledgeBase().get("node-modules-missing").render()
        assert "npm install" in entry.fixes
        detached = KnowledgeBase().get("detached-head").render(commit=None)
        assert "<commit>" in detached.explanation

    def test_category_label(self):
        kb = KnowledgeBase()
        assert kb.get("merge-conflict").category_label == "Git Error"
        assert kb.get("directory-permission-denied").category_label == "System Error"

    def test_bad_format_raises(self, tmp_path):
        data_file = tmp_path / "errors.yaml"
        data_file.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            KnowledgeBase(data_file).load()

    def test_invalid_entries_skipped(self, tmp_path):
        data_file = tmp_path / "errors.yaml"
        data_file.write_text(
            "errors:\n"
            "  - id: ok\n"
            "    title: Fine\n"
            "    explanation: All good\n"
            "    patterns: [ok]\n"
            "    fixes: ['# nothing']\n"
            "  - id: broken\n",
            encoding="utf-8",
        )
        kb = KnowledgeBase(data_file)
        assert [e.id for e in kb.all_errors()] == ["ok"]
        assert kb.get("ok").category_label == "Unknown Error"

    def test_validate_reports_problems(self, tmp_path):
        data_file = tmp_path / "errors.yaml"
        data_file.write_text(
            "errors:\n"
            "  - {id: a, title: A, explanation: x}\n"
            "  - {id: a, title: A, explanation: x, patterns: [p], fixes: [f]}\n",
            encoding="utf-8",
        )
        problems = KnowledgeBase(data_file).validate()
        assert "Duplicate id: a" in problems
        assert "No patterns for a" in problems
        assert "No fixes for a" in problems


class TestMatchState:
    def test_state_priority(self):
        assert match_state(RepositoryStatus(is_repo=False)).id == "not-a-repository"
        assert match_state(RepositoryStatus(is_repo=True, is_detached_head=True, has_conflicts=True)).id == (
            "detached-head"
        )
        assert match_state(RepositoryStatus(is_repo=True, branch="main", has_conflicts=True)).id == "merge-conflict"
        assert match_state(RepositoryStatus(is_repo=True, branch="main")).id == "no-upstream"
        assert (
            match_state(RepositoryStatus(is_repo=True, branch="main", has_upstream=True, ahead=2, behind=1)).id
            == "diverged"
        )

    def test_clean_state(self):
        assert match_state(RepositoryStatus(is_repo=True, branch="main", has_upstream=True)) is None


@windows_skip
class TestGitAnalyzer:
    def test_not_a_repository(self, tmp_path):
        analyzer, spawn = analyzer_for(tmp_path, {})
        status = analyzer.repository_status()

        assert status.is_repo is False
        assert spawn.commands == ["git rev-parse --is-inside-work-tree"]
        assert spawn.calls[0][1]["cwd"] == str(tmp_path)

    def test_repository_status(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "MERGE_HEAD").write_text("abc123\n", encoding="utf-8")
        analyzer, spawn = analyzer_for(
            tmp_path,
            {
                "git rev-parse --is-inside-work-tree": (0, "true\n", ""),
                "git rev-parse --git-dir": (0, ".git\n", ""),
                "git branch --show-current": (0, "main\n", ""),
                "git symbolic-ref HEAD": (0, "refs/heads/main\n", ""),
                "git status --porcelain": (0, "UU app.js\n?? notes.txt\n", ""),
                "git diff --cached --quiet": (1, "", ""),
                "git ls-files --others --exclude-standard": (0, "notes.txt\n", ""),
                "git ls-files -u": (0, "100644 abc 1\tapp.js\n", ""),
                "git diff --name-only --diff-filter=U": (0, "app.js\n", ""),
                "git rev-list --left-right --count HEAD...@{upstream}": (0, "2\t3\n", ""),
                "git remote": (0, "origin\nupstream\n", ""),
                "git log -1 --format=%h %s": (0, "abc1234 Add login form\n", ""),
            },
        )
        status = analyzer.repository_status()

        assert status.is_repo
        assert status.branch == "main"
        assert not status.is_detached_head
        assert status.has_uncommitted_changes
        assert status.has_staged_changes
        assert status.has_untracked_files
        assert status.is_merge_in_progress
        assert not status.is_rebase_in_progress
        assert not status.is_cherry_pick_in_progress
        assert status.has_conflicts
        assert status.conflicted_files == ["app.js"]
        assert (status.ahead, status.behind, status.has_upstream) == (2, 3, True)
        assert status.remote == "origin"
        assert status.last_commit.hash == "abc1234"
        assert status.last_commit.message == "Add login form"

    def test_marker_files(self, tmp_path):
        git_dir = tmp_path / ".git"
        (git_dir / "rebase-merge").mkdir(parents=True)
        (git_dir / "CHERRY_PICK_HEAD").write_text("", encoding="utf-8")
        analyzer, _ = analyzer_for(tmp_path, {})

        assert analyzer.git_dir() == git_dir
        assert analyzer.is_rebase_in_progress()
        assert analyzer.is_cherry_pick_in_progress()
        assert not analyzer.is_merge_in_progress()

    def test_detached_head(self, tmp_path):
        analyzer, _ = analyzer_for(tmp_path, {"git symbolic-ref HEAD": (128, "", "fatal: ref HEAD is not a symbolic ref")})
        assert analyzer.is_detached_head()

    def test_no_upstream(self, tmp_path):
        analyzer, _ = analyzer_for(tmp_path, {})
        assert analyzer.ahead_behind() == (0, 0, False)

    def test_stash_list(self, tmp_path):
        analyzer, _ = analyzer_for(tmp_path, {"git stash list": (0, "stash@{0}: WIP on main: abc1234 wip\n\n", "")})
        assert analyzer.stash_list() == ["stash@{0}: WIP on main: abc1234 wip"]

    def test_reflog(self, tmp_path):
        analyzer, spawn = analyzer_for(
            tmp_path,
            {
                "git reflog -3 --format=%h %gd %gs": (
                    0,
                    "abc1234 HEAD@{0} checkout: moving from main to abc1234\n"
                    "def5678 HEAD@{1} commit: Add login form\n",
                    "",
                )
            },
        )
        entries = analyzer.reflog(3)

        assert [e.hash for e in entries] == ["abc1234", "def5678"]
        assert entries[1].ref == "HEAD@{1}"
        assert entries[1].action == "commit: Add login form"

    @pytest.mark.parametrize("count,flag", [(0, "-1"), (500, "-99"), (15, "-15")])
    def test_reflog_count_is_clamped(self, tmp_path, count, flag):
        analyzer, spawn = analyzer_for(tmp_path, {})
        analyzer.reflog(count)
        assert spawn.calls[0][0][2] == flag


class TestRecoveryOptions:
    def test_not_a_repository(self):
        options = generate_recovery_options(RepositoryStatus(is_repo=False))
        assert options[0].commands == ["git init"]

    def test_detached_head(self):
        options = generate_recovery_options(RepositoryStatus(is_repo=True, is_detached_head=True))
        assert "git checkout main" in options[0].commands
        assert all(option.safe for option in options)

    def test_merge_conflict_with_files(self):
        status = RepositoryStatus(is_repo=True, branch="main", has_conflicts=True, conflicted_files=["a.py"])
        options = generate_recovery_options(status)
        unsafe = [option for option in options if not option.safe]

        assert len(options) == 3
        assert len(unsafe) == 1
        assert unsafe[0].warning
        assert 'git checkout --theirs "a.py"' in unsafe[0].commands

    def test_merge_conflict_without_files(self):
        options = recover_merge_conflict(RepositoryStatus(is_repo=True, is_merge_in_progress=True))
        assert all(option.safe for option in options)

    def test_rebase_and_upstream(self):
        rebase = generate_recovery_options(RepositoryStatus(is_repo=True, is_rebase_in_progress=True))
        assert any("git rebase --abort" in option.commands for option in rebase)
        upstream = generate_recovery_options(RepositoryStatus(is_repo=True, branch="feature"))
        assert upstream[0].commands == ["git push -u origin feature"]

    def test_healthy_repository(self):
        assert generate_recovery_options(RepositoryStatus(is_repo=True, branch="main", has_upstream=True)) == []

    def test_rejected_push_marks_force_unsafe(self):
        options = recover_rejected_push(RepositoryStatus(is_repo=True, branch="dev"))
        force = [option for option in options if any("--force" in c for c in option.commands)]
        assert force and not force[0].safe
        assert "git pull origin dev" in options[0].commands

    @windows_skip
    def test_lost_commits(self, tmp_path):
        analyzer, _ = analyzer_for(
            tmp_path,
            {"git reflog -15 --format=%h %gd %gs": (0, "abc1234 HEAD@{0} commit: wip\n", "")},
        )
        options = recover_lost_commits(analyzer)
        assert options[1].info == ["abc1234: commit: wip"]

    def test_lost_commits_empty_reflog(self, tmp_path):
        analyzer, _ = analyzer_for(tmp_path, {})
        assert recover_lost_commits(analyzer) == []
