"""Tests for check execution and system checks."""

import pytest
from conftest import FakeSpawn

from devhelper.checkers import (
    CheckStatus,
    check_developer_tools,
    check_git_config,
    check_path,
    run_checks,
    run_single_check,
    summarize_results,
)
from devhelper.checkers.runner import CheckResult
from devhelper.detectors.base import CHECK_MANUAL, CHECK_SKIP, CheckDefinition, Detection
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.platform import IS_WINDOWS

PROBE = "where" if IS_WINDOWS else "which"


def definition(check, **kwargs):
    return CheckDefinition(id="demo", name="Demo check", check=check, **kwargs)


class TestRunSingleCheck:
    def test_skip(self, tmp_path):
        result = run_single_check(definition(lambda d, a: CHECK_SKIP), tmp_path, {})
        assert result.status is CheckStatus.SKIP
        assert result.message == "Not applicable"

    def test_manual(self, tmp_path):
        result = run_single_check(definition(lambda d, a: CHECK_MANUAL, fix="look at it"), tmp_path, {})
        assert result.status is CheckStatus.MANUAL
        assert result.fix == "look at it"

    def test_pass_collects_version_and_script(self, tmp_path):
        check = definition(
            lambda d, a: True,
            get_version=lambda: "20.11.1",
            get_script=lambda d: "npm start",
        )
        result = run_single_check(check, tmp_path, {})
        assert result.status is CheckStatus.PASS
        assert result.version == "20.11.1"
        assert result.script == "npm start"
        assert result.fix is None

    def test_pass_survives_version_lookup_error(self, tmp_path):
        def broken():
            raise RuntimeError("no version")

        result = run_single_check(definition(lambda d, a: True, get_version=broken), tmp_path, {})
        assert result.status is CheckStatus.PASS
        assert result.version is None

    def test_fail_with_callable_fix(self, tmp_path):
        check = definition(
            lambda d, a: False,
            fix=lambda a, d: f"{a['package_manager']} install",
            warning="careful",
        )
        result = run_single_check(check, tmp_path, {"package_manager": "pnpm"})
        assert result.status is CheckStatus.FAIL
        assert result.fix == "pnpm install"
        assert result.warning == "careful"

    def test_fail_message_from_check(self, tmp_path):
        result = run_single_check(definition(lambda d, a: "port busy"), tmp_path, {})
        assert result.status is CheckStatus.FAIL
        assert result.message == "port busy"


class TestRunChecks:
    def test_raising_check_becomes_failure(self, tmp_path):
        def explode(directory, analysis):
            raise OSError("disk on fire")

        checks = [
            definition(explode, fix="fix it"),
            CheckDefinition(id="ok", name="Fine", check=lambda d, a: True),
        ]
        detection = Detection(detector=None, analysis={"type": "nodejs"}, checks=checks)
        results = run_checks(detection, tmp_path)

        assert [r.status for r in results] == [CheckStatus.FAIL, CheckStatus.PASS]
        assert results[0].message == "Check failed: disk on fire"
        assert results[0].fix == "fix it"


class TestSummary:
    def test_counts(self):
        results = [
            CheckResult("a", "A", CheckStatus.PASS),
            CheckResult("b", "B", CheckStatus.PASS),
            CheckResult("c", "C", CheckStatus.SKIP),
            CheckResult("d", "D", CheckStatus.MANUAL),
            CheckResult("e", "E", CheckStatus.WARN),
        ]
        summary = summarize_results(results)
        assert (summary.total, summary.passed, summary.skipped, summary.manual, summary.warnings) == (5, 2, 1, 1, 1)
        assert summary.ready is True

    def test_any_failure_means_not_ready(self):
        summary = summarize_results([CheckResult("a", "A", CheckStatus.PASS), CheckResult("b", "B", CheckStatus.FAIL)])
        assert summary.failed == 1
        assert summary.ready is False

    def test_empty(self):
        summary = summarize_results([])
        assert summary.total == 0
        assert summary.ready is True


class TestCheckPath:
    def test_clean_path(self):
        sep = ";" if IS_WINDOWS else ":"
        report = check_path(sep.join(["/usr/bin", "/bin"]))
        assert report.count == 2
        assert report.issues == []

    def test_empty_and_duplicate_entries(self):
        sep = ";" if IS_WINDOWS else ":"
        report = check_path(sep.join(["/usr/bin", "", "/USR/BIN"]))
        levels = {issue.level for issue in report.issues}
        assert report.count == 3
        assert levels == {"warning", "info"}


@pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
class TestSystemProbes:
    def test_git_config(self):
        spawn = FakeSpawn(
            {
                f"{PROBE} git": (0, "/usr/bin/git\n", ""),
                "git config --global user.name": (0, "Jane Doe\n", ""),
            }
        )
        entries = {e.key: e for e in check_git_config(GuardedExecutor(spawn=spawn))}

        assert entries["user.name"].configured
        assert entries["user.name"].value == "Jane Doe"
        assert entries["user.email"].status == "missing"
        assert entries["init.defaultBranch"].status == "not set"
        assert entries["init.defaultBranch"].value == "master (default)"
        # Only reads: every git invocation is a config query
        assert all(c.startswith(("git config --global", PROBE)) for c in spawn.commands)

    def test_git_missing(self):
        entries = check_git_config(GuardedExecutor(spawn=FakeSpawn()))
        assert len(entries) == 1
        assert entries[0].name == "Git"
        assert not entries[0].configured

    def test_python3_fallback(self):
        spawn = FakeSpawn(
            {
                f"{PROBE} python3": (0, "/usr/bin/python3\n", ""),
                "python3 --version": (0, "Python 3.12.1\n", ""),
            }
        )
        tools = {t.display: t for t in check_developer_tools(GuardedExecutor(spawn=spawn))}

        assert tools["Python"].installed
        assert tools["Python"].name == "python3"
        assert tools["Python"].version == "3.12.1"
        assert not tools["Node.js"].installed
        assert tools["Node.js"].display_version == "not installed"
