"""Tests for the guarded executor."""

import re
import shlex
import subprocess
import sys
import time

import pytest
from conftest import FakeSpawn

from devhelper.safety.classifier import CommandClassifier, CommandPattern, RuleKind
from devhelper.safety.executor import (
    BLOCKED_EXIT_CODE,
    SPAWN_ERROR_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    ExecutionRequest,
    ExecutionResult,
    GuardedExecutor,
    validate_tool_name,
)
from devhelper.utils.logging import AUDIT_CHANNEL, logger
from devhelper.utils.platform import IS_WINDOWS

PROBE = "where" if IS_WINDOWS else "which"


class TestBlockedCommands:
    @pytest.mark.parametrize("command", ["npm install", "rm -rf /", "git status; rm -rf /", "ls", ""])
    def test_blocked_command_never_spawns(self, executor, fake_spawn, command):
        result = executor.run(command)

        assert result.blocked
        assert not result.succeeded
        assert result.exit_code == BLOCKED_EXIT_CODE
        assert result.stdout == ""
        assert result.stderr.startswith("blocked:")
        assert fake_spawn.calls == []

    def test_blocked_command_is_audited(self, executor, capsys):
        records = []
        sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            executor.run("npm install")
        finally:
            logger.remove(sink_id)

        audit = [r for r in records if r["extra"].get("channel") == AUDIT_CHANNEL]
        assert len(audit) == 1
        assert audit[0]["level"].name == "DEBUG"
        assert "npm install" in audit[0]["message"]
        assert "matches dangerous pattern" in audit[0]["message"]
        assert capsys.readouterr().out == ""

    def test_refused_result(self):
        result = ExecutionResult.refused("not on allowlist")
        assert result.blocked
        assert result.exit_code == -1
        assert result.output == "blocked: not on allowlist"


@pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
class TestAllowedCommands:
    def test_runs_without_shell(self):
        spawn = FakeSpawn({"git status": (0, "On branch main\n", "")})
        result = GuardedExecutor(spawn=spawn).run("git status")

        assert result.succeeded
        assert result.stdout == "On branch main"
        assert result.exit_code == 0
        argv, kwargs = spawn.calls[0]
        assert argv == ["git", "status"]
        assert kwargs["shell"] is False
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["stdout"] is subprocess.PIPE
        assert kwargs["stderr"] is subprocess.PIPE
        assert kwargs["timeout"] == 10.0
        assert kwargs["cwd"] is None

    def test_working_directory(self, tmp_path):
        spawn = FakeSpawn({"git status": (0, "", "")})
        GuardedExecutor(spawn=spawn).run("git status", cwd=tmp_path)
        assert spawn.calls[0][1]["cwd"] == str(tmp_path)

    def test_nonzero_exit(self):
        spawn = FakeSpawn({"git status": (128, "", "fatal: not a git repository\n")})
        result = GuardedExecutor(spawn=spawn).run("git status")

        assert not result.succeeded
        assert not result.blocked
        assert result.exit_code == 128
        assert result.output == "fatal: not a git repository"

    def test_merge_stderr(self):
        spawn = FakeSpawn({"java -version": (0, 'openjdk version "17.0.2"', None)})
        result = GuardedExecutor(spawn=spawn).run("java -version 2>&1")

        argv, kwargs = spawn.calls[0]
        assert argv == ["java", "-version"]
        assert kwargs["stderr"] is subprocess.STDOUT
        assert result.stdout == 'openjdk version "17.0.2"'
        assert result.stderr == ""

    def test_per_call_timeout(self):
        spawn = FakeSpawn({"git status": (0, "", "")})
        executor = GuardedExecutor(spawn=spawn, timeout=3)
        executor.run("git status")
        executor.run("git status", timeout=1.5)
        assert [kwargs["timeout"] for _, kwargs in spawn.calls] == [3, 1.5]

    def test_execute_request(self, tmp_path):
        spawn = FakeSpawn({"git remote": (0, "origin\n", "")})
        request = ExecutionRequest(command="git remote", working_directory=tmp_path, timeout_seconds=2.0)
        result = GuardedExecutor(spawn=spawn).execute(request)

        assert result.stdout == "origin"
        assert spawn.calls[0][1]["cwd"] == str(tmp_path)
        assert spawn.calls[0][1]["timeout"] == 2.0

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_execute_non_positive_timeout_uses_default(self, timeout):
        spawn = FakeSpawn({"git remote": (0, "origin\n", "")})
        GuardedExecutor(spawn=spawn, timeout=7.0).execute(ExecutionRequest(command="git remote", timeout_seconds=timeout))
        assert spawn.calls[0][1]["timeout"] == 7.0

    def test_from_config(self):
        executor = GuardedExecutor.from_config({"timeouts": {"command": 20.0, "probe": 2.0}})
        assert executor.timeout == 20.0
        assert executor.probe_timeout == 2.0


class TestFailures:
    def test_timeout(self):
        spawn = FakeSpawn({"git status": subprocess.TimeoutExpired(cmd="git status", timeout=1)})
        result = GuardedExecutor(spawn=spawn).run("git status", timeout=1)

        assert not result.succeeded
        assert not result.blocked
        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert "timed out" in result.stderr

    def test_missing_tool(self):
        spawn = FakeSpawn({"git status": FileNotFoundError(2, "No such file or directory", "git")})
        result = GuardedExecutor(spawn=spawn).run("git status")

        assert not result.succeeded
        assert result.exit_code == SPAWN_ERROR_EXIT_CODE
        assert result.stderr

    def test_real_timeout_is_bounded(self):
        command = f"{shlex.quote(sys.executable)} -c \"__import__('time').sleep(5)\""
        classifier = CommandClassifier(
            deny_list=(),
            allow_list=(CommandPattern(re.compile(re.escape(command)), RuleKind.ALLOW, "sleeper"),),
        )
        executor = GuardedExecutor(classifier=classifier)

        started = time.monotonic()
        result = executor.run(command, timeout=0.5)
        elapsed = time.monotonic() - started

        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert not result.succeeded
        assert elapsed < 4


class TestToolProbes:
    @pytest.mark.parametrize("name", ["git; rm -rf /", "node && x", "$(id)", "", "../bin/sh", "g++", None, "a" * 65])
    def test_invalid_tool_names_never_spawn(self, executor, fake_spawn, name):
        assert executor.tool_exists(name) is False
        assert executor.tool_version(name) is None
        assert fake_spawn.calls == []

    def test_invalid_flag_never_spawns(self, executor, fake_spawn):
        assert executor.tool_version("node", "--version; rm -rf /") is None
        assert executor.tool_version("node", "") is None
        assert fake_spawn.calls == []

    @pytest.mark.parametrize("name", ["node", "docker-compose", "python3", "dotnet"])
    def test_valid_tool_names(self, name):
        assert validate_tool_name(name)

    @pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
    def test_tool_exists(self):
        spawn = FakeSpawn({f"{PROBE} git": (0, "/usr/bin/git\n", "")})
        executor = GuardedExecutor(spawn=spawn, probe_timeout=2)

        assert executor.tool_exists("git") is True
        assert spawn.calls[0][1]["timeout"] == 2
        assert executor.tool_exists("node") is False

    @pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
    def test_tool_exists_needs_output(self):
        spawn = FakeSpawn({f"{PROBE} git": (0, "", "")})
        assert GuardedExecutor(spawn=spawn).tool_exists("git") is False

    @pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
    def test_tool_version(self):
        spawn = FakeSpawn({"node --version": (0, "v20.11.1\n", ""), "go version": (0, "go version go1.22.0", "")})
        executor = GuardedExecutor(spawn=spawn)

        assert executor.tool_version("node") == "v20.11.1"
        assert executor.tool_version("go", "version") == "go version go1.22.0"
        assert executor.tool_version("rustc") is None

    @pytest.mark.skipif(IS_WINDOWS, reason="argv[0] is resolved to a full path on Windows")
    def test_java_version_reads_stderr(self):
        spawn = FakeSpawn({"java -version": (0, 'openjdk version "21.0.1" 2023-10-17', None)})
        output = GuardedExecutor(spawn=spawn).tool_version("java")

        assert output.startswith('openjdk version "21.0.1"')
        assert spawn.calls[0][1]["stderr"] is subprocess.STDOUT
