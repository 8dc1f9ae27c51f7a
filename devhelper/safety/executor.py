"""Guarded executor - the only place in dev-helper that spawns a process.

Every command goes through the classifier first. A refused command never
reaches the spawn primitive; it comes back as a blocked ExecutionResult and
an audit record on the ``safety`` log channel.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from devhelper.config_runtime import DEFAULTS
from devhelper.safety.classifier import (
    DEFAULT_CLASSIFIER,
    CommandClassifier,
    UnsafeCommandError,
)
from devhelper.utils.logging import audit_logger, logger
from devhelper.utils.platform import IS_WINDOWS

BLOCKED_EXIT_CODE = -1
TIMEOUT_EXIT_CODE = 124
SPAWN_ERROR_EXIT_CODE = 1

DEFAULT_TIMEOUT = float(DEFAULTS["timeouts"]["command"])
DEFAULT_PROBE_TIMEOUT = float(DEFAULTS["timeouts"]["probe"])

MAX_TOOL_NAME_LENGTH = 64
_TOOL_NAME = re.compile(r"^[\w-]+$")
_TOOL_FLAG = re.compile(r"^[-\w]+$")

# Tools that print their version on stderr
STDERR_VERSION_TOOLS = frozenset({"java", "javac"})

SpawnFn = Callable[..., Any]


@dataclass(frozen=True)
class ExecutionRequest:
    command: str
    working_directory: Path | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT
    capture_output: bool = True


@dataclass(frozen=True)
class ExecutionResult:
    """What happened to one command. ``blocked`` means it never ran."""

    succeeded: bool
    stdout: str
    stderr: str
    exit_code: int
    blocked: bool = False

    @classmethod
    def refused(cls, reason: str) -> ExecutionResult:
        return cls(
            succeeded=False,
            stdout="",
            stderr=f"blocked: {reason}",
            exit_code=BLOCKED_EXIT_CODE,
            blocked=True,
        )

    @property
    def output(self) -> str:
        """stdout if non-empty, else stderr."""
        return self.stdout or self.stderr


def validate_tool_name(name: object) -> bool:
    """Word characters and hyphens only, so a name can't smuggle in syntax."""
    return (
        isinstance(name, str)
        and 0 < len(name) <= MAX_TOOL_NAME_LENGTH
        and _TOOL_NAME.match(name) is not None
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value.strip()


class GuardedExecutor:
    """Runs allowlisted commands with a timeout and no shell.

    Args:
        classifier: rule set to consult; defaults to the built-in tables.
        spawn: process primitive with the signature of ``subprocess.run``.
            Tests substitute a double here.
        timeout: default per-command timeout in seconds.
        probe_timeout: timeout for tool existence and version probes.
    """

    def __init__(
        self,
        classifier: CommandClassifier | None = None,
        spawn: SpawnFn | None = None,
        timeout: float | None = None,
        probe_timeout: float | None = None,
    ) -> None:
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self._spawn = spawn or subprocess.run
        self.timeout = timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT
        self.probe_timeout = probe_timeout if probe_timeout and probe_timeout > 0 else DEFAULT_PROBE_TIMEOUT

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs: Any) -> GuardedExecutor:
        """Executor using the timeouts of a load_runtime_config() result."""
        timeouts = config.get("timeouts", {})
        return cls(timeout=timeouts.get("command"), probe_timeout=timeouts.get("probe"), **kwargs)

    def run(
        self,
        command: str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
        capture_output: bool = True,
    ) -> ExecutionResult:
        request = ExecutionRequest(
            command=command,
            working_directory=Path(cwd) if cwd is not None else None,
            timeout_seconds=timeout if timeout and timeout > 0 else self.timeout,
            capture_output=capture_output,
        )
        return self.execute(request)

    def execute(self, request: ExecutionRequest) -> ExecutionResult:
        verdict = self.classifier.classify(request.command)
        if not verdict.safe:
            audit_logger.debug("Blocked command {!r}: {}", request.command, verdict.reason)
            return ExecutionResult.refused(verdict.reason)

        try:
            parsed = self.classifier.parse(request.command)
        except UnsafeCommandError as e:
            audit_logger.debug("Blocked command {!r}: {}", request.command, e.reason)
            return ExecutionResult.refused(e.reason)

        argv = list(parsed.argv)
        if IS_WINDOWS:
            # CreateProcess does not resolve .cmd/.bat shims such as npm.cmd
            argv[0] = shutil.which(argv[0]) or argv[0]

        if request.capture_output:
            stdout = subprocess.PIPE
            stderr = subprocess.STDOUT if parsed.merge_stderr else subprocess.PIPE
        else:
            stdout = None
            stderr = subprocess.STDOUT if parsed.merge_stderr else None

        timeout = request.timeout_seconds
        if not timeout or timeout <= 0:
            timeout = self.timeout

        logger.debug("Running {} (timeout {}s)", argv, timeout)
        try:
            completed = self._spawn(
                argv,
                cwd=str(request.working_directory) if request.working_directory else None,
                timeout=timeout,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                shell=False,
                check=False,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.TimeoutExpired:
            logger.debug("Command timed out after {}s: {}", timeout, argv)
            return ExecutionResult(
                succeeded=False,
                stdout="",
                stderr=f"timed out after {timeout:g}s",
                exit_code=TIMEOUT_EXIT_CODE,
            )
        except OSError as e:
            # FileNotFoundError / PermissionError: the tool is missing or unusable
            logger.debug("Could not start {}: {}", argv[0], e)
            return ExecutionResult(
                succeeded=False,
                stdout="",
                stderr=str(e),
                exit_code=SPAWN_ERROR_EXIT_CODE,
            )

        return ExecutionResult(
            succeeded=completed.returncode == 0,
            stdout=_text(completed.stdout),
            stderr=_text(completed.stderr),
            exit_code=completed.returncode,
        )

    def tool_exists(self, name: str) -> bool:
        if not validate_tool_name(name):
            logger.debug("Rejected tool name {!r}", name)
            return False
        probe = f"where {name}" if IS_WINDOWS else f"which {name}"
        result = self.run(probe, timeout=self.probe_timeout)
        return result.succeeded and bool(result.stdout)

    def tool_version(self, name: str, flag: str = "--version") -> str | None:
        """Raw version output of a tool, or None if it could not be queried."""
        if not validate_tool_name(name) or not isinstance(flag, str) or not _TOOL_FLAG.match(flag):
            logger.debug("Rejected version query {!r} {!r}", name, flag)
            return None

        if name in STDERR_VERSION_TOOLS:
            flag = "-version"
            command = f"{name} {flag} 2>&1"
        else:
            command = f"{name} {flag}"

        result = self.run(command, timeout=self.probe_timeout)
        if not result.succeeded:
            return None
        return result.output or None
