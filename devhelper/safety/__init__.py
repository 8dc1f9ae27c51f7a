"""Command-safety gate: classifier plus guarded executor."""

from devhelper.safety.classifier import (
    ALLOW_LIST,
    DENY_LIST,
    CommandClassifier,
    CommandPattern,
    ParsedCommand,
    RuleKind,
    SafetyVerdict,
    UnsafeCommandError,
    assert_command_safe,
    classify,
)
from devhelper.safety.executor import (
    BLOCKED_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    ExecutionRequest,
    ExecutionResult,
    GuardedExecutor,
    validate_tool_name,
)

__all__ = [
    "ALLOW_LIST",
    "BLOCKED_EXIT_CODE",
    "DENY_LIST",
    "TIMEOUT_EXIT_CODE",
    "CommandClassifier",
    "CommandPattern",
    "ExecutionRequest",
    "ExecutionResult",
    "GuardedExecutor",
    "ParsedCommand",
    "RuleKind",
    "SafetyVerdict",
    "UnsafeCommandError",
    "assert_command_safe",
    "classify",
    "validate_tool_name",
]
