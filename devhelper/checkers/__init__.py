"""Check execution and system-level checks."""

from devhelper.checkers.runner import (
    CheckResult,
    CheckStatus,
    CheckSummary,
    print_results,
    run_checks,
    run_single_check,
    summarize_results,
)
from devhelper.checkers.system import (
    GitConfigEntry,
    PathReport,
    ToolStatus,
    check_developer_tools,
    check_git_config,
    check_path,
    detect_all_tools,
    get_system_info,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "CheckSummary",
    "GitConfigEntry",
    "PathReport",
    "ToolStatus",
    "check_developer_tools",
    "check_git_config",
    "check_path",
    "detect_all_tools",
    "get_system_info",
    "print_results",
    "run_checks",
    "run_single_check",
    "summarize_results",
]
