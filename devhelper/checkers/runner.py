"""Run detector checks and turn every outcome into a CheckResult.

A check that raises becomes a FAIL result; nothing a check does can abort
the scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from devhelper.detectors.base import CHECK_MANUAL, CHECK_SKIP, CheckDefinition, Detection
from devhelper.ui import console, print_error, print_fix, print_info, print_success, print_warning
from devhelper.utils.logging import logger


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    SKIP = "skip"
    MANUAL = "manual"


@dataclass
class CheckResult:
    id: str
    name: str
    status: CheckStatus
    message: str = ""
    version: str | None = None
    script: str | None = None
    fix: str | None = None
    warning: str | None = None


@dataclass
class CheckSummary:
    total: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    skipped: int = 0
    manual: int = 0
    ready: bool = True


def _safe_fix(check: CheckDefinition, analysis: dict[str, Any], directory: Path) -> str | None:
    try:
        return check.resolve_fix(analysis, directory)
    except Exception as e:
        logger.debug("Fix for {} could not be built: {}", check.id, e)
        return None


def run_single_check(check: CheckDefinition, directory: Path, analysis: dict[str, Any]) -> CheckResult:
    """Evaluate one check. Exceptions from the check itself propagate."""
    outcome = check.check(directory, analysis)

    if outcome == CHECK_SKIP:
        return CheckResult(check.id, check.name, CheckStatus.SKIP, message="Not applicable")

    if outcome == CHECK_MANUAL:
        return CheckResult(
            check.id,
            check.name,
            CheckStatus.MANUAL,
            message="Manual verification required",
            fix=_safe_fix(check, analysis, directory),
        )

    if outcome is True:
        result = CheckResult(check.id, check.name, CheckStatus.PASS)
        # Version and script lookups are best effort
        if check.get_version:
            try:
                result.version = check.get_version()
            except Exception as e:
                logger.debug("Version lookup for {} failed: {}", check.id, e)
        if check.get_script:
            try:
                result.script = check.get_script(directory)
            except Exception as e:
                logger.debug("Script lookup for {} failed: {}", check.id, e)
        return result

    return CheckResult(
        check.id,
        check.name,
        CheckStatus.FAIL,
        message=outcome if isinstance(outcome, str) else "",
        fix=_safe_fix(check, analysis, directory),
        warning=check.warning,
    )


def run_checks(detection: Detection, directory: str | Path) -> list[CheckResult]:
    directory = Path(directory)
    results = []
    for check in detection.checks:
        try:
            results.append(run_single_check(check, directory, detection.analysis))
        except Exception as e:
            logger.warning("Check {} raised: {}", check.id, e)
            results.append(
                CheckResult(
                    check.id,
                    check.name,
                    CheckStatus.FAIL,
                    message=f"Check failed: {e}",
                    fix=_safe_fix(check, detection.analysis, directory),
                )
            )
    return results


def summarize_results(results: list[CheckResult]) -> CheckSummary:
    summary = CheckSummary(total=len(results))
    for result in results:
        if result.status is CheckStatus.PASS:
            summary.passed += 1
        elif result.status is CheckStatus.FAIL:
            summary.failed += 1
            summary.ready = False
        elif result.status is CheckStatus.WARN:
            summary.warnings += 1
        elif result.status is CheckStatus.SKIP:
            summary.skipped += 1
        elif result.status is CheckStatus.MANUAL:
            summary.manual += 1
    return summary


def print_results(results: list[CheckResult], verbose: bool = False) -> None:
    """Print check results; skipped checks only in verbose mode."""
    for result in results:
        if result.status is CheckStatus.PASS:
            detail = f"v{result.version}" if result.version else (f"-> {result.script}" if result.script else "")
            print_success(f"{result.name} {detail}".rstrip())
        elif result.status is CheckStatus.FAIL:
            print_error(f"{result.name} {result.message}".rstrip())
            if result.fix:
                print_fix(result.fix)
            if result.warning:
                print_warning(result.warning)
        elif result.status is CheckStatus.WARN:
            print_warning(f"{result.name} {result.message}".rstrip())
            if result.fix:
                print_fix(result.fix)
        elif result.status is CheckStatus.MANUAL:
            print_warning(f"{result.name} - Manual check required")
            if result.fix:
                print_fix(result.fix)
        elif verbose:
            print_info(f"{result.name} - Skipped")
    if not results:
        console.print("  [dim]No checks defined[/dim]")
