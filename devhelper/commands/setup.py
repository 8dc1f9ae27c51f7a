"""Check that a developer machine and a project are ready to work on."""

from dataclasses import dataclass
from pathlib import Path

import click
from rich.markup import escape

from devhelper.checkers import (
    CheckStatus,
    check_developer_tools,
    check_git_config,
    check_path,
    get_system_info,
    print_results,
    run_checks,
    summarize_results,
)
from devhelper.config_runtime import load_runtime_config
from devhelper.detectors import build_detectors, detect_all
from devhelper.fixes import explain_issue, tool_install_fix
from devhelper.safety.executor import GuardedExecutor
from devhelper.ui import (
    console,
    print_error,
    print_fix,
    print_header,
    print_info,
    print_section,
    print_status_panel,
    print_success,
    print_warning,
)
from devhelper.utils.error_handler import handle_exceptions
from devhelper.utils.exit_codes import ExitCodes


@dataclass
class Issue:
    id: str
    name: str
    fix: str | None = None


def _check_tools(executor: GuardedExecutor, issues: list[Issue]) -> None:
    print_section("System tools")
    for status in check_developer_tools(executor):
        if status.installed:
            print_success(f"{status.display} {status.display_version}")
            continue
        fix = tool_install_fix(status.display)
        print_error(f"{status.display} not installed")
        print_fix(fix)
        issues.append(Issue(id=f"{status.name}-installed", name=f"{status.display} not installed", fix=fix))


def _check_git(executor: GuardedExecutor, issues: list[Issue]) -> None:
    print_section("Git configuration")
    for entry in check_git_config(executor):
        if entry.configured:
            print_success(f"{entry.name}: {entry.value}")
        elif entry.key == "init.defaultBranch":
            print_info(f"{entry.name}: {entry.value}")
            print_fix(entry.fix, label="Optional")
        elif not entry.key:
            # git itself is missing; the tools section already reported it
            print_warning("Git configuration skipped (git not installed)")
        else:
            print_error(f"{entry.name} {entry.status}")
            print_fix(entry.fix)
            issues.append(Issue(id=_git_issue_id(entry.key), name=f"{entry.name} {entry.status}", fix=entry.fix))


def _git_issue_id(key: str) -> str:
    return {"user.name": "git-user-name", "user.email": "git-user-email"}.get(key, f"git-{key}")


def _check_environment(verbose: bool) -> None:
    if not verbose:
        return
    print_section("Environment")
    info = get_system_info()
    for key in ("platform", "arch", "release", "cpus", "memory", "shell", "elevated"):
        if key in info:
            print_info(f"{key}: {info[key]}")

    report = check_path()
    print_info(f"PATH entries: {report.count}")
    for issue in report.issues:
        if issue.level == "warning":
            print_warning(issue.message)
        else:
            print_info(issue.message)


def _check_projects(root: Path, executor: GuardedExecutor, verbose: bool, issues: list[Issue]) -> int:
    detections = detect_all(root, build_detectors(executor))
    if not detections:
        print_section("Project")
        print_warning(f"No supported project detected in {root}")
        return 0

    for detection in detections:
        analysis = detection.analysis
        title = f"{detection.detector.name} project"
        if analysis.get("framework"):
            title += f" ({analysis['framework']})"
        print_section(title)
        if verbose and analysis.get("package_manager"):
            print_info(f"Package manager: {analysis['package_manager']}")

        results = run_checks(detection, root)
        print_results(results, verbose=verbose)
        for result in results:
            if result.status is CheckStatus.FAIL:
                issues.append(Issue(id=result.id, name=result.name, fix=result.fix))

        summary = summarize_results(results)
        if verbose:
            console.print(
                f"  [dim]{summary.passed}/{summary.total} passed, {summary.failed} failed, "
                f"{summary.skipped} skipped, {summary.manual} manual[/dim]"
            )
    return len(detections)


def _print_summary(issues: list[Issue], max_fix_lines: int) -> None:
    console.print()
    if not issues:
        print_status_panel("READY", "Your environment looks good.", "No issues found.", level="success")
        return

    print_status_panel(
        "ISSUES FOUND",
        f"{len(issues)} issue(s) need attention.",
        "Fix commands are suggestions; dev-helper never runs them.",
        level="warning",
    )

    print_section("Issues")
    for issue in issues:
        print_error(issue.name)
        why = explain_issue(issue.id)
        if why:
            console.print(f"    [dim]Why: {escape(why)}[/dim]")

    fixes: list[str] = []
    for issue in issues:
        if issue.fix and issue.fix not in fixes:
            fixes.append(issue.fix)
    if fixes:
        print_section("Quick fixes")
        for fix in fixes[:max_fix_lines]:
            console.print(f"  [cmd]{escape(fix)}[/cmd]")
        if len(fixes) > max_fix_lines:
            console.print(f"  [dim]... and {len(fixes) - max_fix_lines} more[/dim]")


@click.command("setup")
@handle_exceptions
@click.option("--verbose", "-v", is_flag=True, help="Show skipped checks, environment and PATH details")
@click.option(
    "--path",
    "root",
    default=".",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help="Project directory to check (default: current directory)",
)
def setup(verbose, root):
    """Check developer tools, git configuration and project readiness.

    Read-only: tools are probed with version queries, the project is
    inspected through its files, and every fix is printed for you to run.

    \b
    CHECKS:
      System tools     git, node, npm, python, java, docker
      Git config       user.name, user.email, init.defaultBranch
      Project          manifests, dependencies, scripts, env files, builds

    \b
    EXAMPLES:
      dev-helper setup
      dev-helper setup --path ../my-app --verbose

    \b
    EXIT CODES:
      0 = Always (findings are reported, never signalled)
    """
    root = Path(root)
    config = load_runtime_config(root)
    executor = GuardedExecutor.from_config(config)
    issues: list[Issue] = []

    print_header("DEV-HELPER SETUP")
    console.print(f"Checking [path]{escape(str(root.resolve()))}[/path]")

    _check_tools(executor, issues)
    _check_git(executor, issues)
    _check_environment(verbose)
    _check_projects(root, executor, verbose, issues)

    _print_summary(issues, config["output"]["max_fix_lines"])
    return ExitCodes.SUCCESS
