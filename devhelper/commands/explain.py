"""Explain what is wrong in a project directory, in plain language."""

from pathlib import Path

import click
from rich.markup import escape

from devhelper.config_runtime import load_runtime_config
from devhelper.explain import GUIDANCE, Explanation, ExplainEngine
from devhelper.git.recovery import RecoveryOption
from devhelper.safety.executor import GuardedExecutor
from devhelper.ui import ARROW, SYMBOL_WARN, console, print_header
from devhelper.utils.error_handler import handle_exceptions
from devhelper.utils.exit_codes import ExitCodes


def print_explanation(explanation: Explanation) -> None:
    error = explanation.error

    console.print()
    console.print("[error]Error detected[/error]")
    console.print(f"[title]{escape(error.category_label)}: {escape(error.title)}[/title]")

    console.print()
    console.print("[info]What it means:[/info]")
    console.print(f"  {escape(error.explanation.strip())}")

    if error.reason:
        console.print()
        console.print("[info]Why it happened:[/info]")
        console.print(f"  {escape(error.reason.strip())}")

    if error.fixes:
        console.print()
        console.print("[info]How to fix:[/info]")
        for line in error.fixes:
            if not line:
                console.print()
            elif line.lstrip().startswith("#"):
                console.print(f"  [dim]{escape(line)}[/dim]")
            else:
                console.print(f"  [cmd]{escape(line)}[/cmd]")

    if error.warning:
        console.print()
        console.print(f"[warning]WARNING:[/warning] {escape(error.warning.strip())}")

    if explanation.recovery:
        print_recovery(explanation.recovery)


def print_recovery(options: list[RecoveryOption]) -> None:
    console.print()
    console.print("[info]Recovery options:[/info]")
    for number, option in enumerate(options, start=1):
        console.print(f"  {number}. {escape(option.description)}")
        for command in option.commands:
            style = "dim" if command.lstrip().startswith("#") else "cmd"
            console.print(f"     [{style}]{escape(command)}[/{style}]")
        for line in option.info:
            console.print(f"     [dim]{ARROW} {escape(line)}[/dim]")
        if not option.safe and option.warning:
            console.print(f"     [warning]{escape(SYMBOL_WARN)} {escape(option.warning)}[/warning]")


@click.command("explain")
@handle_exceptions
@click.option("--verbose", "-v", is_flag=True, help="Also report uncommitted changes and list recovery options")
@click.option(
    "--path",
    "root",
    default=".",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help="Project directory to inspect (default: current directory)",
)
@click.option("--message", "-m", default=None, help="Error text to explain (paste it in quotes)")
def explain(verbose, root, message):
    """Explain the most likely problem in a project, and how to fix it.

    Looks at git state first, then runtime/build state, then the directory
    itself, and explains the first problem found. With --message, the pasted
    error text is matched against known errors before anything else.

    \b
    EXAMPLES:
      dev-helper explain
      dev-helper explain --verbose
      dev-helper explain --message "fatal: refusing to merge unrelated histories"

    \b
    EXIT CODES:
      0 = Always (findings are reported, never signalled)
    """
    root = Path(root)
    config = load_runtime_config(root)
    engine = ExplainEngine(
        root,
        GuardedExecutor.from_config(config),
        verbose=verbose,
        reflog_count=config["output"]["reflog_entries"],
    )

    print_header("DEV-HELPER EXPLAIN")
    explanation = engine.diagnose(message)

    if explanation is None:
        console.print()
        if message:
            console.print("[warning]That error message is not one dev-helper recognizes.[/warning]")
        for line in GUIDANCE:
            console.print(escape(line))
        return ExitCodes.SUCCESS

    print_explanation(explanation)
    return ExitCodes.SUCCESS
