"""Show how the command-safety gate classifies a command, without running it."""

import sys

import click
from rich.markup import escape

from devhelper.safety.classifier import DEFAULT_CLASSIFIER
from devhelper.ui import console, print_error, print_info, print_success
from devhelper.utils.error_handler import handle_exceptions
from devhelper.utils.exit_codes import ExitCodes


@click.command("check-command")
@handle_exceptions
@click.argument("command")
def check_command(command):
    """Print whether dev-helper would allow COMMAND to run.

    The command is only classified. It is never executed.

    \b
    EXAMPLES:
      dev-helper check-command "git status"      # allowed
      dev-helper check-command "npm install"     # blocked

    \b
    EXIT CODES:
      0 = Allowed
      1 = Blocked
    """
    verdict = DEFAULT_CLASSIFIER.classify(command)
    rule = DEFAULT_CLASSIFIER.matching_rule(command)

    if verdict.safe:
        print_success(f"allowed: {verdict.reason}")
    else:
        print_error(f"blocked: {verdict.reason}")
    if rule is not None:
        print_info(f"rule: {rule.description}")

    if verdict.safe:
        argv = DEFAULT_CLASSIFIER.parse(command).argv
        console.print(f"  [dim]argv: {escape(repr(list(argv)))}[/dim]")
        return ExitCodes.SUCCESS

    sys.exit(ExitCodes.COMMAND_BLOCKED)
