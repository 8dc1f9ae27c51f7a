"""Tool detection and version reporting.

Provides `dev-helper tools`, a read-only listing of common developer tools.
"""

from __future__ import annotations

import json

import click

from devhelper.checkers.system import TOOL_CATEGORIES, detect_all_tools
from devhelper.config_runtime import load_runtime_config
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.error_handler import handle_exceptions


@click.command("tools")
@handle_exceptions
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--category",
    type=click.Choice([*TOOL_CATEGORIES, "all"]),
    default="all",
    help="Filter by category",
)
def tools(as_json: bool, category: str) -> None:
    """Show common developer tools and their versions.

    Each tool is located on PATH and asked for its version; nothing else is
    run.

    \b
    EXAMPLES:
      dev-helper tools                   # List all tools
      dev-helper tools --category python # One ecosystem
      dev-helper tools --json            # Machine-readable
    """
    executor = GuardedExecutor.from_config(load_runtime_config("."))
    all_tools = detect_all_tools(executor)
    categories = list(TOOL_CATEGORIES) if category == "all" else [category]

    if as_json:
        output = {
            cat: {s.name: {"installed": s.installed, "version": s.version} for s in all_tools[cat]}
            for cat in categories
        }
        click.echo(json.dumps(output, indent=2))
        return

    for cat in categories:
        statuses = all_tools.get(cat, [])
        if not statuses:
            continue

        click.echo(f"\n{cat.upper()} TOOLS:")
        click.echo("-" * 50)

        for status in statuses:
            if status.installed:
                click.echo(f"  [OK] {status.name:12} {status.display_version:12} {status.description}".rstrip())
            else:
                click.echo(f"  [--] {status.name:12} not installed")

    click.echo()
