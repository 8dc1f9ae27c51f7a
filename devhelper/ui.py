"""Central UI handler for dev-helper.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from devhelper.ui import console, print_header, print_error

    console.print("[success]All checks passed[/success]")
    print_header("PROJECT CHECKS")
    print_fix("npm install")

Symbols are plain ASCII - Windows CP1252 terminals cannot print emoji.
"""

import sys

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

SYMBOL_OK = "[OK]"
SYMBOL_FAIL = "[X]"
SYMBOL_WARN = "[!]"
SYMBOL_INFO = "[i]"
SYMBOL_SKIP = "[-]"
SYMBOL_MANUAL = "[?]"
ARROW = "->"

DEV_HELPER_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
    "title": "bold white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=DEV_HELPER_THEME,
    force_terminal=sys.stdout.isatty(),
    highlight=False,
    soft_wrap=True,
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{escape(title)}[/bold]", characters="=")


def print_section(title: str) -> None:
    console.print()
    console.print(f"[title]{escape(title)}[/title]")


def print_error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[error]{escape(SYMBOL_FAIL)}[/error] {escape(msg)}")


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]{escape(SYMBOL_WARN)}[/warning] {escape(msg)}")


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]{escape(SYMBOL_OK)}[/success] {escape(msg)}")


def print_info(msg: str) -> None:
    console.print(f"[info]{escape(SYMBOL_INFO)}[/info] {escape(msg)}")


def print_fix(command: str, label: str = "Fix") -> None:
    """Print a suggested command. It is shown, never run."""
    console.print(f"    [dim]{ARROW} {label}:[/dim] [cmd]{escape(command)}[/cmd]")


def print_status_panel(
    status: str,
    message: str,
    detail: str,
    level: str = "info"
) -> None:
    """Print a status panel with colored border.

    Args:
        status: Status label (e.g., "READY", "ISSUES FOUND")
        message: Main message line
        detail: Additional detail line
        level: One of "error", "warning", "success", "info"
    """
    style_map = {
        "error": ("bold red", "red"),
        "warning": ("bold yellow", "yellow"),
        "success": ("bold green", "green"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (f"{message}\n", border_style),
            (detail, border_style)
        ),
        border_style=border_style,
        box=box.ASCII,
        expand=False
    )
    console.print(panel)
