"""dev-helper CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from devhelper import __version__
from devhelper.ui import console


class VerboseGroup(click.Group):
    """Help system that lists registered commands by category."""

    def format_commands(self, ctx, formatter):
        """Override to suppress default command listing (we use categorized format in format_help)."""
        pass

    COMMAND_CATEGORIES = {
        "DIAGNOSE": {
            "title": "DIAGNOSE",
            "description": "Find out what is wrong and how to fix it",
            "commands": ["setup", "explain"],
            "command_meta": {
                "setup": {
                    "run_when": "On a new machine or a freshly cloned project",
                },
                "explain": {
                    "use_when": "Something broke and you want to know why",
                },
            },
        },
        "INSPECT": {
            "title": "INSPECT",
            "description": "Look at the toolchain and the safety gate",
            "commands": ["tools", "check-command"],
            "command_meta": {
                "tools": {
                    "use_when": "Need installed tool versions",
                },
                "check-command": {
                    "use_when": "Wondering whether dev-helper would run a command",
                },
            },
        },
    }

    def format_help(self, ctx, formatter):
        """Print the Click header, then one table per command category."""
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]", characters="=")

        for category_data in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=16, overflow="fold")
            table.add_column("Description", style="white", overflow="fold")
            table.add_column("When", style="dim", width=40, overflow="fold")

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                cmd = registered[cmd_name]

                first_line = (cmd.help or "").split("\n")[0].strip()
                period_idx = first_line.find(".")
                short_help = first_line[:period_idx] if period_idx > 0 else first_line
                if len(short_help) > 45:
                    short_help = short_help[:45].rsplit(" ", 1)[0] + "..."

                cmd_meta = category_data.get("command_meta", {}).get(cmd_name, {})
                hint = ""
                if "use_when" in cmd_meta:
                    hint = f"USE: {cmd_meta['use_when']}"
                elif "run_when" in cmd_meta:
                    hint = f"RUN: {cmd_meta['run_when']}"

                table.add_row(cmd_name, short_help, hint)

            console.print(table)

        console.print()
        console.rule(characters="=")
        console.print("For detailed options: [cmd]dev-helper <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="dev-helper")
@click.help_option("-h", "--help")
def cli():
    """dev-helper - read-only diagnostics for developer environments

    \b
    QUICK START:
      dev-helper setup          # Is this machine ready for this project?
      dev-helper explain        # What is wrong here?

    \b
    dev-helper never installs, builds or changes anything. It prints the
    commands for you to run.

    \b
    For detailed options: dev-helper <command> --help"""
    pass


from devhelper.commands.check_command import check_command
from devhelper.commands.explain import explain
from devhelper.commands.setup import setup
from devhelper.commands.tools import tools

cli.add_command(setup)
cli.add_command(explain)
cli.add_command(tools)
cli.add_command(check_command)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
