"""CLI entry point for hunksplit.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

from typing import Optional

import typer

from hunksplit import __version__
from hunksplit.cli.apply import apply_command, preview_command
from hunksplit.cli.config import config_app
from hunksplit.cli.hunks import hunks_command


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hunksplit {__version__}")
        raise typer.Exit()


def main_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """hunksplit: split a diff into hunks and apply chosen subsets safely."""


# Main application
app = typer.Typer(
    name="hunksplit",
    help="hunksplit: split a diff into hunks and apply chosen subsets safely",
    add_completion=False,
    no_args_is_help=True,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("hunks")(hunks_command)
app.command("preview")(preview_command)
app.command("apply")(apply_command)

app.callback()(main_callback)


__all__ = [
    "app",
    "config_app",
    "hunks_command",
    "preview_command",
    "apply_command",
]
