"""CLI command for listing the hunks of a diff."""

import json
from pathlib import Path
from typing import Optional

import typer

from hunksplit.cli.utils import (
    configure_logging,
    read_diff,
    resolve_engine_config,
    resolve_repo_root,
)
from hunksplit.engine.exceptions import ParseError
from hunksplit.engine.grouping import create_dependency_groups
from hunksplit.engine.inventory import format_hunk_inventory, group_summary
from hunksplit.engine.models import Hunk
from hunksplit.engine.parser import parse_diff


def _build_hunks_data(hunks: list[Hunk], groups: list[list[Hunk]]) -> dict:
    """Machine-readable form of the parsed hunks and their groups."""
    return {
        "hunks": [
            {
                "id": hunk.id,
                "file_path": hunk.file_path,
                "start_line": hunk.start_line,
                "end_line": hunk.end_line,
                "change_type": hunk.change_type.value,
                "is_new_file": hunk.is_new_file,
                "dependencies": sorted(hunk.dependencies),
                "dependents": sorted(hunk.dependents),
            }
            for hunk in hunks
        ],
        "groups": [[hunk.id for hunk in group] for group in groups],
    }


def hunks_command(
    diff_file: Optional[Path] = typer.Option(
        None,
        "--diff-file",
        "-f",
        help="Read the diff from a file instead of git",
    ),
    base: Optional[str] = typer.Option(
        None,
        "--base",
        "-b",
        help="Diff the working tree against this ref instead of using the staged diff",
    ),
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print hunks and dependency groups as JSON",
    ),
    show_context: bool = typer.Option(
        False,
        "--context",
        help="Show numbered source lines around each hunk",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print parser diagnostics",
    ),
) -> None:
    """List the hunks of a diff and how they depend on each other."""
    logger = configure_logging(debug)
    repo_root = resolve_repo_root()
    config = resolve_engine_config(repo_root, debug)

    diff_text = read_diff(repo_root, diff_file, base)
    if not diff_text.strip():
        typer.echo("No changes to split.", err=True)
        raise typer.Exit(0)

    try:
        hunks = parse_diff(diff_text, config=config, repo_root=repo_root, logger=logger)
    except ParseError as e:
        typer.echo(f"Failed to parse diff: {e}", err=True)
        raise typer.Exit(1)

    groups = create_dependency_groups(hunks)

    if show_json:
        typer.echo(json.dumps(_build_hunks_data(hunks, groups), indent=2))
        return

    typer.echo(format_hunk_inventory(hunks, show_context=show_context))
    typer.echo("")
    typer.echo("[DEPENDENCY GROUPS]")
    typer.echo(group_summary(groups))
