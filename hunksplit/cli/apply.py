"""CLI commands for previewing and applying a commit plan.

A plan is a JSON file listing commits, each with a message and the hunk IDs
it should contain. Applying a plan rewrites the current branch: the branch is
reset to the base ref and one commit per planned entry is created from the
diff between the base and the original tip.
"""

from pathlib import Path
from typing import Optional

import typer

from hunksplit.cli.utils import (
    configure_logging,
    load_plan,
    read_diff,
    resolve_engine_config,
    resolve_repo_root,
)
from hunksplit.engine.exceptions import ParseError, PlanExecutionError
from hunksplit.engine.executor import execute_plan
from hunksplit.engine.inventory import preview_hunk_application
from hunksplit.engine.parser import build_hunk_map, parse_diff
from hunksplit.git.branch import create_backup_branch, reset_hard
from hunksplit.git.exceptions import GitError
from hunksplit.git.status import get_staging_status


def preview_command(
    plan_file: Path = typer.Argument(
        ...,
        help="Plan JSON file",
    ),
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
) -> None:
    """Show which hunks each planned commit would contain."""
    logger = configure_logging(False)
    repo_root = resolve_repo_root()
    config = resolve_engine_config(repo_root)
    plan = load_plan(plan_file)

    diff_text = read_diff(repo_root, diff_file, base)
    try:
        hunks = parse_diff(diff_text, config=config, repo_root=repo_root, logger=logger)
    except ParseError as e:
        typer.echo(f"Failed to parse diff: {e}", err=True)
        raise typer.Exit(1)
    hunk_map = build_hunk_map(hunks)

    if not plan.commits:
        typer.echo("Plan has no commits.")
        return

    unknown_count = 0
    for i, planned_commit in enumerate(plan.commits, 1):
        typer.echo(f"[{i}] {planned_commit.message.splitlines()[0]}")
        typer.echo(preview_hunk_application(planned_commit.hunk_ids, hunk_map).rstrip("\n"))
        for hunk_id in planned_commit.hunk_ids:
            if hunk_id not in hunk_map:
                typer.echo(f"  ! unknown hunk: {hunk_id}", err=True)
                unknown_count += 1
        typer.echo("")

    for warning in plan.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    if unknown_count:
        typer.echo(f"{unknown_count} hunk IDs in the plan are not in the diff.", err=True)
        raise typer.Exit(1)


def apply_command(
    plan_file: Path = typer.Argument(
        ...,
        help="Plan JSON file",
    ),
    base: str = typer.Option(
        ...,
        "--base",
        "-b",
        help="Ref the current branch is rebuilt on top of",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate the plan without touching the repository",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print diagnostics and write each commit's patch to the debug directory",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt",
    ),
    no_backup: bool = typer.Option(
        False,
        "--no-backup",
        help="Do not create a backup branch before rewriting",
    ),
) -> None:
    """Rebuild the current branch on BASE as the commits described by PLAN."""
    logger = configure_logging(debug)
    repo_root = resolve_repo_root()
    config = resolve_engine_config(repo_root, debug)
    plan = load_plan(plan_file)

    if not plan.commits:
        typer.echo("Plan has no commits.", err=True)
        raise typer.Exit(1)

    if not dry_run and not get_staging_status(repo_root).is_clean:
        typer.echo("Working tree has uncommitted changes.", err=True)
        typer.echo("Commit or stash them before applying a plan.", err=True)
        raise typer.Exit(1)

    diff_text = read_diff(repo_root, base=base)
    if not diff_text.strip():
        typer.echo(f"No changes between {base} and the working tree.", err=True)
        raise typer.Exit(0)

    try:
        hunks = parse_diff(diff_text, config=config, repo_root=repo_root, logger=logger)
    except ParseError as e:
        typer.echo(f"Failed to parse diff: {e}", err=True)
        raise typer.Exit(1)
    hunk_map = build_hunk_map(hunks)

    unassigned = set(hunk_map) - set(plan.all_hunk_ids())
    if unassigned:
        typer.echo(
            f"Warning: {len(unassigned)} hunks are not in the plan and will be dropped:",
            err=True,
        )
        for hunk_id in sorted(unassigned):
            typer.echo(f"  - {hunk_id}", err=True)

    if dry_run:
        try:
            execute_plan(repo_root, plan, hunk_map, diff_text, config, logger, dry_run=True)
        except PlanExecutionError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        typer.echo(f"Plan is valid: {len(plan.commits)} commits, {len(hunks)} hunks.")
        return

    if not yes:
        typer.echo(f"This will reset the current branch to {base} and create {len(plan.commits)} commits.")
        if not typer.confirm("Proceed?", default=False):
            typer.echo("Aborted.")
            raise typer.Exit(0)

    backup_ref = None
    try:
        if not no_backup:
            backup_ref = create_backup_branch(repo_root)
            typer.echo(f"Created backup branch: {backup_ref}")
        reset_hard(repo_root, base)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        if backup_ref:
            typer.echo(f"Your original state is backed up in: {backup_ref}", err=True)
        raise typer.Exit(1)

    try:
        shas = execute_plan(
            repo_root,
            plan,
            hunk_map,
            diff_text,
            config,
            logger,
            backup_ref=backup_ref,
        )
    except PlanExecutionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Created {len(shas)} commits.")
    for sha, planned_commit in zip(shas, plan.commits):
        typer.echo(f"  {sha[:8]} {planned_commit.message.splitlines()[0]}")
    if backup_ref:
        typer.echo(f"Your original commits are backed up in: {backup_ref}")
