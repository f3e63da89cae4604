"""Shared utility functions for CLI commands."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from hunksplit.config import ConfigError, EngineConfig, load_engine_config
from hunksplit.engine.models import CommitPlan
from hunksplit.git.diff import get_cached_diff, get_diff_against
from hunksplit.git.exceptions import GitError
from hunksplit.git.runner import get_repo_root

LOGGER_NAME = "hunksplit"
_HANDLER_MARKER = "_hunksplit_cli"


def configure_logging(debug: bool) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    INFO messages are shown plainly; with ``debug`` every DEBUG record is
    shown as well. Calling this twice does not duplicate the handler.

    Args:
        debug: Show DEBUG records

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in logger.handlers:
        if getattr(handler, _HANDLER_MARKER, False):
            handler.setLevel(logger.level)
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)
    if debug:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    return logger


def resolve_repo_root() -> Path:
    """Get the repository root or exit with an error."""
    try:
        return get_repo_root()
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def resolve_engine_config(repo_root: Path, debug: bool = False) -> EngineConfig:
    """Load the repository engine config, turning on debug when asked."""
    try:
        config = load_engine_config(repo_root)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if debug:
        config = config.model_copy(update={"debug": True})
    return config


def read_diff(
    repo_root: Path, diff_file: Optional[Path] = None, base: Optional[str] = None
) -> str:
    """Read the diff to work on.

    Precedence: an explicit diff file, then a diff against ``base``, then the
    staged diff.
    """
    if diff_file is not None:
        if not diff_file.exists():
            typer.echo(f"Diff file not found: {diff_file}", err=True)
            raise typer.Exit(1)
        return diff_file.read_text()

    try:
        if base:
            return get_diff_against(repo_root, base)
        return get_cached_diff(repo_root)
    except GitError as e:
        typer.echo(f"Failed to get diff: {e}", err=True)
        raise typer.Exit(1)


def load_plan(plan_file: Path) -> CommitPlan:
    """Load a commit plan from a JSON file or exit with an error.

    The file holds ``{"commits": [{"message": ..., "hunk_ids": [...]}, ...]}``.
    """
    if not plan_file.exists():
        typer.echo(f"Plan file not found: {plan_file}", err=True)
        raise typer.Exit(1)

    try:
        plan_data = json.loads(plan_file.read_text())
        return CommitPlan.model_validate(plan_data)
    except (json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Failed to load plan: {e}", err=True)
        raise typer.Exit(1)
