"""CLI commands for repository engine configuration."""

import typer
from pydantic import ValidationError

from hunksplit.cli.utils import resolve_engine_config, resolve_repo_root
from hunksplit.config import ConfigError, EngineConfig, get_config_file, save_engine_config

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage engine settings in .hunksplit/config.yaml",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the effective engine configuration."""
    repo_root = resolve_repo_root()
    config = resolve_engine_config(repo_root)

    config_file = get_config_file(repo_root)
    source = config_file if config_file.exists() else "defaults"
    typer.echo(f"Engine configuration ({source}):")
    typer.echo()
    for key, value in config.model_dump().items():
        typer.echo(f"  {key}: {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name (e.g. proximity_threshold)"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set one engine setting."""
    if key not in EngineConfig.model_fields:
        typer.echo(f"Unknown setting: {key}", err=True)
        typer.echo(f"Valid settings: {', '.join(EngineConfig.model_fields)}")
        raise typer.Exit(1)

    repo_root = resolve_repo_root()
    config = resolve_engine_config(repo_root)

    data = config.model_dump()
    data[key] = value
    try:
        updated = EngineConfig.model_validate(data)
    except ValidationError as e:
        typer.echo(f"Invalid value for {key}: {e.errors()[0]['msg']}", err=True)
        raise typer.Exit(1)

    try:
        save_engine_config(repo_root, updated)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {key} set to: {getattr(updated, key)}")
