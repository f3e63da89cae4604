"""Repository configuration for hunksplit.

Handles reading and writing the .hunksplit/config.yaml file in a repository.
Only the ``engine`` section is read; other sections are preserved on save.

Example config.yaml:

    engine:
      context_lines: 3
      adjacency_threshold: 3
      proximity_threshold: 10
      debug: false
      debug_dir: .hunksplit/debug
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_DIR_NAME = ".hunksplit"
CONFIG_FILE_NAME = "config.yaml"


class ConfigError(Exception):
    """Raised when the repository configuration cannot be loaded or saved."""

    pass


class EngineConfig(BaseModel):
    """Tunable settings for parsing, dependency analysis and application."""

    # Numbered source lines shown around each hunk
    context_lines: int = Field(default=3, ge=0)
    # Hunks whose ranges come within this many lines are line-shift dependent
    adjacency_threshold: int = Field(default=3, ge=0)
    # Hunks starting within this many lines of each other are proximity dependent
    proximity_threshold: int = Field(default=10, ge=0)
    # Write each reconstructed group patch to debug_dir
    debug: bool = False
    debug_dir: str = ".hunksplit/debug"

    def resolve_debug_dir(self, repo_root: Path) -> Path:
        """Debug directory as an absolute path inside the repository."""
        path = Path(self.debug_dir)
        return path if path.is_absolute() else repo_root / path


def get_config_file(repo_root: Path) -> Path:
    """Get the path to the repository config file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunksplit/config.yaml
    """
    return repo_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _load_raw_config(repo_root: Path) -> dict[str, Any]:
    config_file = get_config_file(repo_root)
    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    return data


def load_engine_config(repo_root: Path) -> EngineConfig:
    """Load the engine configuration for a repository.

    Missing file or missing ``engine`` section yields the defaults.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        EngineConfig

    Raises:
        ConfigError: If the file is unreadable or holds invalid values.
    """
    data = _load_raw_config(repo_root)
    section = data.get("engine") or {}
    try:
        return EngineConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid engine configuration: {e}")


def save_engine_config(repo_root: Path, config: EngineConfig) -> None:
    """Save the engine configuration, keeping any other sections.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration to write.
    """
    data = _load_raw_config(repo_root)
    data["engine"] = config.model_dump()

    config_file = get_config_file(repo_root)
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")
