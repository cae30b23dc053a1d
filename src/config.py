"""
Configuration for the fsgate server.

Settings come from command-line flags, optionally layered over an
fsgate.yaml file:

    fsgate:
      allowed_directories:
        - /srv/projects
      allow_write: true
      allow_destructive: false
      max_read_size: 10485760
      max_depth: 10

The sandbox roots are canonicalised once, in FsGateConfig.validated(), and
never change for the lifetime of the process.
"""
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_READ_SIZE: int = 10 * 1024 * 1024
DEFAULT_MAX_DEPTH: int = 10

CONFIG_SECTION: str = "fsgate"


class ConfigNotFoundError(Exception):
    """Raised when a requested configuration file does not exist."""
    pass


class ConfigValidationError(Exception):
    """Raised when configuration values are missing or invalid."""
    pass


class FsGateConfig(BaseModel):
    """Server configuration. Immutable once validated."""
    model_config = {"frozen": True}

    allowed_directories: list[Path] = Field(min_length=1)
    allow_write: bool = False
    allow_destructive: bool = False
    max_read_size: int = Field(default=DEFAULT_MAX_READ_SIZE, gt=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)

    @property
    def writes_enabled(self) -> bool:
        return self.allow_write or self.allow_destructive

    def validated(self) -> "FsGateConfig":
        """
        Return a copy with canonical sandbox roots.

        Every directory is resolved through the OS (expanding ~ and following
        symlinks) and must be an existing directory. allow_destructive
        implies allow_write.

        Raises:
            ConfigValidationError: If any directory cannot be resolved or is
                not a directory
        """
        roots: list[Path] = []
        for directory in self.allowed_directories:
            try:
                canonical = Path(directory).expanduser().resolve(strict=True)
            except (OSError, RuntimeError) as e:
                raise ConfigValidationError(
                    f"Failed to resolve directory '{directory}': {e}"
                ) from e
            if not canonical.is_dir():
                raise ConfigValidationError(f"'{directory}' is not a directory")
            roots.append(canonical)

        return self.model_copy(
            update={
                "allowed_directories": roots,
                "allow_write": self.writes_enabled,
            }
        )


def load_config_file(config_path: Path) -> dict[str, Any]:
    """
    Load the fsgate section of a YAML config file.

    Args:
        config_path: Path to the YAML file

    Returns:
        The raw settings dict (empty if the file has no fsgate section)

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid YAML or the section
            is not a mapping
    """
    if not config_path.exists():
        raise ConfigNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigValidationError(f"{config_path} must contain a mapping")

    section = raw_config.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigValidationError(
            f"'{CONFIG_SECTION}' section in {config_path} must be a mapping"
        )

    logger.info(f"Loaded fsgate config from {config_path}")
    return section


def build_config(
    allowed_directories: Optional[list[str]] = None,
    config_path: Optional[Path] = None,
    **overrides: Any,
) -> FsGateConfig:
    """
    Merge file settings with explicit overrides and validate the result.

    Overrides whose value is None are ignored so unset CLI flags fall back
    to the file, then to the defaults. Directories given explicitly are
    appended after those from the file.

    Raises:
        ConfigNotFoundError: If config_path is given but missing
        ConfigValidationError: If the merged configuration is invalid
    """
    settings: dict[str, Any] = {}
    if config_path is not None:
        settings.update(load_config_file(config_path))

    directories = list(settings.get("allowed_directories") or [])
    directories.extend(allowed_directories or [])
    settings["allowed_directories"] = directories

    for key, value in overrides.items():
        if value is not None:
            settings[key] = value

    if not directories:
        raise ConfigValidationError("At least one allowed directory is required")

    try:
        config = FsGateConfig(**settings)
    except ValidationError as e:
        raise ConfigValidationError(str(e)) from e

    return config.validated()
