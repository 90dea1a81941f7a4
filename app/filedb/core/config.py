"""Configuration for the filedb CLI.

The configuration says where the database lives and which defaults the
CLI uses for listing and scanning. It is stored in
~/.config/filedb/config.toml.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from filedb.core.paths import get_config_path, get_default_root_parent
from filedb.models.options import ScanPolicy

logger = logging.getLogger(__name__)


class DatabaseConfig(BaseModel):
    """Configuration of the database the CLI operates on.

    Attributes:
        root_parent: Directory containing the database directory.
        name: Name of the database directory.
        default_policy: Scan policy used when ``scan`` gets no ``--policy``.
        recursive_scan: Whether ``scan`` descends into subdirectories by default.
        sorted_output: Whether listings are ordered by path.
    """

    model_config = ConfigDict(extra="forbid")

    root_parent: Annotated[
        Path,
        Field(
            default_factory=get_default_root_parent,
            description="Directory containing the database",
        ),
    ]
    name: Annotated[str, Field(min_length=1, description="Database directory name")] = (
        "database"
    )
    default_policy: Annotated[
        ScanPolicy,
        Field(description="Default scan policy"),
    ] = ScanPolicy.ADD_NEW
    recursive_scan: Annotated[bool, Field(description="Scan subtrees by default")] = True
    sorted_output: Annotated[bool, Field(description="Sort listings by path")] = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the database name is a single path component."""
        if Path(v).name != v or v in (".", ".."):
            msg = f"name must be a single directory name, got '{v}'"
            raise ValueError(msg)
        return v

    @property
    def root(self) -> Path:
        """Absolute path of the database directory."""
        return self.root_parent.expanduser() / self.name


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> DatabaseConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DatabaseConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Invalid TOML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return DatabaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> DatabaseConfig:
    """Load configuration, falling back to defaults when no file exists."""
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return DatabaseConfig()


def save_config(config: DatabaseConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DatabaseConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            prefix=".config.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    logger.info("Saved config to %s", config_path)
    return config_path
