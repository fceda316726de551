"""Configuration module.

Two kinds of configuration live here:

- Tool settings (logging, timeouts) loaded with Pydantic Settings v2 from
  ``AMQP_TOOLS_*`` environment variables.
- Named broker connection profiles stored in a TOML file under the user's
  config directory, created empty on first use.
"""

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Literal

import click
from loguru import logger
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from amqp_tools.exceptions import ConfigLocationError, ConfigParseError, FilesystemError
from amqp_tools.models import ConnectionProfileMap, profile_map_adapter

APP_NAME = "amqp-tools"
CONFIG_FILE_NAME = "config.toml"


class Settings(BaseSettings):
    """Tool configuration with validation.

    Every value is optional and read from ``AMQP_TOOLS_``-prefixed environment
    variables. Broker credentials are never taken from here; they come from
    connection profiles.
    """

    model_config = SettingsConfigDict(
        env_prefix="AMQP_TOOLS_",
        case_sensitive=False,
        extra="ignore",
    )

    connection_timeout: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout in seconds for establishing a broker connection",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for machine consumption, text for humans)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def config_dir() -> Path:
    """Return the per-user directory holding the profile file."""
    app_dir = Path(click.get_app_dir(APP_NAME))
    if not app_dir.is_absolute():
        # expanduser could not resolve a home directory
        raise ConfigLocationError(f"cannot obtain config dir (got {app_dir})")
    return app_dir


def ensure_config_path(directory: Path | None = None) -> Path:
    """Return the profile file path, creating its directory and an empty file if missing.

    Args:
        directory: Directory to use instead of the platform config directory.

    Raises:
        ConfigLocationError: If the platform config directory is unknown.
        FilesystemError: If the directory or file cannot be created.
    """
    directory = directory if directory is not None else config_dir()

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"failed to create config directory {directory}: {e}") from e

    config_file = directory / CONFIG_FILE_NAME
    if not config_file.exists():
        try:
            config_file.touch()
        except OSError as e:
            raise FilesystemError(f"failed to create config file {config_file}: {e}") from e
        logger.info("Created empty config file", path=str(config_file))

    return config_file


def parse_profiles(text: str, source: str = "<string>") -> ConnectionProfileMap:
    """Parse TOML text into a profile map.

    Raises:
        ConfigParseError: On malformed TOML or a profile that does not validate.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"invalid TOML in {source}: {e}") from e

    try:
        return profile_map_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigParseError(f"invalid connection profile in {source}: {e}") from e


def load(config_file: Path | None = None) -> ConnectionProfileMap:
    """Load every connection profile from the config file.

    Args:
        config_file: File to read. Defaults to ``ensure_config_path()``.
    """
    config_file = config_file if config_file is not None else ensure_config_path()

    try:
        text = config_file.read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"cannot read config file {config_file}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"config file {config_file} is not UTF-8: {e}") from e

    profiles = parse_profiles(text, source=str(config_file))
    logger.debug("Loaded connection profiles", path=str(config_file), count=len(profiles))
    return profiles
