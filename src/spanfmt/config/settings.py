"""Configuration settings for spanfmt.

Settings come from an optional JSON file and ``SPANFMT_`` environment
variables, validated with Pydantic.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import SpanFmtError
from ..utils.logging import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigurationError(SpanFmtError):
    """Exception raised for configuration loading errors."""

    pass


class Settings(BaseSettings):
    """Library settings with validation."""

    # Logging settings
    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = Field(default=None)
    log_file: str = Field(default="spanfmt.log")
    log_file_max_size: int = Field(default=10 * 1024 * 1024)  # 10MB
    log_file_backup_count: int = Field(default=5)
    console_output: bool = Field(default=False)
    json_format: bool = Field(default=True)

    # Formatting settings
    show_sign: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="SPANFMT_",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is supported."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return v.upper()

    @field_validator("log_file_max_size")
    @classmethod
    def validate_log_file_max_size(cls, v: int) -> int:
        """Validate log file max size is positive."""
        if v <= 0:
            raise ValueError("Log file max size must be positive")
        return v

    @field_validator("log_file_backup_count")
    @classmethod
    def validate_log_file_backup_count(cls, v: int) -> int:
        """Validate log file backup count is non-negative."""
        if v < 0:
            raise ValueError("Log file backup count must be non-negative")
        return v

    @field_validator("log_dir")
    @classmethod
    def validate_log_dir(cls, v: Optional[Union[str, Path]]) -> Optional[Path]:
        """Expand and absolutize the log directory."""
        if v is None:
            return None
        v = Path(v).expanduser()
        if not v.is_absolute():
            v = Path.cwd() / v
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            key: str(value) if isinstance(value, Path) else value
            for key, value in self.model_dump().items()
        }

    def save_to_file(self, config_file: Path) -> None:
        """Save configuration to JSON file."""
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_config(cls, config_file: Optional[Path] = None) -> "Settings":
        """Load configuration from file and environment variables.

        Priority order:
        1. Environment variables
        2. Config file
        3. Default values

        Raises:
            ConfigurationError: If the config file is not a JSON object
        """
        file_config: Dict[str, Any] = {}

        if config_file and config_file.exists():
            try:
                with open(config_file, "r") as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Invalid JSON in config file: {e}",
                    {"config_file": str(config_file)},
                ) from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    "Config file must contain a JSON object",
                    {"config_file": str(config_file)},
                )

        # Init kwargs outrank the environment in pydantic-settings, so drop
        # file values that an environment variable overrides.
        env_names = {name.upper() for name, value in os.environ.items() if value}
        env_overrides = {
            key for key in cls.model_fields if f"SPANFMT_{key.upper()}" in env_names
        }
        init_kwargs = {
            key: value for key, value in file_config.items() if key not in env_overrides
        }
        return cls(**init_kwargs)


def get_default_config_file() -> Path:
    """Get the default configuration file path."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "spanfmt" / "config.json"

    return Path.home() / ".config" / "spanfmt" / "config.json"


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Load settings from configuration file and environment.

    Args:
        config_file: Optional path to configuration file.
                    If None, uses default location.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid.
    """
    if config_file is None:
        config_file = get_default_config_file()

    try:
        settings = Settings.load_config(config_file)
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise ConfigurationError(
            f"Configuration validation failed: {e}",
            {"config_file": str(config_file)},
        ) from e

    logger.debug(f"Loaded settings: {settings.to_dict()}")
    return settings
