"""Configuration management for spanfmt."""

from .settings import (
    ConfigurationError,
    Settings,
    get_default_config_file,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "Settings",
    "get_default_config_file",
    "load_settings",
]
