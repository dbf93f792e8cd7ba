"""Configuration helpers for the preview server."""

from .loader import (
    ENV_VARIABLES,
    ConfigError,
    ConfigValidationError,
    SettingsLoader,
    deep_merge,
    load_settings,
    settings_from_environ,
)

__all__ = [
    "ENV_VARIABLES",
    "ConfigError",
    "ConfigValidationError",
    "SettingsLoader",
    "deep_merge",
    "load_settings",
    "settings_from_environ",
]
