"""Load :class:`PreviewSettings` from a YAML file and the process environment."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..models.config import PreviewSettings

logger = logging.getLogger(__name__)

# environment variable -> settings field
ENV_VARIABLES: Dict[str, str] = {
    "SUPABASE_URL": "store_url",
    "SUPABASE_SERVICE_ROLE_KEY": "store_key",
    "SITE_URL": "site_url",
    "WEB_URL": "web_url",
    "APP_SCHEME": "app_scheme",
    "APP_NAME": "app_name",
    "APP_ICON_URL": "app_icon_url",
    "IOS_APP_ID": "ios_app_id",
    "IOS_APP_STORE_URL": "ios_store_url",
    "ANDROID_PLAY_STORE_URL": "android_store_url",
    "PREVIEW_CACHE_SECONDS": "cache_seconds",
    "PREVIEW_STORE_TIMEOUT": "store_timeout",
    "PREVIEW_VALIDATE_IDS": "validate_ids",
}

CONFIG_PATH_VARIABLE = "PREVIEW_CONFIG"


class ConfigError(RuntimeError):
    """Base exception for loader errors."""


class ConfigValidationError(ConfigError):
    """Raised when the merged configuration is invalid."""

    def __init__(self, message: str, errors: Any) -> None:
        super().__init__(message)
        self.errors = errors


def deep_merge(base: Mapping[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``update`` into ``base`` without mutating either."""

    merged: Dict[str, Any] = deepcopy(dict(base))
    for key, value in update.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def settings_from_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Collect the settings present in ``environ``; empty values are skipped."""

    data: Dict[str, Any] = {}
    for variable, field_name in ENV_VARIABLES.items():
        value = environ.get(variable)
        if value is None or not value.strip():
            continue
        data[field_name] = value.strip()
    return data


class SettingsLoader:
    """Merge schema defaults, an optional YAML file and environment overrides."""

    def __init__(
        self,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        if path is None and self.environ.get(CONFIG_PATH_VARIABLE):
            path = Path(self.environ[CONFIG_PATH_VARIABLE])
        self.path = path
        self._log = log or logger

    def load(self) -> PreviewSettings:
        data = deep_merge(self._read_file(), settings_from_environ(self.environ))
        try:
            settings = PreviewSettings(**data)
        except ValidationError as exc:
            raise ConfigValidationError("Configuration does not match the schema", exc.errors()) from exc
        missing = settings.missing_required()
        if missing:
            # requests will answer 500 until these are set
            self._log.warning("Preview server is missing required settings: %s", ", ".join(missing))
        return settings

    def _read_file(self) -> Dict[str, Any]:
        if self.path is None:
            return {}
        if not self.path.exists():
            self._log.debug("No configuration file at %s, using defaults", self.path)
            return {}
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse configuration: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ConfigError("Configuration file must contain a YAML mapping")
        return dict(raw)


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PreviewSettings:
    return SettingsLoader(path, environ).load()


__all__ = [
    "CONFIG_PATH_VARIABLE",
    "ENV_VARIABLES",
    "ConfigError",
    "ConfigValidationError",
    "SettingsLoader",
    "deep_merge",
    "load_settings",
    "settings_from_environ",
]
