"""
Config — watcher settings.

Public API:
    WatcherSettings — Validated watcher configuration
    load_settings — Load settings from a JSON file
    apply_overrides — Apply command line overrides
"""

from .errors import ConfigError, ConfigNotFoundError, InvalidConfigError
from .settings import (
    WatcherSettings,
    HandlerCommands,
    StabilitySettings,
    LoggingSettings,
    MonitorSettings,
)
from .loader import (
    CONFIG_ENV_VAR,
    resolve_config_path,
    settings_from_dict,
    load_settings,
    apply_overrides,
)

__all__ = [
    # Errors
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidConfigError",
    # Models
    "WatcherSettings",
    "HandlerCommands",
    "StabilitySettings",
    "LoggingSettings",
    "MonitorSettings",
    # Loading
    "CONFIG_ENV_VAR",
    "resolve_config_path",
    "settings_from_dict",
    "load_settings",
    "apply_overrides",
]
