"""
Settings loading.

The config file is resolved from an explicit path, then $JELLYDROP_CONFIG,
then ~/.config/jellydrop/config.json.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import ConfigNotFoundError, InvalidConfigError
from .settings import WatcherSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "JELLYDROP_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/jellydrop/config.json"


def resolve_config_path(explicit: Optional[str] = None) -> Path:
    raw = explicit or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return Path(raw).expanduser()


def _format_validation_error(error: ValidationError) -> list:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return problems


def settings_from_dict(data: Dict[str, Any], source: str = "<dict>") -> WatcherSettings:
    """
    Validate a raw settings mapping.

    Raises:
        InvalidConfigError: Validation failed
    """
    try:
        return WatcherSettings.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(source, _format_validation_error(e)) from e


def load_settings(path: Optional[str] = None) -> WatcherSettings:
    """
    Load and validate the settings file.

    Raises:
        ConfigNotFoundError: The file does not exist
        InvalidConfigError: The file is not JSON or fails validation
    """
    config_path = resolve_config_path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigNotFoundError(str(config_path)) from None
    except OSError as e:
        raise InvalidConfigError(str(config_path), [str(e)]) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(str(config_path), [f"not valid JSON: {e}"]) from e
    if not isinstance(data, dict):
        raise InvalidConfigError(str(config_path), ["top level must be a JSON object"])

    settings = settings_from_dict(data, str(config_path))
    logger.debug(f"[Config] Loaded settings from {config_path}")
    return settings


def apply_overrides(settings: WatcherSettings, **overrides: Any) -> WatcherSettings:
    """
    Return a re-validated copy with non-None overrides applied.

    Raises:
        InvalidConfigError: An override is out of range
    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    data = settings.model_dump()
    data.update(updates)
    return settings_from_dict(data, "command line")
