"""
Watcher settings.

One JSON document validated into WatcherSettings. Paths may use ``~`` and
must be absolute once expanded. Every enabled source needs a handler
command.
"""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOG_LEVEL_ALIASES = {"WARN": "WARNING"}


def _expand_path(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    if not v.strip():
        raise ValueError("path cannot be empty")
    expanded = os.path.expanduser(v.strip())
    if not os.path.isabs(expanded):
        raise ValueError(f"path must be absolute: {v}")
    return expanded


class HandlerCommands(BaseModel):
    """
    Argv prefixes of the external handlers.

    The watcher appends ``<url>`` for clipboard handlers and
    ``<item_type> <path> <category_hint>`` for the media handler.
    """

    model_config = ConfigDict(extra="forbid")

    youtube: List[str] = Field(default_factory=list)
    magnet: List[str] = Field(default_factory=list)
    media_item: List[str] = Field(default_factory=list)

    @field_validator("youtube", "magnet", "media_item")
    @classmethod
    def validate_command(cls, v: List[str]) -> List[str]:
        if any(not part for part in v):
            raise ValueError("handler command parts cannot be empty")
        if v:
            v = [os.path.expanduser(v[0]), *v[1:]]
        return v


class StabilitySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    checks: int = Field(default=3, ge=1, description="Consecutive unchanged samples required")
    interval_seconds: float = Field(default=10.0, gt=0, description="Seconds between samples")


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO")
    directory: Optional[str] = Field(default=None, description="Enables rotating file logs")
    file_basename: str = Field(default="jellydrop")
    retention_days: int = Field(default=7, ge=1)

    @field_validator("level")
    @classmethod
    def normalise_level(cls, v: str) -> str:
        v = v.strip().upper()
        return LOG_LEVEL_ALIASES.get(v, v)

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: Optional[str]) -> Optional[str]:
        return _expand_path(v)


class MonitorSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = Field(default=9876, ge=1, le=65535)


class WatcherSettings(BaseModel):
    """Complete watcher configuration."""

    model_config = ConfigDict(extra="forbid")

    drop_folder: str
    state_dir: str = Field(default="~/.jellydrop", validate_default=True)
    history_file: Optional[str] = None

    max_concurrent_processors: int = Field(default=2, ge=1)
    main_loop_interval_seconds: float = Field(default=15.0, gt=0)
    stability: StabilitySettings = Field(default_factory=StabilitySettings)

    enable_drop_folder: bool = True
    enable_clipboard_youtube: bool = False
    enable_clipboard_magnet: bool = False

    auto_create_missing_dirs: bool = True
    category_hints: bool = True
    keep_awake: bool = False
    ignore_patterns: List[str] = Field(default_factory=list)

    handlers: HandlerCommands = Field(default_factory=HandlerCommands)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)

    @field_validator("drop_folder", "state_dir", "history_file")
    @classmethod
    def validate_paths(cls, v: Optional[str]) -> Optional[str]:
        return _expand_path(v)

    @model_validator(mode="after")
    def validate_handlers(self) -> "WatcherSettings":
        missing = []
        if self.enable_drop_folder and not self.handlers.media_item:
            missing.append("handlers.media_item")
        if self.enable_clipboard_youtube and not self.handlers.youtube:
            missing.append("handlers.youtube")
        if self.enable_clipboard_magnet and not self.handlers.magnet:
            missing.append("handlers.magnet")
        if missing:
            raise ValueError(f"enabled features need a handler command: {', '.join(missing)}")
        return self

    @property
    def drop_folder_path(self) -> Path:
        return Path(self.drop_folder)

    @property
    def state_dir_path(self) -> Path:
        return Path(self.state_dir)

    @property
    def history_path(self) -> Optional[Path]:
        return Path(self.history_file) if self.history_file else None

    @property
    def clipboard_enabled(self) -> bool:
        return self.enable_clipboard_youtube or self.enable_clipboard_magnet
