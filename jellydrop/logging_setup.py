"""
Logging configuration for the watcher process.

Console output always; with logging.directory set, also a file rotated at
midnight that keeps retention_days old files.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .config.settings import LoggingSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Install handlers on the root logger, replacing any from an earlier call.

    Returns:
        The root logger
    """
    settings = settings or LoggingSettings()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    level_name = settings.level if settings.level in VALID_LEVELS else "INFO"
    root.setLevel(level_name)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if level_name != settings.level:
        root.warning(f"Unknown log level '{settings.level}', using INFO")

    if settings.directory:
        log_dir = Path(settings.directory)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.TimedRotatingFileHandler(
                log_dir / f"{settings.file_basename}.log",
                when="midnight",
                backupCount=settings.retention_days,
                encoding="utf-8",
            )
        except OSError as e:
            root.warning(f"File logging disabled, cannot write to {log_dir}: {e}")
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    return root
