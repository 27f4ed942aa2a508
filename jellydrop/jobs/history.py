"""
Append-only processing history.

One line per finished dispatch:

    2024-05-01 21:14:03 - media_item completed: /Users/me/Drop/Movie (exit 0, 42.0s)

Handlers may append to the same file, so every write takes an exclusive
flock on it.
"""

import fcntl
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class HistoryLog:
    """Timestamped append-only log. A None path disables it."""

    def __init__(
        self,
        path: Optional[Path],
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.path = Path(path) if path is not None else None
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def disable(self, reason: str) -> None:
        if self.path is not None:
            logger.warning(f"[History] Disabled ({reason}): {self.path}")
        self.path = None

    def append(self, entry: str) -> bool:
        """
        Append one entry.

        Returns:
            True if written; False if disabled or the write failed
        """
        if self.path is None:
            return False

        line = f"{self._clock().strftime(TIMESTAMP_FORMAT)} - {entry}\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as fh:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
                try:
                    fh.write(line)
                    fh.flush()
                finally:
                    fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            logger.warning(f"[History] Failed to append to {self.path}: {e}")
            return False
        return True
