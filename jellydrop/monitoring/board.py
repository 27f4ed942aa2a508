"""
Latest-snapshot holder shared between the control loop and the monitor API.
"""

import threading
from typing import Optional

from .models import WatcherStatus


class StatusBoard:
    def __init__(self):
        self._lock = threading.Lock()
        self._status: Optional[WatcherStatus] = None

    def publish(self, status: WatcherStatus) -> None:
        with self._lock:
            self._status = status

    def latest(self) -> Optional[WatcherStatus]:
        with self._lock:
            return self._status
