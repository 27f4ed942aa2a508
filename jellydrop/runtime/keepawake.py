"""
Keep-awake helper.

Runs ``caffeinate -i`` (macOS) for the lifetime of the watcher so idle
sleep does not pause downloads. Missing caffeinate only disables the
feature.
"""

import logging
import shutil
import subprocess
from typing import Optional

from ..jobs.launcher import terminate_process

logger = logging.getLogger(__name__)

CAFFEINATE = "caffeinate"


def keep_awake_available() -> bool:
    return shutil.which(CAFFEINATE) is not None


class KeepAwake:
    def __init__(self):
        self._process: Optional[subprocess.Popen] = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self) -> bool:
        if self.running:
            return True
        executable = shutil.which(CAFFEINATE)
        if executable is None:
            logger.warning("[KeepAwake] caffeinate not found; system may sleep while idle")
            return False
        try:
            self._process = subprocess.Popen(
                [executable, "-i"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning(f"[KeepAwake] Failed to start caffeinate: {e}")
            return False
        logger.info(f"[KeepAwake] caffeinate started (PID {self._process.pid})")
        return True

    def stop(self) -> None:
        if self._process is None:
            return
        process, self._process = self._process, None
        terminate_process(process)
