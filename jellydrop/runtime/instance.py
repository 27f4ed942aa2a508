"""
Single-instance guard.

A non-blocking exclusive flock on <state_dir>/jellydrop.lock. The kernel
drops the lock when the process dies, so a crashed watcher never leaves a
stale lock behind; the PID written into the file is informational only.
"""

import fcntl
import logging
import os
from pathlib import Path
from typing import Optional

from .errors import AlreadyRunningError, LockUnavailableError

logger = logging.getLogger(__name__)

LOCK_FILENAME = "jellydrop.lock"


class LockHandle:
    """A held instance lock. release() may be called any number of times."""

    def __init__(self, path: Path, fd: int):
        self.path = path
        self._fd: Optional[int] = fd

    @property
    def held(self) -> bool:
        return self._fd is not None

    def release(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        try:
            os.ftruncate(fd, 0)
            fcntl.flock(fd, fcntl.LOCK_UN)
        except OSError as e:
            logger.warning(f"[Instance] Failed to unlock {self.path}: {e}")
        finally:
            os.close(fd)
        logger.debug(f"[Instance] Released lock {self.path}")


class InstanceGuard:
    """
    Acquire-once guard for the instance lock.

    Example:
        guard = InstanceGuard(Path("~/.jellydrop/state").expanduser())
        guard.acquire()   # raises AlreadyRunningError if held elsewhere
        ...
        guard.release()   # idempotent
    """

    def __init__(self, state_dir: Path, filename: str = LOCK_FILENAME):
        self.lock_path = Path(state_dir) / filename
        self._handle: Optional[LockHandle] = None

    @property
    def held(self) -> bool:
        return self._handle is not None and self._handle.held

    def acquire(self) -> LockHandle:
        """
        Take the lock without blocking.

        Raises:
            AlreadyRunningError: Another process holds the lock
            LockUnavailableError: The lock file cannot be created
        """
        if self.held:
            return self._handle

        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.lock_path, os.O_CREAT | os.O_RDWR, 0o644)
        except OSError as e:
            raise LockUnavailableError(str(self.lock_path), str(e)) from e

        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            holder = self._read_holder(fd)
            os.close(fd)
            raise AlreadyRunningError(str(self.lock_path), holder) from None
        except OSError as e:
            os.close(fd)
            raise LockUnavailableError(str(self.lock_path), str(e)) from e

        os.ftruncate(fd, 0)
        os.write(fd, str(os.getpid()).encode("utf-8"))
        self._handle = LockHandle(self.lock_path, fd)
        logger.info(f"[Instance] Acquired lock {self.lock_path} (PID {os.getpid()})")
        return self._handle

    def release(self) -> None:
        if self._handle is not None:
            self._handle.release()

    @staticmethod
    def _read_holder(fd: int) -> str:
        try:
            os.lseek(fd, 0, os.SEEK_SET)
            return os.read(fd, 32).decode("utf-8", errors="replace").strip()
        except OSError:
            return ""

    def __enter__(self) -> "InstanceGuard":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
