"""
Runtime error hierarchy.

Unlike per-item errors, these are fatal: the CLI reports them and exits
non-zero before the control loop starts.
"""


class RuntimeGuardError(Exception):
    """Base exception for process-level startup failures."""

    pass


class AlreadyRunningError(RuntimeGuardError):
    """Another watcher instance holds the instance lock."""

    def __init__(self, lock_path: str, holder_pid: str = ""):
        self.lock_path = lock_path
        self.holder_pid = holder_pid
        holder = f" (PID {holder_pid})" if holder_pid else ""
        super().__init__(f"Another instance is already running{holder}; lock: {lock_path}")


class LockUnavailableError(RuntimeGuardError):
    """The lock file could not be created or opened."""

    def __init__(self, lock_path: str, reason: str):
        self.lock_path = lock_path
        self.reason = reason
        super().__init__(f"Cannot open instance lock {lock_path}: {reason}")
