"""
Drop folder error hierarchy.

These errors are per-item or transient. The control loop logs them and
retries on a later tick; none of them stop the watcher.
"""


class WatchFolderError(Exception):
    """Base exception for drop folder failures."""

    pass


class DropFolderNotFoundError(WatchFolderError):
    """Drop folder path does not exist or is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Drop folder not found: {path}")


class DropFolderUnreadableError(WatchFolderError):
    """Drop folder exists but could not be listed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Drop folder not readable: {path} ({reason})")
