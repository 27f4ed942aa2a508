"""
Watch folders — drop folder discovery.

Polling-based: each tick lists the drop folder's top-level entries, filters
system files and partial downloads, and gates each candidate on a blocking
stability probe before it reaches the Dispatcher.

Public API:
    WatchedItem — A dispatch candidate
    StabilityProber — Blocking size/mtime stability probe
    DropFolderScanner — Top-level listing with denylist filtering
    FolderDetector — Orchestration: scan → registry check → stability → dispatch
"""

from .errors import (
    WatchFolderError,
    DropFolderNotFoundError,
    DropFolderUnreadableError,
)
from .models import WatchedItem, StabilitySample, StabilityCheck
from .stability import StabilityProber, sample_path
from .scanner import DropFolderScanner, is_ignored
from .detector import FolderDetector

__all__ = [
    # Errors
    "WatchFolderError",
    "DropFolderNotFoundError",
    "DropFolderUnreadableError",
    # Models
    "WatchedItem",
    "StabilitySample",
    "StabilityCheck",
    # Core
    "StabilityProber",
    "sample_path",
    "DropFolderScanner",
    "is_ignored",
    "FolderDetector",
]
