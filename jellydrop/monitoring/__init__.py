"""
Monitoring — optional read-only status API.

Public API:
    WatcherStatus — Immutable per-tick snapshot
    StatusBoard — Latest snapshot, shared with the API thread

The FastAPI app and its uvicorn thread live in monitoring.server and are
imported only when the monitor is enabled.
"""

from .models import JobSummary, WatcherStatus
from .board import StatusBoard

__all__ = [
    # Models
    "JobSummary",
    "WatcherStatus",
    # Core
    "StatusBoard",
]
