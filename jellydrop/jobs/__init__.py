"""
Jobs — tracking of external handler processes.

Public API:
    JobRegistry — In-memory table of live handler invocations
    Dispatcher — Ceiling check and launch for drop folder items
    Reaper — Non-blocking liveness polling and removal of finished jobs
    HistoryLog — Append-only processing history
    ProcessLauncher — Background and foreground handler launching
"""

from .errors import (
    JobError,
    DuplicateJobError,
    JobNotFoundError,
    HandlerLaunchError,
)
from .models import HandlerKind, DispatchResult, JobRecord, JobOutcome
from .classify import ItemType, CategoryHint, item_type_for, category_hint_for
from .registry import JobRegistry
from .launcher import ProcessLauncher, terminate_process
from .history import HistoryLog
from .reaper import Reaper
from .dispatcher import Dispatcher

__all__ = [
    # Errors
    "JobError",
    "DuplicateJobError",
    "JobNotFoundError",
    "HandlerLaunchError",
    # Models
    "HandlerKind",
    "DispatchResult",
    "JobRecord",
    "JobOutcome",
    "ItemType",
    "CategoryHint",
    # Core
    "item_type_for",
    "category_hint_for",
    "JobRegistry",
    "ProcessLauncher",
    "terminate_process",
    "HistoryLog",
    "Reaper",
    "Dispatcher",
]
