"""
Runtime — process-level lifecycle of the watcher.

Public API:
    InstanceGuard — Single-instance advisory lock
    ShutdownCoordinator — Signal-driven, run-once shutdown sequence
    OrchestratorContext — Shared state of one run
    Orchestrator — The control loop
    build_orchestrator — Wire a run from settings
"""

from .errors import RuntimeGuardError, AlreadyRunningError, LockUnavailableError
from .instance import InstanceGuard, LockHandle
from .shutdown import ShutdownCoordinator, ShutdownState
from .keepawake import KeepAwake
from .context import OrchestratorContext
from .orchestrator import Orchestrator, TickReport, build_orchestrator

__all__ = [
    # Errors
    "RuntimeGuardError",
    "AlreadyRunningError",
    "LockUnavailableError",
    # Core
    "InstanceGuard",
    "LockHandle",
    "ShutdownCoordinator",
    "ShutdownState",
    "KeepAwake",
    "OrchestratorContext",
    "Orchestrator",
    "TickReport",
    "build_orchestrator",
]
