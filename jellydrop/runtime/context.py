"""
Shared state of one watcher run, passed explicitly to every detector,
dispatcher and reaper call.
"""

import threading
from dataclasses import dataclass, field

from ..clipboard.models import ClipboardSnapshot
from ..config.settings import WatcherSettings
from ..jobs.history import HistoryLog
from ..jobs.launcher import ProcessLauncher
from ..jobs.registry import JobRegistry
from .shutdown import ShutdownCoordinator


@dataclass
class OrchestratorContext:
    settings: WatcherSettings
    registry: JobRegistry
    coordinator: ShutdownCoordinator
    launcher: ProcessLauncher
    history: HistoryLog
    snapshot: ClipboardSnapshot = field(default_factory=ClipboardSnapshot)

    @property
    def stop_event(self) -> threading.Event:
        return self.coordinator.stop_event
