"""
Control loop.

One tick:
    1. Reaper          — drop finished jobs, freeing slots
    2. Clipboard       — new links run their handler in the foreground
    3. Drop folder     — registry check, stability probe, dispatch

then wait main_loop_interval_seconds on the stop event. Every step is
isolated: an unexpected exception is logged and the loop carries on.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple, TypeVar

from ..clipboard.detector import ClipboardDetector
from ..clipboard.reader import ClipboardReader
from ..config.settings import WatcherSettings
from ..jobs.dispatcher import Dispatcher
from ..jobs.history import HistoryLog
from ..jobs.launcher import ProcessLauncher
from ..jobs.models import DispatchResult, HandlerKind, JobOutcome
from ..jobs.reaper import Reaper
from ..jobs.registry import JobRegistry
from ..monitoring.board import StatusBoard
from ..monitoring.models import JobSummary, WatcherStatus
from ..watchfolders.detector import FolderDetector
from ..watchfolders.models import WatchedItem
from ..watchfolders.scanner import DropFolderScanner
from ..watchfolders.stability import StabilityProber
from .context import OrchestratorContext
from .instance import InstanceGuard
from .shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Upper bound on the wait between reaps while draining after --once
DRAIN_POLL_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TickReport:
    reaped: List[JobOutcome] = field(default_factory=list)
    clipboard: List[JobOutcome] = field(default_factory=list)
    dispatched: List[Tuple[WatchedItem, DispatchResult]] = field(default_factory=list)


class Orchestrator:
    """
    Owns the control loop of one watcher run.

    Args:
        ctx: Shared run state
        reaper: Reaper run at the start of every tick
        clipboard_detector: None when clipboard watching is off
        folder_detector: None when drop folder watching is off
        board: Receives a status snapshot after every tick
    """

    def __init__(
        self,
        ctx: OrchestratorContext,
        reaper: Reaper,
        clipboard_detector: Optional[ClipboardDetector] = None,
        folder_detector: Optional[FolderDetector] = None,
        board: Optional[StatusBoard] = None,
    ):
        self.ctx = ctx
        self.reaper = reaper
        self.clipboard_detector = clipboard_detector
        self.folder_detector = folder_detector
        self.board = board
        self.started_at = _utcnow()
        self.last_tick_at: Optional[datetime] = None
        self.tick_count = 0

    def tick(self) -> TickReport:
        ctx = self.ctx
        report = TickReport()
        report.reaped = self._step("reaper", lambda: self.reaper.reap(ctx), [])

        if self.clipboard_detector is not None and self.clipboard_detector.enabled:
            report.clipboard = self._step(
                "clipboard", lambda: self.clipboard_detector.check(ctx), []
            )

        if self.folder_detector is not None and ctx.coordinator.accepting_dispatch:
            report.dispatched = self._step(
                "drop folder", lambda: self.folder_detector.scan(ctx), []
            )

        self.tick_count += 1
        self.last_tick_at = _utcnow()
        self.publish_status()
        return report

    def _step(self, name: str, fn: Callable[[], T], default: T) -> T:
        try:
            return fn()
        except Exception as e:
            logger.exception(f"[Orchestrator] Unexpected error in {name} step: {e}")
            return default

    def run(self, once: bool = False) -> int:
        """
        Run until shutdown is requested (or one tick plus drain with once=True).

        Returns:
            Process exit status from the Shutdown Coordinator
        """
        stop_event = self.ctx.stop_event
        interval = self.ctx.settings.main_loop_interval_seconds
        self.log_startup_summary()
        try:
            while not stop_event.is_set():
                self.tick()
                if once:
                    self.drain()
                    break
                if stop_event.wait(interval):
                    break
        finally:
            exit_code = self.ctx.coordinator.complete()
            self.publish_status()
        return exit_code

    def drain(self) -> None:
        """Reap until every dispatched job has finished or shutdown is requested."""
        ctx = self.ctx
        poll = min(DRAIN_POLL_SECONDS, ctx.settings.main_loop_interval_seconds)
        if ctx.registry.count():
            logger.info(f"[Orchestrator] Waiting for {ctx.registry.count()} running handler(s)")
        while ctx.registry.count() and not ctx.stop_event.is_set():
            if ctx.stop_event.wait(poll):
                break
            self._step("reaper", lambda: self.reaper.reap(ctx), [])
            self.publish_status()

    def status(self) -> WatcherStatus:
        now = _utcnow()
        settings = self.ctx.settings
        clipboard_sources = []
        if self.clipboard_detector is not None:
            clipboard_sources = [kind.value for kind in self.clipboard_detector.kinds]
        return WatcherStatus(
            state=self.ctx.coordinator.state.value,
            started_at=self.started_at,
            last_tick_at=self.last_tick_at,
            tick_count=self.tick_count,
            max_concurrent_processors=settings.max_concurrent_processors,
            active_jobs=[JobSummary(**record.to_dict(now)) for record in self.ctx.registry.records()],
            drop_folder=settings.drop_folder if self.folder_detector is not None else None,
            clipboard_sources=clipboard_sources,
        )

    def publish_status(self) -> None:
        if self.board is not None:
            self.board.publish(self.status())

    def log_startup_summary(self) -> None:
        settings = self.ctx.settings
        logger.info("[Orchestrator] jellydrop watcher starting")
        if self.folder_detector is not None:
            logger.info(f"[Orchestrator]   Drop folder: {settings.drop_folder}")
            logger.info(
                f"[Orchestrator]   Stability: {settings.stability.checks} checks "
                f"x {settings.stability.interval_seconds}s"
            )
        else:
            logger.info("[Orchestrator]   Drop folder: disabled")
        sources = self.status().clipboard_sources
        logger.info(f"[Orchestrator]   Clipboard: {', '.join(sources) if sources else 'disabled'}")
        logger.info(f"[Orchestrator]   Max concurrent handlers: {settings.max_concurrent_processors}")
        logger.info(f"[Orchestrator]   Loop interval: {settings.main_loop_interval_seconds}s")
        if self.ctx.history.enabled:
            logger.info(f"[Orchestrator]   History: {self.ctx.history.path}")


def build_orchestrator(
    settings: WatcherSettings,
    guard: Optional[InstanceGuard] = None,
    launcher: Optional[ProcessLauncher] = None,
    clipboard_reader: Optional[ClipboardReader] = None,
    prober: Optional[StabilityProber] = None,
    board: Optional[StatusBoard] = None,
) -> Orchestrator:
    """Wire up one watcher run from settings."""
    registry = JobRegistry()
    coordinator = ShutdownCoordinator(registry, guard)
    ctx = OrchestratorContext(
        settings=settings,
        registry=registry,
        coordinator=coordinator,
        launcher=launcher or ProcessLauncher(),
        history=HistoryLog(settings.history_path),
    )
    reaper = Reaper()

    kinds = []
    if settings.enable_clipboard_youtube:
        kinds.append(HandlerKind.YOUTUBE)
    if settings.enable_clipboard_magnet:
        kinds.append(HandlerKind.MAGNET)
    clipboard_detector = None
    if kinds:
        clipboard_detector = ClipboardDetector(clipboard_reader or ClipboardReader(), kinds)

    folder_detector = None
    if settings.enable_drop_folder:
        folder_detector = FolderDetector(
            scanner=DropFolderScanner(settings.drop_folder_path, settings.ignore_patterns),
            prober=prober or StabilityProber(
                required_checks=settings.stability.checks,
                interval_seconds=settings.stability.interval_seconds,
                stop_event=coordinator.stop_event,
            ),
            dispatcher=Dispatcher(reaper),
        )

    return Orchestrator(ctx, reaper, clipboard_detector, folder_detector, board)
