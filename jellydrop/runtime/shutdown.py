"""
Shutdown coordination.

    RUNNING --request()--> SHUTTING_DOWN --complete()--> TERMINATED

request() is what the SIGINT/SIGTERM handlers call. It only flips state and
sets the stop event, which wakes every wait in the control loop; the actual
cleanup runs later on the control thread in complete(). A second signal, or
a second complete(), is a no-op.
"""

import logging
import signal
import sys
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..jobs.launcher import terminate_process
from ..jobs.registry import JobRegistry
from .instance import InstanceGuard

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownState(str, Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class ShutdownCoordinator:
    """
    Stops dispatch, terminates tracked handlers and releases the instance lock.

    Handlers are sent SIGTERM but not waited for.
    """

    def __init__(self, registry: JobRegistry, guard: Optional[InstanceGuard] = None):
        self.registry = registry
        self.guard = guard
        self.stop_event = threading.Event()
        self.reason: Optional[str] = None
        self._state = ShutdownState.RUNNING
        self._completing = False
        self._cleanups: List[Tuple[str, Callable[[], None]]] = []
        self._previous_handlers: Dict[int, object] = {}

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def accepting_dispatch(self) -> bool:
        return self._state is ShutdownState.RUNNING

    def add_cleanup(self, name: str, callback: Callable[[], None]) -> None:
        """Register a best-effort callback run during complete(), in order."""
        self._cleanups.append((name, callback))

    def request(self, reason: str) -> bool:
        """
        Begin shutdown.

        Returns:
            True for the first request, False if shutdown had already begun
        """
        if self._state is not ShutdownState.RUNNING:
            logger.debug(f"[Shutdown] Ignoring repeated request ({reason})")
            return False
        self._state = ShutdownState.SHUTTING_DOWN
        self.reason = reason
        self.stop_event.set()
        logger.info(f"[Shutdown] Shutdown requested: {reason}")
        return True

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to request(). Main thread only."""
        for signum in HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.getsignal(signum)
            signal.signal(signum, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _handle_signal(self, signum, frame) -> None:
        self.request(f"received {signal.Signals(signum).name}")

    def complete(self) -> int:
        """
        Run the shutdown sequence once.

        Returns:
            Process exit status (always 0)
        """
        if self._state is ShutdownState.TERMINATED or self._completing:
            return 0
        self._completing = True
        self.request("control loop exited")

        records = self.registry.records()
        if records:
            logger.info(f"[Shutdown] Terminating {len(records)} running handler(s)")
        for record in records:
            try:
                terminate_process(record.process)
            except (OSError, ChildProcessError) as e:
                logger.warning(f"[Shutdown] Could not terminate PID {record.pid}: {e}")

        for name, callback in self._cleanups:
            try:
                callback()
            except Exception as e:
                logger.warning(f"[Shutdown] Cleanup '{name}' failed: {e}")

        if self.guard is not None:
            self.guard.release()

        self._state = ShutdownState.TERMINATED
        logger.info("[Shutdown] Shutdown complete")
        for handler in logging.getLogger().handlers:
            handler.flush()
        sys.stdout.flush()
        sys.stderr.flush()
        return 0
