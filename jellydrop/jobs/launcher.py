"""
Handler process launching.

Background handlers (drop folder items) are started in their own session so
a terminal Ctrl-C reaches only the watcher; the Shutdown Coordinator then
sends each of them SIGTERM. Foreground handlers (clipboard links) are run to
completion, polling the shutdown event while they run.
"""

import logging
import subprocess
import threading
from typing import List, Optional

from .errors import HandlerLaunchError

logger = logging.getLogger(__name__)

# Seconds a foreground handler gets to exit after SIGTERM before SIGKILL
TERMINATE_GRACE_SECONDS = 5.0


def terminate_process(process) -> bool:
    """
    Send SIGTERM to a process without waiting for it.

    Returns:
        True if the signal was sent, False if the process was already gone
    """
    if process.poll() is not None:
        return False
    logger.info(f"[Launcher] Sending SIGTERM to PID {process.pid}")
    try:
        process.terminate()
    except ProcessLookupError:
        return False
    except OSError as e:
        logger.warning(f"[Launcher] Could not signal PID {process.pid}: {e}")
        return False
    return True


class ProcessLauncher:
    """Starts handler subprocesses."""

    def spawn(self, argv: List[str]) -> subprocess.Popen:
        """
        Start a detached background handler and return immediately.

        Raises:
            HandlerLaunchError: The executable could not be started
        """
        try:
            return subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
                close_fds=True,
            )
        except (OSError, ValueError) as e:
            raise HandlerLaunchError(argv, str(e)) from e

    def run_blocking(
        self,
        argv: List[str],
        stop_event: Optional[threading.Event] = None,
        poll_interval: float = 0.5,
    ) -> Optional[int]:
        """
        Run a handler in the foreground and return its exit code.

        If the stop event is set while the handler runs it is sent SIGTERM,
        escalating to SIGKILL after TERMINATE_GRACE_SECONDS.

        Raises:
            HandlerLaunchError: The executable could not be started
        """
        try:
            process = subprocess.Popen(argv, stdin=subprocess.DEVNULL, close_fds=True)
        except (OSError, ValueError) as e:
            raise HandlerLaunchError(argv, str(e)) from e

        while True:
            try:
                return process.wait(timeout=poll_interval)
            except subprocess.TimeoutExpired:
                if stop_event is None or not stop_event.is_set():
                    continue

            terminate_process(process)
            try:
                return process.wait(timeout=TERMINATE_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                logger.warning(f"[Launcher] PID {process.pid} did not terminate, sending SIGKILL")
                process.kill()
                return process.wait()
