"""
Read-only status API.

Exposes the latest WatcherStatus snapshot over HTTP. There are no mutating
endpoints: jobs cannot be started, cancelled or retried from here.

By default the API binds to localhost (127.0.0.1) only. It has no
authentication; only bind it to a LAN address on a trusted network.
"""

import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException

from .. import __version__
from .board import StatusBoard

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9876


def create_monitor_app(board: StatusBoard) -> FastAPI:
    """
    Create the read-only status application.

    Args:
        board: Board the control loop publishes snapshots to
    """
    app = FastAPI(
        title="jellydrop status",
        description="Read-only view of the watcher and its running handlers.",
        version=__version__,
    )

    def _latest():
        status = board.latest()
        if status is None:
            raise HTTPException(status_code=503, detail="Watcher has not completed a tick yet")
        return status

    @app.get("/health")
    async def health():
        """Liveness of the API plus the watcher state, if known."""
        status = board.latest()
        return {
            "status": "ok",
            "mode": "read-only",
            "watcher_state": status.state if status else "starting",
        }

    @app.get("/status")
    async def watcher_status():
        return _latest().model_dump(mode="json")

    @app.get("/jobs")
    async def list_jobs():
        """Running handler processes, oldest first."""
        status = _latest()
        return {
            "count": len(status.active_jobs),
            "max_concurrent_processors": status.max_concurrent_processors,
            "jobs": [job.model_dump(mode="json") for job in status.active_jobs],
        }

    return app


class MonitorServer:
    """
    Serves the status API with uvicorn on a daemon thread.

    uvicorn only installs its own signal handlers on the main thread, so
    SIGINT/SIGTERM keep reaching the Shutdown Coordinator.
    """

    def __init__(self, board: StatusBoard, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        self.board = board
        self.host = host
        self.port = port
        self._server = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        import uvicorn

        config = uvicorn.Config(
            create_monitor_app(self.board),
            host=self.host,
            port=self.port,
            log_level="warning",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            name="jellydrop-monitor",
            daemon=True,
        )
        self._thread.start()
        if self.host != DEFAULT_HOST:
            logger.warning(f"[Monitor] Status API exposed on {self.host}:{self.port} without authentication")
        else:
            logger.info(f"[Monitor] Status API on http://{self.host}:{self.port}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
