"""
Job tracking models.

Plain dataclasses: a JobRecord holds a live subprocess handle, which is not
serialisable, so these stay out of pydantic.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HandlerKind(str, Enum):
    """Which external handler a job runs."""

    YOUTUBE = "youtube"  # clipboard YouTube link
    MAGNET = "magnet"  # clipboard magnet URI
    MEDIA_ITEM = "media_item"  # drop folder file or directory


class DispatchResult(str, Enum):
    """What the Dispatcher did with one item."""

    LAUNCHED = "launched"
    DEFERRED = "deferred"  # at the concurrency ceiling, retried next tick
    DUPLICATE = "duplicate"  # a live job already covers the item
    REFUSED = "refused"  # shutdown has begun
    FAILED = "failed"  # handler could not be started


@dataclass
class JobRecord:
    """
    One live handler invocation.

    Attributes:
        item_id: Registry key (absolute path or URL)
        handler: Handler kind
        process: Popen-like handle exposing pid, poll() and terminate()
        argv: Full command line the handler was started with
        launched_at: Launch time (UTC)
    """

    item_id: str
    handler: HandlerKind
    process: Any
    argv: List[str] = field(default_factory=list)
    launched_at: datetime = field(default_factory=_utcnow)

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.process, "pid", None)

    def to_dict(self, now: Optional[datetime] = None) -> dict:
        now = now or _utcnow()
        return {
            "item_id": self.item_id,
            "handler": self.handler.value,
            "pid": self.pid,
            "launched_at": self.launched_at.isoformat(),
            "running_seconds": round((now - self.launched_at).total_seconds(), 1),
        }


@dataclass
class JobOutcome:
    """
    A reaped job.

    exit_code is None when the process could not be waited on; that counts
    as a failure.
    """

    item_id: str
    handler: HandlerKind
    pid: Optional[int]
    exit_code: Optional[int]
    duration_seconds: float

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def history_line(self) -> str:
        status = "unknown" if self.exit_code is None else str(self.exit_code)
        verdict = "completed" if self.succeeded else "failed"
        return (
            f"{self.handler.value} {verdict}: {self.item_id} "
            f"(exit {status}, {self.duration_seconds:.1f}s)"
        )
