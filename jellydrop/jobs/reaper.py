"""
Reaper: removes finished jobs from the registry.

Liveness is checked with a non-blocking poll(). A process that cannot be
polled is treated as finished with unknown status, so a broken handle never
pins a concurrency slot.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List

from .models import JobOutcome

if TYPE_CHECKING:
    from ..runtime.context import OrchestratorContext

logger = logging.getLogger(__name__)


class Reaper:
    """Polls every live job and reaps the ones that have exited."""

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock

    def reap(self, ctx: "OrchestratorContext") -> List[JobOutcome]:
        """
        Reap finished jobs.

        Returns:
            Outcomes of the jobs removed this call (may be empty)
        """
        registry = ctx.registry
        for key in registry.discard_inconsistent():
            logger.warning(f"[Reaper] Discarded inconsistent registry entry: {key}")

        outcomes = []
        for record in registry.records():
            try:
                exit_code = record.process.poll()
                if exit_code is None:
                    continue
            except (OSError, ChildProcessError) as e:
                logger.warning(
                    f"[Reaper] Could not check PID {record.pid} for '{record.item_id}': {e}; "
                    f"treating as finished"
                )
                exit_code = None

            duration = (self._clock() - record.launched_at).total_seconds()
            outcome = JobOutcome(
                item_id=record.item_id,
                handler=record.handler,
                pid=record.pid,
                exit_code=exit_code,
                duration_seconds=max(duration, 0.0),
            )
            registry.remove(record.item_id)

            name = Path(record.item_id).name or record.item_id
            if outcome.succeeded:
                logger.info(
                    f"[Reaper] {record.handler.value} finished '{name}' "
                    f"(PID {record.pid}, {outcome.duration_seconds:.1f}s)"
                )
            else:
                status = "unknown" if exit_code is None else exit_code
                logger.warning(
                    f"[Reaper] {record.handler.value} failed for '{name}' "
                    f"(PID {record.pid}, exit {status})"
                )
            ctx.history.append(outcome.history_line())
            outcomes.append(outcome)

        if outcomes:
            logger.debug(f"[Reaper] Reaped {len(outcomes)} job(s), {registry.count()} still running")
        return outcomes
