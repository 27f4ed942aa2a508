"""
In-memory job registry.

The registry is the source of truth for "is this item already being
handled" and for concurrency accounting. Only the control thread touches
it: the Dispatcher is the only caller of add() and the Reaper the only
caller of remove(), so no lock is needed.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .errors import DuplicateJobError, JobNotFoundError
from .models import JobRecord

logger = logging.getLogger(__name__)


class JobRegistry:
    """
    Table of live handler invocations keyed by item identifier.
    """

    def __init__(self):
        # item_id -> JobRecord
        self._jobs: Dict[str, JobRecord] = {}

    def add(self, record: JobRecord) -> None:
        """
        Register a freshly launched job.

        Raises:
            DuplicateJobError: A live job already exists for the item
        """
        if record.item_id in self._jobs:
            raise DuplicateJobError(record.item_id)
        self._jobs[record.item_id] = record

    def get(self, item_id: str) -> Optional[JobRecord]:
        return self._jobs.get(item_id)

    def remove(self, item_id: str) -> JobRecord:
        """
        Drop a finished job.

        Raises:
            JobNotFoundError: No job is registered for the item
        """
        try:
            return self._jobs.pop(item_id)
        except KeyError:
            raise JobNotFoundError(item_id) from None

    def contains(self, item_id: str) -> bool:
        return item_id in self._jobs

    def count(self) -> int:
        """Number of live jobs, compared against the concurrency ceiling."""
        return len(self._jobs)

    def records(self) -> Tuple[JobRecord, ...]:
        """Snapshot of live records, oldest first. Safe to iterate while removing."""
        return tuple(sorted(self._jobs.values(), key=lambda r: r.launched_at))

    def discard_inconsistent(self) -> List[str]:
        """
        Drop entries that cannot be polled or whose key does not match the record.

        Returns:
            Keys of discarded entries
        """
        discarded = []
        for key, record in list(self._jobs.items()):
            if key != record.item_id or not callable(getattr(record.process, "poll", None)):
                del self._jobs[key]
                discarded.append(key)
        return discarded

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._jobs
