"""
Job error hierarchy.

Registry errors signal a broken caller invariant (the Dispatcher checks
before inserting). Launch errors are per-item and are logged by the caller.
"""

from typing import List


class JobError(Exception):
    """Base exception for job tracking failures."""

    pass


class DuplicateJobError(JobError):
    """A live job already exists for this item."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"A job is already running for: {item_id}")


class JobNotFoundError(JobError):
    """No live job exists for this item."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"No job registered for: {item_id}")


class HandlerLaunchError(JobError):
    """The handler process could not be started."""

    def __init__(self, argv: List[str], reason: str):
        self.argv = list(argv)
        self.reason = reason
        program = argv[0] if argv else "<empty>"
        super().__init__(f"Failed to launch handler {program}: {reason}")
