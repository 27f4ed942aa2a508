"""
Drop folder detector: scan -> registry check -> stability probe -> dispatch.

The registry check happens before probing so an item that already has a
running handler is never probed or dispatched again.
"""

import logging
from typing import TYPE_CHECKING, List, Tuple

from ..jobs.models import DispatchResult
from .errors import WatchFolderError
from .models import WatchedItem
from .scanner import DropFolderScanner
from .stability import StabilityProber

if TYPE_CHECKING:
    from ..jobs.dispatcher import Dispatcher
    from ..runtime.context import OrchestratorContext

logger = logging.getLogger(__name__)


class FolderDetector:
    """
    One pass over the drop folder per tick.

    Warn-and-continue: a missing or unreadable drop folder skips this pass
    and is retried next tick.
    """

    def __init__(
        self,
        scanner: DropFolderScanner,
        prober: StabilityProber,
        dispatcher: "Dispatcher",
    ):
        self.scanner = scanner
        self.prober = prober
        self.dispatcher = dispatcher

    def scan(self, ctx: "OrchestratorContext") -> List[Tuple[WatchedItem, DispatchResult]]:
        """
        Returns:
            (item, result) for every item handed to the Dispatcher
        """
        try:
            items = self.scanner.scan()
        except WatchFolderError as e:
            logger.warning(f"[DropFolder] {e}; skipping scan")
            return []

        if items:
            logger.debug(f"[DropFolder] Found {len(items)} candidate(s)")

        results = []
        for item in items:
            if not ctx.coordinator.accepting_dispatch:
                break

            if ctx.registry.contains(item.item_id):
                logger.debug(f"[DropFolder] '{item.name}' is already being processed")
                continue

            check = self.prober.probe(item.path)
            if not check.is_stable:
                logger.debug(f"[DropFolder] '{item.name}' not stable: {check.reason}")
                continue

            logger.info(f"[DropFolder] '{item.name}' is stable")
            results.append((item, self.dispatcher.dispatch(item, ctx)))
        return results
