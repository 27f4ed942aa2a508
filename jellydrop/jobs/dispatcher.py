"""
Dispatcher: admission control and launch for drop folder items.

An item is launched only while the number of live jobs is below the
configured ceiling. Deferred items are not queued; the next scan sees them
again and the registry check decides whether they are still new.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..watchfolders.models import WatchedItem
from .classify import category_hint_for, item_type_for
from .errors import HandlerLaunchError
from .models import DispatchResult, HandlerKind, JobRecord
from .reaper import Reaper

if TYPE_CHECKING:
    from ..runtime.context import OrchestratorContext

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Launches the media handler for stable drop folder items.

    Args:
        reaper: Reaps finished jobs right before the ceiling check so a slot
            freed during a long stability probe is usable in the same tick.
    """

    def __init__(self, reaper: Optional[Reaper] = None):
        self.reaper = reaper

    def dispatch(self, item: WatchedItem, ctx: "OrchestratorContext") -> DispatchResult:
        if not ctx.coordinator.accepting_dispatch:
            logger.info(f"[Dispatcher] Shutting down; not launching '{item.name}'")
            return DispatchResult.REFUSED

        if self.reaper is not None:
            self.reaper.reap(ctx)

        if ctx.registry.contains(item.item_id):
            logger.debug(f"[Dispatcher] '{item.name}' already has a running job")
            return DispatchResult.DUPLICATE

        ceiling = ctx.settings.max_concurrent_processors
        active = ctx.registry.count()
        if active >= ceiling:
            logger.info(
                f"[Dispatcher] At capacity ({active}/{ceiling}); deferring '{item.name}'"
            )
            return DispatchResult.DEFERRED

        item_type = item_type_for(item)
        hint = category_hint_for(item.name).value if ctx.settings.category_hints else ""
        argv = [*ctx.settings.handlers.media_item, item_type.value, item.path, hint]

        try:
            process = ctx.launcher.spawn(argv)
        except HandlerLaunchError as e:
            logger.warning(f"[Dispatcher] {e}; '{item.name}' will be retried")
            return DispatchResult.FAILED

        ctx.registry.add(
            JobRecord(
                item_id=item.item_id,
                handler=HandlerKind.MEDIA_ITEM,
                process=process,
                argv=argv,
            )
        )
        logger.info(
            f"[Dispatcher] Launched {item_type.value} handler for '{item.name}' "
            f"(PID {process.pid}, hint: {hint or 'none'}, active {active + 1}/{ceiling})"
        )
        return DispatchResult.LAUNCHED
