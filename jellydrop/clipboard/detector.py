"""
Clipboard detector.

Each tick, for every enabled link class: read the clipboard, compare with
that class's last-seen text, and run the class handler when new text
matches the class pattern.
"""

import logging
import time
from typing import TYPE_CHECKING, Iterable, List

from ..jobs.errors import HandlerLaunchError
from ..jobs.models import HandlerKind, JobOutcome
from .errors import ClipboardReadError
from .models import matches_link
from .reader import ClipboardReader

if TYPE_CHECKING:
    from ..runtime.context import OrchestratorContext

logger = logging.getLogger(__name__)


class ClipboardDetector:
    """
    Detects new YouTube links and magnet URIs on the clipboard.

    Handlers run in the foreground: check() does not return until the
    handler has exited. At most one clipboard handler is ever running.
    """

    def __init__(self, reader: ClipboardReader, kinds: Iterable[HandlerKind]):
        self.reader = reader
        self.kinds = list(kinds)

    @property
    def enabled(self) -> bool:
        return bool(self.kinds)

    def disable(self, reason: str) -> None:
        if self.kinds:
            logger.warning(f"[Clipboard] Clipboard detection disabled: {reason}")
        self.kinds = []

    def check(self, ctx: "OrchestratorContext") -> List[JobOutcome]:
        """
        Returns:
            Outcomes of the handlers run this tick (may be empty)
        """
        outcomes = []
        for kind in self.kinds:
            if not ctx.coordinator.accepting_dispatch:
                break
            try:
                text = self.reader.read()
            except ClipboardReadError as e:
                logger.warning(f"[Clipboard] Could not read clipboard: {e}")
                continue

            if not ctx.snapshot.observe(kind, text):
                continue

            link = text.strip()
            if not matches_link(kind, link):
                continue

            outcomes.append(self._run_handler(kind, link, ctx))
        return outcomes

    def _run_handler(self, kind: HandlerKind, link: str, ctx: "OrchestratorContext") -> JobOutcome:
        argv = [*self._command_for(kind, ctx), link]
        logger.info(f"[Clipboard] New {kind.value} link: {link}")

        started = time.monotonic()
        try:
            exit_code = ctx.launcher.run_blocking(argv, ctx.coordinator.stop_event)
        except HandlerLaunchError as e:
            logger.warning(f"[Clipboard] {e}")
            exit_code = None

        outcome = JobOutcome(
            item_id=link,
            handler=kind,
            pid=None,
            exit_code=exit_code,
            duration_seconds=time.monotonic() - started,
        )
        if outcome.succeeded:
            logger.info(f"[Clipboard] {kind.value} handler finished ({outcome.duration_seconds:.1f}s)")
        else:
            status = "unknown" if exit_code is None else exit_code
            logger.warning(f"[Clipboard] {kind.value} handler failed (exit {status}) for {link}")
        ctx.history.append(outcome.history_line())
        return outcome

    @staticmethod
    def _command_for(kind: HandlerKind, ctx: "OrchestratorContext") -> List[str]:
        if kind is HandlerKind.YOUTUBE:
            return ctx.settings.handlers.youtube
        return ctx.settings.handlers.magnet
