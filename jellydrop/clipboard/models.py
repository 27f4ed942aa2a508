"""
Clipboard link patterns and the last-seen snapshot.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..jobs.models import HandlerKind

LINK_PATTERNS: Dict[HandlerKind, re.Pattern] = {
    HandlerKind.YOUTUBE: re.compile(
        r"(https://www\.youtube\.com/watch\?v=|https://youtu\.be/).+",
        re.DOTALL,
    ),
    HandlerKind.MAGNET: re.compile(r"magnet:\?xt=urn:btih:.+", re.DOTALL),
}


def matches_link(kind: HandlerKind, text: str) -> bool:
    """True if trimmed clipboard text is a link for this handler."""
    pattern = LINK_PATTERNS.get(kind)
    return pattern is not None and pattern.fullmatch(text.strip()) is not None


@dataclass
class ClipboardSnapshot:
    """
    Last-seen raw clipboard text, one slot per monitored link class.

    Only suppresses re-processing of unchanged content; it is not a history.
    """

    last_seen: Dict[HandlerKind, str] = field(default_factory=dict)

    def observe(self, kind: HandlerKind, text: Optional[str]) -> bool:
        """
        Record clipboard text for one class.

        Returns:
            True if the text is non-empty and differs from the last-seen
            value (the snapshot is updated); False otherwise.
        """
        if not text:
            return False
        if self.last_seen.get(kind) == text:
            return False
        self.last_seen[kind] = text
        return True
