"""
Clipboard — link detection on the system clipboard.

Public API:
    ClipboardReader — pyperclip-backed clipboard access
    ClipboardSnapshot — Last-seen text per link class
    ClipboardDetector — Diff, classify and run the link handler
"""

from .errors import ClipboardError, ClipboardReadError
from .models import LINK_PATTERNS, ClipboardSnapshot, matches_link
from .reader import ClipboardReader, clipboard_available
from .detector import ClipboardDetector

__all__ = [
    # Errors
    "ClipboardError",
    "ClipboardReadError",
    # Models
    "LINK_PATTERNS",
    "ClipboardSnapshot",
    "matches_link",
    # Core
    "ClipboardReader",
    "clipboard_available",
    "ClipboardDetector",
]
