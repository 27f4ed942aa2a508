"""
Clipboard error hierarchy.
"""


class ClipboardError(Exception):
    """Base exception for clipboard failures."""

    pass


class ClipboardReadError(ClipboardError):
    """The clipboard could not be read this tick."""

    pass
