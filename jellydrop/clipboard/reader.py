"""
Clipboard access through pyperclip.

pyperclip picks pbpaste on macOS and xclip/xsel/wl-paste on Linux.
"""

import logging
from typing import Tuple

import pyperclip

from .errors import ClipboardReadError

logger = logging.getLogger(__name__)


class ClipboardReader:
    def read(self) -> str:
        """
        Raises:
            ClipboardReadError: The backend failed or is missing
        """
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise ClipboardReadError(str(e)) from e
        return text or ""


def clipboard_available() -> Tuple[bool, str]:
    """Probe the clipboard backend once. Returns (available, detail)."""
    try:
        pyperclip.paste()
    except pyperclip.PyperclipException as e:
        return False, str(e)
    return True, "clipboard backend available"
