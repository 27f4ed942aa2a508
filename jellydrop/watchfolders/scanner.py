"""
Drop folder scanner.

Lists the top-level entries of the drop folder (files and directories) and
filters out system metadata and partial downloads.
"""

import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import DropFolderNotFoundError, DropFolderUnreadableError
from .models import WatchedItem

# Exact names written by Finder, Windows Explorer and Syncthing
IGNORED_NAMES = frozenset({
    ".DS_Store",
    "desktop.ini",
    ".stfolder",
    ".stversions",
    ".localized",
})

# AppleDouble resource forks
IGNORED_PREFIXES = ("._",)

# Browser and torrent-client partial downloads
IGNORED_SUFFIXES = (".part", ".crdownload")


def is_ignored(name: str, extra_patterns: Iterable[str] = ()) -> bool:
    """Return True if a drop folder entry name should never be dispatched."""
    if name in IGNORED_NAMES:
        return True
    if name.startswith(IGNORED_PREFIXES):
        return True
    if name.lower().endswith(IGNORED_SUFFIXES):
        return True
    return any(fnmatch.fnmatch(name, pattern) for pattern in extra_patterns)


class DropFolderScanner:
    """
    Top-level scanner for the drop folder.

    Yields both files and directories; a directory is one item (a season
    pack or a movie folder), never walked. Symlinks are skipped.
    """

    def __init__(self, drop_folder: Path, ignore_patterns: Optional[List[str]] = None):
        """
        Args:
            drop_folder: Absolute path of the watched directory
            ignore_patterns: Extra fnmatch patterns to skip
        """
        self.drop_folder = Path(drop_folder)
        self.ignore_patterns = list(ignore_patterns or [])

    def scan(self) -> List[WatchedItem]:
        """
        List dispatch candidates.

        Returns:
            Candidates sorted by name (not yet stability-checked)

        Raises:
            DropFolderNotFoundError: The folder is missing or not a directory
            DropFolderUnreadableError: The folder could not be listed
        """
        if not self.drop_folder.is_dir():
            raise DropFolderNotFoundError(str(self.drop_folder))

        candidates = []
        try:
            for entry in self.drop_folder.iterdir():
                if entry.is_symlink():
                    continue
                if is_ignored(entry.name, self.ignore_patterns):
                    continue
                is_dir = entry.is_dir()
                if not is_dir and not entry.is_file():
                    continue
                candidates.append(
                    WatchedItem(
                        path=str(entry.absolute()),
                        name=entry.name,
                        is_dir=is_dir,
                    )
                )
        except OSError as e:
            raise DropFolderUnreadableError(str(self.drop_folder), str(e)) from e

        return sorted(candidates, key=lambda item: item.name)
