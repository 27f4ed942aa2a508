"""
Drop folder item classification.

The media handler receives an item type tag and a Movies/Shows hint. The
hint is a guess from the name only; the handler makes the final call.
"""

import re
from enum import Enum

from ..watchfolders.models import WatchedItem


class ItemType(str, Enum):
    MEDIA_FOLDER = "media_folder"
    GENERIC_FILE = "generic_file"


class CategoryHint(str, Enum):
    MOVIES = "Movies"
    SHOWS = "Shows"


# S01E02, 1x02, Season 2, Episode 5, Part II, "Series", "Season Pack"
SHOW_PATTERN = re.compile(
    r"([Ss]\d{1,3}[._ ]?[EeXx]\d{1,4})"
    r"|([Ss]eason[._ ]?\d{1,3})"
    r"|([Ee]pisode[._ ]?\d{1,4})"
    r"|\b(Part|Pt)[._ ]?[0-9IVX]+\b"
    r"|\b(Series|Show)\b"
    r"|\b(Season[._ ]Pack)\b",
    re.IGNORECASE,
)


def item_type_for(item: WatchedItem) -> ItemType:
    return ItemType.MEDIA_FOLDER if item.is_dir else ItemType.GENERIC_FILE


def category_hint_for(name: str) -> CategoryHint:
    """Guess Shows for season/episode-looking names, Movies otherwise."""
    if SHOW_PATTERN.search(name):
        return CategoryHint.SHOWS
    return CategoryHint.MOVIES
