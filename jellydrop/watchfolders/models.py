"""
Drop folder models.

WatchedItem is what a scan yields; StabilitySample and StabilityCheck are
what the stability prober reports. None of them are persisted.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class WatchedItem(BaseModel):
    """
    A top-level entry of the drop folder that may be dispatched.

    Identity is the absolute path. Items are rebuilt on every scan.
    """

    model_config = {"extra": "forbid"}

    path: str = Field(..., description="Absolute path to the file or directory")
    name: str = Field(..., description="Basename of the entry")
    is_dir: bool = Field(default=False, description="True for directories")
    discovered_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When this scan saw the entry",
    )

    @property
    def item_id(self) -> str:
        """Registry key for this item."""
        return self.path


class StabilitySample(BaseModel):
    """One (size, mtime) observation of a path."""

    model_config = {"extra": "forbid", "frozen": True}

    size_bytes: int
    mtime_ns: int


class StabilityCheck(BaseModel):
    """Result of a stability probe."""

    model_config = {"extra": "forbid"}

    path: str = Field(..., description="Path that was probed")
    is_stable: bool = Field(..., description="True once the required checks matched")
    size_bytes: Optional[int] = Field(default=None, description="Last observed size")
    check_count: int = Field(default=0, description="Consecutive unchanged samples")
    samples_taken: int = Field(default=0, description="Samples including the baseline")
    reason: Optional[str] = Field(default=None, description="Why the path is not stable")
