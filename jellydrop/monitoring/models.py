"""
Status snapshot published by the control loop.

Snapshots are immutable: the control thread builds a new one every tick and
the monitor API thread only ever reads the latest one.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobSummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    item_id: str
    handler: str
    pid: Optional[int] = None
    launched_at: datetime
    running_seconds: float


class WatcherStatus(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    state: str = Field(..., description="running | shutting_down | terminated")
    started_at: datetime
    last_tick_at: Optional[datetime] = None
    tick_count: int = 0
    max_concurrent_processors: int
    active_jobs: List[JobSummary] = Field(default_factory=list)
    drop_folder: Optional[str] = Field(default=None, description="None when drop folder watching is off")
    clipboard_sources: List[str] = Field(default_factory=list)
