from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    count: int = Field(..., description="Vehicles counted this session")
    active_tracks: int = Field(..., description="Tracks currently in flight")
    y_line: Optional[float] = Field(None, description="Counting line position in pixels")
    frames_processed: int = 0
    uptime_seconds: Optional[int] = None
    last_frame_ts: Optional[float] = None


class TrackResponse(BaseModel):
    track_id: int
    mass_center: List[float]
    size: float
    direction: str
    last_seen_at: float
    observations: int


class CountEventResponse(BaseModel):
    id: int
    timestamp: float
    track_id: int
    category: str
    direction: str
    center_x: Optional[float] = None
    center_y: Optional[float] = None
    size: Optional[float] = None
    total: Optional[int] = None
    track_age_s: Optional[float] = None
    observations: Optional[int] = None


class CountsResponse(BaseModel):
    total: int = Field(..., description="Stored count events in the range")
    by_category: Dict[str, int] = Field(default_factory=dict)
    since: Optional[float] = None
