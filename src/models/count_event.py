"""
CountEvent model for line crossing events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .track import VehicleTrack


@dataclass(frozen=True)
class CountEvent:
    """
    A counting event emitted when a tracked vehicle crosses the counting line.

    Attributes:
        track_id: ID of the track that triggered the event.
        timestamp: Unix timestamp of the crossing observation.
        category: Vehicle category label (e.g., "car").
        center: Final centroid (cx, cy) of the track.
        size: Final rectangle area in pixels.
        direction: Direction code of the counted track.
        total: Running count after this event.
        track_age_s: Seconds between track creation and the crossing.
        observations: How many rectangles were associated with the track.
    """
    track_id: int
    timestamp: float
    category: str = "car"
    center: Tuple[float, float] = (0.0, 0.0)
    size: float = 0.0
    direction: str = "DOWNWARD"
    total: int = 0
    track_age_s: float = 0.0
    observations: int = 0

    @classmethod
    def from_track(cls, track: VehicleTrack, category: str, total: int) -> "CountEvent":
        """Build an event from a track that has just been counted."""
        return cls(
            track_id=track.track_id,
            timestamp=track.last_seen_at,
            category=category,
            center=track.mass_center,
            size=track.size,
            direction=track.direction.value,
            total=total,
            track_age_s=max(0.0, track.last_seen_at - track.created_at),
            observations=track.observations,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "track_id": self.track_id,
            "timestamp": self.timestamp,
            "category": self.category,
            "center_x": self.center[0],
            "center_y": self.center[1],
            "size": self.size,
            "direction": self.direction,
            "total": self.total,
            "track_age_s": self.track_age_s,
            "observations": self.observations,
        }
