"""
Track models for vehicle tracking state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    """Direction of travel, decided once when a track is created."""
    DOWNWARD = "DOWNWARD"
    NOT_DOWNWARD = "NOT_DOWNWARD"


@dataclass
class VehicleTrack:
    """
    A vehicle tracked across video frames.

    Attributes:
        track_id: Unique identifier for this track within a session.
        mass_center: Centroid (cx, cy) of the latest associated rectangle.
        size: Area of the latest associated rectangle in pixels.
        direction: Direction classification made at creation.
        last_seen_at: Unix timestamp of the latest association.
        created_at: Unix timestamp of the creating rectangle.
        counted: Whether this track has triggered a count event.
        observations: Number of rectangles associated so far.
    """
    track_id: int
    mass_center: Tuple[float, float]
    size: float
    direction: Direction
    last_seen_at: float
    created_at: float = 0.0
    counted: bool = False
    observations: int = 1

    def update(self, mass_center: Tuple[float, float], size: float, now: float) -> None:
        """Replace position and size with the latest rectangle's values."""
        self.mass_center = mass_center
        self.size = size
        self.last_seen_at = now
        self.observations += 1

    def idle_seconds(self, now: float) -> float:
        return now - self.last_seen_at


@dataclass(frozen=True)
class TrackState:
    """
    Immutable snapshot of a tracked vehicle (for serialization/API).
    """
    track_id: int
    mass_center: Tuple[float, float]
    size: float
    direction: str
    last_seen_at: float
    observations: int = 1

    @classmethod
    def from_track(cls, track: VehicleTrack) -> "TrackState":
        """Create immutable snapshot from a VehicleTrack."""
        return cls(
            track_id=track.track_id,
            mass_center=track.mass_center,
            size=track.size,
            direction=track.direction.value,
            last_seen_at=track.last_seen_at,
            observations=track.observations,
        )

    def to_dict(self) -> dict:
        return {
            "track_id": self.track_id,
            "mass_center": list(self.mass_center),
            "size": self.size,
            "direction": self.direction,
            "last_seen_at": self.last_seen_at,
            "observations": self.observations,
        }
