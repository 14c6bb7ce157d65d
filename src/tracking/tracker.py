"""
Vehicle tracking module for associating detections across video frames.

Each detection rectangle either extends an existing track (its centroid falls
inside the proximity window of the track's last centroid) or, if it lies above
the counting line, starts a new one. Tracks are kept in an insertion-ordered
arena keyed by track id so association is reproducible.

Note: Counting is NOT done here. Use `analytics.counter.LineCrossingCounter` for that.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from algorithms.counting.direction import DirectionPolicy, horizontal_position_policy
from algorithms.counting.proximity import distance, is_moving, is_similar_size
from algorithms.counting.utils import area, centroid
from models.detection import Rectangle
from models.track import VehicleTrack

MATCH_STRATEGIES = ("nearest", "first")


class AssociationOutcome(str, Enum):
    MATCHED = "MATCHED"
    CREATED = "CREATED"
    IGNORED = "IGNORED"


@dataclass(frozen=True)
class Association:
    """Result of associating one rectangle with the live track set."""
    outcome: AssociationOutcome
    track: Optional[VehicleTrack] = None


class VehicleTracker:
    """
    Tracks vehicles across frames using a percentage proximity window.

    This tracker is responsible for:
    - Matching rectangles to live tracks (one track per rectangle at most)
    - Creating tracks for unmatched rectangles above the counting line
    - Evicting tracks that stopped receiving detections

    Counting logic is handled separately by the counting engine.
    """

    def __init__(
        self,
        proximity_tolerance: float = 0.2,
        match_strategy: str = "nearest",
        max_idle_seconds: Optional[float] = 2.0,
        require_similar_size: bool = False,
        direction_policy: Optional[DirectionPolicy] = None,
    ):
        """
        Initialize the vehicle tracker.

        Args:
            proximity_tolerance: Relative window (+/-) around a track's centroid
                                 that a new centroid must fall into to match
            match_strategy: "nearest" picks the closest candidate centroid,
                            "first" picks the oldest candidate track
            max_idle_seconds: Tracks unseen for longer are evicted by
                              evict_stale(); None keeps them forever
            require_similar_size: Also require the rectangle area to fall in
                                  the proximity window of the track's size
            direction_policy: Classifies new tracks; defaults to the
                              horizontal position heuristic
        """
        if match_strategy not in MATCH_STRATEGIES:
            raise ValueError(f"match_strategy must be one of {MATCH_STRATEGIES}, got {match_strategy!r}")

        self.proximity_tolerance = proximity_tolerance
        self.match_strategy = match_strategy
        self.max_idle_seconds = max_idle_seconds
        self.require_similar_size = require_similar_size
        self.direction_policy = direction_policy or horizontal_position_policy()
        self.tracked_vehicles: Dict[int, VehicleTrack] = {}
        self.next_vehicle_id = 0

        logging.info(
            f"Vehicle tracker initialized (strategy={match_strategy}, "
            f"tolerance={proximity_tolerance}, max_idle_seconds={max_idle_seconds})"
        )

    def associate(self, rect: Rectangle, y_line: float, frame_width: float, now: float) -> Association:
        """
        Match a rectangle to a live track or start a new track.

        Args:
            rect: Detection rectangle for the current frame
            y_line: Counting line y coordinate for the current frame
            frame_width: Frame width, used to classify new tracks
            now: Unix timestamp of the observation

        Returns:
            Association with the outcome and the affected track

        Raises:
            InvalidDetection: If the rectangle has a non-positive dimension
        """
        center = centroid(rect)
        size = area(rect)

        track = self._find_match(center, size)
        if track is not None:
            track.update(center, size, now)
            return Association(AssociationOutcome.MATCHED, track)

        # Vehicles first seen at or below the line are mid-crossing; don't seed them
        if center[1] < y_line:
            return Association(AssociationOutcome.CREATED, self._create_track(rect, center, size, frame_width, now))

        return Association(AssociationOutcome.IGNORED)

    def _find_match(self, center, size) -> Optional[VehicleTrack]:
        """Pick the live track this centroid belongs to, if any."""
        candidates = [
            vehicle for vehicle in self.tracked_vehicles.values()
            if is_moving(vehicle.mass_center, center, self.proximity_tolerance)
            and (not self.require_similar_size
                 or is_similar_size(vehicle.size, size, self.proximity_tolerance))
        ]
        if not candidates:
            return None

        if self.match_strategy == "first":
            return candidates[0]

        # Arena order is creation order, so min() keeps the oldest on ties
        return min(candidates, key=lambda v: distance(v.mass_center, center))

    def _create_track(self, rect, center, size, frame_width, now) -> VehicleTrack:
        vehicle = VehicleTrack(
            track_id=self.next_vehicle_id,
            mass_center=center,
            size=size,
            direction=self.direction_policy(rect, frame_width),
            last_seen_at=now,
            created_at=now,
        )
        self.tracked_vehicles[vehicle.track_id] = vehicle
        self.next_vehicle_id += 1

        logging.debug(
            f"[TRACK] created #{vehicle.track_id} at ({center[0]:.1f}, {center[1]:.1f}) "
            f"direction={vehicle.direction.value}"
        )
        return vehicle

    def remove(self, track_id: int) -> Optional[VehicleTrack]:
        """Remove a track from the live set."""
        return self.tracked_vehicles.pop(track_id, None)

    def evict_stale(self, now: float) -> List[VehicleTrack]:
        """
        Remove tracks whose last association is older than max_idle_seconds.

        Returns:
            The evicted tracks (never counted)
        """
        if self.max_idle_seconds is None:
            return []

        stale = [
            vehicle for vehicle in self.tracked_vehicles.values()
            if vehicle.idle_seconds(now) > self.max_idle_seconds
        ]
        for vehicle in stale:
            del self.tracked_vehicles[vehicle.track_id]
            logging.debug(
                f"[TRACK] evicted #{vehicle.track_id} after {vehicle.idle_seconds(now):.2f}s idle"
            )
        return stale

    def get_active_tracks(self) -> List[VehicleTrack]:
        """Get list of live tracks in creation order."""
        return list(self.tracked_vehicles.values())

    def reset(self) -> None:
        """Drop all tracks and restart track ids."""
        self.tracked_vehicles.clear()
        self.next_vehicle_id = 0
