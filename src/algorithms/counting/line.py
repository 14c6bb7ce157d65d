"""
Single horizontal line counting condition.

A track is counted once it is travelling downward and its centroid has
moved strictly below the counting line.
"""

from __future__ import annotations

from models.track import Direction, VehicleTrack


def should_be_counted(track: VehicleTrack, y_line: float) -> bool:
    """Return True when the matched track has just become eligible for counting."""
    if track.direction is not Direction.DOWNWARD:
        return False
    if track.counted:
        return False
    return track.mass_center[1] > y_line

