"""
Proximity tests deciding whether a detection is the same vehicle one frame later.
"""

from __future__ import annotations

import math
from typing import Tuple


def _within(old: float, new: float, tolerance: float) -> bool:
    return old * (1.0 - tolerance) <= new <= old * (1.0 + tolerance)


def is_moving(
    old_center: Tuple[float, float],
    new_center: Tuple[float, float],
    tolerance: float = 0.2,
) -> bool:
    """
    Check whether new_center lies in the percentage window around old_center.

    Both coordinates must fall within [(1 - t) * old, (1 + t) * old],
    inclusive. The window is anchored on the old centroid and shrinks to
    nothing for coordinates at zero.
    """
    return (
        _within(old_center[0], new_center[0], tolerance)
        and _within(old_center[1], new_center[1], tolerance)
    )


def is_similar_size(old_size: float, new_size: float, tolerance: float = 0.2) -> bool:
    """Check whether new_size lies within +/- tolerance of old_size."""
    return _within(old_size, new_size, tolerance)


def distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])
