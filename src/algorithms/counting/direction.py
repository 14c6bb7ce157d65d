"""
Direction classification for new tracks.

The classification uses the horizontal position of the creating rectangle
as a stand-in for vertical travel direction: vehicles in the left part of
the frame are taken to be on the downward lane. Engines receive the policy
as a callable so it can be swapped for real motion-based inference.
"""

from __future__ import annotations

from typing import Callable

from models.detection import Rectangle
from models.track import Direction

from .utils import centroid

DirectionPolicy = Callable[[Rectangle, float], Direction]


def classify_direction(rect: Rectangle, frame_width: float, threshold_ratio: float = 0.7) -> Direction:
    """
    Classify a rectangle as DOWNWARD when its centroid x lies left of
    threshold_ratio * frame_width, NOT_DOWNWARD otherwise.
    """
    cx, _ = centroid(rect)
    if cx < frame_width * threshold_ratio:
        return Direction.DOWNWARD
    return Direction.NOT_DOWNWARD


def horizontal_position_policy(threshold_ratio: float = 0.7) -> DirectionPolicy:
    """Build a DirectionPolicy bound to a threshold ratio."""
    def policy(rect: Rectangle, frame_width: float) -> Direction:
        return classify_direction(rect, frame_width, threshold_ratio)
    return policy
