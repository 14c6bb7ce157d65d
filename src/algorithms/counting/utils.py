"""
Counting utilities.

Geometry helpers shared by the tracker and the counting engine.
"""

from __future__ import annotations

from typing import Tuple

from models.detection import Rectangle
from models.errors import InvalidDetection, NoActiveLine


def _require_valid(rect: Rectangle) -> None:
    if not rect.is_valid:
        raise InvalidDetection(
            f"Rectangle must have positive width and height, got {rect.width}x{rect.height}"
        )


def centroid(rect: Rectangle) -> Tuple[float, float]:
    """Center of mass of a rectangle: (x + width/2, y + height/2)."""
    _require_valid(rect)
    return (rect.x + rect.width / 2.0, rect.y + rect.height / 2.0)


def area(rect: Rectangle) -> float:
    """Rectangle area in square pixels."""
    _require_valid(rect)
    return rect.width * rect.height


def compute_line_position(frame_height: float, line_ratio: float = 0.6) -> float:
    """
    Convert the configured line ratio into a y coordinate in pixels.

    Args:
        frame_height: Height of the current frame in pixels.
        line_ratio: Line position as a fraction of the frame height.

    Raises:
        NoActiveLine: If the frame height is missing or not positive.
    """
    if frame_height is None or frame_height <= 0:
        raise NoActiveLine(f"Cannot place counting line for frame height {frame_height}")
    return float(frame_height) * float(line_ratio)
