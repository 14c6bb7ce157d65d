"""
Detection models for detector output rectangles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np


@dataclass(frozen=True)
class Rectangle:
    """
    An axis-aligned detection rectangle in pixel coordinates.

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Rectangle width in pixels.
        height: Rectangle height in pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        """Whether both dimensions are strictly positive."""
        return self.width > 0 and self.height > 0

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> "Rectangle":
        """Create from (x, y, width, height) format."""
        return cls(x=float(x), y=float(y), width=float(w), height=float(h))

    @classmethod
    def from_numpy_row(cls, row: np.ndarray) -> "Rectangle":
        """
        Adapter: Convert a numpy row [x, y, w, h, ...] to a Rectangle.

        Extra columns (confidence, class id) are ignored.
        """
        return cls.from_xywh(row[0], row[1], row[2], row[3])


def rectangles_from_numpy(arr: np.ndarray) -> List[Rectangle]:
    """
    Adapter: Convert an (N, 4+) array of [x, y, w, h] rows to Rectangles.
    """
    if arr is None or len(arr) == 0:
        return []
    return [Rectangle.from_numpy_row(row) for row in np.asarray(arr, dtype=float)]

