"""
Counting algorithms for the line counter.

Pure helpers used by the tracker and the counting engine:
- utils: rectangle centroid/area and counting line position
- direction: direction classification policy for new tracks
- proximity: same-vehicle window tests
- line: counting condition for a matched track
"""

from .utils import area, centroid, compute_line_position
from .direction import DirectionPolicy, classify_direction, horizontal_position_policy
from .proximity import distance, is_moving, is_similar_size
from .line import should_be_counted

__all__ = [
    "area",
    "centroid",
    "compute_line_position",
    "DirectionPolicy",
    "classify_direction",
    "horizontal_position_policy",
    "distance",
    "is_moving",
    "is_similar_size",
    "should_be_counted",
]
