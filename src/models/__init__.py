"""
Typed models for the line counter.
"""

from .frame import FrameData
from .detection import Rectangle, rectangles_from_numpy
from .track import Direction, VehicleTrack, TrackState
from .count_event import CountEvent
from .errors import CountingError, InvalidDetection, NoActiveLine
from .config import (
    Config,
    CountingConfig,
    TrackingConfig,
    StorageConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "Rectangle",
    "rectangles_from_numpy",
    # Tracking
    "Direction",
    "VehicleTrack",
    "TrackState",
    # Counting
    "CountEvent",
    # Errors
    "CountingError",
    "InvalidDetection",
    "NoActiveLine",
    # Config
    "Config",
    "CountingConfig",
    "TrackingConfig",
    "StorageConfig",
    "WebConfig",
]
