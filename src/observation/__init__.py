"""
Observation layer for pluggable frame sources.

This layer abstracts where frames come from (a camera, a video file, a
recorded detection log) from the processing loop. Each source implements
the ObservationSource interface and returns FrameData objects.
"""

from .base import ObservationSource, ObservationConfig
from .replay import DetectionLogSource, DetectionLogSourceConfig

__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "DetectionLogSource",
    "DetectionLogSourceConfig",
]
