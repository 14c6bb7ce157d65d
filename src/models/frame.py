"""
FrameData model for frames entering the processing loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .detection import Rectangle


@dataclass
class FrameData:
    """
    Metadata and payload for one frame.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when the frame was captured.
        frame_index: Sequential frame number since start.
        frame: Raw image as a numpy array, when the source provides pixels.
        detections: Pre-computed rectangles, when the source replays a detector log.
        source: Identifier for the source.
    """
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    frame: Optional[np.ndarray] = None
    detections: Optional[List[Rectangle]] = None
    source: Optional[str] = None
