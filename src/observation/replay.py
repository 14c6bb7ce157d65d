"""
Replay source for recorded detector output.

Reads a YAML detection log and yields one FrameData per recorded frame,
with the frame's rectangles attached. Useful for running the counter
offline against the output of any detector.

Log format:

    frame_width: 1000
    frame_height: 500
    fps: 30
    start_time: 1700000000.0   # optional, defaults to the time of open()
    frames:
      - [[25, 225, 50, 50]]                  # list of [x, y, w, h]
      - detections: [[30, 280, 50, 50]]      # or a mapping
        timestamp: 1700000000.5              # optional per-frame overrides
        frame_height: 500
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from models.detection import Rectangle
from models.frame import FrameData
from .base import ObservationSource, ObservationConfig


@dataclass
class DetectionLogSourceConfig(ObservationConfig):
    """
    Configuration for the detection log replay source.

    Attributes:
        path: Path to the YAML detection log.
        realtime: Sleep between frames to respect the recorded fps.
    """
    path: str = ""
    realtime: bool = False


class DetectionLogSource(ObservationSource):
    """Observation source that replays recorded detection rectangles."""

    def __init__(self, config: DetectionLogSourceConfig):
        super().__init__(config)
        self._log_config = config
        self._frames: List[Any] = []
        self._pos = 0
        self._frame_width = 0
        self._frame_height = 0
        self._fps = 30.0
        self._start_time = 0.0

    def open(self) -> None:
        path = self._log_config.path
        if not path or not os.path.exists(path):
            raise RuntimeError(f"Detection log not found: {path!r}")

        with open(path, "r") as f:
            log = yaml.safe_load(f) or {}

        self._load(log)
        self._is_open = True
        self._pos = 0
        self._frame_index = 0
        logging.info(
            f"Detection log opened: {path} ({len(self._frames)} frames, "
            f"{self._frame_width}x{self._frame_height} @ {self._fps} fps)"
        )

    def _load(self, log: Dict[str, Any]) -> None:
        fps = float(log.get("fps", 30))
        if fps <= 0:
            raise RuntimeError(f"Detection log fps must be positive, got {fps}")
        self._fps = fps
        self._frame_width = int(log.get("frame_width", 0))
        self._frame_height = int(log.get("frame_height", 0))
        if self._frame_width <= 0 or self._frame_height <= 0:
            raise RuntimeError(
                f"Detection log needs positive frame_width and frame_height, "
                f"got {self._frame_width}x{self._frame_height}"
            )
        self._start_time = float(log.get("start_time", time.time()))
        self._frames = list(log.get("frames") or [])

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._frames)

    def read(self) -> Optional[FrameData]:
        if not self._is_open or self._pos >= len(self._frames):
            return None

        pos = self._pos
        entry = self._frames[pos]
        # Advance first so a malformed entry is never re-read
        self._pos += 1
        self._frame_index += 1

        if isinstance(entry, dict):
            boxes = entry.get("detections") or []
            timestamp = entry.get("timestamp")
            width = int(entry.get("frame_width", self._frame_width))
            height = int(entry.get("frame_height", self._frame_height))
        else:
            boxes = entry or []
            timestamp = None
            width, height = self._frame_width, self._frame_height

        if timestamp is None:
            timestamp = self._start_time + pos / self._fps

        if self._log_config.realtime and pos > 0:
            time.sleep(1.0 / self._fps)

        return FrameData(
            width=width,
            height=height,
            timestamp=float(timestamp),
            frame_index=self._frame_index,
            detections=self._parse_boxes(boxes),
            source=self.source_id,
        )

    def _parse_boxes(self, boxes: Any) -> List[Rectangle]:
        """Convert recorded [x, y, w, h] boxes, skipping malformed entries."""
        if not isinstance(boxes, list):
            logging.warning(f"Frame {self._frame_index}: detections must be a list, got {boxes!r}")
            return []

        rects = []
        for box in boxes:
            try:
                if len(box) < 4:
                    raise ValueError("expected [x, y, w, h]")
                rects.append(Rectangle.from_xywh(*box[:4]))
            except (TypeError, ValueError, IndexError) as e:
                logging.warning(f"Frame {self._frame_index}: skipping malformed box {box!r}: {e}")
        return rects

    def close(self) -> None:
        self._is_open = False
