import threading
import time
from typing import Any, Dict, List, Optional

from models.track import TrackState


class SharedState:
    """
    Counter snapshots shared between the frame loop and the web server.

    The frame loop is the only writer; the API thread only reads copies.
    The counter itself is never touched from the API thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0
        self._y_line: Optional[float] = None
        self._tracks: List[TrackState] = []
        self._frames_processed = 0
        self._start_time: Optional[float] = None
        self._last_frame_ts: Optional[float] = None

    def mark_started(self, start_time: Optional[float] = None):
        with self._lock:
            self._start_time = start_time if start_time is not None else time.time()

    def publish(
        self,
        count: int,
        y_line: Optional[float],
        tracks: List[TrackState],
        frames_processed: int,
        last_frame_ts: Optional[float] = None,
    ):
        """Replace the current snapshot."""
        with self._lock:
            self._count = count
            self._y_line = y_line
            self._tracks = list(tracks)
            self._frames_processed = frames_processed
            self._last_frame_ts = last_frame_ts

    def get_tracks(self) -> List[TrackState]:
        with self._lock:
            return list(self._tracks)

    def get_status(self) -> Dict[str, Any]:
        """Return a copy of the current counters."""
        with self._lock:
            uptime = None
            if self._start_time is not None:
                uptime = int(time.time() - self._start_time)
            return {
                "count": self._count,
                "active_tracks": len(self._tracks),
                "y_line": self._y_line,
                "frames_processed": self._frames_processed,
                "uptime_seconds": uptime,
                "last_frame_ts": self._last_frame_ts,
            }

    def reset(self):
        with self._lock:
            self._count = 0
            self._y_line = None
            self._tracks = []
            self._frames_processed = 0
            self._start_time = None
            self._last_frame_ts = None


# Global instance
state = SharedState()
