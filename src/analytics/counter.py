"""
Line crossing counter.

Owns the live track set, the running count and the event sinks. The frame
loop hands it every detection rectangle of every frame; it associates each
rectangle with a track and counts a track once, when a downward vehicle
moves below the counting line.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from algorithms.counting.direction import DirectionPolicy, horizontal_position_policy
from algorithms.counting.line import should_be_counted
from algorithms.counting.utils import compute_line_position
from models.config import Config
from models.count_event import CountEvent
from models.detection import Rectangle
from models.errors import InvalidDetection
from models.track import TrackState, VehicleTrack
from tracking.tracker import Association, AssociationOutcome, VehicleTracker

EventSink = Callable[[CountEvent], None]


class LineCrossingCounter:
    """
    Tracking and counting engine for a single horizontal counting line.

    Not thread-safe: all calls must come from the one thread that drives
    the frame loop.

    Example:
        counter = LineCrossingCounter(tracker, sinks=[db.add_count_event])

        # Each frame:
        events = counter.observe_frame(rects, frame_w, frame_h, timestamp)
    """

    def __init__(
        self,
        tracker: Optional[VehicleTracker] = None,
        line_ratio: float = 0.6,
        category: str = "car",
        sinks: Optional[Iterable[EventSink]] = None,
    ):
        """
        Initialize the counter.

        Args:
            tracker: Track association state; a default tracker is created if omitted.
            line_ratio: Counting line position as a fraction of frame height.
            category: Label attached to count events.
            sinks: Callables notified with each CountEvent.
        """
        self.tracker = tracker or VehicleTracker()
        self.line_ratio = line_ratio
        self.category = category
        self._sinks: List[EventSink] = list(sinks or [])
        self._count = 0
        self._y_line: Optional[float] = None

    @property
    def count(self) -> int:
        """Number of vehicles counted this session."""
        return self._count

    @property
    def y_line(self) -> Optional[float]:
        """Counting line position used for the latest frame."""
        return self._y_line

    def add_sink(self, sink: EventSink) -> None:
        """Register a callable to be notified of each count event."""
        self._sinks.append(sink)

    def observe(
        self,
        rect: Rectangle,
        frame_width: float,
        frame_height: float,
        y_line: float,
        now: float,
    ) -> Association:
        """
        Process one detection rectangle of the current frame.

        Raises:
            NoActiveLine: If frame_height is not positive.
            InvalidDetection: If the rectangle has a non-positive dimension.
                              Track state is left untouched.
        """
        association, _ = self._observe(rect, frame_width, frame_height, y_line, now)
        return association

    def _observe(
        self,
        rect: Rectangle,
        frame_width: float,
        frame_height: float,
        y_line: float,
        now: float,
    ) -> Tuple[Association, Optional[CountEvent]]:
        compute_line_position(frame_height, self.line_ratio)
        if not rect.is_valid:
            raise InvalidDetection(
                f"Rectangle must have positive width and height, got {rect.width}x{rect.height}"
            )

        association = self.tracker.associate(rect, y_line, frame_width, now)
        event = None
        if association.outcome is AssociationOutcome.MATCHED:
            event = self._count_if_crossed(association.track, y_line)
        return association, event

    def observe_frame(
        self,
        rects: Iterable[Rectangle],
        frame_width: float,
        frame_height: float,
        now: float,
    ) -> List[CountEvent]:
        """
        Process all detection rectangles of one frame.

        Each rectangle gets its own association attempt, so one frame can
        create several tracks and extend several others. Invalid rectangles
        are skipped without affecting the rest of the frame. Tracks idle for
        longer than the tracker allows are evicted before any rectangle of the
        frame is associated.

        Returns:
            Count events produced by this frame.

        Raises:
            NoActiveLine: If frame_height is not positive; no rectangle is processed.
        """
        y_line = compute_line_position(frame_height, self.line_ratio)
        self._y_line = y_line
        self.tracker.evict_stale(now)

        count_before = self._count
        events: List[CountEvent] = []
        for rect in rects:
            try:
                _, event = self._observe(rect, frame_width, frame_height, y_line, now)
            except InvalidDetection as e:
                logging.warning(f"Skipping detection: {e}")
                continue
            if event is not None:
                events.append(event)

        if self._count != count_before:
            logging.debug(f"Frame at {now:.3f}: {self._count - count_before} counted, total={self._count}")
        return events

    def _count_if_crossed(self, track: VehicleTrack, y_line: float) -> Optional[CountEvent]:
        if not should_be_counted(track, y_line):
            return None

        track.counted = True
        self._count += 1
        self.tracker.remove(track.track_id)

        event = CountEvent.from_track(track, self.category, self._count)
        logging.info(
            f"Vehicle {track.track_id} counted: category={self.category}, "
            f"center=({track.mass_center[0]:.1f}, {track.mass_center[1]:.1f}), total={self._count}"
        )
        self._notify(event)
        return event

    def _notify(self, event: CountEvent) -> None:
        for sink in self._sinks:
            try:
                sink(event)
            except Exception as e:
                logging.warning(f"Event sink error: {e}")

    def get_track_states(self) -> List[TrackState]:
        """Immutable snapshots of the live tracks."""
        return [TrackState.from_track(t) for t in self.tracker.get_active_tracks()]

    def reset(self) -> None:
        """Start a new counting session: zero the count and drop all tracks."""
        self._count = 0
        self._y_line = None
        self.tracker.reset()
        logging.info("Counter reset")


def create_counter_from_config(
    config: Config,
    sinks: Optional[Iterable[EventSink]] = None,
    direction_policy: Optional[DirectionPolicy] = None,
) -> LineCrossingCounter:
    """
    Factory function to create a LineCrossingCounter from typed config.

    Args:
        config: Application config.
        sinks: Event sinks to register.
        direction_policy: Overrides the horizontal position heuristic.
    """
    tracker = VehicleTracker(
        proximity_tolerance=config.counting.proximity_tolerance,
        match_strategy=config.tracking.match_strategy,
        max_idle_seconds=config.tracking.max_idle_seconds,
        require_similar_size=config.tracking.require_similar_size,
        direction_policy=direction_policy or horizontal_position_policy(config.counting.direction_threshold),
    )
    return LineCrossingCounter(
        tracker=tracker,
        line_ratio=config.counting.line_ratio,
        category=config.counting.category,
        sinks=sinks,
    )
