"""
Pipeline engine for the line counter.

This module runs the frame processing loop: it reads frames from an
observation source, obtains each frame's detection rectangles, feeds them
to the counter, and publishes counter snapshots for the status API.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from analytics.counter import LineCrossingCounter
from detection.base import Detector
from models.config import Config
from models.count_event import CountEvent
from models.detection import Rectangle, rectangles_from_numpy
from models.errors import NoActiveLine
from models.frame import FrameData
from observation.base import ObservationSource


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        max_consecutive_failures: Max frame read failures before stopping.
        retry_delay: Seconds to wait after a failed read.
        stats_log_interval: Seconds between status log messages.
        cleanup_interval: Seconds between database cleanup runs.
        retention_days: Days of data to retain in database.
    """
    max_consecutive_failures: int = 10
    retry_delay: float = 0.5
    stats_log_interval: float = 60.0
    cleanup_interval: float = 86400.0  # 24 hours
    retention_days: int = 30


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    vehicle_count: int = 0
    detection_count: int = 0
    skipped_frames: int = 0
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)
    last_cleanup_time: float = field(default_factory=time.time)
    consecutive_failures: int = 0


class PipelineEngine:
    """
    Main processing loop around a LineCrossingCounter.

    This engine:
    - Reads frames from any ObservationSource
    - Gets rectangles from the detector, or from the frame's recorded detections
    - Feeds every rectangle of the frame to the counter
    - Skips frames without a usable counting line
    - Publishes counter snapshots to the shared state (if any)

    Example:
        source = DetectionLogSource(DetectionLogSourceConfig(path="run.yaml"))
        engine = PipelineEngine(source, counter, PipelineConfig())
        engine.run()
    """

    def __init__(
        self,
        source: ObservationSource,
        counter: LineCrossingCounter,
        config: PipelineConfig,
        detector: Optional[Detector] = None,
        state: Any = None,
        db: Any = None,
    ):
        self.source = source
        self.counter = counter
        self.config = config
        self.detector = detector
        self.state = state
        self.db = db
        self.stats = PipelineStats()
        self._running = False
        self._callbacks: List[Callable[[FrameData, List[CountEvent]], None]] = []

    def add_callback(self, callback: Callable[[FrameData, List[CountEvent]], None]) -> None:
        """
        Add a callback to be called after each frame is processed.

        Args:
            callback: Function taking (frame_data, events) as arguments.
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """
        Run the main processing loop.

        Opens the observation source, processes frames until stopped or
        exhausted, then closes resources.
        """
        self._running = True
        self.stats = PipelineStats()
        if self.state is not None:
            self.state.mark_started(self.stats.start_time)

        try:
            self.source.open()
            logging.info(f"Pipeline started: source={self.source.source_id}")

            while self._running:
                try:
                    frame_data = self.source.read()
                except Exception as e:
                    logging.error(f"Frame read error: {e}")
                    frame_data = None

                if frame_data is None:
                    if self.source.exhausted:
                        logging.info("Source exhausted")
                        break
                    self.stats.consecutive_failures += 1
                    if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                        logging.error(
                            f"Too many consecutive failures ({self.stats.consecutive_failures}), stopping"
                        )
                        break
                    logging.warning(
                        f"Frame read failed ({self.stats.consecutive_failures}/"
                        f"{self.config.max_consecutive_failures})"
                    )
                    time.sleep(self.config.retry_delay)
                    continue

                self.stats.consecutive_failures = 0
                events = self.process_frame(frame_data)

                for callback in self._callbacks:
                    try:
                        callback(frame_data, events)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def process_frame(self, frame_data: FrameData) -> List[CountEvent]:
        """
        Feed one frame's rectangles to the counter.

        Returns list of count events from this frame.
        """
        self.stats.frame_count += 1
        rects = self._get_rectangles(frame_data)
        self.stats.detection_count += len(rects)

        try:
            events = self.counter.observe_frame(
                rects, frame_data.width, frame_data.height, frame_data.timestamp
            )
        except NoActiveLine as e:
            self.stats.skipped_frames += 1
            logging.warning(f"Skipping frame {frame_data.frame_index}: {e}")
            events = []
        except Exception as e:
            # One bad frame must not end the session
            self.stats.skipped_frames += 1
            logging.error(f"Error processing frame {frame_data.frame_index}: {e}")
            events = []

        self.stats.vehicle_count += len(events)

        if self.state is not None:
            self.state.publish(
                count=self.counter.count,
                y_line=self.counter.y_line,
                tracks=self.counter.get_track_states(),
                frames_processed=self.stats.frame_count,
                last_frame_ts=frame_data.timestamp,
            )

        if self.stats.frame_count % 30 == 0:
            logging.debug(
                f"[TRACK] frame={self.stats.frame_count} "
                f"active_ids={[t.track_id for t in self.counter.tracker.get_active_tracks()]}"
            )

        return events

    def _get_rectangles(self, frame_data: FrameData) -> List[Rectangle]:
        if self.detector is not None and frame_data.frame is not None:
            try:
                return rectangles_from_numpy(self.detector.detect(frame_data.frame))
            except Exception as e:
                logging.error(f"Detector error on frame {frame_data.frame_index}: {e}")
                return []
        return list(frame_data.detections or [])

    def _handle_periodic_tasks(self) -> None:
        """Run periodic tasks (logging, cleanup)."""
        now = time.time()

        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            logging.info(
                f"Pipeline stats: frames={self.stats.frame_count}, "
                f"vehicles={self.stats.vehicle_count}, "
                f"active_tracks={len(self.counter.tracker.get_active_tracks())}, "
                f"skipped_frames={self.stats.skipped_frames}"
            )
            self.stats.last_stats_log_time = now

        if now - self.stats.last_cleanup_time >= self.config.cleanup_interval:
            if self.db is not None and hasattr(self.db, "cleanup_old_data"):
                self.db.cleanup_old_data(retention_days=self.config.retention_days)
                logging.info(f"Database cleanup completed (retention: {self.config.retention_days} days)")
            self.stats.last_cleanup_time = now

    def _cleanup(self) -> None:
        """Clean up resources."""
        self._running = False

        try:
            self.source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        logging.info(
            f"Pipeline stopped: frames={self.stats.frame_count}, vehicles={self.counter.count}"
        )


def create_engine_from_config(
    config: Config,
    source: ObservationSource,
    counter: LineCrossingCounter,
    detector: Optional[Detector] = None,
    state: Any = None,
    db: Any = None,
) -> PipelineEngine:
    """
    Factory function to create a PipelineEngine from typed config.

    Args:
        config: Application config.
        source: Frame source to read from.
        counter: Counter fed by the engine.
        detector: Optional detector for sources that provide pixels.
        state: Shared state receiving counter snapshots.
        db: Database used for periodic retention cleanup.
    """
    pipeline_config = PipelineConfig(retention_days=config.storage.retention_days)
    return PipelineEngine(source, counter, pipeline_config, detector=detector, state=state, db=db)
