"""
Tests for VehicleTracker association across synthetic sequences.
"""

import pytest

from models.detection import Rectangle
from models.errors import InvalidDetection
from models.track import Direction
from tracking.tracker import AssociationOutcome, VehicleTracker

Y_LINE = 300.0
WIDTH = 1000


def _rect(cx, cy, w=50, h=50):
    return Rectangle.from_xywh(cx - w / 2, cy - h / 2, w, h)


class TestTrackerBasics:
    """Basic tracker functionality tests."""

    def test_tracker_init(self):
        """Tracker initializes with default parameters."""
        tracker = VehicleTracker()

        assert tracker.proximity_tolerance == 0.2
        assert tracker.match_strategy == "nearest"
        assert tracker.max_idle_seconds == 2.0
        assert tracker.require_similar_size is False
        assert len(tracker.tracked_vehicles) == 0
        assert tracker.next_vehicle_id == 0

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValueError):
            VehicleTracker(match_strategy="random")

    def test_invalid_rectangle_leaves_state_untouched(self):
        tracker = VehicleTracker()
        tracker.associate(_rect(50, 250), Y_LINE, WIDTH, now=0.0)

        with pytest.raises(InvalidDetection):
            tracker.associate(Rectangle.from_xywh(40, 240, 0, 20), Y_LINE, WIDTH, now=0.1)

        assert len(tracker.tracked_vehicles) == 1
        track = tracker.tracked_vehicles[0]
        assert track.mass_center == (50.0, 250.0)
        assert track.last_seen_at == 0.0


class TestAssociation:
    """Match-or-create decisions."""

    def test_creates_track_above_line(self):
        tracker = VehicleTracker()

        result = tracker.associate(_rect(50, 250, 40, 30), Y_LINE, WIDTH, now=1.0)

        assert result.outcome is AssociationOutcome.CREATED
        track = result.track
        assert track.track_id == 0
        assert track.mass_center == (50.0, 250.0)
        assert track.size == 1200.0
        assert track.direction is Direction.DOWNWARD
        assert track.last_seen_at == 1.0
        assert track.counted is False

    def test_ignores_first_rectangle_below_line(self):
        tracker = VehicleTracker()

        result = tracker.associate(_rect(50, 350), Y_LINE, WIDTH, now=1.0)

        assert result.outcome is AssociationOutcome.IGNORED
        assert result.track is None
        assert len(tracker.tracked_vehicles) == 0

    def test_ignores_rectangle_exactly_on_line(self):
        tracker = VehicleTracker()

        result = tracker.associate(_rect(50, 300), Y_LINE, WIDTH, now=1.0)

        assert result.outcome is AssociationOutcome.IGNORED

    def test_match_updates_in_place(self):
        tracker = VehicleTracker()
        created = tracker.associate(_rect(100, 200), Y_LINE, WIDTH, now=1.0).track

        result = tracker.associate(_rect(110, 220, 60, 60), Y_LINE, WIDTH, now=1.1)

        assert result.outcome is AssociationOutcome.MATCHED
        assert result.track is created
        assert created.mass_center == (110.0, 220.0)
        assert created.size == 3600.0
        assert created.last_seen_at == 1.1
        assert created.observations == 2
        assert len(tracker.tracked_vehicles) == 1

    def test_direction_fixed_at_creation(self):
        """Direction is never recomputed as the track moves."""
        tracker = VehicleTracker()
        track = tracker.associate(_rect(650, 200), Y_LINE, WIDTH, now=0.0).track
        assert track.direction is Direction.DOWNWARD

        # Drifts right past 70% of the frame width
        tracker.associate(_rect(750, 210), Y_LINE, WIDTH, now=0.1)

        assert track.mass_center == (750.0, 210.0)
        assert track.direction is Direction.DOWNWARD

    def test_matched_rectangle_below_line_still_updates(self):
        tracker = VehicleTracker()
        track = tracker.associate(_rect(50, 280), Y_LINE, WIDTH, now=0.0).track

        result = tracker.associate(_rect(52, 320), Y_LINE, WIDTH, now=0.1)

        assert result.outcome is AssociationOutcome.MATCHED
        assert track.mass_center == (52.0, 320.0)

    def test_unmatched_rectangle_starts_second_track(self):
        tracker = VehicleTracker()
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)

        result = tracker.associate(_rect(400, 100), Y_LINE, WIDTH, now=0.0)

        assert result.outcome is AssociationOutcome.CREATED
        assert result.track.track_id == 1
        assert sorted(tracker.tracked_vehicles) == [0, 1]

    def test_size_check_when_enabled(self):
        tracker = VehicleTracker(require_similar_size=True)
        tracker.associate(_rect(100, 100, 50, 50), Y_LINE, WIDTH, now=0.0)

        # Same place, twice the area: treated as a different vehicle
        result = tracker.associate(_rect(100, 100, 100, 50), Y_LINE, WIDTH, now=0.1)

        assert result.outcome is AssociationOutcome.CREATED
        assert len(tracker.tracked_vehicles) == 2


class TestTieBreak:
    """Deterministic choice between several candidate tracks."""

    def test_two_overlapping_tracks_created(self):
        tracker = VehicleTracker(match_strategy="first")
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        # (125, 100) is outside 100's window, so it creates a track
        tracker.associate(_rect(125, 100), Y_LINE, WIDTH, now=0.0)
        assert len(tracker.tracked_vehicles) == 2

    def test_nearest_picks_closest_centroid(self):
        tracker = VehicleTracker(match_strategy="first")
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        tracker.associate(_rect(125, 100), Y_LINE, WIDTH, now=0.0)
        tracker.match_strategy = "nearest"

        result = tracker.associate(_rect(118, 100), Y_LINE, WIDTH, now=0.1)

        assert result.outcome is AssociationOutcome.MATCHED
        assert result.track.track_id == 1
        assert tracker.tracked_vehicles[0].mass_center == (100.0, 100.0)

    def test_first_picks_oldest_track(self):
        tracker = VehicleTracker(match_strategy="first")
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        tracker.associate(_rect(125, 100), Y_LINE, WIDTH, now=0.0)

        result = tracker.associate(_rect(118, 100), Y_LINE, WIDTH, now=0.1)

        assert result.track.track_id == 0
        assert tracker.tracked_vehicles[1].mass_center == (125.0, 100.0)

    def test_equal_distance_prefers_oldest(self):
        tracker = VehicleTracker(match_strategy="first")
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        tracker.associate(_rect(121, 100), Y_LINE, WIDTH, now=0.0)
        tracker.match_strategy = "nearest"

        result = tracker.associate(_rect(110.5, 100), Y_LINE, WIDTH, now=0.1)

        assert result.track.track_id == 0

    def test_rectangle_updates_only_one_track(self):
        tracker = VehicleTracker(match_strategy="first")
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        tracker.associate(_rect(125, 100), Y_LINE, WIDTH, now=0.0)

        tracker.associate(_rect(118, 100), Y_LINE, WIDTH, now=0.5)

        seen = [t.last_seen_at for t in tracker.get_active_tracks()]
        assert seen.count(0.5) == 1


class TestEviction:
    """Idle tracks are dropped by evict_stale."""

    def test_stale_track_evicted(self):
        tracker = VehicleTracker(max_idle_seconds=1.0)
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)

        evicted = tracker.evict_stale(now=1.5)

        assert [t.track_id for t in evicted] == [0]
        assert len(tracker.tracked_vehicles) == 0
        assert evicted[0].counted is False

    def test_recent_track_kept(self):
        tracker = VehicleTracker(max_idle_seconds=1.0)
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)

        assert tracker.evict_stale(now=1.0) == []
        assert len(tracker.tracked_vehicles) == 1

    def test_eviction_disabled(self):
        tracker = VehicleTracker(max_idle_seconds=None)
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)

        assert tracker.evict_stale(now=1e6) == []
        assert len(tracker.tracked_vehicles) == 1

    def test_evicted_track_no_longer_absorbs_detections(self):
        tracker = VehicleTracker(max_idle_seconds=1.0)
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)
        tracker.evict_stale(now=5.0)

        result = tracker.associate(_rect(105, 105), Y_LINE, WIDTH, now=5.0)

        assert result.outcome is AssociationOutcome.CREATED
        assert result.track.track_id == 1

    def test_reset(self):
        tracker = VehicleTracker()
        tracker.associate(_rect(100, 100), Y_LINE, WIDTH, now=0.0)

        tracker.reset()

        assert tracker.tracked_vehicles == {}
        assert tracker.next_vehicle_id == 0
