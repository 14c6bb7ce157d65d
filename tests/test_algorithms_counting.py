"""
Tests for counting algorithm helpers.
"""

import pytest

from algorithms.counting.direction import classify_direction, horizontal_position_policy
from algorithms.counting.line import should_be_counted
from algorithms.counting.proximity import distance, is_moving, is_similar_size
from algorithms.counting.utils import area, centroid, compute_line_position
from models.detection import Rectangle
from models.errors import InvalidDetection, NoActiveLine
from models.track import Direction, VehicleTrack


def _rect(cx, cy, w=50, h=50):
    return Rectangle.from_xywh(cx - w / 2, cy - h / 2, w, h)


def _track(center, direction=Direction.DOWNWARD, counted=False):
    return VehicleTrack(
        track_id=0,
        mass_center=center,
        size=2500.0,
        direction=direction,
        last_seen_at=0.0,
        counted=counted,
    )


class TestGeometry:
    def test_centroid(self):
        assert centroid(Rectangle.from_xywh(10, 20, 30, 40)) == (25.0, 40.0)

    def test_centroid_odd_dimensions_not_truncated(self):
        assert centroid(Rectangle.from_xywh(0, 0, 5, 3)) == (2.5, 1.5)

    def test_area(self):
        assert area(Rectangle.from_xywh(10, 20, 30, 40)) == 1200.0

    @pytest.mark.parametrize("w,h", [(0, 10), (10, 0), (-5, 10), (10, -1)])
    def test_non_positive_dimensions_rejected(self, w, h):
        rect = Rectangle.from_xywh(0, 0, w, h)
        with pytest.raises(InvalidDetection):
            centroid(rect)
        with pytest.raises(InvalidDetection):
            area(rect)

    def test_line_position_default_ratio(self):
        assert compute_line_position(500) == 300.0

    def test_line_position_custom_ratio(self):
        assert compute_line_position(400, 0.5) == 200.0

    @pytest.mark.parametrize("height", [0, -10, None])
    def test_line_position_requires_positive_height(self, height):
        with pytest.raises(NoActiveLine):
            compute_line_position(height)


class TestDirection:
    def test_left_of_threshold_is_downward(self):
        assert classify_direction(_rect(50, 250), 1000) is Direction.DOWNWARD

    def test_right_of_threshold_is_not_downward(self):
        assert classify_direction(_rect(750, 250), 1000) is Direction.NOT_DOWNWARD

    def test_threshold_itself_is_not_downward(self):
        assert classify_direction(_rect(700, 250), 1000) is Direction.NOT_DOWNWARD

    def test_policy_binds_threshold(self):
        policy = horizontal_position_policy(0.5)
        assert policy(_rect(450, 100), 1000) is Direction.DOWNWARD
        assert policy(_rect(550, 100), 1000) is Direction.NOT_DOWNWARD


class TestProximity:
    @pytest.mark.parametrize("new,expected", [
        ((120, 120), True),    # exactly +20%
        ((80, 80), True),      # exactly -20%
        ((100, 100), True),
        ((121, 100), False),
        ((79, 100), False),
        ((100, 121), False),
        ((100, 79), False),
    ])
    def test_window_boundaries(self, new, expected):
        assert is_moving((100, 100), new) is expected

    def test_window_is_anchored_on_old_center(self):
        # 120 is +20% of 100, but 100 is only -16.7% of 120
        assert is_moving((100, 100), (120, 100)) is True
        assert is_moving((120, 100), (100, 100)) is True
        # 80 is -20% of 100, but 100 is +25% of 80
        assert is_moving((80, 100), (100, 100)) is False

    def test_zero_coordinate_only_matches_zero(self):
        assert is_moving((0, 100), (0, 100)) is True
        assert is_moving((0, 100), (1, 100)) is False

    def test_custom_tolerance(self):
        assert is_moving((100, 100), (105, 105), tolerance=0.05) is True
        assert is_moving((100, 100), (106, 100), tolerance=0.05) is False

    def test_similar_size(self):
        assert is_similar_size(2500, 3000) is True
        assert is_similar_size(2500, 3001) is False
        assert is_similar_size(2500, 2000) is True
        assert is_similar_size(2500, 1999) is False

    def test_distance(self):
        assert distance((0, 0), (3, 4)) == 5.0
        assert distance((10, 10), (10, 10)) == 0.0


class TestShouldBeCounted:
    def test_downward_below_line(self):
        assert should_be_counted(_track((55, 310)), 300.0) is True

    def test_on_line_is_not_counted(self):
        assert should_be_counted(_track((55, 300)), 300.0) is False

    def test_above_line(self):
        assert should_be_counted(_track((55, 250)), 300.0) is False

    def test_not_downward(self):
        track = _track((750, 310), direction=Direction.NOT_DOWNWARD)
        assert should_be_counted(track, 300.0) is False

    def test_already_counted(self):
        assert should_be_counted(_track((55, 310), counted=True), 300.0) is False
