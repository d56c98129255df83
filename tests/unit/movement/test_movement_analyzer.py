"""
Unit tests for the MovementAnalyzer

Tests cover:
- Direction change detection
- Jitter filtering and distance accrual
- Per-frame speed tracking
- Zone dwell time and exploration
- Path buffer bound
"""

import pytest

from learner_analytics.behavior.movement import MovementAnalyzer
from learner_analytics.profile import LearningStyle, ProfileScalar


@pytest.fixture
def analyzer(tracker, clock):
    return MovementAnalyzer(tracker, sample_interval=0.5, clock=clock)


def l_shaped_path():
    """Ten samples: five along +x, then a 90 degree turn along +z"""
    straight = [(float(i), 0.0, 0.0) for i in range(5)]
    turned = [(4.0, 0.0, float(i)) for i in range(1, 6)]
    return straight + turned


class TestDirectionChanges:
    """Tests for heading-change detection"""

    def test_single_turn_counts_once(self, analyzer):
        """A 90 degree turn at point 5 is one direction change"""
        changes = [analyzer.record_sample(p, timestamp=0.5 * i) for i, p in enumerate(l_shaped_path())]

        assert analyzer.direction_changes == 1
        assert changes.count(True) == 1
        assert changes[5] is True

    def test_straight_line_has_no_changes(self, analyzer):
        """Constant heading never triggers"""
        for i in range(10):
            analyzer.record_sample((float(i), 0.0, 0.0), timestamp=0.5 * i)

        assert analyzer.direction_changes == 0

    def test_explicit_forward_vector(self, analyzer):
        """A supplied facing direction is used instead of displacement"""
        analyzer.record_sample((0.0, 0.0, 0.0), forward=(1.0, 0.0, 0.0), timestamp=0.0)
        analyzer.record_sample((0.0, 0.0, 0.0), forward=(0.0, 0.0, 1.0), timestamp=0.5)
        analyzer.record_sample((0.0, 0.0, 0.0), forward=(0.1, 0.0, 1.0), timestamp=1.0)

        assert analyzer.direction_changes == 1

    def test_gradual_turn_counts_each_crossing(self, analyzer):
        """Each 30 degree crossing from the reset reference counts once"""
        headings = [(1.0, 0.0, 0.0), (0.7, 0.0, 0.7), (0.0, 0.0, 1.0), (-0.7, 0.0, 0.7), (-1.0, 0.0, 0.0)]
        for i, h in enumerate(headings):
            analyzer.record_sample((0.0, 0.0, 0.0), forward=h, timestamp=0.5 * i)

        assert analyzer.direction_changes == 4


class TestDistance:
    """Tests for jitter filtering"""

    def test_jitter_ignored(self, analyzer):
        """Sub-threshold oscillation accrues no distance"""
        for i in range(10):
            x = 0.05 if i % 2 else 0.0
            analyzer.record_sample((x, 0.0, 0.0), timestamp=0.5 * i)

        assert analyzer.total_distance == 0.0
        assert len(analyzer.path) == 1
        assert analyzer.direction_changes == 0

    def test_distance_accrues(self, analyzer):
        """Movement beyond the threshold adds the displacement"""
        for p in l_shaped_path():
            analyzer.record_sample(p)

        assert analyzer.total_distance == pytest.approx(9.0)
        assert analyzer.get_movement_efficiency() == pytest.approx((4 ** 2 + 5 ** 2) ** 0.5 / 9.0)

    def test_two_dimensional_positions(self, analyzer):
        """(x, z) positions are accepted"""
        analyzer.record_sample((0.0, 0.0), timestamp=0.0)
        analyzer.record_sample((3.0, 4.0), timestamp=0.5)

        assert analyzer.total_distance == pytest.approx(5.0)

    def test_bad_position_rejected(self, analyzer):
        """Positions must be 2D or 3D"""
        with pytest.raises(ValueError):
            analyzer.record_sample((1.0,))

    def test_path_bounded(self, tracker, clock):
        """The path keeps only the newest points"""
        analyzer = MovementAnalyzer(tracker, max_path_points=5, clock=clock)
        for i in range(20):
            analyzer.record_sample((float(i), 0.0, 0.0), timestamp=float(i))

        path = analyzer.get_snapshot().path
        assert len(path) == 5
        assert path[-1] == (19.0, 0.0, 0.0)


class TestSpeed:
    """Tests for per-frame speed tracking"""

    def test_first_frame_only_sets_reference(self, analyzer):
        """No previous frame means no speed"""
        assert analyzer.track_speed((0.0, 0.0, 0.0), 0.1) == 0.0
        assert analyzer.average_speed == 0.0

    def test_zero_delta_time_skipped(self, analyzer):
        """Frames with non-positive dt are ignored"""
        analyzer.track_speed((0.0, 0.0, 0.0), 0.1)
        assert analyzer.track_speed((1.0, 0.0, 0.0), 0.0) == 0.0
        assert analyzer.max_speed == 0.0

    def test_speed_and_pace(self, analyzer):
        """Speed is distance over dt and drives pace classification"""
        analyzer.track_speed((0.0, 0.0, 0.0), 0.1)
        speed = analyzer.track_speed((0.2, 0.0, 0.0), 0.1)

        assert speed == pytest.approx(2.0)
        assert analyzer.get_preferred_pace() == "moderate"
        assert analyzer.time_moving == pytest.approx(0.1)

    def test_high_speed_nudges_kinesthetic(self, analyzer, tracker):
        """Sprinting raises the kinesthetic weight"""
        analyzer.track_speed((0.0, 0.0, 0.0), 0.1)
        analyzer.track_speed((1.0, 0.0, 0.0), 0.1)

        assert tracker.get_weight(LearningStyle.KINESTHETIC) > 0.125


class TestZones:
    """Tests for zone dwell and exploration"""

    def test_grid_zones_and_dwell_time(self, analyzer, tracker):
        """Crossing a grid boundary flushes dwell time and explores a new area"""
        analyzer.record_sample((10.0, 0.0, 10.0), timestamp=0.0)
        analyzer.record_sample((20.0, 0.0, 10.0), timestamp=4.0)
        analyzer.record_sample((60.0, 0.0, 10.0), timestamp=6.0)
        analyzer.record_sample((70.0, 0.0, 10.0), timestamp=9.0)

        times = analyzer.get_zone_times()
        assert times["zone_0_0"] == pytest.approx(6.0)
        assert times["zone_1_0"] == pytest.approx(3.0)
        assert analyzer.current_zone == "zone_1_0"
        assert tracker.get_session_metrics()["areas_explored"] == 2
        assert tracker.get_scalar(ProfileScalar.CURIOSITY) > 0.5

    def test_zone_change_event_recorded(self, analyzer):
        """Leaving a zone records a movement event"""
        analyzer.record_sample((10.0, 0.0, 10.0), timestamp=0.0)
        analyzer.record_sample((-10.0, 0.0, 10.0), timestamp=2.0)

        assert len(analyzer.events) == 1
        assert analyzer.events.last.payload["from_zone"] == "zone_0_0"
        assert analyzer.events.last.payload["to_zone"] == "zone_-1_0"

    def test_revisit_does_not_explore_again(self, analyzer, tracker):
        """Returning to a known zone is not a new area"""
        for i, x in enumerate([10.0, 60.0, 10.0]):
            analyzer.record_sample((x, 0.0, 0.0), timestamp=float(i))

        assert tracker.get_session_metrics()["areas_explored"] == 2

    def test_zone_resolver_and_explicit_zone(self, tracker, clock):
        """Explicit ids win over the resolver, which wins over the grid"""
        analyzer = MovementAnalyzer(tracker, zone_resolver=lambda p: "plaza", clock=clock)

        analyzer.record_sample((0.0, 0.0, 0.0), timestamp=0.0)
        assert analyzer.current_zone == "plaza"

        analyzer.record_sample((0.0, 0.0, 0.0), timestamp=1.0, zone_id="library")
        assert analyzer.current_zone == "library"

    def test_timestamps_never_go_backwards(self, analyzer):
        """Out-of-order timestamps are clamped"""
        analyzer.record_sample((10.0, 0.0, 10.0), timestamp=5.0)
        analyzer.record_sample((60.0, 0.0, 10.0), timestamp=3.0)

        assert analyzer.get_zone_times()["zone_0_0"] == pytest.approx(0.0)


class TestMovementAnalysis:
    """Tests for the report map"""

    def test_report_keys(self, analyzer):
        """Report map carries the classic exploration fields"""
        analysis = analyzer.get_movement_analysis()

        assert analysis["exploration_style"] == "stationary"
        assert analysis["preferred_pace"] == "slow"
        assert analysis["movement_efficiency"] == 0.0

    def test_wide_explorer(self, analyzer):
        """Visiting more than five zones is wide exploration"""
        for i in range(7):
            analyzer.record_sample((60.0 * i, 0.0, 0.0), timestamp=float(i))

        assert analyzer.get_exploration_style() == "wide_explorer"
