"""
Unit tests for the AttentionAnalyzer

Tests cover:
- Target classification
- Extended focus insights
- Distraction counting
- Gaze stability
- Focus listeners and report map
"""

import pytest

from learner_analytics.behavior.attention import (
    AttentionAnalyzer,
    TargetCategory,
    classify_target,
    learning_style_indicator,
)
from learner_analytics.behavior.events import BehaviorEventKind
from learner_analytics.profile import LearningStyle, ProfileScalar


@pytest.fixture
def analyzer(tracker):
    return AttentionAnalyzer(tracker, poll_interval=0.1, focus_threshold=2.0)


def gaze(analyzer, target, seconds, hit_point=None):
    for _ in range(int(round(seconds / 0.1))):
        analyzer.observe(target, hit_point=hit_point, delta_time=0.1)


class TestClassification:
    """Tests for target naming rules"""

    @pytest.mark.parametrize("target,expected", [
        ("puzzle_A", TargetCategory.PUZZLE),
        ("npc_scribe", TargetCategory.CHARACTER),
        ("old_sign", TargetCategory.TEXT),
        ("wall_art", TargetCategory.VISUAL),
        ("object_cart", TargetCategory.OBJECT),
        ("barrel", TargetCategory.OBJECT),
    ])
    def test_classify_target(self, target, expected):
        assert classify_target(target) == expected

    def test_learning_style_indicator(self):
        """Name keywords map to learning styles"""
        assert learning_style_indicator("ancient_scroll") == LearningStyle.VERBAL_LINGUISTIC
        assert learning_style_indicator("gear_mechanism") == LearningStyle.LOGICAL_MATHEMATICAL
        assert learning_style_indicator("barrel") is None


class TestExtendedFocus:
    """Tests for the extended focus rule"""

    def test_three_seconds_on_puzzle_gives_one_insight(self, analyzer, tracker):
        """Gaze on puzzle_A for 3s yields exactly one extended-focus insight"""
        gaze(analyzer, "puzzle_A", 3.0)

        insights = tracker.get_insights("extended_focus")
        assert len(insights) == 1
        assert insights[0].data["target_id"] == "puzzle_A"
        assert insights[0].data["learning_style_indicator"] == "logical_mathematical"

    def test_below_threshold_no_insight(self, analyzer, tracker):
        """1.9s of focus is not extended"""
        gaze(analyzer, "puzzle_A", 1.9)

        assert tracker.get_insights("extended_focus") == []

    def test_once_per_target_per_session(self, analyzer, tracker):
        """Coming back to the same target does not fire again"""
        gaze(analyzer, "puzzle_A", 2.5)
        gaze(analyzer, "npc_guide", 0.5)
        gaze(analyzer, "puzzle_A", 2.5)

        assert len(tracker.get_insights("extended_focus")) == 1

    def test_extended_focus_raises_engagement(self, analyzer, tracker):
        """Extended focus nudges engagement upward"""
        gaze(analyzer, "puzzle_A", 2.0)

        assert tracker.get_scalar(ProfileScalar.ENGAGEMENT) > 0.5


class TestDistraction:
    """Tests for distraction counting"""

    def test_switching_targets_counts(self, analyzer):
        """Each switch to a different target is a distraction"""
        gaze(analyzer, "puzzle_A", 0.5)
        gaze(analyzer, "npc_guide", 0.5)
        gaze(analyzer, "puzzle_A", 0.5)

        assert analyzer.get_current_metrics().distraction_count == 2

    def test_looking_away_and_back_is_not_a_switch(self, analyzer):
        """Gaps with no target do not count"""
        gaze(analyzer, "puzzle_A", 0.5)
        analyzer.observe(None, delta_time=0.1)
        gaze(analyzer, "puzzle_A", 0.5)

        assert analyzer.get_current_metrics().distraction_count == 0


class TestFocusSpans:
    """Tests for span flushing"""

    def test_span_flushed_on_change(self, analyzer, tracker):
        """Ending a span records a gaze event and the duration"""
        gaze(analyzer, "wall_art", 1.0)
        analyzer.observe(None, delta_time=0.1)

        metrics = analyzer.get_current_metrics()
        assert metrics.focus_duration == pytest.approx(1.0)
        events = tracker.get_events(BehaviorEventKind.GAZE)
        assert len(events) == 1
        assert events[0].payload["category"] == "visual"
        assert tracker.get_weight(LearningStyle.VISUAL_SPATIAL) > 0.125

    def test_focus_listener_receives_spans(self, analyzer):
        """Listeners get (target, duration) per flushed span"""
        spans = []
        analyzer.add_focus_listener(lambda target, duration: spans.append((target, duration)))

        gaze(analyzer, "puzzle_A", 0.4)
        gaze(analyzer, "npc_guide", 0.2)
        analyzer.observe(None)

        assert [t for t, _ in spans] == ["puzzle_A", "npc_guide"]
        assert spans[0][1] == pytest.approx(0.4)

    def test_focus_intensity_and_heatmap(self, analyzer):
        """Intensity is the target's share of all gaze time"""
        gaze(analyzer, "puzzle_A", 0.3)
        gaze(analyzer, "npc_guide", 0.1)

        assert analyzer.calculate_focus_intensity("puzzle_A") == pytest.approx(0.75)
        assert analyzer.calculate_focus_intensity("unknown") == 0.0
        assert analyzer.get_most_attended_target() == "puzzle_A"
        assert analyzer.get_gaze_heatmap()["npc_guide"] == pytest.approx(0.1)


class TestGazeStability:
    """Tests for hit-point jitter"""

    def test_few_points_are_stable(self, analyzer):
        """Fewer than ten points reads as fully stable"""
        for i in range(5):
            analyzer.observe("puzzle_A", hit_point=(float(i), 0.0, 0.0))

        assert analyzer.calculate_gaze_stability() == 1.0

    def test_steady_gaze_is_stable(self, analyzer):
        """Identical hit points give stability 1"""
        for _ in range(15):
            analyzer.observe("puzzle_A", hit_point=(1.0, 1.0, 1.0))

        assert analyzer.calculate_gaze_stability() == pytest.approx(1.0)

    def test_jittery_gaze(self, analyzer):
        """Mean successive distance of 1 gives stability 0.5"""
        for i in range(12):
            analyzer.observe("puzzle_A", hit_point=(float(i % 2), 0.0, 0.0))

        assert analyzer.calculate_gaze_stability() == pytest.approx(0.5)

    def test_large_jitter_floors_at_zero(self, analyzer):
        """Jumps larger than the scale clamp to 0"""
        for i in range(12):
            analyzer.observe("puzzle_A", hit_point=(10.0 * (i % 2), 0.0, 0.0))

        assert analyzer.calculate_gaze_stability() == 0.0


class TestAttentionAnalysis:
    """Tests for the report map"""

    def test_category_time(self, analyzer):
        """Gaze time is grouped by category"""
        gaze(analyzer, "puzzle_A", 1.0)
        gaze(analyzer, "old_sign", 0.5)

        analysis = analyzer.get_attention_analysis()
        assert analysis["targets_viewed"] == 2
        assert analysis["category_attention_time"]["puzzle"] == pytest.approx(1.0)
        assert analysis["category_attention_time"]["text"] == pytest.approx(0.5)
