"""
Unit tests for the SocialAnalyzer

Tests cover:
- Outcome classification per dialogue choice
- Relationship metrics per character
- Aggregate social patterns and trait insights
- Emotional state smoothing
- Report map
"""

import pytest

from learner_analytics.behavior.events import BehaviorEventKind
from learner_analytics.behavior.social import DialogueChoice, SocialAnalyzer
from learner_analytics.profile import LearningStyle


BOND = DialogueChoice("Thank you, I understand how you feel and I am glad to help and support you")
LEADER = DialogueChoice("I think we must act now, because the evidence is clear and therefore we win")
PLAIN = DialogueChoice("Okay")


@pytest.fixture
def analyzer(tracker, clock):
    return SocialAnalyzer(tracker, clock=clock)


class TestOutcomes:
    """Tests for per-choice outcome rules"""

    def test_strengthened_bond(self, analyzer):
        """Empathy plus warmth above 1.2"""
        interaction = analyzer.record_dialogue_choice("scribe", BOND, 3.0)

        assert interaction.outcome == "strengthened_bond"
        assert interaction.interaction_type == "supportive"
        assert interaction.emotional_context == "emotionally_supportive"

    def test_established_leadership(self, analyzer, tracker):
        """Assertive and logical choices establish leadership"""
        interaction = analyzer.record_dialogue_choice("guard", LEADER, 3.0)

        assert interaction.outcome == "established_leadership"
        assert interaction.emotional_context == "analytically_focused"
        assert tracker.get_weight(LearningStyle.LOGICAL_MATHEMATICAL) > 0.125

    @pytest.mark.parametrize("response_time,expected", [
        (1.0, "confident_interaction"),
        (3.0, "neutral_exchange"),
        (6.0, "thoughtful_exchange"),
    ])
    def test_response_time_outcomes(self, analyzer, response_time, expected):
        """Plain choices are classified by response time"""
        assert analyzer.record_dialogue_choice("scribe", PLAIN, response_time).outcome == expected

    def test_negative_response_time_clamped(self, analyzer):
        """Negative latency is treated as 0"""
        interaction = analyzer.record_dialogue_choice("scribe", PLAIN, -4.0)

        assert interaction.response_time == 0.0
        assert interaction.outcome == "confident_interaction"

    def test_interpersonal_weight_and_event(self, analyzer, tracker):
        """Every choice nudges interpersonal and records an event"""
        analyzer.record_dialogue_choice("scribe", PLAIN, 3.0)

        assert tracker.get_weight(LearningStyle.INTERPERSONAL) > 0.125
        events = tracker.get_events(BehaviorEventKind.SOCIAL_INTERACTION)
        assert len(events) == 1
        assert events[0].payload["character_id"] == "scribe"


class TestRelationships:
    """Tests for per-character relationship metrics"""

    def test_positive_interaction_builds_trust(self, analyzer):
        """Bond outcomes raise trust and rapport by 0.1"""
        analyzer.record_dialogue_choice("scribe", BOND, 3.0)
        metrics = analyzer.get_relationship("scribe")

        assert metrics.trust_level == pytest.approx(0.1)
        assert metrics.rapport_level == pytest.approx(0.1)
        assert metrics.positive_interaction_ratio == pytest.approx(1.0)

    def test_running_average_response_time(self, analyzer):
        """Average response time per character"""
        analyzer.record_dialogue_choice("scribe", PLAIN, 1.0)
        analyzer.record_dialogue_choice("scribe", PLAIN, 3.0)
        metrics = analyzer.get_relationship("scribe")

        assert metrics.interaction_count == 2
        assert metrics.average_response_time == pytest.approx(2.0)
        assert metrics.positive_interaction_ratio == 0.0

    def test_external_relationship_change(self, analyzer):
        """Host updates are clamped; unknown characters are ignored"""
        analyzer.record_dialogue_choice("scribe", PLAIN, 1.0)
        analyzer.on_relationship_changed("scribe", 1.5)
        analyzer.on_relationship_changed("stranger", 0.5)

        assert analyzer.get_relationship("scribe").trust_level == 1.0
        assert analyzer.get_relationship("stranger") is None

    def test_relationship_diversity(self, analyzer):
        """Even spread is 1.0, uneven spread is lower"""
        assert analyzer.get_relationship_diversity() == 0.0
        for character in ("a", "a", "a", "b"):
            analyzer.record_dialogue_choice(character, PLAIN, 1.0)

        assert analyzer.get_relationship_diversity() == pytest.approx(0.5)

        analyzer.record_dialogue_choice("b", PLAIN, 1.0)
        analyzer.record_dialogue_choice("b", PLAIN, 1.0)
        assert analyzer.get_relationship_diversity() == pytest.approx(1.0)


class TestPatterns:
    """Tests for aggregate pattern analysis"""

    def test_no_patterns_before_ten(self, analyzer):
        """Patterns wait for 10 interactions"""
        for _ in range(5):
            analyzer.record_dialogue_choice("scribe", BOND, 1.0)

        assert analyzer.patterns.social_confidence == 0.0
        assert analyzer.analyze_patterns() is None

    def test_patterns_after_ten(self, analyzer):
        """Confidence, empathy and style over the recent window"""
        for _ in range(10):
            analyzer.record_dialogue_choice("scribe", BOND, 1.0)

        patterns = analyzer.patterns
        assert patterns.social_confidence == pytest.approx((1.0 + 1.0 + 0.5) / 3)
        assert patterns.empathy_score == pytest.approx(0.8)
        assert patterns.communication_style == "nurturing_supportive"
        assert patterns.collaboration_score == pytest.approx(2.0 / 3.0)
        assert patterns.leadership_score == pytest.approx(0.5)
        assert patterns.prefers_group_interaction is False

    def test_trait_insight_emitted_once(self, analyzer, tracker):
        """A trait insight fires when the condition first holds"""
        for _ in range(15):
            analyzer.record_dialogue_choice("scribe", BOND, 1.0)

        insights = tracker.get_insights("high_empathy")
        assert len(insights) == 1
        assert insights[0].significance == pytest.approx(0.8)

    def test_emotional_awareness(self, analyzer, tracker):
        """Varied contexts with mostly supportive empathy"""
        for text in ("Wow!", "What? Why?", "Okay"):
            analyzer.record_dialogue_choice("scribe", DialogueChoice(text), 3.0)
        for _ in range(7):
            analyzer.record_dialogue_choice("scribe", BOND, 3.0)

        assert analyzer.patterns.shows_emotional_awareness is True
        assert len(tracker.get_insights("emotional_awareness")) == 1
        assert tracker.get_insights("high_empathy") == []

    def test_group_preference(self, analyzer):
        """Evenly spread interactions across three characters"""
        for i in range(10):
            analyzer.record_dialogue_choice(("a", "b", "c")[i % 3], PLAIN, 3.0)

        assert analyzer.patterns.prefers_group_interaction is True

    def test_pattern_event_recorded(self, analyzer, tracker):
        """Each analysis records a pattern event"""
        for _ in range(10):
            analyzer.record_dialogue_choice("scribe", PLAIN, 3.0)

        payloads = [e.payload for e in tracker.get_events(BehaviorEventKind.SOCIAL_INTERACTION)]
        assert sum(1 for p in payloads if p.get("event") == "social_pattern_analysis") == 1


class TestEmotionalState:
    """Tests for the periodic emotional update"""

    def test_tick_without_history(self, analyzer):
        """No interactions leave the state untouched"""
        state = analyzer.tick()
        assert state.current_mood == 0.0
        assert state.social_energy == pytest.approx(0.7)

    def test_tick_smooths_state(self, analyzer):
        """Mood and energy move toward recent interactions"""
        analyzer.record_dialogue_choice("scribe", BOND, 3.0)
        state = analyzer.tick()

        assert state.current_mood == pytest.approx(0.3)
        assert state.social_energy == pytest.approx(0.58)


class TestSocialAnalysis:
    """Tests for queries and the report map"""

    def test_average_response_time(self, analyzer):
        """Mean over all interactions, 0 when none"""
        assert analyzer.get_average_response_time() == 0.0
        analyzer.record_dialogue_choice("a", PLAIN, 2.0)
        analyzer.record_dialogue_choice("b", PLAIN, 4.0)
        assert analyzer.get_average_response_time() == pytest.approx(3.0)

    def test_default_style(self, analyzer):
        """Without strong traits the style is balanced"""
        assert analyzer.get_dominant_social_style() == "balanced_social_learner"

    def test_analysis_map(self, analyzer):
        """Report map carries metrics and relationships"""
        analyzer.record_dialogue_choice("scribe", BOND, 1.0)
        analysis = analyzer.get_social_analysis()

        assert analysis["total_interactions"] == 1
        assert "scribe" in analysis["relationships"]
        assert set(analysis["metrics"]) >= {"social_confidence", "empathy_level", "relationship_diversity"}
