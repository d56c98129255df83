"""
Unit tests for dialogue lexical scoring

Tests cover:
- Word-start keyword matching
- Empathy, assertiveness, warmth and logic scores
- Interaction type and emotional context classification
"""

import pytest

from learner_analytics.behavior.social import (
    DialogueChoice,
    classify_emotional_context,
    classify_interaction_type,
    measure_assertiveness,
    measure_empathy,
    measure_logic,
    measure_warmth,
)
from learner_analytics.behavior.social.lexical_scoring import contains_word


class TestWordMatching:
    """Tests for keyword matching"""

    def test_matches_at_word_start(self):
        """A keyword matches the start of a longer word"""
        assert contains_word("i was helping", "help")

    def test_no_match_inside_word(self):
        """A keyword inside another word does not match"""
        assert not contains_word("tell me about it", "but")


class TestMarkers:
    """Tests for the per-choice marker scores"""

    def test_empathy_per_keyword(self):
        """Each empathy keyword adds 0.2"""
        assert measure_empathy(DialogueChoice("I understand how you feel")) == pytest.approx(0.4)

    def test_empathy_includes_relationship_change(self):
        """Positive relationship change adds to empathy"""
        choice = DialogueChoice("I understand", relationship_change=0.5)
        assert measure_empathy(choice) == pytest.approx(0.7)

    def test_empathy_clamped(self):
        """Empathy never exceeds 1.0"""
        choice = DialogueChoice("I understand, I feel sorry, I care and I support you", relationship_change=1.0)
        assert measure_empathy(choice) == 1.0

    @pytest.mark.parametrize("text,expected", [
        ("Okay", 0.5),
        ("I think we should definitely go", 1.0),
        ("Maybe we could try?", 0.2),
        ("Sorry, I was late", 0.3),
        ("I feel sorry for you", 0.5),
    ])
    def test_assertiveness(self, text, expected):
        """Assertive and hedging phrases move the 0.5 base"""
        assert measure_assertiveness(DialogueChoice(text)) == pytest.approx(expected)

    def test_warmth(self):
        """Warmth starts at 0.3 and adds 0.15 per keyword"""
        assert measure_warmth(DialogueChoice("Okay")) == pytest.approx(0.3)
        assert measure_warmth(DialogueChoice("Thank you, that was wonderful")) == pytest.approx(0.6)

    def test_logic_keywords(self):
        """Each reasoning keyword adds 0.2"""
        assert measure_logic(DialogueChoice("I think it works because of the evidence")) == pytest.approx(0.6)

    def test_logic_structure(self):
        """Ordered and conditional phrasing adds structure points"""
        assert measure_logic(DialogueChoice("First this, second that")) == pytest.approx(0.3)
        assert measure_logic(DialogueChoice("If it rains then we wait")) == pytest.approx(0.2)


class TestClassification:
    """Tests for interaction type and emotional context"""

    @pytest.mark.parametrize("text,expected", [
        ("Let me help you", "supportive"),
        ("I have a question", "inquisitive"),
        ("I agree", "agreeable"),
        ("But why would it?", "challenging"),
        ("Let me explain", "educational"),
        ("That was a funny one", "humorous"),
        ("Tell me about it", "neutral"),
    ])
    def test_interaction_type(self, text, expected):
        """First matching keyword group wins"""
        assert classify_interaction_type(DialogueChoice(text)) == expected

    def test_supportive_precedes_agreeable(self):
        """Order decides when several groups match"""
        assert classify_interaction_type(DialogueChoice("I understand and want to help")) == "supportive"

    def test_emotionally_supportive(self):
        """High empathy above logic"""
        assert classify_emotional_context(DialogueChoice("..."), empathy=0.8, logic=0.1) == "emotionally_supportive"

    def test_analytically_focused(self):
        """High logic above empathy"""
        assert classify_emotional_context(DialogueChoice("..."), empathy=0.1, logic=0.8) == "analytically_focused"

    def test_enthusiastic(self):
        """Exclamation marks read as enthusiasm"""
        assert classify_emotional_context(DialogueChoice("Wow!"), empathy=0.0, logic=0.0) == "enthusiastic"

    def test_highly_curious(self):
        """More than one question mark"""
        assert classify_emotional_context(DialogueChoice("What? Why?"), empathy=0.0, logic=0.0) == "highly_curious"

    def test_balanced(self):
        """Nothing stands out"""
        assert classify_emotional_context(DialogueChoice("Okay"), empathy=0.0, logic=0.0) == "balanced"
