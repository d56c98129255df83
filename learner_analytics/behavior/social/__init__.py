"""
Social behaviour analysis from dialogue choices
"""
from learner_analytics.behavior.social.lexical_scoring import (
    DialogueChoice,
    classify_emotional_context,
    classify_interaction_type,
    measure_assertiveness,
    measure_empathy,
    measure_logic,
    measure_warmth,
)
from learner_analytics.behavior.social.social_analyzer import (
    EmotionalState,
    RelationshipMetrics,
    SocialAnalyzer,
    SocialInteraction,
    SocialPatterns,
)

__all__ = [
    "DialogueChoice",
    "classify_emotional_context",
    "classify_interaction_type",
    "measure_assertiveness",
    "measure_empathy",
    "measure_logic",
    "measure_warmth",
    "EmotionalState",
    "RelationshipMetrics",
    "SocialAnalyzer",
    "SocialInteraction",
    "SocialPatterns",
]
