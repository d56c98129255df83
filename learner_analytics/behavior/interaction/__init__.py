"""
Interaction and decision analysis
"""
from learner_analytics.behavior.interaction.interaction_analyzer import (
    DecisionRecord,
    InteractionAnalyzer,
    InteractionEvent,
    classify_interaction_target,
)

__all__ = [
    "DecisionRecord",
    "InteractionAnalyzer",
    "InteractionEvent",
    "classify_interaction_target",
]
