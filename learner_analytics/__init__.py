"""
Learner Analytics - behaviour-driven learner profiling

Turns gameplay telemetry (movement, gaze, puzzle solving, dialogue and
decisions) into a continuously updated learner profile: an 8-way
learning-style distribution, session engagement scalars, insights and
breakthroughs, and an end-of-session report.
"""
from learner_analytics.behavior.cognitive import ProblemEvent
from learner_analytics.behavior.social import DialogueChoice
from learner_analytics.core.exceptions import AnalyticsError, ProfileInvariantError
from learner_analytics.core.logging import setup_logging
from learner_analytics.profile import LearnerProfileTracker, LearningStyle, ProfileScalar, Topic
from learner_analytics.reporting import DetailedReportBuilder
from learner_analytics.schemas import (
    Breakthrough,
    DetailedReport,
    Insight,
    LearnerProfileSnapshot,
    RealTimeMetrics,
)
from learner_analytics.session import AnalyticsSession

__version__ = "1.0.0"

__all__ = [
    "AnalyticsSession",
    "AnalyticsError",
    "ProfileInvariantError",
    "Breakthrough",
    "DetailedReport",
    "DetailedReportBuilder",
    "DialogueChoice",
    "Insight",
    "LearnerProfileSnapshot",
    "LearnerProfileTracker",
    "LearningStyle",
    "ProblemEvent",
    "ProfileScalar",
    "RealTimeMetrics",
    "Topic",
    "setup_logging",
]
