"""
Learner profile aggregation

Components:
- LearnerProfileTracker: owns the learning-style simplex and session scalars
- SubscriptionHub / Subscription: synchronous observer registry
- LearningStyle / ProfileScalar: profile dimensions
"""
from .learning_styles import LearningStyle, ProfileScalar, STYLE_DISPLAY_NAMES
from .subscriptions import Subscription, SubscriptionHub, Topic
from .tracker import LearnerProfileTracker

__all__ = [
    "LearningStyle",
    "ProfileScalar",
    "STYLE_DISPLAY_NAMES",
    "Subscription",
    "SubscriptionHub",
    "Topic",
    "LearnerProfileTracker",
]
