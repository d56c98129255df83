"""
Per-learner analytics session wiring
"""
from .analytics_session import AnalyticsSession

__all__ = ["AnalyticsSession"]
