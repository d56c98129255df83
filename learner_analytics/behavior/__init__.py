"""
Behaviour analyzers

Each analyzer observes one telemetry stream, keeps its own rolling state and
pushes small weighted deltas into the shared LearnerProfileTracker.
"""
from .events import BehaviorEvent, BehaviorEventKind, RollingWindow

__all__ = [
    "BehaviorEvent",
    "BehaviorEventKind",
    "RollingWindow",
]
