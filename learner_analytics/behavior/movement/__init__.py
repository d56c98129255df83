"""
Movement analysis: locomotion metrics and exploration signals
"""
from .movement_analyzer import MovementAnalyzer, MovementSnapshot, PathPoint

__all__ = [
    "MovementAnalyzer",
    "MovementSnapshot",
    "PathPoint",
]
