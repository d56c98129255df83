"""
Session reporting
"""
from .report_builder import (
    DEFAULT_COGNITIVE_ANALYSIS,
    DEFAULT_DECISION_ANALYSIS,
    DEFAULT_MOVEMENT_ANALYSIS,
    PLACEHOLDER_SCORE,
    DetailedReportBuilder,
)

__all__ = [
    "DEFAULT_COGNITIVE_ANALYSIS",
    "DEFAULT_DECISION_ANALYSIS",
    "DEFAULT_MOVEMENT_ANALYSIS",
    "PLACEHOLDER_SCORE",
    "DetailedReportBuilder",
]
