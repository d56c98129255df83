"""
Gaze-based attention analysis
"""
from .attention_analyzer import (
    AttentionAnalyzer,
    AttentionMetrics,
    TargetCategory,
    classify_target,
    learning_style_indicator,
)

__all__ = [
    "AttentionAnalyzer",
    "AttentionMetrics",
    "TargetCategory",
    "classify_target",
    "learning_style_indicator",
]
