"""
Cognitive analysis: problem solving, memory, attention and thinking style

Components:
- CognitiveAnalyzer: problem lifecycle, cognitive profile, load/flow/fatigue
- PatternDetector: breakthrough and fatigue rules
- ProblemEvent / ProblemSolvingRecord: puzzle lifecycle model
"""
from .cognitive_analyzer import (
    AttentionProfile,
    CognitiveAnalyzer,
    CognitiveProfile,
    MemoryEvent,
    ThinkingStyleProfile,
)
from .pattern_detector import FatigueAssessment, PatternDetector
from .problem_solving import (
    DEFAULT_EXPECTED_TIME,
    EXPECTED_SOLUTION_TIMES,
    ProblemEvent,
    ProblemEventType,
    ProblemSolvingPattern,
    ProblemSolvingRecord,
    ProblemStatus,
    SolvingApproach,
    calculate_efficiency,
    calculate_flexibility,
    calculate_persistence,
    calculate_processing_speed,
    classify_approach,
    expected_solution_time,
)

__all__ = [
    "AttentionProfile",
    "CognitiveAnalyzer",
    "CognitiveProfile",
    "MemoryEvent",
    "ThinkingStyleProfile",
    "FatigueAssessment",
    "PatternDetector",
    "DEFAULT_EXPECTED_TIME",
    "EXPECTED_SOLUTION_TIMES",
    "ProblemEvent",
    "ProblemEventType",
    "ProblemSolvingPattern",
    "ProblemSolvingRecord",
    "ProblemStatus",
    "SolvingApproach",
    "calculate_efficiency",
    "calculate_flexibility",
    "calculate_persistence",
    "calculate_processing_speed",
    "classify_approach",
    "expected_solution_time",
]
