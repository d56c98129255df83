"""
Pattern Detector - Breakthrough and Fatigue Rules

Compares a completed problem against the running profile and the history of
earlier problems.

Breakthrough rules (any match emits one breakthrough per problem):
1. Insight: single-attempt solve in under 50% of the expected time
2. Processing speed: problem speed more than +0.3 above the profile value
3. Strategy: a successful approach that differs from the most common
   approach previously seen for that problem type

When several rules match, the type follows the order above and every match
is listed in Breakthrough.triggers.

Fatigue: over the last 5 completed problems, success rate < 0.4 and mean
efficiency < 0.4.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import logging

from learner_analytics.behavior.cognitive.problem_solving import (
    ProblemSolvingPattern,
    ProblemSolvingRecord,
    SolvingApproach,
)
from learner_analytics.schemas import Breakthrough

logger = logging.getLogger(__name__)


@dataclass
class FatigueAssessment:
    recent_success_rate: float
    recent_efficiency: float
    window: int


class PatternDetector:

    THRESHOLDS = {
        "speed_jump": 0.3,
        "insight_time_ratio": 0.5,
        "fatigue_window": 5,
        "fatigue_success_rate": 0.4,
        "fatigue_efficiency": 0.4,
        "baseline_performance": 0.5,
    }

    def __init__(self, custom_thresholds: Optional[Dict[str, float]] = None):
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}

    @staticmethod
    def common_approach(
        patterns: Dict[str, ProblemSolvingPattern],
        problem_type: str,
    ) -> Optional[SolvingApproach]:
        """Most frequent approach recorded for a problem type (None without history)"""
        relevant = [p for p in patterns.values() if p.problem_type == problem_type]
        if not relevant:
            return None
        # max() keeps the first-recorded pattern on ties
        return max(relevant, key=lambda p: p.occurrences).approach

    def detect_breakthrough(
        self,
        record: ProblemSolvingRecord,
        expected_time: float,
        profile_before: Dict[str, float],
        prior_patterns: Dict[str, ProblemSolvingPattern],
        trigger_event_id: str,
        timestamp: float,
    ) -> Optional[Breakthrough]:
        """
        Evaluate the breakthrough rules for one completed problem

        Args:
            record: Completed, classified problem with metrics filled in
            expected_time: Expected solve time for its type
            profile_before: processing_speed / flexibility before this problem
            prior_patterns: Pattern stats excluding this problem
            trigger_event_id: Id of the completion event
            timestamp: Detection time

        Returns:
            Breakthrough, or None when no rule matched
        """
        triggers: List[str] = []
        speed = record.metric("processing_speed")
        speed_before = profile_before.get("processing_speed", 0.5)

        if (
            record.solved
            and record.attempts == 1
            and record.solution_time < expected_time * self.thresholds["insight_time_ratio"]
        ):
            triggers.append("insight_breakthrough")

        if speed > speed_before + self.thresholds["speed_jump"]:
            triggers.append("processing_speed_breakthrough")

        if record.solved and record.approach is not None:
            common = self.common_approach(prior_patterns, record.problem_type)
            if common is not None and record.approach != common:
                triggers.append("strategy_breakthrough")

        if not triggers:
            return None

        breakthrough = Breakthrough(
            breakthrough_type=triggers[0],
            problem_id=record.problem_id,
            problem_type=record.problem_type,
            trigger_event_id=trigger_event_id,
            magnitude=record.metric("efficiency") - self.thresholds["baseline_performance"],
            before={
                "processing_speed": speed_before,
                "flexibility": profile_before.get("flexibility", 0.5),
            },
            after={
                "processing_speed": speed,
                "flexibility": record.metric("flexibility"),
            },
            triggers=triggers,
            timestamp=timestamp,
        )
        logger.info(f"Breakthrough {breakthrough.breakthrough_type} on {record.problem_id} ({', '.join(triggers)})")
        return breakthrough

    def assess_fatigue(self, completed: Sequence[ProblemSolvingRecord]) -> Optional[FatigueAssessment]:
        """
        Fatigue check over the most recent completed problems

        Returns:
            FatigueAssessment when fatigue is detected, otherwise None
        """
        window = int(self.thresholds["fatigue_window"])
        if len(completed) < window:
            return None

        recent = list(completed)[-window:]
        success_rate = sum(1 for r in recent if r.solved) / window
        efficiency = sum(r.metric("efficiency") for r in recent) / window

        if success_rate < self.thresholds["fatigue_success_rate"] and efficiency < self.thresholds["fatigue_efficiency"]:
            return FatigueAssessment(
                recent_success_rate=success_rate,
                recent_efficiency=efficiency,
                window=window,
            )
        return None
