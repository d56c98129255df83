"""
Detailed Report Builder

Assembles a DetailedReport from the tracker and whichever analyzers are
attached. Analyzers that are not attached contribute fixed default sections.

Apart from generated_at, two builds over the same state produce equal
reports: every section is derived from accumulated state, never from the
wall clock.
"""
from datetime import datetime, timezone
from typing import Dict, Optional
import logging

from learner_analytics.behavior.attention import AttentionAnalyzer
from learner_analytics.behavior.cognitive import CognitiveAnalyzer, SolvingApproach
from learner_analytics.behavior.interaction import InteractionAnalyzer
from learner_analytics.behavior.movement import MovementAnalyzer
from learner_analytics.behavior.social import SocialAnalyzer
from learner_analytics.behavior.stats import clamp01, safe_ratio
from learner_analytics.profile import LearnerProfileTracker, ProfileScalar
from learner_analytics.schemas import DetailedReport

logger = logging.getLogger(__name__)

# Fixed sections used when an analyzer is not attached
DEFAULT_DECISION_ANALYSIS = {
    "average_response_time": 2.5,
    "decision_confidence": 0.75,
    "pattern": "methodical",
}
DEFAULT_MOVEMENT_ANALYSIS = {
    "exploration_style": "systematic",
    "movement_efficiency": 0.8,
    "preferred_pace": "moderate",
}
DEFAULT_COGNITIVE_ANALYSIS = {
    "problem_solving_approach": "analytical",
    "learning_speed": "adaptive",
    "retention_estimate": 0.85,
}

# Skill metrics with no behavioural signal behind them yet
PLACEHOLDER_SCORE = 0.5


class DetailedReportBuilder:
    """
    Builds the end-of-session report

    Usage:
        builder = DetailedReportBuilder(tracker, cognitive=cognitive)
        report = builder.build()
        payload = report.model_dump(mode="json")
    """

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        cognitive: Optional[CognitiveAnalyzer] = None,
        movement: Optional[MovementAnalyzer] = None,
        attention: Optional[AttentionAnalyzer] = None,
        social: Optional[SocialAnalyzer] = None,
        interaction: Optional[InteractionAnalyzer] = None,
    ):
        self.tracker = tracker
        self.cognitive = cognitive
        self.movement = movement
        self.attention = attention
        self.social = social
        self.interaction = interaction

    def build(self) -> DetailedReport:
        snapshot = self.tracker.get_profile_snapshot()
        session_metrics = self.tracker.get_session_metrics()

        report = DetailedReport(
            generated_at=datetime.now(timezone.utc),
            session_duration=session_metrics["session_duration"],
            profile=snapshot,
            dominant_learning_style=snapshot.dominant_style,
            top_learning_styles=list(snapshot.top_styles),
            summary=self.tracker.get_profile_summary(),
            insights=self.tracker.get_insights() + self.tracker.generate_insights(),
            breakthroughs=self.tracker.get_breakthroughs(),
            session_metrics=session_metrics,
            cognitive_analysis=self._cognitive_section(),
            movement_analysis=self._movement_section(),
            attention_analysis=self.attention.get_attention_analysis() if self.attention else {},
            social_analysis=self.social.get_social_analysis() if self.social else {},
            decision_making_analysis=self._decision_section(),
            skill_development=self.build_skill_development(session_metrics),
        )
        logger.info(f"Detailed report built: {report.summary}")
        return report

    def _cognitive_section(self) -> Dict[str, object]:
        if self.cognitive is None:
            return dict(DEFAULT_COGNITIVE_ANALYSIS)
        return self.cognitive.get_cognitive_analysis()

    def _movement_section(self) -> Dict[str, object]:
        if self.movement is None:
            return dict(DEFAULT_MOVEMENT_ANALYSIS)
        return self.movement.get_movement_analysis()

    def _decision_section(self) -> Dict[str, object]:
        if self.interaction is None:
            return dict(DEFAULT_DECISION_ANALYSIS)
        return self.interaction.get_decision_analysis()

    # ------------------------------------------------------------------
    # Skill development
    # ------------------------------------------------------------------

    def build_skill_development(self, session_metrics: Dict[str, float]) -> Dict[str, Dict[str, float]]:
        """
        Skill scores grouped as problem_solving, critical_thinking, creativity
        and persistence

        approach_consistency, exploration_creativity and retry_persistence are
        placeholders fixed at 0.5.
        """
        attempted = session_metrics.get("puzzles_attempted", 0.0)
        completed = session_metrics.get("puzzles_completed", 0.0)
        hints = session_metrics.get("hints_used", 0.0)

        if self.cognitive is not None:
            profile = self.cognitive.profile
            solution_effectiveness = self.cognitive.calculate_overall_efficiency()
            error_learning = profile.metacognition
            hypothesis_testing = profile.cognitive_flexibility
            unconventional = profile.abstract_thinking
            approaches = {r.approach for r in self.cognitive.completed if r.approach is not None}
            approach_variety = len(approaches) / len(SolvingApproach)
        else:
            solution_effectiveness = PLACEHOLDER_SCORE
            error_learning = PLACEHOLDER_SCORE
            hypothesis_testing = PLACEHOLDER_SCORE
            unconventional = PLACEHOLDER_SCORE
            approach_variety = PLACEHOLDER_SCORE

        problem_solving = {
            "approach_consistency": PLACEHOLDER_SCORE,
            "solution_effectiveness": solution_effectiveness,
        }
        if self.interaction is not None:
            problem_solving["decision_speed"] = self.interaction.get_average_response_time()

        creativity = {
            "approach_variety": approach_variety,
            "unconventional_thinking": unconventional,
        }
        if self.movement is not None:
            creativity["exploration_creativity"] = PLACEHOLDER_SCORE

        persistence = {
            "frustration_tolerance": 1.0 - self.tracker.get_scalar(ProfileScalar.FRUSTRATION),
            "goal_persistence": safe_ratio(completed, attempted, default=PLACEHOLDER_SCORE),
        }
        if self.cognitive is not None:
            persistence["retry_persistence"] = PLACEHOLDER_SCORE

        return {
            "problem_solving": problem_solving,
            "critical_thinking": {
                "independent_thinking": 1.0 - clamp01(safe_ratio(hints, max(1.0, attempted))),
                "error_learning": error_learning,
                "hypothesis_testing": hypothesis_testing,
            },
            "creativity": creativity,
            "persistence": persistence,
        }
