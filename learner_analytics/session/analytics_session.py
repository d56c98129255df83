"""
Analytics Session - Wiring and Tick Scheduling

Owns one LearnerProfileTracker and every analyzer for a single learner
session, and converts host frame time into the fixed analyzer cadences:

- gaze polls every GAZE_POLL_INTERVAL (0.1s)
- movement samples every MOVEMENT_SAMPLE_INTERVAL (0.5s)
- cognitive ticks every COGNITIVE_UPDATE_INTERVAL (1s)
- social ticks every SOCIAL_UPDATE_INTERVAL (2s)
- real-time metrics and profile published every REPORT_EVERY_N_TICKS
  cognitive ticks

All work runs on the caller's thread; subscribers are notified
synchronously.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import math
import time
import logging

from learner_analytics.behavior.attention import AttentionAnalyzer
from learner_analytics.behavior.cognitive import CognitiveAnalyzer, ProblemEvent, ProblemSolvingRecord
from learner_analytics.behavior.interaction import DecisionRecord, InteractionAnalyzer, InteractionEvent
from learner_analytics.behavior.movement import MovementAnalyzer
from learner_analytics.behavior.movement.movement_analyzer import ZoneResolver
from learner_analytics.behavior.social import DialogueChoice, SocialAnalyzer, SocialInteraction
from learner_analytics.core.config import Settings, settings as default_settings
from learner_analytics.profile import LearnerProfileTracker, Subscription, Topic
from learner_analytics.reporting import DetailedReportBuilder
from learner_analytics.schemas import DetailedReport, Insight, LearnerProfileSnapshot

logger = logging.getLogger(__name__)


class _Cadence:
    """Accumulates frame time and reports how many fixed intervals elapsed"""

    def __init__(self, interval: float):
        self.interval = interval
        self.elapsed = 0.0

    def advance(self, delta_time: float) -> int:
        self.elapsed += delta_time
        # Small tolerance so ten 0.1s frames make one 1s tick
        steps = int((self.elapsed + 1e-9) // self.interval)
        if steps:
            self.elapsed = max(0.0, self.elapsed - steps * self.interval)
        return steps


class AnalyticsSession:
    """
    One learner's analytics pipeline

    Usage:
        setup_logging()
        session = AnalyticsSession()
        session.tracker.on_insight_generated(print)

        # every frame
        session.update_player(position, delta_time)
        session.update_gaze(target_id, delta_time, hit_point)
        session.advance(delta_time)

        # gameplay hooks
        session.report_problem_event(ProblemEvent.started("p1", "chronocircuits"))
        session.record_dialogue_choice("scribe", DialogueChoice("I understand"), 1.5)

        report = session.generate_detailed_report()
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        clock: Optional[Callable[[], float]] = None,
        zone_resolver: Optional[ZoneResolver] = None,
    ):
        self.config = config or default_settings
        self._clock = clock or time.monotonic

        self.tracker = LearnerProfileTracker(
            enabled=self.config.ANALYTICS_ENABLED,
            insight_history_size=self.config.INSIGHT_HISTORY_SIZE,
            event_history_size=self.config.EVENT_HISTORY_SIZE,
            clock=self._clock,
        )
        self.movement = MovementAnalyzer(
            self.tracker,
            sample_interval=self.config.MOVEMENT_SAMPLE_INTERVAL,
            max_path_points=self.config.MAX_PATH_POINTS,
            zone_resolver=zone_resolver,
            clock=self._clock,
        )
        self.attention = AttentionAnalyzer(
            self.tracker,
            poll_interval=self.config.GAZE_POLL_INTERVAL,
            focus_threshold=self.config.FOCUS_THRESHOLD_SECONDS,
        )
        self.cognitive = CognitiveAnalyzer(
            self.tracker,
            update_interval=self.config.COGNITIVE_UPDATE_INTERVAL,
            clock=self._clock,
        )
        self.social = SocialAnalyzer(
            self.tracker,
            update_interval=self.config.SOCIAL_UPDATE_INTERVAL,
            clock=self._clock,
        )
        self.interaction = InteractionAnalyzer(self.tracker, clock=self._clock)

        # Gaze focus spans feed the cognitive attention profile
        self.attention.add_focus_listener(self._on_focus_span)

        self._gaze_cadence = _Cadence(self.config.GAZE_POLL_INTERVAL)
        self._movement_cadence = _Cadence(self.config.MOVEMENT_SAMPLE_INTERVAL)
        self._cognitive_cadence = _Cadence(self.config.COGNITIVE_UPDATE_INTERVAL)
        self._social_cadence = _Cadence(self.config.SOCIAL_UPDATE_INTERVAL)
        self.cognitive_ticks = 0
        self.social_ticks = 0

        logger.info(f"Analytics session started (enabled={self.tracker.enabled})")

    @property
    def enabled(self) -> bool:
        return self.tracker.enabled

    def _on_focus_span(self, target_id: str, duration: float) -> None:
        self.cognitive.update_attention_metrics(duration, distracted=False)

    # ------------------------------------------------------------------
    # Frame updates
    # ------------------------------------------------------------------

    def advance(self, delta_time: float) -> List[Insight]:
        """
        Advance session time and run any due periodic ticks

        Returns:
            Insights produced by the ticks run during this call
        """
        if not self.enabled:
            return []
        if not math.isfinite(delta_time) or delta_time <= 0:
            return []

        self.tracker.update_play_time(delta_time)
        produced: List[Insight] = []

        for _ in range(self._cognitive_cadence.advance(delta_time)):
            insight = self.cognitive.tick(delta_time=self.config.COGNITIVE_UPDATE_INTERVAL)
            if insight is not None:
                produced.append(insight)
            self.cognitive_ticks += 1
            if self.cognitive_ticks % self.config.REPORT_EVERY_N_TICKS == 0:
                self.tracker.publish_real_time_metrics()
                self.tracker.publish_profile()

        for _ in range(self._social_cadence.advance(delta_time)):
            self.social.tick()
            self.social_ticks += 1

        return produced

    def update_player(
        self,
        position: Sequence[float],
        delta_time: float,
        forward: Optional[Sequence[float]] = None,
        zone_id: Optional[str] = None,
    ) -> None:
        """Per-frame player position; samples the path at the movement cadence"""
        if not self.enabled:
            return
        self.movement.track_speed(position, delta_time)
        if math.isfinite(delta_time) and delta_time > 0 and self._movement_cadence.advance(delta_time):
            self.movement.record_sample(position, forward=forward, zone_id=zone_id)

    def update_gaze(
        self,
        target_id: Optional[str],
        delta_time: float,
        hit_point: Optional[Sequence[float]] = None,
    ) -> None:
        """Per-frame gaze target; polled into the attention analyzer at the gaze cadence"""
        if not self.enabled:
            return
        if not math.isfinite(delta_time) or delta_time <= 0:
            return
        for _ in range(self._gaze_cadence.advance(delta_time)):
            self.attention.observe(target_id, hit_point=hit_point, delta_time=self.config.GAZE_POLL_INTERVAL)

    # ------------------------------------------------------------------
    # Gameplay hooks
    # ------------------------------------------------------------------

    def report_problem_event(self, event: ProblemEvent) -> Optional[ProblemSolvingRecord]:
        if not self.enabled:
            return None
        return self.cognitive.report_problem_event(event)

    def record_dialogue_choice(
        self,
        character_id: str,
        choice: Union[DialogueChoice, str],
        response_time: float,
        initiated_by_player: bool = True,
    ) -> Optional[SocialInteraction]:
        if not self.enabled:
            return None
        if isinstance(choice, str):
            choice = DialogueChoice(text=choice, character_id=character_id)
        return self.social.record_dialogue_choice(character_id, choice, response_time, initiated_by_player)

    def record_memory_event(
        self,
        item_id: str,
        memory_type: str = "working",
        encoding: bool = True,
        successful_recall: Optional[bool] = None,
    ) -> None:
        if not self.enabled:
            return
        self.cognitive.record_memory_event(item_id, memory_type, encoding, successful_recall)

    def begin_hover(self, target_name: str) -> None:
        if self.enabled:
            self.interaction.begin_hover(target_name)

    def update_hover(self, delta_time: float) -> bool:
        if not self.enabled:
            return False
        return self.interaction.update_hover(delta_time)

    def end_hover(self) -> Optional[InteractionEvent]:
        if not self.enabled:
            return None
        return self.interaction.end_hover()

    def complete_interaction(self) -> Optional[InteractionEvent]:
        if not self.enabled:
            return None
        return self.interaction.complete_interaction()

    def record_decision(
        self,
        decision_id: str,
        choice: str,
        response_time: float,
        options_count: int = 0,
    ) -> Optional[DecisionRecord]:
        if not self.enabled:
            return None
        return self.interaction.record_decision(decision_id, choice, response_time, options_count)

    # ------------------------------------------------------------------
    # Subscriptions and reads
    # ------------------------------------------------------------------

    def subscribe(self, topic: Union[Topic, str], callback: Callable[[Any], None]) -> Subscription:
        return self.tracker.subscribe(topic, callback)

    def get_profile_snapshot(self) -> LearnerProfileSnapshot:
        return self.tracker.get_profile_snapshot()

    def get_session_metrics(self) -> Dict[str, float]:
        return self.tracker.get_session_metrics()

    def get_dominant_learning_style(self) -> str:
        return self.tracker.get_dominant_learning_style()

    def generate_detailed_report(self) -> DetailedReport:
        return DetailedReportBuilder(
            self.tracker,
            cognitive=self.cognitive,
            movement=self.movement,
            attention=self.attention,
            social=self.social,
            interaction=self.interaction,
        ).build()

    def end_session(self) -> Optional[Insight]:
        """Flush open spans and close the session"""
        if not self.enabled:
            return None
        self.attention.observe(None, delta_time=0.0)
        self.interaction.end_hover()
        return self.tracker.end_session()
