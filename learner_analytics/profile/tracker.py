"""
Learner Profile Tracker - Shared Learning-Style Aggregator

Every behaviour analyzer feeds this tracker. It owns:
1. The 8-way learning-style weight simplex (always sums to 1.0)
2. Session scalars: engagement, frustration, confidence, curiosity, focus
3. Session counters (puzzles, hints, areas, interactions, duration)
4. Bounded insight / breakthrough / event histories

Update rules:
- Weights move only through adjust_weight(): add a small delta (~0.001-0.01),
  then renormalize all eight proportionally
- Scalars move only through update_scalar(): EWMA with a caller-chosen
  smoothing factor (0.1-0.3)
- Every mutation is atomic under one lock and published synchronously to
  subscribers on the caller's stack

When analytics is disabled every mutation returns immediately and the read
API keeps serving the last known state.
"""
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from threading import RLock
import math
import time
import logging

from learner_analytics.behavior.events import BehaviorEvent, BehaviorEventKind, RollingWindow
from learner_analytics.behavior.stats import clamp01, ewma, lerp, safe_ratio
from learner_analytics.core.config import settings
from learner_analytics.core.exceptions import ProfileInvariantError
from learner_analytics.profile.learning_styles import LearningStyle, ProfileScalar
from learner_analytics.profile.subscriptions import Subscription, SubscriptionHub, Topic
from learner_analytics.schemas import (
    Breakthrough,
    Insight,
    LearnerProfileSnapshot,
    RealTimeMetrics,
    ScalarReading,
)

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-4


class LearnerProfileTracker:
    """
    Single owner of the learner profile

    Analyzers receive an instance at construction time; there is no global
    tracker.
    """

    DEFAULT_SCALARS = {
        ProfileScalar.ENGAGEMENT: 0.5,
        ProfileScalar.FRUSTRATION: 0.0,
        ProfileScalar.CONFIDENCE: 0.5,
        ProfileScalar.CURIOSITY: 0.5,
        ProfileScalar.FOCUS: 0.5,
    }

    DEFAULT_SESSION_METRICS = {
        "total_interactions": 0.0,
        "puzzles_completed": 0.0,
        "puzzles_attempted": 0.0,
        "areas_explored": 0.0,
        "hints_used": 0.0,
        "session_duration": 0.0,
    }

    THRESHOLDS = {
        "session_excellent_ratio": 0.7,   # completed / attempted
        "session_explorer_areas": 5,
        "strong_puzzle_count": 3,
        "kinesthetic_preference": 0.3,
        "camera_smoothing": 0.1,
        "visual_target_delta": 0.001,
    }

    def __init__(
        self,
        enabled: Optional[bool] = None,
        insight_history_size: Optional[int] = None,
        event_history_size: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        custom_thresholds: Optional[Dict[str, float]] = None,
    ):
        """
        Initialize the tracker

        Args:
            enabled: Analytics switch (defaults to settings.ANALYTICS_ENABLED)
            insight_history_size: Bounded insight/breakthrough history length
            event_history_size: Bounded behaviour event history length
            clock: Monotonic seconds source (injectable for tests)
            custom_thresholds: Overrides for THRESHOLDS
        """
        self.enabled = settings.ANALYTICS_ENABLED if enabled is None else enabled
        self.insight_history_size = insight_history_size or settings.INSIGHT_HISTORY_SIZE
        self.event_history_size = event_history_size or settings.EVENT_HISTORY_SIZE
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}
        self._clock = clock or time.monotonic
        self._lock = RLock()
        self._hub = SubscriptionHub()
        self._init_state()

    def _init_state(self) -> None:
        now = self._clock()
        uniform = 1.0 / len(LearningStyle)
        self._weights: Dict[LearningStyle, float] = {style: uniform for style in LearningStyle}
        self._scalars: Dict[ProfileScalar, float] = dict(self.DEFAULT_SCALARS)
        self._scalar_updated_at: Dict[ProfileScalar, float] = {s: now for s in ProfileScalar}
        self._session_metrics: Dict[str, float] = dict(self.DEFAULT_SESSION_METRICS)
        self._behavior_metrics: Dict[str, float] = {}
        self._event_counts: Dict[str, int] = {}
        self._events: RollingWindow[BehaviorEvent] = RollingWindow(self.event_history_size)
        self._insights: RollingWindow[Insight] = RollingWindow(self.insight_history_size)
        self._breakthroughs: RollingWindow[Breakthrough] = RollingWindow(self.insight_history_size)
        self._current_puzzle_attempts = 0
        self._session_start = now
        self.session_active = True

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, topic: Union[Topic, str], callback: Callable[[Any], None]) -> Subscription:
        return self._hub.subscribe(Topic(topic), callback)

    def on_profile_updated(self, callback: Callable[[LearnerProfileSnapshot], None]) -> Subscription:
        return self.subscribe(Topic.PROFILE_UPDATED, callback)

    def on_insight_generated(self, callback: Callable[[Insight], None]) -> Subscription:
        return self.subscribe(Topic.INSIGHT_GENERATED, callback)

    def on_real_time_metrics_updated(self, callback: Callable[[RealTimeMetrics], None]) -> Subscription:
        return self.subscribe(Topic.REAL_TIME_METRICS_UPDATED, callback)

    def on_event_logged(self, callback: Callable[[BehaviorEvent], None]) -> Subscription:
        return self.subscribe(Topic.EVENT_LOGGED, callback)

    # ------------------------------------------------------------------
    # Events and counters
    # ------------------------------------------------------------------

    def record_event(
        self,
        kind: Union[BehaviorEventKind, str],
        payload: Optional[Mapping[str, Any]] = None,
        source: str = "tracker",
    ) -> Optional[BehaviorEvent]:
        """
        Record a behaviour event for counting/telemetry

        Does not touch the profile. Returns the stored event, or None when
        analytics is disabled.
        """
        if not self.enabled:
            return None

        with self._lock:
            event = BehaviorEvent(
                kind=BehaviorEventKind(kind),
                timestamp=self._clock(),
                source=source,
                payload=payload or {},
            )
            self._events.append(event)
            self._event_counts[event.kind.value] = self._event_counts.get(event.kind.value, 0) + 1
            self._session_metrics["total_interactions"] += 1

        logger.debug(f"Event logged: {event.kind.value} from {source}")
        self._hub.publish(Topic.EVENT_LOGGED, event)
        return event

    def increment_metric(self, name: str, amount: float = 1.0) -> None:
        if not self.enabled:
            return
        if not math.isfinite(amount):
            logger.warning(f"Ignoring non-finite increment for {name}: {amount}")
            return
        with self._lock:
            self._session_metrics[name] = self._session_metrics.get(name, 0.0) + amount

    def update_play_time(self, delta_time: float) -> None:
        """Accumulate session duration; negative deltas are clamped to 0"""
        if not self.enabled:
            return
        if not math.isfinite(delta_time):
            return
        with self._lock:
            self._session_metrics["session_duration"] += max(0.0, delta_time)

    # ------------------------------------------------------------------
    # Learning-style simplex
    # ------------------------------------------------------------------

    def adjust_weight(self, style: Union[LearningStyle, str], delta: float) -> None:
        """
        Nudge one learning-style weight and renormalize all eight

        The new vector is computed on a copy and committed only once it
        renormalizes cleanly. A finite delta that would remove the last
        remaining weight is ignored with a warning.

        Raises:
            ProfileInvariantError: the stored weight vector is corrupt and
                cannot be renormalized
        """
        if not self.enabled:
            return

        try:
            style = LearningStyle(style)
        except ValueError:
            logger.warning(f"Ignoring adjustment for unknown learning style: {style!r}")
            return

        if not math.isfinite(delta):
            logger.warning(f"Ignoring non-finite delta for {style.value}: {delta}")
            return

        with self._lock:
            candidate = dict(self._weights)
            candidate[style] = max(0.0, candidate[style] + delta)
            if sum(candidate.values()) <= 0 < sum(self._weights.values()):
                logger.warning(
                    f"Ignoring delta {delta} for {style.value}: it would zero every learning-style weight"
                )
                return
            self._weights = self._renormalized(candidate)
            snapshot = self._build_snapshot()

        self._hub.publish(Topic.PROFILE_UPDATED, snapshot)

    def _renormalized(self, weights: Dict[LearningStyle, float]) -> Dict[LearningStyle, float]:
        total = sum(weights.values())
        if not math.isfinite(total) or total <= 0:
            logger.critical(f"Learning-style weights failed to renormalize (total={total}): {weights}")
            raise ProfileInvariantError(f"Cannot renormalize learning-style weights, total={total}")

        normalized = {s: w / total for s, w in weights.items()}
        if abs(sum(normalized.values()) - 1.0) > WEIGHT_SUM_TOLERANCE:
            logger.critical(f"Learning-style weights drifted after renormalization: {normalized}")
            raise ProfileInvariantError("Learning-style weights do not sum to 1.0")
        return normalized

    def get_weight(self, style: Union[LearningStyle, str]) -> float:
        style = LearningStyle(style)
        with self._lock:
            return self._weights[style]

    def get_weights(self) -> Dict[str, float]:
        with self._lock:
            return {s.value: w for s, w in self._weights.items()}

    def get_dominant_style(self) -> LearningStyle:
        """Style with the highest weight; ties go to the earliest declared style"""
        with self._lock:
            dominant = LearningStyle.VISUAL_SPATIAL
            for style in LearningStyle:
                if self._weights[style] > self._weights[dominant]:
                    dominant = style
            return dominant

    def get_dominant_learning_style(self) -> str:
        return self.get_dominant_style().value

    def get_top_styles(self, count: int = 3) -> List[str]:
        """Display names of the top-weighted styles, declaration order on ties"""
        with self._lock:
            ranked = sorted(LearningStyle, key=lambda s: -self._weights[s])
        return [s.display_name for s in ranked[:max(0, count)]]

    # ------------------------------------------------------------------
    # Session scalars
    # ------------------------------------------------------------------

    def update_scalar(self, name: Union[ProfileScalar, str], sample: float, smoothing: float) -> None:
        """
        EWMA update of one session scalar

        value = value * (1 - smoothing) + sample * smoothing
        """
        if not self.enabled:
            return

        try:
            name = ProfileScalar(name)
        except ValueError:
            logger.warning(f"Ignoring update for unknown profile scalar: {name!r}")
            return

        if not (math.isfinite(sample) and math.isfinite(smoothing)):
            logger.warning(f"Ignoring non-finite update for {name.value}: sample={sample}, smoothing={smoothing}")
            return

        with self._lock:
            self._scalars[name] = clamp01(ewma(self._scalars[name], clamp01(sample), clamp01(smoothing)))
            self._scalar_updated_at[name] = self._clock()
            snapshot = self._build_snapshot()

        self._hub.publish(Topic.PROFILE_UPDATED, snapshot)

    def get_scalar(self, name: Union[ProfileScalar, str]) -> float:
        name = ProfileScalar(name)
        with self._lock:
            return self._scalars[name]

    # ------------------------------------------------------------------
    # Insights and breakthroughs
    # ------------------------------------------------------------------

    def generate_insight(
        self,
        insight_type: str,
        description: str,
        significance: float,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Insight]:
        """Append an insight to the bounded history and notify subscribers"""
        if not self.enabled:
            return None

        significance = clamp01(significance) if math.isfinite(significance) else 0.0
        with self._lock:
            insight = Insight(
                insight_type=insight_type,
                description=description,
                significance=significance,
                timestamp=self._clock(),
                data=dict(data or {}),
            )
            self._insights.append(insight)

        logger.info(f"Insight [{insight_type}] {description} (significance={significance:.2f})")
        self._hub.publish(Topic.INSIGHT_GENERATED, insight)
        return insight

    def record_breakthrough(self, breakthrough: Breakthrough) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._breakthroughs.append(breakthrough)

    def get_insights(self, insight_type: Optional[str] = None) -> List[Insight]:
        with self._lock:
            insights = self._insights.latest()
        if insight_type is None:
            return insights
        return [i for i in insights if i.insight_type == insight_type]

    def get_breakthroughs(self) -> List[Breakthrough]:
        with self._lock:
            return self._breakthroughs.latest()

    def get_events(self, kind: Optional[Union[BehaviorEventKind, str]] = None) -> List[BehaviorEvent]:
        with self._lock:
            events = self._events.latest()
        if kind is None:
            return events
        kind = BehaviorEventKind(kind)
        return [e for e in events if e.kind == kind]

    def get_event_counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._event_counts)

    # ------------------------------------------------------------------
    # Convenience loggers used by the analyzers
    # ------------------------------------------------------------------

    def log_camera_behavior(self, delta_time: float, target_tag: Optional[str] = None) -> None:
        """Smooth camera activity and nudge visual-spatial for visual targets"""
        if not self.enabled:
            return
        with self._lock:
            current = self._behavior_metrics.get("camera_movement", 0.0)
            self._behavior_metrics["camera_movement"] = ewma(
                current, max(0.0, delta_time), self.thresholds["camera_smoothing"]
            )
        if target_tag and "visual" in target_tag.lower():
            self.adjust_weight(LearningStyle.VISUAL_SPATIAL, self.thresholds["visual_target_delta"])

    def log_puzzle_start(self, puzzle_type: str, problem_id: Optional[str] = None) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._session_metrics["puzzles_attempted"] += 1
            self._current_puzzle_attempts = 0
        self.record_event(
            BehaviorEventKind.PROBLEM_SOLVING,
            {"event": "puzzle_start", "puzzle_type": puzzle_type, "problem_id": problem_id or puzzle_type},
            source="puzzle",
        )

    def log_puzzle_attempt(self, puzzle_type: str, success: bool, attempt_time: float) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._current_puzzle_attempts += 1
        self.record_event(
            BehaviorEventKind.PROBLEM_SOLVING,
            {"event": "puzzle_attempt", "puzzle_type": puzzle_type, "success": success, "time": attempt_time},
            source="puzzle",
        )

    def log_puzzle_complete(self, puzzle_type: str, solved: bool, completion_time: float, hints_used: int = 0) -> None:
        if not self.enabled:
            return
        with self._lock:
            if solved:
                self._session_metrics["puzzles_completed"] += 1
            if hints_used > 0:
                self._session_metrics["hints_used"] += hints_used
        self.record_event(
            BehaviorEventKind.PROBLEM_SOLVING,
            {"event": "puzzle_complete", "puzzle_type": puzzle_type, "solved": solved, "time": completion_time},
            source="puzzle",
        )

    def log_hint_used(self, puzzle_type: str, hint_number: int, time_since_start: float) -> None:
        if not self.enabled:
            return
        self.increment_metric("hints_used")
        self.record_event(
            BehaviorEventKind.PROBLEM_SOLVING,
            {"event": "hint_used", "puzzle_type": puzzle_type, "hint_number": hint_number, "time": time_since_start},
            source="puzzle",
        )

    def log_area_visit(self, area_name: str, duration: float, first_visit: bool = True) -> None:
        if not self.enabled:
            return
        if first_visit:
            self.increment_metric("areas_explored")
        self.record_event(
            BehaviorEventKind.MOVEMENT,
            {"event": "area_visit", "area": area_name, "duration": duration},
            source="exploration",
        )

    def log_decision(self, decision_id: str, choice: str, response_time: float, options_count: int = 0) -> None:
        self.record_event(
            BehaviorEventKind.DECISION,
            {"decision_id": decision_id, "choice": choice, "response_time": response_time,
             "options_count": options_count},
            source="decision",
        )

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def _build_snapshot(self) -> LearnerProfileSnapshot:
        ranked = sorted(LearningStyle, key=lambda s: -self._weights[s])
        dominant = ranked[0]
        return LearnerProfileSnapshot(
            weights={s.value: w for s, w in self._weights.items()},
            scalars={
                s.value: ScalarReading(value=self._scalars[s], updated_at=self._scalar_updated_at[s])
                for s in ProfileScalar
            },
            dominant_style=dominant.value,
            top_styles=[s.display_name for s in ranked[:3]],
        )

    def get_profile_snapshot(self) -> LearnerProfileSnapshot:
        """Fresh read-only copy of the profile"""
        with self._lock:
            return self._build_snapshot()

    def get_session_metrics(self) -> Dict[str, float]:
        """Copy of the session counters plus current scalar levels"""
        with self._lock:
            metrics = dict(self._session_metrics)
            for scalar in ProfileScalar:
                metrics[f"{scalar.value}_level"] = self._scalars[scalar]
        return metrics

    def calculate_confidence_level(self) -> float:
        """0.3 at zero success up to 1.0 at full success; 0.5 without attempts"""
        with self._lock:
            attempted = self._session_metrics["puzzles_attempted"]
            completed = self._session_metrics["puzzles_completed"]
        success_rate = safe_ratio(completed, attempted, default=0.5)
        return lerp(0.3, 1.0, success_rate)

    def get_real_time_metrics(self) -> RealTimeMetrics:
        with self._lock:
            return RealTimeMetrics(
                engagement=self._scalars[ProfileScalar.ENGAGEMENT],
                focus=self._scalars[ProfileScalar.FOCUS],
                frustration=self._scalars[ProfileScalar.FRUSTRATION],
                confidence=self._scalars[ProfileScalar.CONFIDENCE],
                curiosity=self._scalars[ProfileScalar.CURIOSITY],
                current_puzzle_attempts=self._current_puzzle_attempts,
                session_duration=self._session_metrics["session_duration"],
            )

    def publish_real_time_metrics(self) -> RealTimeMetrics:
        metrics = self.get_real_time_metrics()
        self._hub.publish(Topic.REAL_TIME_METRICS_UPDATED, metrics)
        return metrics

    def publish_profile(self) -> LearnerProfileSnapshot:
        snapshot = self.get_profile_snapshot()
        self._hub.publish(Topic.PROFILE_UPDATED, snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Session-level insights
    # ------------------------------------------------------------------

    def analyze_current_session(self) -> str:
        with self._lock:
            completed = self._session_metrics["puzzles_completed"]
            attempted = self._session_metrics["puzzles_attempted"]
            areas = self._session_metrics["areas_explored"]

        if completed > attempted * self.thresholds["session_excellent_ratio"]:
            return "Excellent puzzle-solving performance this session"
        elif areas > self.thresholds["session_explorer_areas"]:
            return "Strong exploration and discovery focus"
        return "Balanced learning approach demonstrated"

    def generate_session_insight(self) -> Optional[Insight]:
        return self.generate_insight("session", self.analyze_current_session(), 0.8)

    def generate_insights(self) -> List[Insight]:
        """
        Derived insights for reports (not added to the history)

        Stamped with session time (start plus accumulated play time) so
        repeated reports over the same state carry the same timestamps.
        """
        insights = []
        with self._lock:
            now = self._session_start + self._session_metrics["session_duration"]
            completed = self._session_metrics["puzzles_completed"]
            kinesthetic = self._weights[LearningStyle.KINESTHETIC]

        if completed > self.thresholds["strong_puzzle_count"]:
            insights.append(Insight(
                insight_type="puzzle_performance",
                description="Strong puzzle-solving skills demonstrated",
                significance=0.9,
                timestamp=now,
            ))
        if kinesthetic > self.thresholds["kinesthetic_preference"]:
            insights.append(Insight(
                insight_type="learning_preference",
                description="Shows preference for hands-on learning",
                significance=0.85,
                timestamp=now,
            ))
        return insights

    def get_profile_summary(self) -> str:
        metrics = self.get_session_metrics()
        return (
            f"Session Duration: {metrics['session_duration']:.1f}s | "
            f"Puzzles: {int(metrics['puzzles_completed'])}/{int(metrics['puzzles_attempted'])} | "
            f"Areas Explored: {int(metrics['areas_explored'])} | "
            f"Primary Style: {self.get_dominant_style().display_name}"
        )

    def end_session(self) -> Optional[Insight]:
        """Log the session end and emit the closing session insight"""
        if not self.enabled or not self.session_active:
            return None

        metrics = self.get_session_metrics()
        self.record_event(
            BehaviorEventKind.SESSION,
            {
                "event": "session_end",
                "duration": metrics["session_duration"],
                "puzzles_completed": metrics["puzzles_completed"],
                "areas_explored": metrics["areas_explored"],
            },
            source="session",
        )
        insight = self.generate_session_insight()
        self.session_active = False
        logger.info(f"Session ended: {self.get_profile_summary()}")
        return insight

    def reset(self) -> None:
        """Reset profile and counters; subscriptions are kept"""
        with self._lock:
            self._init_state()
        logger.info("Learner profile tracker reset")
