"""
Attention Analyzer - Gaze-Based Focus and Distraction Tracking

Consumes already-resolved gaze targets (identifier or None) polled at a fixed
interval (default 0.1s). Ray casting and target resolution happen upstream.

Key Indicators:
- Focus spans: continuous gaze on one target, flushed on every change
- Distractions: switching focus from one target to a different one
- Extended focus: first continuous span on a target reaching 2s (once per
  target per session)
- Gaze stability: 1 - clamp01(mean successive hit-point distance / 2) over
  the last 20 hit points; 1.0 with fewer than 10 points

Target categories drive learning-style inference:
- text/sign targets → verbal-linguistic
- visual/art targets → visual-spatial
- puzzle targets → logical-mathematical
- character targets → interpersonal
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set
import math
import logging

from learner_analytics.behavior.events import BehaviorEventKind, RollingWindow
from learner_analytics.behavior.stats import Vector3, clamp01, distance, safe_ratio
from learner_analytics.core.config import settings
from learner_analytics.profile import LearnerProfileTracker, LearningStyle, ProfileScalar

logger = logging.getLogger(__name__)

FocusListener = Callable[[str, float], None]


class TargetCategory(str, Enum):
    TEXT = "text"
    VISUAL = "visual"
    PUZZLE = "puzzle"
    CHARACTER = "character"
    OBJECT = "object"


# Checked in order; first match wins
CATEGORY_KEYWORDS = [
    (TargetCategory.PUZZLE, ("puzzle",)),
    (TargetCategory.CHARACTER, ("character", "npc")),
    (TargetCategory.TEXT, ("text", "sign")),
    (TargetCategory.VISUAL, ("visual", "art", "decoration")),
]

CATEGORY_STYLES = {
    TargetCategory.TEXT: LearningStyle.VERBAL_LINGUISTIC,
    TargetCategory.VISUAL: LearningStyle.VISUAL_SPATIAL,
    TargetCategory.PUZZLE: LearningStyle.LOGICAL_MATHEMATICAL,
    TargetCategory.CHARACTER: LearningStyle.INTERPERSONAL,
}

LEARNING_CONTEXTS = {
    TargetCategory.TEXT: "verbal_linguistic_attention",
    TargetCategory.PUZZLE: "problem_solving_focus",
    TargetCategory.CHARACTER: "social_attention",
    TargetCategory.VISUAL: "visual_spatial_attention",
    TargetCategory.OBJECT: "environmental_scanning",
}

NAME_STYLE_KEYWORDS = [
    (("text", "book", "scroll"), LearningStyle.VERBAL_LINGUISTIC),
    (("puzzle", "mechanism"), LearningStyle.LOGICAL_MATHEMATICAL),
    (("art", "pattern", "visual"), LearningStyle.VISUAL_SPATIAL),
    (("character", "npc"), LearningStyle.INTERPERSONAL),
]


def classify_target(target_id: str) -> TargetCategory:
    """Coarse category of a gaze target from its identifier prefix/substring"""
    name = target_id.lower()
    for category in TargetCategory:
        if name.startswith(f"{category.value}_"):
            return category
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in name for k in keywords):
            return category
    return TargetCategory.OBJECT


def learning_style_indicator(target_id: str) -> Optional[LearningStyle]:
    name = target_id.lower()
    for keywords, style in NAME_STYLE_KEYWORDS:
        if any(k in name for k in keywords):
            return style
    return None


@dataclass
class AttentionMetrics:
    focus_duration: float = 0.0
    distraction_count: int = 0
    gaze_stability: float = 1.0
    object_attention_time: Dict[str, float] = field(default_factory=dict)
    attention_sequence: List[str] = field(default_factory=list)
    extended_focus_targets: List[str] = field(default_factory=list)


class AttentionAnalyzer:
    """
    Gaze analyzer feeding attention metrics and learning-style deltas
    """

    STABILITY_WINDOW = 20
    STABILITY_MIN_POINTS = 10
    STABILITY_SCALE = 2.0
    SEQUENCE_LIMIT = 200

    SPAN_STYLE_DELTA = 0.002
    EXTENDED_FOCUS_STYLE_DELTA = 0.005
    MIN_SPAN_FOR_STYLE = 0.3  # seconds

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        poll_interval: Optional[float] = None,
        focus_threshold: Optional[float] = None,
    ):
        self.tracker = tracker
        self.poll_interval = poll_interval or settings.GAZE_POLL_INTERVAL
        self.focus_threshold = focus_threshold or settings.FOCUS_THRESHOLD_SECONDS
        self._focus_listeners: List[FocusListener] = []
        self.reset()

    def reset(self) -> None:
        self.gaze_targets: Dict[str, float] = {}
        self.metrics = AttentionMetrics()
        self.gaze_points: RollingWindow[Vector3] = RollingWindow(self.STABILITY_WINDOW)
        self.attention_sequence: RollingWindow[str] = RollingWindow(self.SEQUENCE_LIMIT)
        self.current_target: Optional[str] = None
        self.current_focus_elapsed = 0.0
        self._last_focused: Optional[str] = None
        self._extended_focus_emitted: Set[str] = set()
        self._elapsed = 0.0

    def add_focus_listener(self, listener: FocusListener) -> None:
        """Register a callback receiving (target_id, duration) for every flushed focus span"""
        self._focus_listeners.append(listener)

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def observe(
        self,
        target_id: Optional[str],
        hit_point: Optional[Sequence[float]] = None,
        delta_time: Optional[float] = None,
    ) -> None:
        """
        Process one gaze poll

        Args:
            target_id: Resolved target identifier, or None when nothing is hit
            hit_point: World-space hit position, used for gaze stability
            delta_time: Seconds represented by this poll (defaults to poll_interval)
        """
        dt = self.poll_interval if delta_time is None else delta_time
        if not math.isfinite(dt) or dt < 0:
            dt = 0.0
        self._elapsed += dt

        if not target_id:
            self._end_focus()
            return

        if hit_point is not None:
            self.gaze_points.append(tuple(float(v) for v in hit_point))

        if target_id not in self.gaze_targets:
            self.gaze_targets[target_id] = 0.0
            self.metrics.attention_sequence.append(target_id)
        self.gaze_targets[target_id] += dt
        self.attention_sequence.append(target_id)

        if target_id != self.current_target:
            self._end_focus()
            if self._last_focused is not None and self._last_focused != target_id:
                self.metrics.distraction_count += 1
            self.current_target = target_id
            self._last_focused = target_id
            self.current_focus_elapsed = 0.0

        self.current_focus_elapsed += dt

        # Small float tolerance so 20 polls of 0.1s reach a 2s threshold
        if (
            self.current_focus_elapsed + 1e-9 >= self.focus_threshold
            and target_id not in self._extended_focus_emitted
        ):
            self._emit_extended_focus(target_id)

    def _end_focus(self) -> None:
        target = self.current_target
        if target is None:
            return

        duration = self.current_focus_elapsed
        self.current_target = None
        self.current_focus_elapsed = 0.0

        self.metrics.focus_duration += duration
        self.metrics.object_attention_time[target] = self.metrics.object_attention_time.get(target, 0.0) + duration

        category = classify_target(target)
        self.tracker.record_event(
            BehaviorEventKind.GAZE,
            {
                "event": "visual_focus",
                "target_id": target,
                "category": category.value,
                "learning_context": LEARNING_CONTEXTS[category],
                "focus_duration": duration,
                "gaze_stability": self.calculate_gaze_stability(),
                "is_extended_focus": duration >= self.focus_threshold,
            },
            source="attention_analyzer",
        )

        style = CATEGORY_STYLES.get(category)
        if style is not None and duration >= self.MIN_SPAN_FOR_STYLE:
            self.tracker.adjust_weight(style, self.SPAN_STYLE_DELTA)
        self.tracker.update_scalar(ProfileScalar.FOCUS, clamp01(duration / self.focus_threshold), 0.2)

        for listener in list(self._focus_listeners):
            listener(target, duration)

    def _emit_extended_focus(self, target_id: str) -> None:
        self._extended_focus_emitted.add(target_id)
        self.metrics.extended_focus_targets.append(target_id)
        category = classify_target(target_id)
        indicator = learning_style_indicator(target_id)

        self.tracker.generate_insight(
            "extended_focus",
            f"Extended focus on {target_id}",
            0.6,
            data={
                "target_id": target_id,
                "category": category.value,
                "learning_style_indicator": indicator.value if indicator else "general_exploration",
                "focus_intensity": self.calculate_focus_intensity(target_id),
            },
        )
        if indicator is not None:
            self.tracker.adjust_weight(indicator, self.EXTENDED_FOCUS_STYLE_DELTA)
        self.tracker.update_scalar(ProfileScalar.ENGAGEMENT, 1.0, 0.1)
        logger.debug(f"Extended focus on {target_id}")

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def calculate_gaze_stability(self) -> float:
        """Inverse of mean hit-point jitter over the last 20 points"""
        points = self.gaze_points.latest()
        if len(points) < self.STABILITY_MIN_POINTS:
            return 1.0
        total = sum(distance(a, b) for a, b in zip(points, points[1:]))
        average = total / (len(points) - 1)
        return 1.0 - clamp01(average / self.STABILITY_SCALE)

    def calculate_focus_intensity(self, target_id: str) -> float:
        """Share of total gaze time spent on target_id"""
        if target_id not in self.gaze_targets:
            return 0.0
        return safe_ratio(self.gaze_targets[target_id], sum(self.gaze_targets.values()))

    def get_most_attended_target(self) -> Optional[str]:
        if not self.gaze_targets:
            return None
        return max(self.gaze_targets, key=self.gaze_targets.get)

    def get_current_metrics(self) -> AttentionMetrics:
        self.metrics.gaze_stability = self.calculate_gaze_stability()
        return AttentionMetrics(
            focus_duration=self.metrics.focus_duration,
            distraction_count=self.metrics.distraction_count,
            gaze_stability=self.metrics.gaze_stability,
            object_attention_time=dict(self.metrics.object_attention_time),
            attention_sequence=list(self.metrics.attention_sequence),
            extended_focus_targets=list(self.metrics.extended_focus_targets),
        )

    def get_gaze_heatmap(self) -> Dict[str, float]:
        return dict(self.gaze_targets)

    def get_attention_analysis(self) -> Dict[str, object]:
        """Report map for the detailed session report"""
        metrics = self.get_current_metrics()
        category_time: Dict[str, float] = {}
        for target, seconds in self.gaze_targets.items():
            key = classify_target(target).value
            category_time[key] = category_time.get(key, 0.0) + seconds
        return {
            "focus_duration": metrics.focus_duration,
            "distraction_count": metrics.distraction_count,
            "gaze_stability": metrics.gaze_stability,
            "targets_viewed": len(self.gaze_targets),
            "extended_focus_count": len(metrics.extended_focus_targets),
            "most_attended_target": self.get_most_attended_target(),
            "category_attention_time": category_time,
            "object_attention_time": metrics.object_attention_time,
        }
