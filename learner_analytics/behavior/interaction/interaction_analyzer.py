"""
Interaction Analyzer - Hover, Hesitation and Decision Patterns

Key Indicators:
- Hesitation: hovering over an interactable for 2s without using it
  (counted once per hover)
- Quick decisions (< 1s) suggest confidence
- Careful consideration (> 3s) suggests deliberate processing

Target resolution happens upstream; this analyzer receives target names and
elapsed time only.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import math
import time
import logging

from learner_analytics.behavior.events import BehaviorEventKind, RollingWindow
from learner_analytics.behavior.stats import clamp01, safe_mean
from learner_analytics.profile import LearnerProfileTracker

logger = logging.getLogger(__name__)

# Checked in order; first match wins
INTERACTION_TYPE_KEYWORDS = [
    ("puzzle", ("puzzle",)),
    ("social", ("npc", "character")),
    ("collection", ("artifact",)),
    ("navigation", ("door",)),
]


def classify_interaction_target(target_name: str) -> str:
    name = target_name.lower()
    for interaction_type, keywords in INTERACTION_TYPE_KEYWORDS:
        if any(k in name for k in keywords):
            return interaction_type
    return "general"


@dataclass
class InteractionEvent:
    target_name: str
    interaction_type: str
    timestamp: float
    duration: float
    completed: bool
    response_time: float


@dataclass
class DecisionRecord:
    decision_id: str
    choice: str
    response_time: float
    options_count: int
    timestamp: float
    pattern: Optional[str] = None


class InteractionAnalyzer:
    """
    Tracks what the player hovers over, what they use and how fast they decide
    """

    THRESHOLDS = {
        "hesitation": 2.0,      # seconds hovering without interacting
        "min_hover": 0.1,       # shorter hovers are not recorded
        "quick_decision": 1.0,
        "careful_decision": 3.0,
    }

    HISTORY_SIZE = 200

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        custom_thresholds: Optional[Dict[str, float]] = None,
        history_size: int = HISTORY_SIZE,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.tracker = tracker
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}
        self.history_size = history_size
        self._clock = clock or time.monotonic
        self.reset()

    def reset(self) -> None:
        self.history: RollingWindow[InteractionEvent] = RollingWindow(self.history_size)
        self.decisions: RollingWindow[DecisionRecord] = RollingWindow(self.history_size)
        self.interaction_counts: Counter = Counter()
        self.interaction_times: Dict[str, float] = {}
        self.pattern_counts: Counter = Counter()
        self.current_target: Optional[str] = None
        self.current_hover_time = 0.0
        self.hesitation_count = 0
        self._hesitated = False

    # ------------------------------------------------------------------
    # Hover tracking
    # ------------------------------------------------------------------

    def begin_hover(self, target_name: str) -> None:
        """The player's crosshair moved onto an interactable"""
        if target_name == self.current_target:
            return
        if self.current_target is not None:
            self.end_hover()

        self.current_target = target_name
        self.current_hover_time = 0.0
        self._hesitated = False
        logger.debug(f"Interaction focus on {target_name}")

    def update_hover(self, delta_time: float) -> bool:
        """
        Advance the current hover

        Returns:
            True when this update crossed the hesitation threshold
        """
        if self.current_target is None:
            return False
        if not math.isfinite(delta_time) or delta_time < 0:
            delta_time = 0.0

        self.current_hover_time += delta_time
        if self._hesitated or self.current_hover_time < self.thresholds["hesitation"]:
            return False

        self._hesitated = True
        self.hesitation_count += 1
        self.tracker.record_event(
            BehaviorEventKind.DECISION,
            {
                "event": "interaction_hesitation",
                "target": self.current_target,
                "hover_time": self.current_hover_time,
            },
            source="interaction_analyzer",
        )
        return True

    def end_hover(self) -> Optional[InteractionEvent]:
        """The crosshair left the target without using it"""
        if self.current_target is None:
            return None

        event = None
        if self.current_hover_time > self.thresholds["min_hover"]:
            event = self._record(completed=False)

        self.current_target = None
        self.current_hover_time = 0.0
        self._hesitated = False
        return event

    def complete_interaction(self) -> Optional[InteractionEvent]:
        """The player used the hovered target"""
        if self.current_target is None:
            return None

        event = self._record(completed=True)
        self.interaction_counts[event.interaction_type] += 1
        self.interaction_times[event.interaction_type] = (
            self.interaction_times.get(event.interaction_type, 0.0) + event.duration
        )

        self.tracker.record_event(
            BehaviorEventKind.DECISION,
            {
                "event": "interaction",
                "target": event.target_name,
                "interaction_type": event.interaction_type,
                "duration": event.duration,
                "dominant_type": self.get_dominant_interaction_type(),
            },
            source="interaction_analyzer",
        )
        self._classify_response(event.response_time)

        self.current_hover_time = 0.0
        self._hesitated = False
        return event

    def _record(self, completed: bool) -> InteractionEvent:
        event = InteractionEvent(
            target_name=self.current_target,
            interaction_type=classify_interaction_target(self.current_target),
            timestamp=self._clock(),
            duration=self.current_hover_time,
            completed=completed,
            response_time=self.current_hover_time,
        )
        self.history.append(event)
        return event

    def _classify_response(self, response_time: float) -> Optional[str]:
        if response_time < self.thresholds["quick_decision"]:
            pattern = "quick_decision"
        elif response_time > self.thresholds["careful_decision"]:
            pattern = "careful_consideration"
        else:
            return None
        self.pattern_counts[pattern] += 1
        return pattern

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def record_decision(
        self,
        decision_id: str,
        choice: str,
        response_time: float,
        options_count: int = 0,
    ) -> DecisionRecord:
        """Record an explicit in-game choice"""
        if not math.isfinite(response_time) or response_time < 0:
            response_time = 0.0

        record = DecisionRecord(
            decision_id=decision_id,
            choice=choice,
            response_time=response_time,
            options_count=options_count,
            timestamp=self._clock(),
            pattern=self._classify_response(response_time),
        )
        self.decisions.append(record)
        self.tracker.log_decision(decision_id, choice, response_time, options_count)
        return record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_dominant_interaction_type(self) -> str:
        """Most used interaction type; first-used wins ties, "" when none"""
        if not self.interaction_counts:
            return ""
        return self.interaction_counts.most_common(1)[0][0]

    def get_average_response_time(self) -> float:
        times = [e.response_time for e in self.history if e.completed]
        times.extend(d.response_time for d in self.decisions)
        return safe_mean(times)

    def get_decision_pattern(self) -> str:
        quick = self.pattern_counts["quick_decision"]
        careful = self.pattern_counts["careful_consideration"]
        if quick == 0 and careful == 0:
            return "methodical"
        if quick > careful:
            return "decisive"
        if careful > quick:
            return "deliberate"
        return "methodical"

    def get_decision_confidence(self) -> float:
        """Share of decisions made quickly versus after hesitation, 0.5 without data"""
        quick = self.pattern_counts["quick_decision"]
        careful = self.pattern_counts["careful_consideration"]
        total = quick + careful + self.hesitation_count
        if total == 0:
            return 0.5
        return clamp01(0.5 + 0.5 * (quick - careful - self.hesitation_count) / total)

    def get_metrics(self) -> Dict[str, object]:
        events: List[InteractionEvent] = self.history.latest()
        return {
            "total_interactions": len(events),
            "completed_interactions": sum(1 for e in events if e.completed),
            "average_response_time": self.get_average_response_time(),
            "hesitation_count": self.hesitation_count,
            "dominant_interaction_type": self.get_dominant_interaction_type(),
        }

    def get_decision_analysis(self) -> Dict[str, object]:
        """Report map for the detailed session report"""
        return {
            "average_response_time": self.get_average_response_time(),
            "decision_confidence": self.get_decision_confidence(),
            "pattern": self.get_decision_pattern(),
            "total_decisions": len(self.decisions),
            "hesitations": self.hesitation_count,
            "dominant_interaction_type": self.get_dominant_interaction_type(),
            "decisions": [
                {"decision_id": d.decision_id, "choice": d.choice, "response_time": d.response_time}
                for d in self.decisions
            ],
        }
