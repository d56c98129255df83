"""
Cognitive Analyzer - Problem Solving, Memory, Attention and Thinking Style

Research alignment:
- Cognitive Load Theory: load rises with concurrent problems and recent
  memory tasks, amplified when attention is low
- Flow (Csikszentmihalyi): challenge/skill balance × attention × (1 - frustration)
- Insight problem solving: fast single-attempt solves signal a breakthrough

Key Indicators:
1. Solving approach per completed problem (insight, exploratory, trial and
   error, systematic, intuitive, mixed)
2. Processing speed, efficiency, flexibility, persistence per problem
3. A 10-dimensional cognitive profile smoothed across problems
4. Periodic cognitive load, frustration, flow and fatigue

All puzzle progress arrives through report_problem_event().
"""
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional
import math
import time
import logging

from learner_analytics.behavior.cognitive.pattern_detector import FatigueAssessment, PatternDetector
from learner_analytics.behavior.cognitive.problem_solving import (
    ProblemEvent,
    ProblemEventType,
    ProblemSolvingPattern,
    ProblemSolvingRecord,
    ProblemStatus,
    calculate_efficiency,
    calculate_flexibility,
    calculate_persistence,
    calculate_processing_speed,
    classify_approach,
    expected_solution_time,
)
from learner_analytics.behavior.events import BehaviorEventKind, RollingWindow
from learner_analytics.behavior.stats import clamp01, lerp, safe_mean
from learner_analytics.core.config import settings
from learner_analytics.profile import LearnerProfileTracker, LearningStyle, ProfileScalar
from learner_analytics.schemas import Breakthrough, Insight

logger = logging.getLogger(__name__)


@dataclass
class CognitiveProfile:
    processing_speed: float = 0.5
    working_memory_efficiency: float = 0.5
    cognitive_flexibility: float = 0.5
    abstract_thinking: float = 0.3
    pattern_recognition: float = 0.5
    logical_reasoning: float = 0.5
    spatial_reasoning: float = 0.5
    verbal_reasoning: float = 0.5
    executive_function: float = 0.5
    metacognition: float = 0.3

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ThinkingStyleProfile:
    convergent_thinking: float = 0.0   # single correct answer
    divergent_thinking: float = 0.0    # multiple creative solutions
    analytical_thinking: float = 0.0
    holistic_thinking: float = 0.0
    concrete_thinking: float = 0.0
    abstract_thinking: float = 0.0
    sequential_processing: float = 0.0
    simultaneous_processing: float = 0.0

    def dominance(self) -> Dict[str, float]:
        return {
            "analytical_sequential": (self.analytical_thinking + self.sequential_processing) / 2,
            "holistic_simultaneous": (self.holistic_thinking + self.simultaneous_processing) / 2,
            "convergent_concrete": (self.convergent_thinking + self.concrete_thinking) / 2,
            "divergent_abstract": (self.divergent_thinking + self.abstract_thinking) / 2,
        }


@dataclass
class AttentionProfile:
    sustained_attention: float = 0.5
    distraction_count: int = 0
    average_focus_duration: float = 0.0
    attention_spans: RollingWindow = field(default_factory=lambda: RollingWindow(20))


@dataclass
class MemoryEvent:
    item_id: str
    memory_type: str  # working, short_term, long_term
    encoding_time: float
    retrieval_time: Optional[float] = None
    successful_recall: Optional[bool] = None
    retention_duration: Optional[float] = None


# Strategy keyword → thinking-style fields nudged by +0.05
STRATEGY_STYLE_KEYWORDS = [
    (("logical", "sequential"), ("analytical_thinking", "sequential_processing")),
    (("visual", "spatial"), ("holistic_thinking", "simultaneous_processing")),
    (("creative", "alternative"), ("divergent_thinking", "abstract_thinking")),
]

# Problem type → (profile reasoning field, learning style credited on success)
REASONING_BY_TYPE = {
    "chronocircuits": ("logical_reasoning", LearningStyle.LOGICAL_MATHEMATICAL),
    "pyramidrebuilder": ("spatial_reasoning", LearningStyle.VISUAL_SPATIAL),
    "scrollofsecrets": ("verbal_reasoning", LearningStyle.VERBAL_LINGUISTIC),
}


class CognitiveAnalyzer:
    """
    Problem-solving and cognitive-state analyzer
    """

    THRESHOLDS = {
        "high_load": 0.8,
        "low_load": 0.3,
        "optimal_challenge": 0.6,
        "flow": 0.7,
        "break_frustration": 0.7,
        "break_attention": 0.3,
        "active_problem_window": 300.0,  # seconds
        "memory_window": 60.0,           # seconds
        "base_load": 0.3,
        "load_per_problem": 0.2,
        "load_per_memory_task": 0.1,
        "frustration_rate": 0.1,         # per second
    }

    ATTENTION_SPAN_BASELINE = 15.0
    PROFILE_SMOOTHING = 0.1
    REASONING_SMOOTHING = 0.15
    THINKING_STYLE_STEP = 0.05
    REASONING_STYLE_DELTA = 0.005
    METACOGNITION_STYLE_DELTA = 0.002
    HISTORY_WINDOW = 10

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        update_interval: Optional[float] = None,
        expected_times: Optional[Dict[str, float]] = None,
        custom_thresholds: Optional[Dict[str, float]] = None,
        detector: Optional[PatternDetector] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            tracker: Shared profile tracker
            update_interval: Seconds between periodic tick() calls
            expected_times: Per-type expected solve times merged over the defaults
            custom_thresholds: Overrides for THRESHOLDS
            detector: Breakthrough/fatigue rules (default PatternDetector())
            clock: Seconds source for events without a timestamp
        """
        self.tracker = tracker
        self.update_interval = update_interval or settings.COGNITIVE_UPDATE_INTERVAL
        self.expected_times = {k.lower(): v for k, v in (expected_times or {}).items()}
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}
        self.detector = detector or PatternDetector()
        self._clock = clock or time.monotonic
        self.reset()

    def reset(self) -> None:
        self.profile = CognitiveProfile()
        self.thinking_style = ThinkingStyleProfile()
        self.attention = AttentionProfile()
        self.active_problems: Dict[str, ProblemSolvingRecord] = {}
        self.history: List[ProblemSolvingRecord] = []
        self.completed: List[ProblemSolvingRecord] = []
        self.patterns: Dict[str, ProblemSolvingPattern] = {}
        self.breakthroughs: List[Breakthrough] = []
        self.memory_events: RollingWindow[MemoryEvent] = RollingWindow(200)

        self.cognitive_load = 0.0
        self.attention_level = 0.5
        self.frustration_level = 0.0
        self.flow_state = 0.0
        self.fatigue_detections = 0
        self.tick_count = 0

    def _now(self, timestamp: Optional[float] = None) -> float:
        return self._clock() if timestamp is None else timestamp

    # ------------------------------------------------------------------
    # Problem lifecycle
    # ------------------------------------------------------------------

    def report_problem_event(self, event: ProblemEvent) -> Optional[ProblemSolvingRecord]:
        """Single entry point for puzzle lifecycle notifications"""
        if event.event_type == ProblemEventType.STARTED:
            return self.start_problem(event.problem_id, event.problem_type, event.timestamp)
        elif event.event_type == ProblemEventType.ATTEMPTED:
            return self.record_attempt(event.problem_id, event.strategy or "", event.timestamp)
        elif event.event_type == ProblemEventType.HINT_USED:
            return self.record_hint(event.problem_id, event.timestamp)
        elif event.event_type == ProblemEventType.COMPLETED:
            return self.complete_problem(
                event.problem_id,
                event.solved,
                problem_type=event.problem_type,
                hints_used=event.hints_used,
                timestamp=event.timestamp,
            )
        logger.warning(f"Unhandled problem event type: {event.event_type}")
        return None

    def start_problem(
        self,
        problem_id: str,
        problem_type: str,
        timestamp: Optional[float] = None,
    ) -> ProblemSolvingRecord:
        now = self._now(timestamp)
        previous = self.active_problems.get(problem_id)
        if previous is not None:
            logger.warning(f"Problem {problem_id} restarted before completion; previous attempt abandoned")
            previous.status = ProblemStatus.ABANDONED
            previous.end_time = now

        record = ProblemSolvingRecord(
            problem_id=problem_id,
            problem_type=problem_type or problem_id,
            start_time=now,
            cognitive_load_during=self.cognitive_load,
        )
        self.active_problems[problem_id] = record
        self.history.append(record)
        self.cognitive_load = min(1.0, self.cognitive_load + 0.2)

        self.tracker.log_puzzle_start(record.problem_type, problem_id)
        return record

    def _active_record(self, problem_id: str, now: float, problem_type: str = "") -> ProblemSolvingRecord:
        record = self.active_problems.get(problem_id)
        if record is None:
            logger.warning(f"Event for unstarted problem {problem_id}; starting it implicitly")
            record = self.start_problem(problem_id, problem_type, now)
        return record

    def record_attempt(
        self,
        problem_id: str,
        strategy: str,
        timestamp: Optional[float] = None,
    ) -> ProblemSolvingRecord:
        now = self._now(timestamp)
        record = self._active_record(problem_id, now)
        record.attempts += 1
        record.add_strategy(strategy)
        self._analyze_strategy_choice(strategy)

        self.tracker.log_puzzle_attempt(record.problem_type, False, max(0.0, now - record.start_time))
        return record

    def record_hint(self, problem_id: str, timestamp: Optional[float] = None) -> ProblemSolvingRecord:
        now = self._now(timestamp)
        record = self._active_record(problem_id, now)
        record.hints_used += 1
        self.tracker.log_hint_used(record.problem_type, record.hints_used, max(0.0, now - record.start_time))
        return record

    def complete_problem(
        self,
        problem_id: str,
        solved: bool,
        problem_type: str = "",
        hints_used: int = 0,
        timestamp: Optional[float] = None,
    ) -> ProblemSolvingRecord:
        """
        Finalize, classify and report a problem

        A completion with no recorded attempts counts as one attempt.
        """
        now = self._now(timestamp)
        record = self._active_record(problem_id, now, problem_type)
        del self.active_problems[problem_id]

        record.solved = solved
        record.attempts = max(1, record.attempts)
        record.end_time = now
        record.solution_time = max(0.0, now - record.start_time)
        record.status = ProblemStatus.COMPLETED

        record.approach = classify_approach(record)
        record.status = ProblemStatus.CLASSIFIED

        expected = expected_solution_time(record.problem_type, self.expected_times)
        record.metrics = {
            "processing_speed": calculate_processing_speed(record, expected),
            "efficiency": calculate_efficiency(record),
            "flexibility": calculate_flexibility(record),
            "persistence": calculate_persistence(record),
        }

        extra_hints = max(0, hints_used - record.hints_used)
        record.hints_used += extra_hints

        event = self.tracker.record_event(
            BehaviorEventKind.PROBLEM_SOLVING,
            {
                "event": "cognitive_problem_solving",
                "problem_id": record.problem_id,
                "problem_type": record.problem_type,
                "solution_time": record.solution_time,
                "attempts": record.attempts,
                "successful": record.solved,
                "approach_type": record.approach.value,
                "strategies_used": ",".join(record.strategies),
                "processing_speed_score": record.metrics["processing_speed"],
                "efficiency_score": record.metrics["efficiency"],
                "flexibility_score": record.metrics["flexibility"],
                "cognitive_load_during": record.cognitive_load_during,
                "shows_systematic_thinking": record.approach.value == "systematic",
                "shows_creative_problem_solving": len(record.strategies) > 3,
                "shows_persistence": record.attempts > 3 and record.solved,
            },
            source="cognitive_analyzer",
        )
        trigger_id = event.event_id if event is not None else f"{problem_id}-completed"

        # Breakthroughs compare against the state before this problem
        breakthrough = self.detector.detect_breakthrough(
            record,
            expected,
            profile_before={
                "processing_speed": self.profile.processing_speed,
                "flexibility": self.profile.cognitive_flexibility,
            },
            prior_patterns=self.patterns,
            trigger_event_id=trigger_id,
            timestamp=now,
        )

        self._update_profile(record)
        self._update_patterns(record)
        self.completed.append(record)

        if breakthrough is not None:
            self._report_breakthrough(breakthrough)

        self.tracker.log_puzzle_complete(record.problem_type, solved, record.solution_time, hints_used=extra_hints)
        self.tracker.update_scalar(ProfileScalar.CONFIDENCE, 1.0 if solved else 0.0, 0.2)

        self.cognitive_load = max(0.0, self.cognitive_load - 0.1)
        record.status = ProblemStatus.REPORTED
        logger.debug(
            f"Problem {problem_id} completed: solved={solved}, approach={record.approach.value}, "
            f"time={record.solution_time:.1f}s"
        )
        return record

    def _analyze_strategy_choice(self, strategy: str) -> None:
        name = (strategy or "").lower()
        for keywords, fields in STRATEGY_STYLE_KEYWORDS:
            if any(k in name for k in keywords):
                for attr in fields:
                    value = getattr(self.thinking_style, attr) + self.THINKING_STYLE_STEP
                    setattr(self.thinking_style, attr, clamp01(value))
                break

    def _update_profile(self, record: ProblemSolvingRecord) -> None:
        profile = self.profile
        profile.processing_speed = lerp(
            profile.processing_speed, record.metric("processing_speed"), self.PROFILE_SMOOTHING
        )
        profile.cognitive_flexibility = lerp(
            profile.cognitive_flexibility, record.metric("flexibility"), self.PROFILE_SMOOTHING
        )

        reasoning = REASONING_BY_TYPE.get(record.problem_type.lower())
        if reasoning is not None:
            attr, style = reasoning
            target = 0.8 if record.solved else 0.4
            setattr(profile, attr, lerp(getattr(profile, attr), target, self.REASONING_SMOOTHING))
            if record.solved:
                self.tracker.adjust_weight(style, self.REASONING_STYLE_DELTA)

        if record.attempts == 1 and record.solved:
            profile.pattern_recognition = min(1.0, profile.pattern_recognition + 0.1)

        if len(record.strategies) > 1:
            profile.metacognition = min(1.0, profile.metacognition + 0.05)
            self.tracker.adjust_weight(LearningStyle.INTRAPERSONAL, self.METACOGNITION_STYLE_DELTA)

    def _update_patterns(self, record: ProblemSolvingRecord) -> None:
        key = f"{record.problem_type}_{record.approach.value}"
        pattern = self.patterns.get(key)
        if pattern is None:
            pattern = ProblemSolvingPattern(
                pattern_name=key,
                problem_type=record.problem_type,
                approach=record.approach,
            )
            self.patterns[key] = pattern
        pattern.update(record)

    def _report_breakthrough(self, breakthrough: Breakthrough) -> None:
        self.breakthroughs.append(breakthrough)
        self.tracker.record_breakthrough(breakthrough)
        self.tracker.generate_insight(
            breakthrough.breakthrough_type,
            f"Significant learning breakthrough detected: {breakthrough.breakthrough_type}",
            clamp01(0.7 + max(0.0, breakthrough.magnitude)),
            data={
                "problem_id": breakthrough.problem_id,
                "trigger_event": breakthrough.trigger_event_id,
                "cognitive_leap_magnitude": breakthrough.magnitude,
                "performance_increase": breakthrough.after["processing_speed"] - breakthrough.before["processing_speed"],
                "triggers": ",".join(breakthrough.triggers),
            },
        )

    # ------------------------------------------------------------------
    # Memory and attention
    # ------------------------------------------------------------------

    def record_memory_event(
        self,
        item_id: str,
        memory_type: str = "working",
        encoding: bool = True,
        successful_recall: Optional[bool] = None,
        timestamp: Optional[float] = None,
    ) -> Optional[MemoryEvent]:
        """
        Record an encoding, or a retrieval of the most recent encoding of item_id

        Returns:
            The affected MemoryEvent, or None for a retrieval with no prior encoding
        """
        now = self._now(timestamp)
        if encoding:
            event = MemoryEvent(item_id=item_id, memory_type=memory_type, encoding_time=now)
            self.memory_events.append(event)
            return event

        for event in reversed(self.memory_events.latest()):
            if event.item_id == item_id:
                event.retrieval_time = now
                event.retention_duration = now - event.encoding_time
                if successful_recall is not None:
                    event.successful_recall = successful_recall
                    self.profile.working_memory_efficiency = lerp(
                        self.profile.working_memory_efficiency,
                        1.0 if successful_recall else 0.0,
                        self.PROFILE_SMOOTHING,
                    )
                return event

        logger.debug(f"Retrieval of {item_id} without a recorded encoding")
        return None

    def update_attention_metrics(self, focus_duration: float, distracted: bool = False) -> None:
        if not math.isfinite(focus_duration):
            return
        attention = self.attention
        attention.attention_spans.append(max(0.0, focus_duration))
        attention.average_focus_duration = attention.attention_spans.mean()
        if distracted:
            attention.distraction_count += 1

        attention.sustained_attention = clamp01(attention.average_focus_duration / self.ATTENTION_SPAN_BASELINE)
        self.attention_level = self._calculate_current_attention()

    def _calculate_current_attention(self) -> float:
        """Linearly recency-weighted mean span relative to the baseline"""
        spans = self.attention.attention_spans.latest()
        if not spans:
            return 0.5
        n = len(spans)
        weights = [(i + 1) / n for i in range(n)]
        weighted = sum(s * w for s, w in zip(spans, weights)) / sum(weights)
        return clamp01(weighted / self.ATTENTION_SPAN_BASELINE)

    # ------------------------------------------------------------------
    # Periodic update
    # ------------------------------------------------------------------

    def tick(self, delta_time: Optional[float] = None, timestamp: Optional[float] = None) -> Optional[Insight]:
        """
        Periodic cognitive update (default every 1s)

        Returns:
            The fatigue insight emitted on this tick, if any
        """
        dt = self.update_interval if delta_time is None else delta_time
        if not math.isfinite(dt) or dt < 0:
            dt = 0.0
        now = self._now(timestamp)

        self._update_cognitive_load(now, dt)
        self._update_flow_state()
        fatigue_insight = self._detect_fatigue()
        self.tick_count += 1

        self.tracker.update_scalar(ProfileScalar.FRUSTRATION, self.frustration_level, 0.3)
        self.tracker.update_scalar(ProfileScalar.ENGAGEMENT, self.flow_state, 0.1)
        return fatigue_insight

    def _update_cognitive_load(self, now: float, dt: float) -> None:
        active = sum(
            1 for r in self.history
            if r.is_active or now - r.start_time < self.thresholds["active_problem_window"]
        )
        recent_memory = sum(
            1 for m in self.memory_events
            if now - m.encoding_time < self.thresholds["memory_window"]
        )
        load = (
            self.thresholds["base_load"]
            + active * self.thresholds["load_per_problem"]
            + recent_memory * self.thresholds["load_per_memory_task"]
        )
        load *= (2.0 - self.attention_level)
        self.cognitive_load = clamp01(load)

        step = self.thresholds["frustration_rate"] * dt
        if self.cognitive_load > self.thresholds["high_load"]:
            self.frustration_level = min(1.0, self.frustration_level + step)
        else:
            self.frustration_level = max(0.0, self.frustration_level - step)

    def _update_flow_state(self) -> None:
        skill = (self.profile.processing_speed + self.profile.cognitive_flexibility) / 2
        balance = 1.0 - abs(self.cognitive_load - skill)
        self.flow_state = clamp01(balance * self.attention_level * (1.0 - self.frustration_level))

    def _detect_fatigue(self) -> Optional[Insight]:
        assessment: Optional[FatigueAssessment] = self.detector.assess_fatigue(self.completed)
        if assessment is None:
            return None

        self.fatigue_detections += 1
        return self.tracker.generate_insight(
            "cognitive_fatigue",
            "Player showing signs of cognitive fatigue",
            0.8,
            data={
                "cognitive_load": self.cognitive_load,
                "frustration_level": self.frustration_level,
                "attention_level": self.attention_level,
                "recent_success_rate": assessment.recent_success_rate,
                "recent_efficiency": assessment.recent_efficiency,
                "recommendation": "suggest_break",
            },
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_dominant_thinking_style(self) -> str:
        dominance = self.thinking_style.dominance()
        return max(dominance, key=dominance.get)

    def get_dominant_cognitive_style(self) -> str:
        strengths = {
            "logical_analytical": self.profile.logical_reasoning,
            "visual_spatial": self.profile.spatial_reasoning,
            "verbal_linguistic": self.profile.verbal_reasoning,
            "pattern_recognition": self.profile.pattern_recognition,
            "abstract_thinking": self.profile.abstract_thinking,
        }
        return max(strengths, key=strengths.get)

    def calculate_overall_efficiency(self) -> float:
        recent = self.completed[-self.HISTORY_WINDOW:]
        return safe_mean((r.metric("efficiency") for r in recent), default=0.5)

    def calculate_problem_solving_success(self) -> float:
        recent = self.completed[-self.HISTORY_WINDOW:]
        return safe_mean((1.0 if r.solved else 0.0 for r in recent), default=0.0)

    def get_cognitive_metrics(self) -> Dict[str, float]:
        return {
            "cognitive_load": self.cognitive_load,
            "attention_level": self.attention_level,
            "frustration_level": self.frustration_level,
            "flow_state": self.flow_state,
            "processing_efficiency": self.calculate_overall_efficiency(),
            "cognitive_flexibility": self.profile.cognitive_flexibility,
            "problem_solving_success": self.calculate_problem_solving_success(),
        }

    def get_metric(self, name: str) -> float:
        """Single metric lookup; unknown keys read as 0.5"""
        return self.get_cognitive_metrics().get(name, 0.5)

    def get_common_approach(self, problem_type: Optional[str] = None) -> str:
        if problem_type is not None:
            approach = PatternDetector.common_approach(self.patterns, problem_type)
            return approach.value if approach else "unknown"
        counts = Counter(r.approach.value for r in self.completed if r.approach is not None)
        if not counts:
            return "unknown"
        return counts.most_common(1)[0][0]

    def is_in_flow_state(self) -> bool:
        return self.flow_state > self.thresholds["flow"]

    def needs_break(self) -> bool:
        return (
            self.cognitive_load > self.thresholds["high_load"]
            or self.frustration_level > self.thresholds["break_frustration"]
            or self.attention_level < self.thresholds["break_attention"]
        )

    def get_learning_speed(self) -> str:
        speed = self.profile.processing_speed
        if speed > 0.7:
            return "fast"
        elif speed < 0.4:
            return "developing"
        return "adaptive"

    def get_cognitive_analysis(self) -> Dict[str, object]:
        """Report map for the detailed session report"""
        return {
            "problem_solving_approach": self.get_common_approach(),
            "learning_speed": self.get_learning_speed(),
            "retention_estimate": self.profile.working_memory_efficiency,
            "dominant_cognitive_style": self.get_dominant_cognitive_style(),
            "dominant_thinking_style": self.get_dominant_thinking_style(),
            "problems_completed": len(self.completed),
            "problems_solved": sum(1 for r in self.completed if r.solved),
            "breakthrough_count": len(self.breakthroughs),
            "fatigue_detections": self.fatigue_detections,
            "sustained_attention": self.attention.sustained_attention,
            "metrics": self.get_cognitive_metrics(),
            "profile": self.profile.to_dict(),
            "patterns": {
                key: {
                    "occurrences": p.occurrences,
                    "success_rate": p.success_rate,
                    "average_time": p.average_time,
                }
                for key, p in self.patterns.items()
            },
        }
