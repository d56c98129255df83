"""
Problem-solving records and per-problem metrics

Lifecycle of a problem:
    NOT_STARTED → IN_PROGRESS → COMPLETED → CLASSIFIED → REPORTED

A problem restarted while still in progress leaves its earlier attempt
ABANDONED.

Puzzle hosts describe progress with ProblemEvent values delivered through a
single entry point; there is no per-puzzle-type wiring.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from learner_analytics.behavior.stats import clamp01


class ProblemStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CLASSIFIED = "classified"
    REPORTED = "reported"
    ABANDONED = "abandoned"


class ProblemEventType(str, Enum):
    STARTED = "started"
    ATTEMPTED = "attempted"
    HINT_USED = "hint_used"
    COMPLETED = "completed"


class SolvingApproach(str, Enum):
    """Approach classes, in classification order"""
    INSIGHT_BASED = "insight_based"
    EXPLORATORY = "exploratory"
    TRIAL_AND_ERROR = "trial_and_error"
    SYSTEMATIC = "systematic"
    INTUITIVE = "intuitive"
    MIXED = "mixed_approach"


# Expected solution time per puzzle type (seconds)
EXPECTED_SOLUTION_TIMES = {
    "chronocircuits": 120.0,
    "scrollofsecrets": 90.0,
    "pyramidrebuilder": 150.0,
}
DEFAULT_EXPECTED_TIME = 100.0


@dataclass(frozen=True)
class ProblemEvent:
    """Puzzle lifecycle notification"""
    event_type: ProblemEventType
    problem_id: str
    problem_type: str = ""
    strategy: Optional[str] = None
    solved: bool = False
    hints_used: int = 0
    timestamp: Optional[float] = None

    @classmethod
    def started(cls, problem_id: str, problem_type: str, timestamp: Optional[float] = None) -> "ProblemEvent":
        return cls(ProblemEventType.STARTED, problem_id, problem_type, timestamp=timestamp)

    @classmethod
    def attempted(cls, problem_id: str, strategy: str, timestamp: Optional[float] = None) -> "ProblemEvent":
        return cls(ProblemEventType.ATTEMPTED, problem_id, strategy=strategy, timestamp=timestamp)

    @classmethod
    def hint_used(cls, problem_id: str, timestamp: Optional[float] = None) -> "ProblemEvent":
        return cls(ProblemEventType.HINT_USED, problem_id, timestamp=timestamp)

    @classmethod
    def completed(
        cls,
        problem_id: str,
        solved: bool,
        problem_type: str = "",
        hints_used: int = 0,
        timestamp: Optional[float] = None,
    ) -> "ProblemEvent":
        return cls(
            ProblemEventType.COMPLETED,
            problem_id,
            problem_type,
            solved=solved,
            hints_used=hints_used,
            timestamp=timestamp,
        )


@dataclass
class ProblemSolvingRecord:
    problem_id: str
    problem_type: str
    start_time: float
    attempts: int = 0
    strategies: List[str] = field(default_factory=list)  # distinct, first-use order
    hints_used: int = 0
    solved: bool = False
    solution_time: float = 0.0
    end_time: Optional[float] = None
    status: ProblemStatus = ProblemStatus.IN_PROGRESS
    approach: Optional[SolvingApproach] = None
    cognitive_load_during: float = 0.0
    metrics: Dict[str, float] = field(default_factory=dict)

    def add_strategy(self, strategy: str) -> None:
        if strategy and strategy not in self.strategies:
            self.strategies.append(strategy)

    def metric(self, name: str, default: float = 0.5) -> float:
        """Derived metric, 0.5 when it was never computed"""
        return self.metrics.get(name, default)

    @property
    def is_active(self) -> bool:
        return self.status == ProblemStatus.IN_PROGRESS


def expected_solution_time(problem_type: str, overrides: Optional[Dict[str, float]] = None) -> float:
    """Expected solve time for a puzzle type; unknown types use the default"""
    key = (problem_type or "").lower()
    if overrides and key in overrides:
        return overrides[key]
    return EXPECTED_SOLUTION_TIMES.get(key, DEFAULT_EXPECTED_TIME)


def classify_approach(record: ProblemSolvingRecord) -> SolvingApproach:
    """First matching rule wins"""
    if record.attempts == 1 and record.solved:
        return SolvingApproach.INSIGHT_BASED
    if len(record.strategies) > 3:
        return SolvingApproach.EXPLORATORY
    if record.attempts > 5:
        return SolvingApproach.TRIAL_AND_ERROR
    if any("systematic" in s.lower() for s in record.strategies):
        return SolvingApproach.SYSTEMATIC
    if record.solution_time < 10.0:
        return SolvingApproach.INTUITIVE
    return SolvingApproach.MIXED


def calculate_processing_speed(record: ProblemSolvingRecord, expected_time: float) -> float:
    """clamp01(expected / actual); an instant solve saturates at 1.0"""
    if record.solution_time <= 0:
        return 1.0
    return clamp01(expected_time / record.solution_time)


def calculate_efficiency(record: ProblemSolvingRecord) -> float:
    """
    Mean of time, attempt and strategy efficiency, each 1 / (1 + excess)

    Unsolved problems score 0.
    """
    if not record.solved:
        return 0.0
    time_efficiency = 1.0 / (1.0 + max(0.0, record.solution_time) / 60.0)
    attempt_efficiency = 1.0 / (1.0 + max(0, record.attempts - 1))
    strategy_efficiency = 1.0 / (1.0 + max(0, len(record.strategies) - 1))
    return (time_efficiency + attempt_efficiency + strategy_efficiency) / 3.0


def calculate_flexibility(record: ProblemSolvingRecord) -> float:
    return len(record.strategies) / max(1, record.attempts)


def calculate_persistence(record: ProblemSolvingRecord) -> float:
    """Attempts per second of solving; 0.0 when no time elapsed"""
    if record.solution_time <= 0:
        return 0.0
    return record.attempts / record.solution_time


@dataclass
class ProblemSolvingPattern:
    """Running stats for one (problem type, approach) pair"""
    pattern_name: str
    problem_type: str
    approach: SolvingApproach
    occurrences: int = 0
    success_rate: float = 0.0
    average_time: float = 0.0
    common_strategies: List[str] = field(default_factory=list)

    def update(self, record: ProblemSolvingRecord) -> None:
        self.occurrences += 1
        n = self.occurrences
        self.success_rate = (self.success_rate * (n - 1) + (1.0 if record.solved else 0.0)) / n
        self.average_time = (self.average_time * (n - 1) + record.solution_time) / n
        for strategy in record.strategies:
            if strategy not in self.common_strategies:
                self.common_strategies.append(strategy)
