"""
Behaviour Event Model

Typed, immutable behaviour records plus the bounded rolling windows every
analyzer keeps its recent history in.

Windows in use:
- 20 gaze hit points / attention spans
- 10 processing-efficiency readings
- 1000 movement path points
- 50 social interactions
"""
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Deque, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar
import itertools

from learner_analytics.behavior.stats import population_variance, safe_mean

T = TypeVar("T")

_event_counter = itertools.count(1)


class RollingWindow(Generic[T]):
    """
    Bounded FIFO of the last N samples

    Oldest entries are evicted first; len() never exceeds capacity.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"RollingWindow capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: Deque[T] = deque(maxlen=capacity)

    def append(self, item: T) -> None:
        self._items.append(item)

    def extend(self, items) -> None:
        self._items.extend(items)

    def clear(self) -> None:
        self._items.clear()

    def latest(self, n: Optional[int] = None) -> List[T]:
        """Most recent n items (all items when n is None), oldest first"""
        items = list(self._items)
        if n is None:
            return items
        if n <= 0:
            return []
        return items[-n:]

    @property
    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    @property
    def is_full(self) -> bool:
        return len(self._items) == self.capacity

    def mean(self, key: Optional[Callable[[T], float]] = None, default: float = 0.0) -> float:
        """Mean of the window (optionally of key(item)), default when empty"""
        return safe_mean((key(i) if key else i for i in self._items), default)

    def variance(self, key: Optional[Callable[[T], float]] = None, default: float = 0.0) -> float:
        """Population variance of the window, default when empty"""
        values = [key(i) if key else i for i in self._items]
        return population_variance(values, default)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"RollingWindow(capacity={self.capacity}, size={len(self._items)})"


class BehaviorEventKind(str, Enum):
    """Behaviour event variants"""
    MOVEMENT = "movement"
    GAZE = "gaze"
    PROBLEM_SOLVING = "problem_solving"
    SOCIAL_INTERACTION = "social_interaction"
    DECISION = "decision"
    SESSION = "session"


@dataclass(frozen=True)
class BehaviorEvent:
    """A single immutable behaviour observation"""
    kind: BehaviorEventKind
    timestamp: float
    source: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    event_id: str = ""

    def __post_init__(self):
        # Freeze the payload so stored events cannot be edited through a shared dict
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))
        if not self.event_id:
            object.__setattr__(self, "event_id", f"{self.kind.value}-{next(_event_counter)}")

    def to_dict(self) -> Dict[str, Any]:
        """Flat export form"""
        return {
            "event_id": self.event_id,
            "kind": self.kind.value,
            "timestamp": self.timestamp,
            "source": self.source,
            "payload": dict(self.payload),
        }
