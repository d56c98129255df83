"""
Movement Analyzer - Exploration Behaviour from Player Position

Converts position/time samples into locomotion metrics and exploration signals.

Two input streams:
- Per-frame positions (track_speed): instantaneous speed, moving vs idle time
- Interval samples, default every 0.5s (record_sample): distance, direction
  changes, path, zone dwell time

Key Indicators:
- Distance only accrues past a 0.1 unit jitter threshold
- Direction change: >30 degrees from the reference heading; the reference is
  reset on every detected change so one turn counts once
- High instantaneous speed (>5 units/s) nudges the kinesthetic weight
- Entering a never-visited zone counts as exploration and raises curiosity
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import math
import time
import logging

from learner_analytics.behavior.events import BehaviorEvent, BehaviorEventKind, RollingWindow
from learner_analytics.behavior.stats import Vector3, angle_between, distance, normalize, safe_ratio
from learner_analytics.core.config import settings
from learner_analytics.profile import LearnerProfileTracker, LearningStyle, ProfileScalar

logger = logging.getLogger(__name__)

ZoneResolver = Callable[[Vector3], Optional[str]]


@dataclass
class PathPoint:
    position: Vector3
    timestamp: float


@dataclass
class MovementSnapshot:
    """Structural movement summary"""
    total_distance: float
    average_speed: float
    max_speed: float
    direction_changes: int
    time_moving: float
    time_stationary: float
    movement_ratio: float  # moving / (moving + stationary)
    path: List[Vector3]
    zone_times: Dict[str, float]
    current_zone: Optional[str]
    zones_visited: int


@dataclass
class _ZoneState:
    current: Optional[str] = None
    entered_at: float = 0.0
    times: Dict[str, float] = field(default_factory=dict)
    visited: List[str] = field(default_factory=list)


class MovementAnalyzer:
    """
    Movement analyzer for exploration-style inference
    """

    THRESHOLDS = {
        "movement": 0.1,           # units per sample, below = jitter
        "stationary": 0.01,        # units per second
        "high_speed": 5.0,         # units per second
        "direction_change": 30.0,  # degrees
        "fast_pace": 4.0,          # average speed
        "slow_pace": 1.5,
    }

    KINESTHETIC_DELTA = 0.001
    CURIOSITY_SMOOTHING = 0.1
    ZONE_SIZE = 50.0

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        sample_interval: Optional[float] = None,
        max_path_points: Optional[int] = None,
        zone_resolver: Optional[ZoneResolver] = None,
        zone_size: float = ZONE_SIZE,
        custom_thresholds: Optional[Dict[str, float]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            tracker: Shared profile tracker receiving weight/scalar deltas
            sample_interval: Seconds between record_sample calls
            max_path_points: Path buffer capacity
            zone_resolver: Maps a position to a zone id (None = use grid)
            zone_size: Grid bucket size for the fallback zone naming
            custom_thresholds: Overrides for THRESHOLDS
            clock: Seconds source for samples without an explicit timestamp
        """
        self.tracker = tracker
        self.sample_interval = sample_interval or settings.MOVEMENT_SAMPLE_INTERVAL
        self.max_path_points = max_path_points or settings.MAX_PATH_POINTS
        self.zone_resolver = zone_resolver
        self.zone_size = zone_size
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}
        self._clock = clock or time.monotonic
        self.reset()

    def reset(self) -> None:
        self.total_distance = 0.0
        self.max_speed = 0.0
        self.current_speed = 0.0
        self.time_moving = 0.0
        self.time_stationary = 0.0
        self.direction_changes = 0
        self.path: RollingWindow[PathPoint] = RollingWindow(self.max_path_points)
        self.events: RollingWindow[BehaviorEvent] = RollingWindow(50)

        self._speed_accumulator = 0.0
        self._speed_samples = 0
        self._last_frame_position: Optional[Vector3] = None
        self._sample_reference: Optional[Vector3] = None
        self._reference_direction: Optional[Tuple[float, ...]] = None
        self._last_sample_time: Optional[float] = None
        self._zones = _ZoneState()

    @property
    def average_speed(self) -> float:
        return safe_ratio(self._speed_accumulator, self._speed_samples)

    # ------------------------------------------------------------------
    # Per-frame speed
    # ------------------------------------------------------------------

    def track_speed(self, position: Sequence[float], delta_time: float) -> float:
        """
        Continuous speed tracking from a per-frame position

        Frames with non-positive delta time only move the reference position.

        Returns:
            Instantaneous speed (0 for skipped frames)
        """
        position = _as_vector(position)
        previous = self._last_frame_position
        self._last_frame_position = position

        if previous is None or not math.isfinite(delta_time) or delta_time <= 0:
            return 0.0

        speed = distance(position, previous) / delta_time
        self.current_speed = speed
        self._speed_accumulator += speed
        self._speed_samples += 1
        self.max_speed = max(self.max_speed, speed)

        if speed > self.thresholds["stationary"]:
            self.time_moving += delta_time
        else:
            self.time_stationary += delta_time

        if speed > self.thresholds["high_speed"]:
            self.tracker.adjust_weight(LearningStyle.KINESTHETIC, self.KINESTHETIC_DELTA)

        return speed

    # ------------------------------------------------------------------
    # Interval samples
    # ------------------------------------------------------------------

    def record_sample(
        self,
        position: Sequence[float],
        forward: Optional[Sequence[float]] = None,
        timestamp: Optional[float] = None,
        zone_id: Optional[str] = None,
    ) -> bool:
        """
        Analyze one interval sample

        Args:
            position: Current (x, y, z) position
            forward: Facing direction; derived from displacement when omitted
            timestamp: Sample time (defaults to the analyzer clock)
            zone_id: Explicit zone; otherwise resolver, then grid fallback

        Returns:
            True when a direction change was detected on this sample
        """
        position = _as_vector(position)
        now = self._clock() if timestamp is None else timestamp
        if self._last_sample_time is not None and now < self._last_sample_time:
            now = self._last_sample_time
        self._last_sample_time = now

        direction_changed = False
        if self._sample_reference is None:
            self._sample_reference = position
            self.path.append(PathPoint(position, now))
            if forward is not None:
                self._reference_direction = normalize(forward)
        else:
            displacement = distance(position, self._sample_reference)
            moved = displacement > self.thresholds["movement"]
            heading = None
            if forward is not None:
                heading = normalize(forward)
            elif moved:
                heading = normalize(tuple(p - r for p, r in zip(position, self._sample_reference)))

            if moved:
                self.total_distance += displacement
                self.path.append(PathPoint(position, now))
                self._sample_reference = position
                self.tracker.log_camera_behavior(self.sample_interval)

            if heading is not None:
                direction_changed = self._check_direction(heading)

        self._check_zone(position, now, zone_id)
        return direction_changed

    def _check_direction(self, heading: Tuple[float, ...]) -> bool:
        if self._reference_direction is None or not any(self._reference_direction):
            self._reference_direction = heading
            return False

        if angle_between(self._reference_direction, heading) > self.thresholds["direction_change"]:
            self.direction_changes += 1
            self._reference_direction = heading
            logger.debug(f"Direction change #{self.direction_changes}")
            return True
        return False

    def resolve_zone(self, position: Vector3) -> str:
        if self.zone_resolver is not None:
            zone = self.zone_resolver(position)
            if zone:
                return zone
        grid_x = math.floor(position[0] / self.zone_size)
        grid_z = math.floor(position[2] / self.zone_size)
        return f"zone_{grid_x}_{grid_z}"

    def _check_zone(self, position: Vector3, now: float, zone_id: Optional[str]) -> None:
        zone = zone_id or self.resolve_zone(position)
        state = self._zones
        if zone == state.current:
            return

        previous = state.current
        if previous is not None:
            elapsed = max(0.0, now - state.entered_at)
            state.times[previous] = state.times.get(previous, 0.0) + elapsed
            event = self.tracker.record_event(
                BehaviorEventKind.MOVEMENT,
                {"event": "zone_changed", "from_zone": previous, "to_zone": zone, "dwell_time": elapsed},
                source="movement_analyzer",
            )
            if event is not None:
                self.events.append(event)
            logger.debug(f"Zone changed {previous} -> {zone} after {elapsed:.1f}s")

        state.current = zone
        state.entered_at = now

        if zone not in state.visited:
            state.visited.append(zone)
            self.tracker.increment_metric("areas_explored")
            self.tracker.update_scalar(ProfileScalar.CURIOSITY, 1.0, self.CURIOSITY_SMOOTHING)

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def get_zone_times(self) -> Dict[str, float]:
        """Per-zone dwell time, including the open span of the current zone up to the last sample"""
        times = dict(self._zones.times)
        if self._zones.current is not None and self._last_sample_time is not None:
            open_span = max(0.0, self._last_sample_time - self._zones.entered_at)
            times[self._zones.current] = times.get(self._zones.current, 0.0) + open_span
        return times

    @property
    def current_zone(self) -> Optional[str]:
        return self._zones.current

    def get_snapshot(self) -> MovementSnapshot:
        total_time = self.time_moving + self.time_stationary
        return MovementSnapshot(
            total_distance=self.total_distance,
            average_speed=self.average_speed,
            max_speed=self.max_speed,
            direction_changes=self.direction_changes,
            time_moving=self.time_moving,
            time_stationary=self.time_stationary,
            movement_ratio=safe_ratio(self.time_moving, total_time),
            path=[p.position for p in self.path],
            zone_times=self.get_zone_times(),
            current_zone=self._zones.current,
            zones_visited=len(self._zones.visited),
        )

    def get_preferred_pace(self) -> str:
        speed = self.average_speed
        if speed > self.thresholds["fast_pace"]:
            return "fast"
        elif speed > self.thresholds["slow_pace"]:
            return "moderate"
        return "slow"

    def get_exploration_style(self) -> str:
        """
        Classify exploration from zone coverage and turning frequency

        - wide_explorer: many zones visited
        - systematic: few turns per distance travelled
        - wandering: frequent turning
        """
        zones = len(self._zones.visited)
        if zones > 5:
            return "wide_explorer"
        if self.total_distance <= 0:
            return "stationary"
        turns_per_100 = self.direction_changes / self.total_distance * 100
        if turns_per_100 < 5:
            return "systematic"
        return "wandering"

    def get_movement_efficiency(self) -> float:
        """Straight-line displacement over path length across the recorded path"""
        points = [p.position for p in self.path]
        if len(points) < 2:
            return 0.0
        path_length = sum(distance(a, b) for a, b in zip(points, points[1:]))
        return min(1.0, safe_ratio(distance(points[0], points[-1]), path_length))

    def get_movement_analysis(self) -> Dict[str, object]:
        """Report map for the detailed session report"""
        snapshot = self.get_snapshot()
        return {
            "total_distance": snapshot.total_distance,
            "average_speed": snapshot.average_speed,
            "max_speed": snapshot.max_speed,
            "direction_changes": snapshot.direction_changes,
            "movement_ratio": snapshot.movement_ratio,
            "zones_visited": snapshot.zones_visited,
            "zone_times": snapshot.zone_times,
            "exploration_style": self.get_exploration_style(),
            "movement_efficiency": self.get_movement_efficiency(),
            "preferred_pace": self.get_preferred_pace(),
        }


def _as_vector(position: Sequence[float]) -> Vector3:
    values = tuple(float(v) for v in position)
    if len(values) == 2:
        # (x, z) ground-plane positions
        return (values[0], 0.0, values[1])
    if len(values) != 3:
        raise ValueError(f"Expected a 2D or 3D position, got {position!r}")
    return values
