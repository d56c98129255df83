"""
Small numeric helpers shared by the behaviour analyzers
"""
import math
from typing import Iterable, Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]


def clamp01(value: float) -> float:
    """Clamp a value to [0, 1]"""
    return max(0.0, min(1.0, value))


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation with t clamped to [0, 1]"""
    return start + (end - start) * clamp01(t)


def ewma(current: float, sample: float, smoothing: float) -> float:
    """Exponentially weighted moving average: current*(1-a) + sample*a"""
    return current * (1.0 - smoothing) + sample * smoothing


def safe_mean(values: Iterable[float], default: float = 0.0) -> float:
    """Mean of values, or default when empty"""
    values = list(values)
    if not values:
        return default
    return sum(values) / len(values)


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator guarded against zero"""
    if denominator == 0:
        return default
    return numerator / denominator


def population_variance(values: Sequence[float], default: float = 0.0) -> float:
    """Population variance, or default when empty"""
    if not values:
        return default
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two points"""
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def normalize(vector: Sequence[float]) -> Tuple[float, ...]:
    """Unit vector, or a zero vector of the same size when the input is degenerate"""
    arr = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(arr)
    if norm == 0 or not math.isfinite(norm):
        return tuple(0.0 for _ in arr)
    return tuple(float(v) for v in arr / norm)


def angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    """Angle in degrees between two direction vectors (0 for degenerate input)"""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    na = np.linalg.norm(va)
    nb = np.linalg.norm(vb)
    if na == 0 or nb == 0:
        return 0.0
    cos_theta = float(np.dot(va, vb) / (na * nb))
    cos_theta = max(-1.0, min(1.0, cos_theta))
    return math.degrees(math.acos(cos_theta))
