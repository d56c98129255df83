from .insights import Breakthrough, Insight
from .profile import LearnerProfileSnapshot, RealTimeMetrics, ScalarReading
from .report import DetailedReport

__all__ = [
    "Breakthrough",
    "Insight",
    "LearnerProfileSnapshot",
    "RealTimeMetrics",
    "ScalarReading",
    "DetailedReport",
]
