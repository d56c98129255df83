"""
Learner profile read models
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ScalarReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float = Field(..., ge=0, le=1)
    updated_at: float = 0.0


class LearnerProfileSnapshot(BaseModel):
    """
    Read-only copy of the learner profile

    weights: 8-way learning-style simplex (sums to 1.0)
    scalars: engagement, frustration, confidence, curiosity, focus
    """
    model_config = ConfigDict(frozen=True)

    weights: Dict[str, float]
    scalars: Dict[str, ScalarReading]
    dominant_style: str
    top_styles: List[str] = Field(default_factory=list)

    def scalar(self, name: str) -> float:
        reading = self.scalars.get(name)
        return reading.value if reading else 0.5


class RealTimeMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    engagement: float = Field(0.5, ge=0, le=1)
    focus: float = Field(0.5, ge=0, le=1)
    frustration: float = Field(0.0, ge=0, le=1)
    confidence: float = Field(0.5, ge=0, le=1)
    curiosity: float = Field(0.5, ge=0, le=1)
    current_puzzle_attempts: int = 0
    session_duration: float = 0.0
