"""
Insight and breakthrough records emitted by the pattern detectors
"""
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    insight_type: str
    description: str
    significance: float = Field(..., ge=0, le=1)
    timestamp: float = 0.0
    data: Dict[str, Any] = Field(default_factory=dict)


class Breakthrough(BaseModel):
    """A significant rule-triggered jump in measured performance"""
    model_config = ConfigDict(frozen=True)

    breakthrough_type: str  # insight_breakthrough, processing_speed_breakthrough, strategy_breakthrough
    problem_id: str
    problem_type: str
    trigger_event_id: str
    magnitude: float
    before: Dict[str, float]
    after: Dict[str, float]
    triggers: List[str] = Field(default_factory=list)
    timestamp: float = 0.0
