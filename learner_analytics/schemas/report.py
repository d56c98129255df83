"""
Detailed session report

Plain nested record; model_dump(mode="json") yields a JSON-serializable dict.
"""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .insights import Breakthrough, Insight
from .profile import LearnerProfileSnapshot


class DetailedReport(BaseModel):
    generated_at: datetime
    session_duration: float
    profile: LearnerProfileSnapshot
    dominant_learning_style: str
    top_learning_styles: List[str]
    summary: str
    insights: List[Insight] = Field(default_factory=list)
    breakthroughs: List[Breakthrough] = Field(default_factory=list)
    session_metrics: Dict[str, float] = Field(default_factory=dict)
    cognitive_analysis: Dict[str, Any] = Field(default_factory=dict)
    movement_analysis: Dict[str, Any] = Field(default_factory=dict)
    attention_analysis: Dict[str, Any] = Field(default_factory=dict)
    social_analysis: Dict[str, Any] = Field(default_factory=dict)
    decision_making_analysis: Dict[str, Any] = Field(default_factory=dict)
    skill_development: Dict[str, Dict[str, float]] = Field(default_factory=dict)
