"""
Pydantic schemas for progress tracking, trends and module completion.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from libs.domain_types import Construct, StreakStatus, Trend
from reflector.schemas.activity import StreakData
from reflector.schemas.scores import AutonomyProfile


class ScoreSnapshot(BaseModel):
    """Raw construct scores of one historical profile."""

    model_config = ConfigDict(extra="ignore")

    date: datetime
    scores: Dict[Construct, float]
    composite: float

    @classmethod
    def from_profile(cls, profile: AutonomyProfile) -> "ScoreSnapshot":
        return cls(
            date=profile.last_updated,
            scores={c: s.raw for c, s in profile.scores.items()},
            composite=profile.composite_autonomy,
        )


class SuggestedModule(BaseModel):
    """Practice module for the lowest-scoring construct, serialized under ``construct``."""

    model_config = ConfigDict(populate_by_name=True)

    target_construct: Construct = Field(..., alias="construct")
    module: str
    score: float
    message: str


class ProgressReport(BaseModel):
    historical_scores: List[ScoreSnapshot]
    trends: Dict[Construct, Trend]
    insights: List[str]
    suggested_module: Optional[SuggestedModule] = None


class ModuleCompletion(BaseModel):
    module_id: str
    completed: bool
    progress: float = Field(..., ge=0, le=100)
    last_completed: Optional[datetime] = None


class NextMilestone(BaseModel):
    target: Optional[int] = None
    achieved: bool


class StreakReport(BaseModel):
    streak: StreakData
    status: StreakStatus
    next_milestone: NextMilestone
    message: str
