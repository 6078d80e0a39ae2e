"""
Pydantic schemas for practice-module activity records, streaks and milestones.

All records ignore unknown fields so that payloads written by newer clients
still load.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from libs.domain_types import ActivityKind, Construct, MilestoneType
from reflector.core.datetime_utils import utc_now
from reflector.schemas.badges import Badge
from reflector.schemas.scores import ConstructScore


def _new_id() -> str:
    return str(uuid.uuid4())


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=_new_id)
    user_id: str


class DailyReflection(_Record):
    date: datetime = Field(default_factory=utc_now)
    prompt: str = ""
    category: Literal["disconfirm", "emotion", "source", "meta"] = "meta"
    response: str = ""
    time_spent: float = Field(0, ge=0, description="Seconds spent writing")
    insight_flagged: bool = False


class Falsifier(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=_new_id)
    text: str = ""
    specificity: float = Field(0, ge=0, le=100)


class DisconfirmGame(_Record):
    belief: str = ""
    falsifiers: List[Falsifier] = Field(default_factory=list)
    overall_score: float = Field(0, ge=0, le=100)
    timestamp: datetime = Field(default_factory=utc_now)


class RegulationState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    emotion: str = ""
    intensity: float = 0
    certainty: float = 0


class SchemaReclaim(_Record):
    schema_domain: Literal["approval", "dependence", "punitiveness", "defectiveness"]
    pre_regulation: RegulationState = Field(default_factory=RegulationState)
    post_regulation: RegulationState = Field(default_factory=RegulationState)
    timestamp: datetime = Field(default_factory=utc_now)


class InfluenceSource(_Record):
    name: str
    type: Literal["podcast", "news", "person", "community", "social"] = "news"
    leaning: Literal["left", "center", "right", "unknown"] = "unknown"
    trust: float = 0
    frequency: Literal["daily", "weekly", "monthly"] = "weekly"
    category: str = ""


class ArgumentFlip(_Record):
    user_belief: str = ""
    generated_counter: str = ""
    user_restatement: str = ""
    charity_score: float = Field(..., ge=0, le=100)
    accuracy_score: float = Field(0, ge=0, le=100)
    strawman_detected: bool = False
    missing_key_points: List[str] = Field(default_factory=list)
    added_weak_points: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)


class SourceAudit(_Record):
    date: datetime = Field(default_factory=utc_now)
    belief: str = ""
    first_heard: str = ""
    who_heard_from: str = ""
    when_heard_it: str = ""
    who_benefits: List[str] = Field(default_factory=list)
    evidence_checked: str = ""
    certainty_before: float = 0
    certainty_after: float = 0
    insight_notes: str = ""


class Milestone(_Record):
    milestone_type: MilestoneType
    achieved_at: datetime = Field(default_factory=utc_now)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class StreakMilestones(BaseModel):
    """Monotonic streak achievement flags: once set, never reset."""

    model_config = ConfigDict(extra="ignore")

    seven: bool = False
    twenty_one: bool = False
    sixty: bool = False
    hundred: bool = False


class StreakData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current: int = Field(0, ge=0)
    longest: int = Field(0, ge=0)
    last_activity: Optional[datetime] = None
    milestones: StreakMilestones = Field(default_factory=StreakMilestones)


class BadgeCheckData(BaseModel):
    """
    Read-only aggregation of everything badge predicates need.

    Assembled fresh before each evaluation pass and never persisted.
    """

    model_config = ConfigDict(extra="ignore")

    streak: StreakData = Field(default_factory=StreakData)
    reflections: List[DailyReflection] = Field(default_factory=list)
    disconfirm_games: List[DisconfirmGame] = Field(default_factory=list)
    schema_reclaims: List[SchemaReclaim] = Field(default_factory=list)
    influence_sources: List[InfluenceSource] = Field(default_factory=list)
    milestones: List[Milestone] = Field(default_factory=list)
    argument_flips: List[ArgumentFlip] = Field(default_factory=list)
    source_audits: List[SourceAudit] = Field(default_factory=list)
    profile_scores: Optional[Dict[Construct, ConstructScore]] = None
    unlocked_badge_ids: List[str] = Field(default_factory=list)


class ActivityResult(BaseModel):
    """Outcome of recording one practice-module activity."""

    kind: ActivityKind
    record: Dict[str, Any]
    streak: StreakData
    new_milestones: List[Milestone] = Field(default_factory=list)
    new_badges: List[Badge] = Field(default_factory=list)
