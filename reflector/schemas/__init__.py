"""
Pydantic schemas for request/response validation.
"""
from .responses import (
    UserResponse,
    ResponseItem,
    ResponseSubmission,
    ResponseSubmissionResult,
)
from .scores import (
    ConstructScore,
    ResponseIntegrity,
    ScoreReport,
    AutonomyProfile,
)
from .activity import (
    DailyReflection,
    Falsifier,
    DisconfirmGame,
    RegulationState,
    SchemaReclaim,
    InfluenceSource,
    ArgumentFlip,
    SourceAudit,
    Milestone,
    StreakMilestones,
    StreakData,
    BadgeCheckData,
    ActivityResult,
)
from .badges import (
    Badge,
    BadgeDefinitionSchema,
    BadgeProgress,
    BadgeCheckResult,
)
from .progress import (
    ScoreSnapshot,
    SuggestedModule,
    ProgressReport,
    ModuleCompletion,
    NextMilestone,
    StreakReport,
)

__all__ = [
    "UserResponse",
    "ResponseItem",
    "ResponseSubmission",
    "ResponseSubmissionResult",
    "ConstructScore",
    "ResponseIntegrity",
    "ScoreReport",
    "AutonomyProfile",
    "DailyReflection",
    "Falsifier",
    "DisconfirmGame",
    "RegulationState",
    "SchemaReclaim",
    "InfluenceSource",
    "ArgumentFlip",
    "SourceAudit",
    "Milestone",
    "StreakMilestones",
    "StreakData",
    "BadgeCheckData",
    "ActivityResult",
    "Badge",
    "BadgeDefinitionSchema",
    "BadgeProgress",
    "BadgeCheckResult",
    "ScoreSnapshot",
    "SuggestedModule",
    "ProgressReport",
    "ModuleCompletion",
    "NextMilestone",
    "StreakReport",
]
