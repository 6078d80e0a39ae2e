"""
SQLAlchemy-backed persistence for responses, profiles, streaks, activity
records, milestones and badges.

ActivityStore is the persistence port the services hand to the scoring core
and the badge engine. It converts between ORM rows and the pydantic schemas
the core works with; the core itself never touches the database.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from libs.domain_types import ActivityKind
from reflector.core.datetime_utils import ensure_timezone_aware
from reflector.core.psychometrics.scoring import ResponseSet
from reflector.models.models import (
    ActivityRecord,
    AssessmentResponse,
    MilestoneRecord,
    ProfileSnapshot,
    Streak,
    UnlockedBadge,
)
from reflector.schemas.activity import (
    ArgumentFlip,
    BadgeCheckData,
    DailyReflection,
    DisconfirmGame,
    InfluenceSource,
    Milestone,
    SchemaReclaim,
    SourceAudit,
    StreakData,
    StreakMilestones,
)
from reflector.schemas.badges import Badge
from reflector.schemas.responses import UserResponse
from reflector.schemas.scores import AutonomyProfile

logger = logging.getLogger(__name__)


ACTIVITY_SCHEMAS: Dict[ActivityKind, Type[BaseModel]] = {
    ActivityKind.DAILY_REFLECTION: DailyReflection,
    ActivityKind.DISCONFIRM_GAME: DisconfirmGame,
    ActivityKind.SCHEMA_RECLAIM: SchemaReclaim,
    ActivityKind.INFLUENCE_SOURCE: InfluenceSource,
    ActivityKind.ARGUMENT_FLIP: ArgumentFlip,
    ActivityKind.SOURCE_AUDIT: SourceAudit,
}


class ActivityStore:
    """Per-request persistence facade over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Assessment responses
    # =========================================================================

    def upsert_responses(self, responses: Iterable[UserResponse]) -> int:
        """
        Save responses, superseding any earlier answer to the same
        (user, assessment, item).

        Within one batch the last answer to a key wins.

        Returns:
            Number of distinct answers saved
        """
        latest: Dict[Tuple[str, str, str], UserResponse] = {}
        for response in responses:
            latest[(response.user_id, response.assessment_id, response.item_id)] = response

        saved = 0
        for response in latest.values():
            row = (
                self.db.query(AssessmentResponse)
                .filter(
                    AssessmentResponse.user_id == response.user_id,
                    AssessmentResponse.assessment_id == response.assessment_id,
                    AssessmentResponse.item_id == response.item_id,
                )
                .first()
            )
            if row is None:
                row = AssessmentResponse(
                    user_id=response.user_id,
                    assessment_id=response.assessment_id,
                    item_id=response.item_id,
                )
                self.db.add(row)
            row.value = response.value
            row.answered_at = response.timestamp
            saved += 1
        self.db.commit()
        return saved

    def get_responses(
        self, user_id: str, assessment_id: Optional[str] = None
    ) -> List[UserResponse]:
        query = self.db.query(AssessmentResponse).filter(
            AssessmentResponse.user_id == user_id
        )
        if assessment_id is not None:
            query = query.filter(AssessmentResponse.assessment_id == assessment_id)
        rows = query.order_by(AssessmentResponse.answered_at, AssessmentResponse.id).all()
        return [
            UserResponse(
                user_id=row.user_id,
                assessment_id=row.assessment_id,
                item_id=row.item_id,
                value=row.value,
                timestamp=ensure_timezone_aware(row.answered_at),
            )
            for row in rows
        ]

    def get_response_set(self, user_id: str) -> ResponseSet:
        return ResponseSet(user_id, self.get_responses(user_id))

    def count_responses(self, user_id: str) -> int:
        return (
            self.db.query(AssessmentResponse)
            .filter(AssessmentResponse.user_id == user_id)
            .count()
        )

    # =========================================================================
    # Profiles
    # =========================================================================

    def append_snapshot(
        self, profile: AutonomyProfile, assessment_id: Optional[str] = None
    ) -> None:
        """Append a profile snapshot. Earlier snapshots are kept as history."""
        self.db.add(
            ProfileSnapshot(
                user_id=profile.user_id,
                assessment_id=assessment_id,
                composite_autonomy=profile.composite_autonomy,
                version=profile.version,
                profile=profile.model_dump(mode="json"),
                created_at=profile.last_updated,
            )
        )
        self.db.commit()

    def get_latest_profile(self, user_id: str) -> Optional[AutonomyProfile]:
        row = (
            self.db.query(ProfileSnapshot)
            .filter(ProfileSnapshot.user_id == user_id)
            .order_by(ProfileSnapshot.created_at.desc(), ProfileSnapshot.id.desc())
            .first()
        )
        if row is None:
            return None
        return AutonomyProfile.model_validate(row.profile)

    def get_profile_history(self, user_id: str) -> List[AutonomyProfile]:
        """All snapshots of a user, oldest first."""
        rows = (
            self.db.query(ProfileSnapshot)
            .filter(ProfileSnapshot.user_id == user_id)
            .order_by(ProfileSnapshot.created_at, ProfileSnapshot.id)
            .all()
        )
        return [AutonomyProfile.model_validate(row.profile) for row in rows]

    # =========================================================================
    # Streaks
    # =========================================================================

    def get_streak(self, user_id: str) -> StreakData:
        row = self.db.get(Streak, user_id)
        if row is None:
            return StreakData()
        return StreakData(
            current=row.current,
            longest=row.longest,
            last_activity=(
                ensure_timezone_aware(row.last_activity) if row.last_activity else None
            ),
            milestones=StreakMilestones.model_validate(row.milestones or {}),
        )

    def save_streak(self, user_id: str, streak: StreakData) -> None:
        row = self.db.get(Streak, user_id)
        if row is None:
            row = Streak(user_id=user_id)
            self.db.add(row)
        row.current = streak.current
        row.longest = streak.longest
        row.last_activity = streak.last_activity
        row.milestones = streak.milestones.model_dump()
        self.db.commit()

    # =========================================================================
    # Activity records
    # =========================================================================

    def save_activity(self, kind: ActivityKind, record: BaseModel) -> None:
        self.db.add(
            ActivityRecord(
                record_id=record.id,
                user_id=record.user_id,
                kind=kind,
                payload=record.model_dump(mode="json"),
            )
        )
        self.db.commit()

    def list_activities(self, user_id: str, kind: ActivityKind) -> List[BaseModel]:
        """Activity records of one kind, oldest first, as their schema type."""
        schema = ACTIVITY_SCHEMAS[kind]
        rows = (
            self.db.query(ActivityRecord)
            .filter(ActivityRecord.user_id == user_id, ActivityRecord.kind == kind)
            .order_by(ActivityRecord.id)
            .all()
        )
        return [schema.model_validate(row.payload) for row in rows]

    # =========================================================================
    # Milestones
    # =========================================================================

    def save_milestone(self, milestone: Milestone) -> None:
        self.db.add(
            MilestoneRecord(
                record_id=milestone.id,
                user_id=milestone.user_id,
                milestone_type=milestone.milestone_type,
                achieved_at=milestone.achieved_at,
                details=milestone.metadata,
            )
        )
        self.db.commit()

    def list_milestones(self, user_id: str) -> List[Milestone]:
        rows = (
            self.db.query(MilestoneRecord)
            .filter(MilestoneRecord.user_id == user_id)
            .order_by(MilestoneRecord.id)
            .all()
        )
        return [
            Milestone(
                id=row.record_id,
                user_id=row.user_id,
                milestone_type=row.milestone_type,
                achieved_at=ensure_timezone_aware(row.achieved_at),
                metadata=row.details or {},
            )
            for row in rows
        ]

    # =========================================================================
    # Badges
    # =========================================================================

    def unlock_badge(self, badge: Badge) -> bool:
        """
        Persist an unlocked badge once per (user, badge).

        A duplicate (already stored, or inserted by a concurrent evaluation)
        is rolled back and reported as False.
        """
        existing = (
            self.db.query(UnlockedBadge.id)
            .filter(
                UnlockedBadge.user_id == badge.user_id,
                UnlockedBadge.badge_id == badge.badge_id,
            )
            .first()
        )
        if existing is not None:
            return False

        self.db.add(
            UnlockedBadge(
                id=badge.id,
                user_id=badge.user_id,
                badge_id=badge.badge_id,
                name=badge.name,
                description=badge.description,
                icon=badge.icon,
                unlocked_at=badge.unlocked_at,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"Duplicate unlock of badge '{badge.badge_id}' ignored",
                extra={"user_id": badge.user_id, "badge_id": badge.badge_id},
            )
            return False
        return True

    def list_badges(self, user_id: str) -> List[Badge]:
        rows = (
            self.db.query(UnlockedBadge)
            .filter(UnlockedBadge.user_id == user_id)
            .order_by(UnlockedBadge.unlocked_at)
            .all()
        )
        return [
            Badge(
                id=row.id,
                badge_id=row.badge_id,
                user_id=row.user_id,
                name=row.name,
                description=row.description,
                icon=row.icon,
                unlocked_at=ensure_timezone_aware(row.unlocked_at),
            )
            for row in rows
        ]

    # =========================================================================
    # Badge snapshot
    # =========================================================================

    def build_badge_check_data(self, user_id: str) -> BadgeCheckData:
        """Assemble a fresh snapshot of everything badge predicates read."""
        profile = self.get_latest_profile(user_id)
        return BadgeCheckData(
            streak=self.get_streak(user_id),
            reflections=self.list_activities(user_id, ActivityKind.DAILY_REFLECTION),
            disconfirm_games=self.list_activities(user_id, ActivityKind.DISCONFIRM_GAME),
            schema_reclaims=self.list_activities(user_id, ActivityKind.SCHEMA_RECLAIM),
            influence_sources=self.list_activities(user_id, ActivityKind.INFLUENCE_SOURCE),
            milestones=self.list_milestones(user_id),
            argument_flips=self.list_activities(user_id, ActivityKind.ARGUMENT_FLIP),
            source_audits=self.list_activities(user_id, ActivityKind.SOURCE_AUDIT),
            profile_scores=profile.scores if profile else None,
            unlocked_badge_ids=[b.badge_id for b in self.list_badges(user_id)],
        )

