"""
Database models for Reflector.

Scores and badges are derived by the scoring core; these tables only hold
raw responses, activity records and the derived snapshots the core emits.
"""
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    Integer,
    String,
    UniqueConstraint,
    Index,
)
from datetime import datetime, timezone

from libs.domain_types import ActivityKind, MilestoneType

from .base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssessmentResponse(Base):
    """
    Current answer of one user to one item within one assessment instance.

    A later save for the same (user, assessment, item) overwrites the row.
    """

    __tablename__ = "assessment_responses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(100), nullable=False, index=True)
    assessment_id = Column(String(100), nullable=False)
    item_id = Column(String(100), nullable=False)
    value = Column(Float, nullable=False)
    answered_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "assessment_id", "item_id", name="uq_response_user_assessment_item"
        ),
    )


class ProfileSnapshot(Base):
    """
    Append-only history of autonomy profiles.

    The newest snapshot per user is the current profile; older rows feed
    trend analysis.
    """

    __tablename__ = "profile_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(100), nullable=False)
    assessment_id = Column(String(100), nullable=True)
    composite_autonomy = Column(Float, nullable=False)
    version = Column(String(20), nullable=False)
    profile = Column(JSON, nullable=False)  # Serialized AutonomyProfile
    created_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)

    __table_args__ = (Index("ix_profile_snapshots_user_created", "user_id", "created_at"),)


class Streak(Base):
    """Streak state, one row per user."""

    __tablename__ = "streaks"

    user_id = Column(String(100), primary_key=True)
    current = Column(Integer, default=0, nullable=False)
    longest = Column(Integer, default=0, nullable=False)
    last_activity = Column(DateTime(timezone=True), nullable=True)
    milestones = Column(JSON, nullable=False, default=dict)


class ActivityRecord(Base):
    """A practice-module record (reflection, game, audit...) stored as JSON."""

    __tablename__ = "activity_records"

    id = Column(Integer, primary_key=True, index=True)
    record_id = Column(String(36), unique=True, nullable=False)
    user_id = Column(String(100), nullable=False)
    kind = Column(Enum(ActivityKind), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)

    __table_args__ = (Index("ix_activity_records_user_kind", "user_id", "kind"),)


class MilestoneRecord(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    record_id = Column(String(36), unique=True, nullable=False)
    user_id = Column(String(100), nullable=False, index=True)
    milestone_type = Column(Enum(MilestoneType), nullable=False)
    achieved_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)
    details = Column(JSON, nullable=False, default=dict)


class UnlockedBadge(Base):
    """An unlocked badge. At most one row per (user, badge)."""

    __tablename__ = "badges"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(100), nullable=False, index=True)
    badge_id = Column(String(50), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=False)
    icon = Column(String(16), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_badge_user_badge"),)
