"""
Activity recording and badge checks.

Every practice-module activity advances the user's streak, records any
streak milestones it reached and then re-evaluates the badge catalog
against a freshly assembled snapshot.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from libs.domain_types import ActivityKind, MilestoneType
from reflector.core.badges import BadgeEngine
from reflector.core.datetime_utils import utc_now
from reflector.core.streak import advance_streak, as_datetime, newly_reached_milestones
from reflector.schemas.activity import ActivityResult, Milestone
from reflector.schemas.badges import Badge
from reflector.storage import ACTIVITY_SCHEMAS, ActivityStore

logger = logging.getLogger(__name__)


def check_badges(
    store: ActivityStore, user_id: str, now: Optional[datetime] = None
) -> List[Badge]:
    """
    Evaluate every locked badge for a user and persist new unlocks.

    A ``badge_unlock`` milestone is written for each newly unlocked badge.

    Returns:
        Newly unlocked badges, in catalog order
    """
    now = now or utc_now()
    snapshot = store.build_badge_check_data(user_id)
    engine = BadgeEngine(store, clock=lambda: now)
    new_badges = engine.evaluate(user_id, snapshot)

    for badge in new_badges:
        store.save_milestone(
            Milestone(
                user_id=user_id,
                milestone_type=MilestoneType.BADGE_UNLOCK,
                achieved_at=badge.unlocked_at,
                metadata={"badge_id": badge.badge_id, "name": badge.name},
            )
        )

    if new_badges:
        logger.info(
            f"Badge check unlocked {len(new_badges)} badge(s)",
            extra={"user_id": user_id},
        )
    return new_badges


def record_activity(
    store: ActivityStore,
    user_id: str,
    kind: ActivityKind,
    payload: Dict[str, Any],
    today: Optional[Union[date, datetime]] = None,
) -> ActivityResult:
    """
    Persist one activity record and apply its side effects.

    Args:
        store: Persistence port
        user_id: Owner of the activity; overrides any user_id in the payload
        kind: Practice module the record belongs to
        payload: Record fields as sent by the client
        today: Moment of the activity (defaults to current UTC time)

    Returns:
        ActivityResult with the stored record, updated streak, streak
        milestones reached and badges unlocked by this activity

    Raises:
        pydantic.ValidationError: If the payload does not fit the record type
    """
    occurred_at = as_datetime(today) if today is not None else utc_now()
    record = ACTIVITY_SCHEMAS[kind].model_validate({**payload, "user_id": user_id})
    store.save_activity(kind, record)

    before = store.get_streak(user_id)
    after = advance_streak(before, occurred_at)
    if after != before:
        store.save_streak(user_id, after)

    new_milestones = []
    for milestone_type in newly_reached_milestones(before, after):
        milestone = Milestone(
            user_id=user_id,
            milestone_type=milestone_type,
            achieved_at=occurred_at,
            metadata={"streak": after.current},
        )
        store.save_milestone(milestone)
        new_milestones.append(milestone)
        logger.info(
            f"Streak milestone {milestone_type.value} reached",
            extra={"user_id": user_id, "activity_kind": kind.value},
        )

    return ActivityResult(
        kind=kind,
        record=record.model_dump(mode="json"),
        streak=after,
        new_milestones=new_milestones,
        new_badges=check_badges(store, user_id, occurred_at),
    )
