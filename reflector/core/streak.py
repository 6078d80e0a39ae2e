"""
Daily streak state machine.

A streak advances at most once per calendar day (UTC). Transitions on a
qualifying activity:

- last activity today: no change
- last activity yesterday: current + 1
- otherwise (gap of two or more days, or no prior activity): current = 1

Milestone flags (7/21/60/100 days) are set once ``current`` reaches their
threshold and are never cleared, even when the streak later breaks.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional, Tuple, Union

from libs.domain_types import MilestoneType, StreakStatus
from reflector.core.datetime_utils import calendar_days_between, ensure_timezone_aware
from reflector.schemas.activity import StreakData, StreakMilestones

logger = logging.getLogger(__name__)


# (threshold days, StreakMilestones field, milestone record type)
STREAK_MILESTONES: Tuple[Tuple[int, str, MilestoneType], ...] = (
    (7, "seven", MilestoneType.STREAK_7),
    (21, "twenty_one", MilestoneType.STREAK_21),
    (60, "sixty", MilestoneType.STREAK_60),
    (100, "hundred", MilestoneType.STREAK_100),
)


def as_datetime(value: Union[date, datetime]) -> datetime:
    """Aware UTC datetime for an activity moment; plain dates map to midnight UTC."""
    if isinstance(value, datetime):
        return ensure_timezone_aware(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _update_milestones(milestones: StreakMilestones, current: int) -> StreakMilestones:
    flags = milestones.model_dump()
    for threshold, field_name, _ in STREAK_MILESTONES:
        if current >= threshold:
            flags[field_name] = True
    return StreakMilestones(**flags)


def advance_streak(streak: StreakData, today: Union[date, datetime]) -> StreakData:
    """
    Apply one qualifying activity to a streak.

    Args:
        streak: Current streak state (not mutated)
        today: Moment of the activity; only its UTC calendar date matters

    Returns:
        The new streak state
    """
    if streak.last_activity is None:
        days = None
    else:
        days = calendar_days_between(streak.last_activity, today)

    if days == 0:
        return streak
    if days is not None and days < 0:
        logger.warning(
            f"Activity dated {days} days before the last recorded activity, streak unchanged"
        )
        return streak

    current = streak.current + 1 if days == 1 else 1
    return StreakData(
        current=current,
        longest=max(streak.longest, current),
        last_activity=as_datetime(today),
        milestones=_update_milestones(streak.milestones, current),
    )


def get_streak_status(streak: StreakData, today: Union[date, datetime]) -> StreakStatus:
    """
    Classify a streak relative to today.

    0 days since last activity is current, 1 day is at risk, anything
    longer (or no activity at all) is broken.
    """
    if streak.last_activity is None:
        return StreakStatus.BROKEN
    days = calendar_days_between(streak.last_activity, today)
    if days <= 0:
        return StreakStatus.CURRENT
    elif days == 1:
        return StreakStatus.AT_RISK
    return StreakStatus.BROKEN


def get_next_milestone(streak: StreakData) -> Optional[int]:
    """First unreached milestone threshold, or None when all are achieved."""
    for threshold, field_name, _ in STREAK_MILESTONES:
        if not getattr(streak.milestones, field_name):
            return threshold
    return None


def get_streak_message(streak: StreakData, today: Union[date, datetime]) -> str:
    if streak.last_activity is None:
        return "Start your reflection streak today!"

    status = get_streak_status(streak, today)
    if status == StreakStatus.CURRENT:
        target = get_next_milestone(streak)
        if target is not None:
            return (
                f"Keep it up! {max(target - streak.current, 0)} days until your "
                f"next milestone."
            )
        return "Amazing! You've achieved all milestones."
    elif status == StreakStatus.AT_RISK:
        return "Your streak is at risk. Complete a reflection today to keep it alive!"
    return "Streak broken. Start fresh and build a new habit!"


def newly_reached_milestones(before: StreakData, after: StreakData) -> List[MilestoneType]:
    """Milestone types whose flag flipped from False to True."""
    reached = []
    for _, field_name, milestone_type in STREAK_MILESTONES:
        if getattr(after.milestones, field_name) and not getattr(
            before.milestones, field_name
        ):
            reached.append(milestone_type)
    return reached
