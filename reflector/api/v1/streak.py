"""
Streak endpoints.
"""
from fastapi import APIRouter, Depends

from reflector.api.v1._dependencies import get_store
from reflector.core.datetime_utils import utc_now
from reflector.core.streak import get_next_milestone, get_streak_message, get_streak_status
from reflector.schemas.progress import NextMilestone, StreakReport
from reflector.storage import ActivityStore

router = APIRouter()


@router.get("/{user_id}/streak", response_model=StreakReport)
def get_user_streak(user_id: str, store: ActivityStore = Depends(get_store)):
    """
    Current streak with its status relative to today, the next milestone
    and a display message.
    """
    today = utc_now()
    streak = store.get_streak(user_id)
    target = get_next_milestone(streak)
    return StreakReport(
        streak=streak,
        status=get_streak_status(streak, today),
        next_milestone=NextMilestone(target=target, achieved=target is None),
        message=get_streak_message(streak, today),
    )
