"""
Autonomy profile and progress endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from reflector.api.v1._dependencies import get_store
from reflector.core.db_error_handling import handle_db_error
from reflector.core.error_responses import ErrorMessages, raise_not_found
from reflector.schemas.progress import ProgressReport
from reflector.schemas.scores import AutonomyProfile
from reflector.services import get_progress_report, recalculate_profile
from reflector.storage import ActivityStore

router = APIRouter()


@router.post("/{user_id}/profile/recalculate", response_model=AutonomyProfile)
def recalculate_user_profile(
    user_id: str,
    elapsed_seconds: Optional[float] = Query(None, ge=0),
    store: ActivityStore = Depends(get_store),
):
    """
    Rescore the user's latest assessment and append a profile snapshot.

    Also records baseline completion and runs a badge check.
    """
    with handle_db_error(store.db, "recalculate profile"):
        profile = recalculate_profile(store, user_id, elapsed_seconds)
    if profile is None:
        raise_not_found(ErrorMessages.NO_RESPONSES)
    return profile


@router.get("/{user_id}/profile", response_model=AutonomyProfile)
def get_user_profile(user_id: str, store: ActivityStore = Depends(get_store)):
    """Latest autonomy profile of a user."""
    profile = store.get_latest_profile(user_id)
    if profile is None:
        raise_not_found(ErrorMessages.PROFILE_NOT_FOUND)
    return profile


@router.get("/{user_id}/progress", response_model=ProgressReport)
def get_user_progress(user_id: str, store: ActivityStore = Depends(get_store)):
    return get_progress_report(store, user_id)
