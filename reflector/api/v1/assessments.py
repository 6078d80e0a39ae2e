"""
Assessment response and scoring endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from reflector.api.v1._dependencies import get_store
from reflector.core.datetime_utils import utc_now
from reflector.core.db_error_handling import handle_db_error
from reflector.core.error_responses import ErrorMessages, raise_not_found
from reflector.schemas.responses import (
    ResponseSubmission,
    ResponseSubmissionResult,
    UserResponse,
)
from reflector.schemas.scores import ScoreReport
from reflector.services import score_assessment
from reflector.storage import ActivityStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/{user_id}/responses", response_model=ResponseSubmissionResult)
def submit_responses(
    user_id: str,
    submission: ResponseSubmission,
    store: ActivityStore = Depends(get_store),
):
    """
    Save a batch of answers for a user.

    An answer to an item already answered within the same assessment
    instance replaces the earlier one.

    Args:
        user_id: Owner of the answers
        submission: Answers to save
        store: Persistence port

    Returns:
        Number of answers saved and the user's total stored answers
    """
    received_at = utc_now()
    responses = [
        UserResponse(
            user_id=user_id,
            assessment_id=item.assessment_id,
            item_id=item.item_id,
            value=item.value,
            timestamp=item.timestamp or received_at,
        )
        for item in submission.responses
    ]

    with handle_db_error(store.db, "save responses"):
        saved = store.upsert_responses(responses)
        total = store.count_responses(user_id)

    logger.info(f"Saved {saved} responses", extra={"user_id": user_id})
    return ResponseSubmissionResult(saved=saved, total_responses=total)


@router.post("/{user_id}/assessments/{assessment_id}/score", response_model=ScoreReport)
def score_user_assessment(
    user_id: str,
    assessment_id: str,
    elapsed_seconds: Optional[float] = Query(
        None, ge=0, description="Client-measured completion time in seconds"
    ),
    store: ActivityStore = Depends(get_store),
):
    """
    Score one assessment instance without updating the profile.

    Raises:
        HTTPException: 404 if the instance has no stored answers
    """
    if not store.get_responses(user_id, assessment_id):
        raise_not_found(ErrorMessages.assessment_not_found(assessment_id))
    return score_assessment(store, user_id, assessment_id, elapsed_seconds)
