"""
Practice-module activity endpoints.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from libs.domain_types import ActivityKind
from reflector.api.v1._dependencies import get_store
from reflector.core.db_error_handling import handle_db_error
from reflector.core.error_responses import ErrorMessages, raise_bad_request
from reflector.schemas.activity import ActivityResult
from reflector.services import record_activity
from reflector.storage import ActivityStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{user_id}/activities/{kind}",
    response_model=ActivityResult,
    status_code=status.HTTP_201_CREATED,
)
def create_activity(
    user_id: str,
    kind: str,
    payload: Dict[str, Any] = Body(...),
    store: ActivityStore = Depends(get_store),
):
    """
    Record one practice-module activity.

    The activity advances the user's streak and triggers a badge check.

    Args:
        user_id: Owner of the activity
        kind: Activity kind (daily_reflection, disconfirm_game, ...)
        payload: Record fields for that kind
        store: Persistence port

    Returns:
        The stored record, updated streak, new milestones and new badges

    Raises:
        HTTPException: 400 for an unknown kind, 422 for an invalid payload
    """
    try:
        activity_kind = ActivityKind(kind)
    except ValueError:
        raise_bad_request(ErrorMessages.unknown_activity_kind(kind))

    with handle_db_error(store.db, f"record {activity_kind.value}"):
        try:
            return record_activity(store, user_id, activity_kind, payload)
        except ValidationError as e:
            logger.info(
                f"Rejected {activity_kind.value} payload: {e.error_count()} error(s)",
                extra={"user_id": user_id, "activity_kind": activity_kind.value},
            )
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "message": ErrorMessages.INVALID_ACTIVITY_PAYLOAD,
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    ),
                },
            )
