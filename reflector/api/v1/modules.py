"""
Module completion endpoints.
"""
from typing import Dict

from fastapi import APIRouter, Depends

from libs.domain_types import ActivityKind
from reflector.api.v1._dependencies import get_store
from reflector.core.datetime_utils import utc_now
from reflector.core.progress import compute_module_completion
from reflector.schemas.progress import ModuleCompletion
from reflector.storage import ActivityStore

router = APIRouter()


@router.get("/{user_id}/modules", response_model=Dict[str, ModuleCompletion])
def get_module_completion(user_id: str, store: ActivityStore = Depends(get_store)):
    """
    Completion status of every practice module.

    The baseline counts answers of the most recently answered assessment
    instance.
    """
    response_set = store.get_response_set(user_id)
    latest = response_set.latest_assessment_id()
    baseline = response_set.for_assessment(latest) if latest else []

    return compute_module_completion(
        baseline_responses=baseline,
        disconfirm_games=store.list_activities(user_id, ActivityKind.DISCONFIRM_GAME),
        schema_reclaims=store.list_activities(user_id, ActivityKind.SCHEMA_RECLAIM),
        influence_sources=store.list_activities(user_id, ActivityKind.INFLUENCE_SOURCE),
        argument_flips=store.list_activities(user_id, ActivityKind.ARGUMENT_FLIP),
        source_audits=store.list_activities(user_id, ActivityKind.SOURCE_AUDIT),
        reflections=store.list_activities(user_id, ActivityKind.DAILY_REFLECTION),
        now=utc_now(),
    )
