"""
Badge catalog, unlocked badges and badge progress endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from libs.domain_types import BadgeCategory, BadgeRarity
from reflector.api.v1._dependencies import get_store
from reflector.core.badges import BADGE_DEFINITIONS, get_progress_for_badge
from reflector.core.db_error_handling import handle_db_error
from reflector.schemas.badges import (
    Badge,
    BadgeCheckResult,
    BadgeDefinitionSchema,
    BadgeProgress,
)
from reflector.services import check_badges
from reflector.storage import ActivityStore

router = APIRouter()


@router.get("/badges", response_model=List[BadgeDefinitionSchema])
def list_badge_catalog(
    category: Optional[BadgeCategory] = Query(None),
    rarity: Optional[BadgeRarity] = Query(None),
):
    """
    The badge catalog, optionally filtered by category and rarity.
    """
    return [
        BadgeDefinitionSchema(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            icon=definition.icon,
            category=definition.category,
            rarity=definition.rarity,
        )
        for definition in BADGE_DEFINITIONS
        if (category is None or definition.category == category)
        and (rarity is None or definition.rarity == rarity)
    ]


@router.get("/users/{user_id}/badges", response_model=List[Badge])
def list_user_badges(user_id: str, store: ActivityStore = Depends(get_store)):
    return store.list_badges(user_id)


@router.get("/users/{user_id}/badges/progress", response_model=List[BadgeProgress])
def get_badge_progress(user_id: str, store: ActivityStore = Depends(get_store)):
    """Progress fraction (0-1) towards every catalog badge."""
    snapshot = store.build_badge_check_data(user_id)
    unlocked = set(snapshot.unlocked_badge_ids)
    return [
        BadgeProgress(
            badge_id=definition.id,
            progress=1.0 if definition.id in unlocked
            else get_progress_for_badge(definition.id, snapshot),
            unlocked=definition.id in unlocked,
        )
        for definition in BADGE_DEFINITIONS
    ]


@router.post("/users/{user_id}/badges/check", response_model=BadgeCheckResult)
def run_badge_check(user_id: str, store: ActivityStore = Depends(get_store)):
    """Evaluate all locked badges now and return the ones newly unlocked."""
    with handle_db_error(store.db, "check badges"):
        return BadgeCheckResult(newly_unlocked=check_badges(store, user_id))
