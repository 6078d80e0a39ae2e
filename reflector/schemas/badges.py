"""
Pydantic schemas for badges.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from libs.domain_types import BadgeCategory, BadgeRarity


class Badge(BaseModel):
    """An unlocked badge owned by a user. At most one per (user_id, badge_id)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    badge_id: str = Field(..., description="Catalog identifier")
    user_id: str
    name: str
    description: str
    icon: str
    unlocked_at: datetime


class BadgeDefinitionSchema(BaseModel):
    """Catalog entry as exposed to clients (without its predicate)."""

    id: str
    name: str
    description: str
    icon: str
    category: BadgeCategory
    rarity: BadgeRarity


class BadgeProgress(BaseModel):
    badge_id: str
    progress: float = Field(..., ge=0, le=1)
    unlocked: bool


class BadgeCheckResult(BaseModel):
    newly_unlocked: List[Badge]
