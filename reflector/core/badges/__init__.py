"""
Badge catalog and rule engine.

Usage:
    from reflector.core.badges import BadgeEngine, get_progress_for_badge

    engine = BadgeEngine(store)
    new_badges = engine.evaluate(user_id, snapshot)
    progress = get_progress_for_badge("streak_7", snapshot)
"""

from .catalog import (
    BADGE_DEFINITIONS,
    BadgeDefinition,
    get_badge_by_id,
    get_badges_by_category,
    get_badges_by_rarity,
    get_progress_for_badge,
)
from .engine import BadgeEngine, BadgeStore

__all__ = [
    "BADGE_DEFINITIONS",
    "BadgeDefinition",
    "get_badge_by_id",
    "get_badges_by_category",
    "get_badges_by_rarity",
    "get_progress_for_badge",
    "BadgeEngine",
    "BadgeStore",
]
