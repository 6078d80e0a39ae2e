"""Shared domain types for Reflector.

This package is the single source of truth for domain enums used across
the scoring core, the persistence layer, and (indirectly via OpenAPI) the
client application.

Usage:
    from libs.domain_types import Construct, BadgeCategory
"""

import enum


class Construct(str, enum.Enum):
    """Psychometric constructs scored by the Baseline Mirror assessment."""

    EAI = "EAI"  # Epistemic Autonomy Index
    RF = "RF"  # Reflective Flexibility
    SA = "SA"  # Source Awareness
    ARD = "ARD"  # Affect Regulation in Debate


class ItemType(str, enum.Enum):
    """Assessment item formats."""

    LIKERT7 = "likert7"
    VIGNETTE = "vignette"


class Interpretation(str, enum.Enum):
    """Categorical reading of a 0-100 construct score."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class Trend(str, enum.Enum):
    """Direction of a construct across historical snapshots."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class BadgeCategory(str, enum.Enum):
    """Badge catalog category."""

    STREAK = "streak"
    MODULE = "module"
    REFLECTION = "reflection"
    ACHIEVEMENT = "achievement"


class BadgeRarity(str, enum.Enum):
    """Badge rarity tier."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"


class ActivityKind(str, enum.Enum):
    """Activity records produced by the practice modules."""

    DAILY_REFLECTION = "daily_reflection"
    DISCONFIRM_GAME = "disconfirm_game"
    SCHEMA_RECLAIM = "schema_reclaim"
    INFLUENCE_SOURCE = "influence_source"
    ARGUMENT_FLIP = "argument_flip"
    SOURCE_AUDIT = "source_audit"


class MilestoneType(str, enum.Enum):
    """Milestone record types."""

    STREAK_7 = "streak_7"
    STREAK_21 = "streak_21"
    STREAK_60 = "streak_60"
    STREAK_100 = "streak_100"
    MODULE_COMPLETE = "module_complete"
    BADGE_UNLOCK = "badge_unlock"


class StreakStatus(str, enum.Enum):
    """Display status of a streak relative to today."""

    CURRENT = "current"
    AT_RISK = "at_risk"
    BROKEN = "broken"


class DependencyLevel(str, enum.Enum):
    """Source concentration level derived from source audits."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


__all__ = [
    "Construct",
    "ItemType",
    "Interpretation",
    "Trend",
    "BadgeCategory",
    "BadgeRarity",
    "ActivityKind",
    "MilestoneType",
    "StreakStatus",
    "DependencyLevel",
]
