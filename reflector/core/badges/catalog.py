"""
Badge catalog.

Sixteen badges across four categories:
- Streak badges (7, 21, 60, 100 days)
- Module badges (baseline, disconfirm, schema reclaim, influence map,
  argument flip, source audit)
- Reflection badges
- Special achievement badges

Each entry pairs display metadata with two pure functions over a
BadgeCheckData snapshot: ``condition`` decides the unlock, ``progress``
reports how close the user is (0-1) for display only. Both tolerate empty
collections and never raise.
"""

import statistics
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from libs.domain_types import BadgeCategory, BadgeRarity, Construct, MilestoneType
from reflector.core.psychometrics.audit_patterns import (
    analyze_audit_patterns,
    calculate_independence_score,
)
from reflector.schemas.activity import BadgeCheckData

BadgePredicate = Callable[[BadgeCheckData], bool]
BadgeProgressFn = Callable[[BadgeCheckData], float]


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    description: str
    icon: str
    category: BadgeCategory
    rarity: BadgeRarity
    condition: BadgePredicate
    progress: BadgeProgressFn


# =============================================================================
# THRESHOLDS
# =============================================================================

DISCONFIRM_MASTER_GAMES = 3
SCHEMA_RECLAIMER_SESSIONS = 2
SOURCE_AUDITOR_SOURCES = 5
REFLECTION_10_COUNT = 10
INSIGHT_HUNTER_COUNT = 5

EPISTEMIC_AUTONOMY_REFLECTIONS = 20
EPISTEMIC_AUTONOMY_LONGEST_STREAK = 30

STEELMAN_MIN_CHARITY = 60.0
INTELLECTUAL_HONESTY_FLIPS = 5
INTELLECTUAL_HONESTY_MEAN_CHARITY = 70.0

SOURCE_DETECTIVE_AUDITS = 7
INDEPENDENT_THINKER_AUDITS = 14
INDEPENDENT_THINKER_MIN_SCORE = 75.0  # strictly greater than

BALANCED_MIND_MIN_SCORE = 40.0
BALANCED_MIND_MAX_SPREAD = 15.0


def _fraction(count: float, target: float) -> float:
    return min(count / target, 1.0)


# =============================================================================
# PREDICATES
# =============================================================================


def _insight_count(data: BadgeCheckData) -> int:
    return sum(1 for r in data.reflections if r.insight_flagged)


def _has_baseline_milestone(data: BadgeCheckData) -> bool:
    return any(m.milestone_type == MilestoneType.MODULE_COMPLETE for m in data.milestones)


def _core_modules_started(data: BadgeCheckData) -> Tuple[bool, bool, bool]:
    return (
        len(data.disconfirm_games) > 0,
        len(data.schema_reclaims) > 0,
        len(data.influence_sources) > 0,
    )


def _epistemic_autonomy(data: BadgeCheckData) -> bool:
    return (
        all(_core_modules_started(data))
        and len(data.reflections) >= EPISTEMIC_AUTONOMY_REFLECTIONS
        and data.streak.longest >= EPISTEMIC_AUTONOMY_LONGEST_STREAK
    )


def _epistemic_autonomy_progress(data: BadgeCheckData) -> float:
    parts = [float(started) for started in _core_modules_started(data)]
    parts.append(_fraction(len(data.reflections), EPISTEMIC_AUTONOMY_REFLECTIONS))
    parts.append(_fraction(data.streak.longest, EPISTEMIC_AUTONOMY_LONGEST_STREAK))
    return statistics.mean(parts)


def _mean_charity(data: BadgeCheckData) -> Optional[float]:
    if not data.argument_flips:
        return None
    return statistics.mean(f.charity_score for f in data.argument_flips)


def _intellectual_honesty(data: BadgeCheckData) -> bool:
    if len(data.argument_flips) < INTELLECTUAL_HONESTY_FLIPS:
        return False
    return _mean_charity(data) >= INTELLECTUAL_HONESTY_MEAN_CHARITY


def _intellectual_honesty_progress(data: BadgeCheckData) -> float:
    mean_charity = _mean_charity(data)
    if mean_charity is None:
        return 0.0
    return statistics.mean(
        [
            _fraction(len(data.argument_flips), INTELLECTUAL_HONESTY_FLIPS),
            _fraction(mean_charity, INTELLECTUAL_HONESTY_MEAN_CHARITY),
        ]
    )


def _steelman_progress(data: BadgeCheckData) -> float:
    if not data.argument_flips:
        return 0.0
    best = max(f.charity_score for f in data.argument_flips)
    return _fraction(best, STEELMAN_MIN_CHARITY)


def _independence_score(data: BadgeCheckData) -> float:
    return round(calculate_independence_score(analyze_audit_patterns(data.source_audits)))


def _independent_thinker(data: BadgeCheckData) -> bool:
    if len(data.source_audits) < INDEPENDENT_THINKER_AUDITS:
        return False
    return _independence_score(data) > INDEPENDENT_THINKER_MIN_SCORE


def _independent_thinker_progress(data: BadgeCheckData) -> float:
    if not data.source_audits:
        return 0.0
    return statistics.mean(
        [
            _fraction(len(data.source_audits), INDEPENDENT_THINKER_AUDITS),
            _fraction(_independence_score(data), INDEPENDENT_THINKER_MIN_SCORE),
        ]
    )


def _scored_constructs(data: BadgeCheckData) -> Dict[Construct, float]:
    if not data.profile_scores:
        return {}
    return {
        construct: score.raw
        for construct, score in data.profile_scores.items()
        if score.n_items > 0
    }


def _balanced_mind(data: BadgeCheckData) -> bool:
    scores = _scored_constructs(data)
    if set(scores) != set(Construct):
        return False
    values = list(scores.values())
    return (
        min(values) >= BALANCED_MIND_MIN_SCORE
        and max(values) - min(values) <= BALANCED_MIND_MAX_SPREAD
    )


def _balanced_mind_progress(data: BadgeCheckData) -> float:
    scores = _scored_constructs(data)
    if not scores:
        return 0.0
    above_floor = sum(1 for v in scores.values() if v >= BALANCED_MIND_MIN_SCORE)
    spread = max(scores.values()) - min(scores.values())
    spread_part = 1.0 if spread <= BALANCED_MIND_MAX_SPREAD else BALANCED_MIND_MAX_SPREAD / spread
    return statistics.mean([above_floor / len(Construct), spread_part])


# =============================================================================
# CATALOG
# =============================================================================

BADGE_DEFINITIONS: Tuple[BadgeDefinition, ...] = (
    # Streak badges
    BadgeDefinition(
        id="streak_7",
        name="Week Warrior",
        description="Maintained a 7-day reflection streak",
        icon="🔥",
        category=BadgeCategory.STREAK,
        rarity=BadgeRarity.COMMON,
        condition=lambda data: data.streak.milestones.seven,
        progress=lambda data: _fraction(data.streak.current, 7),
    ),
    BadgeDefinition(
        id="streak_21",
        name="Habit Former",
        description="Built a 21-day reflection habit",
        icon="⚡",
        category=BadgeCategory.STREAK,
        rarity=BadgeRarity.UNCOMMON,
        condition=lambda data: data.streak.milestones.twenty_one,
        progress=lambda data: _fraction(data.streak.current, 21),
    ),
    BadgeDefinition(
        id="streak_60",
        name="Mindfulness Master",
        description="Sustained 60 days of daily reflection",
        icon="🧘",
        category=BadgeCategory.STREAK,
        rarity=BadgeRarity.RARE,
        condition=lambda data: data.streak.milestones.sixty,
        progress=lambda data: _fraction(data.streak.current, 60),
    ),
    BadgeDefinition(
        id="streak_100",
        name="Epistemic Sage",
        description="Achieved 100 days of metacognitive practice",
        icon="👑",
        category=BadgeCategory.STREAK,
        rarity=BadgeRarity.EPIC,
        condition=lambda data: data.streak.milestones.hundred,
        progress=lambda data: _fraction(data.streak.current, 100),
    ),
    # Module badges
    BadgeDefinition(
        id="baseline_complete",
        name="Self-Aware",
        description="Completed the Baseline Mirror assessment",
        icon="🪞",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.COMMON,
        condition=_has_baseline_milestone,
        progress=lambda data: float(_has_baseline_milestone(data)),
    ),
    BadgeDefinition(
        id="disconfirm_master",
        name="Falsification Expert",
        description="Mastered the Disconfirm Game",
        icon="🎯",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.UNCOMMON,
        condition=lambda data: len(data.disconfirm_games) >= DISCONFIRM_MASTER_GAMES,
        progress=lambda data: _fraction(len(data.disconfirm_games), DISCONFIRM_MASTER_GAMES),
    ),
    BadgeDefinition(
        id="schema_reclaimer",
        name="Emotional Regulator",
        description="Completed Schema Reclaim sessions",
        icon="🛡️",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.UNCOMMON,
        condition=lambda data: len(data.schema_reclaims) >= SCHEMA_RECLAIMER_SESSIONS,
        progress=lambda data: _fraction(len(data.schema_reclaims), SCHEMA_RECLAIMER_SESSIONS),
    ),
    BadgeDefinition(
        id="source_auditor",
        name="Information Detective",
        description="Mapped your influence sources",
        icon="🔍",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.UNCOMMON,
        condition=lambda data: len(data.influence_sources) >= SOURCE_AUDITOR_SOURCES,
        progress=lambda data: _fraction(len(data.influence_sources), SOURCE_AUDITOR_SOURCES),
    ),
    # Reflection badges
    BadgeDefinition(
        id="reflection_10",
        name="Thoughtful",
        description="Completed 10 daily reflections",
        icon="💭",
        category=BadgeCategory.REFLECTION,
        rarity=BadgeRarity.COMMON,
        condition=lambda data: len(data.reflections) >= REFLECTION_10_COUNT,
        progress=lambda data: _fraction(len(data.reflections), REFLECTION_10_COUNT),
    ),
    BadgeDefinition(
        id="insight_hunter",
        name="Insight Hunter",
        description="Flagged 5 insightful reflections",
        icon="💡",
        category=BadgeCategory.REFLECTION,
        rarity=BadgeRarity.UNCOMMON,
        condition=lambda data: _insight_count(data) >= INSIGHT_HUNTER_COUNT,
        progress=lambda data: _fraction(_insight_count(data), INSIGHT_HUNTER_COUNT),
    ),
    # Special achievement badges
    BadgeDefinition(
        id="balanced_mind",
        name="Balanced Mind",
        description="Achieved balanced scores across all constructs",
        icon="⚖️",
        category=BadgeCategory.ACHIEVEMENT,
        rarity=BadgeRarity.RARE,
        condition=_balanced_mind,
        progress=_balanced_mind_progress,
    ),
    BadgeDefinition(
        id="epistemic_autonomy",
        name="Epistemic Autonomy",
        description="Completed all modules and achieved high metacognitive awareness",
        icon="🌟",
        category=BadgeCategory.ACHIEVEMENT,
        rarity=BadgeRarity.EPIC,
        condition=_epistemic_autonomy,
        progress=_epistemic_autonomy_progress,
    ),
    # Argument Flip and Source Audit badges
    BadgeDefinition(
        id="steelman_initiate",
        name="Steelman Initiate",
        description="Completed first Argument Flip with 60+ charity score",
        icon="⚖️",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.COMMON,
        condition=lambda data: any(
            f.charity_score >= STEELMAN_MIN_CHARITY for f in data.argument_flips
        ),
        progress=_steelman_progress,
    ),
    BadgeDefinition(
        id="intellectual_honesty",
        name="Intellectual Honesty",
        description="Completed 5 Argument Flips with 70+ average charity",
        icon="🎯",
        category=BadgeCategory.ACHIEVEMENT,
        rarity=BadgeRarity.RARE,
        condition=_intellectual_honesty,
        progress=_intellectual_honesty_progress,
    ),
    BadgeDefinition(
        id="source_detective",
        name="Source Detective",
        description="Completed 7 Source Audits",
        icon="🔍",
        category=BadgeCategory.MODULE,
        rarity=BadgeRarity.COMMON,
        condition=lambda data: len(data.source_audits) >= SOURCE_DETECTIVE_AUDITS,
        progress=lambda data: _fraction(len(data.source_audits), SOURCE_DETECTIVE_AUDITS),
    ),
    BadgeDefinition(
        id="independent_thinker",
        name="Independent Thinker",
        description="Low source dependency + high evidence checking (II > 75)",
        icon="🦅",
        category=BadgeCategory.ACHIEVEMENT,
        rarity=BadgeRarity.EPIC,
        condition=_independent_thinker,
        progress=_independent_thinker_progress,
    ),
)

_BADGES_BY_ID: Dict[str, BadgeDefinition] = {badge.id: badge for badge in BADGE_DEFINITIONS}


def get_badge_by_id(badge_id: str) -> Optional[BadgeDefinition]:
    """Catalog entry for ``badge_id``, or None for unknown ids."""
    return _BADGES_BY_ID.get(badge_id)


def get_badges_by_category(category: BadgeCategory) -> List[BadgeDefinition]:
    return [badge for badge in BADGE_DEFINITIONS if badge.category == category]


def get_badges_by_rarity(rarity: BadgeRarity) -> List[BadgeDefinition]:
    return [badge for badge in BADGE_DEFINITIONS if badge.rarity == rarity]


def get_progress_for_badge(badge_id: str, data: BadgeCheckData) -> float:
    """
    How close the user is to unlocking ``badge_id``, in [0, 1].

    Used for display only; unlock decisions go through ``condition``.
    Unknown badge ids yield 0.
    """
    badge = get_badge_by_id(badge_id)
    if badge is None:
        return 0.0
    return max(0.0, min(1.0, float(badge.progress(data))))
