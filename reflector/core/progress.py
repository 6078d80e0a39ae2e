"""
Progress tracking: construct trends, insights, suggested practice and module
completion.
"""

import logging
import statistics
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from libs.domain_types import Construct, Trend
from reflector.core.datetime_utils import ensure_timezone_aware
from reflector.core.psychometrics.item_bank import get_item
from reflector.schemas.activity import (
    ArgumentFlip,
    DailyReflection,
    DisconfirmGame,
    InfluenceSource,
    SchemaReclaim,
    SourceAudit,
)
from reflector.schemas.progress import ModuleCompletion, ScoreSnapshot, SuggestedModule
from reflector.schemas.responses import UserResponse
from reflector.schemas.scores import AutonomyProfile

logger = logging.getLogger(__name__)


# Minimum mean change (points) between the two halves of history
DEFAULT_TREND_DELTA = 5.0

MIN_SNAPSHOTS_FOR_TRENDS = 2

SUGGESTED_MODULES: Dict[Construct, str] = {
    Construct.EAI: "Baseline Mirror",
    Construct.RF: "Disconfirm Practice",
    Construct.SA: "Influence Map",
    Construct.ARD: "Schema Reclaim",
}

# Records needed for a module to count as completed
MODULE_COMPLETION_TARGETS: Dict[str, int] = {
    "baseline": 36,
    "disconfirm": 3,
    "schema": 3,
    "influence": 5,
    "argument-flip": 3,
    "source-audit": 7,
    "reflect": 7,
}


# =============================================================================
# TRENDS
# =============================================================================


def _classify_change(change: float, delta: float) -> Trend:
    if change > delta:
        return Trend.IMPROVING
    elif change < -delta:
        return Trend.DECLINING
    return Trend.STABLE


def calculate_trends(
    snapshots: Sequence[ScoreSnapshot],
    delta: float = DEFAULT_TREND_DELTA,
) -> Dict[Construct, Trend]:
    """
    Classify each construct's trend across historical snapshots.

    Snapshots (oldest first) are split at floor(n / 2); the mean of the
    second half is compared with the mean of the first. A change above
    ``delta`` is improving, below ``-delta`` declining, otherwise stable.

    Args:
        snapshots: Historical scores ordered by time
        delta: Minimum change in points to call a trend

    Returns:
        Trend per construct. Fewer than two snapshots yield all stable.
    """
    trends = {construct: Trend.STABLE for construct in Construct}
    if len(snapshots) < MIN_SNAPSHOTS_FOR_TRENDS:
        logger.info(
            f"Trend analysis skipped: {len(snapshots)} snapshots "
            f"(need {MIN_SNAPSHOTS_FOR_TRENDS})"
        )
        return trends

    midpoint = len(snapshots) // 2
    first_half = snapshots[:midpoint]
    second_half = snapshots[midpoint:]

    for construct in Construct:
        first = [s.scores[construct] for s in first_half if construct in s.scores]
        second = [s.scores[construct] for s in second_half if construct in s.scores]
        if not first or not second:
            continue
        change = statistics.mean(second) - statistics.mean(first)
        trends[construct] = _classify_change(change, delta)

    return trends


def get_progress_insights(trends: Dict[Construct, Trend], aha_moment_count: int = 0) -> List[str]:
    insights = []
    for construct, trend in trends.items():
        if trend == Trend.IMPROVING:
            insights.append(
                f"Your {construct.value} scores are trending upward. Keep up the great work!"
            )
        elif trend == Trend.DECLINING:
            insights.append(
                f"Your {construct.value} scores have declined recently. "
                f"Consider focusing on this area."
            )

    if aha_moment_count > 0:
        insights.append(
            f"You've had {aha_moment_count} insight moments. Reflection is working!"
        )
    return insights


def get_suggested_module(profile: Optional[AutonomyProfile]) -> Optional[SuggestedModule]:
    """
    Suggest the practice module for the lowest-scoring construct.

    Ties go to the construct listed first (EAI, RF, SA, ARD).
    """
    if profile is None or not profile.scores:
        return None

    lowest = min(
        (c for c in Construct if c in profile.scores),
        key=lambda c: profile.scores[c].raw,
    )
    score = profile.scores[lowest].raw
    module = SUGGESTED_MODULES[lowest]
    return SuggestedModule(
        construct=lowest,
        module=module,
        score=score,
        message=f"Your {lowest.value} score ({score:g}) suggests focusing on {module}.",
    )


# =============================================================================
# MODULE COMPLETION
# =============================================================================


def _completion(
    module_id: str, count: int, last_completed: Optional[datetime]
) -> ModuleCompletion:
    target = MODULE_COMPLETION_TARGETS[module_id]
    return ModuleCompletion(
        module_id=module_id,
        completed=count >= target,
        progress=round(min(count / target * 100, 100.0), 1),
        last_completed=last_completed if count > 0 else None,
    )


def _latest(timestamps: Iterable[datetime]) -> Optional[datetime]:
    timestamps = [ensure_timezone_aware(t) for t in timestamps]
    return max(timestamps) if timestamps else None


def compute_module_completion(
    baseline_responses: Sequence[UserResponse] = (),
    disconfirm_games: Sequence[DisconfirmGame] = (),
    schema_reclaims: Sequence[SchemaReclaim] = (),
    influence_sources: Sequence[InfluenceSource] = (),
    argument_flips: Sequence[ArgumentFlip] = (),
    source_audits: Sequence[SourceAudit] = (),
    reflections: Sequence[DailyReflection] = (),
    now: Optional[datetime] = None,
) -> Dict[str, ModuleCompletion]:
    """
    Completion status of every practice module.

    The baseline counts distinct bank items answered. Influence sources carry
    no timestamp; ``now`` stands in as their last completion.
    """
    answered = {r.item_id: r for r in baseline_responses if get_item(r.item_id) is not None}

    return {
        "baseline": _completion(
            "baseline", len(answered), _latest(r.timestamp for r in answered.values())
        ),
        "disconfirm": _completion(
            "disconfirm", len(disconfirm_games), _latest(g.timestamp for g in disconfirm_games)
        ),
        "schema": _completion(
            "schema", len(schema_reclaims), _latest(s.timestamp for s in schema_reclaims)
        ),
        "influence": _completion("influence", len(influence_sources), now),
        "argument-flip": _completion(
            "argument-flip", len(argument_flips), _latest(f.timestamp for f in argument_flips)
        ),
        "source-audit": _completion(
            "source-audit", len(source_audits), _latest(a.date for a in source_audits)
        ),
        "reflect": _completion(
            "reflect", len(reflections), _latest(r.date for r in reflections)
        ),
    }
