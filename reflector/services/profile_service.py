"""
Profile recalculation and progress reporting.

The scoring core never reads storage itself: these functions load what it
needs through the ActivityStore, call the pure scoring functions with the
configured parameters and persist what they return.
"""
import logging
from datetime import datetime
from typing import Optional

from libs.domain_types import ActivityKind, MilestoneType
from reflector.core.config import settings
from reflector.core.datetime_utils import utc_now
from reflector.core.progress import (
    calculate_trends,
    get_progress_insights,
    get_suggested_module,
)
from reflector.core.psychometrics import build_profile, calculate_scores
from reflector.core.psychometrics.item_bank import bank_size, get_item
from reflector.schemas.activity import Milestone
from reflector.schemas.progress import ProgressReport, ScoreSnapshot
from reflector.schemas.scores import AutonomyProfile, ScoreReport
from reflector.services.activity_service import check_badges
from reflector.storage import ActivityStore

logger = logging.getLogger(__name__)

BASELINE_MODULE_ID = "baseline"


def score_assessment(
    store: ActivityStore,
    user_id: str,
    assessment_id: str,
    elapsed_seconds: Optional[float] = None,
    now: Optional[datetime] = None,
) -> ScoreReport:
    """
    Score one assessment instance of a user with the configured parameters.

    Raises:
        InvalidResponseError: If a stored answer is outside 1-7
    """
    return calculate_scores(
        store.get_response_set(user_id),
        assessment_id,
        elapsed_seconds,
        composite_weights=settings.COMPOSITE_WEIGHTS,
        confidence_level=settings.CONFIDENCE_LEVEL,
        straightlining_run_length=settings.STRAIGHTLINING_RUN_LENGTH,
        min_seconds_per_item=settings.MIN_SECONDS_PER_ITEM,
        version=settings.PROFILE_VERSION,
        now=now,
    )


def _record_baseline_completion(store: ActivityStore, report: ScoreReport) -> None:
    already_recorded = any(
        m.milestone_type == MilestoneType.MODULE_COMPLETE
        and m.metadata.get("module") == BASELINE_MODULE_ID
        for m in store.list_milestones(report.user_id)
    )
    if already_recorded:
        return

    answered = {
        r.item_id
        for r in store.get_responses(report.user_id, report.assessment_id)
        if get_item(r.item_id) is not None
    }
    if len(answered) < bank_size():
        return

    store.save_milestone(
        Milestone(
            user_id=report.user_id,
            milestone_type=MilestoneType.MODULE_COMPLETE,
            achieved_at=report.timestamp,
            metadata={"module": BASELINE_MODULE_ID, "assessment_id": report.assessment_id},
        )
    )
    logger.info(
        "Baseline assessment completed",
        extra={"user_id": report.user_id, "assessment_id": report.assessment_id},
    )


def recalculate_profile(
    store: ActivityStore,
    user_id: str,
    elapsed_seconds: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Optional[AutonomyProfile]:
    """
    Rebuild a user's autonomy profile from all stored responses.

    The most recently answered assessment instance is scored; earlier
    instances contribute to reliability. The new profile is appended to the
    snapshot history, the baseline ``module_complete`` milestone is written
    the first time every bank item is answered, and a badge check runs.

    Returns:
        The new profile, or None when the user has no responses
    """
    now = now or utc_now()
    response_set = store.get_response_set(user_id)
    assessment_id = response_set.latest_assessment_id()
    if assessment_id is None:
        logger.info("Profile recalculation skipped: no responses", extra={"user_id": user_id})
        return None

    report = score_assessment(store, user_id, assessment_id, elapsed_seconds, now=now)
    profile = build_profile(
        report,
        argument_flips=store.list_activities(user_id, ActivityKind.ARGUMENT_FLIP),
        source_audits=store.list_activities(user_id, ActivityKind.SOURCE_AUDIT),
        now=now,
    )
    store.append_snapshot(profile, assessment_id)
    logger.info(
        f"Profile recalculated, composite autonomy {profile.composite_autonomy}",
        extra={"user_id": user_id, "assessment_id": assessment_id},
    )

    _record_baseline_completion(store, report)
    check_badges(store, user_id, now)
    return profile


def get_progress_report(store: ActivityStore, user_id: str) -> ProgressReport:
    """Score history, per-construct trends, insights and a suggested module."""
    history = store.get_profile_history(user_id)
    snapshots = [ScoreSnapshot.from_profile(p) for p in history]
    trends = calculate_trends(snapshots, settings.TREND_DELTA)

    reflections = store.list_activities(user_id, ActivityKind.DAILY_REFLECTION)
    aha_moments = sum(1 for r in reflections if r.insight_flagged)

    return ProgressReport(
        historical_scores=snapshots,
        trends=trends,
        insights=get_progress_insights(trends, aha_moments),
        suggested_module=get_suggested_module(history[-1] if history else None),
    )
