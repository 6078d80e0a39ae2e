"""
Response integrity checks for careless or inattentive responding.

This module inspects one assessment instance's responses for patterns that
undermine the interpretability of its scores:

- Acquiescence bias: the fraction of Likert answers at the extreme-agree end
  of the scale (6 or 7), regardless of item keying.
- Straightlining: a run of consecutive identical Likert answers at least
  ``run_length`` long, in answer order.
- Completion time: total elapsed time below a per-item plausibility floor.
- Attention checks: an instructed-response item answered with a value other
  than the instructed one.

The checker is a pure function of the response set plus elapsed time and
never raises: missing or unusable data yields neutral verdicts.
"""

import logging
import math
from typing import Iterable, List, Optional

from libs.domain_types import ItemType
from reflector.core.datetime_utils import ensure_timezone_aware
from reflector.schemas.responses import UserResponse
from reflector.schemas.scores import ResponseIntegrity

from .item_bank import ATTENTION_CHECKS, get_item

logger = logging.getLogger(__name__)


# =============================================================================
# INTEGRITY THRESHOLDS
# =============================================================================

# Likert values counted as "extreme agree"
ACQUIESCENCE_MIN_VALUE = 6

# Consecutive identical answers that count as straightlining
DEFAULT_STRAIGHTLINING_RUN_LENGTH = 10

# Plausibility floor: reading and answering an item takes at least this long
DEFAULT_MIN_SECONDS_PER_ITEM = 2.0

# Fewer responses than this carry no timing signal
MIN_RESPONSES_FOR_TIMING = 2


def _is_usable(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _likert_values_in_order(responses: List[UserResponse]) -> List[float]:
    ordered = sorted(
        responses, key=lambda r: ensure_timezone_aware(r.timestamp)
    )
    values: List[float] = []
    for response in ordered:
        item = get_item(response.item_id)
        if item is None or item.type != ItemType.LIKERT7:
            continue
        if _is_usable(response.value):
            values.append(float(response.value))
    return values


def calculate_acquiescence_bias(likert_values: List[float]) -> float:
    """
    Fraction of Likert answers at the extreme-agree end (0-1).

    Returns 0.0 when there are no Likert answers.
    """
    if not likert_values:
        return 0.0
    extreme = sum(1 for v in likert_values if v >= ACQUIESCENCE_MIN_VALUE)
    return round(extreme / len(likert_values), 2)


def longest_identical_run(values: List[float]) -> int:
    """Length of the longest run of consecutive identical values."""
    longest = 0
    current = 0
    previous: Optional[float] = None
    for value in values:
        if previous is not None and value == previous:
            current += 1
        else:
            current = 1
        previous = value
        longest = max(longest, current)
    return longest


def detect_straightlining(
    likert_values: List[float],
    run_length: int = DEFAULT_STRAIGHTLINING_RUN_LENGTH,
) -> bool:
    return longest_identical_run(likert_values) >= run_length


def check_completion_time(
    responses: List[UserResponse],
    elapsed_seconds: Optional[float] = None,
    min_seconds_per_item: float = DEFAULT_MIN_SECONDS_PER_ITEM,
) -> bool:
    """
    Flag completion faster than ``min_seconds_per_item`` per answered item.

    ``elapsed_seconds`` is used when supplied; otherwise the elapsed time is
    taken as the span between the first and last response timestamps.

    Returns:
        True if the completion time is implausibly short.
    """
    n = len(responses)
    if n < MIN_RESPONSES_FOR_TIMING:
        return False

    if elapsed_seconds is None or not _is_usable(elapsed_seconds):
        timestamps = [ensure_timezone_aware(r.timestamp) for r in responses]
        elapsed_seconds = (max(timestamps) - min(timestamps)).total_seconds()

    return elapsed_seconds < min_seconds_per_item * n


def check_attention(responses: Iterable[UserResponse]) -> bool:
    """True unless an attention-check item was answered incorrectly."""
    for response in responses:
        check = ATTENTION_CHECKS.get(response.item_id)
        if check is None:
            continue
        if not _is_usable(response.value) or response.value not in check.accepted_values:
            logger.info(
                "Attention check failed",
                extra={"user_id": response.user_id, "assessment_id": response.assessment_id},
            )
            return False
    return True


def assess_response_integrity(
    responses: Iterable[UserResponse],
    elapsed_seconds: Optional[float] = None,
    straightlining_run_length: int = DEFAULT_STRAIGHTLINING_RUN_LENGTH,
    min_seconds_per_item: float = DEFAULT_MIN_SECONDS_PER_ITEM,
) -> ResponseIntegrity:
    """
    Assess response integrity for one assessment instance.

    Args:
        responses: All responses of the instance, attention checks included.
        elapsed_seconds: Total time spent, if the client measured it.
        straightlining_run_length: Identical consecutive answers that flag
            straightlining.
        min_seconds_per_item: Per-item plausibility floor for completion time.

    Returns:
        ResponseIntegrity verdict. Empty input yields the neutral verdict.
    """
    responses = list(responses)
    if not responses:
        return ResponseIntegrity()

    likert_values = _likert_values_in_order(responses)

    return ResponseIntegrity(
        acquiescence_bias=calculate_acquiescence_bias(likert_values),
        straightlining=detect_straightlining(likert_values, straightlining_run_length),
        completion_time_flag=check_completion_time(
            responses, elapsed_seconds, min_seconds_per_item
        ),
        attention_check_passed=check_attention(responses),
    )
