r"""
Cronbach's alpha for construct subscales.

Alpha measures how closely related a construct's items are as a group. It is
estimated from an administrations x items matrix:

- Rows = assessment instances (administrations) of the construct's items
- Columns = items answered in every administration
- Values = reverse-coded item values on the 1-7 scale

Formula:
    α = (k / (k-1)) × (1 - Σσ²ᵢ / σ²ₜ)

Where:
    k = number of items
    σ²ᵢ = variance of item i
    σ²ₜ = variance of total scores

Alpha is only reported when it was actually measured. Too few items, too few
administrations or zero total-score variance yield None, which consumers must
read as "unmeasured" rather than "unreliable".
"""

import logging
import statistics
from typing import Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


# =============================================================================
# CRONBACH'S ALPHA THRESHOLDS
# =============================================================================
# Standard psychometric thresholds for reliability interpretation.

ALPHA_THRESHOLDS = {
    "excellent": 0.90,  # α ≥ 0.90: Excellent internal consistency
    "good": 0.80,  # α ≥ 0.80: Good internal consistency
    "acceptable": 0.70,  # α ≥ 0.70: Acceptable internal consistency
    "questionable": 0.60,  # α ≥ 0.60: Questionable internal consistency
    "poor": 0.50,  # α ≥ 0.50: Poor internal consistency
    # α < 0.50: Unacceptable
}

# Minimum items a construct needs before alpha is attempted
MIN_ITEMS_FOR_ALPHA = 3

# Minimum administrations (matrix rows) for item variances to exist
MIN_ADMINISTRATIONS_FOR_ALPHA = 2


def get_alpha_interpretation(alpha: float) -> str:
    """
    Get interpretation string for a Cronbach's alpha value.

    Args:
        alpha: Cronbach's alpha coefficient

    Returns:
        Interpretation: "excellent", "good", "acceptable", "questionable",
                       "poor", or "unacceptable"
    """
    if alpha >= ALPHA_THRESHOLDS["excellent"]:
        return "excellent"
    elif alpha >= ALPHA_THRESHOLDS["good"]:
        return "good"
    elif alpha >= ALPHA_THRESHOLDS["acceptable"]:
        return "acceptable"
    elif alpha >= ALPHA_THRESHOLDS["questionable"]:
        return "questionable"
    elif alpha >= ALPHA_THRESHOLDS["poor"]:
        return "poor"
    else:
        return "unacceptable"


def cronbachs_alpha(matrix: Sequence[Sequence[float]]) -> Optional[float]:
    """
    Calculate Cronbach's alpha from a complete item-response matrix.

    Args:
        matrix: Rows of equal length, one row per administration, one
            column per item.

    Returns:
        Alpha clamped to [-1, 1] and rounded to 4 places, or None when the
        matrix has fewer than 2 rows, fewer than 3 columns, ragged rows or
        zero total-score variance.
    """
    n = len(matrix)
    if n < MIN_ADMINISTRATIONS_FOR_ALPHA:
        return None

    k = len(matrix[0])
    if k < MIN_ITEMS_FOR_ALPHA:
        return None
    if any(len(row) != k for row in matrix):
        logger.warning("Cronbach's alpha: ragged item-response matrix")
        return None

    item_variances = [
        statistics.variance([row[j] for row in matrix]) for j in range(k)
    ]
    total_scores = [sum(row) for row in matrix]
    total_variance = statistics.variance(total_scores)

    if total_variance == 0:
        logger.info("Cronbach's alpha: zero variance in total scores")
        return None

    alpha = (k / (k - 1)) * (1 - sum(item_variances) / total_variance)

    # Can be negative in rare pathological cases
    alpha = max(-1.0, min(1.0, alpha))
    return round(alpha, 4)


def build_item_matrix(
    administrations: Mapping[str, Mapping[str, float]],
    item_ids: Sequence[str],
) -> List[List[float]]:
    """
    Build the administrations x items matrix over items common to all rows.

    Args:
        administrations: assessment_id -> {item_id: scored value}
        item_ids: Candidate columns, in column order.

    Returns:
        One row per administration that answered at least one candidate
        item, restricted to the candidate items answered in every such
        administration. Empty when nothing is in common.
    """
    rows: Dict[str, Mapping[str, float]] = {
        assessment_id: answers
        for assessment_id, answers in administrations.items()
        if any(item_id in answers for item_id in item_ids)
    }
    common = [
        item_id
        for item_id in item_ids
        if rows and all(item_id in answers for answers in rows.values())
    ]
    if not common:
        return []
    return [[answers[item_id] for item_id in common] for answers in rows.values()]


def calculate_construct_alpha(
    administrations: Mapping[str, Mapping[str, float]],
    item_ids: Sequence[str],
) -> Optional[float]:
    """
    Cronbach's alpha for one construct across a user's administrations.

    Args:
        administrations: assessment_id -> {item_id: scored value} for the
            construct's items.
        item_ids: The construct's items answered in the scored instance.

    Returns:
        Alpha, or None when reliability cannot be measured.
    """
    if len(item_ids) < MIN_ITEMS_FOR_ALPHA:
        return None
    matrix = build_item_matrix(administrations, item_ids)
    if not matrix:
        return None
    return cronbachs_alpha(matrix)
