"""
Composite autonomy score and categorical interpretation of construct scores.

Composite autonomy is a fixed weighted blend of construct raw scores. The
weights are configuration (see Settings.COMPOSITE_WEIGHTS), never derived per
user. Interpretation thresholds are the same for every construct.
"""

import logging
from typing import Dict, Mapping, Union

from libs.domain_types import Construct, Interpretation
from reflector.schemas.scores import ConstructScore

logger = logging.getLogger(__name__)


# =============================================================================
# COMPOSITE WEIGHTS
# =============================================================================

DEFAULT_COMPOSITE_WEIGHTS: Dict[str, float] = {
    Construct.EAI.value: 0.6,
    Construct.RF.value: 0.4,
}

# =============================================================================
# INTERPRETATION THRESHOLDS
# =============================================================================
# raw >= 70 -> high, 40 <= raw < 70 -> moderate, raw < 40 -> low

HIGH_SCORE_THRESHOLD = 70.0
MODERATE_SCORE_THRESHOLD = 40.0


def calculate_composite(
    scores: Mapping[Construct, ConstructScore],
    weights: Mapping[Union[str, Construct], float] = DEFAULT_COMPOSITE_WEIGHTS,
) -> float:
    """
    Weighted blend of construct raw scores, rounded to one decimal.

    A construct missing from ``scores`` contributes 0, the same as a
    construct with no responses.

    Args:
        scores: Construct scores keyed by construct.
        weights: Construct (or construct value) -> weight. Weights are
            expected to sum to 1.0; this is validated at configuration load.

    Returns:
        Composite autonomy on the 0-100 scale.
    """
    composite = 0.0
    for key, weight in weights.items():
        construct = Construct(key)
        score = scores.get(construct)
        if score is None:
            continue
        composite += score.raw * weight
    return round(max(0.0, min(100.0, composite)), 1)


def interpret_score(raw: float) -> Interpretation:
    """Classify a 0-100 construct score as high, moderate or low."""
    if raw >= HIGH_SCORE_THRESHOLD:
        return Interpretation.HIGH
    elif raw >= MODERATE_SCORE_THRESHOLD:
        return Interpretation.MODERATE
    else:
        return Interpretation.LOW


def interpret_scores(
    scores: Mapping[Construct, ConstructScore],
) -> Dict[Construct, Interpretation]:
    return {construct: interpret_score(score.raw) for construct, score in scores.items()}
