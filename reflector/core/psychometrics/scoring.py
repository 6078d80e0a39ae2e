"""
Construct scoring for the Baseline Mirror assessment.

The pipeline is pure and deterministic given its inputs:

1. Responses are held in a ResponseSet keyed by (assessment_id, item_id), so
   a later answer to the same item supersedes the earlier one.
2. Each answer is validated against the 1-7 scale and reverse-coded where
   the item requires it (8 - value).
3. Per construct, the mean of the coded values is rescaled to 0-100 and
   bracketed by a Wald confidence interval.
4. Cronbach's alpha is estimated across the user's administrations of the
   construct's items, when there is enough data to measure it.
5. Composite autonomy, interpretation labels and integrity flags complete
   the ScoreReport; build_profile turns a report into an AutonomyProfile.

Missing data never raises: a construct without responses scores 0 with a
full-range interval and no alpha. Only an out-of-range response value is an
error (InvalidResponseError).
"""

import logging
import math
import statistics
from collections import OrderedDict
from datetime import datetime
from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from scipy.stats import norm

from libs.domain_types import Construct, ItemType
from reflector.core.datetime_utils import ensure_timezone_aware, utc_now
from reflector.core.errors import InvalidResponseError, ResponseOwnershipError
from reflector.schemas.activity import ArgumentFlip, SourceAudit
from reflector.schemas.responses import UserResponse
from reflector.schemas.scores import AutonomyProfile, ConstructScore, ScoreReport

from .audit_patterns import analyze_audit_patterns, calculate_independence_score
from .composite import DEFAULT_COMPOSITE_WEIGHTS, calculate_composite, interpret_scores
from .integrity import (
    DEFAULT_MIN_SECONDS_PER_ITEM,
    DEFAULT_STRAIGHTLINING_RUN_LENGTH,
    assess_response_integrity,
)
from .item_bank import AssessmentItem, bank_size, get_item, is_attention_check
from .reliability import calculate_construct_alpha

logger = logging.getLogger(__name__)


# =============================================================================
# SCORING CONSTANTS
# =============================================================================

SCALE_MIN = 1
SCALE_MAX = 7
SCALE_RANGE = SCALE_MAX - SCALE_MIN

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Below this many responses a construct interval spans the full 0-100 range
MIN_ITEMS_FOR_CI = 2

DEFAULT_CONFIDENCE_LEVEL = 0.95
DEFAULT_ASSESSMENT_ID = "baseline_mirror_v1"
PROFILE_VERSION = "2.0.0"

# Source audits required before intellectual independence is reported
MIN_AUDITS_FOR_INDEPENDENCE = 7


# =============================================================================
# RESPONSE STORAGE
# =============================================================================


class ResponseSet:
    """
    One user's current responses, keyed by (assessment_id, item_id).

    Adding a response for a key already present supersedes the earlier
    value; superseded values are discarded.
    """

    def __init__(self, user_id: str, responses: Iterable[UserResponse] = ()):
        self.user_id = user_id
        self._responses: "OrderedDict[Tuple[str, str], UserResponse]" = OrderedDict()
        for response in responses:
            self.add(response)

    @classmethod
    def from_responses(cls, responses: Iterable[UserResponse]) -> "ResponseSet":
        """Build a set owned by the first response's user ("unknown" if empty)."""
        responses = list(responses)
        user_id = responses[0].user_id if responses else "unknown"
        return cls(user_id, responses)

    def add(self, response: UserResponse) -> None:
        if response.user_id != self.user_id:
            raise ResponseOwnershipError(
                f"Response for user '{response.user_id}' cannot be added to "
                f"the response set of user '{self.user_id}'"
            )
        key = (response.assessment_id, response.item_id)
        self._responses.pop(key, None)
        self._responses[key] = response

    def get(self, assessment_id: str, item_id: str) -> Optional[UserResponse]:
        return self._responses.get((assessment_id, item_id))

    def for_assessment(self, assessment_id: str) -> List[UserResponse]:
        return [r for r in self._responses.values() if r.assessment_id == assessment_id]

    def assessment_ids(self) -> List[str]:
        """Assessment ids in order of first appearance."""
        seen: Dict[str, None] = {}
        for assessment_id, _ in self._responses:
            seen.setdefault(assessment_id, None)
        return list(seen)

    def latest_assessment_id(self) -> Optional[str]:
        """Assessment id of the most recent response, or None when empty."""
        if not self._responses:
            return None
        latest = max(
            self._responses.values(), key=lambda r: ensure_timezone_aware(r.timestamp)
        )
        return latest.assessment_id

    def __len__(self) -> int:
        return len(self._responses)

    def __iter__(self) -> Iterator[UserResponse]:
        return iter(list(self._responses.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._responses


# =============================================================================
# ITEM SCORING
# =============================================================================


def validate_response_value(item_id: str, value: object) -> float:
    """
    Ensure a response value is a finite number on the 1-7 scale.

    Raises:
        InvalidResponseError: If the value is non-numeric or out of range.
            Values are never clamped.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(item_id, value)
    if not math.isfinite(value) or not (SCALE_MIN <= value <= SCALE_MAX):
        raise InvalidResponseError(item_id, value)
    return float(value)


def score_item(item: AssessmentItem, value: object) -> float:
    """
    Coded value of one answer on the 1-7 scale.

    Reverse-keyed Likert items are remapped to 8 - value. Vignette answers
    carry their option's pre-normalized score and are used as-is.
    """
    checked = validate_response_value(item.id, value)
    if item.type == ItemType.LIKERT7 and item.reverse:
        return (SCALE_MAX + SCALE_MIN) - checked
    return checked


def _coded_values_by_construct(
    responses: Iterable[UserResponse],
) -> Dict[Construct, Dict[str, float]]:
    grouped: Dict[Construct, Dict[str, float]] = {c: {} for c in Construct}
    for response in responses:
        if is_attention_check(response.item_id):
            continue
        item = get_item(response.item_id)
        if item is None:
            logger.warning(
                f"Skipping response to unknown item '{response.item_id}'",
                extra={"user_id": response.user_id, "assessment_id": response.assessment_id},
            )
            continue
        grouped[item.construct][item.id] = score_item(item, response.value)
    return grouped


# =============================================================================
# CONSTRUCT SCORES
# =============================================================================


def rescale_mean(mean: float) -> float:
    """Map a 1-7 mean onto 0-100: (mean - 1) / 6 * 100."""
    return (mean - SCALE_MIN) / SCALE_RANGE * SCORE_MAX


def calculate_standard_error(values: Sequence[float]) -> Optional[float]:
    """
    Standard error of the mean, expressed on the 0-100 scale.

    Returns None with fewer than two values (no sample variance).
    """
    if len(values) < MIN_ITEMS_FOR_CI:
        return None
    sd = statistics.stdev(values)
    return sd / math.sqrt(len(values)) * SCORE_MAX / SCALE_RANGE


def calculate_wald_interval(
    raw: float,
    standard_error: Optional[float],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> Tuple[float, float]:
    """
    Wald confidence interval around a 0-100 score.

    Formula: CI = raw ± z × SE, clamped to [0, 100]

    Args:
        raw: Score on the 0-100 scale.
        standard_error: Standard error on the 0-100 scale, or None when the
            interval cannot be estimated.
        confidence_level: Two-sided confidence level, strictly between 0 and 1.

    Returns:
        (lower, upper). Without a standard error the full 0-100 range is
        returned instead of a falsely precise band.

    Raises:
        ValueError: If confidence_level is not strictly between 0 and 1.
    """
    if confidence_level <= 0 or confidence_level >= 1:
        raise ValueError(
            f"confidence_level must be strictly between 0 and 1, got {confidence_level}"
        )
    if standard_error is None:
        return (SCORE_MIN, SCORE_MAX)

    # Two-tailed: leave (1 - level) / 2 in each tail
    alpha = 1 - confidence_level
    z_score = norm.ppf(1 - alpha / 2)
    margin = z_score * standard_error

    lower = max(SCORE_MIN, raw - margin)
    upper = min(SCORE_MAX, raw + margin)
    return (lower, upper)


def score_construct(
    values: Sequence[float],
    alpha: Optional[float] = None,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> ConstructScore:
    """
    Score one construct from its coded item values (1-7 scale).

    Args:
        values: Coded values, reverse keying already applied.
        alpha: Reliability estimate for the construct, if measured.
        confidence_level: Confidence level of the interval.

    Returns:
        ConstructScore with raw, interval and reliability. Zero values
        yield raw 0, interval 0-100 and no alpha.
    """
    if not values:
        return ConstructScore(
            raw=SCORE_MIN,
            ci_lower=SCORE_MIN,
            ci_upper=SCORE_MAX,
            ci_width=SCORE_MAX - SCORE_MIN,
            n_items=0,
            alpha=None,
            standard_error=None,
        )

    raw = rescale_mean(statistics.mean(values))
    standard_error = calculate_standard_error(values)
    lower, upper = calculate_wald_interval(raw, standard_error, confidence_level)

    # Rounding is monotone, so lower <= raw <= upper survives it
    raw_rounded = round(raw, 1)
    lower_rounded = round(lower, 1)
    upper_rounded = round(upper, 1)

    return ConstructScore(
        raw=raw_rounded,
        ci_lower=lower_rounded,
        ci_upper=upper_rounded,
        ci_width=round(upper_rounded - lower_rounded, 1),
        n_items=len(values),
        alpha=alpha,
        standard_error=round(standard_error, 2) if standard_error is not None else None,
    )


def calculate_completion_percentage(responses: Iterable[UserResponse]) -> float:
    answered = {r.item_id for r in responses if get_item(r.item_id) is not None}
    return round(min(SCORE_MAX, len(answered) / bank_size() * 100), 1)


def calculate_scores(
    responses: Union[ResponseSet, Iterable[UserResponse]],
    assessment_id: str = DEFAULT_ASSESSMENT_ID,
    elapsed_seconds: Optional[float] = None,
    *,
    composite_weights: Mapping[str, float] = DEFAULT_COMPOSITE_WEIGHTS,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    straightlining_run_length: int = DEFAULT_STRAIGHTLINING_RUN_LENGTH,
    min_seconds_per_item: float = DEFAULT_MIN_SECONDS_PER_ITEM,
    version: str = PROFILE_VERSION,
    now: Optional[datetime] = None,
) -> ScoreReport:
    """
    Score one assessment instance of a user.

    The scored instance is the responses of ``assessment_id``. Other
    assessment instances in the set only contribute to the reliability
    estimate (as additional administrations of the same items).

    Args:
        responses: A ResponseSet, or responses of a single user.
        assessment_id: Instance to score.
        elapsed_seconds: Client-measured completion time for the integrity
            check.
        composite_weights: Construct -> weight for composite autonomy.
        confidence_level: Confidence level of construct intervals.
        straightlining_run_length: Integrity straightlining threshold.
        min_seconds_per_item: Integrity completion-time floor.
        version: Version tag stamped on the report.
        now: Report timestamp (defaults to current UTC time).

    Returns:
        ScoreReport covering all four constructs.

    Raises:
        InvalidResponseError: If a bank item answer is outside 1-7.
        ResponseOwnershipError: If the responses belong to several users.
    """
    response_set = (
        responses
        if isinstance(responses, ResponseSet)
        else ResponseSet.from_responses(responses)
    )
    instance = response_set.for_assessment(assessment_id)
    if not instance:
        logger.info(
            f"No responses for assessment '{assessment_id}', reporting empty scores",
            extra={"user_id": response_set.user_id, "assessment_id": assessment_id},
        )

    administrations = {
        other_id: _coded_values_by_construct(response_set.for_assessment(other_id))
        for other_id in response_set.assessment_ids()
    }
    coded = administrations.get(assessment_id) or _coded_values_by_construct(())

    scores: Dict[Construct, ConstructScore] = {}
    for construct in Construct:
        item_values = coded[construct]
        alpha = calculate_construct_alpha(
            {aid: answers[construct] for aid, answers in administrations.items()},
            list(item_values.keys()),
        )
        scores[construct] = score_construct(
            list(item_values.values()), alpha, confidence_level
        )

    return ScoreReport(
        assessment_id=assessment_id,
        user_id=response_set.user_id,
        timestamp=now or utc_now(),
        version=version,
        scores=scores,
        composite_autonomy=calculate_composite(scores, composite_weights),
        response_integrity=assess_response_integrity(
            instance,
            elapsed_seconds=elapsed_seconds,
            straightlining_run_length=straightlining_run_length,
            min_seconds_per_item=min_seconds_per_item,
        ),
        completion_percentage=calculate_completion_percentage(instance),
        interpretation=interpret_scores(scores),
    )


# =============================================================================
# PROFILE
# =============================================================================


def calculate_epistemic_honesty(argument_flips: Sequence[ArgumentFlip]) -> Optional[float]:
    """Mean of average charity and average accuracy across argument flips."""
    if not argument_flips:
        return None
    charity = statistics.mean(f.charity_score for f in argument_flips)
    accuracy = statistics.mean(f.accuracy_score for f in argument_flips)
    return float(round((charity + accuracy) / 2))


def calculate_intellectual_independence(
    source_audits: Sequence[SourceAudit],
) -> Optional[float]:
    if len(source_audits) < MIN_AUDITS_FOR_INDEPENDENCE:
        return None
    patterns = analyze_audit_patterns(source_audits)
    return float(round(calculate_independence_score(patterns)))


def build_profile(
    report: ScoreReport,
    argument_flips: Sequence[ArgumentFlip] = (),
    source_audits: Sequence[SourceAudit] = (),
    now: Optional[datetime] = None,
) -> AutonomyProfile:
    """
    Build a user's AutonomyProfile wholesale from a score report.

    Activity-derived indices are attached when enough activity exists:
    epistemic honesty from argument flips, intellectual independence from
    source audits.
    """
    return AutonomyProfile(
        user_id=report.user_id,
        scores=report.scores,
        composite_autonomy=report.composite_autonomy,
        interpretation=report.interpretation,
        last_updated=now or utc_now(),
        version=report.version,
        epistemic_honesty=calculate_epistemic_honesty(argument_flips),
        intellectual_independence=calculate_intellectual_independence(source_audits),
    )
