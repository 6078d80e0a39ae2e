r"""
Psychometric scoring for the Baseline Mirror assessment.

This package converts raw assessment responses into construct scores:
- Item bank (36 items across EAI, RF, SA, ARD, plus attention checks)
- Response integrity checks (acquiescence, straightlining, timing, attention)
- Construct scores on a 0-100 scale with Wald confidence intervals
- Cronbach's alpha across a user's administrations
- Composite autonomy and high/moderate/low interpretation
- Source-audit pattern analysis feeding intellectual independence

Usage Example
-------------
Score a user's responses and build their profile:

    from reflector.core.psychometrics import ResponseSet, build_profile, calculate_scores

    response_set = ResponseSet("user-1", responses)
    report = calculate_scores(response_set, assessment_id="baseline_mirror_v1")

    for construct, score in report.scores.items():
        print(f"{construct.value}: {score.raw} [{score.ci_lower}, {score.ci_upper}]")
        if score.alpha is None:
            print("  reliability not measured")

    profile = build_profile(report)
"""

from .audit_patterns import (
    AuditPatterns,
    analyze_audit_patterns,
    calculate_independence_score,
)
from .composite import (
    DEFAULT_COMPOSITE_WEIGHTS,
    calculate_composite,
    interpret_score,
    interpret_scores,
)
from .integrity import assess_response_integrity
from .item_bank import (
    ATTENTION_CHECKS,
    BASELINE_MIRROR_ITEMS,
    CONSTRUCT_METADATA,
    RELIABILITY_TARGETS,
    AssessmentItem,
    LikertItem,
    VignetteItem,
    VignetteOption,
    get_item,
    items_for_construct,
)
from .reliability import (
    calculate_construct_alpha,
    cronbachs_alpha,
    get_alpha_interpretation,
)
from .scoring import (
    ResponseSet,
    build_profile,
    calculate_scores,
    score_construct,
    score_item,
)

__all__ = [
    "AuditPatterns",
    "analyze_audit_patterns",
    "calculate_independence_score",
    "DEFAULT_COMPOSITE_WEIGHTS",
    "calculate_composite",
    "interpret_score",
    "interpret_scores",
    "assess_response_integrity",
    "ATTENTION_CHECKS",
    "BASELINE_MIRROR_ITEMS",
    "CONSTRUCT_METADATA",
    "RELIABILITY_TARGETS",
    "AssessmentItem",
    "LikertItem",
    "VignetteItem",
    "VignetteOption",
    "get_item",
    "items_for_construct",
    "calculate_construct_alpha",
    "cronbachs_alpha",
    "get_alpha_interpretation",
    "ResponseSet",
    "build_profile",
    "calculate_scores",
    "score_construct",
    "score_item",
]
