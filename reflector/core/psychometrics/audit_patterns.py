"""
Source-audit pattern analysis and the independence score.

Source audits record where a belief came from, who benefits from it and
whether its evidence was checked. Across audits this module derives:

- the most frequent sources and beneficiaries (case-insensitive),
- the evidence-gap percentage (audits whose evidence was not checked),
- a dependency level from how concentrated the sources are.

The independence score built on top of these patterns feeds both the
``independent_thinker`` badge and the profile's intellectual independence.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence

from libs.domain_types import DependencyLevel
from reflector.schemas.activity import SourceAudit


# =============================================================================
# PATTERN THRESHOLDS
# =============================================================================

TOP_PATTERN_COUNT = 3

# Evidence notes shorter than this are treated as unchecked
MIN_EVIDENCE_NOTE_LENGTH = 20
UNCHECKED_EVIDENCE_MARKERS = ("not checked", "haven't")

# Share of audits traced to the top three sources
HIGH_DEPENDENCY_RATIO = 0.6
MODERATE_DEPENDENCY_RATIO = 0.4

# =============================================================================
# INDEPENDENCE SCORE
# =============================================================================

DEPENDENCY_PENALTIES = {
    DependencyLevel.HIGH: 30.0,
    DependencyLevel.MODERATE: 15.0,
    DependencyLevel.LOW: 0.0,
}
EVIDENCE_GAP_PENALTY_PER_POINT = 0.5
BENEFICIARY_AWARENESS_BONUS = 5.0
MIN_BENEFICIARY_PATTERNS_FOR_BONUS = 3


@dataclass
class AuditPatterns:
    dependency_level: DependencyLevel = DependencyLevel.LOW
    top_sources: List[str] = field(default_factory=list)
    beneficiary_patterns: List[str] = field(default_factory=list)
    evidence_gaps: int = 0  # percentage of audits, 0-100


def _is_unchecked(evidence_note: str) -> bool:
    note = evidence_note.lower()
    return (
        any(marker in note for marker in UNCHECKED_EVIDENCE_MARKERS)
        or len(evidence_note) < MIN_EVIDENCE_NOTE_LENGTH
    )


def _dependency_level(concentration_ratio: float) -> DependencyLevel:
    if concentration_ratio > HIGH_DEPENDENCY_RATIO:
        return DependencyLevel.HIGH
    elif concentration_ratio > MODERATE_DEPENDENCY_RATIO:
        return DependencyLevel.MODERATE
    return DependencyLevel.LOW


def analyze_audit_patterns(audits: Sequence[SourceAudit]) -> AuditPatterns:
    """
    Derive recurring sources, beneficiaries, evidence gaps and dependency.

    Args:
        audits: A user's source-audit records.

    Returns:
        AuditPatterns. Empty input yields low dependency, no patterns and
        0 evidence gaps.
    """
    if not audits:
        return AuditPatterns()

    source_counts = Counter(audit.who_heard_from.lower() for audit in audits)
    beneficiary_counts = Counter(
        beneficiary.lower() for audit in audits for beneficiary in audit.who_benefits
    )

    top = source_counts.most_common(TOP_PATTERN_COUNT)
    concentration_ratio = sum(count for _, count in top) / len(audits)

    unchecked = sum(1 for audit in audits if _is_unchecked(audit.evidence_checked))

    return AuditPatterns(
        dependency_level=_dependency_level(concentration_ratio),
        top_sources=[source for source, _ in top],
        beneficiary_patterns=[
            beneficiary
            for beneficiary, _ in beneficiary_counts.most_common(TOP_PATTERN_COUNT)
        ],
        evidence_gaps=round(unchecked / len(audits) * 100),
    )


def calculate_independence_score(patterns: AuditPatterns) -> float:
    """
    Independence score (0-100) from audit patterns.

    Starts at 100, subtracts 30/15/0 for high/moderate/low dependency and
    0.5 per evidence-gap point, adds 5 when at least three distinct
    beneficiary patterns were identified, then clamps to [0, 100].

    Example:
        >>> calculate_independence_score(AuditPatterns(evidence_gaps=20))
        90.0
    """
    score = 100.0
    score -= DEPENDENCY_PENALTIES[patterns.dependency_level]
    score -= patterns.evidence_gaps * EVIDENCE_GAP_PENALTY_PER_POINT
    if len(set(patterns.beneficiary_patterns)) >= MIN_BENEFICIARY_PATTERNS_FOR_BONUS:
        score += BENEFICIARY_AWARENESS_BONUS
    return max(0.0, min(100.0, score))
