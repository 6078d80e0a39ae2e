"""
Services package for business logic.
"""

from .activity_service import check_badges, record_activity
from .profile_service import get_progress_report, recalculate_profile, score_assessment

__all__ = [
    "check_badges",
    "record_activity",
    "get_progress_report",
    "recalculate_profile",
    "score_assessment",
]
