"""
Models package for Reflector.
"""
from .base import Base, engine, SessionLocal, get_db
from .models import (
    AssessmentResponse,
    ProfileSnapshot,
    Streak,
    ActivityRecord,
    MilestoneRecord,
    UnlockedBadge,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "AssessmentResponse",
    "ProfileSnapshot",
    "Streak",
    "ActivityRecord",
    "MilestoneRecord",
    "UnlockedBadge",
]
