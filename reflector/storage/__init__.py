"""
Persistence layer for Reflector.
"""
from .activity_store import ACTIVITY_SCHEMAS, ActivityStore

__all__ = ["ACTIVITY_SCHEMAS", "ActivityStore"]
