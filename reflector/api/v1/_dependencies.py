"""
Shared dependencies for v1 endpoints.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from reflector.models import get_db
from reflector.storage import ActivityStore


def get_store(db: Session = Depends(get_db)) -> ActivityStore:
    """Per-request ActivityStore bound to the request's database session."""
    return ActivityStore(db)
