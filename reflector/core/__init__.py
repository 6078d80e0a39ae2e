"""
Core module for application configuration, scoring and badge logic.

Subpackages (psychometrics, badges) are imported directly:
from reflector.core.psychometrics import calculate_scores
"""
from .config import settings

__all__ = ["settings"]
