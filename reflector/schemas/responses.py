"""
Pydantic schemas for assessment responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from reflector.core.datetime_utils import utc_now


class UserResponse(BaseModel):
    """
    One user's answer to one item within one assessment instance.

    ``value`` is deliberately unconstrained here: range enforcement belongs to
    the scorer, which raises InvalidResponseError instead of clamping. The API
    layer constrains incoming values separately (see ResponseItem).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    user_id: str
    assessment_id: str
    item_id: str
    value: float = Field(..., description="1-7 for Likert, option score for vignettes")
    timestamp: datetime = Field(default_factory=utc_now)


class ResponseItem(BaseModel):
    """Schema for a single submitted answer."""

    assessment_id: str = Field(..., min_length=1, max_length=100)
    item_id: str = Field(..., min_length=1, max_length=100)
    value: float = Field(..., ge=1, le=7, description="Answer on the 1-7 scale")
    timestamp: Optional[datetime] = Field(
        None, description="When the answer was given (defaults to server time)"
    )


class ResponseSubmission(BaseModel):
    """Batch of answers to upsert for one user."""

    responses: List[ResponseItem] = Field(..., min_length=1)


class ResponseSubmissionResult(BaseModel):
    """Result of a response upsert."""

    saved: int
    total_responses: int
