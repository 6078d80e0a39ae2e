"""
Pydantic schemas for construct scores, score reports and autonomy profiles.
"""
from datetime import datetime
from typing import Dict, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from libs.domain_types import Construct, Interpretation


class ConstructScore(BaseModel):
    """
    Score for a single construct on the 0-100 scale.

    ``alpha`` is None when reliability was not measured (too few items or
    administrations). None means "unmeasured" and must never be read as zero.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    raw: float = Field(..., ge=0, le=100, description="Score on the 0-100 scale")
    ci_lower: float = Field(..., ge=0, le=100, description="95% CI lower bound")
    ci_upper: float = Field(..., ge=0, le=100, description="95% CI upper bound")
    ci_width: float = Field(..., ge=0, le=100, description="ci_upper - ci_lower")
    n_items: int = Field(..., ge=0, description="Responses contributing to the score")
    alpha: Optional[float] = Field(
        None, ge=-1, le=1, description="Cronbach's alpha, absent when unmeasured"
    )
    standard_error: Optional[float] = Field(
        None, ge=0, description="Standard error of the mean on the 0-100 scale"
    )

    @model_validator(mode="after")
    def validate_interval_bounds(self) -> Self:
        """Ensure 0 <= ci_lower <= raw <= ci_upper <= 100."""
        if not (self.ci_lower <= self.raw <= self.ci_upper):
            raise ValueError(
                f"Interval [{self.ci_lower}, {self.ci_upper}] must contain raw score {self.raw}"
            )
        return self


class ResponseIntegrity(BaseModel):
    """Careless-responding indicators for one assessment instance."""

    model_config = ConfigDict(extra="ignore")

    acquiescence_bias: float = Field(
        0.0, ge=0, le=1, description="Fraction of answers at the extreme-agree end"
    )
    straightlining: bool = False
    completion_time_flag: bool = False
    attention_check_passed: bool = True


class ScoreReport(BaseModel):
    """Full scoring output for one assessment instance."""

    model_config = ConfigDict(extra="ignore")

    assessment_id: str
    user_id: str
    timestamp: datetime
    version: str
    scores: Dict[Construct, ConstructScore]
    composite_autonomy: float = Field(..., ge=0, le=100)
    response_integrity: ResponseIntegrity
    completion_percentage: float = Field(..., ge=0, le=100)
    interpretation: Dict[Construct, Interpretation]


class AutonomyProfile(BaseModel):
    """Latest profile snapshot for one user, recomputed wholesale."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    scores: Dict[Construct, ConstructScore]
    composite_autonomy: float = Field(..., ge=0, le=100)
    interpretation: Dict[Construct, Interpretation]
    last_updated: datetime
    version: str
    # Activity-derived indices (Argument Flip, Source Audit)
    epistemic_honesty: Optional[float] = Field(None, ge=0, le=100)
    intellectual_independence: Optional[float] = Field(None, ge=0, le=100)
