"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Self

from libs.domain_types import Construct


# Tolerance for floating-point weight summation checks
_WEIGHT_SUM_TOLERANCE = 1e-6

# Constructs that must always contribute to the composite autonomy score
_REQUIRED_COMPOSITE_CONSTRUCTS = {Construct.EAI.value, Construct.RF.value}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Reflector API"
    APP_VERSION: str = "2.0.0"
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Storage
    DATABASE_URL: str = "sqlite:///./reflector.db"

    # Scoring
    # Semantic version stamped on every profile and score report.
    # Consumers must tolerate unknown future fields.
    PROFILE_VERSION: str = "2.0.0"
    DEFAULT_ASSESSMENT_ID: str = "baseline_mirror_v1"
    # Weighted blend of construct raw scores making up composite autonomy.
    # EAI and RF are the two constructs carrying the autonomy signal.
    COMPOSITE_WEIGHTS: Dict[str, float] = {
        "EAI": 0.6,
        "RF": 0.4,
    }
    CONFIDENCE_LEVEL: float = Field(
        default=0.95,
        gt=0.0,
        lt=1.0,
        description="Confidence level for construct score intervals (strictly between 0 and 1)",
    )
    # Minimum mean change (points) between snapshot halves to call a trend
    TREND_DELTA: float = Field(default=5.0, ge=0.0)

    # Response integrity
    STRAIGHTLINING_RUN_LENGTH: int = Field(
        default=10,
        ge=2,
        description="Consecutive identical answers that flag straightlining",
    )
    MIN_SECONDS_PER_ITEM: float = Field(
        default=2.0,
        ge=0.0,
        description="Plausibility floor for average answering time per item",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_composite_weights(self) -> Self:
        """Validate COMPOSITE_WEIGHTS: known constructs, positive, summing to 1.0."""
        weights = self.COMPOSITE_WEIGHTS
        known = {c.value for c in Construct}
        unknown = set(weights.keys()) - known
        if unknown:
            raise ValueError(
                f"COMPOSITE_WEIGHTS keys must be constructs {sorted(known)}, "
                f"got unknown {sorted(unknown)}"
            )
        missing = _REQUIRED_COMPOSITE_CONSTRUCTS - set(weights.keys())
        if missing:
            raise ValueError(
                f"COMPOSITE_WEIGHTS must include {sorted(missing)}"
            )
        non_positive = [k for k, v in weights.items() if v <= 0]
        if non_positive:
            raise ValueError(
                f"All composite weights must be positive, got non-positive: {non_positive}"
            )
        total = sum(weights.values())
        if abs(total - 1.0) > _WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"COMPOSITE_WEIGHTS must sum to 1.0, got {total}")
        return self


settings = Settings()
