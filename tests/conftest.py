"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so libs/ is importable
# This must happen before importing from reflector/ which imports from libs/
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from libs.domain_types import Construct  # noqa: E402
from reflector.core.psychometrics.item_bank import (  # noqa: E402
    BASELINE_MIRROR_ITEMS,
    LikertItem,
)
from reflector.main import app  # noqa: E402
from reflector.models import Base, get_db  # noqa: E402
from reflector.schemas.activity import BadgeCheckData  # noqa: E402
from reflector.schemas.responses import UserResponse  # noqa: E402
from reflector.schemas.scores import ConstructScore  # noqa: E402
from reflector.storage import ActivityStore  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests.

    Tables are managed by the db_session fixture instead of the production
    engine.
    """
    yield


app.router.lifespan_context = _test_lifespan


# In-memory SQLite shared across threads so TestClient requests see the
# rows written by fixtures.
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return ActivityStore(db_session)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency override.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Response builders
# =============================================================================


def make_responses(
    values_by_item,
    user_id: str = "user-1",
    assessment_id: str = "baseline_mirror_v1",
    start: datetime = BASE_TIME,
    seconds_per_item: float = 10.0,
) -> List[UserResponse]:
    """Build responses answered one after another in the given order."""
    return [
        UserResponse(
            user_id=user_id,
            assessment_id=assessment_id,
            item_id=item_id,
            value=value,
            timestamp=start + timedelta(seconds=i * seconds_per_item),
        )
        for i, (item_id, value) in enumerate(values_by_item.items())
    ]


def full_bank_answers(likert_value: int = 5, vignette_value: int = 5):
    """An answer for every bank item: one value for Likert, one for vignettes."""
    return {
        item.id: likert_value if isinstance(item, LikertItem) else vignette_value
        for item in BASELINE_MIRROR_ITEMS
    }


def varied_bank_answers():
    """A plausible full-bank answer pattern without long identical runs."""
    pattern = [2, 5, 3, 6, 4, 7, 1, 5, 3]
    return {
        item.id: pattern[i % len(pattern)] for i, item in enumerate(BASELINE_MIRROR_ITEMS)
    }


def make_score(raw: float, n_items: int = 10) -> ConstructScore:
    """A construct score with a narrow interval around ``raw``."""
    return ConstructScore(
        raw=raw,
        ci_lower=max(raw - 5, 0),
        ci_upper=min(raw + 5, 100),
        ci_width=min(raw + 5, 100) - max(raw - 5, 0),
        n_items=n_items,
    )


def profile_scores(eai: float, rf: float, sa: float, ard: float):
    return {
        Construct.EAI: make_score(eai),
        Construct.RF: make_score(rf),
        Construct.SA: make_score(sa),
        Construct.ARD: make_score(ard),
    }


@pytest.fixture
def empty_snapshot():
    return BadgeCheckData()
