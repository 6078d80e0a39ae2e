"""
Tests for profile recalculation, retrieval and progress endpoints.
"""
from libs.domain_types import Construct, MilestoneType, Trend
from reflector.core.error_responses import ErrorMessages
from tests.conftest import make_responses, varied_bank_answers


class TestRecalculateProfile:
    """Tests for POST /users/{user_id}/profile/recalculate."""

    def test_no_responses(self, client):
        response = client.post("/v1/users/user-1/profile/recalculate")

        assert response.status_code == 404
        assert response.json()["detail"] == ErrorMessages.NO_RESPONSES

    def test_full_bank_builds_profile(self, client, store):
        store.upsert_responses(make_responses(varied_bank_answers()))

        response = client.post("/v1/users/user-1/profile/recalculate")

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "user-1"
        assert 0 <= data["composite_autonomy"] <= 100
        assert data["epistemic_honesty"] is None

        assert client.get("/v1/users/user-1/profile").json() == data

    def test_full_bank_completes_baseline(self, client, store):
        store.upsert_responses(make_responses(varied_bank_answers()))

        client.post("/v1/users/user-1/profile/recalculate")
        client.post("/v1/users/user-1/profile/recalculate")

        completions = [
            m for m in store.list_milestones("user-1")
            if m.milestone_type == MilestoneType.MODULE_COMPLETE
        ]
        assert len(completions) == 1
        badges = client.get("/v1/users/user-1/badges").json()
        assert "baseline_complete" in [b["badge_id"] for b in badges]

    def test_partial_bank_does_not_complete_baseline(self, client, store):
        store.upsert_responses(make_responses({"eai_01": 3, "rf_01": 5}))

        response = client.post("/v1/users/user-1/profile/recalculate")

        assert response.status_code == 200
        assert store.list_milestones("user-1") == []
        assert client.get("/v1/users/user-1/badges").json() == []


class TestGetProfile:
    def test_missing_profile(self, client):
        response = client.get("/v1/users/user-1/profile")

        assert response.status_code == 404
        assert response.json()["detail"] == ErrorMessages.PROFILE_NOT_FOUND


class TestProgress:
    """Tests for GET /users/{user_id}/progress."""

    def test_new_user(self, client):
        data = client.get("/v1/users/user-1/progress").json()

        assert data["historical_scores"] == []
        assert set(data["trends"].values()) == {Trend.STABLE.value}
        assert data["suggested_module"] is None

    def test_history_and_suggestion(self, client, store):
        store.upsert_responses(make_responses(varied_bank_answers()))
        client.post("/v1/users/user-1/profile/recalculate")
        client.post("/v1/users/user-1/profile/recalculate")

        data = client.get("/v1/users/user-1/progress").json()

        assert len(data["historical_scores"]) == 2
        assert data["suggested_module"]["module"]
        assert data["suggested_module"]["construct"] in {c.value for c in Construct}

    def test_insight_moments_reported(self, client):
        client.post(
            "/v1/users/user-1/activities/daily_reflection",
            json={"response": "noticed something", "insight_flagged": True},
        )

        insights = client.get("/v1/users/user-1/progress").json()["insights"]

        assert insights == ["You've had 1 insight moments. Reflection is working!"]
