"""
Tests for badge catalog, unlocked badges, progress and check endpoints.
"""
from libs.domain_types import ActivityKind, MilestoneType
from reflector.core.badges import BADGE_DEFINITIONS
from reflector.schemas.activity import DailyReflection, Milestone


class TestBadgeCatalog:
    """Tests for GET /badges."""

    def test_full_catalog(self, client):
        data = client.get("/v1/badges").json()

        assert [b["id"] for b in data] == [d.id for d in BADGE_DEFINITIONS]
        assert "condition" not in data[0]

    def test_filter_by_category(self, client):
        data = client.get("/v1/badges", params={"category": "streak"}).json()

        assert [b["id"] for b in data] == ["streak_7", "streak_21", "streak_60", "streak_100"]

    def test_filter_by_rarity(self, client):
        data = client.get("/v1/badges", params={"rarity": "epic"}).json()

        assert {b["id"] for b in data} == {
            "streak_100",
            "epistemic_autonomy",
            "independent_thinker",
        }

    def test_combined_filters(self, client):
        data = client.get(
            "/v1/badges", params={"category": "module", "rarity": "common"}
        ).json()

        assert {b["id"] for b in data} == {
            "baseline_complete",
            "steelman_initiate",
            "source_detective",
        }

    def test_invalid_category(self, client):
        response = client.get("/v1/badges", params={"category": "legendary"})
        assert response.status_code == 422


class TestBadgeProgress:
    """Tests for GET /users/{user_id}/badges/progress."""

    def test_new_user(self, client):
        data = client.get("/v1/users/user-1/badges/progress").json()

        assert len(data) == len(BADGE_DEFINITIONS)
        assert all(not b["unlocked"] for b in data)
        assert all(b["progress"] == 0.0 for b in data)

    def test_partial_progress(self, client, store):
        for _ in range(5):
            store.save_activity(
                ActivityKind.DAILY_REFLECTION, DailyReflection(user_id="user-1")
            )

        data = {b["badge_id"]: b for b in client.get("/v1/users/user-1/badges/progress").json()}

        assert data["reflection_10"]["progress"] == 0.5
        assert data["reflection_10"]["unlocked"] is False

    def test_unlocked_badge_reports_complete(self, client):
        client.post(
            "/v1/users/user-1/activities/argument_flip", json={"charity_score": 65}
        )

        data = {b["badge_id"]: b for b in client.get("/v1/users/user-1/badges/progress").json()}

        assert data["steelman_initiate"] == {
            "badge_id": "steelman_initiate",
            "progress": 1.0,
            "unlocked": True,
        }


class TestBadgeCheck:
    """Tests for POST /users/{user_id}/badges/check."""

    def test_nothing_to_unlock(self, client):
        response = client.post("/v1/users/user-1/badges/check")

        assert response.status_code == 200
        assert response.json() == {"newly_unlocked": []}

    def test_unlocks_once(self, client, store):
        store.save_milestone(
            Milestone(
                user_id="user-1",
                milestone_type=MilestoneType.MODULE_COMPLETE,
                metadata={"module": "baseline"},
            )
        )

        first = client.post("/v1/users/user-1/badges/check").json()
        second = client.post("/v1/users/user-1/badges/check").json()

        assert [b["badge_id"] for b in first["newly_unlocked"]] == ["baseline_complete"]
        assert second["newly_unlocked"] == []

        badges = client.get("/v1/users/user-1/badges").json()
        assert len(badges) == 1
        assert badges[0]["name"] == "Self-Aware"
