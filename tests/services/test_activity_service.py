"""
Tests for activity recording and badge checks at the service layer.
"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from libs.domain_types import ActivityKind, MilestoneType
from reflector.services import check_badges, record_activity
from tests.conftest import BASE_TIME


class TestRecordActivity:
    def test_consecutive_days_build_streak(self, store):
        for day in range(7):
            result = record_activity(
                store,
                "user-1",
                ActivityKind.DAILY_REFLECTION,
                {},
                today=BASE_TIME + timedelta(days=day),
            )

        assert result.streak.current == 7
        assert [m.milestone_type for m in result.new_milestones] == [MilestoneType.STREAK_7]
        assert store.get_streak("user-1").milestones.seven is True

    def test_milestones_and_badges_carry_activity_time(self, store):
        for day in range(7):
            result = record_activity(
                store,
                "user-1",
                ActivityKind.DAILY_REFLECTION,
                {},
                today=BASE_TIME + timedelta(days=day),
            )

        activity_time = BASE_TIME + timedelta(days=6)
        assert result.new_milestones[0].achieved_at == activity_time
        assert "streak_7" in [b.badge_id for b in result.new_badges]
        assert all(b.unlocked_at == activity_time for b in result.new_badges)
        assert all(
            m.achieved_at == activity_time
            for m in store.list_milestones("user-1")
        )

    def test_plain_date_maps_to_midnight_utc(self, store):
        result = record_activity(
            store, "user-1", ActivityKind.DAILY_REFLECTION, {}, today=BASE_TIME.date()
        )

        assert result.streak.last_activity == BASE_TIME.replace(hour=0)

    def test_milestone_recorded_once(self, store):
        for day in range(8):
            record_activity(
                store,
                "user-1",
                ActivityKind.DAILY_REFLECTION,
                {},
                today=BASE_TIME + timedelta(days=day),
            )

        streak_milestones = [
            m for m in store.list_milestones("user-1")
            if m.milestone_type == MilestoneType.STREAK_7
        ]
        assert len(streak_milestones) == 1
        assert streak_milestones[0].metadata == {"streak": 7}

    def test_earlier_activity_leaves_streak(self, store):
        record_activity(store, "user-1", ActivityKind.DAILY_REFLECTION, {}, today=BASE_TIME)

        result = record_activity(
            store,
            "user-1",
            ActivityKind.DAILY_REFLECTION,
            {},
            today=BASE_TIME - timedelta(days=2),
        )

        assert result.streak.current == 1
        assert result.streak.last_activity == BASE_TIME

    def test_invalid_payload_stores_nothing(self, store):
        with pytest.raises(ValidationError):
            record_activity(store, "user-1", ActivityKind.ARGUMENT_FLIP, {})

        assert store.list_activities("user-1", ActivityKind.ARGUMENT_FLIP) == []
        assert store.get_streak("user-1").current == 0


class TestCheckBadges:
    def test_badge_unlock_milestone(self, store):
        for _ in range(7):
            record_activity(
                store, "user-1", ActivityKind.SOURCE_AUDIT, {"belief": "b"}, today=BASE_TIME
            )

        unlocked = [b.badge_id for b in store.list_badges("user-1")]
        assert "source_detective" in unlocked
        milestones = [
            m.metadata["badge_id"]
            for m in store.list_milestones("user-1")
            if m.milestone_type == MilestoneType.BADGE_UNLOCK
        ]
        assert sorted(milestones) == sorted(unlocked)

    def test_second_check_is_empty(self, store):
        record_activity(
            store, "user-1", ActivityKind.ARGUMENT_FLIP, {"charity_score": 80}, today=BASE_TIME
        )

        assert check_badges(store, "user-1", BASE_TIME) == []
