"""
Tests for the badge rule engine.
"""
from datetime import datetime, timezone
from typing import Dict

from reflector.core.badges import BadgeEngine
from reflector.schemas.activity import BadgeCheckData, DailyReflection, StreakData, StreakMilestones
from reflector.schemas.badges import Badge

FIXED_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class InMemoryBadgeStore:
    """Dict-backed BadgeStore keyed by (user_id, badge_id)."""

    def __init__(self):
        self.badges: Dict[tuple, Badge] = {}
        self.calls = 0

    def unlock_badge(self, badge: Badge) -> bool:
        self.calls += 1
        key = (badge.user_id, badge.badge_id)
        if key in self.badges:
            return False
        self.badges[key] = badge
        return True


def make_engine(store):
    counter = iter(range(1000))
    return BadgeEngine(
        store,
        clock=lambda: FIXED_NOW,
        id_factory=lambda: f"badge-{next(counter)}",
    )


def week_streak_snapshot(**kwargs):
    return BadgeCheckData(
        streak=StreakData(current=7, longest=7, milestones=StreakMilestones(seven=True)),
        **kwargs,
    )


class TestBadgeEngine:
    """Tests for evaluation, persistence and idempotency."""

    def test_unlocks_satisfied_badges(self):
        store = InMemoryBadgeStore()
        new_badges = make_engine(store).evaluate("user-1", week_streak_snapshot())

        assert [b.badge_id for b in new_badges] == ["streak_7"]
        badge = new_badges[0]
        assert badge.id == "badge-0"
        assert badge.user_id == "user-1"
        assert badge.name == "Week Warrior"
        assert badge.icon == "🔥"
        assert badge.unlocked_at == FIXED_NOW
        assert store.badges[("user-1", "streak_7")] == badge

    def test_nothing_to_unlock(self):
        store = InMemoryBadgeStore()
        assert make_engine(store).evaluate("user-1", BadgeCheckData()) == []
        assert store.calls == 0

    def test_already_unlocked_ids_are_skipped(self):
        """Re-evaluating the same snapshot never produces a duplicate."""
        store = InMemoryBadgeStore()
        snapshot = week_streak_snapshot(unlocked_badge_ids=["streak_7"])

        assert make_engine(store).evaluate("user-1", snapshot) == []
        assert store.calls == 0

    def test_explicit_unlocked_ids_override_snapshot(self):
        store = InMemoryBadgeStore()
        new_badges = make_engine(store).evaluate(
            "user-1", week_streak_snapshot(), already_unlocked_ids=["streak_7"]
        )
        assert new_badges == []

    def test_store_duplicate_is_not_reported(self):
        """A stale snapshot racing an earlier unlock is absorbed by the store."""
        store = InMemoryBadgeStore()
        engine = make_engine(store)
        snapshot = week_streak_snapshot()

        first = engine.evaluate("user-1", snapshot)
        second = engine.evaluate("user-1", snapshot)

        assert len(first) == 1
        assert second == []
        assert len(store.badges) == 1

    def test_multiple_unlocks_in_catalog_order(self):
        store = InMemoryBadgeStore()
        snapshot = week_streak_snapshot(
            reflections=[DailyReflection(user_id="user-1") for _ in range(10)]
        )
        new_badges = make_engine(store).evaluate("user-1", snapshot)

        assert [b.badge_id for b in new_badges] == ["streak_7", "reflection_10"]
        assert len({b.id for b in new_badges}) == 2
