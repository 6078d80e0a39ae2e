"""
Tests for badge conditions and progress fractions.
"""
import pytest

from libs.domain_types import BadgeCategory, BadgeRarity, MilestoneType
from reflector.core.badges import (
    BADGE_DEFINITIONS,
    get_badge_by_id,
    get_badges_by_category,
    get_badges_by_rarity,
    get_progress_for_badge,
)
from reflector.schemas.activity import (
    ArgumentFlip,
    BadgeCheckData,
    DailyReflection,
    DisconfirmGame,
    InfluenceSource,
    Milestone,
    SchemaReclaim,
    SourceAudit,
    StreakData,
    StreakMilestones,
)
from tests.conftest import profile_scores

USER = "user-1"
CHECKED = "Read the primary study and two replications"


def reflections(count, insightful=0):
    return [
        DailyReflection(user_id=USER, insight_flagged=i < insightful) for i in range(count)
    ]


def flips(*charity_scores):
    return [ArgumentFlip(user_id=USER, charity_score=c) for c in charity_scores]


def audits(count, same_source=False, evidence=CHECKED):
    return [
        SourceAudit(
            user_id=USER,
            who_heard_from="podcast" if same_source else f"source-{i}",
            who_benefits=["advertisers", "politicians", "platforms"],
            evidence_checked=evidence,
        )
        for i in range(count)
    ]


def condition(badge_id, data):
    return get_badge_by_id(badge_id).condition(data)


class TestCatalog:
    """Tests for catalog shape and lookups."""

    def test_sixteen_badges_with_unique_ids(self):
        ids = [badge.id for badge in BADGE_DEFINITIONS]
        assert len(ids) == 16
        assert len(set(ids)) == 16

    def test_unknown_badge(self):
        """Unknown ids are a neutral default, never an error."""
        assert get_badge_by_id("unknown_badge") is None
        assert get_progress_for_badge("unknown_badge", BadgeCheckData()) == 0

    def test_by_category(self):
        streak_ids = [b.id for b in get_badges_by_category(BadgeCategory.STREAK)]
        assert streak_ids == ["streak_7", "streak_21", "streak_60", "streak_100"]

    def test_by_rarity(self):
        epic_ids = {b.id for b in get_badges_by_rarity(BadgeRarity.EPIC)}
        assert epic_ids == {"streak_100", "epistemic_autonomy", "independent_thinker"}

    def test_empty_snapshot_unlocks_nothing(self, empty_snapshot):
        for badge in BADGE_DEFINITIONS:
            assert badge.condition(empty_snapshot) is False
            assert get_progress_for_badge(badge.id, empty_snapshot) == 0


class TestStreakBadges:
    def test_progress_follows_current_streak(self):
        data = BadgeCheckData(streak=StreakData(current=5, longest=5))

        assert get_progress_for_badge("streak_7", data) == pytest.approx(5 / 7)
        assert get_progress_for_badge("streak_21", data) == pytest.approx(5 / 21)

    def test_condition_follows_milestone_flag(self):
        """A reached milestone keeps the badge unlockable after the streak resets."""
        data = BadgeCheckData(
            streak=StreakData(current=0, longest=8, milestones=StreakMilestones(seven=True))
        )
        assert condition("streak_7", data) is True
        assert condition("streak_21", data) is False


class TestModuleBadges:
    def test_baseline_complete_needs_module_milestone(self):
        milestone = Milestone(user_id=USER, milestone_type=MilestoneType.MODULE_COMPLETE)
        assert condition("baseline_complete", BadgeCheckData()) is False
        assert condition("baseline_complete", BadgeCheckData(milestones=[milestone])) is True

    def test_disconfirm_master_threshold(self):
        two = BadgeCheckData(disconfirm_games=[DisconfirmGame(user_id=USER)] * 2)
        three = BadgeCheckData(disconfirm_games=[DisconfirmGame(user_id=USER)] * 3)

        assert condition("disconfirm_master", two) is False
        assert condition("disconfirm_master", three) is True

    def test_schema_reclaimer_threshold(self):
        reclaim = SchemaReclaim(user_id=USER, schema_domain="approval")
        assert condition("schema_reclaimer", BadgeCheckData(schema_reclaims=[reclaim])) is False
        assert condition("schema_reclaimer", BadgeCheckData(schema_reclaims=[reclaim] * 2)) is True

    def test_source_auditor_threshold(self):
        sources = [InfluenceSource(user_id=USER, name=f"s{i}") for i in range(5)]
        assert condition("source_auditor", BadgeCheckData(influence_sources=sources[:4])) is False
        assert condition("source_auditor", BadgeCheckData(influence_sources=sources)) is True

    def test_source_detective_threshold(self):
        assert condition("source_detective", BadgeCheckData(source_audits=audits(6))) is False
        assert condition("source_detective", BadgeCheckData(source_audits=audits(7))) is True


class TestReflectionBadges:
    def test_progress_with_some_insights(self):
        """7 reflections, first 3 flagged: 7/10 and 3/5."""
        data = BadgeCheckData(reflections=reflections(7, insightful=3))

        assert get_progress_for_badge("reflection_10", data) == pytest.approx(0.7)
        assert get_progress_for_badge("insight_hunter", data) == pytest.approx(0.6)

    def test_conditions(self):
        data = BadgeCheckData(reflections=reflections(10, insightful=5))
        assert condition("reflection_10", data) is True
        assert condition("insight_hunter", data) is True

    def test_progress_capped_at_one(self):
        data = BadgeCheckData(reflections=reflections(25))
        assert get_progress_for_badge("reflection_10", data) == 1.0


class TestArgumentFlipBadges:
    def test_steelman_initiate(self):
        assert condition("steelman_initiate", BadgeCheckData(argument_flips=flips(59.9))) is False
        assert condition("steelman_initiate", BadgeCheckData(argument_flips=flips(40, 60))) is True

    def test_intellectual_honesty_mean_exactly_70(self):
        data = BadgeCheckData(argument_flips=flips(60, 70, 70, 80, 70))
        assert condition("intellectual_honesty", data) is True

    def test_intellectual_honesty_mean_below_70(self):
        data = BadgeCheckData(argument_flips=flips(60, 70, 70, 80, 69.5))
        assert condition("intellectual_honesty", data) is False

    def test_intellectual_honesty_needs_five_flips(self):
        data = BadgeCheckData(argument_flips=flips(90, 90, 90, 90))
        assert condition("intellectual_honesty", data) is False


class TestIndependentThinker:
    def test_diverse_checked_sources(self):
        data = BadgeCheckData(source_audits=audits(14))
        assert condition("independent_thinker", data) is True

    def test_needs_fourteen_audits(self):
        data = BadgeCheckData(source_audits=audits(13))
        assert condition("independent_thinker", data) is False

    def test_score_must_exceed_75(self):
        """Single source: 100 - 30 + 5 = 75, which is not above 75."""
        data = BadgeCheckData(source_audits=audits(14, same_source=True))
        assert condition("independent_thinker", data) is False

    def test_evidence_gaps_block_unlock(self):
        data = BadgeCheckData(source_audits=audits(14, evidence="not checked"))
        assert condition("independent_thinker", data) is False


class TestAchievementBadges:
    def test_epistemic_autonomy(self):
        data = BadgeCheckData(
            disconfirm_games=[DisconfirmGame(user_id=USER)],
            schema_reclaims=[SchemaReclaim(user_id=USER, schema_domain="dependence")],
            influence_sources=[InfluenceSource(user_id=USER, name="Daily news")],
            reflections=reflections(20),
            streak=StreakData(current=3, longest=30),
        )
        assert condition("epistemic_autonomy", data) is True

    def test_epistemic_autonomy_needs_every_module(self):
        data = BadgeCheckData(
            disconfirm_games=[DisconfirmGame(user_id=USER)],
            reflections=reflections(20),
            streak=StreakData(current=3, longest=30),
        )
        assert condition("epistemic_autonomy", data) is False
        assert 0 < get_progress_for_badge("epistemic_autonomy", data) < 1

    def test_balanced_mind(self):
        data = BadgeCheckData(profile_scores=profile_scores(eai=60, rf=55, sa=50, ard=62))
        assert condition("balanced_mind", data) is True

    def test_balanced_mind_spread_too_wide(self):
        data = BadgeCheckData(profile_scores=profile_scores(eai=80, rf=55, sa=50, ard=62))
        assert condition("balanced_mind", data) is False

    def test_balanced_mind_floor(self):
        data = BadgeCheckData(profile_scores=profile_scores(eai=35, rf=38, sa=39, ard=36))
        assert condition("balanced_mind", data) is False

    def test_balanced_mind_needs_profile(self):
        assert condition("balanced_mind", BadgeCheckData()) is False
