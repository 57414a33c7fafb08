"""
Attraction efficiency tests.

Validates:
  - baseDifficulty / crowdImpact / timeBudget formulas per queue strategy
  - userPriorityWeight default and clamping to [0.1, 2.0]
  - empty party never divides by zero
  - recommendedStrategy thresholds
  - park time requirement: 0.7 cutoff, all-zero when nothing qualifies,
    minDays against 480 * 0.75 effective minutes
"""

from __future__ import annotations

import pytest

from services.waylight.analytics.efficiency import (
    STRATEGY_LOW_CROWD,
    STRATEGY_MULTI_PASS,
    STRATEGY_SINGLE_PASS,
    STRATEGY_STANDBY,
    AttractionEfficiency,
    calculate_attraction_efficiency,
    calculate_park_time_requirement,
    user_priority_weight,
)
from services.waylight.analytics.options import AnalyticsOptions
from services.waylight.domain.types import LightningLaneKind
from services.waylight.tests.conftest import make_attraction, make_member, make_summary


def _efficiency(attraction_id: str, weight: float, budget: float, score: float) -> AttractionEfficiency:
    return AttractionEfficiency(
        attraction_id=attraction_id,
        attraction_name=attraction_id,
        park_id="magic-kingdom",
        efficiency_score=score,
        time_budget_minutes=budget,
        base_difficulty=1.0,
        crowd_impact=1.0,
        lightning_lane_strategy=LightningLaneKind.STANDBY,
        user_priority_weight=weight,
        recommended_strategy=STRATEGY_STANDBY,
    )


# ---------------------------------------------------------------------------
# Formula
# ---------------------------------------------------------------------------

class TestEfficiencyFormula:
    """Difficulty, crowd impact and time budget per strategy."""

    def test_standby_attraction_without_summary(self, party):
        attraction = make_attraction("its-a-small-world", duration=12)
        eff = calculate_attraction_efficiency(attraction, None, party, [])

        assert eff.user_priority_weight == 0.5
        assert eff.base_difficulty == pytest.approx(1.2)
        assert eff.crowd_impact == 1.0
        assert eff.lightning_lane_strategy == LightningLaneKind.STANDBY
        assert eff.time_budget_minutes == pytest.approx(57.0)
        assert eff.efficiency_score == pytest.approx(50 / (57 * 1.2))
        assert eff.recommended_strategy == STRATEGY_STANDBY

    def test_multi_pass_attraction(self, party):
        attraction = make_attraction(
            "space-mountain", duration=6, intensity="high", multi_pass=True,
        )
        eff = calculate_attraction_efficiency(attraction, None, party, [])

        # 1 + 0.1 + 0.5 (Lightning Lane) + 0.4 (high)
        assert eff.base_difficulty == pytest.approx(2.0)
        assert eff.crowd_impact == pytest.approx(1.3)
        assert eff.lightning_lane_strategy == LightningLaneKind.MULTIPASS
        assert eff.time_budget_minutes == 16
        assert eff.efficiency_score == pytest.approx(50 / (16 * 2.0 * 1.3))

    def test_single_pass_attraction(self, party):
        attraction = make_attraction(
            "rise-of-the-resistance", duration=18, intensity="extreme", single_pass=True,
        )
        eff = calculate_attraction_efficiency(attraction, None, party, [])

        assert eff.base_difficulty == pytest.approx(1 + 0.3 + 0.5 + 0.6)
        assert eff.crowd_impact == pytest.approx(1.5)
        assert eff.lightning_lane_strategy == LightningLaneKind.SINGLEPASS
        assert eff.time_budget_minutes == 33

    def test_multi_pass_wins_over_single_pass(self, party):
        attraction = make_attraction("dual", multi_pass=True, single_pass=True)
        eff = calculate_attraction_efficiency(attraction, None, party, [])

        assert eff.lightning_lane_strategy == LightningLaneKind.MULTIPASS
        assert eff.crowd_impact == pytest.approx(1.8)

    def test_legacy_flag_adds_difficulty_but_not_crowd(self, party):
        attraction = make_attraction("legacy", duration=30, lightning_lane=True)
        eff = calculate_attraction_efficiency(attraction, None, party, [])

        assert eff.base_difficulty == pytest.approx(2.0)
        assert eff.crowd_impact == 1.0
        assert eff.lightning_lane_strategy == LightningLaneKind.STANDBY

    def test_duration_contribution_caps_at_two_hours(self, party):
        attraction = make_attraction("dinner-show", duration=240)
        eff = calculate_attraction_efficiency(attraction, None, party, [])
        assert eff.base_difficulty == pytest.approx(3.0)


# ---------------------------------------------------------------------------
# Priority weight
# ---------------------------------------------------------------------------

class TestUserPriorityWeight:
    """(avg/5) + mustDo/party - avoid/party, clamped to [0.1, 2.0]."""

    def test_no_summary_is_neutral(self):
        assert user_priority_weight(None, 4) == 0.5

    def test_unclamped_value(self):
        summary = make_summary("x", average_rating=4.0, must_do_count=1, avoid_count=1)
        assert user_priority_weight(summary, 4) == pytest.approx(0.8)

    def test_single_member_all_must_do_clamps_at_two(self):
        """All ratings 5 and all must-do with one member: 1.0 + 1.0 = 2.0, never more."""
        summary = make_summary("x", average_rating=5.0, must_do_count=1)
        assert user_priority_weight(summary, 1) == 2.0

        inflated = make_summary("x", average_rating=5.0, must_do_count=6)
        assert user_priority_weight(inflated, 1) == 2.0

    def test_clamps_at_floor(self):
        summary = make_summary("x", average_rating=1.0, avoid_count=4)
        assert user_priority_weight(summary, 4) == pytest.approx(0.1)

    def test_missing_average_counts_as_zero(self):
        summary = make_summary("x", average_rating=None, must_do_count=2)
        assert user_priority_weight(summary, 4) == pytest.approx(0.5)

    def test_empty_party_uses_denominator_one(self):
        summary = make_summary("x", average_rating=2.5, must_do_count=1)
        weight = user_priority_weight(summary, 0)
        assert weight == pytest.approx(1.5)

    def test_efficiency_with_empty_party_is_finite(self):
        attraction = make_attraction("x", multi_pass=True)
        summary = make_summary("x", average_rating=5.0, must_do_count=3)
        eff = calculate_attraction_efficiency(attraction, summary, [], [])
        assert eff.user_priority_weight == 2.0
        assert eff.efficiency_score > 0


# ---------------------------------------------------------------------------
# Recommended strategy text
# ---------------------------------------------------------------------------

class TestRecommendedStrategy:

    def test_high_priority_multi_pass(self):
        attraction = make_attraction("x", multi_pass=True)
        summary = make_summary("x", average_rating=5.0, must_do_count=1)
        eff = calculate_attraction_efficiency(attraction, summary, [make_member("a")], [])
        assert eff.recommended_strategy == STRATEGY_MULTI_PASS

    def test_single_pass_needs_weight_above_one_and_a_half(self):
        attraction = make_attraction("x", single_pass=True)
        members = [make_member("a"), make_member("b")]

        keen = make_summary("x", average_rating=5.0, must_do_count=2)
        assert calculate_attraction_efficiency(
            attraction, keen, members, []
        ).recommended_strategy == STRATEGY_SINGLE_PASS

        lukewarm = make_summary("x", average_rating=4.0, must_do_count=1)
        # weight 1.3 -> falls through to the time budget check (10 + 15 <= 90)
        assert calculate_attraction_efficiency(
            attraction, lukewarm, members, []
        ).recommended_strategy == STRATEGY_STANDBY

    def test_long_standby_visit(self, party):
        attraction = make_attraction("x", duration=60)
        eff = calculate_attraction_efficiency(attraction, None, party, [])
        assert eff.time_budget_minutes == pytest.approx(105)
        assert eff.recommended_strategy == STRATEGY_LOW_CROWD


# ---------------------------------------------------------------------------
# Park time requirement
# ---------------------------------------------------------------------------

class TestParkTimeRequirement:

    def test_nothing_wanted_is_all_zero(self):
        effs = [_efficiency("a", 0.7, 100, 1.0), _efficiency("b", 0.5, 100, 2.0)]
        req = calculate_park_time_requirement("magic-kingdom", effs)
        assert (req.min_days, req.priority_score, req.efficiency) == (0, 0.0, 0.0)

    def test_empty_park_is_all_zero(self):
        req = calculate_park_time_requirement("epcot", [])
        assert req.min_days == 0
        assert req.priority_score == 0.0

    def test_only_wanted_attractions_count(self):
        effs = [
            _efficiency("a", 1.0, 200, 0.5),
            _efficiency("b", 2.0, 200, 0.25),
            _efficiency("c", 0.5, 1000, 9.0),
        ]
        req = calculate_park_time_requirement("magic-kingdom", effs)

        # 400 minutes over 360 effective minutes per day
        assert req.min_days == 2
        assert req.priority_score == pytest.approx(1.0 * 0.5 + 2.0 * 0.25)
        assert req.efficiency == pytest.approx(0.375)

    def test_min_days_is_at_least_one(self):
        req = calculate_park_time_requirement("magic-kingdom", [_efficiency("a", 1.0, 5, 1.0)])
        assert req.min_days == 1

    def test_options_change_cutoff_and_day_length(self):
        options = AnalyticsOptions(park_day_minutes=600, park_day_utilization=0.5, priority_weight_cutoff=0.4)
        effs = [_efficiency("a", 0.5, 301, 1.0)]
        req = calculate_park_time_requirement("magic-kingdom", effs, options)
        assert req.min_days == 2
