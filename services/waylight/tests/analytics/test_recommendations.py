"""
Trip recommendation tests.

Validates:
  - park priority order skips unscheduled parks, sorts by days then must-dos
  - suggested day justifications
  - must-do, rope drop and Lightning Lane picks per park
  - compromise strategies by conflict type, deduplicated
"""

from __future__ import annotations

import pytest

from services.waylight.analytics.conflicts import ConflictAnalysis
from services.waylight.analytics.efficiency import STRATEGY_SINGLE_PASS, AttractionEfficiency
from services.waylight.analytics.park_summary import AttractionInsight, ParkRatingSummary
from services.waylight.analytics.recommendations import (
    HEIGHT_STRATEGIES,
    INTENSITY_STRATEGIES,
    MANY_CONFLICT_STRATEGIES,
    MIXED_CONFLICT_STRATEGIES,
    NO_INTEREST,
    RATING_STRATEGIES,
    generate_compromise_strategies,
    generate_recommendations,
)
from services.waylight.domain.types import ConflictType, ConsensusLevel, LightningLaneKind, Severity


def _insight(name: str, must_do: int = 0, avg: float = 3.0) -> AttractionInsight:
    return AttractionInsight(
        attraction_id=name.lower().replace(" ", "-"),
        attraction_name=name,
        average_rating=avg,
        must_do_count=must_do,
        avoid_count=0,
        consensus_level=ConsensusLevel.HIGH,
    )


def _park(park_id: str, days: float, must_do: int = 0, avg: float = 3.0, top=()) -> ParkRatingSummary:
    return ParkRatingSummary(
        park_id=park_id,
        park_name=park_id.replace("-", " ").title(),
        park_icon="",
        total_attractions=10,
        rated_attractions=len(top),
        average_rating=avg,
        must_do_count=must_do,
        avoid_count=0,
        consensus_score=1.0,
        conflict_count=0,
        top_attractions=list(top),
        recommended_days=days,
        priority_score=0.0,
    )


def _eff(name: str, kind: LightningLaneKind, weight: float, score: float, strategy: str = "") -> AttractionEfficiency:
    return AttractionEfficiency(
        attraction_id=name.lower().replace(" ", "-"),
        attraction_name=name,
        park_id="magic-kingdom",
        efficiency_score=score,
        time_budget_minutes=20,
        base_difficulty=1.5,
        crowd_impact=1.3,
        lightning_lane_strategy=kind,
        user_priority_weight=weight,
        recommended_strategy=strategy,
    )


def _conflict(kind: ConflictType, attraction_id: str = "x") -> ConflictAnalysis:
    return ConflictAnalysis(
        attraction_id=attraction_id,
        attraction_name=attraction_id,
        park_id="magic-kingdom",
        park_name="Magic Kingdom",
        conflict_type=kind,
        severity=Severity.MEDIUM,
    )


# ---------------------------------------------------------------------------
# Park ordering + days
# ---------------------------------------------------------------------------

class TestParkOrdering:

    def test_priority_order(self, trip):
        parks = [
            _park("epcot", 1, must_do=6),
            _park("magic-kingdom", 2, must_do=3),
            _park("animal-kingdom", 0, must_do=9),
            _park("hollywood-studios", 1, must_do=7),
        ]
        recs = generate_recommendations(parks, [], trip)

        assert [p.park_id for p in recs.park_priority_order] == [
            "magic-kingdom", "hollywood-studios", "epcot",
        ]
        assert recs.park_priority_order[0].reason == "2 days allocated - 3 must-do attractions"
        assert recs.park_priority_order[2].reason == "1 day allocated - 6 must-do attractions"

    def test_suggested_day_justifications(self, trip):
        parks = [
            _park("a", 0),
            _park("b", 2, must_do=9),
            _park("c", 1, avg=4.5),
            _park("d", 1.5, avg=4.0),
        ]
        recs = generate_recommendations(parks, [], trip)

        assert [(s.park_id, s.days, s.justification) for s in recs.suggested_park_days] == [
            ("a", 0, NO_INTEREST),
            ("b", 2, "2 days needed for 9 must-do attractions"),
            ("c", 1, "1 day for high-rated experiences (4.5★)"),
            ("d", 1.5, "1.5 days for efficient coverage"),
        ]


# ---------------------------------------------------------------------------
# Attraction lists
# ---------------------------------------------------------------------------

class TestAttractionLists:

    @pytest.fixture
    def park(self):
        return _park("magic-kingdom", 2, must_do=10, top=[
            _insight("Space Mountain", must_do=4, avg=5.0),
            _insight("Seven Dwarfs", must_do=3, avg=4.5),
            _insight("Haunted Mansion", must_do=2, avg=3.5),
            _insight("Pirates", must_do=1, avg=4.0),
            _insight("Small World", must_do=0, avg=4.0),
        ])

    def test_must_do_top_three(self, park, trip):
        recs = generate_recommendations([park], [], trip)
        assert recs.must_do_by_park[0].attractions == ["Space Mountain", "Seven Dwarfs", "Haunted Mansion"]

    def test_rope_drop_needs_two_must_dos(self, park, trip):
        recs = generate_recommendations([park], [], trip)
        assert recs.rope_drop_targets[0].attractions == ["Space Mountain", "Seven Dwarfs"]

    def test_lightning_lane_fallback_without_efficiencies(self, park, trip):
        recs = generate_recommendations([park], [], trip)
        # Haunted Mansion is rated below 4
        assert recs.lightning_lane_priorities[0].attractions == [
            "Space Mountain", "Seven Dwarfs", "Pirates",
        ]

    def test_lightning_lane_from_efficiencies(self, park, trip):
        effs = {"magic-kingdom": [
            _eff("Haunted Mansion", LightningLaneKind.MULTIPASS, 1.2, 0.5),
            _eff("Space Mountain", LightningLaneKind.MULTIPASS, 1.8, 0.9),
            _eff("Pirates", LightningLaneKind.MULTIPASS, 1.0, 2.0),
            _eff("Seven Dwarfs", LightningLaneKind.SINGLEPASS, 1.6, 0.4, STRATEGY_SINGLE_PASS),
            _eff("Tron", LightningLaneKind.SINGLEPASS, 1.3, 3.0),
            _eff("Small World", LightningLaneKind.STANDBY, 2.0, 5.0),
        ]}
        recs = generate_recommendations([park], [], trip, effs)

        assert recs.lightning_lane_priorities[0].attractions == [
            "Space Mountain (MultiPass)",
            "Haunted Mansion (MultiPass)",
            f"Seven Dwarfs (Single Pass - {STRATEGY_SINGLE_PASS})",
        ]

    def test_multi_pass_capped_at_five(self, park, trip):
        effs = {"magic-kingdom": [
            _eff(f"Ride {i}", LightningLaneKind.MULTIPASS, 1.5, float(i)) for i in range(7)
        ]}
        recs = generate_recommendations([park], [], trip, effs)
        assert recs.lightning_lane_priorities[0].attractions == [
            f"Ride {i} (MultiPass)" for i in (6, 5, 4, 3, 2)
        ]

    def test_lists_follow_park_summary_order(self, park, trip):
        other = _park("epcot", 1)
        recs = generate_recommendations([other, park], [], trip)
        assert [m.park_id for m in recs.must_do_by_park] == ["epcot", "magic-kingdom"]
        assert recs.must_do_by_park[0].attractions == []

    def test_to_dict_keys(self, park, trip):
        data = generate_recommendations([park], [], trip).to_dict()
        assert set(data) == {
            "parkPriorityOrder", "suggestedParkDays", "mustDoByPark",
            "lightningLanePriorities", "ropDropTargets", "compromiseStrategies",
        }
        assert data["ropDropTargets"][0] == {
            "parkId": "magic-kingdom", "attractions": ["Space Mountain", "Seven Dwarfs"],
        }


# ---------------------------------------------------------------------------
# Compromise strategies
# ---------------------------------------------------------------------------

class TestCompromiseStrategies:

    def test_no_conflicts(self):
        assert generate_compromise_strategies([]) == []

    def test_height_only(self):
        assert generate_compromise_strategies([_conflict(ConflictType.HEIGHT)]) == list(HEIGHT_STRATEGIES)

    def test_mixed_types_add_coordination(self):
        strategies = generate_compromise_strategies([
            _conflict(ConflictType.INTENSITY), _conflict(ConflictType.HEIGHT),
        ])
        assert strategies == (
            list(HEIGHT_STRATEGIES) + list(INTENSITY_STRATEGIES) + list(MIXED_CONFLICT_STRATEGIES)
        )

    def test_many_conflicts(self):
        conflicts = [_conflict(ConflictType.RATING, f"a{i}") for i in range(6)]
        assert generate_compromise_strategies(conflicts) == (
            list(RATING_STRATEGIES) + list(MANY_CONFLICT_STRATEGIES)
        )

    def test_five_conflicts_is_not_many(self):
        conflicts = [_conflict(ConflictType.RATING, f"a{i}") for i in range(5)]
        assert generate_compromise_strategies(conflicts) == list(RATING_STRATEGIES)

    def test_no_duplicates(self):
        conflicts = [_conflict(t) for t in ConflictType] * 3
        strategies = generate_compromise_strategies(conflicts)
        assert len(strategies) == len(set(strategies))
