"""
Trip recommendations from park summaries and conflicts.

Pure transformation: the day allocation already carried by the park
summaries is reused as-is, nothing is recomputed. Every list keeps the
order of the park summaries it was built from.

Lightning Lane priorities prefer per-attraction efficiency data when the
caller supplies it for a park:
  MultiPass    weight > 1.0, top 5 by efficiency   "Name (MultiPass)"
  Single Pass  weight > 1.3, top 2 by efficiency   "Name (Single Pass - <strategy>)"
Without efficiency data the top 3 must-do attractions rated 4+ are used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from services.waylight.analytics.conflicts import ConflictAnalysis
from services.waylight.analytics.efficiency import AttractionEfficiency
from services.waylight.domain.numbers import format_days
from services.waylight.domain.types import ConflictType, LightningLaneKind, Trip

if TYPE_CHECKING:
    from services.waylight.analytics.park_summary import ParkRatingSummary

logger = logging.getLogger(__name__)

_MUST_DO_LIMIT = 3
_MULTI_PASS_LIMIT = 5
_SINGLE_PASS_LIMIT = 2
_FALLBACK_LL_LIMIT = 3
_ROPE_DROP_LIMIT = 2

_MULTI_PASS_WEIGHT = 1.0
_SINGLE_PASS_WEIGHT = 1.3
_FALLBACK_MIN_RATING = 4
_ROPE_DROP_MIN_MUST_DO = 2

_MANY_MUST_DOS = 8
_HIGH_RATED_PARK = 4
_MANY_CONFLICTS = 5

NO_INTEREST = "No significant interest detected"

HEIGHT_STRATEGIES = (
    "Use Disney's Child Swap service for height-restricted attractions",
    "Plan companion activities nearby for those who can't ride (playgrounds, shops, character meets)",
)
INTENSITY_STRATEGIES = (
    "Split the party: thrill-seekers do intense rides while others enjoy milder attractions",
    "Use Single Rider lines for solo riders to experience attractions faster",
    "Plan alternative activities for family members who prefer milder experiences",
)
RATING_STRATEGIES = (
    "Party split strategy: Those interested experience the attraction while others explore nearby",
    "Try disputed attractions during less busy times to minimize time investment",
    "Use Single Rider lines to reduce wait times for controversial attractions",
    "Designate 'choice time' where individuals can pursue personal must-dos",
)
MANY_CONFLICT_STRATEGIES = (
    "Focus morning energy on high-consensus attractions for group activities",
    "Plan afternoon individual choice time where family members can split up",
    "Use Mobile Order to stagger meal times and allow for flexible party splitting",
)
MIXED_CONFLICT_STRATEGIES = (
    "Establish meeting points and times for party regrouping throughout the day",
    "Use Disney's messaging features or family group chats to coordinate split activities",
    "Plan 'together time' for shared experiences that everyone enjoys",
)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParkPriority:
    park_id: str
    park_name: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"parkId": self.park_id, "parkName": self.park_name, "reason": self.reason}


@dataclass(frozen=True)
class SuggestedParkDays:
    park_id: str
    days: float
    justification: str

    def to_dict(self) -> dict[str, Any]:
        return {"parkId": self.park_id, "days": self.days, "justification": self.justification}


@dataclass(frozen=True)
class ParkAttractionList:
    park_id: str
    attractions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"parkId": self.park_id, "attractions": list(self.attractions)}


@dataclass(frozen=True)
class TripRecommendations:
    park_priority_order: list[ParkPriority] = field(default_factory=list)
    suggested_park_days: list[SuggestedParkDays] = field(default_factory=list)
    must_do_by_park: list[ParkAttractionList] = field(default_factory=list)
    lightning_lane_priorities: list[ParkAttractionList] = field(default_factory=list)
    rope_drop_targets: list[ParkAttractionList] = field(default_factory=list)
    compromise_strategies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # "ropDropTargets" is the key the web client reads.
        return {
            "parkPriorityOrder": [p.to_dict() for p in self.park_priority_order],
            "suggestedParkDays": [s.to_dict() for s in self.suggested_park_days],
            "mustDoByPark": [m.to_dict() for m in self.must_do_by_park],
            "lightningLanePriorities": [ll.to_dict() for ll in self.lightning_lane_priorities],
            "ropDropTargets": [r.to_dict() for r in self.rope_drop_targets],
            "compromiseStrategies": list(self.compromise_strategies),
        }


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _park_day_justification(park: ParkRatingSummary) -> str:
    if park.recommended_days == 0:
        return NO_INTEREST
    days = format_days(park.recommended_days)
    if park.must_do_count > _MANY_MUST_DOS:
        return f"{days} needed for {park.must_do_count} must-do attractions"
    if park.average_rating > _HIGH_RATED_PARK:
        return f"{days} for high-rated experiences ({park.average_rating:.1f}★)"
    return f"{days} for efficient coverage"


def _lightning_lane_picks(
    park: ParkRatingSummary,
    efficiencies: Sequence[AttractionEfficiency],
) -> list[str]:
    if not efficiencies:
        return [
            a.attraction_name
            for a in park.top_attractions
            if a.must_do_count > 0 and a.average_rating >= _FALLBACK_MIN_RATING
        ][:_FALLBACK_LL_LIMIT]

    by_efficiency = sorted(efficiencies, key=lambda e: e.efficiency_score, reverse=True)
    multi = [
        e for e in by_efficiency
        if e.lightning_lane_strategy == LightningLaneKind.MULTIPASS
        and e.user_priority_weight > _MULTI_PASS_WEIGHT
    ][:_MULTI_PASS_LIMIT]
    single = [
        e for e in by_efficiency
        if e.lightning_lane_strategy == LightningLaneKind.SINGLEPASS
        and e.user_priority_weight > _SINGLE_PASS_WEIGHT
    ][:_SINGLE_PASS_LIMIT]
    return (
        [f"{e.attraction_name} (MultiPass)" for e in multi]
        + [f"{e.attraction_name} (Single Pass - {e.recommended_strategy})" for e in single]
    )


def generate_compromise_strategies(conflicts: Sequence[ConflictAnalysis]) -> list[str]:
    kinds = {c.conflict_type for c in conflicts}
    strategies: list[str] = []

    if ConflictType.HEIGHT in kinds:
        strategies.extend(HEIGHT_STRATEGIES)
    if ConflictType.INTENSITY in kinds:
        strategies.extend(INTENSITY_STRATEGIES)
    if ConflictType.RATING in kinds:
        strategies.extend(RATING_STRATEGIES)
    if len(conflicts) > _MANY_CONFLICTS:
        strategies.extend(MANY_CONFLICT_STRATEGIES)
    if len(kinds) > 1:
        strategies.extend(MIXED_CONFLICT_STRATEGIES)

    return list(dict.fromkeys(strategies))


def generate_recommendations(
    park_summaries: Sequence[ParkRatingSummary],
    conflicts: Sequence[ConflictAnalysis],
    trip: Trip,
    efficiencies: Mapping[str, Sequence[AttractionEfficiency]] | None = None,
) -> TripRecommendations:
    efficiencies = efficiencies or {}

    scheduled = sorted(
        (p for p in park_summaries if p.recommended_days > 0),
        key=lambda p: (-p.recommended_days, -p.must_do_count),
    )
    park_priority_order = [
        ParkPriority(
            park_id=p.park_id,
            park_name=p.park_name,
            reason=(
                f"{format_days(p.recommended_days)} allocated - "
                f"{p.must_do_count} must-do attractions"
            ),
        )
        for p in scheduled
    ]

    recommendations = TripRecommendations(
        park_priority_order=park_priority_order,
        suggested_park_days=[
            SuggestedParkDays(p.park_id, p.recommended_days, _park_day_justification(p))
            for p in park_summaries
        ],
        must_do_by_park=[
            ParkAttractionList(p.park_id, [
                a.attraction_name for a in p.top_attractions if a.must_do_count > 0
            ][:_MUST_DO_LIMIT])
            for p in park_summaries
        ],
        lightning_lane_priorities=[
            ParkAttractionList(p.park_id, _lightning_lane_picks(p, efficiencies.get(p.park_id, ())))
            for p in park_summaries
        ],
        rope_drop_targets=[
            ParkAttractionList(p.park_id, [
                a.attraction_name
                for a in p.top_attractions
                if a.must_do_count >= _ROPE_DROP_MIN_MUST_DO
            ][:_ROPE_DROP_LIMIT])
            for p in park_summaries
        ],
        compromise_strategies=generate_compromise_strategies(conflicts),
    )

    logger.info(
        "Recommendations for trip %s: %d parks scheduled, %d compromise strategies",
        trip.id, len(park_priority_order), len(recommendations.compromise_strategies),
    )
    return recommendations
