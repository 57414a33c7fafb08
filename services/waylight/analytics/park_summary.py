"""
Park rating summaries — the orchestrating engine of the analytics core.

ParkRatingAnalytics runs the pipeline for a trip:

  ratings + summaries + party
      -> AttractionEfficiency per catalog attraction      (efficiency.py)
      -> ParkTimeRequirement per park                     (efficiency.py)
      -> ParkDayAllocation per park                       (allocation.py)
      -> ParkRatingSummary per park, ranked by priority

Park ranking:
  consensusScore = mean of {high 1.0, medium 0.7, low 0.4, conflict 0.0}
                   over the park's summaries (missing level counts as medium)
  priorityScore  = 0.4 * mustDo + 0.3 * avgRating + 0.2 * consensus + 0.1 * days

Each park's topAttractions lists every attraction with at least one rating
or a Lightning Lane entrance, ordered by must-do count, then average rating,
then consensus (high > medium > low > conflict).

The engine holds only its catalog and options. Every call recomputes from
its arguments, so repeated calls with the same inputs return equal results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from services.waylight.analytics.allocation import (
    NO_INTEREST,
    ParkDayAllocation,
    calculate_available_park_days,
    distribute_park_days,
)
from services.waylight.analytics.conflicts import (
    UNKNOWN_MEMBER,
    ConflictAnalysis,
    identify_conflicts,
)
from services.waylight.analytics.efficiency import (
    AttractionEfficiency,
    calculate_attraction_efficiency,
    calculate_park_time_requirement,
)
from services.waylight.analytics.options import AnalyticsOptions
from services.waylight.analytics.recommendations import (
    TripRecommendations,
    generate_recommendations,
)
from services.waylight.catalog.catalog import AttractionCatalog
from services.waylight.domain.types import (
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    ConsensusLevel,
    LightningLaneKind,
    Park,
    PreferenceType,
    TravelingPartyMember,
    Trip,
)
from services.waylight.ratings.store import RatingStore

logger = logging.getLogger(__name__)

CONSENSUS_SCORES: dict[ConsensusLevel, float] = {
    ConsensusLevel.HIGH: 1.0,
    ConsensusLevel.MEDIUM: 0.7,
    ConsensusLevel.LOW: 0.4,
    ConsensusLevel.CONFLICT: 0.0,
}

CONSENSUS_RANK: dict[ConsensusLevel, int] = {
    ConsensusLevel.HIGH: 4,
    ConsensusLevel.MEDIUM: 3,
    ConsensusLevel.LOW: 2,
    ConsensusLevel.CONFLICT: 1,
}

_MUST_DO_WEIGHT = 0.4
_RATING_WEIGHT = 0.3
_CONSENSUS_WEIGHT = 0.2
_DAYS_WEIGHT = 0.1


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MemberRating:
    member_name: str
    rating: int
    preference_type: PreferenceType

    def to_dict(self) -> dict[str, Any]:
        return {
            "memberName": self.member_name,
            "rating": self.rating,
            "preferenceType": self.preference_type.value,
        }


@dataclass(frozen=True)
class AttractionInsight:
    attraction_id: str
    attraction_name: str
    average_rating: float
    must_do_count: int
    avoid_count: int
    consensus_level: ConsensusLevel
    individual_ratings: list[MemberRating] = field(default_factory=list)
    has_conflicts: bool = False
    height_concerns: int = 0
    intensity_concerns: int = 0
    efficiency_score: float | None = None
    time_budget_minutes: float | None = None
    lightning_lane_strategy: LightningLaneKind | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attractionId": self.attraction_id,
            "attractionName": self.attraction_name,
            "averageRating": self.average_rating,
            "mustDoCount": self.must_do_count,
            "avoidCount": self.avoid_count,
            "consensusLevel": self.consensus_level.value,
            "individualRatings": [r.to_dict() for r in self.individual_ratings],
            "hasConflicts": self.has_conflicts,
            "heightConcerns": self.height_concerns,
            "intensityConcerns": self.intensity_concerns,
            "efficiencyScore": self.efficiency_score,
            "timeBudgetMinutes": self.time_budget_minutes,
            "lightningLaneStrategy": (
                self.lightning_lane_strategy.value if self.lightning_lane_strategy else None
            ),
        }


@dataclass(frozen=True)
class ParkRatingSummary:
    park_id: str
    park_name: str
    park_icon: str
    total_attractions: int
    rated_attractions: int
    average_rating: float
    must_do_count: int
    avoid_count: int
    consensus_score: float
    conflict_count: int
    top_attractions: list[AttractionInsight]
    recommended_days: float
    priority_score: float
    allocation_justification: str = NO_INTEREST

    def to_dict(self) -> dict[str, Any]:
        return {
            "parkId": self.park_id,
            "parkName": self.park_name,
            "parkIcon": self.park_icon,
            "totalAttractions": self.total_attractions,
            "ratedAttractions": self.rated_attractions,
            "averageRating": self.average_rating,
            "mustDoCount": self.must_do_count,
            "avoidCount": self.avoid_count,
            "consensusScore": self.consensus_score,
            "conflictCount": self.conflict_count,
            "topAttractions": [a.to_dict() for a in self.top_attractions],
            "recommendedDays": self.recommended_days,
            "priorityScore": self.priority_score,
            "allocationJustification": self.allocation_justification,
        }


@dataclass(frozen=True)
class TripAnalysis:
    """Everything the trip views and report exporter need from one run."""
    trip_id: str
    available_park_days: int
    park_summaries: list[ParkRatingSummary]
    conflicts: list[ConflictAnalysis]
    efficiencies: dict[str, list[AttractionEfficiency]]
    recommendations: TripRecommendations

    def to_dict(self) -> dict[str, Any]:
        return {
            "tripId": self.trip_id,
            "availableParkDays": self.available_park_days,
            "parkSummaries": [p.to_dict() for p in self.park_summaries],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "efficiencies": {
                park_id: [e.to_dict() for e in effs]
                for park_id, effs in self.efficiencies.items()
            },
            "recommendations": self.recommendations.to_dict(),
        }


def park_priority_score(
    must_do_count: float,
    average_rating: float,
    consensus_score: float,
    recommended_days: float,
) -> float:
    return (
        must_do_count * _MUST_DO_WEIGHT
        + average_rating * _RATING_WEIGHT
        + consensus_score * _CONSENSUS_WEIGHT
        + recommended_days * _DAYS_WEIGHT
    )


def consensus_score(summaries: Sequence[ActivityRatingSummary]) -> float:
    if not summaries:
        return 0.0
    total = sum(
        CONSENSUS_SCORES[s.consensus_level or ConsensusLevel.MEDIUM] for s in summaries
    )
    return total / len(summaries)


# ---------------------------------------------------------------------------
# Core engine
# ---------------------------------------------------------------------------

class ParkRatingAnalytics:
    """
    Ranks parks for a trip from the party's ratings.

    Usage:
        analytics = ParkRatingAnalytics(catalog)
        summaries = analytics.generate_park_summaries(ratings, summaries, party, trip)
        conflicts = analytics.identify_conflicts(ratings, summaries, party)
    """

    def __init__(
        self,
        catalog: AttractionCatalog,
        options: AnalyticsOptions | None = None,
    ) -> None:
        self.catalog = catalog
        self.options = options or AnalyticsOptions.from_settings()

    # -- shared helpers -----------------------------------------------------

    def _park_summaries(
        self,
        park: Park,
        summaries: Sequence[ActivityRatingSummary],
    ) -> list[ActivityRatingSummary]:
        result = []
        for summary in summaries:
            attraction = self.catalog.get_attraction(summary.attraction_id)
            if attraction is not None and attraction.park_id == park.id:
                result.append(summary)
        return result

    def _park_efficiencies(
        self,
        park: Park,
        park_summaries: Sequence[ActivityRatingSummary],
        ratings: Sequence[ActivityRating],
        party_members: Sequence[TravelingPartyMember],
    ) -> list[AttractionEfficiency]:
        by_attraction = {s.attraction_id: s for s in reversed(park_summaries)}
        return [
            calculate_attraction_efficiency(
                attraction,
                by_attraction.get(attraction.id),
                party_members,
                [r for r in ratings if r.attraction_id == attraction.id],
            )
            for attraction in self.catalog.attractions_for_park(park.id)
        ]

    def _allocate(
        self,
        ratings: Sequence[ActivityRating],
        summaries: Sequence[ActivityRatingSummary],
        party_members: Sequence[TravelingPartyMember],
        trip: Trip,
    ) -> dict[str, ParkDayAllocation]:
        requirements = [
            calculate_park_time_requirement(
                park.id,
                self._park_efficiencies(
                    park, self._park_summaries(park, summaries), ratings, party_members,
                ),
                self.options,
            )
            for park in self.catalog.parks()
        ]
        allocations = distribute_park_days(requirements, self.calculate_available_park_days(trip))
        return {a.park_id: a for a in allocations}

    def _insights(
        self,
        attractions: Sequence[Attraction],
        park_summaries: Sequence[ActivityRatingSummary],
        ratings: Sequence[ActivityRating],
        party_members: Sequence[TravelingPartyMember],
        efficiencies: Sequence[AttractionEfficiency],
    ) -> list[AttractionInsight]:
        summary_by_id = {s.attraction_id: s for s in reversed(park_summaries)}
        efficiency_by_id = {e.attraction_id: e for e in efficiencies}
        names = {m.id: m.name for m in party_members}

        insights: list[AttractionInsight] = []
        for attraction in attractions:
            attraction_ratings = [r for r in ratings if r.attraction_id == attraction.id]
            if not attraction_ratings and not attraction.is_lightning_lane_eligible:
                continue

            summary = summary_by_id.get(attraction.id)
            efficiency = efficiency_by_id.get(attraction.id)
            level = (summary.consensus_level if summary else None) or ConsensusLevel.MEDIUM
            insights.append(AttractionInsight(
                attraction_id=attraction.id,
                attraction_name=attraction.name,
                average_rating=(summary.average_rating or 0.0) if summary else 0.0,
                must_do_count=summary.must_do_count if summary else 0,
                avoid_count=summary.avoid_count if summary else 0,
                consensus_level=level,
                individual_ratings=[
                    MemberRating(
                        member_name=names.get(r.party_member_id, UNKNOWN_MEMBER),
                        rating=r.rating,
                        preference_type=r.preference_type or PreferenceType.NEUTRAL,
                    )
                    for r in attraction_ratings
                ],
                has_conflicts=summary is not None
                and summary.consensus_level == ConsensusLevel.CONFLICT,
                height_concerns=summary.height_restricted_count if summary else 0,
                intensity_concerns=summary.intensity_concerns_count if summary else 0,
                efficiency_score=efficiency.efficiency_score if efficiency else None,
                time_budget_minutes=efficiency.time_budget_minutes if efficiency else None,
                lightning_lane_strategy=efficiency.lightning_lane_strategy if efficiency else None,
            ))

        insights.sort(key=lambda i: (
            -i.must_do_count,
            -i.average_rating,
            -CONSENSUS_RANK[i.consensus_level],
        ))
        return insights

    # -- public API ---------------------------------------------------------

    def calculate_available_park_days(self, trip: Trip) -> int:
        return calculate_available_park_days(trip)

    def generate_attraction_efficiencies(
        self,
        ratings: Sequence[ActivityRating],
        summaries: Sequence[ActivityRatingSummary],
        party_members: Sequence[TravelingPartyMember],
    ) -> dict[str, list[AttractionEfficiency]]:
        """Per-park efficiency of every catalog attraction, parks in catalog order."""
        return {
            park.id: self._park_efficiencies(
                park, self._park_summaries(park, summaries), ratings, party_members,
            )
            for park in self.catalog.parks()
        }

    def generate_park_summaries(
        self,
        ratings: Sequence[ActivityRating],
        summaries: Sequence[ActivityRatingSummary],
        party_members: Sequence[TravelingPartyMember],
        trip: Trip,
    ) -> list[ParkRatingSummary]:
        allocations = self._allocate(ratings, summaries, party_members, trip)

        results: list[ParkRatingSummary] = []
        for park in self.catalog.parks():
            park_summaries = self._park_summaries(park, summaries)
            rated = len(park_summaries)
            avg_rating = (
                sum(s.average_rating or 0.0 for s in park_summaries) / rated if rated else 0.0
            )
            must_do = sum(s.must_do_count for s in park_summaries)
            avoid = sum(s.avoid_count for s in park_summaries)
            conflict_count = sum(
                1 for s in park_summaries if s.consensus_level == ConsensusLevel.CONFLICT
            )
            consensus = consensus_score(park_summaries)

            attractions = self.catalog.attractions_for_park(park.id)
            efficiencies = self._park_efficiencies(park, park_summaries, ratings, party_members)

            allocation = allocations.get(park.id)
            days = allocation.allocated_days if allocation else 0
            justification = allocation.justification if allocation else NO_INTEREST

            results.append(ParkRatingSummary(
                park_id=park.id,
                park_name=park.name,
                park_icon=park.icon,
                total_attractions=len(attractions),
                rated_attractions=rated,
                average_rating=avg_rating,
                must_do_count=must_do,
                avoid_count=avoid,
                consensus_score=consensus,
                conflict_count=conflict_count,
                top_attractions=self._insights(
                    attractions, park_summaries, ratings, party_members, efficiencies,
                ),
                recommended_days=days,
                priority_score=park_priority_score(must_do, avg_rating, consensus, days),
                allocation_justification=justification,
            ))

        results.sort(key=lambda p: p.priority_score, reverse=True)
        logger.info(
            "Park summaries for trip %s: %s",
            trip.id,
            ", ".join(f"{p.park_id}={p.priority_score:.2f}" for p in results),
        )
        return results

    def identify_conflicts(
        self,
        ratings: Sequence[ActivityRating],
        summaries: Sequence[ActivityRatingSummary],
        party_members: Sequence[TravelingPartyMember],
    ) -> list[ConflictAnalysis]:
        return identify_conflicts(self.catalog, ratings, summaries, party_members)

    def generate_recommendations(
        self,
        park_summaries: Sequence[ParkRatingSummary],
        conflicts: Sequence[ConflictAnalysis],
        trip: Trip,
        efficiencies: Mapping[str, Sequence[AttractionEfficiency]] | None = None,
    ) -> TripRecommendations:
        return generate_recommendations(park_summaries, conflicts, trip, efficiencies)

    def analyze(
        self,
        ratings: Sequence[ActivityRating],
        summaries: Sequence[ActivityRatingSummary],
        party_members: Sequence[TravelingPartyMember],
        trip: Trip,
    ) -> TripAnalysis:
        park_summaries = self.generate_park_summaries(ratings, summaries, party_members, trip)
        conflicts = self.identify_conflicts(ratings, summaries, party_members)
        efficiencies = self.generate_attraction_efficiencies(ratings, summaries, party_members)
        recommendations = self.generate_recommendations(
            park_summaries, conflicts, trip, efficiencies,
        )
        return TripAnalysis(
            trip_id=trip.id,
            available_park_days=self.calculate_available_park_days(trip),
            park_summaries=park_summaries,
            conflicts=conflicts,
            efficiencies=efficiencies,
            recommendations=recommendations,
        )

    def analyze_store(self, store: RatingStore, trip: Trip) -> TripAnalysis:
        """Run :meth:`analyze` on the ratings, summaries and party ``store`` holds for ``trip``."""
        return self.analyze(
            store.ratings_for_trip(trip.id),
            store.summaries_for_trip(trip.id),
            store.party_for_trip(trip.id),
            trip,
        )
