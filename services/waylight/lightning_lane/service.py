"""
Lightning Lane strategy engine — which paid line-skipping to buy for one park day.

Multi Pass (Genie+) candidates are the park's attractions with a Multi Pass
entrance (or the legacy Lightning Lane flag); Single Pass (Individual
Lightning Lane) candidates are those sold individually.

Scoring (groupRating is the summary average, 3.0 when unrated):

  Multi Pass   min(groupRating * 2, 10)
               + min(mustDo * 1.5, 3)   if any must-do votes
               + 1                      high/extreme intensity
               + 2                      high-demand attraction
               + 1.5                    already planned for the day
               capped at 10, kept when >= 5

  Single Pass  min(groupRating * 1.8, 10)
               + min(mustDo * 2, 4)     if any must-do votes
               + 2                      always (premium, high demand)
               + 2                      already planned for the day
               capped at 10, kept when >= 7

Purchase decision: Multi Pass is worth buying when at least 3 of these hold:
  - at least 3 recommendations at priority >= 8
  - the top 3 recommendations save >= 120 minutes
  - the party's total Multi Pass cost is <= $35 per person
  - at least 4 recommendations

Determinism guarantee:
  Lookups come from the injected tables and the catalog; no clock, no
  randomness. The Multi Pass output list is trimmed to 8 entries, but the
  purchase decision and savings use the full ranked list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from services.waylight.catalog.catalog import AttractionCatalog
from services.waylight.domain.numbers import round_half_up, round_to_step
from services.waylight.domain.types import (
    ActivityRatingSummary,
    Attraction,
    ConfidenceLevel,
    TripDay,
)
from services.waylight.lightning_lane.tables import DEFAULT_TABLES, LightningLaneTables

logger = logging.getLogger(__name__)

_MAX_PRIORITY = 10.0

_MULTI_RATING_FACTOR = 2.0
_MULTI_MUST_DO_FACTOR = 1.5
_MULTI_MUST_DO_CAP = 3.0
_MULTI_INTENSITY_BONUS = 1.0
_MULTI_HIGH_DEMAND_BONUS = 2.0
_MULTI_PLANNED_BONUS = 1.5
_MULTI_MIN_PRIORITY = 5.0
_MULTI_OUTPUT_LIMIT = 8

_SINGLE_RATING_FACTOR = 1.8
_SINGLE_MUST_DO_FACTOR = 2.0
_SINGLE_MUST_DO_CAP = 4.0
_SINGLE_DEMAND_BONUS = 2.0
_SINGLE_PLANNED_BONUS = 2.0
_SINGLE_MIN_PRIORITY = 7.0

_MULTI_SAVINGS_SHARE = 0.75
_SINGLE_SAVINGS_SHARE = 0.9

# Purchase decision
_HIGH_PRIORITY = 8.0
_USABLE_PER_DAY = 3
_MIN_SAVINGS_MINUTES = 120
_MAX_COST_PER_PERSON = 35
_MIN_RECOMMENDATIONS = 4
_REQUIRED_CONDITIONS = 3

_BUDGET_PER_PERSON = 40
_HIGHLY_RATED = 4.5

# Confidence bands on total recommendation count
_LOW_CONFIDENCE_BELOW = 3
_HIGH_CONFIDENCE_ABOVE = 6


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LightningLaneRecommendation:
    attraction_id: str
    attraction_name: str
    priority: float
    reasoning: list[str]
    estimated_savings: int
    group_rating: float
    sells_out_by: str | None = None
    cost: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "attractionId": self.attraction_id,
            "attractionName": self.attraction_name,
            "priority": self.priority,
            "reasoning": list(self.reasoning),
            "estimatedSavings": self.estimated_savings,
            "groupRating": self.group_rating,
            "sellsOutBy": self.sells_out_by,
        }
        if self.cost is not None:
            d["cost"] = self.cost
        return d


@dataclass(frozen=True)
class CostAnalysis:
    genie_plus_cost: int = 0
    individual_ll_cost: int = 0
    total_cost: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "geniePlusCost": self.genie_plus_cost,
            "individualLLCost": self.individual_ll_cost,
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class TimeSavings:
    estimated_minutes: int = 0
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        return {
            "estimatedMinutes": self.estimated_minutes,
            "confidenceLevel": self.confidence_level.value,
        }


@dataclass(frozen=True)
class LightningLaneStrategy:
    should_purchase_genie_plus: bool
    reasoning: list[str] = field(default_factory=list)
    cost_analysis: CostAnalysis = field(default_factory=CostAnalysis)
    time_savings: TimeSavings = field(default_factory=TimeSavings)
    multi_pass_recommendations: list[LightningLaneRecommendation] = field(default_factory=list)
    individual_ll_recommendations: list[LightningLaneRecommendation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # Key spelling matches what the web client already reads.
        return {
            "shouldPurchaseGeneiePlus": self.should_purchase_genie_plus,
            "reasoning": list(self.reasoning),
            "costAnalysis": self.cost_analysis.to_dict(),
            "timeSavings": self.time_savings.to_dict(),
            "multiPassRecommendations": [r.to_dict() for r in self.multi_pass_recommendations],
            "individualLLRecommendations": [
                r.to_dict() for r in self.individual_ll_recommendations
            ],
        }


# ---------------------------------------------------------------------------
# Core engine
# ---------------------------------------------------------------------------

class LightningLaneService:
    """
    Builds a Lightning Lane plan for a single trip day.

    Usage:
        service = LightningLaneService(catalog)
        strategy = service.generate_strategy(trip_day, rating_summaries, group_size=4)
    """

    def __init__(
        self,
        catalog: AttractionCatalog,
        tables: LightningLaneTables = DEFAULT_TABLES,
        default_group_rating: float = 3.0,
    ) -> None:
        self.catalog = catalog
        self.tables = tables
        self.default_group_rating = default_group_rating

    # -- scoring ------------------------------------------------------------

    def _group_rating(self, summary: ActivityRatingSummary | None) -> float:
        if summary is None or not summary.average_rating:
            return self.default_group_rating
        return summary.average_rating

    def _attraction_reasoning(
        self,
        attraction: Attraction,
        summary: ActivityRatingSummary | None,
        individual: bool,
    ) -> list[str]:
        reasons: list[str] = []
        if summary is not None and summary.average_rating and summary.average_rating >= _HIGHLY_RATED:
            reasons.append(f"Highly rated by your group ({summary.average_rating:.1f} stars)")
        if summary is not None and summary.must_do_count > 0:
            n = summary.must_do_count
            reasons.append(f"{n} group member{'s' if n > 1 else ''} marked as must-do")
        if attraction.is_intense:
            reasons.append("High-intensity attraction typically has long waits")
        if self.tables.is_high_demand(attraction.id):
            reasons.append("Popular attraction with consistently long wait times")
        if individual:
            reasons.append("Premium attraction with limited Lightning Lane availability")
        return reasons

    def _estimated_savings(self, attraction_id: str, individual: bool) -> int:
        share = _SINGLE_SAVINGS_SHARE if individual else _MULTI_SAVINGS_SHARE
        return round_half_up(self.tables.base_wait(attraction_id) * share)

    def _multi_pass_recommendations(
        self,
        attractions: Sequence[Attraction],
        summaries: dict[str, ActivityRatingSummary],
        trip_day: TripDay,
    ) -> list[LightningLaneRecommendation]:
        recs: list[LightningLaneRecommendation] = []
        for attraction in attractions:
            summary = summaries.get(attraction.id)
            group_rating = self._group_rating(summary)
            must_do = summary.must_do_count if summary else 0

            priority = min(group_rating * _MULTI_RATING_FACTOR, _MAX_PRIORITY)
            if must_do > 0:
                priority += min(must_do * _MULTI_MUST_DO_FACTOR, _MULTI_MUST_DO_CAP)
            if attraction.is_intense:
                priority += _MULTI_INTENSITY_BONUS
            if self.tables.is_high_demand(attraction.id):
                priority += _MULTI_HIGH_DEMAND_BONUS
            if trip_day.plans_attraction(attraction.id):
                priority += _MULTI_PLANNED_BONUS
            priority = round_to_step(min(priority, _MAX_PRIORITY), 0.1)

            logger.debug("Multi Pass %s: priority=%.1f", attraction.id, priority)
            if priority < _MULTI_MIN_PRIORITY:
                continue
            recs.append(LightningLaneRecommendation(
                attraction_id=attraction.id,
                attraction_name=attraction.name,
                priority=priority,
                reasoning=self._attraction_reasoning(attraction, summary, individual=False),
                estimated_savings=self._estimated_savings(attraction.id, individual=False),
                group_rating=group_rating,
                sells_out_by=self.tables.sell_out_time(attraction.id),
            ))

        recs.sort(key=lambda r: r.priority, reverse=True)
        return recs

    def _individual_recommendations(
        self,
        attractions: Sequence[Attraction],
        summaries: dict[str, ActivityRatingSummary],
        trip_day: TripDay,
    ) -> list[LightningLaneRecommendation]:
        recs: list[LightningLaneRecommendation] = []
        for attraction in attractions:
            summary = summaries.get(attraction.id)
            group_rating = self._group_rating(summary)
            must_do = summary.must_do_count if summary else 0

            priority = min(group_rating * _SINGLE_RATING_FACTOR, _MAX_PRIORITY)
            if must_do > 0:
                priority += min(must_do * _SINGLE_MUST_DO_FACTOR, _SINGLE_MUST_DO_CAP)
            priority += _SINGLE_DEMAND_BONUS
            if trip_day.plans_attraction(attraction.id):
                priority += _SINGLE_PLANNED_BONUS
            priority = round_to_step(min(priority, _MAX_PRIORITY), 0.1)

            logger.debug("Single Pass %s: priority=%.1f", attraction.id, priority)
            if priority < _SINGLE_MIN_PRIORITY:
                continue
            recs.append(LightningLaneRecommendation(
                attraction_id=attraction.id,
                attraction_name=attraction.name,
                priority=priority,
                reasoning=self._attraction_reasoning(attraction, summary, individual=True),
                estimated_savings=self._estimated_savings(attraction.id, individual=True),
                group_rating=group_rating,
                sells_out_by=self.tables.sell_out_time(attraction.id),
                cost=self.tables.individual_cost(attraction.id),
            ))

        recs.sort(key=lambda r: r.priority, reverse=True)
        return recs

    # -- decision -----------------------------------------------------------

    def should_purchase_multi_pass(
        self,
        recommendations: Sequence[LightningLaneRecommendation],
        group_size: int,
        trip_day: TripDay,
    ) -> bool:
        high_priority = sum(1 for r in recommendations if r.priority >= _HIGH_PRIORITY)
        top_savings = sum(r.estimated_savings for r in recommendations[:_USABLE_PER_DAY])
        total_cost = self.tables.multi_pass_price(trip_day.date) * group_size

        conditions = [
            high_priority >= 3,
            top_savings >= _MIN_SAVINGS_MINUTES,
            total_cost <= group_size * _MAX_COST_PER_PERSON,
            len(recommendations) >= _MIN_RECOMMENDATIONS,
        ]
        met = sum(conditions)
        logger.debug(
            "Multi Pass conditions for %s: high_priority=%d savings=%d cost=%d recs=%d -> %d/4",
            trip_day.date, high_priority, top_savings, total_cost, len(recommendations), met,
        )
        return met >= _REQUIRED_CONDITIONS

    def _costs(
        self,
        purchase: bool,
        individual: Sequence[LightningLaneRecommendation],
        group_size: int,
        trip_day: TripDay,
    ) -> CostAnalysis:
        genie_plus = self.tables.multi_pass_price(trip_day.date) * group_size if purchase else 0
        individual_cost = sum(r.cost or 0 for r in individual) * group_size
        return CostAnalysis(
            genie_plus_cost=genie_plus,
            individual_ll_cost=individual_cost,
            total_cost=genie_plus + individual_cost,
        )

    def _time_savings(
        self,
        multi: Sequence[LightningLaneRecommendation],
        individual: Sequence[LightningLaneRecommendation],
        purchase: bool,
    ) -> TimeSavings:
        minutes = 0
        if purchase:
            minutes += sum(r.estimated_savings for r in multi[:_USABLE_PER_DAY])
        minutes += sum(r.estimated_savings for r in individual)

        total_recs = len(multi) + len(individual)
        if total_recs < _LOW_CONFIDENCE_BELOW:
            confidence = ConfidenceLevel.LOW
        elif total_recs > _HIGH_CONFIDENCE_ABOVE:
            confidence = ConfidenceLevel.HIGH
        else:
            confidence = ConfidenceLevel.MEDIUM
        return TimeSavings(estimated_minutes=round_half_up(minutes), confidence_level=confidence)

    def _reasoning(
        self,
        purchase: bool,
        multi: Sequence[LightningLaneRecommendation],
        individual: Sequence[LightningLaneRecommendation],
        costs: CostAnalysis,
        savings: TimeSavings,
        group_size: int,
    ) -> list[str]:
        reasoning: list[str] = []
        minutes = savings.estimated_minutes

        if purchase:
            high_priority = sum(1 for r in multi if r.priority >= _HIGH_PRIORITY)
            hours = round_to_step(minutes / 60, 0.1)
            reasoning.append(
                f"Your group has {high_priority} highly-rated attractions that offer Genie+"
            )
            reasoning.append(f"Estimated time savings: {minutes} minutes ({hours:g} hours)")
            if minutes > 0:
                per_hour = round_half_up(costs.genie_plus_cost / (minutes / 60))
                reasoning.append(f"Cost per hour saved: ${per_hour}")
            if group_size > 2:
                reasoning.append(
                    f"With {group_size} people, the time savings benefit justifies the group cost"
                )
        else:
            reasoning.append("Limited high-priority Genie+ attractions for your group")
            reasoning.append(
                "Better value using rope drop and Individual Lightning Lanes for must-do attractions"
            )
            if costs.total_cost > group_size * _BUDGET_PER_PERSON:
                reasoning.append(
                    f"Total projected cost (${costs.total_cost}) exceeds recommended budget"
                )

        if individual:
            n = len(individual)
            reasoning.append(
                f"{n} premium attraction{'s' if n > 1 else ''} worth considering "
                "for Individual Lightning Lane"
            )
        return reasoning

    # -- public API ---------------------------------------------------------

    def generate_strategy(
        self,
        trip_day: TripDay,
        activity_ratings: Sequence[ActivityRatingSummary],
        group_size: int,
    ) -> LightningLaneStrategy:
        group_size = max(group_size, 1)
        park_attractions = (
            self.catalog.attractions_for_park(trip_day.park_id) if trip_day.park_id else []
        )
        multi_candidates = [a for a in park_attractions if a.has_multi_pass or a.lightning_lane]
        single_candidates = [a for a in park_attractions if a.has_single_pass]

        summaries: dict[str, ActivityRatingSummary] = {}
        for summary in activity_ratings:
            summaries.setdefault(summary.attraction_id, summary)

        multi = self._multi_pass_recommendations(multi_candidates, summaries, trip_day)
        individual = self._individual_recommendations(single_candidates, summaries, trip_day)

        purchase = self.should_purchase_multi_pass(multi, group_size, trip_day)
        costs = self._costs(purchase, individual, group_size, trip_day)
        savings = self._time_savings(multi, individual, purchase)
        reasoning = self._reasoning(purchase, multi, individual, costs, savings, group_size)

        logger.info(
            "Lightning Lane strategy for %s on %s: purchase=%s multi=%d individual=%d total=$%d",
            trip_day.park_id, trip_day.date, purchase, len(multi), len(individual),
            costs.total_cost,
        )

        return LightningLaneStrategy(
            should_purchase_genie_plus=purchase,
            reasoning=reasoning,
            cost_analysis=costs,
            time_savings=savings,
            multi_pass_recommendations=multi[:_MULTI_OUTPUT_LIMIT],
            individual_ll_recommendations=individual,
        )
