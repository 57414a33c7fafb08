"""
Attraction efficiency and park time requirements.

Per attraction:
  baseDifficulty     = 1 + min(duration/60, 2) + 0.5 (Lightning Lane eligible)
                       + intensity bonus {low 0, moderate .2, high .4, extreme .6}
  crowdImpact        = 1 + 0.3 (MultiPass) + 0.5 (Single Pass)
  userPriorityWeight = 0.5 with no summary, else
                       clamp(avg/5 + mustDo/party - avoid/party, 0.1, 2.0)
  timeBudgetMinutes  = duration + 10 (multipass) | + 15 (singlepass)
                       | + crowdImpact * 45 (standby)
  efficiencyScore    = weight * 100 / (timeBudget * baseDifficulty * crowdImpact)

Per park, only attractions the party actually wants (weight above the
cutoff, 0.7 by default) count:
  minDays       = max(1, ceil(sum(timeBudget) / (480 * 0.75)))
  priorityScore = sum(weight * efficiencyScore)
  efficiency    = mean efficiencyScore

Party size denominators are floored at 1, so an empty party never divides
by zero.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

from services.waylight.analytics.options import DEFAULT_OPTIONS, AnalyticsOptions
from services.waylight.domain.types import (
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    IntensityLevel,
    LightningLaneKind,
    TravelingPartyMember,
)

logger = logging.getLogger(__name__)

_INTENSITY_BONUS: dict[IntensityLevel, float] = {
    IntensityLevel.LOW: 0.0,
    IntensityLevel.MODERATE: 0.2,
    IntensityLevel.HIGH: 0.4,
    IntensityLevel.EXTREME: 0.6,
}

_MAX_DURATION_HOURS = 2.0
_LIGHTNING_LANE_DIFFICULTY = 0.5
_MULTI_PASS_CROWD = 0.3
_SINGLE_PASS_CROWD = 0.5

_NEUTRAL_WEIGHT = 0.5
_MIN_WEIGHT = 0.1
_MAX_WEIGHT = 2.0

_MULTI_PASS_WAIT = 10
_SINGLE_PASS_WAIT = 15
_STANDBY_BASE_WAIT = 45

# Strategy text thresholds
_MULTI_PASS_PRIORITY = 1.0
_SINGLE_PASS_PRIORITY = 1.5
_LONG_VISIT_MINUTES = 90

STRATEGY_MULTI_PASS = "High priority - use MultiPass"
STRATEGY_SINGLE_PASS = "Consider Single Pass if budget allows"
STRATEGY_LOW_CROWD = "Visit during low crowd times"
STRATEGY_STANDBY = "Experience during standby"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AttractionEfficiency:
    attraction_id: str
    attraction_name: str
    park_id: str
    efficiency_score: float
    time_budget_minutes: float
    base_difficulty: float
    crowd_impact: float
    lightning_lane_strategy: LightningLaneKind
    user_priority_weight: float
    recommended_strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "attractionId": self.attraction_id,
            "attractionName": self.attraction_name,
            "parkId": self.park_id,
            "efficiencyScore": self.efficiency_score,
            "timeBudgetMinutes": self.time_budget_minutes,
            "baseDifficulty": self.base_difficulty,
            "crowdImpact": self.crowd_impact,
            "lightningLaneStrategy": self.lightning_lane_strategy.value,
            "userPriorityWeight": self.user_priority_weight,
            "recommendedStrategy": self.recommended_strategy,
        }


@dataclass(frozen=True)
class ParkTimeRequirement:
    park_id: str
    min_days: int = 0
    priority_score: float = 0.0
    efficiency: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "parkId": self.park_id,
            "minDays": self.min_days,
            "priorityScore": self.priority_score,
            "efficiency": self.efficiency,
        }


# ---------------------------------------------------------------------------
# Calculations
# ---------------------------------------------------------------------------

def user_priority_weight(
    summary: ActivityRatingSummary | None,
    party_size: int,
) -> float:
    if summary is None:
        return _NEUTRAL_WEIGHT
    denominator = max(party_size, 1)
    avg_rating = summary.average_rating or 0.0
    weight = (
        avg_rating / 5.0
        + summary.must_do_count / denominator
        - summary.avoid_count / denominator
    )
    return max(_MIN_WEIGHT, min(_MAX_WEIGHT, weight))


def select_strategy(attraction: Attraction) -> LightningLaneKind:
    if attraction.has_multi_pass:
        return LightningLaneKind.MULTIPASS
    if attraction.has_single_pass:
        return LightningLaneKind.SINGLEPASS
    return LightningLaneKind.STANDBY


def _recommended_strategy(
    strategy: LightningLaneKind,
    weight: float,
    time_budget: float,
) -> str:
    if strategy == LightningLaneKind.MULTIPASS and weight > _MULTI_PASS_PRIORITY:
        return STRATEGY_MULTI_PASS
    if strategy == LightningLaneKind.SINGLEPASS and weight > _SINGLE_PASS_PRIORITY:
        return STRATEGY_SINGLE_PASS
    if time_budget > _LONG_VISIT_MINUTES:
        return STRATEGY_LOW_CROWD
    return STRATEGY_STANDBY


def calculate_attraction_efficiency(
    attraction: Attraction,
    summary: ActivityRatingSummary | None,
    party_members: Sequence[TravelingPartyMember],
    ratings: Sequence[ActivityRating] = (),
) -> AttractionEfficiency:
    """
    Efficiency of one attraction for this party.

    ``ratings`` are the raw member ratings for the attraction; the score is
    driven by the summary, the raw ratings are accepted so callers can pass
    the same inputs everywhere.
    """
    duration = attraction.duration

    base_difficulty = 1.0 + min(duration / 60, _MAX_DURATION_HOURS)
    if attraction.is_lightning_lane_eligible:
        base_difficulty += _LIGHTNING_LANE_DIFFICULTY
    base_difficulty += _INTENSITY_BONUS.get(attraction.intensity, 0.0)

    crowd_impact = 1.0
    if attraction.has_multi_pass:
        crowd_impact += _MULTI_PASS_CROWD
    if attraction.has_single_pass:
        crowd_impact += _SINGLE_PASS_CROWD

    weight = user_priority_weight(summary, len(party_members))

    strategy = select_strategy(attraction)
    if strategy == LightningLaneKind.MULTIPASS:
        time_budget = duration + _MULTI_PASS_WAIT
    elif strategy == LightningLaneKind.SINGLEPASS:
        time_budget = duration + _SINGLE_PASS_WAIT
    else:
        time_budget = duration + crowd_impact * _STANDBY_BASE_WAIT

    efficiency_score = (weight * 100) / (time_budget * base_difficulty * crowd_impact)

    logger.debug(
        "Efficiency %s: weight=%.2f budget=%.1f difficulty=%.2f crowd=%.2f score=%.4f",
        attraction.id, weight, time_budget, base_difficulty, crowd_impact, efficiency_score,
    )

    return AttractionEfficiency(
        attraction_id=attraction.id,
        attraction_name=attraction.name,
        park_id=attraction.park_id,
        efficiency_score=efficiency_score,
        time_budget_minutes=time_budget,
        base_difficulty=base_difficulty,
        crowd_impact=crowd_impact,
        lightning_lane_strategy=strategy,
        user_priority_weight=weight,
        recommended_strategy=_recommended_strategy(strategy, weight, time_budget),
    )


def calculate_park_time_requirement(
    park_id: str,
    efficiencies: Sequence[AttractionEfficiency],
    options: AnalyticsOptions = DEFAULT_OPTIONS,
) -> ParkTimeRequirement:
    wanted = [e for e in efficiencies if e.user_priority_weight > options.priority_weight_cutoff]
    if not wanted:
        return ParkTimeRequirement(park_id=park_id)

    total_minutes = sum(e.time_budget_minutes for e in wanted)
    min_days = max(1, math.ceil(total_minutes / options.effective_minutes_per_day))
    priority_score = sum(e.user_priority_weight * e.efficiency_score for e in wanted)
    mean_efficiency = sum(e.efficiency_score for e in wanted) / len(wanted)

    return ParkTimeRequirement(
        park_id=park_id,
        min_days=min_days,
        priority_score=priority_score,
        efficiency=mean_efficiency,
    )
