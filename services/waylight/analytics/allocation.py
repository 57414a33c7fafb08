"""
Park day allocation — spreads the trip's park days across parks.

Greedy, single pass, no backtracking:

  1. Parks with priorityScore 0 get nothing.
  2. If there are more interested parks than days, each interested park
     gets an even share rounded to the nearest half day (at least 0.5).
  3. Otherwise every interested park gets a 1 day baseline, then each
     remaining day goes to the park with the largest
         benefit = priorityScore * efficiency * (minDays / max(allocated, 1))
     Only a strictly larger benefit replaces the current best, so ties stay
     with the park listed first. Allocation stops early when no park has a
     positive benefit.

The heuristic is deliberately not an optimizer; callers and tests depend on
its exact choices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from services.waylight.analytics.efficiency import ParkTimeRequirement
from services.waylight.domain.numbers import format_days, round_to_step
from services.waylight.domain.types import DayType, Trip
from services.waylight.trips.day_types import detect_day_type, trip_length_days

logger = logging.getLogger(__name__)

NO_INTEREST = "No significant interest detected"
LIMITED_TIME = "Limited time - consider park hopper"
BASELINE = "1 day baseline"

# Arrival and departure days are not park days.
_TRAVEL_DAYS = 2

_PARK_DAY_TYPES = (DayType.PARK_DAY, DayType.PARK_HOPPER)


@dataclass
class ParkDayAllocation:
    park_id: str
    allocated_days: float
    justification: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "parkId": self.park_id,
            "allocatedDays": self.allocated_days,
            "justification": self.justification,
        }


def calculate_available_park_days(trip: Trip) -> int:
    """
    Number of days in ``trip`` that can be spent in a park.

    Without planned days: trip length minus arrival and departure. With
    planned days: the days whose explicit or detected type is park-day or
    park-hopper. Never less than 1.
    """
    if not trip.days:
        return max(1, trip_length_days(trip) - _TRAVEL_DAYS)

    park_days = sum(
        1
        for index, day in enumerate(trip.days)
        if detect_day_type(day, trip, index) in _PARK_DAY_TYPES
    )
    return max(1, park_days)


def _optimized(days: float) -> str:
    return f"{format_days(days)} optimized for priority attractions"


def distribute_park_days(
    requirements: Sequence[ParkTimeRequirement],
    available_park_days: int,
) -> list[ParkDayAllocation]:
    """One allocation per requirement, in the order given."""
    interested = {r.park_id for r in requirements if r.priority_score > 0}

    if not interested:
        logger.info("No park shows significant interest; allocating 0 days everywhere")
        return [ParkDayAllocation(r.park_id, 0, NO_INTEREST) for r in requirements]

    if len(interested) > available_park_days:
        share = max(0.5, round_to_step(available_park_days / len(interested), 0.5))
        logger.info(
            "Only %d park days for %d interested parks; %.1f days each",
            available_park_days, len(interested), share,
        )
        return [
            ParkDayAllocation(r.park_id, share, LIMITED_TIME)
            if r.park_id in interested
            else ParkDayAllocation(r.park_id, 0, NO_INTEREST)
            for r in requirements
        ]

    allocations = [
        ParkDayAllocation(r.park_id, 1, BASELINE)
        if r.park_id in interested
        else ParkDayAllocation(r.park_id, 0, NO_INTEREST)
        for r in requirements
    ]

    remaining = available_park_days - len(interested)
    while remaining > 0:
        best_index: int | None = None
        best_benefit = 0.0
        for index, (requirement, allocation) in enumerate(zip(requirements, allocations)):
            if requirement.priority_score == 0:
                continue
            under_allocation = requirement.min_days / max(allocation.allocated_days, 1)
            benefit = requirement.priority_score * requirement.efficiency * under_allocation
            if benefit > best_benefit:
                best_benefit = benefit
                best_index = index

        if best_index is None:
            logger.debug("No park benefits from another day; %d day(s) left unallocated", remaining)
            break

        winner = allocations[best_index]
        winner.allocated_days += 1
        winner.justification = _optimized(winner.allocated_days)
        remaining -= 1
        logger.debug(
            "Extra day to %s (benefit=%.4f, now %s)",
            winner.park_id, best_benefit, winner.allocated_days,
        )

    logger.info(
        "Park allocation complete: %s",
        ", ".join(f"{a.park_id}={a.allocated_days}" for a in allocations),
    )
    return allocations
