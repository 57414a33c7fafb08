"""
Trip day classification.

Days that carry an explicit day_type keep it. Other days are inferred from
their position in the trip and their itinerary contents, checked in order:

  1. first day                                  -> check-in
  2. last day, or second-to-last day with
     departure indicators                       -> check-out
  3. more than one park referenced              -> park-hopper
  4. anything at Disney Springs                 -> disney-springs
  5. parties, tours, special events             -> special-event
  6. no park, few relaxing (or no) items        -> rest-day
  7. a park selected                            -> park-day
  8. otherwise                                  -> rest-day

Only park-day and park-hopper days count as available park days.
"""

from __future__ import annotations

import logging

from services.waylight.domain.types import DayType, ItineraryItem, Trip, TripDay

logger = logging.getLogger(__name__)

_DEPARTURE_WORDS = ("departure", "flight", "checkout", "check out", "airport")
_SPECIAL_EVENT_WORDS = ("party", "tour")
_RELAXING_WORDS = ("pool", "spa", "rest", "relax")

# Park names looked for in item notes when spotting park-hopper days.
_PARK_NOTE_NAMES: dict[str, str] = {
    "magic kingdom": "magic-kingdom",
    "epcot": "epcot",
    "hollywood": "hollywood-studios",
    "animal kingdom": "animal-kingdom",
}

_REST_DAY_MAX_ITEMS = 3

PLANNING_DAY_TYPES = frozenset({DayType.PARK_DAY, DayType.PARK_HOPPER})


def trip_length_days(trip: Trip) -> int:
    """Inclusive calendar days between start and end date."""
    return (trip.end_date - trip.start_date).days + 1


def _mentions(text: str | None, words: tuple[str, ...]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(word in lowered for word in words)


def _has_departure_indicator(day: TripDay) -> bool:
    if day.departure_time:
        return True
    return any(
        _mentions(item.name, _DEPARTURE_WORDS) or item.type == "travel"
        for item in day.items
    )


def _referenced_parks(day: TripDay) -> set[str]:
    parks: set[str] = set()
    if day.park_id:
        parks.add(day.park_id)
    for item in day.items:
        if not item.attraction_id or not item.notes:
            continue
        notes = item.notes.lower()
        for name, park_id in _PARK_NOTE_NAMES.items():
            if name in notes:
                parks.add(park_id)
    return parks


def _at_disney_springs(item: ItineraryItem) -> bool:
    words = ("disney springs",)
    return (
        _mentions(item.name, words)
        or _mentions(item.location, words)
        or _mentions(item.notes, words)
    )


def _is_special_event(item: ItineraryItem) -> bool:
    return (
        item.type == "special_events"
        or _mentions(item.name, _SPECIAL_EVENT_WORDS)
        or bool(item.event_type)
    )


def detect_day_type(day: TripDay, trip: Trip, index: int) -> DayType:
    """Effective type of the ``index``-th day of ``trip``."""
    if day.day_type is not None:
        return day.day_type

    total_days = trip_length_days(trip)

    if index == 0:
        return DayType.CHECK_IN

    if index == total_days - 1 or (
        index == total_days - 2 and _has_departure_indicator(day)
    ):
        return DayType.CHECK_OUT

    if day.items and len(_referenced_parks(day)) > 1:
        return DayType.PARK_HOPPER

    if any(_at_disney_springs(item) for item in day.items):
        return DayType.DISNEY_SPRINGS

    if any(_is_special_event(item) for item in day.items):
        return DayType.SPECIAL_EVENT

    if not day.park_id and len(day.items) <= _REST_DAY_MAX_ITEMS:
        relaxing = any(_mentions(item.name, _RELAXING_WORDS) for item in day.items)
        if relaxing or not day.items:
            return DayType.REST_DAY

    if day.park_id:
        return DayType.PARK_DAY

    return DayType.REST_DAY


def classify_trip_days(trip: Trip) -> list[DayType]:
    types = [detect_day_type(day, trip, i) for i, day in enumerate(trip.days)]
    logger.debug("Classified %d days for trip %s: %s", len(types), trip.id, [t.value for t in types])
    return types


def needs_complex_planning(day_type: DayType) -> bool:
    return day_type in PLANNING_DAY_TYPES
