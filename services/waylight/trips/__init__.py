# trips package — day classification for trip itineraries
from services.waylight.trips.day_types import (
    PLANNING_DAY_TYPES,
    classify_trip_days,
    detect_day_type,
    needs_complex_planning,
    trip_length_days,
)

__all__ = [
    "PLANNING_DAY_TYPES",
    "classify_trip_days",
    "detect_day_type",
    "needs_complex_planning",
    "trip_length_days",
]
