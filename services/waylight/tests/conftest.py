"""
Shared test fixtures for the park analytics test suite.

Provides:
- Record factories (attractions, party members, ratings, summaries, trips, days)
- A small four-park catalog with Multi Pass / Single Pass / standby attractions
- A four-member party (two adults, two children)
- A ParkRatingAnalytics engine wired with default options
"""

import datetime as dt
import os
from typing import Any

import pytest

os.environ.setdefault("ENVIRONMENT", "test")

from services.waylight.analytics.options import AnalyticsOptions  # noqa: E402
from services.waylight.analytics.park_summary import ParkRatingAnalytics  # noqa: E402
from services.waylight.catalog.catalog import AttractionCatalog  # noqa: E402
from services.waylight.domain.types import (  # noqa: E402
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    TravelingPartyMember,
    Trip,
    TripDay,
)

TRIP_ID = "trip-001"


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_attraction(attraction_id: str, park_id: str = "magic-kingdom", **overrides: Any) -> Attraction:
    """Factory for a catalog attraction. ``multi_pass``/``single_pass`` set the features."""
    multi = overrides.pop("multi_pass", False)
    single = overrides.pop("single_pass", False)
    base: dict[str, Any] = {
        "id": attraction_id,
        "park_id": park_id,
        "name": attraction_id.replace("-", " ").title(),
        "duration": 10,
        "intensity": "low",
        "features": {"multi_pass": multi, "single_pass": single},
    }
    base.update(overrides)
    return Attraction(**base)


def make_member(member_id: str, name: str | None = None, **overrides: Any) -> TravelingPartyMember:
    base: dict[str, Any] = {
        "id": member_id,
        "name": name or member_id.title(),
        "age": 35,
    }
    base.update(overrides)
    return TravelingPartyMember(**base)


def make_rating(
    member_id: str,
    attraction_id: str,
    rating: int,
    trip_id: str = TRIP_ID,
    **overrides: Any,
) -> ActivityRating:
    base: dict[str, Any] = {
        "trip_id": trip_id,
        "party_member_id": member_id,
        "attraction_id": attraction_id,
        "rating": rating,
    }
    base.update(overrides)
    return ActivityRating(**base)


def make_summary(attraction_id: str, trip_id: str = TRIP_ID, **overrides: Any) -> ActivityRatingSummary:
    base: dict[str, Any] = {
        "trip_id": trip_id,
        "attraction_id": attraction_id,
        "average_rating": 3.0,
        "rating_count": 1,
        "must_do_count": 0,
        "avoid_count": 0,
        "consensus_level": "high",
    }
    base.update(overrides)
    return ActivityRatingSummary(**base)


def make_day(day_id: str, date: dt.date, park_id: str | None = None, **overrides: Any) -> TripDay:
    base: dict[str, Any] = {"id": day_id, "date": date, "park_id": park_id}
    base.update(overrides)
    return TripDay(**base)


def make_trip(
    start: dt.date = dt.date(2025, 6, 1),
    length_days: int = 5,
    days: list[TripDay] | None = None,
    **overrides: Any,
) -> Trip:
    base: dict[str, Any] = {
        "id": TRIP_ID,
        "name": "Summer Trip 2025",
        "start_date": start,
        "end_date": start + dt.timedelta(days=length_days - 1),
        "days": days or [],
    }
    base.update(overrides)
    return Trip(**base)


def make_planned_trip(park_ids: list[str | None], start: dt.date = dt.date(2025, 6, 1)) -> Trip:
    """Trip with one planned day per entry of ``park_ids``."""
    days = [
        make_day(f"day-{i + 1}", start + dt.timedelta(days=i), park_id)
        for i, park_id in enumerate(park_ids)
    ]
    return make_trip(start=start, length_days=len(park_ids), days=days)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def attractions() -> list[Attraction]:
    return [
        make_attraction("space-mountain", duration=3, intensity="high",
                        height_requirement=44, multi_pass=True, lightning_lane=True),
        make_attraction("seven-dwarfs-mine-train", duration=3, intensity="moderate",
                        height_requirement=38, single_pass=True, lightning_lane=True),
        make_attraction("haunted-mansion", duration=9, multi_pass=True, lightning_lane=True),
        make_attraction("its-a-small-world", duration=11),
        make_attraction("test-track", "epcot", duration=5, intensity="high",
                        height_requirement=40, multi_pass=True, lightning_lane=True),
        make_attraction("spaceship-earth", "epcot", duration=15),
        make_attraction("guardians-of-the-galaxy", "epcot", duration=3, intensity="extreme",
                        height_requirement=42, single_pass=True, lightning_lane=True),
        make_attraction("rise-of-the-resistance", "hollywood-studios", duration=18,
                        intensity="high", height_requirement=40, single_pass=True),
        make_attraction("avatar-flight-of-passage", "animal-kingdom", duration=6,
                        intensity="high", height_requirement=44, single_pass=True),
        make_attraction("expedition-everest", "animal-kingdom", duration=4,
                        intensity="high", height_requirement=44, multi_pass=True),
    ]


@pytest.fixture
def catalog(attractions) -> AttractionCatalog:
    return AttractionCatalog(attractions=attractions)


@pytest.fixture
def analytics(catalog) -> ParkRatingAnalytics:
    return ParkRatingAnalytics(catalog, AnalyticsOptions())


@pytest.fixture
def party() -> list[TravelingPartyMember]:
    return [
        make_member("mom", "Alice", is_planner=True),
        make_member("dad", "Bob", age=38),
        make_member("kid-tall", "Charlie", age=12, height="56"),
        make_member("kid-small", "Dana", age=5, height="40 in"),
    ]


@pytest.fixture
def trip() -> Trip:
    return make_trip()
