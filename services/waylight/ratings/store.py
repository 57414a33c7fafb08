"""
Rating store accessor.

RatingStore is the read interface ParkRatingAnalytics.analyze_store and the CLI
depend on. InMemoryRatingStore is a dict-backed implementation used by the
CLI and the tests; persistence mechanics live with the clients, not here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from services.waylight.domain.types import (
    ActivityRating,
    ActivityRatingSummary,
    TravelingPartyMember,
)
from services.waylight.ratings.summarizer import summarize_ratings

logger = logging.getLogger(__name__)


class RatingStore(Protocol):
    def ratings_for_trip(self, trip_id: str) -> list[ActivityRating]: ...

    def ratings_for_attraction(self, trip_id: str, attraction_id: str) -> list[ActivityRating]: ...

    def summaries_for_trip(self, trip_id: str) -> list[ActivityRatingSummary]: ...

    def party_for_trip(self, trip_id: str) -> list[TravelingPartyMember]: ...


# (trip_id, party_member_id, attraction_id)
_RatingKey = tuple[str, str, str]


class InMemoryRatingStore:
    """
    One rating per (trip, member, attraction). Upserting the same key
    replaces the earlier rating in place, keeping its original position.

    Summaries are rebuilt from the stored ratings on every read, unless
    precomputed ones were put for the trip.
    """

    def __init__(self) -> None:
        self._ratings: dict[_RatingKey, ActivityRating] = {}
        self._party: dict[str, dict[str, TravelingPartyMember]] = {}
        self._summaries: dict[str, list[ActivityRatingSummary]] = {}

    # -- party --------------------------------------------------------------

    def add_member(self, trip_id: str, member: TravelingPartyMember) -> None:
        self._party.setdefault(trip_id, {})[member.id] = member

    def party_for_trip(self, trip_id: str) -> list[TravelingPartyMember]:
        return list(self._party.get(trip_id, {}).values())

    # -- ratings ------------------------------------------------------------

    def upsert_rating(self, rating: ActivityRating) -> ActivityRating:
        key = (rating.trip_id, rating.party_member_id, rating.attraction_id)
        if key in self._ratings:
            logger.debug("Replacing rating for %s/%s/%s", *key)
        self._ratings[key] = rating
        return rating

    def delete_rating(self, trip_id: str, party_member_id: str, attraction_id: str) -> bool:
        return self._ratings.pop((trip_id, party_member_id, attraction_id), None) is not None

    def ratings_for_trip(self, trip_id: str) -> list[ActivityRating]:
        return [r for r in self._ratings.values() if r.trip_id == trip_id]

    def ratings_for_attraction(self, trip_id: str, attraction_id: str) -> list[ActivityRating]:
        return [
            r for r in self._ratings.values()
            if r.trip_id == trip_id and r.attraction_id == attraction_id
        ]

    # -- summaries ----------------------------------------------------------

    def put_summaries(self, trip_id: str, summaries: Iterable[ActivityRatingSummary]) -> None:
        self._summaries[trip_id] = list(summaries)

    def summaries_for_trip(self, trip_id: str) -> list[ActivityRatingSummary]:
        if trip_id in self._summaries:
            return list(self._summaries[trip_id])
        return summarize_ratings(trip_id, self.ratings_for_trip(trip_id))
