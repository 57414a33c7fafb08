"""
Trip bundle tests.

Validates:
  - loading a bundle with an inline or file catalog
  - ratings must belong to the bundle trip and reference a known member
  - summaries rebuilt from ratings when the bundle carries none
  - party falls back to the trip's traveling party
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from services.waylight.bundle import TripBundle

TRIP = {
    "id": "trip-001",
    "name": "Summer Trip 2025",
    "startDate": "2025-06-01",
    "endDate": "2025-06-05",
}
PARTY = [
    {"id": "mom", "name": "Alice", "age": 40, "isPlanner": True},
    {"id": "kid", "name": "Dana", "age": 5, "height": "40"},
]
RATINGS = [
    {"tripId": "trip-001", "partyMemberId": "mom", "attractionId": "space-mountain", "rating": 5},
    {"tripId": "trip-001", "partyMemberId": "kid", "attractionId": "space-mountain", "rating": 1,
     "heightRestrictionOk": False},
]
CATALOG = {
    "attractions": [
        {"id": "space-mountain", "parkId": "magic-kingdom", "name": "Space Mountain",
         "duration": 3, "intensity": "high", "heightRequirement": 44,
         "features": {"multiPass": True}},
    ],
}


def _bundle(**overrides) -> dict:
    data = {"trip": TRIP, "party": PARTY, "ratings": RATINGS, "catalog": CATALOG}
    data.update(overrides)
    return data


class TestTripBundle:

    def test_inline_catalog(self):
        bundle = TripBundle.model_validate(_bundle())
        catalog = bundle.build_catalog()
        assert catalog.get_attraction("space-mountain").has_multi_pass

    def test_catalog_file_relative_to_bundle(self, tmp_path):
        (tmp_path / "catalog.json").write_text(json.dumps(CATALOG), encoding="utf-8")
        path = tmp_path / "trip.json"
        path.write_text(json.dumps(_bundle(catalog="catalog.json")), encoding="utf-8")

        bundle = TripBundle.load(path)
        catalog = bundle.build_catalog(path.parent)
        assert len(catalog) == 1

    def test_missing_catalog(self):
        bundle = TripBundle.model_validate(_bundle(catalog=None))
        with pytest.raises(ValueError, match="no catalog"):
            bundle.build_catalog()

    def test_unknown_member_rejected(self):
        ratings = RATINGS + [
            {"tripId": "trip-001", "partyMemberId": "ghost", "attractionId": "space-mountain", "rating": 3},
        ]
        with pytest.raises(ValidationError, match="ghost"):
            TripBundle.model_validate(_bundle(ratings=ratings))

    def test_other_trip_rating_rejected(self):
        ratings = [dict(RATINGS[0], tripId="trip-999")]
        with pytest.raises(ValidationError, match="trip-999"):
            TripBundle.model_validate(_bundle(ratings=ratings))

    def test_summaries_rebuilt_from_ratings(self):
        [summary] = TripBundle.model_validate(_bundle()).to_store().summaries_for_trip("trip-001")
        assert summary.attraction_id == "space-mountain"
        assert summary.average_rating == pytest.approx(3.0)
        assert summary.consensus_level.value == "conflict"
        assert summary.height_restricted_count == 1

    def test_supplied_summaries_used_as_is(self):
        summaries = [{"tripId": "trip-001", "attractionId": "space-mountain",
                      "averageRating": 4.5, "consensusLevel": "high"}]
        bundle = TripBundle.model_validate(_bundle(summaries=summaries))
        [summary] = bundle.to_store().summaries_for_trip("trip-001")
        assert summary.average_rating == 4.5
        assert summary.rating_count == 0

    def test_party_falls_back_to_trip(self):
        trip = dict(TRIP, travelingParty=PARTY)
        bundle = TripBundle.model_validate(_bundle(trip=trip, party=[]))
        assert [m.name for m in bundle.members] == ["Alice", "Dana"]

    def test_to_store(self):
        store = TripBundle.model_validate(_bundle()).to_store()
        assert len(store.ratings_for_trip("trip-001")) == 2
        assert [m.id for m in store.party_for_trip("trip-001")] == ["mom", "kid"]

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            TripBundle.load(path)
