"""
Trip bundle — one JSON document holding everything an analysis run needs.

    {
      "trip":      {...},                 # Trip, camelCase or snake_case keys
      "party":     [...],                 # optional, defaults to trip.travelingParty
      "ratings":   [...],
      "summaries": [...],                 # optional, rebuilt from ratings when absent
      "catalog":   "catalog.json" | {...} # path (relative to the bundle) or inline
    }

Validation happens once, here. Everything downstream trusts the models.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from services.waylight.catalog.catalog import AttractionCatalog, catalog_from_dict, load_catalog
from services.waylight.domain.types import (
    ActivityRating,
    ActivityRatingSummary,
    TravelingPartyMember,
    Trip,
)
from services.waylight.ratings.store import InMemoryRatingStore

logger = logging.getLogger(__name__)


class TripBundle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    trip: Trip
    party: list[TravelingPartyMember] = Field(default_factory=list)
    ratings: list[ActivityRating] = Field(default_factory=list)
    summaries: list[ActivityRatingSummary] | None = None
    catalog: str | dict[str, Any] | None = None

    @model_validator(mode="after")
    def ratings_reference_party(self) -> "TripBundle":
        member_ids = {m.id for m in self.members}
        for rating in self.ratings:
            if rating.trip_id != self.trip.id:
                raise ValueError(
                    f"Rating for attraction {rating.attraction_id!r} belongs to trip "
                    f"{rating.trip_id!r}, expected {self.trip.id!r}"
                )
            if rating.party_member_id not in member_ids:
                raise ValueError(
                    f"Rating for attraction {rating.attraction_id!r} references unknown "
                    f"party member {rating.party_member_id!r}"
                )
        return self

    @property
    def members(self) -> list[TravelingPartyMember]:
        return list(self.party or self.trip.traveling_party)

    @classmethod
    def load(cls, path: str | Path) -> "TripBundle":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        bundle = cls.model_validate(data)
        logger.info(
            "Bundle loaded: path=%s trip=%s members=%d ratings=%d",
            path, bundle.trip.id, len(bundle.members), len(bundle.ratings),
        )
        return bundle

    def build_catalog(self, base_dir: str | Path = ".") -> AttractionCatalog:
        """Catalog referenced by the bundle; a path is resolved against ``base_dir``."""
        if self.catalog is None:
            raise ValueError(f"Bundle for trip {self.trip.id!r} has no catalog")
        if isinstance(self.catalog, dict):
            return catalog_from_dict(self.catalog)
        return load_catalog(Path(base_dir) / self.catalog)

    def to_store(self) -> InMemoryRatingStore:
        """Store holding the bundle's party and ratings; supplied summaries replace rebuilt ones."""
        store = InMemoryRatingStore()
        for member in self.members:
            store.add_member(self.trip.id, member)
        for rating in self.ratings:
            store.upsert_rating(rating)
        if self.summaries is not None:
            store.put_summaries(self.trip.id, self.summaries)
        return store
