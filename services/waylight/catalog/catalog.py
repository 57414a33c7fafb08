"""
Attraction catalog accessor.

The static park/attraction catalog is owned by the clients; the analytics
engine only reads it. AttractionCatalog is the in-memory accessor handed to
ParkRatingAnalytics and LightningLaneService. Attraction order is preserved
as given, since park summaries and allocation ties follow catalog order.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from services.waylight.domain.types import Attraction, Park

logger = logging.getLogger(__name__)


DEFAULT_PARKS: tuple[Park, ...] = (
    Park(id="magic-kingdom", name="Magic Kingdom", abbreviation="MK", icon="🏰"),
    Park(id="epcot", name="EPCOT", abbreviation="EP", icon="🌍"),
    Park(id="hollywood-studios", name="Disney's Hollywood Studios", abbreviation="HS", icon="🎬"),
    Park(id="animal-kingdom", name="Disney's Animal Kingdom", abbreviation="AK", icon="🦁"),
)


class AttractionCatalog:
    """
    Read-only lookup over parks and their attractions.

    Usage:
        catalog = AttractionCatalog(attractions=[...])          # default WDW parks
        catalog.attractions_for_park("magic-kingdom")
        catalog.get_attraction("space-mountain")
    """

    def __init__(
        self,
        attractions: Iterable[Attraction],
        parks: Iterable[Park] = DEFAULT_PARKS,
    ) -> None:
        self._parks: dict[str, Park] = {}
        for park in parks:
            if park.id in self._parks:
                raise ValueError(f"Duplicate park id in catalog: {park.id!r}")
            self._parks[park.id] = park

        self._attractions: dict[str, Attraction] = {}
        self._by_park: dict[str, list[Attraction]] = {pid: [] for pid in self._parks}
        for attraction in attractions:
            if attraction.id in self._attractions:
                raise ValueError(f"Duplicate attraction id in catalog: {attraction.id!r}")
            self._attractions[attraction.id] = attraction
            if attraction.park_id not in self._by_park:
                # Off-park items (resort dining, Disney Springs) stay addressable
                # by id but never belong to a park summary.
                logger.debug(
                    "Catalog attraction %s references unlisted park %s",
                    attraction.id, attraction.park_id,
                )
                continue
            self._by_park[attraction.park_id].append(attraction)

    def parks(self) -> list[Park]:
        return list(self._parks.values())

    def get_park(self, park_id: str) -> Park | None:
        return self._parks.get(park_id)

    def get_attraction(self, attraction_id: str) -> Attraction | None:
        return self._attractions.get(attraction_id)

    def attractions_for_park(self, park_id: str) -> list[Attraction]:
        return list(self._by_park.get(park_id, []))

    def all_attractions(self) -> list[Attraction]:
        return list(self._attractions.values())

    def __len__(self) -> int:
        return len(self._attractions)


def catalog_from_dict(data: dict[str, Any]) -> AttractionCatalog:
    """
    Build a catalog from a ``{"parks": [...], "attractions": [...]}`` document.

    Each record is validated through the pydantic models, so malformed
    entries raise pydantic.ValidationError. A missing "parks" key falls back
    to DEFAULT_PARKS.
    """
    raw_parks = data.get("parks")
    parks = (
        [Park.model_validate(p) for p in raw_parks]
        if raw_parks is not None
        else list(DEFAULT_PARKS)
    )
    attractions = [Attraction.model_validate(a) for a in data.get("attractions", [])]
    return AttractionCatalog(attractions=attractions, parks=parks)


def load_catalog(path: str | Path) -> AttractionCatalog:
    """Load and validate a catalog JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    catalog = catalog_from_dict(data)
    logger.info(
        "Catalog loaded: path=%s parks=%d attractions=%d",
        path, len(catalog.parks()), len(catalog),
    )
    return catalog
