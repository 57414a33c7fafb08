"""
Canonical ingestion types for the park analytics engine.

Every record that crosses into the analytics core (catalog attractions, party
members, ratings, pre-aggregated rating summaries, trips) is validated here.
The engine itself never re-validates: once a record is a model instance its
fields are trusted.

Records arrive from the web/mobile clients as camelCase JSON
(``parkId``, ``heightRestrictionOk``); models accept both the camelCase alias
and the snake_case field name.
"""

from __future__ import annotations

import re
import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class IntensityLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class PreferenceType(str, Enum):
    MUST_DO = "must_do"
    WANT_TO_DO = "want_to_do"
    NEUTRAL = "neutral"
    SKIP = "skip"
    AVOID = "avoid"


class ConsensusLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    CONFLICT = "conflict"


class DayType(str, Enum):
    PARK_DAY = "park-day"
    PARK_HOPPER = "park-hopper"
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    REST_DAY = "rest-day"
    DISNEY_SPRINGS = "disney-springs"
    SPECIAL_EVENT = "special-event"


class LightningLaneKind(str, Enum):
    MULTIPASS = "multipass"
    SINGLEPASS = "singlepass"
    STANDBY = "standby"


class ConflictType(str, Enum):
    RATING = "rating"
    PREFERENCE = "preference"
    HEIGHT = "height"
    INTENSITY = "intensity"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Five-level preference -> 1-5 star rating
PREFERENCE_RATINGS: dict[PreferenceType, int] = {
    PreferenceType.MUST_DO: 5,
    PreferenceType.WANT_TO_DO: 4,
    PreferenceType.NEUTRAL: 3,
    PreferenceType.SKIP: 2,
    PreferenceType.AVOID: 1,
}

# Members younger than this are children for height-requirement purposes.
CHILD_AGE_LIMIT = 18

_CM_PER_INCH = 2.54

_FEET_INCHES_RE = re.compile(r"^(\d+)\s*(?:'|ft)\s*(?:(\d+(?:\.\d+)?)\s*(?:\"|''|in)?)?$")
_CM_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*cm$")
_INCHES_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(?:\"|in|inches)?$")


def parse_height_inches(raw: str | None) -> float | None:
    """
    Parse a free-form height string into inches.

    Accepts "48", "48 in", '48"', "4'0\"", "4 ft 2 in" and "122 cm".
    Returns None when the value is missing or unparseable.
    """
    if not raw:
        return None
    text = raw.strip().lower()

    match = _FEET_INCHES_RE.match(text)
    if match:
        inches = float(match.group(2)) if match.group(2) else 0.0
        return int(match.group(1)) * 12 + inches

    match = _CM_RE.match(text)
    if match:
        return float(match.group(1)) / _CM_PER_INCH

    match = _INCHES_RE.match(text)
    if match:
        return float(match.group(1))

    return None


# ---------------------------------------------------------------------------
# Base model
# ---------------------------------------------------------------------------

class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Catalog records
# ---------------------------------------------------------------------------

class Park(_Record):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    abbreviation: str = ""
    icon: str = ""
    description: str | None = None


class AttractionFeatures(_Record):
    multi_pass: bool = False
    single_pass: bool = False
    # Park-feed spellings of the same two entrances.
    has_lightning_lane: bool = False
    has_individual_ll: bool = Field(default=False, alias="hasIndividualLL")


class Attraction(_Record):
    """A rideable/visitable catalog item. Immutable for an analytics run."""

    id: str = Field(min_length=1)
    park_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = "ride"
    duration: int = Field(default=30, ge=0)
    """Minutes. Dining items without a duration default to 30."""

    intensity: IntensityLevel = IntensityLevel.LOW
    height_requirement: int | None = Field(default=None, gt=0)
    """Minimum rider height in inches."""

    lightning_lane: bool = False
    """Legacy catalog flag: the attraction offers some Lightning Lane entrance."""

    features: AttractionFeatures = Field(default_factory=AttractionFeatures)

    @property
    def has_multi_pass(self) -> bool:
        return self.features.multi_pass or self.features.has_lightning_lane

    @property
    def has_single_pass(self) -> bool:
        return self.features.single_pass or self.features.has_individual_ll

    @property
    def is_lightning_lane_eligible(self) -> bool:
        return self.lightning_lane or self.has_multi_pass or self.has_single_pass

    @property
    def is_intense(self) -> bool:
        return self.intensity in (IntensityLevel.HIGH, IntensityLevel.EXTREME)


# ---------------------------------------------------------------------------
# Party + ratings
# ---------------------------------------------------------------------------

class TravelingPartyMember(_Record):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    age: int | None = Field(default=None, ge=0, le=130)
    height: str | None = None
    """Height as entered by the planner ("48", "4'2\"", "122 cm")."""

    guest_type: str | None = None
    special_needs: str | None = None
    is_planner: bool = False

    @property
    def is_child(self) -> bool:
        if self.age is not None:
            return self.age < CHILD_AGE_LIMIT
        return (self.guest_type or "").strip().lower() == "child"

    @property
    def height_inches(self) -> float | None:
        return parse_height_inches(self.height)


class ActivityRating(_Record):
    """One party member's opinion of one attraction within one trip."""

    id: str | None = None
    trip_id: str = Field(min_length=1)
    party_member_id: str = Field(min_length=1)
    attraction_id: str = Field(min_length=1)
    activity_type: str = "attraction"
    rating: int = Field(ge=1, le=5)
    preference_type: PreferenceType | None = None
    notes: str | None = None
    height_restriction_ok: bool = True
    intensity_comfortable: bool = True
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_preference(
        cls,
        trip_id: str,
        party_member_id: str,
        attraction_id: str,
        preference_type: PreferenceType,
        **extra,
    ) -> "ActivityRating":
        """Build a rating whose stars are derived from the preference level."""
        return cls(
            trip_id=trip_id,
            party_member_id=party_member_id,
            attraction_id=attraction_id,
            rating=PREFERENCE_RATINGS[PreferenceType(preference_type)],
            preference_type=preference_type,
            **extra,
        )


class ActivityRatingSummary(_Record):
    """
    Pre-aggregated view over all ratings for one attraction within a trip.

    consensus_level is computed upstream and consumed as-is; a missing level
    is read as medium everywhere in the engine.
    """

    id: str | None = None
    trip_id: str = Field(min_length=1)
    attraction_id: str = Field(min_length=1)
    activity_type: str = "attraction"
    average_rating: float | None = Field(default=None, ge=0.0, le=5.0)
    rating_count: int = Field(default=0, ge=0)
    must_do_count: int = Field(default=0, ge=0)
    avoid_count: int = Field(default=0, ge=0)
    consensus_level: ConsensusLevel | None = None
    height_restricted_count: int = Field(default=0, ge=0)
    intensity_concerns_count: int = Field(default=0, ge=0)
    last_calculated_at: dt.datetime | None = None


# ---------------------------------------------------------------------------
# Trip structure
# ---------------------------------------------------------------------------

class ItineraryItem(_Record):
    id: str = Field(min_length=1)
    attraction_id: str | None = None
    name: str = ""
    type: str | None = None
    order: int = 0
    time_slot: str | None = None
    notes: str | None = None
    location: str | None = None
    event_type: str | None = None


class TripDay(_Record):
    id: str = Field(min_length=1)
    date: dt.date
    park_id: str | None = None
    items: list[ItineraryItem] = Field(default_factory=list)
    day_type: DayType | None = None
    departure_time: str | None = None
    notes: str | None = None

    @field_validator("park_id")
    @classmethod
    def blank_park_is_none(cls, v: str | None) -> str | None:
        return v or None

    def plans_attraction(self, attraction_id: str) -> bool:
        return any(item.attraction_id == attraction_id for item in self.items)


class Trip(_Record):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    start_date: dt.date
    end_date: dt.date
    days: list[TripDay] = Field(default_factory=list)
    traveling_party: list[TravelingPartyMember] = Field(default_factory=list)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "Trip":
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must not be before start_date ({self.start_date})"
            )
        return self
