# domain package — validated ingestion types shared by every analytics module
from services.waylight.domain.types import (
    PREFERENCE_RATINGS,
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    AttractionFeatures,
    ConfidenceLevel,
    ConflictType,
    ConsensusLevel,
    DayType,
    IntensityLevel,
    ItineraryItem,
    LightningLaneKind,
    Park,
    PreferenceType,
    Severity,
    TravelingPartyMember,
    Trip,
    TripDay,
    parse_height_inches,
)

__all__ = [
    "PREFERENCE_RATINGS",
    "ActivityRating",
    "ActivityRatingSummary",
    "Attraction",
    "AttractionFeatures",
    "ConfidenceLevel",
    "ConflictType",
    "ConsensusLevel",
    "DayType",
    "IntensityLevel",
    "ItineraryItem",
    "LightningLaneKind",
    "Park",
    "PreferenceType",
    "Severity",
    "TravelingPartyMember",
    "Trip",
    "TripDay",
    "parse_height_inches",
]
