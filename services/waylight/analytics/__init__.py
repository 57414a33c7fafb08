"""
Park analytics — group consensus, park-day allocation and trip recommendations.

Pure computation over in-memory inputs: no I/O, no shared mutable state.
"""
from services.waylight.analytics.allocation import (
    ParkDayAllocation,
    calculate_available_park_days,
    distribute_park_days,
)
from services.waylight.analytics.conflicts import (
    ConflictAnalysis,
    ConflictingMember,
    identify_conflicts,
)
from services.waylight.analytics.efficiency import (
    AttractionEfficiency,
    ParkTimeRequirement,
    calculate_attraction_efficiency,
    calculate_park_time_requirement,
)
from services.waylight.analytics.options import DEFAULT_OPTIONS, AnalyticsOptions
from services.waylight.analytics.park_summary import (
    AttractionInsight,
    MemberRating,
    ParkRatingAnalytics,
    ParkRatingSummary,
    TripAnalysis,
)
from services.waylight.analytics.recommendations import (
    TripRecommendations,
    generate_compromise_strategies,
    generate_recommendations,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "AnalyticsOptions",
    "AttractionEfficiency",
    "AttractionInsight",
    "ConflictAnalysis",
    "ConflictingMember",
    "MemberRating",
    "ParkDayAllocation",
    "ParkRatingAnalytics",
    "ParkRatingSummary",
    "ParkTimeRequirement",
    "TripAnalysis",
    "TripRecommendations",
    "calculate_attraction_efficiency",
    "calculate_available_park_days",
    "calculate_park_time_requirement",
    "distribute_park_days",
    "generate_compromise_strategies",
    "generate_recommendations",
    "identify_conflicts",
]
