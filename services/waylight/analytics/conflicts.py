"""
Conflict detector — finds where the party disagrees about an attraction.

Three independent rules run for every summary whose attraction and park are
in the catalog, so one attraction can yield up to three conflicts:

  rating     consensus level is "conflict" AND the raw rating spread is >= 3.
             Severity high when the spread is >= 4, otherwise medium.
  height     some, but not all, ratings are height restricted.  Severity medium.
  intensity  some, but not all, members find it too intense.    Severity low.

A summary may claim "conflict" while the raw ratings are close together
(stale or upstream-computed summaries); the spread check keeps such cases out.

Output is sorted by severity, high first, keeping detection order within a
severity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from services.waylight.catalog.catalog import AttractionCatalog
from services.waylight.domain.types import (
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    ConflictType,
    ConsensusLevel,
    Park,
    PreferenceType,
    Severity,
    TravelingPartyMember,
)

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown"

_RATING_SPREAD_THRESHOLD = 3
_HIGH_SEVERITY_SPREAD = 4

_SEVERITY_RANK: dict[Severity, int] = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

RESOLUTION_TRY_IT = (
    "Try it - most of the group rates it well. Consider doing it early or late "
    "to minimize impact if some aren't interested."
)
RESOLUTION_OPTIONAL = (
    "Optional activity - split up if needed. Those interested can do it while "
    "others explore nearby attractions."
)
RESOLUTION_SKIP = (
    "Consider skipping - look for similar alternatives that might appeal to "
    "more family members."
)
RESOLUTION_HEIGHT = (
    "Consider child swap options or alternative activities for affected family members"
)
RESOLUTION_INTENSITY = "Consider milder alternatives or skip for sensitive family members"

ISSUE_HEIGHT = "Height restriction concern"
ISSUE_INTENSITY = "Intensity too high"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConflictingMember:
    member_name: str
    issue: str

    def to_dict(self) -> dict[str, Any]:
        return {"memberName": self.member_name, "issue": self.issue}


@dataclass(frozen=True)
class ConflictAnalysis:
    attraction_id: str
    attraction_name: str
    park_id: str
    park_name: str
    conflict_type: ConflictType
    conflicting_members: list[ConflictingMember] = field(default_factory=list)
    suggested_resolution: str = ""
    severity: Severity = Severity.LOW

    def to_dict(self) -> dict[str, Any]:
        return {
            "attractionId": self.attraction_id,
            "attractionName": self.attraction_name,
            "parkId": self.park_id,
            "parkName": self.park_name,
            "conflictType": self.conflict_type.value,
            "conflictingMembers": [m.to_dict() for m in self.conflicting_members],
            "suggestedResolution": self.suggested_resolution,
            "severity": self.severity.value,
        }


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def rating_spread(ratings: Sequence[ActivityRating]) -> int:
    if not ratings:
        return 0
    values = [r.rating for r in ratings]
    return max(values) - min(values)


def rating_resolution(ratings: Sequence[ActivityRating]) -> str:
    avg = sum(r.rating for r in ratings) / max(len(ratings), 1)
    if avg >= 3.5:
        return RESOLUTION_TRY_IT
    if avg >= 2.5:
        return RESOLUTION_OPTIONAL
    return RESOLUTION_SKIP


def _member_name(members: dict[str, TravelingPartyMember], member_id: str) -> str:
    member = members.get(member_id)
    return member.name if member is not None else UNKNOWN_MEMBER


def _conflict(
    attraction: Attraction,
    park: Park,
    conflict_type: ConflictType,
    members: list[ConflictingMember],
    resolution: str,
    severity: Severity,
) -> ConflictAnalysis:
    return ConflictAnalysis(
        attraction_id=attraction.id,
        attraction_name=attraction.name,
        park_id=attraction.park_id,
        park_name=park.name,
        conflict_type=conflict_type,
        conflicting_members=members,
        suggested_resolution=resolution,
        severity=severity,
    )


def _is_partial(count: int, total: int) -> bool:
    return 0 < count < total


def identify_conflicts(
    catalog: AttractionCatalog,
    ratings: Sequence[ActivityRating],
    summaries: Sequence[ActivityRatingSummary],
    party_members: Sequence[TravelingPartyMember],
) -> list[ConflictAnalysis]:
    members = {m.id: m for m in party_members}
    conflicts: list[ConflictAnalysis] = []

    for summary in summaries:
        attraction = catalog.get_attraction(summary.attraction_id)
        if attraction is None:
            logger.warning("Summary for unknown attraction %s skipped", summary.attraction_id)
            continue
        park = catalog.get_park(attraction.park_id)
        if park is None:
            logger.warning(
                "Summary for %s skipped: park %s not in catalog",
                attraction.id, attraction.park_id,
            )
            continue

        attraction_ratings = [r for r in ratings if r.attraction_id == attraction.id]

        if summary.consensus_level == ConsensusLevel.CONFLICT:
            spread = rating_spread(attraction_ratings)
            if spread >= _RATING_SPREAD_THRESHOLD:
                rated = [
                    ConflictingMember(
                        member_name=_member_name(members, r.party_member_id),
                        issue=f"Rated {r.rating}/5 ({(r.preference_type or PreferenceType.NEUTRAL).value})",
                    )
                    for r in attraction_ratings
                ]
                severity = Severity.HIGH if spread >= _HIGH_SEVERITY_SPREAD else Severity.MEDIUM
                conflicts.append(_conflict(
                    attraction, park, ConflictType.RATING, rated,
                    rating_resolution(attraction_ratings), severity,
                ))

        if _is_partial(summary.height_restricted_count, len(attraction_ratings)):
            restricted = [
                ConflictingMember(_member_name(members, r.party_member_id), ISSUE_HEIGHT)
                for r in attraction_ratings
                if not r.height_restriction_ok
            ]
            if restricted:
                conflicts.append(_conflict(
                    attraction, park, ConflictType.HEIGHT, restricted,
                    RESOLUTION_HEIGHT, Severity.MEDIUM,
                ))

        if _is_partial(summary.intensity_concerns_count, len(attraction_ratings)):
            uncomfortable = [
                ConflictingMember(_member_name(members, r.party_member_id), ISSUE_INTENSITY)
                for r in attraction_ratings
                if not r.intensity_comfortable
            ]
            if uncomfortable:
                conflicts.append(_conflict(
                    attraction, park, ConflictType.INTENSITY, uncomfortable,
                    RESOLUTION_INTENSITY, Severity.LOW,
                ))

    conflicts.sort(key=lambda c: _SEVERITY_RANK[c.severity], reverse=True)
    logger.info("Conflicts found: %d across %d summaries", len(conflicts), len(summaries))
    return conflicts
