"""
Rating summarizer — folds per-member ratings into one summary per attraction.

Consensus is read from the rating spread (max - min) across the members who
rated the attraction:

    spread 0 (or a single rating)  -> high
    spread 1                       -> medium
    spread 2                       -> low
    spread >= 3                    -> conflict

must_do / avoid counts use the member's preference when one is recorded and
fall back to the star rating (5 / 1) when it is not.

Determinism guarantee:
  Summaries come out in order of first appearance of each attraction in the
  rating list. Same ratings in the same order always give the same output.
"""

from __future__ import annotations

import logging
from typing import Iterable

from services.waylight.domain.types import (
    PREFERENCE_RATINGS,
    ActivityRating,
    ActivityRatingSummary,
    Attraction,
    ConsensusLevel,
    PreferenceType,
    TravelingPartyMember,
)

logger = logging.getLogger(__name__)


def consensus_from_spread(spread: int) -> ConsensusLevel:
    if spread <= 0:
        return ConsensusLevel.HIGH
    if spread == 1:
        return ConsensusLevel.MEDIUM
    if spread == 2:
        return ConsensusLevel.LOW
    return ConsensusLevel.CONFLICT


def _is_must_do(rating: ActivityRating) -> bool:
    if rating.preference_type is not None:
        return rating.preference_type == PreferenceType.MUST_DO
    return rating.rating == 5


def _is_avoid(rating: ActivityRating) -> bool:
    if rating.preference_type is not None:
        return rating.preference_type == PreferenceType.AVOID
    return rating.rating == 1


def summarize_ratings(
    trip_id: str,
    ratings: Iterable[ActivityRating],
) -> list[ActivityRatingSummary]:
    """
    Build one ActivityRatingSummary per attraction rated within ``trip_id``.

    Ratings belonging to other trips are ignored.
    """
    grouped: dict[str, list[ActivityRating]] = {}
    for rating in ratings:
        if rating.trip_id != trip_id:
            continue
        grouped.setdefault(rating.attraction_id, []).append(rating)

    summaries: list[ActivityRatingSummary] = []
    for attraction_id, group in grouped.items():
        stars = [r.rating for r in group]
        spread = max(stars) - min(stars)
        summaries.append(ActivityRatingSummary(
            trip_id=trip_id,
            attraction_id=attraction_id,
            activity_type=group[0].activity_type,
            average_rating=sum(stars) / len(stars),
            rating_count=len(group),
            must_do_count=sum(1 for r in group if _is_must_do(r)),
            avoid_count=sum(1 for r in group if _is_avoid(r)),
            consensus_level=consensus_from_spread(spread),
            height_restricted_count=sum(1 for r in group if not r.height_restriction_ok),
            intensity_concerns_count=sum(1 for r in group if not r.intensity_comfortable),
        ))

    logger.debug(
        "Summarized %d ratings into %d summaries for trip %s",
        sum(len(g) for g in grouped.values()), len(summaries), trip_id,
    )
    return summaries


def compute_height_restriction_ok(
    member: TravelingPartyMember,
    attraction: Attraction | None,
) -> bool:
    """
    True unless ``member`` is a child whose parsed height is below the
    attraction's height requirement. Adults are never height restricted.
    """
    if attraction is None or attraction.height_requirement is None:
        return True
    if not member.is_child:
        return True
    height = member.height_inches
    if height is None:
        return True
    return height >= attraction.height_requirement


def build_rating(
    trip_id: str,
    member: TravelingPartyMember,
    attraction: Attraction,
    preference_type: PreferenceType | str,
    intensity_comfortable: bool = True,
    notes: str | None = None,
) -> ActivityRating:
    """Rating a member records for an attraction, with derived stars and height check."""
    preference = PreferenceType(preference_type)
    return ActivityRating(
        trip_id=trip_id,
        party_member_id=member.id,
        attraction_id=attraction.id,
        activity_type="attraction",
        rating=PREFERENCE_RATINGS[preference],
        preference_type=preference,
        notes=notes,
        height_restriction_ok=compute_height_restriction_ok(member, attraction),
        intensity_comfortable=intensity_comfortable,
    )
