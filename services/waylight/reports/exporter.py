"""
Trip ratings report export — plain-text and JSON renderings of one analysis run.

Both formats take the already-computed park summaries, conflicts and
recommendations; nothing is recalculated here. ``generated_at`` is passed
in by callers that need byte-stable output (tests, snapshot diffs) and
defaults to the current UTC time.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any, Sequence

from services.waylight.analytics.conflicts import ConflictAnalysis
from services.waylight.analytics.park_summary import ParkRatingSummary
from services.waylight.analytics.recommendations import TripRecommendations
from services.waylight.config import settings
from services.waylight.domain.numbers import format_days, round_half_up
from services.waylight.domain.types import TravelingPartyMember, Trip
from services.waylight.trips.day_types import trip_length_days

logger = logging.getLogger(__name__)

_RULE = "═" * 39
_SUBRULE = "─" * 31
_FOOTER_RULE = "═" * 50

_HIGH_PRIORITY_MUST_DOS = 5
_DETAIL_ATTRACTIONS = 5
_JSON_ATTRACTIONS = 10

_FILENAME_UNSAFE = re.compile(r"[^a-z0-9]", re.IGNORECASE)

REPORT_SUFFIXES = {
    "text": "_ratings_summary.txt",
    "json": "_ratings_data.json",
}


def _now(generated_at: dt.datetime | None) -> dt.datetime:
    return generated_at or dt.datetime.now(dt.timezone.utc)


def _percent(score: float) -> str:
    return f"{round_half_up(score * 100)}%"


def _average_consensus(park_summaries: Sequence[ParkRatingSummary]) -> float:
    if not park_summaries:
        return 0.0
    return sum(p.consensus_score for p in park_summaries) / len(park_summaries)


def _park_lookup(park_summaries: Sequence[ParkRatingSummary]) -> dict[str, ParkRatingSummary]:
    return {p.park_id: p for p in park_summaries}


def _section(title: str, rule: str = _SUBRULE) -> list[str]:
    return [title, rule]


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------

def generate_text_report(
    trip: Trip,
    party_members: Sequence[TravelingPartyMember],
    park_summaries: Sequence[ParkRatingSummary],
    conflicts: Sequence[ConflictAnalysis],
    recommendations: TripRecommendations,
    generated_at: dt.datetime | None = None,
    generated_by: str | None = None,
) -> str:
    created = _now(generated_at)
    parks = _park_lookup(park_summaries)
    lines: list[str] = []

    lines += ["🎭 TRIP RATINGS SUMMARY REPORT", _RULE, ""]
    lines.append(f"Trip: {trip.name}")
    lines.append(
        f"Dates: {trip.start_date.isoformat()} to {trip.end_date.isoformat()} "
        f"({trip_length_days(trip)} days)"
    )
    lines.append(f"Party Size: {len(party_members)} travelers")
    lines.append(f"Generated: {created.date().isoformat()}")
    lines.append("")

    total_must_dos = sum(p.must_do_count for p in park_summaries)
    high_priority_parks = sum(
        1 for p in park_summaries if p.must_do_count >= _HIGH_PRIORITY_MUST_DOS
    )
    lines += _section("📊 EXECUTIVE SUMMARY")
    lines.append(f"• Total Must-Do Attractions: {total_must_dos}")
    lines.append(f"• Overall Consensus Level: {_percent(_average_consensus(park_summaries))}")
    lines.append(f"• Rating Conflicts: {len(conflicts)}")
    lines.append(f"• Parks with High Priority: {high_priority_parks}")
    lines.append("")

    lines += _section("🏰 PARK PRIORITY RANKINGS")
    for rank, park in enumerate(park_summaries, start=1):
        lines.append(f"{rank}. {park.park_icon} {park.park_name}")
        lines.append(f"   • Average Rating: {park.average_rating:.1f}/5 stars")
        lines.append(f"   • Must-Do Attractions: {park.must_do_count}")
        lines.append(f"   • Consensus Score: {_percent(park.consensus_score)}")
        lines.append(f"   • Recommended Days: {park.recommended_days:g}")
        if park.conflict_count > 0:
            lines.append(f"   ⚠️  {park.conflict_count} conflicts to resolve")
        lines.append("")

    lines += _section("📅 RECOMMENDED PARK DAY ALLOCATION")
    for suggestion in recommendations.suggested_park_days:
        park = parks.get(suggestion.park_id)
        name = park.park_name if park else suggestion.park_id
        lines.append(f"• {name}: {format_days(suggestion.days)}")
        lines.append(f"  Reason: {suggestion.justification}")
        lines.append("")

    lines += _section("⭐ MUST-DO ATTRACTIONS BY PARK")
    lines += _park_lists(recommendations.must_do_by_park, parks)

    if any(ll.attractions for ll in recommendations.lightning_lane_priorities):
        lines += _section("⚡ LIGHTNING LANE PRIORITIES")
        lines += _park_lists(recommendations.lightning_lane_priorities, parks)

    if conflicts:
        lines += _section("⚠️  CONFLICTS & RESOLUTIONS")
        for index, conflict in enumerate(conflicts, start=1):
            affected = ", ".join(m.member_name for m in conflict.conflicting_members)
            lines.append(f"{index}. {conflict.attraction_name} ({conflict.park_name})")
            lines.append(f"   Conflict Type: {conflict.conflict_type.value}")
            lines.append(f"   Severity: {conflict.severity.value}")
            lines.append(f"   Affected Members: {affected}")
            lines.append(f"   Resolution: {conflict.suggested_resolution}")
            lines.append("")

    if recommendations.compromise_strategies:
        lines += _section("🤝 COMPROMISE STRATEGIES")
        for index, strategy in enumerate(recommendations.compromise_strategies, start=1):
            lines.append(f"{index}. {strategy}")
        lines.append("")

    lines += _section("📋 DETAILED PARK ANALYSIS", _RULE)
    lines.append("")
    for park in park_summaries:
        lines += _park_detail(park)

    lines.append("")
    lines.append(_FOOTER_RULE)
    lines.append(f"Generated by {generated_by or settings.report_generated_by}")
    lines.append(f"Report created: {created.isoformat(sep=' ', timespec='seconds')}")
    lines.append("")
    lines.append("Happy planning! 🎭✨")

    logger.debug("Text report for trip %s: %d lines", trip.id, len(lines))
    return "\n".join(lines) + "\n"


def _park_lists(entries, parks: dict[str, ParkRatingSummary]) -> list[str]:
    lines: list[str] = []
    for entry in entries:
        if not entry.attractions:
            continue
        park = parks.get(entry.park_id)
        icon = park.park_icon if park else ""
        name = park.park_name if park else entry.park_id
        lines.append(f"{icon} {name}:")
        for index, attraction in enumerate(entry.attractions, start=1):
            lines.append(f"  {index}. {attraction}")
        lines.append("")
    return lines


def _park_detail(park: ParkRatingSummary) -> list[str]:
    lines = [
        f"{park.park_icon} {park.park_name.upper()}",
        "─" * (len(park.park_name) + 4),
        f"Attractions Rated: {park.rated_attractions} of {park.total_attractions}",
        f"Average Rating: {park.average_rating:.1f}/5 stars",
        f"Must-Do Count: {park.must_do_count}",
        f"Avoid Count: {park.avoid_count}",
        f"Consensus Score: {_percent(park.consensus_score)}",
        f"Recommended Days: {park.recommended_days:g}",
        "",
    ]
    if park.top_attractions:
        lines.append("Top Attractions:")
        for index, attraction in enumerate(park.top_attractions[:_DETAIL_ATTRACTIONS], start=1):
            line = f"  {index}. {attraction.attraction_name} - {attraction.average_rating:.1f}★"
            if attraction.must_do_count > 0:
                line += f" ({attraction.must_do_count} must-do votes)"
            if attraction.has_conflicts:
                line += " ⚠️ "
            lines.append(line)
    lines.append("")
    return lines


# ---------------------------------------------------------------------------
# JSON report
# ---------------------------------------------------------------------------

def generate_json_report(
    trip: Trip,
    party_members: Sequence[TravelingPartyMember],
    park_summaries: Sequence[ParkRatingSummary],
    conflicts: Sequence[ConflictAnalysis],
    recommendations: TripRecommendations,
    generated_at: dt.datetime | None = None,
    generated_by: str | None = None,
) -> dict[str, Any]:
    recs = recommendations.to_dict()
    return {
        "metadata": {
            "tripName": trip.name,
            "startDate": trip.start_date.isoformat(),
            "endDate": trip.end_date.isoformat(),
            "tripDuration": trip_length_days(trip),
            "partySize": len(party_members),
            "partyMembers": [
                {"id": m.id, "name": m.name, "age": m.age, "isPlanner": m.is_planner}
                for m in party_members
            ],
            "generatedAt": _now(generated_at).isoformat(),
            "generatedBy": generated_by or settings.report_generated_by,
        },
        "summary": {
            "totalMustDos": sum(p.must_do_count for p in park_summaries),
            "averageConsensus": _average_consensus(park_summaries),
            "totalConflicts": len(conflicts),
            "highPriorityParks": sum(
                1 for p in park_summaries if p.must_do_count >= _HIGH_PRIORITY_MUST_DOS
            ),
        },
        "parkAnalysis": [
            {
                "parkId": park.park_id,
                "parkName": park.park_name,
                "icon": park.park_icon,
                "metrics": {
                    "totalAttractions": park.total_attractions,
                    "ratedAttractions": park.rated_attractions,
                    "averageRating": park.average_rating,
                    "mustDoCount": park.must_do_count,
                    "avoidCount": park.avoid_count,
                    "consensusScore": park.consensus_score,
                    "conflictCount": park.conflict_count,
                    "recommendedDays": park.recommended_days,
                    "priorityScore": park.priority_score,
                },
                "topAttractions": [
                    {
                        "id": a.attraction_id,
                        "name": a.attraction_name,
                        "averageRating": a.average_rating,
                        "mustDoCount": a.must_do_count,
                        "consensusLevel": a.consensus_level.value,
                        "hasConflicts": a.has_conflicts,
                        "individualRatings": [r.to_dict() for r in a.individual_ratings],
                    }
                    for a in park.top_attractions[:_JSON_ATTRACTIONS]
                ],
            }
            for park in park_summaries
        ],
        "conflicts": [
            {
                "attractionId": c.attraction_id,
                "attractionName": c.attraction_name,
                "parkId": c.park_id,
                "parkName": c.park_name,
                "type": c.conflict_type.value,
                "severity": c.severity.value,
                "affectedMembers": [m.to_dict() for m in c.conflicting_members],
                "resolution": c.suggested_resolution,
            }
            for c in conflicts
        ],
        "recommendations": {
            "parkPriorityOrder": recs["parkPriorityOrder"],
            "suggestedParkDays": recs["suggestedParkDays"],
            "mustDoByPark": recs["mustDoByPark"],
            "lightningLanePriorities": recs["lightningLanePriorities"],
            "ropeDropTargets": recs["ropDropTargets"],
            "compromiseStrategies": recs["compromiseStrategies"],
        },
    }


def report_filename(trip: Trip, kind: str) -> str:
    """Download filename for a trip report; ``kind`` is "text" or "json"."""
    if kind not in REPORT_SUFFIXES:
        raise ValueError(f"Unknown report kind: {kind!r}. Expected one of {sorted(REPORT_SUFFIXES)}")
    slug = _FILENAME_UNSAFE.sub("_", trip.name).lower()
    return f"{slug}{REPORT_SUFFIXES[kind]}"
