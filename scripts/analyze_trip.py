#!/usr/bin/env python3
"""
Analyze a trip bundle and print its ratings report.

Usage:
    PYTHONPATH=. python3 scripts/analyze_trip.py --bundle trip.json
    PYTHONPATH=. python3 scripts/analyze_trip.py --bundle trip.json --format json
    PYTHONPATH=. python3 scripts/analyze_trip.py --bundle trip.json --lightning-lane-day 2
    PYTHONPATH=. python3 scripts/analyze_trip.py --bundle trip.json --output report.txt

--lightning-lane-day is 1-based and refers to the bundle trip's planned days.

Exits 0 on success. Exits 1 if the bundle or its catalog is invalid.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from services.waylight.analytics.options import AnalyticsOptions
from services.waylight.analytics.park_summary import ParkRatingAnalytics
from services.waylight.bundle import TripBundle
from services.waylight.config import settings
from services.waylight.lightning_lane.service import LightningLaneService, LightningLaneStrategy
from services.waylight.ratings.store import RatingStore
from services.waylight.reports.exporter import generate_json_report, generate_text_report

logger = logging.getLogger("analyze_trip")


def _strategy_lines(day_number: int, strategy: LightningLaneStrategy) -> list[str]:
    verdict = "Buy Lightning Lane Multi Pass" if strategy.should_purchase_genie_plus else "Skip Multi Pass"
    lines = [
        f"⚡ LIGHTNING LANE STRATEGY: DAY {day_number}",
        "─" * 31,
        f"Decision: {verdict}",
    ]
    lines += [f"• {reason}" for reason in strategy.reasoning]
    costs = strategy.cost_analysis
    lines.append(
        f"Cost: Multi Pass ${costs.genie_plus_cost}, "
        f"Individual ${costs.individual_ll_cost}, total ${costs.total_cost}"
    )
    savings = strategy.time_savings
    lines.append(
        f"Time saved: {savings.estimated_minutes} minutes "
        f"({savings.confidence_level.value} confidence)"
    )
    for label, recs in (
        ("Multi Pass", strategy.multi_pass_recommendations),
        ("Individual Lightning Lane", strategy.individual_ll_recommendations),
    ):
        if not recs:
            continue
        lines.append(f"{label}:")
        for index, rec in enumerate(recs, start=1):
            line = f"  {index}. {rec.attraction_name} (priority {rec.priority:g}, saves ~{rec.estimated_savings} min)"
            if rec.sells_out_by:
                line += f", sells out by {rec.sells_out_by}"
            lines.append(line)
    return lines


def main():
    parser = argparse.ArgumentParser(description="Analyze a Waylight trip bundle")
    parser.add_argument("--bundle", required=True, help="Path to the trip bundle JSON")
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Report format")
    parser.add_argument(
        "--lightning-lane-day", type=int, metavar="N",
        help="Append the Lightning Lane strategy for planned day N (1-based)",
    )
    parser.add_argument("--output", help="Write the report to this file instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    bundle_path = Path(args.bundle)
    try:
        bundle = TripBundle.load(bundle_path)
        catalog = bundle.build_catalog(bundle_path.parent)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        print(f"Invalid trip bundle {bundle_path}: {e}", file=sys.stderr)
        sys.exit(1)

    trip = bundle.trip
    store: RatingStore = bundle.to_store()
    members = store.party_for_trip(trip.id)

    analytics = ParkRatingAnalytics(catalog, AnalyticsOptions.from_settings())
    analysis = analytics.analyze_store(store, trip)

    strategy = None
    if args.lightning_lane_day is not None:
        if not 1 <= args.lightning_lane_day <= len(trip.days):
            print(
                f"--lightning-lane-day must be between 1 and {len(trip.days)}",
                file=sys.stderr,
            )
            sys.exit(1)
        day = trip.days[args.lightning_lane_day - 1]
        service = LightningLaneService(catalog, default_group_rating=settings.default_group_rating)
        strategy = service.generate_strategy(day, store.summaries_for_trip(trip.id), len(members))

    if args.format == "json":
        report = generate_json_report(
            trip, members, analysis.park_summaries, analysis.conflicts, analysis.recommendations,
        )
        report["availableParkDays"] = analysis.available_park_days
        if strategy is not None:
            report["lightningLaneStrategy"] = strategy.to_dict()
        output = json.dumps(report, indent=2, ensure_ascii=False) + "\n"
    else:
        output = generate_text_report(
            trip, members, analysis.park_summaries, analysis.conflicts, analysis.recommendations,
        )
        if strategy is not None:
            output += "\n" + "\n".join(_strategy_lines(args.lightning_lane_day, strategy)) + "\n"

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        sys.stdout.write(output)

    sys.exit(0)


if __name__ == "__main__":
    main()
