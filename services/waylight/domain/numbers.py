"""Numeric helpers shared by the analytics and Lightning Lane engines."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2).

    The client apps round this way; Python's round() uses banker's rounding
    and would disagree on exact halves.
    """
    return math.floor(value + 0.5)


def round_to_step(value: float, step: float) -> float:
    """Round half-up to the nearest multiple of ``step`` (0.5, 0.1)."""
    factor = 1 / step
    return round_half_up(value * factor) / factor


def plural(count: float) -> str:
    return "" if count == 1 else "s"


def format_days(days: float) -> str:
    """'2 days', '1 day', '0.5 days'."""
    value = int(days) if float(days).is_integer() else days
    return f"{value} day{plural(value)}"
