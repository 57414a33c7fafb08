"""
Tunable constants for the park analytics engine.

AnalyticsOptions is a frozen value object so an engine instance never sees
its parameters change mid-run. Defaults reproduce the planning constants the
client apps were calibrated against.
"""

from __future__ import annotations

from dataclasses import dataclass

from services.waylight.config import settings


@dataclass(frozen=True)
class AnalyticsOptions:
    # Effective park minutes in a day before meals/breaks/transit are removed.
    park_day_minutes: int = 480
    # Share of park_day_minutes actually spent on attractions.
    park_day_utilization: float = 0.75
    # userPriorityWeight an attraction needs before it counts toward park time.
    priority_weight_cutoff: float = 0.7

    @property
    def effective_minutes_per_day(self) -> float:
        return self.park_day_minutes * self.park_day_utilization

    @classmethod
    def from_settings(cls) -> "AnalyticsOptions":
        return cls(
            park_day_minutes=settings.park_day_minutes,
            park_day_utilization=settings.park_day_utilization,
            priority_weight_cutoff=settings.priority_weight_cutoff,
        )


DEFAULT_OPTIONS = AnalyticsOptions()
