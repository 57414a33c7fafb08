"""
Static Lightning Lane lookup tables.

High-demand ids, historical base waits, typical sell-out times and
Individual Lightning Lane prices, plus the Lightning Lane Multi Pass
(Genie+) per-person day pricing. Kept in one frozen structure so the service
can be handed a different set in tests without touching engine logic.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LightningLaneTables:
    """Complete lookup configuration for LightningLaneService."""
    high_demand_ids: frozenset[str]
    base_wait_minutes: dict[str, int]  # attraction_id -> typical standby wait
    sell_out_times: dict[str, str]  # attraction_id -> "11:00 AM"
    individual_costs: dict[str, int]  # attraction_id -> USD per person
    default_base_wait: int = 50
    default_individual_cost: int = 15
    multi_pass_base_price: int = 25
    weekend_surcharge: int = 8
    weekday_surcharge: int = 2
    weekend_days: frozenset[int] = field(default_factory=lambda: frozenset({5, 6}))  # Sat, Sun

    def is_high_demand(self, attraction_id: str) -> bool:
        return attraction_id in self.high_demand_ids

    def base_wait(self, attraction_id: str) -> int:
        return self.base_wait_minutes.get(attraction_id, self.default_base_wait)

    def sell_out_time(self, attraction_id: str) -> str | None:
        return self.sell_out_times.get(attraction_id)

    def individual_cost(self, attraction_id: str) -> int:
        return self.individual_costs.get(attraction_id, self.default_individual_cost)

    def multi_pass_price(self, day: dt.date) -> int:
        """Per-person Multi Pass price for ``day``."""
        if day.weekday() in self.weekend_days:
            return self.multi_pass_base_price + self.weekend_surcharge
        return self.multi_pass_base_price + self.weekday_surcharge


DEFAULT_TABLES = LightningLaneTables(
    high_demand_ids=frozenset({
        "space-mountain",
        "seven-dwarfs-mine-train",
        "guardians-of-the-galaxy",
        "rise-of-the-resistance",
        "avatar-flight-of-passage",
        "expedition-everest",
    }),
    base_wait_minutes={
        "space-mountain": 75,
        "seven-dwarfs-mine-train": 90,
        "haunted-mansion": 45,
        "pirates-of-the-caribbean": 35,
        "big-thunder-mountain": 60,
        "splash-mountain": 65,
        "guardians-of-the-galaxy": 85,
        "test-track": 70,
        "rise-of-the-resistance": 120,
        "millennium-falcon": 80,
        "avatar-flight-of-passage": 100,
        "expedition-everest": 70,
    },
    sell_out_times={
        "seven-dwarfs-mine-train": "11:00 AM",
        "rise-of-the-resistance": "10:30 AM",
        "avatar-flight-of-passage": "11:30 AM",
        "guardians-of-the-galaxy": "12:00 PM",
    },
    individual_costs={
        "seven-dwarfs-mine-train": 12,
        "rise-of-the-resistance": 20,
        "avatar-flight-of-passage": 14,
        "guardians-of-the-galaxy": 14,
        "tron-lightcycle-run": 20,
    },
)
