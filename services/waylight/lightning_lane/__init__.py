# lightning_lane package — per-day Multi Pass / Single Pass strategy
from services.waylight.lightning_lane.service import (
    CostAnalysis,
    LightningLaneRecommendation,
    LightningLaneService,
    LightningLaneStrategy,
    TimeSavings,
)
from services.waylight.lightning_lane.tables import DEFAULT_TABLES, LightningLaneTables

__all__ = [
    "DEFAULT_TABLES",
    "CostAnalysis",
    "LightningLaneRecommendation",
    "LightningLaneService",
    "LightningLaneStrategy",
    "LightningLaneTables",
    "TimeSavings",
]
