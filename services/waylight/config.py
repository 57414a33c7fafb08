"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    environment: str = Field(default="development", pattern=r"^(development|staging|production|test)$")

    # Logging
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Park-day analytics
    # 8 effective park hours, reduced 25% for meals, breaks and transit.
    park_day_minutes: int = Field(default=480, gt=0)
    park_day_utilization: float = Field(default=0.75, gt=0.0, le=1.0)
    priority_weight_cutoff: float = Field(default=0.7, ge=0.0, le=2.0)

    # Lightning Lane
    default_group_rating: float = Field(default=3.0, ge=1.0, le=5.0)

    # Reports
    report_generated_by: str = "Waylight Trip Planner"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
