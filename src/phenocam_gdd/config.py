"""
Application settings.

Values come from environment variables prefixed with ``PHENOCAM_GDD_`` (or a
local ``.env`` file). Complex fields such as ``sites`` are given as JSON::

    PHENOCAM_GDD_OPTIMIZER_BUDGET=2000
    PHENOCAM_GDD_SITES='[{"name": "harvard", "lat": 42.5378, "lon": -72.1715}]'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from phenocam_gdd.reference.sites import DEFAULT_SITES
from phenocam_gdd.schemas import Site


class Settings(BaseSettings):
    """Runtime configuration for the fetch/fit/map pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="PHENOCAM_GDD_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "phenocam-gdd"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Path("data")

    # Sites and years to fetch and fit
    sites: list[Site] = Field(default_factory=lambda: list(DEFAULT_SITES))
    start_year: int = 2008
    end_year: int = 2020

    # Baseline accumulation (fixed base, deg C)
    base_temp_c: float = 5.0

    # Years left out of the MODIS comparison (none unless named)
    exclude_years: list[int] = Field(default_factory=list)

    # Optimizer
    optimizer_strategy: str = "annealing"
    optimizer_budget: int = Field(default=3000, gt=0, description="Max objective evaluations")
    optimizer_seed: int | None = 1
    initial_threshold: float = 5.0
    initial_budget: float = 150.0


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
