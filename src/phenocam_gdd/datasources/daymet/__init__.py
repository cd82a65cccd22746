"""Daymet daily temperature drivers (single pixel, 1 km).

Public API:
  - temperature: fetch_daily_temperature, parse_daymet_csv,
                 drivers_to_dict, drivers_from_dict
  - client: API URL and variable list
"""

from phenocam_gdd.datasources.daymet.client import DAILY_VARS, DAYMET_API
from phenocam_gdd.datasources.daymet.temperature import (
    DRIVER_COLUMNS,
    drivers_from_dict,
    drivers_to_dict,
    fetch_daily_temperature,
    parse_daymet_csv,
)

__all__ = [
    "DAILY_VARS",
    "DAYMET_API",
    "DRIVER_COLUMNS",
    "drivers_from_dict",
    "drivers_to_dict",
    "fetch_daily_temperature",
    "parse_daymet_csv",
]
