"""Cross-datasource comparisons and validity filters.

Dependency rule: analysis/ works on tables and arrays only. It never fetches
data and never fits the model.

Modules:
  - filters: explicit DOY validity rules, MODIS date decoding, year exclusion
  - comparison: agreement statistics between predictions and a reference
"""

from phenocam_gdd.analysis.comparison import compare_doy, compare_maps, join_with_reference
from phenocam_gdd.analysis.filters import (
    MAX_DOY,
    MIN_DOY,
    MODIS_FILL_VALUE,
    exclude_years,
    filter_valid_doy,
    mask_invalid_doy,
    modis_days_to_doy,
)

__all__ = [
    "MAX_DOY",
    "MIN_DOY",
    "MODIS_FILL_VALUE",
    "compare_doy",
    "compare_maps",
    "exclude_years",
    "filter_valid_doy",
    "join_with_reference",
    "mask_invalid_doy",
    "modis_days_to_doy",
]
