"""Explicit validity filters for transition-date tables and DOY rasters.

Every value that gets discarded or converted is handled by a named function
with a named threshold, so no step silently caps or coerces a DOY inline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterable

    import pandas as pd

# Day-of-year values outside this range are not dates
MIN_DOY = 1
MAX_DOY = 366

# MCD12Q2 stores phenology dates as days since 1970-01-01; 32767 marks no data
MODIS_FILL_VALUE = 32767
MODIS_EPOCH = np.datetime64("1970-01-01", "D")


def filter_valid_doy(frame: pd.DataFrame, column: str = "doy") -> pd.DataFrame:
    """Keep rows whose ``column`` is a finite DOY in [MIN_DOY, MAX_DOY]."""
    values = frame[column]
    keep = values.notna() & (values >= MIN_DOY) & (values <= MAX_DOY)
    return frame.loc[keep].reset_index(drop=True)


def mask_invalid_doy(values: np.ndarray) -> np.ndarray:
    """Return a float copy with out-of-range DOYs replaced by NaN."""
    out = np.asarray(values, dtype=float).copy()
    with np.errstate(invalid="ignore"):
        out[(out < MIN_DOY) | (out > MAX_DOY)] = np.nan
    return out


def modis_days_to_doy(
    values: np.ndarray | Iterable[float],
    years: np.ndarray | Iterable[int] | None = None,
) -> np.ndarray:
    """Convert MCD12Q2 days-since-epoch values to day-of-year.

    Args:
        values: Raw band values; fill values and NaN become NaN.
        years: Product year of each value. When given, the DOY counts from
            Jan 1 of that year, so a green-up dated in the previous December
            comes out <= 0 and is dropped by ``filter_valid_doy``. Without
            it, the DOY is relative to the date's own calendar year.
    """
    raw = np.asarray(values, dtype=float)
    invalid = np.isnan(raw) | (raw == MODIS_FILL_VALUE) | (raw < 0)
    days = np.where(invalid, 0, raw).astype("int64")

    dates = MODIS_EPOCH + days.astype("timedelta64[D]")
    if years is None:
        year_start = dates.astype("datetime64[Y]").astype("datetime64[D]")
    else:
        offsets = np.asarray(years, dtype="int64") - 1970
        year_start = offsets.astype("datetime64[Y]").astype("datetime64[D]")
    doy = (dates - year_start).astype("int64") + 1
    return np.where(invalid, np.nan, doy.astype(float))


def exclude_years(frame: pd.DataFrame, years: Iterable[int]) -> pd.DataFrame:
    """Drop rows for an explicit list of years.

    Nothing is excluded by default; outlier years have to be named by the
    caller for each comparison.
    """
    excluded = set(years)
    if not excluded:
        return frame
    return frame.loc[~frame["year"].isin(excluded)].reset_index(drop=True)
