"""
Model dataset: drivers and observed transitions grouped by site-year.

The optimizer evaluates the objective thousands of times, so grouping happens
once here. Each site-year becomes one read-only temperature array ordered by
day-of-year, keyed by ``(site, year)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    import pandas as pd

SiteYear = tuple[str, int]

DRIVER_COLUMNS = ("site", "year", "doy", "tmean")
VALIDATION_COLUMNS = ("site", "year", "doy")


def _require_columns(frame: pd.DataFrame, columns: tuple[str, ...], name: str) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        msg = f"{name} table is missing columns: {', '.join(missing)}"
        raise ValueError(msg)


def is_complete_run(doys: np.ndarray) -> bool:
    """True when day-of-year values are exactly 1, 2, ..., n with no gaps."""
    if doys.size == 0:
        return False
    return bool(np.array_equal(doys, np.arange(1, doys.size + 1)))


def site_year_key(site: Any, year: Any) -> SiteYear:
    return (str(site), int(year))


@dataclass(frozen=True)
class ModelDataset:
    """Per-site-year drivers paired with observed transition DOYs.

    Attributes:
        drivers: ``(site, year) -> tmean`` arrays ordered from Jan 1.
        observed: ``(site, year) -> observed transition DOY``.
        rejected: Site-years dropped from the drivers because their daily
            record is not a complete run starting at DOY 1.
    """

    drivers: dict[SiteYear, np.ndarray]
    observed: dict[SiteYear, float]
    rejected: tuple[SiteYear, ...] = field(default=())

    @classmethod
    def from_frames(cls, drivers: pd.DataFrame, validation: pd.DataFrame) -> ModelDataset:
        """Group a drivers table and a validation table by (site, year).

        Args:
            drivers: Columns ``site, year, doy, tmean`` (extra columns ignored).
            validation: Columns ``site, year, doy`` (observed transition DOY).

        Raises:
            ValueError: If a required column is missing, or a site-year has
                more than one observed transition.
        """
        _require_columns(drivers, DRIVER_COLUMNS, "drivers")
        _require_columns(validation, VALIDATION_COLUMNS, "validation")

        grouped: dict[SiteYear, np.ndarray] = {}
        rejected: list[SiteYear] = []
        for (site, year), group in drivers.groupby(["site", "year"], sort=True):
            ordered = group.sort_values("doy")
            key = site_year_key(site, year)
            if not is_complete_run(ordered["doy"].to_numpy(dtype=int)):
                rejected.append(key)
                continue
            temps = ordered["tmean"].to_numpy(dtype=float).copy()
            temps.setflags(write=False)
            grouped[key] = temps

        observed: dict[SiteYear, float] = {}
        for row in validation.itertuples(index=False):
            if np.isnan(float(row.doy)):
                continue
            key = site_year_key(row.site, row.year)
            if key in observed:
                msg = f"validation table has more than one transition for site-year {key}"
                raise ValueError(msg)
            observed[key] = float(row.doy)

        return cls(drivers=grouped, observed=observed, rejected=tuple(rejected))

    @property
    def paired_keys(self) -> list[SiteYear]:
        """Site-years present in both tables, sorted."""
        return sorted(self.drivers.keys() & self.observed.keys())

    def __len__(self) -> int:
        return len(self.paired_keys)
