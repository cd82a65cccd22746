"""
Growing Degree Day (GDD) accumulation and the two-parameter spring model.

GDD measures accumulated heat above a base temperature. Spring leaf-out is
modelled as the first day on which the accumulated excess reaches a fixed
budget:

    gdd_daily[i] = max(0, T_mean[i] - threshold)
    predicted DOY = min{ i : sum(gdd_daily[1..i]) >= budget }

Two flavours live here:

  - Baseline accumulation with a fixed 5 deg C base, used to describe how much
    heat had accumulated by each observed transition date.
  - ``predict_transition_doy``: the fitted model, parameterised by
    (threshold, budget) and evaluated thousands of times by the optimizer.

All functions are pure and never touch I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from phenocam_gdd.phenology.dataset import is_complete_run, site_year_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from phenocam_gdd.schemas import ParameterVector

DEFAULT_BASE_TEMP_C = 5.0


@dataclass
class DailyGDD:
    """Baseline GDD result for a single day."""

    date: date
    tmean: float
    gdd: float
    accumulated: float


# ---------------------------------------------------------------------------
# Baseline accumulation
# ---------------------------------------------------------------------------


def compute_daily_gdd(tmean: float, base_temp_c: float = DEFAULT_BASE_TEMP_C) -> float:
    """Degree-days contributed by one day above a fixed base.

    Args:
        tmean: Daily mean temperature in deg C.
        base_temp_c: Base temperature (default 5 C).

    Returns:
        ``max(0, tmean - base)``; days at or below the base contribute 0.
        NaN for a missing day.
    """
    if math.isnan(tmean):
        return math.nan
    return max(0.0, tmean - base_temp_c)


def compute_accumulated_gdd(
    daily_temps: Iterable[tuple[date, float]],
    base_temp_c: float = DEFAULT_BASE_TEMP_C,
) -> list[DailyGDD]:
    """Running baseline GDD from a sequence of (date, tmean), ordered by date.

    A missing (NaN) day makes the accumulated value NaN from that day on.
    """
    results: list[DailyGDD] = []
    accumulated = 0.0
    for dt, tmean in daily_temps:
        gdd = compute_daily_gdd(tmean, base_temp_c)
        accumulated += gdd
        results.append(DailyGDD(date=dt, tmean=tmean, gdd=gdd, accumulated=accumulated))
    return results


def gdd_at_transition(
    drivers: pd.DataFrame,
    transitions: pd.DataFrame,
    base_temp_c: float = DEFAULT_BASE_TEMP_C,
) -> pd.DataFrame:
    """Accumulated baseline GDD reached on each observed transition date.

    Args:
        drivers: Columns ``site, year, doy, tmean``.
        transitions: Columns ``site, year, doy``.
        base_temp_c: Fixed base temperature.

    Returns:
        DataFrame with ``site, year, doy, gdd``. Transitions are dropped when
        their site-year has no drivers, when the drivers are not a complete
        run from DOY 1, or when the transition falls after the last driver
        day. ``gdd`` is NaN when a day on or before the transition is missing.
    """
    observed: dict[tuple[str, int], int] = {}
    for row in transitions.itertuples(index=False):
        if not np.isnan(float(row.doy)):
            observed[site_year_key(row.site, row.year)] = int(row.doy)

    rows: list[dict[str, object]] = []
    for (site, year), group in drivers.groupby(["site", "year"], sort=True):
        key = site_year_key(site, year)
        doy = observed.get(key)
        ordered = group.sort_values("doy")
        if doy is None or not is_complete_run(ordered["doy"].to_numpy(dtype=int)):
            continue
        if not 1 <= doy <= len(ordered):
            continue
        jan1 = date(key[1], 1, 1)
        daily = (
            (jan1 + timedelta(days=i), float(t))
            for i, t in enumerate(ordered["tmean"].iloc[:doy])
        )
        accumulated = compute_accumulated_gdd(daily, base_temp_c)[-1].accumulated
        rows.append({"site": key[0], "year": key[1], "doy": doy, "gdd": accumulated})
    return pd.DataFrame(rows, columns=["site", "year", "doy", "gdd"])


# ---------------------------------------------------------------------------
# Two-parameter model
# ---------------------------------------------------------------------------


def predict_transition_doy(
    temps: Sequence[float] | np.ndarray,
    params: ParameterVector,
) -> int | None:
    """Predict the spring transition day-of-year for one site-year.

    Args:
        temps: Daily mean temperatures ordered by day-of-year, starting Jan 1.
        params: ``threshold`` (deg C) and ``budget`` (degree-days).

    Returns:
        1-based day-of-year on which the running sum of
        ``max(0, temp - threshold)`` first reaches ``budget``, or None when it
        never does. A missing (NaN) day before the crossing also yields None:
        the sum is unknown from that day on.
    """
    values = np.asarray(temps, dtype=float)
    if values.size == 0:
        return None

    excess = np.maximum(values - params.threshold, 0.0)
    missing = np.isnan(values)
    # NaN in excess would make every later comparison False; make that explicit
    cumulative = np.cumsum(np.where(missing, 0.0, excess))
    reached = cumulative >= params.budget

    if not reached.any():
        return None
    crossing = int(np.argmax(reached))
    if missing[: crossing + 1].any():
        return None
    return crossing + 1
