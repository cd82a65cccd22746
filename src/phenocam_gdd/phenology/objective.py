"""RMSE objective over all site-years of a ``ModelDataset``."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from phenocam_gdd.phenology.gdd import predict_transition_doy

if TYPE_CHECKING:
    from phenocam_gdd.phenology.dataset import ModelDataset, SiteYear
    from phenocam_gdd.schemas import ParameterVector

# Returned when no site-year yields a valid prediction. Finite so the
# optimizer moves away from the region instead of treating NaN as a minimum.
SENTINEL_RMSE = 9999.0


def predict_all(params: ParameterVector, dataset: ModelDataset) -> dict[SiteYear, int | None]:
    """Run the GDD model for every site-year in the drivers."""
    return {key: predict_transition_doy(temps, params) for key, temps in dataset.drivers.items()}


def rmse_objective(params: ParameterVector, dataset: ModelDataset) -> float:
    """Root-mean-square error between predicted and observed transition DOYs.

    Site-years present in only one table, or with an undefined prediction,
    are left out. Returns ``SENTINEL_RMSE`` when nothing is left.
    """
    squared: list[float] = []
    for key in dataset.paired_keys:
        predicted = predict_transition_doy(dataset.drivers[key], params)
        if predicted is None:
            continue
        squared.append((predicted - dataset.observed[key]) ** 2)

    if not squared:
        return SENTINEL_RMSE
    return math.sqrt(sum(squared) / len(squared))


def predict_site_years(params: ParameterVector, dataset: ModelDataset) -> pd.DataFrame:
    """Per-site-year predictions joined with observations.

    Returns:
        DataFrame with ``site, year, predicted, observed``. ``predicted`` is NaN
        when the budget is never reached; ``observed`` is NaN for site-years
        without a transition record.
    """
    predictions = predict_all(params, dataset)
    rows = [
        {
            "site": site,
            "year": year,
            "predicted": np.nan if doy is None else float(doy),
            "observed": dataset.observed.get((site, year), np.nan),
        }
        for (site, year), doy in sorted(predictions.items())
    ]
    return pd.DataFrame(rows, columns=["site", "year", "predicted", "observed"])
