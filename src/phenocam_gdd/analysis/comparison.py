"""Compare model predictions with an independent phenology product.

Point comparison joins per-site-year predictions with MODIS green-up (or the
PhenoCam observations themselves) on ``(site, year)``. Map comparison pairs
pixels of two DOY rasters on the same grid. Both reduce to paired arrays
summarised by ``compare_doy``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from scipy import stats

from phenocam_gdd.schemas import AgreementStats

if TYPE_CHECKING:
    import pandas as pd

# Fewer pairs than this and a regression line is meaningless
MIN_PAIRS_FOR_REGRESSION = 3


def compare_doy(predicted: np.ndarray, reference: np.ndarray) -> AgreementStats:
    """Agreement statistics over pairs where both values are finite.

    Args:
        predicted: Model DOYs.
        reference: Reference DOYs, same shape as ``predicted``.

    Returns:
        ``AgreementStats``; correlation and regression fields stay None with
        too few pairs or when either side has no variance.

    Raises:
        ValueError: If the shapes differ.
    """
    pred = np.asarray(predicted, dtype=float).ravel()
    ref = np.asarray(reference, dtype=float).ravel()
    if pred.shape != ref.shape:
        msg = f"Cannot compare arrays of different sizes: {pred.shape} vs {ref.shape}"
        raise ValueError(msg)

    paired = np.isfinite(pred) & np.isfinite(ref)
    pred, ref = pred[paired], ref[paired]
    n = int(pred.size)
    if n == 0:
        return AgreementStats(n=0)

    diff = pred - ref
    result = AgreementStats(
        n=n,
        rmse=math.sqrt(float(np.mean(diff**2))),
        bias=float(np.mean(diff)),
    )
    if n < MIN_PAIRS_FOR_REGRESSION or np.ptp(pred) == 0 or np.ptp(ref) == 0:
        return result

    fit = stats.linregress(ref, pred)
    return result.model_copy(
        update={
            "r": float(fit.rvalue),
            "slope": float(fit.slope),
            "intercept": float(fit.intercept),
        }
    )


def compare_maps(predicted_map: np.ndarray, reference_map: np.ndarray) -> AgreementStats:
    """Pixel-wise agreement between two DOY maps on the same grid."""
    if np.shape(predicted_map) != np.shape(reference_map):
        msg = (
            f"Maps must share a grid: {np.shape(predicted_map)} vs {np.shape(reference_map)}"
        )
        raise ValueError(msg)
    return compare_doy(predicted_map, reference_map)


def join_with_reference(predictions: pd.DataFrame, reference: pd.DataFrame) -> pd.DataFrame:
    """Inner-join site-year predictions with a reference DOY table.

    Args:
        predictions: Columns ``site, year, predicted``.
        reference: Columns ``site, year, doy``.

    Returns:
        DataFrame with ``site, year, predicted, reference``.
    """
    ref = reference[["site", "year", "doy"]].rename(columns={"doy": "reference"})
    joined = predictions[["site", "year", "predicted"]].merge(ref, on=["site", "year"])
    return joined.sort_values(["site", "year"]).reset_index(drop=True)
