"""
Apply a fitted GDD model to a gridded temperature stack.

The stack is a 3-D array ``(days, rows, cols)``: one layer per day-of-year
starting Jan 1. Each pixel is an independent site-year, evaluated with the
same rule as ``gdd.predict_transition_doy``. Pixels that never reach the
budget, or hit a missing day before doing so, come out as NaN.

GeoTIFF helpers read such a stack (one band per day) and write the resulting
day-of-year map. Reprojection is not done here: the map is produced on the
stack's own grid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import rasterio

if TYPE_CHECKING:
    from pathlib import Path

    from phenocam_gdd.schemas import ParameterVector

# Written to the output map where the prediction is undefined
DOY_NODATA = -9999.0


def predict_map(stack: np.ndarray, params: ParameterVector) -> np.ndarray:
    """Predicted transition DOY for every pixel of a temperature stack.

    Args:
        stack: Daily mean temperature, shape ``(days, rows, cols)``.
        params: Fitted ``threshold`` and ``budget``.

    Returns:
        Float array ``(rows, cols)`` of 1-based DOY, NaN where undefined.

    Raises:
        ValueError: If ``stack`` is not 3-dimensional.
    """
    values = np.asarray(stack, dtype=float)
    if values.ndim != 3:
        msg = f"Temperature stack must be (days, rows, cols), got shape {values.shape}"
        raise ValueError(msg)
    if values.shape[0] == 0:
        return np.full(values.shape[1:], np.nan)

    missing = np.isnan(values)
    excess = np.where(missing, 0.0, np.maximum(values - params.threshold, 0.0))
    cumulative = np.cumsum(excess, axis=0)
    reached = cumulative >= params.budget

    any_reached = reached.any(axis=0)
    crossing = np.argmax(reached, axis=0)

    # A missing day on or before the crossing leaves the sum unknown
    days = np.arange(values.shape[0])[:, np.newaxis, np.newaxis]
    gap_before = (missing & (days <= crossing[np.newaxis, :, :])).any(axis=0)

    doy = (crossing + 1).astype(float)
    doy[~any_reached | gap_before] = np.nan
    return doy


def read_temperature_stack(
    path: Path, nodata: float | None = None
) -> tuple[np.ndarray, dict[str, Any]]:
    """Read a multi-band GeoTIFF as a ``(days, rows, cols)`` float stack.

    Args:
        path: Raster with one band per day-of-year, band 1 = Jan 1.
        nodata: Override for the file's nodata value.

    Returns:
        Tuple of (stack with nodata replaced by NaN, rasterio profile).
    """
    with rasterio.open(path) as src:
        stack = src.read().astype(np.float64)
        profile = dict(src.profile)
        fill = nodata if nodata is not None else src.nodata
    if fill is not None:
        stack[stack == fill] = np.nan
    return stack, profile


def read_doy_map(path: Path) -> np.ndarray:
    """Read band 1 of a raster as float with nodata replaced by NaN."""
    with rasterio.open(path) as src:
        band = src.read(1).astype(np.float64)
        fill = src.nodata
    if fill is not None:
        band[band == fill] = np.nan
    return band


def write_doy_map(path: Path, doy_map: np.ndarray, profile: dict[str, Any]) -> Path:
    """Write a single-band float32 DOY map, NaN stored as ``DOY_NODATA``."""
    out_profile = dict(profile)
    out_profile.update(count=1, dtype="float32", nodata=DOY_NODATA)
    data = np.where(np.isnan(doy_map), DOY_NODATA, doy_map).astype(np.float32)

    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(path, "w", **out_profile) as dst:
        dst.write(data, 1)
    return path
