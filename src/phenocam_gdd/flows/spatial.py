"""
Prefect flow that applies the fitted GDD model to a temperature raster stack.

The stack is a multi-band GeoTIFF, one band per day-of-year from Jan 1
(e.g. the first 180 days of gridded Daymet mean temperature). The output is a
single-band GeoTIFF of predicted transition DOY on the same grid.

Run locally:
    python -m phenocam_gdd.flows.spatial path/to/tmean_stack.tif
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import numpy as np
from prefect import flow, task

from phenocam_gdd.analysis.comparison import compare_maps
from phenocam_gdd.analysis.filters import mask_invalid_doy, modis_days_to_doy
from phenocam_gdd.config import get_settings
from phenocam_gdd.flows import fit
from phenocam_gdd.phenology.spatial import (
    predict_map,
    read_doy_map,
    read_temperature_stack,
    write_doy_map,
)
from phenocam_gdd.schemas import ParameterVector
from phenocam_gdd.store import DataStore

store = DataStore(get_settings().data_dir)

MAPS_DIR = Path("derived/maps")


@task(name="predict-doy-map")
def predict_doy_map(
    stack_path: Path, params: ParameterVector, nodata: float | None = None
) -> tuple[np.ndarray, dict[str, Any]]:
    """Read the stack and evaluate the model for every pixel."""
    stack, profile = read_temperature_stack(stack_path, nodata)
    return predict_map(stack, params), profile


@task(name="load-reference-map")
def load_reference_map(path: Path, modis_year: int | None = None) -> np.ndarray:
    """Load a reference DOY raster.

    With ``modis_year`` the raster holds raw MCD12Q2 days-since-epoch values
    that are decoded relative to Jan 1 of that year.
    """
    band = read_doy_map(path)
    if modis_year is not None:
        band = modis_days_to_doy(band, np.full(band.shape, modis_year))
    return mask_invalid_doy(band)


@flow(name="predict-map", log_prints=True)
def predict_map_all(
    stack_path: Path,
    output_name: str | None = None,
    reference_path: Path | None = None,
    modis_year: int | None = None,
    nodata: float | None = None,
) -> dict[str, Any]:
    """
    Write a predicted transition-DOY map for a temperature stack.

    Uses the parameters saved by the fit flow. Optionally compares the map
    with a reference raster on the same grid.
    """
    params = fit.load_fitted_parameters()
    if params is None:
        print("No fitted parameters found. Run fit flow first.")
        return {"error": "no fit"}

    print(
        f"Applying threshold={params.threshold:.2f} C, budget={params.budget:.1f} "
        f"to {stack_path}..."
    )
    doy_map, profile = predict_doy_map(stack_path, params, nodata)
    valid = int(np.isfinite(doy_map).sum())
    print(f"Predicted {valid} of {doy_map.size} pixels")

    name = output_name or f"{Path(stack_path).stem}_doy.tif"
    output_path = write_doy_map(store.base / MAPS_DIR / name, doy_map, profile)
    store.write_file(
        MAPS_DIR / name,
        output_path,
        source="phenocam-gdd",
        parameters=params.model_dump(),
        stack=str(stack_path),
    )
    print(f"Saved DOY map to {output_path}")

    result: dict[str, Any] = {
        "pixels": int(doy_map.size),
        "valid_pixels": valid,
        "output": str(output_path),
    }
    if reference_path is not None:
        reference = load_reference_map(reference_path, modis_year)
        stats = compare_maps(doy_map, reference)
        print(f"Reference agreement: {stats.model_dump()}")
        result["comparison"] = stats.model_dump()
    return result


if __name__ == "__main__":
    result = predict_map_all(Path(sys.argv[1]))
    print(f"Flow complete: {result}")
