"""GDD spring phenology model: prediction, objective, optimizer, spatial application.

Pure numerical code: no HTTP, no Prefect decorators, no store access
(the GeoTIFF helpers in ``spatial`` are the only file I/O).

Public API:
  - gdd: compute_daily_gdd, compute_accumulated_gdd, gdd_at_transition,
         predict_transition_doy
  - dataset: ModelDataset
  - objective: rmse_objective, predict_site_years, SENTINEL_RMSE
  - optimize: minimize, fit_parameters, STRATEGIES
  - spatial: predict_map, read_temperature_stack, read_doy_map, write_doy_map
"""

from phenocam_gdd.phenology.dataset import ModelDataset, SiteYear
from phenocam_gdd.phenology.gdd import (
    DEFAULT_BASE_TEMP_C,
    DailyGDD,
    compute_accumulated_gdd,
    compute_daily_gdd,
    gdd_at_transition,
    predict_transition_doy,
)
from phenocam_gdd.phenology.objective import (
    SENTINEL_RMSE,
    predict_all,
    predict_site_years,
    rmse_objective,
)
from phenocam_gdd.phenology.optimize import (
    DEFAULT_BUDGET,
    DEFAULT_INITIAL_GUESS,
    STRATEGIES,
    OptimizeOutcome,
    fit_parameters,
    minimize,
)
from phenocam_gdd.phenology.spatial import (
    DOY_NODATA,
    predict_map,
    read_doy_map,
    read_temperature_stack,
    write_doy_map,
)

__all__ = [
    "DEFAULT_BASE_TEMP_C",
    "DEFAULT_BUDGET",
    "DEFAULT_INITIAL_GUESS",
    "DOY_NODATA",
    "SENTINEL_RMSE",
    "STRATEGIES",
    "DailyGDD",
    "ModelDataset",
    "OptimizeOutcome",
    "SiteYear",
    "compute_accumulated_gdd",
    "compute_daily_gdd",
    "fit_parameters",
    "gdd_at_transition",
    "minimize",
    "predict_all",
    "predict_map",
    "predict_site_years",
    "predict_transition_doy",
    "read_doy_map",
    "read_temperature_stack",
    "rmse_objective",
    "write_doy_map",
]
