"""phenocam-gdd - growing degree day spring phenology fitted to PhenoCam.

Architecture::

    datasources/   PhenoCam transition dates, Daymet temperatures, MODIS green-up
    store.py       JSON cache with TTL (raw → derived)
    phenology/     GDD model, RMSE objective, bounded optimizer, raster application
    analysis/      DOY filters and agreement statistics against MODIS
    flows/         Prefect orchestration (fetch, fit, predict-map)
    services/      Shared HTTP client with retry

Data flow: datasources → store → phenology (fit) → analysis → store/derived

The ``phenology`` package is the numerical core and can be used on its own
with any drivers/validation tables.
"""

__version__ = "0.1.0"

from phenocam_gdd.config import Settings
from phenocam_gdd.schemas import FitResult, ParameterBounds, ParameterVector

__all__ = ["FitResult", "ParameterBounds", "ParameterVector", "Settings", "__version__"]
