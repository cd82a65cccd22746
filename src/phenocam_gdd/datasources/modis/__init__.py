"""MODIS MCD12Q2 land-cover-dynamics green-up at a point.

Public API:
  - greenup: fetch_greenup, parse_greenup_subset
  - client: API URL, product and band names
"""

from phenocam_gdd.datasources.modis.client import GREENUP_BAND, MODIS_SUBSET_API, PRODUCT
from phenocam_gdd.datasources.modis.greenup import fetch_greenup, parse_greenup_subset

__all__ = [
    "GREENUP_BAND",
    "MODIS_SUBSET_API",
    "PRODUCT",
    "fetch_greenup",
    "parse_greenup_subset",
]
