"""Prefect flows for the fetch → fit → map pipeline.

Flows:
  - fetch.fetch_all: PhenoCam, Daymet and MODIS data per site into raw/
  - fit.fit_all: optimize the GDD model and save derived/fit.json
  - spatial.predict_map_all: apply the fitted model to a GeoTIFF stack
"""
