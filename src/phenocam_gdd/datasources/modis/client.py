"""ORNL DAAC MODIS/VIIRS subset REST API constants.

API docs: https://modis.ornl.gov/data/modis_webservice.html
"""

MODIS_SUBSET_API = "https://modis.ornl.gov/rst/api/v1"

PRODUCT = "MCD12Q2"
# Onset of greenness for the first vegetation cycle of the year
GREENUP_BAND = "Greenup.Num_Modes_01"

# The subset endpoint returns at most this many dates per request
MAX_DATES_PER_REQUEST = 10
