"""Daymet single-pixel API constants.

API docs: https://daymet.ornl.gov/web_services
"""

DAYMET_API = "https://daymet.ornl.gov/single-pixel/api/data"

# Daily variables requested; mean temperature is derived from these
DAILY_VARS = ["tmax", "tmin"]

# First year of the Daymet record
FIRST_YEAR = 1980
