"""PhenoCam archive URLs and shared constants.

Transition dates are published per site/ROI as CSV files in the data archive:
https://phenocam.nau.edu/data/archive/{site}/ROI/
"""

PHENOCAM_ARCHIVE = "https://phenocam.nau.edu/data/archive"

# 3-day aggregated product; the 1-day product is noisier
DEFAULT_FREQUENCY = 3

# Primary greenness index and detection level used for spring green-up
DEFAULT_GCC_METRIC = "gcc_90"
DEFAULT_THRESHOLD_PCT = 50
RISING = "rising"


def transition_dates_url(
    site: str,
    veg_type: str,
    roi_id: int,
    frequency: int = DEFAULT_FREQUENCY,
) -> str:
    """Build the URL of a site's transition-date CSV."""
    filename = f"{site}_{veg_type}_{roi_id:04d}_{frequency}day_transition_dates.csv"
    return f"{PHENOCAM_ARCHIVE}/{site}/ROI/{filename}"
