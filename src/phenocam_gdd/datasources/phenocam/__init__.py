"""PhenoCam transition dates (observed spring green-up).

Public API:
  - models: TransitionRecord
  - transitions: fetch_transition_dates, parse_transition_dates,
                 transitions_to_frame, transitions_to_dict
  - client: archive URL builder and detection defaults
"""

from phenocam_gdd.datasources.phenocam.client import (
    DEFAULT_FREQUENCY,
    DEFAULT_GCC_METRIC,
    DEFAULT_THRESHOLD_PCT,
    PHENOCAM_ARCHIVE,
    transition_dates_url,
)
from phenocam_gdd.datasources.phenocam.models import TransitionRecord
from phenocam_gdd.datasources.phenocam.transitions import (
    fetch_transition_dates,
    parse_transition_dates,
    transitions_to_dict,
    transitions_to_frame,
)

__all__ = [
    "DEFAULT_FREQUENCY",
    "DEFAULT_GCC_METRIC",
    "DEFAULT_THRESHOLD_PCT",
    "PHENOCAM_ARCHIVE",
    "TransitionRecord",
    "fetch_transition_dates",
    "parse_transition_dates",
    "transition_dates_url",
    "transitions_to_dict",
    "transitions_to_frame",
]
