"""Spring transition dates from the PhenoCam archive."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pandas as pd

from phenocam_gdd.datasources.phenocam import client
from phenocam_gdd.datasources.phenocam.models import TransitionRecord
from phenocam_gdd.services.http import session

if TYPE_CHECKING:
    from phenocam_gdd.schemas import Site

REQUIRED_COLUMNS = ("direction", "gcc_value")


# =============================================================================
# Parsing
# =============================================================================


def parse_transition_dates(
    text: str,
    site: str,
    gcc_metric: str = client.DEFAULT_GCC_METRIC,
    threshold_pct: int = client.DEFAULT_THRESHOLD_PCT,
) -> list[TransitionRecord]:
    """Parse a PhenoCam transition-date CSV into one record per year.

    Only rising transitions of ``gcc_metric`` are kept. When a year has more
    than one rising transition (e.g. a second green-up after drought), the
    earliest is the spring transition.

    Args:
        text: CSV body; ``#`` lines are the file's metadata header.
        site: Site name stamped on every record.
        gcc_metric: Greenness index column value to select.
        threshold_pct: Which detection level to read (10, 25 or 50).

    Returns:
        Records sorted by year.

    Raises:
        ValueError: If the CSV lacks the expected columns.
    """
    frame = pd.read_csv(io.StringIO(text), comment="#")
    date_col = f"transition_{threshold_pct}"
    threshold_col = f"threshold_{threshold_pct}"
    missing = [c for c in (*REQUIRED_COLUMNS, date_col) if c not in frame.columns]
    if missing:
        msg = f"PhenoCam transition file for {site} is missing columns: {', '.join(missing)}"
        raise ValueError(msg)

    rising = frame[(frame["direction"] == client.RISING) & (frame["gcc_value"] == gcc_metric)]
    dates = pd.to_datetime(rising[date_col], errors="coerce")
    if threshold_col in rising.columns:
        thresholds = rising[threshold_col]
    else:
        thresholds = pd.Series(float(threshold_pct), index=rising.index)

    earliest: dict[int, TransitionRecord] = {}
    for ts, threshold in zip(dates, thresholds, strict=True):
        if pd.isna(ts):
            continue
        day = ts.date()
        record = TransitionRecord(
            site=site,
            year=day.year,
            doy=day.timetuple().tm_yday,
            date=day,
            threshold=float(threshold),
        )
        current = earliest.get(day.year)
        if current is None or record.date < current.date:
            earliest[day.year] = record

    return [earliest[year] for year in sorted(earliest)]


def transitions_to_frame(records: list[TransitionRecord]) -> pd.DataFrame:
    """Validation table with columns ``site, year, doy, threshold``."""
    return pd.DataFrame(
        [
            {"site": r.site, "year": r.year, "doy": r.doy, "threshold": r.threshold}
            for r in records
        ],
        columns=["site", "year", "doy", "threshold"],
    )


def transitions_to_dict(records: list[TransitionRecord]) -> list[dict[str, object]]:
    """JSON-compatible rows for the data store."""
    return [
        {
            "site": r.site,
            "year": r.year,
            "doy": r.doy,
            "date": r.date.isoformat(),
            "threshold": r.threshold,
        }
        for r in records
    ]


# =============================================================================
# Fetching
# =============================================================================


def fetch_transition_dates(
    site: Site,
    frequency: int = client.DEFAULT_FREQUENCY,
    gcc_metric: str = client.DEFAULT_GCC_METRIC,
    threshold_pct: int = client.DEFAULT_THRESHOLD_PCT,
) -> list[TransitionRecord]:
    """Download and parse spring transition dates for one site.

    Raises:
        requests.HTTPError: If the archive request fails.
    """
    url = client.transition_dates_url(site.name, site.veg_type, site.roi_id, frequency)
    resp = session.get(url)
    resp.raise_for_status()
    return parse_transition_dates(resp.text, site.name, gcc_metric, threshold_pct)
