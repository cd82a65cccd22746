"""MCD12Q2 green-up dates for a single pixel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pandas as pd

from phenocam_gdd.analysis.filters import filter_valid_doy, modis_days_to_doy
from phenocam_gdd.datasources.modis import client
from phenocam_gdd.services.http import session

if TYPE_CHECKING:
    from phenocam_gdd.schemas import Site


def parse_greenup_subset(payload: dict[str, Any], site: str) -> pd.DataFrame:
    """Turn a subset API response into a reference DOY table.

    Each ``subset`` entry is one product year; the centre pixel is used.
    Fill values and dates outside the product year are dropped.

    Returns:
        DataFrame with ``site, year, doy``.
    """
    years: list[int] = []
    raw: list[float] = []
    for entry in payload.get("subset", []):
        data = entry.get("data") or []
        calendar_date = entry.get("calendar_date", "")
        if not data or not calendar_date:
            continue
        years.append(int(calendar_date[:4]))
        raw.append(float(data[len(data) // 2]))

    frame = pd.DataFrame(
        {"site": site, "year": years, "doy": modis_days_to_doy(raw, years)},
        columns=["site", "year", "doy"],
    )
    return filter_valid_doy(frame)


def _year_chunks(start_year: int, end_year: int) -> list[tuple[int, int]]:
    step = client.MAX_DATES_PER_REQUEST
    return [(y, min(y + step - 1, end_year)) for y in range(start_year, end_year + 1, step)]


def fetch_greenup(site: Site, start_year: int, end_year: int) -> pd.DataFrame:
    """Fetch MCD12Q2 green-up DOY at a site for a range of years.

    Raises:
        requests.HTTPError: If any subset request fails.
    """
    url = f"{client.MODIS_SUBSET_API}/{client.PRODUCT}/subset"
    frames: list[pd.DataFrame] = []
    for first, last in _year_chunks(start_year, end_year):
        params: dict[str, Any] = {
            "latitude": site.lat,
            "longitude": site.lon,
            "band": client.GREENUP_BAND,
            "startDate": f"A{first}001",
            "endDate": f"A{last}365",
            "kmAboveBelow": 0,
            "kmLeftRight": 0,
        }
        resp = session.get(url, params=params, headers={"Accept": "application/json"})
        resp.raise_for_status()
        frames.append(parse_greenup_subset(resp.json(), site.name))

    if not frames:
        return pd.DataFrame(columns=["site", "year", "doy"])
    return pd.concat(frames, ignore_index=True)
