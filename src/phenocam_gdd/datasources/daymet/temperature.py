"""Daily mean temperature from the Daymet single-pixel API."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

import pandas as pd

from phenocam_gdd.datasources.daymet.client import DAILY_VARS, DAYMET_API, FIRST_YEAR
from phenocam_gdd.services.http import session

if TYPE_CHECKING:
    from phenocam_gdd.schemas import Site

DRIVER_COLUMNS = ["site", "year", "doy", "date", "tmax", "tmin", "tmean"]


def _header_line(lines: list[str]) -> int:
    """Index of the ``year,yday,...`` row that follows Daymet's free-text preamble."""
    for i, line in enumerate(lines):
        if line.startswith("year,"):
            return i
    msg = "Daymet response has no 'year,yday,...' header row"
    raise ValueError(msg)


def parse_daymet_csv(text: str, site: str) -> pd.DataFrame:
    """Parse a Daymet single-pixel CSV into a drivers table.

    Column units such as ``tmax (deg c)`` are stripped. Daily mean temperature
    is the average of tmax and tmin.

    Returns:
        DataFrame with ``DRIVER_COLUMNS``, sorted by year and day-of-year.

    Raises:
        ValueError: If the header row or a temperature column is missing.
    """
    lines = text.splitlines()
    start = _header_line(lines)
    frame = pd.read_csv(io.StringIO("\n".join(lines[start:])))
    frame.columns = [c.split(" (")[0].strip() for c in frame.columns]

    missing = [c for c in ("year", "yday", *DAILY_VARS) if c not in frame.columns]
    if missing:
        msg = f"Daymet response for {site} is missing columns: {', '.join(missing)}"
        raise ValueError(msg)

    frame = frame.rename(columns={"yday": "doy"})
    frame["year"] = frame["year"].astype(int)
    frame["doy"] = frame["doy"].astype(int)
    frame["date"] = pd.to_datetime(
        frame["year"].astype(str) + frame["doy"].astype(str).str.zfill(3), format="%Y%j"
    ).dt.date
    frame["tmean"] = (frame["tmax"] + frame["tmin"]) / 2
    frame["site"] = site
    return frame[DRIVER_COLUMNS].sort_values(["year", "doy"]).reset_index(drop=True)


def fetch_daily_temperature(site: Site, start_year: int, end_year: int) -> pd.DataFrame:
    """Download Daymet tmax/tmin for a site and derive daily mean temperature.

    Args:
        site: Site whose lat/lon is queried.
        start_year: First calendar year (inclusive, clamped to the record start).
        end_year: Last calendar year (inclusive).

    Raises:
        requests.HTTPError: If the API request fails.
    """
    params: dict[str, Any] = {
        "lat": site.lat,
        "lon": site.lon,
        "vars": ",".join(DAILY_VARS),
        "start": f"{max(start_year, FIRST_YEAR)}-01-01",
        "end": f"{end_year}-12-31",
        "format": "csv",
    }
    resp = session.get(DAYMET_API, params=params)
    resp.raise_for_status()
    return parse_daymet_csv(resp.text, site.name)


def drivers_to_dict(drivers: pd.DataFrame) -> dict[str, list[Any]]:
    """Column-oriented JSON form of a drivers table for the data store."""
    out = drivers[DRIVER_COLUMNS].copy()
    out["date"] = out["date"].map(lambda d: d.isoformat())
    return {col: out[col].tolist() for col in DRIVER_COLUMNS}


def drivers_from_dict(data: dict[str, list[Any]]) -> pd.DataFrame:
    """Inverse of ``drivers_to_dict``."""
    frame = pd.DataFrame({col: data.get(col, []) for col in DRIVER_COLUMNS})
    frame["date"] = pd.to_datetime(frame["date"]).dt.date
    return frame
