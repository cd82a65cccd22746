"""
Prefect flow for fetching PhenoCam, Daymet and MODIS data for each site.

Run locally:
    python -m phenocam_gdd.flows.fetch

Run with Prefect dashboard:
    prefect server start &
    python -m phenocam_gdd.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from prefect import flow, task

from phenocam_gdd.config import get_settings
from phenocam_gdd.datasources import daymet, modis, phenocam
from phenocam_gdd.schemas import Site
from phenocam_gdd.store import DataStore

store = DataStore(get_settings().data_dir)

# Source archives are revised rarely; re-fetch monthly
RAW_TTL = timedelta(days=30)

PHENOCAM_DIR = Path("raw/phenocam")
DAYMET_DIR = Path("raw/daymet")
MODIS_DIR = Path("raw/modis")


def transitions_path(site_name: str) -> Path:
    return PHENOCAM_DIR / f"{site_name}.json"


def drivers_path(site_name: str) -> Path:
    return DAYMET_DIR / f"{site_name}.json"


def greenup_path(site_name: str) -> Path:
    return MODIS_DIR / f"{site_name}.json"


@task(name="fetch-transitions", retries=2, retry_delay_seconds=5)
def fetch_transitions(site: Site) -> list[dict[str, object]]:
    """Fetch rising gcc_90 transition dates for a site."""
    records = phenocam.fetch_transition_dates(site)
    return phenocam.transitions_to_dict(records)


@task(name="fetch-drivers", retries=2, retry_delay_seconds=5)
def fetch_drivers(site: Site, start_year: int, end_year: int) -> dict[str, list[Any]]:
    """Fetch Daymet daily temperatures for a site."""
    drivers = daymet.fetch_daily_temperature(site, start_year, end_year)
    return daymet.drivers_to_dict(drivers)


@task(name="fetch-greenup", retries=2, retry_delay_seconds=5)
def fetch_greenup(site: Site, start_year: int, end_year: int) -> list[dict[str, Any]]:
    """Fetch MODIS MCD12Q2 green-up DOY for a site."""
    frame = modis.fetch_greenup(site, start_year, end_year)
    return frame.to_dict(orient="records")


@task(name="save-raw")
def save_raw(path: Path, data: Any, source: str, site: Site) -> Path:
    """Cache fetched data under raw/ with a TTL."""
    return store.write(
        path,
        data,
        source=source,
        valid_until=datetime.now(UTC) + RAW_TTL,
        site=site.model_dump(),
    )


@flow(name="fetch-data", log_prints=True)
def fetch_all(
    sites: list[Site] | None = None,
    start_year: int | None = None,
    end_year: int | None = None,
) -> dict[str, Any]:
    """
    Fetch transitions, drivers and MODIS green-up for every site.

    Checks freshness before fetching and skips sources that are still valid.
    """
    settings = get_settings()
    sites = sites if sites is not None else settings.sites
    start_year = start_year if start_year is not None else settings.start_year
    end_year = end_year if end_year is not None else settings.end_year

    results: dict[str, Any] = {}
    for site in sites:
        summary: dict[str, int] = {}

        # --- PhenoCam transitions ---
        path = transitions_path(site.name)
        if store.is_fresh(path):
            print(f"[{site.name}] Transition dates are fresh, skipping fetch.")
            transitions = store.read(path) or []
        else:
            print(f"[{site.name}] Fetching PhenoCam transition dates...")
            transitions = fetch_transitions(site)
            save_raw(path, transitions, "phenocam.nau.edu", site)
        summary["transitions"] = len(transitions)

        # --- Daymet drivers ---
        path = drivers_path(site.name)
        if store.is_fresh(path):
            print(f"[{site.name}] Daymet drivers are fresh, skipping fetch.")
            drivers = store.read(path) or {}
        else:
            print(f"[{site.name}] Fetching Daymet temperatures {start_year}-{end_year}...")
            drivers = fetch_drivers(site, start_year, end_year)
            save_raw(path, drivers, "daymet.ornl.gov", site)
        summary["driver_days"] = len(drivers.get("doy", []))

        # --- MODIS green-up ---
        path = greenup_path(site.name)
        if store.is_fresh(path):
            print(f"[{site.name}] MODIS green-up is fresh, skipping fetch.")
            greenup = store.read(path) or []
        else:
            print(f"[{site.name}] Fetching MODIS MCD12Q2 green-up...")
            greenup = fetch_greenup(site, start_year, end_year)
            save_raw(path, greenup, "modis.ornl.gov", site)
        summary["greenup_years"] = len(greenup)

        print(f"[{site.name}] {summary}")
        results[site.name] = summary

    return results


if __name__ == "__main__":
    result = fetch_all()
    print(f"Flow complete: {result}")
