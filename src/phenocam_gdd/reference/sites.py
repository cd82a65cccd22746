"""Default PhenoCam sites with deciduous broadleaf ROIs used for model fitting."""

from __future__ import annotations

from phenocam_gdd.schemas import Site

# Deciduous broadleaf forest sites in the eastern US with long records
DEFAULT_SITES: tuple[Site, ...] = (
    Site(name="harvard", lat=42.5378, lon=-72.1715, veg_type="DB", roi_id=1000),
    Site(name="bartlettir", lat=44.0646, lon=-71.2881, veg_type="DB", roi_id=1000),
    Site(name="hubbardbrook", lat=43.9438, lon=-71.7010, veg_type="DB", roi_id=1000),
    Site(name="morganmonroe", lat=39.3231, lon=-86.4131, veg_type="DB", roi_id=1000),
    Site(name="umichbiological", lat=45.5598, lon=-84.7138, veg_type="DB", roi_id=1000),
)

SITES_BY_NAME: dict[str, Site] = {s.name: s for s in DEFAULT_SITES}
