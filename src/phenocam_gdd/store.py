"""Data store with freshness-aware caching.

Two tiers under a base directory:
  - raw/: Fetched source data (PhenoCam transitions, Daymet drivers, MODIS
    green-up). Cached with a ``valid_until`` so re-runs skip the network.
  - derived/: Fit results, per-site-year predictions and DOY maps. Always
    rewritten by the flows.

JSON files are wrapped in a ``{"meta": ..., "data": ...}`` envelope. Rasters
keep their native GeoTIFF format with a sidecar ``.meta.json``.
"""

from __future__ import annotations

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any


def _sidecar(full: Path) -> Path:
    return full.with_suffix(full.suffix + ".meta.json")


def _load_json(full: Path) -> dict[str, Any]:
    with full.open() as f:
        loaded: dict[str, Any] = json.load(f)
    return loaded


def _build_meta(
    source: str, valid_until: datetime | None, params: dict[str, Any]
) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "source": source,
        "fetched_at": datetime.now(UTC).isoformat(),
    }
    if valid_until is not None:
        meta["valid_until"] = valid_until.isoformat()
    meta.update(params)
    return meta


class DataStore:
    """Reads and writes cached pipeline data with TTL metadata."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.raw = base_dir / "raw"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any:
        """Return the ``data`` payload of an enveloped JSON file, or None if missing."""
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Return the full envelope (meta + data), or None if missing."""
        full = self._resolve(path)
        return _load_json(full) if full.exists() else None

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write ``data`` wrapped in a metadata envelope.

        Args:
            path: Relative path under the base (e.g. ``raw/daymet/harvard.json``).
            data: JSON-serializable payload.
            source: Origin of the data (e.g. ``"daymet.ornl.gov"``).
            valid_until: Expiry timestamp; None means never fresh.
            **params: Extra metadata (site, years, optimizer settings, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        envelope = {"meta": _build_meta(source, valid_until, params), "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)
        return full

    def write_file(
        self,
        path: Path,
        src: Path,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Copy a binary file (e.g. a GeoTIFF) into the store with sidecar metadata."""
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        if src.resolve() != full.resolve():
            shutil.copy2(src, full)

        with _sidecar(full).open("w") as f:
            json.dump({"meta": _build_meta(source, valid_until, params)}, f, indent=2)
        return full

    def file_path(self, path: Path) -> Path | None:
        """Absolute path of a stored file, or None if missing."""
        full = self._resolve(path)
        return full if full.exists() else None

    def read_meta(self, path: Path) -> dict[str, Any]:
        """Metadata from a sidecar ``.meta.json`` or a JSON envelope."""
        full = self._resolve(path)
        if _sidecar(full).exists():
            return dict(_load_json(_sidecar(full)).get("meta", {}))
        if full.suffix == ".json" and full.exists():
            return dict(_load_json(full).get("meta", {}))
        return {}

    def is_fresh(self, path: Path) -> bool:
        """True if the file exists and its ``valid_until`` is in the future."""
        if self.file_path(path) is None:
            return False
        valid_until = self.read_meta(path).get("valid_until")
        if valid_until is None:
            return False
        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    def _resolve(self, path: Path) -> Path:
        full = path if path.is_absolute() else self.base / path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
