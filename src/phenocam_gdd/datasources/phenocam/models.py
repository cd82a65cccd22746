"""PhenoCam transition-date records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True)
class TransitionRecord:
    """One spring (rising) transition of the greenness index for a site-year."""

    site: str
    year: int
    doy: int
    date: date
    threshold: float
