"""
Domain models for phenocam-gdd.

Pydantic models shared across the datasources, the model-fitting core and the
flows. Dataclasses that only mirror an external payload live next to their
datasource instead.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# =============================================================================
# Sites
# =============================================================================


class Site(BaseModel):
    """A PhenoCam site and the region of interest used for its transition dates."""

    model_config = {"frozen": True, "str_strip_whitespace": True}

    name: str = Field(..., description="PhenoCam site name, e.g. 'harvard'")
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    veg_type: str = Field(default="DB", description="Vegetation type code (DB, EN, GR, ...)")
    roi_id: int = Field(default=1000, description="Region-of-interest identifier")


# =============================================================================
# Model parameters
# =============================================================================

# Validated operating range of the two-parameter GDD model
THRESHOLD_BOUNDS = (-10.0, 45.0)
BUDGET_BOUNDS = (0.0, 500.0)


class ParameterVector(BaseModel):
    """The two parameters of the GDD model.

    No bounds are enforced here: the model evaluates whatever it is given.
    The optimizer keeps candidates inside ``ParameterBounds``.
    """

    model_config = {"frozen": True}

    threshold: float = Field(..., description="Base temperature T in deg C")
    budget: float = Field(..., description="Accumulated degree-days D to reach")

    def as_tuple(self) -> tuple[float, float]:
        return (self.threshold, self.budget)

    @classmethod
    def from_sequence(cls, values: tuple[float, float] | list[float]) -> ParameterVector:
        """Build from an optimizer's ``[threshold, budget]`` array."""
        threshold, budget = values
        return cls(threshold=float(threshold), budget=float(budget))


class ParameterBounds(BaseModel):
    """Box constraints for the optimizer."""

    model_config = {"frozen": True}

    threshold: tuple[float, float] = THRESHOLD_BOUNDS
    budget: tuple[float, float] = BUDGET_BOUNDS

    def as_list(self) -> list[tuple[float, float]]:
        """Bounds in the ``[(lo, hi), (lo, hi)]`` order scipy expects."""
        return [self.threshold, self.budget]

    def contains(self, params: ParameterVector) -> bool:
        lo_t, hi_t = self.threshold
        lo_d, hi_d = self.budget
        return lo_t <= params.threshold <= hi_t and lo_d <= params.budget <= hi_d


class FitResult(BaseModel):
    """Outcome of fitting the GDD model to a set of site-years."""

    parameters: ParameterVector
    rmse: float
    n_site_years: int = Field(..., description="Site-years with both drivers and observations")
    n_evaluations: int
    strategy: str
    seed: int | None = None
    budget_exhausted: bool = Field(
        default=False, description="Search stopped because the evaluation budget ran out"
    )


# =============================================================================
# Comparison
# =============================================================================


class AgreementStats(BaseModel):
    """Paired agreement between two sets of transition dates (DOY)."""

    n: int
    rmse: float | None = None
    bias: float | None = Field(default=None, description="mean(predicted - reference)")
    r: float | None = Field(default=None, description="Pearson correlation")
    slope: float | None = None
    intercept: float | None = None
