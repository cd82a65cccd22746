"""Tests for GDD accumulation and the two-parameter transition model.

Covers:
- Baseline daily and accumulated GDD (fixed 5 C base)
- GDD reached on observed transition dates
- predict_transition_doy: worked example, monotonicity, undefined outcomes,
  missing-value handling
"""

from __future__ import annotations

from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest

from phenocam_gdd.phenology.gdd import (
    compute_accumulated_gdd,
    compute_daily_gdd,
    gdd_at_transition,
    predict_transition_doy,
)
from phenocam_gdd.schemas import ParameterVector


def params(threshold: float, budget: float) -> ParameterVector:
    return ParameterVector(threshold=threshold, budget=budget)


# =============================================================================
# compute_daily_gdd
# =============================================================================


class TestComputeDailyGDD:
    """Tests for the single-day baseline GDD."""

    def test_warm_day(self):
        """A day above the base contributes the excess."""
        assert compute_daily_gdd(12.5) == pytest.approx(7.5)

    def test_at_base_is_zero(self):
        """A day exactly at the base contributes nothing."""
        assert compute_daily_gdd(5.0) == 0.0

    def test_cold_day_never_negative(self):
        """Below-base days contribute 0, not a negative value."""
        assert compute_daily_gdd(-15.0) == 0.0

    def test_custom_base(self):
        assert compute_daily_gdd(12.0, base_temp_c=10.0) == pytest.approx(2.0)

    def test_missing_day_is_nan(self):
        assert np.isnan(compute_daily_gdd(float("nan")))


# =============================================================================
# compute_accumulated_gdd
# =============================================================================


class TestComputeAccumulatedGDD:
    """Tests for the running baseline accumulation."""

    def test_empty_input(self):
        assert compute_accumulated_gdd([]) == []

    def test_accumulation_is_monotonic(self):
        """Accumulated GDD never decreases, even across cold days."""
        start = date(2018, 4, 1)
        temps = [(start + timedelta(days=i), t) for i, t in enumerate([10.0, -2.0, 8.0, 4.0])]
        result = compute_accumulated_gdd(temps)
        for prev, cur in zip(result, result[1:], strict=False):
            assert cur.accumulated >= prev.accumulated

    def test_total_matches_sum(self):
        start = date(2018, 5, 1)
        temps = [(start + timedelta(days=i), t) for i, t in enumerate([10.0, 15.0, 3.0])]
        result = compute_accumulated_gdd(temps)
        assert result[-1].accumulated == pytest.approx(5.0 + 10.0 + 0.0)
        assert [r.date for r in result] == [t[0] for t in temps]

    def test_missing_day_propagates(self):
        """Once a day is missing the running total is unknown."""
        start = date(2018, 5, 1)
        temps = [(start + timedelta(days=i), t) for i, t in enumerate([10.0, np.nan, 12.0])]
        result = compute_accumulated_gdd(temps)
        assert result[0].accumulated == pytest.approx(5.0)
        assert np.isnan(result[1].accumulated)
        assert np.isnan(result[2].accumulated)


# =============================================================================
# gdd_at_transition
# =============================================================================


class TestGDDAtTransition:
    """Tests for accumulated GDD on observed transition days."""

    def _drivers(self) -> pd.DataFrame:
        rows = []
        for site, temp in (("harvard", 10.0), ("bartlettir", 7.0)):
            for doy in range(1, 11):
                rows.append({"site": site, "year": 2015, "doy": doy, "tmean": temp})
        return pd.DataFrame(rows)

    def test_gdd_reached_on_transition_day(self):
        transitions = pd.DataFrame(
            [
                {"site": "harvard", "year": 2015, "doy": 4},
                {"site": "bartlettir", "year": 2015, "doy": 10},
            ]
        )
        result = gdd_at_transition(self._drivers(), transitions)
        by_site = dict(zip(result["site"], result["gdd"], strict=True))
        assert by_site["harvard"] == pytest.approx(20.0)
        assert by_site["bartlettir"] == pytest.approx(20.0)

    def test_transition_without_drivers_dropped(self):
        transitions = pd.DataFrame([{"site": "harvard", "year": 2016, "doy": 4}])
        result = gdd_at_transition(self._drivers(), transitions)
        assert result.empty

    def test_unsorted_drivers(self):
        """Accumulation follows day-of-year order, not row order."""
        drivers = self._drivers().sample(frac=1.0, random_state=3)
        transitions = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": 2}])
        result = gdd_at_transition(drivers, transitions)
        assert result["gdd"].iloc[0] == pytest.approx(10.0)

    def test_missing_day_before_transition_is_nan(self):
        """A NaN temperature on or before the transition leaves the GDD unknown."""
        drivers = pd.DataFrame(
            {
                "site": "harvard",
                "year": 2015,
                "doy": [1, 2, 3, 4, 5],
                "tmean": [10.0, np.nan, 10.0, 10.0, 10.0],
            }
        )
        transitions = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": 5}])
        result = gdd_at_transition(drivers, transitions)
        assert len(result) == 1
        assert np.isnan(result["gdd"].iloc[0])

    def test_missing_day_after_transition_ignored(self):
        drivers = pd.DataFrame(
            {
                "site": "harvard",
                "year": 2015,
                "doy": [1, 2, 3, 4, 5],
                "tmean": [10.0, 10.0, 10.0, np.nan, 10.0],
            }
        )
        transitions = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": 3}])
        result = gdd_at_transition(drivers, transitions)
        assert result["gdd"].iloc[0] == pytest.approx(15.0)

    def test_gapped_site_year_dropped(self):
        """Site-years without a complete daily run from Jan 1 are left out."""
        drivers = pd.DataFrame(
            {"site": "harvard", "year": 2015, "doy": [1, 3, 4, 5], "tmean": 10.0}
        )
        transitions = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": 5}])
        assert gdd_at_transition(drivers, transitions).empty

    def test_transition_after_last_driver_day_dropped(self):
        transitions = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": 40}])
        assert gdd_at_transition(self._drivers(), transitions).empty


# =============================================================================
# predict_transition_doy
# =============================================================================


class TestPredictTransitionDOY:
    """Tests for the fitted-model prediction function."""

    def test_constant_ten_degrees(self):
        """5 degree-days per day reaches 100 on day 20."""
        temps = np.full(100, 10.0)
        assert predict_transition_doy(temps, params(5.0, 100.0)) == 20

    def test_accepts_plain_list(self):
        assert predict_transition_doy([10.0] * 30, params(5.0, 10.0)) == 2

    def test_crossing_is_inclusive(self):
        """Reaching the budget exactly counts as crossing."""
        assert predict_transition_doy([6.0, 6.0, 6.0], params(5.0, 2.0)) == 2

    def test_never_reached_is_none(self):
        temps = np.full(50, 10.0)
        assert predict_transition_doy(temps, params(5.0, 1000.0)) is None

    def test_threshold_above_all_temps_is_none(self):
        """No accumulation means no transition, not an error."""
        temps = np.linspace(-5.0, 20.0, 120)
        assert predict_transition_doy(temps, params(25.0, 10.0)) is None

    def test_zero_budget_reached_on_first_day(self):
        assert predict_transition_doy([-5.0, -5.0], params(0.0, 0.0)) == 1

    def test_empty_sequence_is_none(self):
        assert predict_transition_doy([], params(5.0, 10.0)) is None

    def test_cold_days_contribute_nothing(self):
        temps = [0.0, 0.0, 15.0, 15.0]
        assert predict_transition_doy(temps, params(5.0, 20.0)) == 4

    def test_out_of_bounds_parameters_evaluated(self):
        """Parameters outside the fitting box still evaluate the formula."""
        temps = np.full(10, 60.0)
        assert predict_transition_doy(temps, params(50.0, 20.0)) == 2

    def test_monotonic_in_budget(self):
        """A larger budget never gives an earlier day."""
        budgets = (10.0, 50.0, 200.0, 400.0)
        temps = np.linspace(0.0, 25.0, 200)
        days = [predict_transition_doy(temps, params(0.0, b)) for b in budgets]
        assert all(d is not None for d in days)
        assert days == sorted(days)

    def test_monotonic_in_threshold(self):
        """A higher threshold never gives an earlier day."""
        rng = np.random.default_rng(7)
        temps = 10 * np.sin(np.linspace(-np.pi / 2, np.pi, 200)) + rng.normal(0, 2, 200) + 8
        days = [predict_transition_doy(temps, params(t, 150.0)) for t in (-5.0, 0.0, 5.0, 8.0)]
        defined = [d for d in days if d is not None]
        assert defined == sorted(defined)
        # Once undefined, higher thresholds stay undefined
        if None in days:
            assert all(d is None for d in days[days.index(None) :])

    def test_missing_day_after_crossing_ignored(self):
        temps = [10.0, 10.0, np.nan, 10.0]
        assert predict_transition_doy(temps, params(5.0, 10.0)) == 2

    def test_missing_day_before_crossing_is_none(self):
        """A gap before the crossing makes the running sum unknown."""
        temps = [10.0, np.nan, 10.0, 10.0, 10.0]
        assert predict_transition_doy(temps, params(5.0, 10.0)) is None

    def test_missing_day_on_crossing_is_none(self):
        temps = [10.0, 10.0, np.nan]
        assert predict_transition_doy(temps, params(5.0, 15.0)) is None
