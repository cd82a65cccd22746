"""Tests for ModelDataset grouping and the RMSE objective."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from phenocam_gdd.phenology.dataset import ModelDataset, is_complete_run
from phenocam_gdd.phenology.objective import (
    SENTINEL_RMSE,
    predict_all,
    predict_site_years,
    rmse_objective,
)
from phenocam_gdd.schemas import ParameterVector

PARAMS = ParameterVector(threshold=5.0, budget=100.0)


def make_drivers(series: dict[tuple[str, int], float], days: int = 120) -> pd.DataFrame:
    """Drivers table with a constant temperature per site-year."""
    rows = [
        {"site": site, "year": year, "doy": doy, "tmean": temp}
        for (site, year), temp in series.items()
        for doy in range(1, days + 1)
    ]
    return pd.DataFrame(rows)


def make_validation(observed: dict[tuple[str, int], float]) -> pd.DataFrame:
    rows = [{"site": s, "year": y, "doy": doy} for (s, y), doy in observed.items()]
    return pd.DataFrame(rows, columns=["site", "year", "doy"])


# =============================================================================
# ModelDataset
# =============================================================================


class TestIsCompleteRun:
    def test_complete(self):
        assert is_complete_run(np.arange(1, 181))

    def test_gap(self):
        assert not is_complete_run(np.array([1, 2, 4]))

    def test_not_starting_jan_first(self):
        assert not is_complete_run(np.array([2, 3, 4]))

    def test_empty(self):
        assert not is_complete_run(np.array([], dtype=int))


class TestModelDataset:
    """Tests for grouping drivers and observations by site-year."""

    def test_groups_by_site_year(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("harvard", 2016): 12.0})
        dataset = ModelDataset.from_frames(drivers, make_validation({("harvard", 2015): 20}))
        assert set(dataset.drivers) == {("harvard", 2015), ("harvard", 2016)}
        assert dataset.drivers[("harvard", 2016)][0] == 12.0
        assert len(dataset.drivers[("harvard", 2015)]) == 120

    def test_orders_by_doy(self):
        drivers = pd.DataFrame(
            {"site": ["a"] * 3, "year": [2015] * 3, "doy": [3, 1, 2], "tmean": [30.0, 10.0, 20.0]}
        )
        dataset = ModelDataset.from_frames(drivers, make_validation({}))
        assert list(dataset.drivers[("a", 2015)]) == [10.0, 20.0, 30.0]

    def test_incomplete_site_year_rejected(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("bartlettir", 2015): 10.0})
        gap = (drivers["site"] == "bartlettir") & (drivers["doy"] == 50)
        dataset = ModelDataset.from_frames(drivers[~gap], make_validation({}))
        assert ("bartlettir", 2015) in dataset.rejected
        assert ("bartlettir", 2015) not in dataset.drivers
        assert ("harvard", 2015) in dataset.drivers

    def test_paired_keys_intersection(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("harvard", 2016): 10.0})
        validation = make_validation({("harvard", 2016): 20, ("harvard", 2017): 25})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert dataset.paired_keys == [("harvard", 2016)]
        assert len(dataset) == 1

    def test_missing_observation_skipped(self):
        validation = pd.DataFrame([{"site": "harvard", "year": 2015, "doy": np.nan}])
        dataset = ModelDataset.from_frames(make_drivers({("harvard", 2015): 10.0}), validation)
        assert dataset.observed == {}

    def test_missing_column_raises(self):
        drivers = make_drivers({("harvard", 2015): 10.0}).drop(columns=["tmean"])
        with pytest.raises(ValueError, match="tmean"):
            ModelDataset.from_frames(drivers, make_validation({}))

    def test_duplicate_site_year_raises(self):
        """Each site-year carries one observed transition."""
        validation = pd.DataFrame(
            [
                {"site": "harvard", "year": 2015, "doy": 120},
                {"site": "harvard", "year": 2015, "doy": 131},
            ]
        )
        with pytest.raises(ValueError, match="more than one transition"):
            ModelDataset.from_frames(make_drivers({("harvard", 2015): 10.0}), validation)

    def test_driver_arrays_read_only(self):
        dataset = ModelDataset.from_frames(
            make_drivers({("harvard", 2015): 10.0}), make_validation({})
        )
        with pytest.raises(ValueError):
            dataset.drivers[("harvard", 2015)][0] = 99.0

    def test_input_frames_not_mutated(self):
        drivers = make_drivers({("harvard", 2015): 10.0})
        validation = make_validation({("harvard", 2015): 20})
        before_d, before_v = drivers.copy(), validation.copy()
        dataset = ModelDataset.from_frames(drivers, validation)
        rmse_objective(PARAMS, dataset)
        pd.testing.assert_frame_equal(drivers, before_d)
        pd.testing.assert_frame_equal(validation, before_v)


# =============================================================================
# rmse_objective
# =============================================================================


class TestRMSEObjective:
    """Tests for the aggregate RMSE over site-years."""

    def test_zero_when_all_match(self):
        """10 C with T=5, D=100 predicts DOY 20; 15 C predicts DOY 10."""
        drivers = make_drivers({("harvard", 2015): 10.0, ("bartlettir", 2015): 15.0})
        validation = make_validation({("harvard", 2015): 20, ("bartlettir", 2015): 10})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert rmse_objective(PARAMS, dataset) == 0.0

    def test_known_error(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("bartlettir", 2015): 15.0})
        validation = make_validation({("harvard", 2015): 23, ("bartlettir", 2015): 14})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert rmse_objective(PARAMS, dataset) == pytest.approx(math.sqrt((9 + 16) / 2))

    def test_sentinel_when_never_reached(self):
        """No site-year reaches the budget: large finite value, not NaN."""
        drivers = make_drivers({("harvard", 2015): 4.0, ("bartlettir", 2015): 3.0})
        validation = make_validation({("harvard", 2015): 120, ("bartlettir", 2015): 130})
        dataset = ModelDataset.from_frames(drivers, validation)
        result = rmse_objective(PARAMS, dataset)
        assert result == SENTINEL_RMSE
        assert math.isfinite(result)

    def test_sentinel_when_nothing_pairs(self):
        drivers = make_drivers({("harvard", 2015): 10.0})
        dataset = ModelDataset.from_frames(drivers, make_validation({("harvard", 2016): 20}))
        assert rmse_objective(PARAMS, dataset) == SENTINEL_RMSE

    def test_undefined_predictions_excluded(self):
        """A site-year that never reaches the budget doesn't count against the fit."""
        drivers = make_drivers({("harvard", 2015): 10.0, ("bartlettir", 2015): 2.0})
        validation = make_validation({("harvard", 2015): 22, ("bartlettir", 2015): 140})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert rmse_objective(PARAMS, dataset) == pytest.approx(2.0)

    def test_unpaired_observations_ignored(self):
        drivers = make_drivers({("harvard", 2015): 10.0})
        validation = make_validation({("harvard", 2015): 20, ("harvard", 2016): 200})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert rmse_objective(PARAMS, dataset) == 0.0

    def test_deterministic(self):
        drivers = make_drivers({("harvard", 2015): 9.3, ("harvard", 2016): 11.7})
        validation = make_validation({("harvard", 2015): 25, ("harvard", 2016): 12})
        dataset = ModelDataset.from_frames(drivers, validation)
        params = ParameterVector(threshold=3.7, budget=142.0)
        assert rmse_objective(params, dataset) == rmse_objective(params, dataset)

    def test_non_negative(self):
        drivers = make_drivers({("harvard", 2015): 8.0, ("harvard", 2016): 14.0})
        validation = make_validation({("harvard", 2015): 60, ("harvard", 2016): 5})
        dataset = ModelDataset.from_frames(drivers, validation)
        assert rmse_objective(PARAMS, dataset) >= 0.0


# =============================================================================
# predict_all / predict_site_years
# =============================================================================


class TestPredictSiteYears:
    def test_predict_all_covers_drivers(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("harvard", 2016): 1.0})
        dataset = ModelDataset.from_frames(drivers, make_validation({}))
        assert predict_all(PARAMS, dataset) == {("harvard", 2015): 20, ("harvard", 2016): None}

    def test_table_columns_and_missing_values(self):
        drivers = make_drivers({("harvard", 2015): 10.0, ("harvard", 2016): 1.0})
        validation = make_validation({("harvard", 2016): 110})
        table = predict_site_years(PARAMS, ModelDataset.from_frames(drivers, validation))

        assert list(table.columns) == ["site", "year", "predicted", "observed"]
        row_2015 = table[table["year"] == 2015].iloc[0]
        row_2016 = table[table["year"] == 2016].iloc[0]
        assert row_2015["predicted"] == 20.0
        assert np.isnan(row_2015["observed"])
        assert np.isnan(row_2016["predicted"])
        assert row_2016["observed"] == 110.0
