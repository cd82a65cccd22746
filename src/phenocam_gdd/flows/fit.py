"""
Prefect flow that fits the GDD model to cached site-years.

Loads the drivers and transition dates written by the fetch flow, runs the
bounded optimizer, predicts every site-year with the fitted parameters and
compares the predictions with the PhenoCam observations and MODIS green-up.

Run locally:
    python -m phenocam_gdd.flows.fit
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
from prefect import flow, task

from phenocam_gdd.analysis.comparison import compare_doy, join_with_reference
from phenocam_gdd.analysis.filters import exclude_years, filter_valid_doy
from phenocam_gdd.config import get_settings
from phenocam_gdd.datasources import daymet
from phenocam_gdd.flows import fetch
from phenocam_gdd.phenology.dataset import ModelDataset
from phenocam_gdd.phenology.gdd import gdd_at_transition
from phenocam_gdd.phenology.objective import predict_site_years
from phenocam_gdd.phenology.optimize import fit_parameters
from phenocam_gdd.schemas import AgreementStats, FitResult, ParameterVector
from phenocam_gdd.store import DataStore

store = DataStore(get_settings().data_dir)

FIT_PATH = Path("derived/fit.json")
PREDICTIONS_PATH = Path("derived/predictions.json")


@task(name="load-site-tables")
def load_site_tables(site_names: list[str]) -> dict[str, list[dict[str, Any]]]:
    """Load cached drivers, transitions and MODIS green-up rows for the sites."""
    drivers: list[dict[str, Any]] = []
    transitions: list[dict[str, Any]] = []
    greenup: list[dict[str, Any]] = []
    for name in site_names:
        drivers_data = store.read(fetch.drivers_path(name))
        if drivers_data:
            drivers.extend(daymet.drivers_from_dict(drivers_data).to_dict(orient="records"))
        transitions.extend(store.read(fetch.transitions_path(name)) or [])
        greenup.extend(store.read(fetch.greenup_path(name)) or [])
    return {"drivers": drivers, "transitions": transitions, "greenup": greenup}


@task(name="save-fit")
def save_fit(
    result: FitResult,
    predictions: pd.DataFrame,
    comparisons: dict[str, AgreementStats],
    baseline: pd.DataFrame,
) -> Path:
    """Write the fit result and the per-site-year predictions under derived/."""
    store.write(
        PREDICTIONS_PATH,
        {
            "predictions": predictions.astype(object)
            .where(predictions.notna(), None)
            .to_dict(orient="records"),
            "gdd_at_transition": baseline.astype(object)
            .where(baseline.notna(), None)
            .to_dict(orient="records"),
        },
        source="phenocam-gdd",
    )
    return store.write(
        FIT_PATH,
        {
            "fit": result.model_dump(),
            "comparisons": {k: v.model_dump() for k, v in comparisons.items()},
        },
        source="phenocam-gdd",
    )


def load_fitted_parameters() -> ParameterVector | None:
    """Parameters from the last saved fit, or None if no fit exists."""
    data = store.read(FIT_PATH)
    if not data:
        return None
    return FitResult.model_validate(data["fit"]).parameters


def _frame(rows: list[dict[str, Any]], columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=columns) if rows else pd.DataFrame(columns=columns)


@flow(name="fit-model", log_prints=True)
def fit_all(
    site_names: list[str] | None = None,
    budget: int | None = None,
    seed: int | None = None,
    strategy: str | None = None,
) -> dict[str, Any]:
    """
    Fit (threshold, budget) to every cached site-year and save the result.

    Returns a summary dict, or ``{"error": ...}`` when nothing is cached.
    """
    settings = get_settings()
    site_names = site_names if site_names is not None else [s.name for s in settings.sites]
    budget = budget if budget is not None else settings.optimizer_budget
    seed = seed if seed is not None else settings.optimizer_seed
    strategy = strategy or settings.optimizer_strategy

    print(f"Loading cached data for {len(site_names)} sites...")
    tables = load_site_tables(site_names)
    drivers = _frame(tables["drivers"], daymet.DRIVER_COLUMNS)
    transitions = _frame(tables["transitions"], ["site", "year", "doy", "threshold"])
    validation = filter_valid_doy(transitions)
    greenup = filter_valid_doy(_frame(tables["greenup"], ["site", "year", "doy"]))

    if drivers.empty or validation.empty:
        print("No cached drivers or transition dates found. Run fetch flow first.")
        return {"error": "no data"}

    dataset = ModelDataset.from_frames(drivers, validation)
    if dataset.rejected:
        print(f"Skipping {len(dataset.rejected)} site-years with incomplete temperature records")
    if len(dataset) == 0:
        print("No site-year has both drivers and a transition date.")
        return {"error": "no site-years"}

    baseline = gdd_at_transition(drivers, validation, settings.base_temp_c)

    print(f"Fitting {len(dataset)} site-years ({strategy}, budget={budget}, seed={seed})...")
    result = fit_parameters(
        dataset,
        budget=budget,
        seed=seed,
        x0=ParameterVector(threshold=settings.initial_threshold, budget=settings.initial_budget),
        strategy=strategy,
    )
    params = result.parameters
    print(
        f"Fitted threshold={params.threshold:.2f} C, budget={params.budget:.1f} GDD, "
        f"RMSE={result.rmse:.2f} days after {result.n_evaluations} evaluations"
    )
    if result.budget_exhausted:
        print("Evaluation budget ran out before the search converged; consider a larger --budget")

    predictions = predict_site_years(params, dataset)
    comparisons = {
        "phenocam": compare_doy(predictions["predicted"], predictions["observed"]),
    }
    greenup = exclude_years(greenup, settings.exclude_years)
    if not greenup.empty:
        joined = join_with_reference(predictions, greenup)
        comparisons["modis"] = compare_doy(joined["predicted"], joined["reference"])
        print(f"MODIS agreement: {comparisons['modis'].model_dump()}")

    output_path = save_fit(result, predictions, comparisons, baseline)
    print(f"Saved fit to {output_path}")

    return {
        "site_years": result.n_site_years,
        "threshold": params.threshold,
        "budget": params.budget,
        "rmse": result.rmse,
        "output": str(output_path),
    }


if __name__ == "__main__":
    result = fit_all()
    print(f"Flow complete: {result}")
