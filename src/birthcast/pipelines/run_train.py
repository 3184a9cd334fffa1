"""src/birthcast/pipelines/run_train.py"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from joblib import Parallel, delayed

from birthcast.common.config import AppConfig
from birthcast.forecasting.forecast import Forecast
from birthcast.forecasting.intervals import IntervalLevels
from birthcast.io.writers import save_fit, write_csv
from birthcast.modeling.base import Forecaster
from birthcast.modeling.ets import ETSFit
from birthcast.modeling.evaluation import AccuracyReport, evaluate_many
from birthcast.modeling.registry import ETS_MODELS, MODEL_NAMES, build_forecasters
from birthcast.modeling.selection import SelectionResult, pick_best_model
from birthcast.pipelines.common import _get, ets_config, interval_levels, load_series, output_dir
from birthcast.reporting.tables import make_model_comparison_table
from birthcast.timeseries.series import TimeSeries
from birthcast.validation.checks import validate_df
from birthcast.validation.schemas import MODEL_COMPARISON

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainResult:
    report: AccuracyReport
    selection: SelectionResult
    holdout_forecasts: dict[str, Forecast]
    model_path: Path


def _fit_and_forecast(
    name: str,
    forecaster: Forecaster,
    train: TimeSeries,
    horizon: int,
    levels: IntervalLevels,
) -> tuple[str, Forecast | None, str | None]:
    """Runs in a joblib worker; failures come back as text so the parent can log them."""
    try:
        fit = forecaster.fit(train)
        return name, forecaster.forecast(fit, horizon, levels), None
    except Exception:
        return name, None, traceback.format_exc()


def run_train(cfg: AppConfig) -> TrainResult:
    """
    Holdout evaluation of every candidate model, then refit of the selected
    model on the full history:
      1) split off the last ``modeling.holdout_months`` months,
      2) fit each candidate on the train part and forecast the holdout,
      3) score the forecasts (RMSE / MAE / SMAPE),
      4) choose between the damped and non-damped ETS (or across all models
         when ``modeling.selection`` is "all"),
      5) refit the choice on the full series and persist it with joblib.
    """
    series = load_series(cfg)
    holdout = int(_get(cfg.modeling, "holdout_months", 2 * series.season_length))
    train, test = series.split_last(holdout)
    logger.info("Train %s..%s (%d) | holdout %s..%s (%d)", train.start, train.end, len(train), test.start, test.end, len(test))

    candidates = [str(c).strip().lower() for c in _get(cfg.modeling, "candidates", list(MODEL_NAMES))]
    metric_primary = str(_get(cfg.modeling, "metric_primary", "rmse")).lower()
    selection_scope = str(_get(cfg.modeling, "selection", "ets")).lower()
    n_jobs = int(_get(cfg.modeling, "n_jobs", 1))

    ets_cfg = ets_config(cfg)
    levels = interval_levels(cfg)
    forecasters = build_forecasters(candidates, ets=ets_cfg)

    outcomes = Parallel(n_jobs=n_jobs)(
        delayed(_fit_and_forecast)(name, fc, train, len(test), levels) for name, fc in forecasters.items()
    )

    holdout_forecasts: dict[str, Forecast] = {}
    for name, forecast, error in outcomes:
        if forecast is None:
            logger.error("Model %s failed on %s..%s:\n%s", name, train.start, train.end, error)
            continue
        holdout_forecasts[name] = forecast

    if not holdout_forecasts:
        raise RuntimeError("Every candidate model failed; nothing to select from.")

    report = evaluate_many(holdout_forecasts.values(), test)

    scope = None
    if selection_scope == "ets":
        scope = [m for m in ETS_MODELS if m in report]
        if not scope:
            logger.warning("No ETS model survived the holdout; selecting across all candidates.")
            scope = None
    selection = pick_best_model(report, primary=metric_primary, candidates=scope)
    logger.info("Selected %s (%s=%.4g)", selection.best_model, metric_primary.upper(), selection.best_row[metric_primary.upper()])

    # Refit the selection on the full history
    final = forecasters[selection.best_model]
    final_fit = final.fit(series)
    if isinstance(final_fit, ETSFit):
        logger.info("Final %s parameters: %s", final_fit.model_name, final_fit.summary())

    metrics_dir = output_dir(cfg, "metrics_dir", "artifacts/metrics")
    models_dir = output_dir(cfg, "models_dir", "artifacts/models")

    model_path = save_fit(
        final_fit,
        models_dir / f"births_{selection.best_model}.joblib",
        selected_by=metric_primary,
        holdout_start=str(test.start),
        holdout_end=str(test.end),
        holdout_metrics=report[selection.best_model].as_dict(),
    )

    comparison = make_model_comparison_table(report, primary=metric_primary)
    validate_df(comparison, schema=MODEL_COMPARISON, unique_keys=("Model",)).raise_if_failed()
    comparison_path = write_csv(comparison, metrics_dir / "model_comparison.csv")

    holdout_frame = pd.concat([fc.to_frame() for fc in holdout_forecasts.values()], ignore_index=True)
    actual = test.to_frame(value_col="Actual")[["Period", "Actual"]]
    holdout_frame = holdout_frame.merge(actual, on="Period", how="left")
    holdout_path = write_csv(holdout_frame, metrics_dir / "holdout_forecasts.csv")

    best_row: dict[str, Any] = {
        **selection.to_dict(),
        "Model_Path": _relative(model_path, cfg.project_root),
        "Train_End": str(series.end),
    }
    best_path = write_csv(pd.DataFrame([best_row]), metrics_dir / "best_model.csv")

    logger.info("Training complete.")
    logger.info("Saved model comparison: %s", comparison_path)
    logger.info("Saved holdout forecasts: %s", holdout_path)
    logger.info("Saved best model: %s", best_path)
    logger.info("Saved model to: %s", model_path)

    return TrainResult(
        report=report,
        selection=selection,
        holdout_forecasts=holdout_forecasts,
        model_path=model_path,
    )


def _relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.resolve().as_posix()
