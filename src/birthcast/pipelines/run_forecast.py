"""src/birthcast/pipelines/run_forecast.py"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from birthcast.common.config import AppConfig
from birthcast.forecasting.forecast import Forecast
from birthcast.io.writers import load_fit, write_csv
from birthcast.modeling.registry import build_forecaster
from birthcast.pipelines.common import _get, ets_config, interval_levels, output_dir
from birthcast.reporting.tables import make_forecast_summary_table
from birthcast.validation.checks import validate_df
from birthcast.validation.schemas import FORECAST_TABLE

logger = logging.getLogger(__name__)


def _model_path(cfg: AppConfig, metrics_dir: Path) -> Path:
    best_path = metrics_dir / "best_model.csv"
    if not best_path.exists():
        raise FileNotFoundError(f"Missing {best_path}. Run `birthcast train` first.")
    best = pd.read_csv(best_path)
    if best.empty or "Model_Path" not in best.columns:
        raise KeyError(f"{best_path} has no Model_Path row")
    return cfg.resolve(str(best["Model_Path"].iloc[0]))


def run_forecast(cfg: AppConfig) -> Forecast:
    """Forecast ``forecast.horizon`` months past the end of the history from the persisted fit."""
    horizon = int(_get(cfg.forecast, "horizon", 36))
    if horizon < 1:
        raise ValueError("forecast.horizon must be >= 1")

    metrics_dir = output_dir(cfg, "metrics_dir", "artifacts/metrics")
    forecasts_dir = output_dir(cfg, "forecasts_dir", "artifacts/forecasts")

    fit, payload = load_fit(_model_path(cfg, metrics_dir))
    forecaster = build_forecaster(fit.model_name, ets=ets_config(cfg))
    forecast = forecaster.forecast(fit, horizon, interval_levels(cfg))

    frame = forecast.to_frame()
    if {0.8, 0.95} <= set(forecast.levels):
        validate_df(frame, schema=FORECAST_TABLE, unique_keys=("Period",)).raise_if_failed()

    out_path = write_csv(frame, forecasts_dir / f"forecast_{forecast.start}_{forecast.end}.csv")
    summary_path = write_csv(make_forecast_summary_table([forecast]), forecasts_dir / "forecast_summary.csv")

    logger.info(
        "Forecast %s..%s with %s (trained through %s)",
        forecast.start,
        forecast.end,
        fit.model_name,
        payload.get("train_end", fit.train_end),
    )
    logger.info("Saved forecast: %s", out_path)
    logger.info("Saved forecast summary: %s", summary_path)
    return forecast
