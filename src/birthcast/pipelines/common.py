"""src/birthcast/pipelines/common.py

Config -> settings helpers shared by the pipelines.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from birthcast.common.config import AppConfig
from birthcast.decomposition.stl import STLSettings
from birthcast.forecasting.intervals import IntervalLevels
from birthcast.io.readers import read_births_series
from birthcast.modeling.ets import ETSConfig
from birthcast.timeseries.series import DEFAULT_SEASON_LENGTH, TimeSeries


def _get(cfg_obj: Any, key: str, default: Any = None) -> Any:
    """Support both dict-style and attribute-style config."""
    if cfg_obj is None:
        return default
    if isinstance(cfg_obj, dict):
        v = cfg_obj.get(key, default)
        return default if v is None else v
    if hasattr(cfg_obj, key):
        v = getattr(cfg_obj, key)
        return default if v is None else v
    return default


def output_dir(cfg: AppConfig, key: str, default: str) -> Path:
    p = cfg.paths.get(key)
    path = p if p is not None else cfg.resolve(default)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_series(cfg: AppConfig) -> TimeSeries:
    births_file = _get(cfg.data, "births_file")
    if not births_file:
        raise ValueError("Missing data.births_file in config")
    season_length = int(_get(cfg.data, "season_length", DEFAULT_SEASON_LENGTH))
    start_year = _get(cfg.data, "start_year")
    return read_births_series(
        cfg.resolve(births_file),
        season_length=season_length,
        start_year=int(start_year) if start_year is not None else None,
    )


def stl_settings(cfg: AppConfig) -> STLSettings:
    return STLSettings.from_mapping(cfg.decomposition)


def ets_config(cfg: AppConfig) -> ETSConfig:
    return ETSConfig.from_mapping(_get(cfg.modeling, "ets", {}))


def interval_levels(cfg: AppConfig) -> IntervalLevels:
    return IntervalLevels.from_sequence(_get(cfg.forecast, "interval_levels"))
