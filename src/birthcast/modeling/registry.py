"""src/birthcast/modeling/registry.py"""

from __future__ import annotations

from dataclasses import replace

from birthcast.modeling.base import Forecaster
from birthcast.modeling.baselines import (
    DriftForecaster,
    MeanForecaster,
    NaiveForecaster,
    SeasonalNaiveForecaster,
)
from birthcast.modeling.ets import ETSConfig, ETSForecaster

BENCHMARKS: tuple[str, ...] = ("mean", "naive", "seasonal_naive", "drift")
ETS_MODELS: tuple[str, ...] = ("ets", "ets_damped")
MODEL_NAMES: tuple[str, ...] = BENCHMARKS + ETS_MODELS


def build_forecaster(name: str, *, ets: ETSConfig | None = None) -> Forecaster:
    """Forecaster for a model name; ``ets`` carries bounds and budget for both ETS variants."""
    key = str(name).strip().lower()
    if key == "mean":
        return MeanForecaster()
    if key == "naive":
        return NaiveForecaster()
    if key == "seasonal_naive":
        return SeasonalNaiveForecaster()
    if key == "drift":
        return DriftForecaster()
    if key in ETS_MODELS:
        base = ets or ETSConfig()
        return ETSForecaster(replace(base, damped=(key == "ets_damped")))
    raise KeyError(f"unknown model {name!r}; expected one of {list(MODEL_NAMES)}")


def build_forecasters(names: list[str] | tuple[str, ...], *, ets: ETSConfig | None = None) -> dict[str, Forecaster]:
    return {str(n).strip().lower(): build_forecaster(n, ets=ets) for n in names}
