"""src/birthcast/modeling/base.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from birthcast.forecasting.forecast import Forecast
from birthcast.forecasting.intervals import IntervalLevels
from birthcast.timeseries.period import Period
from birthcast.timeseries.series import TimeSeries


@dataclass(frozen=True, eq=False)
class ModelFit:
    """
    Parameters estimated by one forecaster on one training series.

    Read-only: forecasting from a fit never changes it, so the same fit can
    be forecast repeatedly (or pickled and reloaded) with any horizon.
    """
    model_name: str
    train_start: Period
    train_end: Period
    n_obs: int
    season_length: int
    sigma: float
    residuals: np.ndarray

    def __post_init__(self) -> None:
        res = np.array(self.residuals, dtype=float, copy=True)
        res.setflags(write=False)
        object.__setattr__(self, "residuals", res)

    @property
    def forecast_start(self) -> Period:
        return self.train_end.succ()


@runtime_checkable
class Forecaster(Protocol):
    """Minimal interface shared by every model variant."""
    name: str

    def fit(self, train: TimeSeries) -> ModelFit: ...

    def forecast(self, fit: ModelFit, horizon: int, levels: IntervalLevels | None = None) -> Forecast: ...


def check_horizon(horizon: int) -> int:
    h = int(horizon)
    if h < 1:
        raise ValueError(f"horizon must be >= 1, got {horizon}")
    return h
