"""src/birthcast/modeling/baselines.py"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from birthcast.common.errors import InsufficientSeasonalHistory
from birthcast.forecasting.forecast import Forecast
from birthcast.forecasting.intervals import IntervalLevels
from birthcast.modeling.base import ModelFit, check_horizon
from birthcast.timeseries.series import TimeSeries

logger = logging.getLogger(__name__)


def residual_sigma(residuals: np.ndarray, n_params: int, *, model_name: str = "") -> float:
    """Residual standard deviation with ``n_params`` degrees of freedom used up."""
    res = np.asarray(residuals, dtype=float)
    dof = res.size - int(n_params)
    if dof <= 0:
        logger.warning("%s: no residual degrees of freedom (n=%d); intervals collapse to the point forecast", model_name, res.size)
        return 0.0
    return float(np.sqrt(np.sum(res**2) / dof))


# ---------------- fits ----------------

@dataclass(frozen=True, eq=False)
class MeanFit(ModelFit):
    """Forecast = training mean, constant across the horizon."""
    mean: float

    def predict(self, steps: int) -> np.ndarray:
        return np.full(shape=(int(steps),), fill_value=float(self.mean), dtype=float)

    def std_error(self, steps: int) -> np.ndarray:
        h = np.arange(1, int(steps) + 1, dtype=float)
        return self.sigma * np.sqrt(1.0 + 1.0 / self.n_obs) * np.sqrt(h)


@dataclass(frozen=True, eq=False)
class NaiveFit(ModelFit):
    """Forecast = last observed value repeated."""
    last_value: float

    def predict(self, steps: int) -> np.ndarray:
        return np.full(shape=(int(steps),), fill_value=float(self.last_value), dtype=float)

    def std_error(self, steps: int) -> np.ndarray:
        return self.sigma * np.sqrt(np.arange(1, int(steps) + 1, dtype=float))


@dataclass(frozen=True, eq=False)
class SeasonalNaiveFit(ModelFit):
    """Forecast for t = observed value at t - S (last full cycle repeated)."""
    last_cycle: np.ndarray

    def __post_init__(self) -> None:
        super().__post_init__()
        cyc = np.array(self.last_cycle, dtype=float, copy=True)
        cyc.setflags(write=False)
        object.__setattr__(self, "last_cycle", cyc)

    def predict(self, steps: int) -> np.ndarray:
        idx = np.arange(int(steps)) % self.season_length
        return self.last_cycle[idx].astype(float)

    def std_error(self, steps: int) -> np.ndarray:
        h = np.arange(1, int(steps) + 1)
        completed_cycles = (h - 1) // self.season_length
        return self.sigma * np.sqrt(completed_cycles + 1.0)


@dataclass(frozen=True, eq=False)
class DriftFit(ModelFit):
    """
    Forecast with a simple drift estimated from the series:
      drift = (y_last - y_first) / (n-1)
      yhat[h] = y_last + drift*h
    """
    last_value: float
    drift_per_step: float

    def predict(self, steps: int) -> np.ndarray:
        horizon = np.arange(1, int(steps) + 1, dtype=float)
        return (self.last_value + self.drift_per_step * horizon).astype(float)

    def std_error(self, steps: int) -> np.ndarray:
        h = np.arange(1, int(steps) + 1, dtype=float)
        # the drift is estimated from n-1 differences
        return self.sigma * np.sqrt(h * (1.0 + h / max(self.n_obs - 1, 1)))


# ---------------- forecasters ----------------

class _BenchmarkForecaster:
    name: str = ""
    fit_type: type = ModelFit

    def forecast(self, fit: ModelFit, horizon: int, levels: IntervalLevels | None = None) -> Forecast:
        if not isinstance(fit, self.fit_type):
            raise TypeError(f"{self.name} cannot forecast from {type(fit).__name__}")
        steps = check_horizon(horizon)
        return Forecast.from_normal(
            model_name=fit.model_name,
            start=fit.forecast_start,
            point=fit.predict(steps),
            std_error=fit.std_error(steps),
            levels=levels,
        )

    def _common(self, train: TimeSeries, residuals: np.ndarray, n_params: int) -> dict:
        return {
            "model_name": self.name,
            "train_start": train.start,
            "train_end": train.end,
            "n_obs": len(train),
            "season_length": train.season_length,
            "sigma": residual_sigma(residuals, n_params, model_name=self.name),
            "residuals": residuals,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MeanForecaster(_BenchmarkForecaster):
    name = "mean"
    fit_type = MeanFit

    def fit(self, train: TimeSeries) -> MeanFit:
        y = train.values
        mean = float(np.mean(y))
        return MeanFit(mean=mean, **self._common(train, y - mean, n_params=1))


class NaiveForecaster(_BenchmarkForecaster):
    name = "naive"
    fit_type = NaiveFit

    def fit(self, train: TimeSeries) -> NaiveFit:
        y = train.values
        return NaiveFit(last_value=float(y[-1]), **self._common(train, np.diff(y), n_params=0))


class SeasonalNaiveForecaster(_BenchmarkForecaster):
    name = "seasonal_naive"
    fit_type = SeasonalNaiveFit

    def fit(self, train: TimeSeries) -> SeasonalNaiveFit:
        y = train.values
        s = train.season_length
        if y.size < s:
            raise InsufficientSeasonalHistory(f"seasonal naive needs >= {s} observations, got {y.size}")
        residuals = y[s:] - y[:-s]
        return SeasonalNaiveFit(last_cycle=y[-s:], **self._common(train, residuals, n_params=0))


class DriftForecaster(_BenchmarkForecaster):
    name = "drift"
    fit_type = DriftFit

    def fit(self, train: TimeSeries) -> DriftFit:
        y = train.values
        if y.size < 2:
            return DriftFit(last_value=float(y[-1]), drift_per_step=0.0, **self._common(train, np.empty(0), n_params=1))
        drift = float((y[-1] - y[0]) / (y.size - 1))
        residuals = np.diff(y) - drift
        return DriftFit(last_value=float(y[-1]), drift_per_step=drift, **self._common(train, residuals, n_params=1))
