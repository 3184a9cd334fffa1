"""src/birthcast/modeling/evaluation.py"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

import numpy as np
import pandas as pd

from birthcast.common.errors import NoOverlap
from birthcast.forecasting.forecast import Forecast
from birthcast.timeseries.series import TimeSeries


def _to_valid_arrays(y_true: Iterable[float], y_pred: Iterable[float]) -> tuple[np.ndarray, np.ndarray]:
    yt = np.asarray(list(y_true), dtype=float)
    yp = np.asarray(list(y_pred), dtype=float)
    valid = np.isfinite(yt) & np.isfinite(yp)
    return yt[valid], yp[valid]


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    return float(np.mean(np.abs(y_true - y_pred)))


def smape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    denom = (np.abs(y_true) + np.abs(y_pred)) / 2.0
    denom = np.where(denom == 0, 1.0, denom)
    return float(np.mean(np.abs(y_true - y_pred) / denom) * 100.0)


@dataclass(frozen=True)
class MetricPack:
    rmse: float
    mae: float
    smape: float
    n: int = 0

    def as_dict(self) -> dict[str, float]:
        # Keep stable column names for CSV exports
        return {"RMSE": float(self.rmse), "MAE": float(self.mae), "SMAPE": float(self.smape), "N": int(self.n)}


def compute_metrics(y_true: Iterable[float], y_pred: Iterable[float]) -> MetricPack:
    yt, yp = _to_valid_arrays(y_true, y_pred)
    return MetricPack(
        rmse=rmse(yt, yp),
        mae=mae(yt, yp),
        smape=smape(yt, yp),
        n=int(yt.size),
    )


@dataclass(frozen=True)
class AccuracyReport:
    """Model name -> metrics over the forecast/actual overlap."""
    scores: Mapping[str, MetricPack] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))

    def __getitem__(self, model_name: str) -> MetricPack:
        return self.scores[model_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.scores)

    def __len__(self) -> int:
        return len(self.scores)

    def __contains__(self, model_name: object) -> bool:
        return model_name in self.scores

    @property
    def models(self) -> list[str]:
        return list(self.scores)

    def merge(self, other: AccuracyReport) -> AccuracyReport:
        clash = set(self.scores) & set(other.scores)
        if clash:
            raise ValueError(f"duplicate model names in accuracy reports: {sorted(clash)}")
        return AccuracyReport({**self.scores, **other.scores})

    def rows(self) -> list[dict]:
        return [{"Model": name, **pack.as_dict()} for name, pack in self.scores.items()]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows(), columns=["Model", "RMSE", "MAE", "SMAPE", "N"])


def align(forecast: Forecast, actual: TimeSeries) -> tuple[np.ndarray, np.ndarray]:
    """(actual, point) arrays over the periods both cover."""
    lo = max(forecast.start, actual.start)
    hi = min(forecast.end, actual.end)
    if lo > hi:
        raise NoOverlap(
            f"forecast {forecast.start}..{forecast.end} and actual {actual.start}..{actual.end} share no periods"
        )
    f0 = lo - forecast.start
    a0 = lo - actual.start
    k = (hi - lo) + 1
    return actual.values[a0 : a0 + k], forecast.point[f0 : f0 + k]


def evaluate(forecast: Forecast, actual: TimeSeries) -> AccuracyReport:
    y_true, y_pred = align(forecast, actual)
    return AccuracyReport({forecast.model_name: compute_metrics(y_true, y_pred)})


def evaluate_many(forecasts: Iterable[Forecast], actual: TimeSeries) -> AccuracyReport:
    report = AccuracyReport()
    for fc in forecasts:
        report = report.merge(evaluate(fc, actual))
    return report
