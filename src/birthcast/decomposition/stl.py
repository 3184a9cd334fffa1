"""src/birthcast/decomposition/stl.py

Seasonal-trend decomposition by loess (STL), additive, for a TimeSeries.

Per inner pass:
  1) detrend with the current trend estimate,
  2) smooth each cycle-subseries (all Januaries, all Februaries, ...) with
     loess and extend it by one point on each side,
  3) low-pass the result (moving averages S, S, 3 plus a loess pass) and
     subtract the low-pass from it to get the seasonal component,
  4) deseasonalize the series and smooth it with loess to get the trend.

The non-robust variant runs the inner pass up to ``inner_iter`` times. The
robust variant adds outer passes that down-weight large remainders.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from birthcast.common.errors import InsufficientData
from birthcast.decomposition.loess import bisquare, loess, moving_average
from birthcast.timeseries.period import Period
from birthcast.timeseries.series import TimeSeries

logger = logging.getLogger(__name__)


def _next_odd(x: float) -> int:
    v = int(math.ceil(x))
    return v if v % 2 == 1 else v + 1


@dataclass(frozen=True)
class STLSettings:
    """
    Loess windows and iteration counts.

    ``seasonal`` is measured in cycles (points of a cycle-subseries); ``trend``
    and ``low_pass`` in periods. ``None`` means "derive from the seasonal
    period":
      trend    = next odd >= 1.5 * S / (1 - 1.5 / seasonal)   (23 for S=12)
      low_pass = next odd >= S + 1                            (13 for S=12)
    """
    seasonal: int = 7
    trend: int | None = None
    low_pass: int | None = None
    seasonal_deg: int = 1
    trend_deg: int = 1
    low_pass_deg: int = 1
    robust: bool = False
    inner_iter: int | None = None
    outer_iter: int | None = None
    tol: float = 0.01

    @classmethod
    def from_mapping(cls, raw: dict[str, Any] | None) -> STLSettings:
        raw = dict(raw or {})
        known = {k: raw[k] for k in cls.__dataclass_fields__ if k in raw and raw[k] is not None}
        return cls(**known)

    def windows(self, period: int) -> tuple[int, int, int]:
        """Resolved (seasonal, trend, low_pass) windows for ``period``."""
        ns = int(self.seasonal)
        if ns < 3 or ns % 2 == 0:
            raise ValueError(f"seasonal window must be odd and >= 3, got {ns}")

        nt = int(self.trend) if self.trend is not None else _next_odd(1.5 * period / (1.0 - 1.5 / ns))
        nl = int(self.low_pass) if self.low_pass is not None else _next_odd(period + 1)

        if nt < 3 or nt % 2 == 0:
            raise ValueError(f"trend window must be odd and >= 3, got {nt}")
        if nl < 3 or nl % 2 == 0 or nl <= period:
            raise ValueError(f"low_pass window must be odd and > period ({period}), got {nl}")
        return ns, nt, nl

    def iterations(self) -> tuple[int, int]:
        """(inner, outer) pass counts; robust fits trade inner passes for outer ones."""
        inner = self.inner_iter if self.inner_iter is not None else (1 if self.robust else 2)
        outer = self.outer_iter if self.outer_iter is not None else (15 if self.robust else 0)
        if inner < 1 or outer < 0:
            raise ValueError("inner_iter must be >= 1 and outer_iter >= 0")
        return int(inner), int(outer)


@dataclass(frozen=True, eq=False)
class Decomposition:
    """Aligned trend / seasonal / remainder arrays for one series."""
    series: TimeSeries
    trend: np.ndarray
    seasonal: np.ndarray
    remainder: np.ndarray
    weights: np.ndarray
    settings: STLSettings
    passes: int

    def __post_init__(self) -> None:
        for name in ("trend", "seasonal", "remainder", "weights"):
            arr = np.array(getattr(self, name), dtype=float, copy=True)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @property
    def periods(self) -> list[Period]:
        return self.series.periods

    @property
    def observed(self) -> np.ndarray:
        return self.series.values

    def seasonally_adjusted(self) -> TimeSeries:
        return TimeSeries(
            start=self.series.start,
            values=self.series.values - self.seasonal,
            season_length=self.series.season_length,
        )

    def trend_strength(self) -> float:
        """F_T = max(0, 1 - Var(R) / Var(T + R))."""
        return _strength(self.remainder, self.trend + self.remainder)

    def seasonal_strength(self) -> float:
        """F_S = max(0, 1 - Var(R) / Var(S + R))."""
        return _strength(self.remainder, self.seasonal + self.remainder)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "Period": [str(p) for p in self.periods],
                "Value": self.observed.astype(float),
                "Trend": self.trend.astype(float),
                "Seasonal": self.seasonal.astype(float),
                "Remainder": self.remainder.astype(float),
            }
        )

    def records(self) -> list[dict[str, Any]]:
        return self.to_frame().to_dict(orient="records")


def _strength(remainder: np.ndarray, combined: np.ndarray) -> float:
    denom = float(np.var(combined))
    if denom <= 0.0:
        return 0.0
    return max(0.0, 1.0 - float(np.var(remainder)) / denom)


def _robustness_weights(remainder: np.ndarray) -> np.ndarray:
    r = np.abs(remainder)
    h = 6.0 * float(np.median(r))
    if h <= 0.0:
        return np.ones_like(r)
    return bisquare(r / h)


def _converged(prev: np.ndarray, cur: np.ndarray, tol: float) -> bool:
    span = max(prev.max(), cur.max()) - min(prev.min(), cur.min())
    change = float(np.max(np.abs(cur - prev)))
    if span <= 0.0:
        return change == 0.0
    return change / span < tol


def _inner_pass(
    y: np.ndarray,
    trend: np.ndarray,
    rw: np.ndarray,
    period: int,
    windows: tuple[int, int, int],
    settings: STLSettings,
) -> tuple[np.ndarray, np.ndarray]:
    n = y.size
    ns, nt, nl = windows

    # 1-2) cycle-subseries smoothing on the detrended series, extended by one
    # cycle at each end: cycle[i] belongs to time i - period.
    detrended = y - trend
    cycle = np.empty(n + 2 * period, dtype=float)
    for k in range(period):
        idx = np.arange(k, n, period)
        m = idx.size
        cycle[k::period] = loess(
            detrended[idx],
            np.arange(-1, m + 1),
            window=ns,
            degree=settings.seasonal_deg,
            robustness=rw[idx],
        )

    # 3) low-pass filter of the cycle-subseries; leaves exactly n points
    low = moving_average(moving_average(moving_average(cycle, period), period), 3)
    low = loess(low, np.arange(n), window=nl, degree=settings.low_pass_deg)
    seasonal = cycle[period : period + n] - low

    # 4) trend from the deseasonalized series
    deseasonalized = y - seasonal
    new_trend = loess(deseasonalized, np.arange(n), window=nt, degree=settings.trend_deg, robustness=rw)
    return seasonal, new_trend


def decompose(series: TimeSeries, settings: STLSettings | None = None) -> Decomposition:
    """Split ``series`` into trend + seasonal + remainder."""
    settings = settings or STLSettings()
    period = series.season_length
    n = len(series)
    if period < 2:
        raise InsufficientData(f"seasonal period must be >= 2 for decomposition, got {period}")
    if n < 2 * period:
        raise InsufficientData(f"decomposition needs >= {2 * period} observations (2 cycles), got {n}")

    windows = settings.windows(period)
    n_inner, n_outer = settings.iterations()

    y = series.values
    trend = np.zeros(n)
    seasonal = np.zeros(n)
    rw = np.ones(n)
    passes = 0

    for outer in range(n_outer + 1):
        for _ in range(n_inner):
            prev = trend
            seasonal, trend = _inner_pass(y, trend, rw, period, windows, settings)
            passes += 1
            if _converged(prev, trend, settings.tol):
                break
        if outer < n_outer:
            rw = _robustness_weights(y - trend - seasonal)

    remainder = y - trend - seasonal
    logger.debug(
        "STL %s..%s: windows=%s passes=%d robust=%s",
        series.start,
        series.end,
        windows,
        passes,
        settings.robust,
    )
    return Decomposition(
        series=series,
        trend=trend,
        seasonal=seasonal,
        remainder=remainder,
        weights=rw,
        settings=settings,
        passes=passes,
    )
