"""src/birthcast/forecasting/forecast.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from birthcast.forecasting.intervals import IntervalLevels, IntervalResult, level_label, normal_pi
from birthcast.timeseries.period import Period
from birthcast.timeseries.series import periods_between


@dataclass(frozen=True, eq=False)
class Forecast:
    """
    Point forecasts and prediction intervals for consecutive periods.

    ``start`` is the first forecast period, i.e. the successor of the last
    training period.
    """
    model_name: str
    start: Period
    point: np.ndarray
    std_error: np.ndarray
    intervals: tuple[IntervalResult, ...]

    def __post_init__(self) -> None:
        point = np.array(self.point, dtype=float, copy=True)
        se = np.array(self.std_error, dtype=float, copy=True)
        if point.ndim != 1 or point.shape != se.shape:
            raise ValueError(f"point {point.shape} and std_error {se.shape} must be aligned 1-D arrays")
        for iv in self.intervals:
            if iv.lower.shape != point.shape or iv.upper.shape != point.shape:
                raise ValueError(f"interval {iv.level} is not aligned with the point forecast")
            iv.lower.setflags(write=False)
            iv.upper.setflags(write=False)
        point.setflags(write=False)
        se.setflags(write=False)
        object.__setattr__(self, "point", point)
        object.__setattr__(self, "std_error", se)
        object.__setattr__(self, "intervals", tuple(sorted(self.intervals, key=lambda iv: iv.level)))

    @classmethod
    def from_normal(
        cls,
        *,
        model_name: str,
        start: Period,
        point: np.ndarray,
        std_error: np.ndarray,
        levels: IntervalLevels | None = None,
    ) -> Forecast:
        levels = levels or IntervalLevels()
        point = np.asarray(point, dtype=float)
        return cls(
            model_name=model_name,
            start=start,
            point=point,
            std_error=np.asarray(std_error, dtype=float),
            intervals=tuple(normal_pi(point, std_error, level=lv) for lv in levels),
        )

    @property
    def horizon(self) -> int:
        return int(self.point.size)

    @property
    def end(self) -> Period:
        return self.start + (self.horizon - 1)

    @property
    def periods(self) -> list[Period]:
        return periods_between(self.start, self.horizon)

    @property
    def levels(self) -> tuple[float, ...]:
        return tuple(iv.level for iv in self.intervals)

    def interval(self, level: float) -> IntervalResult:
        for iv in self.intervals:
            if abs(iv.level - float(level)) < 1e-9:
                return iv
        raise KeyError(f"no {level_label(level)}% interval; available: {[level_label(lv) for lv in self.levels]}")

    @property
    def lower80(self) -> np.ndarray:
        return self.interval(0.8).lower

    @property
    def upper80(self) -> np.ndarray:
        return self.interval(0.8).upper

    @property
    def lower95(self) -> np.ndarray:
        return self.interval(0.95).lower

    @property
    def upper95(self) -> np.ndarray:
        return self.interval(0.95).upper

    def to_frame(self) -> pd.DataFrame:
        periods = self.periods
        base = pd.DataFrame(
            {
                "Period": [str(p) for p in periods],
                "Model": self.model_name,
                "Forecast": self.point.astype(float),
                "Std_Error": self.std_error.astype(float),
            }
        )
        for iv in self.intervals:
            base = base.merge(iv.to_frame(periods), on="Period", how="left")
        return base

    def records(self) -> list[dict[str, Any]]:
        return self.to_frame().to_dict(orient="records")
