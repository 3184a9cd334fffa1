"""src/birthcast/forecasting/intervals.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from scipy.stats import norm

DEFAULT_LEVELS: tuple[float, ...] = (0.8, 0.95)


def level_label(level: float) -> str:
    """0.8 -> "80", 0.975 -> "97.5"."""
    pct = round(float(level) * 100.0, 6)
    return f"{pct:g}"


@dataclass(frozen=True)
class IntervalLevels:
    """Central coverage levels for prediction intervals, e.g. (0.8, 0.95)."""
    levels: tuple[float, ...] = DEFAULT_LEVELS

    def __post_init__(self) -> None:
        cleaned = tuple(sorted({float(x) for x in self.levels}))
        if not cleaned:
            raise ValueError("at least one interval level is required")
        for lv in cleaned:
            if not 0.0 < lv < 1.0:
                raise ValueError(f"interval level must be in (0, 1), got {lv}")
        object.__setattr__(self, "levels", cleaned)

    @classmethod
    def from_sequence(cls, levels: Sequence[float] | None) -> IntervalLevels:
        return cls(tuple(levels)) if levels else cls()

    def __iter__(self):
        return iter(self.levels)


@dataclass(frozen=True, eq=False)
class IntervalResult:
    """
    Prediction interval bounds for one coverage level.

    lower/upper: arrays aligned with the point forecast
    level: e.g. 0.8, 0.95
    """
    lower: np.ndarray
    upper: np.ndarray
    level: float

    def to_frame(self, periods: Iterable[object]) -> pd.DataFrame:
        label = level_label(self.level)
        return pd.DataFrame(
            {
                "Period": [str(p) for p in periods],
                f"Lower_{label}": self.lower.astype(float),
                f"Upper_{label}": self.upper.astype(float),
            }
        )


def z_from_level(level: float) -> float:
    """
    Normal quantile for a central interval.
    0.80 -> ~1.2816
    0.95 -> ~1.9600
    """
    level = float(level)
    if not 0.0 < level < 1.0:
        raise ValueError(f"level must be in (0, 1), got {level}")
    return float(norm.ppf(0.5 + level / 2.0))


def normal_pi(yhat: np.ndarray, std_error: np.ndarray | float, level: float = 0.95) -> IntervalResult:
    """
    Prediction interval assuming Normal errors; ``std_error`` may vary by step.
    """
    yhat = np.asarray(yhat, dtype=float)
    se = np.broadcast_to(np.asarray(std_error, dtype=float), yhat.shape)
    if np.any(se < 0) or not np.all(np.isfinite(se)):
        raise ValueError("standard errors must be finite and non-negative")
    z = z_from_level(level)
    return IntervalResult(lower=yhat - z * se, upper=yhat + z * se, level=float(level))
