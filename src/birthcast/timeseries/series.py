"""src/birthcast/timeseries/series.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
import pandas as pd

from birthcast.common.errors import EmptySplit, MalformedSeries, OutOfRange
from birthcast.timeseries.period import Period

DEFAULT_SEASON_LENGTH = 12


def _readonly(values: np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class TimeSeries:
    """
    Gap-free monthly series.

    Stored as a start period plus a read-only value array, so contiguity holds
    by construction. Every derived series (slice, split, concat) is a new
    object with its own copy of the values.
    """
    start: Period
    values: np.ndarray
    season_length: int = DEFAULT_SEASON_LENGTH

    def __post_init__(self) -> None:
        arr = np.asarray(self.values, dtype=float)
        if arr.ndim != 1:
            raise MalformedSeries(f"values must be one-dimensional, got shape {arr.shape}")
        if arr.size == 0:
            raise MalformedSeries("a series needs at least one value")
        if not np.all(np.isfinite(arr)):
            bad = np.flatnonzero(~np.isfinite(arr))[:5].tolist()
            raise MalformedSeries(f"non-finite values at positions {bad}")
        if int(self.season_length) < 1:
            raise MalformedSeries(f"season_length must be >= 1, got {self.season_length}")
        object.__setattr__(self, "values", _readonly(arr))
        object.__setattr__(self, "season_length", int(self.season_length))

    # ---------- construction ----------

    @classmethod
    def from_pairs(
        cls,
        periods: Sequence[Period],
        values: Sequence[float],
        *,
        season_length: int = DEFAULT_SEASON_LENGTH,
    ) -> TimeSeries:
        periods = [Period.parse(p) for p in periods]
        values = list(values)
        if len(periods) != len(values):
            raise MalformedSeries(f"length mismatch: {len(periods)} periods vs {len(values)} values")
        if not periods:
            raise MalformedSeries("a series needs at least one value")

        for prev, cur in zip(periods, periods[1:]):
            step = cur - prev
            if step != 1:
                kind = "gap" if step > 1 else "non-increasing periods"
                raise MalformedSeries(f"{kind} between {prev} and {cur}")

        try:
            arr = np.asarray(values, dtype=float)
        except (TypeError, ValueError) as e:
            raise MalformedSeries(f"values are not numeric: {e}") from e
        return cls(start=periods[0], values=arr, season_length=season_length)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        *,
        value_col: str = "Number",
        season_length: int = DEFAULT_SEASON_LENGTH,
    ) -> TimeSeries:
        """Build from a canonical ``Year, Month, <value_col>`` frame (sorted here)."""
        missing = {"Year", "Month", value_col} - set(df.columns)
        if missing:
            raise MalformedSeries(f"frame missing columns {sorted(missing)}")
        d = df.sort_values(["Year", "Month"])
        periods = [Period(int(y), int(m)) for y, m in zip(d["Year"], d["Month"])]
        return cls.from_pairs(periods, d[value_col].to_numpy(dtype=float), season_length=season_length)

    # ---------- accessors ----------

    def __len__(self) -> int:
        return int(self.values.size)

    def __iter__(self) -> Iterator[tuple[Period, float]]:
        return iter(zip(self.periods, self.values.tolist()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return (
            self.start == other.start
            and self.season_length == other.season_length
            and np.array_equal(self.values, other.values)
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def end(self) -> Period:
        return self.start + (len(self) - 1)

    @property
    def periods(self) -> list[Period]:
        return periods_between(self.start, len(self))

    def index_of(self, period: Period) -> int:
        idx = Period.parse(period) - self.start
        if idx < 0 or idx >= len(self):
            raise OutOfRange(f"{period} outside series {self.start}..{self.end}")
        return idx

    def value_at(self, period: Period) -> float:
        return float(self.values[self.index_of(period)])

    def __contains__(self, period: object) -> bool:
        if not isinstance(period, Period):
            return False
        return self.start <= period <= self.end

    # ---------- derived series ----------

    def _derive(self, start: Period, values: np.ndarray) -> TimeSeries:
        return TimeSeries(start=start, values=values, season_length=self.season_length)

    def slice(self, from_period: Period, to_period: Period) -> TimeSeries:
        """Inclusive sub-series ``from_period..to_period``."""
        from_period, to_period = Period.parse(from_period), Period.parse(to_period)
        if from_period > to_period:
            raise OutOfRange(f"empty slice: {from_period} is after {to_period}")
        i = self.index_of(from_period)
        j = self.index_of(to_period)
        return self._derive(from_period, self.values[i : j + 1])

    def split(self, cutoff: Period) -> tuple[TimeSeries, TimeSeries]:
        """``train`` holds periods strictly before ``cutoff``; ``test`` the rest."""
        cutoff = Period.parse(cutoff)
        k = cutoff - self.start
        if k <= 0 or k >= len(self):
            side = "train" if k <= 0 else "test"
            raise EmptySplit(f"cutoff {cutoff} leaves the {side} side empty ({self.start}..{self.end})")
        return self._derive(self.start, self.values[:k]), self._derive(cutoff, self.values[k:])

    def split_last(self, n_test: int) -> tuple[TimeSeries, TimeSeries]:
        """Hold out the last ``n_test`` periods."""
        return self.split(self.end + (1 - int(n_test)))

    def head(self, k: int) -> TimeSeries:
        if k < 1:
            raise OutOfRange("head() needs k >= 1")
        return self._derive(self.start, self.values[:k])

    def tail(self, k: int) -> TimeSeries:
        if k < 1:
            raise OutOfRange("tail() needs k >= 1")
        k = min(k, len(self))
        return self._derive(self.end + (1 - k), self.values[-k:])

    def concat(self, other: TimeSeries) -> TimeSeries:
        """Join a series that starts right after this one ends."""
        if other.start != self.end.succ():
            raise MalformedSeries(f"cannot join {self.start}..{self.end} with {other.start}..{other.end}")
        return self._derive(self.start, np.concatenate([self.values, other.values]))

    def season_positions(self) -> np.ndarray:
        """Position within the seasonal cycle (0..S-1) for every observation."""
        return np.arange(len(self)) % self.season_length

    # ---------- export ----------

    def to_frame(self, value_col: str = "Number") -> pd.DataFrame:
        periods = self.periods
        return pd.DataFrame(
            {
                "Period": [str(p) for p in periods],
                "Year": [p.year for p in periods],
                "Month": [p.month for p in periods],
                value_col: self.values.astype(float),
            }
        )


def periods_between(start: Period, count: int) -> list[Period]:
    return [start + i for i in range(int(count))]
