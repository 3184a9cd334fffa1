"""src/birthcast/timeseries/period.py"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

_PERIOD_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-\d{1,2})?\s*$")


@dataclass(frozen=True, order=True)
class Period:
    """
    One calendar month.

    Ordering is chronological. ``b - a`` is the number of months from ``a`` to
    ``b`` and ``a + k`` shifts ``a`` by ``k`` months (``k`` may be negative).
    """
    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        object.__setattr__(self, "year", int(self.year))
        object.__setattr__(self, "month", int(self.month))

    @property
    def ordinal(self) -> int:
        return self.year * 12 + (self.month - 1)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> Period:
        y, m = divmod(int(ordinal), 12)
        return cls(year=y, month=m + 1)

    @classmethod
    def parse(cls, value: Any) -> Period:
        """Accept ``Period``, ``date`` (incl. ``pd.Timestamp``), or ``"YYYY-MM"`` / ``"YYYY-MM-DD"`` strings."""
        if isinstance(value, Period):
            return value
        if isinstance(value, date):
            return cls(year=int(value.year), month=int(value.month))
        m = _PERIOD_RE.match(str(value))
        if not m:
            raise ValueError(f"Cannot parse period from {value!r}; expected YYYY-MM")
        return cls(year=int(m.group(1)), month=int(m.group(2)))

    def succ(self) -> Period:
        return self + 1

    def pred(self) -> Period:
        return self + (-1)

    def __add__(self, months: int) -> Period:
        if not isinstance(months, int):
            return NotImplemented
        return Period.from_ordinal(self.ordinal + months)

    def __sub__(self, other: Period) -> int:
        if not isinstance(other, Period):
            return NotImplemented
        return self.ordinal - other.ordinal

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
