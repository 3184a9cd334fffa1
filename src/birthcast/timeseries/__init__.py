"""src/birthcast/timeseries/__init__.py"""

from .period import Period
from .series import DEFAULT_SEASON_LENGTH, TimeSeries, periods_between

__all__ = [
    "Period",
    "TimeSeries",
    "DEFAULT_SEASON_LENGTH",
    "periods_between",
]
