"""src/birthcast/forecasting/__init__.py"""

from .forecast import Forecast
from .intervals import DEFAULT_LEVELS, IntervalLevels, IntervalResult, normal_pi, z_from_level

__all__ = [
    "Forecast",
    "DEFAULT_LEVELS",
    "IntervalLevels",
    "IntervalResult",
    "normal_pi",
    "z_from_level",
]
