"""src/birthcast/decomposition/__init__.py"""

from .loess import loess, moving_average
from .stl import Decomposition, STLSettings, decompose

__all__ = [
    "loess",
    "moving_average",
    "Decomposition",
    "STLSettings",
    "decompose",
]
