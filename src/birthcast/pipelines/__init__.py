"""src/birthcast/pipelines/__init__.py"""

from .run_decompose import run_decompose
from .run_forecast import run_forecast
from .run_train import TrainResult, run_train

__all__ = [
    "run_decompose",
    "run_forecast",
    "run_train",
    "TrainResult",
]
