"""src/birthcast/modeling/__init__.py"""

from .base import Forecaster, ModelFit
from .baselines import (
    DriftFit,
    DriftForecaster,
    MeanFit,
    MeanForecaster,
    NaiveFit,
    NaiveForecaster,
    SeasonalNaiveFit,
    SeasonalNaiveForecaster,
)
from .ets import ETSBounds, ETSConfig, ETSFit, ETSForecaster
from .evaluation import AccuracyReport, MetricPack, compute_metrics, evaluate, evaluate_many
from .registry import MODEL_NAMES, build_forecaster, build_forecasters
from .selection import SelectionResult, pick_best_model

__all__ = [
    "Forecaster",
    "ModelFit",
    "MeanFit",
    "MeanForecaster",
    "NaiveFit",
    "NaiveForecaster",
    "SeasonalNaiveFit",
    "SeasonalNaiveForecaster",
    "DriftFit",
    "DriftForecaster",
    "ETSBounds",
    "ETSConfig",
    "ETSFit",
    "ETSForecaster",
    "AccuracyReport",
    "MetricPack",
    "compute_metrics",
    "evaluate",
    "evaluate_many",
    "MODEL_NAMES",
    "build_forecaster",
    "build_forecasters",
    "SelectionResult",
    "pick_best_model",
]
