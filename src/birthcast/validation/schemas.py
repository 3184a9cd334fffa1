"""src/birthcast/validation/schemas.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd


@dataclass(frozen=True)
class SchemaSpec:
    """Minimal schema specification for a DataFrame."""
    name: str
    required_cols: tuple[str, ...]


def _missing_cols(df: pd.DataFrame, required: Iterable[str]) -> list[str]:
    req = list(required)
    return [c for c in req if c not in df.columns]


BIRTHS_MONTHLY = SchemaSpec(
    name="births_monthly",
    required_cols=("Year", "Month", "Number"),
)

DECOMPOSITION_TABLE = SchemaSpec(
    name="decomposition",
    required_cols=("Period", "Value", "Trend", "Seasonal", "Remainder"),
)

FORECAST_TABLE = SchemaSpec(
    name="forecast",
    required_cols=("Period", "Model", "Forecast", "Lower_80", "Upper_80", "Lower_95", "Upper_95"),
)

MODEL_COMPARISON = SchemaSpec(
    name="model_comparison",
    required_cols=("Model", "RMSE", "MAE"),
)


def assert_schema(df: pd.DataFrame, spec: SchemaSpec) -> None:
    """Raise a KeyError if required columns are missing."""
    missing = _missing_cols(df, spec.required_cols)
    if missing:
        raise KeyError(
            f"{spec.name}: missing columns {missing}. Found: {list(df.columns)}"
        )
