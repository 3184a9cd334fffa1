"""src/birthcast/reporting/__init__.py"""

from __future__ import annotations

from .tables import (
    make_decomposition_summary_table,
    make_forecast_summary_table,
    make_model_comparison_table,
)

__all__ = [
    "make_model_comparison_table",
    "make_forecast_summary_table",
    "make_decomposition_summary_table",
]
