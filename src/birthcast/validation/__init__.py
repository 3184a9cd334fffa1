"""src/birthcast/validation/__init__.py"""

from __future__ import annotations

from .checks import (
    CheckResult,
    missing_months,
    validate_births_monthly,
    validate_df,
)
from .schemas import (
    BIRTHS_MONTHLY,
    DECOMPOSITION_TABLE,
    FORECAST_TABLE,
    MODEL_COMPARISON,
    SchemaSpec,
    assert_schema,
)

__all__ = [
    # checks
    "CheckResult",
    "missing_months",
    "validate_df",
    "validate_births_monthly",
    # schemas
    "SchemaSpec",
    "assert_schema",
    "BIRTHS_MONTHLY",
    "DECOMPOSITION_TABLE",
    "FORECAST_TABLE",
    "MODEL_COMPARISON",
]
