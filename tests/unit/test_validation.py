"""tests/unit/test_validation.py"""

from __future__ import annotations

import pandas as pd
import pytest

from birthcast.validation.checks import missing_months, validate_births_monthly, validate_df
from birthcast.validation.schemas import BIRTHS_MONTHLY, FORECAST_TABLE, assert_schema


def _births(months: list[tuple[int, int]], values: list[float] | None = None) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Year": [y for y, _ in months],
            "Month": [m for _, m in months],
            "Number": values if values is not None else [100.0] * len(months),
        }
    )


def test_validate_births_passes_contiguous_months() -> None:
    df = _births([(2023, 11), (2023, 12), (2024, 1)])
    validate_births_monthly(df).raise_if_failed()  # should not raise


def test_validate_df_fails_on_missing_columns() -> None:
    df = pd.DataFrame({"Year": [2023]})
    res = validate_df(df, schema=BIRTHS_MONTHLY, year_col="Year")
    assert not res.ok
    with pytest.raises(ValueError):
        res.raise_if_failed()


def test_validate_births_fails_on_duplicates() -> None:
    res = validate_births_monthly(_births([(2023, 1), (2023, 1), (2023, 2)]))
    assert not res.ok
    assert any("duplicate" in e for e in res.errors)


def test_validate_births_fails_on_negative() -> None:
    res = validate_births_monthly(_births([(2023, 1), (2023, 2)], [100.0, -1.0]))
    assert any("negative" in e for e in res.errors)


def test_validate_births_fails_on_missing_value() -> None:
    res = validate_births_monthly(_births([(2023, 1), (2023, 2)], [100.0, float("nan")]))
    assert any("non-finite" in e for e in res.errors)


def test_validate_births_fails_on_bad_month() -> None:
    res = validate_births_monthly(_births([(2023, 1), (2023, 13)]))
    assert any("Month" in e for e in res.errors)


def test_gap_is_reported() -> None:
    df = _births([(2023, 11), (2024, 2)])
    assert missing_months(df) == [(2023, 12), (2024, 1)]
    res = validate_births_monthly(df)
    assert any("missing months" in e for e in res.errors)


def test_start_year_bound() -> None:
    res = validate_births_monthly(_births([(1999, 12), (2000, 1)]), start_year=2000)
    assert any("min_year" in e for e in res.errors)


def test_assert_schema_raises_key_error() -> None:
    with pytest.raises(KeyError):
        assert_schema(pd.DataFrame({"Period": ["2024-01"]}), FORECAST_TABLE)
