"""src/birthcast/validation/checks.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from birthcast.validation.schemas import BIRTHS_MONTHLY, SchemaSpec, assert_schema


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    errors: tuple[str, ...]

    def raise_if_failed(self) -> None:
        if not self.ok:
            msg = "\n".join(self.errors) if self.errors else "Validation failed."
            raise ValueError(msg)


def _as_int_series(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s, errors="coerce").astype("Int64")


def _as_float_series(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s, errors="coerce")


def check_year_range(df: pd.DataFrame, *, col: str = "Year", min_year: int | None = None, max_year: int | None = None) -> list[str]:
    errs: list[str] = []
    if col not in df.columns:
        return errs
    y = _as_int_series(df[col])
    if min_year is not None:
        bad = y < int(min_year)
        if int(bad.sum()):
            errs.append(f"{col}: {int(bad.sum())} rows below min_year={min_year}")
    if max_year is not None:
        bad = y > int(max_year)
        if int(bad.sum()):
            errs.append(f"{col}: {int(bad.sum())} rows above max_year={max_year}")
    return errs


def check_month_range(df: pd.DataFrame, *, col: str = "Month") -> list[str]:
    errs: list[str] = []
    if col not in df.columns:
        return errs
    m = _as_int_series(df[col])
    bad = (m < 1) | (m > 12) | m.isna()
    n_bad = int(bad.sum())
    if n_bad:
        sample = df.loc[bad.to_numpy(dtype=bool), col].head(10).tolist()
        errs.append(f"{col}: expected [1..12]; bad_count={n_bad}; sample={sample}")
    return errs


def check_finite(df: pd.DataFrame, cols: Sequence[str]) -> list[str]:
    errs: list[str] = []
    for c in cols:
        if c not in df.columns:
            continue
        x = _as_float_series(df[c]).to_numpy(dtype=float)
        n_bad = int((~np.isfinite(x)).sum())
        if n_bad:
            errs.append(f"{c}: {n_bad} missing or non-finite values")
    return errs


def check_nonnegative(df: pd.DataFrame, cols: Sequence[str]) -> list[str]:
    errs: list[str] = []
    for c in cols:
        if c not in df.columns:
            continue
        x = _as_float_series(df[c])
        bad = x < 0
        n_bad = int(bad.sum())
        if n_bad:
            errs.append(f"{c}: {n_bad} negative values found")
    return errs


def check_unique_keys(df: pd.DataFrame, keys: Sequence[str]) -> list[str]:
    errs: list[str] = []
    missing = [k for k in keys if k not in df.columns]
    if missing:
        return errs

    dup_mask = df.duplicated(subset=list(keys), keep=False)
    n_dup = int(dup_mask.sum())
    if n_dup:
        sample = df.loc[dup_mask, list(keys)].head(10).to_dict(orient="records")
        errs.append(f"duplicate keys on {list(keys)}; dup_rows={n_dup}; sample={sample}")
    return errs


def missing_months(df: pd.DataFrame, *, year_col: str = "Year", month_col: str = "Month") -> list[tuple[int, int]]:
    """(year, month) pairs absent between the first and last observed month."""
    y = _as_int_series(df[year_col])
    m = _as_int_series(df[month_col])
    valid = y.notna() & m.notna()
    if not bool(valid.any()):
        return []
    ordinals = (y[valid].astype(int) * 12 + (m[valid].astype(int) - 1)).to_numpy()
    expected = np.arange(ordinals.min(), ordinals.max() + 1)
    gaps = np.setdiff1d(expected, ordinals)
    return [(int(o // 12), int(o % 12) + 1) for o in gaps]


def check_contiguous_months(df: pd.DataFrame, *, year_col: str = "Year", month_col: str = "Month") -> list[str]:
    errs: list[str] = []
    if year_col not in df.columns or month_col not in df.columns:
        return errs
    gaps = missing_months(df, year_col=year_col, month_col=month_col)
    if gaps:
        sample = [f"{y:04d}-{m:02d}" for y, m in gaps[:10]]
        errs.append(f"missing months: count={len(gaps)}; sample={sample}")
    return errs


def validate_df(
    df: pd.DataFrame,
    *,
    schema: SchemaSpec | None = None,
    year_col: str | None = None,
    year_min: int | None = None,
    year_max: int | None = None,
    month_col: str | None = None,
    contiguous: bool = False,
    finite_cols: Sequence[str] = (),
    nonnegative_cols: Sequence[str] = (),
    unique_keys: Sequence[str] = (),
) -> CheckResult:
    """
    Generic validation runner.
    - validates required columns via schema (if provided)
    - validates year range (if year_col + bounds)
    - validates month range (if month_col) and gap-free months (if contiguous)
    - validates finiteness, nonnegativity and uniqueness (optional)
    """
    errors: list[str] = []

    if schema is not None:
        try:
            assert_schema(df, schema)
        except KeyError as e:
            errors.append(str(e))
            # If schema fails, don't attempt downstream checks that may crash
            return CheckResult(ok=False, errors=tuple(errors))

    if year_col:
        errors.extend(check_year_range(df, col=year_col, min_year=year_min, max_year=year_max))

    if month_col:
        errors.extend(check_month_range(df, col=month_col))

    if finite_cols:
        errors.extend(check_finite(df, cols=list(finite_cols)))

    if nonnegative_cols:
        errors.extend(check_nonnegative(df, cols=list(nonnegative_cols)))

    if unique_keys:
        errors.extend(check_unique_keys(df, keys=list(unique_keys)))

    if contiguous and year_col and month_col:
        errors.extend(check_contiguous_months(df, year_col=year_col, month_col=month_col))

    return CheckResult(ok=(len(errors) == 0), errors=tuple(errors))


def validate_births_monthly(df: pd.DataFrame, *, start_year: int | None = None) -> CheckResult:
    return validate_df(
        df,
        schema=BIRTHS_MONTHLY,
        year_col="Year",
        year_min=start_year,
        month_col="Month",
        contiguous=True,
        finite_cols=("Number",),
        nonnegative_cols=("Number",),
        unique_keys=("Year", "Month"),
    )
