"""src/birthcast/io/readers.py"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from birthcast.common.errors import MalformedSeries
from birthcast.timeseries.series import DEFAULT_SEASON_LENGTH, TimeSeries
from birthcast.validation.checks import validate_births_monthly

logger = logging.getLogger(__name__)

_RENAME_MAP: dict[str, str] = {
    "year": "Year",
    "År": "Year",
    "Ar": "Year",
    "month": "Month",
    "Månad": "Month",
    "Manad": "Month",
    "births": "Number",
    "Births": "Number",
    "Total_Births": "Number",
    "total_births": "Number",
    "Antal": "Number",
    "Value": "Number",
    "value": "Number",
    "date": "Date",
    "Period": "Date",
    "period": "Date",
}


# ---------- generic helpers ----------

def read_csv(path: Path, *, dtype: dict[str, Any] | None = None) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing file:\n{path}")
    return pd.read_csv(path, dtype=dtype)


# ---------- domain-specific reads ----------

def clean_births_monthly(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize monthly births into:
        Year, Month, Number

    Accepts common raw variants like:
        year / År, month / Månad, or a single Date / Period column ("YYYY-MM")
        Births / Total_Births / Antal / Value / Number
    """
    d = df.copy()
    d.columns = [str(c).strip() for c in d.columns]
    d = d.rename(columns={c: _RENAME_MAP[c] for c in d.columns if c in _RENAME_MAP})

    if ("Year" not in d.columns or "Month" not in d.columns) and "Date" in d.columns:
        dates = pd.to_datetime(d["Date"].astype(str).str.strip(), errors="coerce")
        d["Year"] = dates.dt.year
        d["Month"] = dates.dt.month

    required = {"Year", "Month", "Number"}
    missing = required - set(d.columns)
    if missing:
        raise KeyError(f"Births missing columns {sorted(missing)}. Found: {list(d.columns)}")

    d["Year"] = pd.to_numeric(d["Year"], errors="coerce").astype("Int64")
    d["Month"] = pd.to_numeric(d["Month"], errors="coerce").astype("Int64")
    d["Number"] = pd.to_numeric(d["Number"], errors="coerce").astype(float)

    n_before = len(d)
    d = d.dropna(subset=["Year", "Month"]).copy()
    if len(d) < n_before:
        logger.warning("Dropped %d rows without a parseable year/month", n_before - len(d))
    d["Year"] = d["Year"].astype(int)
    d["Month"] = d["Month"].astype(int)

    return d[["Year", "Month", "Number"]].sort_values(["Year", "Month"]).reset_index(drop=True)


def read_births_monthly(path: Path) -> pd.DataFrame:
    return clean_births_monthly(read_csv(path))


def births_series(
    df: pd.DataFrame,
    *,
    season_length: int = DEFAULT_SEASON_LENGTH,
    start_year: int | None = None,
) -> TimeSeries:
    """Validate a canonical births frame and turn it into a TimeSeries."""
    d = df
    if start_year is not None:
        d = d[d["Year"] >= int(start_year)].copy()
    res = validate_births_monthly(d)
    if not res.ok:
        raise MalformedSeries("\n".join(res.errors))
    return TimeSeries.from_frame(d, value_col="Number", season_length=season_length)


def read_births_series(
    path: Path,
    *,
    season_length: int = DEFAULT_SEASON_LENGTH,
    start_year: int | None = None,
) -> TimeSeries:
    series = births_series(read_births_monthly(path), season_length=season_length, start_year=start_year)
    logger.info("Loaded %d months of births (%s..%s) from %s", len(series), series.start, series.end, path)
    return series
