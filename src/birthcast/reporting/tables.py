"""src/birthcast/reporting/tables.py"""

from __future__ import annotations

import pandas as pd

from birthcast.decomposition.stl import Decomposition
from birthcast.forecasting.forecast import Forecast
from birthcast.modeling.evaluation import AccuracyReport


def make_model_comparison_table(report: AccuracyReport, *, primary: str = "rmse") -> pd.DataFrame:
    """
    Output:
        Rank, Model, RMSE, MAE, SMAPE, N   (sorted by the primary metric)
    """
    d = report.to_frame()
    if d.empty:
        return pd.DataFrame(columns=["Rank", "Model", "RMSE", "MAE", "SMAPE", "N"])

    key = str(primary).strip().upper()
    if key not in d.columns:
        raise KeyError(f"unknown metric {primary!r}; columns: {list(d.columns)}")
    d = d.sort_values([key, "MAE", "Model"]).reset_index(drop=True)
    d.insert(0, "Rank", range(1, len(d) + 1))
    return d


def make_forecast_summary_table(forecasts: list[Forecast]) -> pd.DataFrame:
    """
    Output (one row per model):
        Model, Period_Start, Period_End, Forecast_Min, Forecast_Max, Forecast_Mean, Forecast_Total
    """
    cols = ["Model", "Period_Start", "Period_End", "Forecast_Min", "Forecast_Max", "Forecast_Mean", "Forecast_Total"]
    rows = [
        {
            "Model": fc.model_name,
            "Period_Start": str(fc.start),
            "Period_End": str(fc.end),
            "Forecast_Min": float(fc.point.min()),
            "Forecast_Max": float(fc.point.max()),
            "Forecast_Mean": float(fc.point.mean()),
            "Forecast_Total": float(fc.point.sum()),
        }
        for fc in forecasts
    ]
    return pd.DataFrame(rows, columns=cols)


def make_decomposition_summary_table(decomposition: Decomposition) -> pd.DataFrame:
    """
    Output (by calendar year):
        Year, Months, Observed_Total, Trend_Mean, Seasonal_Range, Remainder_Std
    """
    d = decomposition.to_frame()
    d["Year"] = [p.year for p in decomposition.periods]
    out = (
        d.groupby("Year", as_index=False)
        .agg(
            Months=("Value", "size"),
            Observed_Total=("Value", "sum"),
            Trend_Mean=("Trend", "mean"),
            Seasonal_Max=("Seasonal", "max"),
            Seasonal_Min=("Seasonal", "min"),
            Remainder_Std=("Remainder", "std"),
        )
        .sort_values("Year")
        .reset_index(drop=True)
    )
    out["Seasonal_Range"] = out["Seasonal_Max"] - out["Seasonal_Min"]
    return out[["Year", "Months", "Observed_Total", "Trend_Mean", "Seasonal_Range", "Remainder_Std"]]
