"""tests/unit/test_selection.py"""

from __future__ import annotations

import math

import pytest

from birthcast.modeling.evaluation import AccuracyReport, MetricPack
from birthcast.modeling.selection import pick_best_model


def _report() -> AccuracyReport:
    return AccuracyReport(
        {
            "naive": MetricPack(rmse=30.0, mae=25.0, smape=3.0, n=12),
            "ets": MetricPack(rmse=12.0, mae=10.0, smape=1.2, n=12),
            "ets_damped": MetricPack(rmse=14.0, mae=9.0, smape=1.1, n=12),
        }
    )


def test_lowest_primary_metric_wins() -> None:
    assert pick_best_model(_report(), primary="rmse").best_model == "ets"
    assert pick_best_model(_report(), primary="mae").best_model == "ets_damped"


def test_candidates_restrict_choice() -> None:
    res = pick_best_model(_report(), primary="rmse", candidates=["naive", "ets_damped"])
    assert res.best_model == "ets_damped"
    assert res.to_dict()["Best_Model"] == "ets_damped"


def test_ties_fall_back_to_mae_then_name() -> None:
    rows = [
        {"Model": "b", "RMSE": 5.0, "MAE": 4.0, "SMAPE": 1.0},
        {"Model": "a", "RMSE": 5.0, "MAE": 4.0, "SMAPE": 1.0},
        {"Model": "c", "RMSE": 5.0, "MAE": 3.0, "SMAPE": 1.0},
    ]
    assert pick_best_model(rows, primary="rmse").best_model == "c"
    assert pick_best_model(rows[:2], primary="rmse").best_model == "a"


def test_nan_rows_are_skipped() -> None:
    rows = [
        {"Model": "x", "RMSE": math.nan, "MAE": 1.0},
        {"Model": "y", "RMSE": 7.0, "MAE": 2.0},
    ]
    assert pick_best_model(rows).best_model == "y"


def test_errors() -> None:
    with pytest.raises(ValueError):
        pick_best_model(_report(), primary="mape")
    with pytest.raises(ValueError):
        pick_best_model([])
    with pytest.raises(ValueError):
        pick_best_model([{"Model": "x", "RMSE": math.nan}])
