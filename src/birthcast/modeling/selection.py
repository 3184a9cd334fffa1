"""src/birthcast/modeling/selection.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

import numpy as np

from birthcast.modeling.evaluation import AccuracyReport

PrimaryMetric = Literal["rmse", "mae", "smape"]

_METRIC_KEYS = {"rmse": "RMSE", "mae": "MAE", "smape": "SMAPE"}


@dataclass(frozen=True)
class SelectionResult:
    best_model: str
    best_row: dict

    def to_dict(self) -> dict:
        return {"Best_Model": self.best_model, **self.best_row}


def _metric_key(primary: str) -> str:
    p = str(primary).strip().lower()
    if p not in _METRIC_KEYS:
        raise ValueError(f"unknown metric {primary!r}; expected one of {sorted(_METRIC_KEYS)}")
    return _METRIC_KEYS[p]


def _as_float(v: object) -> float:
    try:
        return float(v)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return float("nan")


def pick_best_model(
    rows: AccuracyReport | list[dict],
    *,
    primary: PrimaryMetric | str = "rmse",
    candidates: Iterable[str] | None = None,
) -> SelectionResult:
    """
    rows: an AccuracyReport, or dicts with "Model" and "RMSE"/"MAE"/"SMAPE".

    Lowest ``primary`` wins; ties fall back to MAE, then RMSE, then the model
    name so the choice is deterministic. ``candidates`` restricts the choice,
    e.g. to the two ETS configurations.
    """
    if isinstance(rows, AccuracyReport):
        rows = rows.rows()
    if candidates is not None:
        wanted = set(candidates)
        rows = [r for r in rows if str(r.get("Model", "")).strip() in wanted]
    if not rows:
        raise ValueError("No model rows to select from.")

    metric_key = _metric_key(primary)
    finite = [r for r in rows if np.isfinite(_as_float(r.get(metric_key, np.nan)))]
    if not finite:
        raise ValueError("All metric values are NaN; cannot select a best model.")

    best_row = min(
        finite,
        key=lambda r: (
            _as_float(r[metric_key]),
            _as_float(r.get("MAE", np.inf)),
            _as_float(r.get("RMSE", np.inf)),
            str(r.get("Model", "")),
        ),
    )
    best_model = str(best_row.get("Model", "unknown")).strip()
    return SelectionResult(best_model=best_model, best_row=dict(best_row))
