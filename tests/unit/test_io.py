"""tests/unit/test_io.py"""

from __future__ import annotations

from pathlib import Path

import joblib
import numpy as np
import pandas as pd
import pytest

from birthcast.common.errors import MalformedSeries
from birthcast.io.readers import clean_births_monthly, read_births_series
from birthcast.io.writers import load_fit, save_fit
from birthcast.modeling.baselines import SeasonalNaiveForecaster
from birthcast.modeling.ets import ETSConfig, ETSForecaster
from birthcast.timeseries.period import Period


def test_clean_accepts_swedish_headers() -> None:
    raw = pd.DataFrame({"År": [2024, 2023], "Månad": [1, 12], "Antal": ["9500", "9800"]})
    d = clean_births_monthly(raw)
    assert list(d.columns) == ["Year", "Month", "Number"]
    assert d["Year"].tolist() == [2023, 2024]
    assert d["Number"].tolist() == [9800.0, 9500.0]


def test_clean_accepts_single_date_column() -> None:
    raw = pd.DataFrame({"Period": ["2023-11", "2023-12", "2024-01"], "Value": [1.0, 2.0, 3.0]})
    d = clean_births_monthly(raw)
    assert d[["Year", "Month"]].values.tolist() == [[2023, 11], [2023, 12], [2024, 1]]


def test_clean_requires_value_column() -> None:
    with pytest.raises(KeyError):
        clean_births_monthly(pd.DataFrame({"Year": [2024], "Month": [1]}))


def test_read_births_series(tmp_path: Path) -> None:
    path = tmp_path / "births.csv"
    pd.DataFrame({"Year": [2020] * 12, "Month": list(range(1, 13)), "Births": np.arange(12) + 100}).to_csv(path, index=False)

    ts = read_births_series(path)
    assert ts.start == Period(2020, 1)
    assert len(ts) == 12
    assert ts.value_at(Period(2020, 3)) == 102.0


def test_read_births_series_rejects_gap(tmp_path: Path) -> None:
    path = tmp_path / "births.csv"
    pd.DataFrame({"Year": [2020, 2020, 2020], "Month": [1, 2, 4], "Births": [1, 2, 3]}).to_csv(path, index=False)
    with pytest.raises(MalformedSeries):
        read_births_series(path)


def test_read_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_births_series(tmp_path / "nope.csv")


def test_saved_fit_forecasts_identically(tmp_path: Path, noisy_series) -> None:
    model = ETSForecaster(ETSConfig(n_restarts=1))
    fit = model.fit(noisy_series)
    path = save_fit(fit, tmp_path / "models" / "births_ets.joblib", holdout_months=12)

    loaded, payload = load_fit(path)
    assert payload["model_name"] == "ets"
    assert payload["train_end"] == str(noisy_series.end)
    assert payload["holdout_months"] == 12

    np.testing.assert_allclose(model.forecast(loaded, 12).point, model.forecast(fit, 12).point)


def test_load_fit_rejects_foreign_payload(tmp_path: Path, clean_series) -> None:
    path = tmp_path / "other.joblib"
    joblib.dump({"model": "not a fit"}, path)
    with pytest.raises(TypeError):
        load_fit(path)
    with pytest.raises(FileNotFoundError):
        load_fit(tmp_path / "missing.joblib")

    # baseline fits persist too
    fit = SeasonalNaiveForecaster().fit(clean_series)
    loaded, _ = load_fit(save_fit(fit, tmp_path / "snaive.joblib"))
    np.testing.assert_array_equal(loaded.last_cycle, fit.last_cycle)
