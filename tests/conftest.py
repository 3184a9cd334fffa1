"""tests/conftest.py"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pandas as pd
import pytest
import yaml

from birthcast.common.config import AppConfig, load_config
from birthcast.timeseries.period import Period
from birthcast.timeseries.series import TimeSeries

START = Period(2010, 1)


def seasonal_pattern(n: int) -> np.ndarray:
    """Zero-sum yearly pattern (period 12)."""
    t = np.arange(n)
    return 80.0 * np.sin(2 * np.pi * t / 12) + 30.0 * np.cos(2 * np.pi * t / 6)


def births_like(n: int = 120, *, slope: float = 2.0, noise: float = 0.0, seed: int = 0) -> np.ndarray:
    t = np.arange(n, dtype=float)
    rng = np.random.default_rng(seed)
    return 1000.0 + slope * t + seasonal_pattern(n) + noise * rng.standard_normal(n)


@pytest.fixture
def make_series() -> Callable[..., TimeSeries]:
    def _make(values, start: Period = START, season_length: int = 12) -> TimeSeries:
        return TimeSeries(start=start, values=np.asarray(values, dtype=float), season_length=season_length)

    return _make


@pytest.fixture
def clean_series(make_series) -> TimeSeries:
    """Noise-free linear trend + yearly season, 10 years."""
    return make_series(births_like(120))


@pytest.fixture
def noisy_series(make_series) -> TimeSeries:
    return make_series(births_like(120, noise=15.0, seed=42))


def write_births_csv(path: Path, values: np.ndarray, start: Period = START) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    periods = [start + i for i in range(len(values))]
    pd.DataFrame(
        {
            "Year": [p.year for p in periods],
            "Month": [p.month for p in periods],
            "Births": np.round(values, 0),
        }
    ).to_csv(path, index=False)
    return path


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    # Emulate repository root in temp dir
    (tmp_path / "configs").mkdir(parents=True, exist_ok=True)
    (tmp_path / "data" / "raw").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def cfg(project_root: Path) -> AppConfig:
    write_births_csv(project_root / "data" / "raw" / "births_monthly.csv", births_like(96, noise=10.0, seed=7))
    raw = {
        "paths": {
            "models_dir": "artifacts/models",
            "metrics_dir": "artifacts/metrics",
            "forecasts_dir": "artifacts/forecasts",
        },
        "data": {"births_file": "data/raw/births_monthly.csv", "season_length": 12},
        "logging": {"level": "INFO"},
        "decomposition": {"seasonal": 7},
        "modeling": {
            "candidates": ["mean", "naive", "seasonal_naive", "drift", "ets", "ets_damped"],
            "metric_primary": "rmse",
            "holdout_months": 12,
            "n_jobs": 1,
            "ets": {"n_restarts": 2, "max_iter": 200},
        },
        "forecast": {"horizon": 18, "interval_levels": [0.8, 0.95]},
    }
    config_path = project_root / "configs" / "config.yaml"
    config_path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    return load_config(config_path)


@pytest.fixture
def synth() -> Callable[..., np.ndarray]:
    """Factory for births-like arrays: ``synth(n, slope=..., noise=..., seed=...)``."""
    return births_like


@pytest.fixture
def season() -> Callable[[int], np.ndarray]:
    return seasonal_pattern
