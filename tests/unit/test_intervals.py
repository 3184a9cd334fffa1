"""tests/unit/test_intervals.py"""

from __future__ import annotations

import numpy as np
import pytest

from birthcast.forecasting.forecast import Forecast
from birthcast.forecasting.intervals import IntervalLevels, level_label, normal_pi, z_from_level
from birthcast.timeseries.period import Period


def test_z_values() -> None:
    assert z_from_level(0.8) == pytest.approx(1.2816, abs=1e-4)
    assert z_from_level(0.95) == pytest.approx(1.9600, abs=1e-4)


@pytest.mark.parametrize("level", [0.0, 1.0, 1.5])
def test_invalid_level(level: float) -> None:
    with pytest.raises(ValueError):
        z_from_level(level)
    with pytest.raises(ValueError):
        IntervalLevels((level,))


def test_levels_are_sorted_and_deduplicated() -> None:
    assert IntervalLevels((0.95, 0.8, 0.95)).levels == (0.8, 0.95)
    assert IntervalLevels.from_sequence(None).levels == (0.8, 0.95)
    assert level_label(0.975) == "97.5"


def test_zero_std_error_collapses_interval() -> None:
    iv = normal_pi(np.array([1.0, 2.0]), 0.0, level=0.95)
    np.testing.assert_allclose(iv.lower, [1.0, 2.0])
    np.testing.assert_allclose(iv.upper, [1.0, 2.0])


def test_negative_std_error_rejected() -> None:
    with pytest.raises(ValueError):
        normal_pi(np.array([1.0]), np.array([-1.0]))


def test_forecast_frame_layout() -> None:
    fc = Forecast.from_normal(
        model_name="naive",
        start=Period(2024, 11),
        point=np.array([10.0, 11.0, 12.0]),
        std_error=np.array([1.0, 1.5, 2.0]),
    )
    df = fc.to_frame()

    assert list(df.columns) == [
        "Period", "Model", "Forecast", "Std_Error", "Lower_80", "Upper_80", "Lower_95", "Upper_95",
    ]
    assert df["Period"].tolist() == ["2024-11", "2024-12", "2025-01"]
    assert fc.end == Period(2025, 1)
    assert (df["Lower_95"] < df["Lower_80"]).all()


def test_forecast_is_read_only_and_level_lookup() -> None:
    fc = Forecast.from_normal(
        model_name="mean",
        start=Period(2020, 1),
        point=np.array([1.0, 2.0]),
        std_error=np.array([0.5, 0.5]),
        levels=IntervalLevels((0.9,)),
    )
    with pytest.raises(ValueError):
        fc.point[0] = 5.0
    assert fc.levels == (0.9,)
    with pytest.raises(KeyError):
        fc.interval(0.8)


def test_forecast_rejects_misaligned_arrays() -> None:
    with pytest.raises(ValueError):
        Forecast(
            model_name="x",
            start=Period(2020, 1),
            point=np.array([1.0, 2.0]),
            std_error=np.array([1.0]),
            intervals=(),
        )


def test_forecast_records_and_periods() -> None:
    fc = Forecast.from_normal(
        model_name="drift",
        start=Period(2020, 12),
        point=np.array([3.0, 4.0]),
        std_error=np.array([0.0, 0.0]),
    )
    rows = fc.records()
    assert rows[0]["Period"] == "2020-12"
    assert rows[1]["Lower_95"] == pytest.approx(4.0)

    assert fc.periods == [Period(2020, 12), Period(2021, 1)]
    assert set(rows[0]) == {"Period", "Model", "Forecast", "Std_Error", "Lower_80", "Upper_80", "Lower_95", "Upper_95"}
