"""tests/unit/test_ets.py"""

from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from birthcast.common.errors import InsufficientSeasonalHistory, NonConvergent
from birthcast.modeling import ets as ets_module
from birthcast.modeling.ets import ETSBounds, ETSConfig, ETSForecaster, damped_sums, variance_multipliers


def test_constant_series_needs_no_smoothing(make_series) -> None:
    model = ETSForecaster(ETSConfig(n_restarts=2))
    fit = model.fit(make_series(np.full(120, 500.0)))

    assert fit.alpha == pytest.approx(0.0, abs=1e-3)
    assert fit.beta == pytest.approx(0.0, abs=1e-3)
    assert fit.gamma == pytest.approx(0.0, abs=1e-3)
    assert fit.trend == pytest.approx(0.0, abs=1e-6)
    assert np.max(np.abs(fit.next_season)) == pytest.approx(0.0, abs=1e-6)
    assert fit.level == pytest.approx(500.0, abs=1e-6)

    fc = model.forecast(fit, 12)
    np.testing.assert_allclose(fc.point, 500.0, atol=1e-6)
    np.testing.assert_allclose(fc.upper95 - fc.lower95, 0.0, atol=1e-6)


def test_noiseless_trend_and_season_are_extrapolated(clean_series, synth) -> None:
    model = ETSForecaster(ETSConfig(n_restarts=2))
    fit = model.fit(clean_series)
    fc = model.forecast(fit, 24)

    truth = synth(144)[120:]
    np.testing.assert_allclose(fc.point, truth, rtol=1e-6, atol=1e-4)
    assert fit.initial_season.sum() == pytest.approx(0.0, abs=1e-8)
    assert fit.trend == pytest.approx(2.0, abs=1e-6)


def test_fit_on_noisy_series_respects_bounds(noisy_series) -> None:
    model = ETSForecaster(ETSConfig(n_restarts=3))
    fit = model.fit(noisy_series)

    for value in (fit.alpha, fit.beta, fit.gamma):
        assert 0.0 <= value <= 1.0
    assert fit.phi == 1.0
    assert fit.sigma > 0.0
    assert fit.residuals.shape == (len(noisy_series),)
    assert np.isfinite(fit.aic)

    se = model.forecast(fit, 36).std_error
    assert np.all(np.diff(se) >= 0)


def test_damped_trend_flattens_long_horizon(make_series, synth) -> None:
    series = make_series(synth(120, noise=5.0, seed=9))
    model = ETSForecaster(ETSConfig(damped=True, n_restarts=2))
    fit = model.fit(series)

    assert model.name == "ets_damped"
    assert 0.8 <= fit.phi <= 0.98
    fc = model.forecast(fit, 120)
    # same month one year apart, far out: the trend contribution has died away
    assert abs(fc.point[119] - fc.point[107]) < 12.0


def test_forecast_is_repeatable_and_does_not_touch_fit(noisy_series) -> None:
    model = ETSForecaster(ETSConfig(n_restarts=2))
    fit = model.fit(noisy_series)
    level, season = fit.level, fit.next_season.copy()

    short = model.forecast(fit, 12)
    long = model.forecast(fit, 24)

    np.testing.assert_allclose(long.point[:12], short.point)
    np.testing.assert_allclose(long.std_error[:12], short.std_error)
    assert fit.level == level
    np.testing.assert_array_equal(fit.next_season, season)
    assert short.start == noisy_series.end.succ()


def test_variance_multipliers_by_hand() -> None:
    fit = SimpleNamespace(alpha=0.5, beta=0.1, gamma=0.2, phi=1.0, season_length=4)
    np.testing.assert_allclose(variance_multipliers(fit, 6), [1.0, 1.36, 1.85, 2.49, 3.70, 4.70])
    np.testing.assert_allclose(variance_multipliers(fit, 1), [1.0])


def test_damped_sums() -> None:
    np.testing.assert_allclose(damped_sums(1.0, 4), [1.0, 2.0, 3.0, 4.0])
    np.testing.assert_allclose(damped_sums(0.5, 3), [0.5, 0.75, 0.875])


def test_needs_two_full_cycles(make_series, synth) -> None:
    with pytest.raises(InsufficientSeasonalHistory):
        ETSForecaster().fit(make_series(synth(23)))


def test_all_restarts_exhausted_raises(monkeypatch, noisy_series) -> None:
    def fake_minimize(fun, x0, **kwargs):
        return SimpleNamespace(status=1, fun=1.0, x=np.asarray(x0), nit=1)

    monkeypatch.setattr(ets_module, "minimize", fake_minimize)
    with pytest.raises(NonConvergent):
        ETSForecaster(ETSConfig(n_restarts=2)).fit(noisy_series)


def test_config_from_mapping() -> None:
    cfg = ETSConfig.from_mapping({"n_restarts": 3, "max_iter": 50, "phi_bounds": [0.85, 0.95]}, damped=True)
    assert cfg.name == "ets_damped"
    assert cfg.n_restarts == 3
    assert cfg.bounds.phi == (0.85, 0.95)


@pytest.mark.parametrize("kwargs", [{"alpha": (0.5, 0.2)}, {"phi": (0.0, 0.9)}, {"beta": (-0.1, 0.5)}])
def test_invalid_bounds(kwargs) -> None:
    with pytest.raises(ValueError):
        ETSBounds(**kwargs)
