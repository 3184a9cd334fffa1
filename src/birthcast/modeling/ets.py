"""src/birthcast/modeling/ets.py

Additive state-space exponential smoothing, ETS(A,A,A) and ETS(A,Ad,A).

    yhat_t = l_{t-1} + phi*b_{t-1} + s_{t-S}
    e_t    = y_t - yhat_t
    l_t    = l_{t-1} + phi*b_{t-1} + alpha*e_t
    b_t    = phi*b_{t-1} + beta*e_t
    s_t    = s_{t-S} + gamma*e_t

Initial seasonal states are constrained to sum to zero. For fixed smoothing
parameters the one-step errors are affine in the initial state vector, so the
initial states are solved by linear least squares inside the objective and
the bounded optimizer only searches (alpha, beta, gamma[, phi]). Minimizing the
sum of squared errors is maximum likelihood under Gaussian innovations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from scipy.optimize import minimize

from birthcast.common.errors import InsufficientSeasonalHistory, NonConvergent
from birthcast.forecasting.forecast import Forecast
from birthcast.forecasting.intervals import IntervalLevels
from birthcast.modeling.base import ModelFit, check_horizon
from birthcast.timeseries.series import TimeSeries

logger = logging.getLogger(__name__)

_PENALTY = 1e12

# deterministic restart grid for (alpha, beta, gamma); the first entry is the
# "no adaptation" corner so that flat objectives resolve to the smoothest fit
_START_GRID: tuple[tuple[float, float, float], ...] = (
    (0.0, 0.0, 0.0),
    (0.3, 0.05, 0.1),
    (0.6, 0.1, 0.2),
    (0.9, 0.3, 0.4),
    (0.15, 0.01, 0.05),
    (0.45, 0.2, 0.6),
)


def _check_range(name: str, bounds: tuple[float, float], lo: float, hi: float) -> tuple[float, float]:
    a, b = float(bounds[0]), float(bounds[1])
    if not (lo <= a <= b <= hi):
        raise ValueError(f"{name} bounds must satisfy {lo} <= lower <= upper <= {hi}, got {bounds}")
    return a, b


@dataclass(frozen=True)
class ETSBounds:
    """Box constraints for the smoothing and damping parameters."""
    alpha: tuple[float, float] = (0.0, 1.0)
    beta: tuple[float, float] = (0.0, 1.0)
    gamma: tuple[float, float] = (0.0, 1.0)
    phi: tuple[float, float] = (0.8, 0.98)

    def __post_init__(self) -> None:
        object.__setattr__(self, "alpha", _check_range("alpha", self.alpha, 0.0, 1.0))
        object.__setattr__(self, "beta", _check_range("beta", self.beta, 0.0, 1.0))
        object.__setattr__(self, "gamma", _check_range("gamma", self.gamma, 0.0, 1.0))
        phi = _check_range("phi", self.phi, 0.0, 1.0)
        if phi[0] <= 0.0:
            raise ValueError(f"phi lower bound must be > 0, got {phi[0]}")
        object.__setattr__(self, "phi", phi)


@dataclass(frozen=True)
class ETSConfig:
    damped: bool = False
    bounds: ETSBounds = field(default_factory=ETSBounds)
    n_restarts: int = 4
    max_iter: int = 200

    def __post_init__(self) -> None:
        if not 1 <= int(self.n_restarts) <= len(_START_GRID):
            raise ValueError(f"n_restarts must be in 1..{len(_START_GRID)}, got {self.n_restarts}")
        if int(self.max_iter) < 1:
            raise ValueError("max_iter must be >= 1")

    @property
    def name(self) -> str:
        return "ets_damped" if self.damped else "ets"

    @classmethod
    def from_mapping(cls, raw: dict[str, Any] | None, *, damped: bool = False) -> ETSConfig:
        raw = dict(raw or {})
        bounds_kw = {}
        for key in ("alpha", "beta", "gamma", "phi"):
            b = raw.get(f"{key}_bounds")
            if b is not None:
                bounds_kw[key] = tuple(float(v) for v in b)
        return cls(
            damped=damped,
            bounds=ETSBounds(**bounds_kw),
            n_restarts=int(raw.get("n_restarts", 4)),
            max_iter=int(raw.get("max_iter", 200)),
        )


@dataclass(frozen=True, eq=False)
class ETSFit(ModelFit):
    alpha: float
    beta: float
    gamma: float
    phi: float
    damped: bool
    initial_level: float
    initial_trend: float
    initial_season: np.ndarray
    level: float
    trend: float
    next_season: np.ndarray
    sse: float
    n_params: int

    def __post_init__(self) -> None:
        super().__post_init__()
        for name in ("initial_season", "next_season"):
            arr = np.array(getattr(self, name), dtype=float, copy=True)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @property
    def sigma2(self) -> float:
        return float(self.sigma) ** 2

    @property
    def loglik(self) -> float:
        if self.sse <= 0.0:
            return float("inf")
        return float(-0.5 * self.n_obs * (np.log(2.0 * np.pi * self.sse / self.n_obs) + 1.0))

    @property
    def aic(self) -> float:
        return float(-2.0 * self.loglik + 2.0 * (self.n_params + 1))

    def summary(self) -> dict[str, float]:
        return {
            "alpha": self.alpha,
            "beta": self.beta,
            "gamma": self.gamma,
            "phi": self.phi,
            "sigma": self.sigma,
            "sse": self.sse,
            "aic": self.aic,
        }


# ---------------- recursions ----------------

def _basis(season_length: int) -> np.ndarray:
    """
    Map free initial parameters theta = (l0, b0, s_0..s_{S-2}) to the full
    state (l0, b0, s_0..s_{S-1}) with s_{S-1} = -sum(s_0..s_{S-2}).
    """
    s = season_length
    p = 2 + (s - 1)
    basis = np.zeros((2 + s, p))
    basis[0, 0] = 1.0
    basis[1, 1] = 1.0
    basis[2 : 2 + s - 1, 2:] = np.eye(s - 1)
    basis[2 + s - 1, 2:] = -1.0
    return basis


def _error_design(y: np.ndarray, season_length: int, alpha: float, beta: float, gamma: float, phi: float) -> np.ndarray:
    """
    One-step errors as an affine function of theta: e = E[:, 0] + E[:, 1:] @ theta.

    Column 0 runs the recursion on y from a zero state; column j runs it on a
    zero series from the j-th basis state. The recursion is linear, so the
    columns superpose.
    """
    n = y.size
    s = season_length
    basis = _basis(s)
    cols = basis.shape[1] + 1

    level = np.zeros(cols)
    trend = np.zeros(cols)
    season = np.zeros((s, cols))
    level[1:] = basis[0]
    trend[1:] = basis[1]
    season[:, 1:] = basis[2:]

    errors = np.empty((n, cols))
    for t in range(n):
        pos = t % s
        e = -(level + phi * trend + season[pos])
        e[0] += y[t]
        errors[t] = e
        level = level + phi * trend + alpha * e
        trend = phi * trend + beta * e
        season[pos] = season[pos] + gamma * e
    return errors


def _solve_initial_state(errors: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    theta, *_ = np.linalg.lstsq(errors[:, 1:], -errors[:, 0], rcond=None)
    resid = errors[:, 0] + errors[:, 1:] @ theta
    return theta, resid


def _run(
    y: np.ndarray,
    season_length: int,
    alpha: float,
    beta: float,
    gamma: float,
    phi: float,
    level: float,
    trend: float,
    season: np.ndarray,
) -> tuple[np.ndarray, float, float, np.ndarray]:
    """Scalar recursion; returns (one-step errors, final level, final trend, seasonal states by position)."""
    season = np.array(season, dtype=float, copy=True)
    errors = np.empty(y.size)
    for t in range(y.size):
        pos = t % season_length
        e = y[t] - (level + phi * trend + season[pos])
        errors[t] = e
        level = level + phi * trend + alpha * e
        trend = phi * trend + beta * e
        season[pos] = season[pos] + gamma * e
    return errors, level, trend, season


def damped_sums(phi: float, horizon: int) -> np.ndarray:
    """phi_h = phi + phi^2 + ... + phi^h for h = 1..horizon (equals h when phi = 1)."""
    return np.cumsum(float(phi) ** np.arange(1, int(horizon) + 1, dtype=float))


def variance_multipliers(fit: ETSFit, horizon: int) -> np.ndarray:
    """
    v_h / sigma^2 = 1 + sum_{j=1}^{h-1} c_j^2,
    c_j = alpha + beta*phi_j + gamma*[j mod S == 0].
    """
    h = int(horizon)
    if h == 1:
        return np.ones(1)
    j = np.arange(1, h)
    c = fit.alpha + fit.beta * damped_sums(fit.phi, h - 1) + fit.gamma * (j % fit.season_length == 0)
    return np.concatenate([[1.0], 1.0 + np.cumsum(c**2)])


# ---------------- forecaster ----------------

class ETSForecaster:
    """Additive error / additive (optionally damped) trend / additive season."""

    def __init__(self, config: ETSConfig | None = None) -> None:
        self.config = config or ETSConfig()
        self.name = self.config.name

    def __repr__(self) -> str:
        return f"ETSForecaster(damped={self.config.damped})"

    def _unpack(self, x: np.ndarray) -> tuple[float, float, float, float]:
        phi = float(x[3]) if self.config.damped else 1.0
        return float(x[0]), float(x[1]), float(x[2]), phi

    def _objective(self, x: np.ndarray, y: np.ndarray, season_length: int, scale: float) -> float:
        alpha, beta, gamma, phi = self._unpack(x)
        with np.errstate(over="ignore", invalid="ignore"):
            errors = _error_design(y, season_length, alpha, beta, gamma, phi)
            if not np.all(np.isfinite(errors)):
                return _PENALTY
            try:
                _, resid = _solve_initial_state(errors)
            except np.linalg.LinAlgError:
                return _PENALTY
            sse = float(resid @ resid)
        if not np.isfinite(sse):
            return _PENALTY
        return sse / scale

    def _starts(self) -> list[np.ndarray]:
        b = self.config.bounds
        phi0 = 0.5 * (b.phi[0] + b.phi[1])
        starts = []
        for a, bt, g in _START_GRID[: self.config.n_restarts]:
            x = [np.clip(a, *b.alpha), np.clip(bt, *b.beta), np.clip(g, *b.gamma)]
            if self.config.damped:
                x.append(phi0)
            starts.append(np.asarray(x, dtype=float))
        return starts

    def _bounds(self) -> list[tuple[float, float]]:
        b = self.config.bounds
        out = [b.alpha, b.beta, b.gamma]
        if self.config.damped:
            out.append(b.phi)
        return out

    def fit(self, train: TimeSeries) -> ETSFit:
        y = train.values
        s = train.season_length
        n = y.size
        if s < 2:
            raise ValueError(f"seasonal ETS needs a seasonal period >= 2, got {s}")
        if n < 2 * s:
            raise InsufficientSeasonalHistory(f"{self.name} needs >= {2 * s} observations (2 cycles), got {n}")

        var = float(np.var(y))
        scale = n * var if var > 0.0 else 1.0

        results = []
        for x0 in self._starts():
            res = minimize(
                self._objective,
                x0,
                args=(y, s, scale),
                method="L-BFGS-B",
                bounds=self._bounds(),
                options={"maxiter": self.config.max_iter},
            )
            # status 1: iteration/evaluation budget exhausted
            usable = res.status != 1 and np.isfinite(res.fun) and res.fun < _PENALTY
            logger.debug("%s restart x0=%s -> fun=%.6g status=%s nit=%s", self.name, x0, res.fun, res.status, res.nit)
            if usable:
                results.append(res)

        if not results:
            raise NonConvergent(
                f"{self.name}: no restart converged within {self.config.max_iter} iterations "
                f"({train.start}..{train.end})"
            )

        best_fun = min(r.fun for r in results)
        tied = [r for r in results if r.fun <= best_fun + max(1e-9 * abs(best_fun), 1e-12)]
        best = min(tied, key=lambda r: float(np.sum(r.x[:3])))

        alpha, beta, gamma, phi = self._unpack(best.x)
        theta, _ = _solve_initial_state(_error_design(y, s, alpha, beta, gamma, phi))
        state0 = _basis(s) @ theta
        level0, trend0, season0 = float(state0[0]), float(state0[1]), state0[2:]

        errors, level, trend, season = _run(y, s, alpha, beta, gamma, phi, level0, trend0, season0)
        sse = float(errors @ errors)
        n_params = len(best.x) + theta.size
        dof = n - n_params if n > n_params else n
        sigma = float(np.sqrt(sse / dof))

        logger.info(
            "%s fit %s..%s: alpha=%.4f beta=%.4f gamma=%.4f phi=%.4f sigma=%.4g",
            self.name,
            train.start,
            train.end,
            alpha,
            beta,
            gamma,
            phi,
            sigma,
        )
        return ETSFit(
            model_name=self.name,
            train_start=train.start,
            train_end=train.end,
            n_obs=n,
            season_length=s,
            sigma=sigma,
            residuals=errors,
            alpha=alpha,
            beta=beta,
            gamma=gamma,
            phi=phi,
            damped=self.config.damped,
            initial_level=level0,
            initial_trend=trend0,
            initial_season=season0,
            level=float(level),
            trend=float(trend),
            next_season=np.roll(season, -(n % s)),
            sse=sse,
            n_params=int(n_params),
        )

    def forecast(self, fit: ModelFit, horizon: int, levels: IntervalLevels | None = None) -> Forecast:
        if not isinstance(fit, ETSFit):
            raise TypeError(f"{self.name} cannot forecast from {type(fit).__name__}")
        steps = check_horizon(horizon)
        h = np.arange(steps)
        point = fit.level + damped_sums(fit.phi, steps) * fit.trend + fit.next_season[h % fit.season_length]
        std_error = fit.sigma * np.sqrt(variance_multipliers(fit, steps))
        return Forecast.from_normal(
            model_name=fit.model_name,
            start=fit.forecast_start,
            point=point,
            std_error=std_error,
            levels=levels,
        )
