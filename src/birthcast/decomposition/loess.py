"""src/birthcast/decomposition/loess.py

Local weighted regression on an evenly spaced grid (x = 0, 1, ..., m-1).

Neighbourhoods are the ``window`` nearest grid points. Near the boundaries
the neighbourhood is truncated rather than padded, so it becomes asymmetric.
Evaluation positions may lie outside the grid (used to extend the
cycle-subseries by one point on each side).
"""

from __future__ import annotations

from typing import Iterable

import numpy as np


def tricube(u: np.ndarray) -> np.ndarray:
    u = np.clip(np.abs(u), 0.0, 1.0)
    return (1.0 - u**3) ** 3


def bisquare(u: np.ndarray) -> np.ndarray:
    u = np.clip(np.abs(u), 0.0, 1.0)
    return (1.0 - u**2) ** 2


def loess(
    y: np.ndarray,
    positions: Iterable[float],
    *,
    window: int,
    degree: int = 1,
    robustness: np.ndarray | None = None,
) -> np.ndarray:
    """
    Smooth ``y`` and evaluate the local fit at ``positions``.

    Args:
        y: Values observed at x = 0..m-1.
        positions: Where to evaluate the fit.
        window: Neighbourhood size q (number of nearest points).
        degree: 0 (local mean) or 1 (local line).
        robustness: Optional per-point weights multiplied into the tricube weights.

    Returns:
        Array with one fitted value per position.
    """
    y = np.asarray(y, dtype=float)
    m = y.size
    if m == 0:
        raise ValueError("loess needs at least one point")
    if degree not in (0, 1):
        raise ValueError(f"degree must be 0 or 1, got {degree}")
    q = int(window)
    if q < 2:
        raise ValueError(f"window must be >= 2, got {window}")

    rw = np.ones(m) if robustness is None else np.asarray(robustness, dtype=float)
    if rw.shape != y.shape:
        raise ValueError("robustness weights must match y")

    x = np.arange(m, dtype=float)
    span = x[-1] - x[0]
    pos = np.asarray(list(positions), dtype=float)
    out = np.empty(pos.size, dtype=float)

    for k, x0 in enumerate(pos):
        if q >= m:
            lo, hi = 0, m
        else:
            lo = int(np.clip(np.floor(x0) - (q - 1) // 2, 0, m - q))
            hi = lo + q

        xs = x[lo:hi]
        ys = y[lo:hi]
        h = max(x0 - xs[0], xs[-1] - x0)
        if q > m:
            h += (q - m) / 2.0
        h = max(h, 1e-12)

        w = tricube((xs - x0) / h) * rw[lo:hi]
        total = w.sum()
        if total <= 0.0:
            # every neighbour was down-weighted to zero: use the nearest observation
            out[k] = y[int(np.clip(np.rint(x0), 0, m - 1))]
            continue
        w = w / total

        if degree == 1:
            xbar = float(np.sum(w * xs))
            c = float(np.sum(w * (xs - xbar) ** 2))
            if np.sqrt(c) > 1e-3 * span:
                w = w * ((x0 - xbar) * (xs - xbar) / c + 1.0)

        out[k] = float(np.sum(w * ys))

    return out


def moving_average(y: np.ndarray, window: int) -> np.ndarray:
    """Trailing-free ("valid") moving average; output has ``len(y) - window + 1`` points."""
    y = np.asarray(y, dtype=float)
    window = int(window)
    if window < 1 or window > y.size:
        raise ValueError(f"window must be in 1..{y.size}, got {window}")
    c = np.cumsum(np.concatenate([[0.0], y]))
    return (c[window:] - c[:-window]) / window
