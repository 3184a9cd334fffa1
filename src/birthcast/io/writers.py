"""src/birthcast/io/writers.py"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import joblib
import pandas as pd

from birthcast.modeling.base import ModelFit


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(df: pd.DataFrame, path: Path, *, index: bool = False) -> Path:
    """Write DataFrame to CSV (ensures parent folder exists)."""
    ensure_parent_dir(path)
    df.to_csv(path, index=index)
    return path


def save_fit(fit: ModelFit, path: Path, **metadata: Any) -> Path:
    """
    Persist a fit as a joblib payload:
        {"model_name": ..., "model": fit, "train_start": ..., "train_end": ..., **metadata}
    """
    payload: dict[str, Any] = {
        "model_name": fit.model_name,
        "train_start": str(fit.train_start),
        "train_end": str(fit.train_end),
        "model": fit,
        **metadata,
    }
    ensure_parent_dir(path)
    joblib.dump(payload, path)
    return path


def load_fit(path: Path) -> tuple[ModelFit, dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Missing model artifact:\n{path}")
    try:
        payload = joblib.load(path)
    except Exception as e:
        raise RuntimeError(f"Failed to load model at {path}: {e}") from e

    fit = payload.get("model") if isinstance(payload, dict) else None
    if not isinstance(fit, ModelFit):
        raise TypeError(f"{path} does not hold a birthcast model fit")
    return fit, payload
