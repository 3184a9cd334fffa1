"""src/birthcast/pipelines/run_decompose.py"""

from __future__ import annotations

import logging

from birthcast.common.config import AppConfig
from birthcast.decomposition.stl import Decomposition, decompose
from birthcast.io.writers import write_csv
from birthcast.pipelines.common import load_series, output_dir, stl_settings
from birthcast.reporting.tables import make_decomposition_summary_table
from birthcast.validation.checks import validate_df
from birthcast.validation.schemas import DECOMPOSITION_TABLE

logger = logging.getLogger(__name__)


def run_decompose(cfg: AppConfig) -> Decomposition:
    """STL decomposition of the births series; writes component and yearly summary tables."""
    series = load_series(cfg)
    settings = stl_settings(cfg)
    result = decompose(series, settings)

    metrics_dir = output_dir(cfg, "metrics_dir", "artifacts/metrics")
    components = result.to_frame()
    validate_df(
        components,
        schema=DECOMPOSITION_TABLE,
        unique_keys=("Period",),
        finite_cols=("Trend", "Seasonal", "Remainder"),
    ).raise_if_failed()
    components_path = write_csv(components, metrics_dir / "decomposition.csv")
    summary_path = write_csv(make_decomposition_summary_table(result), metrics_dir / "decomposition_summary.csv")

    logger.info(
        "Decomposed %d months: trend strength=%.3f seasonal strength=%.3f (%d passes)",
        len(series),
        result.trend_strength(),
        result.seasonal_strength(),
        result.passes,
    )
    logger.info("Saved decomposition: %s", components_path)
    logger.info("Saved decomposition summary: %s", summary_path)
    return result
