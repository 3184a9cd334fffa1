"""src/birthcast/cli.py"""

from __future__ import annotations

from typing import Optional

import typer
from rich import print
from rich.table import Table

from birthcast.common.config import AppConfig, load_config
from birthcast.common.logging import setup_logging
from birthcast.pipelines.run_decompose import run_decompose
from birthcast.pipelines.run_forecast import run_forecast
from birthcast.pipelines.run_train import run_train

app = typer.Typer(help="Monthly births decomposition & forecasting CLI")

DEFAULT_CONFIG = "configs/config.yaml"


def _bootstrap(config_path: str, log_level: Optional[str]) -> AppConfig:
    cfg = load_config(config_path)
    setup_logging(cfg, level=log_level)
    cfg.ensure_directories()
    return cfg


@app.command()
def init(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Create expected directories from config (data/, artifacts/, etc.)."""
    cfg = load_config(config_path)
    setup_logging(cfg)

    created = cfg.ensure_directories()
    print("[bold green]Init complete.[/bold green]")
    if created:
        print("Created directories:")
        for p in created:
            print(f"  - {p}")
    else:
        print("No directories needed (already exist).")


@app.command()
def decompose(
    config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config"),
    robust: Optional[bool] = typer.Option(None, "--robust/--no-robust", help="Override decomposition.robust"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override logging.level"),
) -> None:
    """STL decomposition of the births series into trend, seasonal and remainder."""
    cfg = _bootstrap(config_path, log_level).with_overrides("decomposition", robust=robust)
    result = run_decompose(cfg)
    print(
        f"[bold green]Decomposition complete.[/bold green] "
        f"trend strength={result.trend_strength():.3f} seasonal strength={result.seasonal_strength():.3f}"
    )


@app.command()
def train(
    config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config"),
    n_jobs: Optional[int] = typer.Option(None, help="Override modeling.n_jobs"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override logging.level"),
) -> None:
    """Evaluate candidate models on the holdout window; persist the selected model."""
    cfg = _bootstrap(config_path, log_level).with_overrides("modeling", n_jobs=n_jobs)
    result = run_train(cfg)

    table = Table(title="Holdout accuracy")
    for col in ("Model", "RMSE", "MAE", "SMAPE"):
        table.add_column(col)
    for row in result.report.rows():
        table.add_row(row["Model"], f"{row['RMSE']:.2f}", f"{row['MAE']:.2f}", f"{row['SMAPE']:.2f}")
    print(table)
    print(f"[bold green]Training complete.[/bold green] Selected: {result.selection.best_model}")


@app.command()
def forecast(
    config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config"),
    horizon: Optional[int] = typer.Option(None, help="Override forecast.horizon (months)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override logging.level"),
) -> None:
    """Forecast past the end of the history with the persisted model."""
    cfg = _bootstrap(config_path, log_level).with_overrides("forecast", horizon=horizon)
    fc = run_forecast(cfg)
    print(f"[bold green]Forecasting complete.[/bold green] {fc.model_name}: {fc.start}..{fc.end}")


@app.command()
def run_all(
    config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override logging.level"),
) -> None:
    """Convenience command: decompose → train → forecast"""
    cfg = _bootstrap(config_path, log_level)
    run_decompose(cfg)
    run_train(cfg)
    run_forecast(cfg)
    print("[bold green]All steps complete.[/bold green]")


if __name__ == "__main__":
    app()
