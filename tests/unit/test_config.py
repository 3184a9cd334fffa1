"""tests/unit/test_config.py"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from birthcast.common.config import load_config
from birthcast.common.logging import setup_logging
from birthcast.pipelines.common import ets_config, interval_levels, stl_settings


def _write(root: Path, raw: dict) -> Path:
    path = root / "configs" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    return path


def test_paths_resolve_against_project_root(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, {"paths": {"models_dir": "artifacts/models"}}))
    assert cfg.project_root == tmp_path.resolve()
    assert cfg.paths["models_dir"] == (tmp_path / "artifacts" / "models").resolve()
    assert cfg.forecast == {}


def test_ensure_directories_includes_log_folder(tmp_path: Path) -> None:
    cfg = load_config(
        _write(
            tmp_path,
            {"paths": {"metrics_dir": "artifacts/metrics"}, "logging": {"file": "artifacts/logs/run.log"}},
        )
    )
    created = cfg.ensure_directories()
    assert (tmp_path / "artifacts" / "metrics").is_dir()
    assert (tmp_path / "artifacts" / "logs").is_dir()
    assert len(created) == 2
    assert cfg.ensure_directories() == []


def test_overrides_ignore_none(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, {"forecast": {"horizon": 36, "interval_levels": [0.9]}}))
    assert cfg.with_overrides("forecast", horizon=None) is cfg
    changed = cfg.with_overrides("forecast", horizon=6)
    assert changed.forecast == {"horizon": 6, "interval_levels": [0.9]}
    assert cfg.forecast["horizon"] == 36


def test_settings_built_from_sections(tmp_path: Path) -> None:
    cfg = load_config(
        _write(
            tmp_path,
            {
                "decomposition": {"seasonal": 9, "trend": None, "robust": True},
                "modeling": {"ets": {"n_restarts": 2, "phi_bounds": [0.85, 0.97]}},
                "forecast": {"interval_levels": [0.95, 0.5]},
            },
        )
    )
    stl = stl_settings(cfg)
    assert (stl.seasonal, stl.trend, stl.robust) == (9, None, True)
    ets = ets_config(cfg)
    assert ets.n_restarts == 2
    assert ets.bounds.phi == (0.85, 0.97)
    assert interval_levels(cfg).levels == (0.5, 0.95)


def test_bad_config_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "configs" / "missing.yaml")

    path = tmp_path / "configs" / "list.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)

    cfg = load_config(_write(tmp_path, {"forecast": [1, 2]}))
    with pytest.raises(TypeError):
        _ = cfg.forecast


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, {"logging": {"level": "WARNING", "file": "logs/app.log"}}))
    log_path = setup_logging(cfg, level="debug")

    assert log_path == (tmp_path / "logs" / "app.log").resolve()
    assert logging.getLogger().level == logging.DEBUG
    logging.getLogger("birthcast.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello from the test" in log_path.read_text(encoding="utf-8")
