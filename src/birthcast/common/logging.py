"""src/birthcast/common/logging.py"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from birthcast.common.config import AppConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _level(name: object) -> int:
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(cfg: AppConfig, *, level: str | None = None) -> Path | None:
    """
    Console logging plus an optional rotating log file (``logging.file``).

    ``level`` overrides ``logging.level`` from the config. Returns the log file
    path when one is configured.
    """
    lvl = _level(level or cfg.logging.get("level", "INFO"))
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_path = None
    log_file = cfg.logging.get("file")
    if log_file:
        log_path = cfg.resolve(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=int(cfg.logging.get("max_bytes", 2_000_000)),
                backupCount=int(cfg.logging.get("backup_count", 3)),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(lvl)

    logging.basicConfig(level=lvl, format=LOG_FORMAT, handlers=handlers, force=True)

    # numpy/scipy RuntimeWarnings go to the log instead of bare stderr
    logging.captureWarnings(True)
    logging.getLogger("joblib").setLevel(logging.WARNING)
    return log_path
