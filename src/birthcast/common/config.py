"""src/birthcast/common/config.py"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)

SECTIONS: tuple[str, ...] = ("paths", "data", "logging", "decomposition", "modeling", "forecast")


def _as_path(p: str | Path) -> Path:
    return p if isinstance(p, Path) else Path(p)


@dataclass(frozen=True)
class AppConfig:
    """Parsed ``configs/config.yaml``; relative paths resolve against the project root."""

    raw: Dict[str, Any]
    config_path: Path

    @property
    def project_root(self) -> Path:
        # configs/config.yaml -> project root is parent of "configs"
        return self.config_path.parent.parent.resolve()

    def section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name) or {}
        if not isinstance(value, dict):
            raise TypeError(f"config section {name!r} must be a mapping, got {type(value).__name__}")
        return value

    @property
    def paths(self) -> Dict[str, Path]:
        return {k: self.resolve(v) for k, v in self.section("paths").items()}

    @property
    def logging(self) -> Dict[str, Any]:
        return self.section("logging")

    @property
    def data(self) -> Dict[str, Any]:
        return self.section("data")

    @property
    def decomposition(self) -> Dict[str, Any]:
        return self.section("decomposition")

    @property
    def modeling(self) -> Dict[str, Any]:
        return self.section("modeling")

    @property
    def forecast(self) -> Dict[str, Any]:
        return self.section("forecast")

    def resolve(self, maybe_path: str | Path) -> Path:
        p = _as_path(maybe_path)
        return p if p.is_absolute() else (self.project_root / p).resolve()

    def with_overrides(self, section: str, **values: Any) -> AppConfig:
        """Copy with keys of one section replaced; ``None`` values leave the file setting alone."""
        updates = {k: v for k, v in values.items() if v is not None}
        if not updates:
            return self
        raw = {**self.raw, section: {**self.section(section), **updates}}
        return AppConfig(raw=raw, config_path=self.config_path)

    def ensure_directories(self) -> List[str]:
        targets = [p.parent if p.suffix else p for p in self.paths.values()]
        log_file = self.logging.get("file")
        if log_file:
            targets.append(self.resolve(log_file).parent)

        created: List[str] = []
        for path in targets:
            if not path.exists():
                path.mkdir(parents=True, exist_ok=True)
                created.append(str(path))
        return created


def load_config(config_path: str | Path) -> AppConfig:
    config_path = _as_path(config_path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Missing config file:\n{config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise TypeError(f"{config_path} must hold a mapping at the top level")

    unknown = sorted(set(raw) - set(SECTIONS))
    if unknown:
        logger.warning("Ignoring unknown config sections in %s: %s", config_path.name, unknown)
    return AppConfig(raw=raw, config_path=config_path)
