"""Dashboard configuration persistence.

Small versioned JSON file holding the tunables the core reads at bootstrap
(notification capacity, stagger timings, frame pacing, motion preference,
startup view). Pure logic, no Qt import.

Corrupt, unreadable or version-mismatched files load as defaults; writes go
through a temp file and an atomic replace.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

__all__ = ["DashboardConfig", "load_config", "save_config", "CONFIG_VERSION", "DEFAULT_FILENAME"]

log = logging.getLogger(__name__)

CONFIG_VERSION = 1

DEFAULT_FILENAME = "timewise_config.json"

_VIEWS = ("overall", "browser", "mobile", "laptop", "share")
_PERIODS = ("today", "week")


@dataclass(slots=True)
class DashboardConfig:
    """Serializable dashboard tunables.

    Attributes
    ----------
    max_live_notifications: Soft cap on simultaneously live notifications.
    entrance_stagger_ms: Start offset between cards on view entrance.
    update_stagger_ms: Start offset between cards on data update pulses.
    frame_interval_ms: Host frame pacing for interpolation callbacks.
    reduced_motion: Collapse every transition to its end state.
    default_view / default_period: What the dashboard opens on.
    """

    version: int = CONFIG_VERSION
    max_live_notifications: int = 5
    entrance_stagger_ms: int = 100
    update_stagger_ms: int = 50
    frame_interval_ms: int = 16
    reduced_motion: bool = False
    default_view: str = "overall"
    default_period: str = "today"

    def __post_init__(self) -> None:
        if self.max_live_notifications < 1:
            raise ValueError("max_live_notifications must be at least 1")
        if min(self.entrance_stagger_ms, self.update_stagger_ms) < 0:
            raise ValueError("stagger timings must not be negative")
        if self.frame_interval_ms < 1:
            raise ValueError("frame_interval_ms must be at least 1")
        if self.default_view not in _VIEWS:
            raise ValueError(f"Unknown default_view: {self.default_view}")
        if self.default_period not in _PERIODS:
            raise ValueError(f"Unknown default_period: {self.default_period}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_config(base_dir: str | Path | None = None) -> DashboardConfig:
    path = _resolve_path(base_dir)
    if not path.exists():
        return DashboardConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        if int(data.get("version", CONFIG_VERSION)) != CONFIG_VERSION:
            log.info("Config %s has version %s; using defaults", path, data.get("version"))
            return DashboardConfig()
        return DashboardConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        log.warning("Config %s unreadable (%s); using defaults", path, e)
        return DashboardConfig()


def save_config(cfg: DashboardConfig, base_dir: str | Path | None = None) -> Path:
    """Persist ``cfg``; returns the path written."""
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
    return path
