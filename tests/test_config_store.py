import json
from pathlib import Path

import pytest

from timewise.app.config_store import (
    CONFIG_VERSION,
    DEFAULT_FILENAME,
    DashboardConfig,
    load_config,
    save_config,
)


def test_load_returns_defaults_when_missing(tmp_path: Path):
    cfg = load_config(tmp_path)
    assert cfg.version == CONFIG_VERSION
    assert cfg.max_live_notifications == 5
    assert cfg.entrance_stagger_ms == 100 and cfg.update_stagger_ms == 50
    assert cfg.default_view == "overall"


def test_save_and_reload_round_trip(tmp_path: Path):
    cfg = DashboardConfig(max_live_notifications=3, reduced_motion=True, default_view="mobile")
    path = save_config(cfg, tmp_path)
    assert path.name == DEFAULT_FILENAME
    assert not path.with_suffix(path.suffix + ".tmp").exists()
    assert load_config(tmp_path) == cfg


def test_corrupt_file_graceful_fallback(tmp_path: Path):
    (tmp_path / DEFAULT_FILENAME).write_text("not json", encoding="utf-8")
    assert load_config(tmp_path) == DashboardConfig()


def test_invalid_values_fall_back(tmp_path: Path):
    data = DashboardConfig().to_dict() | {"default_period": "fortnight"}
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert load_config(tmp_path).default_period == "today"


def test_version_mismatch_resets(tmp_path: Path):
    data = DashboardConfig(max_live_notifications=9).to_dict() | {"version": CONFIG_VERSION + 1}
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert load_config(tmp_path).max_live_notifications == 5


def test_unknown_keys_ignored(tmp_path: Path):
    data = {"version": CONFIG_VERSION, "update_stagger_ms": 80, "theme": "dark"}
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert load_config(tmp_path).update_stagger_ms == 80


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_live_notifications": 0},
        {"entrance_stagger_ms": -1},
        {"frame_interval_ms": 0},
        {"default_view": "tablet"},
    ],
)
def test_validation(kwargs):
    with pytest.raises(ValueError):
        DashboardConfig(**kwargs)
