import json
from datetime import timedelta

import pytest

from core.config import ConfigError, PassParams, PipelineConfig
from infrastructure.settings import JsonSettings


def test_defaults_match_stock_parameters():
    cfg = PipelineConfig()
    assert cfg.spatial == PassParams(1000.0, 3)
    assert cfg.temporal == PassParams(600.0, 10)
    assert cfg.max_time_gap is None


def test_empty_settings_give_defaults():
    assert PipelineConfig.from_settings(JsonSettings()) == PipelineConfig()


def test_values_are_read_from_dotted_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "clustering": {
                    "spatial": {"epsilon_m": 250, "min_neighbors": 2},
                    "temporal": {"epsilon_s": 1800.5, "min_neighbors": 4},
                },
                "location": {"max_time_gap_s": 3600, "max_accuracy_m": 200, "max_speed_mps": 80},
            }
        ),
        encoding="utf-8",
    )

    cfg = PipelineConfig.from_settings(JsonSettings(path))

    assert cfg.spatial == PassParams(250.0, 2)
    assert cfg.temporal == PassParams(1800.5, 4)
    assert cfg.max_time_gap == timedelta(hours=1)
    assert cfg.max_accuracy_m == 200.0
    assert cfg.max_speed_mps == 80.0


def test_null_time_gap_means_unbounded():
    settings = JsonSettings.from_dict({"location": {"max_time_gap_s": None}})
    assert PipelineConfig.from_settings(settings).max_time_gap is None


@pytest.mark.parametrize(
    "data",
    [
        {"clustering": {"spatial": {"epsilon_m": 0}}},
        {"clustering": {"spatial": {"epsilon_m": "far"}}},
        {"clustering": {"temporal": {"min_neighbors": 0}}},
        {"clustering": {"temporal": {"min_neighbors": 2.5}}},
        {"location": {"max_time_gap_s": -5}},
        {"location": {"max_speed_mps": True}},
    ],
)
def test_invalid_values_raise_config_error(data):
    with pytest.raises(ConfigError):
        PipelineConfig.from_settings(JsonSettings.from_dict(data))


def test_missing_settings_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "missing.json")


def test_settings_get_returns_default_for_missing_key():
    settings = JsonSettings.from_dict({"a": {"b": 1}})
    assert settings.get("a.b") == 1
    assert settings.get("a.c", 7) == 7
    assert settings.get("a.b.c") is None
