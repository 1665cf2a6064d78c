"""
tests/test_config.py
Config load/save/validate and auto-detection.
"""

import json

import pytest

from insights import config as config_mod
from insights.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    ensure_config,
    get_setting,
    load_config,
    save_config,
    validate_config,
)


class TestLoadSave:

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_roundtrip(self, tmp_path):
        cfg = {**DEFAULT_CONFIG, "window_days": 10}
        path = save_config(cfg, tmp_path)
        assert path.name == CONFIG_FILENAME
        assert load_config(tmp_path)["window_days"] == 10

    def test_partial_file_is_merged(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"display_periods": 3}), encoding="utf-8")
        cfg = load_config(tmp_path)
        assert cfg["display_periods"] == 3
        assert cfg["window_days"] == DEFAULT_CONFIG["window_days"]

    @pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
    def test_bad_file_falls_back(self, tmp_path, text):
        (tmp_path / CONFIG_FILENAME).write_text(text, encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG


class TestValidate:

    def test_defaults_are_valid(self):
        validate_config(DEFAULT_CONFIG)

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown"):
            validate_config({"window": 7})

    def test_bad_scale(self):
        with pytest.raises(ValueError, match="confidence_scale"):
            validate_config({"confidence_scale": "percentage"})

    @pytest.mark.parametrize("value", [0, -1, 2.5, "7", True])
    def test_bad_window(self, value):
        with pytest.raises(ValueError, match="window_days"):
            validate_config({"window_days": value})


class TestSettings:

    def test_get_setting_falls_back(self):
        assert get_setting(None, "window_days") == 7
        assert get_setting({"window_days": None}, "window_days") == 7
        assert get_setting({"window_days": 3}, "window_days") == 3


class TestEnsureConfig:

    def test_auto_detects_journal_dir(self, tmp_path, monkeypatch):
        exports = tmp_path / "exports"
        exports.mkdir()
        (exports / "journal-2024-03.json").write_text("[]", encoding="utf-8")
        monkeypatch.setattr(config_mod, "AUTO_DETECT_PATHS", [tmp_path / "nope", exports])
        cfg = ensure_config(tmp_path)
        assert cfg["journal_dir"] == str(exports)

    def test_configured_dir_is_kept(self, tmp_path, monkeypatch):
        save_config({**DEFAULT_CONFIG, "journal_dir": "/data/journal"}, tmp_path)
        monkeypatch.setattr(config_mod, "AUTO_DETECT_PATHS", [])
        assert ensure_config(tmp_path)["journal_dir"] == "/data/journal"

    def test_nothing_detected(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_mod, "AUTO_DETECT_PATHS", [tmp_path / "nope"])
        assert ensure_config(tmp_path)["journal_dir"] is None


class TestThresholdAndFileValidation:

    @pytest.mark.parametrize("value", ["high", -1, float("nan"), True, None])
    def test_bad_confidence_threshold(self, value):
        with pytest.raises(ValueError, match="confidence_threshold"):
            validate_config({"confidence_threshold": value})

    @pytest.mark.parametrize("value", [0, 75, 0.8, 100.0])
    def test_good_confidence_threshold(self, value):
        validate_config({"confidence_threshold": value})

    @pytest.mark.parametrize("data", [
        {"confidence_threshold": "high"},
        {"display_periods": 0},
        {"window_days": "7"},
        {"colour": "blue"},
    ])
    def test_invalid_file_falls_back_to_defaults(self, tmp_path, data):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps(data), encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG
