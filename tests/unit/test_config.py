"""Tests for core.config."""

import json

import pytest

import modified_dietz.core.config as cfgmod
from modified_dietz.core.config import AppConfig, get_config, reset_config_cache, save_config
from modified_dietz.core.exceptions import InvalidEpsilonError


class TestGetConfig:
    def test_defaults_without_file(self):
        cfg = get_config()
        assert cfg.epsilon == 0.0001
        assert cfg.currency == "EUR"
        assert cfg.decimals == 2

    def test_reads_file(self, isolated_config):
        isolated_config.write_text(json.dumps({"epsilon": 0.01, "currency": "USD"}))
        cfg = get_config()
        assert cfg.epsilon == 0.01
        assert cfg.currency == "USD"
        assert cfg.decimals == 2

    def test_malformed_file_falls_back(self, isolated_config):
        isolated_config.write_text("{not json")
        assert get_config() == AppConfig()

    def test_out_of_range_epsilon_falls_back(self, isolated_config):
        isolated_config.write_text(json.dumps({"epsilon": 3}))
        assert get_config().epsilon == 0.0001

    def test_cached(self, isolated_config):
        first = get_config()
        isolated_config.write_text(json.dumps({"epsilon": 0.5}))
        assert get_config() is first


class TestSaveConfig:
    def test_round_trip_through_file(self, isolated_config):
        save_config(AppConfig(epsilon=0.001, currency="CHF", decimals=0))
        reset_config_cache()
        assert get_config() == AppConfig(epsilon=0.001, currency="CHF", decimals=0)
        assert json.loads(isolated_config.read_text())["currency"] == "CHF"

    def test_rejects_invalid_epsilon(self, isolated_config):
        with pytest.raises(InvalidEpsilonError):
            save_config(AppConfig(epsilon=-1))
        assert not isolated_config.exists()


class TestConfigPath:
    def test_next_to_project_root(self, tmp_path, monkeypatch):
        monkeypatch.undo()
        monkeypatch.setattr(cfgmod, "_find_project_root", lambda: tmp_path)
        assert cfgmod.config_path() == tmp_path / "config.json"
