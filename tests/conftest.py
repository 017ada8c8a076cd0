"""Shared pytest fixtures for Modified Dietz tests."""

import pytest

import modified_dietz.core.config as cfgmod


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Each test gets its own config.json. Resets the cached config after."""
    path = tmp_path / "config.json"
    monkeypatch.setattr(cfgmod, "config_path", lambda: path)
    cfgmod.reset_config_cache()
    yield path
    cfgmod.reset_config_cache()
