"""
Tests for configuration priority (ENV > config.json > defaults).
"""

import json
from unittest.mock import patch

import pytest

import backend.app.config as config_module
from backend.app.config import (
    Config,
    DEFAULT_ANALYZER_MODE,
    DEFAULT_ANALYZER_TIMEOUT,
    DEFAULT_STAGES_FILE,
    DEFAULT_WORKSPACE_DIR,
)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    for name in ("STAGES_FILE", "WORKSPACE_DIR", "ANALYZER_MODE", "ANALYZER_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config.json"
    with patch.object(config_module, "CONFIG_FILE", path):
        yield path


def test_defaults_without_config_file(config_file):
    cfg = Config()
    assert cfg.get_stages_file() == str(DEFAULT_STAGES_FILE)
    assert cfg.get_workspace_root() == str(DEFAULT_WORKSPACE_DIR)
    assert cfg.get_analyzer_mode() == DEFAULT_ANALYZER_MODE
    assert cfg.get_analyzer_timeout() == DEFAULT_ANALYZER_TIMEOUT


def test_config_file_values(config_file):
    config_file.write_text(json.dumps({
        "paths": {"stages_file": "/srv/stages.yaml", "workspace_dir": "/srv/workspace"},
        "analyzer": {"mode": "builtin", "timeout_seconds": 2},
    }))
    cfg = Config()
    assert cfg.get_stages_file() == "/srv/stages.yaml"
    assert cfg.get_workspace_root() == "/srv/workspace"
    assert cfg.get_analyzer_mode() == "builtin"
    assert cfg.get_analyzer_timeout() == 2.0


def test_environment_wins(config_file, monkeypatch):
    config_file.write_text(json.dumps({"analyzer": {"mode": "builtin", "timeout_seconds": 2}}))
    monkeypatch.setenv("ANALYZER_MODE", "External")
    monkeypatch.setenv("ANALYZER_TIMEOUT", "9.5")
    monkeypatch.setenv("STAGES_FILE", "/env/stages.yaml")

    cfg = Config()
    assert cfg.get_analyzer_mode() == "external"
    assert cfg.get_analyzer_timeout() == 9.5
    assert cfg.get_stages_file() == "/env/stages.yaml"


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_invalid_timeout_uses_default(config_file, monkeypatch, value):
    monkeypatch.setenv("ANALYZER_TIMEOUT", value)
    assert Config().get_analyzer_timeout() == DEFAULT_ANALYZER_TIMEOUT


def test_unknown_mode_uses_default(config_file, monkeypatch):
    monkeypatch.setenv("ANALYZER_MODE", "psychic")
    assert Config().get_analyzer_mode() == DEFAULT_ANALYZER_MODE


def test_corrupt_config_file_uses_defaults(config_file):
    config_file.write_text("{not json")
    assert Config().get_analyzer_mode() == DEFAULT_ANALYZER_MODE


def test_setters_persist(config_file):
    cfg = Config()
    cfg.set_analyzer_config("builtin", 3.0)
    cfg.set_paths(stages_file="/a/stages.yaml", workspace_dir="/a/ws")

    saved = json.loads(config_file.read_text())
    assert saved["analyzer"] == {"mode": "builtin", "timeout_seconds": 3.0}
    assert saved["paths"] == {"stages_file": "/a/stages.yaml", "workspace_dir": "/a/ws"}

    reloaded = Config()
    assert reloaded.get_analyzer_mode() == "builtin"
    assert reloaded.get_workspace_root() == "/a/ws"
