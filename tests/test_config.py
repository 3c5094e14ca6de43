"""Tests for configuration loading."""

import os
import tempfile
import yaml
import pytest
from latencystats.config import Config


def write_yaml(directory, name, data):
    path = os.path.join(directory, name)
    with open(path, 'w') as f:
        yaml.dump(data, f)
    return path


def test_config_defaults():
    """Test that config loads with defaults when file is minimal."""
    with tempfile.TemporaryDirectory() as tmp:
        path = write_yaml(tmp, "config.yaml", {"logging": {"level": "DEBUG"}})
        config = Config(path)
        assert config.log_level == "DEBUG"
        assert config.timeout_ms == 19000  # default
        assert config.console_level == "INFO"  # default
        assert config.log_to_file is False
        assert config.log_rotation == {
            "max_bytes": 10485760,
            "backup_count": 30,
            "when": "midnight",
        }


def test_config_env_overrides(monkeypatch):
    """Test that environment variables override config values."""
    with tempfile.TemporaryDirectory() as tmp:
        path = write_yaml(tmp, "config.yaml", {"stats": {"timeout_ms": 5000}})
        monkeypatch.setenv("LS_TIMEOUT_MS", "7000")
        monkeypatch.setenv("LS_LOG_LEVEL", "WARNING")

        config = Config(path)
        assert config.timeout_ms == 7000
        assert config.log_level == "WARNING"
        assert config.log_dir == "logs"  # not overridden


def test_config_local_overlay():
    """Test that config.local.yaml is merged over config.yaml."""
    with tempfile.TemporaryDirectory() as tmp:
        path = write_yaml(tmp, "config.yaml", {
            "stats": {"timeout_ms": 5000},
            "logging": {"level": "INFO", "log_dir": "var/log"},
        })
        write_yaml(tmp, "config.local.yaml", {"logging": {"level": "ERROR"}})

        config = Config(path)
        assert config.timeout_ms == 5000
        assert config.log_level == "ERROR"
        assert config.log_dir == "var/log"


def test_config_missing_explicit_path():
    """Test that an explicit path must exist."""
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(FileNotFoundError):
            Config(os.path.join(tmp, "nope.yaml"))


def test_config_rejects_bad_timeout():
    """Test that a timeout leaving no valid samples is refused."""
    with tempfile.TemporaryDirectory() as tmp:
        path = write_yaml(tmp, "config.yaml", {"stats": {"timeout_ms": 1}})
        with pytest.raises(ValueError):
            Config(path)


def test_config_creates_default_file(monkeypatch):
    """Test that an auto-discovered missing config is written with defaults."""
    with tempfile.TemporaryDirectory() as tmp:
        monkeypatch.chdir(tmp)
        monkeypatch.setattr(Config, "_find_config_file", lambda self: os.path.join(tmp, "config.yaml"))
        config = Config()
        assert os.path.exists(os.path.join(tmp, "config.yaml"))
        assert config.timeout_ms == 19000
