"""Tests for YAML + environment configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from focus_logger.core.config import Config, default_config_path
from focus_logger.core.models import Category, Project


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "FOCUS_LOGGER_LOG_LEVEL",
        "FOCUS_LOGGER_FOCUS_LOG_DIR",
        "FOCUS_LOGGER_CONFIG_DIR",
        "FOCUS_LOGGER_TIMER__DEFAULT_PROJECT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()

    assert config.focus_log_dir == Path.home() / "Documents/FocusLogs"
    assert config.log_level == "INFO"
    assert config.timer.default_category == Category.DEEP_WORK
    assert config.timer.default_project == Project.SNOWFLAKE
    assert config.notifications.enabled is True


def test_load_missing_file_uses_defaults(tmp_path):
    config = Config.load(tmp_path / "nope.yaml")
    assert config.log_level == "INFO"


def test_load_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump({
            "focus_log_dir": str(tmp_path / "logs"),
            "log_level": "WARNING",
            "timer": {"default_category": "Planning", "default_project": "Personal"},
            "notifications": {"enabled": False},
        })
    )

    config = Config.load(path)

    assert config.focus_log_dir == tmp_path / "logs"
    assert config.log_level == "WARNING"
    assert config.timer.default_category == Category.PLANNING
    assert config.timer.default_project == Project.PERSONAL
    assert config.notifications.enabled is False


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"log_level": "WARNING"}))
    monkeypatch.setenv("FOCUS_LOGGER_LOG_LEVEL", "DEBUG")

    assert Config.load(path).log_level == "DEBUG"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Config(log_level="LOUD")


def test_invalid_category_rejected():
    with pytest.raises(ValidationError):
        Config(timer={"default_category": "Napping"})


def test_save_round_trip(tmp_config):
    tmp_config.timer.default_project = Project.PORTFOLIO

    path = tmp_config.save()

    assert path == tmp_config.config_file
    data = yaml.safe_load(path.read_text())
    assert data["timer"]["default_project"] == "Portfolio"
    assert Config.load(path).timer.default_project == Project.PORTFOLIO


def test_ensure_directories(tmp_config):
    tmp_config.ensure_directories()

    assert tmp_config.focus_log_dir.is_dir()
    assert tmp_config.log_dir.is_dir()
    assert tmp_config.config_dir.is_dir()


def test_default_path_follows_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_config_path() == tmp_path / ".config/focus-logger/config.yaml"
    assert Config().config_file == default_config_path()


def test_load_reads_file_saved_in_config_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("FOCUS_LOGGER_CONFIG_DIR", str(tmp_path / "cfg"))
    config = Config()
    config.timer.default_project = Project.PERSONAL

    path = config.save()

    assert path == tmp_path / "cfg" / "config.yaml"
    assert default_config_path() == path
    assert Config.load().timer.default_project == Project.PERSONAL
