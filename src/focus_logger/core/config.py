"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from focus_logger.core.models import Category, Project

CONFIG_DIR_ENV = "FOCUS_LOGGER_CONFIG_DIR"
CONFIG_FILE_NAME = "config.yaml"


def default_config_dir() -> Path:
    return Path.home() / ".config/focus-logger"


def default_config_path() -> Path:
    """Config file location, honouring FOCUS_LOGGER_CONFIG_DIR like `Config.config_dir`."""
    config_dir = os.environ.get(CONFIG_DIR_ENV)
    base = Path(config_dir) if config_dir else default_config_dir()
    return base / CONFIG_FILE_NAME


class TimerConfig(BaseModel):
    """Initial picker selections for new sessions."""

    default_category: Category = Field(default=Category.DEEP_WORK)
    default_project: Project = Field(default=Project.SNOWFLAKE)


class NotificationConfig(BaseModel):
    """Desktop notification configuration."""

    enabled: bool = True
    sound: str | None = Field(default=None, description="macOS sound name, e.g. 'Glass'")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FOCUS_LOGGER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    focus_log_dir: Path = Field(
        default_factory=lambda: Path.home() / "Documents/FocusLogs",
        description="Where the daily markdown logs are written",
    )
    log_dir: Path = Field(default_factory=lambda: Path.home() / "Library/Logs/FocusLogger")
    config_dir: Path = Field(default_factory=default_config_dir)

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Sub-configurations
    timer: TimerConfig = Field(default_factory=TimerConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs; environment wins over them
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / CONFIG_FILE_NAME

    @property
    def app_log_file(self) -> Path:
        """Path to the application log."""
        return self.log_dir / "focus-logger.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.focus_log_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        config_path = config_path or default_config_path()

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> Path:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

        return config_path


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
