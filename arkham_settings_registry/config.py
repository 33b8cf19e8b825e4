"""Configuration model for the settings registry."""

import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import parse_env_bool, parse_id_list

CONFIG_PATH_ENV = "ARKHAM_SETTINGS_CONFIG"


class RegistryConfig(BaseModel):
    """Process-wide registry configuration, read once at startup."""

    model_config = ConfigDict(frozen=True)

    blocked_settings: FrozenSet[str] = Field(default_factory=frozenset, description="Setting ids that cannot be edited")
    hidden_settings: FrozenSet[str] = Field(default_factory=frozenset, description="Setting ids hidden from the admin UI")
    wizard_required_settings: FrozenSet[str] = Field(
        default_factory=frozenset, description="Setting ids the setup wizard must ask for"
    )
    development: bool = Field(default=False, description="Log validation diagnostics")
    database_url: str = Field(default="sqlite://", description="Database holding the settings collection")
    log_level: str = Field(default="INFO", description="Log level for the registry loggers")

    @field_validator("blocked_settings", "hidden_settings", "wizard_required_settings", mode="before")
    @classmethod
    def _split_id_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_id_list(value)
        return value

    @classmethod
    def from_dict(cls, data: dict) -> "RegistryConfig":
        """Create config from dictionary."""
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str) -> "RegistryConfig":
        """Load config from YAML file."""
        return cls.from_dict(_read_yaml_section(path))

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Load config from environment variables."""
        return cls.from_dict(_env_overrides())

    @classmethod
    def load(cls, config_path: Optional[str] = None, env_file: Optional[str] = None) -> "RegistryConfig":
        """Load configuration from multiple sources (priority: env vars > YAML > defaults).

        Args:
            config_path: Optional path to YAML config file
                (falls back to $ARKHAM_SETTINGS_CONFIG)
            env_file: Optional .env file loaded without overriding the process environment

        Returns:
            RegistryConfig instance
        """
        if env_file:
            load_dotenv(env_file, override=False)

        config_path = config_path or os.environ.get(CONFIG_PATH_ENV)
        data: Dict[str, Any] = _read_yaml_section(config_path) if config_path else {}

        # Environment variables take highest precedence
        data.update(_env_overrides())
        return cls.from_dict(data)


def _read_yaml_section(path: str) -> Dict[str, Any]:
    """Return the ``settings:`` section of a YAML file, or {} if the file is missing."""
    config_file = Path(path)
    if not config_file.exists():
        return {}

    with open(config_file) as f:
        yaml_data = yaml.safe_load(f) or {}

    return dict(yaml_data.get("settings") or {})


def _env_overrides() -> Dict[str, Any]:
    """Collect the config values set in the environment."""
    overrides: Dict[str, Any] = {}

    if os.environ.get("SETTINGS_BLOCKED"):
        overrides["blocked_settings"] = parse_id_list(os.environ["SETTINGS_BLOCKED"])
    if os.environ.get("SETTINGS_HIDDEN"):
        overrides["hidden_settings"] = parse_id_list(os.environ["SETTINGS_HIDDEN"])
    if os.environ.get("SETTINGS_REQUIRED_ON_WIZARD"):
        overrides["wizard_required_settings"] = parse_id_list(os.environ["SETTINGS_REQUIRED_ON_WIZARD"])

    if os.environ.get("ARKHAM_ENV"):
        overrides["development"] = os.environ["ARKHAM_ENV"].lower() == "development"
    if os.environ.get("ARKHAM_SETTINGS_DEVELOPMENT") is not None:
        overrides["development"] = parse_env_bool(os.environ.get("ARKHAM_SETTINGS_DEVELOPMENT"))

    if os.environ.get("ARKHAM_SETTINGS_DATABASE_URL"):
        overrides["database_url"] = os.environ["ARKHAM_SETTINGS_DATABASE_URL"]
    if os.environ.get("ARKHAM_SETTINGS_LOG_LEVEL"):
        overrides["log_level"] = os.environ["ARKHAM_SETTINGS_LOG_LEVEL"]

    return overrides


# Convenience function
def load_config(config_path: Optional[str] = None, env_file: Optional[str] = None) -> RegistryConfig:
    """Load registry configuration.

    Args:
        config_path: Optional path to YAML config file
        env_file: Optional .env file

    Returns:
        RegistryConfig instance
    """
    return RegistryConfig.load(config_path, env_file)
