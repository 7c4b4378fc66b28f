"""
Process configuration.

Settings come from, in increasing priority: defaults, an optional JSON
config file, environment variables, and command-line flags applied by
:mod:`roster.main`.
"""

import json
from typing import Any, Dict, Mapping, Optional

from pydantic import AliasChoices, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError


class Settings(BaseSettings):
    # field names are accepted alongside the environment names, for the
    # config file and command-line layers
    model_config = SettingsConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    database_type: str = Field(default="sqlite", validation_alias=AliasChoices("ROSTER_DATABASE_TYPE"))
    database_path: str = Field(default="roster.db", validation_alias=AliasChoices("ROSTER_DATABASE_PATH"))
    frontend_url: str = Field(default="http://localhost:5173", validation_alias=AliasChoices("FRONTEND_URL"))
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("HOST"))
    port: int = Field(default=3000, gt=0, lt=65536, validation_alias=AliasChoices("PORT"))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("ROSTER_LOG_LEVEL"))

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    def database_config(self) -> Dict[str, Any]:
        return {"database_path": self.database_path}


def load_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object")
    return data


def load_settings(config_path: Optional[str] = None,
                  overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    """Layer the config file, the environment and ``overrides`` (None values skipped)."""
    try:
        from_environment = Settings()
        values: Dict[str, Any] = load_config_file(config_path) if config_path else {}
        values.update({name: getattr(from_environment, name)
                       for name in from_environment.model_fields_set})
        values.update({key: value for key, value in (overrides or {}).items() if value is not None})
        # model_validate checks the merged values without reading the environment again
        return Settings.model_validate(values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
