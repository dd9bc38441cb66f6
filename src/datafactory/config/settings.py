"""Configuration settings and loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from datafactory.errors import ConfigLoadError, ModuleConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "datafactory.yaml"

# camelCase spellings accepted in YAML files and marker overrides
_KEY_ALIASES = {
    "customStore": "custom_store",
}


class DataFactoryConfig(BaseSettings):
    """Configuration for the DataFactory module.

    ``cleanup`` is tri-state: ``False`` disables cleanup after each test,
    ``None`` (absent) and ``True`` leave the decision to the ORM dependency.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATAFACTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    factories: Annotated[list[str], NoDecode] = Field(default_factory=list)
    custom_store: str | None = None
    cleanup: bool | None = None

    @field_validator("factories", mode="before")
    @classmethod
    def validate_factories(cls, v: Any) -> list[str]:
        if v is None or v == "":
            return []
        if isinstance(v, (str, Path)):
            return [str(v)]
        return [str(item) for item in v]

    @field_validator("custom_store", mode="before")
    @classmethod
    def validate_custom_store(cls, v: Any) -> str | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @property
    def skip_cleanup(self) -> bool:
        """True only when cleanup was explicitly disabled."""
        return self.cleanup is False

    def merged(self, **overrides: Any) -> DataFactoryConfig:
        """Return a new, validated config with ``overrides`` applied on top."""
        data = self.model_dump()
        data.update(normalize_keys(overrides))
        return build_config(data)


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Translate camelCase keys (``customStore``) to field names."""
    return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def build_config(data: dict[str, Any]) -> DataFactoryConfig:
    """Validate raw configuration data into a DataFactoryConfig."""
    try:
        return DataFactoryConfig(**normalize_keys(data))
    except ValidationError as e:
        raise ModuleConfigError(
            f"Invalid DataFactory configuration: {e.error_count()} error(s)",
            cause=e,
            errors=e.errors(include_url=False),
        ) from e


def load_config(
    config_path: str | Path | None = None,
    required: bool = False,
    **overrides: Any,
) -> DataFactoryConfig:
    """Load configuration from file and environment.

    Priority: overrides > config file > env vars > defaults

    Args:
        config_path: YAML file to read. The keys may live at the top level
            or under a ``datafactory:`` section.
        required: Raise ConfigLoadError when the file does not exist.
        **overrides: Values that take precedence over everything else.
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            config_data = _read_yaml(config_path)
            logger.debug(f"Loaded DataFactory configuration from {config_path}")
        elif required:
            raise ConfigLoadError(
                f"Configuration file not found: {config_path}",
                path=str(config_path),
            )

    config_data.update(normalize_keys(overrides))

    return build_config(config_data)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}", cause=e) from e
    except OSError as e:
        raise ConfigLoadError(f"Cannot read {path}: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping at the top of {path}")

    section = data.get("datafactory", data)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigLoadError(f"The 'datafactory' section of {path} must be a mapping")
    return dict(section)
