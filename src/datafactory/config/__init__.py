"""Configuration management for DataFactory."""

from datafactory.config.settings import (
    DEFAULT_CONFIG_FILE,
    DataFactoryConfig,
    build_config,
    load_config,
    normalize_keys,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DataFactoryConfig",
    "build_config",
    "load_config",
    "normalize_keys",
]
