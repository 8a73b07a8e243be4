"""Configuration module for ijplatformkit.

This module provides YAML configuration parsing and validation for ijplatformkit.yaml.
"""

from ijplatformkit.config.parser import (
    CONFIG_FILE_NAME,
    KitConfig,
    PluginRepositoryConfig,
    load_config,
    parse_config,
    parse_config_data,
)
from ijplatformkit.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILE_NAME",
    "KitConfig",
    "PluginRepositoryConfig",
    "ConfigError",
    "load_config",
    "parse_config",
    "parse_config_data",
]
