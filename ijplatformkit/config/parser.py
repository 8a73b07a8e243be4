"""YAML configuration parser for ijplatformkit.

This module provides parsing and validation for ijplatformkit.yaml configuration files.

Example ``ijplatformkit.yaml``::

    version: 1
    cache_dir: ~/.ijplatformkit
    http_timeout: 60
    plugin_repositories:
      - type: marketplace
      - type: custom
        url: https://plugins.example.com/updatePlugins.xml
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Union
import yaml

from ijplatformkit.artifacts.product import IDE_INSTALLERS_REPOSITORY, INTELLIJ_REPOSITORY
from ijplatformkit.core.directory import get_global_cache_dir
from ijplatformkit.core.exceptions import ConfigError

CONFIG_FILE_NAME = "ijplatformkit.yaml"

REPOSITORY_TYPES = ["marketplace", "maven", "custom"]


@dataclass
class PluginRepositoryConfig:
    """One remote plugin repository."""

    type: str  # 'marketplace', 'maven', 'custom'
    url: Optional[str] = None


@dataclass
class KitConfig:
    """Complete ijplatformkit configuration."""

    version: int = 1
    cache_dir: Optional[str] = None
    intellij_repository: str = INTELLIJ_REPOSITORY
    installers_repository: str = IDE_INSTALLERS_REPOSITORY
    ide_cache_dir: Optional[str] = None
    lock_timeout: int = 600  # seconds
    http_timeout: int = 30  # seconds
    plugin_repositories: List[PluginRepositoryConfig] = field(default_factory=list)

    @property
    def cache_path(self) -> Path:
        """Cache root: ``cache_dir`` when set, else the global cache directory."""
        if self.cache_dir:
            return Path(self.cache_dir).expanduser()
        return get_global_cache_dir()

    @property
    def ide_cache_path(self) -> Optional[Path]:
        return Path(self.ide_cache_dir).expanduser() if self.ide_cache_dir else None


def load_config(config_path: Union[str, Path, None] = None) -> KitConfig:
    """
    Load configuration, falling back to defaults.

    Without an explicit path, ``ijplatformkit.yaml`` in the current directory
    is used when it exists.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default = Path.cwd() / CONFIG_FILE_NAME
    if default.is_file():
        return parse_config(default)
    return KitConfig()


def parse_config(config_path: Path) -> KitConfig:
    """
    Parse ijplatformkit.yaml configuration file.

    Args:
        config_path: Path to ijplatformkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ConfigError("Configuration file is empty")

    return parse_config_data(data)


def parse_config_data(data: dict) -> KitConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    defaults = KitConfig()
    return KitConfig(
        version=data["version"],
        cache_dir=_optional_string(data, "cache_dir"),
        intellij_repository=_optional_string(data, "intellij_repository")
        or defaults.intellij_repository,
        installers_repository=_optional_string(data, "installers_repository")
        or defaults.installers_repository,
        ide_cache_dir=_optional_string(data, "ide_cache_dir"),
        lock_timeout=_positive_int(data, "lock_timeout", defaults.lock_timeout),
        http_timeout=_positive_int(data, "http_timeout", defaults.http_timeout),
        plugin_repositories=_parse_plugin_repositories(data.get("plugin_repositories", [])),
    )


def _optional_string(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{key} must be a positive integer (got {value!r})")
    return value


def _parse_plugin_repositories(data) -> List[PluginRepositoryConfig]:
    """Parse plugin repository entries."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError("plugin_repositories must be a list")

    repositories = []
    for entry in data:
        if not isinstance(entry, dict) or "type" not in entry:
            raise ConfigError("Plugin repository must specify 'type'")

        repository_type = entry["type"]
        if repository_type not in REPOSITORY_TYPES:
            raise ConfigError(
                f"Invalid plugin repository type: {repository_type} "
                f"(expected one of {REPOSITORY_TYPES})"
            )

        url = entry.get("url")
        if repository_type != "marketplace" and not url:
            raise ConfigError(f"Plugin repository of type '{repository_type}' requires a url")

        repositories.append(PluginRepositoryConfig(type=repository_type, url=url))

    return repositories
