"""
Shared utilities for CLI commands.

Builds the configured components once per command and formats output
consistently.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ijplatformkit.artifacts.cache import ArtifactCache
from ijplatformkit.artifacts.locator import ArtifactLocator
from ijplatformkit.config.parser import KitConfig, load_config
from ijplatformkit.core.locking import LockManager
from ijplatformkit.ide.manager import IdeDependencyManager

logger = logging.getLogger(__name__)


# ============================================================================
# Component Construction
# ============================================================================


def load_kit_config(args) -> KitConfig:
    """Load the configuration named by ``--config``, or the default one."""
    config = load_config(getattr(args, "config", None))
    logger.debug(f"Cache directory: {config.cache_path}")
    return config


def create_locator(config: KitConfig) -> ArtifactLocator:
    return ArtifactLocator(
        intellij_repository=config.intellij_repository,
        installers_repository=config.installers_repository,
    )


def create_cache(config: KitConfig, session: Optional[requests.Session] = None) -> ArtifactCache:
    cache_root = config.cache_path
    return ArtifactCache(
        cache_root,
        lock_manager=LockManager(cache_root / "lock", timeout=config.lock_timeout),
        session=session,
        timeout=config.http_timeout,
    )


def create_ide_manager(config: KitConfig, cache: ArtifactCache) -> IdeDependencyManager:
    return IdeDependencyManager(
        create_locator(config),
        cache,
        ide_cache_directory=config.ide_cache_path,
    )


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_details(title: str, details: Dict[str, Any], width: int = 70) -> str:
    """
    Format a titled block of key-value pairs.

    None values are skipped.
    """
    lines = ["=" * width, title, "=" * width]
    for key, value in details.items():
        if value is not None:
            lines.append(f"{key}: {value}")
    lines.append("")
    return "\n".join(lines)
