"""
Pytest configuration and shared fixtures for ijplatformkit tests.
"""

import logging

import pytest
import tempfile
from pathlib import Path
from typing import Generator

from ijplatformkit.artifacts.cache import ArtifactCache
from ijplatformkit.artifacts.locator import ArtifactLocator
from ijplatformkit.core.platform import PlatformInfo


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def cache_root(temp_dir: Path) -> Path:
    root = temp_dir / "cache"
    root.mkdir()
    return root


@pytest.fixture
def artifact_cache(cache_root: Path, linux_platform: PlatformInfo) -> ArtifactCache:
    """Artifact cache rooted in a temporary directory, on a Linux host."""
    return ArtifactCache(cache_root, platform_info=linux_platform, timeout=5)


@pytest.fixture
def locator(linux_platform: PlatformInfo) -> ArtifactLocator:
    return ArtifactLocator(platform_info=linux_platform)


@pytest.fixture
def isolated_cache(temp_dir: Path, monkeypatch) -> Path:
    """Point the global cache directory at a temporary location."""
    cache = temp_dir / "global-cache"
    monkeypatch.setenv("IJPLATFORMKIT_CACHE", str(cache))
    return cache


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by CLI runs."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    root.setLevel(level)
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
