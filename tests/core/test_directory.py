"""
Unit tests for global cache directory resolution.
"""

from pathlib import Path

from ijplatformkit.core.directory import CACHE_ENV_VARIABLE, get_global_cache_dir


class TestGetGlobalCacheDir:
    """Test get_global_cache_dir function."""

    def test_environment_override(self, tmp_path, monkeypatch):
        """Test IJPLATFORMKIT_CACHE overrides the default location."""
        monkeypatch.setenv(CACHE_ENV_VARIABLE, str(tmp_path / "custom"))

        assert get_global_cache_dir() == tmp_path / "custom"

    def test_default_under_home(self, monkeypatch):
        """Test default location is a dot directory in the home directory."""
        monkeypatch.delenv(CACHE_ENV_VARIABLE, raising=False)

        cache_dir = get_global_cache_dir()

        assert cache_dir.name == ".ijplatformkit"
        assert isinstance(cache_dir, Path)
