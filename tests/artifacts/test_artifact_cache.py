"""
Unit tests for the artifact cache.

Tests download memoization, extraction markers and snapshot invalidation.
"""

import os
import stat
import sys
from unittest.mock import patch

import pytest
import responses

from ijplatformkit.artifacts import cache as cache_module
from ijplatformkit.artifacts.cache import MARKER_FILE_NAME, ArtifactCache
from ijplatformkit.core.exceptions import ArchiveCorruptError
from ijplatformkit.core.platform import PlatformInfo
from tests.utils.builders import write_zip

URL = "https://example.com/ideaIC-2022.3.3.zip"


class TestFetch:
    """Test ArtifactCache.fetch."""

    @responses.activate
    def test_download_once(self, artifact_cache):
        """Test a cached file is not downloaded again."""
        responses.add(responses.GET, URL, body=b"zip")

        first = artifact_cache.fetch(URL, "com.jetbrains/ideaIC/2022.3.3/ideaIC-2022.3.3.zip")
        second = artifact_cache.fetch(URL, "com.jetbrains/ideaIC/2022.3.3/ideaIC-2022.3.3.zip")

        assert first == second
        assert first.read_bytes() == b"zip"
        assert len(responses.calls) == 1

    @responses.activate
    def test_refresh_downloads_again(self, artifact_cache):
        responses.add(responses.GET, URL, body=b"old")
        responses.add(responses.GET, URL, body=b"new")

        artifact_cache.fetch(URL, "file.zip")
        result = artifact_cache.fetch(URL, "file.zip", refresh=True)

        assert result.read_bytes() == b"new"
        assert len(responses.calls) == 2

    @responses.activate
    def test_fetch_location_path(self, artifact_cache, locator):
        """Test located artifacts land under group/artifact/version."""
        location = locator.locate("IC", "2022.3.3")
        responses.add(responses.GET, location.url, body=b"zip")

        path = artifact_cache.fetch_location(location)

        assert path == (
            artifact_cache.cache_root
            / "com.jetbrains.intellij.idea"
            / "ideaIC"
            / "2022.3.3"
            / "ideaIC-2022.3.3.zip"
        )


class TestExtract:
    """Test ArtifactCache.extract."""

    def test_extract_writes_marker(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "ideaIC-2022.3.3.zip", {"build.txt": "IC-223.8836.41"})

        target = artifact_cache.extract(archive)

        assert target == temp_dir / "ideaIC-2022.3.3"
        assert (target / "build.txt").read_text() == "IC-223.8836.41"
        assert (target / MARKER_FILE_NAME).read_bytes() == b"IC-223.8836.41"

    def test_marker_without_build_file(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "plugin.zip", {"plugin/lib/plugin.jar": b"jar"})

        target = artifact_cache.extract(archive)

        assert (target / MARKER_FILE_NAME).read_bytes() == b"exists"

    def test_extract_is_idempotent(self, artifact_cache, temp_dir):
        """Test a second call reuses the extraction."""
        archive = write_zip(temp_dir / "ide.zip", {"build.txt": "IC-1"})

        with patch.object(
            cache_module, "extract_archive", wraps=cache_module.extract_archive
        ) as extract:
            first = artifact_cache.extract(archive)
            second = artifact_cache.extract(archive)

        assert first == second
        assert extract.call_count == 1

    def test_release_ignores_content_changes(self, artifact_cache, temp_dir):
        """Test check_version=False trusts the marker."""
        archive = write_zip(temp_dir / "ide.zip", {"build.txt": "IC-1"})
        target = artifact_cache.extract(archive)

        write_zip(archive, {"build.txt": "IC-2"})
        artifact_cache.extract(archive, check_version=False)

        assert (target / "build.txt").read_text() == "IC-1"

    def test_snapshot_reextracted_on_new_build(self, artifact_cache, temp_dir):
        """Test check_version=True re-extracts when build.txt changes."""
        archive = write_zip(temp_dir / "ide.zip", {"build.txt": "IC-1", "lib/old.jar": b"old"})
        target = artifact_cache.extract(archive, check_version=True)

        write_zip(archive, {"build.txt": "IC-2", "lib/new.jar": b"new"})
        artifact_cache.extract(archive, check_version=True)

        assert (target / "build.txt").read_text() == "IC-2"
        assert (target / MARKER_FILE_NAME).read_bytes() == b"IC-2"
        assert not (target / "lib" / "old.jar").exists()

    def test_snapshot_same_build_reused(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "ide.zip", {"build.txt": "IC-1"})
        artifact_cache.extract(archive, check_version=True)

        with patch.object(cache_module, "extract_archive") as extract:
            artifact_cache.extract(archive, check_version=True)

        extract.assert_not_called()

    def test_missing_marker_forces_extraction(self, artifact_cache, temp_dir):
        """Test an interrupted extraction is redone."""
        archive = write_zip(temp_dir / "ide.zip", {"build.txt": "IC-1"})
        target = artifact_cache.extract(archive)
        (target / MARKER_FILE_NAME).unlink()
        (target / "stale.txt").write_text("partial")

        artifact_cache.extract(archive)

        assert not (target / "stale.txt").exists()
        assert (target / MARKER_FILE_NAME).exists()

    def test_corrupt_archive(self, artifact_cache, temp_dir):
        archive = temp_dir / "ide.zip"
        archive.write_bytes(b"not a zip")

        with pytest.raises(ArchiveCorruptError):
            artifact_cache.extract(archive)

    def test_extract_into_cache_directory(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "downloads" / "ide.zip", {"build.txt": "IC-1"})

        target = artifact_cache.extract(archive, temp_dir / "extracted")

        assert target == temp_dir / "extracted" / "ide"

    def test_extract_to_explicit_directory(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "plugin.zip", {"go/lib/go.jar": b"jar"})

        target = artifact_cache.extract_to(archive, temp_dir / "unzipped" / "go-1.0")

        assert (target / "go" / "lib" / "go.jar").exists()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
class TestRiderPermissions:
    """Test executable bits are restored for Rider archives."""

    def test_rider_files_made_executable(self, artifact_cache, temp_dir):
        archive = write_zip(
            temp_dir / "riderRD-2023.1.zip",
            {
                "build.txt": "RD-231.8109.2",
                "lib/ReSharperHost/linux-x64/dotnet/dotnet": b"bin",
                "lib/ReSharperHost/libjvm.so": b"so",
                "bin/rider.sh": b"#!/bin/sh",
                "lib/app.jar": b"jar",
            },
        )

        target = artifact_cache.extract(archive, product="RD")

        assert os.stat(target / "lib/ReSharperHost/linux-x64/dotnet/dotnet").st_mode & stat.S_IXUSR
        assert os.stat(target / "lib/ReSharperHost/libjvm.so").st_mode & stat.S_IXUSR
        assert os.stat(target / "bin/rider.sh").st_mode & stat.S_IXUSR
        assert not os.stat(target / "lib/app.jar").st_mode & stat.S_IXUSR

    def test_other_products_untouched(self, artifact_cache, temp_dir):
        archive = write_zip(temp_dir / "ideaIC.zip", {"bin/idea.sh": b"#!/bin/sh"})

        target = artifact_cache.extract(archive, product="IC")

        assert not os.stat(target / "bin/idea.sh").st_mode & stat.S_IXUSR

    def test_windows_host_skips_permissions(self, cache_root, temp_dir):
        cache = ArtifactCache(cache_root, platform_info=PlatformInfo("windows", "x64"))
        archive = write_zip(temp_dir / "rider.zip", {"bin/rider.sh": b"#!/bin/sh"})

        with patch.object(cache_module, "set_executable") as set_executable:
            cache.extract(archive, product="RD")

        set_executable.assert_not_called()
