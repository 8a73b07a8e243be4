"""
Download and extraction cache for IDE and plugin archives.

Every extracted archive lives in a target directory next to a marker file.
The marker records that extraction completed and under which content
version:

- check_version=False: the target is valid as soon as the marker exists.
  Used for release artifacts, which never change once published.
- check_version=True: the archive's root ``build.txt`` entry is compared
  byte-for-byte with the marker content. Snapshot artifacts are republished
  under the same version, so a different build identifier forces a fresh
  extraction.

The check-extract-mark sequence is serialized across processes with a file
lock per target directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import requests

from ijplatformkit.artifacts.locator import ArtifactLocation
from ijplatformkit.artifacts.product import RIDER, ProductCoordinate
from ijplatformkit.core.download import download_file
from ijplatformkit.core.exceptions import ExtractionIOError, FilesystemError
from ijplatformkit.core.filesystem import (
    extract_archive,
    read_archive_entry,
    safe_rmtree,
    set_executable,
    strip_archive_extension,
)
from ijplatformkit.core.locking import LockManager
from ijplatformkit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

MARKER_FILE_NAME = "markerFile"
BUILD_FILE_NAME = "build.txt"
EXISTS_SENTINEL = b"exists"

# Files that lose their executable bit when Rider archives are repackaged
_RIDER_EXECUTABLE_EXTENSIONS = ("dylib", "py", "sh")
_RIDER_EXECUTABLE_NAMES = frozenset(
    {
        "dotnet",
        "env-wrapper",
        "mono-sgen",
        "BridgeService",
        "JetBrains.Profiler.PdbServer",
        "JBDeviceService",
        "Rider.Backend",
    }
)


@dataclass(frozen=True)
class CachedExtraction:
    """On-disk memoization of one extracted archive."""

    source_archive: Path
    target_directory: Path

    @property
    def marker_file(self) -> Path:
        return self.target_directory / MARKER_FILE_NAME


class ArtifactCache:
    """
    Fetches archives into a cache root and extracts them exactly once.

    Args:
        cache_root: Directory owning all downloads and extractions
        lock_manager: Lock provider (default: locks under ``<cache_root>/lock``)
        session: Optional requests session used for downloads
        timeout: HTTP timeout in seconds
        platform_info: Host platform (default: detected)
        logger: Logger receiving cache decisions

    Example:
        >>> cache = ArtifactCache(Path("~/.ijplatformkit").expanduser())
        >>> archive = cache.fetch_location(location)
        >>> ide_dir = cache.extract(archive, archive.parent, check_version=False)
    """

    def __init__(
        self,
        cache_root: Path,
        lock_manager: Optional[LockManager] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        platform_info: Optional[PlatformInfo] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cache_root = Path(cache_root)
        self.lock_manager = lock_manager or LockManager(self.cache_root / "lock")
        self.session = session
        self.timeout = timeout
        self.platform_info = platform_info or detect_platform()
        self.logger = logger or logging.getLogger(__name__)

    # ========================================================================
    # Downloads
    # ========================================================================

    def download_path_for(self, location: ArtifactLocation) -> Path:
        """Cache path of a located artifact: ``<root>/<group>/<artifact>/<version>/<file>``."""
        return (
            self.cache_root
            / location.group_id
            / location.artifact_id
            / location.version
            / location.file_name
        )

    def fetch(
        self,
        url: str,
        destination: Union[str, Path],
        refresh: bool = False,
        sha256: Optional[str] = None,
    ) -> Path:
        """
        Download ``url`` unless ``destination`` is already cached.

        Args:
            url: Remote artifact URL
            destination: Target path, relative paths are resolved under the cache root
            refresh: Re-download even when the file exists (snapshot refresh)
            sha256: Optional expected SHA-256 checksum

        Returns:
            Local path of the artifact

        Raises:
            DownloadError: If the download fails
        """
        destination = Path(destination)
        if not destination.is_absolute():
            destination = self.cache_root / destination

        with self.lock_manager.artifact_lock(str(destination)):
            if destination.is_file() and not refresh:
                self.logger.debug(f"Using cached artifact: {destination}")
                return destination

            if refresh and destination.exists():
                destination.unlink()

            return download_file(
                url,
                destination,
                expected_sha256=sha256,
                timeout=self.timeout,
                session=self.session,
            )

    def fetch_location(self, location: ArtifactLocation, refresh: bool = False) -> Path:
        return self.fetch(location.url, self.download_path_for(location), refresh=refresh)

    # ========================================================================
    # Extraction
    # ========================================================================

    @staticmethod
    def target_directory_for(archive: Path, cache_directory: Path) -> Path:
        """Target directory of an archive: its name with the extension stripped."""
        return Path(cache_directory) / strip_archive_extension(Path(archive).name)

    def is_up_to_date(self, archive: Path, marker: Path, check_version: bool) -> bool:
        """
        Decide whether an existing extraction can be reused.

        Raises:
            ArchiveCorruptError: If ``check_version`` is set and the archive is unreadable
        """
        if not marker.is_file():
            return False
        if not check_version:
            return True

        build = read_archive_entry(archive, BUILD_FILE_NAME)
        if build is None:
            self.logger.debug(f"No {BUILD_FILE_NAME} in {archive}, cache is stale")
            return False

        return build == marker.read_bytes()

    def extract(
        self,
        archive: Path,
        cache_directory: Optional[Path] = None,
        check_version: bool = False,
        product: Union[str, ProductCoordinate, None] = None,
    ) -> Path:
        """
        Extract ``archive`` next to itself (or into ``cache_directory``).

        Returns:
            The extracted target directory
        """
        archive = Path(archive)
        cache_directory = Path(cache_directory) if cache_directory else archive.parent
        target = self.target_directory_for(archive, cache_directory)
        return self.extract_to(archive, target, check_version, product)

    def extract_to(
        self,
        archive: Path,
        target_directory: Path,
        check_version: bool = False,
        product: Union[str, ProductCoordinate, None] = None,
    ) -> Path:
        """
        Extract ``archive`` into ``target_directory`` unless it is up to date.

        Raises:
            ArchiveCorruptError: If the archive cannot be read
            ExtractionIOError: If writing the extraction fails
            CacheLockTimeout: If another process holds the target for too long
        """
        extraction = CachedExtraction(Path(archive), Path(target_directory))

        with self.lock_manager.artifact_lock(str(extraction.target_directory)):
            if self.is_up_to_date(extraction.source_archive, extraction.marker_file, check_version):
                self.logger.debug(
                    f"Extraction is up to date: {extraction.target_directory}"
                )
                return extraction.target_directory

            self._extract(extraction, product)

        return extraction.target_directory

    def _extract(
        self,
        extraction: CachedExtraction,
        product: Union[str, ProductCoordinate, None],
    ) -> None:
        archive = extraction.source_archive
        target = extraction.target_directory

        self.logger.info(f"Extracting {archive.name} into {target}")
        try:
            safe_rmtree(target)
        except FilesystemError as e:
            raise ExtractionIOError(str(archive), str(target), str(e)) from e

        extract_archive(archive, target)
        self._reset_executable_permissions(target, product)

        build = read_archive_entry(archive, BUILD_FILE_NAME)
        try:
            extraction.marker_file.write_bytes(build if build is not None else EXISTS_SENTINEL)
        except OSError as e:
            raise ExtractionIOError(str(archive), str(target), str(e)) from e

    def _reset_executable_permissions(
        self, directory: Path, product: Union[str, ProductCoordinate, None]
    ) -> None:
        code = product.code if isinstance(product, ProductCoordinate) else product
        if code != RIDER.code or self.platform_info.is_windows:
            return

        for root, _dirs, files in os.walk(directory):
            for name in files:
                if _needs_executable_bit(name):
                    path = Path(root) / name
                    self.logger.debug(f"Resetting executable permissions for: {path}")
                    try:
                        set_executable(path)
                    except OSError as e:
                        raise ExtractionIOError(str(path), str(directory), str(e)) from e


def _needs_executable_bit(name: str) -> bool:
    if name in _RIDER_EXECUTABLE_NAMES:
        return True
    extension = name.rsplit(".", 1)[1] if "." in name else ""
    return extension in _RIDER_EXECUTABLE_EXTENSIONS or extension.startswith("so")
