"""
File system utilities for the artifact cache.

This module provides:
- Archive extraction (zip, sit, tar.gz, tgz, tar.xz) with traversal checks
- Safe file operations (atomic writes, safe deletion)
- Executable-bit handling for extracted binaries
"""

import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import Optional, Union

from ijplatformkit.core.exceptions import (
    ArchiveCorruptError,
    ExtractionIOError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

IS_WINDOWS = os.name == "nt"

ZIP_EXTENSIONS = (".zip", ".sit", ".jar")
TAR_EXTENSIONS = {".tar.gz": "r:gz", ".tgz": "r:gz", ".tar.xz": "r:xz"}


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Return True if ``path`` lies inside ``parent``."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def strip_archive_extension(name: str) -> str:
    """
    Strip a known archive extension from a file name.

    Example:
        >>> strip_archive_extension("ideaIC-2022.3.3.tar.gz")
        'ideaIC-2022.3.3'
    """
    lowered = name.lower()
    for extension in (*TAR_EXTENSIONS, *ZIP_EXTENSIONS):
        if lowered.endswith(extension):
            return name[: -len(extension)]
    return name


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats:
    - .zip, .sit, .jar
    - .tar.gz, .tgz
    - .tar.xz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveCorruptError: If the archive cannot be opened or read
        ExtractionIOError: If writing to the destination fails
        InsecureArchiveError: If archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise ArchiveCorruptError(str(archive_path), "file not found")

    archive_name = archive_path.name.lower()

    try:
        destination.mkdir(parents=True, exist_ok=True)
        if archive_name.endswith(ZIP_EXTENSIONS):
            _extract_zip(archive_path, destination)
            return
        for extension, mode in TAR_EXTENSIONS.items():
            if archive_name.endswith(extension):
                _extract_tar(archive_path, destination, mode)
                return
    except (zipfile.BadZipFile, tarfile.TarError, zlib.error, EOFError) as e:
        raise ArchiveCorruptError(str(archive_path), str(e)) from e
    except OSError as e:
        raise ExtractionIOError(str(archive_path), str(destination), str(e)) from e

    raise UnsupportedArchiveFormat(
        f"Unsupported archive format: {archive_path.name}. "
        f"Supported: {', '.join((*ZIP_EXTENSIONS, *TAR_EXTENSIONS))}"
    )


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        for member in members:
            _validate_archive_path(member, destination)

        for member in members:
            zf.extract(member, destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        members = tar.getmembers()

        for member in members:
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def read_archive_entry(archive_path: Union[str, Path], name: str) -> Optional[bytes]:
    """
    Read a single root-level entry from a zip or tar archive.

    Returns:
        Entry content, or None if the archive has no such entry

    Raises:
        ArchiveCorruptError: If the archive cannot be opened or read
    """
    archive_path = Path(archive_path)
    archive_name = archive_path.name.lower()
    try:
        for extension, mode in TAR_EXTENSIONS.items():
            if archive_name.endswith(extension):
                with tarfile.open(archive_path, mode) as tar:
                    for candidate in (name, f"./{name}"):
                        try:
                            member = tar.getmember(candidate)
                        except KeyError:
                            continue
                        handle = tar.extractfile(member)
                        return handle.read() if handle else None
                return None

        with zipfile.ZipFile(archive_path, "r") as zf:
            try:
                return zf.read(name)
            except KeyError:
                return None
    except (zipfile.BadZipFile, tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ArchiveCorruptError(str(archive_path), str(e)) from e


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state; concurrent
    writers resolve as last-writer-wins.

    Example:
        >>> atomic_write('builtinRegistry-1.xml', '<plugins/>')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, failed_path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(failed_path, os.W_OK):
                    os.chmod(failed_path, stat.S_IWRITE | stat.S_IREAD)
                    func(failed_path)
                else:
                    raise exc[1]

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def set_executable(path: Union[str, Path]) -> None:
    """Add the executable bit for owner, group and others."""
    path = Path(path)
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
