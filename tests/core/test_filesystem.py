"""
Unit tests for filesystem module.

Tests archive extraction, archive entry reads and safe file operations.
"""

import zipfile

import pytest

from ijplatformkit.core.exceptions import (
    ArchiveCorruptError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)
from ijplatformkit.core.filesystem import (
    atomic_write,
    extract_archive,
    read_archive_entry,
    safe_rmtree,
    strip_archive_extension,
)
from tests.utils.builders import write_tar_gz, write_zip


class TestStripArchiveExtension:
    """Test strip_archive_extension function."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("ideaIC-2022.3.3.zip", "ideaIC-2022.3.3"),
            ("ideaIC-2022.3.3.tar.gz", "ideaIC-2022.3.3"),
            ("plugin.jar", "plugin"),
            ("Rider-2023.1.sit", "Rider-2023.1"),
            ("notes.txt", "notes.txt"),
        ],
    )
    def test_strip(self, name, expected):
        """Test known extensions are stripped and others kept."""
        assert strip_archive_extension(name) == expected


class TestExtractArchive:
    """Test extract_archive function."""

    def test_extract_zip(self, tmp_path):
        """Test zip extraction keeps the directory layout."""
        archive = write_zip(tmp_path / "ide.zip", {"build.txt": "IC-1", "lib/app.jar": b"jar"})

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "build.txt").read_text() == "IC-1"
        assert (tmp_path / "out" / "lib" / "app.jar").read_bytes() == b"jar"

    def test_extract_tar_gz(self, tmp_path):
        """Test tar.gz extraction."""
        archive = write_tar_gz(tmp_path / "ide.tar.gz", {"idea-IC/build.txt": "IC-1"})

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "idea-IC" / "build.txt").read_text() == "IC-1"

    def test_corrupt_zip(self, tmp_path):
        """Test corrupt zip raises ArchiveCorruptError."""
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"not a zip")

        with pytest.raises(ArchiveCorruptError):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        """Test missing archive raises ArchiveCorruptError."""
        with pytest.raises(ArchiveCorruptError):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_unsupported_format(self, tmp_path):
        """Test dmg images are not extracted."""
        archive = tmp_path / "ide.dmg"
        archive.write_bytes(b"dmg")

        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_path_traversal_rejected(self, tmp_path):
        """Test entries escaping the destination are rejected."""
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../escape.txt", "boom")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

        assert not (tmp_path / "escape.txt").exists()


class TestReadArchiveEntry:
    """Test read_archive_entry function."""

    def test_read_zip_entry(self, tmp_path):
        """Test root entry is read from a zip."""
        archive = write_zip(tmp_path / "ide.zip", {"build.txt": "IC-223.8836.41"})

        assert read_archive_entry(archive, "build.txt") == b"IC-223.8836.41"

    def test_missing_entry(self, tmp_path):
        """Test missing entry returns None."""
        archive = write_zip(tmp_path / "ide.zip", {"lib/app.jar": b"jar"})

        assert read_archive_entry(archive, "build.txt") is None

    def test_read_tar_entry(self, tmp_path):
        """Test root entry is read from a tar.gz."""
        archive = write_tar_gz(tmp_path / "ide.tar.gz", {"build.txt": "IC-1"})

        assert read_archive_entry(archive, "build.txt") == b"IC-1"

    def test_corrupt_archive(self, tmp_path):
        """Test unreadable archive raises ArchiveCorruptError."""
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"garbage")

        with pytest.raises(ArchiveCorruptError):
            read_archive_entry(archive, "build.txt")


class TestAtomicWrite:
    """Test atomic_write function."""

    def test_write_text(self, tmp_path):
        """Test text content is written and parents created."""
        target = tmp_path / "a" / "b.xml"
        atomic_write(target, "<plugins/>")

        assert target.read_text() == "<plugins/>"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test overwrite replaces content without leftovers."""
        target = tmp_path / "file.bin"
        atomic_write(target, b"one")
        atomic_write(target, b"two")

        assert target.read_bytes() == b"two"
        assert [p.name for p in tmp_path.iterdir()] == ["file.bin"]


class TestSafeRmtree:
    """Test safe_rmtree function."""

    def test_remove_directory(self, tmp_path):
        """Test directory tree is removed."""
        directory = tmp_path / "tree"
        (directory / "nested").mkdir(parents=True)
        (directory / "nested" / "file").write_text("x")

        safe_rmtree(directory)

        assert not directory.exists()

    def test_missing_directory_is_ignored(self, tmp_path):
        """Test removing a missing directory is a no-op."""
        safe_rmtree(tmp_path / "missing")

    def test_refuses_outside_prefix(self, tmp_path):
        """Test prefix guard."""
        directory = tmp_path / "tree"
        directory.mkdir()

        with pytest.raises(ValueError):
            safe_rmtree(directory, require_prefix=tmp_path / "other")

        assert directory.exists()

    def test_file_is_rejected(self, tmp_path):
        """Test a regular file is not removed."""
        path = tmp_path / "file"
        path.write_text("x")

        with pytest.raises(FilesystemError):
            safe_rmtree(path)
