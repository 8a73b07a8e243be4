"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import hashlib
import pytest
import responses

from ijplatformkit.core.download import download_file, fetch_text
from ijplatformkit.core.exceptions import ChecksumError, DownloadError

URL = "https://example.com/ideaIC-2022.3.3.zip"


class TestFetchText:
    """Test fetch_text function."""

    @responses.activate
    def test_returns_body(self):
        """Test successful fetch returns the body text."""
        responses.add(responses.GET, "https://example.com/index.xml", body="<metadata/>")

        assert fetch_text("https://example.com/index.xml") == "<metadata/>"

    @responses.activate
    def test_http_error_raises_download_error(self):
        """Test error status is reported as DownloadError with the URL."""
        responses.add(responses.GET, "https://example.com/index.xml", status=404)

        with pytest.raises(DownloadError) as exc_info:
            fetch_text("https://example.com/index.xml")

        assert exc_info.value.url == "https://example.com/index.xml"


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_download_success(self, tmp_path):
        """Test successful download writes the destination."""
        content = b"archive content"
        responses.add(responses.GET, URL, body=content, status=200)

        destination = tmp_path / "nested" / "ideaIC-2022.3.3.zip"
        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == content
        assert not destination.with_name(destination.name + ".part").exists()

    @responses.activate
    def test_download_with_matching_checksum(self, tmp_path):
        """Test download with a correct SHA-256 checksum."""
        content = b"archive content"
        responses.add(responses.GET, URL, body=content, status=200)

        destination = tmp_path / "file.zip"
        download_file(URL, destination, expected_sha256=hashlib.sha256(content).hexdigest())

        assert destination.read_bytes() == content

    @responses.activate
    def test_checksum_mismatch(self, tmp_path):
        """Test checksum mismatch raises and leaves nothing behind."""
        responses.add(responses.GET, URL, body=b"archive content", status=200)

        destination = tmp_path / "file.zip"
        with pytest.raises(ChecksumError):
            download_file(URL, destination, expected_sha256="0" * 64)

        assert not destination.exists()
        assert not destination.with_name("file.zip.part").exists()

    @responses.activate
    def test_http_error(self, tmp_path):
        """Test HTTP error raises DownloadError."""
        responses.add(responses.GET, URL, status=500)

        with pytest.raises(DownloadError):
            download_file(URL, tmp_path / "file.zip")

        assert not (tmp_path / "file.zip").exists()

    @responses.activate
    def test_resume_partial_download(self, tmp_path):
        """Test partial file is resumed with a Range request."""
        destination = tmp_path / "file.zip"
        destination.with_name("file.zip.part").write_bytes(b"first-")
        responses.add(responses.GET, URL, body=b"second", status=206)

        download_file(URL, destination)

        assert destination.read_bytes() == b"first-second"
        assert responses.calls[0].request.headers["Range"] == "bytes=6-"

    @responses.activate
    def test_resume_ignored_by_server(self, tmp_path):
        """Test full response replaces the partial file when Range is ignored."""
        destination = tmp_path / "file.zip"
        destination.with_name("file.zip.part").write_bytes(b"stale")
        responses.add(responses.GET, URL, body=b"complete", status=200)

        download_file(URL, destination)

        assert destination.read_bytes() == b"complete"

    @responses.activate
    def test_complete_partial_file_restarts(self, tmp_path):
        """Test a partial file the server cannot resume is downloaded again."""
        destination = tmp_path / "file.zip"
        destination.with_name("file.zip.part").write_bytes(b"0123456789")
        responses.add(responses.GET, URL, status=416)
        responses.add(responses.GET, URL, body=b"0123456789", status=200)

        download_file(URL, destination)

        assert destination.read_bytes() == b"0123456789"
        assert not destination.with_name("file.zip.part").exists()
        assert responses.calls[0].request.headers["Range"] == "bytes=10-"
        assert "Range" not in responses.calls[1].request.headers

    @responses.activate
    def test_restart_failure_raises(self, tmp_path):
        """Test the restarted request reports its own error."""
        destination = tmp_path / "file.zip"
        destination.with_name("file.zip.part").write_bytes(b"0123456789")
        responses.add(responses.GET, URL, status=416)
        responses.add(responses.GET, URL, status=500)

        with pytest.raises(DownloadError):
            download_file(URL, destination)

        assert not destination.exists()

    def test_empty_url(self, tmp_path):
        """Test empty URL is rejected."""
        with pytest.raises(ValueError):
            download_file("", tmp_path / "file.zip")
