"""
HTTP access for remote package indexes and artifact repositories.

This module provides:
- Small-document fetches (maven-metadata.xml, plugin listings)
- Streaming artifact downloads into the local cache
- Resume of partial downloads (using Range headers)
- SHA-256 verification while streaming

No retries are performed here. A failed request raises immediately and any
retry policy belongs to the caller. The one exception is a partial file the
server refuses to resume (416), which is discarded and downloaded again.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

from ijplatformkit.core.exceptions import ChecksumError, DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def _get(session: Optional[requests.Session]):
    return session.get if session is not None else requests.get


def fetch_text(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: int = 30,
) -> str:
    """
    Fetch a small text document (index, listing) over HTTP.

    Args:
        url: Document URL
        session: Optional requests session to reuse connections
        timeout: Request timeout in seconds

    Returns:
        Response body decoded as text

    Raises:
        DownloadError: If the request fails or returns an error status
    """
    logger.debug(f"Fetching {url}")
    try:
        response = _get(session)(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(url, str(e)) from e
    return response.text


def _open_stream(
    url: str,
    headers: dict,
    timeout: int,
    session: Optional[requests.Session],
) -> requests.Response:
    try:
        return _get(session)(url, headers=headers, stream=True, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        raise DownloadError(url, str(e)) from e


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    resume: bool = True,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination with optional checksum verification.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        resume: Whether to resume partial downloads left in ``<destination>.part``
        timeout: Request timeout in seconds
        session: Optional requests session

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://example.com/ideaIC-2022.3.3.zip",
        ...     Path("cache/ideaIC-2022.3.3.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    # Partial content lives next to the destination until complete, so an
    # existing destination file always means a finished download.
    partial = destination.with_name(destination.name + ".part")

    resume_from = 0
    if resume and partial.exists():
        resume_from = partial.stat().st_size
        logger.info(f"Resuming download from byte {resume_from}")
    elif partial.exists():
        partial.unlink()

    headers = {}
    if resume_from > 0:
        headers["Range"] = f"bytes={resume_from}-"

    logger.info(f"Downloading from {url}")

    response = _open_stream(url, headers, timeout, session)

    # A partial file holding the whole artifact cannot be resumed
    if resume_from > 0 and response.status_code == 416:
        logger.warning(f"Server rejected resume at byte {resume_from}, restarting download")
        response.close()
        partial.unlink()
        resume_from = 0
        response = _open_stream(url, {}, timeout, session)

    try:
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(url, str(e)) from e

    # Server ignored the Range header
    if resume_from > 0 and response.status_code != 206:
        resume_from = 0

    hasher = hashlib.sha256() if expected_sha256 else None
    if resume_from > 0 and hasher:
        with open(partial, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                hasher.update(chunk)

    downloaded = resume_from
    mode = "ab" if resume_from > 0 else "wb"

    try:
        with open(partial, mode) as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
                if hasher:
                    hasher.update(chunk)
    except RequestException as e:
        logger.error(f"Error during download: {e}")
        raise DownloadError(url, str(e)) from e

    if expected_sha256 and hasher:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            partial.unlink()
            raise ChecksumError(url, expected_sha256, actual)
        logger.debug("Checksum verified successfully")

    partial.replace(destination)
    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination

