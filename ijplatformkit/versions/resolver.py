"""
Symbolic version resolution against Maven-style package indexes.

A request is one of:
- ``latest``: the index's declared latest version
- ``closest:<version>``: the highest published version not newer than <version>
- anything else: an explicit version, returned unchanged

The closest lookup always rounds down. Dependencies such as test frameworks
are only published for builds that shipped, and a requested EAP or nightly
build may fall between two of them; only an older published build is known
to be compatible.
"""

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

import requests

from ijplatformkit.core.download import fetch_text
from ijplatformkit.core.exceptions import (
    DownloadError,
    MetadataUnavailableError,
    NoMatchingVersionError,
)
from ijplatformkit.versions.version import Version

logger = logging.getLogger(__name__)

LATEST = "latest"
CLOSEST_PREFIX = "closest:"


@dataclass
class MavenMetadata:
    """Parsed content of a ``maven-metadata.xml`` document."""

    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    latest: Optional[str] = None
    release: Optional[str] = None
    versions: List[str] = field(default_factory=list)


def parse_maven_metadata(text: str) -> MavenMetadata:
    """
    Parse a package-index document.

    Accepts the standard ``maven-metadata.xml`` layout or an equivalent JSON
    object with ``latest``, ``release`` and ``versions`` keys (optionally
    nested under ``versioning``).

    Raises:
        ValueError: If the document cannot be parsed
    """
    stripped = text.lstrip()
    if stripped.startswith("{"):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON metadata: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("JSON metadata must be an object")
        versioning = data.get("versioning", data)
        return MavenMetadata(
            group_id=data.get("groupId"),
            artifact_id=data.get("artifactId"),
            latest=versioning.get("latest"),
            release=versioning.get("release"),
            versions=[str(v) for v in versioning.get("versions") or []],
        )

    try:
        root = ET.fromstring(stripped)
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML metadata: {e}") from e

    return MavenMetadata(
        group_id=root.findtext("groupId"),
        artifact_id=root.findtext("artifactId"),
        latest=root.findtext("versioning/latest"),
        release=root.findtext("versioning/release"),
        versions=[
            element.text.strip()
            for element in root.findall("versioning/versions/version")
            if element.text and element.text.strip()
        ],
    )


class VersionResolver:
    """
    Resolves symbolic version requests against remote package indexes.

    No retries are performed; an unreachable index is reported to the caller.

    Example:
        >>> resolver = VersionResolver()
        >>> url = resolver.metadata_url(
        ...     "https://cache-redirector.jetbrains.com/intellij-dependencies",
        ...     "org.jetbrains", "annotations",
        ... )
        >>> resolver.resolve_latest(url)
        '24.1.0'
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def metadata_url(repository: str, group_id: str, artifact_id: str) -> str:
        """Build the ``maven-metadata.xml`` URL for a coordinate in a repository."""
        group_path = group_id.replace(".", "/")
        return f"{repository.rstrip('/')}/{group_path}/{artifact_id}/maven-metadata.xml"

    def fetch_metadata(self, url: str) -> MavenMetadata:
        """
        Download and parse a package-index document.

        Raises:
            MetadataUnavailableError: If the document is unreachable or unparseable
        """
        try:
            text = fetch_text(url, session=self.session, timeout=self.timeout)
        except DownloadError as e:
            raise MetadataUnavailableError(url, e.reason) from e

        try:
            return parse_maven_metadata(text)
        except ValueError as e:
            raise MetadataUnavailableError(url, str(e)) from e

    def resolve_latest(self, url: str) -> str:
        """
        Resolve the declared latest version.

        Raises:
            MetadataUnavailableError: If the index is unreachable or has no latest field
        """
        metadata = self.fetch_metadata(url)
        if not metadata.latest:
            raise MetadataUnavailableError(url, "no 'latest' version declared")

        self.logger.debug(f"Resolved latest version '{metadata.latest}' from {url}")
        return metadata.latest

    def collect_versions(self, urls: Iterable[str]) -> List[str]:
        """
        Collect published versions from several indexes.

        Unreachable indexes are skipped.

        Raises:
            MetadataUnavailableError: If none of the indexes could be read
        """
        urls = list(urls)
        versions: List[str] = []
        failures = []

        for url in urls:
            try:
                versions.extend(self.fetch_metadata(url).versions)
            except MetadataUnavailableError as e:
                self.logger.debug(f"Skipping index {url}: {e}")
                failures.append(e)

        if urls and len(failures) == len(urls):
            raise MetadataUnavailableError(
                ", ".join(urls), "no index could be read"
            ) from failures[-1]

        return versions

    def resolve_closest(self, urls: Union[str, Iterable[str]], target: str) -> str:
        """
        Resolve the highest published version lower than or equal to ``target``.

        Args:
            urls: One index URL or several; versions from all of them are merged
            target: Version to round down to

        Raises:
            MetadataUnavailableError: If no index could be read
            NoMatchingVersionError: If every published version is newer than target
        """
        if isinstance(urls, str):
            urls = [urls]
        urls = list(urls)

        target_version = Version.parse(target)
        candidates = [
            Version.parse(v)
            for v in self.collect_versions(urls)
            if Version.parse(v) <= target_version
        ]

        if not candidates:
            raise NoMatchingVersionError(", ".join(urls), target)

        closest = str(max(candidates))
        self.logger.debug(f"Resolved closest version to '{target}': {closest}")
        return closest

    def resolve(self, url: Union[str, Iterable[str]], requested: str) -> str:
        """
        Resolve any version request form.

        Example:
            >>> resolver.resolve(url, "closest:223.8836.41")
            '223.8836'
        """
        if requested == LATEST:
            if not isinstance(url, str):
                url = next(iter(url))
            return self.resolve_latest(url)
        if requested.startswith(CLOSEST_PREFIX):
            return self.resolve_closest(url, requested[len(CLOSEST_PREFIX):])
        return requested
