"""
Remote plugin repositories.

Two kinds are supported:

- Maven layout repositories, including the JetBrains Marketplace mirror.
  Plugins are published as ``<channel.>com.jetbrains.plugins:<id>:<version>``
  in ``zip`` or ``jar`` form.
- Custom repositories described by an ``updatePlugins.xml`` listing, either
  in the structured ``plugin-repository/category/idea-plugin`` form or in
  the flat ``plugins/plugin`` form.

A repository returns the downloaded file or None when it does not serve the
requested plugin. Download failures propagate so the caller can log them and
move on to the next repository.
"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from ijplatformkit.artifacts.cache import ArtifactCache
from ijplatformkit.artifacts.product import MARKETPLACE_MAVEN_REPOSITORY
from ijplatformkit.core.download import fetch_text
from ijplatformkit.core.exceptions import ConfigError, DownloadError
from ijplatformkit.graph import MavenRepositoryDefinition, RepositoryHandler
from ijplatformkit.plugins.notation import plugin_group

logger = logging.getLogger(__name__)

LISTING_FILE_NAME = "updatePlugins.xml"
CUSTOM_PLUGINS_CACHE = "com.jetbrains.intellij.idea/custom-plugins"


class PluginsRepository(ABC):
    """A source of downloadable plugins."""

    #: Jars served by this repository are plain Maven artifacts
    is_maven = False

    def __init__(self, url: str):
        self.url = url.rstrip("/")
        self.resolved = False

    @abstractmethod
    def resolve(
        self,
        plugin_id: str,
        version: Optional[str],
        channel: Optional[str],
        cache: ArtifactCache,
        handler: RepositoryHandler,
    ) -> Optional[Path]:
        """
        Download a plugin.

        Returns:
            Path of the downloaded zip or jar, or None if not served here

        Raises:
            DownloadError: If the repository cannot be reached
            ValueError: If the repository listing is malformed
        """

    def post_resolve(self, handler: RepositoryHandler) -> None:
        """Called once a plugin from this repository has been accepted."""

    def __str__(self) -> str:
        return self.url


class MavenPluginsRepository(PluginsRepository):
    """
    Plugins published in Maven layout.

    Each lookup registers the repository on the handler temporarily and
    removes it afterwards, whatever the outcome, so that probing a
    repository which does not serve the plugin leaves the repository list
    unchanged. Once a plugin is accepted the repository is registered for
    good.
    """

    is_maven = True
    EXTENSIONS = ("zip", "jar")

    def __init__(self, url: str = MARKETPLACE_MAVEN_REPOSITORY):
        super().__init__(url)
        self.definition = MavenRepositoryDefinition(self.url)

    def artifact_url(self, plugin_id: str, version: str, channel: Optional[str], extension: str) -> str:
        group_path = plugin_group(channel).replace(".", "/")
        return f"{self.url}/{group_path}/{plugin_id}/{version}/{plugin_id}-{version}.{extension}"

    def resolve(self, plugin_id, version, channel, cache, handler):
        if version is None:
            logger.debug(f"{self}: a version is required to resolve '{plugin_id}'")
            return None

        group = plugin_group(channel)
        with handler.temporary(self.definition):
            for extension in self.EXTENSIONS:
                url = self.artifact_url(plugin_id, version, channel, extension)
                destination = Path(group) / plugin_id / version / f"{plugin_id}-{version}.{extension}"
                try:
                    path = cache.fetch(url, destination)
                except DownloadError as e:
                    logger.debug(f"{self}: no {extension} for {plugin_id}:{version}: {e.reason}")
                    continue

                self.resolved = True
                return path

        return None

    def post_resolve(self, handler: RepositoryHandler) -> None:
        if self.resolved:
            handler.add(self.definition)


@dataclass(frozen=True)
class CustomPluginEntry:
    id: str
    version: Optional[str]
    url: str


def parse_plugin_listing(content: str) -> List[CustomPluginEntry]:
    """
    Parse an ``updatePlugins.xml`` listing.

    Raises:
        ValueError: If the document is neither listing form
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"malformed plugin listing: {e}") from e

    if root.tag == "plugin-repository":
        entries = []
        for plugin in root.findall("category/idea-plugin"):
            plugin_id = plugin.findtext("id")
            url = plugin.findtext("download-url")
            if plugin_id and url:
                entries.append(
                    CustomPluginEntry(plugin_id.strip(), _strip(plugin.findtext("version")), url.strip())
                )
        return entries

    if root.tag == "plugins":
        return [
            CustomPluginEntry(plugin.get("id"), plugin.get("version"), plugin.get("url"))
            for plugin in root.findall("plugin")
            if plugin.get("id") and plugin.get("url")
        ]

    raise ValueError(f"unknown plugin listing root element: <{root.tag}>")


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


class CustomPluginsRepository(PluginsRepository):
    """
    Plugins listed in an ``updatePlugins.xml`` document.

    Args:
        url: Listing URL, or the directory that contains ``updatePlugins.xml``
    """

    def __init__(self, url: str):
        super().__init__(url)
        self.listing_url = self.url if self.url.endswith(".xml") else f"{self.url}/{LISTING_FILE_NAME}"
        self._entries: Optional[List[CustomPluginEntry]] = None

    def entries(self, cache: ArtifactCache) -> List[CustomPluginEntry]:
        if self._entries is None:
            content = fetch_text(self.listing_url, session=cache.session, timeout=cache.timeout)
            self._entries = parse_plugin_listing(content)
            logger.debug(f"{self}: {len(self._entries)} plugins listed")
        return self._entries

    def find(
        self, plugin_id: str, version: Optional[str], cache: ArtifactCache
    ) -> Optional[CustomPluginEntry]:
        for entry in self.entries(cache):
            if entry.id.lower() != plugin_id.lower():
                continue
            if version is None or (entry.version or "").lower() == version.lower():
                return entry
        return None

    def resolve(self, plugin_id, version, channel, cache, handler):
        entry = self.find(plugin_id, version, cache)
        if entry is None:
            return None

        download_url = urljoin(self.listing_url, entry.url)
        file_name = Path(urlparse(download_url).path).name
        if Path(file_name).suffix.lower() not in (".zip", ".jar"):
            # download endpoints such as .../plugin/download?id=... serve zips
            file_name = f"{plugin_id}-{entry.version or 'unspecified'}.zip"
        host = urlparse(self.listing_url).netloc or "local"
        destination = (
            Path(CUSTOM_PLUGINS_CACHE) / host / plugin_id / (entry.version or "unspecified") / file_name
        )

        path = cache.fetch(download_url, destination)
        self.resolved = True
        return path


def create_plugin_repositories(definitions: Iterable = ()) -> List[PluginsRepository]:
    """
    Build repositories from configuration entries.

    Each entry has a ``type`` (``marketplace``, ``maven`` or ``custom``) and a
    ``url`` (optional for ``marketplace``). No entries means the Marketplace
    alone.

    Raises:
        ConfigError: If an entry has an unknown type or lacks a URL
    """
    repositories: List[PluginsRepository] = []
    for definition in definitions:
        repository_type = definition.type
        url = definition.url

        if repository_type == "marketplace":
            repositories.append(MavenPluginsRepository(url or MARKETPLACE_MAVEN_REPOSITORY))
        elif repository_type in ("maven", "custom"):
            if not url:
                raise ConfigError(f"Plugin repository of type '{repository_type}' requires a url")
            if repository_type == "maven":
                repositories.append(MavenPluginsRepository(url))
            else:
                repositories.append(CustomPluginsRepository(url))
        else:
            raise ConfigError(
                f"Unknown plugin repository type '{repository_type}'. "
                "Supported types: marketplace, maven, custom"
            )

    return repositories or [MavenPluginsRepository()]
