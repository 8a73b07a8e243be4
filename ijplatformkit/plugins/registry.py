"""
Registry of plugins bundled with an IDE installation.

The registry indexes ``<ide>/plugins``: plugin id to directory and required
(non-optional) dependency ids. Scanning an IDE is slow, so the index is
persisted to ``builtinRegistry-<format>.xml`` inside the plugins directory
and reloaded on later resolutions. The cache is a pure optimization: a
missing or unreadable cache triggers a rescan.

Construction is two-phase. ``BuiltinPluginRegistryBuilder`` collects
records; ``build()`` returns an immutable ``BuiltinPluginRegistry`` that is
safe to share between readers.

Example:
    >>> registry = BuiltinPluginRegistry.from_directory(ide_dir / "plugins")
    >>> registry.find_plugin("com.intellij.copyright")
    PosixPath('.../plugins/copyright')
    >>> registry.collect_dependency_closure({"org.jetbrains.kotlin"})
    {'org.jetbrains.kotlin', 'com.intellij.java', ...}
"""

import logging
import xml.etree.ElementTree as ET
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ijplatformkit.core.filesystem import atomic_write
from ijplatformkit.plugins.descriptor import DescriptorParseFailure, load_plugin_descriptor

logger = logging.getLogger(__name__)

# Bump when the cache layout changes; older cache files are simply ignored.
CACHE_FORMAT_VERSION = 1


def cache_file_name(format_version: int = CACHE_FORMAT_VERSION) -> str:
    return f"builtinRegistry-{format_version}.xml"


@dataclass(frozen=True)
class PluginRecord:
    """One bundled plugin."""

    id: str
    directory_name: str
    dependencies: Tuple[str, ...] = field(default_factory=tuple)


class BuiltinPluginRegistry:
    """Read-only index of the plugins bundled with one IDE."""

    def __init__(
        self,
        plugins_directory: Path,
        records: Mapping[str, PluginRecord],
        directory_names: Mapping[str, str],
    ):
        self.plugins_directory = Path(plugins_directory)
        self._plugins = MappingProxyType(dict(records))
        self._directory_names = MappingProxyType(dict(directory_names))

    @classmethod
    def from_directory(
        cls, plugins_directory: Path, logger: Optional[logging.Logger] = None
    ) -> "BuiltinPluginRegistry":
        """
        Load the registry from its cache, or scan the directory and persist it.
        """
        builder = BuiltinPluginRegistryBuilder(plugins_directory, logger=logger)
        if not builder.load_cache():
            builder.logger.debug("Builtin registry cache is missing")
            builder.scan()
            builder.dump_cache()
        return builder.build()

    @property
    def plugins(self) -> Mapping[str, PluginRecord]:
        return self._plugins

    def get(self, name: str) -> Optional[PluginRecord]:
        """Look up a record by plugin id or by directory name."""
        record = self._plugins.get(name)
        if record is None and name in self._directory_names:
            record = self._plugins.get(self._directory_names[name])
        return record

    def find_plugin(self, name: str) -> Optional[Path]:
        """
        Find the directory of a bundled plugin.

        Args:
            name: Plugin id or plugin directory name

        Returns:
            Plugin directory, or None if the plugin is not bundled or its
            directory no longer exists
        """
        record = self.get(name)
        if record is None:
            return None

        directory = self.plugins_directory / record.directory_name
        return directory if directory.exists() else None

    def collect_dependency_closure(self, ids: Iterable[str]) -> Set[str]:
        """
        Collect the given plugins and all their transitive required dependencies.

        Directory names are mapped to canonical ids; unknown ids are ignored.
        Cycles terminate because a visited id is never enqueued again.
        """
        result: Set[str] = set()
        queue = deque(ids)

        while queue:
            record = self.get(queue.popleft())
            if record is None or record.id in result:
                continue
            result.add(record.id)
            queue.extend(d for d in record.dependencies if d not in result)

        return result

    def plugin_ids(self) -> List[str]:
        return sorted(self._plugins)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return f"BuiltinPluginRegistry({str(self.plugins_directory)!r}, {len(self)} plugins)"


class BuiltinPluginRegistryBuilder:
    """Collects plugin records before freezing them into a registry."""

    def __init__(
        self,
        plugins_directory: Path,
        format_version: int = CACHE_FORMAT_VERSION,
        logger: Optional[logging.Logger] = None,
    ):
        self.plugins_directory = Path(plugins_directory)
        self.format_version = format_version
        self.logger = logger or logging.getLogger(__name__)
        self._plugins: Dict[str, PluginRecord] = {}
        self._directory_names: Dict[str, str] = {}

    @property
    def cache_file(self) -> Path:
        return self.plugins_directory / cache_file_name(self.format_version)

    def add_record(self, record: PluginRecord) -> None:
        self._plugins[record.id] = record
        if record.directory_name != record.id:
            self._directory_names[record.directory_name] = record.id

    def add(self, plugin_directory: Path) -> bool:
        """
        Parse one plugin directory and record it.

        Returns:
            False if the directory is not a valid plugin
        """
        descriptor = load_plugin_descriptor(plugin_directory, require_version=False)
        if isinstance(descriptor, DescriptorParseFailure):
            self.logger.debug(f"Skipping {plugin_directory}: {descriptor.reason}")
            return False

        self.add_record(
            PluginRecord(
                id=descriptor.id,
                directory_name=Path(plugin_directory).name,
                dependencies=descriptor.required_dependency_ids,
            )
        )
        return True

    def scan(self) -> None:
        """Scan the immediate subdirectories of the plugins directory."""
        if not self.plugins_directory.is_dir():
            self.logger.debug(f"Plugins directory does not exist: {self.plugins_directory}")
            return

        for child in sorted(self.plugins_directory.iterdir()):
            if child.is_dir():
                self.add(child)

        self.logger.debug(f"Builtin registry populated with {len(self._plugins)} plugins")

    def load_cache(self) -> bool:
        """
        Fill the builder from the persisted cache.

        Returns:
            True if the cache was present and readable
        """
        cache = self.cache_file
        if not cache.is_file():
            return False

        self.logger.debug(f"Builtin registry cache is found. Loading from {cache}")
        try:
            records = parse_registry_cache(cache.read_bytes())
        except (OSError, ValueError) as e:
            self.logger.warning(f"Cannot read builtin registry cache {cache}: {e}")
            self._plugins.clear()
            self._directory_names.clear()
            return False

        for record in records:
            self.add_record(record)
        return True

    def dump_cache(self) -> None:
        """Persist the collected records; failures are logged, never raised."""
        if not self.plugins_directory.is_dir():
            return
        self.logger.debug(f"Dumping cache for builtin plugins: {self.cache_file}")
        try:
            atomic_write(self.cache_file, render_registry_cache(self._plugins.values()))
        except OSError as e:
            self.logger.warning(f"Failed to dump cache for builtin plugins: {e}")

    def build(self) -> BuiltinPluginRegistry:
        return BuiltinPluginRegistry(
            self.plugins_directory, self._plugins, self._directory_names
        )


# ============================================================================
# Cache Format
# ============================================================================


def render_registry_cache(records: Iterable[PluginRecord]) -> bytes:
    """
    Serialize records to the cache document.

    Layout::

        <plugins>
          <plugin id="..." directoryName="...">
            <dependencies><dependency>...</dependency></dependencies>
          </plugin>
        </plugins>
    """
    root = ET.Element("plugins")
    for record in sorted(records, key=lambda r: r.id):
        plugin = ET.SubElement(
            root, "plugin", {"id": record.id, "directoryName": record.directory_name}
        )
        dependencies = ET.SubElement(plugin, "dependencies")
        for dependency in record.dependencies:
            ET.SubElement(dependencies, "dependency").text = dependency

    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def parse_registry_cache(content: bytes) -> List[PluginRecord]:
    """
    Parse the cache document.

    Raises:
        ValueError: If the document is malformed
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"malformed registry cache: {e}") from e

    if root.tag != "plugins":
        raise ValueError(f"unexpected root element <{root.tag}>")

    records = []
    for plugin in root.findall("plugin"):
        plugin_id = plugin.get("id")
        directory_name = plugin.get("directoryName")
        if not plugin_id or not directory_name:
            raise ValueError("plugin entry without id or directoryName")
        dependencies = tuple(
            element.text.strip()
            for element in plugin.findall("dependencies/dependency")
            if element.text and element.text.strip()
        )
        records.append(PluginRecord(plugin_id, directory_name, dependencies))
    return records
