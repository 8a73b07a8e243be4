"""
Plugin descriptor (``META-INF/plugin.xml``) parsing.

Parsing never raises for malformed plugins: the result is either a
``PluginDescriptor`` or a ``DescriptorParseFailure`` carrying the reason, so
callers scanning many directories can skip failures cheaply.

Supported artifact shapes:
- a plugin directory containing ``META-INF/plugin.xml``
- a plugin directory whose ``lib/*.jar`` files contain the descriptor
- a single plugin jar
"""

import logging
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

PLUGIN_XML = "META-INF/plugin.xml"


@dataclass(frozen=True)
class PluginDependencyDeclaration:
    """A dependency declared by a plugin on another plugin."""

    id: str
    optional: bool = False


@dataclass(frozen=True)
class PluginDescriptor:
    """Parsed plugin metadata."""

    id: str
    name: Optional[str] = None
    version: Optional[str] = None
    since_build: Optional[str] = None
    until_build: Optional[str] = None
    dependencies: Tuple[PluginDependencyDeclaration, ...] = field(default_factory=tuple)

    @property
    def required_dependency_ids(self) -> Tuple[str, ...]:
        """Ids of all non-optional dependencies, in declaration order."""
        seen = []
        for dependency in self.dependencies:
            if not dependency.optional and dependency.id not in seen:
                seen.append(dependency.id)
        return tuple(seen)


@dataclass(frozen=True)
class DescriptorParseFailure:
    """Reason why an artifact is not a valid plugin."""

    reason: str
    source: str = ""

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.reason}"
        return self.reason


DescriptorResult = Union[PluginDescriptor, DescriptorParseFailure]


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


def parse_plugin_xml(
    content: Union[str, bytes], require_version: bool = False, source: str = ""
) -> DescriptorResult:
    """
    Parse the text of a ``plugin.xml`` document.

    The plugin id falls back to the plugin name, matching how the IDE
    identifies plugins that declare no explicit ``<id>``.

    Args:
        content: Document text
        require_version: Report a failure when ``<version>`` is missing
        source: Description of where the document came from, for messages

    Example:
        >>> parse_plugin_xml("<idea-plugin><id>org.example</id></idea-plugin>").id
        'org.example'
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        return DescriptorParseFailure(f"malformed plugin.xml: {e}", source)

    if root.tag != "idea-plugin":
        return DescriptorParseFailure(f"unexpected root element <{root.tag}>", source)

    name = _text(root.find("name"))
    plugin_id = _text(root.find("id")) or name
    if not plugin_id:
        return DescriptorParseFailure("plugin id is not specified", source)

    version = _text(root.find("version"))
    if require_version and not version:
        return DescriptorParseFailure("plugin version is not specified", source)

    idea_version = root.find("idea-version")
    since_build = idea_version.get("since-build") if idea_version is not None else None
    until_build = idea_version.get("until-build") if idea_version is not None else None

    dependencies = []
    for depends in root.findall("depends"):
        dependency_id = _text(depends)
        if dependency_id:
            optional = depends.get("optional", "false").strip().lower() == "true"
            dependencies.append(PluginDependencyDeclaration(dependency_id, optional))
    for plugin in root.findall("dependencies/plugin"):
        dependency_id = (plugin.get("id") or "").strip()
        if dependency_id:
            dependencies.append(PluginDependencyDeclaration(dependency_id))

    return PluginDescriptor(
        id=plugin_id,
        name=name,
        version=version,
        since_build=since_build or None,
        until_build=until_build or None,
        dependencies=tuple(dependencies),
    )


def _read_from_jar(jar: Path) -> Optional[bytes]:
    try:
        with zipfile.ZipFile(jar) as zf:
            try:
                return zf.read(PLUGIN_XML)
            except KeyError:
                return None
    except (zipfile.BadZipFile, OSError) as e:
        logger.debug(f"Cannot read {jar}: {e}")
        return None


def load_plugin_descriptor(
    artifact: Union[str, Path], require_version: bool = False
) -> DescriptorResult:
    """
    Locate and parse the descriptor of a plugin directory or jar.

    Args:
        artifact: Plugin directory or jar file
        require_version: Report a failure when the descriptor has no version
    """
    artifact = Path(artifact)
    source = str(artifact)

    if artifact.is_dir():
        descriptor_file = artifact / PLUGIN_XML
        if descriptor_file.is_file():
            try:
                content = descriptor_file.read_bytes()
            except OSError as e:
                return DescriptorParseFailure(f"cannot read plugin.xml: {e}", source)
            return parse_plugin_xml(content, require_version, source)

        lib = artifact / "lib"
        if lib.is_dir():
            for jar in sorted(lib.glob("*.jar")):
                content = _read_from_jar(jar)
                if content is not None:
                    return parse_plugin_xml(content, require_version, f"{jar}!/{PLUGIN_XML}")

        return DescriptorParseFailure("plugin descriptor not found", source)

    if artifact.is_file() and artifact.suffix.lower() == ".jar":
        content = _read_from_jar(artifact)
        if content is None:
            return DescriptorParseFailure("plugin descriptor not found", source)
        return parse_plugin_xml(content, require_version, source)

    if not artifact.exists():
        return DescriptorParseFailure("file does not exist", source)

    return DescriptorParseFailure("not a plugin directory or jar", source)
