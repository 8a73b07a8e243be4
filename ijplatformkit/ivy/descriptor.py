"""
Synthetic Ivy descriptors for artifacts without Maven metadata.

Extracted IDE trees and plugin directories have no ``pom.xml``. A minimal
``ivy.xml`` describing their configurations and files makes them
addressable as ordinary dependency-graph nodes.

Attributes whose value is None are omitted from the document, never written
as empty strings: resolution engines treat a present-but-empty attribute
differently from an absent one.

Example:
    >>> generator = IvyDescriptorGenerator(IvyModuleIdentity("com.jetbrains", "ideaIC", "2022.3.3"))
    >>> generator.add_configuration(IvyConfiguration("compile"))
    >>> generator.add_artifact(IvyArtifact.jar(ide_dir / "lib/app.jar", "compile", ide_dir))
    >>> generator.write_to(ide_dir / "ideaIC-2022.3.3.xml")
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ijplatformkit.core.filesystem import atomic_write

MAVEN_NAMESPACE = "https://ant.apache.org/ivy/maven"
PUBLICATION_FORMAT = "%Y%m%d%H%M%S"

# Bump when the generated descriptor layout changes.
IVY_FORMAT_VERSION = 2

_CLASSIFIER = f"{{{MAVEN_NAMESPACE}}}classifier"

ET.register_namespace("m", MAVEN_NAMESPACE)


@dataclass(frozen=True)
class IvyModuleIdentity:
    organisation: str
    module: str
    revision: str


@dataclass(frozen=True)
class IvyConfiguration:
    name: str
    extends: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IvyArtifact:
    """
    One published file of a synthetic module.

    ``name`` is the file path relative to the module's base directory, with
    the extension removed, so that an artifact pattern such as
    ``<base>/[artifact].[ext]`` resolves back to the file.
    """

    name: str
    type: str
    extension: str
    conf: Optional[str] = None
    classifier: Optional[str] = None
    file: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def jar(
        cls, file: Path, conf: str, base_dir: Path, classifier: Optional[str] = None
    ) -> "IvyArtifact":
        return cls._create(file, conf, base_dir, "jar", "jar", classifier)

    @classmethod
    def zip(
        cls, file: Path, conf: str, base_dir: Path, classifier: Optional[str] = None
    ) -> "IvyArtifact":
        return cls._create(file, conf, base_dir, "zip", "zip", classifier)

    @classmethod
    def directory(
        cls, file: Path, conf: str, base_dir: Path, classifier: Optional[str] = None
    ) -> "IvyArtifact":
        return cls._create(file, conf, base_dir, "", "directory", classifier)

    @classmethod
    def _create(
        cls,
        file: Path,
        conf: str,
        base_dir: Path,
        extension: str,
        artifact_type: str,
        classifier: Optional[str],
    ) -> "IvyArtifact":
        file = Path(file)
        try:
            relative = file.relative_to(base_dir).as_posix()
        except ValueError:
            relative = file.as_posix()

        suffix = f".{extension}"
        name = relative[: -len(suffix)] if extension and relative.endswith(suffix) else relative
        return cls(name, artifact_type, extension, conf, classifier, file)


@dataclass
class IvyDescriptor:
    """Parsed form of a synthetic descriptor."""

    identity: IvyModuleIdentity
    publication: Optional[str] = None
    configurations: List[IvyConfiguration] = field(default_factory=list)
    artifacts: List[IvyArtifact] = field(default_factory=list)


def _set_optional(element: ET.Element, name: str, value: Optional[str]) -> None:
    if value is not None:
        element.set(name, value)


class IvyDescriptorGenerator:
    """
    Builds an ``ivy.xml`` document for one synthetic module.

    Args:
        identity: Organisation, module and revision of the module
        clock: Source of the publication timestamp (default: datetime.now)
    """

    def __init__(
        self,
        identity: IvyModuleIdentity,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.identity = identity
        self.clock = clock or datetime.now
        self.configurations: List[IvyConfiguration] = []
        self.artifacts: List[IvyArtifact] = []

    def add_configuration(self, configuration: IvyConfiguration) -> "IvyDescriptorGenerator":
        self.configurations.append(configuration)
        return self

    def add_artifact(self, artifact: IvyArtifact) -> "IvyDescriptorGenerator":
        self.artifacts.append(artifact)
        return self

    def add_compile_artifacts(self, plugin, base_dir: Path) -> "IvyDescriptorGenerator":
        """Publish a plugin's jars, classes and META-INF directories as ``compile``."""
        conf = IvyConfiguration("compile")
        self.add_configuration(conf)

        for jar in plugin.jar_files:
            self.add_artifact(IvyArtifact.jar(jar, conf.name, base_dir))
        if plugin.classes_directory is not None:
            self.add_artifact(IvyArtifact.directory(plugin.classes_directory, conf.name, base_dir))
        if plugin.meta_inf_directory is not None:
            self.add_artifact(IvyArtifact.directory(plugin.meta_inf_directory, conf.name, base_dir))
        return self

    def add_source_artifacts(self, plugin, base_dir: Path, ide=None) -> "IvyDescriptorGenerator":
        """
        Publish a plugin's source jars as ``sources``.

        Builtin plugins ship no source jars of their own; they get the IDE's
        source zips and sources jar instead, when the IDE has them.
        """
        conf = IvyConfiguration("sources")
        self.add_configuration(conf)

        if plugin.source_jar_files:
            for jar in plugin.source_jar_files:
                self.add_artifact(IvyArtifact.jar(jar, conf.name, base_dir))
        elif ide is not None and plugin.builtin:
            for source_zip in ide.source_zip_files:
                self.add_artifact(IvyArtifact.zip(source_zip, conf.name, ide.classes))

        if ide is not None and plugin.builtin and ide.sources is not None:
            self.add_artifact(
                IvyArtifact(
                    name=ide.sources_artifact_name,
                    type="sources",
                    extension="jar",
                    conf=conf.name,
                    classifier="sources",
                    file=ide.sources,
                )
            )
        return self

    def to_element(self) -> ET.Element:
        root = ET.Element("ivy-module", {"version": "2.0"})

        info = ET.SubElement(root, "info")
        _set_optional(info, "organisation", self.identity.organisation)
        _set_optional(info, "module", self.identity.module)
        _set_optional(info, "revision", self.identity.revision)
        info.set("publication", self.clock().strftime(PUBLICATION_FORMAT))

        configurations = ET.SubElement(root, "configurations")
        for configuration in self.configurations:
            conf = ET.SubElement(
                configurations, "conf", {"name": configuration.name, "visibility": "public"}
            )
            if configuration.extends:
                conf.set("extends", ",".join(configuration.extends))

        publications = ET.SubElement(root, "publications")
        for artifact in self.artifacts:
            element = ET.SubElement(publications, "artifact")
            _set_optional(element, "name", artifact.name)
            _set_optional(element, "type", artifact.type)
            _set_optional(element, "ext", artifact.extension)
            _set_optional(element, "conf", artifact.conf)
            _set_optional(element, _CLASSIFIER, artifact.classifier)

        return root

    def to_xml(self) -> str:
        root = self.to_element()
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def write_to(self, path: Path) -> Path:
        path = Path(path)
        atomic_write(path, self.to_xml())
        return path


def parse_ivy_descriptor(source: Union[str, bytes, Path]) -> IvyDescriptor:
    """
    Parse a descriptor written by ``IvyDescriptorGenerator``.

    Args:
        source: Path to the file, or the document text

    Raises:
        ValueError: If the document is not a valid Ivy module
    """
    if isinstance(source, Path):
        content = source.read_bytes()
    else:
        content = source

    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"malformed ivy descriptor: {e}") from e

    info = root.find("info")
    if root.tag != "ivy-module" or info is None:
        raise ValueError("not an ivy module descriptor")

    descriptor = IvyDescriptor(
        identity=IvyModuleIdentity(
            info.get("organisation", ""), info.get("module", ""), info.get("revision", "")
        ),
        publication=info.get("publication"),
    )

    for conf in root.findall("configurations/conf"):
        extends = conf.get("extends")
        descriptor.configurations.append(
            IvyConfiguration(
                conf.get("name", ""),
                tuple(extends.split(",")) if extends else (),
            )
        )

    for artifact in root.findall("publications/artifact"):
        descriptor.artifacts.append(
            IvyArtifact(
                name=artifact.get("name", ""),
                type=artifact.get("type", ""),
                extension=artifact.get("ext", ""),
                conf=artifact.get("conf"),
                classifier=artifact.get(_CLASSIFIER),
            )
        )

    return descriptor
