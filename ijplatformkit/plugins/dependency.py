"""
Resolved plugin dependency model.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ijplatformkit.core.exceptions import InvalidPluginArtifactError
from ijplatformkit.ivy.descriptor import IVY_FORMAT_VERSION
from ijplatformkit.plugins.descriptor import DescriptorParseFailure, load_plugin_descriptor
from ijplatformkit.plugins.notation import PluginDependencyNotation
from ijplatformkit.versions.version import Version

_UNBOUNDED = 999999


@dataclass
class ResolvedPluginDependency:
    """
    A plugin ready to be attached to the dependency graph.

    ``artifact`` is either a plugin directory (bundled or unpacked) or a
    single plugin jar. The file listing is computed once at construction.

    Attributes:
        id: Canonical plugin id from the descriptor
        version: Resolved version
        artifact: Plugin directory or jar
        channel: Release channel the plugin came from
        builtin: Bundled with the IDE
        maven: Served as a plain Maven artifact (no synthetic descriptor)
        since_build: First compatible IDE build
        until_build: Last compatible IDE build (``*`` wildcards allowed)
    """

    id: str
    version: str
    artifact: Path
    channel: Optional[str] = None
    builtin: bool = False
    maven: bool = False
    since_build: Optional[str] = None
    until_build: Optional[str] = None
    jar_files: List[Path] = field(init=False)
    source_jar_files: List[Path] = field(init=False)
    classes_directory: Optional[Path] = field(init=False)
    meta_inf_directory: Optional[Path] = field(init=False)

    def __post_init__(self):
        self.artifact = Path(self.artifact)
        if self.artifact.is_file():
            self.jar_files = [self.artifact]
            self.source_jar_files = []
            self.classes_directory = None
            self.meta_inf_directory = None
            return

        self.jar_files = sorted((self.artifact / "lib").glob("*.jar"))
        self.source_jar_files = sorted((self.artifact / "lib" / "src").glob("*.jar"))
        classes = self.artifact / "classes"
        meta_inf = self.artifact / "META-INF"
        self.classes_directory = classes if classes.is_dir() else None
        self.meta_inf_directory = meta_inf if meta_inf.is_dir() else None

    @classmethod
    def from_artifact(
        cls,
        artifact: Union[str, Path],
        version: Optional[str] = None,
        channel: Optional[str] = None,
        builtin: bool = False,
        maven: bool = False,
    ) -> "ResolvedPluginDependency":
        """
        Create a dependency from a plugin directory or jar.

        The descriptor must carry a version unless one is given explicitly.

        Raises:
            InvalidPluginArtifactError: If the artifact is not a valid plugin
        """
        artifact = Path(artifact)
        descriptor = load_plugin_descriptor(artifact, require_version=version is None)
        if isinstance(descriptor, DescriptorParseFailure):
            raise InvalidPluginArtifactError(str(artifact), descriptor.reason)

        return cls(
            id=descriptor.id,
            version=version or descriptor.version,
            artifact=artifact,
            channel=channel,
            builtin=builtin,
            maven=maven,
            since_build=descriptor.since_build,
            until_build=descriptor.until_build,
        )

    @property
    def base_directory(self) -> Path:
        """Directory that artifact names in the descriptor are relative to."""
        return self.artifact if self.artifact.is_dir() else self.artifact.parent

    @property
    def notation(self) -> PluginDependencyNotation:
        return PluginDependencyNotation(self.id, self.version, self.channel)

    @property
    def fqn(self) -> str:
        return f"{self.id}-{self.version}-{IVY_FORMAT_VERSION}"

    def is_compatible(self, build_number: str) -> bool:
        """
        Check whether an IDE build falls within the plugin's build range.

        Example:
            >>> plugin.since_build, plugin.until_build
            ('221', '223.*')
            >>> plugin.is_compatible("IC-223.8836.41")
            True
        """
        build = Version.parse(build_number).components
        if self.since_build and build < _bound(self.since_build, 0):
            return False
        if self.until_build and build > _bound(self.until_build, _UNBOUNDED):
            return False
        return True


def _bound(value: str, fill: int) -> Tuple[int, int, int]:
    """Numeric end of a build range; missing and ``*`` components take ``fill``."""
    numbers = []
    for part in value.split(".")[:3]:
        if part.isdigit():
            numbers.append(int(part))
        elif part == "*":
            numbers.append(fill)
        else:
            numbers.append(Version.parse(part).major)
    numbers += [fill] * (3 - len(numbers))
    return tuple(numbers)
