"""
Plugin dependency resolution.

A notation is resolved in one of three ways:

1. An absolute path with no version or channel is a local plugin directory
   or jar.
2. A bare id with no version or channel must be bundled with the IDE.
3. Anything versioned or channeled is looked up in the configured
   repositories, in order; the first one that serves it wins.

Resolved plugins are attached to the dependency graph either as Maven nodes
(jars from Maven repositories) or through a synthetic Ivy descriptor backed
by a single local Ivy repository that is created on first use.

Example:
    >>> resolver = PluginDependencyResolver(cache_root, [MavenPluginsRepository()], cache, ide=ide)
    >>> plugin = resolver.resolve("org.jetbrains.plugins.go:221.6008.13")
    >>> node = resolver.register(plugin)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, Union

from ijplatformkit.artifacts.cache import ArtifactCache
from ijplatformkit.core.exceptions import (
    BuiltinPluginNotFoundError,
    DownloadError,
    InvalidPluginArtifactError,
    PluginNotResolvedError,
    UnsupportedArtifactTypeError,
)
from ijplatformkit.graph import DependencyNode, IvyRepositoryDefinition, RepositoryHandler
from ijplatformkit.ivy.descriptor import (
    IVY_FORMAT_VERSION,
    IvyConfiguration,
    IvyDescriptorGenerator,
    IvyModuleIdentity,
)
from ijplatformkit.plugins.dependency import ResolvedPluginDependency
from ijplatformkit.plugins.notation import PluginDependencyNotation, plugin_group
from ijplatformkit.plugins.repositories import PluginsRepository

if TYPE_CHECKING:
    from ijplatformkit.ide.dependency import IdeDependency

logger = logging.getLogger(__name__)

IDEA_CACHE_GROUP = "com.jetbrains.intellij.idea"
UNZIPPED_PREFIX = "unzipped"


class PluginDependencyResolver:
    """
    Resolves plugin notations and attaches the results to the dependency graph.

    An instance keeps its Ivy repository state and is meant for use from one
    thread at a time.

    Args:
        cache_root: Cache directory for unpacked plugins and descriptors
        repositories: Remote repositories, tried in order
        cache: Download and extraction cache
        ide: IDE providing builtin plugins
        handler: Repository list receiving repository registrations
        logger: Logger receiving resolution progress
    """

    def __init__(
        self,
        cache_root: Path,
        repositories: Sequence[PluginsRepository],
        cache: ArtifactCache,
        ide: Optional[IdeDependency] = None,
        handler: Optional[RepositoryHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cache_root = Path(cache_root)
        self.repositories = list(repositories)
        self.cache = cache
        self.ide = ide
        self.handler = handler if handler is not None else RepositoryHandler()
        self.logger = logger or logging.getLogger(__name__)
        self._ivy_repository: Optional[IvyRepositoryDefinition] = None

    @property
    def ivy_directory(self) -> Path:
        return self.cache_root / IDEA_CACHE_GROUP / "ivy"

    # ========================================================================
    # Resolution
    # ========================================================================

    def resolve(
        self, notation: Union[str, PluginDependencyNotation]
    ) -> ResolvedPluginDependency:
        """
        Resolve a plugin notation.

        Raises:
            InvalidPluginArtifactError: If a local or downloaded artifact is not a plugin
            BuiltinPluginNotFoundError: If a bare id is not bundled with the IDE
            UnsupportedArtifactTypeError: If a repository serves neither zip nor jar
            PluginNotResolvedError: If no repository serves the plugin
        """
        if isinstance(notation, str):
            notation = PluginDependencyNotation.parse(notation)

        self.logger.debug(f"Resolving plugin dependency: {notation.id}")

        if not notation.is_versioned:
            path = Path(notation.id)
            if path.is_absolute():
                return self.resolve_local(path)
            return self.resolve_builtin(notation.id)

        return self.resolve_remote(notation)

    def resolve_local(self, path: Path) -> ResolvedPluginDependency:
        self.logger.info(f"Using local plugin: {path}")
        return ResolvedPluginDependency.from_artifact(path)

    def resolve_builtin(self, plugin_id: str) -> ResolvedPluginDependency:
        if self.ide is None:
            raise BuiltinPluginNotFoundError(plugin_id, None)

        directory = self.ide.plugins_registry.find_plugin(plugin_id)
        if directory is None:
            raise BuiltinPluginNotFoundError(plugin_id, str(self.ide.classes))

        version = f"{self.ide.name}-{self.ide.build_number}"
        if self.ide.sources is not None:
            version += "-withSources"

        self.logger.debug(f"Using builtin plugin '{plugin_id}' from {directory}")
        return ResolvedPluginDependency.from_artifact(directory, version=version, builtin=True)

    def resolve_remote(self, notation: PluginDependencyNotation) -> ResolvedPluginDependency:
        for repository in self.repositories:
            try:
                artifact = repository.resolve(
                    notation.id, notation.version, notation.channel, self.cache, self.handler
                )
            except (DownloadError, ValueError) as e:
                self.logger.warning(f"Cannot resolve '{notation}' from {repository}: {e}")
                continue

            if artifact is None:
                self.logger.debug(f"{repository} does not serve '{notation}'")
                continue

            plugin = self._from_downloaded(artifact, notation, repository)
            repository.post_resolve(self.handler)
            return plugin

        raise PluginNotResolvedError(
            notation.id,
            notation.version,
            notation.channel,
            [str(repository) for repository in self.repositories],
        )

    def _from_downloaded(
        self,
        artifact: Path,
        notation: PluginDependencyNotation,
        repository: PluginsRepository,
    ) -> ResolvedPluginDependency:
        extension = artifact.suffix.lower()

        if extension == ".zip":
            directory = self._unzip(artifact, notation)
            return ResolvedPluginDependency.from_artifact(
                directory, version=notation.version, channel=notation.channel
            )
        if extension == ".jar":
            return ResolvedPluginDependency.from_artifact(
                artifact,
                version=notation.version,
                channel=notation.channel,
                maven=repository.is_maven,
            )

        raise UnsupportedArtifactTypeError(str(artifact))

    def _unzip(self, archive: Path, notation: PluginDependencyNotation) -> Path:
        """Extract a plugin zip; it must hold exactly one plugin directory."""
        version = notation.version or "unspecified"
        target = (
            self.cache_root
            / IDEA_CACHE_GROUP
            / plugin_group(notation.channel, prefix=UNZIPPED_PREFIX)
            / f"{notation.id}-{version}"
        )
        self.cache.extract_to(archive, target)

        directories = [child for child in target.iterdir() if child.is_dir()]
        if len(directories) != 1:
            raise InvalidPluginArtifactError(
                str(archive), f"expected a single plugin directory, found {len(directories)}"
            )
        return directories[0]

    # ========================================================================
    # Graph attachment
    # ========================================================================

    def register(self, plugin: ResolvedPluginDependency) -> DependencyNode:
        """
        Attach a resolved plugin to the dependency graph.

        Maven jars become plain Maven nodes. Everything else gets a synthetic
        descriptor, written once, served by the resolver's Ivy repository.
        """
        if plugin.maven:
            return DependencyNode(plugin_group(plugin.channel), plugin.id, plugin.version)

        group = self._ivy_group(plugin)
        ivy_file = self.ivy_directory / group / f"{plugin.fqn}.xml"
        if not ivy_file.exists():
            self.create_ivy_descriptor(plugin, group).write_to(ivy_file)
            self.logger.debug(f"Wrote plugin descriptor: {ivy_file}")

        repository = self._repository()
        repository.add_artifact_pattern(f"{plugin.base_directory.as_posix()}/[artifact](.[ext])")
        if plugin.builtin and self.ide is not None:
            if self.ide.source_zip_files:
                repository.add_artifact_pattern(f"{self.ide.classes.as_posix()}/[artifact](.[ext])")
            if self.ide.sources is not None:
                repository.add_artifact_pattern(
                    f"{self.ide.sources.parent.as_posix()}/[artifact]-{self.ide.version}-[classifier].[ext]"
                )

        return DependencyNode(group, plugin.id, plugin.version, "compile", ivy_file)

    def create_ivy_descriptor(
        self, plugin: ResolvedPluginDependency, group: Optional[str] = None
    ) -> IvyDescriptorGenerator:
        generator = IvyDescriptorGenerator(
            IvyModuleIdentity(group or self._ivy_group(plugin), plugin.id, plugin.version)
        )
        generator.add_configuration(IvyConfiguration("default"))
        generator.add_compile_artifacts(plugin, plugin.base_directory)
        generator.add_source_artifacts(
            plugin, plugin.base_directory, self.ide if plugin.builtin else None
        )
        return generator

    @staticmethod
    def _ivy_group(plugin: ResolvedPluginDependency) -> str:
        if plugin.builtin:
            return plugin_group()
        return plugin_group(plugin.channel, prefix=UNZIPPED_PREFIX)

    def _repository(self) -> IvyRepositoryDefinition:
        if self._ivy_repository is None:
            repository = IvyRepositoryDefinition(name="ijplatformkit-plugins")
            repository.add_ivy_pattern(
                f"{self.ivy_directory.as_posix()}/[organisation]/[module]-[revision]-{IVY_FORMAT_VERSION}.[ext]"
            )
            self.handler.add(repository)
            self._ivy_repository = repository
        return self._ivy_repository
