"""
IDE dependency resolution.

Resolves an IDE either from a remote repository (download, extract, index
bundled plugins) or from a local installation, and registers it with the
dependency graph through a synthetic Ivy descriptor.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ijplatformkit.artifacts.cache import ArtifactCache
from ijplatformkit.artifacts.locator import ArtifactLocator
from ijplatformkit.artifacts.product import (
    PRODUCT_TYPES,
    ArtifactVariant,
    ProductCoordinate,
    product_from_code,
)
from ijplatformkit.core.exceptions import DownloadError, InvalidIdeDirectoryError
from ijplatformkit.core.platform import PlatformInfo
from ijplatformkit.graph import DependencyNode, IvyRepositoryDefinition, RepositoryHandler
from ijplatformkit.ide.dependency import IdeDependency
from ijplatformkit.ivy.descriptor import (
    IvyArtifact,
    IvyConfiguration,
    IvyDescriptorGenerator,
    IvyModuleIdentity,
)
from ijplatformkit.plugins.registry import BuiltinPluginRegistry
from ijplatformkit.versions.version import is_snapshot

logger = logging.getLogger(__name__)

IDE_GROUP = "com.jetbrains"
LOCAL_IDE_NAME = "ideaLocal"
BUILD_FILE_NAME = "build.txt"


def read_build_number(ide_directory: Path, platform_info: Optional[PlatformInfo] = None) -> str:
    """
    Read the build number of an IDE installation.

    macOS bundles keep ``build.txt`` under ``Resources``.

    Raises:
        InvalidIdeDirectoryError: If no build file exists
    """
    ide_directory = Path(ide_directory)
    candidates = [ide_directory / BUILD_FILE_NAME]
    if platform_info is None or platform_info.is_macos:
        candidates.insert(0, ide_directory / "Resources" / BUILD_FILE_NAME)

    for candidate in candidates:
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8").strip()

    raise InvalidIdeDirectoryError(str(ide_directory), f"{BUILD_FILE_NAME} not found")


def _has_build_file(directory: Path) -> bool:
    return (directory / BUILD_FILE_NAME).is_file() or (
        directory / "Resources" / BUILD_FILE_NAME
    ).is_file()


def installation_root(directory: Path) -> Path:
    """
    Find the IDE root inside an extracted distribution.

    Archives are rooted at the IDE directory itself; installers wrap it in a
    single top-level folder (``idea-IC-223.8836.41``) or an ``.app`` bundle.
    """
    directory = Path(directory)
    if directory.name.endswith(".app") and (directory / "Contents").is_dir():
        directory = directory / "Contents"
    if _has_build_file(directory):
        return directory

    children = [child for child in directory.iterdir() if child.is_dir()]
    if len(children) == 1:
        child = children[0]
        if child.name.endswith(".app") and (child / "Contents").is_dir():
            child = child / "Contents"
        if _has_build_file(child):
            return child
    return directory


class IdeDependencyManager:
    """
    Resolves and registers IDE dependencies.

    Args:
        locator: Computes remote coordinates for IDE artifacts
        cache: Download and extraction cache
        ide_cache_directory: Where archives are extracted (default: next to the archive)
        handler: Repository list receiving the synthetic Ivy repository
        logger: Logger receiving resolution progress

    Example:
        >>> manager = IdeDependencyManager(ArtifactLocator(), ArtifactCache(cache_root))
        >>> ide = manager.resolve_remote("IC", "2022.3.3")
        >>> ide.build_number
        'IC-223.8836.41'
    """

    def __init__(
        self,
        locator: ArtifactLocator,
        cache: ArtifactCache,
        ide_cache_directory: Optional[Path] = None,
        handler: Optional[RepositoryHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.locator = locator
        self.cache = cache
        self.ide_cache_directory = Path(ide_cache_directory) if ide_cache_directory else None
        self.handler = handler if handler is not None else RepositoryHandler()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def platform_info(self) -> PlatformInfo:
        return self.cache.platform_info

    def resolve_remote(
        self,
        product: Union[str, ProductCoordinate],
        version: str,
        variant: ArtifactVariant = ArtifactVariant.ARCHIVE,
        sources: bool = False,
        with_kotlin: bool = False,
        refresh: bool = False,
    ) -> IdeDependency:
        """
        Download, extract and index a remote IDE.

        Snapshot versions are republished under the same name, so their
        extraction is validated against the archive's build identifier.

        Raises:
            UnsupportedProductTypeError: If the product is not published for the variant
            DownloadError: If the IDE archive cannot be downloaded
            ArchiveCorruptError: If the archive cannot be read
            ExtractionIOError: If the archive cannot be extracted
        """
        if isinstance(product, str):
            product = product_from_code(product)

        location = self.locator.locate(product, version, variant, sources)
        self.logger.debug(f"Adding IDE repository: {location.repository_url}")

        archive = self.cache.fetch_location(location, refresh=refresh)
        self.logger.debug(f"IDE archive: {archive}")

        cache_directory = self.ide_cache_directory or archive.parent
        extracted = self.cache.extract(
            archive,
            cache_directory,
            check_version=is_snapshot(version),
            product=product,
        )
        classes = installation_root(extracted)
        self.logger.info(f"IDE dependency cache directory: {classes}")

        build_number = read_build_number(classes, self.platform_info)
        sources_jar = self.resolve_sources(product, version, refresh) if location.has_sources else None

        return IdeDependency(
            name=location.artifact_id,
            version=version,
            build_number=build_number,
            classes=classes,
            plugins_registry=BuiltinPluginRegistry.from_directory(
                classes / "plugins", logger=self.logger
            ),
            sources=sources_jar,
            with_kotlin=with_kotlin,
            product_code=product.code,
        )

    def resolve_sources(
        self, product: Union[str, ProductCoordinate], version: str, refresh: bool = False
    ) -> Optional[Path]:
        """
        Download the IDE sources jar.

        Missing sources only produce a warning.
        """
        self.logger.info("Adding IDE sources repository")
        location = self.locator.locate_sources(product, version)
        try:
            sources = self.cache.fetch_location(location, refresh=refresh)
        except DownloadError as e:
            self.logger.warning(f"Cannot resolve IDE sources dependency: {e}")
            return None

        self.logger.debug(f"IDE sources jar: {sources}")
        return sources

    def resolve_local(
        self,
        path: Union[str, Path],
        sources: Union[str, Path, None] = None,
        with_kotlin: bool = False,
    ) -> IdeDependency:
        """
        Use an IDE installed on this machine.

        Raises:
            InvalidIdeDirectoryError: If the path is not an IDE installation
        """
        self.logger.debug("Adding local IDE dependency")
        ide_directory = Path(path)
        if ide_directory.name.endswith(".app"):
            ide_directory = ide_directory / "Contents"

        if not ide_directory.is_dir():
            raise InvalidIdeDirectoryError(str(path), "doesn't exist or is not a directory")

        build_number = read_build_number(ide_directory, self.platform_info)
        code = build_number.split("-", 1)[0]

        return IdeDependency(
            name=LOCAL_IDE_NAME,
            version=build_number,
            build_number=build_number,
            classes=ide_directory,
            plugins_registry=BuiltinPluginRegistry.from_directory(
                ide_directory / "plugins", logger=self.logger
            ),
            sources=Path(sources) if sources else None,
            with_kotlin=with_kotlin,
            product_code=code if code in PRODUCT_TYPES else None,
        )

    def create_ivy_descriptor(self, ide: IdeDependency) -> Path:
        """
        Write the IDE's synthetic descriptor, once.

        The file lives in the IDE directory and is named by the IDE's fqn, so
        any change in kotlin or sources flavor produces a new file.
        """
        ivy_file = ide.ivy_repository_directory / f"{ide.fqn}.xml"
        if ivy_file.exists():
            return ivy_file

        generator = IvyDescriptorGenerator(IvyModuleIdentity(IDE_GROUP, ide.name, ide.version))
        generator.add_configuration(IvyConfiguration("default"))
        generator.add_configuration(IvyConfiguration("compile"))
        generator.add_configuration(IvyConfiguration("sources"))

        for jar in ide.jar_files:
            generator.add_artifact(IvyArtifact.jar(jar, "compile", ide.classes))

        if ide.sources is not None:
            generator.add_artifact(
                IvyArtifact(
                    name=ide.sources_artifact_name,
                    type="sources",
                    extension="jar",
                    conf="sources",
                    classifier="sources",
                    file=ide.sources,
                )
            )

        self.logger.debug(f"Writing IDE descriptor: {ivy_file}")
        return generator.write_to(ivy_file)

    def register(self, ide: IdeDependency) -> DependencyNode:
        """Attach an IDE to the dependency graph through its own Ivy repository."""
        ivy_file = self.create_ivy_descriptor(ide)
        suffix = ivy_file.stem[len(f"{ide.name}-{ide.version}"):]

        repository = IvyRepositoryDefinition(name=f"ide-{ide.fqn}")
        repository.add_ivy_pattern(f"{ivy_file.parent.as_posix()}/[module]-[revision]{suffix}.[ext]")
        repository.add_artifact_pattern(f"{ide.classes.as_posix()}/[artifact].[ext]")
        if ide.sources is not None:
            repository.add_artifact_pattern(
                f"{ide.sources.parent.as_posix()}/[artifact]-[revision]-[classifier].[ext]"
            )
        self.handler.add(repository)

        return DependencyNode(
            group=IDE_GROUP,
            module=ide.name,
            revision=ide.version,
            configuration="compile",
            ivy_file=ivy_file,
        )
