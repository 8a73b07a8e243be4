"""
Mapping of (product, version, variant) requests to downloadable artifacts.

The locator is a pure function of its inputs and the host platform: it
performs no I/O and caches nothing.

Archive URL layout (Maven repository, split by release channel):
    <repository>/<releaseType>/<group/path>/<artifact>/<version>/<artifact>-<version>[-<classifier>].<ext>

Installer URL layout (download server):
    <repository>/<group>/<artifact>-<version>[<sep><classifier>].<ext>
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ijplatformkit.artifacts.product import (
    GATEWAY,
    IDE_INSTALLERS_REPOSITORY,
    INTELLIJ_REPOSITORY,
    PRODUCT_TYPES,
    PYCHARM_CODES,
    RIDER,
    ArtifactVariant,
    Coordinates,
    ProductCoordinate,
    RequestedArtifact,
    product_from_code,
)
from ijplatformkit.core.exceptions import UnsupportedProductTypeError
from ijplatformkit.core.platform import PlatformInfo, detect_platform
from ijplatformkit.versions.version import SNAPSHOTS, release_type

IDEA_SOURCES = Coordinates("com.jetbrains.intellij.idea", "ideaIC")
PYCHARM_SOURCES = Coordinates("com.jetbrains.intellij.pycharm", "pycharmPC")


@dataclass(frozen=True)
class ArtifactLocation:
    """
    Concrete remote coordinate of an artifact.

    Attributes:
        group_id: Group (maven) or organization directory (installers)
        artifact_id: Artifact or module name
        repository_url: Repository base URL
        version: Artifact version
        extension: File extension ('zip', 'tar.gz', 'dmg', 'jar')
        classifier: Optional classifier ('sources', 'aarch64', 'win')
        has_sources: Whether IDE sources should be resolved alongside
        maven_layout: True for Maven repository layout, False for installer layout
    """

    group_id: str
    artifact_id: str
    repository_url: str
    version: str
    extension: str
    classifier: Optional[str] = None
    has_sources: bool = False
    maven_layout: bool = True

    @property
    def file_name(self) -> str:
        name = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            separator = "." if self.classifier == "win" else "-"
            name += f"{separator}{self.classifier}"
        return f"{name}.{self.extension}"

    @property
    def url(self) -> str:
        base = self.repository_url.rstrip("/")
        if self.maven_layout:
            group_path = self.group_id.replace(".", "/")
            return f"{base}/{group_path}/{self.artifact_id}/{self.version}/{self.file_name}"
        return f"{base}/{self.group_id}/{self.file_name}"

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.group_id, self.artifact_id)

    def __str__(self) -> str:
        text = f"{self.group_id}:{self.artifact_id}:{self.version}"
        if self.classifier:
            text += f":{self.classifier}"
        return f"{text}@{self.extension}"


class ArtifactLocator:
    """
    Computes remote coordinates for IDE artifacts.

    Example:
        >>> locator = ArtifactLocator()
        >>> locator.locate("IC", "2022.3.3", ArtifactVariant.ARCHIVE).url
        'https://cache-redirector.jetbrains.com/www.jetbrains.com/intellij-repository/releases/com/jetbrains/intellij/idea/ideaIC/2022.3.3/ideaIC-2022.3.3.zip'
    """

    def __init__(
        self,
        intellij_repository: str = INTELLIJ_REPOSITORY,
        installers_repository: str = IDE_INSTALLERS_REPOSITORY,
        platform_info: Optional[PlatformInfo] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.intellij_repository = intellij_repository.rstrip("/")
        self.installers_repository = installers_repository.rstrip("/")
        self.platform_info = platform_info or detect_platform()
        self.logger = logger or logging.getLogger(__name__)

    def supported_codes(
        self, variant: ArtifactVariant = ArtifactVariant.ARCHIVE
    ) -> List[str]:
        """Product codes that have coordinates for the given variant."""
        return sorted(
            code
            for code, product in PRODUCT_TYPES.items()
            if self._coordinates_for(product, variant) is not None
        )

    def locate(
        self,
        product: Union[str, ProductCoordinate],
        version: str,
        variant: ArtifactVariant = ArtifactVariant.ARCHIVE,
        sources: bool = False,
    ) -> ArtifactLocation:
        """
        Compute the remote coordinate for a product distribution.

        Args:
            product: Product type code or ProductCoordinate
            version: Concrete version
            variant: Installer or archive distribution
            sources: Whether IDE sources are wanted

        Returns:
            ArtifactLocation with coordinates and repository URL

        Raises:
            UnsupportedProductTypeError: If the product is unknown or not
                published for the requested variant
        """
        if isinstance(product, str):
            product = product_from_code(product)

        coordinates = self._coordinates_for(product, variant)
        if coordinates is None:
            raise UnsupportedProductTypeError(product.code, self.supported_codes(variant))

        has_sources = self._has_sources(product, version, sources)

        if variant is ArtifactVariant.INSTALLER:
            extension, classifier = self._installer_format()
            return ArtifactLocation(
                group_id=coordinates.group_id,
                artifact_id=coordinates.artifact_id,
                repository_url=self.installers_repository,
                version=version,
                extension=extension,
                classifier=classifier,
                has_sources=has_sources,
                maven_layout=False,
            )

        return ArtifactLocation(
            group_id=coordinates.group_id,
            artifact_id=coordinates.artifact_id,
            repository_url=f"{self.intellij_repository}/{release_type(version)}",
            version=version,
            extension="zip",
            has_sources=has_sources,
        )

    def locate_request(self, request: RequestedArtifact, sources: bool = False) -> ArtifactLocation:
        return self.locate(request.product, request.version, request.variant, sources)

    def locate_sources(
        self, product: Union[str, ProductCoordinate], version: str
    ) -> ArtifactLocation:
        """
        Compute the coordinate of the IDE sources jar.

        PyCharm products publish their own sources; every other product uses
        the IntelliJ IDEA Community sources.
        """
        if isinstance(product, str):
            product = product_from_code(product)

        coordinates = PYCHARM_SOURCES if product.code in PYCHARM_CODES else IDEA_SOURCES
        return ArtifactLocation(
            group_id=coordinates.group_id,
            artifact_id=coordinates.artifact_id,
            repository_url=f"{self.intellij_repository}/{release_type(version)}",
            version=version,
            extension="jar",
            classifier="sources",
        )

    @staticmethod
    def _coordinates_for(
        product: ProductCoordinate, variant: ArtifactVariant
    ) -> Optional[Coordinates]:
        if variant is ArtifactVariant.INSTALLER:
            return product.installer
        return product.maven

    def _has_sources(self, product: ProductCoordinate, version: str, sources: bool) -> bool:
        if not sources:
            return False
        if product.code == GATEWAY.code:
            return False
        if product.code == RIDER.code and release_type(version) == SNAPSHOTS:
            self.logger.warning("IDE sources are not available for Rider SNAPSHOTS")
            return False
        return True

    def _installer_format(self):
        """Return (extension, classifier) of installers for the host platform."""
        info = self.platform_info
        arch = "aarch64" if info.arch == "arm64" else None

        if info.is_windows:
            return "zip", "win"
        if info.is_macos:
            return "dmg", arch
        return "tar.gz", arch
