"""
Product coordinates and resolution requests.

Every supported IDE product is described by a short type code and up to two
coordinate families:
- maven: archive (library-style) distributions in the IntelliJ repository
- installer: platform-specific installers on the download server
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ijplatformkit.core.exceptions import UnsupportedProductTypeError
from ijplatformkit.versions.version import is_nightly

# ============================================================================
# Repository Locations
# ============================================================================

CACHE_REDIRECTOR = "https://cache-redirector.jetbrains.com"
INTELLIJ_REPOSITORY = f"{CACHE_REDIRECTOR}/www.jetbrains.com/intellij-repository"
MARKETPLACE_MAVEN_REPOSITORY = f"{CACHE_REDIRECTOR}/plugins.jetbrains.com/maven"
IDE_INSTALLERS_REPOSITORY = "https://download.jetbrains.com"


@dataclass(frozen=True)
class Coordinates:
    """Maven-style (group, artifact) pair."""

    group_id: str
    artifact_id: str

    @property
    def group_path(self) -> str:
        return self.group_id.replace(".", "/")

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass(frozen=True)
class ProductCoordinate:
    """
    Static description of one IDE product.

    Attributes:
        code: Short product code (e.g. 'IC', 'IU', 'CL')
        name: Human-readable product name
        maven: Archive coordinates in the IntelliJ repository, if published
        installer: Installer coordinates on the download server, if published
    """

    code: str
    name: str
    maven: Optional[Coordinates] = None
    installer: Optional[Coordinates] = None

    def __str__(self) -> str:
        return self.code


AQUA = ProductCoordinate("QA", "Aqua", installer=Coordinates("aqua", "aqua"))
CLION = ProductCoordinate(
    "CL",
    "CLion",
    maven=Coordinates("com.jetbrains.intellij.clion", "clion"),
    installer=Coordinates("cpp", "CLion"),
)
DATAGRIP = ProductCoordinate(
    "DB", "DataGrip", installer=Coordinates("datagrip", "datagrip")
)
DATASPELL = ProductCoordinate(
    "DS", "DataSpell", installer=Coordinates("python", "dataspell")
)
FLEET_BACKEND = ProductCoordinate(
    "FLIJ",
    "Fleet Backend",
    maven=Coordinates("com.jetbrains.intellij.fleetBackend", "fleetBackend"),
)
GATEWAY = ProductCoordinate(
    "GW",
    "Gateway",
    maven=Coordinates("com.jetbrains.intellij.gateway", "gateway"),
    installer=Coordinates("idea/gateway", "JetBrainsGateway"),
)
GOLAND = ProductCoordinate(
    "GO",
    "GoLand",
    maven=Coordinates("com.jetbrains.intellij.goland", "goland"),
    installer=Coordinates("go", "goland"),
)
IDEA_COMMUNITY = ProductCoordinate(
    "IC",
    "IntelliJ IDEA Community",
    maven=Coordinates("com.jetbrains.intellij.idea", "ideaIC"),
    installer=Coordinates("idea", "ideaIC"),
)
IDEA_ULTIMATE = ProductCoordinate(
    "IU",
    "IntelliJ IDEA Ultimate",
    maven=Coordinates("com.jetbrains.intellij.idea", "ideaIU"),
    installer=Coordinates("idea", "ideaIU"),
)
PHPSTORM = ProductCoordinate(
    "PS",
    "PhpStorm",
    maven=Coordinates("com.jetbrains.intellij.phpstorm", "phpstorm"),
    installer=Coordinates("webide", "PhpStorm"),
)
PYCHARM_PROFESSIONAL = ProductCoordinate(
    "PY",
    "PyCharm Professional",
    maven=Coordinates("com.jetbrains.intellij.pycharm", "pycharmPY"),
    installer=Coordinates("python", "pycharm-professional"),
)
PYCHARM_COMMUNITY = ProductCoordinate(
    "PC",
    "PyCharm Community",
    maven=Coordinates("com.jetbrains.intellij.pycharm", "pycharmPC"),
    installer=Coordinates("python", "pycharm-community"),
)
RIDER = ProductCoordinate(
    "RD",
    "Rider",
    maven=Coordinates("com.jetbrains.intellij.rider", "riderRD"),
    installer=Coordinates("rider", "JetBrains.Rider"),
)
RUBYMINE = ProductCoordinate("RM", "RubyMine", installer=Coordinates("ruby", "RubyMine"))
RUSTROVER = ProductCoordinate(
    "RR",
    "RustRover",
    maven=Coordinates("com.jetbrains.intellij.rustrover", "RustRover"),
)
WEBSTORM = ProductCoordinate(
    "WS",
    "WebStorm",
    maven=Coordinates("com.jetbrains.intellij.webstorm", "webstorm"),
    installer=Coordinates("webstorm", "WebStorm"),
)
WRITERSIDE = ProductCoordinate(
    "WRS",
    "Writerside",
    maven=Coordinates("com.jetbrains.intellij.idea", "writerside"),
)

PRODUCT_TYPES: Dict[str, ProductCoordinate] = {
    product.code: product
    for product in (
        AQUA,
        CLION,
        DATAGRIP,
        DATASPELL,
        FLEET_BACKEND,
        GATEWAY,
        GOLAND,
        IDEA_COMMUNITY,
        IDEA_ULTIMATE,
        PHPSTORM,
        PYCHARM_PROFESSIONAL,
        PYCHARM_COMMUNITY,
        RIDER,
        RUBYMINE,
        RUSTROVER,
        WEBSTORM,
        WRITERSIDE,
    )
}

PYCHARM_CODES = (PYCHARM_PROFESSIONAL.code, PYCHARM_COMMUNITY.code)


def product_from_code(code: str) -> ProductCoordinate:
    """
    Look up a product by its type code.

    Raises:
        UnsupportedProductTypeError: If the code is unknown
    """
    try:
        return PRODUCT_TYPES[code]
    except KeyError:
        raise UnsupportedProductTypeError(code, PRODUCT_TYPES) from None


def supported_codes() -> List[str]:
    return sorted(PRODUCT_TYPES)


# ============================================================================
# Resolution Requests
# ============================================================================


class ArtifactVariant(Enum):
    """Distribution flavor of a requested IDE."""

    INSTALLER = "installer"
    ARCHIVE = "archive"


class ProductMode(Enum):
    """Which part of a split-mode product is requested."""

    MONOLITH = "monolith"
    FRONTEND = "frontend"


@dataclass(frozen=True)
class RequestedArtifact:
    """
    One IDE resolution request.

    Immutable and hashable; ``cache_key`` names its on-disk cache directory.

    Example:
        >>> RequestedArtifact(IDEA_COMMUNITY, "2022.3.3", ArtifactVariant.INSTALLER).cache_key
        'IC-2022.3.3-installer'
    """

    product: ProductCoordinate
    version: str
    variant: ArtifactVariant = ArtifactVariant.ARCHIVE
    product_mode: ProductMode = ProductMode.MONOLITH

    @property
    def is_nightly(self) -> bool:
        return is_nightly(self.version)

    @property
    def cache_key(self) -> str:
        key = f"{self.product.code}-{self.version}-{self.variant.value}"
        if self.product_mode is not ProductMode.MONOLITH:
            key += f"-{self.product_mode.value}"
        return key

    def __str__(self) -> str:
        flavor = "installer" if self.variant is ArtifactVariant.INSTALLER else "non-installer"
        return f"{self.product.code}-{self.version} ({flavor})"
