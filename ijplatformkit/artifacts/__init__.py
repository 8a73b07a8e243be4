"""
IDE product coordinates, artifact location and the download/extraction cache.
"""

from .product import (
    Coordinates,
    ProductCoordinate,
    ArtifactVariant,
    ProductMode,
    RequestedArtifact,
    PRODUCT_TYPES,
    product_from_code,
    supported_codes,
)
from .locator import ArtifactLocation, ArtifactLocator
from .cache import ArtifactCache, CachedExtraction

__all__ = [
    "Coordinates",
    "ProductCoordinate",
    "ArtifactVariant",
    "ProductMode",
    "RequestedArtifact",
    "PRODUCT_TYPES",
    "product_from_code",
    "supported_codes",
    "ArtifactLocation",
    "ArtifactLocator",
    "ArtifactCache",
    "CachedExtraction",
]
