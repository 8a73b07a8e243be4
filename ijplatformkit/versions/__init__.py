"""
Version parsing, release-channel classification and symbolic resolution.
"""

from .version import (
    Version,
    release_type,
    is_snapshot,
    is_nightly,
    RELEASES,
    SNAPSHOTS,
    NIGHTLY,
)
from .resolver import VersionResolver, MavenMetadata, parse_maven_metadata

__all__ = [
    "Version",
    "release_type",
    "is_snapshot",
    "is_nightly",
    "RELEASES",
    "SNAPSHOTS",
    "NIGHTLY",
    "VersionResolver",
    "MavenMetadata",
    "parse_maven_metadata",
]
