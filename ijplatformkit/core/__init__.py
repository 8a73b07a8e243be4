"""
Core functionality for ijplatformkit.

This package contains the foundational modules that other components depend on.
"""

from .directory import get_global_cache_dir

from .locking import LockManager

from .platform import PlatformInfo, detect_platform, clear_platform_cache

from .exceptions import (
    IJPlatformKitError,
    VersionResolutionError,
    MetadataUnavailableError,
    NoMatchingVersionError,
    UnsupportedProductTypeError,
    DownloadError,
    ChecksumError,
    FilesystemError,
    ArchiveExtractionError,
    ArchiveCorruptError,
    ExtractionIOError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    CacheLockTimeout,
    InvalidIdeDirectoryError,
    PluginResolutionError,
    InvalidPluginArtifactError,
    BuiltinPluginNotFoundError,
    UnsupportedArtifactTypeError,
    PluginNotResolvedError,
    ConfigError,
)

__all__ = [
    # Directory
    "get_global_cache_dir",
    # Locking
    "LockManager",
    # Platform
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    # Exceptions
    "IJPlatformKitError",
    "VersionResolutionError",
    "MetadataUnavailableError",
    "NoMatchingVersionError",
    "UnsupportedProductTypeError",
    "DownloadError",
    "ChecksumError",
    "FilesystemError",
    "ArchiveExtractionError",
    "ArchiveCorruptError",
    "ExtractionIOError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "CacheLockTimeout",
    "InvalidIdeDirectoryError",
    "PluginResolutionError",
    "InvalidPluginArtifactError",
    "BuiltinPluginNotFoundError",
    "UnsupportedArtifactTypeError",
    "PluginNotResolvedError",
    "ConfigError",
]
