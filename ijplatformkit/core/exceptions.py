"""
Centralized exception hierarchy for ijplatformkit.

Every error raised by the resolution engine derives from IJPlatformKitError
and carries the context (URLs, versions, paths, repositories) needed to
diagnose the failure without re-running with extra logging.
"""

from typing import Iterable, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class IJPlatformKitError(Exception):
    """Base exception for all ijplatformkit errors."""

    pass


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class VersionResolutionError(IJPlatformKitError):
    """Base exception for version resolution failures."""

    pass


class MetadataUnavailableError(VersionResolutionError):
    """Raised when a package-index document is unreachable or lacks a field."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        msg = f"Cannot read version metadata from: {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class NoMatchingVersionError(VersionResolutionError):
    """Raised when no published version is lower than or equal to the target."""

    def __init__(self, url: str, version: str):
        self.url = url
        self.version = version
        super().__init__(
            f"No published version matching '{version}' found in: {url}"
        )


# ============================================================================
# Product / Locator Exceptions
# ============================================================================


class UnsupportedProductTypeError(IJPlatformKitError):
    """Raised when a product type code is unknown to the locator."""

    def __init__(self, code: str, supported: Iterable[str]):
        self.code = code
        self.supported = sorted(supported)
        super().__init__(
            f"Specified type '{code}' is unknown. "
            f"Supported values: {', '.join(self.supported)}"
        )


# ============================================================================
# Download Exceptions
# ============================================================================


class DownloadError(IJPlatformKitError):
    """Raised when an HTTP download fails."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        msg = f"Download failed: {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ChecksumError(DownloadError):
    """Raised when a downloaded file does not match its expected checksum."""

    def __init__(self, url: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(url, f"checksum mismatch: expected {expected}, got {actual}")


# ============================================================================
# Filesystem / Cache Exceptions
# ============================================================================


class FilesystemError(IJPlatformKitError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class ArchiveCorruptError(ArchiveExtractionError):
    """Raised when an archive cannot be opened or read."""

    def __init__(self, archive: str, reason: str = ""):
        self.archive = archive
        self.reason = reason
        msg = f"Archive is corrupt or unreadable: {archive}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ExtractionIOError(ArchiveExtractionError):
    """Raised when writing extracted content to disk fails."""

    def __init__(self, archive: str, target: str, reason: str = ""):
        self.archive = archive
        self.target = target
        self.reason = reason
        msg = f"Failed to extract {archive} into {target}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class CacheLockTimeout(IJPlatformKitError):
    """Raised when a cache lock cannot be acquired within timeout."""

    pass


# ============================================================================
# IDE Exceptions
# ============================================================================


class InvalidIdeDirectoryError(IJPlatformKitError):
    """Raised when a local IDE path does not point at an IDE installation."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Specified path is not a valid IDE installation: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Plugin Resolution Exceptions
# ============================================================================


class PluginResolutionError(IJPlatformKitError):
    """Base exception for plugin dependency resolution failures."""

    pass


class InvalidPluginArtifactError(PluginResolutionError):
    """Raised when a file or directory does not parse as a plugin."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Cannot create plugin from file ({path})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class BuiltinPluginNotFoundError(PluginResolutionError):
    """Raised when a bare plugin id is not bundled with the IDE."""

    def __init__(self, plugin_id: str, ide_path: Optional[str]):
        self.plugin_id = plugin_id
        self.ide_path = ide_path
        super().__init__(
            f"Cannot find builtin plugin '{plugin_id}' for IDE: {ide_path}"
        )


class UnsupportedArtifactTypeError(PluginResolutionError):
    """Raised when a repository returns something other than a zip or jar."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid type of downloaded plugin: {path}")


class PluginNotResolvedError(PluginResolutionError):
    """Raised when no configured repository resolves a plugin."""

    def __init__(
        self,
        plugin_id: str,
        version: Optional[str],
        channel: Optional[str],
        repositories: Iterable[str] = (),
    ):
        self.plugin_id = plugin_id
        self.version = version
        self.channel = channel
        self.repositories = list(repositories)
        msg = f"Cannot resolve plugin '{plugin_id}' in version '{version}'"
        if channel:
            msg += f" from channel '{channel}'"
        if self.repositories:
            msg += f" (searched: {', '.join(self.repositories)})"
        super().__init__(msg)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(IJPlatformKitError):
    """Configuration parsing or validation error."""

    pass
