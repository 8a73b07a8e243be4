"""
Global cache directory resolution.

Directory Structure:
    Global Cache (~/.ijplatformkit/ or %USERPROFILE%\\.ijplatformkit\\):
        - <group>/<artifact>/<version>/ : Downloaded archives and their extracted trees
        - com.jetbrains.intellij.idea/ : Unpacked plugins and plugin descriptors
        - lock/ : Concurrent access control files

The location can be overridden with the IJPLATFORMKIT_CACHE environment
variable.
"""

import os
from pathlib import Path

from ijplatformkit.core.exceptions import FilesystemError

CACHE_ENV_VARIABLE = "IJPLATFORMKIT_CACHE"


def get_global_cache_dir() -> Path:
    """
    Get the global cache directory path.

    Returns:
        Path: The global cache directory path.
            - $IJPLATFORMKIT_CACHE when set
            - Windows: %USERPROFILE%\\.ijplatformkit
            - Linux/macOS: ~/.ijplatformkit/
    """
    override = os.environ.get(CACHE_ENV_VARIABLE)
    if override:
        return Path(override).expanduser()

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise FilesystemError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".ijplatformkit"
    return Path.home() / ".ijplatformkit"
