"""
Cross-process locking for the artifact cache.

The check-then-extract-then-mark sequence performed by the cache manager is
not atomic on its own. Two processes extracting the same archive into the
same target directory are serialized with a file lock per target.

Usage:
    from ijplatformkit.core.locking import LockManager

    lock_manager = LockManager(cache_root / "lock")
    with lock_manager.artifact_lock("ideaIC-2022.3.3"):
        # check marker, extract, write marker
        pass
"""

import hashlib
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from ijplatformkit.core.directory import get_global_cache_dir
from ijplatformkit.core.exceptions import CacheLockTimeout

logger = logging.getLogger(__name__)


class LockManager:
    """
    Manages file locks for cache entries.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic cleanup on process death.

    Attributes:
        lock_dir: Directory where lock files are stored
        timeout: Default wait time in seconds
    """

    def __init__(self, lock_dir: Optional[Path] = None, timeout: int = 600):
        if lock_dir is None:
            lock_dir = get_global_cache_dir() / "lock"

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout

    def lock_path(self, key: str) -> Path:
        """
        Compute the lock file for a cache key.

        Keys are usually absolute target directories, so they are hashed
        into a short, filesystem-safe name.
        """
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        readable = Path(key).name.replace(":", "-") or "root"
        return self.lock_dir / f"{readable}-{digest}.lock"

    @contextmanager
    def artifact_lock(self, key: str, timeout: Optional[int] = None):
        """
        Acquire the lock for one cache entry.

        Args:
            key: Cache entry identifier (e.g. the extraction target path)
            timeout: Maximum wait time in seconds (default: manager timeout)

        Yields:
            None

        Raises:
            CacheLockTimeout: If lock can't be acquired within timeout
        """
        timeout = self.timeout if timeout is None else timeout
        lock_path = self.lock_path(key)
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired cache lock: {lock_path}")
                yield
                logger.debug(f"Released cache lock: {lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire cache lock for {key} after {timeout}s. "
                "Another process may be extracting this artifact."
            )
            raise CacheLockTimeout(
                f"Could not acquire cache lock for {key} after {timeout}s."
            ) from e
