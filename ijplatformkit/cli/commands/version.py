"""
Version command implementation.

Resolves 'latest', 'closest:<version>' or an explicit version against a
Maven metadata document.
"""

import logging

from ijplatformkit.cli.utils import load_kit_config
from ijplatformkit.versions.resolver import VersionResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the version command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_kit_config(args)
    resolver = VersionResolver(timeout=config.http_timeout)

    resolved = resolver.resolve(args.url, args.requested)
    logger.debug(f"Resolved '{args.requested}' to {resolved}")
    print(resolved)
    return 0
