"""
IDE command implementation.

Downloads and extracts an IDE (or inspects a local installation), indexes
its bundled plugins and writes its synthetic Ivy descriptor.
"""

import logging

from ijplatformkit.artifacts.product import ArtifactVariant
from ijplatformkit.cli.utils import create_cache, create_ide_manager, format_details, load_kit_config

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ide command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for invalid arguments)
    """
    if args.local is None and not (args.code and args.ide_version):
        logger.error("Either CODE and VERSION or --local PATH must be given")
        return 1

    config = load_kit_config(args)
    manager = create_ide_manager(config, create_cache(config))

    if args.local is not None:
        ide = manager.resolve_local(args.local, with_kotlin=args.with_kotlin)
    else:
        variant = ArtifactVariant.INSTALLER if args.installer else ArtifactVariant.ARCHIVE
        ide = manager.resolve_remote(
            args.code,
            args.ide_version,
            variant,
            sources=args.sources,
            with_kotlin=args.with_kotlin,
            refresh=args.refresh,
        )

    node = manager.register(ide)
    print(
        format_details(
            f"IDE {ide.name} {ide.version}",
            {
                "Build": ide.build_number,
                "Directory": ide.classes,
                "Sources": ide.sources,
                "Jars": len(ide.jar_files),
                "Bundled plugins": len(ide.plugins_registry),
                "Ivy descriptor": node.ivy_file,
                "Dependency": node,
            },
        )
    )
    return 0
