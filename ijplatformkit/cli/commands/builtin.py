"""
Builtin command implementation.

Lists the plugins bundled with an IDE, or prints the dependency closure of
some of them.
"""

import logging

from ijplatformkit.core.exceptions import BuiltinPluginNotFoundError, InvalidIdeDirectoryError
from ijplatformkit.ide.manager import installation_root
from ijplatformkit.plugins.registry import BuiltinPluginRegistry

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the builtin command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    if not args.ide.is_dir():
        raise InvalidIdeDirectoryError(str(args.ide), "doesn't exist or is not a directory")

    ide_directory = installation_root(args.ide)
    registry = BuiltinPluginRegistry.from_directory(ide_directory / "plugins")
    logger.debug(f"Loaded {registry!r}")

    if not args.plugin_ids:
        for plugin_id in registry.plugin_ids():
            print(plugin_id)
        return 0

    for plugin_id in args.plugin_ids:
        if plugin_id not in registry:
            raise BuiltinPluginNotFoundError(plugin_id, str(ide_directory))

    if args.closure:
        for plugin_id in sorted(registry.collect_dependency_closure(args.plugin_ids)):
            print(plugin_id)
        return 0

    for plugin_id in args.plugin_ids:
        print(f"{plugin_id}: {registry.find_plugin(plugin_id)}")
    return 0
