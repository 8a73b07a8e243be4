"""
Plugin command implementation.

Resolves plugin notations against the bundled plugins of an IDE and the
configured plugin repositories.
"""

import logging

from ijplatformkit.cli.utils import create_cache, create_ide_manager, format_details, load_kit_config
from ijplatformkit.plugins.repositories import create_plugin_repositories
from ijplatformkit.plugins.resolver import PluginDependencyResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the plugin command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_kit_config(args)
    cache = create_cache(config)

    ide = None
    if args.ide is not None:
        ide = create_ide_manager(config, cache).resolve_local(args.ide)

    resolver = PluginDependencyResolver(
        config.cache_path,
        create_plugin_repositories(config.plugin_repositories),
        cache,
        ide=ide,
    )

    for notation in args.notations:
        plugin = resolver.resolve(notation)
        node = resolver.register(plugin)
        print(
            format_details(
                f"Plugin {plugin.id} {plugin.version}",
                {
                    "Artifact": plugin.artifact,
                    "Builtin": plugin.builtin,
                    "Maven": plugin.maven,
                    "Since build": plugin.since_build,
                    "Until build": plugin.until_build,
                    "Compatible": plugin.is_compatible(ide.build_number) if ide else None,
                    "Dependency": node,
                },
            )
        )

    return 0
