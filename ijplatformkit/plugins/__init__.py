"""
Plugin descriptors, the builtin plugin registry and plugin dependency resolution.
"""

from .descriptor import (
    DescriptorParseFailure,
    PluginDependencyDeclaration,
    PluginDescriptor,
    load_plugin_descriptor,
    parse_plugin_xml,
)
from .registry import (
    BuiltinPluginRegistry,
    BuiltinPluginRegistryBuilder,
    PluginRecord,
    CACHE_FORMAT_VERSION,
)
from .notation import PluginDependencyNotation, plugin_group
from .dependency import ResolvedPluginDependency
from .repositories import (
    CustomPluginsRepository,
    MavenPluginsRepository,
    PluginsRepository,
    create_plugin_repositories,
)
from .resolver import PluginDependencyResolver

__all__ = [
    "DescriptorParseFailure",
    "PluginDependencyDeclaration",
    "PluginDescriptor",
    "load_plugin_descriptor",
    "parse_plugin_xml",
    "BuiltinPluginRegistry",
    "BuiltinPluginRegistryBuilder",
    "PluginRecord",
    "CACHE_FORMAT_VERSION",
    "PluginDependencyNotation",
    "plugin_group",
    "ResolvedPluginDependency",
    "CustomPluginsRepository",
    "MavenPluginsRepository",
    "PluginsRepository",
    "create_plugin_repositories",
    "PluginDependencyResolver",
]
