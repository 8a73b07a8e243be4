"""
Synthetic Ivy descriptor generation and parsing.
"""

from .descriptor import (
    IvyArtifact,
    IvyConfiguration,
    IvyDescriptor,
    IvyDescriptorGenerator,
    IvyModuleIdentity,
    parse_ivy_descriptor,
    IVY_FORMAT_VERSION,
    MAVEN_NAMESPACE,
)

__all__ = [
    "IvyArtifact",
    "IvyConfiguration",
    "IvyDescriptor",
    "IvyDescriptorGenerator",
    "IvyModuleIdentity",
    "parse_ivy_descriptor",
    "IVY_FORMAT_VERSION",
    "MAVEN_NAMESPACE",
]
