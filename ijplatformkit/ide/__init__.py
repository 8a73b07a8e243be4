"""
IDE dependency model and resolution.
"""

from .dependency import IdeDependency, is_kotlin_runtime
from .manager import IdeDependencyManager, installation_root, read_build_number

__all__ = [
    "IdeDependency",
    "is_kotlin_runtime",
    "IdeDependencyManager",
    "installation_root",
    "read_build_number",
]
