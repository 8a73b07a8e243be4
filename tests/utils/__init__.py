"""
Test utilities for ijplatformkit testing.

This package provides test data builders for plugin and IDE layouts.
"""

from .builders import (
    IdeBuilder,
    PluginBuilder,
    write_tar_gz,
    write_zip,
    zip_bytes,
)

__all__ = [
    "IdeBuilder",
    "PluginBuilder",
    "write_tar_gz",
    "write_zip",
    "zip_bytes",
]
