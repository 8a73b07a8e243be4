"""
Plugin dependency notation: ``id[:version][@channel]`` or a filesystem path.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

PLUGIN_GROUP = "com.jetbrains.plugins"


def plugin_group(channel: Optional[str] = None, prefix: str = "") -> str:
    """
    Group id of a plugin published on a channel.

    Example:
        >>> plugin_group("eap")
        'eap.com.jetbrains.plugins'
        >>> plugin_group("eap", prefix="unzipped")
        'unzipped.eap.com.jetbrains.plugins'
    """
    parts = [part for part in (prefix, channel, PLUGIN_GROUP) if part]
    return ".".join(parts)


@dataclass(frozen=True)
class PluginDependencyNotation:
    """
    A requested plugin.

    Attributes:
        id: Plugin id, or the path of a local plugin directory or jar
        version: Requested version (None for builtin or local plugins)
        channel: Release channel (None for the default channel)
    """

    id: str
    version: Optional[str] = None
    channel: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "PluginDependencyNotation":
        """
        Parse ``id``, ``id:version``, ``id:version@channel`` or ``id@channel``.

        A string naming an existing file or directory is taken as a whole,
        so paths containing ``:`` (Windows drives) are not split.

        Raises:
            ValueError: If the notation has no id
        """
        text = text.strip()
        if text and Path(text).exists():
            return cls(text)

        rest, _, channel = text.partition("@")
        plugin_id, _, version = rest.partition(":")
        plugin_id = plugin_id.strip()
        if not plugin_id:
            raise ValueError(f"plugin notation has no id: '{text}'")

        return cls(plugin_id, version.strip() or None, channel.strip() or None)

    @property
    def is_versioned(self) -> bool:
        return self.version is not None or self.channel is not None

    @property
    def group(self) -> str:
        return plugin_group(self.channel)

    def __str__(self) -> str:
        return f"{self.group}:{self.id}:{self.version}"
