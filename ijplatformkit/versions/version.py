"""
Version ordering and release-channel classification for IntelliJ builds.

IntelliJ versions mix marketing versions (``2022.3.3``), build numbers
(``223.8836.41``) and snapshot markers (``223-EAP-SNAPSHOT``). The
``packaging`` version scheme rejects most of these, so ordering is done on
the first three numeric components followed by a case-insensitive
comparison of the raw string.
"""

import functools
import re
from typing import Tuple

_SEPARATORS = re.compile(r"[ .\-\"_]")

_SNAPSHOT_SUFFIXES = (
    "-EAP-SNAPSHOT",
    "-EAP-CANDIDATE-SNAPSHOT",
    "-CUSTOM-SNAPSHOT",
)
_MAJOR_SNAPSHOT_PATTERN = re.compile(r"(RIDER-|GO-)?\d{4}\.\d-(EAP\d*-)?SNAPSHOT")
_NIGHTLY_PATTERN = re.compile(r"(^|-)\d{3}-SNAPSHOT|.*TRUNK-SNAPSHOT$")

RELEASES = "releases"
SNAPSHOTS = "snapshots"
NIGHTLY = "nightly"


@functools.total_ordering
class Version:
    """
    Comparable IntelliJ version.

    Example:
        >>> Version.parse("2021.1.2") > Version.parse("2021.1")
        True
        >>> Version.parse("GOLAND-212.4535.15-EAP-SNAPSHOT").components
        (212, 4535, 15)
    """

    def __init__(self, major: int = 0, minor: int = 0, patch: int = 0, text: str = ""):
        self.major = major
        self.minor = minor
        self.patch = patch
        self.text = text

    @classmethod
    def parse(cls, text: str) -> "Version":
        numbers = [int(part) for part in _SEPARATORS.split(text) if part.isdecimal()]
        major, minor, patch = (numbers + [0, 0, 0])[:3]
        return cls(major, minor, patch, text)

    @property
    def components(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _key(self):
        return (self.components, str(self).lower())

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self) -> str:
        return self.text or f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


def release_type(version: str) -> str:
    """
    Classify a version into the repository channel it is published in.

    Returns:
        'snapshots', 'nightly' or 'releases'

    Example:
        >>> release_type("223-EAP-SNAPSHOT")
        'snapshots'
        >>> release_type("223.8836-SNAPSHOT")
        'nightly'
        >>> release_type("2022.3.3")
        'releases'
    """
    if version.endswith(_SNAPSHOT_SUFFIXES) or _MAJOR_SNAPSHOT_PATTERN.fullmatch(version):
        return SNAPSHOTS
    if version.endswith("-SNAPSHOT"):
        return NIGHTLY
    return RELEASES


def is_snapshot(version: str) -> bool:
    """True for any version republished under the same name (``-SNAPSHOT``)."""
    return version.endswith("-SNAPSHOT")


def is_nightly(version: str) -> bool:
    """True for nightly builds such as ``223-SNAPSHOT`` or ``LATEST-TRUNK-SNAPSHOT``."""
    return _NIGHTLY_PATTERN.fullmatch(version) is not None
