"""
Dependency-graph attachment points.

Resolved IDEs and plugins are handed to a dependency-resolution engine as
nodes (group, module, revision, configuration) backed either by a Maven
repository or by a synthetic Ivy repository whose patterns point into the
local cache. ``RepositoryHandler`` holds the active repository list.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyNode:
    """A resolved artifact attached to the dependency graph."""

    group: str
    module: str
    revision: str
    configuration: Optional[str] = None
    ivy_file: Optional[Path] = None

    @property
    def is_maven(self) -> bool:
        return self.ivy_file is None

    def __str__(self) -> str:
        notation = f"{self.group}:{self.module}:{self.revision}"
        if self.configuration:
            notation += f" ({self.configuration})"
        return notation


@dataclass(frozen=True)
class MavenRepositoryDefinition:
    url: str
    name: Optional[str] = None

    def __str__(self) -> str:
        return self.name or self.url


@dataclass
class IvyRepositoryDefinition:
    """
    Local Ivy repository with pattern-based layout.

    Artifact patterns are extended idempotently: adding a pattern that is
    already present is a no-op.
    """

    name: str
    ivy_patterns: List[str] = field(default_factory=list)
    artifact_patterns: List[str] = field(default_factory=list)

    def add_ivy_pattern(self, pattern: str) -> bool:
        if pattern in self.ivy_patterns:
            return False
        self.ivy_patterns.append(pattern)
        return True

    def add_artifact_pattern(self, pattern: str) -> bool:
        if pattern in self.artifact_patterns:
            return False
        self.artifact_patterns.append(pattern)
        return True

    def __str__(self) -> str:
        return self.name


Repository = Union[MavenRepositoryDefinition, IvyRepositoryDefinition]


class RepositoryHandler:
    """Ordered list of repositories visible to dependency resolution."""

    def __init__(self):
        self.repositories: List[Repository] = []

    def add(self, repository: Repository) -> Repository:
        if repository not in self.repositories:
            logger.debug(f"Adding repository: {repository}")
            self.repositories.append(repository)
        return repository

    def remove(self, repository: Repository) -> None:
        if repository in self.repositories:
            logger.debug(f"Removing repository: {repository}")
            self.repositories.remove(repository)

    @contextmanager
    def temporary(self, repository: Repository) -> Iterator[Repository]:
        """
        Register a repository for the duration of one lookup.

        The repository is removed afterwards regardless of the outcome, unless
        it was already registered before entering.
        """
        already_present = repository in self.repositories
        self.add(repository)
        try:
            yield repository
        finally:
            if not already_present:
                self.remove(repository)

    def __contains__(self, repository: object) -> bool:
        return repository in self.repositories

    def __iter__(self):
        return iter(self.repositories)

    def __len__(self) -> int:
        return len(self.repositories)
