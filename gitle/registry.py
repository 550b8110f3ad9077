"""Deduplicated collection of the git dependencies declared for a build."""

import logging
from typing import Dict, Iterator, List, Optional, Union

from gitle.model.dependency import GitDependency
from gitle.model.factories import PolicyLike, parse_dependency

logger = logging.getLogger(__name__)

DependencyLike = Union[GitDependency, str]


class DependencyRegistry:
    """
    Holds at most one dependency per repository URL, in registration order.
    """

    def __init__(self) -> None:
        self._dependencies: Dict[str, GitDependency] = {}

    def add(
        self,
        dependency: DependencyLike,
        checkout: Optional[str] = None,
        update_policy: PolicyLike = None,
    ) -> GitDependency:
        """
        Register a dependency, given as an entity or as a URL string.

        Registering a repository URL that is already known is a no-op and
        returns the existing entry.

        Raises:
            InvalidUrlError: if a URL string cannot be parsed
            TypeError: for anything that is neither a dependency nor a string
        """
        if isinstance(dependency, str):
            dependency = parse_dependency(
                dependency, checkout=checkout, update_policy=update_policy
            )
        elif not isinstance(dependency, GitDependency):
            raise TypeError(f"Invalid dependency object: {dependency!r}")

        url = dependency.repository_url
        if url in self._dependencies:
            logger.debug(f"'{dependency}' is already registered")
            return self._dependencies[url]

        self._dependencies[url] = dependency
        logger.debug(f"Registered '{dependency}'")
        return dependency

    def add_all(self, *dependencies: DependencyLike) -> List[GitDependency]:
        return [self.add(dependency) for dependency in dependencies]

    @property
    def dependencies(self) -> List[GitDependency]:
        """A copy of the registered dependencies."""
        return list(self._dependencies.values())

    @property
    def repositories(self) -> List[str]:
        """Repository URLs of the registered dependencies."""
        return list(self._dependencies.keys())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, GitDependency):
            item = item.repository_url
        return item in self._dependencies

    def __iter__(self) -> Iterator[GitDependency]:
        return iter(self.dependencies)

    def __len__(self) -> int:
        return len(self._dependencies)
