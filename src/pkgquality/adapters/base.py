"""Abstract base class for registry adapters and repository locating."""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, NamedTuple

from pkgquality.models.schemas import DownloadSample, PackageEntry, RepoDescriptor, RepoLocation


class BaseAdapter(ABC):
    """Base class for package registry adapters.

    An adapter answers the two registry-side questions the pipeline asks:
    how often a package was downloaded, and which versions it published.
    """

    @abstractmethod
    async def get_package_entry(self, name: str) -> PackageEntry:
        """Fetch the registry document for a package as a PackageEntry.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
        """
        ...

    @abstractmethod
    async def get_versions(self, name: str) -> dict[str, Any] | None:
        """Fetch the published versions of a package.

        Args:
            name: Package name.

        Returns:
            Mapping of version string to version metadata, or None if the
            registry document carries no usable versions.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
            MalformedResponseError: If the body is not JSON.
            httpx.HTTPError: On any other transport failure.
        """
        ...

    @abstractmethod
    async def get_download_series(
        self, name: str, start: date, end: date
    ) -> list[DownloadSample] | None:
        """Fetch daily download counts between two dates, both inclusive.

        Returns:
            The daily samples, or None if the series is unavailable.

        Raises:
            MalformedResponseError: If the body is not JSON.
        """
        ...


class LocatorRule(NamedTuple):
    """Prefix to strip from a repository URL and the index of the owner segment."""

    prefix: str
    offset: int

    def matches(self, url: str) -> bool:
        return url.startswith(self.prefix)

    def extract(self, url: str, logger: logging.Logger) -> RepoLocation:
        remaining = url[len(self.prefix):]
        pieces = remaining.split("/")
        if len(pieces) != self.offset + 2:
            logger.warning(f"Invalid repository URL {url}")
            return RepoLocation.invalid()
        return RepoLocation(
            valid=True,
            owner=pieces[self.offset],
            name=pieces[self.offset + 1].removesuffix(".git"),
        )


# First match wins. The catch-all rule expects scheme://host/owner/name.
LOCATOR_RULES: tuple[LocatorRule, ...] = (
    LocatorRule("git@github.com:", 0),
    LocatorRule("git://github.com:", 0),
    LocatorRule("", 3),
)


def locate_repo(
    descriptor: RepoDescriptor | None,
    logger: logging.Logger | None = None,
) -> RepoLocation:
    """Parse a repository descriptor into an owner/name pair.

    Only git repositories with GitHub-shaped URLs are understood. Anything
    else yields an invalid location rather than an error, since the
    repository signal is optional.

    Args:
        descriptor: Repository type and URL from the package entry.
        logger: Where to report rejected descriptors.

    Returns:
        RepoLocation, with ``valid`` False when the descriptor cannot be used.
    """
    logger = logger or logging.getLogger(__name__)
    if descriptor is None or not descriptor.type or not descriptor.url:
        logger.debug(f"Incomplete repository {descriptor}")
        return RepoLocation.invalid()

    if descriptor.type != "git":
        logger.warning(f"Invalid repository type: {descriptor.type}")
        return RepoLocation.invalid()

    # The catch-all rule guarantees a match
    rule = next(rule for rule in LOCATOR_RULES if rule.matches(descriptor.url))
    return rule.extract(descriptor.url, logger)
